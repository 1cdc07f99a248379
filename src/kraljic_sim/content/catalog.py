"""
Scenario Catalog - the built-in Layer 1 scenarios and Layer 2 event

Each quadrant follows one purchased item through four decisions. Choice ids
follow "<quadrant>_step<N>_<label>" (N is 1-based, as shown to participants);
event choices follow "event_<quadrant>_<label>".

Raw scores are tuned so that one option per step is clearly the best fit for
the quadrant's weights while the others favour a different dimension.
"""

from kraljic_sim.content.models import (
    Choice,
    ChoiceFeedback,
    EventContent,
    EventResponseContent,
    EventShock,
    ScenarioContent,
    Step,
)
from kraljic_sim.quadrants.models import QuadrantId
from kraljic_sim.scoring.models import RawScore

LABELS = ("A", "B", "C")


def _choices(prefix: str, options: list[tuple]) -> list[Choice]:
    """Build labelled choices from (title, (ce, ss, sv), result, tradeoff, theory) tuples"""
    choices = []
    for label, (title, (ce, ss, sv), result, tradeoff, theory) in zip(LABELS, options):
        choices.append(
            Choice(
                choice_id=f"{prefix}_{label}",
                label=label,
                title=title,
                scores=RawScore(ce=ce, ss=ss, sv=sv),
                feedback=ChoiceFeedback(result=result, tradeoff=tradeoff, theory_connection=theory),
            )
        )
    return choices


def _scenario(
    quadrant: QuadrantId,
    company_name: str,
    item_name: str,
    briefing: str,
    steps: list[tuple[str, str, list[tuple]]],
) -> ScenarioContent:
    return ScenarioContent(
        quadrant=quadrant,
        company_name=company_name,
        item_name=item_name,
        briefing=briefing,
        steps=[
            Step(
                step_index=index,
                title=title,
                situation=situation,
                choices=_choices(f"{quadrant.value}_step{index + 1}", options),
            )
            for index, (title, situation, options) in enumerate(steps)
        ],
    )


# ============================================================================
# Layer 1 Scenarios
# ============================================================================

BOTTLENECK_SCENARIO = _scenario(
    QuadrantId.BOTTLENECK,
    company_name="Hanul Precision",
    item_name="Specialty sealing gasket",
    briefing=(
        "A cheap gasket from a single certified supplier. If it is missing, "
        "the whole assembly line stops."
    ),
    steps=[
        (
            "Supplier warning",
            "The sole supplier announces a three-week capacity squeeze.",
            [
                ("Build a buffer stock", (4, 4, 3),
                 "The line keeps running through the squeeze.",
                 "Carrying cost rises for a low-value item.",
                 "Bottleneck items justify buffers: availability beats unit price."),
                ("Wait it out and push for a discount", (5, 2, 2),
                 "A small discount is won, then the line stalls for two days.",
                 "Savings are dwarfed by the stoppage.",
                 "Price pressure has little effect when the buyer holds no power."),
                ("Ask engineering about substitutes", (2, 3, 4),
                 "Engineering starts a long qualification study.",
                 "Useful later, no help this month.",
                 "Reducing specificity is the long-term exit from the bottleneck."),
            ],
        ),
        (
            "Contract renewal",
            "The supplier proposes a contract with a 12% price increase.",
            [
                ("Refuse and threaten to switch", (4, 2, 3),
                 "The supplier calls the bluff.",
                 "Credibility is lost with the only source.",
                 "Threats need a real alternative behind them."),
                ("Accept with guaranteed volume allocation", (2, 5, 4),
                 "Supply is locked in for two years.",
                 "Higher unit price is accepted.",
                 "Securing continuity is the primary bottleneck objective."),
                ("Sign a short one-year extension", (3, 3, 3),
                 "Nothing changes, the question returns next year.",
                 "Flexibility is kept at the price of uncertainty.",
                 "Short horizons keep the risk unresolved."),
            ],
        ),
        (
            "Second source",
            "A new supplier offers a similar gasket that needs certification.",
            [
                ("Switch immediately to the cheaper source", (5, 1, 2),
                 "The first batch fails inspection.",
                 "Unit cost drops, quality risk explodes.",
                 "Unqualified sources do not reduce supply risk."),
                ("Dual-source at a small share", (3, 3, 4),
                 "The new source is learning, the incumbent is annoyed.",
                 "Split volumes weaken both relationships a little.",
                 "Dual sourcing is sound once the second source is qualified."),
                ("Fund certification before any volume", (3, 4, 4),
                 "The alternative is qualified within a quarter.",
                 "Up-front spend on a cheap item.",
                 "Building a qualified alternative moves the item out of the bottleneck."),
            ],
        ),
        (
            "Monitoring",
            "Management asks how to avoid the next surprise.",
            [
                ("Quarterly supplier review", (2, 4, 2),
                 "Problems are spotted, sometimes late.",
                 "Low effort, slow signal.",
                 "Periodic reviews catch trends but not shocks."),
                ("Early-warning indicators with the supplier", (3, 5, 3),
                 "Capacity issues surface weeks in advance.",
                 "Requires data sharing and a bit of trust.",
                 "Risk monitoring is the standing task of a bottleneck buyer."),
                ("Rely on the buffer stock alone", (4, 2, 4),
                 "Fine until the buffer runs out.",
                 "Cheapest option, blind to root causes.",
                 "Buffers treat symptoms, monitoring treats causes."),
            ],
        ),
    ],
)

LEVERAGE_SCENARIO = _scenario(
    QuadrantId.LEVERAGE,
    company_name="Hanul Precision",
    item_name="Cold-rolled steel sheet",
    briefing=(
        "A high-spend commodity with many qualified suppliers. Every percent "
        "of price is real money."
    ),
    steps=[
        (
            "Tender design",
            "Annual spend is large and five suppliers are qualified.",
            [
                ("Negotiate with the incumbent only", (2, 4, 3),
                 "A friendly renewal at last year's price.",
                 "Stability without any price pressure.",
                 "Leverage items reward competition, not loyalty."),
                ("Run a competitive tender", (4, 3, 3),
                 "Bids come in 9% below the current price.",
                 "Some relationship friction with the incumbent.",
                 "Competitive bidding exploits buyer power."),
                ("Reverse auction with a hard floor", (5, 1, 1),
                 "Deep savings, suppliers feel squeezed.",
                 "Quality and goodwill suffer.",
                 "Pushing power to the limit erodes future cooperation."),
            ],
        ),
        (
            "Award split",
            "Two suppliers are close on price.",
            [
                ("Give everything to the cheapest", (5, 1, 2),
                 "Lowest cost, a single point of failure.",
                 "No fallback if the winner stumbles.",
                 "Concentration removes the leverage you just created."),
                ("Keep the incumbent at full volume", (2, 3, 2),
                 "Comfortable, but savings are left on the table.",
                 "Loyalty costs money.",
                 "Leverage is wasted without volume reallocation."),
                ("Split 70/30 between the two", (3, 4, 4),
                 "Good price with competitive tension kept alive.",
                 "Slightly higher average price than a single award.",
                 "Volume splits preserve buyer power over time."),
            ],
        ),
        (
            "Price index",
            "Steel prices are volatile on the world market.",
            [
                ("Fixed price for twelve months", (3, 3, 3),
                 "Predictable budget, risky if prices fall.",
                 "Certainty is paid for with a premium.",
                 "Fixed prices shift market risk to the supplier at a cost."),
                ("Index-linked pricing with a cap", (4, 3, 4),
                 "The price tracks the market within safe bounds.",
                 "More administration each quarter.",
                 "Index clauses share market risk fairly on commodities."),
                ("Buy spot every month", (5, 1, 1),
                 "Cheapest in falling markets, chaotic otherwise.",
                 "Supply becomes unpredictable.",
                 "Pure spot buying ignores supply continuity."),
            ],
        ),
        (
            "Consolidation",
            "Other plants buy the same steel separately.",
            [
                ("Leave plants to buy locally", (3, 4, 3),
                 "Local teams are happy, volumes stay fragmented.",
                 "No extra savings.",
                 "Fragmented demand wastes purchasing power."),
                ("Harmonise specs before pooling", (2, 5, 4),
                 "A long project with stable results.",
                 "Savings arrive a year later.",
                 "Standardisation is a prerequisite, but slow."),
                ("Pool volumes into one group contract", (5, 2, 4),
                 "Group-wide price drops another 6%.",
                 "Plants lose some local flexibility.",
                 "Volume bundling is the classic leverage strategy."),
            ],
        ),
    ],
)

STRATEGIC_SCENARIO = _scenario(
    QuadrantId.STRATEGIC,
    company_name="Hanul Precision",
    item_name="Custom motor controller",
    briefing=(
        "A high-value, co-designed component from a technology partner. "
        "Switching would take years."
    ),
    steps=[
        (
            "Cost pressure",
            "Finance wants a 10% cost cut on the controller.",
            [
                ("Demand the cut or threaten to re-source", (5, 2, 2),
                 "The partner concedes 4% and cools off.",
                 "Short-term saving, long-term mistrust.",
                 "Adversarial tactics damage strategic partnerships."),
                ("Joint cost-reduction workshop", (3, 4, 4),
                 "Design changes save 7% on both sides.",
                 "Takes engineering time from both companies.",
                 "Strategic items call for collaborative value engineering."),
                ("Accept the current price", (2, 3, 4),
                 "The relationship stays warm.",
                 "Finance is unhappy.",
                 "Passivity leaves shared value unexplored."),
            ],
        ),
        (
            "Roadmap",
            "The partner plans a next-generation controller.",
            [
                ("Wait for the finished product", (3, 3, 3),
                 "You get whatever they build.",
                 "No influence over the design.",
                 "Missing early involvement forfeits strategic value."),
                ("Co-develop with shared engineers", (2, 3, 5),
                 "The new design fits your product perfectly.",
                 "Deeper mutual dependence.",
                 "Early supplier involvement creates strategic value."),
                ("Tender the next generation openly", (4, 4, 2),
                 "Interesting bids, none with the partner's know-how.",
                 "Signals distrust to the partner.",
                 "Open tenders suit leverage items, not strategic ones."),
            ],
        ),
        (
            "Dependence",
            "The board worries about relying on one partner.",
            [
                ("Qualify a backup supplier quietly", (4, 3, 3),
                 "A weak backup that the partner soon discovers.",
                 "Hedge bought with goodwill.",
                 "Hidden hedging undermines trust."),
                ("Long-term agreement with exit clauses", (3, 4, 4),
                 "Commitment with agreed safeguards.",
                 "Negotiation effort up front.",
                 "Balanced contracts manage lock-in transparently."),
                ("Take an equity stake in the partner", (1, 5, 3),
                 "Control of the supply, tied-up capital.",
                 "Expensive and hard to unwind.",
                 "Vertical integration is the extreme answer to dependence."),
            ],
        ),
        (
            "Performance",
            "How should the partnership be measured?",
            [
                ("Price variance only", (5, 3, 2),
                 "Easy to report, misses most of the value.",
                 "Drives cost behaviour only.",
                 "Single metrics distort strategic relationships."),
                ("Delivery and quality scorecard", (2, 5, 3),
                 "Reliable operations, innovation ignored.",
                 "Safe but narrow.",
                 "Operational KPIs are necessary, not sufficient."),
                ("Balanced scorecard with innovation goals", (4, 4, 4),
                 "Cost, reliability and joint projects all tracked.",
                 "More management attention.",
                 "Strategic partnerships need multi-dimensional evaluation."),
            ],
        ),
    ],
)

NONCRITICAL_SCENARIO = _scenario(
    QuadrantId.NONCRITICAL,
    company_name="Hanul Precision",
    item_name="Office and maintenance supplies",
    briefing=(
        "Hundreds of low-value items bought by everyone. The cost is in the "
        "paperwork, not the price."
    ),
    steps=[
        (
            "Ordering process",
            "Each department raises its own purchase orders.",
            [
                ("Keep the current process", (2, 4, 2),
                 "Nothing breaks, nothing improves.",
                 "Administrative cost stays high.",
                 "Non-critical items should consume minimal effort."),
                ("Catalogue ordering via an e-procurement tool", (4, 3, 4),
                 "Orders drop from hours to minutes.",
                 "A small setup project.",
                 "Process efficiency is the main lever for routine items."),
                ("Centralise every order in purchasing", (5, 2, 2),
                 "Control rises, purchasing drowns in tickets.",
                 "Bottleneck moves to the buying team.",
                 "Centralising trivial spend wastes expert time."),
            ],
        ),
        (
            "Supplier base",
            "Forty suppliers deliver similar supplies.",
            [
                ("Trim to the ten most used", (3, 4, 3),
                 "Fewer invoices, some loyal users annoyed.",
                 "Partial simplification.",
                 "Supplier reduction is the right direction."),
                ("Keep everyone for choice", (2, 5, 2),
                 "Maximum choice, maximum paperwork.",
                 "Overhead stays high.",
                 "Variety adds little value for routine items."),
                ("Consolidate to one system supplier", (5, 3, 4),
                 "One contract, one invoice a month.",
                 "Some dependence on a single supplier.",
                 "System contracts bundle routine spend efficiently."),
            ],
        ),
        (
            "Approval limits",
            "Every small order needs a manager signature.",
            [
                ("Purchasing cards with spend limits", (5, 3, 5),
                 "Approvals vanish for small buys.",
                 "Spend visibility needs monthly review.",
                 "Delegating small purchases frees time for strategic work."),
                ("Add another approval layer", (3, 3, 3),
                 "Fewer mistakes, slower orders.",
                 "Control costs more than it saves.",
                 "Heavy controls are disproportionate for low-value items."),
                ("Monthly bulk orders only", (4, 2, 3),
                 "Fewer orders, frequent gaps.",
                 "Users improvise in between.",
                 "Batching helps only when demand is predictable."),
            ],
        ),
        (
            "Review",
            "A year later, is the setup still right?",
            [
                ("Reopen a full tender", (2, 5, 2),
                 "Thorough and expensive for small spend.",
                 "Effort outweighs the savings.",
                 "Tender effort should match spend."),
                ("Drop reviews completely", (4, 1, 2),
                 "Cheap until prices creep up unnoticed.",
                 "Neglect risk.",
                 "Even routine items need light oversight."),
                ("Light annual check of prices and usage", (3, 3, 4),
                 "Small corrections keep the setup healthy.",
                 "A few hours per year.",
                 "Low-touch monitoring fits non-critical items."),
            ],
        ),
    ],
)

SCENARIOS: dict[QuadrantId, ScenarioContent] = {
    scenario.quadrant: scenario
    for scenario in (
        BOTTLENECK_SCENARIO,
        LEVERAGE_SCENARIO,
        STRATEGIC_SCENARIO,
        NONCRITICAL_SCENARIO,
    )
}

# ============================================================================
# Layer 2 Event
# ============================================================================


def _response(quadrant: QuadrantId, situation: str, options: list[tuple]) -> EventResponseContent:
    return EventResponseContent(
        quadrant=quadrant,
        situation=situation,
        choices=_choices(f"event_{quadrant.value}", options),
    )


EVENT = EventContent(
    title="Global supply chain crisis",
    description="A port strike and a raw material shortage hit at the same time.",
    shocks=[
        EventShock(name="Port strike", description="Inbound containers stuck for weeks", timeframe="3-6 weeks"),
        EventShock(name="Raw material shortage", description="Steel and polymer prices jump", timeframe="2 quarters"),
        EventShock(name="Demand spike", description="A key customer doubles its order", timeframe="1 quarter"),
    ],
    responses=[
        _response(
            QuadrantId.BOTTLENECK,
            "The gasket supplier's shipment is stuck at the port.",
            [
                ("Air-freight from the qualified second source", (2, 5, 4),
                 "The line never stops.",
                 "Expensive freight.",
                 "Continuity first for bottleneck items."),
                ("Wait for the strike to end", (5, 1, 2),
                 "Freight cost saved, line stops for a week.",
                 "Lost output far exceeds the saving.",
                 "Inaction is the costliest bottleneck response."),
                ("Ration the buffer stock", (3, 3, 3),
                 "Partial output until ships arrive.",
                 "Customers see delays.",
                 "Buffers buy time but rarely enough."),
            ],
        ),
        _response(
            QuadrantId.LEVERAGE,
            "Steel prices jump 20% and suppliers ask for surcharges.",
            [
                ("Enforce the index cap and shift volume", (5, 2, 3),
                 "The cap holds, one supplier gains share.",
                 "Some friction with the losing supplier.",
                 "Contract mechanisms protect leverage positions."),
                ("Accept surcharges to keep goodwill", (2, 4, 4),
                 "Relations stay warm, budget overruns.",
                 "Goodwill bought at full price.",
                 "Leverage is given up in a crisis."),
                ("Spot-buy to cover the gap", (3, 3, 2),
                 "Supply covered at a volatile price.",
                 "Unpredictable cost.",
                 "Spot purchases suit short gaps only."),
            ],
        ),
        _response(
            QuadrantId.STRATEGIC,
            "The partner cannot get chips for the controller.",
            [
                ("Share allocation and co-fund alternative chips", (2, 4, 5),
                 "Both companies ride out the shortage together.",
                 "Cash committed in a tight quarter.",
                 "Strategic partners solve crises jointly."),
                ("Invoke penalties from the contract", (4, 2, 2),
                 "Some compensation, a damaged partnership.",
                 "The chips still do not arrive.",
                 "Penalties rarely fix a shared problem."),
                ("Pause the product line", (3, 3, 3),
                 "Cost is contained, customers wait.",
                 "Market share at risk.",
                 "Waiting preserves cash but not position."),
            ],
        ),
        _response(
            QuadrantId.NONCRITICAL,
            "The system supplier reports delays on routine supplies.",
            [
                ("Let users buy locally with purchasing cards", (4, 3, 3),
                 "Gaps close with almost no effort.",
                 "Slightly higher unit prices.",
                 "Simple fixes suit routine items."),
                ("Escalate to management", (2, 4, 2),
                 "Lots of meetings about paper clips.",
                 "Management attention wasted.",
                 "Escalation is disproportionate here."),
                ("Skip the affected items for now", (5, 1, 2),
                 "Nothing spent, some annoyed users.",
                 "Minor disruption.",
                 "Accepting small gaps can be rational for non-critical items."),
            ],
        ),
    ],
)

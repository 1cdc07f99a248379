"""
Kraljic Simulation CLI

Command-line interface for running the practice simulation from a terminal:
sessions, answers, dashboards, the leaderboard, content browsing and the
inventory calculators.

Usage:
    kraljic init --db kraljic.db
    kraljic session create --name "Kim" --id s-1
    kraljic submit --session s-1 --quadrant bottleneck --step 0 --choice bottleneck_step1_A
    kraljic event --session s-1 --response bottleneck=event_bottleneck_A
    kraljic dashboard --session s-1
    kraljic leaderboard
    kraljic serve --port 8080
"""

import json
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import pydantic
import typer
from typing_extensions import Annotated

from kraljic_sim.content.store import default_content_store
from kraljic_sim.inventory import (
    SERVICE_LEVEL_Z,
    eoq_summary,
    reorder_point,
    safety_stock,
)
from kraljic_sim.kernel.errors import KraljicError
from kraljic_sim.kernel.logging import configure_logging, is_production
from kraljic_sim.quadrants.registry import QUADRANT_ORDER, get_quadrant
from kraljic_sim.simulation import KraljicSimulation

# Configure logging to stderr (avoids polluting stdout for JSON output)
configure_logging(json_output=is_production(), log_level=os.getenv("LOG_LEVEL", "INFO"))

app = typer.Typer(
    name="kraljic",
    help="Kraljic matrix practice simulation",
    add_completion=False,
)

# Sub-apps
session_app = typer.Typer(help="Participant session commands")
content_app = typer.Typer(help="Scenario content commands")
inventory_app = typer.Typer(help="Inventory practice calculators")

app.add_typer(session_app, name="session")
app.add_typer(content_app, name="content")
app.add_typer(inventory_app, name="inventory")

# Global state
DEFAULT_DB = Path(os.getenv("KRALJIC_DB", ".kraljic.db"))

DbOption = Annotated[Optional[Path], typer.Option("--db", help="Database path")]


def get_simulation(db_path: Optional[Path] = None) -> KraljicSimulation:
    """Get simulation instance for an existing database"""
    db = db_path or DEFAULT_DB
    if not db.exists():
        typer.echo(f"Error: Database not found: {db}", err=True)
        typer.echo(f"Run 'kraljic init --db {db}' to initialize", err=True)
        raise typer.Exit(1)
    return KraljicSimulation(db)


@contextmanager
def domain_errors() -> Iterator[None]:
    """Report rejected input as a one-line error and exit 1"""
    try:
        yield
    except (KraljicError, pydantic.ValidationError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e


# Initialization command


@app.command()
def init(
    db: Annotated[
        Path,
        typer.Option(help="Database path"),
    ] = DEFAULT_DB,
) -> None:
    """Initialize a new simulation database"""
    if db.exists():
        typer.echo(f"Error: Database already exists: {db}", err=True)
        raise typer.Exit(1)

    KraljicSimulation(db)
    typer.echo(f"✓ Initialized simulation database: {db}")


# Session commands


@session_app.command("create")
def session_create(
    name: Annotated[str, typer.Option("--name", help="Participant name")],
    session_id: Annotated[
        Optional[str],
        typer.Option("--id", help="Session ID (generated if omitted)"),
    ] = None,
    db: DbOption = None,
) -> None:
    """Start a new participant session"""
    sim = get_simulation(db)

    with domain_errors():
        session = sim.create_session(name, session_id=session_id)

    typer.echo(f"✓ Created session: {session.session_id}")
    typer.echo(f"  Participant: {session.participant_name}")


@session_app.command("show")
def session_show(
    session_id: Annotated[str, typer.Option("--id", help="Session ID")],
    db: DbOption = None,
) -> None:
    """Show a session and its completion state"""
    sim = get_simulation(db)

    with domain_errors():
        session = sim.get_session(session_id)

    typer.echo(f"Session: {session.session_id}")
    typer.echo(f"  Participant: {session.participant_name}")
    typer.echo(f"  Created: {session.created_at.isoformat()}")
    typer.echo(f"  Completed: {session.completed_at.isoformat() if session.completed_at else 'no'}")


# Answer commands


@app.command()
def submit(
    session_id: Annotated[str, typer.Option("--session", help="Session ID")],
    quadrant: Annotated[str, typer.Option("--quadrant", help="Quadrant ID")],
    step: Annotated[int, typer.Option("--step", help="Zero-based step index")],
    choice: Annotated[str, typer.Option("--choice", help="Choice ID")],
    db: DbOption = None,
) -> None:
    """Record one Layer 1 choice"""
    sim = get_simulation(db)

    with domain_errors():
        submission = sim.record_submission(session_id, quadrant, step, choice)

    raw = submission.score.raw
    typer.echo(f"✓ Recorded {submission.choice_id}")
    typer.echo(f"  Raw: ce={raw.ce} ss={raw.ss} sv={raw.sv}")
    typer.echo(f"  Weighted: {submission.score.weighted}")


@app.command()
def event(
    session_id: Annotated[str, typer.Option("--session", help="Session ID")],
    response: Annotated[
        list[str],
        typer.Option("--response", help="quadrant=choice_id (repeat per quadrant)"),
    ],
    db: DbOption = None,
) -> None:
    """Submit the event round and complete the session"""
    sim = get_simulation(db)

    specs = []
    for item in response:
        quadrant, sep, choice_id = item.partition("=")
        if not sep:
            typer.echo(f"Error: expected quadrant=choice_id, got {item!r}", err=True)
            raise typer.Exit(1)
        specs.append({"quadrant": quadrant.strip(), "choice_id": choice_id.strip()})

    with domain_errors():
        stored = sim.record_event_responses(session_id, specs)

    typer.echo(f"✓ Recorded {len(stored)} event responses")
    for item in stored:
        typer.echo(f"  {item.quadrant.value}: {item.choice_id} ({item.score.weighted})")


# Results commands


@app.command()
def dashboard(
    session_id: Annotated[str, typer.Option("--session", help="Session ID")],
    db: DbOption = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show the scored dashboard of a session"""
    sim = get_simulation(db)

    with domain_errors():
        result = sim.get_dashboard(session_id)

    if json_output:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return

    typer.echo(f"\nResults for {result.participant_name} ({result.session_id})")
    typer.echo(f"  Layer 1: {result.layer1_score}")
    typer.echo(f"  Layer 2: {result.layer2_score}")
    typer.echo(f"  Final:   {result.final_score}  [{result.grade.value}]")

    typer.echo("\nQuadrants:")
    for quadrant in result.quadrant_results:
        name = get_quadrant(quadrant.quadrant).name_en
        typer.echo(
            f"  {name:<13} {quadrant.total_weighted:>6} / {quadrant.optimal_score:g}"
            f"  ({quadrant.percent_of_optimal}%, {quadrant.step_count} steps)"
        )

    profile = result.dimension_profile
    typer.echo("\nDimension profile:")
    for dimension in ("ce", "ss", "sv"):
        stat = getattr(profile, dimension)
        typer.echo(f"  {dimension}: total {stat.total}, average {stat.average}")
    typer.echo(f"  Strongest: {profile.strongest.value}  Weakest: {profile.weakest.value}")

    if result.rank is not None:
        rank = result.rank
        typer.echo(
            f"\nRank: {rank.before} -> {rank.after} of {rank.total} ({rank.direction.value})"
        )


@app.command()
def leaderboard(
    db: DbOption = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", help="Show only the top N"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show every ranked session, best final score first"""
    sim = get_simulation(db)
    entries = sim.leaderboard(limit=limit)

    if json_output:
        typer.echo(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return

    if not entries:
        typer.echo("No ranked sessions")
        return

    typer.echo(f"Leaderboard ({len(entries)}):")
    for position, entry in enumerate(entries, start=1):
        typer.echo(
            f"  {position:>3}. {entry.participant_name:<20} {entry.final:>6}  [{entry.grade.value}]"
        )


@app.command()
def export(
    session_id: Annotated[str, typer.Option("--session", help="Session ID")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", help="Write payload to this file instead of stdout"),
    ] = None,
    db: DbOption = None,
) -> None:
    """Export a session's results as JSON"""
    sim = get_simulation(db)

    with domain_errors():
        payload = sim.export_results(session_id)

    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output is None:
        typer.echo(text)
        return

    output.write_text(text, encoding="utf-8")
    typer.echo(f"✓ Exported results to {output}")


# Content commands


@content_app.command("quadrants")
def content_quadrants() -> None:
    """List the four quadrants and their weights"""
    for quadrant_id in QUADRANT_ORDER:
        quadrant = get_quadrant(quadrant_id)
        w = quadrant.weights
        typer.echo(
            f"{quadrant_id.value:<12} {quadrant.name_en:<13} "
            f"ce={w.ce:.2f} ss={w.ss:.2f} sv={w.sv:.2f}  "
            f"risk={quadrant.supply_risk.value} impact={quadrant.profit_impact.value}"
        )


@content_app.command("steps")
def content_steps(
    quadrant: Annotated[str, typer.Option("--quadrant", help="Quadrant ID")],
) -> None:
    """Show a quadrant's scenario steps and choices"""
    if quadrant not in {q.value for q in QUADRANT_ORDER}:
        typer.echo(f"Error: unknown quadrant {quadrant}", err=True)
        raise typer.Exit(1)

    scenario = default_content_store.scenario(quadrant)
    typer.echo(f"{scenario.item_name} ({scenario.company_name})")
    for step in scenario.steps:
        typer.echo(f"\nStep {step.step_index}: {step.title}")
        typer.echo(f"  {step.situation}")
        for choice in step.choices:
            raw = choice.scores
            typer.echo(f"  [{choice.choice_id}] {choice.title} (ce={raw.ce} ss={raw.ss} sv={raw.sv})")


# Inventory commands


@inventory_app.command("eoq")
def inventory_eoq(
    demand: Annotated[float, typer.Option("--demand", help="Annual demand (units)")],
    order_cost: Annotated[float, typer.Option("--order-cost", help="Cost per order")],
    holding_cost: Annotated[float, typer.Option("--holding-cost", help="Holding cost per unit per year")],
) -> None:
    """Economic order quantity"""
    result = eoq_summary(demand, order_cost, holding_cost)
    if result is None:
        typer.echo("Error: all inputs must be positive", err=True)
        raise typer.Exit(1)

    typer.echo(f"EOQ: {result.quantity:.1f} units")
    typer.echo(f"  Orders per year: {result.orders_per_year:.1f}")
    typer.echo(f"  Annual cost: {result.annual_cost:,.0f}")


@inventory_app.command("safety-stock")
def inventory_safety_stock(
    std_dev: Annotated[float, typer.Option("--std-dev", help="Std deviation of daily demand")],
    lead_time: Annotated[float, typer.Option("--lead-time", help="Lead time (days)")],
    service_level: Annotated[
        str,
        typer.Option("--service-level", help=f"One of {', '.join(SERVICE_LEVEL_Z)}"),
    ] = "95%",
) -> None:
    """Safety stock for a service level"""
    z = SERVICE_LEVEL_Z.get(service_level)
    if z is None:
        typer.echo(f"Error: unknown service level {service_level}", err=True)
        raise typer.Exit(1)

    result = safety_stock(z, std_dev, lead_time)
    if result is None:
        typer.echo("Error: all inputs must be positive", err=True)
        raise typer.Exit(1)

    typer.echo(f"Safety stock: {result:.1f} units (Z={z})")


@inventory_app.command("reorder-point")
def inventory_reorder_point(
    daily_demand: Annotated[float, typer.Option("--daily-demand", help="Average daily demand")],
    lead_time: Annotated[float, typer.Option("--lead-time", help="Lead time (days)")],
    safety: Annotated[float, typer.Option("--safety-stock", help="Safety stock (units)")] = 0.0,
) -> None:
    """Reorder point"""
    result = reorder_point(daily_demand, lead_time, safety)
    if result is None:
        typer.echo("Error: demand and lead time must be positive", err=True)
        raise typer.Exit(1)

    typer.echo(f"Reorder point: {result:.1f} units")


# Server command


@app.command()
def serve(
    db: Annotated[
        Path,
        typer.Option(help="Database path"),
    ] = DEFAULT_DB,
    port: Annotated[int, typer.Option("--port", help="HTTP port")] = 8080,
    metrics_port: Annotated[
        Optional[int],
        typer.Option("--metrics-port", help="Expose Prometheus metrics on this port"),
    ] = None,
) -> None:
    """Run the JSON HTTP API"""
    from kraljic_sim.api_server import initialize_api_server, run_api_server
    from kraljic_sim.kernel.metrics import start_metrics_server

    if metrics_port is not None:
        start_metrics_server(metrics_port)
    initialize_api_server(db)
    run_api_server(port=port)


def main() -> None:
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()

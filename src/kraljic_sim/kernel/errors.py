"""
Custom exceptions for the Kraljic practice simulation

Three families map onto the three kinds of failure a caller can see:
validation errors (bad input, client's fault), not-found errors (unknown
session or content identifier) and persistence errors (store failures).

Fun fact: Peter Kraljic published "Purchasing Must Become Supply Management"
in the Harvard Business Review in 1983 - the matrix is older than SQLite!
"""


class KraljicError(Exception):
    """Base exception for all simulation errors"""

    pass


# ============================================================================
# Validation errors (client errors)
# ============================================================================


class ValidationError(KraljicError):
    """Base class for input that violates a boundary or domain rule"""

    pass


class InvalidSubmission(ValidationError):
    """Raised when a submission or event response is malformed"""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


class RawScoreOutOfRange(ValidationError):
    """Raised when a raw dimension score falls outside the allowed range"""

    def __init__(self, dimension: str, value: float, minimum: int, maximum: int) -> None:
        self.dimension = dimension
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Raw score {dimension}={value} outside [{minimum}, {maximum}]"
        )


class InvalidQuadrantWeights(ValidationError):
    """Raised when dimension weights are negative or do not sum to 1.0"""

    def __init__(self, weights: dict[str, float]) -> None:
        self.weights = weights
        super().__init__(
            f"Dimension weights {weights} must be non-negative and sum to 1.0 "
            f"(got {sum(weights.values()):.6f})"
        )


class ScoreMismatch(ValidationError):
    """Raised when client-supplied scores disagree with the content store"""

    def __init__(self, choice_id: str, expected: str, supplied: str) -> None:
        self.choice_id = choice_id
        self.expected = expected
        self.supplied = supplied
        super().__init__(
            f"Choice {choice_id} scores {supplied} do not match content {expected}"
        )


class SessionAlreadyExists(ValidationError):
    """Raised when creating a session whose identifier is already taken"""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session {session_id} already exists")


class SessionAlreadyCompleted(ValidationError):
    """Raised when the event round is submitted twice for one session"""

    def __init__(self, session_id: str, completed_at: str) -> None:
        self.session_id = session_id
        self.completed_at = completed_at
        super().__init__(
            f"Session {session_id} was already completed at {completed_at}"
        )


# ============================================================================
# Not-found errors
# ============================================================================


class NotFoundError(KraljicError):
    """Base class for lookups that matched nothing"""

    pass


class SessionNotFound(NotFoundError):
    """Raised when session does not exist"""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")


class ContentNotFound(NotFoundError):
    """Raised when a choice identifier is unknown to the content store"""

    def __init__(self, quadrant: str, choice_id: str, step: int | None = None) -> None:
        self.quadrant = quadrant
        self.choice_id = choice_id
        self.step = step
        location = f"{quadrant} step {step}" if step is not None else f"{quadrant} event"
        super().__init__(f"Choice {choice_id} not found in {location}")


# ============================================================================
# Persistence errors (server errors)
# ============================================================================


class PersistenceError(KraljicError):
    """Raised when the session store fails to read or write"""

    pass

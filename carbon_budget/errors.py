from typing import List, Optional


class InvalidInput(ValueError):
    """Malformed argument passed to a core function."""


class CatalogIntegrityError(InvalidInput):
    """
    A catalog entry violates its invariants.

    Attributes:
        intervention_id: Id of the offending entry, when it has one
        problems: Human-readable list of violated rules
    """

    def __init__(self, intervention_id: Optional[str], problems: List[str]):
        self.intervention_id = intervention_id
        self.problems = list(problems)
        label = intervention_id if intervention_id else "<unidentified>"
        super().__init__(f"Invalid catalog entry {label}: {'; '.join(self.problems)}")


class ValidationRejected(InvalidInput):
    """A proposed state mutation failed its precondition."""

    def __init__(self, operation, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{type(operation).__name__} rejected: {reason}")

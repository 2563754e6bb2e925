"""Model error hierarchy.

Absence of a row is never an error: lookups return None and deletes
return False. These exceptions cover rejected mutations only.
"""


class ActiveModelError(Exception):
    """Base exception for model errors."""

    pass


class ValidationError(ActiveModelError):
    """Raised when input is malformed, out of range, or references a missing parent."""

    pass


class UniqueConstraintError(ActiveModelError):
    """Raised when a create or update would duplicate a unique column."""

    def __init__(self, message: str, column: str | None = None):
        super().__init__(message)
        self.column = column


class IntegrityViolationError(ActiveModelError):
    """Raised when deleting a parent that still has dependents.

    Attributes:
        parent_kind: Entity name of the parent (e.g. "investor")
        parent_id: Primary key of the parent
        dependent_counts: Blocking dependents per kind, e.g. {"portfolio": 2}
    """

    def __init__(
        self, message: str, parent_kind: str, parent_id, dependent_counts: dict[str, int]
    ):
        super().__init__(message)
        self.parent_kind = parent_kind
        self.parent_id = parent_id
        self.dependent_counts = dependent_counts

    @property
    def dependent_count(self) -> int:
        return sum(self.dependent_counts.values())

"""
Exception types for the opportunity engine.

Two failure kinds reach callers: a member without a network snapshot and
input that fails structural validation. Both are fatal for the evaluation.
"""

from typing import Any

from pydantic import ValidationError


class OpportunityError(Exception):
    """Base class for opportunity engine errors."""
    pass


class MissingSnapshotError(OpportunityError, LookupError):
    """Raised when the repository has no network snapshot for a member."""

    def __init__(self, member_id: str) -> None:
        self.member_id = member_id
        super().__init__(
            "Unable to evaluate opportunity progress: "
            f"member {member_id} has no network snapshot."
        )


class SchemaValidationError(OpportunityError, ValueError):
    """
    Raised when a snapshot or plan fails structural validation.

    Attributes:
        errors: Error list reported by pydantic
    """

    def __init__(
        self,
        message: str = "Schema validation failed",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.errors = errors or []
        super().__init__(message)

    @classmethod
    def from_validation_error(
        cls, exc: ValidationError, **kwargs: Any
    ) -> "SchemaValidationError":
        """Build error from pydantic ValidationError."""
        return cls(errors=exc.errors(include_url=False), **kwargs)


class SnapshotValidationError(SchemaValidationError):
    """Raised when a member network snapshot is malformed."""

    def __init__(
        self, member_id: str, errors: list[dict[str, Any]] | None = None
    ) -> None:
        self.member_id = member_id
        count = len(errors or [])
        super().__init__(
            f"Network snapshot for member {member_id} is invalid "
            f"({count} validation error(s)): {errors}",
            errors,
        )


class PlanValidationError(SchemaValidationError):
    """Raised when an opportunity plan definition is malformed."""

    def __init__(self, errors: list[dict[str, Any]] | None = None) -> None:
        count = len(errors or [])
        super().__init__(
            f"Opportunity plan is invalid ({count} validation error(s)): {errors}",
            errors,
        )

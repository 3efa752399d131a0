"""Partial Update Base — explicit, enumerated optional fields for PATCH bodies.

Invariants:
    - Every updatable column is a declared field; unknown keys are rejected (extra="forbid")
    - changes() returns only the fields the caller explicitly set
    - A field listed in NON_NULLABLE may be omitted but never set to null
    - apply_update refuses an empty update and stamps updated_at when the row has one

Design Decisions:
    - exclude_unset distinguishes "not sent" from "sent as null", so nullable
      columns can still be cleared explicitly
"""

from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, model_validator

from unierp.core.errors import EmptyUpdateError


class PartialUpdate(BaseModel):
    """Base for PATCH schemas."""

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_for_required_columns(self):
        for name in self.model_fields_set & self.NON_NULLABLE:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Explicitly-set fields, ready to apply to the ORM row."""
        return self.model_dump(exclude_unset=True)

    @property
    def is_empty(self) -> bool:
        return not self.model_fields_set


def apply_update(row: object, update: PartialUpdate, resource_type: str) -> None:
    """Copy explicitly-set fields onto an ORM row."""
    if update.is_empty:
        raise EmptyUpdateError(resource_type)
    for column, value in update.changes().items():
        setattr(row, column, value)
    if hasattr(row, "updated_at"):
        row.updated_at = datetime.now(timezone.utc)

"""Common Pydantic models: options, warnings, change records, errors."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class TableKitError(Exception):
    """Base class for errors raised while binding or parsing a table."""


class TableNotFoundError(TableKitError, LookupError):
    """Raised when the table locator resolves to no element."""


class NotATableError(TableKitError, TypeError):
    """Raised when the located element is not a table."""


class HiddenInputError(TableKitError, ValueError):
    """Raised when a hidden input carries neither an id nor a name."""


class DuplicateRowIdError(TableKitError, ValueError):
    """Raised on create when the identity is taken and the policy is ``reject``."""


class KitOptions(BaseModel):
    """Options controlling how a table is parsed and mutated."""

    id_attribute: str = "data-id"
    row_id_prefix: str = "row_"
    column_prefix: str = "column"
    raw_max_length: int = Field(default=100, ge=0)
    duplicate_ids: Literal["warn", "reject"] = "warn"
    emit_events: bool = False


class WarningDetail(BaseModel):
    """Structured warning."""

    code: str
    message: str
    path: str | None = None


class ChangeRecord(BaseModel):
    """Describes a single committed change to the table."""

    type: str
    target: str
    before: Any | None = None
    after: Any | None = None
    impact: dict[str, Any] | None = None
    warnings: list[WarningDetail] = Field(default_factory=list)

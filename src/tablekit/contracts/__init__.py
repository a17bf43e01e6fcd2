"""Pydantic models for tables, rows, options and change records."""

from tablekit.contracts.common import (
    ChangeRecord,
    DuplicateRowIdError,
    HiddenInputError,
    KitOptions,
    NotATableError,
    TableKitError,
    TableNotFoundError,
    WarningDetail,
)
from tablekit.contracts.table import (
    DataType,
    TableHeader,
    TableObject,
    TableRow,
)

__all__ = [
    "ChangeRecord",
    "DataType",
    "DuplicateRowIdError",
    "HiddenInputError",
    "KitOptions",
    "NotATableError",
    "TableHeader",
    "TableKitError",
    "TableNotFoundError",
    "TableObject",
    "TableRow",
    "WarningDetail",
]

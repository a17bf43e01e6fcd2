"""tablekit: a typed, mutable model of an HTML table kept in step with its markup."""

from tablekit.adapters.soup_tree import Document
from tablekit.contracts import (
    DataType,
    KitOptions,
    TableHeader,
    TableObject,
    TableRow,
)
from tablekit.engine.kit import HTMLTableKit

__version__ = "1.0.0"

__all__ = [
    "DataType",
    "Document",
    "HTMLTableKit",
    "KitOptions",
    "TableHeader",
    "TableObject",
    "TableRow",
    "__version__",
]

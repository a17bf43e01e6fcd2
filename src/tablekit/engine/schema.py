"""Header row detection and column derivation."""

from __future__ import annotations

from collections.abc import Sequence

from tablekit.adapters.soup_tree import CellElement, TableElement
from tablekit.contracts.table import DataType, TableHeader
from tablekit.engine.inference import is_numeric


def is_header_like(texts: Sequence[str]) -> bool:
    """Every text is non-blank and non-numeric. Vacuously true for no cells."""
    return all(t != "" and not is_numeric(t) for t in texts)


def detect_header_row(table: TableElement) -> bool:
    """Whether the table's first row is a header row."""
    if table.has_thead():
        return True
    first = table.first_row()
    if first is None:
        return False
    if first.header_cells():
        return True
    return is_header_like([c.text for c in first.plain_cells()])


def synthetic_columns(count: int, prefix: str = "column") -> list[TableHeader]:
    return [TableHeader(name=f"{prefix}{i + 1}") for i in range(count)]


def _named_columns(cells: Sequence[CellElement], prefix: str) -> list[TableHeader]:
    return [
        TableHeader(name=(c.text or f"{prefix}{i + 1}").lower())
        for i, c in enumerate(cells)
    ]


def derive_columns(table: TableElement, *, prefix: str = "column") -> list[TableHeader]:
    """Columns named from the header row, or synthesized from the first row's width.

    All columns come back typed TEXT; the real type is inferred from the data.
    """
    first = table.first_row()
    if first is None:
        return []

    th = first.header_cells()
    if th:
        return _named_columns(th, prefix)

    td = first.plain_cells()
    if not td:
        return []
    if is_header_like([c.text for c in td]):
        return _named_columns(td, prefix)
    return synthetic_columns(len(td), prefix)


def assign_types(columns: list[TableHeader], types: Sequence[DataType]) -> None:
    for header, data_type in zip(columns, types):
        header.type = data_type

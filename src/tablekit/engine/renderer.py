"""Projects model rows onto the markup tree.

Rows are addressed by position: model row ``i`` lives at tree row
``data_row_position(i, header_present)``. Appending on create, rewriting in
place on update and splicing on delete keep the two orders in step.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from tablekit.adapters.soup_tree import RowElement, TableElement
from tablekit.contracts.table import DataType, TableHeader, TableRow
from tablekit.engine.inference import format_value


class RenderMode(str, Enum):
    INSERT = "insert"
    OVERWRITE = "overwrite"


def data_row_position(model_index: int, header_present: bool) -> int:
    """Tree row index of the model row at ``model_index``."""
    if model_index < 0:
        raise ValueError(f"Model index must be non-negative, got {model_index}")
    return model_index + (1 if header_present else 0)


def _cell_payload(row: TableRow, header: TableHeader) -> tuple[str, bool]:
    value = row.get(header.name)
    if header.type is DataType.RAW:
        return ("" if value is None else str(value)), True
    return format_value(value), False


def row_at(table: TableElement, model_index: int, header_present: bool) -> RowElement | None:
    rows = table.rows()
    pos = data_row_position(model_index, header_present)
    return rows[pos] if pos < len(rows) else None


def render_row(
    table: TableElement,
    row: TableRow,
    columns: Sequence[TableHeader],
    mode: RenderMode,
    *,
    model_index: int | None = None,
    header_present: bool = False,
    id_attribute: str = "data-id",
) -> RowElement | None:
    """Insert a new row fragment, or overwrite the cells of an existing one.

    Overwrite touches only cells that already exist and is a no-op when no
    fragment sits at the row's position. Returns the affected fragment.
    """
    if mode is RenderMode.INSERT:
        return table.append_row(
            {id_attribute: row.id},
            [_cell_payload(row, h) for h in columns],
        )

    if model_index is None:
        raise ValueError("model_index is required to overwrite a row")
    target = row_at(table, model_index, header_present)
    if target is None:
        return None
    for header, cell in zip(columns, target.cells()):
        value, raw = _cell_payload(row, header)
        cell.write(value, raw=raw)
    return target


def remove_row_at(table: TableElement, model_index: int, header_present: bool) -> bool:
    """Remove the fragment for the model row at ``model_index``, if present."""
    target = row_at(table, model_index, header_present)
    if target is None:
        return False
    target.remove()
    return True

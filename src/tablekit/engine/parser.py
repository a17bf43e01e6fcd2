"""Two-pass table parsing: collect column text, infer types, build typed rows."""

from __future__ import annotations

from collections.abc import Sequence

from tablekit.adapters.soup_tree import RowElement, TableElement
from tablekit.contracts.common import HiddenInputError, KitOptions
from tablekit.contracts.table import TableHeader, TableObject, TableRow
from tablekit.engine.inference import coerce, infer_type
from tablekit.engine.renderer import data_row_position
from tablekit.engine.schema import assign_types, derive_columns, detect_header_row


def parse_hidden_inputs(table: TableElement) -> dict[str, str]:
    """Sidecar values keyed by each hidden input's id, else its name."""
    hidden: dict[str, str] = {}
    for field in table.hidden_inputs():
        key = field.key
        if not key:
            raise HiddenInputError("Hidden input found without id or name attribute")
        hidden[key] = field.value
    return hidden


def data_rows(table: TableElement, header_present: bool) -> list[RowElement]:
    """All rows of the table minus the leading header row, if one was detected."""
    return table.rows()[data_row_position(0, header_present):]


def collect_column_values(rows: Sequence[RowElement], width: int) -> list[list[str]]:
    """First pass: trimmed cell text per column; cells past ``width`` are ignored."""
    columns: list[list[str]] = [[] for _ in range(width)]
    for row in rows:
        for idx, cell in enumerate(row.cells()[:width]):
            columns[idx].append(cell.text)
    return columns


def row_identity(row: RowElement, index: int, options: KitOptions) -> str:
    explicit = row.get(options.id_attribute)
    if explicit:
        return explicit
    return f"{options.row_id_prefix}{index}"


def parse_rows(
    rows: Sequence[RowElement],
    columns: Sequence[TableHeader],
    options: KitOptions,
    next_row_id: int = 0,
) -> tuple[list[TableRow], int]:
    """Second pass: typed rows plus the advanced synthetic-id counter.

    The counter moves to at least ``index + 1`` for every parsed row, so
    identities synthesized later never collide with positional ones.
    """
    parsed: list[TableRow] = []
    for index, row in enumerate(rows):
        values = {}
        for header, cell in zip(columns, row.cells()):
            values[header.name] = coerce(cell.text, header.type)
        parsed.append(TableRow(id=row_identity(row, index, options), values=values))
        next_row_id = max(next_row_id, index + 1)
    return parsed, next_row_id


def parse_table(
    table: TableElement,
    options: KitOptions | None = None,
    next_row_id: int = 0,
) -> tuple[TableObject, bool, int]:
    """Parse the whole table.

    Returns ``(table_object, header_present, next_row_id)``.
    """
    options = options or KitOptions()
    hidden = parse_hidden_inputs(table)
    header_present = detect_header_row(table)
    columns = derive_columns(table, prefix=options.column_prefix)

    rows = data_rows(table, header_present)
    values = collect_column_values(rows, len(columns))
    assign_types(
        columns,
        [infer_type(v, raw_max_length=options.raw_max_length) for v in values],
    )

    parsed, next_row_id = parse_rows(rows, columns, options, next_row_id)
    table_object = TableObject(
        id=table.id,
        name=table.name,
        headers=columns,
        hidden=hidden,
        rows=parsed,
    )
    return table_object, header_present, next_row_id

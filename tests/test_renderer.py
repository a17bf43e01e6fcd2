"""Tests for the tree renderer and positional addressing."""

import pytest

from tablekit.adapters.soup_tree import Document
from tablekit.contracts.table import DataType, TableHeader, TableRow
from tablekit.engine.renderer import (
    RenderMode,
    data_row_position,
    remove_row_at,
    render_row,
    row_at,
)

from conftest import GRID_HTML, USERS_HTML

COLUMNS = [TableHeader(name="name"), TableHeader(name="age", type=DataType.INTEGER)]


def test_data_row_position():
    assert data_row_position(0, False) == 0
    assert data_row_position(0, True) == 1
    assert data_row_position(4, True) == 5
    with pytest.raises(ValueError):
        data_row_position(-1, True)


def test_insert_renders_cells_in_column_order():
    table = Document.from_html(USERS_HTML).get_table("users")
    row = TableRow(id="u9", values={"age": 30, "name": "John"})
    fragment = render_row(table, row, COLUMNS, RenderMode.INSERT)
    assert fragment.get("data-id") == "u9"
    assert fragment.texts() == ["John", "30"]
    assert len(table.rows()) == 3


def test_insert_raw_column_is_unescaped():
    table = Document.from_html(USERS_HTML).get_table("users")
    columns = [TableHeader(name="name", type=DataType.RAW)]
    fragment = render_row(table, TableRow(id="r", values={"name": "<i>J</i>"}), columns, RenderMode.INSERT)
    assert fragment.cells()[0].markup == "<i>J</i>"


def test_overwrite_uses_header_offset():
    table = Document.from_html(USERS_HTML).get_table("users")
    row = TableRow(id="row_0", values={"name": "Anne", "age": 42})
    render_row(table, row, COLUMNS, RenderMode.OVERWRITE, model_index=0, header_present=True)
    assert table.rows()[0].texts() == ["Name", "Age"]
    assert table.rows()[1].texts() == ["Anne", "42"]


def test_overwrite_missing_fragment_is_noop():
    table = Document.from_html(USERS_HTML).get_table("users")
    row = TableRow(id="x", values={"name": "Nobody", "age": 1})
    assert render_row(table, row, COLUMNS, RenderMode.OVERWRITE, model_index=5, header_present=True) is None
    assert len(table.rows()) == 2


def test_overwrite_requires_index():
    table = Document.from_html(USERS_HTML).get_table("users")
    with pytest.raises(ValueError, match="model_index"):
        render_row(table, TableRow(id="x"), COLUMNS, RenderMode.OVERWRITE)


def test_remove_row_at():
    table = Document.from_html(GRID_HTML).get_table("grid")
    assert remove_row_at(table, 0, False) is True
    assert row_at(table, 0, False).texts() == ["2", "b"]
    assert remove_row_at(table, 3, False) is False

"""Shared test fixtures."""

from __future__ import annotations

import pytest

from tablekit.adapters.soup_tree import Document
from tablekit.engine.inference import coerce
from tablekit.engine.kit import HTMLTableKit
from tablekit.engine.renderer import data_row_position


PEOPLE_HTML = """
<html><body>
<table id="people" name="people-table">
  <input type="hidden" id="csrf" value="tok123">
  <input type="hidden" name="page" value="2">
  <thead>
    <tr><th>Name</th><th> Age </th><th>Score</th><th>Active</th><th></th></tr>
  </thead>
  <tbody>
    <tr data-id="p1"><td>Alice</td><td>30</td><td>1.5</td><td>true</td><td>x</td></tr>
    <tr><td>Bob</td><td>25</td><td>2</td><td>false</td><td>y</td></tr>
  </tbody>
</table>
<div id="box">not a table</div>
</body></html>
"""

USERS_HTML = """
<table id="users">
  <thead><tr><th>Name</th><th>Age</th></tr></thead>
  <tbody><tr><td>Ann</td><td>41</td></tr></tbody>
</table>
"""

GRID_HTML = """
<table id="grid">
  <tr><td>1</td><td>a</td></tr>
  <tr><td>2</td><td>b</td></tr>
</table>
"""

INFERRED_HEADER_HTML = """
<table id="products">
  <tr><td>Product</td><td>Price</td></tr>
  <tr><td>Widget</td><td>9.99</td></tr>
  <tr><td>Gadget</td><td>5</td></tr>
</table>
"""

RAW_HTML = """
<table id="notes">
  <tr><th>Title</th><th>Body</th></tr>
  <tr><td>one</td><td>&lt;b&gt;bold&lt;/b&gt;</td></tr>
</table>
"""

EMPTY_HTML = '<table id="empty"></table>'

FOOTED_HTML = """
<table id="stock">
  <thead><tr><th>Item</th><th>Qty</th></tr></thead>
  <tbody><tr><td>apple</td><td>1</td></tr></tbody>
  <tfoot><tr><td>total</td><td>1</td></tr></tfoot>
</table>
"""

TWO_BODY_HTML = """
<table id="stock">
  <thead><tr><th>Item</th><th>Qty</th></tr></thead>
  <tbody><tr><td>apple</td><td>1</td></tr></tbody>
  <tbody><tr><td>pear</td><td>2</td></tr></tbody>
</table>
"""


@pytest.fixture()
def people_doc() -> Document:
    return Document.from_html(PEOPLE_HTML)


@pytest.fixture()
def people_kit(people_doc: Document) -> HTMLTableKit:
    return HTMLTableKit(people_doc, "people")


@pytest.fixture()
def users_kit() -> HTMLTableKit:
    return HTMLTableKit.from_html(USERS_HTML, "users")


@pytest.fixture()
def grid_kit() -> HTMLTableKit:
    return HTMLTableKit.from_html(GRID_HTML, "grid")


def tree_data_rows(kit: HTMLTableKit):
    """Tree rows that correspond to model rows (header row excluded)."""
    return kit.element.rows()[data_row_position(0, kit.header_present):]


def assert_in_step(kit: HTMLTableKit) -> None:
    """Model row i and tree data row i hold the same values, in column order."""
    model_rows = kit.get_table().rows
    tree_rows = tree_data_rows(kit)
    assert len(model_rows) == len(tree_rows)
    for row, fragment in zip(model_rows, tree_rows):
        cells = fragment.cells()
        for header, cell in zip(kit.get_table().headers, cells):
            assert coerce(cell.text, header.type) == row.get(header.name)

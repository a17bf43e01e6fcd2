"""BeautifulSoup-backed markup tree: the document, table, row and cell nodes.

This is the only module that knows about BeautifulSoup. The engine sees the
tree through the small capability set exposed here: lookup by id, structural
queries for hidden inputs / header container / rows / cells, attribute and
text reads, cell writes in text or markup mode, row insertion and removal.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from tablekit.contracts.common import NotATableError, TableNotFoundError

PARSER = "html.parser"


def _owned(tag: Tag, table: Tag) -> bool:
    """True if the closest enclosing table of ``tag`` is ``table``."""
    return tag.find_parent("table") is table


class CellElement:
    """A ``td`` or ``th`` cell."""

    def __init__(self, tag: Tag) -> None:
        self.tag = tag

    @property
    def is_header(self) -> bool:
        return self.tag.name == "th"

    @property
    def text(self) -> str:
        """Trimmed text content."""
        return self.tag.get_text().strip()

    @property
    def markup(self) -> str:
        return self.tag.decode_contents()

    def write(self, value: str, *, raw: bool = False) -> None:
        """Replace the cell content with escaped text, or parsed markup if ``raw``."""
        self.tag.clear()
        if not raw:
            self.tag.string = value
            return
        fragment = BeautifulSoup(value, PARSER)
        for child in list(fragment.contents):
            self.tag.append(child.extract())


class RowElement:
    """A ``tr`` element."""

    def __init__(self, tag: Tag) -> None:
        self.tag = tag

    def get(self, attr: str) -> str | None:
        value = self.tag.get(attr)
        if isinstance(value, list):
            return " ".join(value)
        return value

    def cells(self) -> list[CellElement]:
        return [CellElement(t) for t in self.tag.find_all(["td", "th"], recursive=False)]

    def header_cells(self) -> list[CellElement]:
        return [c for c in self.cells() if c.is_header]

    def plain_cells(self) -> list[CellElement]:
        return [c for c in self.cells() if not c.is_header]

    def texts(self) -> list[str]:
        return [c.text for c in self.cells()]

    def remove(self) -> None:
        self.tag.extract()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RowElement) and other.tag is self.tag

    def __hash__(self) -> int:
        return id(self.tag)


class HiddenField:
    """An ``input type=hidden`` inside the table."""

    def __init__(self, tag: Tag) -> None:
        self.tag = tag

    @property
    def key(self) -> str | None:
        return self.tag.get("id") or self.tag.get("name") or None

    @property
    def value(self) -> str:
        return self.tag.get("value") or self.tag.get_text() or ""


class TableElement:
    """A ``table`` element and its structural queries."""

    def __init__(self, tag: Tag, soup: BeautifulSoup) -> None:
        self.tag = tag
        self._soup = soup

    @property
    def id(self) -> str:
        return self.tag.get("id") or ""

    @property
    def name(self) -> str:
        return self.tag.get("name") or ""

    def _own(self, name: str | list[str]) -> list[Tag]:
        return [t for t in self.tag.find_all(name) if _owned(t, self.tag)]

    def hidden_inputs(self) -> list[HiddenField]:
        return [
            HiddenField(t)
            for t in self._own("input")
            if (t.get("type") or "").lower() == "hidden"
        ]

    def has_thead(self) -> bool:
        return bool(self._own("thead"))

    def rows(self) -> list[RowElement]:
        """Every row owned by this table, in document order."""
        return [RowElement(t) for t in self._own("tr")]

    def first_row(self) -> RowElement | None:
        """The header candidate: first row of the thead, else first row."""
        for thead in self._own("thead"):
            tr = thead.find("tr")
            if tr is not None:
                return RowElement(tr)
        rows = self.rows()
        return rows[0] if rows else None

    def append_row(self, attrs: dict[str, str], cells: list[tuple[str, bool]]) -> RowElement:
        """Append a ``tr`` with one ``td`` per ``(value, raw)`` pair.

        The row goes right after the last data row the table owns, so it is
        also last in ``rows()`` whatever mix of ``tbody``/``tfoot`` sections
        the table has. With no data rows yet it goes to the first ``tbody``,
        else directly under the table.
        """
        tr = self._soup.new_tag("tr", attrs=attrs)
        for value, raw in cells:
            td = self._soup.new_tag("td")
            tr.append(td)
            CellElement(td).write(value, raw=raw)
        rows = self.rows()
        last = rows[-1].tag if rows else None
        if last is not None and last.parent.name != "thead":
            last.insert_after(tr)
            return RowElement(tr)
        bodies = self._own("tbody")
        parent = bodies[0] if bodies else self.tag
        parent.append(tr)
        return RowElement(tr)


class Document:
    """A parsed HTML document."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup

    @classmethod
    def from_html(cls, markup: str) -> "Document":
        return cls(BeautifulSoup(markup, PARSER))

    def find_by_id(self, element_id: str) -> Tag | None:
        return self.soup.find(id=element_id)

    def get_table(self, table_id: str) -> TableElement:
        """Resolve a table by id. Raises if missing or not a table."""
        tag = self.find_by_id(table_id)
        if tag is None:
            raise TableNotFoundError(f'Table with id "{table_id}" not found')
        if tag.name != "table":
            raise NotATableError(f'Element with id "{table_id}" is not a table')
        return TableElement(tag, self.soup)

    def to_html(self) -> str:
        return self.soup.decode()

"""Table model: column types, headers, rows and the table aggregate."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any

import orjson
from pydantic import BaseModel, Field


class DataType(str, Enum):
    """Value type inferred for a column."""

    TEXT = "string"
    INTEGER = "number"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    RAW = "free"  # pre-formatted markup, rendered unescaped


class TableHeader(BaseModel):
    """A named, typed column."""

    name: str
    type: DataType = DataType.TEXT


class TableRow(BaseModel):
    """One table row: a stable identity plus an ordered mapping of values.

    ``values`` holds one entry per column name and tolerates extra keys that
    match no column. Item access treats ``"id"`` as the identity, so a row
    reads like the flat mapping callers pass in (``row["age"]``, ``row["id"]``).
    """

    id: str
    values: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, row_id: str, data: Mapping[str, Any]) -> "TableRow":
        return cls(id=row_id, values={k: v for k, v in data.items() if k != "id"})

    def __getitem__(self, key: str) -> Any:
        if key == "id":
            return self.id
        return self.values[key]

    def __contains__(self, key: object) -> bool:
        return key == "id" or key in self.values

    def get(self, key: str, default: Any = None) -> Any:
        if key == "id":
            return self.id
        return self.values.get(key, default)

    def keys(self) -> Iterator[str]:
        yield "id"
        yield from self.values

    def to_dict(self) -> dict[str, Any]:
        """Flat ``{"id": ..., **values}`` view."""
        return {"id": self.id, **self.values}


class TableObject(BaseModel):
    """The parsed table: identity, headers, hidden sidecar values and rows."""

    id: str = ""
    name: str = ""
    headers: list[TableHeader] = Field(default_factory=list)
    hidden: dict[str, str] = Field(default_factory=dict)
    rows: list[TableRow] = Field(default_factory=list)

    @property
    def column_names(self) -> list[str]:
        return [h.name for h in self.headers]

    def header(self, name: str) -> TableHeader | None:
        for h in self.headers:
            if h.name == name:
                return h
        return None

    def to_json(self, *, indent: bool = False) -> str:
        """Serialize the table with rows flattened to plain mappings."""
        payload = {
            "id": self.id,
            "name": self.name,
            "headers": [h.model_dump(mode="json") for h in self.headers],
            "hidden": self.hidden,
            "rows": [r.to_dict() for r in self.rows],
        }
        option = orjson.OPT_INDENT_2 if indent else 0
        return orjson.dumps(payload, option=option, default=str).decode()

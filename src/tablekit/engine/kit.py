"""HTMLTableKit: a typed model of an HTML table kept in step with the tree.

The model is the source of truth between calls; ``refresh()`` makes the tree
the source of truth again by re-parsing it. Every add/update/delete mutates
the model first and then renders the same change into the tree, so both
agree by the time a call returns.

The ``*_async`` variants propose a change, await an optional decision
function, and only then commit. Nothing is mutated before the decision
resolves, so cancelling needs no rollback.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Union

from tablekit.adapters.soup_tree import Document, TableElement
from tablekit.contracts.common import (
    ChangeRecord,
    DuplicateRowIdError,
    KitOptions,
    WarningDetail,
)
from tablekit.contracts.table import TableObject, TableRow
from tablekit.engine.inference import default_value
from tablekit.engine.parser import parse_table
from tablekit.engine.renderer import RenderMode, remove_row_at, render_row
from tablekit.observe.events import EventEmitter

Decision = Union[Mapping[str, Any], TableRow, bool, None]
BeforeAdd = Callable[[TableRow], Union[Decision, Awaitable[Decision]]]
BeforeUpdate = Callable[[TableRow, dict[str, Any]], Union[Decision, Awaitable[Decision]]]
BeforeDelete = Callable[[TableRow], Union[bool, None, Awaitable[Union[bool, None]]]]


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _is_cancel(result: Any) -> bool:
    return result is None or result is False


def _as_mapping(result: Any) -> dict[str, Any]:
    if result is True:
        return {}
    if isinstance(result, TableRow):
        return result.to_dict()
    if isinstance(result, Mapping):
        return dict(result)
    raise TypeError(
        "Decision function must return a mapping, a TableRow, a bool or None, "
        f"got {type(result).__name__}"
    )


class HTMLTableKit:
    """Binds to one ``<table>`` in a document and keeps a typed model of it."""

    def __init__(
        self,
        document: Document,
        table_id: str,
        *,
        options: KitOptions | None = None,
        emitter: EventEmitter | None = None,
    ) -> None:
        self.options = options or KitOptions()
        self.emitter = emitter or EventEmitter(enabled=self.options.emit_events)
        self.document = document
        self.element: TableElement = document.get_table(table_id)
        self.next_row_id = 0
        self.header_present = False
        self.warnings: list[WarningDetail] = []
        self.changes: list[ChangeRecord] = []
        self.table = self._parse()

    @classmethod
    def from_html(cls, markup: str, table_id: str, **kwargs: Any) -> "HTMLTableKit":
        return cls(Document.from_html(markup), table_id, **kwargs)

    # -- parsing ------------------------------------------------------------

    def _parse(self) -> TableObject:
        with self.emitter.timed("table.parsed") as event:
            table, self.header_present, self.next_row_id = parse_table(
                self.element, self.options, self.next_row_id
            )
            event.update({
                "table": table.id,
                "columns": [h.model_dump(mode="json") for h in table.headers],
                "rows": len(table.rows),
                "hidden": len(table.hidden),
                "header_row": self.header_present,
            })
        return table

    def get_table(self) -> TableObject:
        """The live model."""
        return self.table

    def snapshot(self) -> TableObject:
        """A deep copy of the model, safe to hold across mutations."""
        return self.table.model_copy(deep=True)

    def refresh(self) -> None:
        """Discard the model and re-parse it from the tree."""
        self.table = self._parse()

    # -- lookup -------------------------------------------------------------

    def row_index(self, row_id: str) -> int:
        """Position of the first row with ``row_id``, or -1."""
        for i, row in enumerate(self.table.rows):
            if row.id == row_id:
                return i
        return -1

    def find_row(self, row_id: str) -> TableRow | None:
        i = self.row_index(row_id)
        return self.table.rows[i] if i >= 0 else None

    def _locate(self, row: TableRow) -> int | None:
        for i, candidate in enumerate(self.table.rows):
            if candidate is row:
                return i
        return None

    def _warn(self, code: str, message: str, path: str | None = None) -> WarningDetail:
        warning = WarningDetail(code=code, message=message, path=path)
        self.warnings.append(warning)
        self.emitter.emit("warning", warning.model_dump())
        return warning

    def _not_found(self, op: str, row_id: str) -> bool:
        self.emitter.emit("row.not_found", {"op": op, "id": row_id})
        return False

    # -- propose ------------------------------------------------------------

    def _propose(self, data: Mapping[str, Any]) -> TableRow:
        """Build a finalized candidate row without touching the model."""
        row_id = data.get("id")
        if not row_id:
            row_id = f"{self.options.row_id_prefix}{self.next_row_id}"
            self.next_row_id += 1
        row = TableRow.from_mapping(str(row_id), data)
        for header in self.table.headers:
            if header.name not in row.values:
                row.values[header.name] = default_value(header.type)
        return row

    def _merge_candidate(self, row: TableRow, result: Any) -> TableRow:
        replacement = _as_mapping(result)
        new_id = replacement.pop("id", None)
        if new_id:
            row.id = str(new_id)
        row.values.update(replacement)
        return row

    def _clean_updates(self, row: TableRow, updates: Mapping[str, Any]) -> dict[str, Any]:
        cleaned = dict(updates)
        if "id" in cleaned:
            new_id = cleaned.pop("id")
            if new_id != row.id:
                self._warn(
                    "ID_UPDATE_IGNORED",
                    f"Row identity is immutable; ignored id {new_id!r} for row {row.id!r}",
                    path=row.id,
                )
        return cleaned

    # -- commit -------------------------------------------------------------

    def _commit_add(self, row: TableRow) -> TableRow:
        warnings: list[WarningDetail] = []
        if self.row_index(row.id) >= 0:
            if self.options.duplicate_ids == "reject":
                raise DuplicateRowIdError(f"Row id already exists: {row.id}")
            warnings.append(self._warn(
                "DUPLICATE_ROW_ID",
                f"Row id {row.id!r} is already in use; lookups resolve to the first row",
                path=row.id,
            ))

        self.table.rows.append(row)
        render_row(
            self.element, row, self.table.headers, RenderMode.INSERT,
            id_attribute=self.options.id_attribute,
        )
        self.changes.append(ChangeRecord(
            type="row.add",
            target=row.id,
            after=row.to_dict(),
            impact={"rows": 1, "cells": len(self.table.headers)},
            warnings=warnings,
        ))
        self.emitter.emit("row.added", {"id": row.id, "index": len(self.table.rows) - 1})
        return row

    def _commit_update(self, row: TableRow, index: int, updates: dict[str, Any]) -> None:
        before = row.to_dict()
        row.values.update(updates)
        render_row(
            self.element, row, self.table.headers, RenderMode.OVERWRITE,
            model_index=index, header_present=self.header_present,
        )
        self.changes.append(ChangeRecord(
            type="row.update",
            target=row.id,
            before=before,
            after=row.to_dict(),
            impact={"rows": 1, "cells": len(updates)},
        ))
        self.emitter.emit("row.updated", {"id": row.id, "index": index, "keys": list(updates)})

    def _commit_delete(self, index: int) -> None:
        row = self.table.rows.pop(index)
        remove_row_at(self.element, index, self.header_present)
        self.changes.append(ChangeRecord(
            type="row.delete",
            target=row.id,
            before=row.to_dict(),
            impact={"rows": 1, "cells": len(self.table.headers)},
        ))
        self.emitter.emit("row.deleted", {"id": row.id, "index": index})

    # -- synchronous CRUD -----------------------------------------------------

    def add_row(self, data: Mapping[str, Any]) -> TableRow:
        """Append a row, backfilling missing columns with zero values."""
        return self._commit_add(self._propose(data))

    def update_row(self, row_id: str, updates: Mapping[str, Any]) -> bool:
        """Merge ``updates`` into the row. False if no such row."""
        index = self.row_index(row_id)
        if index < 0:
            return self._not_found("update", row_id)
        row = self.table.rows[index]
        self._commit_update(row, index, self._clean_updates(row, updates))
        return True

    def delete_row(self, row_id: str) -> bool:
        """Remove the row. False if no such row."""
        index = self.row_index(row_id)
        if index < 0:
            return self._not_found("delete", row_id)
        self._commit_delete(index)
        return True

    # -- asynchronous CRUD ----------------------------------------------------

    async def add_row_async(
        self,
        data: Mapping[str, Any],
        before_add: BeforeAdd | None = None,
    ) -> TableRow | None:
        """Like ``add_row``, gated by ``before_add``.

        ``before_add`` gets the candidate row and may be sync or async. Only
        None or False cancels, and the call then returns None. True commits
        the candidate as is; a mapping or row is merged into it, an ``id``
        key renaming it. Other results, including ``0``, ``""`` and ``[]``,
        raise TypeError without touching the model or the tree.
        """
        row = self._propose(data)
        if before_add is not None:
            result = await _resolve(before_add(row))
            if _is_cancel(result):
                self.emitter.emit("row.cancelled", {"op": "add", "id": row.id})
                return None
            row = self._merge_candidate(row, result)
        return self._commit_add(row)

    async def update_row_async(
        self,
        row_id: str,
        updates: Mapping[str, Any],
        before_update: BeforeUpdate | None = None,
    ) -> bool:
        """Like ``update_row``, gated by ``before_update``.

        ``before_update`` gets a copy of the current row and the proposed
        updates, and may be sync or async. Only None or False cancels. True
        applies the proposed updates; a mapping or row replaces them, so an
        empty dict approves a no-op update. Other results, including ``0``,
        ``""`` and ``[]``, raise TypeError without touching the model or the
        tree.
        """
        index = self.row_index(row_id)
        if index < 0:
            return self._not_found("update", row_id)
        row = self.table.rows[index]

        if before_update is not None:
            result = await _resolve(before_update(row.model_copy(deep=True), dict(updates)))
            if _is_cancel(result):
                self.emitter.emit("row.cancelled", {"op": "update", "id": row_id})
                return False
            if result is not True:
                updates = _as_mapping(result)
            # the row may have moved or gone while the decision was pending
            located = self._locate(row)
            if located is None:
                return self._not_found("update", row_id)
            index = located

        self._commit_update(row, index, self._clean_updates(row, updates))
        return True

    async def delete_row_async(
        self,
        row_id: str,
        before_delete: BeforeDelete | None = None,
    ) -> bool:
        """Like ``delete_row``, gated by ``before_delete``; a falsy answer cancels."""
        index = self.row_index(row_id)
        if index < 0:
            return self._not_found("delete", row_id)
        row = self.table.rows[index]

        if before_delete is not None:
            should_delete = await _resolve(before_delete(row.model_copy(deep=True)))
            if not should_delete:
                self.emitter.emit("row.cancelled", {"op": "delete", "id": row_id})
                return False
            located = self._locate(row)
            if located is None:
                return self._not_found("delete", row_id)
            index = located

        self._commit_delete(index)
        return True

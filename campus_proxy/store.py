"""
Table store abstraction for Supabase and an in-memory test implementation.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Protocol, Union

from postgrest.exceptions import APIError
from supabase import Client


class StoreError(Exception):
    """An error reported by the upstream store."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class StoreClient(Protocol):
    """The table operations the proxy needs from the upstream store."""

    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        filters: Optional[dict] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[Union[int, str]] = None,
    ) -> list:
        ...

    def insert(self, table: str, record: Union[dict, list]) -> list:
        ...

    def update(self, table: str, values: dict, record_id: Any) -> list:
        ...

    def delete(self, table: str, record_id: Any) -> list:
        ...

    def delete_in(self, table: str, ids: list) -> list:
        ...

    def rpc(self, function: str, params: Optional[dict] = None) -> Any:
        ...


class SupabaseStoreClient:
    """
    Store backed by a supabase-py client. PostgREST errors are re-raised as
    StoreError so callers never depend on the client library's exception types.
    """

    def __init__(self, client: Client):
        self._client = client

    def _execute(self, query) -> Any:
        try:
            response = query.execute()
        except APIError as exc:
            raise StoreError(
                exc.message or str(exc), code=exc.code, details=exc.details
            ) from exc
        return response.data

    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        filters: Optional[dict] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[Union[int, str]] = None,
    ) -> list:
        query = self._client.table(table).select(columns)
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        if order_by:
            query = query.order(order_by, desc=not ascending)
        if limit is not None:
            query = query.limit(limit)
        return self._execute(query) or []

    def insert(self, table: str, record: Union[dict, list]) -> list:
        return self._execute(self._client.table(table).insert(record)) or []

    def update(self, table: str, values: dict, record_id: Any) -> list:
        query = self._client.table(table).update(values).eq("id", record_id)
        return self._execute(query) or []

    def delete(self, table: str, record_id: Any) -> list:
        query = self._client.table(table).delete().eq("id", record_id)
        return self._execute(query) or []

    def delete_in(self, table: str, ids: list) -> list:
        query = self._client.table(table).delete().in_("id", ids)
        return self._execute(query) or []

    def rpc(self, function: str, params: Optional[dict] = None) -> Any:
        return self._execute(self._client.rpc(function, params or {}))


def _coerce_id(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        token = value.strip()
        if token.isascii() and token.lstrip("-").isdigit():
            return int(token)
    raise StoreError(
        f'invalid input syntax for type bigint: "{value}"', code="22P02"
    )


def _coerce_limit(value: Union[int, str]) -> int:
    try:
        return _coerce_id(value)
    except StoreError as exc:
        raise StoreError(
            f'"{value}" is not a valid limit', code="PGRST103"
        ) from exc


@dataclass
class InMemoryStoreClient:
    """Simple in-memory table store for development and tests."""

    tables: Dict[str, list] = field(default_factory=dict)
    functions: Dict[str, Callable[[dict], Any]] = field(default_factory=dict)
    calls: list = field(default_factory=list)

    def _rows(self, table: str) -> list:
        rows = self.tables.get(table)
        if rows is None:
            raise StoreError(
                f'relation "public.{table}" does not exist', code="42P01"
            )
        return rows

    def _record(self, operation: str, table: str) -> None:
        self.calls.append((operation, table))

    def calls_for(self, operation: str, table: Optional[str] = None) -> list:
        return [
            call
            for call in self.calls
            if call[0] == operation and (table is None or call[1] == table)
        ]

    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        filters: Optional[dict] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[Union[int, str]] = None,
    ) -> list:
        self._record("select", table)
        rows = [
            row
            for row in self._rows(table)
            if all(row.get(k) == v for k, v in (filters or {}).items())
        ]
        if order_by:
            if rows and any(order_by not in row for row in rows):
                raise StoreError(
                    f"column {table}.{order_by} does not exist", code="42703"
                )
            rows = sorted(rows, key=lambda row: row[order_by], reverse=not ascending)
        if limit is not None:
            rows = rows[: _coerce_limit(limit)]
        if columns.strip() != "*":
            wanted = [c.strip() for c in columns.split(",") if c.strip()]
            rows = [{c: row.get(c) for c in wanted} for row in rows]
        return copy.deepcopy(rows)

    def insert(self, table: str, record: Union[dict, list]) -> list:
        self._record("insert", table)
        rows = self._rows(table)
        inserted = []
        for item in record if isinstance(record, list) else [record]:
            new_row = dict(item)
            if "id" not in new_row:
                new_row["id"] = max((row.get("id", 0) for row in rows), default=0) + 1
            rows.append(new_row)
            inserted.append(copy.deepcopy(new_row))
        return inserted

    def update(self, table: str, values: dict, record_id: Any) -> list:
        self._record("update", table)
        rows = self._rows(table)
        target = _coerce_id(record_id)
        updated = []
        for row in rows:
            if row.get("id") == target:
                row.update(values)
                updated.append(copy.deepcopy(row))
        return updated

    def delete(self, table: str, record_id: Any) -> list:
        self._record("delete", table)
        return self._delete_matching(table, {_coerce_id(record_id)})

    def delete_in(self, table: str, ids: list) -> list:
        self._record("delete_in", table)
        return self._delete_matching(table, {_coerce_id(i) for i in ids})

    def _delete_matching(self, table: str, targets: Iterable[int]) -> list:
        rows = self._rows(table)
        removed = [row for row in rows if row.get("id") in targets]
        rows[:] = [row for row in rows if row.get("id") not in targets]
        return copy.deepcopy(removed)

    def rpc(self, function: str, params: Optional[dict] = None) -> Any:
        self._record("rpc", function)
        handler = self.functions.get(function)
        if handler is None:
            raise StoreError(
                f"Could not find the function public.{function} in the schema cache",
                code="PGRST202",
            )
        return handler(params or {})

"""
Cached CRUD over the proxied tables.

Each table is described by a TableConfig and served by the same TableService;
only the events table has more than one identifier candidate, required
fields, and strict bulk id parsing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Union

from campus_proxy.cache import TableCache
from campus_proxy.errors import (
    FallbackExhausted,
    RecordNotFound,
    UpstreamError,
    ValidationFailed,
)
from campus_proxy.fallback import (
    EVENT_TABLE_CANDIDATES,
    CandidatesExhausted,
    first_success,
)
from campus_proxy.store import StoreClient, StoreError

T = TypeVar("T")


@dataclass(frozen=True)
class TableConfig:
    slot: str
    table: str
    label: str
    candidates: tuple[str, ...] = ()
    required_fields: tuple[str, ...] = ()
    validate_bulk_ids: bool = False

    @property
    def identifiers(self) -> tuple[str, ...]:
        return self.candidates or (self.table,)

    @property
    def plural(self) -> str:
        return f"{self.label}s"


TABLES: tuple[TableConfig, ...] = (
    TableConfig(slot="professors", table="Professors", label="professor"),
    TableConfig(slot="itcourses", table="ITCourses", label="course"),
    TableConfig(slot="file_link", table="File_link", label="file link"),
    TableConfig(
        slot="events",
        table="Event",
        label="event",
        candidates=EVENT_TABLE_CANDIDATES,
        required_fields=("Name", "Start_date", "Location"),
        validate_bulk_ids=True,
    ),
)


def parse_id(value: str) -> Any:
    """Return value as an int when it is numeric, otherwise unchanged."""
    token = value.strip()
    if token.isascii() and token.lstrip("-").isdigit():
        return int(token)
    return token


def parse_id_list(raw: str, *, strict: bool = False) -> list:
    """
    Split a comma-separated id list. Non-numeric tokens are passed through so
    the store decides what to do with them, unless strict is set.
    """
    ids = [parse_id(token) for token in raw.split(",")]
    if strict and any(not isinstance(i, int) for i in ids):
        raise ValidationFailed(
            "Invalid ID format", details="IDs must be comma-separated integers"
        )
    return ids


class TableService:
    """Reads through the cache and invalidates it after confirmed writes."""

    def __init__(self, config: TableConfig, store: StoreClient, cache: TableCache):
        self.config = config
        self.store = store
        self.cache = cache

    def list_records(self) -> list:
        return self.cache.read(self.config.slot, self._fetch)

    def _fetch(self) -> list:
        return self._run(
            "fetch", lambda table: self.store.select(table, order_by="id")
        )

    def create(self, payload: Union[dict, list]) -> list:
        for record in payload if isinstance(payload, list) else [payload]:
            self._check_required(record)
        rows = self._run("insert", lambda table: self.store.insert(table, payload))
        self.cache.invalidate(self.config.slot)
        return rows

    def update(self, record_id: Any, payload: dict) -> list:
        self._check_required(payload)
        rows = self._run(
            "update", lambda table: self.store.update(table, payload, record_id)
        )
        if not rows:
            raise RecordNotFound(
                "No record updated",
                details=(
                    f"No {self.config.label} with ID {record_id} was updated. "
                    "The record may not exist."
                ),
            )
        self.cache.invalidate(self.config.slot)
        return rows

    def delete(self, record_id: Any) -> list:
        rows = self._run("delete", lambda table: self.store.delete(table, record_id))
        self.cache.invalidate(self.config.slot)
        return rows

    def bulk_delete(self, ids: list) -> list:
        rows = self._run("delete", lambda table: self.store.delete_in(table, ids))
        self.cache.invalidate(self.config.slot)
        return rows

    def _check_required(self, payload: dict) -> None:
        missing = [name for name in self.config.required_fields if not payload.get(name)]
        if missing:
            raise ValidationFailed(
                f"Missing required fields: {', '.join(missing)}",
                details=f"{', '.join(self.config.required_fields)} are required",
            )

    def _run(self, verb: str, operation: Callable[[str], T]) -> T:
        identifiers = self.config.identifiers
        if len(identifiers) == 1:
            try:
                return operation(identifiers[0])
            except StoreError as exc:
                raise UpstreamError(exc.message, details=exc.details) from exc

        try:
            _, result = first_success(identifiers, operation)
        except CandidatesExhausted as exc:
            raise FallbackExhausted(
                f"All attempts to {verb} {self.config.plural} failed",
                details=f"All table name variants failed ({exc.describe()})",
            ) from exc
        return result

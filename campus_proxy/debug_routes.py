"""
Schema probing endpoints. Best effort and safe to remove; nothing here is
authoritative about the upstream schema.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from campus_proxy.auth import AuthClient, AuthClientError
from campus_proxy.cache import TableCache
from campus_proxy.dependencies import (
    get_auth_client,
    get_store_client,
    get_table_cache,
)
from campus_proxy.errors import UpstreamError
from campus_proxy.fallback import CandidatesExhausted, first_success
from campus_proxy.schemas import DatabaseInfoResponse, EventStructureResponse
from campus_proxy.store import StoreClient, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["debug"])

EVENT_TABLE_PROBES = ("Event", "event", "events", "Events")
DIRECT_EVENTS_SQL = 'SELECT * FROM "Event" ORDER BY id'


def _list_public_tables(store: StoreClient) -> list:
    return store.select("pg_tables", "tablename", filters={"schemaname": "public"})


@router.get("/debug/tables")
def list_tables(store: StoreClient = Depends(get_store_client)):
    try:
        return store.rpc("list_tables") or []
    except StoreError as exc:
        logger.warning("list_tables rpc failed, trying pg_tables: %s", exc.message)
        try:
            return _list_public_tables(store)
        except StoreError as alt_exc:
            raise UpstreamError(
                exc.message, extra={"alternative_error": alt_exc.message}
            ) from alt_exc


@router.get("/debug/supabase-connection")
def check_connection(
    store: StoreClient = Depends(get_store_client),
    auth: AuthClient = Depends(get_auth_client),
):
    try:
        user = auth.get_user()
    except AuthClientError as exc:
        logger.error("Supabase auth check failed: %s", exc)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Failed to authenticate with Supabase",
                "error": str(exc),
            },
        )

    try:
        tables = _list_public_tables(store)
    except StoreError as exc:
        logger.error("Connected but cannot list tables: %s", exc.message)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Connected to Supabase but cannot list tables",
                "authData": user,
                "error": exc.message,
            },
        )

    return {
        "success": True,
        "message": "Successfully connected to Supabase",
        "tables": tables,
        "user": user,
    }


@router.get("/debug/event-structure", response_model=EventStructureResponse)
def event_structure(store: StoreClient = Depends(get_store_client)):
    try:
        table_name, sample = first_success(
            ("Event", "event"), lambda table: store.select(table, limit=1)
        )
    except CandidatesExhausted as exc:
        raise UpstreamError(
            f"Neither 'Event' nor 'event' tables worked. Errors: {exc.describe()}"
        ) from exc
    return EventStructureResponse(
        status="success",
        tableName=table_name,
        data=sample,
        fields=list(sample[0]) if sample and sample[0] else [],
    )


@router.get("/debug/database-info", response_model=DatabaseInfoResponse)
def database_info(store: StoreClient = Depends(get_store_client)):
    tables = None
    tables_error = None
    try:
        tables = store.rpc("get_tables")
    except StoreError as exc:
        logger.warning("get_tables rpc failed: %s", exc.message)
        tables_error = exc.message

    tables_info: dict[str, dict] = {}
    for table_name in EVENT_TABLE_PROBES:
        try:
            rows = store.select(table_name, limit=1)
        except StoreError as exc:
            tables_info[table_name] = {"exists": False, "error": exc.message}
            continue
        tables_info[table_name] = {
            "exists": True,
            "rowCount": len(rows),
            "columns": list(rows[0]) if rows and rows[0] else [],
        }

    return DatabaseInfoResponse(
        tables=tables, tables_error=tables_error, tablesInfo=tables_info
    )


@router.get("/direct/events")
def direct_events(
    store: StoreClient = Depends(get_store_client),
    cache: TableCache = Depends(get_table_cache),
):
    """Read the events table with raw SQL and refresh its cache slot."""
    try:
        data = store.rpc("execute_sql", {"query_text": DIRECT_EVENTS_SQL})
    except StoreError as exc:
        raise UpstreamError(exc.message, details=exc.details) from exc
    if isinstance(data, list):
        cache.set("events", data)
    return data or []

"""
HTTP routes for the proxy API.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from fastapi import APIRouter, Body, Depends, Query

from campus_proxy.auth import AuthClient, AuthClientError
from campus_proxy.cache import TableCache
from campus_proxy.dependencies import (
    get_auth_client,
    get_store_client,
    get_table_cache,
    table_service,
)
from campus_proxy.errors import Unauthorized, UpstreamError, ValidationFailed
from campus_proxy.schemas import (
    DeleteResponse,
    LoginRequest,
    SessionResponse,
    SuccessResponse,
)
from campus_proxy.store import StoreClient, StoreError
from campus_proxy.tables import (
    TABLES,
    TableConfig,
    TableService,
    parse_id,
    parse_id_list,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/auth/login", response_model=SessionResponse)
def login(payload: LoginRequest, auth: AuthClient = Depends(get_auth_client)):
    if not payload.email or not payload.password:
        raise ValidationFailed("Email and password are required")
    try:
        session = auth.sign_in(payload.email, payload.password)
    except AuthClientError as exc:
        raise Unauthorized(str(exc)) from exc
    return SessionResponse(session=session)


@router.get("/auth/session", response_model=SessionResponse)
def get_session(auth: AuthClient = Depends(get_auth_client)):
    try:
        return SessionResponse(session=auth.get_session())
    except AuthClientError as exc:
        raise ValidationFailed(str(exc)) from exc


@router.post("/auth/logout", response_model=SuccessResponse)
def logout(auth: AuthClient = Depends(get_auth_client)):
    try:
        auth.sign_out()
    except AuthClientError as exc:
        raise ValidationFailed(str(exc)) from exc
    return SuccessResponse(success=True)


@router.post("/clear-cache", response_model=SuccessResponse)
def clear_cache(cache: TableCache = Depends(get_table_cache)):
    cache.clear_all()
    logger.info("All table caches cleared")
    return SuccessResponse(success=True, message="All caches cleared")


@router.get("/query/{table}")
def query_table(
    table: str,
    select: str = Query("*"),
    limit: str = Query("100"),
    order_by: str = Query("id"),
    order_direction: str = Query("asc"),
    store: StoreClient = Depends(get_store_client),
):
    """
    Ad-hoc passthrough to any table. Arguments, limit included, go to the
    store unchecked; this is an inspection tool for admins, not a supported
    query API.
    """
    try:
        data = store.select(
            table,
            select,
            order_by=order_by,
            ascending=order_direction == "asc",
            limit=limit,
        )
    except StoreError as exc:
        raise UpstreamError(exc.message, details=exc.details) from exc
    return data or []


def build_table_router(config: TableConfig) -> APIRouter:
    """
    CRUD routes for one proxied table. DELETE takes either a single id or a
    comma-separated list; a comma selects the bulk path.
    """
    table_router = APIRouter(prefix=f"/{config.slot}", tags=[config.slot])
    get_service = table_service(config.slot)

    @table_router.get("", response_model=list[Optional[dict]])
    def list_records(service: TableService = Depends(get_service)):
        return service.list_records()

    @table_router.post("", response_model=list[dict], status_code=201)
    def create_record(
        payload: Union[dict[str, Any], list[dict[str, Any]]] = Body(...),
        service: TableService = Depends(get_service),
    ):
        return service.create(payload)

    @table_router.put("/{record_id}", response_model=list[dict])
    def update_record(
        record_id: str,
        payload: dict[str, Any] = Body(...),
        service: TableService = Depends(get_service),
    ):
        return service.update(parse_id(record_id), payload)

    @table_router.delete("/{ids}", response_model=DeleteResponse)
    def delete_records(ids: str, service: TableService = Depends(get_service)):
        if "," in ids:
            id_list = parse_id_list(ids, strict=config.validate_bulk_ids)
            rows = service.bulk_delete(id_list)
            message = f"{len(id_list)} {config.plural} deleted successfully"
        else:
            record_id = parse_id(ids)
            rows = service.delete(record_id)
            message = f"{config.label.capitalize()} {record_id} deleted successfully"
        return DeleteResponse(success=True, message=message, data=rows)

    return table_router


for _config in TABLES:
    router.include_router(build_table_router(_config))

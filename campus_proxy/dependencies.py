"""
Dependency wiring for the FastAPI app.

Backends are built once in create_app and kept on app.state; the functions
here hand them to route handlers.
"""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Request
from supabase import create_client

from campus_proxy.auth import AuthClient, InMemoryAuthClient, SupabaseAuthClient
from campus_proxy.cache import TableCache
from campus_proxy.config import Settings
from campus_proxy.store import InMemoryStoreClient, StoreClient, SupabaseStoreClient
from campus_proxy.tables import TableService

logger = logging.getLogger(__name__)


def build_backends(settings: Settings) -> tuple[StoreClient, AuthClient]:
    """
    Return the store and auth clients for the configured environment.
    Without Supabase credentials the in-memory backends are used.
    """
    if settings.use_in_memory_backends or not settings.supabase_configured:
        logger.warning("Supabase is not configured, using in-memory backends")
        return InMemoryStoreClient(), InMemoryAuthClient()

    client = create_client(settings.supabase_url, settings.supabase_anon_key)
    return SupabaseStoreClient(client), SupabaseAuthClient(client)


def get_store_client(request: Request) -> StoreClient:
    return request.app.state.store


def get_auth_client(request: Request) -> AuthClient:
    return request.app.state.auth


def get_table_cache(request: Request) -> TableCache:
    return request.app.state.cache


def table_service(slot: str) -> Callable[[Request], TableService]:
    def get_table_service(request: Request) -> TableService:
        return request.app.state.tables[slot]

    return get_table_service

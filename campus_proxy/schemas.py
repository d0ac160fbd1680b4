"""
Pydantic schemas for the proxy API.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel


class StatusResponse(BaseModel):
    status: Literal["ok"]
    message: str
    supabaseConnected: bool


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SessionResponse(BaseModel):
    session: Optional[dict] = None


class SuccessResponse(BaseModel):
    success: bool
    message: Optional[str] = None


class DeleteResponse(BaseModel):
    success: bool
    message: str
    data: list[Any] = []


class EventStructureResponse(BaseModel):
    status: Literal["success"]
    tableName: str
    data: list[Any]
    fields: list[str]


class DatabaseInfoResponse(BaseModel):
    tables: Any = None
    tables_error: Optional[str] = None
    tablesInfo: dict[str, dict]

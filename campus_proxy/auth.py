"""
Password-session passthrough to Supabase auth, plus an in-memory double.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from supabase import AuthError, Client


class AuthClientError(Exception):
    """An error reported by the upstream auth API."""


class AuthClient(Protocol):
    """Defines the session operations the API exposes to the browser."""

    def sign_in(self, email: str, password: str) -> Optional[dict]:
        ...

    def get_session(self) -> Optional[dict]:
        ...

    def sign_out(self) -> None:
        ...

    def get_user(self) -> Optional[dict]:
        ...


def _dump(model: Any) -> Optional[dict]:
    if model is None:
        return None
    return model.model_dump(mode="json")


class SupabaseAuthClient:
    """Wraps the auth namespace of a supabase-py client."""

    def __init__(self, client: Client):
        self._auth = client.auth

    def sign_in(self, email: str, password: str) -> Optional[dict]:
        try:
            response = self._auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            raise AuthClientError(exc.message) from exc
        return _dump(response.session)

    def get_session(self) -> Optional[dict]:
        try:
            return _dump(self._auth.get_session())
        except AuthError as exc:
            raise AuthClientError(exc.message) from exc

    def sign_out(self) -> None:
        try:
            self._auth.sign_out()
        except AuthError as exc:
            raise AuthClientError(exc.message) from exc

    def get_user(self) -> Optional[dict]:
        try:
            return _dump(self._auth.get_user())
        except AuthError as exc:
            raise AuthClientError(exc.message) from exc


@dataclass
class InMemoryAuthClient:
    """Test double holding a single current session, like the real client."""

    users: dict = field(default_factory=dict)
    session: Optional[dict] = None

    def sign_in(self, email: str, password: str) -> Optional[dict]:
        if self.users.get(email) != password:
            raise AuthClientError("Invalid login credentials")
        self.session = {
            "access_token": uuid.uuid4().hex,
            "token_type": "bearer",
            "user": {"email": email},
        }
        return self.session

    def get_session(self) -> Optional[dict]:
        return self.session

    def sign_out(self) -> None:
        self.session = None

    def get_user(self) -> Optional[dict]:
        if not self.session:
            return None
        return {"user": self.session["user"]}

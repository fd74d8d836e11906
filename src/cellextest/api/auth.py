"""Authentication state owned by an API client."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class AuthContext:
    """Holds the bearer token for one client.

    The token only changes through ``set``/``clear``; the client clears it on
    any 401 response and on logout.
    """

    def __init__(self, token: Optional[str] = None) -> None:
        self._token: Optional[str] = None
        self.set(token)

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def set(self, token: Optional[str]) -> None:
        self._token = token or None

    def clear(self) -> None:
        self._token = None

    def headers(self) -> Dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    def __repr__(self) -> str:
        state = "authenticated" if self.is_authenticated else "anonymous"
        return f"AuthContext({state})"


def extract_token(body: Any) -> Optional[str]:
    """Pull an access token out of a login response body."""

    if not isinstance(body, Mapping):
        return None
    result = body.get("result")
    if isinstance(result, Mapping):
        for key in ("accessToken", "token"):
            value = result.get(key)
            if value:
                return str(value)
    for key in ("accessToken", "token"):
        value = body.get(key)
        if value:
            return str(value)
    return None

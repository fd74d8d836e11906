"""HTTP client for the backend REST API, built on ``requests``."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests

from cellextest.config import Settings
from cellextest.errors import DispatchError

from .auth import AuthContext, extract_token

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"
LOGOUT_PATH = "/auth/logout"
SIGNUP_PATH = "/auth/send-signup-code"
PROFILE_PATH = "/users/me"


@dataclass(frozen=True)
class ApiResponse:
    status: int
    body: Any = None


class ApiClient:
    """Thin wrapper over a ``requests.Session`` that owns an ``AuthContext``.

    Non-2xx answers raise ``DispatchError`` with the decoded body attached;
    any 401 clears the auth context before the error propagates.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_ms: int = 30000,
        auth: Optional[AuthContext] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms
        self.auth = auth if auth is not None else AuthContext()
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "ApiClient":
        return cls(settings.api_url, timeout_ms=settings.request_timeout_ms, **kwargs)

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        data: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> ApiResponse:
        method = method.upper()
        logger.debug("[API Request] %s %s", method, path)
        if json is not None:
            logger.debug("[Request Body] %r", json)
        started = time.perf_counter()
        try:
            response = self.session.request(
                method,
                self.url(path),
                json=json,
                data=data,
                files=files,
                params=params,
                headers=self.auth.headers(),
                timeout=self.timeout_ms / 1000.0,
            )
        except requests.RequestException as exc:
            logger.debug("[API Error] no response for %s %s: %s", method, path, exc)
            raise DispatchError(None, str(exc), method=method, path=path) from exc

        body = _decode(response)
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.debug("[API Response] %s - %.0fms %r", response.status_code, elapsed_ms, body)
        if 200 <= response.status_code < 300:
            return ApiResponse(status=response.status_code, body=body)
        if response.status_code == 401:
            self.auth.clear()
        raise DispatchError(response.status_code, body, method=method, path=path)

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params).body

    def post(self, path: str, data: Any = None) -> Any:
        return self.request("POST", path, json=data if data is not None else {}).body

    def put(self, path: str, data: Any = None) -> Any:
        return self.request("PUT", path, json=data if data is not None else {}).body

    def patch(self, path: str, data: Any = None) -> Any:
        return self.request("PATCH", path, json=data if data is not None else {}).body

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path).body

    def login(self, email: str, password: str) -> Any:
        """Authenticate and store the returned token.

        The login endpoint answers 404 for unknown accounts; that is reported
        as 401 so callers see one status for invalid credentials.
        """

        try:
            response = self.request("POST", LOGIN_PATH, json={"email": email, "password": password})
        except DispatchError as exc:
            if exc.status == 404:
                raise DispatchError(401, exc.body, method=exc.method, path=exc.path) from exc
            raise
        token = extract_token(response.body)
        if token:
            self.auth.set(token)
        return response.body

    def signup(self, user_data: Mapping[str, Any]) -> Any:
        return self.post(SIGNUP_PATH, dict(user_data))

    def logout(self) -> Any:
        try:
            return self.post(LOGOUT_PATH)
        finally:
            self.auth.clear()

    def get_profile(self) -> Any:
        return self.get(PROFILE_PATH)

    def close(self) -> None:
        self.session.close()


def _decode(response: requests.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text

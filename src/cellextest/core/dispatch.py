"""Dispatchers that turn an ``Operation`` plus payload into a response."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from cellextest.api.client import ApiClient
from cellextest.errors import DispatchError

from .models import Operation, Response

logger = logging.getLogger(__name__)

NamedOperation = Callable[[Mapping[str, Any]], Any]


class Dispatcher:
    """Base interface: return a ``Response`` or raise ``DispatchError``."""

    def dispatch(self, operation: Operation, payload: Mapping[str, Any]) -> Response:
        raise NotImplementedError


class OperationRegistry:
    """Registry for named operations (browser flows, composite API calls)."""

    def __init__(self) -> None:
        self._operations: Dict[str, NamedOperation] = {}

    def register(self, name: str, func: NamedOperation, *, replace: bool = False) -> None:
        if name in self._operations and not replace:
            raise ValueError(f"Operation '{name}' already registered")
        self._operations[name] = func

    def get(self, name: str) -> NamedOperation:
        try:
            return self._operations[name]
        except KeyError as exc:
            known = ", ".join(sorted(self._operations)) or "<none>"
            raise KeyError(f"Unknown operation '{name}'. Registered: {known}") from exc

    def names(self) -> Iterable[str]:
        return tuple(sorted(self._operations))

    def __contains__(self, name: object) -> bool:
        return name in self._operations


operation_registry = OperationRegistry()


class HttpDispatcher(Dispatcher):
    """Sends an operation as an HTTP request through an ``ApiClient``."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def dispatch(self, operation: Operation, payload: Mapping[str, Any]) -> Response:
        if operation.encoding == "multipart":
            # Multipart form fields: nulls are omitted, everything else is sent as text.
            files = {key: (None, _form_value(value)) for key, value in payload.items() if value is not None}
            answer = self.client.request(operation.method, operation.path, files=files)
        else:
            answer = self.client.request(operation.method, operation.path, json=dict(payload))
        return Response(status=answer.status, body=answer.body)


class NamedOperationDispatcher(Dispatcher):
    """Runs operations registered by name.

    A callable may return a ``Response`` directly; any other return value is
    wrapped as a 200 body. Failures must be raised as ``DispatchError``.
    """

    def __init__(self, registry: Optional[OperationRegistry] = None) -> None:
        self.registry = registry if registry is not None else operation_registry

    def dispatch(self, operation: Operation, payload: Mapping[str, Any]) -> Response:
        if not operation.name:
            raise ValueError(f"operation {operation.label()} has no name")
        func = self.registry.get(operation.name)
        logger.debug("dispatching named operation %s", operation.name)
        result = func(payload)
        if isinstance(result, Response):
            return result
        return Response(status=200, body=result)


class RoutingDispatcher(Dispatcher):
    """Routes named operations to one dispatcher and HTTP endpoints to another."""

    def __init__(self, http: Optional[Dispatcher] = None, named: Optional[Dispatcher] = None) -> None:
        self.http = http
        self.named = named if named is not None else NamedOperationDispatcher()

    def dispatch(self, operation: Operation, payload: Mapping[str, Any]) -> Response:
        if operation.is_named:
            return self.named.dispatch(operation, payload)
        if self.http is None:
            raise DispatchError(None, "no HTTP dispatcher configured", method=operation.method, path=operation.path)
        return self.http.dispatch(operation, payload)


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)

"""Per-run fixtures that fill ``{token}`` placeholders in case tables."""
from __future__ import annotations

import itertools
import logging
import string
import time
from dataclasses import replace
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from cellextest.api.client import ApiClient
from cellextest.config import ROLES, Settings
from cellextest.core.models import TestCase
from cellextest.errors import DispatchError, SkipCase

logger = logging.getLogger(__name__)

BASE_TOKENS = ("unique_email", "run_id", "category_id", "product_id")
ROLE_TOKEN_SUFFIXES = ("email", "email_upper", "email_mixed")
PROVISIONABLE = ("category", "product")

_formatter = string.Formatter()


def known_tokens() -> frozenset[str]:
    names = set(BASE_TOKENS)
    for role in ROLES:
        names.update(f"{role}_{suffix}" for suffix in ROLE_TOKEN_SUFFIXES)
    return frozenset(names)


def template_fields(value: Any) -> Iterator[str]:
    """Yield placeholder names referenced anywhere inside ``value``."""

    if isinstance(value, str):
        for _, field_name, _, _ in _formatter.parse(value):
            if field_name is not None:
                yield field_name
    elif isinstance(value, Mapping):
        for item in value.values():
            yield from template_fields(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from template_fields(item)


def mixed_case(email: str) -> str:
    local, _, domain = email.partition("@")
    labels = ".".join(part.capitalize() for part in domain.split("."))
    return f"{local.capitalize()}@{labels}" if domain else local.capitalize()


class RunFixtures:
    """Values shared by every case of one run, plus a fresh email per case."""

    def __init__(self, settings: Settings, *, run_id: Optional[str] = None) -> None:
        self.settings = settings
        self.run_id = run_id or time.strftime("%Y%m%d%H%M%S")
        self._sequence = itertools.count(1)
        self._values: Dict[str, Optional[str]] = {
            "run_id": self.run_id,
            "category_id": settings.category_id,
            "product_id": settings.product_id,
        }
        for role, creds in settings.accounts.items():
            self._values[f"{role}_email"] = creds.email
            self._values[f"{role}_email_upper"] = creds.email.upper()
            self._values[f"{role}_email_mixed"] = mixed_case(creds.email)
        self._created_products: List[str] = []

    @property
    def created_products(self) -> List[str]:
        """Ids of products provisioned for this run and not yet deleted."""
        return list(self._created_products)

    def set(self, name: str, value: Optional[str]) -> None:
        self._values[name] = value

    def value(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def available(self, name: str) -> bool:
        return name == "unique_email" or bool(self._values.get(name))

    def unique_email(self) -> str:
        return f"test{self.run_id}{next(self._sequence)}@{self.settings.email_domain}"

    def render(self, case: TestCase) -> TestCase:
        """Return ``case`` with every placeholder filled; raise ``SkipCase`` when a fixture is missing."""

        needed = list(case.requires)
        needed.extend(template_fields(case.operation.path))
        needed.extend(template_fields(case.payload))
        missing = sorted({name for name in needed if not self.available(name)})
        if missing:
            raise SkipCase(f"fixture unavailable: {', '.join(missing)}")
        tokens = {key: value for key, value in self._values.items() if value}
        tokens["unique_email"] = self.unique_email()
        operation = case.operation
        if operation.path:
            operation = replace(operation, path=_render_template(operation.path, tokens))
        payload = {key: _render_value(value, tokens) for key, value in case.payload.items()}
        return replace(case, operation=operation, payload=payload)

    def provision(self, client: ApiClient, kinds: Sequence[str]) -> None:
        """Create or look up run-scoped records; failures leave the fixture unavailable."""

        for kind in kinds:
            if kind == "category":
                self._ensure_category(client)
            elif kind == "product":
                self._ensure_category(client)
                self._ensure_product(client)
            else:
                raise ValueError(f"Unknown provision kind '{kind}'. Expected one of {PROVISIONABLE}")

    def cleanup(self, client: ApiClient) -> None:
        while self._created_products:
            product_id = self._created_products.pop()
            try:
                client.delete(f"/products/{product_id}")
            except DispatchError as exc:
                logger.warning("could not delete provisioned product %s: %s", product_id, exc.detail())

    def _ensure_category(self, client: ApiClient) -> None:
        if self._values.get("category_id"):
            return
        try:
            body = client.get("/categories")
        except DispatchError as exc:
            logger.warning("category lookup failed: %s", exc.detail())
            return
        items = _records(body)
        chosen = next((item for item in items if item.get("name") == self.settings.category_name), None)
        if chosen is None and items:
            chosen = items[0]
        category_id = _record_id(chosen) if chosen else None
        if category_id:
            logger.info("using category %s", category_id)
        self._values["category_id"] = category_id

    def _ensure_product(self, client: ApiClient) -> None:
        if self._values.get("product_id") or not self._values.get("category_id"):
            return
        form = {
            "categoryId": self._values["category_id"],
            "name": f"Cellex Test Product {self.run_id}",
            "price": "100000",
            "stockQuantity": "10",
        }
        files = {key: (None, str(value)) for key, value in form.items()}
        try:
            response = client.request("POST", "/products", files=files)
        except DispatchError as exc:
            logger.warning("product provisioning failed: %s", exc.detail())
            return
        body = response.body
        record = body.get("result") if isinstance(body, Mapping) and isinstance(body.get("result"), Mapping) else body
        product_id = _record_id(record) if isinstance(record, Mapping) else None
        if product_id:
            logger.info("provisioned product %s", product_id)
            self._created_products.append(product_id)
        self._values["product_id"] = product_id


def _render_template(value: str, tokens: Mapping[str, str]) -> str:
    if "{" in value and "}" in value:
        try:
            return value.format(**tokens)
        except KeyError as exc:
            available = ", ".join(sorted(tokens.keys()))
            raise RuntimeError(f"Unknown token {exc} in value '{value}'. Available tokens: {available}") from exc
    return value


def _render_value(value: Any, tokens: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _render_template(value, tokens)
    if isinstance(value, Mapping):
        return {key: _render_value(item, tokens) for key, item in value.items()}
    if isinstance(value, list):
        return [_render_value(item, tokens) for item in value]
    return value


def _records(body: Any) -> List[Mapping[str, Any]]:
    if isinstance(body, Mapping):
        body = body.get("result", body.get("data", body))
        if isinstance(body, Mapping):
            body = body.get("content", body.get("items", []))
    if isinstance(body, list):
        return [item for item in body if isinstance(item, Mapping)]
    return []


def _record_id(record: Mapping[str, Any]) -> Optional[str]:
    for key in ("id", "_id"):
        value = record.get(key)
        if value:
            return str(value)
    return None

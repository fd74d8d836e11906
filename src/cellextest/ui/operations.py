"""Browser flows exposed as named operations for case tables."""
from __future__ import annotations

import logging
from typing import Any, Mapping

from cellextest.core.dispatch import OperationRegistry
from cellextest.core.models import Response
from cellextest.errors import DispatchError

from .login import LoginPage

logger = logging.getLogger(__name__)

UI_LOGIN = "ui.login"


def register_ui_operations(registry: OperationRegistry, login_page: LoginPage) -> None:
    """Register ``ui.login`` so a table row can drive the login form.

    A redirect away from ``/login`` answers 200 with the landing URL. Staying
    on the form answers 401, carrying the error toast text as the message
    when one appeared.
    """

    def ui_login(payload: Mapping[str, Any]) -> Response:
        email = str(payload.get("email") or "")
        password = str(payload.get("password") or "")
        login_page.open()
        login_page.login(email, password)
        if login_page.wait_for_login_success().ok:
            return Response(status=200, body={"url": login_page.current_url()})
        message = login_page.error_text() if login_page.is_error_displayed() else None
        logger.info("ui login for %s stayed on %s", email, login_page.current_url())
        raise DispatchError(401, {"message": message}, method="UI", path=login_page.url)

    registry.register(UI_LOGIN, ui_login, replace=True)

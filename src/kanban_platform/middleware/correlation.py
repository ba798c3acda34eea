"""Request ids for log correlation and error envelopes."""

from __future__ import annotations

import re
import uuid
from contextvars import ContextVar
from typing import Any

from starlette.datastructures import Headers, MutableHeaders

REQUEST_ID_HEADER = "x-request-id"

# Client-supplied ids are echoed into logs and headers, so keep them tame.
_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._:-]{1,128}")

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def get_request_id() -> str:
    """Return the id of the request being handled, or ``""`` outside one."""
    return correlation_id_var.get()


def _incoming_or_new(scope: dict[str, Any]) -> str:
    candidate = Headers(scope=scope).get(REQUEST_ID_HEADER, "")
    if _VALID_REQUEST_ID.fullmatch(candidate):
        return candidate
    return uuid.uuid4().hex


class CorrelationIdMiddleware:
    """Pure ASGI middleware binding an ``x-request-id`` to each HTTP request.

    A well-formed incoming id is reused, anything else is replaced by a
    fresh UUID-4 hex string. The id is echoed on the response.
    """

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _incoming_or_new(scope)

        async def send_with_request_id(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                MutableHeaders(scope=message).append(REQUEST_ID_HEADER, request_id)
            await send(message)

        token = correlation_id_var.set(request_id)
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            correlation_id_var.reset(token)

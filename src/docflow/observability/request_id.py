"""Request ID correlation.

The middleware binds one ID per HTTP request; the logging filter reads it so
every log line emitted while serving the request carries the same ID.
"""

import uuid
from contextvars import ContextVar, Token
from typing import Optional

REQUEST_ID_HEADER = "X-Request-ID"

_request_id: ContextVar[Optional[str]] = ContextVar("docflow_request_id", default=None)


def new_request_id() -> str:
    return uuid.uuid4().hex


def current_request_id() -> str:
    """Request ID bound to the current context, or "-" outside a request"""
    return _request_id.get() or "-"


def bind_request_id(request_id: str) -> Token:
    """Bind a request ID to the current context.

    Returns:
        Token: Pass to reset_request_id once the request is finished
    """
    return _request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)

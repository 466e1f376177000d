"""Utilities for working with request-scoped context metadata.

The FastAPI application assigns a unique request identifier to every inbound
HTTP call.  The helpers below wrap the underlying ``ContextVar`` so middleware,
exception handlers, and tests share one source of truth.
"""

from __future__ import annotations

from contextvars import ContextVar, Token

__all__ = [
    "REQUEST_ID_CONTEXT",
    "clear_request_id",
    "get_request_id",
    "set_request_id",
]

REQUEST_ID_CONTEXT: ContextVar[str] = ContextVar("request_id", default="")


def set_request_id(request_id: str) -> Token[str]:
    """Persist ``request_id`` and return the token needed to restore the prior value."""

    return REQUEST_ID_CONTEXT.set(request_id)


def get_request_id() -> str:
    return REQUEST_ID_CONTEXT.get()


def clear_request_id(token: Token[str] | None = None) -> None:
    """Reset the request identifier, using ``token`` when one is supplied."""

    if token is not None:
        REQUEST_ID_CONTEXT.reset(token)
    else:
        REQUEST_ID_CONTEXT.set("")

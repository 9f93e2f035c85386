"""
Request-scoped context: correlation id and the acting operator level.
"""

import contextvars
import uuid

_request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_operator_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operator", default=None
)


def get_request_id() -> str | None:
    """Get the current request ID from context."""
    return _request_id_var.get()


def get_operator() -> str | None:
    """Operator level bound to the current request, if authenticated."""
    return _operator_var.get()


def bind_operator(level: str | None) -> contextvars.Token:
    return _operator_var.set(level)


def generate_request_id() -> str:
    return f"req-{uuid.uuid4().hex[:16]}"


class RequestContext:
    """
    Context manager for request-scoped operations.

    Usage:
        with RequestContext() as ctx:
            store.dispatch(command)   # logs carry ctx.request_id

        with RequestContext(request_id="req-abc123"):
            ...
    """

    def __init__(self, request_id: str | None = None):
        self.request_id = request_id or generate_request_id()
        self._token: contextvars.Token | None = None
        self._operator_token: contextvars.Token | None = None

    def __enter__(self) -> "RequestContext":
        self._token = _request_id_var.set(self.request_id)
        self._operator_token = _operator_var.set(None)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._operator_token is not None:
            _operator_var.reset(self._operator_token)
        if self._token is not None:
            _request_id_var.reset(self._token)

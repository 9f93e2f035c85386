"""Observability: structured logging and request correlation."""

from .context import RequestContext, bind_operator, get_operator, get_request_id
from .logging import HumanFormatter, JSONFormatter, configure_logging
from .middleware import CorrelationIdMiddleware

__all__ = [
    "CorrelationIdMiddleware",
    "HumanFormatter",
    "JSONFormatter",
    "RequestContext",
    "bind_operator",
    "configure_logging",
    "get_operator",
    "get_request_id",
]

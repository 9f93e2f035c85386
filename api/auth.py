"""
Operator authentication for the Agency OS API.

Operators send their access phrase in the ``X-Access-Phrase`` header.
The phrase is hashed and matched against the hashes stored in the
snapshot settings to resolve an operator level (ceo or team).

Usage:
    from api.auth import require_operator

    @router.post("/tasks/{task_id}/advance")
    def advance(task_id: int, level: OperatorLevel = Depends(require_operator)):
        ...
"""

import logging

from fastapi import HTTPException, Request

from agency_os.models import OperatorLevel
from agency_os.observability import bind_operator
from agency_os.security import authenticate
from agency_os.state_store import get_store

logger = logging.getLogger(__name__)

PHRASE_HEADER = "X-Access-Phrase"


def _get_phrase_from_request(request: Request) -> str | None:
    return request.headers.get(PHRASE_HEADER) or None


async def require_operator(request: Request) -> OperatorLevel:
    """
    Dependency that resolves the calling operator's level.

    Raises HTTPException 401 when the workspace is not set up yet or the
    phrase matches neither stored hash.
    """
    settings = get_store().snapshot.settings
    if not settings.initialized:
        raise HTTPException(status_code=401, detail="Workspace not initialized. POST /api/setup first.")

    level = authenticate(settings, _get_phrase_from_request(request))
    if level is None:
        logger.warning(f"Auth failed for {request.url.path}")
        raise HTTPException(status_code=401, detail=f"Valid {PHRASE_HEADER} header required.")

    bind_operator(level.value)
    request.state.operator = level
    return level


def require_elevated_for(allowed: bool, what: str) -> None:
    """Raise 403 when a standard operator attempts an elevated-only action."""
    if not allowed:
        logger.warning(f"Capability violation: {what}")
        raise HTTPException(status_code=403, detail=f"CEO access required to {what}.")

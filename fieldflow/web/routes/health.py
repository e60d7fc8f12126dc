"""Health check route.

Reports liveness and how many sessions the registry currently holds.
"""

from fastapi import APIRouter, Depends, status

from fieldflow.auth.sessions import SessionRegistry
from fieldflow.web.dependencies import get_sessions

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(sessions: SessionRegistry = Depends(get_sessions)):
    return {"status": "ok", "sessions": sessions.active_count()}

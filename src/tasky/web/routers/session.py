from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from tasky.web.deps import ApiSessionDep

router = APIRouter(tags=["session"])


class SessionView(BaseModel):
    subject: str = Field(..., description="User ID the session belongs to")
    expires_at: datetime = Field(..., description="When the session token expires")


@router.get("/session", summary="Describe the current session")
async def get_session(claims: ApiSessionDep) -> SessionView:
    return SessionView(subject=claims.subject, expires_at=claims.expires_at)

"""Admin dashboard counters."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin
from app.core.database import get_db
from app.schemas.stats import AdminStats
from app.services.authorization import Actor
from app.services.stats import admin_stats

router = APIRouter()


@router.get("/stats", response_model=AdminStats)
def get_stats(
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> AdminStats:
    return admin_stats(db)

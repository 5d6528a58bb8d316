"""Activity feed endpoint."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.activity import Activity
from app.schemas.activity import ActivityRead
from app.services import activities as activities_service

router = APIRouter(prefix="/api/atividades", tags=["activities"])


@router.get("", response_model=list[ActivityRead])
def list_activities(
    limit: int | None = Query(default=None, ge=1, le=500),
    db: Session = Depends(get_db),
) -> list[Activity]:
    return activities_service.list_activities(db, limit=limit)

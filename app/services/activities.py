"""Activity feed helpers."""
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.activity import Activity

logger = logging.getLogger(__name__)


def record_activity(
    db: Session,
    *,
    tipo: str,
    descricao: str,
    metadados: dict[str, Any] | None = None,
    icone: str | None = None,
    cor: str | None = None,
) -> Activity:
    """Append an activity entry; the caller owns the commit."""

    activity = Activity(tipo=tipo, descricao=descricao, metadados=metadados, icone=icone, cor=cor)
    db.add(activity)
    db.flush()
    logger.debug("Activity recorded", extra={"tipo": tipo, "activity_id": activity.id})
    return activity


def list_activities(db: Session, limit: int | None = None) -> list[Activity]:
    stmt = select(Activity).order_by(Activity.data.desc(), Activity.id.desc())
    if limit:
        stmt = stmt.limit(limit)
    return list(db.scalars(stmt).all())

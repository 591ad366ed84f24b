import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.errors import BadRequest
from app.core.db import get_db
from app.core.upsert import replace_workouts, upsert_daily_metrics
from app.models.oura import DailyMetrics, Workout

router = APIRouter(prefix="/oura", tags=["oura"])

logger = logging.getLogger(__name__)

# fields a client may set by hand; total_calories comes only from sync
_MANUAL_FIELDS = ("readiness_score", "sleep_score", "activity_score", "steps")


@router.get("/{date}")
def get_scores(date: str, db: Session = Depends(get_db)):
    row = db.query(DailyMetrics).filter(DailyMetrics.date == date).one_or_none()
    logger.debug("Oura query for %s: %s", date, row.to_dict() if row else None)
    return row.to_dict() if row else {}


@router.post("/{date}")
def save_scores(date: str, payload: Dict[str, Any], db: Session = Depends(get_db)):
    values = {k: payload[k] for k in _MANUAL_FIELDS if k in payload}
    upsert_daily_metrics(db, date, values, partial=True)
    db.commit()
    return {"success": True, "date": date}


@router.get("/{date}/workouts")
def get_workouts(date: str, db: Session = Depends(get_db)):
    workouts = (
        db.query(Workout)
        .filter(Workout.date == date)
        .order_by(Workout.start_time, Workout.id)
        .all()
    )
    return {"workouts": [w.to_dict() for w in workouts]}


@router.post("/{date}/workouts")
def save_workouts(date: str, payload: Dict[str, Any], db: Session = Depends(get_db)):
    """
    Replace every workout stored for `date` with the posted list.
    An empty list clears the day.
    """
    workouts = payload.get("workouts")
    if not isinstance(workouts, list):
        raise BadRequest("workouts must be an array", received={"workouts": workouts})

    rows = [w if isinstance(w, dict) else {} for w in workouts]
    count = replace_workouts(db, date, rows)
    db.commit()
    return {"success": True, "date": date, "count": count}

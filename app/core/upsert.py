"""
Keyed single-row writes shared by the API and the Oura sync.

Every write to oura_scores, hydration_log and food_history goes through
these helpers: read by key, then update the existing row or insert a new
one. The read and the write happen in the caller's session, so committing
once makes the pair a single transaction. Nothing here commits.
"""
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from app.models.hydration import HydrationEntry
from app.models.nutrition import FoodHistoryEntry
from app.models.oura import DailyMetrics, Workout

METRIC_FIELDS = [
    "readiness_score",
    "sleep_score",
    "activity_score",
    "steps",
    "total_calories",
]


def _num(value: Any) -> Any:
    return 0 if value is None else value


def upsert_daily_metrics(
    db: Session,
    date: str,
    values: Dict[str, Any],
    *,
    partial: bool,
) -> DailyMetrics:
    """
    Write one day of ring metrics.

    partial=True (manual API writes): on update only keys present in
    `values` are touched; on insert absent scores are null and absent
    steps are 0.
    partial=False (sync): every metric field is overwritten, None included.
    """
    row = db.query(DailyMetrics).filter(DailyMetrics.date == date).one_or_none()

    if row is None:
        row = DailyMetrics(date=date)
        db.add(row)
        for field in METRIC_FIELDS:
            value = values.get(field)
            if partial and field == "steps":
                value = _num(value)
            setattr(row, field, value)
        return row

    for field in METRIC_FIELDS:
        if partial and field not in values:
            continue
        setattr(row, field, values.get(field))
    return row


def upsert_hydration(db: Session, date: str, cups: Optional[int]) -> HydrationEntry:
    row = db.query(HydrationEntry).filter(HydrationEntry.date == date).one_or_none()

    if row is None:
        row = HydrationEntry(date=date, cups=_num(cups), updated_at=datetime.utcnow())
        db.add(row)
    elif cups is not None:
        row.cups = cups
        row.updated_at = datetime.utcnow()
    return row


def record_food_usage(
    db: Session,
    food_name: str,
    calories: Optional[float] = None,
    protein: Optional[float] = None,
    carbs: Optional[float] = None,
    fat: Optional[float] = None,
) -> FoodHistoryEntry:
    """Bump the quick-add cache for `food_name`, creating it on first use."""
    now = datetime.utcnow()
    row = (
        db.query(FoodHistoryEntry)
        .filter(FoodHistoryEntry.food_name == food_name)
        .one_or_none()
    )

    if row is None:
        row = FoodHistoryEntry(
            food_name=food_name,
            calories=_num(calories),
            protein=_num(protein),
            carbs=_num(carbs),
            fat=_num(fat),
            last_used=now,
            use_count=1,
        )
        db.add(row)
        return row

    row.use_count = (row.use_count or 0) + 1
    if row.last_used is None or now > row.last_used:
        row.last_used = now
    return row


def replace_workouts(db: Session, date: str, rows: Iterable[Dict[str, Any]]) -> int:
    """Delete every workout stored for `date`, then insert `rows` in their place."""
    db.query(Workout).filter(Workout.date == date).delete(synchronize_session=False)

    count = 0
    for data in rows:
        db.add(
            Workout(
                date=date,
                activity=data.get("activity") or "Workout",
                calories=_num(data.get("calories")),
                duration=_num(data.get("duration")),
                distance=_num(data.get("distance")),
                start_time=data.get("start_time"),
            )
        )
        count += 1
    return count

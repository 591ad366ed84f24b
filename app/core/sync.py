"""
Pull one day of Oura data into oura_scores and oura_workouts.

A run always does daily metrics first, then workouts, for a single target
date (yesterday by default, since Oura finalises a day only after it ends).
A failing step is logged and rolled back; it never raises to the caller,
so a bad run cannot take down the server or later scheduled runs.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import date as DateType, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.db import Database
from app.core.oura_client import OuraClient
from app.core.upsert import replace_workouts, upsert_daily_metrics

logger = logging.getLogger(__name__)

# Oura sometimes files a daily record under a neighbouring day for a
# single-day query, so daily series are requested over a padded range.
WINDOW_DAYS_BEFORE = 2
WINDOW_DAYS_AFTER = 1

_CAPITAL = re.compile(r"([A-Z])")


@dataclass
class StepResult:
    step: str
    ok: bool
    detail: str = ""


@dataclass
class SyncReport:
    date: str
    steps: List[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(s.ok for s in self.steps)


def yesterday(today: Optional[DateType] = None) -> str:
    today = today or DateType.today()
    return (today - timedelta(days=1)).isoformat()


def sync_window(date: str) -> Tuple[str, str]:
    d = DateType.fromisoformat(date)
    start = d - timedelta(days=WINDOW_DAYS_BEFORE)
    end = d + timedelta(days=WINDOW_DAYS_AFTER)
    return start.isoformat(), end.isoformat()


def format_activity_name(activity: Optional[str]) -> str:
    """Turn "HighIntensityIntervalTraining" into "High Intensity Interval Training"."""
    if not activity:
        return "Workout"
    spaced = _CAPITAL.sub(r" \1", activity).strip()
    return spaced[:1].upper() + spaced[1:]


def _parse_iso8601(dt_str: Optional[str]) -> Optional[datetime]:
    if not dt_str or not isinstance(dt_str, str):
        return None
    try:
        if dt_str.endswith("Z"):
            dt_str = dt_str[:-1] + "+00:00"
        return datetime.fromisoformat(dt_str)
    except ValueError:
        return None


def workout_duration(workout: Dict[str, Any]) -> int:
    """Provider duration in seconds, else end - start rounded to the second, else 0."""
    duration = workout.get("duration")
    if duration:
        return int(duration)

    start = _parse_iso8601(workout.get("start_datetime"))
    end = _parse_iso8601(workout.get("end_datetime"))
    if start is None or end is None:
        return 0
    return int(round((end - start).total_seconds()))


def _for_day(records: List[Dict[str, Any]], date: str) -> Optional[Dict[str, Any]]:
    for rec in records:
        if isinstance(rec, dict) and rec.get("day") == date:
            return rec
    return None


def sync_daily_metrics(db: Session, client: OuraClient, date: str) -> StepResult:
    logger.info("Syncing daily scores for %s", date)
    try:
        start, end = sync_window(date)

        readiness = _for_day(client.daily_readiness(start, end), date)
        sleep = _for_day(client.daily_sleep(start, end), date)
        activity = _for_day(client.daily_activity(start, end), date)

        values = {
            "readiness_score": readiness.get("score") if readiness else None,
            "sleep_score": sleep.get("score") if sleep else None,
            "activity_score": activity.get("score") if activity else None,
            "steps": activity.get("steps") if activity else None,
            # exercise burn only; Oura's total_calories includes basal
            "total_calories": activity.get("active_calories") if activity else None,
        }

        upsert_daily_metrics(db, date, values, partial=False)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception("Error syncing daily scores for %s", date)
        return StepResult("daily_metrics", False, str(e))

    detail = (
        f"R={values['readiness_score']} S={values['sleep_score']} A={values['activity_score']} "
        f"Steps={values['steps']} ActiveCal={values['total_calories']}"
    )
    logger.info("Daily scores synced for %s: %s", date, detail)
    return StepResult("daily_metrics", True, detail)


def sync_workouts(db: Session, client: OuraClient, date: str) -> StepResult:
    logger.info("Syncing workouts for %s", date)
    try:
        workouts = client.workouts(date, date)

        # An empty answer means "nothing new", never "clear the day".
        # TODO: revisit if a day can legitimately lose all of its workouts upstream.
        if not workouts:
            logger.info("No workouts found for %s", date)
            return StepResult("workouts", True, "no workouts")

        rows = [
            {
                "activity": format_activity_name(w.get("activity")),
                "calories": w.get("calories") or 0,
                "duration": workout_duration(w),
                "distance": w.get("distance") or 0,
                "start_time": w.get("start_datetime"),
            }
            for w in workouts
        ]
        count = replace_workouts(db, date, rows)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception("Error syncing workouts for %s", date)
        return StepResult("workouts", False, str(e))

    summary = ", ".join(f"{r['activity']}({r['calories']}cal)" for r in rows)
    logger.info("%d workout(s) synced for %s: %s", count, date, summary)
    return StepResult("workouts", True, f"{count} workout(s)")


def run_sync(database: Database, client: OuraClient, date: Optional[str] = None) -> SyncReport:
    target = date or yesterday()
    logger.info("Starting Oura sync for %s", target)

    report = SyncReport(date=target)
    db = database.session()
    try:
        report.steps.append(sync_daily_metrics(db, client, target))
        report.steps.append(sync_workouts(db, client, target))
    finally:
        db.close()

    if report.ok:
        logger.info("Oura sync complete for %s", target)
    else:
        failed = [s.step for s in report.steps if not s.ok]
        logger.warning("Oura sync for %s finished with failed steps: %s", target, ", ".join(failed))
    return report

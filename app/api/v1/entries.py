import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.errors import BadRequest
from app.core.db import get_db
from app.core.upsert import record_food_usage
from app.models.nutrition import NutritionEntry

router = APIRouter(prefix="/entries", tags=["entries"])

logger = logging.getLogger(__name__)


@router.get("/{date}")
def list_entries(date: str, db: Session = Depends(get_db)):
    entries = (
        db.query(NutritionEntry)
        .filter(NutritionEntry.date == date)
        .order_by(NutritionEntry.created_at, NutritionEntry.id)
        .all()
    )
    return {"date": date, "entries": [e.to_dict() for e in entries]}


@router.post("/{date}")
def add_entry(date: str, payload: Dict[str, Any], db: Session = Depends(get_db)):
    """
    Log one food for `date` and bump its quick-add history.
    """
    meal_type = payload.get("meal_type")
    food_name = payload.get("food_name")

    if not meal_type or not food_name:
        raise BadRequest(
            "meal_type and food_name are required",
            received={"meal_type": meal_type, "food_name": food_name},
        )

    calories = payload.get("calories")
    protein = payload.get("protein")
    carbs = payload.get("carbs")
    fat = payload.get("fat")

    entry = NutritionEntry(
        date=date,
        meal_type=meal_type,
        food_name=food_name,
        calories=calories or 0,
        protein=protein or 0,
        carbs=carbs or 0,
        fat=fat or 0,
    )
    db.add(entry)

    record_food_usage(db, food_name, calories, protein, carbs, fat)

    db.commit()
    db.refresh(entry)

    logger.info("Logged %s for %s (%s)", food_name, date, meal_type)
    return {"success": True, "id": entry.id}


@router.delete("/{entry_id}")
def delete_entry(entry_id: int, db: Session = Depends(get_db)):
    db.query(NutritionEntry).filter(NutritionEntry.id == entry_id).delete()
    db.commit()
    return {"success": True}

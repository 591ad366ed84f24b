from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.upsert import upsert_hydration
from app.models.hydration import HydrationEntry

router = APIRouter(prefix="/hydration", tags=["hydration"])


@router.get("/{date}")
def get_hydration(date: str, db: Session = Depends(get_db)):
    row = db.query(HydrationEntry).filter(HydrationEntry.date == date).one_or_none()
    if row is None:
        return {"date": date, "cups": 0}
    return row.to_dict()


@router.post("/{date}")
def set_hydration(date: str, payload: Dict[str, Any], db: Session = Depends(get_db)):
    cups = payload.get("cups")
    row = upsert_hydration(db, date, cups)
    db.commit()
    return {"success": True, "date": date, "cups": row.cups}

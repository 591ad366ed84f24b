from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1._params import parse_limit
from app.core.db import get_db
from app.models.nutrition import FoodHistoryEntry

router = APIRouter(tags=["food-history"])

DEFAULT_LIMIT = 10


@router.get("/food-history")
def recent_foods(limit: Optional[str] = None, db: Session = Depends(get_db)):
    """Most recently used foods first."""
    foods = (
        db.query(FoodHistoryEntry)
        .order_by(FoodHistoryEntry.last_used.desc(), FoodHistoryEntry.id.desc())
        .limit(parse_limit(limit, DEFAULT_LIMIT))
        .all()
    )
    return {"foods": [f.to_dict() for f in foods]}

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.errors import BadRequest
from app.api.v1._params import parse_limit
from app.core.db import get_db
from app.models.weight import WeightEntry

router = APIRouter(prefix="/weight", tags=["weight"])

DEFAULT_LIMIT = 50


@router.get("")
def weight_history(limit: Optional[str] = None, db: Session = Depends(get_db)):
    weights = (
        db.query(WeightEntry)
        .order_by(WeightEntry.date.desc(), WeightEntry.created_at.desc(), WeightEntry.id.desc())
        .limit(parse_limit(limit, DEFAULT_LIMIT))
        .all()
    )
    return {"weights": [w.to_dict() for w in weights]}


@router.post("")
def add_weight(payload: Dict[str, Any], db: Session = Depends(get_db)):
    date = payload.get("date")
    weight = payload.get("weight")
    if not date or weight is None:
        raise BadRequest("date and weight are required", received={"date": date, "weight": weight})

    entry = WeightEntry(date=date, weight=weight)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return {"success": True, "id": entry.id}

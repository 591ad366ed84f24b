from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String

from app.core.db import Base


class WeightEntry(Base):
    __tablename__ = "weight_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(String(10), nullable=False, index=True)
    weight = Column(Float, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

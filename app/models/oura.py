from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String, UniqueConstraint

from app.core.db import Base


class DailyMetrics(Base):
    __tablename__ = "oura_scores"
    __table_args__ = (UniqueConstraint("date", name="uq_oura_scores_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(String(10), nullable=False, index=True)

    # null means the ring reported nothing for that day, not zero
    readiness_score = Column(Integer)
    sleep_score = Column(Integer)
    activity_score = Column(Integer)
    steps = Column(Integer)
    # active (exercise) calories, not metabolic + active
    total_calories = Column(Float)

    created_at = Column(DateTime, default=datetime.utcnow)


class Workout(Base):
    __tablename__ = "oura_workouts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(String(10), nullable=False, index=True)

    activity = Column(String)
    calories = Column(Float, default=0)
    duration = Column(Integer, default=0)  # seconds
    distance = Column(Float, default=0)
    start_time = Column(String)  # provider's ISO start_datetime, kept verbatim

    created_at = Column(DateTime, default=datetime.utcnow)

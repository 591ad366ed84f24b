from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String, UniqueConstraint

from app.core.db import Base


class NutritionEntry(Base):
    __tablename__ = "nutrition_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # ISO YYYY-MM-DD, as given in the request path
    date = Column(String(10), nullable=False, index=True)
    meal_type = Column(String, nullable=False, index=True)
    food_name = Column(String, nullable=False)

    calories = Column(Float, default=0)
    protein = Column(Float, default=0)
    carbs = Column(Float, default=0)
    fat = Column(Float, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)


class FoodHistoryEntry(Base):
    """
    Quick-add cache of foods the user has logged before.
    One row per food name; use_count and last_used only move forward.
    """

    __tablename__ = "food_history"
    __table_args__ = (UniqueConstraint("food_name", name="uq_food_history_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    food_name = Column(String, nullable=False, index=True)

    calories = Column(Float, default=0)
    protein = Column(Float, default=0)
    carbs = Column(Float, default=0)
    fat = Column(Float, default=0)

    last_used = Column(DateTime, default=datetime.utcnow, index=True)
    use_count = Column(Integer, default=1, nullable=False)

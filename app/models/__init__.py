from app.models.nutrition import NutritionEntry, FoodHistoryEntry
from app.models.oura import DailyMetrics, Workout
from app.models.weight import WeightEntry
from app.models.hydration import HydrationEntry

__all__ = [
    "NutritionEntry",
    "FoodHistoryEntry",
    "DailyMetrics",
    "Workout",
    "WeightEntry",
    "HydrationEntry",
]

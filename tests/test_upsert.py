"""Tests for the keyed write helpers shared by the API and the sync."""

from __future__ import annotations

from app.core.upsert import (
    record_food_usage,
    replace_workouts,
    upsert_daily_metrics,
    upsert_hydration,
)
from app.models.hydration import HydrationEntry
from app.models.nutrition import FoodHistoryEntry
from app.models.oura import DailyMetrics, Workout

DAY = "2024-01-15"


class TestDailyMetrics:
    def test_partial_insert_defaults(self, session) -> None:
        upsert_daily_metrics(session, DAY, {"sleep_score": 80}, partial=True)
        session.commit()

        row = session.query(DailyMetrics).one()
        assert row.sleep_score == 80
        assert row.readiness_score is None
        assert row.activity_score is None
        assert row.steps == 0

    def test_partial_update_preserves_unsupplied(self, session) -> None:
        upsert_daily_metrics(
            session,
            DAY,
            {"readiness_score": 70, "sleep_score": 80, "steps": 5000, "total_calories": 400},
            partial=False,
        )
        session.commit()

        upsert_daily_metrics(session, DAY, {"steps": 9000}, partial=True)
        session.commit()

        row = session.query(DailyMetrics).one()
        assert row.steps == 9000
        assert row.readiness_score == 70
        assert row.sleep_score == 80
        assert row.total_calories == 400

    def test_full_update_overwrites_with_none(self, session) -> None:
        upsert_daily_metrics(session, DAY, {"readiness_score": 70, "steps": 5000}, partial=False)
        session.commit()

        upsert_daily_metrics(session, DAY, {"sleep_score": 90}, partial=False)
        session.commit()

        row = session.query(DailyMetrics).one()
        assert row.sleep_score == 90
        assert row.readiness_score is None
        assert row.steps is None


class TestHydration:
    def test_insert_then_update_single_row(self, session) -> None:
        upsert_hydration(session, DAY, 4)
        session.commit()
        upsert_hydration(session, DAY, 6)
        session.commit()

        rows = session.query(HydrationEntry).all()
        assert len(rows) == 1
        assert rows[0].cups == 6

    def test_missing_cups(self, session) -> None:
        row = upsert_hydration(session, DAY, None)
        session.commit()
        assert row.cups == 0

        upsert_hydration(session, DAY, 3)
        upsert_hydration(session, DAY, None)
        session.commit()
        assert session.query(HydrationEntry).one().cups == 3


class TestFoodHistory:
    def test_first_use_creates_row(self, session) -> None:
        row = record_food_usage(session, "Oatmeal", calories=150, protein=5)
        session.commit()

        assert row.use_count == 1
        assert row.calories == 150
        assert row.protein == 5
        assert row.carbs == 0
        assert row.fat == 0
        assert row.last_used is not None

    def test_repeat_use_increments_and_moves_forward(self, session) -> None:
        record_food_usage(session, "Oatmeal", calories=150)
        session.commit()
        first_used = session.query(FoodHistoryEntry).one().last_used

        for expected in (2, 3):
            record_food_usage(session, "Oatmeal", calories=999)
            session.commit()
            row = session.query(FoodHistoryEntry).one()
            assert row.use_count == expected
            assert row.last_used >= first_used

        # the cached macros are the ones first recorded
        assert row.calories == 150


class TestReplaceWorkouts:
    def test_replaces_only_target_date(self, session) -> None:
        session.add_all([Workout(date=DAY, activity="A"), Workout(date="2024-01-16", activity="B")])
        session.commit()

        count = replace_workouts(
            session,
            DAY,
            [{"activity": "Run", "calories": 300}, {"duration": 60}],
        )
        session.commit()

        assert count == 2
        rows = session.query(Workout).filter(Workout.date == DAY).order_by(Workout.id).all()
        assert [w.activity for w in rows] == ["Run", "Workout"]
        assert rows[1].calories == 0
        assert rows[1].distance == 0
        assert rows[1].duration == 60
        assert session.query(Workout).filter(Workout.date == "2024-01-16").count() == 1

    def test_empty_list_clears_date(self, session) -> None:
        session.add(Workout(date=DAY, activity="A"))
        session.commit()

        assert replace_workouts(session, DAY, []) == 0
        session.commit()
        assert session.query(Workout).count() == 0

"""Tests for the aggregation engine: incremental fold and full rebuild."""
import random
from datetime import date, datetime, timedelta

import pytest

from fitlog.services.analytics import AnalyticsEngine, AnalyticsSummary, sort_events

from conftest import make_event


def fold_each(engine, events, user_id="user-1"):
    summary = AnalyticsSummary.empty(user_id)
    for event in events:
        summary = engine.fold(summary, event)
    return summary


def scenario_events():
    return [
        make_event("w1", datetime(2024, 1, 1, 9, 0), duration=30, calories=200),
        make_event("w2", datetime(2024, 1, 1, 18, 0), duration=20, calories=150),
        make_event("w3", datetime(2024, 1, 2, 9, 0), duration=40, calories=300),
    ]


@pytest.fixture
def engine():
    return AnalyticsEngine()


class TestConcreteScenarios:
    def test_two_days_three_workouts(self, engine):
        summary = fold_each(engine, scenario_events())

        assert summary.totals.workout_count == 3
        assert summary.totals.total_duration == 90
        assert summary.totals.total_calories_burned == 650

        assert [(b.date, b.workout_count, b.total_duration, b.calories_burned) for b in summary.daily] == [
            (date(2024, 1, 1), 2, 50, 350),
            (date(2024, 1, 2), 1, 40, 300),
        ]
        assert summary.daily[0].workout_ids == ["w1", "w2"]
        assert summary.streak.current == 2
        assert summary.streak.longest == 2

    def test_gap_resets_streak_keeps_longest(self, engine):
        events = scenario_events() + [
            make_event("w4", datetime(2024, 1, 10, 9, 0), duration=25, calories=100),
        ]
        summary = fold_each(engine, events)

        assert summary.streak.current == 1
        assert summary.streak.longest == 2
        assert summary.streak.last_counted_day == date(2024, 1, 10)
        assert summary.totals.workout_count == 4


class TestEquivalence:
    @pytest.mark.parametrize("seed", [1, 7, 42, 2024])
    def test_rebuild_equals_incremental(self, engine, seed):
        """Rebuild of shuffled history equals folding the sorted history one event at a time."""
        rng = random.Random(seed)
        base = datetime(2024, 3, 1, 6, 0)
        events = []
        for i in range(40):
            # Coarse offsets so some events share a day and some share a timestamp
            occurred = base + timedelta(hours=rng.choice([0, 6, 12]) + 24 * rng.randint(0, 20))
            calories = rng.choice([None, 0, 150, 320])
            events.append(make_event(f"w{i}", occurred, duration=rng.randint(0, 90), calories=calories))
        rng.shuffle(events)

        rebuilt = engine.rebuild("user-1", events)
        incremental = fold_each(engine, sort_events(events))

        assert rebuilt == incremental

    def test_empty_history(self, engine):
        rebuilt = engine.rebuild("user-1", [])

        assert rebuilt == AnalyticsSummary.empty("user-1")
        assert rebuilt.weekly is None
        assert rebuilt.streak.last_counted_day is None
        assert rebuilt.last_workout_at is None

    def test_identical_timestamps_keep_supplied_order(self, engine):
        ts = datetime(2024, 1, 1, 9, 0)
        events = [make_event("b", ts), make_event("a", ts), make_event("c", ts)]

        rebuilt = engine.rebuild("user-1", events)

        assert rebuilt.daily[0].workout_ids == ["b", "a", "c"]
        assert rebuilt.weekly.workout_ids == ["b", "a", "c"]


class TestStreakProperties:
    def test_same_day_logging_counts_once(self, engine):
        day = datetime(2024, 5, 6, 7, 0)
        summary = fold_each(engine, [
            make_event("a", day),
            make_event("b", day + timedelta(hours=10)),
        ])

        assert summary.streak.current == 1
        assert summary.totals.workout_count == 2
        assert summary.daily[0].workout_count == 2

    def test_consecutive_days_in_any_submission_order(self, engine):
        d = datetime(2024, 5, 6, 7, 0)
        submitted = [
            make_event("c", d + timedelta(days=2)),
            make_event("a", d),
            make_event("b", d + timedelta(days=1)),
        ]

        summary = engine.rebuild("user-1", submitted)

        assert summary.streak.current == 3
        assert summary.streak.longest >= 3

    def test_break_keeps_earlier_longest(self, engine):
        d = datetime(2024, 5, 6, 7, 0)
        summary = fold_each(engine, [
            make_event("a", d),
            make_event("b", d + timedelta(days=1)),
            make_event("c", d + timedelta(days=2)),
            make_event("d", d + timedelta(days=5)),
        ])

        assert summary.streak.current == 1
        assert summary.streak.longest == 3

    def test_out_of_order_incremental_resets(self, engine):
        """A backfilled earlier workout resets the streak; only a rebuild recovers it."""
        d = datetime(2024, 5, 6, 7, 0)
        summary = fold_each(engine, [
            make_event("a", d),
            make_event("b", d + timedelta(days=1)),
            make_event("late", d - timedelta(days=1)),
        ])

        assert summary.streak.current == 1
        assert summary.streak.longest == 2
        assert summary.streak.last_counted_day == (d - timedelta(days=1)).date()


class TestFold:
    def test_fold_leaves_input_unchanged(self, engine):
        summary = fold_each(engine, scenario_events()[:2])
        before = fold_each(engine, scenario_events()[:2])

        engine.fold(summary, scenario_events()[2])

        assert summary == before

    def test_bucket_conservation(self, engine):
        rng = random.Random(5)
        events = [
            make_event(f"w{i}", datetime(2024, 2, 1) + timedelta(hours=rng.randint(0, 24 * 30)))
            for i in range(60)
        ]
        summary = fold_each(engine, sort_events(events))

        assert sum(b.workout_count for b in summary.daily) == summary.totals.workout_count
        assert len({b.date for b in summary.daily}) == len(summary.daily)

    def test_last_workout_at_tracks_latest_fold(self, engine):
        events = scenario_events()
        summary = fold_each(engine, events)

        assert summary.last_workout_at == events[-1].occurred_at

    def test_weekly_window_is_week_of_last_event(self, engine):
        events = scenario_events() + [make_event("w4", datetime(2024, 1, 10, 9, 0), duration=25, calories=100)]
        summary = engine.rebuild("user-1", events)

        assert summary.weekly.start_date == datetime(2024, 1, 7)
        assert summary.weekly.workout_count == 1
        assert summary.weekly.workout_ids == ["w4"]

from __future__ import annotations

from datetime import timedelta

import pytest

from src.attendance_portal.attendance_portal.core.exceptions import NotFoundError

from conftest import days_before


def test_today_full_counts_back_until_first_gap(streak_service, raw, today):
    raw.mark_full_days(1, days_before(today, 0, 1, 2))
    raw.mark_day(1, today - timedelta(days=3), ["present"] * 5)

    assert streak_service.get_streak(1) == 3


def test_live_streak_is_capped_at_seven_days(streak_service, raw, today):
    # Eight consecutive full days ending today.
    raw.mark_full_days(1, days_before(today, *range(8)))

    assert streak_service.get_streak(1) == 7


def test_partial_today_and_broken_yesterday_gives_zero(streak_service, raw, today):
    raw.mark_day(1, today, ["present", "present", "present", "absent", "absent", "absent"])
    raw.mark_day(1, today - timedelta(days=1), ["present"] * 4)

    assert streak_service.get_streak(1) == 0


def test_not_full_today_reports_best_recent_run(streak_service, raw, today):
    raw.mark_full_days(1, days_before(today, 10, 11, 12, 13, 14))

    assert streak_service.get_streak(1) == 5


def test_fallback_picks_longest_of_several_runs(streak_service, raw, today):
    raw.mark_full_days(1, days_before(today, 2, 3))
    raw.mark_full_days(1, days_before(today, 6, 7, 8, 9))

    assert streak_service.get_streak(1) == 4


def test_fallback_run_is_capped_at_seven(streak_service, raw, today):
    raw.mark_full_days(1, days_before(today, *range(1, 11)))

    assert streak_service.get_streak(1) == 7


def test_fallback_ignores_runs_older_than_search_window(streak_service, raw, today):
    raw.mark_full_days(1, days_before(today, 30, 31, 32, 33))

    assert streak_service.get_streak(1) == 0


def test_missing_days_are_filled_lazily(streak_service, raw, store, today):
    raw.mark_full_days(1, days_before(today, 0, 1, 2))

    streak_service.get_streak(1)

    assert {(1, d) for d in days_before(today, 0, 1, 2, 3)} <= set(store.keys())


def test_existing_summary_is_trusted_for_past_days(streak_service, summary_service, raw, store, today):
    yesterday = today - timedelta(days=1)
    raw.mark_full_days(1, [today, yesterday])
    summary_service.calculate(1, yesterday)
    raw.clear_day(yesterday)

    assert streak_service.get_streak(1) == 2


def test_incomplete_today_is_recomputed(streak_service, summary_service, raw, today):
    raw.mark_day(1, today, ["present"] * 5)
    assert summary_service.calculate(1, today).full_day_attendance is False

    raw.mark(1, today, 6, "present")

    assert streak_service.get_streak(1) == 1


def test_days_are_read_in_descending_order(streak_service, raw, store, today):
    raw.mark_full_days(1, days_before(today, *range(5)))

    streak_service.get_streak(1)

    assert store.reads == sorted(store.reads, reverse=True)
    assert len(store.reads) == len(set(store.reads))


def test_explicit_today_overrides_provider(streak_service, raw, today):
    other_day = today - timedelta(days=40)
    raw.mark_full_days(1, days_before(other_day, 0, 1))

    assert streak_service.get_streak(1, today=other_day) == 2


def test_checkpoint_runs_before_each_store_access(streak_service, raw, today):
    raw.mark_full_days(1, days_before(today, 0, 1))
    calls = []

    streak_service.get_streak(1, checkpoint=lambda: calls.append(1))

    # today, yesterday, and the non-full day that ends the chain
    assert len(calls) == 3


@pytest.mark.parametrize("student_id", [999, 4])
def test_unknown_or_inactive_student(streak_service, student_id):
    with pytest.raises(NotFoundError):
        streak_service.get_streak(student_id)


def test_freshly_computed_today_is_not_recomputed(streak_service, summary_service, raw, store, today):
    raw.mark_full_days(1, days_before(today, 0, 1))
    fresh = summary_service.calculate(1, today)

    assert streak_service.get_streak(1, today_summary=fresh) == 2
    assert store.upserts_by_key[(1, today)] == 1
    assert today not in store.reads


def test_summary_of_another_day_is_ignored(streak_service, summary_service, raw, store, today):
    raw.mark_full_day(1, today)
    other = summary_service.calculate(1, today - timedelta(days=1))

    assert streak_service.get_streak(1, today_summary=other) == 1
    assert store.upserts_by_key[(1, today)] == 1

from __future__ import annotations

import time
from datetime import timedelta

import pytest

from src.attendance_portal.attendance_portal.core.enums import BatchKind
from src.attendance_portal.attendance_portal.core.exceptions import TransientStoreError, ValidationError

from conftest import make_student


def _fail_for(student_id):
    def _hook(sid, work_date):
        if sid == student_id:
            raise TransientStoreError(f"sheet query failed for {sid}")

    return _hook


def test_daily_run_continues_past_a_failing_student(make_batch, raw, store, today):
    yesterday = today - timedelta(days=1)
    raw.mark_full_days(1, [yesterday, today])
    raw.on_find = _fail_for(2)

    report = make_batch().run_daily()

    assert report.kind == BatchKind.DAILY
    assert report.total_students == 3
    assert report.processed_count == 2
    assert report.error_count == 1
    assert [(e.student_id, e.error_type) for e in report.errors] == [(2, "TransientStoreError")]

    first = report.results[0]
    assert first.summary_count == 2
    assert {(1, yesterday), (1, today)} <= set(store.keys())
    assert first.streak == 2
    assert report.results[2].streak == 0


def test_inactive_students_are_not_processed(make_batch, store):
    report = make_batch().run_daily()

    assert [r.student_id for r in report.results] == [1, 2, 3]
    assert all(sid != 4 for sid, _ in store.keys())


def test_weekly_run_covers_seven_days_without_streak(make_batch, store, today):
    report = make_batch().run_weekly()

    assert all(r.summary_count == 7 for r in report.results)
    assert {d for sid, d in store.keys() if sid == 1} == {today - timedelta(days=o) for o in range(7)}
    assert all(r.streak is None for r in report.results)
    assert len(store) == 7 * 3


def test_range_run_recalculates_every_day(make_batch, store):
    report = make_batch().run_range("2025-03-01", "2025-03-03")

    assert report.kind == BatchKind.RANGE
    assert all(r.summary_count == 3 for r in report.results)
    assert report.summary_count == 9
    assert all(isinstance(r.streak, int) for r in report.results)
    assert {d.day for _, d in store.keys() if d.month == 3 and d.day <= 3} == {1, 2, 3}


def test_inverted_range_fails_before_any_work(make_batch, students, store):
    with pytest.raises(ValidationError):
        make_batch().run_range("2025-03-05", "2025-03-01")

    assert students.list_calls == 0
    assert len(store) == 0


def test_listing_failure_fails_the_run(make_batch, students):
    students.fail_listing = True

    with pytest.raises(TransientStoreError):
        make_batch().run_daily()


def test_slow_student_is_reported_as_timeout(make_batch, raw):
    raw.on_find = lambda sid, work_date: time.sleep(0.05)

    report = make_batch(student_timeout_seconds=0.01).run_weekly()

    assert report.error_count == 3
    assert {e.error_type for e in report.errors} == {"OperationTimeoutError"}


def test_cancel_stops_remaining_students(make_batch, raw, store):
    batch = make_batch(max_workers=1)
    raw.on_find = lambda sid, work_date: batch.cancel()

    report = batch.run_weekly()

    assert report.cancelled_count == 3
    assert report.processed_count == 0
    assert len(store) <= 1


def test_cancel_without_running_batch_is_noop(make_batch):
    batch = make_batch()
    batch.cancel()

    assert batch.run_daily().processed_count == 3


def test_many_students_in_parallel(make_batch, students, raw, today):
    for student_id in range(5, 25):
        students.add(make_student(student_id))
        raw.mark_full_day(student_id, today)

    report = make_batch(max_workers=8).run_daily()

    assert report.total_students == 23
    assert report.processed_count == 23
    assert [r.student_id for r in report.results] == sorted(r.student_id for r in report.results)
    assert all(r.streak == 1 for r in report.results if r.student_id >= 5)


def test_report_as_dict(make_batch, raw, fixed_now):
    raw.on_find = _fail_for(3)

    data = make_batch().run_daily().as_dict()

    assert data["kind"] == "daily"
    assert data["started_at"] == fixed_now.isoformat()
    assert data["duration_seconds"] == 0.0
    assert data["processed_count"] == 2
    assert data["errors"][0]["student_id"] == 3


def test_results_keep_counts_not_summaries(make_batch):
    report = make_batch().run_range("2025-01-01", "2025-03-01")

    assert all(r.summary_count == 60 for r in report.results)
    assert all(not hasattr(r, "summaries") for r in report.results)
    assert report.as_dict()["summary_count"] == 180


def test_daily_run_writes_today_once_per_student(make_batch, store, today):
    make_batch().run_daily()

    assert [store.upserts_by_key[(sid, today)] for sid in (1, 2, 3)] == [1, 1, 1]

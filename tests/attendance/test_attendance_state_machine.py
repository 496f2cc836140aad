from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from attendance_backend.common.datetime_utils import DateRange
from attendance_backend.common.pagination import parse_pagination
from attendance_backend.core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    NoOpenSessionError,
)


@pytest.fixture
def scheduled_user(container, make_user, fixed_now):
    user_id = make_user("carol")
    shift_id = container.shift_service.create(name="Morning", start_time="08:00:00", end_time="17:00:00")
    container.schedule_service.create(user_id=user_id, shift_id=shift_id, work_date=fixed_now.date())
    return user_id


def test_full_cycle(container, scheduled_user, fixed_now):
    svc = container.attendance_service

    rec = svc.check_in(scheduled_user, now=fixed_now)
    with pytest.raises(AlreadyCheckedInError) as exc:
        svc.check_in(scheduled_user, now=fixed_now + timedelta(seconds=5))
    assert exc.value.status_code == 409

    out = svc.check_out(scheduled_user, now=fixed_now + timedelta(hours=8))
    assert out.attendance_id == rec.attendance_id
    assert out.check_out_at == fixed_now + timedelta(hours=8)
    assert not out.is_open

    with pytest.raises(AlreadyCheckedOutError):
        svc.check_out(scheduled_user, now=fixed_now + timedelta(hours=9))


def test_checkout_without_any_record(container, make_user, fixed_now):
    user_id = make_user("dave")

    with pytest.raises(NoOpenSessionError) as exc:
        container.attendance_service.check_out(user_id, now=fixed_now)

    assert exc.value.status_code == 404


def test_checkout_keeps_notes_when_none_given(container, scheduled_user, fixed_now):
    svc = container.attendance_service
    svc.check_in(scheduled_user, notes="remote", now=fixed_now)

    out = svc.check_out(scheduled_user, now=fixed_now + timedelta(hours=1))

    assert out.notes == "remote"
    assert svc.last_for_user(scheduled_user).notes == "remote"


def test_checkout_overwrites_notes_when_given(container, scheduled_user, fixed_now):
    svc = container.attendance_service
    svc.check_in(scheduled_user, notes="remote", now=fixed_now)

    svc.check_out(scheduled_user, notes="left early", now=fixed_now + timedelta(hours=1))

    assert svc.last_for_user(scheduled_user).notes == "left early"


def test_lost_checkout_race_reports_already_checked_out(container, store, scheduled_user, fixed_now):
    svc = container.attendance_service
    rec = svc.check_in(scheduled_user, now=fixed_now)

    repo = container.attendance_repo
    original_get_last = repo.get_last_for_user

    def stale_read(user_id):
        # Read the open record, then let a concurrent checkout close it first.
        last = original_get_last(user_id)
        repo.update_check_out(attendance_id=rec.attendance_id, check_out_at=fixed_now + timedelta(minutes=1))
        return last

    repo.get_last_for_user = stale_read

    with pytest.raises(AlreadyCheckedOutError):
        svc.check_out(scheduled_user, now=fixed_now + timedelta(minutes=2))

    assert store.attendance[rec.attendance_id].check_out_at == fixed_now + timedelta(minutes=1)


def test_at_most_one_open_record(container, store, scheduled_user, fixed_now):
    svc = container.attendance_service
    svc.check_in(scheduled_user, now=fixed_now)
    for i in range(3):
        with pytest.raises(AlreadyCheckedInError):
            svc.check_in(scheduled_user, now=fixed_now + timedelta(minutes=i + 1))

    open_records = [a for a in store.attendance.values() if a.user_id == scheduled_user and a.is_open]
    assert len(open_records) == 1


def test_list_for_user_is_most_recent_first_and_covers_whole_days(container, store, make_user):
    user_id = make_user("erin")
    repo = container.attendance_repo
    repo.create_check_in(user_id=user_id, check_in_at=datetime(2026, 2, 1, 23, 59, 59))
    repo.create_check_in(user_id=user_id, check_in_at=datetime(2026, 2, 3, 8, 0, 0))
    repo.create_check_in(user_id=user_id, check_in_at=datetime(2026, 2, 4, 0, 0, 0))

    rows, total = container.attendance_service.list_for_user(
        user_id=user_id,
        date_range=DateRange(start=date(2026, 2, 1), end=date(2026, 2, 3)),
        pagination=parse_pagination(1, 10),
    )

    assert total == 2
    assert [r.check_in_at.day for r in rows] == [3, 1]


def test_list_all_orders_by_checkin_then_username(container, make_user):
    zed = make_user("zed")
    amy = make_user("amy")
    repo = container.attendance_repo
    same_time = datetime(2026, 2, 2, 9, 0, 0)
    repo.create_check_in(user_id=zed, check_in_at=same_time)
    repo.create_check_in(user_id=amy, check_in_at=same_time)
    repo.create_check_in(user_id=zed, check_in_at=datetime(2026, 2, 2, 7, 0, 0))

    rows, total = container.attendance_service.list_all(
        date_range=DateRange(start=date(2026, 2, 1), end=date(2026, 2, 28)),
        pagination=parse_pagination(),
    )

    assert total == 3
    assert [r.user.username for r in rows] == ["amy", "zed", "zed"]
    assert rows[2].check_in_at.hour == 7

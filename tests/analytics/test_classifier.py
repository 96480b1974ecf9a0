from __future__ import annotations

import random
from datetime import datetime, timedelta

import pytest
import pytz

from smartkyzmet.analytics.classifier import AttendanceClassifier, is_early_leave, is_late_arrival
from smartkyzmet.analytics.model import EmployeeAttendanceWindow
from smartkyzmet.analytics.recommendations import RISK_ADVICE, build_recommendations
from smartkyzmet.attendance.model import AttendanceEvent
from smartkyzmet.core.enums import ClassificationBucket, Direction

DAY = datetime(2024, 3, 4)


def ev(day_offset: int, hh: int, mm: int, direction: Direction, ss: int = 0) -> AttendanceEvent:
    return AttendanceEvent(
        employee_id=1,
        time=DAY + timedelta(days=day_offset, hours=hh, minutes=mm, seconds=ss),
        direction=direction,
    )


def window(events, *, employee_id: int = 1, name: str = "Aigerim") -> EmployeeAttendanceWindow:
    return EmployeeAttendanceWindow(
        employee_id=employee_id, employee_name=name, department_name="IT", events=tuple(events)
    )


def days_with_late(total: int, late: int):
    events = []
    for d in range(total):
        arrival = (9, 15) if d < late else (8, 50)
        events.append(ev(d, *arrival, Direction.IN))
        events.append(ev(d, 18, 10, Direction.OUT))
    return events


def test_single_late_day_is_risk():
    a = AttendanceClassifier().assess(window([ev(0, 9, 5, Direction.IN), ev(0, 18, 30, Direction.OUT)]))

    assert a.late_percent == 100.0
    assert a.early_leave_percent == 0.0
    assert a.bucket == ClassificationBucket.RISK


def test_on_time_day_is_disciplined():
    a = AttendanceClassifier().assess(window([ev(0, 8, 55, Direction.IN), ev(0, 18, 5, Direction.OUT)]))

    assert a.late_percent == 0.0
    assert a.early_leave_percent == 0.0
    assert a.bucket == ClassificationBucket.DISCIPLINED


def test_three_late_days_out_of_ten_is_risk():
    a = AttendanceClassifier().assess(window(days_with_late(10, 3)))

    assert a.late_percent == pytest.approx(30.0)
    assert a.bucket == ClassificationBucket.RISK


def test_one_late_day_out_of_ten_is_late():
    a = AttendanceClassifier().assess(window(days_with_late(10, 1)))

    assert a.late_percent == pytest.approx(10.0)
    assert a.bucket == ClassificationBucket.LATE


def test_empty_window_is_disciplined_with_zero_percent():
    a = AttendanceClassifier().assess(window([]))

    assert a.late_percent == 0.0
    assert a.early_leave_percent == 0.0
    assert a.bucket == ClassificationBucket.DISCIPLINED


def test_early_leave_alone_moves_employee_out_of_disciplined():
    events = days_with_late(4, 0)
    events[-1] = ev(3, 17, 45, Direction.OUT)

    a = AttendanceClassifier().assess(window(events))

    assert a.early_leave_percent == pytest.approx(25.0)
    assert a.bucket == ClassificationBucket.LATE


@pytest.mark.parametrize(
    "hh,mm,ss,expected",
    [
        (8, 59, 59, False),
        (9, 0, 0, False),
        (9, 0, 59, False),
        (9, 1, 0, True),
        (10, 0, 0, True),
    ],
)
def test_late_arrival_is_decided_at_minute_resolution(hh, mm, ss, expected):
    assert is_late_arrival(DAY.replace(hour=hh, minute=mm, second=ss)) is expected


def test_leaving_at_six_is_not_early():
    assert is_early_leave(DAY.replace(hour=17, minute=59)) is True
    assert is_early_leave(DAY.replace(hour=18, minute=0)) is False


def test_repeated_late_scans_on_one_day_count_once():
    events = [ev(0, 9, 30, Direction.IN), ev(0, 12, 0, Direction.OUT), ev(0, 13, 10, Direction.IN)]

    a = AttendanceClassifier().assess(window(events))

    assert a.late_percent == 100.0
    assert 0.0 <= a.early_leave_percent <= 100.0


def test_every_employee_lands_in_exactly_one_bucket():
    windows = [
        window(days_with_late(10, 0), employee_id=1, name="A"),
        window(days_with_late(10, 1), employee_id=2, name="B"),
        window(days_with_late(10, 5), employee_id=3, name="C"),
        window([], employee_id=4, name="D"),
    ]

    analysis = AttendanceClassifier().classify(windows)

    ids = [a.employee_id for a in analysis.all()]
    assert sorted(ids) == [1, 2, 3, 4]
    assert [a.employee_id for a in analysis.disciplined] == [1, 4]
    assert [a.employee_id for a in analysis.late] == [2]
    assert [a.employee_id for a in analysis.risk] == [3]
    for a in analysis.all():
        assert 0.0 <= a.late_percent <= 100.0
        assert 0.0 <= a.early_leave_percent <= 100.0


def test_risk_threshold_wins_over_late_threshold():
    classifier = AttendanceClassifier()

    assert classifier.bucket_for(35.0, 0.0) == ClassificationBucket.RISK
    assert classifier.bucket_for(15.0, 30.0) == ClassificationBucket.RISK
    assert classifier.bucket_for(10.0, 9.9) == ClassificationBucket.LATE
    assert classifier.bucket_for(9.9, 9.9) == ClassificationBucket.DISCIPLINED


def test_result_does_not_depend_on_event_order():
    events = days_with_late(10, 3)
    shuffled = list(events)
    random.Random(7).shuffle(shuffled)
    classifier = AttendanceClassifier()

    assert classifier.assess(window(events)) == classifier.assess(window(shuffled))
    assert classifier.classify([window(events)]) == classifier.classify([window(events)])


def test_custom_thresholds_are_honoured():
    classifier = AttendanceClassifier(risk_percent=50.0, late_percent=20.0)

    a = classifier.assess(window(days_with_late(10, 3)))

    assert a.bucket == ClassificationBucket.LATE


def test_recommendations_name_each_risk_employee():
    analysis = AttendanceClassifier().classify(
        [
            window(days_with_late(2, 2), employee_id=1, name="Aigerim"),
            window(days_with_late(2, 0), employee_id=2, name="Bolat"),
        ]
    )

    recs = build_recommendations(analysis)

    assert recs.general
    assert [(r.employee_name, r.recommendation) for r in recs.specific] == [("Aigerim", RISK_ADVICE)]


def utc_ev(day: int, hh: int, mm: int, direction: Direction) -> AttendanceEvent:
    return AttendanceEvent(
        employee_id=1,
        time=pytz.utc.localize(datetime(2024, 3, day, hh, mm)),
        direction=direction,
    )


BISHKEK_WEEK = [
    utc_ev(4, 3, 5, Direction.IN),  # 09:05 local, late
    utc_ev(4, 12, 30, Direction.OUT),  # 18:30 local
    utc_ev(4, 18, 30, Direction.OUT),  # 00:30 local on March 5, early
    utc_ev(5, 2, 50, Direction.IN),  # 08:50 local
    utc_ev(5, 12, 10, Direction.OUT),  # 18:10 local
]


def test_aware_events_are_judged_in_local_time():
    classifier = AttendanceClassifier(tz=pytz.timezone("Asia/Bishkek"))

    tally = classifier.tally(window(BISHKEK_WEEK))
    assessment = classifier.assess(window(BISHKEK_WEEK))

    assert tally.total_days == 2
    assert assessment.late_percent == 50.0
    assert assessment.early_leave_percent == 50.0
    assert assessment.bucket == ClassificationBucket.RISK


def test_aware_events_without_timezone_keep_their_own_wall_clock():
    assessment = AttendanceClassifier().assess(window(BISHKEK_WEEK))

    assert assessment.late_percent == 0.0
    assert assessment.early_leave_percent == 100.0

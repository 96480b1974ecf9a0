from __future__ import annotations

from datetime import date, datetime

from smartkyzmet.analytics.service import AnalyticsService
from smartkyzmet.core.constants import ANALYTICS_UNAVAILABLE
from smartkyzmet.core.enums import Direction

MARCH_FROM = date(2024, 3, 1)
MARCH_TO = date(2024, 3, 31)


def scan_all(container):
    svc = container.attendance_service
    svc.scan("EMPBOLAT", now=datetime(2024, 3, 11, 8, 45))
    svc.scan("EMPAIGERIM", now=datetime(2024, 3, 11, 9, 20))
    svc.scan("EMPAIGERIM", now=datetime(2024, 3, 11, 17, 10))
    svc.scan("EMPBOLAT", now=datetime(2024, 3, 11, 18, 15))


def test_windows_group_events_per_employee_in_time_order(container):
    scan_all(container)

    windows = container.analytics_service.build_windows(date_from=MARCH_FROM, date_to=MARCH_TO)

    assert [w.employee_name for w in windows] == ["Bolat", "Aigerim"]
    aigerim = windows[1]
    assert aigerim.department_name == "IT"
    assert [e.direction for e in aigerim.events] == [Direction.IN, Direction.OUT]
    assert aigerim.events[0].time < aigerim.events[1].time


def test_employees_without_events_are_left_out(container):
    scan_all(container)

    windows = container.analytics_service.build_windows(date_from=MARCH_FROM, date_to=MARCH_TO)

    assert "Dana" not in {w.employee_name for w in windows}


def test_analyze_buckets_and_recommends(container):
    scan_all(container)

    report = container.analytics_service.analyze(date_from=MARCH_FROM, date_to=MARCH_TO)

    assert [a.employee_name for a in report.analysis.risk] == ["Aigerim"]
    assert [a.employee_name for a in report.analysis.disciplined] == ["Bolat"]
    assert [r.employee_name for r in report.recommendations.specific] == ["Aigerim"]


def test_analyze_remote_sends_windows(container, analytics_client):
    scan_all(container)

    payload = container.analytics_service.analyze_remote(date_from=MARCH_FROM, date_to=MARCH_TO)

    assert payload == {"summary": "ok"}
    assert [w.employee_name for w in analytics_client.calls[0]] == ["Bolat", "Aigerim"]


def test_analyze_remote_without_client_reports_unavailable(container):
    svc = AnalyticsService(container.attendance_repo)

    assert svc.analyze_remote(date_from=MARCH_FROM, date_to=MARCH_TO) == ANALYTICS_UNAVAILABLE


def test_analyze_remote_can_be_narrowed_to_one_employee(container, analytics_client, employee_ids):
    scan_all(container)

    container.analytics_service.analyze_remote(
        date_from=MARCH_FROM, date_to=MARCH_TO, employee_id=employee_ids["Aigerim"]
    )

    sent = analytics_client.calls[0]
    assert [w.employee_id for w in sent] == [employee_ids["Aigerim"]]

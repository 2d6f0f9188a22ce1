from datetime import date, datetime, time, timedelta

import pytest

from factories import iso_utc
from mock_data import generate_mock_incidents
from ranking import (
    active_sorted,
    compare,
    is_active,
    priority_value,
    resolved_today,
    sort_incidents,
    start_of_local_day,
    status_urgency,
)


def test_priority_value_orders_by_severity(incident_factory):
    critical = priority_value(incident_factory(rank=3))
    major = priority_value(incident_factory(rank=2))
    minor = priority_value(incident_factory(rank=1))
    unranked = priority_value(incident_factory(rank=None))

    assert (critical, major, minor, unranked) == (1, 2, 3, 99)
    assert critical < major < minor < unranked


@pytest.mark.parametrize(
    "category, expected",
    [
        ("triage", True),
        ("live", True),
        ("learning", True),
        ("LIVE", True),
        ("Learning", True),
        ("closed", False),
        ("resolved", False),
        ("paused", False),
        ("", False),
    ],
)
def test_is_active(incident_factory, category, expected):
    assert is_active(incident_factory(category=category)) is expected


def test_missing_status_is_inactive(incident_factory):
    assert is_active(incident_factory(category=None)) is False


def test_status_urgency():
    assert [status_urgency(c) for c in ("triage", "live", "learning", "closed", "other")] == [
        1,
        2,
        3,
        4,
        5,
    ]
    assert status_urgency("TRIAGE") == 1


def test_compare_prefers_newer_when_tied(incident_factory):
    older = incident_factory(id="old", created_at="2025-07-31T10:00:00Z")
    newer = incident_factory(id="new", created_at="2025-07-31T11:00:00.250Z")

    assert compare(newer, older) < 0
    assert compare(older, newer) > 0
    assert [i.id for i in sort_incidents([older, newer])] == ["new", "old"]


def test_compare_severity_beats_status_and_age(incident_factory):
    minor_triage = incident_factory(id="minor", category="triage", rank=1, created_at="2025-07-31T12:00:00Z")
    critical_learning = incident_factory(id="critical", category="learning", rank=3, created_at="2025-07-30T12:00:00Z")

    assert compare(critical_learning, minor_triage) < 0


def test_compare_status_urgency_breaks_severity_ties(incident_factory):
    live = incident_factory(id="live", category="live", created_at="2025-07-31T12:00:00Z")
    triage = incident_factory(id="triage", category="triage", created_at="2025-07-30T12:00:00Z")

    assert [i.id for i in sort_incidents([live, triage])] == ["triage", "live"]


def test_unparsable_created_at_keeps_input_order(incident_factory):
    # Pairs with an unparsable creation time compare equal; the stable sort
    # leaves them where they were.
    broken = incident_factory(id="broken", created_at="not a date")
    dated = incident_factory(id="dated", created_at="2025-07-31T12:00:00Z")

    assert compare(broken, dated) == 0
    assert compare(dated, broken) == 0
    assert [i.id for i in sort_incidents([broken, dated])] == ["broken", "dated"]
    assert [i.id for i in sort_incidents([dated, broken])] == ["dated", "broken"]


def test_active_sorted_filters_after_sorting(incident_factory):
    incidents = [
        incident_factory(id="closed", category="closed", rank=3),
        incident_factory(id="minor", category="live", rank=1),
        incident_factory(id="unranked", category="triage", rank=None),
        incident_factory(id="major", category="learning", rank=2),
    ]

    assert [i.id for i in active_sorted(incidents)] == ["major", "minor", "unranked"]


def test_mock_incidents_lead_with_critical_live():
    ordered = active_sorted(generate_mock_incidents())

    assert ordered[0].severity.name == "Critical"
    assert ordered[0].category == "live"
    assert [i.id for i in ordered] == ["1", "3", "2"]


class TestResolvedToday:
    @pytest.fixture
    def now(self):
        return datetime.combine(date.today(), time(12, 0)).astimezone()

    def test_counts_update_at_local_midnight(self, incident_factory, now):
        midnight = start_of_local_day(now)
        incident = incident_factory(category="closed", updated_at=iso_utc(midnight))

        assert resolved_today([incident], now) == 1

    def test_ignores_update_before_midnight(self, incident_factory, now):
        before = start_of_local_day(now) - timedelta(seconds=1)
        incident = incident_factory(category="closed", updated_at=iso_utc(before))

        assert resolved_today([incident], now) == 0

    def test_requires_resolved_category(self, incident_factory, now):
        recent = iso_utc(start_of_local_day(now) + timedelta(hours=1))
        incidents = [
            incident_factory(id="a", category="closed", updated_at=recent),
            incident_factory(id="b", category="Resolved", updated_at=recent),
            incident_factory(id="c", category="live", updated_at=recent),
            incident_factory(id="d", category="closed", updated_at=None),
            incident_factory(id="e", category="closed", updated_at="garbage"),
        ]

        assert resolved_today(incidents, now) == 2

    def test_fractional_seconds(self, incident_factory, now):
        updated = (start_of_local_day(now) + timedelta(minutes=5)).replace(microsecond=123456)
        incident = incident_factory(category="closed", updated_at=iso_utc(updated))

        assert "." in incident.updated_at
        assert resolved_today([incident], now) == 1

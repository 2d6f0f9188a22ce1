from datetime import datetime, timezone

from dashboard import DashboardState, build_snapshot
from main import render_dashboard
from mock_data import generate_mock_incidents


def make_snapshot(**changes):
    state = DashboardState(
        incidents=tuple(generate_mock_incidents()),
        last_updated=datetime(2025, 7, 31, 15, 4, 5, tzinfo=timezone.utc),
        **changes,
    )
    return build_snapshot(state)


def test_render_lists_active_incidents_in_order():
    output = render_dashboard(make_snapshot(using_mock_data=False, has_credential=True))
    lines = output.splitlines()

    assert lines[0] == "[15:04:05] Incident War Room (Live)"
    assert "Critical: 1  Active: 3" in lines[1]
    assert "Live: 1  Triage: 1  Learning: 1  Closed: 1" in lines[2]

    names = [line.strip() for line in lines if line.strip().startswith("Incident:")]
    assert names == [
        "Incident: Critical database connection failure",
        "Incident: Authentication service elevated errors",
        "Incident: Payment gateway api degradation",
    ]
    assert "Email service restored" not in output
    assert "Lead: Sarah chen" in output


def test_render_flags_mock_data():
    no_key = render_dashboard(make_snapshot(using_mock_data=True, has_credential=False))
    with_key = render_dashboard(make_snapshot(using_mock_data=True, has_credential=True))

    assert "(No API key - using mock data)" in no_key
    assert "(Using mock data)" in with_key

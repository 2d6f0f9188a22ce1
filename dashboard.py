from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from models import Incident
from ranking import active_sorted, is_active, resolved_today


@dataclass(frozen=True)
class DashboardState:
    """Everything the presentation layer observes, replaced as a whole"""

    incidents: Tuple[Incident, ...] = ()
    is_loading: bool = False
    last_updated: datetime = field(default_factory=lambda: datetime.now().astimezone())
    using_mock_data: bool = False
    has_credential: bool = False


@dataclass(frozen=True)
class DashboardSnapshot:
    active_incidents: List[Incident]
    critical_count: int
    active_count: int
    resolved_today: int
    status_breakdown: List[Tuple[str, int]]
    hourly_trend: List[Tuple[str, int]]
    last_updated: datetime
    is_loading: bool
    using_mock_data: bool
    has_credential: bool


def critical_count(incidents: Iterable[Incident]) -> int:
    return sum(1 for incident in incidents if incident.rank >= 3)


def active_count(incidents: Iterable[Incident]) -> int:
    return sum(1 for incident in incidents if is_active(incident))


def status_breakdown(incidents: Iterable[Incident]) -> List[Tuple[str, int]]:
    categories = [incident.category for incident in incidents]
    return [
        (label, categories.count(label.lower()))
        for label in ("Live", "Triage", "Learning", "Closed")
    ]


def hourly_trend(
    incidents: Iterable[Incident], now: Optional[datetime] = None
) -> List[Tuple[str, int]]:
    """Incidents created in each of the last 24 local clock hours, oldest first"""
    local_now = (now or datetime.now()).astimezone()
    current_hour = local_now.replace(minute=0, second=0, microsecond=0)
    created = [incident.created_instant for incident in incidents]

    buckets = []
    for hours_ago in range(23, -1, -1):
        hour_start = current_hour - timedelta(hours=hours_ago)
        hour_end = hour_start + timedelta(hours=1)
        count = sum(1 for instant in created if instant and hour_start <= instant < hour_end)
        buckets.append((hour_start.astimezone().strftime("%H"), count))
    return buckets


def time_ago(instant: datetime, now: Optional[datetime] = None) -> str:
    seconds = int(((now or datetime.now()).astimezone() - instant).total_seconds())
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60} min ago"
    if seconds < 86400:
        return f"{seconds // 3600} hr ago"
    days = seconds // 86400
    return f"{days} day ago" if days == 1 else f"{days} days ago"


def build_snapshot(state: DashboardState, now: Optional[datetime] = None) -> DashboardSnapshot:
    incidents = list(state.incidents)
    return DashboardSnapshot(
        active_incidents=active_sorted(incidents),
        critical_count=critical_count(incidents),
        active_count=active_count(incidents),
        resolved_today=resolved_today(incidents, now),
        status_breakdown=status_breakdown(incidents),
        hourly_trend=hourly_trend(incidents, now),
        last_updated=state.last_updated,
        is_loading=state.is_loading,
        using_mock_data=state.using_mock_data,
        has_credential=state.has_credential,
    )

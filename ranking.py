"""Display ordering for the war room incident grid.

Incidents sort by severity (Critical first, unranked last), then by status
urgency (triage, live, learning, closed, other), then newest first.
"""

from datetime import datetime, time
from functools import cmp_to_key
from typing import Iterable, List, Optional

from models import Incident

ACTIVE_CATEGORIES = {"triage", "live", "learning"}
RESOLVED_CATEGORIES = {"closed", "resolved"}

STATUS_URGENCY = {
    "triage": 1,
    "live": 2,
    "learning": 3,
    "closed": 4,
}
UNKNOWN_URGENCY = 5
UNRANKED_PRIORITY = 99


def is_active(incident: Incident) -> bool:
    return incident.category in ACTIVE_CATEGORIES


def priority_value(incident: Incident) -> int:
    # rank 3=Critical, 2=Major, 1=Minor; invert so Critical sorts first
    rank = incident.rank
    return 4 - rank if rank > 0 else UNRANKED_PRIORITY


def status_urgency(category: str) -> int:
    return STATUS_URGENCY.get(category.lower(), UNKNOWN_URGENCY)


def compare(a: Incident, b: Incident) -> int:
    """Three-way comparison used for the dashboard order.

    When either creation time cannot be parsed the pair compares equal,
    so a stable sort leaves it in input order.
    """
    a_priority, b_priority = priority_value(a), priority_value(b)
    if a_priority != b_priority:
        return -1 if a_priority < b_priority else 1

    a_urgency, b_urgency = status_urgency(a.category), status_urgency(b.category)
    if a_urgency != b_urgency:
        return -1 if a_urgency < b_urgency else 1

    a_created, b_created = a.created_instant, b.created_instant
    if a_created is None or b_created is None:
        return 0
    if a_created > b_created:
        return -1
    if a_created < b_created:
        return 1
    return 0


def sort_incidents(incidents: Iterable[Incident]) -> List[Incident]:
    return sorted(incidents, key=cmp_to_key(compare))


def active_sorted(incidents: Iterable[Incident]) -> List[Incident]:
    return [incident for incident in sort_incidents(incidents) if is_active(incident)]


def start_of_local_day(now: Optional[datetime] = None) -> datetime:
    local_now = (now or datetime.now()).astimezone()
    return datetime.combine(local_now.date(), time.min).astimezone()


def resolved_today(incidents: Iterable[Incident], now: Optional[datetime] = None) -> int:
    """Count closed or resolved incidents last updated since local midnight"""
    today = start_of_local_day(now)
    count = 0
    for incident in incidents:
        if incident.category not in RESOLVED_CATEGORIES:
            continue
        updated = incident.updated_instant
        if updated is not None and updated >= today:
            count += 1
    return count

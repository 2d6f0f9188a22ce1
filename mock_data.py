import asyncio
from typing import List, Tuple

from models import (
    Incident,
    IncidentSeverity,
    IncidentStatus,
    Role,
    RoleAssignment,
    User,
)

LEAD_ROLE = Role(id="1", name="Incident Lead", shortform="lead", role_type="lead")


def _lead(user_id: str, name: str, email: str) -> Tuple[RoleAssignment, ...]:
    return (RoleAssignment(role=LEAD_ROLE, assignee=User(id=user_id, name=name, email=email)),)


def generate_mock_incidents() -> List[Incident]:
    """Fixed placeholder incidents shown when live data is unavailable"""
    return [
        Incident(
            id="1",
            name="Critical Database Connection Failure",
            status=IncidentStatus(category="live", name="Live"),
            created_at="2025-07-31T14:30:00Z",
            updated_at="2025-07-31T15:00:00Z",
            summary="Primary database cluster experiencing connection timeouts affecting 85% of users",
            severity=IncidentSeverity(name="Critical", rank=3),
            role_assignments=_lead("u1", "Sarah Chen", "sarah@company.com"),
        ),
        Incident(
            id="2",
            name="Payment Gateway API Degradation",
            status=IncidentStatus(category="learning", name="Learning"),
            created_at="2025-07-31T13:15:00Z",
            updated_at="2025-07-31T14:45:00Z",
            summary="Payment processing experiencing 15% failure rate due to third-party API issues",
            severity=IncidentSeverity(name="Major", rank=2),
            role_assignments=_lead("u2", "Mike Rodriguez", "mike@company.com"),
        ),
        Incident(
            id="3",
            name="Authentication Service Elevated Errors",
            status=IncidentStatus(category="triage", name="Triage"),
            created_at="2025-07-31T12:00:00Z",
            updated_at="2025-07-31T13:30:00Z",
            summary="Intermittent login failures reported, users seeing elevated error rates",
            severity=IncidentSeverity(name="Major", rank=2),
            role_assignments=_lead("u3", "Alex Kim", "alex@company.com"),
        ),
        Incident(
            id="4",
            name="Email Service Restored",
            status=IncidentStatus(category="closed", name="Closed"),
            created_at="2025-07-31T10:00:00Z",
            updated_at="2025-07-31T11:30:00Z",
            summary="Email delivery delays have been resolved after infrastructure update",
            severity=IncidentSeverity(name="Minor", rank=1),
            role_assignments=_lead("u4", "Emma Wilson", "emma@company.com"),
        ),
    ]


async def load_mock_incidents(latency: float = 1.0) -> List[Incident]:
    # Simulate loading delay
    if latency > 0:
        await asyncio.sleep(latency)
    return generate_mock_incidents()

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp carrying a UTC designator or offset.

    Fractional seconds of any precision are accepted. Returns None for
    empty, malformed or offset-less values.
    """
    if not value:
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return None
    return parsed


def sentence_case(text: str) -> str:
    if not text:
        return text
    return text[:1].upper() + text[1:].lower()


@dataclass(frozen=True)
class IncidentStatus:
    category: str
    name: str

    @property
    def display_name(self) -> str:
        return sentence_case(self.name)


UNKNOWN_STATUS = IncidentStatus(category="unknown", name="Unknown")


@dataclass(frozen=True)
class IncidentSeverity:
    name: str
    rank: Optional[int] = None

    @property
    def display_name(self) -> str:
        return sentence_case(self.name)


@dataclass(frozen=True)
class Role:
    id: str
    name: str
    shortform: Optional[str] = None
    role_type: Optional[str] = None

    @property
    def is_lead(self) -> bool:
        if self.role_type and self.role_type.lower() == "lead":
            return True
        return "lead" in self.name.lower()


@dataclass(frozen=True)
class User:
    id: str
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def display_name(self) -> Optional[str]:
        return sentence_case(self.name) if self.name else self.name


@dataclass(frozen=True)
class RoleAssignment:
    role: Role
    assignee: Optional[User] = None


@dataclass(frozen=True)
class Incident:
    """One incident snapshot as returned by a single refresh."""

    id: str
    name: str
    created_at: str
    status: Optional[IncidentStatus] = None
    updated_at: Optional[str] = None
    summary: Optional[str] = None
    severity: Optional[IncidentSeverity] = None
    role_assignments: Tuple[RoleAssignment, ...] = ()

    @property
    def safe_status(self) -> IncidentStatus:
        return self.status or UNKNOWN_STATUS

    @property
    def category(self) -> str:
        return self.safe_status.category.lower()

    @property
    def rank(self) -> int:
        if self.severity is None or self.severity.rank is None:
            return 0
        return self.severity.rank

    @property
    def created_instant(self) -> Optional[datetime]:
        return parse_timestamp(self.created_at)

    @property
    def updated_instant(self) -> Optional[datetime]:
        return parse_timestamp(self.updated_at)

    @property
    def lead_assignment(self) -> Optional[RoleAssignment]:
        for assignment in self.role_assignments:
            if assignment.role.is_lead:
                return assignment
        return None

    @property
    def lead(self) -> Optional[User]:
        assignment = self.lead_assignment
        return assignment.assignee if assignment else None

    @property
    def display_name(self) -> str:
        return sentence_case(self.name)

    @property
    def display_summary(self) -> Optional[str]:
        return sentence_case(self.summary) if self.summary else self.summary

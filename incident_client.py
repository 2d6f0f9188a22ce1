import asyncio
import json
import logging
from typing import List, Optional, Tuple

import aiohttp

from models import (
    Incident,
    IncidentSeverity,
    IncidentStatus,
    Role,
    RoleAssignment,
    User,
)


class FetchError(Exception):
    """A live incident fetch failed and the caller should fall back"""


class HttpStatusError(FetchError):
    def __init__(self, status: int):
        super().__init__(f"HTTP {status}")
        self.status = status


class TransportError(FetchError):
    def __init__(self, cause: BaseException):
        super().__init__(f"Transport failure: {cause!r}")
        self.cause = cause


class DecodeError(FetchError):
    def __init__(self, cause: BaseException):
        super().__init__(f"Unable to decode incidents: {cause!r}")
        self.cause = cause


class IncidentClient:
    """Authenticated client for the incident.io incidents list"""

    BASE_URL = "https://api.incident.io"
    INCIDENTS_ENDPOINT = "/v2/incidents"

    def __init__(self, base_url: Optional[str] = None, timeout: float = 15.0):
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session: Optional[aiohttp.ClientSession] = None
        self.logger = logging.getLogger(__name__)

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        if self.session:
            await self.session.close()
            self.session = None

    def _headers(self, credential: str) -> dict:
        return {
            "Authorization": f"Bearer {credential}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    async def fetch_incidents(self, credential: str) -> List[Incident]:
        """Fetch the full incident list in server order.

        Raises HttpStatusError for non-2xx responses, TransportError for
        network failures and timeouts, and DecodeError when the body is not
        the expected incident list.
        """
        if self.session is None:
            raise RuntimeError("IncidentClient must be used as an async context manager")

        url = self.base_url + self.INCIDENTS_ENDPOINT
        try:
            async with self.session.get(url, headers=self._headers(credential)) as response:
                if not 200 <= response.status < 300:
                    self.logger.warning(f"HTTP {response.status} for {self.INCIDENTS_ENDPOINT}")
                    raise HttpStatusError(response.status)

                try:
                    data = await response.json(content_type=None)
                except (json.JSONDecodeError, UnicodeDecodeError) as e:
                    self.logger.error(f"JSON decode error for {self.INCIDENTS_ENDPOINT}: {e}")
                    raise DecodeError(e) from e

        except aiohttp.ClientError as e:
            self.logger.error(f"Network error fetching {self.INCIDENTS_ENDPOINT}: {e}")
            raise TransportError(e) from e
        except asyncio.TimeoutError as e:
            self.logger.error(f"Timed out fetching {self.INCIDENTS_ENDPOINT}")
            raise TransportError(e) from e

        try:
            return self._parse_incidents(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            self.logger.error(f"Unexpected incident payload shape: {e!r}")
            raise DecodeError(e) from e

    async def check_credential(self, credential: str) -> bool:
        """Return True when the endpoint answers 2xx for the credential.

        Only the status is checked; the body is not decoded.
        """
        if self.session is None:
            raise RuntimeError("IncidentClient must be used as an async context manager")

        url = self.base_url + self.INCIDENTS_ENDPOINT
        try:
            async with self.session.get(url, headers=self._headers(credential)) as response:
                if 200 <= response.status < 300:
                    return True
                self.logger.info(f"Credential check failed: HTTP {response.status}")
                return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.info(f"Credential check failed: {e!r}")
            return False

    def _parse_incidents(self, data: dict) -> List[Incident]:
        items = data["incidents"]
        if not isinstance(items, list):
            raise TypeError("incidents must be a list")

        incidents = []
        for inc_data in items:
            if not isinstance(inc_data, dict):
                raise TypeError("incident must be an object")
            status_data = _optional_object(inc_data, "incident_status")
            severity_data = _optional_object(inc_data, "severity")

            incidents.append(
                Incident(
                    id=_required_str(inc_data, "id"),
                    name=_required_str(inc_data, "name"),
                    created_at=_required_str(inc_data, "created_at"),
                    status=IncidentStatus(
                        category=_required_str(status_data, "category"),
                        name=_required_str(status_data, "name"),
                    )
                    if status_data is not None
                    else None,
                    updated_at=_optional_str(inc_data, "updated_at"),
                    summary=_optional_str(inc_data, "summary"),
                    severity=IncidentSeverity(
                        name=_required_str(severity_data, "name"),
                        rank=_optional_rank(severity_data),
                    )
                    if severity_data is not None
                    else None,
                    role_assignments=self._parse_role_assignments(
                        inc_data.get("incident_role_assignments") or []
                    ),
                )
            )
        return incidents

    def _parse_role_assignments(self, items: list) -> Tuple[RoleAssignment, ...]:
        if not isinstance(items, list):
            raise TypeError("incident_role_assignments must be a list")

        assignments = []
        for item in items:
            role_data = _optional_object(item, "role")
            if role_data is None:
                raise KeyError("role")
            assignee_data = _optional_object(item, "assignee")

            assignments.append(
                RoleAssignment(
                    role=Role(
                        id=_required_str(role_data, "id"),
                        name=_required_str(role_data, "name"),
                        shortform=_optional_str(role_data, "shortform"),
                        role_type=_optional_str(role_data, "role_type"),
                    ),
                    assignee=User(
                        id=_required_str(assignee_data, "id"),
                        name=_optional_str(assignee_data, "name"),
                        email=_optional_str(assignee_data, "email"),
                    )
                    if assignee_data is not None
                    else None,
                )
            )
        return tuple(assignments)


def _required_str(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _optional_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{key} must be a string or null, got {type(value).__name__}")
    return value


def _optional_object(data: dict, key: str) -> Optional[dict]:
    value = data.get(key)
    if value is not None and not isinstance(value, dict):
        raise TypeError(f"{key} must be an object or null, got {type(value).__name__}")
    return value


def _optional_rank(data: dict) -> Optional[int]:
    # bool is an int subclass but never a valid rank
    value = data.get("rank")
    if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
        raise TypeError(f"rank must be an integer or null, got {type(value).__name__}")
    return value

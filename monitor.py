import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional

from dashboard import DashboardSnapshot, DashboardState, build_snapshot
from incident_client import FetchError, IncidentClient
from mock_data import load_mock_incidents
from secret_store import SecretStore, mask_credential

StateListener = Callable[[DashboardState], None]


class WarRoomMonitor:
    """Keeps the war room dashboard state fresh.

    Live incidents are fetched with the stored API key; when there is no
    key, or the live call fails for any reason, the fixed mock incident
    set is shown instead and ``using_mock_data`` is set.
    """

    def __init__(
        self,
        secret_store: SecretStore,
        client: Optional[IncidentClient] = None,
        poll_interval: int = 30,
        max_incidents: int = 12,
        mock_latency: float = 1.0,
        log_level: str = "INFO",
    ):
        self.secret_store = secret_store
        self.client = client or IncidentClient()
        self.poll_interval = poll_interval
        self.max_incidents = max_incidents
        self.mock_latency = mock_latency
        self.state = DashboardState()
        self._listeners: List[StateListener] = []
        self._refresh_lock = asyncio.Lock()

        logging.basicConfig(
            level=log_level.upper(),
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.logger = logging.getLogger(__name__)

    async def __aenter__(self):
        await self.client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.__aexit__(exc_type, exc_val, exc_tb)

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def snapshot(self, now: Optional[datetime] = None) -> DashboardSnapshot:
        return build_snapshot(self.state, now)

    def _set_state(self, **changes) -> None:
        self.state = replace(self.state, **changes)
        for listener in self._listeners:
            listener(self.state)

    async def refresh(self, wait: bool = False) -> bool:
        """Run one refresh cycle.

        Returns False when another refresh is already in flight and
        ``wait`` is not set; with ``wait`` the call queues behind it.
        """
        if self._refresh_lock.locked() and not wait:
            self.logger.debug("Refresh already in progress, skipping")
            return False

        async with self._refresh_lock:
            await self._load_incidents()
        return True

    async def _load_incidents(self) -> None:
        stored = self.secret_store.get() if self.secret_store.has() else None
        credential = stored.strip() if stored else ""

        if not credential:
            await self._load_mock_data(has_credential=False)
            return

        self._set_state(is_loading=True, has_credential=True)
        try:
            incidents = await self.client.fetch_incidents(credential)
        except FetchError as e:
            self.logger.warning(f"Live refresh failed, using mock data: {e}")
            await self._load_mock_data(has_credential=True)
            return

        self._set_state(
            incidents=tuple(incidents[: self.max_incidents]),
            is_loading=False,
            last_updated=datetime.now().astimezone(),
            using_mock_data=False,
        )
        self.logger.info(
            f"Loaded {len(self.state.incidents)} of {len(incidents)} incidents"
        )

    async def _load_mock_data(self, has_credential: bool) -> None:
        self._set_state(is_loading=True, has_credential=has_credential)
        incidents = await load_mock_incidents(self.mock_latency)
        self._set_state(
            incidents=tuple(incidents),
            is_loading=False,
            last_updated=datetime.now().astimezone(),
            using_mock_data=True,
        )
        if not has_credential:
            self.logger.info("No API key configured, showing mock data")

    async def save_credential(self, value: str) -> bool:
        credential = value.strip()
        if not credential:
            self.logger.warning("Refusing to save an empty API key")
            return False

        if not self.secret_store.set(credential):
            self.logger.error("Failed to store API key")
            return False

        self.logger.info(f"API key saved ({mask_credential(credential)})")
        await self.refresh(wait=True)
        return True

    async def clear_credential(self) -> bool:
        deleted = self.secret_store.delete()
        if deleted:
            self.logger.info("API key removed")
        else:
            self.logger.error("Failed to remove API key")
        await self.refresh(wait=True)
        return deleted

    async def test_credential(self, value: str) -> bool:
        credential = value.strip()
        if not credential:
            return False
        return await self.client.check_credential(credential)

    async def start_monitoring(self) -> None:
        self.logger.info(
            f"Starting war room monitor (polling every {self.poll_interval}s)"
        )

        try:
            await self.refresh()
            while True:
                await asyncio.sleep(self.poll_interval)
                if self.state.has_credential:
                    await self.refresh()
        except asyncio.CancelledError:
            self.logger.info("Monitoring stopped")
            raise

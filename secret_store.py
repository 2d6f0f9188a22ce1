from typing import Dict, Optional, Protocol, Tuple

SERVICE = "com.tomwentworth.incident-overview"
ACCOUNT = "incident-io-api-key"


class SecretStore(Protocol):
    """Single-slot credential store consumed by the monitor.

    Implementations store values verbatim; callers trim before use.
    """

    def has(self) -> bool: ...

    def get(self) -> Optional[str]: ...

    def set(self, value: str) -> bool: ...

    def delete(self) -> bool: ...


class MemorySecretStore:
    """Process-local secret store keyed by a fixed service/account pair"""

    def __init__(
        self,
        service: str = SERVICE,
        account: str = ACCOUNT,
        initial: Optional[str] = None,
    ):
        self.service = service
        self.account = account
        self._items: Dict[Tuple[str, str], str] = {}
        if initial is not None:
            self.set(initial)

    @property
    def _key(self) -> Tuple[str, str]:
        return (self.service, self.account)

    def has(self) -> bool:
        return self.get() is not None

    def get(self) -> Optional[str]:
        return self._items.get(self._key)

    def set(self, value: str) -> bool:
        self._items[self._key] = value
        return True

    def delete(self) -> bool:
        self._items.pop(self._key, None)
        return True


def mask_credential(value: str) -> str:
    return f"{value[:8]}..."

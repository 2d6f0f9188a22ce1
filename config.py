# config.py
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass
class MonitorConfig:
    # incident.io API
    base_url: str = os.getenv("INCIDENT_IO_BASE_URL", "https://api.incident.io")
    api_key: str = os.getenv("INCIDENT_IO_API_KEY", "")
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))

    # Refresh cycle
    poll_interval: int = int(os.getenv("POLL_INTERVAL_SECONDS", "30"))
    max_incidents: int = int(os.getenv("MAX_INCIDENTS", "12"))
    mock_latency: float = float(os.getenv("MOCK_LATENCY_SECONDS", "1.0"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

import asyncio
import sys

from config import MonitorConfig
from dashboard import DashboardSnapshot, DashboardState, time_ago
from incident_client import IncidentClient
from monitor import WarRoomMonitor
from secret_store import MemorySecretStore


def render_dashboard(snapshot: DashboardSnapshot) -> str:
    lines = []
    updated = snapshot.last_updated.strftime("%H:%M:%S")
    if snapshot.using_mock_data:
        source = "Using mock data" if snapshot.has_credential else "No API key - using mock data"
    else:
        source = "Live"

    lines.append(f"[{updated}] Incident War Room ({source})")
    lines.append(
        f"    Critical: {snapshot.critical_count}  Active: {snapshot.active_count}  "
        f"Resolved today: {snapshot.resolved_today}"
    )
    lines.append(
        "    " + "  ".join(f"{label}: {count}" for label, count in snapshot.status_breakdown)
    )

    for incident in snapshot.active_incidents:
        severity = incident.severity.display_name if incident.severity else "Unknown"
        lead = incident.lead
        lead_name = (lead.display_name or lead.email or lead.id) if lead else "Unassigned"
        created = incident.created_instant
        age = time_ago(created) if created else "unknown"

        lines.append(f"  [{incident.id[:6]}] {severity} - {incident.safe_status.display_name}")
        lines.append(f"    Incident: {incident.display_name}")
        if incident.summary:
            lines.append(f"    Summary: {incident.display_summary}")
        lines.append(f"    Lead: {lead_name}  Opened: {age}")

    return "\n".join(lines)


def print_dashboard(monitor: WarRoomMonitor, state: DashboardState) -> None:
    if state.is_loading:
        return
    print(render_dashboard(monitor.snapshot()))
    print("=" * 50)


async def main():
    import argparse

    config = MonitorConfig()

    parser = argparse.ArgumentParser(description="Incident War Room Monitor")
    parser.add_argument(
        "--interval",
        type=int,
        default=config.poll_interval,
        help=f"Polling interval in seconds (default: {config.poll_interval})",
    )
    parser.add_argument(
        "--test", action="store_true", help="Run once and exit (for testing)"
    )
    parser.add_argument(
        "--api-key",
        default=config.api_key,
        help="incident.io API key (default: $INCIDENT_IO_API_KEY)",
    )
    parser.add_argument("--base-url", default=config.base_url, help="incident.io API base URL")
    parser.add_argument(
        "--timeout",
        type=float,
        default=config.request_timeout,
        help=f"Request timeout in seconds (default: {config.request_timeout:g})",
    )
    parser.add_argument(
        "--mock-latency",
        type=float,
        default=config.mock_latency,
        help="Simulated delay before mock data is shown, in seconds",
    )

    args = parser.parse_args()

    monitor = WarRoomMonitor(
        MemorySecretStore(),
        client=IncidentClient(base_url=args.base_url, timeout=args.timeout),
        poll_interval=args.interval,
        max_incidents=config.max_incidents,
        mock_latency=args.mock_latency,
        log_level=config.log_level,
    )
    monitor.add_listener(lambda state: print_dashboard(monitor, state))

    async with monitor:
        if args.api_key.strip():
            monitor.secret_store.set(args.api_key.strip())

        if args.test:
            print("Testing mode - running once...")
            await monitor.refresh()
        else:
            await monitor.start_monitoring()


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nGoodbye!")
        sys.exit(0)


if __name__ == "__main__":
    run()

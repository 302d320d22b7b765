"""Daemon connectivity, information and event monitoring."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from anchor_client.config import Settings, get_settings
from anchor_client.models import (
    DaemonStatus,
    HealthReport,
    MemoryUsage,
    OperationResult,
    SystemInfo,
    SystemStats,
    SystemVersion,
)
from anchor_client.utils import get_logger
from anchor_client.utils.api_client import ControlPlaneClient
from anchor_client.utils.audit_logger import AuditEventType, get_audit_logger
from anchor_client.utils.metrics_collector import get_metrics_collector

logger = get_logger(__name__)

# Delay before polling again after a failed poll
EVENT_POLL_ERROR_RETRY_SECONDS = 30


class SystemMonitor:
    """Owns daemon connectivity, info, version and the event buffer."""

    resource = "system"

    def __init__(self, client: ControlPlaneClient, settings: Settings | None = None) -> None:
        """
        Initialize system monitor.

        Args:
            client: Control-plane client
            settings: Settings (defaults to the cached settings)
        """
        self.client = client
        self.settings = settings or get_settings()
        self.metrics = get_metrics_collector()
        self.audit = get_audit_logger()
        self.system_info: Optional[SystemInfo] = None
        self.system_version: Optional[SystemVersion] = None
        self._events: List[Dict[str, Any]] = []
        self.connected = False
        self.last_error: Optional[str] = None
        self.last_updated: Optional[datetime] = None
        self._in_flight = 0
        self._polling = False
        self._poll_task: Optional[asyncio.Task] = None
        self._observers: List[Callable[["SystemMonitor"], None]] = []

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def events(self) -> List[Dict[str, Any]]:
        """Buffered daemon events, newest first."""
        return list(self._events)

    def subscribe(self, observer: Callable[["SystemMonitor"], None]) -> Callable[[], None]:
        """Register an observer called after every state change."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        for observer in list(self._observers):
            try:
                observer(self)
            except Exception as e:
                logger.error("System observer failed", extra={"error": str(e)})

    def clear_error(self) -> None:
        self.last_error = None
        self._notify()

    def _fail(self, message: str) -> OperationResult:
        self.last_error = message
        self._notify()
        return OperationResult.fail(message)

    # Connectivity and info

    async def test_connection(self) -> OperationResult:
        try:
            await self.client.test_connection()
        except Exception as e:
            self.connected = False
            logger.warning("Connection test failed", extra={"error": str(e)})
            return self._fail(f"Connection test failed: {e}")
        self.connected = True
        self._notify()
        return OperationResult.ok()

    async def fetch_system_info(self) -> OperationResult:
        """Fetch daemon information; updates connectivity either way."""
        error: Exception | None = None
        self._in_flight += 1
        try:
            info = SystemInfo.model_validate(await self.client.get_system_info() or {})
        except Exception as e:
            error = e
        finally:
            self._in_flight -= 1

        if error is not None:
            self.connected = False
            self.metrics.record_fetch(self.resource, False)
            logger.error("Failed to fetch system info", extra={"error": str(error)})
            return self._fail(str(error))

        self.system_info = info
        self.connected = True
        self.last_error = None
        self.last_updated = datetime.now(timezone.utc)
        self.metrics.record_fetch(self.resource, True)
        self._notify()
        return OperationResult.ok(info)

    async def fetch_system_version(self) -> OperationResult:
        try:
            data = await self.client.get_system_version()
            self.system_version = SystemVersion.model_validate(data or {})
        except Exception as e:
            logger.error("Failed to get system version", extra={"error": str(e)})
            return self._fail(f"Failed to get system version: {e}")
        self._notify()
        return OperationResult.ok(self.system_version)

    # Events

    async def poll_events(self) -> OperationResult:
        """
        Poll the events endpoint once and prepend new events to the buffer.

        Returns:
            OperationResult with the number of events received
        """
        try:
            data = await self.client.get_system_events()
        except Exception as e:
            logger.error("Failed to poll system events", extra={"error": str(e)})
            return self._fail(f"Failed to poll system events: {e}")

        received: List[Dict[str, Any]] = []
        if isinstance(data, dict):
            received = list(data.get("events") or [])
        elif isinstance(data, list):
            received = data

        if received:
            self._events = (received + self._events)[: self.settings.event_buffer_size]
            self._notify()
        return OperationResult.ok(len(received))

    async def start_event_polling(self, interval_s: float | None = None) -> None:
        """Start polling the events endpoint in the background."""
        if self._polling:
            logger.warning("Event polling already running")
            return

        self._polling = True
        interval = interval_s or self.settings.event_poll_interval_s
        self._poll_task = asyncio.create_task(self._run_poll_loop(interval))
        logger.info("Event polling started", extra={"interval_s": interval})

    async def stop_event_polling(self) -> None:
        if not self._polling:
            return

        self._polling = False
        if self._poll_task:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                # Expected when the loop is cancelled mid-sleep
                pass
            self._poll_task = None
        logger.info("Event polling stopped")

    async def _run_poll_loop(self, interval: float) -> None:
        while self._polling:
            try:
                result = await self.poll_events()
                await asyncio.sleep(
                    interval if result.success else max(interval, EVENT_POLL_ERROR_RETRY_SECONDS)
                )
            except asyncio.CancelledError:
                break

    def clear_events(self) -> None:
        self._events = []
        self._notify()

    # Derived views

    @property
    def system_stats(self) -> Optional[SystemStats]:
        if self.system_info is None:
            return None
        return SystemStats.from_info(self.system_info)

    @property
    def memory_usage(self) -> Optional[MemoryUsage]:
        stats = self.system_stats
        if stats is None or not stats.memory_total:
            return None
        # Daemon info only carries the total
        return MemoryUsage(total=stats.memory_total, available=stats.memory_total)

    def get_daemon_status(self) -> DaemonStatus:
        version = self.system_version
        return DaemonStatus(
            running=self.connected,
            version=(version.version if version else None) or "Unknown",
            api_version=(version.api_version if version else None) or "Unknown",
            git_commit=(version.git_commit if version else None) or "Unknown",
            build_time=(version.build_time if version else None) or "Unknown",
        )

    # Maintenance

    async def prune_system(self) -> OperationResult:
        """Ask the daemon to prune unused data."""
        try:
            data = await self.client.prune_system()
        except Exception as e:
            self.metrics.record_mutation(self.resource, "prune", False)
            self.audit.log_event(AuditEventType.SYSTEM_PRUNE, success=False)
            logger.error("Failed to prune system", extra={"error": str(e)})
            return self._fail(f"Failed to prune system: {e}")

        self.metrics.record_mutation(self.resource, "prune", True)
        self.audit.log_event(
            AuditEventType.SYSTEM_PRUNE,
            success=True,
            details=data if isinstance(data, dict) else None,
        )
        return OperationResult.ok(data)

    async def run_health_check(self) -> HealthReport:
        """
        Check API connectivity and daemon availability.

        Returns:
            HealthReport; never raises
        """
        checks = {"api_connection": False, "daemon_running": False}
        try:
            connection = await self.test_connection()
            checks["api_connection"] = connection.success
            if connection.success:
                info = await self.fetch_system_info()
                checks["daemon_running"] = info.success
        except Exception as e:
            logger.error("Health check failed", extra={"error": str(e)})
            return HealthReport(
                healthy=False,
                checks=checks,
                timestamp=datetime.now(timezone.utc),
                error=str(e),
            )

        return HealthReport(
            healthy=all(checks.values()),
            checks=checks,
            timestamp=datetime.now(timezone.utc),
        )

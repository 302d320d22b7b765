"""Manager modules composing repositories into unified operations."""

from .orchestrator import Orchestrator
from .system_monitor import SystemMonitor

__all__ = ["Orchestrator", "SystemMonitor"]

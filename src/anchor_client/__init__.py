"""Anchor Client: orchestration and query layer over a container control-plane API."""

from anchor_client.managers import Orchestrator, SystemMonitor
from anchor_client.query import apply_query, resolve_dependencies

__version__ = "0.1.0"

__all__ = ["Orchestrator", "SystemMonitor", "apply_query", "resolve_dependencies", "__version__"]

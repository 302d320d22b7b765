"""Data models for Anchor Client."""

from .base import ResourceModel
from .containers import STOPPED_STATUSES, Container, ContainerStatus, Mount, PortMapping
from .images import NONE_SENTINEL, Image
from .results import (
    BulkResult,
    CleanupResult,
    CleanupStepResult,
    ContainerStats,
    Dependencies,
    DependencyReport,
    DependentContainer,
    GlobalStats,
    ImageStats,
    InitializeResult,
    OperationResult,
    PruneResult,
    RefreshResult,
    SearchResults,
    VolumeStats,
)
from .system import (
    DaemonStatus,
    HealthReport,
    MemoryUsage,
    SystemInfo,
    SystemStats,
    SystemUsage,
    SystemVersion,
)
from .volumes import Volume, VolumeUsage

__all__ = [
    "BulkResult",
    "CleanupResult",
    "CleanupStepResult",
    "Container",
    "ContainerStats",
    "ContainerStatus",
    "DaemonStatus",
    "Dependencies",
    "DependencyReport",
    "DependentContainer",
    "GlobalStats",
    "HealthReport",
    "Image",
    "ImageStats",
    "InitializeResult",
    "MemoryUsage",
    "Mount",
    "NONE_SENTINEL",
    "OperationResult",
    "PortMapping",
    "PruneResult",
    "RefreshResult",
    "ResourceModel",
    "STOPPED_STATUSES",
    "SearchResults",
    "SystemInfo",
    "SystemStats",
    "SystemUsage",
    "SystemVersion",
    "Volume",
    "VolumeStats",
    "VolumeUsage",
]

"""Daemon information records and derived system views."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .base import ResourceModel


class SystemInfo(ResourceModel):
    """Daemon information as reported by the system info endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    version: str | None = None
    containers: int = 0
    containers_running: int = Field(default=0, alias="containersRunning")
    containers_paused: int = Field(default=0, alias="containersPaused")
    containers_stopped: int = Field(default=0, alias="containersStopped")
    images: int = 0
    mem_total: int = Field(default=0, alias="memTotal")
    ncpu: int = 0
    architecture: str | None = None
    operating_system: str | None = Field(default=None, alias="operatingSystem")
    kernel_version: str | None = Field(default=None, alias="kernelVersion")


class SystemVersion(ResourceModel):
    """Daemon version details."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    version: str | None = None
    api_version: str | None = Field(default=None, alias="apiVersion")
    git_commit: str | None = Field(default=None, alias="gitCommit")
    build_time: str | None = Field(default=None, alias="buildTime")


class SystemStats(BaseModel):
    """Normalized daemon statistics with defaults filled in."""

    docker_version: str = "Unknown"
    containers: int = 0
    containers_running: int = 0
    containers_paused: int = 0
    containers_stopped: int = 0
    images: int = 0
    memory_total: int = 0
    cpu_count: int = 0
    architecture: str = "Unknown"
    operating_system: str = "Unknown"
    kernel_version: str = "Unknown"

    @classmethod
    def from_info(cls, info: SystemInfo) -> "SystemStats":
        return cls(
            docker_version=info.version or "Unknown",
            containers=info.containers,
            containers_running=info.containers_running,
            containers_paused=info.containers_paused,
            containers_stopped=info.containers_stopped,
            images=info.images,
            memory_total=info.mem_total,
            cpu_count=info.ncpu,
            architecture=info.architecture or "Unknown",
            operating_system=info.operating_system or "Unknown",
            kernel_version=info.kernel_version or "Unknown",
        )


class MemoryUsage(BaseModel):
    """Host memory view; only the total is known from daemon info."""

    total: int
    used: int = 0
    available: int
    percentage: float = 0.0


class DaemonStatus(BaseModel):
    """Connectivity and version summary of the daemon."""

    running: bool
    version: str = "Unknown"
    api_version: str = "Unknown"
    git_commit: str = "Unknown"
    build_time: str = "Unknown"


class HealthReport(BaseModel):
    """Result of a health check run."""

    healthy: bool
    checks: dict[str, bool]
    timestamp: datetime
    error: str | None = None


class SystemUsage(BaseModel):
    """Resource counts known to the client."""

    containers: int = 0
    images: int = 0
    volumes: int = 0

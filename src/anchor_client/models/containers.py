"""Container records returned by the control-plane API."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from .base import ResourceModel


class ContainerStatus(str, Enum):
    """Known container states."""

    CREATED = "created"
    RUNNING = "running"
    PAUSED = "paused"
    RESTARTING = "restarting"
    EXITED = "exited"
    STOPPED = "stopped"


STOPPED_STATUSES = frozenset({ContainerStatus.EXITED.value, ContainerStatus.STOPPED.value})


class PortMapping(ResourceModel):
    """Published port of a container."""

    public_port: int | None = Field(default=None, alias="publicPort")
    private_port: int | None = Field(default=None, alias="privatePort")
    type: str | None = None


class Mount(ResourceModel):
    """Volume or bind mount of a container."""

    source: str = ""
    destination: str = ""


class Container(ResourceModel):
    """Container as listed by the control plane."""

    id: str = ""
    # First entry is canonical and usually carries a leading "/"
    names: list[str] = Field(default_factory=list)
    image: str = ""
    status: str = ""
    ports: list[PortMapping] = Field(default_factory=list)
    mounts: list[Mount] = Field(default_factory=list)
    created: datetime | None = None
    state: dict[str, Any] | None = None

    @property
    def is_running(self) -> bool:
        return self.status == ContainerStatus.RUNNING.value

    @property
    def is_stopped(self) -> bool:
        return self.status in STOPPED_STATUSES

    def __repr__(self) -> str:
        """String representation of Container."""
        return f"<Container(id={self.id[:12]}, image={self.image}, status={self.status})>"

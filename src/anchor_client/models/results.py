"""Result envelopes returned across the presentation boundary."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from .containers import Container
from .images import Image
from .system import SystemStats
from .volumes import Volume


class OperationResult(BaseModel):
    """Outcome of a single operation."""

    success: bool = Field(..., description="Whether the operation succeeded")
    data: Any = Field(None, description="Payload returned by the operation")
    error: Optional[str] = Field(None, description="Error message on failure")

    @classmethod
    def ok(cls, data: Any = None) -> "OperationResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "OperationResult":
        return cls(success=False, error=error)


class BulkResult(BaseModel):
    """Aggregate counts of a bulk operation."""

    successful: int = 0
    failed: int = 0
    total: int = 0

    @classmethod
    def from_outcomes(cls, outcomes: list[bool]) -> "BulkResult":
        successful = sum(1 for outcome in outcomes if outcome)
        return cls(successful=successful, failed=len(outcomes) - successful, total=len(outcomes))


class PruneResult(BulkResult):
    """Aggregate counts of a prune with the space it reclaimed."""

    success: bool = True
    space_reclaimed: int = 0
    error: Optional[str] = None


class InitializeResult(BaseModel):
    """Outcome of connecting and loading every resource kind."""

    success: bool
    error: Optional[str] = None
    results: dict[str, OperationResult]


class RefreshResult(BaseModel):
    """Outcome of refreshing every resource kind."""

    success: bool
    total: int
    successful: int
    failed: int


class CleanupStepResult(BaseModel):
    """Outcome of one cleanup step."""

    type: Literal["containers", "images", "volumes", "system"]
    success: bool = True
    successful: int = 0
    failed: int = 0
    total: int = 0
    space_reclaimed: int = 0
    data: Any = None
    error: Optional[str] = None


class CleanupResult(BaseModel):
    """Outcome of a cleanup run; holds partial results on failure."""

    success: bool
    error: Optional[str] = None
    results: list[CleanupStepResult] = Field(default_factory=list)


class SearchResults(BaseModel):
    """Matches of one query in every resource kind."""

    containers: list[Container] = Field(default_factory=list)
    images: list[Image] = Field(default_factory=list)
    volumes: list[Volume] = Field(default_factory=list)


class DependentContainer(BaseModel):
    """Container that references an image or volume."""

    id: str
    name: str
    status: str


class Dependencies(BaseModel):
    """Resources depending on the checked resource."""

    containers: list[DependentContainer] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    volumes: list[str] = Field(default_factory=list)


class DependencyReport(BaseModel):
    """Envelope around a dependency resolution."""

    success: bool
    dependencies: Optional[Dependencies] = None
    can_remove: Optional[bool] = None
    error: Optional[str] = None


class ContainerStats(BaseModel):
    total: int = 0
    running: int = 0
    stopped: int = 0
    created: int = 0
    paused: int = 0
    restarting: int = 0


class ImageStats(BaseModel):
    total: int = 0
    total_size: int = 0
    dangling: int = 0
    tagged: int = 0


class VolumeStats(BaseModel):
    total: int = 0
    in_use: int = 0
    unused: int = 0
    total_size: int = 0


class GlobalStats(BaseModel):
    """Statistics of every resource kind."""

    containers: ContainerStats
    images: ImageStats
    volumes: VolumeStats
    system: Optional[SystemStats] = None

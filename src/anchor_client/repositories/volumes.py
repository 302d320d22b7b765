"""Repository for the volume collection."""

from typing import Any, Dict, Iterable, List, Optional

from anchor_client.models import (
    BulkResult,
    Container,
    OperationResult,
    PruneResult,
    Volume,
    VolumeStats,
)
from anchor_client.query import resolve_dependencies, volume_type
from anchor_client.utils import get_logger
from anchor_client.utils.api_client import ControlPlaneClient
from anchor_client.utils.audit_logger import AuditEventType
from anchor_client.utils.exceptions import ResourceNotFoundError, VolumeInUseError

from .base import ResourceRepository

logger = get_logger(__name__)


class VolumeRepository(ResourceRepository[Volume]):
    """Repository for volume operations."""

    resource = "volumes"
    key_field = "name"

    def __init__(self, client: ControlPlaneClient) -> None:
        """
        Initialize volume repository.

        Args:
            client: Control-plane client
        """
        super().__init__(client, Volume)

    async def _load(self) -> Any:
        return await self.client.get_all_volumes()

    # Derived views

    @property
    def unused(self) -> List[Volume]:
        """Volumes with no mount point and no references."""
        return [volume for volume in self.items if not volume.in_use]

    @property
    def stats(self) -> VolumeStats:
        items = self.items
        unused = len(self.unused)
        return VolumeStats(
            total=len(items),
            in_use=len(items) - unused,
            unused=unused,
            total_size=sum(volume.size for volume in items),
        )

    def filter_by_type(self, kind: str) -> List[Volume]:
        """Volumes classified as ``anonymous``, ``bind`` or ``named``."""
        return [volume for volume in self.items if volume_type(volume) == kind]

    def filter_by_usage(self, in_use: bool) -> List[Volume]:
        return [volume for volume in self.items if volume.in_use == in_use]

    # Reads

    def get_details(self, name: str) -> OperationResult:
        """Look up a volume in the current snapshot."""
        volume = self.find(name)
        if volume is None:
            message = f"Failed to get volume details: {ResourceNotFoundError('volume', name)}"
            self._set_error(message)
            return OperationResult.fail(message)
        return OperationResult.ok(volume)

    def get_usage(self, name: str, containers: Iterable[Container] = ()) -> OperationResult:
        """
        Report the size, reference count and mounting containers of a volume.

        Args:
            name: Volume name
            containers: Container snapshot used to list the mounting containers

        Returns:
            OperationResult with ``size``, ``refCount`` and ``containers``
        """
        volume = self.find(name)
        if volume is None:
            message = f"Failed to get volume usage: {ResourceNotFoundError('volume', name)}"
            self._set_error(message)
            return OperationResult.fail(message)
        resolution = resolve_dependencies("volume", name, containers)
        return OperationResult.ok(
            {
                "size": volume.size,
                "refCount": volume.usage_data.ref_count if volume.usage_data else 0,
                "containers": [c.model_dump() for c in resolution.dependent_containers],
            }
        )

    # Mutations

    async def create(
        self,
        name: str,
        driver: str = "local",
        options: Optional[Dict[str, Any]] = None,
    ) -> OperationResult:
        """
        Create a volume, then refetch the collection.

        Args:
            name: Volume name
            driver: Volume driver
            options: Driver options

        Returns:
            OperationResult
        """
        return await self._mutate(
            "create volume",
            name,
            lambda: self.client.create_volume(name, driver, options),
            AuditEventType.VOLUME_CREATE,
            details={"driver": driver},
        )

    async def remove(self, name: str, force: bool = False) -> OperationResult:
        """
        Remove a volume.

        An in-use volume is refused without any request unless ``force`` is set.

        Args:
            name: Volume name
            force: Remove even when in use

        Returns:
            OperationResult
        """

        async def call() -> Any:
            volume = self.find(name)
            if not force and volume is not None and volume.in_use:
                raise VolumeInUseError(name)
            return await self.client.remove_volume(name, force)

        return await self._mutate(
            "remove volume",
            name,
            call,
            AuditEventType.VOLUME_REMOVE,
            details={"force": force},
        )

    async def remove_many(self, names: Iterable[str], force: bool = False) -> BulkResult:
        return await self._bulk(names, lambda name: self.remove(name, force))

    async def prune(self) -> PruneResult:
        """
        Remove every unused volume with force.

        Returns:
            PruneResult with the space held by removed volumes
        """
        targets = self.unused
        outcomes = await self._run_bulk(
            [volume.name for volume in targets],
            lambda name: self.remove(name, force=True),
        )
        reclaimed = sum(volume.size for volume, ok in zip(targets, outcomes) if ok)
        result = PruneResult(
            **BulkResult.from_outcomes(outcomes).model_dump(),
            space_reclaimed=reclaimed,
        )
        self.audit.log_event(
            AuditEventType.VOLUME_PRUNE, success=result.failed == 0, details=result.model_dump()
        )
        logger.info("Pruned unused volumes", extra=result.model_dump())
        return result

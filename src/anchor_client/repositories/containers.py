"""Repository for the container collection."""

from typing import Any, Iterable, List

from anchor_client.models import (
    BulkResult,
    Container,
    ContainerStats,
    ContainerStatus,
    OperationResult,
)
from anchor_client.utils.api_client import ControlPlaneClient
from anchor_client.utils.audit_logger import AuditEventType

from .base import ResourceRepository


class ContainerRepository(ResourceRepository[Container]):
    """Repository for container lifecycle operations."""

    resource = "containers"
    key_field = "id"

    def __init__(self, client: ControlPlaneClient, default_log_lines: int = 100) -> None:
        """
        Initialize container repository.

        Args:
            client: Control-plane client
            default_log_lines: Log lines requested when none are given
        """
        super().__init__(client, Container)
        self.default_log_lines = default_log_lines

    async def _load(self) -> Any:
        return await self.client.get_all_containers()

    # Derived views

    @property
    def running(self) -> List[Container]:
        return [c for c in self.items if c.is_running]

    @property
    def stopped(self) -> List[Container]:
        """Containers that are exited or stopped."""
        return [c for c in self.items if c.is_stopped]

    @property
    def stats(self) -> ContainerStats:
        items = self.items
        return ContainerStats(
            total=len(items),
            running=len(self.running),
            stopped=len(self.stopped),
            created=sum(1 for c in items if c.status == ContainerStatus.CREATED.value),
            paused=sum(1 for c in items if c.status == ContainerStatus.PAUSED.value),
            restarting=sum(1 for c in items if c.status == ContainerStatus.RESTARTING.value),
        )

    # Reads

    async def list_running(self) -> OperationResult:
        """Query the control plane for running containers only."""

        async def load_running() -> List[Container]:
            return list(self._parse(await self.client.get_running_containers()))

        return await self._query("list running containers", load_running)

    async def get_details(self, container_id: str) -> OperationResult:
        return await self._query(
            "get container details", lambda: self.client.get_container(container_id)
        )

    async def get_logs(self, container_id: str, lines: int | None = None) -> OperationResult:
        count = lines or self.default_log_lines
        return await self._query(
            "get container logs",
            lambda: self.client.get_container_logs(container_id, count),
        )

    async def get_stats(self, container_id: str) -> OperationResult:
        return await self._query(
            "get container stats", lambda: self.client.get_container_stats(container_id)
        )

    # Lifecycle

    async def start(self, container_id: str) -> OperationResult:
        return await self._mutate(
            "start container",
            container_id,
            lambda: self.client.start_container(container_id),
            AuditEventType.CONTAINER_START,
        )

    async def stop(self, container_id: str) -> OperationResult:
        return await self._mutate(
            "stop container",
            container_id,
            lambda: self.client.stop_container(container_id),
            AuditEventType.CONTAINER_STOP,
        )

    async def restart(self, container_id: str) -> OperationResult:
        return await self._mutate(
            "restart container",
            container_id,
            lambda: self.client.restart_container(container_id),
            AuditEventType.CONTAINER_RESTART,
        )

    async def remove(self, container_id: str, force: bool = False) -> OperationResult:
        return await self._mutate(
            "remove container",
            container_id,
            lambda: self.client.remove_container(container_id, force),
            AuditEventType.CONTAINER_REMOVE,
            details={"force": force},
        )

    async def mutate(
        self, container_id: str, operation: str, force: bool = False
    ) -> OperationResult:
        """
        Run a lifecycle operation by name.

        Args:
            container_id: Container ID
            operation: start, stop, restart or remove
            force: Force removal (remove only)

        Returns:
            OperationResult; an unknown operation is reported as a failure
        """
        if operation == "remove":
            return await self.remove(container_id, force)
        action = {"start": self.start, "stop": self.stop, "restart": self.restart}.get(operation)
        if action is None:
            message = f"Unsupported container operation: {operation}"
            self._set_error(message)
            return OperationResult.fail(message)
        return await action(container_id)

    # Bulk operations

    async def bulk_mutate(
        self, container_ids: Iterable[str], operation: str, force: bool = False
    ) -> BulkResult:
        """Run a lifecycle operation for every ID concurrently."""
        return await self._bulk(
            container_ids, lambda container_id: self.mutate(container_id, operation, force)
        )

    async def start_many(self, container_ids: Iterable[str]) -> BulkResult:
        return await self._bulk(container_ids, self.start)

    async def stop_many(self, container_ids: Iterable[str]) -> BulkResult:
        return await self._bulk(container_ids, self.stop)

    async def restart_many(self, container_ids: Iterable[str]) -> BulkResult:
        return await self._bulk(container_ids, self.restart)

    async def remove_many(self, container_ids: Iterable[str], force: bool = False) -> BulkResult:
        return await self._bulk(
            container_ids, lambda container_id: self.remove(container_id, force)
        )

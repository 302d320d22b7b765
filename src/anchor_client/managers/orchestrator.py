"""Orchestrator composing the resource repositories and the system monitor."""

import asyncio
from typing import Any, Dict, Optional

from anchor_client.config import Settings, get_settings
from anchor_client.managers.system_monitor import SystemMonitor
from anchor_client.models import (
    CleanupResult,
    CleanupStepResult,
    Dependencies,
    DependencyReport,
    GlobalStats,
    InitializeResult,
    OperationResult,
    RefreshResult,
    SearchResults,
    SystemUsage,
)
from anchor_client.query import apply_query, resolve_dependencies
from anchor_client.repositories import ContainerRepository, ImageRepository, VolumeRepository
from anchor_client.utils import get_logger
from anchor_client.utils.api_client import ControlPlaneClient, create_api_client
from anchor_client.utils.audit_logger import AuditEventType, get_audit_logger

logger = get_logger(__name__)

RESOURCE_KINDS = ("system", "containers", "images", "volumes")


def _settled(kind: str, outcome: Any) -> OperationResult:
    """Turn a gathered outcome into a result, wrapping raised exceptions."""
    if isinstance(outcome, OperationResult):
        return outcome
    if isinstance(outcome, BaseException):
        logger.error(f"Fetching {kind} raised", extra={"error": str(outcome)})
        return OperationResult.fail(str(outcome))
    return OperationResult.fail(f"Unexpected result fetching {kind}")


class Orchestrator:
    """Unified entry point over containers, images, volumes and the daemon.

    Construct one per session and pass it to whatever needs it. Aggregate
    operations never raise; they report per-kind outcomes instead.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: ControlPlaneClient | None = None,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            settings: Settings (defaults to the cached settings)
            client: Control-plane client shared by every repository
        """
        self.settings = settings or get_settings()
        self.client = client or create_api_client(self.settings)
        self.containers = ContainerRepository(
            self.client, default_log_lines=self.settings.default_log_lines
        )
        self.images = ImageRepository(self.client)
        self.volumes = VolumeRepository(self.client)
        self.system = SystemMonitor(self.client, self.settings)
        self.audit = get_audit_logger()

    async def __aenter__(self) -> "Orchestrator":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Stop background polling and release the HTTP session."""
        await self.system.stop_event_polling()
        self.client.close()

    async def initialize(self) -> InitializeResult:
        """
        Connect and load every resource kind.

        Connectivity is tested first; if it fails nothing else is attempted.
        Otherwise daemon info is fetched, then containers, images and volumes
        in parallel.

        Returns:
            InitializeResult with per-kind results
        """
        results: Dict[str, OperationResult] = {
            kind: OperationResult(success=False) for kind in RESOURCE_KINDS
        }

        try:
            connection = await self.system.test_connection()
            if not connection.success:
                logger.error("Initialization aborted", extra={"error": connection.error})
                return InitializeResult(success=False, error=connection.error, results=results)

            results["system"] = await self.system.fetch_system_info()

            outcomes = await asyncio.gather(
                self.containers.fetch_all(),
                self.images.fetch_all(),
                self.volumes.fetch_all(),
                return_exceptions=True,
            )
            for kind, outcome in zip(("containers", "images", "volumes"), outcomes):
                results[kind] = _settled(kind, outcome)
        except Exception as e:
            logger.error("Initialization failed", extra={"error": str(e)})
            return InitializeResult(success=False, error=str(e), results=results)

        logger.info(
            "Initialized",
            extra={kind: result.success for kind, result in results.items()},
        )
        return InitializeResult(success=True, results=results)

    async def refresh_all(self) -> RefreshResult:
        """
        Refetch every resource kind in parallel, best effort.

        Returns:
            RefreshResult; successful when at least one kind refreshed
        """
        outcomes = await asyncio.gather(
            self.containers.fetch_all(),
            self.images.fetch_all(),
            self.volumes.fetch_all(),
            self.system.fetch_system_info(),
            return_exceptions=True,
        )
        kinds = ("containers", "images", "volumes", "system")
        successful = sum(
            1 for kind, outcome in zip(kinds, outcomes) if _settled(kind, outcome).success
        )
        result = RefreshResult(
            success=successful > 0,
            total=len(outcomes),
            successful=successful,
            failed=len(outcomes) - successful,
        )
        logger.info("Refreshed all resources", extra=result.model_dump())
        return result

    async def cleanup(
        self,
        containers: bool = False,
        images: bool = False,
        volumes: bool = False,
        system: bool = False,
    ) -> CleanupResult:
        """
        Run the selected cleanup steps one after another.

        Only already exited or stopped containers are removed, never with
        force. An exception stops the remaining steps; the results collected
        so far are returned.

        Returns:
            CleanupResult
        """
        steps: list[CleanupStepResult] = []

        try:
            if containers:
                stopped_ids = [c.id for c in self.containers.stopped]
                if stopped_ids:
                    removed = await self.containers.remove_many(stopped_ids)
                    steps.append(CleanupStepResult(type="containers", **removed.model_dump()))

            if images:
                pruned = await self.images.prune()
                steps.append(CleanupStepResult(type="images", **pruned.model_dump()))

            if volumes:
                pruned = await self.volumes.prune()
                steps.append(CleanupStepResult(type="volumes", **pruned.model_dump()))

            if system:
                outcome = await self.system.prune_system()
                steps.append(
                    CleanupStepResult(
                        type="system",
                        success=outcome.success,
                        data=outcome.data,
                        error=outcome.error,
                    )
                )
        except Exception as e:
            logger.error(
                "Cleanup aborted",
                extra={"error": str(e), "completed_steps": len(steps)},
            )
            self.audit.log_event(
                AuditEventType.SYSTEM_CLEANUP, success=False, details={"error": str(e)}
            )
            return CleanupResult(success=False, error=str(e), results=steps)

        self.audit.log_event(
            AuditEventType.SYSTEM_CLEANUP,
            success=True,
            details={"steps": [step.type for step in steps]},
        )
        return CleanupResult(success=True, results=steps)

    def search_all(self, query: str | None) -> Optional[SearchResults]:
        """
        Search every collection with the same query grammar.

        Returns:
            SearchResults, or None for an empty query
        """
        if not query or not query.strip():
            return None
        return SearchResults(
            containers=apply_query(self.containers.items, "containers", query),
            images=apply_query(self.images.items, "images", query),
            volumes=apply_query(self.volumes.items, "volumes", query),
        )

    def get_global_stats(self) -> GlobalStats:
        return GlobalStats(
            containers=self.containers.stats,
            images=self.images.stats,
            volumes=self.volumes.stats,
            system=self.system.system_stats,
        )

    def get_system_usage(self) -> SystemUsage:
        """Resource counts, preferring daemon-reported figures."""
        stats = self.system.system_stats
        return SystemUsage(
            containers=stats.containers if stats else len(self.containers),
            images=stats.images if stats else len(self.images),
            volumes=len(self.volumes),
        )

    def check_dependencies(self, resource_type: str, resource_id: str) -> DependencyReport:
        """
        Report the containers referencing an image or volume.

        Args:
            resource_type: ``image`` or ``volume``
            resource_id: Image reference or volume name

        Returns:
            DependencyReport; ``can_remove`` is advisory
        """
        try:
            resolution = resolve_dependencies(
                resource_type, resource_id, self.containers.items
            )
        except Exception as e:
            logger.error(
                "Dependency check failed",
                extra={"resource_type": resource_type, "error": str(e)},
            )
            return DependencyReport(success=False, error=str(e))

        return DependencyReport(
            success=True,
            dependencies=Dependencies(containers=resolution.dependent_containers),
            can_remove=resolution.can_remove,
        )

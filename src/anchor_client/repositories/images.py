"""Repository for the image collection."""

from typing import Any, Callable, Dict, Iterable, List, Optional

from anchor_client.models import BulkResult, Image, ImageStats, OperationResult, PruneResult
from anchor_client.utils import get_logger
from anchor_client.utils.api_client import ControlPlaneClient
from anchor_client.utils.audit_logger import AuditEventType

from .base import ResourceRepository

logger = get_logger(__name__)

ProgressCallback = Callable[[Dict[str, Any]], None]


class ImageRepository(ResourceRepository[Image]):
    """Repository for image operations."""

    resource = "images"
    key_field = "id"

    def __init__(self, client: ControlPlaneClient) -> None:
        """
        Initialize image repository.

        Args:
            client: Control-plane client
        """
        super().__init__(client, Image)
        self.pull_progress: Optional[Dict[str, Any]] = None
        self.build_progress: Optional[Dict[str, Any]] = None

    async def _load(self) -> Any:
        return await self.client.get_all_images()

    # Derived views

    @property
    def dangling(self) -> List[Image]:
        return [image for image in self.items if image.is_dangling]

    @property
    def stats(self) -> ImageStats:
        items = self.items
        dangling = len(self.dangling)
        return ImageStats(
            total=len(items),
            total_size=sum(image.size for image in items),
            dangling=dangling,
            tagged=len(items) - dangling,
        )

    # Reads

    async def get_details(self, image_id: str) -> OperationResult:
        return await self._query(
            "get image details", lambda: self.client.get_image(image_id)
        )

    # Mutations

    @staticmethod
    def _report(
        on_progress: Optional[ProgressCallback], progress: Dict[str, Any]
    ) -> Dict[str, Any]:
        if on_progress is not None:
            try:
                on_progress(progress)
            except Exception as e:
                logger.warning("Progress callback failed", extra={"error": str(e)})
        return progress

    async def pull(
        self, image_name: str, on_progress: Optional[ProgressCallback] = None
    ) -> OperationResult:
        """
        Pull an image and refresh the collection.

        Args:
            image_name: Image reference to pull
            on_progress: Optional callback receiving status dicts

        Returns:
            OperationResult
        """
        self.pull_progress = {"imageName": image_name, "status": "starting"}
        self._report(on_progress, {"status": "pulling", "imageName": image_name})

        result = await self._mutate(
            "pull image",
            image_name,
            lambda: self.client.pull_image(image_name),
            AuditEventType.IMAGE_PULL,
        )

        if result.success:
            self.pull_progress = {"imageName": image_name, "status": "completed"}
        else:
            self.pull_progress = {
                "imageName": image_name,
                "status": "error",
                "error": result.error,
            }
        self._report(on_progress, dict(self.pull_progress))
        return result

    async def build(
        self,
        context: str,
        dockerfile: str,
        tag: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> OperationResult:
        """
        Build an image and refresh the collection.

        Args:
            context: Build context path or URL
            dockerfile: Dockerfile path within the context
            tag: Tag for the built image
            on_progress: Optional callback receiving status dicts

        Returns:
            OperationResult
        """
        self.build_progress = {"tag": tag, "status": "starting"}
        self._report(on_progress, {"status": "building", "tag": tag})

        result = await self._mutate(
            "build image",
            tag,
            lambda: self.client.build_image(context, dockerfile, tag),
            AuditEventType.IMAGE_BUILD,
            details={"context": context, "dockerfile": dockerfile},
        )

        if result.success:
            self.build_progress = {"tag": tag, "status": "completed"}
        else:
            self.build_progress = {"tag": tag, "status": "error", "error": result.error}
        self._report(on_progress, dict(self.build_progress))
        return result

    async def remove(self, image_id: str, force: bool = False) -> OperationResult:
        return await self._mutate(
            "remove image",
            image_id,
            lambda: self.client.remove_image(image_id, force),
            AuditEventType.IMAGE_REMOVE,
            details={"force": force},
        )

    async def remove_many(self, image_ids: Iterable[str], force: bool = False) -> BulkResult:
        return await self._bulk(image_ids, lambda image_id: self.remove(image_id, force))

    async def prune(self) -> PruneResult:
        """
        Remove every dangling image with force.

        Returns:
            PruneResult with the space held by removed images
        """
        targets = self.dangling
        outcomes = await self._run_bulk(
            [image.id for image in targets],
            lambda image_id: self.remove(image_id, force=True),
        )
        reclaimed = sum(image.size for image, ok in zip(targets, outcomes) if ok)
        result = PruneResult(
            **BulkResult.from_outcomes(outcomes).model_dump(),
            space_reclaimed=reclaimed,
        )
        self.audit.log_event(
            AuditEventType.IMAGE_PRUNE, success=result.failed == 0, details=result.model_dump()
        )
        logger.info("Pruned dangling images", extra=result.model_dump())
        return result

"""Cross-resource dependency resolution."""

from dataclasses import dataclass, field
from typing import Iterable, List

from anchor_client.models import Container, DependentContainer

from .naming import container_name


@dataclass(frozen=True)
class DependencyResolution:
    """Containers referencing a resource and whether it can be removed."""

    dependent_containers: List[DependentContainer] = field(default_factory=list)

    @property
    def can_remove(self) -> bool:
        # Advisory only; callers decide whether to force removal
        return not self.dependent_containers


def _references(resource_type: str, resource_id: str, container: Container) -> bool:
    if resource_type == "image":
        return container.image == resource_id
    if resource_type == "volume":
        return any(mount.source == resource_id for mount in container.mounts)
    return False


def resolve_dependencies(
    resource_type: str,
    resource_id: str,
    containers: Iterable[Container],
) -> DependencyResolution:
    """
    Find the containers that reference an image or a volume.

    Images match on the exact ``container.image`` value; volumes match when
    any mount source equals the volume name. Other resource types have no
    dependents.

    Args:
        resource_type: ``image`` or ``volume``
        resource_id: Image reference or volume name
        containers: Current container snapshot

    Returns:
        DependencyResolution
    """
    dependents = [
        DependentContainer(
            id=container.id,
            name=container_name(container),
            status=container.status,
        )
        for container in containers
        if _references(resource_type, resource_id, container)
    ]
    return DependencyResolution(dependent_containers=dependents)

"""Image records returned by the control-plane API."""

from datetime import datetime

from pydantic import Field

from .base import ResourceModel

# Repository/tag placeholder reported for untagged images
NONE_SENTINEL = "<none>"
_NONE_VALUES = frozenset({NONE_SENTINEL, "none", ""})


class Image(ResourceModel):
    """Image as listed by the control plane."""

    id: str = ""
    repository: str | None = None
    tag: str | None = None
    size: int = Field(default=0, ge=0)
    created: datetime | None = None

    @property
    def is_dangling(self) -> bool:
        """Whether the image has no repository."""
        return self.repository is None or self.repository in _NONE_VALUES

    @property
    def has_tag(self) -> bool:
        return self.tag is not None and self.tag not in _NONE_VALUES

    @property
    def reference(self) -> str | None:
        """``repository:tag`` reference, or None for dangling images."""
        if self.is_dangling:
            return None
        if self.has_tag:
            return f"{self.repository}:{self.tag}"
        return self.repository

    def __repr__(self) -> str:
        """String representation of Image."""
        return f"<Image(id={self.id}, reference={self.reference})>"

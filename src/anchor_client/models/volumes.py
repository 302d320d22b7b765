"""Volume records returned by the control-plane API."""

import re
from datetime import datetime
from typing import Any

from pydantic import Field

from .base import ResourceModel

ANONYMOUS_VOLUME_PATTERN = re.compile(r"^[a-f0-9]{64}$")


class VolumeUsage(ResourceModel):
    """Disk usage reported for a volume."""

    size: int = 0
    ref_count: int = Field(default=0, alias="refCount")


class Volume(ResourceModel):
    """Volume as listed by the control plane."""

    name: str = ""
    driver: str = "local"
    mount_point: str | None = Field(default=None, alias="mountPoint")
    usage_data: VolumeUsage | None = Field(default=None, alias="usageData")
    created: datetime | None = None
    options: dict[str, Any] | None = None

    @property
    def is_anonymous(self) -> bool:
        """Anonymous volumes are named by a 64 character hex digest."""
        return bool(ANONYMOUS_VOLUME_PATTERN.match(self.name))

    @property
    def in_use(self) -> bool:
        if self.mount_point:
            return True
        return self.usage_data is not None and self.usage_data.ref_count > 0

    @property
    def size(self) -> int:
        # Drivers report -1 when usage was not computed
        return max(self.usage_data.size, 0) if self.usage_data else 0

    def __repr__(self) -> str:
        """String representation of Volume."""
        return f"<Volume(name={self.name}, driver={self.driver}, in_use={self.in_use})>"

"""Pure query helpers: naming, filtering, sorting and dependency resolution."""

from .dependencies import DependencyResolution, resolve_dependencies
from .engine import (
    STATUS_PRIORITY,
    QueryProfile,
    apply_query,
    filter_by_query,
    filter_by_status,
    get_profile,
    matches_query,
    parse_query,
    sort_items,
    status_priority,
    volume_type,
)
from .naming import UNKNOWN_NAME, container_name, display_name, image_name, volume_name

__all__ = [
    "DependencyResolution",
    "QueryProfile",
    "STATUS_PRIORITY",
    "UNKNOWN_NAME",
    "apply_query",
    "container_name",
    "display_name",
    "filter_by_query",
    "filter_by_status",
    "get_profile",
    "image_name",
    "matches_query",
    "parse_query",
    "resolve_dependencies",
    "sort_items",
    "status_priority",
    "volume_name",
    "volume_type",
]

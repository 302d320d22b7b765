"""Filtered and sorted views over resource collections.

One engine serves every resource kind. Each kind contributes a
``QueryProfile`` naming its searchable fields, the field prefixes of the
structured query grammar, its status filters and its sort keys.

Query grammar: ``<prefix>:<term>`` restricts a case-insensitive substring
match to one field (``id:ab12``, ``status:run``). Any other query, including
one with an unrecognized prefix such as ``nginx:latest``, matches when it is a
substring of any default field.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from anchor_client.models import STOPPED_STATUSES, Container, Image, Volume
from anchor_client.utils.exceptions import UnsupportedResourceError

from .naming import container_name, format_ports, image_name, volume_name

FieldExtractor = Callable[[Any], Iterable[str]]
StatusPredicate = Callable[[Any], bool]
SortKey = Callable[[Any], Any]

# Lower sorts first; anything not listed sorts as unknown
STATUS_PRIORITY: Dict[str, int] = {
    "running": 1,
    "created": 2,
    "restarting": 3,
    "paused": 4,
    "exited": 5,
    "stopped": 6,
}
UNKNOWN_STATUS_PRIORITY = 7

ALL = "all"


@dataclass(frozen=True)
class QueryProfile:
    """Searchable fields, filters and sort keys of one resource kind."""

    kind: str
    default_fields: Tuple[FieldExtractor, ...]
    prefixed_fields: Dict[str, FieldExtractor]
    status_filters: Dict[str, StatusPredicate]
    sort_keys: Dict[str, SortKey]
    # Filter value matched verbatim when it is not a named status filter
    literal_status: Optional[Callable[[Any, str], bool]] = None


def status_priority(status: str) -> int:
    return STATUS_PRIORITY.get(status, UNKNOWN_STATUS_PRIORITY)


def _timestamp(item: Any) -> float:
    created = getattr(item, "created", None)
    return created.timestamp() if created is not None else float("-inf")


def _container_ports(container: Container) -> List[str]:
    values = format_ports(container)
    for port in container.ports:
        values.extend(str(p) for p in (port.public_port, port.private_port) if p)
    return values


CONTAINER_PROFILE = QueryProfile(
    kind="containers",
    default_fields=(
        lambda c: [container_name(c)],
        lambda c: [c.image],
        lambda c: [c.id],
        lambda c: [c.status],
    ),
    prefixed_fields={
        "id": lambda c: [c.id],
        "image": lambda c: [c.image],
        "status": lambda c: [c.status],
        "port": _container_ports,
    },
    status_filters={
        "running": lambda c: c.is_running,
        "stopped": lambda c: c.status in STOPPED_STATUSES,
    },
    sort_keys={
        "name": lambda c: container_name(c).casefold(),
        "status": lambda c: status_priority(c.status),
        "created": _timestamp,
        "image": lambda c: c.image,
    },
    literal_status=lambda c, value: c.status.lower() == value,
)

IMAGE_PROFILE = QueryProfile(
    kind="images",
    default_fields=(
        lambda i: [image_name(i)],
        lambda i: [i.repository or ""],
        lambda i: [i.tag or ""],
        lambda i: [i.id],
    ),
    prefixed_fields={
        "id": lambda i: [i.id],
        "repository": lambda i: [i.repository or ""],
        "repo": lambda i: [i.repository or ""],
        "tag": lambda i: [i.tag or ""],
        "image": lambda i: [image_name(i)],
    },
    status_filters={
        "dangling": lambda i: i.is_dangling,
        "tagged": lambda i: not i.is_dangling,
    },
    sort_keys={
        "name": lambda i: (
            (i.repository or "<none>").casefold(),
            (i.tag or "latest").casefold(),
        ),
        "size": lambda i: i.size,
        "created": _timestamp,
        "id": lambda i: i.id,
    },
)

VOLUME_PROFILE = QueryProfile(
    kind="volumes",
    default_fields=(
        lambda v: [volume_name(v)],
        lambda v: [v.driver],
        lambda v: [v.mount_point or ""],
    ),
    prefixed_fields={
        "name": lambda v: [volume_name(v)],
        "driver": lambda v: [v.driver],
        "mount": lambda v: [v.mount_point or ""],
    },
    status_filters={
        "in-use": lambda v: v.in_use,
        "unused": lambda v: not v.in_use,
        "anonymous": lambda v: volume_type(v) == "anonymous",
        "named": lambda v: volume_type(v) == "named",
        "bind": lambda v: volume_type(v) == "bind",
    },
    sort_keys={
        # Named volumes first, anonymous digests last
        "name": lambda v: (v.is_anonymous, v.name.casefold()),
        "driver": lambda v: v.driver,
        "size": lambda v: v.size,
    },
)

PROFILES: Dict[str, QueryProfile] = {
    "containers": CONTAINER_PROFILE,
    "container": CONTAINER_PROFILE,
    "images": IMAGE_PROFILE,
    "image": IMAGE_PROFILE,
    "volumes": VOLUME_PROFILE,
    "volume": VOLUME_PROFILE,
}


def volume_type(volume: Volume) -> str:
    """Classify a volume as ``anonymous``, ``bind`` or ``named``."""
    if volume.is_anonymous:
        return "anonymous"
    if volume.driver == "local" and (volume.mount_point or "").startswith("/"):
        return "bind"
    return "named"


def get_profile(kind: str) -> QueryProfile:
    """
    Look up the query profile of a resource kind.

    Args:
        kind: containers, images or volumes (singular accepted)

    Raises:
        UnsupportedResourceError: For an unknown kind
    """
    try:
        return PROFILES[kind.lower()]
    except KeyError:
        raise UnsupportedResourceError(f"Unsupported resource kind: {kind}") from None


def profile_for(item: Any) -> QueryProfile:
    if isinstance(item, Container):
        return CONTAINER_PROFILE
    if isinstance(item, Image):
        return IMAGE_PROFILE
    if isinstance(item, Volume):
        return VOLUME_PROFILE
    raise UnsupportedResourceError(f"Unsupported resource record: {type(item).__name__}")


def parse_query(query: str, profile: QueryProfile) -> Tuple[Optional[str], str]:
    """
    Split a query into an optional field prefix and a lowercase term.

    Returns:
        ``(field, term)``; ``field`` is None for free-text queries
    """
    text = query.strip()
    prefix, sep, rest = text.partition(":")
    if sep and prefix.lower() in profile.prefixed_fields:
        return prefix.lower(), rest.strip().lower()
    return None, text.lower()


def matches_query(item: Any, query: str, profile: Optional[QueryProfile] = None) -> bool:
    """Whether a record matches a query under its kind's grammar."""
    profile = profile or profile_for(item)
    field, term = parse_query(query, profile)
    extractors = (profile.prefixed_fields[field],) if field else profile.default_fields
    return any(term in value.lower() for extract in extractors for value in extract(item))


def filter_by_query(items: Iterable[Any], query: str | None, kind: str) -> List[Any]:
    profile = get_profile(kind)
    if not query or not query.strip():
        return list(items)
    return [item for item in items if matches_query(item, query, profile)]


def filter_by_status(items: Iterable[Any], status: str | None, kind: str) -> List[Any]:
    """
    Apply a status filter.

    ``all`` (or empty) keeps everything. Containers additionally accept any
    literal status value.

    Raises:
        UnsupportedResourceError: For a filter the kind does not know
    """
    profile = get_profile(kind)
    value = (status or ALL).strip().lower()
    if value == ALL:
        return list(items)
    predicate = profile.status_filters.get(value)
    if predicate is not None:
        return [item for item in items if predicate(item)]
    if profile.literal_status is not None:
        return [item for item in items if profile.literal_status(item, value)]
    raise UnsupportedResourceError(f"Unsupported {profile.kind} filter: {status}")


def sort_items(
    items: Iterable[Any],
    sort_by: str | None,
    kind: str,
    descending: bool = False,
) -> List[Any]:
    """
    Stable sort by a named key.

    Ties keep their original relative order in both directions.

    Raises:
        UnsupportedResourceError: For a sort key the kind does not know
    """
    profile = get_profile(kind)
    if not sort_by:
        return list(items)
    key = profile.sort_keys.get(sort_by.lower())
    if key is None:
        raise UnsupportedResourceError(f"Unsupported {profile.kind} sort key: {sort_by}")
    return sorted(items, key=key, reverse=descending)


def apply_query(
    items: Sequence[Any],
    kind: str,
    query: str | None = None,
    status: str | None = ALL,
    sort_by: str | None = None,
    descending: bool = False,
) -> List[Any]:
    """
    Compute a filtered, ordered view of a collection.

    The source collection is never modified.

    Args:
        items: Collection snapshot
        kind: containers, images or volumes
        query: Free-text or ``prefix:term`` query
        status: Status filter value
        sort_by: Sort key name, or None to keep the snapshot order
        descending: Reverse the sort direction

    Returns:
        New list with the view
    """
    view = filter_by_status(items, status, kind)
    view = filter_by_query(view, query, kind)
    return sort_items(view, sort_by, kind, descending)

"""Display-name derivation shared by filtering, sorting and reporting."""

from typing import Any

from anchor_client.models import Container, Image, Volume

UNKNOWN_NAME = "Unknown"
SHORT_ID_LENGTH = 12


def short_id(identifier: str | None) -> str:
    """Return the 12 character short form of an ID, without a digest prefix."""
    if not identifier:
        return ""
    return identifier.split(":", 1)[-1][:SHORT_ID_LENGTH]


def container_name(container: Container | None) -> str:
    """
    Derive the display name of a container.

    Prefers the first entry of ``names`` without its leading ``/``, then the
    short ID, then ``Unknown``.
    """
    if container is None:
        return UNKNOWN_NAME
    if container.names:
        return container.names[0].removeprefix("/")
    return container.id[:SHORT_ID_LENGTH] or UNKNOWN_NAME


def image_name(image: Image | None) -> str:
    """Derive the display name of an image: its reference, else its short ID."""
    if image is None:
        return UNKNOWN_NAME
    return image.reference or short_id(image.id) or UNKNOWN_NAME


def volume_name(volume: Volume | None) -> str:
    if volume is None:
        return UNKNOWN_NAME
    return volume.name or UNKNOWN_NAME


def display_name(item: Any) -> str:
    """Display name of any resource record."""
    if isinstance(item, Container):
        return container_name(item)
    if isinstance(item, Image):
        return image_name(item)
    if isinstance(item, Volume):
        return volume_name(item)
    return UNKNOWN_NAME


def format_ports(container: Container) -> list[str]:
    """Published ports as ``public:private`` strings."""
    return [
        f"{port.public_port}:{port.private_port}"
        for port in container.ports
        if port.public_port and port.private_port
    ]

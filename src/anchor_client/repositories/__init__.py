"""Repositories owning the resource collections."""

from .base import ResourceRepository
from .containers import ContainerRepository
from .images import ImageRepository
from .volumes import VolumeRepository

__all__ = [
    "ResourceRepository",
    "ContainerRepository",
    "ImageRepository",
    "VolumeRepository",
]

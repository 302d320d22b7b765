"""Test configuration and fixtures."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from anchor_client.config import Settings
from tests.samples import CONTAINERS, IMAGES, SYSTEM_INFO, VOLUMES

# Coroutine methods of ControlPlaneClient
CLIENT_ASYNC_METHODS = [
    "test_connection",
    "get_system_info",
    "get_system_version",
    "get_system_events",
    "prune_system",
    "get_all_containers",
    "get_running_containers",
    "get_container",
    "start_container",
    "stop_container",
    "restart_container",
    "remove_container",
    "get_container_logs",
    "get_container_stats",
    "get_all_images",
    "get_image",
    "pull_image",
    "remove_image",
    "build_image",
    "get_all_volumes",
    "create_volume",
    "remove_volume",
]


@pytest.fixture
def settings():
    """Create settings pointing at a fake control plane."""
    return Settings(api_base_url="http://control-plane.test/api/v1", event_buffer_size=5)


@pytest.fixture
def mock_client():
    """Create a mock control-plane client serving the sample payloads."""
    client = MagicMock()
    for name in CLIENT_ASYNC_METHODS:
        setattr(client, name, AsyncMock(return_value=None))
    client.test_connection.return_value = SYSTEM_INFO
    client.get_system_info.return_value = SYSTEM_INFO
    client.get_all_containers.return_value = CONTAINERS
    client.get_all_images.return_value = IMAGES
    client.get_all_volumes.return_value = VOLUMES
    client.base_url = "http://control-plane.test/api/v1"
    return client


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Restore root logger handlers and level after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)

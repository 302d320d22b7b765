"""Unit tests for ImageRepository."""

import pytest

from anchor_client.repositories.images import ImageRepository
from anchor_client.utils.exceptions import ApiResponseError


@pytest.fixture
def repo(mock_client):
    """Create an image repository over the mock client."""
    return ImageRepository(mock_client)


@pytest.mark.asyncio
async def test_stats(repo):
    """Test image statistics."""
    await repo.fetch_all()

    stats = repo.stats

    assert stats.total == 3
    assert stats.total_size == 5500
    assert stats.dangling == 1
    assert stats.tagged == 2


@pytest.mark.asyncio
async def test_dangling_view(repo):
    """Test images without a repository are dangling."""
    await repo.fetch_all()

    assert [image.id for image in repo.dangling] == ["sha256:7777eeee8888ffff9999"]


@pytest.mark.asyncio
async def test_pull_reports_progress(repo, mock_client):
    """Test pulling reports start and completion to the callback."""
    updates = []

    result = await repo.pull("alpine:3.19", on_progress=updates.append)

    assert result.success is True
    mock_client.pull_image.assert_awaited_once_with("alpine:3.19")
    mock_client.get_all_images.assert_awaited_once()
    assert updates[0] == {"status": "pulling", "imageName": "alpine:3.19"}
    assert updates[-1] == {"imageName": "alpine:3.19", "status": "completed"}
    assert repo.pull_progress["status"] == "completed"


@pytest.mark.asyncio
async def test_pull_failure_reports_error(repo, mock_client):
    """Test a failed pull reports the error to the callback."""
    mock_client.pull_image.side_effect = ApiResponseError("manifest unknown")
    updates = []

    result = await repo.pull("nope:latest", on_progress=updates.append)

    assert result.success is False
    assert updates[-1]["status"] == "error"
    assert updates[-1]["error"] == "Failed to pull image: manifest unknown"
    mock_client.get_all_images.assert_not_awaited()


@pytest.mark.asyncio
async def test_progress_callback_errors_are_ignored(repo, mock_client):
    """Test a raising progress callback does not fail the pull."""

    def explode(progress):
        raise RuntimeError("boom")

    result = await repo.pull("alpine:3.19", on_progress=explode)

    assert result.success is True


@pytest.mark.asyncio
async def test_build(repo, mock_client):
    """Test building forwards context, dockerfile and tag."""
    result = await repo.build(".", "Dockerfile", "app:dev")

    assert result.success is True
    mock_client.build_image.assert_awaited_once_with(".", "Dockerfile", "app:dev")
    assert repo.build_progress == {"tag": "app:dev", "status": "completed"}


@pytest.mark.asyncio
async def test_remove_passes_force_flag(repo, mock_client):
    """Test image removal forwards the force flag."""
    await repo.remove("sha256:1111aaaa2222bbbb3333", force=True)

    mock_client.remove_image.assert_awaited_once_with("sha256:1111aaaa2222bbbb3333", True)


@pytest.mark.asyncio
async def test_prune_removes_dangling_with_force(repo, mock_client):
    """Test pruning force-removes dangling images only."""
    await repo.fetch_all()

    result = await repo.prune()

    mock_client.remove_image.assert_awaited_once_with("sha256:7777eeee8888ffff9999", True)
    assert result.successful == 1
    assert result.failed == 0
    assert result.total == 1
    assert result.space_reclaimed == 500


@pytest.mark.asyncio
async def test_prune_counts_failures(repo, mock_client):
    """Test failed removals are counted and reclaim nothing."""
    await repo.fetch_all()
    mock_client.remove_image.side_effect = ApiResponseError("image is in use")

    result = await repo.prune()

    assert result.successful == 0
    assert result.failed == 1
    assert result.space_reclaimed == 0


@pytest.mark.asyncio
async def test_prune_nothing_dangling(repo, mock_client):
    """Test pruning an empty set makes no requests."""
    result = await repo.prune()

    assert result.total == 0
    mock_client.remove_image.assert_not_awaited()


@pytest.mark.asyncio
async def test_prune_takes_no_options(repo, mock_client):
    """Test prune only ever targets dangling images."""
    await repo.fetch_all()

    with pytest.raises(TypeError):
        await repo.prune(dangling=False)

    mock_client.remove_image.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_details(repo, mock_client):
    """Test image details are passed through."""
    mock_client.get_image.return_value = {"id": "sha256:1111aaaa2222bbbb3333"}

    result = await repo.get_details("sha256:1111aaaa2222bbbb3333")

    assert result.success is True
    assert result.data == {"id": "sha256:1111aaaa2222bbbb3333"}

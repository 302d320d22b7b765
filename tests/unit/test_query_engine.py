"""Unit tests for the query engine."""

from datetime import datetime, timezone

import pytest

from anchor_client.models import Container, Image, Volume
from anchor_client.query import (
    apply_query,
    container_name,
    display_name,
    filter_by_query,
    filter_by_status,
    image_name,
    parse_query,
    sort_items,
)
from anchor_client.query.engine import CONTAINER_PROFILE, get_profile
from anchor_client.utils.exceptions import UnsupportedResourceError
from tests.samples import CONTAINERS, IMAGES, VOLUMES


@pytest.fixture
def containers():
    return [Container.model_validate(c) for c in CONTAINERS]


@pytest.fixture
def images():
    return [Image.model_validate(i) for i in IMAGES]


@pytest.fixture
def volumes():
    return [Volume.model_validate(v) for v in VOLUMES]


def names(containers):
    return [container_name(c) for c in containers]


class TestParseQuery:
    """Tests for the prefix grammar."""

    def test_known_prefix(self):
        """Test a known prefix selects the field."""
        assert parse_query("ID:AB12", CONTAINER_PROFILE) == ("id", "ab12")

    def test_free_text(self):
        """Test a plain query has no field."""
        assert parse_query("  Web ", CONTAINER_PROFILE) == (None, "web")

    def test_unknown_prefix_is_free_text(self):
        """Test a colon in an image reference is not a prefix."""
        assert parse_query("nginx:latest", CONTAINER_PROFILE) == (None, "nginx:latest")


class TestFilterByQuery:
    """Tests for query filtering."""

    def test_empty_query_keeps_everything(self, containers):
        """Test empty and blank queries are no-ops."""
        assert filter_by_query(containers, "", "containers") == containers
        assert filter_by_query(containers, "   ", "containers") == containers
        assert filter_by_query(containers, None, "containers") == containers

    def test_id_prefix(self, containers):
        """Test id: matches ID substrings only."""
        assert names(filter_by_query(containers, "id:ab12", "containers")) == ["db"]

    def test_image_prefix(self, containers):
        """Test image: matches the image reference."""
        assert names(filter_by_query(containers, "image:NGINX", "containers")) == ["web"]

    def test_status_prefix(self, containers):
        """Test status: matches status substrings."""
        assert names(filter_by_query(containers, "status:run", "containers")) == ["web"]

    def test_port_prefix(self, containers):
        """Test port: matches published ports."""
        assert names(filter_by_query(containers, "port:8080", "containers")) == ["web"]
        assert names(filter_by_query(containers, "port:6379:6379", "containers")) == ["cache"]

    def test_free_text_searches_all_fields(self, containers):
        """Test free text matches name, image, ID and status."""
        assert names(filter_by_query(containers, "DB", "containers")) == ["db"]
        assert names(filter_by_query(containers, "redis", "containers")) == ["cache"]
        assert names(filter_by_query(containers, "exited", "containers")) == ["db"]

    def test_image_reference_query(self, containers):
        """Test an image reference with a colon is searched as free text."""
        assert names(filter_by_query(containers, "nginx:latest", "containers")) == ["web"]

    def test_image_queries(self, images):
        """Test image search fields."""
        assert [image_name(i) for i in filter_by_query(images, "repo:post", "images")] == [
            "postgres:16"
        ]
        assert len(filter_by_query(images, "tag:latest", "images")) == 1
        assert len(filter_by_query(images, "7777eeee", "images")) == 1

    def test_volume_queries(self, volumes):
        """Test volume search fields."""
        assert [v.name for v in filter_by_query(volumes, "orph", "volumes")] == ["orphan"]
        assert [v.name for v in filter_by_query(volumes, "mount:web", "volumes")] == [
            "web-data"
        ]


class TestFilterByStatus:
    """Tests for status filters."""

    def test_all(self, containers):
        """Test all keeps everything."""
        assert filter_by_status(containers, "all", "containers") == containers
        assert filter_by_status(containers, None, "containers") == containers

    def test_running_and_stopped(self, containers):
        """Test the named container filters."""
        assert names(filter_by_status(containers, "running", "containers")) == ["web"]
        assert names(filter_by_status(containers, "stopped", "containers")) == ["db"]

    def test_literal_container_status(self, containers):
        """Test any other value matches the status literally."""
        assert names(filter_by_status(containers, "paused", "containers")) == ["cache"]
        assert filter_by_status(containers, "dead", "containers") == []

    def test_image_filters(self, images):
        """Test dangling and tagged filters."""
        assert len(filter_by_status(images, "dangling", "images")) == 1
        assert len(filter_by_status(images, "tagged", "images")) == 2

    def test_volume_filters(self, volumes):
        """Test usage and type filters."""
        assert [v.name for v in filter_by_status(volumes, "in-use", "volumes")] == ["web-data"]
        assert len(filter_by_status(volumes, "unused", "volumes")) == 2
        assert len(filter_by_status(volumes, "anonymous", "volumes")) == 1

    def test_unknown_image_filter_raises(self, images):
        """Test kinds without literal matching reject unknown filters."""
        with pytest.raises(UnsupportedResourceError):
            filter_by_status(images, "running", "images")


class TestSortItems:
    """Tests for sorting."""

    def test_no_key_keeps_order(self, containers):
        """Test no sort key keeps the snapshot order."""
        assert sort_items(containers, None, "containers") == containers

    def test_by_name(self, containers):
        """Test sorting by display name."""
        assert names(sort_items(containers, "name", "containers")) == ["cache", "db", "web"]
        assert names(sort_items(containers, "name", "containers", descending=True)) == [
            "web",
            "db",
            "cache",
        ]

    def test_by_status_priority(self, containers):
        """Test running sorts before paused and exited."""
        assert names(sort_items(containers, "status", "containers")) == ["web", "cache", "db"]

    def test_by_created(self, containers):
        """Test sorting by creation time."""
        assert names(sort_items(containers, "created", "containers")) == ["db", "cache", "web"]

    def test_missing_created_sorts_first(self, containers):
        """Test records without a timestamp sort before dated ones."""
        undated = Container(id="zzz", names=["/new"], status="created")

        ordered = sort_items([*containers, undated], "created", "containers")

        assert container_name(ordered[0]) == "new"

    def test_stable_descending(self):
        """Test ties keep their original order when descending."""
        created = datetime(2024, 1, 1, tzinfo=timezone.utc)
        items = [
            Container(id=str(n), names=[f"/c{n}"], status="running", created=created)
            for n in range(4)
        ]

        assert sort_items(items, "created", "containers", descending=True) == items
        assert sort_items(items, "status", "containers") == items

    def test_images_by_size(self, images):
        """Test sorting images by size."""
        sizes = [i.size for i in sort_items(images, "size", "images", descending=True)]
        assert sizes == [4000, 1000, 500]

    def test_volumes_named_before_anonymous(self, volumes):
        """Test anonymous volumes sort after named ones."""
        ordered = [v.name for v in sort_items(volumes, "name", "volumes")]
        assert ordered == ["orphan", "web-data", "f" * 64]

    def test_unknown_key_raises(self, containers):
        """Test an unknown sort key is rejected."""
        with pytest.raises(UnsupportedResourceError):
            sort_items(containers, "colour", "containers")


class TestApplyQuery:
    """Tests for the combined view."""

    def test_combined(self, containers):
        """Test filter, query and sort compose."""
        view = apply_query(
            containers, "containers", query="e", status="all", sort_by="name", descending=True
        )
        assert names(view) == ["web", "db", "cache"]

    def test_source_untouched(self, containers):
        """Test the source collection is not modified."""
        original = list(containers)

        apply_query(containers, "containers", status="running", sort_by="name")

        assert containers == original

    def test_unknown_kind(self, containers):
        """Test an unknown kind is rejected."""
        with pytest.raises(UnsupportedResourceError):
            get_profile("networks")

    def test_stopped_filter_then_sort(self):
        """Test sorting applies to the filtered view only."""
        items = [
            Container(id="a1", names=["/web"], status="running", image="nginx"),
            Container(id="b2", names=["/db"], status="exited", image="postgres"),
        ]

        view = apply_query(items, "containers", status="stopped", sort_by="name")

        assert [c.id for c in view] == ["b2"]


class TestDisplayName:
    """Tests for the shared display name of any record."""

    def test_each_kind(self, containers, images, volumes):
        """Test containers, images and volumes use their kind's name."""
        assert display_name(containers[0]) == "web"
        assert display_name(images[1]) == "postgres:16"
        assert display_name(volumes[1]) == "orphan"

    def test_dangling_image_uses_short_id(self, images):
        """Test an untagged image falls back to its short ID."""
        assert display_name(images[2]) == "7777eeee8888"

    def test_other_values_are_unknown(self):
        """Test anything that is not a resource record is Unknown."""
        assert display_name(None) == "Unknown"
        assert display_name({"name": "web"}) == "Unknown"

"""Tests for breadcrumb path resolution."""

import pytest

from app.core.errors import ErrorReason, InconsistencyError
from app.services.breadcrumbs import (
    category_path_label,
    format_path,
    resolve_path,
    to_breadcrumb_item,
)


@pytest.mark.unit
class TestResolvePath:
    def test_root_only(self, flat_directory):
        path = resolve_path(flat_directory[0], flat_directory)
        assert [item.id for item in path] == ["A"]

    def test_section_path(self, flat_directory):
        path = resolve_path(flat_directory[1], flat_directory)
        assert [item.id for item in path] == ["A", "B"]
        assert path[0].type.value == "campus"
        assert path[1].type.value == "section"

    def test_no_target(self, flat_directory):
        assert resolve_path(None, flat_directory) == []

    def test_missing_parent_gives_partial_path(self, make_category):
        orphan = make_category("X", "section", parent_id="ghost")
        path = resolve_path(orphan, [orphan])
        assert [item.id for item in path] == ["X"]

    def test_accepts_mapping(self, flat_directory):
        by_id = {c.id: c for c in flat_directory}
        path = resolve_path(by_id["B"], by_id)
        assert [item.id for item in path] == ["A", "B"]

    def test_cycle_is_reported(self, make_category):
        x = make_category("X", "section", parent_id="Y")
        y = make_category("Y", "section", parent_id="X")

        with pytest.raises(InconsistencyError) as exc_info:
            resolve_path(x, [x, y])

        assert exc_info.value.reason == ErrorReason.PATH_TOO_DEEP
        assert exc_info.value.status_code == 500

    def test_depth_cap_is_configurable(self, make_category):
        rows = [
            make_category("r", "campus"),
            make_category("m", "section", parent_id="r"),
            make_category("leaf", "section", parent_id="m"),
        ]
        with pytest.raises(InconsistencyError):
            resolve_path(rows[2], rows, max_depth=2)


@pytest.mark.unit
class TestFormatting:
    def test_format_path(self, flat_directory):
        path = resolve_path(flat_directory[1], flat_directory)
        assert format_path(path) == "A > B"
        assert format_path(path, " / ") == "A / B"

    def test_category_path_label(self, flat_directory):
        by_id = {c.id: c for c in flat_directory}
        assert category_path_label(by_id["B"], by_id) == "A > B"
        assert category_path_label(by_id["C"], by_id) == "C"

    def test_breadcrumb_item_fields(self, make_category):
        item = to_breadcrumb_item(make_category("L", "general", icon="📚", name="Library"))
        assert item.model_dump() == {
            "id": "L",
            "name": "Library",
            "type": "general",
            "icon": "📚",
        }

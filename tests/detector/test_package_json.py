"""Unit tests for the package.json anchor detector.

Tests dependency matching, candidate ordering and malformed manifests
using minimal in-memory fixtures.
"""

import json
from pathlib import Path

import pytest

from visual_migrate.detector.package_json import (
    detect_anchor,
    find_anchors,
    read_dependencies,
)
from visual_migrate.errors import MultiplePlatformsDetectedError
from visual_migrate.types import (
    APPLITOOLS,
    CYPRESS,
    JAVASCRIPT,
    PERCY,
    PLAYWRIGHT,
    SAUCE_LABS,
    STORYBOOK,
)


@pytest.fixture
def tmp_repo(tmp_path):
    """Create a minimal temp repo directory."""
    return tmp_path


def _write_pkg(tmp_repo: Path, data: dict) -> None:
    (tmp_repo / "package.json").write_text(json.dumps(data))


class TestReadDependencies:
    def test_merges_dev_dependencies(self, tmp_repo):
        _write_pkg(tmp_repo, {
            "dependencies": {"react": "19.0.0"},
            "devDependencies": {"@percy/cypress": "3.1.0"},
        })
        deps = read_dependencies(tmp_repo)
        assert set(deps) == {"react", "@percy/cypress"}

    def test_no_package_json_returns_empty(self, tmp_repo):
        assert read_dependencies(tmp_repo) == {}

    def test_invalid_json_returns_empty(self, tmp_repo):
        (tmp_repo / "package.json").write_text("not json {{")
        assert read_dependencies(tmp_repo) == {}

    def test_non_object_top_level_returns_empty(self, tmp_repo):
        (tmp_repo / "package.json").write_text("[1, 2, 3]")
        assert read_dependencies(tmp_repo) == {}


class TestFindAnchors:
    def test_percy_cypress(self, tmp_repo):
        _write_pkg(tmp_repo, {"devDependencies": {"@percy/cypress": "3.1.0"}})
        anchors = find_anchors(tmp_repo)
        assert len(anchors) == 1
        anchor = anchors[0]
        assert anchor.platform == PERCY
        assert anchor.framework == CYPRESS
        assert anchor.language == JAVASCRIPT
        assert "percySnapshot" in anchor.magic_strings
        assert anchor.evidence_source == "package.json"
        assert anchor.evidence_match == "@percy/cypress"

    def test_applitools_playwright(self, tmp_repo):
        _write_pkg(tmp_repo, {"devDependencies": {"@applitools/eyes-playwright": "1.0.0"}})
        anchor = find_anchors(tmp_repo)[0]
        assert anchor.platform == APPLITOOLS
        assert anchor.framework == PLAYWRIGHT

    def test_screener_storybook(self, tmp_repo):
        _write_pkg(tmp_repo, {"devDependencies": {"screener-storybook": "0.22.0"}})
        anchor = find_anchors(tmp_repo)[0]
        assert anchor.platform == SAUCE_LABS
        assert anchor.framework == STORYBOOK

    def test_unrelated_dependencies(self, tmp_repo):
        _write_pkg(tmp_repo, {"dependencies": {"lodash": "4.0.0"}})
        assert find_anchors(tmp_repo) == []

    def test_candidates_follow_table_order(self, tmp_repo):
        _write_pkg(tmp_repo, {"devDependencies": {
            "@applitools/eyes-cypress": "3.0.0",
            "@percy/cypress": "3.1.0",
        }})
        platforms = [a.platform for a in find_anchors(tmp_repo)]
        assert platforms == [PERCY, APPLITOOLS]


class TestDetectAnchor:
    def test_single_platform(self, tmp_repo):
        _write_pkg(tmp_repo, {"devDependencies": {"@percy/playwright": "1.0.0"}})
        anchor = detect_anchor(tmp_repo)
        assert anchor.platform == PERCY
        assert anchor.framework == PLAYWRIGHT

    def test_same_platform_twice_merges(self, tmp_repo):
        _write_pkg(tmp_repo, {"devDependencies": {
            "@percy/cypress": "3.1.0",
            "@percy/storybook": "5.0.0",
        }})
        anchor = detect_anchor(tmp_repo)
        assert anchor.platform == PERCY
        # Framework hints disagree, so the framework is left to classification
        assert anchor.framework is None
        assert anchor.language == JAVASCRIPT
        assert "title:" in anchor.magic_strings

    def test_two_platforms_raise(self, tmp_repo):
        _write_pkg(tmp_repo, {"devDependencies": {
            "@percy/cypress": "3.1.0",
            "@applitools/eyes-cypress": "3.0.0",
        }})
        with pytest.raises(MultiplePlatformsDetectedError) as exc_info:
            detect_anchor(tmp_repo)
        assert {c.platform for c in exc_info.value.candidates} == {PERCY, APPLITOOLS}
        assert "@percy/cypress" in str(exc_info.value)

    def test_missing_manifest_is_unknown(self, tmp_repo):
        assert detect_anchor(tmp_repo).is_unknown

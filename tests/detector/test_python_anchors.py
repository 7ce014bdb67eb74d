"""Tests for the Python anchor detectors (requirements and pyproject)."""

import json
from pathlib import Path

import pytest

from visual_migrate.config import ScanPolicy
from visual_migrate.detector import detect
from visual_migrate.detector.anchors import resolve_anchor, resolve_anchors
from visual_migrate.detector.python import detect_anchor, find_anchors
from visual_migrate.detector.python.pyproject import _collect_deps
from visual_migrate.detector.python.requirements import collect_packages
from visual_migrate.types import (
    APPIUM,
    APPLITOOLS,
    PERCY,
    PYTHON,
    ROBOT_FRAMEWORK,
    SAUCE_LABS,
    SELENIUM,
)


def _write_requirements(tmp_path: Path, *lines: str, name: str = "requirements.txt") -> None:
    path = tmp_path / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n")


def _write_pyproject(tmp_path: Path, content: str) -> None:
    (tmp_path / "pyproject.toml").write_text(content)


class TestRequirements:
    def test_strips_specifiers_and_comments(self, tmp_path):
        _write_requirements(
            tmp_path,
            "# visual tests",
            "percy-selenium>=1.0  # pinned later",
            "selenium[extras]==4.20",
            "-r base.txt",
        )
        assert collect_packages(tmp_path) == {"percy_selenium", "selenium"}

    def test_requirements_directory(self, tmp_path):
        _write_requirements(tmp_path, "eyes-selenium==5.20", name="requirements/test.txt")
        assert "eyes_selenium" in collect_packages(tmp_path)

    def test_percy_selenium(self, tmp_path):
        _write_requirements(tmp_path, "percy-selenium")
        anchor = detect_anchor(tmp_path)
        assert anchor.platform == PERCY
        assert anchor.framework == SELENIUM
        assert anchor.language == PYTHON
        assert anchor.evidence_source == "requirements.txt"

    def test_applitools_with_appium(self, tmp_path):
        _write_requirements(tmp_path, "eyes-selenium", "Appium-Python-Client")
        anchor = detect_anchor(tmp_path)
        assert anchor.platform == APPLITOOLS
        assert anchor.framework == APPIUM

    def test_sauce_robot_suite(self, tmp_path):
        _write_requirements(tmp_path, "saucelabs-visual")
        (tmp_path / "tests").mkdir()
        (tmp_path / "tests" / "home.robot").write_text("*** Test Cases ***\n")
        anchor = detect_anchor(tmp_path)
        assert anchor.platform == SAUCE_LABS
        assert anchor.framework == ROBOT_FRAMEWORK
        assert "Visual Snapshot" in anchor.magic_strings

    def test_robot_files_in_ignored_dirs_do_not_count(self, tmp_path):
        _write_requirements(tmp_path, "saucelabs-visual")
        (tmp_path / "node_modules").mkdir()
        (tmp_path / "node_modules" / "x.robot").write_text("")
        assert detect_anchor(tmp_path).framework == SELENIUM

    def test_robot_files_under_policy_ignores_do_not_count(self, tmp_path):
        _write_requirements(tmp_path, "saucelabs-visual")
        (tmp_path / "legacy").mkdir()
        (tmp_path / "legacy" / "home.robot").write_text("*** Test Cases ***\n")
        policy = ScanPolicy().with_ignores("legacy/**")
        assert detect_anchor(tmp_path).framework == ROBOT_FRAMEWORK
        assert detect_anchor(tmp_path, policy).framework == SELENIUM

    def test_resolver_passes_policy_to_python_detector(self, tmp_path):
        _write_requirements(tmp_path, "saucelabs-visual")
        (tmp_path / "suites").mkdir()
        (tmp_path / "suites" / "old.robot").write_text("*** Test Cases ***\n")
        policy = ScanPolicy().with_ignores("suites/old.robot")
        assert resolve_anchor(tmp_path).framework == ROBOT_FRAMEWORK
        assert resolve_anchor(tmp_path, policy).framework == SELENIUM
        assert [a.framework for a in resolve_anchors(tmp_path, policy)] == [SELENIUM]

    def test_unrelated(self, tmp_path):
        _write_requirements(tmp_path, "requests", "pytest")
        assert detect_anchor(tmp_path).is_unknown


class TestPyproject:
    def test_pep621_dependencies(self):
        data = {"project": {
            "dependencies": ["percy-selenium>=1.0", "selenium"],
            "optional-dependencies": {"mobile": ["percy-appium-app"]},
        }}
        assert _collect_deps(data) == {"percy_selenium", "selenium", "percy_appium_app"}

    def test_poetry_groups(self):
        data = {"tool": {"poetry": {
            "dependencies": {"python": "^3.11"},
            "group": {"test": {"dependencies": {"eyes-selenium": "^5.0"}}},
        }}}
        assert _collect_deps(data) == {"eyes_selenium"}

    def test_anchor_from_pyproject(self, tmp_path):
        _write_pyproject(tmp_path, '[project]\nname = "x"\ndependencies = ["saucelabs-visual"]\n')
        anchor = detect_anchor(tmp_path)
        assert anchor.platform == SAUCE_LABS
        assert anchor.evidence_source == "pyproject.toml"

    def test_invalid_toml_is_ignored(self, tmp_path):
        _write_pyproject(tmp_path, "[project\nname = ")
        assert find_anchors(tmp_path) == []

    @pytest.mark.parametrize(
        "content",
        [
            'project = "x"\n',
            '[project]\ndependencies = "percy-selenium"\n',
            '[project]\noptional-dependencies = ["percy-selenium"]\n',
            "[tool]\npoetry = 1\n",
            '[tool.poetry.group]\ntest = "eyes-selenium"\n',
        ],
    )
    def test_misshapen_tables_are_ignored(self, tmp_path, content):
        _write_pyproject(tmp_path, content)
        assert find_anchors(tmp_path) == []

    def test_collect_deps_rejects_non_table_project(self):
        with pytest.raises(ValueError, match="`project`"):
            _collect_deps({"project": "x"})

    def test_misshapen_pyproject_does_not_break_detection(self, tmp_path):
        _write_pyproject(tmp_path, 'project = "x"\n')
        (tmp_path / "package.json").write_text(json.dumps({"devDependencies": {"@percy/cypress": "3.1.0"}}))
        (tmp_path / "cypress").mkdir()
        (tmp_path / "cypress" / "home.cy.js").write_text("cy.percySnapshot('Home');\n")
        result = detect(tmp_path)
        assert result.platform == PERCY
        assert result.evidence.platform.source == "package.json"

    def test_requirements_come_first(self, tmp_path):
        _write_requirements(tmp_path, "percy-selenium")
        _write_pyproject(tmp_path, '[project]\nname = "x"\ndependencies = ["percy-selenium"]\n')
        sources = [a.evidence_source for a in find_anchors(tmp_path)]
        assert sources == ["requirements.txt", "pyproject.toml"]
        assert detect_anchor(tmp_path).evidence_source == "requirements.txt"

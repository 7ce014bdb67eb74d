"""Tests for the Robot Framework keyword rewriter."""

from visual_migrate.transform.robot import UNSUPPORTED_DETAILS, RobotRewriter
from visual_migrate.types import PERCY, ROBOT_FRAMEWORK, SAUCE_LABS

SUITE = """\
*** Settings ***
Library    SauceLabs.Visual

*** Test Cases ***
Login Page
    Create Visual Build    Login suite
    Open Browser    https://example.com    chrome
    Visual Snapshot    Login    ignore_regions=.ad
    Finish Visual Build
"""


class TestRobotRewriter:
    def test_sauce_keywords(self):
        result = RobotRewriter(SAUCE_LABS, ROBOT_FRAMEWORK, "tests/login.robot").run(SUITE)
        assert "    SmartUI Snapshot    Login    ignore_regions=.ad\n" in result.content
        assert "Create Visual Build" not in result.content
        assert "Finish Visual Build" not in result.content
        assert "    Open Browser    https://example.com    chrome\n" in result.content
        assert result.snapshot_count == 1
        assert result.warnings == []

    def test_crlf_line_endings_survive(self):
        source = "*** Test Cases ***\r\nHome\r\n    Visual Snapshot    Home\r\n"
        result = RobotRewriter(SAUCE_LABS, ROBOT_FRAMEWORK).run(source)
        assert result.content == "*** Test Cases ***\r\nHome\r\n    SmartUI Snapshot    Home\r\n"

    def test_no_keywords_is_noop(self):
        source = "*** Test Cases ***\nHome\n    Open Browser    https://example.com\n"
        result = RobotRewriter(SAUCE_LABS, ROBOT_FRAMEWORK).run(source)
        assert result.content is source
        assert result.snapshot_count == 0

    def test_other_platforms_warn(self):
        result = RobotRewriter(PERCY, ROBOT_FRAMEWORK, "tests/home.robot").run(SUITE)
        assert result.content == SUITE
        assert result.snapshot_count == 0
        assert len(result.warnings) == 1
        assert result.warnings[0].message == "Robot Framework transformation is not available for Percy"
        assert result.warnings[0].details == UNSUPPORTED_DETAILS
        assert result.warnings[0].file == "tests/home.robot"

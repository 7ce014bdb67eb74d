"""Tests for the config-file anchor detector."""

import pytest

from visual_migrate.detector.config_files import config_files_for, detect_anchor, find_anchors
from visual_migrate.errors import MultiplePlatformsDetectedError
from visual_migrate.types import APPLITOOLS, PERCY, SAUCE_LABS


class TestConfigFiles:
    def test_percy_yml(self, tmp_path):
        (tmp_path / ".percy.yml").write_text("version: 2\n")
        anchor = detect_anchor(tmp_path)
        assert anchor.platform == PERCY
        assert anchor.framework is None
        assert anchor.language is None
        assert anchor.evidence_source == "config-file"
        assert anchor.evidence_match == ".percy.yml"

    def test_applitools_config(self, tmp_path):
        (tmp_path / "applitools.config.js").write_text("module.exports = {};\n")
        assert detect_anchor(tmp_path).platform == APPLITOOLS

    def test_saucectl(self, tmp_path):
        (tmp_path / "saucectl.yml").write_text("apiVersion: v1alpha\n")
        assert detect_anchor(tmp_path).platform == SAUCE_LABS

    def test_lists_every_config_file_of_platform(self, tmp_path):
        (tmp_path / ".percy.yml").write_text("")
        (tmp_path / "percy.config.js").write_text("")
        assert config_files_for(tmp_path, PERCY) == [".percy.yml", "percy.config.js"]

    def test_nested_config_is_not_an_anchor(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / ".percy.yml").write_text("")
        assert find_anchors(tmp_path) == []

    def test_directory_named_like_config_is_ignored(self, tmp_path):
        (tmp_path / ".percyrc").mkdir()
        assert find_anchors(tmp_path) == []

    def test_two_platforms_raise(self, tmp_path):
        (tmp_path / ".percy.yml").write_text("")
        (tmp_path / "applitools.config.js").write_text("")
        with pytest.raises(MultiplePlatformsDetectedError):
            detect_anchor(tmp_path)

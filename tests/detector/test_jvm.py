"""Tests for the JVM anchor detectors (Maven and Gradle)."""

from pathlib import Path

import pytest

from visual_migrate.detector.jvm import detect_anchor, find_anchors
from visual_migrate.detector.jvm.gradle import parse_coordinates
from visual_migrate.detector.jvm.maven import read_coordinates
from visual_migrate.errors import MultiplePlatformsDetectedError
from visual_migrate.types import APPIUM, APPLITOOLS, JAVA, PERCY, SAUCE_LABS, SELENIUM

_POM_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.example</groupId>
  <artifactId>visual-tests</artifactId>
  <dependencies>
{deps}
  </dependencies>
</project>
"""

_DEP = """    <dependency>
      <groupId>{group}</groupId>
      <artifactId>{artifact}</artifactId>
      <version>1.0.0</version>
    </dependency>"""


def _write_pom(tmp_path: Path, *coordinates: tuple[str, str], namespaced: bool = True) -> None:
    deps = "\n".join(_DEP.format(group=g, artifact=a) for g, a in coordinates)
    content = _POM_TEMPLATE.format(deps=deps)
    if not namespaced:
        content = content.replace(' xmlns="http://maven.apache.org/POM/4.0.0"', "")
    (tmp_path / "pom.xml").write_text(content)


def _write_gradle(tmp_path: Path, content: str, name: str = "build.gradle") -> None:
    (tmp_path / name).write_text(content)


class TestMaven:
    def test_reads_namespaced_coordinates(self, tmp_path):
        _write_pom(tmp_path, ("io.percy", "percy-java-selenium"))
        assert ("io.percy", "percy-java-selenium") in read_coordinates(tmp_path)

    def test_reads_plain_coordinates(self, tmp_path):
        _write_pom(tmp_path, ("io.percy", "percy-java-selenium"), namespaced=False)
        assert ("io.percy", "percy-java-selenium") in read_coordinates(tmp_path)

    def test_percy_selenium(self, tmp_path):
        _write_pom(tmp_path, ("io.percy", "percy-java-selenium"))
        anchor = detect_anchor(tmp_path)
        assert anchor.platform == PERCY
        assert anchor.framework == SELENIUM
        assert anchor.language == JAVA
        assert anchor.evidence_source == "pom.xml"
        assert anchor.evidence_match == "io.percy:percy-java-selenium"

    def test_applitools_appium(self, tmp_path):
        _write_pom(tmp_path, ("com.applitools", "eyes-appium-java5"))
        anchor = detect_anchor(tmp_path)
        assert anchor.platform == APPLITOOLS
        assert anchor.framework == APPIUM

    def test_sauce_with_appium_client(self, tmp_path):
        _write_pom(tmp_path, ("com.saucelabs.visual", "java-client"), ("io.appium", "java-client"))
        anchor = detect_anchor(tmp_path)
        assert anchor.platform == SAUCE_LABS
        assert anchor.framework == APPIUM

    def test_sauce_without_appium_client(self, tmp_path):
        _write_pom(tmp_path, ("com.saucelabs.visual", "java-client"))
        assert detect_anchor(tmp_path).framework == SELENIUM

    def test_appium_java_client_alone_is_not_sauce(self, tmp_path):
        _write_pom(tmp_path, ("io.appium", "java-client"))
        assert detect_anchor(tmp_path).is_unknown

    def test_malformed_pom_is_ignored(self, tmp_path):
        (tmp_path / "pom.xml").write_text("<project><dependencies>")
        assert read_coordinates(tmp_path) == []
        assert detect_anchor(tmp_path).is_unknown


class TestGradle:
    def test_string_notation(self):
        content = 'testImplementation "io.percy:percy-java-selenium:2.0.0"'
        assert parse_coordinates(content) == [("io.percy", "percy-java-selenium")]

    def test_map_notation(self):
        content = "testImplementation group: 'com.applitools', name: 'eyes-selenium-java5', version: '5.0'"
        assert ("com.applitools", "eyes-selenium-java5") in parse_coordinates(content)

    def test_comments_are_skipped(self):
        content = '// testImplementation "io.percy:percy-java-selenium:2.0.0"'
        assert parse_coordinates(content) == []

    def test_kotlin_dsl(self, tmp_path):
        _write_gradle(
            tmp_path,
            'dependencies {\n    testImplementation("com.applitools:eyes-selenium-java5:5.70.0")\n}\n',
            name="build.gradle.kts",
        )
        anchor = detect_anchor(tmp_path)
        assert anchor.platform == APPLITOOLS
        assert anchor.evidence_source == "build.gradle.kts"

    def test_no_gradle_file(self, tmp_path):
        assert find_anchors(tmp_path) == []


class TestJvmCombined:
    def test_maven_and_gradle_agree(self, tmp_path):
        _write_pom(tmp_path, ("io.percy", "percy-java-selenium"))
        _write_gradle(tmp_path, 'testImplementation "io.percy:percy-java-selenium:2.0.0"')
        anchor = detect_anchor(tmp_path)
        assert anchor.platform == PERCY
        assert anchor.evidence_source == "pom.xml"

    def test_maven_and_gradle_disagree(self, tmp_path):
        _write_pom(tmp_path, ("io.percy", "percy-java-selenium"))
        _write_gradle(tmp_path, 'testImplementation "com.applitools:eyes-selenium-java5:5.0"')
        with pytest.raises(MultiplePlatformsDetectedError):
            detect_anchor(tmp_path)

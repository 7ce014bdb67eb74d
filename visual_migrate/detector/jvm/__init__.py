"""JVM ecosystem anchor detector (Maven / Gradle).

Entry point: detect_anchor(repo_dir) -> AnchorResult

Candidates from pom.xml come first, then build.gradle(.kts).
"""

from pathlib import Path

from visual_migrate.detector.candidates import pick_anchor
from visual_migrate.detector.jvm import gradle, maven
from visual_migrate.types import AnchorResult


def find_anchors(repo_dir: Path) -> list[AnchorResult]:
    return maven.find_anchors(repo_dir) + gradle.find_anchors(repo_dir)


def detect_anchor(repo_dir: Path) -> AnchorResult:
    return pick_anchor(find_anchors(repo_dir))

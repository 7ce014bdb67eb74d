"""build.gradle / build.gradle.kts anchor detector.

Uses a text scan for "group:artifact[:version]" dependency notation,
which covers both the Groovy and the Kotlin DSL. The map notation
(group: 'x', name: 'y') is recognised as well.
"""

import logging
import re
from pathlib import Path
from typing import Optional

from visual_migrate.detector.jvm.artifacts import anchors_for
from visual_migrate.types import AnchorResult

logger = logging.getLogger(__name__)

_GRADLE_FILES = ("build.gradle.kts", "build.gradle")

_STRING_NOTATION = re.compile(r"""["']([\w.\-]+):([\w.\-]+)(?::[^"']*)?["']""")
_MAP_NOTATION = re.compile(
    r"""group\s*[:=]\s*["']([\w.\-]+)["']\s*,\s*name\s*[:=]\s*["']([\w.\-]+)["']"""
)


def _read_gradle_file(repo_dir: Path) -> tuple[str, str]:
    """Return (content, filename) for the first gradle build file found."""
    for name in _GRADLE_FILES:
        path = repo_dir / name
        if path.exists():
            try:
                return path.read_text(encoding="utf-8"), name
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Failed to read %s: %s", name, exc)
    return "", ""


def parse_coordinates(content: str) -> list[tuple[Optional[str], str]]:
    coordinates: list[tuple[Optional[str], str]] = []
    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith("//"):
            continue
        for match in _STRING_NOTATION.finditer(stripped):
            coordinates.append((match.group(1), match.group(2)))
        for match in _MAP_NOTATION.finditer(stripped):
            coordinates.append((match.group(1), match.group(2)))
    return coordinates


def find_anchors(repo_dir: Path) -> list[AnchorResult]:
    content, filename = _read_gradle_file(repo_dir)
    if not content:
        return []
    return anchors_for(parse_coordinates(content), filename)

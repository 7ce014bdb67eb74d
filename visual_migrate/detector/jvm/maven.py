"""pom.xml anchor detector.

Uses xml.etree.ElementTree (stdlib) to read dependency coordinates from
<dependencies> and <dependencyManagement>, with or without the Maven
POM namespace.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from visual_migrate.detector.jvm.artifacts import anchors_for
from visual_migrate.types import AnchorResult

logger = logging.getLogger(__name__)

# Maven XML namespace used by pom.xml files
_POM_NS = "http://maven.apache.org/POM/4.0.0"


def _ns(tag: str) -> str:
    return f"{{{_POM_NS}}}{tag}"


def _text(element: ET.Element, tag: str) -> Optional[str]:
    value = element.findtext(_ns(tag))
    if value is None:
        value = element.findtext(tag)
    return value.strip() if value and value.strip() else None


def _parse_coordinates(root: ET.Element) -> list[tuple[Optional[str], str]]:
    """Collect (groupId, artifactId) of every declared dependency."""
    coordinates: list[tuple[Optional[str], str]] = []
    dependencies = root.findall(f".//{_ns('dependency')}") + root.findall(".//dependency")
    for dep in dependencies:
        artifact = _text(dep, "artifactId")
        if artifact:
            coordinates.append((_text(dep, "groupId"), artifact))
    return coordinates


def read_coordinates(repo_dir: Path) -> list[tuple[Optional[str], str]]:
    path = repo_dir / "pom.xml"
    if not path.exists():
        return []

    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as exc:
        logger.warning("Failed to parse pom.xml: %s", exc)
        return []

    return _parse_coordinates(root)


def find_anchors(repo_dir: Path) -> list[AnchorResult]:
    return anchors_for(read_coordinates(repo_dir), "pom.xml")

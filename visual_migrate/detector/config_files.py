"""Config-file anchor detector.

A platform config file at the project root names the platform but says
nothing about framework or language.
"""

import logging
from pathlib import Path

from visual_migrate.detector.candidates import pick_anchor
from visual_migrate.detector.signatures import PLATFORM_CONFIG_FILES, PLATFORM_MAGIC_STRINGS
from visual_migrate.types import AnchorResult

logger = logging.getLogger(__name__)


def config_files_for(repo_dir: Path, platform: str) -> list[str]:
    return [name for name in PLATFORM_CONFIG_FILES.get(platform, ()) if (repo_dir / name).is_file()]


def find_anchors(repo_dir: Path) -> list[AnchorResult]:
    candidates: list[AnchorResult] = []
    for platform in PLATFORM_CONFIG_FILES:
        found = config_files_for(repo_dir, platform)
        if found:
            logger.debug("Found %s config file(s): %s", platform, ", ".join(found))
            candidates.append(AnchorResult(
                platform=platform,
                magic_strings=PLATFORM_MAGIC_STRINGS[platform],
                evidence_source="config-file",
                evidence_match=found[0],
            ))
    return candidates


def detect_anchor(repo_dir: Path) -> AnchorResult:
    return pick_anchor(find_anchors(repo_dir))

"""Anchor resolver: phase 1 of detection.

Runs every ecosystem detector, then decides whether the project has
zero, one, or more than one candidate platform. Manifest and config
evidence is authoritative, so it is collected before any content is
read and its framework/language hints outrank content inference.
"""

import logging
from functools import partial
from pathlib import Path
from typing import Callable, Optional

from visual_migrate.config import ScanPolicy
from visual_migrate.detector import config_files, jvm, package_json, python
from visual_migrate.detector.candidates import merge_candidates, pick_anchor
from visual_migrate.types import AnchorResult

logger = logging.getLogger(__name__)


def _detectors(
    policy: Optional[ScanPolicy],
) -> list[tuple[str, Callable[[Path], AnchorResult], Callable[[Path], list[AnchorResult]]]]:
    """Ecosystem detectors in priority order.

    Config files come last because they carry no framework or language
    hints. Only the Python detector walks the tree, so only it takes the
    policy.
    """
    return [
        ("package.json", package_json.detect_anchor, package_json.find_anchors),
        ("jvm", jvm.detect_anchor, jvm.find_anchors),
        ("python", partial(python.detect_anchor, policy=policy), partial(python.find_anchors, policy=policy)),
        ("config-file", config_files.detect_anchor, config_files.find_anchors),
    ]


def resolve_anchor(project_root: Path, policy: Optional[ScanPolicy] = None) -> AnchorResult:
    """Return the project's single anchor, or an UNKNOWN anchor.

    Raises MultiplePlatformsDetectedError when one detector, or the
    detectors together, point at more than one platform. The
    collect-all counterpart is resolve_anchors().
    """
    project_root = Path(project_root)
    found: list[AnchorResult] = []
    for name, detect, _find in _detectors(policy):
        anchor = detect(project_root)
        if not anchor.is_unknown:
            logger.debug("Anchor from %s: %s", name, anchor.describe())
            found.append(anchor)

    anchor = pick_anchor(found)
    if anchor.is_unknown:
        logger.info("No platform anchor found in %s", project_root)
    else:
        logger.info("Platform anchor: %s", anchor.describe())
    return anchor


def resolve_anchors(project_root: Path, policy: Optional[ScanPolicy] = None) -> list[AnchorResult]:
    """Collect-all mode: one merged anchor per candidate platform, never raises."""
    project_root = Path(project_root)
    candidates: list[AnchorResult] = []
    for _name, _detect, find in _detectors(policy):
        candidates.extend(find(project_root))
    return merge_candidates(candidates)

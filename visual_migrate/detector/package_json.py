"""package.json anchor detector.

Maps visual testing client dependencies (dependencies and
devDependencies) to a platform and framework. Every matching
dependency becomes its own candidate.
"""

import json
import logging
from pathlib import Path

from visual_migrate.detector.candidates import pick_anchor
from visual_migrate.types import (
    APPLITOOLS,
    CYPRESS,
    JAVASCRIPT,
    PERCY,
    PLAYWRIGHT,
    SAUCE_LABS,
    SELENIUM,
    STORYBOOK,
    AnchorResult,
)

logger = logging.getLogger(__name__)

_PERCY_STRINGS = ("percySnapshot", "percyScreenshot")
_PERCY_STORY_STRINGS = _PERCY_STRINGS + ("export default", "export const", "title:")
_EYES_STRINGS = ("eyes.check", "eyes.open", "eyes.close")
_EYES_CYPRESS_STRINGS = _EYES_STRINGS + ("eyesCheckWindow", "eyesOpen", "eyesClose")
_SAUCE_STRINGS = ("sauceVisualCheck", "sauceVisualSnapshot")
_SCREENER_STRINGS = ("screener.snapshot", "screener.check")

# (dependency, platform, framework, magic strings). Order is preserved
# in the candidate list.
DEPENDENCY_INDICATORS: list[tuple[str, str, str, tuple[str, ...]]] = [
    ("@percy/cypress", PERCY, CYPRESS, _PERCY_STRINGS),
    ("@percy/playwright", PERCY, PLAYWRIGHT, _PERCY_STRINGS),
    ("@percy/storybook", PERCY, STORYBOOK, _PERCY_STORY_STRINGS),
    ("@percy/selenium-webdriver", PERCY, SELENIUM, _PERCY_STRINGS + ("percy.screenshot",)),
    ("@applitools/eyes-cypress", APPLITOOLS, CYPRESS, _EYES_CYPRESS_STRINGS),
    ("@applitools/eyes-playwright", APPLITOOLS, PLAYWRIGHT, _EYES_STRINGS),
    ("@applitools/eyes-storybook", APPLITOOLS, STORYBOOK, _EYES_STRINGS),
    ("@applitools/eyes-selenium", APPLITOOLS, SELENIUM, _EYES_STRINGS),
    ("@saucelabs/cypress-visual-plugin", SAUCE_LABS, CYPRESS, _SAUCE_STRINGS),
    ("screener-storybook", SAUCE_LABS, STORYBOOK, _SCREENER_STRINGS),
]


def read_dependencies(repo_dir: Path) -> dict[str, str]:
    """Merged dependencies + devDependencies, or {} when unreadable."""
    pkg_path = repo_dir / "package.json"
    if not pkg_path.exists():
        return {}

    try:
        data = json.loads(pkg_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("Failed to parse package.json: %s", exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring package.json: top level is not an object")
        return {}

    deps: dict[str, str] = {}
    for key in ("dependencies", "devDependencies"):
        section = data.get(key)
        if isinstance(section, dict):
            deps.update(section)
    return deps


def find_anchors(repo_dir: Path) -> list[AnchorResult]:
    """Every candidate implied by package.json, in table order."""
    deps = read_dependencies(repo_dir)
    return [
        AnchorResult(
            platform=platform,
            framework=framework,
            language=JAVASCRIPT,
            magic_strings=strings,
            evidence_source="package.json",
            evidence_match=dep,
        )
        for dep, platform, framework, strings in DEPENDENCY_INDICATORS
        if dep in deps
    ]


def detect_anchor(repo_dir: Path) -> AnchorResult:
    """The package.json anchor; raises when it implies several platforms."""
    return pick_anchor(find_anchors(repo_dir))

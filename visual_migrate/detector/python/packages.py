"""Visual testing client packages published to PyPI.

Shared by the requirements and pyproject parsers. Package names are
compared in normalised form (lower case, dashes and dots as
underscores).
"""

import os
from typing import Optional
from pathlib import Path

from visual_migrate.config import ScanPolicy
from visual_migrate.types import (
    APPIUM,
    APPLITOOLS,
    PERCY,
    PYTHON,
    ROBOT_FRAMEWORK,
    SAUCE_LABS,
    SELENIUM,
    AnchorResult,
)

APPIUM_CLIENT = "appium_python_client"

_SAUCE_STRINGS = ("SauceVisual", "sauce_visual_check", "check_page", "saucelabs_visual")

# (package, platform, framework, framework when Appium is also declared,
# magic strings)
PACKAGE_INDICATORS: list[tuple[str, str, str, str, tuple[str, ...]]] = [
    ("percy_selenium", PERCY, SELENIUM, SELENIUM, ("percy_snapshot", "percy.snapshot")),
    ("percy_appium_app", PERCY, APPIUM, APPIUM, ("percy_screenshot",)),
    ("eyes_selenium", APPLITOOLS, SELENIUM, APPIUM, ("eyes.check", "eyes.open", "eyes.close", "applitools")),
    ("saucelabs_visual", SAUCE_LABS, SELENIUM, APPIUM, _SAUCE_STRINGS),
]


def normalise(name: str) -> str:
    return name.strip().lower().replace("-", "_").replace(".", "_")


def has_robot_files(repo_dir: Path, policy: Optional[ScanPolicy] = None) -> bool:
    """Whether any *.robot file outside the policy's ignored paths exists."""
    policy = policy or ScanPolicy()
    for dirpath, dirnames, filenames in os.walk(repo_dir):
        dirnames[:] = [d for d in dirnames if not policy.is_ignored_dir(d)]
        rel_dir = Path(dirpath).relative_to(repo_dir).as_posix()
        for name in filenames:
            rel_path = name if rel_dir == "." else f"{rel_dir}/{name}"
            if name.endswith(".robot") and not policy.is_ignored(rel_path):
                return True
    return False


def anchors_for(
    packages: set[str],
    source: str,
    repo_dir: Path,
    policy: Optional[ScanPolicy] = None,
) -> list[AnchorResult]:
    has_appium = APPIUM_CLIENT in packages
    candidates: list[AnchorResult] = []
    for package, platform, framework, appium_framework, strings in PACKAGE_INDICATORS:
        if package not in packages:
            continue
        chosen = appium_framework if has_appium else framework
        if package == "saucelabs_visual" and not has_appium and has_robot_files(repo_dir, policy):
            chosen = ROBOT_FRAMEWORK
            strings = strings + ("Visual Snapshot",)
        candidates.append(AnchorResult(
            platform=platform,
            framework=chosen,
            language=PYTHON,
            magic_strings=strings,
            evidence_source=source,
            evidence_match=package,
        ))
    return candidates

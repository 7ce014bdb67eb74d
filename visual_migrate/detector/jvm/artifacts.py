"""Visual testing client artifacts published to Maven Central.

Shared by the Maven and Gradle parsers, which only differ in how they
extract (groupId, artifactId) coordinates.
"""

from typing import Optional

from visual_migrate.types import (
    APPIUM,
    APPLITOOLS,
    JAVA,
    PERCY,
    SAUCE_LABS,
    SELENIUM,
    AnchorResult,
)

_PERCY_STRINGS = ("percy.snapshot", "percy.screenshot", "io.percy")
_EYES_STRINGS = ("eyes.check", "eyes.open", "eyes.close", "com.applitools")
_SAUCE_STRINGS = ("sauceVisualCheck", "com.saucelabs.visual")

# Appium Java client coordinates.
APPIUM_ARTIFACTS: set[tuple[str, str]] = {
    ("io.appium", "java-client"),
    ("io.appium", "appium-java-client"),
}

# (groupId, artifactId, platform, framework, framework when Appium is
# also declared, magic strings)
ARTIFACT_INDICATORS: list[tuple[str, str, str, str, str, tuple[str, ...]]] = [
    ("io.percy", "percy-java-selenium", PERCY, SELENIUM, SELENIUM, _PERCY_STRINGS),
    ("io.percy", "percy-appium-java", PERCY, APPIUM, APPIUM, _PERCY_STRINGS),
    ("com.applitools", "eyes-selenium-java5", APPLITOOLS, SELENIUM, SELENIUM, _EYES_STRINGS),
    ("com.applitools", "eyes-selenium-java", APPLITOOLS, SELENIUM, SELENIUM, _EYES_STRINGS),
    ("com.applitools", "eyes-appium-java5", APPLITOOLS, APPIUM, APPIUM, _EYES_STRINGS),
    ("com.saucelabs.visual", "java-client", SAUCE_LABS, SELENIUM, APPIUM, _SAUCE_STRINGS),
]


def anchors_for(coordinates: list[tuple[Optional[str], str]], source: str) -> list[AnchorResult]:
    """Match coordinates against the artifact table.

    A missing groupId matches on the artifactId alone, except for the
    generic ``java-client`` name which needs its group to be known.
    """
    has_appium = any(
        (group, artifact) in APPIUM_ARTIFACTS
        or (group is None and artifact == "appium-java-client")
        for group, artifact in coordinates
    )
    candidates: list[AnchorResult] = []
    for group_id, artifact_id, platform, framework, appium_framework, strings in ARTIFACT_INDICATORS:
        for group, artifact in coordinates:
            if artifact != artifact_id:
                continue
            if group is None and artifact == "java-client":
                continue
            if group is not None and group != group_id:
                continue
            candidates.append(AnchorResult(
                platform=platform,
                framework=appium_framework if has_appium else framework,
                language=JAVA,
                magic_strings=strings,
                evidence_source=source,
                evidence_match=f"{group_id}:{artifact_id}",
            ))
            break
    return candidates

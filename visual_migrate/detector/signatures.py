"""Signature tables: static facts about platforms and frameworks.

Nothing here makes a decision. Magic strings are literal substrings of
each platform's API; framework signatures are weighted regexes whose
weights are summed across every implicated file.

Weights follow one rule: idioms unique to a framework sit near 1.0,
idioms shared between frameworks (describe/it) sit around 0.3 so they
nudge a decision without dominating it.

Declaration order of every table is its tie-break priority.
"""

import re
from dataclasses import dataclass

from visual_migrate.types import (
    APPIUM,
    APPLITOOLS,
    CYPRESS,
    PERCY,
    PLAYWRIGHT,
    ROBOT_FRAMEWORK,
    SAUCE_LABS,
    SELENIUM,
    STORYBOOK,
)


@dataclass(frozen=True)
class Signature:
    pattern: re.Pattern
    weight: float

    @property
    def text(self) -> str:
        return self.pattern.pattern


def _sig(pattern: str, weight: float) -> Signature:
    return Signature(re.compile(pattern), weight)


# ---------------------------------------------------------------------------
# Platform magic strings
# ---------------------------------------------------------------------------

# Only platform API markers belong here. Framework idioms (cy.visit,
# export default, ...) would implicate ordinary test files during a cold
# search and are scored by FRAMEWORK_SIGNATURES instead.
PLATFORM_MAGIC_STRINGS: dict[str, tuple[str, ...]] = {
    PERCY: (
        "percySnapshot",
        "percyScreenshot",
        "percy_snapshot",
        "percy_screenshot",
        "percy.capture",
        "percy.snapshot",
        "percy.screenshot",
        "@percy/cypress",
        "@percy/playwright",
        "@percy/storybook",
        "@percy/selenium-webdriver",
        "io.percy",
    ),
    APPLITOOLS: (
        "eyes.check",
        "eyes.open",
        "eyes.close",
        "eyes.checkWindow",
        "eyes.checkElement",
        "eyesCheckWindow",
        "eyesOpen",
        "@applitools/eyes",
        "com.applitools",
        "applitools.selenium",
    ),
    SAUCE_LABS: (
        "sauceVisualCheck",
        "sauceVisualSnapshot",
        "sauce_visual_check",
        "sauce.visual",
        "screener.snapshot",
        "screener.check",
        "saucelabs_visual",
        "SauceVisual",
        "com.saucelabs.visual",
        "Visual Snapshot",
    ),
}


def all_magic_strings() -> tuple[str, ...]:
    """Union of every platform's table, in declaration order (cold search)."""
    seen: dict[str, None] = {}
    for strings in PLATFORM_MAGIC_STRINGS.values():
        for s in strings:
            seen.setdefault(s, None)
    return tuple(seen)


# ---------------------------------------------------------------------------
# Framework signatures
# ---------------------------------------------------------------------------

FRAMEWORK_SIGNATURES: dict[str, tuple[Signature, ...]] = {
    CYPRESS: (
        _sig(r"cy\.(visit|get|contains|click|type|find|should|wait|intercept|request)\(", 0.9),
        _sig(r"Cypress\.Commands\.add", 0.8),
        _sig(r"cypress\.config\.", 0.7),
        _sig(r"cy\.(on|off|window|document)\(", 0.6),
        _sig(r"describe\s*\(\s*['\"]", 0.3),
        _sig(r"it\s*\(\s*['\"]", 0.3),
    ),
    PLAYWRIGHT: (
        _sig(r"page\.(goto|click|fill|locator|getByRole|getByText|getByLabel)\(", 0.9),
        _sig(r"expect\s*\(\s*page\s*\)", 0.8),
        _sig(r"test\s*\(\s*['\"]", 0.5),
        _sig(r"browser\.(newPage|close)\(", 0.7),
        _sig(r"context\.(newPage|close)\(", 0.6),
        _sig(r"playwright\.config\.", 0.7),
    ),
    SELENIUM: (
        _sig(r"new ChromeDriver\(\)", 0.7),
        _sig(r"new FirefoxDriver\(\)", 0.7),
        _sig(r"new EdgeDriver\(\)", 0.7),
        _sig(r"WebDriverWait\s*\(", 0.6),
        _sig(r"By\.(id|cssSelector|xpath|className|tagName)\(", 0.5),
        _sig(r"driver\.(findElement|findElements)\(", 0.6),
        _sig(r"Actions\s*\(", 0.5),
        _sig(r"JavascriptExecutor", 0.4),
    ),
    ROBOT_FRAMEWORK: (
        _sig(r"Open Browser", 0.8),
        _sig(r"Click Element", 0.7),
        _sig(r"Input Text", 0.7),
        _sig(r"Get Text", 0.6),
        _sig(r"Wait Until Element Is Visible", 0.6),
        _sig(r"Robot Framework", 0.5),
    ),
    APPIUM: (
        _sig(r"driver\.findElementBy", 0.8),
        _sig(r"MobileElement", 0.7),
        _sig(r"AppiumDriver", 0.7),
        _sig(r"DesiredCapabilities", 0.6),
        _sig(r"TouchAction", 0.6),
        _sig(r"appium", 0.5),
    ),
    STORYBOOK: (
        _sig(r"\.stories\.(js|ts|jsx|tsx)", 0.9),
        _sig(r"export default.*title:", 0.8),
        _sig(r"export const.*=.*\(\)", 0.7),
        _sig(r"\.add\(", 0.6),
        _sig(r"Storybook", 0.5),
    ),
}

# Chosen when no framework scores above zero.
DEFAULT_FRAMEWORK = SELENIUM


# ---------------------------------------------------------------------------
# File fingerprints
# ---------------------------------------------------------------------------

PLATFORM_CONFIG_FILES: dict[str, tuple[str, ...]] = {
    PERCY: (
        ".percy.yml", ".percy.yaml", ".percy.js", ".percyrc",
        "percy.config.js", "percy.config.ts",
    ),
    APPLITOOLS: (
        "applitools.config.js", "applitools.config.ts", "applitools.config.json",
    ),
    SAUCE_LABS: (
        "saucectl.yml", "sauce.config.js", "sauce.config.ts", "sauce.config.json",
    ),
}

CI_FILE_PATTERNS: tuple[str, ...] = (
    ".github/workflows/**/*.yml",
    ".github/workflows/**/*.yaml",
    ".gitlab-ci.yml",
    "Jenkinsfile",
    "azure-pipelines.yml",
    ".circleci/config.yml",
)

PACKAGE_MANAGER_FILES: tuple[str, ...] = (
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "pom.xml",
    "build.gradle",
    "build.gradle.kts",
    "requirements.txt",
    "Pipfile",
    "poetry.lock",
    "pyproject.toml",
)

"""Rewrite tables: source platform names mapped onto SmartUI.

Option tables are keyed by normalised field name (lower case, no
underscores) so camelCase JS/Java options and snake_case Python keyword
arguments share one entry. Every field not listed is dropped with a
warning.
"""

from dataclasses import dataclass
from typing import Optional

from visual_migrate.types import (
    APPIUM,
    APPLITOOLS,
    CYPRESS,
    PERCY,
    PLAYWRIGHT,
    SAUCE_LABS,
    SELENIUM,
    STORYBOOK,
)

# ---------------------------------------------------------------------------
# Destination (LambdaTest SmartUI)
# ---------------------------------------------------------------------------

JS_SNAPSHOT = "smartuiSnapshot"
JAVA_SNAPSHOT_CLASS = "SmartUISnapshot"
JAVA_SNAPSHOT_IMPORT = "io.github.lambdatest.SmartUISnapshot"
JAVA_SNAPSHOT = "smartuiSnapshot"
PY_MODULE = "lambdatest_selenium_driver"
PY_SNAPSHOT = "smartui_snapshot"

DEFAULT_SNAPSHOT_NAME = "Untitled Snapshot"

SMARTUI_CYPRESS = "@lambdatest/smartui-cypress"
SMARTUI_PLAYWRIGHT = "@lambdatest/smartui-playwright"
SMARTUI_STORYBOOK = "@lambdatest/smartui-storybook"
SMARTUI_SELENIUM = "@lambdatest/smartui-selenium"
SMARTUI_PUPPETEER = "@lambdatest/smartui-puppeteer"

JS_MODULE_BY_FRAMEWORK: dict[str, str] = {
    CYPRESS: SMARTUI_CYPRESS,
    PLAYWRIGHT: SMARTUI_PLAYWRIGHT,
    STORYBOOK: SMARTUI_STORYBOOK,
    SELENIUM: SMARTUI_SELENIUM,
    APPIUM: SMARTUI_SELENIUM,
}

# ---------------------------------------------------------------------------
# Source client libraries
# ---------------------------------------------------------------------------

JS_MODULES: dict[str, dict[str, str]] = {
    PERCY: {
        "@percy/cypress": SMARTUI_CYPRESS,
        "@percy/playwright": SMARTUI_PLAYWRIGHT,
        "@percy/storybook": SMARTUI_STORYBOOK,
        "@percy/selenium-webdriver": SMARTUI_SELENIUM,
        "@percy/puppeteer": SMARTUI_PUPPETEER,
    },
    APPLITOOLS: {
        "@applitools/eyes-cypress": SMARTUI_CYPRESS,
        "@applitools/eyes-playwright": SMARTUI_PLAYWRIGHT,
        "@applitools/eyes-storybook": SMARTUI_STORYBOOK,
        "@applitools/eyes-selenium": SMARTUI_SELENIUM,
        "@applitools/eyes-webdriverio": SMARTUI_SELENIUM,
        "@applitools/eyes-puppeteer": SMARTUI_PUPPETEER,
    },
    SAUCE_LABS: {
        "@saucelabs/cypress-visual-plugin": SMARTUI_CYPRESS,
        "@saucelabs/cypress-plugin": SMARTUI_CYPRESS,
        "@saucelabs/visual-playwright": SMARTUI_PLAYWRIGHT,
        "@saucelabs/playwright-plugin": SMARTUI_PLAYWRIGHT,
        "@saucelabs/wdio-sauce-visual-service": SMARTUI_SELENIUM,
        "@saucelabs/webdriverio": SMARTUI_SELENIUM,
        "screener-storybook": SMARTUI_STORYBOOK,
    },
}

# Package prefixes; "a.b" also matches "a.b.c".
JAVA_PACKAGES: dict[str, tuple[str, ...]] = {
    PERCY: ("io.percy",),
    APPLITOOLS: ("com.applitools",),
    SAUCE_LABS: ("com.saucelabs.visual",),
}

PY_MODULES: dict[str, tuple[str, ...]] = {
    PERCY: ("percy",),
    APPLITOOLS: ("applitools",),
    SAUCE_LABS: ("saucelabs_visual",),
}


def matches_package(name: str, prefixes: tuple[str, ...]) -> bool:
    return any(name == p or name.startswith(p + ".") for p in prefixes)


# ---------------------------------------------------------------------------
# Source call shapes
# ---------------------------------------------------------------------------

# Objects whose snapshot methods are recognised without a binding
JS_WELL_KNOWN_OBJECTS = frozenset({"cy", "page", "browser", "driver", "context"})

JS_SNAPSHOT_FUNCTIONS: dict[str, frozenset[str]] = {
    PERCY: frozenset({"percySnapshot", "percyScreenshot"}),
    APPLITOOLS: frozenset(),
    SAUCE_LABS: frozenset({"sauceVisualCheck"}),
}
# Methods reached through a module namespace (percy.screenshot(driver, ...))
JS_NAMESPACE_METHODS: dict[str, frozenset[str]] = {
    PERCY: frozenset({"snapshot", "screenshot", "percySnapshot", "percyScreenshot"}),
    APPLITOOLS: frozenset(),
    SAUCE_LABS: frozenset({"sauceVisualCheck"}),
}

PY_SNAPSHOT_FUNCTIONS: dict[str, frozenset[str]] = {
    PERCY: frozenset({"percy_snapshot", "percy_screenshot"}),
    APPLITOOLS: frozenset(),
    SAUCE_LABS: frozenset({"sauce_visual_check"}),
}
PY_NAMESPACE_METHODS: dict[str, frozenset[str]] = {
    PERCY: frozenset({"percy_snapshot", "percy_screenshot", "snapshot", "screenshot"}),
    APPLITOOLS: frozenset(),
    SAUCE_LABS: frozenset({"sauce_visual_check"}),
}

# Client classes and their conventional variable names
CLIENT_CLASSES: dict[str, frozenset[str]] = {
    PERCY: frozenset({"Percy", "AppPercy"}),
    APPLITOOLS: frozenset({"Eyes"}),
    SAUCE_LABS: frozenset({"VisualApi", "SauceLabsVisual", "SauceVisual"}),
}
CLIENT_NAMES: dict[str, frozenset[str]] = {
    PERCY: frozenset({"percy", "this.percy", "self.percy"}),
    APPLITOOLS: frozenset({"eyes", "this.eyes", "self.eyes"}),
    SAUCE_LABS: frozenset({"visual", "sauce_visual", "this.visual", "self.visual"}),
}

# Snapshot methods called on a client object
CLIENT_SNAPSHOT_METHODS: dict[str, frozenset[str]] = {
    PERCY: frozenset({"snapshot", "screenshot"}),
    APPLITOOLS: frozenset({"check", "checkWindow", "checkRegion", "check_window", "check_region"}),
    SAUCE_LABS: frozenset({"sauceVisualCheck", "sauce_visual_check", "check_page"}),
}

# Client lifecycle calls removed when they form a whole statement
CLIENT_LIFECYCLE_METHODS: dict[str, frozenset[str]] = {
    PERCY: frozenset(),
    APPLITOOLS: frozenset({
        "open", "close", "closeAsync", "close_async", "abort", "abortAsync",
        "abort_async", "abortIfNotClosed", "abort_if_not_closed",
    }),
    SAUCE_LABS: frozenset(),
}
CYPRESS_LIFECYCLE_COMMANDS = frozenset({"eyesOpen", "eyesClose"})
CYPRESS_CHECK_COMMANDS = frozenset({"eyesCheckWindow"})

BUILDER_ROOT = "Target"

# ---------------------------------------------------------------------------
# Option tables
# ---------------------------------------------------------------------------

NAME = "name"
ELEMENT = "element"
IGNORE = "ignore"
LAYOUT = "layout"
MATCH_LEVEL = "match_level"
IMPLICIT = "implicit"
DROP = "drop"


@dataclass(frozen=True)
class OptionRule:
    action: str
    details: Optional[str] = None


VIEWPORT_DETAILS = (
    "Viewports must be configured in `.smartui.json`. Configure viewports "
    "globally in your SmartUI configuration file instead of per-snapshot."
)
FULLY_DETAILS = (
    "To achieve full-page screenshots in SmartUI, ensure your viewports in "
    "`.smartui.json` are defined with a single width value (e.g., `[1920]`)."
)
DIFFING_DETAILS = (
    "Sauce Labs' custom `diffingMethod` and `diffingOptions` are not supported "
    "by SmartUI. The snapshot will be compared using SmartUI's default "
    "algorithm. Please review the results carefully."
)
MATCH_LEVEL_DETAILS = (
    "SmartUI compares pixels with its project-level sensitivity settings; "
    "per-check match levels other than Layout have no equivalent."
)
CSS_DETAILS = "Move custom snapshot CSS into the SmartUI project configuration."
SCRIPT_DETAILS = "SmartUI captures the DOM with JavaScript enabled; this toggle has no equivalent."
APPIUM_DETAILS = "Mobile screenshot settings are configured on the SmartUI capability, not per snapshot."
UNKNOWN_DETAILS = "SmartUI has no equivalent for this option."

OPTION_TABLES: dict[str, dict[str, OptionRule]] = {
    PERCY: {
        "scope": OptionRule(ELEMENT),
        "ignoreregionselectors": OptionRule(IGNORE),
        "widths": OptionRule(DROP, VIEWPORT_DETAILS),
        "minheight": OptionRule(DROP, VIEWPORT_DETAILS),
        "percycss": OptionRule(DROP, CSS_DETAILS),
        "enablejavascript": OptionRule(DROP, SCRIPT_DETAILS),
        "devicename": OptionRule(DROP, APPIUM_DETAILS),
        "orientation": OptionRule(DROP, APPIUM_DETAILS),
        "fullscreen": OptionRule(DROP, APPIUM_DETAILS),
        "statusbarheight": OptionRule(DROP, APPIUM_DETAILS),
        "navbarheight": OptionRule(DROP, APPIUM_DETAILS),
        "ignoreregionappiumelements": OptionRule(DROP, APPIUM_DETAILS),
    },
    APPLITOOLS: {
        "tag": OptionRule(NAME),
        "name": OptionRule(NAME),
        "target": OptionRule(IMPLICIT),
        "selector": OptionRule(ELEMENT),
        "ignore": OptionRule(IGNORE),
        "layout": OptionRule(LAYOUT),
        "matchlevel": OptionRule(MATCH_LEVEL, MATCH_LEVEL_DETAILS),
        "fully": OptionRule(DROP, FULLY_DETAILS),
    },
    SAUCE_LABS: {
        "name": OptionRule(NAME),
        "ignoredregions": OptionRule(IGNORE),
        "ignoreelements": OptionRule(IGNORE),
        "clipselector": OptionRule(ELEMENT),
        "capturedom": OptionRule(IMPLICIT),
        "diffingmethod": OptionRule(DROP, DIFFING_DETAILS),
        "diffingoptions": OptionRule(DROP, DIFFING_DETAILS),
    },
}

# Percy Java snapshot(name, widths, minHeight, enableJavaScript, percyCSS, scope)
PERCY_JAVA_POSITIONAL: tuple[str, ...] = (
    "widths", "minHeight", "enableJavaScript", "percyCSS", "scope",
)

# Applitools check-settings builder methods, normalised
BUILDER_WINDOW = frozenset({"window"})
BUILDER_REGION = frozenset({"region"})
BUILDER_IGNORE = frozenset({"ignore", "ignoreregion", "ignoreregions"})
BUILDER_LAYOUT = frozenset({"layout", "layoutregion", "layoutregions"})
BUILDER_NAME = frozenset({"withname", "name"})
BUILDER_MODES = frozenset({"strict", "content", "exact"})


def normalise_key(key: str) -> str:
    return key.replace("_", "").replace("-", "").lower()

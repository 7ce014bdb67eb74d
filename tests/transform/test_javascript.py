"""Tests for the JavaScript / TypeScript rewriter."""

from visual_migrate.transform.emulation import MIGRATION_NOTE
from visual_migrate.transform.javascript import JavaScriptRewriter
from visual_migrate.types import (
    APPLITOOLS,
    CYPRESS,
    PERCY,
    PLAYWRIGHT,
    SAUCE_LABS,
    SELENIUM,
)


def _run(platform: str, framework: str, source: str, path: str = "tests/home.spec.js"):
    return JavaScriptRewriter(platform, framework, path).run(source)


PLAYWRIGHT_ALIASED = """\
import { test } from '@playwright/test';
import { percySnapshot as takeSnapshot } from '@percy/playwright';

test('home', async ({ page }) => {
  await page.goto('/');
  await takeSnapshot(page, 'Home');
});
"""


class TestPercy:
    def test_aliased_import_keeps_call_sites(self):
        result = _run(PERCY, PLAYWRIGHT, PLAYWRIGHT_ALIASED)
        assert (
            "import { smartuiSnapshot as takeSnapshot } from '@lambdatest/smartui-playwright';"
            in result.content
        )
        assert "await takeSnapshot(page, 'Home');" in result.content
        assert "import { test } from '@playwright/test';" in result.content
        assert result.snapshot_count == 1
        assert result.warnings == []

    def test_named_import_is_aliased_to_smartui_export(self):
        source = (
            "import { percySnapshot } from \"@percy/playwright\";\n"
            "\n"
            "test('home', async ({ page }) => {\n"
            "  await percySnapshot(page, 'Home', { widths: [375, 1280] });\n"
            "});\n"
        )
        result = _run(PERCY, PLAYWRIGHT, source)
        assert (
            'import { smartuiSnapshot as percySnapshot } from "@lambdatest/smartui-playwright";'
            in result.content
        )
        assert "await percySnapshot(page, 'Home');" in result.content
        assert result.snapshot_count == 1
        assert len(result.warnings) == 1
        assert "`widths`" in result.warnings[0].message
        assert result.warnings[0].file == "tests/home.spec.js"
        assert result.warnings[0].line == 4

    def test_cypress_command(self):
        source = (
            "import '@percy/cypress';\n"
            "\n"
            "it('home', () => {\n"
            "  cy.visit('/');\n"
            "  // capture the main region only\n"
            "  cy.percySnapshot('Home', { scope: '#main', percyCSS: 'iframe { display: none; }' });\n"
            "});\n"
        )
        result = _run(PERCY, CYPRESS, source, "cypress/e2e/home.cy.js")
        assert "import '@lambdatest/smartui-cypress';" in result.content
        assert "cy.smartuiSnapshot('Home', { element: { cssSelector: '#main' } });" in result.content
        assert "// capture the main region only" in result.content
        assert "cy.visit('/');" in result.content
        assert result.snapshot_count == 1
        assert len(result.warnings) == 1
        assert "`percyCSS`" in result.warnings[0].message

    def test_global_call_gets_import(self):
        source = (
            "describe('home', () => {\n"
            "  it('renders', async () => {\n"
            "    await browser.url('/');\n"
            "    await percySnapshot(browser, 'Home', { scope: '#main' });\n"
            "  });\n"
            "});\n"
        )
        result = _run(PERCY, SELENIUM, source)
        assert result.content.startswith(
            "import { smartuiSnapshot } from '@lambdatest/smartui-selenium';\n"
        )
        assert (
            "await smartuiSnapshot(browser, 'Home', { element: { cssSelector: '#main' } });"
            in result.content
        )
        assert result.snapshot_count == 1

    def test_typescript_global_call_without_handle_uses_page(self):
        source = (
            "import { test, Page } from '@playwright/test';\n"
            "\n"
            "async function capture(page: Page): Promise<void> {\n"
            "  await percySnapshot('Home');\n"
            "}\n"
        )
        result = _run(PERCY, PLAYWRIGHT, source, "tests/capture.ts")
        lines = result.content.splitlines()
        assert lines[0] == "import { test, Page } from '@playwright/test';"
        assert lines[1] == "import { smartuiSnapshot } from '@lambdatest/smartui-playwright';"
        assert "await smartuiSnapshot(page, 'Home');" in result.content

    def test_require_shorthand_is_aliased(self):
        source = (
            "const { percySnapshot } = require('@percy/selenium-webdriver');\n"
            "\n"
            "it('home', async () => {\n"
            "  await percySnapshot(driver, 'Home');\n"
            "});\n"
        )
        result = _run(PERCY, SELENIUM, source)
        assert (
            "const { smartuiSnapshot: percySnapshot } = require('@lambdatest/smartui-selenium');"
            in result.content
        )
        assert "await percySnapshot(driver, 'Home');" in result.content
        assert result.snapshot_count == 1

    def test_default_import_called_directly(self):
        source = (
            "import percySnapshot from '@percy/playwright';\n"
            "\n"
            "test('home', async ({ page }) => {\n"
            "  await percySnapshot(page, 'Home');\n"
            "});\n"
        )
        result = _run(PERCY, PLAYWRIGHT, source)
        assert result.content.startswith(
            "import { smartuiSnapshot as percySnapshot } from '@lambdatest/smartui-playwright';\n"
        )
        assert "await percySnapshot(page, 'Home');" in result.content
        assert result.snapshot_count == 1

    def test_plain_require_called_directly(self):
        source = (
            "const percySnapshot = require('@percy/selenium-webdriver');\n"
            "await percySnapshot(driver, 'Home');\n"
        )
        result = _run(PERCY, SELENIUM, source)
        assert result.content == (
            "const { smartuiSnapshot: percySnapshot } = require('@lambdatest/smartui-selenium');\n"
            "await percySnapshot(driver, 'Home');\n"
        )

    def test_namespace_require(self):
        source = (
            "const percy = require('@percy/selenium-webdriver');\n"
            "await percy.snapshot(driver, 'Home');\n"
        )
        result = _run(PERCY, SELENIUM, source)
        assert result.content == (
            "const percy = require('@lambdatest/smartui-selenium');\n"
            "await percy.smartuiSnapshot(driver, 'Home');\n"
        )

    def test_missing_name_gets_default(self):
        result = _run(PERCY, CYPRESS, "cy.percySnapshot();\n", "home.cy.js")
        assert result.content == "cy.smartuiSnapshot('Untitled Snapshot');\n"

    def test_spread_arguments_left_untouched(self):
        source = "percySnapshot(...args);\n"
        result = _run(PERCY, PLAYWRIGHT, source)
        assert result.content == source
        assert result.snapshot_count == 0
        assert len(result.warnings) == 1
        assert "left unchanged" in result.warnings[0].message

    def test_unrelated_file_is_noop(self):
        source = "export const add = (a, b) => a + b;\n"
        result = _run(PERCY, PLAYWRIGHT, source)
        assert result.content is source
        assert result.warnings == []
        assert result.snapshot_count == 0

    def test_rewrite_is_idempotent(self):
        first = _run(PERCY, PLAYWRIGHT, PLAYWRIGHT_ALIASED)
        second = _run(PERCY, PLAYWRIGHT, first.content)
        assert second.content == first.content
        assert second.snapshot_count == 0

    def test_parse_failure_returns_original(self):
        source = "percySnapshot(page, 'Home'\n"
        result = _run(PERCY, PLAYWRIGHT, source)
        assert result.content == source
        assert result.snapshot_count == 0
        assert len(result.warnings) == 1
        assert result.warnings[0].message.startswith(
            "Failed to parse source code: syntax error at line"
        )


APPLITOOLS_SELENIUM = """\
const { Eyes, Target } = require('@applitools/eyes-selenium');

describe('home', function () {
  it('renders', async function () {
    const eyes = new Eyes();
    await eyes.open(driver, 'App', 'Home');
    await eyes.check('Home', Target.window().fully().layout('#header'));
    await eyes.close();
  });
});
"""


class TestApplitools:
    def test_check_with_target_chain(self):
        result = _run(APPLITOOLS, SELENIUM, APPLITOOLS_SELENIUM)
        content = result.content

        assert "require('@lambdatest/smartui-selenium');" in content
        assert "const { smartuiSnapshot } = require('@lambdatest/smartui-selenium');" in content
        assert "eyes.open" not in content
        assert "eyes.close" not in content
        assert (
            "await smartuiSnapshot(driver, 'Home', { ignoreDOM: { cssSelector: ['#header *'] } });"
            in content
        )
        assert f"    // {MIGRATION_NOTE}\n" in content
        assert (
            "    assert.ok(await driver.findElement(By.css('#header')).isDisplayed());\n"
            "    await smartuiSnapshot(" in content
        )
        assert result.snapshot_count == 1
        details = [w.details for w in result.warnings]
        assert MIGRATION_NOTE in details
        assert any("`fully`" in w.message for w in result.warnings)

    def test_check_window_and_region(self):
        source = (
            "const eyes = new Eyes(runner);\n"
            "await eyes.checkWindow('Dashboard');\n"
            "await eyes.checkRegion('#chart', 'Chart');\n"
        )
        result = _run(APPLITOOLS, PLAYWRIGHT, source)
        assert "await smartuiSnapshot(page, 'Dashboard');" in result.content
        assert (
            "await smartuiSnapshot(page, 'Chart', { element: { cssSelector: '#chart' } });"
            in result.content
        )
        assert result.snapshot_count == 2

    def test_check_object_settings(self):
        source = (
            "await eyes.check({ name: 'Cart', ignore: ['.ad'], matchLevel: 'Strict' });\n"
        )
        result = _run(APPLITOOLS, PLAYWRIGHT, source)
        assert (
            "await smartuiSnapshot(page, 'Cart', { ignoreDOM: { cssSelector: ['.ad'] } });"
            in result.content
        )
        assert len(result.warnings) == 1
        assert "`matchLevel`" in result.warnings[0].message

    def test_cypress_commands(self):
        source = (
            "it('home', () => {\n"
            "  cy.eyesOpen({ appName: 'App' });\n"
            "  cy.eyesCheckWindow({ tag: 'Home', target: 'window' });\n"
            "  cy.eyesClose();\n"
            "});\n"
        )
        result = _run(APPLITOOLS, CYPRESS, source, "home.cy.js")
        assert result.content == (
            "it('home', () => {\n"
            "  cy.smartuiSnapshot('Home');\n"
            "});\n"
        )
        assert result.snapshot_count == 1
        assert result.warnings == []

    def test_region_by_element_is_left_untouched(self):
        source = "await eyes.check(Target.region(element));\n"
        result = _run(APPLITOOLS, PLAYWRIGHT, source)
        assert result.content == source
        assert "left unchanged" in result.warnings[0].message


class TestSauceLabs:
    def test_cypress_command(self):
        source = (
            "import '@saucelabs/cypress-visual-plugin';\n"
            "\n"
            "it('home', () => {\n"
            "  cy.sauceVisualCheck('Home', { ignoredRegions: ['.ad'], captureDom: true });\n"
            "});\n"
        )
        result = _run(SAUCE_LABS, CYPRESS, source, "home.cy.js")
        assert "import '@lambdatest/smartui-cypress';" in result.content
        assert "cy.smartuiSnapshot('Home', { ignoreDOM: { cssSelector: ['.ad'] } });" in result.content
        assert result.warnings == []

    def test_diffing_options_are_dropped(self):
        source = (
            "await browser.sauceVisualCheck('Home', { diffingMethod: 'balanced', clipSelector: '#app' });\n"
        )
        result = _run(SAUCE_LABS, SELENIUM, source)
        assert "await smartuiSnapshot(browser, 'Home', { element: { cssSelector: '#app' } })" in result.content
        assert len(result.warnings) == 1
        assert "`diffingMethod`" in result.warnings[0].message

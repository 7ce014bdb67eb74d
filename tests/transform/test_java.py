"""Tests for the Java rewriter."""

import pytest

from visual_migrate.transform.emulation import MIGRATION_NOTE
from visual_migrate.transform.java import JavaRewriter
from visual_migrate.types import APPLITOOLS, PERCY, SAUCE_LABS, SELENIUM


def _run(platform: str, source: str):
    return JavaRewriter(platform, SELENIUM, "src/test/java/HomeTest.java").run(source)


PERCY_TEST = """\
package com.example;

import io.percy.selenium.Percy;
import org.openqa.selenium.WebDriver;

public class HomeTest {
    private WebDriver driver;
    private Percy percy;

    @BeforeEach
    public void setUp() {
        driver = new ChromeDriver();
        percy = new Percy(driver);
    }

    @Test
    public void home() {
        driver.get("https://example.com");
        percy.snapshot("Home", null, null, false, null, "#main");
    }
}
"""


class TestPercy:
    def test_positional_arguments(self):
        result = _run(PERCY, PERCY_TEST)
        content = result.content
        assert (
            'SmartUISnapshot.smartuiSnapshot(driver, "Home", '
            'Map.of("element", Map.of("cssSelector", "#main")));'
        ) in content
        assert "import io.percy" not in content
        assert (
            "import io.github.lambdatest.SmartUISnapshot;\n"
            "import org.openqa.selenium.WebDriver;\n"
            "import java.util.Map;\n"
        ) in content
        assert 'driver.get("https://example.com");' in content
        assert result.snapshot_count == 1
        assert len(result.warnings) == 1
        assert "`enableJavaScript`" in result.warnings[0].message

    def test_map_options_with_existing_imports(self):
        source = (
            "import io.percy.selenium.Percy;\n"
            "import java.util.List;\n"
            "import java.util.Map;\n"
            "\n"
            "class CartTest {\n"
            "    void cart() {\n"
            '        percy.snapshot("Cart", Map.of("widths", List.of(768), "scope", "#cart"));\n'
            "    }\n"
            "}\n"
        )
        result = _run(PERCY, source)
        assert result.content.count("import java.util.Map;") == 1
        assert (
            'SmartUISnapshot.smartuiSnapshot(driver, "Cart", '
            'Map.of("element", Map.of("cssSelector", "#cart")));'
        ) in result.content
        assert "`widths`" in result.warnings[0].message

    def test_options_variable_left_untouched(self):
        source = (
            "class CartTest {\n"
            "    void cart() {\n"
            '        percy.snapshot("Cart", options);\n'
            "    }\n"
            "}\n"
        )
        result = _run(PERCY, source)
        assert result.content == source
        assert result.snapshot_count == 0
        assert "left unchanged" in result.warnings[0].message


APPLITOOLS_TEST = """\
import com.applitools.eyes.selenium.Eyes;
import com.applitools.eyes.selenium.fluent.Target;
import org.openqa.selenium.By;

public class DashboardTest {
    private Eyes eyes = new Eyes();

    @Test
    public void dashboard() {
        eyes.open(driver, "App", "Dashboard");
        eyes.check(Target.region(By.id("hero")).ignore(By.cssSelector(".ad")).withName("Hero"));
        eyes.closeAsync();
    }
}
"""


class TestApplitools:
    def test_region_builder_and_lifecycle(self):
        result = _run(APPLITOOLS, APPLITOOLS_TEST)
        content = result.content
        assert content.startswith(
            "import io.github.lambdatest.SmartUISnapshot;\n"
            "import org.openqa.selenium.By;\n"
            "import java.util.Map;\n"
            "import java.util.List;\n"
        )
        assert "fluent.Target" not in content
        assert "eyes.open" not in content
        assert "eyes.closeAsync" not in content
        assert (
            'SmartUISnapshot.smartuiSnapshot(driver, "Hero", '
            'Map.of("ignoreDOM", Map.of("cssSelector", List.of(".ad")), '
            '"element", Map.of("cssSelector", "#hero")));'
        ) in content
        assert result.snapshot_count == 1
        assert result.warnings == []

    def test_layout_region_is_emulated(self):
        source = (
            "public class HomeTest {\n"
            "    @Test\n"
            "    public void home() {\n"
            '        eyes.check("Home", Target.window().layout(By.cssSelector("#header")));\n'
            "    }\n"
            "}\n"
        )
        result = _run(APPLITOOLS, source)
        content = result.content
        assert content.startswith(
            "import io.github.lambdatest.SmartUISnapshot;\n"
            "import java.util.Map;\n"
            "import java.util.List;\n"
            "\n"
            "public class HomeTest {\n"
        )
        assert (
            f"        // {MIGRATION_NOTE}\n"
            '        assert driver.findElement(By.cssSelector("#header")).isDisplayed();\n'
            '        SmartUISnapshot.smartuiSnapshot(driver, "Home", '
            'Map.of("ignoreDOM", Map.of("cssSelector", List.of("#header *"))));\n'
        ) in content
        assert len(result.warnings) == 1
        assert result.warnings[0].details == MIGRATION_NOTE

    def test_check_window(self):
        source = (
            "class A {\n"
            "    void a() {\n"
            '        eyes.checkWindow("Landing");\n'
            "    }\n"
            "}\n"
        )
        result = _run(APPLITOOLS, source)
        assert 'SmartUISnapshot.smartuiSnapshot(driver, "Landing");' in result.content
        assert "java.util" not in result.content


SAUCE_TEST = """\
import com.saucelabs.visual.VisualApi;
import com.saucelabs.visual.CheckOptions;

public class LoginTest {
    private VisualApi visual;

    @Test
    public void login() {
        visual.sauceVisualCheck("Login", new CheckOptions.Builder().withIgnoreElements(List.of(".ad")).withClipSelector("#form").build());
    }
}
"""


class TestSauceLabs:
    def test_options_builder(self):
        result = _run(SAUCE_LABS, SAUCE_TEST)
        content = result.content
        assert content.startswith(
            "import io.github.lambdatest.SmartUISnapshot;\n"
            "import java.util.Map;\n"
            "import java.util.List;\n"
            "\n"
            "public class LoginTest {\n"
        )
        assert (
            'SmartUISnapshot.smartuiSnapshot(driver, "Login", '
            'Map.of("ignoreDOM", Map.of("cssSelector", List.of(".ad")), '
            '"element", Map.of("cssSelector", "#form")));'
        ) in content
        assert result.snapshot_count == 1

    def test_unrelated_file_is_noop(self):
        source = "class A {\n    void a() { System.out.println(\"hi\"); }\n}\n"
        result = _run(SAUCE_LABS, source)
        assert result.content is source
        assert result.warnings == []


@pytest.mark.parametrize("platform, source", [(PERCY, PERCY_TEST), (SAUCE_LABS, SAUCE_TEST)])
def test_rewrite_is_idempotent(platform, source):
    first = _run(platform, source)
    assert first.snapshot_count == 1
    second = _run(platform, first.content)
    assert second.content == first.content
    assert second.snapshot_count == 0
    assert second.warnings == []


@pytest.mark.parametrize("platform", [PERCY, APPLITOOLS, SAUCE_LABS])
def test_file_without_snapshots_is_returned_unchanged(platform):
    source = (
        "import org.junit.jupiter.api.Test;\n"
        "\n"
        "class MathTest {\n"
        "    @Test\n"
        "    void adds() { assertEquals(2, 1 + 1); }\n"
        "}\n"
    )
    result = _run(platform, source)
    assert result.content is source
    assert result.warnings == []
    assert result.snapshot_count == 0

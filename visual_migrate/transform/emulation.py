"""Feature emulation: code generated from intent.

SmartUI has no layout-only comparison. A layout check is approximated
by asserting that the container is visible and snapshotting it with its
children ignored. This module only renders the assertion; placing it
before the snapshot call is the rewriter's job.
"""

from dataclasses import dataclass
from typing import Optional

from visual_migrate.types import CYPRESS, JAVA, JAVASCRIPT, PLAYWRIGHT, PYTHON

MIGRATION_NOTE = (
    "MIGRATION-NOTE: Applitools 'layout' region was emulated. A functional "
    "assertion was added to check for the container's visibility, and a "
    "SmartUI snapshot was taken with child elements ignored. Please verify "
    "this provides adequate coverage."
)


@dataclass(frozen=True)
class LayoutIntent:
    """Assert that selector is visible.

    selector is an expression in the target language (usually a quoted
    literal); handle is the page/driver expression, when known.
    """

    selector: str
    language: str
    framework: str
    handle: Optional[str] = None


def render_assertion(intent: LayoutIntent) -> list[str]:
    """Return the comment and assertion lines, unindented."""
    sel = intent.selector
    if intent.language == JAVASCRIPT:
        if intent.framework == CYPRESS:
            statement = f"cy.get({sel}).should('be.visible');"
        elif intent.framework == PLAYWRIGHT:
            statement = f"await expect({intent.handle or 'page'}.locator({sel})).toBeVisible();"
        else:
            statement = (
                f"assert.ok(await {intent.handle or 'driver'}"
                f".findElement(By.css({sel})).isDisplayed());"
            )
        return [f"// {MIGRATION_NOTE}", statement]

    if intent.language == JAVA:
        return [
            f"// {MIGRATION_NOTE}",
            f"assert {intent.handle or 'driver'}.findElement(By.cssSelector({sel})).isDisplayed();",
        ]

    if intent.language == PYTHON:
        return [
            f"# {MIGRATION_NOTE}",
            f"assert {intent.handle or 'driver'}.find_element(By.CSS_SELECTOR, {sel}).is_displayed()",
        ]

    raise ValueError(f"No layout emulation for language {intent.language!r}")

"""Detection errors.

These three conditions are the only exceptions that cross the detection
boundary. Each carries the evidence that led to it, and renders that
evidence into its message so the user can self-diagnose without debug
output.
"""

from typing import Iterable, Sequence

from visual_migrate.types import APPLITOOLS, PERCY, SAUCE_LABS, AnchorResult

# Where each platform's dependency is expected to be declared.
_MANIFESTS_BY_PLATFORM = {
    PERCY: "package.json, pom.xml, build.gradle or requirements.txt",
    APPLITOOLS: "package.json, pom.xml or build.gradle",
    SAUCE_LABS: "package.json, pom.xml or requirements.txt",
}

# Cap on evidence lines rendered into a message.
_MAX_LISTED = 10


def _listing(items: Sequence[str]) -> str:
    shown = list(items[:_MAX_LISTED])
    if len(items) > _MAX_LISTED:
        shown.append(f"... and {len(items) - _MAX_LISTED} more")
    return ", ".join(shown)


class DetectionError(Exception):
    """Base class for scan-fatal detection errors."""


class PlatformNotDetectedError(DetectionError):
    """No anchor and no content evidence for any platform."""

    def __init__(self, project_root: str, searched_files: int = 0, magic_strings: Iterable[str] = ()):
        self.project_root = project_root
        self.searched_files = searched_files
        self.magic_strings = list(magic_strings)
        super().__init__(
            "Could not detect a supported visual testing platform in "
            f"{project_root}. No Percy, Applitools or Sauce Labs Visual "
            "dependency or config file was found, and "
            f"{searched_files} source file(s) contained none of "
            f"{len(self.magic_strings)} known platform API markers. "
            "Please run this tool from the root of your project."
        )


class MultiplePlatformsDetectedError(DetectionError):
    """More than one platform anchor was found."""

    def __init__(self, candidates: Sequence[AnchorResult]):
        self.candidates = list(candidates)
        described = _listing([c.describe() for c in self.candidates])
        super().__init__(
            "Multiple visual testing platforms were detected: "
            f"{described}. The migration tool supports migrating from only "
            "one platform at a time."
        )


class MismatchedSignalsError(DetectionError):
    """Platform API calls were found without a matching dependency."""

    def __init__(self, platform: str, files: Sequence[str], matches: Sequence[str] = ()):
        self.platform = platform
        self.files = list(files)
        self.matches = list(matches)
        manifests = _MANIFESTS_BY_PLATFORM.get(platform, "your dependency manifest")
        found = _listing(self.files)
        if self.matches:
            found += f" (matched: {_listing(self.matches)})"
        super().__init__(
            f"Found {platform} API calls in your code ({found}), but no "
            f"{platform} dependency was found in {manifests}. Please ensure "
            "your project's dependencies are correctly installed before "
            "running the migration."
        )

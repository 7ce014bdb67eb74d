"""Shared types for detection and transformation.

Detection produces exactly one DetectionResult per scan (or one per
candidate platform in collect-all mode). Transformation produces one
TransformationResult per source file. Both are plain values: nothing
here is mutated after construction and nothing is persisted.
"""

from dataclasses import dataclass, field
from typing import Optional

UNKNOWN = "unknown"

# Platforms, in declaration order. Order is the tie-break priority.
PERCY = "Percy"
APPLITOOLS = "Applitools"
SAUCE_LABS = "Sauce Labs Visual"
PLATFORMS: tuple[str, ...] = (PERCY, APPLITOOLS, SAUCE_LABS)

# Frameworks, in declaration order. Order is the tie-break priority.
CYPRESS = "Cypress"
PLAYWRIGHT = "Playwright"
SELENIUM = "Selenium"
ROBOT_FRAMEWORK = "Robot Framework"
APPIUM = "Appium"
STORYBOOK = "Storybook"
FRAMEWORKS: tuple[str, ...] = (
    CYPRESS, PLAYWRIGHT, SELENIUM, ROBOT_FRAMEWORK, APPIUM, STORYBOOK,
)

JAVASCRIPT = "JavaScript/TypeScript"
JAVA = "Java"
PYTHON = "Python"
LANGUAGES: tuple[str, ...] = (JAVASCRIPT, JAVA, PYTHON)

TEST_TYPE_E2E = "e2e"
TEST_TYPE_STORYBOOK = "storybook"
TEST_TYPE_APPIUM = "appium"


@dataclass(frozen=True)
class AnchorResult:
    """A high-confidence platform signal from structured project metadata.

    platform == UNKNOWN means "no opinion", not an error.
    evidence_source names the file that produced the signal, and
    evidence_match the dependency or file name that matched.
    """

    platform: str = UNKNOWN
    framework: Optional[str] = None
    language: Optional[str] = None
    magic_strings: tuple[str, ...] = ()
    evidence_source: Optional[str] = None
    evidence_match: Optional[str] = None

    @property
    def is_unknown(self) -> bool:
        return self.platform == UNKNOWN

    def describe(self) -> str:
        if self.evidence_source:
            return f"{self.platform} ({self.evidence_source}: {self.evidence_match})"
        return self.platform

    def to_dict(self) -> dict:
        return {
            "platform": self.platform,
            "framework": self.framework,
            "language": self.language,
            "magic_strings": list(self.magic_strings),
            "evidence": (
                {"source": self.evidence_source, "match": self.evidence_match}
                if self.evidence_source else None
            ),
        }


@dataclass
class PlatformEvidence:
    source: str
    match: str

    def to_dict(self) -> dict:
        return {"source": self.source, "match": self.match}


@dataclass
class FrameworkEvidence:
    files: list[str] = field(default_factory=list)
    signatures: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"files": self.files, "signatures": self.signatures}


@dataclass
class Evidence:
    """Why a detection decision was made.

    Invariant: framework.files is a subset of DetectionResult.files.source.
    """

    platform: PlatformEvidence
    framework: FrameworkEvidence

    def to_dict(self) -> dict:
        return {
            "platform": self.platform.to_dict(),
            "framework": self.framework.to_dict(),
        }


@dataclass
class DetectionFiles:
    config: list[str] = field(default_factory=list)
    source: list[str] = field(default_factory=list)
    ci: list[str] = field(default_factory=list)
    package_manager: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "config": self.config,
            "source": self.source,
            "ci": self.ci,
            "package_manager": self.package_manager,
        }


@dataclass
class DetectionResult:
    """Complete detection output for a project.

    platform is never UNKNOWN: an unknown platform is raised as
    PlatformNotDetectedError before a result is built.
    """

    platform: str
    framework: str
    language: str
    test_type: str
    files: DetectionFiles
    evidence: Evidence

    def to_dict(self) -> dict:
        return {
            "platform": self.platform,
            "framework": self.framework,
            "language": self.language,
            "test_type": self.test_type,
            "files": self.files.to_dict(),
            "evidence": self.evidence.to_dict(),
        }


@dataclass(frozen=True)
class TransformationWarning:
    """A non-fatal finding that must be surfaced to the user."""

    message: str
    details: Optional[str] = None
    file: Optional[str] = None
    line: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "details": self.details,
            "file": self.file,
            "line": self.line,
        }


@dataclass
class TransformationResult:
    """Output of transforming one source file.

    content equals the input verbatim when parsing failed, when the
    platform/language pair is unsupported, or when nothing matched.
    """

    content: str
    warnings: list[TransformationWarning] = field(default_factory=list)
    snapshot_count: int = 0

    def to_dict(self) -> dict:
        return {
            "content": self.content,
            "warnings": [w.to_dict() for w in self.warnings],
            "snapshot_count": self.snapshot_count,
        }


@dataclass
class ProjectSummary:
    """Project-level statistics merged from per-file results."""

    files_processed: int = 0
    files_changed: list[str] = field(default_factory=list)
    snapshot_count: int = 0
    warnings: list[TransformationWarning] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "files_processed": self.files_processed,
            "files_changed": self.files_changed,
            "snapshot_count": self.snapshot_count,
            "warnings": [w.to_dict() for w in self.warnings],
        }

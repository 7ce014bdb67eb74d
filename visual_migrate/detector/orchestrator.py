"""Detection orchestrator: anchor, search, classify.

Detection flow:
1. Resolve the anchor from manifests and config files (phase 1).
2. Pick magic strings from the anchor and search source content (phase 2).
3. Without an anchor, content evidence is a configuration error:
   MismatchedSignalsError when a platform can be inferred from it,
   PlatformNotDetectedError otherwise.
4. Framework and language come from the anchor when it carries both,
   otherwise from the framework classifier and the file extensions.
5. Produce a single DetectionResult with files and evidence.

Magic-string selection:
  anchor with framework + language  → the anchor's strings only
  anchor without those hints        → the anchor's strings + the platform table
  no anchor                         → every platform's table (cold search)
"""

import logging
from pathlib import Path
from typing import Optional

from visual_migrate.config import ScanPolicy
from visual_migrate.detector.anchors import resolve_anchor, resolve_anchors
from visual_migrate.detector.classify import (
    classify_framework,
    classify_platform,
    language_from_files,
    matched_magic_strings,
    resolve_test_type,
)
from visual_migrate.detector.config_files import config_files_for
from visual_migrate.detector.content import read_sources, scan_content
from visual_migrate.detector.signatures import (
    CI_FILE_PATTERNS,
    PACKAGE_MANAGER_FILES,
    PLATFORM_MAGIC_STRINGS,
    all_magic_strings,
)
from visual_migrate.errors import MismatchedSignalsError, PlatformNotDetectedError
from visual_migrate.types import (
    UNKNOWN,
    AnchorResult,
    DetectionFiles,
    DetectionResult,
    Evidence,
    FrameworkEvidence,
    PlatformEvidence,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def detect(project_root: Path, policy: Optional[ScanPolicy] = None) -> DetectionResult:
    """Run the full detection pipeline on a project directory.

    Raises one of the DetectionError subclasses when the project does
    not identify exactly one platform.
    """
    project_root = Path(project_root).resolve()
    policy = policy or ScanPolicy()

    anchor = resolve_anchor(project_root, policy)
    result = _detect_with_anchor(project_root, anchor, policy)
    _log_result(result)
    return result


def detect_all(project_root: Path, policy: Optional[ScanPolicy] = None) -> list[DetectionResult]:
    """Collect-all mode: one DetectionResult per candidate platform.

    Never raises MultiplePlatformsDetectedError. Without any anchor this
    behaves like detect() and returns a single-element list.
    """
    project_root = Path(project_root).resolve()
    policy = policy or ScanPolicy()

    anchors = resolve_anchors(project_root, policy) or [AnchorResult()]
    results = [_detect_with_anchor(project_root, anchor, policy) for anchor in anchors]
    for result in results:
        _log_result(result)
    return results


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def select_magic_strings(anchor: AnchorResult) -> tuple[str, ...]:
    if anchor.is_unknown:
        return all_magic_strings()
    if anchor.framework and anchor.language:
        return anchor.magic_strings
    return tuple(dict.fromkeys(anchor.magic_strings + PLATFORM_MAGIC_STRINGS[anchor.platform]))


def _detect_with_anchor(project_root: Path, anchor: AnchorResult, policy: ScanPolicy) -> DetectionResult:
    magic_strings = select_magic_strings(anchor)
    scan = scan_content(project_root, magic_strings, policy)
    implicated = scan.implicated
    sources = read_sources(project_root, implicated, policy)

    if anchor.is_unknown:
        _raise_without_anchor(project_root, scan.searched, implicated, sources, magic_strings)

    if anchor.framework and anchor.language:
        framework = anchor.framework
        language = anchor.language
        framework_evidence = FrameworkEvidence(files=list(implicated), signatures=[])
    else:
        framework, framework_evidence = classify_framework(sources)
        if anchor.framework:
            framework = anchor.framework
            framework_evidence = FrameworkEvidence(files=list(implicated), signatures=[])
        language = anchor.language or language_from_files(implicated)

    platform_evidence = PlatformEvidence(
        source=anchor.evidence_source or "content-scan",
        match=anchor.evidence_match or "magic-strings",
    )

    return DetectionResult(
        platform=anchor.platform,
        framework=framework,
        language=language,
        test_type=resolve_test_type(framework),
        files=DetectionFiles(
            config=config_files_for(project_root, anchor.platform),
            source=list(implicated),
            ci=_glob_files(project_root, CI_FILE_PATTERNS, policy),
            package_manager=[name for name in PACKAGE_MANAGER_FILES if (project_root / name).is_file()],
        ),
        evidence=Evidence(platform=platform_evidence, framework=framework_evidence),
    )


def _raise_without_anchor(
    project_root: Path,
    searched: list[str],
    implicated: list[str],
    sources: dict[str, str],
    magic_strings: tuple[str, ...],
) -> None:
    if implicated:
        platform = classify_platform(sources)
        if platform != UNKNOWN:
            files = [path for path in implicated if any(
                s in sources.get(path, "") for s in PLATFORM_MAGIC_STRINGS[platform]
            )]
            logger.warning("Found %s API calls without a %s dependency", platform, platform)
            raise MismatchedSignalsError(
                platform, files or implicated, matched_magic_strings(platform, sources),
            )
    raise PlatformNotDetectedError(str(project_root), len(searched), magic_strings)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _glob_files(project_root: Path, patterns: tuple[str, ...], policy: ScanPolicy) -> list[str]:
    found: set[str] = set()
    for pattern in patterns:
        for path in project_root.glob(pattern):
            if path.is_file():
                rel_path = path.relative_to(project_root).as_posix()
                if not policy.is_ignored(rel_path):
                    found.add(rel_path)
    return sorted(found)


def _log_result(result: DetectionResult) -> None:
    logger.info(
        "Detection complete: platform=%s framework=%s language=%s "
        "test_type=%s source_files=%d",
        result.platform,
        result.framework,
        result.language,
        result.test_type,
        len(result.files.source),
    )

"""Content-based classifiers.

classify_platform is only consulted when no anchor exists. It counts
distinct magic strings per file and sums across files.

classify_framework sums signature weights across files. A framework is
always produced: with no signal at all it falls back to
DEFAULT_FRAMEWORK.

Both break ties by table declaration order, which is an explicit,
deterministic rule rather than an accident of iteration.
"""

import logging
from typing import Mapping

from visual_migrate.detector.signatures import (
    DEFAULT_FRAMEWORK,
    FRAMEWORK_SIGNATURES,
    PLATFORM_MAGIC_STRINGS,
)
from visual_migrate.types import (
    APPIUM,
    JAVA,
    JAVASCRIPT,
    PYTHON,
    STORYBOOK,
    TEST_TYPE_APPIUM,
    TEST_TYPE_E2E,
    TEST_TYPE_STORYBOOK,
    UNKNOWN,
    FrameworkEvidence,
)

logger = logging.getLogger(__name__)


def _pick_highest(scores: dict[str, float]) -> tuple[str, float]:
    """Highest score; the earliest declared entry wins ties."""
    best, best_score = "", 0.0
    for name, score in scores.items():
        if score > best_score:
            best, best_score = name, score
    return best, best_score


def platform_scores(sources: Mapping[str, str]) -> dict[str, int]:
    scores = {platform: 0 for platform in PLATFORM_MAGIC_STRINGS}
    for text in sources.values():
        for platform, strings in PLATFORM_MAGIC_STRINGS.items():
            scores[platform] += sum(1 for s in strings if s in text)
    return scores


def classify_platform(sources: Mapping[str, str]) -> str:
    """Return the best-scoring platform for the implicated files, or UNKNOWN."""
    scores = platform_scores(sources)
    best, score = _pick_highest(scores)
    logger.debug("Platform scores: %s", scores)
    return best if score > 0 else UNKNOWN


def matched_magic_strings(platform: str, sources: Mapping[str, str]) -> list[str]:
    """The platform's magic strings that actually occur, for error evidence."""
    return [
        s for s in PLATFORM_MAGIC_STRINGS.get(platform, ())
        if any(s in text for text in sources.values())
    ]


def classify_framework(sources: Mapping[str, str]) -> tuple[str, FrameworkEvidence]:
    """Return (framework, evidence) from weighted signature hits."""
    scores: dict[str, float] = {name: 0.0 for name in FRAMEWORK_SIGNATURES}
    files: dict[str, dict[str, None]] = {name: {} for name in FRAMEWORK_SIGNATURES}
    signatures: dict[str, dict[str, None]] = {name: {} for name in FRAMEWORK_SIGNATURES}

    for path in sorted(sources):
        text = sources[path]
        for framework, entries in FRAMEWORK_SIGNATURES.items():
            for entry in entries:
                if entry.pattern.search(text):
                    scores[framework] += entry.weight
                    files[framework].setdefault(path, None)
                    signatures[framework].setdefault(entry.text, None)

    best, score = _pick_highest(scores)
    logger.debug("Framework scores: %s", {k: round(v, 2) for k, v in scores.items()})
    if score <= 0:
        return DEFAULT_FRAMEWORK, FrameworkEvidence()
    return best, FrameworkEvidence(files=list(files[best]), signatures=list(signatures[best]))


def language_from_files(paths: list[str]) -> str:
    """Java if any .java file, else Python if any .py/.robot, else JS/TS."""
    suffixes = {p.rsplit(".", 1)[-1].lower() for p in paths if "." in p}
    if "java" in suffixes:
        return JAVA
    if "py" in suffixes or "robot" in suffixes:
        return PYTHON
    return JAVASCRIPT


def resolve_test_type(framework: str) -> str:
    if framework == STORYBOOK:
        return TEST_TYPE_STORYBOOK
    if framework == APPIUM:
        return TEST_TYPE_APPIUM
    return TEST_TYPE_E2E

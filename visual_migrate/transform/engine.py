"""Transformation dispatch.

Selects the rewriter for a file and runs it. One rewriter instance per
call, so transform() is safe to run on many files at once.
"""

import logging
from typing import Optional

from visual_migrate.transform.base import SourceRewriter
from visual_migrate.transform.java import JavaRewriter
from visual_migrate.transform.javascript import JavaScriptRewriter
from visual_migrate.transform.python import PythonRewriter
from visual_migrate.transform.robot import RobotRewriter
from visual_migrate.transform.syntax import family_for, suffix_of
from visual_migrate.types import (
    JAVA,
    JAVASCRIPT,
    PLATFORMS,
    PYTHON,
    TransformationResult,
)

logger = logging.getLogger(__name__)

# Registry: maps language family -> rewriter class
REWRITER_REGISTRY: dict[str, type[SourceRewriter]] = {
    JAVASCRIPT: JavaScriptRewriter,
    JAVA: JavaRewriter,
    PYTHON: PythonRewriter,
}


def transform(
    platform: str,
    framework: str,
    language: str,
    source_text: str,
    file_path: Optional[str] = None,
) -> TransformationResult:
    """Rewrite one source file from platform's API to SmartUI.

    Returns the input unchanged (with no warnings) when the platform is
    not a known source platform, when no rewriter handles the language,
    or when the file's extension belongs to a different language family.
    A file that does not parse comes back unchanged with one warning.
    """
    if platform not in PLATFORMS:
        logger.debug("No source platform to migrate from (%s)", platform)
        return TransformationResult(content=source_text)

    if file_path is not None:
        family = family_for(file_path)
        if family != language:
            logger.debug("Skipping %s: not a %s file", file_path, language)
            return TransformationResult(content=source_text)
        if suffix_of(file_path) == ".robot":
            return RobotRewriter(platform, framework, file_path).run(source_text)

    rewriter_cls = REWRITER_REGISTRY.get(language)
    if rewriter_cls is None:
        logger.debug("No rewriter for language: %s", language)
        return TransformationResult(content=source_text)

    return rewriter_cls(platform, framework, file_path).run(source_text)

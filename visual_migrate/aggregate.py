"""Transformation result aggregator.

Merges per-file TransformationResults into one ProjectSummary. The
reduction is order-independent (counts are summed, warnings are grouped
by sorted file path), so results produced in parallel in any order
aggregate to the same summary.
"""

import difflib
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional

from visual_migrate.config import ScanPolicy
from visual_migrate.detector.content import read_sources
from visual_migrate.transform import transform
from visual_migrate.types import DetectionResult, ProjectSummary, TransformationResult

logger = logging.getLogger(__name__)


@dataclass
class ProjectTransformation:
    """Per-file results of one project run, with the text they came from."""

    originals: dict[str, str]
    results: dict[str, TransformationResult]
    summary: ProjectSummary = field(default_factory=ProjectSummary)

    def changed(self) -> dict[str, str]:
        """New content of every changed file, keyed by path."""
        return {path: self.results[path].content for path in self.summary.files_changed}

    def diffs(self) -> dict[str, str]:
        """Unified diff per changed file, ready for review."""
        return {
            path: _compute_diff(self.originals[path], self.results[path].content, path)
            for path in self.summary.files_changed
        }

    def to_dict(self) -> dict:
        return {
            "summary": self.summary.to_dict(),
            "files": {path: self.results[path].to_dict() for path in sorted(self.results)},
        }


def aggregate(
    results: Mapping[str, TransformationResult],
    originals: Optional[Mapping[str, str]] = None,
) -> ProjectSummary:
    """Reduce per-file results to project statistics.

    A file counts as changed when its content differs from the original
    text; without originals, any file with a rewritten snapshot does.
    """
    summary = ProjectSummary()
    for path in sorted(results):
        result = results[path]
        summary.files_processed += 1
        summary.snapshot_count += result.snapshot_count

        if originals is not None and path in originals:
            changed = result.content != originals[path]
        else:
            changed = result.snapshot_count > 0
        if changed:
            summary.files_changed.append(path)

        for warning in result.warnings:
            summary.warnings.append(warning if warning.file else replace(warning, file=path))

    return summary


def transform_project(
    project_root: Path,
    detection: DetectionResult,
    policy: Optional[ScanPolicy] = None,
) -> ProjectTransformation:
    """Transform every implicated source file of a detected project.

    Files are read and rewritten concurrently. Nothing is written back;
    applying the new content is left to the caller.
    """
    project_root = Path(project_root)
    policy = policy or ScanPolicy()
    originals = read_sources(project_root, detection.files.source, policy)
    paths = sorted(originals)

    def _transform(rel_path: str) -> TransformationResult:
        return transform(
            detection.platform,
            detection.framework,
            detection.language,
            originals[rel_path],
            rel_path,
        )

    with ThreadPoolExecutor(max_workers=policy.max_workers) as executor:
        results = dict(zip(paths, executor.map(_transform, paths)))

    summary = aggregate(results, originals)
    logger.info(
        "Transformed %s project: %d files processed, %d changed, %d snapshots, %d warnings",
        detection.platform,
        summary.files_processed,
        len(summary.files_changed),
        summary.snapshot_count,
        len(summary.warnings),
    )
    return ProjectTransformation(originals=originals, results=results, summary=summary)


def _compute_diff(original: str, modified: str, file_path: str) -> str:
    """Unified diff with newline-terminated headers, as `patch -p1` expects."""
    diff_lines = difflib.unified_diff(
        original.splitlines(keepends=True),
        modified.splitlines(keepends=True),
        fromfile=f"a/{file_path}",
        tofile=f"b/{file_path}",
        lineterm="\n",
    )
    return "".join(diff_lines)

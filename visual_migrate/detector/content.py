"""Deep content scanner: phase 2 of detection.

Enumerates candidate source files under the scan policy and checks each
one for the literal presence of any magic string. No tokenization: a
file is implicated when a substring appears anywhere in its raw text.

Reading is parallel (thread pool, bounded by policy.max_workers) and
the result is always sorted, so execution order never shows in output.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from visual_migrate.config import ScanPolicy

logger = logging.getLogger(__name__)


@dataclass
class ContentScan:
    """Files searched and files implicated by one content search."""

    searched: list[str]
    implicated: list[str]


def collect_files(project_root: Path, policy: ScanPolicy) -> list[str]:
    """All source files under the root, as sorted root-relative POSIX paths."""
    project_root = Path(project_root)
    files: list[str] = []

    for dirpath, dirnames, filenames in os.walk(project_root):
        dirnames[:] = sorted(d for d in dirnames if not policy.is_ignored_dir(d))
        rel_dir = Path(dirpath).relative_to(project_root).as_posix()
        for name in filenames:
            rel_path = name if rel_dir == "." else f"{rel_dir}/{name}"
            if not policy.is_source(rel_path) or policy.is_ignored(rel_path):
                continue
            try:
                if (project_root / rel_path).stat().st_size > policy.max_file_size:
                    logger.debug("Skipping oversized file %s", rel_path)
                    continue
            except OSError:
                continue
            files.append(rel_path)

    return sorted(files)


def read_sources(
    project_root: Path,
    rel_paths: Iterable[str],
    policy: Optional[ScanPolicy] = None,
) -> dict[str, str]:
    """Read files concurrently; unreadable files are logged and left out."""
    policy = policy or ScanPolicy()
    project_root = Path(project_root)
    paths = list(rel_paths)

    def _read(rel_path: str) -> Optional[str]:
        try:
            return (project_root / rel_path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning("Failed to read %s: %s", rel_path, exc)
            return None

    with ThreadPoolExecutor(max_workers=policy.max_workers) as executor:
        contents = list(executor.map(_read, paths))

    return {path: text for path, text in zip(paths, contents) if text is not None}


def scan_content(
    project_root: Path,
    magic_strings: Iterable[str],
    policy: Optional[ScanPolicy] = None,
) -> ContentScan:
    policy = policy or ScanPolicy()
    strings = [s for s in dict.fromkeys(magic_strings) if s]

    start = time.monotonic()
    files = collect_files(project_root, policy)
    if not strings:
        return ContentScan(searched=files, implicated=[])

    sources = read_sources(project_root, files, policy)
    implicated = sorted(
        path for path, text in sources.items()
        if any(s in text for s in strings)
    )

    elapsed = time.monotonic() - start
    logger.info(
        "Content search: %d/%d files implicated by %d magic strings in %.2fs",
        len(implicated), len(files), len(strings), elapsed,
    )
    return ContentScan(searched=files, implicated=implicated)


def search_content(
    project_root: Path,
    magic_strings: Iterable[str],
    policy: Optional[ScanPolicy] = None,
) -> list[str]:
    """Return the implicated files: those containing at least one magic string."""
    return scan_content(project_root, magic_strings, policy).implicated

"""requirements.txt anchor detector.

Parses requirements.txt (and requirements/*.txt) line-by-line.
Strips version specifiers, extras, comments, and pip flags.
"""

import logging
import re
from pathlib import Path
from typing import Optional

from visual_migrate.config import ScanPolicy
from visual_migrate.detector.python.packages import anchors_for, normalise
from visual_migrate.types import AnchorResult

logger = logging.getLogger(__name__)


def collect_packages(repo_dir: Path) -> set[str]:
    """Collect normalised package names from all requirements files."""
    packages: set[str] = set()

    _parse_file(repo_dir / "requirements.txt", packages)

    req_dir = repo_dir / "requirements"
    if req_dir.is_dir():
        for req_file in sorted(req_dir.glob("*.txt")):
            _parse_file(req_file, packages)

    return packages


def _parse_file(path: Path, packages: set[str]) -> None:
    if not path.exists():
        return

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return

    for line in text.splitlines():
        line = line.strip()
        # Skip comments, blank lines, and pip flags (-r, -c, --index-url, etc.)
        if not line or line.startswith("#") or line.startswith("-"):
            continue
        line = line.split("#")[0].strip()
        # Bare package name (before >, <, =, !, ;, @, [, ~)
        name = re.split(r"[><=!~;@\[\s]", line)[0]
        if name:
            packages.add(normalise(name))


def find_anchors(repo_dir: Path, policy: Optional[ScanPolicy] = None) -> list[AnchorResult]:
    packages = collect_packages(repo_dir)
    if not packages:
        return []
    return anchors_for(packages, "requirements.txt", repo_dir, policy)

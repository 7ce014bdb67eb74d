"""Python ecosystem anchor detector.

Entry point: detect_anchor(repo_dir, policy=None) -> AnchorResult

Candidates from requirements files come first, then pyproject.toml.
The policy decides which directories count when looking for Robot
Framework suites.
"""

from pathlib import Path
from typing import Optional

from visual_migrate.config import ScanPolicy
from visual_migrate.detector.candidates import pick_anchor
from visual_migrate.detector.python import pyproject, requirements
from visual_migrate.types import AnchorResult


def find_anchors(repo_dir: Path, policy: Optional[ScanPolicy] = None) -> list[AnchorResult]:
    return requirements.find_anchors(repo_dir, policy) + pyproject.find_anchors(repo_dir, policy)


def detect_anchor(repo_dir: Path, policy: Optional[ScanPolicy] = None) -> AnchorResult:
    return pick_anchor(find_anchors(repo_dir, policy))

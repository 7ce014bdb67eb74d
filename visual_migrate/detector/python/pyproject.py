"""pyproject.toml anchor detector.

Uses stdlib tomllib (Python 3.11+). Handles both modern PEP 621
[project] tables and Poetry's [tool.poetry] layout.
"""

import logging
import re
import tomllib
from pathlib import Path
from typing import Optional

from visual_migrate.config import ScanPolicy
from visual_migrate.detector.python.packages import anchors_for, normalise
from visual_migrate.types import AnchorResult

logger = logging.getLogger(__name__)


def _table(parent: dict, key: str) -> dict:
    value = parent.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"`{key}` is a {type(value).__name__}, expected a table")
    return value


def _list(parent: dict, key: str) -> list:
    value = parent.get(key, [])
    if not isinstance(value, list):
        raise ValueError(f"`{key}` is a {type(value).__name__}, expected an array")
    return value


def _collect_deps(data: dict) -> set[str]:
    """Normalised dependency names; raises ValueError on a misshapen manifest."""
    deps: set[str] = set()

    project = _table(data, "project")
    requirements = list(_list(project, "dependencies"))
    for name in _table(project, "optional-dependencies"):
        requirements.extend(_list(project["optional-dependencies"], name))
    for requirement in requirements:
        if isinstance(requirement, str):
            name = re.split(r"[><=!~;@\[\s]", requirement.strip())[0]
            if name:
                deps.add(normalise(name))

    poetry = _table(_table(data, "tool"), "poetry")
    tables = [_table(poetry, "dependencies"), _table(poetry, "dev-dependencies")]
    groups = _table(poetry, "group")
    for name in groups:
        tables.append(_table(_table(groups, name), "dependencies"))
    for table in tables:
        deps.update(normalise(name) for name in table if name.lower() != "python")

    return deps


def find_anchors(repo_dir: Path, policy: Optional[ScanPolicy] = None) -> list[AnchorResult]:
    path = repo_dir / "pyproject.toml"
    if not path.exists():
        return []

    try:
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Failed to parse pyproject.toml: %s", exc)
        return []

    try:
        deps = _collect_deps(data)
    except ValueError as exc:
        logger.warning("Ignoring malformed pyproject.toml: %s", exc)
        return []

    return anchors_for(deps, "pyproject.toml", repo_dir, policy)

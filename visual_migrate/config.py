"""Scan policy: the explicit exclusion policy and resource limits.

A ScanPolicy is passed into every scanning call rather than living in
module-level state, so concurrent scans with different policies cannot
interfere with each other.

Environment overrides (applied by ScanPolicy.from_env):
  - VISUAL_MIGRATE_IGNORE: comma-separated extra ignore patterns
  - VISUAL_MIGRATE_MAX_FILE_BYTES: integer bytes; larger files are skipped
  - VISUAL_MIGRATE_MAX_WORKERS: integer thread pool width

Policy files (load_policy) are YAML mappings with the optional keys
``ignore``, ``extensions``, ``max_file_size`` and ``max_workers``.
Ignore patterns extend the defaults; extensions replace them.

Pattern semantics: ``name/**`` excludes a directory called ``name`` at
any depth, other patterns are matched with fnmatch against the
root-relative POSIX path and, when they contain no slash, against the
bare file name as well.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from fnmatch import fnmatch
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

_IGNORE_ENV = "VISUAL_MIGRATE_IGNORE"
_MAX_FILE_BYTES_ENV = "VISUAL_MIGRATE_MAX_FILE_BYTES"
_MAX_WORKERS_ENV = "VISUAL_MIGRATE_MAX_WORKERS"

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    "node_modules/**",
    ".git/**",
    "dist/**",
    "build/**",
    ".next/**",
    "coverage/**",
    ".nyc_output/**",
    "__pycache__/**",
    ".venv/**",
    "venv/**",
    "target/**",
    "*.log",
    ".DS_Store",
    # The migration tool itself, when vendored into the scanned tree
    "visual_migrate/**",
    # Development scripts and fixtures of the migration tool
    "test-*-transform*.js",
    "test-*-migration*.js",
    "debug-*.js",
)

DEFAULT_SOURCE_EXTENSIONS: tuple[str, ...] = (
    ".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".py", ".java", ".robot",
)

DEFAULT_MAX_FILE_SIZE = 1024 * 1024
DEFAULT_MAX_WORKERS = 8


class PolicyError(ValueError):
    """Raised when a policy file cannot be used."""


@dataclass(frozen=True)
class ScanPolicy:
    ignore_patterns: tuple[str, ...] = DEFAULT_IGNORE_PATTERNS
    source_extensions: tuple[str, ...] = DEFAULT_SOURCE_EXTENSIONS
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_workers: int = DEFAULT_MAX_WORKERS
    _dir_patterns: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        dirs = frozenset(
            p[:-3] for p in self.ignore_patterns
            if p.endswith("/**") and "/" not in p[:-3] and "*" not in p[:-3]
        )
        object.__setattr__(self, "_dir_patterns", dirs)

    def with_ignores(self, *patterns: str) -> "ScanPolicy":
        return replace(self, ignore_patterns=self.ignore_patterns + tuple(patterns))

    def is_ignored_dir(self, name: str) -> bool:
        """Whether a directory with this name is pruned during enumeration."""
        return name in self._dir_patterns

    def is_ignored(self, rel_path: str) -> bool:
        """Whether a root-relative POSIX path is excluded."""
        parts = rel_path.split("/")
        if any(part in self._dir_patterns for part in parts[:-1]):
            return True
        name = parts[-1]
        for pattern in self.ignore_patterns:
            if pattern.endswith("/**"):
                prefix = pattern[:-3]
                if prefix in self._dir_patterns:
                    continue
                if fnmatch(rel_path, prefix + "/*"):
                    return True
                continue
            if fnmatch(rel_path, pattern):
                return True
            if "/" not in pattern and fnmatch(name, pattern):
                return True
        return False

    def is_source(self, rel_path: str) -> bool:
        return os.path.splitext(rel_path)[1].lower() in self.source_extensions

    @classmethod
    def from_env(cls, base: Optional["ScanPolicy"] = None) -> "ScanPolicy":
        """Apply environment overrides on top of base (or the defaults)."""
        policy = base or cls()

        extra = os.environ.get(_IGNORE_ENV, "")
        patterns = tuple(p.strip() for p in extra.split(",") if p.strip())
        if patterns:
            policy = policy.with_ignores(*patterns)

        max_size = _parse_positive_int(_MAX_FILE_BYTES_ENV)
        if max_size is not None:
            policy = replace(policy, max_file_size=max_size)

        workers = _parse_positive_int(_MAX_WORKERS_ENV)
        if workers is not None:
            policy = replace(policy, max_workers=workers)

        return policy


def _parse_positive_int(env_name: str) -> Optional[int]:
    raw = os.environ.get(env_name)
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", env_name, raw)
        return None
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive", env_name, raw)
        return None
    return value


def load_policy(path: Path, base: Optional[ScanPolicy] = None) -> ScanPolicy:
    """Load a YAML policy file on top of base (or the defaults)."""
    policy = base or ScanPolicy()
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise PolicyError(f"Cannot read scan policy {path}: {exc}") from exc

    if data is None:
        return policy
    if not isinstance(data, dict):
        raise PolicyError(f"Scan policy {path} must be a mapping, got {type(data).__name__}")

    unknown = set(data) - {"ignore", "extensions", "max_file_size", "max_workers"}
    if unknown:
        raise PolicyError(f"Unknown keys in scan policy {path}: {', '.join(sorted(unknown))}")

    ignore = data.get("ignore") or []
    if not isinstance(ignore, list) or not all(isinstance(p, str) for p in ignore):
        raise PolicyError(f"'ignore' in {path} must be a list of glob patterns")
    policy = policy.with_ignores(*ignore)

    if "extensions" in data:
        extensions = data["extensions"]
        if not isinstance(extensions, list) or not all(isinstance(e, str) for e in extensions):
            raise PolicyError(f"'extensions' in {path} must be a list of strings")
        normalised = tuple(e if e.startswith(".") else f".{e}" for e in extensions)
        policy = replace(policy, source_extensions=normalised)

    for key in ("max_file_size", "max_workers"):
        if key in data:
            value = data[key]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise PolicyError(f"'{key}' in {path} must be a positive integer")
            policy = replace(policy, **{key: value})

    logger.debug("Loaded scan policy from %s", path)
    return policy

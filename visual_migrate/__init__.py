"""visual_migrate: move visual regression tests to LambdaTest SmartUI.

Detects which visual testing platform (Percy, Applitools, Sauce Labs
Visual) and which test framework a project uses, then rewrites the
test sources to SmartUI with structural, syntax-tree based edits.

    from visual_migrate import detect, transform_project

    detection = detect("path/to/project")
    run = transform_project("path/to/project", detection)
    for path, diff in run.diffs().items():
        print(diff)
"""

from visual_migrate.aggregate import ProjectTransformation, aggregate, transform_project
from visual_migrate.config import PolicyError, ScanPolicy, load_policy
from visual_migrate.detector import detect, detect_all, resolve_anchor, resolve_anchors
from visual_migrate.errors import (
    DetectionError,
    MismatchedSignalsError,
    MultiplePlatformsDetectedError,
    PlatformNotDetectedError,
)
from visual_migrate.transform import transform
from visual_migrate.types import (
    AnchorResult,
    DetectionResult,
    ProjectSummary,
    TransformationResult,
    TransformationWarning,
)

__version__ = "0.1.0"

__all__ = [
    "AnchorResult",
    "DetectionError",
    "DetectionResult",
    "MismatchedSignalsError",
    "MultiplePlatformsDetectedError",
    "PlatformNotDetectedError",
    "PolicyError",
    "ProjectSummary",
    "ProjectTransformation",
    "ScanPolicy",
    "TransformationResult",
    "TransformationWarning",
    "aggregate",
    "detect",
    "detect_all",
    "load_policy",
    "resolve_anchor",
    "resolve_anchors",
    "transform",
    "transform_project",
]

"""Detection engine: which visual testing platform does a project use?

Public API:
    detect(project_root, policy=None) -> DetectionResult
    detect_all(project_root, policy=None) -> list[DetectionResult]
    resolve_anchor(project_root, policy=None) -> AnchorResult
    search_content(project_root, magic_strings, policy=None) -> list[str]
"""

from visual_migrate.detector.anchors import resolve_anchor, resolve_anchors
from visual_migrate.detector.classify import classify_framework, classify_platform
from visual_migrate.detector.content import search_content
from visual_migrate.detector.orchestrator import detect, detect_all

__all__ = [
    "detect",
    "detect_all",
    "resolve_anchor",
    "resolve_anchors",
    "search_content",
    "classify_platform",
    "classify_framework",
]

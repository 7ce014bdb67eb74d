"""AST transformation engine.

Rewrites source files from Percy, Applitools or Sauce Labs Visual to
LambdaTest SmartUI. Rewriters are pure: each takes source text and
returns a TransformationResult without touching the file system.
"""

from visual_migrate.transform.base import SourceRewriter
from visual_migrate.transform.engine import REWRITER_REGISTRY, transform
from visual_migrate.transform.java import JavaRewriter
from visual_migrate.transform.javascript import JavaScriptRewriter
from visual_migrate.transform.python import PythonRewriter
from visual_migrate.transform.robot import RobotRewriter

__all__ = [
    "REWRITER_REGISTRY",
    "JavaRewriter",
    "JavaScriptRewriter",
    "PythonRewriter",
    "RobotRewriter",
    "SourceRewriter",
    "transform",
]

"""tree-sitter grammars and parsing.

Languages are initialised once at module level. Parsing never raises on
its own (tree-sitter recovers), so a tree containing ERROR or MISSING
nodes is reported as a SourceSyntaxError here.
"""

import logging
from pathlib import PurePath
from typing import Optional

import tree_sitter
import tree_sitter_java as tsjava
import tree_sitter_javascript as tsjs
import tree_sitter_python as tspython
import tree_sitter_typescript as tsts

from visual_migrate.types import JAVA, JAVASCRIPT, PYTHON

logger = logging.getLogger(__name__)

# Initialize languages once at module level
_JS_LANG = tree_sitter.Language(tsjs.language())
_TS_LANG = tree_sitter.Language(tsts.language_typescript())
_TSX_LANG = tree_sitter.Language(tsts.language_tsx())
_JAVA_LANG = tree_sitter.Language(tsjava.language())
_PY_LANG = tree_sitter.Language(tspython.language())

# File extension to language family
EXTENSION_FAMILIES: dict[str, str] = {
    ".js": JAVASCRIPT,
    ".jsx": JAVASCRIPT,
    ".mjs": JAVASCRIPT,
    ".cjs": JAVASCRIPT,
    ".ts": JAVASCRIPT,
    ".tsx": JAVASCRIPT,
    ".java": JAVA,
    ".py": PYTHON,
    ".robot": PYTHON,
}

_GRAMMARS: dict[str, tree_sitter.Language] = {
    ".js": _JS_LANG,
    ".jsx": _JS_LANG,
    ".mjs": _JS_LANG,
    ".cjs": _JS_LANG,
    ".ts": _TS_LANG,
    ".tsx": _TSX_LANG,
    ".java": _JAVA_LANG,
    ".py": _PY_LANG,
}

# Grammar used when no file name is known
_DEFAULT_GRAMMARS: dict[str, tree_sitter.Language] = {
    JAVASCRIPT: _TSX_LANG,
    JAVA: _JAVA_LANG,
    PYTHON: _PY_LANG,
}


class SourceSyntaxError(Exception):
    """The source does not parse cleanly."""

    def __init__(self, line: int, column: int):
        self.line = line
        self.column = column
        super().__init__(f"syntax error at line {line}, column {column}")


def suffix_of(file_path: Optional[str]) -> str:
    return PurePath(file_path).suffix.lower() if file_path else ""


def family_for(file_path: str) -> Optional[str]:
    return EXTENSION_FAMILIES.get(suffix_of(file_path))


def grammar_for(family: str, file_path: Optional[str] = None) -> Optional[tree_sitter.Language]:
    suffix = suffix_of(file_path)
    if suffix:
        return _GRAMMARS.get(suffix)
    return _DEFAULT_GRAMMARS.get(family)


def parse(source: bytes, language: tree_sitter.Language) -> tree_sitter.Tree:
    tree = tree_sitter.Parser(language).parse(source)
    if tree.root_node.has_error:
        bad = _first_error(tree.root_node) or tree.root_node
        raise SourceSyntaxError(bad.start_point[0] + 1, bad.start_point[1] + 1)
    return tree


def _first_error(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def text_of(node: tree_sitter.Node) -> str:
    return node.text.decode("utf-8")


def named_args(node: Optional[tree_sitter.Node], comment_types: frozenset[str]) -> list[tree_sitter.Node]:
    """Named children minus comments."""
    if node is None:
        return []
    return [c for c in node.named_children if c.type not in comment_types]


def descendants(node: tree_sitter.Node, node_type: str):
    """Yield every descendant (including node) of the given type, in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == node_type:
            yield current
        stack.extend(reversed(current.children))

"""Base class for all source rewriters.

A rewriter runs Parse → Visit → Rewrite → Emit over one file:

  Parse   build a tree-sitter tree; a syntax error short-circuits to the
          Failed state (original content, one warning, zero snapshots)
  Visit   subclasses walk the tree and recognise imports and calls
  Rewrite every change is recorded as an Edit; the tree is never mutated
  Emit    edits are applied to the original bytes in one pass

One instance handles one file, so nothing is shared between files and
rewriters can run on many files concurrently.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

import tree_sitter

from visual_migrate.transform.edits import (
    Edit,
    apply_edits,
    indentation_at,
    line_end,
    removal_span,
)
from visual_migrate.transform.emulation import LayoutIntent, MIGRATION_NOTE, render_assertion
from visual_migrate.transform.settings import Snapshot, UnsupportedShape
from visual_migrate.transform.syntax import SourceSyntaxError, grammar_for, parse, text_of
from visual_migrate.types import TransformationResult, TransformationWarning

logger = logging.getLogger(__name__)

PARSE_FAILURE_DETAILS = "The source file may contain unsupported syntax or be malformed."
UNTOUCHED_DETAILS = (
    "The call shape is not recognised well enough to rewrite safely. "
    "Migrate this snapshot by hand."
)


class SourceRewriter(ABC):
    """Abstract base class for per-language rewriters.

    visit() records edits and warnings on the instance; run() owns the
    state machine and the no-op guarantees: with no edits, the returned
    content is the input string itself.
    """

    #: Language family handled by this rewriter
    language: str = ""

    #: Node types that are comments in this grammar
    comment_types: frozenset[str] = frozenset({"comment"})

    #: Statement node types a layout assertion can be inserted before
    statement_types: frozenset[str] = frozenset()

    #: Node types the statement search must not cross
    boundary_types: frozenset[str] = frozenset()

    def __init__(self, platform: str, framework: str, file_path: Optional[str] = None):
        self.platform = platform
        self.framework = framework
        self.file_path = file_path
        self.file_label = file_path or "<source>"
        self.source = b""
        self.edits: list[Edit] = []
        self.warnings: list[TransformationWarning] = []
        self.snapshot_count = 0

    def run(self, source_text: str) -> TransformationResult:
        self.source = source_text.encode("utf-8")
        try:
            tree = parse(self.source, grammar_for(self.language, self.file_path))
        except SourceSyntaxError as exc:
            logger.warning("Failed to parse %s: %s", self.file_label, exc)
            return TransformationResult(
                content=source_text,
                warnings=[TransformationWarning(
                    message=f"Failed to parse source code: {exc}",
                    details=PARSE_FAILURE_DETAILS,
                    file=self.file_path,
                    line=exc.line,
                )],
                snapshot_count=0,
            )

        self.visit(tree.root_node)

        if not self.edits:
            return TransformationResult(content=source_text, warnings=list(self.warnings))

        content = apply_edits(self.source, self.edits).decode("utf-8")
        logger.debug(
            "Rewrote %s: %d edits, %d snapshots, %d warnings",
            self.file_label, len(self.edits), self.snapshot_count, len(self.warnings),
        )
        return TransformationResult(
            content=content,
            warnings=list(self.warnings),
            snapshot_count=self.snapshot_count,
        )

    @abstractmethod
    def visit(self, root: tree_sitter.Node) -> None:
        """Recognise imports and snapshot calls below root and record edits."""
        ...

    # ------------------------------------------------------------------
    # Snapshot calls
    # ------------------------------------------------------------------

    def new_snapshot(self, node: tree_sitter.Node) -> Snapshot:
        return Snapshot(
            platform=self.platform,
            file_label=self.file_label,
            quote=self.quote,
            line=line_of(node),
        )

    def rewrite(
        self,
        call: tree_sitter.Node,
        build: Callable[[], tuple[Snapshot, Callable[[Snapshot], str]]],
    ) -> None:
        """Replace call with the rendered snapshot, or leave it untouched.

        build returns the snapshot and its renderer; either may raise
        UnsupportedShape, in which case nothing is edited and a warning
        explains why.
        """
        try:
            snapshot, render = build()
            layout = snapshot.layout_selectors()
            statement = None
            if layout:
                statement = self.enclosing_statement(call)
                if statement is None:
                    raise UnsupportedShape("the layout check is not a standalone statement")
            replacement = render(snapshot)
        except UnsupportedShape as exc:
            self.leave_untouched(call, str(exc))
            return

        self.replace(call, replacement)
        self.warnings.extend(snapshot.warnings)
        self.snapshot_count += 1

        for selector in layout:
            lines = render_assertion(LayoutIntent(
                selector=selector.text,
                language=self.language,
                framework=self.framework,
                handle=snapshot.handle,
            ))
            self.insert_before_statement(statement, lines)
            self.warnings.append(TransformationWarning(
                message=(
                    f"Layout check on {selector.text} in {self.file_label} was emulated "
                    "with a visibility assertion and ignored child elements."
                ),
                details=MIGRATION_NOTE,
                file=self.file_path,
                line=line_of(call),
            ))

    def leave_untouched(self, node: tree_sitter.Node, reason: str) -> None:
        self.warnings.append(TransformationWarning(
            message=(
                f"Snapshot call at {self.file_label}:{line_of(node)} was left "
                f"unchanged: {reason}."
            ),
            details=UNTOUCHED_DETAILS,
            file=self.file_path,
            line=line_of(node),
        ))

    # ------------------------------------------------------------------
    # Edit helpers
    # ------------------------------------------------------------------

    def replace(self, node: tree_sitter.Node, text: str) -> None:
        self.edits.append(Edit(node.start_byte, node.end_byte, text))

    def insert(self, offset: int, text: str) -> None:
        self.edits.append(Edit(offset, offset, text))

    def remove_statement(self, node: tree_sitter.Node) -> None:
        start, end = removal_span(self.source, node.start_byte, node.end_byte)
        self.edits.append(Edit(start, end, ""))

    def insert_line_after(self, node: tree_sitter.Node, line: str) -> None:
        self.insert(line_end(self.source, node.end_byte), "\n" + line)

    def insert_line_at_top(self, line: str) -> None:
        self.insert(0, line + "\n")

    def insert_before_statement(self, statement: tree_sitter.Node, lines: list[str]) -> None:
        indent = indentation_at(self.source, statement.start_byte)
        self.insert(statement.start_byte, "".join(f"{line}\n{indent}" for line in lines))

    def enclosing_statement(self, node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
        current = node.parent
        while current is not None:
            if current.type in self.statement_types:
                return current
            if current.type in self.boundary_types:
                return None
            current = current.parent
        return None

    def args_of(self, node: Optional[tree_sitter.Node]) -> list[tree_sitter.Node]:
        if node is None:
            return []
        return [c for c in node.named_children if c.type not in self.comment_types]

    @abstractmethod
    def quote(self, value: str) -> str:
        """Render value as a string literal of this language."""
        ...


def line_of(node: tree_sitter.Node) -> int:
    return node.start_point[0] + 1


def member_parts(node: tree_sitter.Node, object_field: str, property_field: str) -> Optional[tuple[str, str]]:
    """(object text, property text) of a member access, or None."""
    obj = node.child_by_field_name(object_field)
    prop = node.child_by_field_name(property_field)
    if obj is None or prop is None:
        return None
    return text_of(obj), text_of(prop)

"""Java rewriter.

  Percy       percy.snapshot("name"[, widths, minHeight, enableJs, percyCss, scope])
              percy.snapshot("name", Map.of("scope", "#main"))
              percy.screenshot("name")                           (App Percy)
  Applitools  eyes.check("name", Target.window().fully()),
              eyes.check(Target.region(By.id("hero")).withName("Hero")),
              eyes.checkWindow("name"); eyes.open(..)/close() statements go
  Sauce       visual.sauceVisualCheck("name"[, new CheckOptions.Builder()...build()])

Every call becomes SmartUISnapshot.smartuiSnapshot(driver, "name"[, Map.of(..)]).
The first platform import turns into the SmartUISnapshot import and the
remaining platform imports are removed.
"""

import logging
from typing import Callable, Optional

import tree_sitter

from visual_migrate.transform import rules
from visual_migrate.transform.base import SourceRewriter
from visual_migrate.transform.settings import (
    ARRAY,
    FALSE,
    OTHER,
    STRING,
    TRUE,
    Snapshot,
    UnsupportedShape,
    Value,
)
from visual_migrate.transform.syntax import descendants, text_of
from visual_migrate.types import APPLITOOLS, JAVA, PERCY, SAUCE_LABS

logger = logging.getLogger(__name__)

_DEFAULT_HANDLE = "driver"

# By.<locator>("x") converted to a CSS selector: prefix added to the literal
_BY_CSS_PREFIX: dict[str, str] = {
    "cssSelector": "",
    "id": "#",
    "className": ".",
    "tagName": "",
}
_LIST_FACTORIES = frozenset({"Arrays.asList", "List.of", "Set.of"})


class JavaRewriter(SourceRewriter):
    language = JAVA
    comment_types = frozenset({"line_comment", "block_comment"})
    statement_types = frozenset({"expression_statement", "local_variable_declaration", "return_statement"})
    boundary_types = frozenset({"lambda_expression", "class_body"})

    def __init__(self, platform: str, framework: str, file_path: Optional[str] = None):
        super().__init__(platform, framework, file_path)
        self.prefixes = rules.JAVA_PACKAGES.get(platform, ())
        self.clients: set[str] = set(rules.CLIENT_NAMES.get(platform, ()))
        self.handles: dict[str, str] = {}
        self.uses_map = False
        self.uses_list = False

    def quote(self, value: str) -> str:
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'

    def visit(self, root: tree_sitter.Node) -> None:
        self._collect_clients(root)
        self._walk(root)
        self._rewrite_imports(root)

    def _walk(self, node: tree_sitter.Node) -> None:
        if node.type == "expression_statement" and self._remove_lifecycle(node):
            return
        if node.type == "method_invocation" and self._visit_call(node):
            return
        for child in node.children:
            self._walk(child)

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    def _rewrite_imports(self, root: tree_sitter.Node) -> None:
        imports = [n for n in root.named_children if n.type == "import_declaration"]
        existing = {_import_name(n) for n in imports if not _is_static(n)}
        platform_imports = [
            n for n in imports
            if not _is_static(n) and rules.matches_package(_import_name(n), self.prefixes)
        ]

        removed: set[int] = set()
        has_snapshot_import = rules.JAVA_SNAPSHOT_IMPORT in existing
        for node in platform_imports:
            if not has_snapshot_import:
                self.replace(node, f"import {rules.JAVA_SNAPSHOT_IMPORT};")
                has_snapshot_import = True
            else:
                self.remove_statement(node)
                removed.add(node.id)

        missing: list[str] = []
        if self.snapshot_count and not has_snapshot_import:
            missing.append(rules.JAVA_SNAPSHOT_IMPORT)
        if self.uses_map and not {"java.util.Map", "java.util"} & existing:
            missing.append("java.util.Map")
        if self.uses_list and not {"java.util.List", "java.util"} & existing:
            missing.append("java.util.List")
        if not missing:
            return

        lines = "\n".join(f"import {name};" for name in missing)
        kept = [n for n in imports if n.id not in removed]
        package = next((n for n in root.named_children if n.type == "package_declaration"), None)
        if kept:
            self.insert_line_after(kept[-1], lines)
        elif package is not None:
            self.insert_line_after(package, "\n" + lines)
        else:
            self.insert_line_at_top(lines + "\n")

    # ------------------------------------------------------------------
    # Clients and lifecycle
    # ------------------------------------------------------------------

    def _add_client(self, name: str, value: Optional[tree_sitter.Node]) -> None:
        bare = name[len("this."):] if name.startswith("this.") else name
        handle = _constructor_handle(value)
        for alias in (bare, "this." + bare):
            self.clients.add(alias)
            if handle:
                self.handles[alias] = handle

    def _collect_clients(self, root: tree_sitter.Node) -> None:
        classes = rules.CLIENT_CLASSES.get(self.platform, frozenset())
        for decl_type in ("local_variable_declaration", "field_declaration"):
            for decl in descendants(root, decl_type):
                type_node = decl.child_by_field_name("type")
                declared = text_of(type_node).split("<")[0].split(".")[-1] if type_node is not None else ""
                for declarator in decl.children_by_field_name("declarator"):
                    name = declarator.child_by_field_name("name")
                    value = declarator.child_by_field_name("value")
                    if name is not None and (declared in classes or _created_class(value) in classes):
                        self._add_client(text_of(name), value)

        for node in descendants(root, "assignment_expression"):
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            if left is not None and _created_class(right) in classes:
                self._add_client(text_of(left), right)

        for call in descendants(root, "method_invocation"):
            obj = call.child_by_field_name("object")
            name = call.child_by_field_name("name")
            if obj is None or name is None or text_of(name) != "open" or text_of(obj) not in self.clients:
                continue
            args = self.args_of(call.child_by_field_name("arguments"))
            if args and args[0].type == "identifier":
                self.handles[text_of(obj)] = text_of(args[0])

    def _remove_lifecycle(self, statement: tree_sitter.Node) -> bool:
        if self.platform != APPLITOOLS:
            return False
        expr = next(iter(self.args_of(statement)), None)
        if expr is None or expr.type != "method_invocation":
            return False
        obj = expr.child_by_field_name("object")
        name = expr.child_by_field_name("name")
        if obj is None or name is None:
            return False
        if text_of(obj) in self.clients and text_of(name) in rules.CLIENT_LIFECYCLE_METHODS[APPLITOOLS]:
            self.remove_statement(statement)
            return True
        return False

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def _visit_call(self, call: tree_sitter.Node) -> bool:
        obj = call.child_by_field_name("object")
        name = call.child_by_field_name("name")
        if obj is None or name is None:
            return False
        obj_text, method = text_of(obj), text_of(name)
        if obj_text not in self.clients or method not in rules.CLIENT_SNAPSHOT_METHODS.get(self.platform, ()):
            return False

        args = self.args_of(call.child_by_field_name("arguments"))
        builders = {
            PERCY: self._build_percy,
            APPLITOOLS: self._build_applitools,
            SAUCE_LABS: self._build_sauce,
        }
        build = builders[self.platform]

        def prepare() -> tuple[Snapshot, Callable[[Snapshot], str]]:
            snapshot = self.new_snapshot(call)
            snapshot.handle = self.handles.get(obj_text)
            build(snapshot, method, args)
            return snapshot, self._render

        self.rewrite(call, prepare)
        return True

    def _build_percy(self, snapshot: Snapshot, method: str, args: list[tree_sitter.Node]) -> None:
        if not args:
            return
        snapshot.set_name(self.value_of(args[0]))
        rest = args[1:]
        if len(rest) == 1 and _is_call(rest[0], "Map", "of"):
            snapshot.apply_options(self._map_pairs(rest[0]))
            return
        if len(rest) == 1 and rest[0].type == "identifier":
            raise UnsupportedShape("snapshot options are not an inline Map.of(..)")
        if len(rest) > len(rules.PERCY_JAVA_POSITIONAL):
            raise UnsupportedShape("too many positional snapshot arguments")
        for key, arg in zip(rules.PERCY_JAVA_POSITIONAL, rest):
            if arg.type != "null_literal":
                snapshot.apply_option(key, self.value_of(arg))

    def _build_applitools(self, snapshot: Snapshot, method: str, args: list[tree_sitter.Node]) -> None:
        if method == "checkWindow":
            if len(args) > 1:
                raise UnsupportedShape("checkWindow() with positional match settings")
            if args:
                snapshot.set_name(self.value_of(args[0]))
            return
        if method == "checkRegion":
            if not args or len(args) > 2:
                raise UnsupportedShape("checkRegion() needs a locator and an optional name")
            region = self.value_of(args[0])
            if region.kind != STRING:
                raise UnsupportedShape("checkRegion() target is not a CSS locator")
            snapshot.element = region
            if len(args) == 2:
                snapshot.set_name(self.value_of(args[1]))
            return

        if len(args) > 2:
            raise UnsupportedShape("check() with more than a name and settings")
        for arg in args:
            chain = self._builder_chain(arg)
            if chain is not None:
                snapshot.apply_builder(chain)
            elif arg.type == "string_literal":
                snapshot.set_name(self.value_of(arg))
            else:
                raise UnsupportedShape("check settings are not a Target builder")

    def _build_sauce(self, snapshot: Snapshot, method: str, args: list[tree_sitter.Node]) -> None:
        if len(args) > 2:
            raise UnsupportedShape("sauceVisualCheck() with more than a name and options")
        if args:
            snapshot.set_name(self.value_of(args[0]))
        if len(args) == 2:
            snapshot.apply_options(self._options_builder(args[1]))

    # -- builder chains --------------------------------------------------------

    def _builder_chain(self, node: tree_sitter.Node) -> Optional[list[tuple[str, list[Value]]]]:
        chain: list[tuple[str, list[Value]]] = []
        current = node
        while current.type == "method_invocation":
            name = current.child_by_field_name("name")
            args = self.args_of(current.child_by_field_name("arguments"))
            chain.append((text_of(name), [self.value_of(a) for a in args]))
            current = current.child_by_field_name("object")
            if current is None:
                return None
        if current.type == "identifier" and text_of(current) == rules.BUILDER_ROOT and chain:
            chain.reverse()
            return chain
        return None

    def _options_builder(self, node: tree_sitter.Node) -> list[tuple[str, Value]]:
        """new CheckOptions.Builder().withX(..).build() as (x, value) pairs."""
        pairs: list[tuple[str, Value]] = []
        current = node
        while current is not None and current.type == "method_invocation":
            name = text_of(current.child_by_field_name("name"))
            args = self.args_of(current.child_by_field_name("arguments"))
            if name != "build":
                if not name.startswith("with") or len(args) != 1:
                    raise UnsupportedShape(f"`{name}` is not a single-value option setter")
                pairs.append((name[len("with"):], self.value_of(args[0])))
            current = current.child_by_field_name("object")
        if current is None or current.type != "object_creation_expression":
            raise UnsupportedShape("options are not an inline builder")
        pairs.reverse()
        return pairs

    def _map_pairs(self, node: tree_sitter.Node) -> list[tuple[str, Value]]:
        args = self.args_of(node.child_by_field_name("arguments"))
        if len(args) % 2:
            raise UnsupportedShape("Map.of(..) with an odd number of arguments")
        pairs: list[tuple[str, Value]] = []
        for key, value in zip(args[::2], args[1::2]):
            key_value = self.value_of(key)
            if key_value.kind != STRING:
                raise UnsupportedShape("option keys are not string literals")
            pairs.append((key_value.literal, self.value_of(value)))
        return pairs

    # ------------------------------------------------------------------
    # Values and rendering
    # ------------------------------------------------------------------

    def value_of(self, node: tree_sitter.Node) -> Value:
        text = text_of(node)
        if node.type == "string_literal":
            if text.startswith('"""'):
                return Value(text)
            return Value(text, STRING, text[1:-1])
        if node.type == "true":
            return Value(text, TRUE)
        if node.type == "false":
            return Value(text, FALSE)
        if node.type == "array_creation_expression":
            initializer = next((c for c in node.named_children if c.type == "array_initializer"), None)
            if initializer is not None:
                return Value(text, ARRAY, items=tuple(self.value_of(i) for i in self.args_of(initializer)))
            return Value(text)
        if node.type == "method_invocation":
            obj = node.child_by_field_name("object")
            name = node.child_by_field_name("name")
            args = self.args_of(node.child_by_field_name("arguments"))
            qualified = f"{text_of(obj)}.{text_of(name)}" if obj is not None else text_of(name)
            if qualified in _LIST_FACTORIES:
                return Value(text, ARRAY, items=tuple(self.value_of(a) for a in args))
            if obj is not None and text_of(obj) == "By" and text_of(name) in _BY_CSS_PREFIX and len(args) == 1:
                locator = self.value_of(args[0])
                if locator.kind == STRING:
                    selector = _BY_CSS_PREFIX[text_of(name)] + locator.literal
                    return Value(self.quote(selector), STRING, selector)
        return Value(text, OTHER)

    def _render_options(self, snapshot: Snapshot) -> Optional[str]:
        entries: list[str] = []
        if snapshot.ignore:
            selectors = ", ".join(v.text for v in snapshot.ignore)
            entries.append(f'"ignoreDOM", Map.of("cssSelector", List.of({selectors}))')
            self.uses_list = True
        if snapshot.element is not None:
            entries.append(f'"element", Map.of("cssSelector", {snapshot.element.text})')
        if not entries:
            return None
        self.uses_map = True
        return f"Map.of({', '.join(entries)})"

    def _render(self, snapshot: Snapshot) -> str:
        parts = [snapshot.handle or _DEFAULT_HANDLE, snapshot.name_or_default().text]
        options = self._render_options(snapshot)
        if options:
            parts.append(options)
        return f"{rules.JAVA_SNAPSHOT_CLASS}.{rules.JAVA_SNAPSHOT}({', '.join(parts)})"


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _import_name(node: tree_sitter.Node) -> str:
    """Qualified name of an import; wildcard imports return the package."""
    for child in node.named_children:
        if child.type in ("scoped_identifier", "identifier"):
            return text_of(child)
    return ""


def _is_static(node: tree_sitter.Node) -> bool:
    return any(child.type == "static" for child in node.children)


def _is_call(node: tree_sitter.Node, obj: str, name: str) -> bool:
    if node.type != "method_invocation":
        return False
    obj_node = node.child_by_field_name("object")
    name_node = node.child_by_field_name("name")
    return (
        obj_node is not None and name_node is not None
        and text_of(obj_node) == obj and text_of(name_node) == name
    )


def _first_creation(value: Optional[tree_sitter.Node]) -> Optional[tree_sitter.Node]:
    if value is None:
        return None
    return next(descendants(value, "object_creation_expression"), None)


def _created_class(value: Optional[tree_sitter.Node]) -> Optional[str]:
    """Outer class of the first `new X(..)` or `new X.Builder(..)` in value."""
    creation = _first_creation(value)
    if creation is None:
        return None
    type_node = creation.child_by_field_name("type")
    if type_node is None:
        return None
    return text_of(type_node).split("<")[0].split(".")[0]


def _constructor_handle(value: Optional[tree_sitter.Node]) -> Optional[str]:
    creation = _first_creation(value)
    if creation is None:
        return None
    arguments = creation.child_by_field_name("arguments")
    first = next((a for a in arguments.named_children if a.type != "line_comment"), None) if arguments else None
    if first is not None and first.type == "identifier":
        return text_of(first)
    return None

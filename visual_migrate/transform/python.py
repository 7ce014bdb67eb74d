"""Python rewriter.

  Percy       percy_snapshot(driver, "name", widths=[..], scope="#main")
              percy.percy_screenshot(driver, name="name")
  Applitools  eyes.check("name", Target.window().fully()),
              eyes.check_window("name"), eyes.check_region("#id", "name");
              eyes.open(..) and eyes.close() statements are removed
  Sauce       sauce_visual_check("name", ignored_regions=[..]),
              visual.check_page(driver, "name")

Everything becomes smartui_snapshot(driver, "name"[, {options}]) from
lambdatest_selenium_driver.
"""

import logging
from typing import Callable, Optional

import tree_sitter

from visual_migrate.transform import rules
from visual_migrate.transform.base import SourceRewriter, member_parts
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
from visual_migrate.types import APPLITOOLS, PYTHON

logger = logging.getLogger(__name__)

_STRING_TYPES = frozenset({"string", "concatenated_string"})
_DEFAULT_HANDLE = "driver"


class PythonRewriter(SourceRewriter):
    language = PYTHON
    comment_types = frozenset({"comment"})
    statement_types = frozenset({"expression_statement", "return_statement"})
    boundary_types = frozenset({"lambda", "function_definition", "class_definition"})

    def __init__(self, platform: str, framework: str, file_path: Optional[str] = None):
        super().__init__(platform, framework, file_path)
        self.prefixes = rules.PY_MODULES.get(platform, ())
        self.module_bindings: set[str] = set()
        self.function_bindings: set[str] = set()
        self.class_bindings: set[str] = set()
        self.bound_names: set[str] = set()
        self.clients: set[str] = set(rules.CLIENT_NAMES.get(platform, ()))
        self.handles: dict[str, str] = {}
        self.last_import: Optional[tree_sitter.Node] = None
        self.needs_import = False

    def quote(self, value: str) -> str:
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'

    def visit(self, root: tree_sitter.Node) -> None:
        for node in root.named_children:
            if node.type == "import_from_statement":
                self._visit_from_import(node)
            elif node.type == "import_statement":
                self._visit_import(node)
        self._collect_clients(root)
        self._walk(root)
        if self.needs_import and rules.PY_SNAPSHOT not in self.bound_names:
            line = f"from {rules.PY_MODULE} import {rules.PY_SNAPSHOT}"
            if self.last_import is not None:
                self.insert_line_after(self.last_import, line)
            else:
                self.insert_line_at_top(line)

    def _walk(self, node: tree_sitter.Node) -> None:
        if node.type == "expression_statement" and self._remove_lifecycle(node):
            return
        if node.type == "call" and self._visit_call(node):
            return
        for child in node.children:
            self._walk(child)

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    def _visit_from_import(self, node: tree_sitter.Node) -> None:
        self.last_import = node
        module = node.child_by_field_name("module_name")
        platform_import = module is not None and rules.matches_package(text_of(module), self.prefixes)
        if platform_import:
            self.replace(module, rules.PY_MODULE)

        for name_node in node.children_by_field_name("name"):
            if name_node.type == "aliased_import":
                imported = name_node.child_by_field_name("name")
                alias = name_node.child_by_field_name("alias")
                local = text_of(alias) if alias is not None else text_of(imported)
                target = imported
            else:
                imported, local, target = name_node, text_of(name_node), None
            self.bound_names.add(local)
            if not platform_import or imported is None:
                continue
            imported_name = text_of(imported)
            if imported_name in rules.PY_SNAPSHOT_FUNCTIONS.get(self.platform, ()):
                self.function_bindings.add(local)
                # Keep the local name, import the SmartUI function under it
                if target is not None:
                    self.replace(target, rules.PY_SNAPSHOT)
                elif local != rules.PY_SNAPSHOT:
                    self.replace(name_node, f"{rules.PY_SNAPSHOT} as {local}")
            elif imported_name in rules.CLIENT_CLASSES.get(self.platform, ()):
                self.class_bindings.add(local)

    def _visit_import(self, node: tree_sitter.Node) -> None:
        self.last_import = node
        for name_node in node.children_by_field_name("name"):
            if name_node.type == "aliased_import":
                dotted = name_node.child_by_field_name("name")
                alias = name_node.child_by_field_name("alias")
                if dotted is None or alias is None:
                    continue
                self.bound_names.add(text_of(alias))
                if rules.matches_package(text_of(dotted), self.prefixes):
                    self.replace(dotted, rules.PY_MODULE)
                    self.module_bindings.add(text_of(alias))
                continue
            name = text_of(name_node)
            self.bound_names.add(name.split(".")[0])
            if not rules.matches_package(name, self.prefixes):
                continue
            if "." in name:
                # import percy.snapshot binds "percy" only; keep it bound to the new module
                self.replace(name_node, f"{rules.PY_MODULE} as {name.split('.')[0]}")
            else:
                self.replace(name_node, f"{rules.PY_MODULE} as {name}")
            self.module_bindings.add(name.split(".")[0])

    # ------------------------------------------------------------------
    # Clients and lifecycle
    # ------------------------------------------------------------------

    def _collect_clients(self, root: tree_sitter.Node) -> None:
        classes = self.class_bindings | rules.CLIENT_CLASSES.get(self.platform, frozenset())
        for node in descendants(root, "assignment"):
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            if left is None or right is None or right.type != "call":
                continue
            ctor = right.child_by_field_name("function")
            if ctor is None or text_of(ctor).split(".")[-1] not in classes:
                continue
            self.clients.add(text_of(left))

        for call in descendants(root, "call"):
            fn = call.child_by_field_name("function")
            parts = member_parts(fn, "object", "attribute") if fn is not None and fn.type == "attribute" else None
            if parts is None or parts[1] != "open" or parts[0] not in self.clients:
                continue
            args = self._positional(call)
            if args and args[0].type not in _STRING_TYPES:
                self.handles[parts[0]] = text_of(args[0])

    def _remove_lifecycle(self, statement: tree_sitter.Node) -> bool:
        if not self._is_lifecycle(statement):
            return False
        # A block whose statements are all removed keeps a `pass` in place of the first
        block = statement.parent
        if block is not None and block.type == "block":
            siblings = self.args_of(block)
            if siblings[0] == statement and all(self._is_lifecycle(s) for s in siblings):
                self.replace(statement, "pass")
                return True
        self.remove_statement(statement)
        return True

    def _is_lifecycle(self, statement: tree_sitter.Node) -> bool:
        if self.platform != APPLITOOLS or statement.type != "expression_statement":
            return False
        expr = next(iter(self.args_of(statement)), None)
        if expr is not None and expr.type == "await":
            expr = next(iter(self.args_of(expr)), None)
        if expr is None or expr.type != "call":
            return False
        fn = expr.child_by_field_name("function")
        parts = member_parts(fn, "object", "attribute") if fn is not None and fn.type == "attribute" else None
        if parts is None:
            return False
        obj, method = parts
        return obj in self.clients and method in rules.CLIENT_LIFECYCLE_METHODS[APPLITOOLS]

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def _visit_call(self, call: tree_sitter.Node) -> bool:
        fn = call.child_by_field_name("function")
        arguments = call.child_by_field_name("arguments")
        if fn is None or arguments is None or arguments.type != "argument_list":
            return False
        target = self._match_target(fn)
        if target is None:
            return False
        kind, obj, method = target
        if self.platform == APPLITOOLS:
            self.rewrite(call, lambda: self._build_applitools(call, obj, method))
        else:
            self.rewrite(call, lambda: self._build_function_style(call, kind, obj))
        return True

    def _match_target(self, fn: tree_sitter.Node) -> Optional[tuple[str, Optional[str], str]]:
        functions = rules.PY_SNAPSHOT_FUNCTIONS.get(self.platform, frozenset())
        if fn.type == "identifier":
            name = text_of(fn)
            if name in self.function_bindings:
                return "bound", None, name
            if name in functions and name not in self.bound_names:
                return "global", None, name
            return None
        parts = member_parts(fn, "object", "attribute") if fn.type == "attribute" else None
        if parts is None:
            return None
        obj, method = parts
        if self.platform != APPLITOOLS and obj in self.module_bindings:
            if method in rules.PY_NAMESPACE_METHODS.get(self.platform, ()):
                return "namespace", obj, method
        if obj in self.clients and method in rules.CLIENT_SNAPSHOT_METHODS.get(self.platform, ()):
            return "client", obj, method
        return None

    def _positional(self, call: tree_sitter.Node) -> list[tree_sitter.Node]:
        return [
            a for a in self.args_of(call.child_by_field_name("arguments"))
            if a.type != "keyword_argument"
        ]

    def _split_args(self, call: tree_sitter.Node) -> tuple[list[tree_sitter.Node], list[tuple[str, Value]]]:
        positional: list[tree_sitter.Node] = []
        keywords: list[tuple[str, Value]] = []
        for arg in self.args_of(call.child_by_field_name("arguments")):
            if arg.type in ("list_splat", "dictionary_splat"):
                raise UnsupportedShape("*args or **kwargs")
            if arg.type == "keyword_argument":
                key = arg.child_by_field_name("name")
                value = arg.child_by_field_name("value")
                keywords.append((text_of(key), self.value_of(value)))
            else:
                positional.append(arg)
        return positional, keywords

    def _take_name(self, snapshot: Snapshot, keywords: list[tuple[str, Value]]) -> list[tuple[str, Value]]:
        rest = []
        for key, value in keywords:
            if key == "name":
                snapshot.name = value
            else:
                rest.append((key, value))
        return rest

    # -- Percy / Sauce -----------------------------------------------------

    def _build_function_style(
        self,
        call: tree_sitter.Node,
        kind: str,
        obj: Optional[str],
    ) -> tuple[Snapshot, Callable[[Snapshot], str]]:
        snapshot = self.new_snapshot(call)
        positional, keywords = self._split_args(call)
        keywords = self._take_name(snapshot, keywords)

        if positional and positional[0].type not in _STRING_TYPES and (len(positional) >= 2 or snapshot.name):
            snapshot.handle = text_of(positional.pop(0))
        elif kind == "client":
            snapshot.handle = self.handles.get(obj or "")

        if positional:
            snapshot.set_name(self.value_of(positional.pop(0)))
        if positional:
            if positional[0].type != "dictionary" or len(positional) > 1:
                raise UnsupportedShape("positional options are not a dict literal")
            snapshot.apply_options(self._dict_pairs(positional[0]))
        snapshot.apply_options(keywords)

        if kind == "bound":
            callee = text_of(call.child_by_field_name("function"))
            return snapshot, lambda s: self._render(callee, s)
        if kind == "namespace":
            return snapshot, lambda s: self._render(f"{obj}.{rules.PY_SNAPSHOT}", s)
        return snapshot, self._render_canonical

    # -- Applitools ----------------------------------------------------------

    def _build_applitools(
        self,
        call: tree_sitter.Node,
        obj: Optional[str],
        method: str,
    ) -> tuple[Snapshot, Callable[[Snapshot], str]]:
        snapshot = self.new_snapshot(call)
        positional, keywords = self._split_args(call)
        keywords = self._take_name(snapshot, keywords)
        snapshot.handle = self.handles.get(obj or "")
        normalised = rules.normalise_key(method)

        if normalised == "checkwindow":
            if positional:
                snapshot.set_name(self.value_of(positional[0]))
            if len(positional) > 1:
                raise UnsupportedShape("check_window() with positional match settings")
        elif normalised == "checkregion":
            if not positional or len(positional) > 2:
                raise UnsupportedShape("check_region() needs a selector and an optional name")
            region = self.value_of(positional[0])
            if region.kind != STRING:
                raise UnsupportedShape("check_region() target is not a CSS selector")
            snapshot.element = region
            if len(positional) == 2:
                snapshot.set_name(self.value_of(positional[1]))
        else:
            if len(positional) > 2:
                raise UnsupportedShape("check() with more than a name and settings")
            for arg in positional:
                chain = self._builder_chain(arg)
                if chain is not None:
                    snapshot.apply_builder(chain)
                elif arg.type == "dictionary":
                    snapshot.apply_options(self._dict_pairs(arg))
                elif arg.type in _STRING_TYPES:
                    snapshot.set_name(self.value_of(arg))
                else:
                    raise UnsupportedShape("check settings are not a Target builder")

        for key, value in keywords:
            if rules.normalise_key(key) == "tag":
                snapshot.set_name(value)
            elif rules.normalise_key(key) == "checksettings":
                chain = self._builder_chain_from_value(call, key)
                if chain is None:
                    raise UnsupportedShape(f"`{key}` is not a Target builder")
                snapshot.apply_builder(chain)
            else:
                snapshot.apply_option(key, value)
        return snapshot, self._render_canonical

    def _builder_chain_from_value(self, call: tree_sitter.Node, key: str) -> Optional[list[tuple[str, list[Value]]]]:
        for arg in self.args_of(call.child_by_field_name("arguments")):
            if arg.type == "keyword_argument" and text_of(arg.child_by_field_name("name")) == key:
                return self._builder_chain(arg.child_by_field_name("value"))
        return None

    def _builder_chain(self, node: tree_sitter.Node) -> Optional[list[tuple[str, list[Value]]]]:
        chain: list[tuple[str, list[Value]]] = []
        current = node
        while current.type == "call":
            fn = current.child_by_field_name("function")
            if fn is None or fn.type != "attribute":
                return None
            positional, keywords = self._split_args(current)
            if keywords:
                return None
            chain.append((text_of(fn.child_by_field_name("attribute")), [self.value_of(a) for a in positional]))
            current = fn.child_by_field_name("object")
        if current.type == "identifier" and text_of(current) == rules.BUILDER_ROOT and chain:
            chain.reverse()
            return chain
        return None

    # ------------------------------------------------------------------
    # Values and rendering
    # ------------------------------------------------------------------

    def value_of(self, node: tree_sitter.Node) -> Value:
        text = text_of(node)
        if node.type == "string":
            if any(c.type == "interpolation" for c in node.named_children):
                return Value(text)
            start = next((c for c in node.named_children if c.type == "string_start"), None)
            if start is not None and any(ch in text_of(start).lower() for ch in "bf"):
                return Value(text)
            literal = "".join(text_of(c) for c in node.named_children if c.type == "string_content")
            return Value(text, STRING, literal)
        if node.type in ("list", "tuple"):
            items = self.args_of(node)
            if any(i.type == "list_splat" for i in items):
                return Value(text)
            return Value(text, ARRAY, items=tuple(self.value_of(i) for i in items))
        if node.type == "true":
            return Value(text, TRUE)
        if node.type == "false":
            return Value(text, FALSE)
        return Value(text, OTHER)

    def _dict_pairs(self, node: tree_sitter.Node) -> list[tuple[str, Value]]:
        pairs: list[tuple[str, Value]] = []
        for child in self.args_of(node):
            if child.type != "pair":
                raise UnsupportedShape("options dict contains a ** expansion")
            key = self.value_of(child.child_by_field_name("key"))
            if key.kind != STRING:
                raise UnsupportedShape("options dict keys are not string literals")
            pairs.append((key.literal, self.value_of(child.child_by_field_name("value"))))
        return pairs

    def _render_options(self, snapshot: Snapshot) -> Optional[str]:
        entries: list[str] = []
        if snapshot.ignore:
            selectors = ", ".join(v.text for v in snapshot.ignore)
            entries.append(f'"ignoreDOM": {{"cssSelector": [{selectors}]}}')
        if snapshot.element is not None:
            entries.append(f'"element": {{"cssSelector": {snapshot.element.text}}}')
        return "{" + ", ".join(entries) + "}" if entries else None

    def _render(self, callee: str, snapshot: Snapshot) -> str:
        parts = [snapshot.handle or _DEFAULT_HANDLE, snapshot.name_or_default().text]
        options = self._render_options(snapshot)
        if options:
            parts.append(options)
        return f"{callee}({', '.join(parts)})"

    def _render_canonical(self, snapshot: Snapshot) -> str:
        self.needs_import = True
        return self._render(rules.PY_SNAPSHOT, snapshot)

"""JavaScript / TypeScript rewriter.

Recognised shapes, per source platform:

  imports   import ... from '<client>'; import '<client>';
            const x = require('<client>')
  Percy     percySnapshot(page, 'name', {..})   global or bound alias
            cy.percySnapshot('name', {..})      well-known object member
            percy.screenshot(driver, 'name')    module namespace member
  Applitools
            eyes.check('name', Target.window().fully())
            eyes.checkWindow('name')
            cy.eyesCheckWindow('name', {..})
            eyes.open(..) / eyes.close() / cy.eyesOpen(..) statements are removed
  Sauce     sauceVisualCheck('name', {..}), cy.sauceVisualCheck(..),
            browser.sauceVisualCheck(..)

Output is cy.smartuiSnapshot(name[, options]) under Cypress and
smartuiSnapshot(handle, name[, options]) elsewhere. A callee bound to an
import keeps its local name; the import is pointed at the SmartUI module
and, when the binding is the snapshot function, destructures the SmartUI
export under that name.
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
from visual_migrate.types import APPLITOOLS, CYPRESS, JAVASCRIPT, PLAYWRIGHT, STORYBOOK

logger = logging.getLogger(__name__)

_STRING_TYPES = frozenset({"string", "template_string"})
_NON_HANDLE_TYPES = _STRING_TYPES | {"object"}


class JavaScriptRewriter(SourceRewriter):
    language = JAVASCRIPT
    comment_types = frozenset({"comment"})
    statement_types = frozenset({
        "expression_statement", "lexical_declaration", "variable_declaration", "return_statement",
    })
    boundary_types = frozenset({"arrow_function", "function_expression", "class_body"})

    def __init__(self, platform: str, framework: str, file_path: Optional[str] = None):
        super().__init__(platform, framework, file_path)
        self.module_map = rules.JS_MODULES.get(platform, {})
        self.quote_char = "'"
        # Locals bound to a client module (default, namespace or require)
        self.module_bindings: set[str] = set()
        # Locals bound to the client's snapshot function
        self.function_bindings: set[str] = set()
        self.class_bindings: set[str] = set()
        # Every name bound by any import/require in the file
        self.bound_names: set[str] = set()
        # Identifiers called as plain functions anywhere in the file
        self.direct_callees: set[str] = set()
        self.clients: set[str] = set(rules.CLIENT_NAMES.get(platform, ()))
        self.handles: dict[str, str] = {}
        self.import_anchors: list[tree_sitter.Node] = []
        self.uses_require = False
        self.needs_import = False

    def quote(self, value: str) -> str:
        q = self.quote_char
        return q + value.replace("\\", "\\\\").replace(q, "\\" + q) + q

    # ------------------------------------------------------------------
    # Visit
    # ------------------------------------------------------------------

    def visit(self, root: tree_sitter.Node) -> None:
        for call in descendants(root, "call_expression"):
            fn = call.child_by_field_name("function")
            if fn is not None and fn.type == "identifier":
                self.direct_callees.add(text_of(fn))
        self._visit_imports(root)
        self._visit_requires(root)
        self._collect_clients(root)
        self._walk(root)
        if self.needs_import:
            self._ensure_import(root)

    def _walk(self, node: tree_sitter.Node) -> None:
        if node.type == "expression_statement" and self._remove_lifecycle(node):
            return
        if node.type == "call_expression" and self._visit_call(node):
            return
        for child in node.children:
            self._walk(child)

    # -- imports ---------------------------------------------------------

    def _rewrite_specifier(self, string_node: tree_sitter.Node) -> bool:
        raw = text_of(string_node)
        destination = self.module_map.get(raw[1:-1])
        if destination is None:
            return False
        if not self.import_anchors:
            self.quote_char = raw[0] if raw[0] in "'\"" else "'"
        self.replace(string_node, raw[0] + destination + raw[-1])
        return True

    def _visit_imports(self, root: tree_sitter.Node) -> None:
        for node in root.named_children:
            if node.type != "import_statement":
                continue
            source = node.child_by_field_name("source")
            platform_import = source is not None and self._rewrite_specifier(source)
            if platform_import:
                self.import_anchors.append(node)
            for clause in node.named_children:
                if clause.type == "import_clause":
                    self._bind_clause(clause, platform_import)

    def _bind_clause(self, clause: tree_sitter.Node, platform_import: bool) -> None:
        for child in clause.named_children:
            if child.type == "identifier":
                if len(clause.named_children) == 1:
                    self._bind_default(child, platform_import, "{{ {} as {} }}")
                else:
                    self._bind_module(text_of(child), platform_import)
            elif child.type == "namespace_import":
                for ident in child.named_children:
                    if ident.type == "identifier":
                        self._bind_module(text_of(ident), platform_import)
            elif child.type == "named_imports":
                for spec in child.named_children:
                    if spec.type != "import_specifier":
                        continue
                    name = spec.child_by_field_name("name")
                    alias = spec.child_by_field_name("alias")
                    if name is None:
                        continue
                    local = text_of(alias or name)
                    self._bind_named(
                        text_of(name), local, platform_import, name, None if alias else "{} as {}",
                    )

    def _bind_module(self, local: str, platform_import: bool) -> None:
        self.bound_names.add(local)
        if platform_import:
            self.module_bindings.add(local)

    def _bind_default(self, node: tree_sitter.Node, platform_import: bool, template: str) -> None:
        """A default import or plain require of a client module.

        Called directly it is the snapshot function, and SmartUI only
        exports that by name, so the binding is rewritten to destructure
        it. Otherwise it is a namespace.
        """
        local = text_of(node)
        if not platform_import or self.platform == APPLITOOLS or local not in self.direct_callees:
            self._bind_module(local, platform_import)
            return
        self.bound_names.add(local)
        self.function_bindings.add(local)
        self.replace(node, template.format(rules.JS_SNAPSHOT, local))

    def _bind_named(
        self,
        imported: str,
        local: str,
        platform_import: bool,
        name_node: Optional[tree_sitter.Node] = None,
        shorthand: Optional[str] = None,
    ) -> None:
        """Record a named binding.

        An imported snapshot function is re-imported as the SmartUI export
        under its old local name: { percySnapshot } becomes
        { smartuiSnapshot as percySnapshot }, so call sites keep working.
        """
        self.bound_names.add(local)
        if not platform_import:
            return
        if imported in rules.JS_SNAPSHOT_FUNCTIONS.get(self.platform, ()):
            self.function_bindings.add(local)
            if name_node is not None:
                if shorthand is None:
                    self.replace(name_node, rules.JS_SNAPSHOT)
                elif local != rules.JS_SNAPSHOT:
                    self.replace(name_node, shorthand.format(rules.JS_SNAPSHOT, local))
        elif imported in rules.CLIENT_CLASSES.get(self.platform, ()):
            self.class_bindings.add(local)

    def _visit_requires(self, root: tree_sitter.Node) -> None:
        for call in descendants(root, "call_expression"):
            fn = call.child_by_field_name("function")
            if fn is None or fn.type != "identifier" or text_of(fn) != "require":
                continue
            args = self.args_of(call.child_by_field_name("arguments"))
            if len(args) != 1 or args[0].type != "string":
                continue
            platform_require = self._rewrite_specifier(args[0])
            if platform_require:
                self.uses_require = True
            declarator = call.parent
            if declarator is None or declarator.type != "variable_declarator":
                if platform_require:
                    self._anchor_statement(call)
                continue
            if platform_require:
                self._anchor_statement(declarator)
            self._bind_pattern(declarator.child_by_field_name("name"), platform_require)

    def _anchor_statement(self, node: tree_sitter.Node) -> None:
        current = node
        while current.parent is not None and current.parent.type != "program":
            current = current.parent
        self.import_anchors.append(current)

    def _bind_pattern(self, pattern: Optional[tree_sitter.Node], platform_require: bool) -> None:
        if pattern is None:
            return
        if pattern.type == "identifier":
            self._bind_default(pattern, platform_require, "{{ {}: {} }}")
            return
        if pattern.type != "object_pattern":
            return
        for child in pattern.named_children:
            if child.type == "shorthand_property_identifier_pattern":
                name = text_of(child)
                self._bind_named(name, name, platform_require, child, "{}: {}")
            elif child.type == "pair_pattern":
                key = child.child_by_field_name("key")
                value = child.child_by_field_name("value")
                if key is not None and value is not None and value.type == "identifier":
                    self._bind_named(text_of(key), text_of(value), platform_require, key)

    # -- client objects --------------------------------------------------

    def _collect_clients(self, root: tree_sitter.Node) -> None:
        classes = self.class_bindings | rules.CLIENT_CLASSES.get(self.platform, frozenset())
        for node in descendants(root, "new_expression"):
            ctor = node.child_by_field_name("constructor")
            if ctor is None or text_of(ctor) not in classes:
                continue
            parent = node.parent
            if parent is not None and parent.type == "variable_declarator":
                target = parent.child_by_field_name("name")
            elif parent is not None and parent.type == "assignment_expression":
                target = parent.child_by_field_name("left")
            else:
                continue
            if target is not None:
                self.clients.add(text_of(target))

        if self.platform != APPLITOOLS:
            return
        for call in descendants(root, "call_expression"):
            fn = call.child_by_field_name("function")
            if fn is None or fn.type != "member_expression":
                continue
            parts = member_parts(fn, "object", "property")
            if parts is None or parts[1] != "open" or parts[0] not in self.clients:
                continue
            args = self.args_of(call.child_by_field_name("arguments"))
            if args and args[0].type not in _NON_HANDLE_TYPES:
                self.handles[parts[0]] = text_of(args[0])

    # -- lifecycle statements --------------------------------------------

    def _remove_lifecycle(self, statement: tree_sitter.Node) -> bool:
        if self.platform != APPLITOOLS:
            return False
        expr = next(iter(self.args_of(statement)), None)
        if expr is not None and expr.type == "await_expression":
            expr = next(iter(self.args_of(expr)), None)
        if expr is None or expr.type != "call_expression":
            return False
        fn = expr.child_by_field_name("function")
        parts = member_parts(fn, "object", "property") if fn is not None and fn.type == "member_expression" else None
        if parts is None:
            return False
        obj, prop = parts
        lifecycle = (
            (obj in self.clients and prop in rules.CLIENT_LIFECYCLE_METHODS[APPLITOOLS])
            or (obj == "cy" and prop in rules.CYPRESS_LIFECYCLE_COMMANDS)
        )
        if lifecycle:
            self.remove_statement(statement)
        return lifecycle

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def _visit_call(self, call: tree_sitter.Node) -> bool:
        fn = call.child_by_field_name("function")
        arguments = call.child_by_field_name("arguments")
        if fn is None or arguments is None or arguments.type != "arguments":
            return False

        target = self._match_target(fn)
        if target is None:
            return False
        kind, obj, method = target
        args = self.args_of(arguments)

        if self.platform == APPLITOOLS:
            self.rewrite(call, lambda: self._build_applitools(call, kind, obj, method, args))
        else:
            self.rewrite(call, lambda: self._build_function_style(call, kind, obj, args))
        return True

    def _match_target(self, fn: tree_sitter.Node) -> Optional[tuple[str, Optional[str], str]]:
        """Classify the callee as (kind, object, method) or None.

        kinds: "bound" (import alias), "global", "member" (well-known
        object), "namespace" (module binding), "client" (client object),
        "cypress" (Applitools Cypress command).
        """
        functions = rules.JS_SNAPSHOT_FUNCTIONS.get(self.platform, frozenset())
        if fn.type == "identifier":
            name = text_of(fn)
            if name in self.function_bindings:
                return "bound", None, name
            if name in functions and name not in self.bound_names:
                return "global", None, name
            return None

        parts = member_parts(fn, "object", "property") if fn.type == "member_expression" else None
        if parts is None:
            return None
        obj, prop = parts
        if self.platform == APPLITOOLS:
            if obj == "cy" and prop in rules.CYPRESS_CHECK_COMMANDS:
                return "cypress", obj, prop
            if obj in self.clients and prop in rules.CLIENT_SNAPSHOT_METHODS[APPLITOOLS]:
                return "client", obj, prop
            return None
        if prop in functions and obj in rules.JS_WELL_KNOWN_OBJECTS:
            return "member", obj, prop
        if obj in self.module_bindings and prop in rules.JS_NAMESPACE_METHODS.get(self.platform, ()):
            return "namespace", obj, prop
        if obj in self.clients and prop in rules.CLIENT_SNAPSHOT_METHODS.get(self.platform, ()):
            return "client", obj, prop
        return None

    # -- Percy / Sauce: f([handle,] name, options) ------------------------

    def _build_function_style(
        self,
        call: tree_sitter.Node,
        kind: str,
        obj: Optional[str],
        args: list[tree_sitter.Node],
    ) -> tuple[Snapshot, Callable[[Snapshot], str]]:
        _reject_spread(args)
        snapshot = self.new_snapshot(call)
        rest = list(args)

        if kind == "member":
            snapshot.handle = None if obj == "cy" else obj
        elif len(rest) >= 2 and rest[0].type not in _NON_HANDLE_TYPES:
            snapshot.handle = text_of(rest.pop(0))

        self._read_name_and_options(snapshot, rest)

        if kind == "member" and obj == "cy":
            return snapshot, lambda s: self._render("cy." + rules.JS_SNAPSHOT, s, with_handle=False)
        if kind == "bound":
            callee = text_of(call.child_by_field_name("function"))
            return snapshot, lambda s: self._render(callee, s, with_handle=s.handle is not None)
        if kind == "namespace":
            return snapshot, lambda s: self._render(f"{obj}.{rules.JS_SNAPSHOT}", s, with_handle=s.handle is not None)
        return snapshot, self._render_canonical

    def _read_name_and_options(self, snapshot: Snapshot, rest: list[tree_sitter.Node]) -> None:
        if rest and rest[0].type == "object":
            options, rest = rest[0], rest[1:]
            if rest:
                raise UnsupportedShape("unexpected arguments after the options object")
        else:
            if rest:
                snapshot.set_name(self.value_of(rest[0]))
            if len(rest) > 2:
                raise UnsupportedShape(f"{len(rest)} arguments where at most a name and options were expected")
            options = rest[1] if len(rest) == 2 else None
        if options is None:
            return
        if options.type != "object":
            raise UnsupportedShape("options are not an object literal")
        snapshot.apply_options(self._object_pairs(options))

    # -- Applitools --------------------------------------------------------

    def _build_applitools(
        self,
        call: tree_sitter.Node,
        kind: str,
        obj: Optional[str],
        method: str,
        args: list[tree_sitter.Node],
    ) -> tuple[Snapshot, Callable[[Snapshot], str]]:
        _reject_spread(args)
        snapshot = self.new_snapshot(call)

        if kind == "cypress":
            self._read_name_and_options(snapshot, list(args))
            return snapshot, lambda s: self._render("cy." + rules.JS_SNAPSHOT, s, with_handle=False)

        snapshot.handle = self.handles.get(obj or "")
        if method == "checkWindow":
            if len(args) > 1:
                raise UnsupportedShape("checkWindow() with positional match settings")
            if args:
                snapshot.set_name(self.value_of(args[0]))
        elif method == "checkRegion":
            if not args or len(args) > 2:
                raise UnsupportedShape("checkRegion() needs a selector and an optional name")
            region = self.value_of(args[0])
            if region.kind != STRING:
                raise UnsupportedShape("checkRegion() target is not a CSS selector")
            snapshot.element = region
            if len(args) == 2:
                snapshot.set_name(self.value_of(args[1]))
        else:
            self._read_check_args(snapshot, args)

        return snapshot, self._render_canonical

    def _read_check_args(self, snapshot: Snapshot, args: list[tree_sitter.Node]) -> None:
        if len(args) > 2:
            raise UnsupportedShape("check() with more than a name and settings")
        for arg in args:
            chain = self._builder_chain(arg)
            if chain is not None:
                snapshot.apply_builder(chain)
            elif arg.type == "object":
                snapshot.apply_options(self._object_pairs(arg))
            elif arg.type in _STRING_TYPES or (snapshot.name is None and arg is args[0]):
                snapshot.set_name(self.value_of(arg))
            else:
                raise UnsupportedShape("check settings are not a Target builder or object literal")

    def _builder_chain(self, node: tree_sitter.Node) -> Optional[list[tuple[str, list[Value]]]]:
        chain: list[tuple[str, list[Value]]] = []
        current = node
        while current.type == "call_expression":
            fn = current.child_by_field_name("function")
            if fn is None or fn.type != "member_expression":
                return None
            prop = fn.child_by_field_name("property")
            args = self.args_of(current.child_by_field_name("arguments"))
            chain.append((text_of(prop), [self.value_of(a) for a in args]))
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
            return Value(text, STRING, text[1:-1])
        if node.type == "template_string":
            if any(c.type == "template_substitution" for c in node.named_children):
                return Value(text)
            return Value(text, STRING, text[1:-1])
        if node.type == "array":
            items = self.args_of(node)
            if any(i.type == "spread_element" for i in items):
                return Value(text)
            return Value(text, ARRAY, items=tuple(self.value_of(i) for i in items))
        if node.type == "true":
            return Value(text, TRUE)
        if node.type == "false":
            return Value(text, FALSE)
        return Value(text, OTHER)

    def _object_pairs(self, node: tree_sitter.Node) -> list[tuple[str, Value]]:
        pairs: list[tuple[str, Value]] = []
        for child in self.args_of(node):
            if child.type == "pair":
                key = child.child_by_field_name("key")
                value = child.child_by_field_name("value")
                if key is None or value is None or key.type == "computed_property_name":
                    raise UnsupportedShape("computed option keys")
                key_text = text_of(key)
                if key.type == "string":
                    key_text = key_text[1:-1]
                pairs.append((key_text, self.value_of(value)))
            elif child.type == "shorthand_property_identifier":
                pairs.append((text_of(child), Value(text_of(child))))
            else:
                raise UnsupportedShape("options contain spreads or methods")
        return pairs

    def _render_options(self, snapshot: Snapshot) -> Optional[str]:
        entries: list[str] = []
        if snapshot.ignore:
            selectors = ", ".join(v.text for v in snapshot.ignore)
            entries.append(f"ignoreDOM: {{ cssSelector: [{selectors}] }}")
        if snapshot.element is not None:
            entries.append(f"element: {{ cssSelector: {snapshot.element.text} }}")
        return "{ " + ", ".join(entries) + " }" if entries else None

    def _render(self, callee: str, snapshot: Snapshot, with_handle: bool) -> str:
        parts: list[str] = []
        if with_handle and snapshot.handle:
            parts.append(snapshot.handle)
        parts.append(snapshot.name_or_default().text)
        options = self._render_options(snapshot)
        if options:
            parts.append(options)
        return f"{callee}({', '.join(parts)})"

    def _render_canonical(self, snapshot: Snapshot) -> str:
        if self.framework == CYPRESS:
            return self._render("cy." + rules.JS_SNAPSHOT, snapshot, with_handle=False)
        if snapshot.handle is None:
            snapshot.handle = _default_handle(self.framework)
        self.needs_import = True
        return self._render(rules.JS_SNAPSHOT, snapshot, with_handle=True)

    def _ensure_import(self, root: tree_sitter.Node) -> None:
        if rules.JS_SNAPSHOT in self.bound_names:
            return
        module = self.quote(rules.JS_MODULE_BY_FRAMEWORK.get(self.framework, rules.SMARTUI_SELENIUM))
        has_imports = any(n.type == "import_statement" for n in root.named_children)
        if self.uses_require or (not has_imports and "require(" in self.source.decode("utf-8")):
            line = f"const {{ {rules.JS_SNAPSHOT} }} = require({module});"
        else:
            line = f"import {{ {rules.JS_SNAPSHOT} }} from {module};"

        if self.import_anchors:
            self.insert_line_after(self.import_anchors[-1], line)
            return
        imports = [n for n in root.named_children if n.type == "import_statement"]
        if imports:
            self.insert_line_after(imports[-1], line)
        else:
            self.insert_line_at_top(line)


def _reject_spread(args: list[tree_sitter.Node]) -> None:
    if any(a.type == "spread_element" for a in args):
        raise UnsupportedShape("spread arguments")


def _default_handle(framework: str) -> str:
    if framework in (PLAYWRIGHT, STORYBOOK):
        return "page"
    return "driver"

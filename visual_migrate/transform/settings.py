"""Language-neutral snapshot model.

Each rewriter turns a recognised source call into a Snapshot: the name,
the element to capture, the regions to ignore and the regions whose
layout has to be emulated. Values keep the source text of their
expression, so whatever a rewriter emits is already valid in the file's
own language; only synthesised literals go through the dialect's quote
function.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from visual_migrate.transform import rules
from visual_migrate.types import TransformationWarning

STRING = "string"
ARRAY = "array"
TRUE = "true"
FALSE = "false"
OTHER = "other"


@dataclass(frozen=True)
class Value:
    """A source expression with just enough shape to map options."""

    text: str
    kind: str = OTHER
    literal: Optional[str] = None
    items: tuple["Value", ...] = ()


class UnsupportedShape(Exception):
    """A recognised call whose arguments cannot be restructured safely."""


@dataclass
class Snapshot:
    platform: str
    file_label: str
    quote: Callable[[str], str]
    line: Optional[int] = None
    name: Optional[Value] = None
    handle: Optional[str] = None
    element: Optional[Value] = None
    ignore: list[Value] = field(default_factory=list)
    layout: list[Value] = field(default_factory=list)
    warnings: list[TransformationWarning] = field(default_factory=list)

    # -- construction helpers ------------------------------------------------

    def literal(self, value: str) -> Value:
        return Value(self.quote(value), STRING, value)

    def set_name(self, value: Value) -> None:
        if self.name is None:
            self.name = value

    def name_or_default(self) -> Value:
        return self.name or self.literal(rules.DEFAULT_SNAPSHOT_NAME)

    def drop(self, field_name: str, details: Optional[str] = None) -> None:
        self.warnings.append(TransformationWarning(
            message=(
                f"Option `{field_name}` in {self.file_label} has no SmartUI "
                "equivalent and was removed from the snapshot call."
            ),
            details=details or rules.UNKNOWN_DETAILS,
            file=self.file_label,
            line=self.line,
        ))

    def _selectors(self, value: Value) -> list[Value]:
        if value.kind in (STRING, OTHER):
            return [value]
        if value.kind == ARRAY:
            return list(value.items)
        raise UnsupportedShape(f"`{value.text}` is not a selector list")

    def _add_ignore(self, values: list[Value]) -> None:
        seen = {v.text for v in self.ignore}
        for value in values:
            if value.text not in seen:
                self.ignore.append(value)
                seen.add(value.text)

    def _whole_layout(self) -> None:
        self.layout.append(self.element or self.literal("body"))

    # -- option tables -------------------------------------------------------

    def apply_option(self, key: str, value: Value) -> None:
        rule = rules.OPTION_TABLES[self.platform].get(rules.normalise_key(key))
        if rule is None:
            self.drop(key)
            return

        if rule.action == rules.NAME:
            self.set_name(value)
        elif rule.action == rules.ELEMENT:
            if value.kind == ARRAY:
                raise UnsupportedShape(f"`{key}` must be a single selector")
            self.element = value
        elif rule.action == rules.IGNORE:
            if value.kind == OTHER:
                raise UnsupportedShape(f"`{key}` is not a literal selector list")
            self._add_ignore(self._selectors(value))
        elif rule.action == rules.LAYOUT:
            if value.kind == TRUE:
                self._whole_layout()
            elif value.kind in (STRING, ARRAY):
                self.layout.extend(self._selectors(value))
            elif value.kind != FALSE:
                raise UnsupportedShape(f"`{key}` is not a literal selector list")
        elif rule.action == rules.MATCH_LEVEL:
            if "layout" in (value.literal or value.text).lower():
                self._whole_layout()
            else:
                self.drop(key, rule.details)
        elif rule.action == rules.DROP:
            self.drop(key, rule.details)
        # IMPLICIT: SmartUI behaves this way by default

    def apply_options(self, pairs: list[tuple[str, Value]]) -> None:
        for key, value in pairs:
            self.apply_option(key, value)

    # -- Applitools check settings builder ----------------------------------

    def apply_builder(self, chain: list[tuple[str, list[Value]]]) -> None:
        """Read Target.window()/region(..) plus its modifiers."""
        for method, args in chain:
            key = rules.normalise_key(method)
            if key in rules.BUILDER_WINDOW:
                continue
            if key in rules.BUILDER_REGION:
                if len(args) != 1 or args[0].kind != STRING:
                    raise UnsupportedShape(f"`{method}` target is not a CSS selector")
                self.element = args[0]
            elif key in rules.BUILDER_IGNORE:
                for arg in args:
                    if arg.kind not in (STRING, ARRAY):
                        raise UnsupportedShape(f"`{method}` region is not a CSS selector")
                    self._add_ignore(self._selectors(arg))
            elif key in rules.BUILDER_LAYOUT:
                if not args:
                    self._whole_layout()
                for arg in args:
                    if arg.kind not in (STRING, ARRAY):
                        raise UnsupportedShape(f"`{method}` region is not a CSS selector")
                    self.layout.extend(self._selectors(arg))
            elif key in rules.BUILDER_NAME:
                if len(args) != 1:
                    raise UnsupportedShape(f"`{method}` needs exactly one argument")
                self.name = args[0]
            elif key in rules.BUILDER_MODES:
                self.drop(method, rules.MATCH_LEVEL_DETAILS)
            elif key == "fully":
                if not args or args[0].kind != FALSE:
                    self.drop(method, rules.FULLY_DETAILS)
            elif key == "matchlevel" and len(args) == 1:
                self.apply_option(method, args[0])
            else:
                self.drop(method)

    # -- layout emulation ----------------------------------------------------

    def descendants(self, value: Value) -> Value:
        """A selector for everything inside value."""
        if value.kind == STRING and value.literal is not None:
            return self.literal(f"{value.literal} *")
        return Value(f"{value.text} + {self.quote(' *')}")

    def layout_selectors(self) -> list[Value]:
        """Layout regions to emulate; their contents join the ignore list."""
        unique: dict[str, Value] = {}
        for value in self.layout:
            unique.setdefault(value.text, value)
        self._add_ignore([self.descendants(v) for v in unique.values()])
        return list(unique.values())

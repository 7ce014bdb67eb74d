"""Text edits against the original source bytes.

Rewriters never mutate a syntax tree. They describe replacements as
(start, end, text) spans over the original UTF-8 bytes, and apply_edits
produces the new source in one pass. Everything outside an edit is
copied verbatim, so formatting and comments survive untouched.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Edit:
    start: int
    end: int
    text: str

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end


class OverlappingEditError(ValueError):
    """Two edits touch the same bytes."""


def apply_edits(source: bytes, edits: list[Edit]) -> bytes:
    """Apply non-overlapping edits; insertions at one offset keep their order."""
    ordered = sorted(enumerate(edits), key=lambda pair: (pair[1].start, pair[1].end, pair[0]))

    out: list[bytes] = []
    cursor = 0
    for _index, edit in ordered:
        if edit.start < cursor or edit.end < edit.start:
            raise OverlappingEditError(
                f"Edit [{edit.start}, {edit.end}) overlaps an earlier edit ending at {cursor}"
            )
        out.append(source[cursor:edit.start])
        out.append(edit.text.encode("utf-8"))
        cursor = edit.end
    out.append(source[cursor:])
    return b"".join(out)


def line_start(source: bytes, offset: int) -> int:
    return source.rfind(b"\n", 0, offset) + 1


def line_end(source: bytes, offset: int) -> int:
    end = source.find(b"\n", offset)
    return len(source) if end == -1 else end


def indentation_at(source: bytes, offset: int) -> str:
    """Whitespace before offset on its line, or "" if code precedes it."""
    prefix = source[line_start(source, offset):offset]
    return prefix.decode("utf-8") if not prefix.strip() else ""


def removal_span(source: bytes, start: int, end: int) -> tuple[int, int]:
    """Widen [start, end) to whole lines when nothing else shares them."""
    begin = line_start(source, start)
    finish = line_end(source, end)
    if source[begin:start].strip() or source[end:finish].strip():
        return start, end
    if finish < len(source):
        finish += 1
    return begin, finish

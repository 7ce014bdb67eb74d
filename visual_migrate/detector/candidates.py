"""Helpers shared by every anchor detector.

A detector gathers raw candidates; candidates naming the same platform
collapse into one, and more than one distinct platform is ambiguous.
"""

from dataclasses import replace

from visual_migrate.errors import MultiplePlatformsDetectedError
from visual_migrate.types import AnchorResult


def merge_candidates(candidates: list[AnchorResult]) -> list[AnchorResult]:
    """Collapse candidates per platform, keeping first-seen order.

    The first candidate carrying a framework hint wins. When candidates
    for one platform disagree on the framework, the hints are dropped so
    the framework is classified from content instead.
    """
    groups: dict[str, list[AnchorResult]] = {}
    for candidate in candidates:
        if not candidate.is_unknown:
            groups.setdefault(candidate.platform, []).append(candidate)

    merged: list[AnchorResult] = []
    for group in groups.values():
        magic = tuple(dict.fromkeys(s for c in group for s in c.magic_strings))
        hinted = [c for c in group if c.framework]
        frameworks = {c.framework for c in hinted}
        if len(frameworks) > 1:
            languages = {c.language for c in hinted}
            merged.append(replace(
                hinted[0],
                framework=None,
                language=languages.pop() if len(languages) == 1 else None,
                magic_strings=magic,
            ))
        else:
            merged.append(replace(hinted[0] if hinted else group[0], magic_strings=magic))
    return merged


def pick_anchor(candidates: list[AnchorResult]) -> AnchorResult:
    """Return the single anchor, UNKNOWN when empty, or raise when ambiguous."""
    merged = merge_candidates(candidates)
    if not merged:
        return AnchorResult()
    if len(merged) > 1:
        raise MultiplePlatformsDetectedError(merged)
    return merged[0]

"""
Tag definitions.

A tag name is a slash path whose first segment is its area, e.g.
``/Expressive/Loud`` (area ``Expressive``) or ``/Sans/Geometric``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

DEFAULT_LOWEST_SCORE = 0.0
DEFAULT_HIGHEST_SCORE = 100.0

# Areas that name a classification; the leaf qualifies it ("Geometric Sans").
CLASSIFICATION_AREAS = {"Sans", "Serif", "Slab", "Script", "Monospace"}

# Areas whose leaf reads on its own ("Loud", "Easy Reading").
LEAF_ONLY_AREAS = {"Expressive", "Purpose", "Theme", "Seasonal", "Quality"}


def split_tag_path(name: str) -> List[str]:
    return [segment.strip() for segment in name.split("/") if segment.strip()]


@dataclass(frozen=True)
class Tag:
    name: str
    description: str = ""
    short_description: str = ""
    related: Tuple[str, ...] = field(default_factory=tuple)
    lowest_score: float = DEFAULT_LOWEST_SCORE
    highest_score: float = DEFAULT_HIGHEST_SCORE

    @property
    def segments(self) -> List[str]:
        return split_tag_path(self.name)

    @property
    def area(self) -> str:
        segments = self.segments
        return segments[0] if segments else ""

    @property
    def friendly_name(self) -> str:
        """Human readable name derived from the path segments."""
        segments = self.segments
        if not segments:
            return self.name
        if len(segments) == 1:
            return segments[0]
        area, rest = segments[0], segments[1:]
        if area in CLASSIFICATION_AREAS:
            return " ".join(rest + [area])
        if area in LEAF_ONLY_AREAS:
            return rest[-1]
        return " / ".join(segments)

    def in_range(self, score: float) -> bool:
        return self.lowest_score <= score <= self.highest_score

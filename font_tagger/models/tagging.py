"""
Taggings: how strongly a tag applies to a font.

Two variants share the ``Tagging`` union:

- StaticTagging: one score for the whole font.
- VariableTagging: scores keyed by design-space location, for variable fonts.

Taggings compare by identity; ``Font.remove_tagging`` relies on that.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from statistics import mean
from typing import TYPE_CHECKING, Iterable, List, Mapping, Optional, Tuple, Union

from .location import Location
from .tag import Tag

if TYPE_CHECKING:
    from .font import Font


@dataclass(eq=False)
class StaticTagging:
    font: "Font"
    tag: Tag
    score: float

    def __post_init__(self) -> None:
        self.score = float(self.score)

    @property
    def tag_name(self) -> str:
        return self.tag.name

    def to_csv_lines(self) -> List[str]:
        from ..csv_codec import format_tagging_lines

        return format_tagging_lines(self)

    def __repr__(self) -> str:
        return f"StaticTagging({self.font.name!r}, {self.tag.name!r}, {self.score:g})"


@dataclass(eq=False)
class VariableTagging:
    font: "Font"
    tag: Tag
    scores: List[Tuple[Location, float]] = field(default_factory=list)

    @classmethod
    def from_pairs(
        cls,
        font: "Font",
        tag: Tag,
        pairs: Iterable[Tuple[Mapping[str, float], float]],
    ) -> "VariableTagging":
        tagging = cls(font, tag)
        for location, score in pairs:
            tagging.set_score(location, score)
        return tagging

    @property
    def tag_name(self) -> str:
        return self.tag.name

    @property
    def locations(self) -> List[Location]:
        return [location for location, _ in self.scores]

    def score_at(self, location: Mapping[str, float]) -> Optional[float]:
        """Score at exactly ``location``, or None when no entry matches."""
        wanted = location if isinstance(location, Location) else Location(location)
        for entry_location, score in self.scores:
            if entry_location == wanted:
                return score
        return None

    def set_score(self, location: Mapping[str, float], score: float) -> None:
        """Set the score at ``location``, replacing an existing entry in place."""
        loc = location if isinstance(location, Location) else Location(location)
        for index, (entry_location, _) in enumerate(self.scores):
            if entry_location == loc:
                self.scores[index] = (entry_location, float(score))
                return
        self.scores.append((loc, float(score)))

    @property
    def score(self) -> Optional[float]:
        """
        Mean score across all locations.

        Discouraged: a single number hides how the tag varies across the
        design space. Prefer ``score_at``.
        """
        if not self.scores:
            return None
        return mean(score for _, score in self.scores)

    def to_csv_lines(self) -> List[str]:
        from ..csv_codec import format_tagging_lines

        return format_tagging_lines(self)

    def __repr__(self) -> str:
        return (
            f"VariableTagging({self.font.name!r}, {self.tag.name!r}, "
            f"{len(self.scores)} location(s))"
        )


Tagging = Union[StaticTagging, VariableTagging]

"""
Session store for taggings.

``TaggingStore`` wraps the fonts of a built ``Registries`` and is the only
mutation path for taggings during a session. Unknown family, tag or axis
references are logged and skipped rather than raised, so a bulk import
never stops half way.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .csv_codec import TaggingRow, export_taggings, parse_tagging_rows
from .errors import UnknownReferenceError
from .models import Font, StaticTagging, Tag, VariableTagging
from .models.font import TaggingListener
from .models.tagging import Tagging
from .registry import Registries

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    added: int = 0
    skipped: int = 0
    messages: List[str] = field(default_factory=list)

    def skip(self, message: str) -> None:
        logger.warning(message)
        self.messages.append(message)
        self.skipped += 1


class TaggingStore:
    """All taggings of a session, attached to the fonts of ``registries``."""

    def __init__(self, registries: Registries):
        if not registries.tags.frozen:
            raise RuntimeError("TaggingStore needs built registries; call RegistryBuilder.build()")
        self.registries = registries
        self._listeners: List[TaggingListener] = []
        for font in registries.fonts:
            font.subscribe(self._forward)

    def _forward(self, event: str, tagging: Tagging) -> None:
        for listener in list(self._listeners):
            listener(event, tagging)

    def subscribe(self, listener: TaggingListener) -> None:
        """Call ``listener(event, tagging)`` after every add or remove."""
        self._listeners.append(listener)

    @property
    def fonts(self) -> List[Font]:
        return list(self.registries.fonts)

    def _resolve(self, family_name: str, tag_name: str) -> Optional[Tuple[Font, Tag]]:
        try:
            font = self.registries.fonts.require(family_name)
            tag = self.registries.tags.require(tag_name)
        except UnknownReferenceError as exc:
            logger.warning("%s; skipping tagging %s for %s", exc, tag_name, family_name)
            return None
        return font, tag

    def add(
        self,
        tag_name: str,
        family_name: str,
        score: Optional[float] = None,
        scores: Optional[List[Tuple[Dict[str, float], float]]] = None,
    ) -> bool:
        """
        Add a tagging by name.

        Pass ``score`` for a static tagging or ``scores`` (location, score)
        pairs for a variable one. An empty ``scores`` list, or an empty
        location in it, is refused like any other invalid add.

        Returns:
            True if a tagging was added
        """
        if (score is None) == (scores is None):
            raise ValueError("Pass exactly one of score or scores")
        resolved = self._resolve(family_name, tag_name)
        if resolved is None:
            return False
        font, tag = resolved
        if scores is not None:
            if not scores or any(not location for location, _ in scores):
                logger.warning(
                    "Variable tagging %s for %s needs at least one non-empty location; skipping",
                    tag_name,
                    family_name,
                )
                return False
            return font.add_tagging(VariableTagging.from_pairs(font, tag, scores))
        return font.add_tagging(StaticTagging(font, tag, score))

    def add_tagging(self, tagging: Tagging) -> bool:
        font = self.registries.fonts.get(tagging.font.name)
        if font is not tagging.font:
            logger.warning("Family %s is not part of this store", tagging.font.name)
            return False
        if tagging.tag.name not in self.registries.tags:
            logger.warning("Tag not found: %s", tagging.tag.name)
            return False
        return font.add_tagging(tagging)

    def remove_tagging(self, tagging: Tagging) -> bool:
        return tagging.font.remove_tagging(tagging)

    def all_taggings(self) -> Tuple[Tagging, ...]:
        """Snapshot of every tagging, fonts in load order."""
        snapshot: List[Tagging] = []
        for font in self.registries.fonts:
            snapshot.extend(font.taggings)
        return tuple(snapshot)

    def categories(self) -> List[str]:
        """Distinct tag names that have at least one tagging."""
        return sorted({t.tag.name for t in self.all_taggings()})

    def __len__(self) -> int:
        return len(self.all_taggings())

    # ------------------------------------------------------------------------
    # CSV import / export
    # ------------------------------------------------------------------------

    def _import_row(self, row: TaggingRow, result: ImportResult) -> None:
        resolved = self._resolve(row.family, row.tag_name)
        if resolved is None:
            result.skipped += 1
            result.messages.append(
                f"line {row.line_number}: unknown family or tag ({row.family}, {row.tag_name})"
            )
            return
        font, tag = resolved
        existing = font.tagging(tag.name)

        if row.location is None:
            if existing is None:
                font.add_tagging(StaticTagging(font, tag, row.score))
                result.added += 1
            elif isinstance(existing, StaticTagging) and existing.score == row.score:
                logger.debug("line %d: %s already tagged %s", row.line_number, font.name, tag.name)
            else:
                result.skip(
                    f"line {row.line_number}: {font.name} already has a different "
                    f"tagging for {tag.name}"
                )
            return

        for axis_tag in row.location:
            try:
                font.axis(axis_tag)
            except UnknownReferenceError as exc:
                result.skip(f"line {row.line_number}: {exc}")
                return
        if existing is None:
            font.add_tagging(VariableTagging.from_pairs(font, tag, [(row.location, row.score)]))
            result.added += 1
        elif isinstance(existing, VariableTagging):
            existing.set_score(row.location, row.score)
            result.added += 1
        else:
            result.skip(
                f"line {row.line_number}: {font.name} has a static tagging for "
                f"{tag.name}; variable row ignored"
            )

    def import_csv(self, text: str) -> ImportResult:
        """
        Import a tagging CSV (``familyName,locationSpec,tagName,score``).

        Variable rows for the same family and tag merge into one
        ``VariableTagging``. Rows repeating an existing static tagging are
        no-ops.
        """
        result = ImportResult()
        for row in parse_tagging_rows(text):
            self._import_row(row, result)
        logger.info("Imported %d tagging rows, skipped %d", result.added, result.skipped)
        return result

    def export_csv(self) -> str:
        return export_taggings(self.registries.fonts)

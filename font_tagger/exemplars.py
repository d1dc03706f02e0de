"""
Exemplar selection: representative fonts for a tag at high, medium and low
scores.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .config import ExemplarThresholds
from .models import StaticTagging
from .models.tagging import Tagging
from .store import TaggingStore

logger = logging.getLogger(__name__)


@dataclass
class Exemplars:
    high: List[StaticTagging] = field(default_factory=list)
    medium: List[StaticTagging] = field(default_factory=list)
    low: List[StaticTagging] = field(default_factory=list)

    def families(self) -> Dict[str, List[str]]:
        return {
            "high": [t.font.name for t in self.high],
            "medium": [t.font.name for t in self.medium],
            "low": [t.font.name for t in self.low],
        }


def select_exemplars(
    tag_name: str,
    taggings: Iterable[Tagging],
    thresholds: Optional[ExemplarThresholds] = None,
) -> Exemplars:
    """
    Bucket the static taggings of ``tag_name`` by score.

    Scores above ``high_above`` are high and scores at or below
    ``low_at_or_below`` are low. Medium takes the first ``bucket_size``
    taggings strictly between ``medium_above`` and ``medium_below``, in input
    order. High is then sorted descending and low ascending, each cut to
    ``bucket_size``. Scores in the gaps between buckets are ignored.
    """
    t = thresholds or ExemplarThresholds()
    result = Exemplars()
    for tagging in taggings:
        if not isinstance(tagging, StaticTagging) or tagging.tag.name != tag_name:
            continue
        score = tagging.score
        if score > t.high_above:
            result.high.append(tagging)
        elif score <= t.low_at_or_below:
            result.low.append(tagging)
        elif t.medium_above < score < t.medium_below and len(result.medium) < t.bucket_size:
            result.medium.append(tagging)
    result.high = sorted(result.high, key=lambda x: x.score, reverse=True)[: t.bucket_size]
    result.low = sorted(result.low, key=lambda x: x.score)[: t.bucket_size]
    return result


class ExemplarSelector:
    """Per-tag exemplar cache over a ``TaggingStore``."""

    def __init__(self, store: TaggingStore, thresholds: Optional[ExemplarThresholds] = None):
        self.store = store
        self.thresholds = thresholds or ExemplarThresholds()
        self._cache: Dict[str, Exemplars] = {}
        self._lock = threading.Lock()
        store.subscribe(self._on_change)

    def _on_change(self, event: str, tagging: Tagging) -> None:
        with self._lock:
            if self._cache.pop(tagging.tag.name, None) is not None:
                logger.debug("Exemplars for %s invalidated (%s)", tagging.tag.name, event)

    def exemplars(self, tag_name: str) -> Exemplars:
        with self._lock:
            cached = self._cache.get(tag_name)
        if cached is not None:
            return cached
        result = select_exemplars(tag_name, self.store.all_taggings(), self.thresholds)
        with self._lock:
            self._cache[tag_name] = result
        return result

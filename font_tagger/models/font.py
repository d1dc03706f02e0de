"""
Font families and the taggings they own.

A Font holds at most one tagging per tag name. ``add_tagging`` checks and
inserts under a per-font lock, so no other mutation can interleave with the
duplicate check.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..errors import UnknownReferenceError
from .tagging import Tagging

logger = logging.getLogger(__name__)

GOOGLE_FONTS_CSS2_URL = "https://fonts.googleapis.com/css2"

# (event, tagging) where event is "add" or "remove"
TaggingListener = Callable[[str, Tagging], None]


@dataclass(frozen=True)
class Axis:
    tag: str
    min: float
    max: float
    value: Optional[float] = None


def _format_axis_value(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))


class Font:
    """A font family, its design axes and its taggings."""

    def __init__(self, name: str, axes: Sequence[Axis] = ()):
        self.name = name
        self.axes: Tuple[Axis, ...] = tuple(axes)
        self._taggings: List[Tagging] = []
        self._listeners: List[TaggingListener] = []
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Font({self.name!r}, axes={[a.tag for a in self.axes]})"

    @property
    def is_vf(self) -> bool:
        return len(self.axes) > 0

    @property
    def taggings(self) -> Tuple[Tagging, ...]:
        with self._lock:
            return tuple(self._taggings)

    def axis(self, tag: str) -> Axis:
        for axis in self.axes:
            if axis.tag == tag:
                return axis
        raise UnknownReferenceError(f"Font {self.name!r} has no axis {tag!r}")

    @property
    def api_url(self) -> str:
        """
        Google Fonts css2 URL requesting every axis range of the family.

        The API wants lowercase axes sorted alphabetically first, then the
        uppercase (custom) axes, also sorted.
        """
        path = f"{GOOGLE_FONTS_CSS2_URL}?family={self.name.replace(' ', '+')}"
        if not self.axes:
            return path
        lower = sorted((a for a in self.axes if a.tag.upper() != a.tag), key=lambda a: a.tag)
        upper = sorted((a for a in self.axes if a.tag.upper() == a.tag), key=lambda a: a.tag)
        ordered = lower + upper
        path += ":" + ",".join(a.tag for a in ordered)
        path += "@" + ",".join(
            f"{_format_axis_value(a.min)}..{_format_axis_value(a.max)}" for a in ordered
        )
        return path

    def subscribe(self, listener: TaggingListener) -> None:
        self._listeners.append(listener)

    def _notify(self, event: str, tagging: Tagging) -> None:
        for listener in list(self._listeners):
            listener(event, tagging)

    def has_tagging(self, tag_name: str) -> bool:
        with self._lock:
            return any(t.tag.name == tag_name for t in self._taggings)

    def tagging(self, tag_name: str) -> Optional[Tagging]:
        with self._lock:
            for tagging in self._taggings:
                if tagging.tag.name == tag_name:
                    return tagging
        return None

    def add_tagging(self, tagging: Tagging) -> bool:
        """
        Attach a tagging to this font.

        Returns:
            True if added; False if the tagging belongs to another font or the
            font already has a tagging for the same tag (the existing one is
            kept untouched).
        """
        if tagging.font is not self:
            logger.warning(
                "Tagging for %s cannot be added to font %s", tagging.font.name, self.name
            )
            return False
        with self._lock:
            if any(t.tag.name == tagging.tag.name for t in self._taggings):
                logger.warning(
                    "Tag %s for font %s already exists. Skipping addition.",
                    tagging.tag.name,
                    self.name,
                )
                return False
            self._taggings.append(tagging)
        self._notify("add", tagging)
        return True

    def remove_tagging(self, tagging: Tagging) -> bool:
        """Remove ``tagging`` by identity. Returns False if it was not attached."""
        with self._lock:
            for index, existing in enumerate(self._taggings):
                if existing is tagging:
                    del self._taggings[index]
                    break
            else:
                return False
        self._notify("remove", tagging)
        return True

"""
Reference data registries and the builder that assembles them.

Tags, fonts, rules and embeddings are loaded once. ``RegistryBuilder`` takes
every raw input, constructs tags first, then fonts, and hands back a frozen
``Registries`` object. Taggings are never built here: a ``TaggingStore``
needs a finished ``Registries`` in its constructor, which is what guarantees
that every tag a tagging points at already exists.

Usage:
    registries = (
        RegistryBuilder()
        .with_tag_definitions(definitions_text)
        .with_tag_metadata(metadata_csv)
        .with_family_data(family_json)
        .with_embeddings(embeddings_json)
        .with_rules(rules_csv)
        .build()
    )
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .csv_codec import parse_rules, parse_tag_metadata
from .errors import UnknownReferenceError
from .models import Axis, Font, LintRule, Tag
from .schema import (
    FamilyRecord,
    TagDefinitionRecord,
    parse_embeddings,
    parse_family_data,
    parse_tag_definitions,
)

logger = logging.getLogger(__name__)


class TagRegistry:
    """Tags keyed by name. Registering an existing name replaces it."""

    def __init__(self) -> None:
        self._tags: Dict[str, Tag] = {}
        self._frozen = False

    def register(self, tag: Tag) -> None:
        if self._frozen:
            raise RuntimeError("TagRegistry is frozen; build a new registry instead")
        self._tags[tag.name] = tag

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Optional[Tag]:
        return self._tags.get(name)

    def require(self, name: str) -> Tag:
        tag = self._tags.get(name)
        if tag is None:
            raise UnknownReferenceError(f"Tag not found: {name}")
        return tag

    def names(self) -> List[str]:
        return sorted(self._tags)

    def __contains__(self, name: object) -> bool:
        return name in self._tags

    def __iter__(self) -> Iterator[Tag]:
        return iter(list(self._tags.values()))

    def __len__(self) -> int:
        return len(self._tags)


class FontCatalog:
    """Font families in load order, looked up by name."""

    def __init__(self, fonts: Tuple[Font, ...] = ()):
        self._fonts: Dict[str, Font] = {}
        for font in fonts:
            if font.name in self._fonts:
                logger.warning("Duplicate family %s in family data; keeping the first", font.name)
                continue
            self._fonts[font.name] = font

    def get(self, name: str) -> Optional[Font]:
        return self._fonts.get(name)

    def require(self, name: str) -> Font:
        font = self._fonts.get(name)
        if font is None:
            raise UnknownReferenceError(f"Family not found: {name}")
        return font

    def names(self) -> List[str]:
        return list(self._fonts)

    def __contains__(self, name: object) -> bool:
        return name in self._fonts

    def __iter__(self) -> Iterator[Font]:
        return iter(list(self._fonts.values()))

    def __len__(self) -> int:
        return len(self._fonts)


@dataclass(frozen=True)
class Registries:
    tags: TagRegistry
    fonts: FontCatalog
    rules: Tuple[LintRule, ...]
    # Insertion order follows the family data, which fixes similarity tie order.
    embeddings: Mapping[str, Tuple[float, ...]]


def font_from_record(record: FamilyRecord) -> Font:
    axes = [Axis(a.tag, a.min, a.max, a.defaultValue) for a in record.axes]
    return Font(record.family, axes)


class RegistryBuilder:
    """Collects raw reference data, then builds frozen ``Registries``."""

    def __init__(self) -> None:
        self._definitions: Dict[str, TagDefinitionRecord] = {}
        self._metadata_text: Optional[str] = None
        self._families: List[FamilyRecord] = []
        self._embeddings: Dict[str, List[float]] = {}
        self._rules: List[LintRule] = []

    def with_tag_definitions(self, text: str, path: str = "tag_definitions.json") -> "RegistryBuilder":
        self._definitions = parse_tag_definitions(text, path)
        return self

    def with_tag_metadata(self, text: str) -> "RegistryBuilder":
        self._metadata_text = text
        return self

    def with_family_data(self, text: str, path: str = "family_data.json") -> "RegistryBuilder":
        self._families = parse_family_data(text, path)
        return self

    def with_embeddings(self, text: str, path: str = "embeddings.json") -> "RegistryBuilder":
        self._embeddings = parse_embeddings(text, path)
        return self

    def with_rules(self, text: str) -> "RegistryBuilder":
        self._rules = parse_rules(text)
        return self

    def _build_tags(self) -> TagRegistry:
        registry = TagRegistry()
        for name, record in self._definitions.items():
            registry.register(
                Tag(
                    name=name,
                    description=record.description,
                    short_description=record.superShortDescription,
                    related=tuple(record.related),
                )
            )
        if self._metadata_text:
            for row in parse_tag_metadata(self._metadata_text):
                existing = registry.get(row.name)
                if existing is None:
                    tag = Tag(
                        name=row.name,
                        description=row.description,
                        lowest_score=row.lowScore,
                        highest_score=row.highScore,
                    )
                else:
                    tag = replace(
                        existing,
                        description=existing.description or row.description,
                        lowest_score=row.lowScore,
                        highest_score=row.highScore,
                    )
                registry.register(tag)
        registry.freeze()
        return registry

    def _build_embeddings(self, fonts: FontCatalog) -> Dict[str, Tuple[float, ...]]:
        embeddings: Dict[str, Tuple[float, ...]] = {}
        for name in fonts.names():
            vector = self._embeddings.get(name)
            if vector is not None:
                embeddings[name] = tuple(vector)
        unknown = set(self._embeddings) - set(embeddings)
        if unknown:
            logger.debug("Ignoring %d embeddings without family metadata", len(unknown))
        return embeddings

    def build(self) -> Registries:
        tags = self._build_tags()
        fonts = FontCatalog(tuple(font_from_record(r) for r in self._families))
        return Registries(
            tags=tags,
            fonts=fonts,
            rules=tuple(self._rules),
            embeddings=MappingProxyType(self._build_embeddings(fonts)),
        )

"""
Configuration for the font tagger.

Values are read from ``font_tagger.yml`` (or the file named by the
``FONT_TAGGER_CONFIG`` environment variable) and fall back to the defaults
below. The YAML layout is:

    data:
      dir: data
      family_data: family_data.json
      embeddings: embeddings.json
      tag_definitions: tag_definitions.json
      tags_metadata: tags_metadata.csv
      tag_rules: tag_rules.csv
      taggings: taggings.csv
      http_timeout: 10
    exemplars:
      high_above: 80
      low_at_or_below: 20
      medium_above: 33
      medium_below: 66
      bucket_size: 3
    similarity:
      count: 10
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_ENV_VAR = "FONT_TAGGER_CONFIG"


@dataclass
class ExemplarThresholds:
    high_above: float = 80.0
    low_at_or_below: float = 20.0
    medium_above: float = 33.0
    medium_below: float = 66.0
    bucket_size: int = 3


@dataclass
class TaggerConfig:
    """Paths and tunables. Relative file names resolve against ``data_dir``."""

    data_dir: str = "data"
    family_data: str = "family_data.json"
    embeddings: str = "embeddings.json"
    tag_definitions: str = "tag_definitions.json"
    tags_metadata: str = "tags_metadata.csv"
    tag_rules: str = "tag_rules.csv"
    taggings: str = "taggings.csv"
    http_timeout: float = 10.0

    similar_count: int = 10
    exemplars: ExemplarThresholds = field(default_factory=ExemplarThresholds)

    def resolve(self, name: str) -> str:
        """Full path (or URL) of a data file."""
        if "://" in name or os.path.isabs(name):
            return name
        if "://" in self.data_dir:
            return f"{self.data_dir.rstrip('/')}/{name}"
        return str(Path(self.data_dir) / name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaggerConfig":
        data_section = data.get("data", {}) or {}
        exemplar_section = data.get("exemplars", {}) or {}
        similarity_section = data.get("similarity", {}) or {}

        config = cls()
        if "dir" in data_section:
            config.data_dir = str(data_section["dir"])
        for name in (
            "family_data",
            "embeddings",
            "tag_definitions",
            "tags_metadata",
            "tag_rules",
            "taggings",
        ):
            if name in data_section:
                setattr(config, name, str(data_section[name]))
        if "http_timeout" in data_section:
            config.http_timeout = float(data_section["http_timeout"])
        config.similar_count = int(similarity_section.get("count", config.similar_count))

        thresholds = ExemplarThresholds()
        for f in fields(ExemplarThresholds):
            if f.name in exemplar_section:
                caster = int if f.name == "bucket_size" else float
                setattr(thresholds, f.name, caster(exemplar_section[f.name]))
        config.exemplars = thresholds
        return config

    @classmethod
    def from_yaml(cls, yaml_path: Optional[Path] = None) -> "TaggerConfig":
        """
        Load configuration from YAML.

        Args:
            yaml_path: explicit file. If None, ``$FONT_TAGGER_CONFIG`` is used,
                then ``font_tagger.yml`` and ``config/font_tagger.yml``.

        Returns:
            TaggerConfig; defaults when no file is found
        """
        if yaml_path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            candidates = [Path(env_path)] if env_path else []
            candidates += [Path("font_tagger.yml"), Path("config/font_tagger.yml")]
            for candidate in candidates:
                if candidate.exists():
                    yaml_path = candidate
                    break

        if yaml_path is None or not Path(yaml_path).exists():
            return cls()

        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": {
                "dir": self.data_dir,
                "family_data": self.family_data,
                "embeddings": self.embeddings,
                "tag_definitions": self.tag_definitions,
                "tags_metadata": self.tags_metadata,
                "tag_rules": self.tag_rules,
                "taggings": self.taggings,
                "http_timeout": self.http_timeout,
            },
            "exemplars": {f.name: getattr(self.exemplars, f.name) for f in fields(ExemplarThresholds)},
            "similarity": {"count": self.similar_count},
        }


def get_config() -> TaggerConfig:
    """Cached configuration loaded with ``TaggerConfig.from_yaml()``."""
    if not hasattr(get_config, "_cache"):
        get_config._cache = TaggerConfig.from_yaml()
    return get_config._cache

"""
Typed records for the raw reference data files.

Each file is validated as a whole when it is loaded; a malformed file is
rejected with a SchemaError instead of leaking half-parsed values into the
registries.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from .errors import SchemaError


class AxisRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tag: str = Field(..., min_length=1)
    min: float
    max: float
    defaultValue: Optional[float] = None

    @model_validator(mode="after")
    def _check_range(self) -> "AxisRecord":
        if self.min > self.max:
            raise ValueError(f"axis {self.tag}: min {self.min} > max {self.max}")
        return self


class FamilyRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    family: str = Field(..., min_length=1)
    axes: List[AxisRecord] = Field(default_factory=list)


class FamilyDataFile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    familyMetadataList: List[FamilyRecord]


class TagDefinitionRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    description: str = ""
    superShortDescription: str = ""
    related: List[str] = Field(default_factory=list)


class TagMetadataRow(BaseModel):
    name: str = Field(..., min_length=1)
    lowScore: float = 0.0
    highScore: float = 100.0
    description: str = ""


_TAG_DEFINITIONS = TypeAdapter(Dict[str, TagDefinitionRecord])
_EMBEDDINGS = TypeAdapter(Dict[str, List[float]])


def _decode_json(text: str, path: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaError(path, f"invalid JSON: {exc}") from exc


def parse_family_data(text: str, path: str = "family_data.json") -> List[FamilyRecord]:
    try:
        return FamilyDataFile.model_validate(_decode_json(text, path)).familyMetadataList
    except ValidationError as exc:
        raise SchemaError(path, str(exc)) from exc


def parse_tag_definitions(
    text: str, path: str = "tag_definitions.json"
) -> Dict[str, TagDefinitionRecord]:
    try:
        return _TAG_DEFINITIONS.validate_python(_decode_json(text, path))
    except ValidationError as exc:
        raise SchemaError(path, str(exc)) from exc


def parse_embeddings(text: str, path: str = "embeddings.json") -> Dict[str, List[float]]:
    try:
        return _EMBEDDINGS.validate_python(_decode_json(text, path))
    except ValidationError as exc:
        raise SchemaError(path, str(exc)) from exc

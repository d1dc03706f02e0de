"""
Flat-file CSV formats used by the tagging workflow.

The files are simple comma-separated text, not RFC 4180 CSV:

- ``parse_csv`` splits positionally and supports no quoting. Fields beyond
  the last key are folded into the last key so free-text columns may
  contain commas.
- The rule table's description column has exactly one layer of surrounding
  double quotes stripped.
- Tagging files quote the location column because it contains commas:
  ``Roboto Flex,"wght,wdth@400,100",/Expressive/Loud,80``.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from pydantic import ValidationError

from .models import Font, LintRule, Location, Severity, StaticTagging, VariableTagging
from .models.tagging import Tagging
from .schema import TagMetadataRow

logger = logging.getLogger(__name__)

_QUOTED_RE = re.compile(r'^"(.*)"$', re.DOTALL)
_SEVERITY_COLUMN_RE = re.compile(r"\s*,\s*(?P<severity>ERROR|WARN|FAIL|INFO)\s*,", re.IGNORECASE)
_TAGGING_LINE_RE = re.compile(
    r'^(?P<family>[^,]*),(?:"(?P<quoted>[^"]*)"|(?P<bare>[^,"]*)),(?P<tag>.*),(?P<score>[^,]*)$'
)


def iter_data_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield (line_number, line) for lines that are neither blank nor ``#`` comments."""
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.rstrip("\r")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        yield number, line


def strip_quotes(value: str) -> str:
    """Remove one layer of surrounding double quotes, if present."""
    return _QUOTED_RE.sub(r"\1", value)


def parse_csv(text: str, *keys: str) -> List[Dict[str, Optional[str]]]:
    """
    Parse positional comma-separated records.

    Args:
        text: file content
        keys: field names, in column order

    Returns:
        One dict per data line; fields missing from a short line are None.
    """
    if not keys:
        raise ValueError("parse_csv needs at least one key")
    records: List[Dict[str, Optional[str]]] = []
    for _, line in iter_data_lines(text):
        fields = line.split(",", len(keys) - 1)
        record: Dict[str, Optional[str]] = {}
        for index, key in enumerate(keys):
            record[key] = fields[index] if index < len(fields) else None
        records.append(record)
    return records


# ----------------------------------------------------------------------------
# Rule table and tag metadata
# ----------------------------------------------------------------------------


def _inside_string(text: str) -> bool:
    """True if ``text`` ends inside an unterminated rule string literal."""
    quote = None
    escaped = False
    for char in text:
        if escaped:
            escaped = False
        elif quote is not None and char == "\\":
            escaped = True
        elif quote is None and char in "\"'":
            quote = char
        elif char == quote:
            quote = None
    return quote is not None


def _find_severity_column(line: str) -> Optional["re.Match[str]"]:
    """First ``,SEVERITY,`` column that is not part of a string in the rule."""
    for match in _SEVERITY_COLUMN_RE.finditer(line):
        if not _inside_string(line[: match.start()]):
            return match
    return None


def parse_rules(text: str) -> List[LintRule]:
    """
    Parse ``tag_rules.csv`` (``rule,severity,description``).

    The line is split around the severity column, so rule expressions such as
    ``family in ["A", "B"]`` may contain commas. Lines with a missing field
    or unknown severity are skipped with a warning.
    """
    rules: List[LintRule] = []
    for number, line in iter_data_lines(text):
        match = _find_severity_column(line)
        if match is None:
            logger.warning("Skipping rule line %d due to missing fields: %s", number, line)
            continue
        rule = line[: match.start()].strip()
        description = strip_quotes(line[match.end():].strip()).strip()
        if not rule or not description:
            logger.warning("Skipping rule line %d due to missing fields: %s", number, line)
            continue
        rules.append(
            LintRule(
                rule=rule,
                description=description,
                severity=Severity.parse(match.group("severity")),
            )
        )
    return rules


def parse_tag_metadata(text: str) -> List[TagMetadataRow]:
    """Parse ``tags_metadata.csv`` (``name,lowScore,highScore,description``)."""
    rows: List[TagMetadataRow] = []
    for record in parse_csv(text, "name", "lowScore", "highScore", "description"):
        values = {
            key: value.strip() for key, value in record.items() if value and value.strip()
        }
        if "description" in values:
            values["description"] = strip_quotes(values["description"])
        try:
            rows.append(TagMetadataRow(**values))
        except ValidationError as exc:
            logger.warning("Skipping tag metadata row %s: %s", record.get("name"), exc)
    return rows


# ----------------------------------------------------------------------------
# Taggings
# ----------------------------------------------------------------------------


@dataclass(frozen=True)
class TaggingRow:
    """One line of a tagging CSV, before it is resolved against the registries."""

    line_number: int
    family: str
    location: Optional[Location]
    tag_name: str
    score: float


def format_number(value: float) -> str:
    """``42.0`` -> ``42``; other values use the shortest round-tripping repr."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def parse_location_spec(spec: str) -> Optional[Location]:
    """
    ``"wght,wdth@400,100"`` -> Location(wght=400, wdth=100); empty -> None.

    Raises:
        ValueError: if the spec has no ``@``, mismatched counts or a bad number
    """
    spec = strip_quotes(spec.strip()).strip()
    if not spec:
        return None
    if spec.count("@") != 1:
        raise ValueError(f"Location spec {spec!r} must contain exactly one '@'")
    axes_part, values_part = spec.split("@")
    axes = [a.strip() for a in axes_part.split(",")]
    values = [v.strip() for v in values_part.split(",")]
    if len(axes) != len(values) or not all(axes):
        raise ValueError(f"Location spec {spec!r} has mismatched axes and values")
    coords: Dict[str, float] = {}
    for axis, value in zip(axes, values):
        coords[axis] = float(value)
    return Location(coords)


def format_location_spec(location: Location) -> str:
    axes = ",".join(location.keys())
    values = ",".join(format_number(v) for v in location.values())
    return f"{axes}@{values}"


def parse_tagging_rows(text: str) -> List[TaggingRow]:
    """
    Parse a tagging CSV (``familyName,locationSpec,tagName,score``).

    Malformed lines are skipped with a warning. Names are not resolved here;
    see ``TaggingStore.import_csv``.
    """
    rows: List[TaggingRow] = []
    for number, line in iter_data_lines(text):
        match = _TAGGING_LINE_RE.match(line)
        if match is None:
            logger.warning("Skipping tagging line %d: %s", number, line)
            continue
        family = match.group("family").strip()
        tag_name = match.group("tag").strip()
        if not family or not tag_name:
            logger.warning(
                "Skipping line %d due to missing family name or tag name: %s", number, line
            )
            continue
        spec = match.group("quoted") if match.group("quoted") is not None else match.group("bare")
        try:
            location = parse_location_spec(spec or "")
            score = float(match.group("score"))
        except ValueError as exc:
            logger.warning("Skipping tagging line %d: %s", number, exc)
            continue
        rows.append(TaggingRow(number, family, location, tag_name, score))
    return rows


def format_tagging_lines(tagging: Tagging) -> List[str]:
    family = tagging.font.name
    tag_name = tagging.tag.name
    if isinstance(tagging, StaticTagging):
        return [f"{family},,{tag_name},{format_number(tagging.score)}"]
    if isinstance(tagging, VariableTagging):
        return [
            f'{family},"{format_location_spec(location)}",{tag_name},{format_number(score)}'
            for location, score in tagging.scores
        ]
    raise TypeError(f"Unsupported tagging type: {type(tagging).__name__}")


def export_taggings(fonts: Iterable[Font]) -> str:
    """
    Serialise every tagging of ``fonts``.

    Fonts are written in name order and each font's taggings in tag-name
    order; variable taggings produce one line per location.
    """
    lines: List[str] = []
    for font in sorted(fonts, key=lambda f: f.name):
        for tagging in sorted(font.taggings, key=lambda t: t.tag.name):
            lines.extend(format_tagging_lines(tagging))
    return "\n".join(lines)

"""
Lint rule table records and the warnings produced by running them.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
    ERROR = "ERROR"
    WARN = "WARN"
    FAIL = "FAIL"
    INFO = "INFO"

    @classmethod
    def parse(cls, value: str) -> "Severity":
        """Case-insensitive lookup; raises ValueError on unknown names."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown severity {value!r}") from None

    @property
    def blocking(self) -> bool:
        return self in (Severity.ERROR, Severity.FAIL)


@dataclass(frozen=True)
class LintRule:
    rule: str
    description: str
    severity: Severity


@dataclass(frozen=True)
class LintWarning:
    description: str
    severity: Severity

    def __str__(self) -> str:
        return f"[{self.severity.value}] {self.description}"

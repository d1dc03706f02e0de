"""
Data model: tags, fonts, locations and the two tagging variants.
"""
from .font import Axis, Font
from .lint import LintRule, LintWarning, Severity
from .location import Location
from .tag import Tag
from .tagging import StaticTagging, Tagging, VariableTagging

__all__ = [
    "Axis",
    "Font",
    "LintRule",
    "LintWarning",
    "Location",
    "Severity",
    "StaticTagging",
    "Tag",
    "Tagging",
    "VariableTagging",
]

"""
Lint engine: evaluate the rule table against a font's taggings.

A rule is an expression that is truthy when the font is in violation, e.g.

    tags["/Expressive/Loud"] > 50 and family == "Roboto"

Only static taggings feed the evaluation context. Variable taggings have no
single score and are left out.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from .errors import ParseError
from .models import Font, LintRule, LintWarning, Severity, StaticTagging
from .rules import RuleContext, compile_rule
from .store import TaggingStore

logger = logging.getLogger(__name__)


def build_context(font: Font) -> RuleContext:
    scores: Dict[str, float] = {}
    for tagging in font.taggings:
        if isinstance(tagging, StaticTagging):
            scores[tagging.tag.name] = tagging.score
    return RuleContext(tag_scores=scores, family_name=font.name)


def run_lint(rules: Sequence[LintRule], font: Font) -> List[LintWarning]:
    """
    Evaluate every rule against ``font``.

    Warnings come back in rule order, one per violated rule. A rule that
    does not parse yields one ERROR warning and the remaining rules still
    run.
    """
    context = build_context(font)
    warnings: List[LintWarning] = []
    for rule in rules:
        try:
            predicate = compile_rule(rule.rule)
        except ParseError as exc:
            logger.debug("Rule %r failed to parse: %s", rule.rule, exc)
            warnings.append(
                LintWarning(f"Rule could not be parsed: {rule.rule}", Severity.ERROR)
            )
            continue
        if predicate(context):
            warnings.append(LintWarning(rule.description, rule.severity))
    return warnings


def lint_fonts(rules: Sequence[LintRule], fonts: Iterable[Font]) -> Dict[str, List[LintWarning]]:
    """Warnings per family name, for fonts with at least one warning, in name order."""
    results: Dict[str, List[LintWarning]] = {}
    for font in sorted(fonts, key=lambda f: f.name):
        warnings = run_lint(rules, font)
        if warnings:
            results[font.name] = warnings
    return results


def lint_store(rules: Sequence[LintRule], store: TaggingStore) -> Dict[str, List[LintWarning]]:
    return lint_fonts(rules, store.fonts)


def has_blocking(results: Dict[str, List[LintWarning]]) -> bool:
    return any(w.severity.blocking for warnings in results.values() for w in warnings)

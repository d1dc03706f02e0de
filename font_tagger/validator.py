"""
Catalog Validator

Checks the loaded reference data and taggings for:
- Tag names that are not slash paths
- Score ranges where the lowest score is not below the highest
- Related tags that do not exist or point back at the tag itself
- Tags without a description
- Rules that do not compile
- Tagging scores outside their tag's range

Usage:
    python3 -m font_tagger.validator
    python3 -m font_tagger.validator --config path/to/font_tagger.yml
    python3 -m font_tagger.validator --strict
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from .config import TaggerConfig
from .errors import LoadError, ParseError
from .loaders import load_store
from .models import StaticTagging, VariableTagging
from .registry import Registries
from .rules import compile_rule
from .store import TaggingStore


class ValidationIssue:
    """Represents a single validation finding"""

    def __init__(self, severity: str, subject: str, message: str):
        self.severity = severity  # "error" or "warning"
        self.subject = subject
        self.message = message

    def __str__(self) -> str:
        return f"[{self.severity.upper()}] {self.subject}: {self.message}"


class CatalogValidator:
    """Validates tags, rules and taggings of a loaded catalog"""

    def __init__(
        self,
        registries: Registries,
        store: Optional[TaggingStore] = None,
        strict: bool = False,
    ):
        self.registries = registries
        self.store = store
        self.strict = strict
        self.errors: List[ValidationIssue] = []
        self.warnings: List[ValidationIssue] = []

    def _error(self, subject: str, message: str) -> None:
        self.errors.append(ValidationIssue("error", subject, message))

    def _warn(self, subject: str, message: str) -> None:
        self.warnings.append(ValidationIssue("warning", subject, message))

    def validate(self) -> bool:
        """Run all validation checks"""
        self.check_tag_names()
        self.check_score_ranges()
        self.check_related_tags()
        self.check_descriptions()
        self.check_rules()
        if self.store is not None:
            self.check_tagging_scores()
        return len(self.errors) == 0

    def check_tag_names(self) -> None:
        for tag in self.registries.tags:
            if not tag.name.startswith("/") or not tag.segments:
                self._error(tag.name, "Tag name must be a slash path like /Area/Leaf")

    def check_score_ranges(self) -> None:
        for tag in self.registries.tags:
            if tag.lowest_score >= tag.highest_score:
                self._error(
                    tag.name,
                    f"lowest score {tag.lowest_score:g} is not below highest score "
                    f"{tag.highest_score:g}",
                )

    def check_related_tags(self) -> None:
        for tag in self.registries.tags:
            for related in tag.related:
                if related == tag.name:
                    self._error(tag.name, "Tag lists itself as related")
                elif related not in self.registries.tags:
                    self._error(tag.name, f"Related tag '{related}' does not exist")

    def check_descriptions(self) -> None:
        for tag in self.registries.tags:
            if not tag.description.strip():
                self._warn(tag.name, "Tag has no description")

    def check_rules(self) -> None:
        for rule in self.registries.rules:
            try:
                compile_rule(rule.rule)
            except ParseError as exc:
                self._error(rule.rule, f"Rule does not compile: {exc}")

    def check_tagging_scores(self) -> None:
        for tagging in self.store.all_taggings():
            subject = f"{tagging.font.name} {tagging.tag.name}"
            if isinstance(tagging, StaticTagging):
                scores = [tagging.score]
            elif isinstance(tagging, VariableTagging):
                scores = [score for _, score in tagging.scores]
            else:
                continue
            for score in scores:
                if not tagging.tag.in_range(score):
                    self._error(
                        subject,
                        f"score {score:g} outside [{tagging.tag.lowest_score:g}, "
                        f"{tagging.tag.highest_score:g}]",
                    )

    def print_report(self) -> None:
        """Print validation report"""
        total_errors = len(self.errors)
        total_warnings = len(self.warnings)

        print("=" * 70)
        print("CATALOG VALIDATION REPORT")
        print("=" * 70)
        print(f"Tags: {len(self.registries.tags)}")
        print(f"Families: {len(self.registries.fonts)}")
        print(f"Rules: {len(self.registries.rules)}")
        if self.store is not None:
            print(f"Taggings: {len(self.store)}")
        print(f"Errors: {total_errors}")
        print(f"Warnings: {total_warnings}")
        print("=" * 70)

        if self.errors:
            print("")
            print("ERRORS:")
            for error in self.errors:
                print(f"  {error}")

        if self.warnings:
            print("")
            print("WARNINGS:")
            for warning in self.warnings:
                print(f"  {warning}")

        print("")
        if total_errors == 0:
            print("VALIDATION PASSED - No errors found")
        else:
            print(f"VALIDATION FAILED - {total_errors} error(s) found")

        if self.strict and total_warnings > 0:
            print(f"STRICT MODE - {total_warnings} warning(s) treated as errors")

        print("=" * 70)

    def get_exit_code(self) -> int:
        """Get exit code based on validation result"""
        if self.errors:
            return 1
        if self.strict and self.warnings:
            return 1
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate font tagger reference data")
    parser.add_argument("--config", default=None, help="Path to font_tagger.yml")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as errors (default: False)",
    )
    args = parser.parse_args(argv)

    config = TaggerConfig.from_yaml(Path(args.config) if args.config else None)
    try:
        store = asyncio.run(load_store(config))
    except LoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    validator = CatalogValidator(store.registries, store, strict=args.strict)
    validator.validate()
    validator.print_report()
    return validator.get_exit_code()


if __name__ == "__main__":
    sys.exit(main())

"""
Command line entry point.

Usage:
    font-tagger lint [FAMILY ...]
    font-tagger exemplars /Expressive/Loud
    font-tagger similar "Roboto" -k 5
    font-tagger export --output taggings.csv
    font-tagger validate --strict

Exit codes:
  0 - success
  1 - lint found ERROR/FAIL warnings, or validation failed
  2 - reference data could not be loaded
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import TaggerConfig
from .errors import LoadError
from .exemplars import ExemplarSelector
from .lint import has_blocking, lint_fonts
from .loaders import load_store
from .similarity import SimilarityIndex
from .store import TaggingStore
from .validator import CatalogValidator

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_LOAD_ERROR = 2


def _cmd_lint(store: TaggingStore, config: TaggerConfig, args: argparse.Namespace) -> int:
    catalog = store.registries.fonts
    if args.families:
        fonts = []
        for name in args.families:
            font = catalog.get(name)
            if font is None:
                print(f"Unknown family: {name}", file=sys.stderr)
                continue
            fonts.append(font)
    else:
        fonts = list(catalog)

    results = lint_fonts(store.registries.rules, fonts)
    for family, warnings in results.items():
        print(family)
        for warning in warnings:
            print(f"  {warning}")
    print(f"{len(results)} of {len(fonts)} families with warnings")
    return EXIT_FAILED if has_blocking(results) else EXIT_OK


def _cmd_exemplars(store: TaggingStore, config: TaggerConfig, args: argparse.Namespace) -> int:
    if args.tag not in store.registries.tags:
        print(f"Unknown tag: {args.tag}", file=sys.stderr)
        return EXIT_FAILED
    exemplars = ExemplarSelector(store, config.exemplars).exemplars(args.tag)
    for bucket in ("high", "medium", "low"):
        print(f"{bucket}:")
        for tagging in getattr(exemplars, bucket):
            print(f"  {tagging.font.name} ({tagging.score:g})")
    return EXIT_OK


def _cmd_similar(store: TaggingStore, config: TaggerConfig, args: argparse.Namespace) -> int:
    index = SimilarityIndex(store.registries.embeddings)
    k = args.k if args.k is not None else config.similar_count
    for name in index.similar_families(args.family, k):
        print(name)
    return EXIT_OK


def _cmd_export(store: TaggingStore, config: TaggerConfig, args: argparse.Namespace) -> int:
    text = store.export_csv()
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {len(store)} taggings to {args.output}")
    else:
        print(text)
    return EXIT_OK


def _cmd_validate(store: TaggingStore, config: TaggerConfig, args: argparse.Namespace) -> int:
    validator = CatalogValidator(store.registries, store, strict=args.strict)
    validator.validate()
    validator.print_report()
    return validator.get_exit_code()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="font-tagger", description="Font tagging tools")
    parser.add_argument("--config", default=None, help="Path to font_tagger.yml")
    parser.add_argument("--data-dir", default=None, help="Override the data directory or base URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("lint", help="Run the rule table against families")
    p.add_argument("families", nargs="*", help="Family names (default: all)")
    p.set_defaults(handler=_cmd_lint)

    p = sub.add_parser("exemplars", help="High, medium and low exemplars of a tag")
    p.add_argument("tag")
    p.set_defaults(handler=_cmd_exemplars)

    p = sub.add_parser("similar", help="Families with the nearest embeddings")
    p.add_argument("family")
    p.add_argument("-k", type=int, default=None, help="Number of results")
    p.set_defaults(handler=_cmd_similar)

    p = sub.add_parser("export", help="Write all taggings as CSV")
    p.add_argument("--output", "-o", default=None)
    p.set_defaults(handler=_cmd_export)

    p = sub.add_parser("validate", help="Validate tags, rules and taggings")
    p.add_argument("--strict", action="store_true", help="Treat warnings as errors")
    p.set_defaults(handler=_cmd_validate)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = TaggerConfig.from_yaml(Path(args.config) if args.config else None)
    if args.data_dir:
        config.data_dir = args.data_dir
    try:
        store = asyncio.run(load_store(config))
    except LoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_LOAD_ERROR
    return args.handler(store, config, args)


if __name__ == "__main__":
    sys.exit(main())

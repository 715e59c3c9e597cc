"""Command line interface for training models and parsing references."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .annotations import load_corpus
from .config import ExtractorSettings, configure_logging
from .errors import ReferenceExtractorError
from .evaluation import evaluate
from .exporters import to_bibtex, to_json, to_ris
from .extractor import ReferenceExtractor
from .models import DecodedReference, TaggedExample
from .report import render_evaluation, render_report
from .symbols import DEFAULT_CATALOG, SymbolCatalog
from .trainer import HMMTrainer

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("report", "json", "bibtex", "ris")


def _read_references(args: argparse.Namespace) -> List[str]:
    if args.text is not None:
        return [args.text]
    if args.input in (None, "-"):
        lines = sys.stdin.read().splitlines()
    else:
        lines = Path(args.input).read_text(encoding="utf-8").splitlines()
    # blank lines raise EmptyInputError unless --skip-errors
    return lines


def _build_extractor(args: argparse.Namespace, settings: ExtractorSettings) -> ReferenceExtractor:
    if args.model:
        settings = replace(settings, model_path=Path(args.model))
    if args.catalog:
        settings = replace(settings, catalog_path=Path(args.catalog))
    return ReferenceExtractor.from_settings(settings)


def _format_records(
    extractor: ReferenceExtractor, records: List[Optional[DecodedReference]], output_format: str
) -> str:
    if output_format == "report":
        return render_report(records)
    if output_format == "json":
        return to_json(records, [extractor.to_entry(r) if r is not None else None for r in records])
    entries = [extractor.to_entry(record) for record in records if record is not None]
    if output_format == "bibtex":
        return to_bibtex(entries)
    return to_ris(entries)


def _cmd_train(args: argparse.Namespace, settings: ExtractorSettings) -> int:
    catalog = SymbolCatalog.load(args.catalog) if args.catalog else DEFAULT_CATALOG
    smoothing = args.smoothing if args.smoothing is not None else settings.smoothing
    examples: List[TaggedExample] = []
    for path in args.corpus:
        examples.extend(load_corpus(path))
    params = HMMTrainer(catalog, smoothing).train(examples)
    params.save(args.output)
    print(f"Trained on {len(examples)} references; model written to {args.output}")
    return 0


def _cmd_parse(args: argparse.Namespace, settings: ExtractorSettings) -> int:
    extractor = _build_extractor(args, settings)
    texts = _read_references(args)
    workers = args.workers if args.workers is not None else settings.workers
    records = extractor.extract_many(texts, max_workers=workers, skip_errors=args.skip_errors)
    output = _format_records(extractor, records, args.format)
    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        logger.info("Wrote %d references to %s", len(records), args.output)
    else:
        print(output)
    return 0


def _cmd_evaluate(args: argparse.Namespace, settings: ExtractorSettings) -> int:
    extractor = _build_extractor(args, settings)
    report = evaluate(extractor, load_corpus(args.corpus))
    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(render_evaluation(report))
    return 0


def _cmd_symbols(args: argparse.Namespace, settings: ExtractorSettings) -> int:
    catalog = SymbolCatalog.load(args.catalog) if args.catalog else DEFAULT_CATALOG
    print(f"Symbol catalog version {catalog.version} ({len(catalog)} symbols + {catalog.fallback!r})")
    for position, symbol in enumerate(catalog.symbols, start=1):
        case = f" [{symbol.case}]" if symbol.case else ""
        print(f"{position:>3}. {symbol.name:<18} {symbol.pattern}{case}")
    if args.dump:
        catalog.save(args.dump)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reference-extractor",
        description="Extract bibliographic fields from reference strings with a hidden Markov model",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (defaults to REFEXTRACT_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    train_parser = subparsers.add_parser("train", help="Train a model from tagged references")
    train_parser.add_argument("corpus", nargs="+", help="Tagged corpus file(s), one reference per line")
    train_parser.add_argument("--output", "-o", required=True, help="Where to write the model JSON")
    train_parser.add_argument("--catalog", help="Symbol catalog JSON to train against")
    train_parser.add_argument("--smoothing", type=float, help="Smoothing constant for unseen events")
    train_parser.set_defaults(handler=_cmd_train)

    parse_parser = subparsers.add_parser("parse", help="Extract fields from raw references")
    parse_parser.add_argument("input", nargs="?", help="File with one reference per line ('-' for stdin)")
    parse_parser.add_argument("--text", help="Parse a single reference given on the command line")
    parse_parser.add_argument("--model", help="Model JSON (defaults to training on the bundled corpus)")
    parse_parser.add_argument("--catalog", help="Symbol catalog JSON the model was trained with")
    parse_parser.add_argument("--format", choices=OUTPUT_FORMATS, default="report", help="Output format")
    parse_parser.add_argument("--output", "-o", help="Write the output to a file instead of stdout")
    parse_parser.add_argument("--workers", type=int, help="Number of worker threads")
    parse_parser.add_argument(
        "--skip-errors",
        action="store_true",
        help="Skip empty references instead of stopping",
    )
    parse_parser.set_defaults(handler=_cmd_parse)

    evaluate_parser = subparsers.add_parser("evaluate", help="Score a model against a tagged corpus")
    evaluate_parser.add_argument("corpus", help="Tagged corpus file")
    evaluate_parser.add_argument("--model", help="Model JSON (defaults to training on the bundled corpus)")
    evaluate_parser.add_argument("--catalog", help="Symbol catalog JSON the model was trained with")
    evaluate_parser.add_argument("--json", action="store_true", help="Print the scores as JSON")
    evaluate_parser.set_defaults(handler=_cmd_evaluate)

    symbols_parser = subparsers.add_parser("symbols", help="List the symbol catalog")
    symbols_parser.add_argument("--catalog", help="Symbol catalog JSON (defaults to the built-in one)")
    symbols_parser.add_argument("--dump", help="Write the catalog as JSON to this path")
    symbols_parser.set_defaults(handler=_cmd_symbols)

    return parser


def main(argv: List[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = ExtractorSettings.from_env()
    except ValueError as exc:
        parser.error(str(exc))
    configure_logging(args.log_level or settings.log_level)

    if args.command == "parse" and args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")

    try:
        return args.handler(args, settings)
    except (ReferenceExtractorError, ValueError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    raise SystemExit(main())

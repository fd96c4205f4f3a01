"""Command-line entry point: ``type-predictor predict|analyze|validate``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from typepredictor.core.config import AppSettings, InferenceConfig
from typepredictor.core.exceptions import DocumentLoadError, TypePredictorError
from typepredictor.core.logging_config import configure_logging
from typepredictor.predictor import TypePredictor
from typepredictor.schema.nodes import json_schema_document

logger = logging.getLogger(__name__)


def load_documents(source: str, *, jsonl: bool = False) -> list[Any]:
    """Read one JSON document (or one per line with ``jsonl``) from a file or ``-``."""
    try:
        text = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentLoadError(source, str(exc)) from exc

    try:
        if jsonl:
            return [json.loads(line) for line in text.splitlines() if line.strip()]
        return [json.loads(text)]
    except json.JSONDecodeError as exc:
        raise DocumentLoadError(source, f"invalid JSON: {exc}") from exc


def _load_all(sources: Sequence[str], jsonl: bool) -> list[Any]:
    documents: list[Any] = []
    for source in sources:
        documents.extend(load_documents(source, jsonl=jsonl))
    if not documents:
        raise DocumentLoadError(", ".join(sources), "no documents found")
    logger.info("Loaded %d sample documents from %d sources", len(documents), len(sources))
    return documents


def _cmd_predict(predictor: TypePredictor, args: argparse.Namespace) -> int:
    schema = predictor.predict(*_load_all(args.files, args.jsonl))
    if args.json_schema:
        print(json.dumps(json_schema_document(schema), indent=2))
    else:
        print(schema.label)
    return 0


def _cmd_analyze(predictor: TypePredictor, args: argparse.Namespace) -> int:
    result = predictor.analyze(*_load_all(args.files, args.jsonl))
    print(json.dumps(result.to_report(), indent=2, default=str))
    return 0


def _cmd_validate(predictor: TypePredictor, args: argparse.Namespace) -> int:
    schema = predictor.predict(*_load_all(args.sample, args.jsonl))
    result = schema.safe_validate(load_documents(args.document)[0])
    if result.success:
        print("valid")
        return 0
    for issue in result.issues:
        print(f"{issue.path or '<root>'}: {issue.message}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="type-predictor",
        description="Infer a structural schema from sample JSON documents",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from TYPEPREDICTOR_LOG_LEVEL)")
    parser.add_argument("--max-depth", type=int, default=None, help="Recursion depth before degrading to 'any'")
    parser.add_argument("--jsonl", action="store_true", help="Treat every input line as a separate document")
    sub = parser.add_subparsers(dest="command", required=True)

    p_predict = sub.add_parser("predict", help="Print the inferred type label or JSON Schema")
    p_predict.add_argument("files", nargs="+", help="JSON files ('-' for stdin)")
    p_predict.add_argument("--json-schema", action="store_true", help="Print a JSON Schema document")
    p_predict.set_defaults(handler=_cmd_predict)

    p_analyze = sub.add_parser("analyze", help="Print paths, structure and per-path predictions")
    p_analyze.add_argument("files", nargs="+", help="JSON files ('-' for stdin)")
    p_analyze.set_defaults(handler=_cmd_analyze)

    p_validate = sub.add_parser("validate", help="Validate a document against a schema inferred from samples")
    p_validate.add_argument("--sample", action="append", required=True, help="Sample JSON file (repeatable)")
    p_validate.add_argument("document", help="JSON file to validate")
    p_validate.set_defaults(handler=_cmd_validate)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = AppSettings()
    configure_logging(args.log_level or settings.log_level)

    config = settings.inference
    if args.max_depth is not None:
        try:
            config = InferenceConfig(**{**config.model_dump(), "max_depth": args.max_depth})
        except ValidationError as exc:
            print(f"error: invalid --max-depth: {exc.errors()[0]['msg']}", file=sys.stderr)
            return 2

    try:
        return args.handler(TypePredictor(config), args)
    except TypePredictorError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

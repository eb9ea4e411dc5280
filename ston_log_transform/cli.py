"""
Command-line entry point: convert a STON log file into structured records.

Usage:
    ston-log-transform access.log                      # JSON lines to stdout
    cat access.log | ston-log-transform -o out.csv --output-format csv
    ston-log-transform access.log -o out.parquet --output-format parquet
    ston-log-transform access.log --config convert.yaml -v

Flags given on the command line override values from ``--config``.
"""

from __future__ import annotations

import argparse
import codecs
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from ston_log_transform.config import ConvertConfig, ParseOptions, load_config
from ston_log_transform.exceptions import ExportError, StonLogError
from ston_log_transform.export import export_records
from ston_log_transform.schema_registry import default_registry
from ston_log_transform.transform import iter_file_chunks, transform_chunks

log = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ston-log-transform",
        description="Convert STON web-server logs into structured records.",
    )
    parser.add_argument(
        "input", nargs="?", default="-", help="Input log file, or '-' for stdin"
    )
    parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    parser.add_argument("--config", help="YAML convert config file")
    parser.add_argument("--log-format", help="Log format name (default: ston)")
    parser.add_argument("--log-version", help="Log format version (default: 1.0)")
    parser.add_argument(
        "--output-format",
        choices=["jsonl", "csv", "parquet"],
        help="Output format (default: jsonl)",
    )
    parser.add_argument("--encoding", help="Input text encoding (default: utf-8)")
    parser.add_argument("--chunk-size", type=int, help="Bytes read per chunk")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def _resolve_config(args: argparse.Namespace) -> ConvertConfig:
    """Load the config file (if any) and apply command-line overrides."""
    config = load_config(args.config) if args.config else ConvertConfig()

    option_overrides = {
        "format": args.log_format,
        "version": args.log_version,
    }
    option_overrides = {k: v for k, v in option_overrides.items() if v is not None}
    output_overrides = {
        "output_format": args.output_format,
        "encoding": args.encoding,
        "chunk_size": args.chunk_size,
    }
    output_overrides = {k: v for k, v in output_overrides.items() if v is not None}

    return ConvertConfig.model_validate({
        "options": {**config.options.model_dump(), **option_overrides},
        "output": {**config.output.model_dump(), **output_overrides},
    })


def run(config: ConvertConfig, input_path: str, output_path: str | None) -> int:
    """Convert one input to one output. Returns the number of records."""
    options: ParseOptions = config.options
    registry = default_registry()
    schema = registry.lookup(options.format, options.version)
    fmt = config.output.output_format

    if output_path is None and fmt == "parquet":
        raise ExportError("Parquet output requires --output")

    if input_path != "-" and not Path(input_path).is_file():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    # Unknown encodings fail here rather than inside the lazy record stream
    codecs.lookup(config.output.encoding)

    source = sys.stdin.buffer if input_path == "-" else input_path
    chunks = iter_file_chunks(source, chunk_size=config.output.chunk_size)
    records = transform_chunks(
        chunks, options, registry=registry, encoding=config.output.encoding
    )

    target = output_path if output_path is not None else sys.stdout
    return export_records(records, target, schema, output_format=fmt)


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        config = _resolve_config(args)
        count = run(config, args.input, args.output)
    except (StonLogError, ValidationError, OSError, LookupError) as exc:
        log.error("%s", exc)
        return 1

    log.info("Converted %d records from %s", count, args.input)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

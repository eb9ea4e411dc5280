"""
Positional line parser for STON web-server logs.

A STON log line is a sequence of tokens separated by single spaces. The
schema selected by ``ParseOptions`` names each position:

  2024-01-02 10:11:12 10.0.0.1 GET /index.html - 80 - ...
  sDate      sTime    sIp      csMethod csUriStem csUriQuery sPort ...

Mapping rules:
  - Every space is a delimiter. Consecutive spaces produce empty tokens,
    which are kept as ``""``.
  - A schema field with no token gets the placeholder ``"-"``.
  - Tokens past the last schema field are dropped.

Neither count mismatch raises; the only error is an unknown format/version.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ston_log_transform.config import ParseOptions, resolve_options
from ston_log_transform.schema_registry import SchemaRegistry, default_registry

logger = logging.getLogger(__name__)

Record = dict[str, str]

PLACEHOLDER = "-"
COMMENT_PREFIX = "#"

OptionsLike = ParseOptions | Mapping[str, Any] | None


def _zip_line(tokens: list[str], field_names: Sequence[str]) -> Record:
    """Match tokens to field names by position."""
    record: Record = {}
    for i, field in enumerate(field_names):
        record[field] = tokens[i] if i < len(tokens) else PLACEHOLDER
    return record


def is_data_line(line: str) -> bool:
    """Return False for comment lines and blank or one-character lines."""
    return not line.startswith(COMMENT_PREFIX) and len(line) > 1


def parse_line(
    line: str,
    options: OptionsLike = None,
    registry: SchemaRegistry | None = None,
) -> Record:
    """Parse one log line into a record keyed by schema field names.

    Args:
        line: A single log line without its trailing newline.
        options: Format/version selecting the schema. Defaults to
            ``ston`` / ``1.0``.
        registry: Schema registry to resolve against. Defaults to the
            built-in registry.

    Returns:
        A fresh dict with exactly one entry per schema field.

    Raises:
        FormatNotRecognizedError: If no schema is registered for the
            requested format/version.
    """
    opts = resolve_options(options)
    registry = registry if registry is not None else default_registry()
    schema = registry.lookup(opts.format, opts.version)
    return _zip_line(line.split(" "), schema.field_names)


def parse(
    data: str | bytes | Sequence[str],
    options: OptionsLike = None,
    registry: SchemaRegistry | None = None,
) -> list[Record]:
    """Parse a block of log text into records, skipping comments and blanks.

    Args:
        data: Raw text (split on ``"\\n"``), UTF-8 bytes, or an already
            split sequence of lines.
        options: Format/version selecting the schema.
        registry: Schema registry to resolve against.

    Returns:
        One record per data line, in input order.

    Raises:
        FormatNotRecognizedError: If the schema cannot be resolved. The
            whole batch fails; no partial result is returned.
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    if isinstance(data, str):
        data = data.split("\n")

    opts = resolve_options(options)
    registry = registry if registry is not None else default_registry()

    records = [parse_line(line, opts, registry) for line in data if is_data_line(line)]
    logger.debug("Parsed %d records from %d lines", len(records), len(data))
    return records

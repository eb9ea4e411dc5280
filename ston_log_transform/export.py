"""
Exporter for ston-log-transform.

Writes parsed records for downstream ingestion in one of three formats:

  jsonl    -- one JSON object per line, keys in schema order (streamable)
  csv      -- header row of schema field names, UTF-8
  parquet  -- columnar file via pyarrow (file paths only)

Every column is written as a string. The placeholder ``"-"`` is kept
verbatim; consumers interpret it as "field absent in source".
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import IO, Iterable, Literal

import pandas as pd

from ston_log_transform.exceptions import ExportError, StonLogError
from ston_log_transform.parser import Record
from ston_log_transform.schema_registry import Schema

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = {"jsonl", "csv", "parquet"}

OutputFormat = Literal["jsonl", "csv", "parquet"]


def records_to_frame(records: Iterable[Record], schema: Schema) -> pd.DataFrame:
    """Build a DataFrame with one column per schema field, in schema order."""
    columns = list(schema.field_names)
    df = pd.DataFrame.from_records(list(records), columns=columns)
    return df.astype(object)


def write_jsonl(records: Iterable[Record], stream: IO[str]) -> int:
    """Write records as JSON lines to a text stream. Returns the count."""
    count = 0
    for record in records:
        stream.write(json.dumps(record, ensure_ascii=False))
        stream.write("\n")
        count += 1
    return count


def export_records(
    records: Iterable[Record],
    target: str | Path | IO[str],
    schema: Schema,
    output_format: OutputFormat = "jsonl",
) -> int:
    """Write records to a file path or an open text stream.

    Args:
        records: Records as produced by the parser/transformer.
        target: Output file path, or a text stream (jsonl/csv only).
        schema: Schema the records were parsed with; fixes column order.
        output_format: "jsonl", "csv" or "parquet".

    Returns:
        Number of records written.

    Raises:
        ExportError: If *output_format* is unsupported, parquet is
            requested for a stream, or the write fails.
    """
    if output_format not in _SUPPORTED_FORMATS:
        raise ExportError(
            f"Unsupported output format: '{output_format}'. "
            f"Supported formats: {sorted(_SUPPORTED_FORMATS)}"
        )

    is_path = isinstance(target, (str, Path))
    if output_format == "parquet" and not is_path:
        raise ExportError("Parquet output requires a file path, not a stream")

    try:
        if is_path:
            Path(target).parent.mkdir(parents=True, exist_ok=True)
        if output_format == "jsonl":
            if is_path:
                with open(target, "w", encoding="utf-8") as f:
                    count = write_jsonl(records, f)
            else:
                count = write_jsonl(records, target)
        else:
            df = records_to_frame(records, schema)
            count = len(df)
            if output_format == "csv":
                if is_path:
                    df.to_csv(target, index=False, encoding="utf-8")
                else:
                    df.to_csv(target, index=False)
            else:  # parquet
                df.to_parquet(target, index=False, engine="pyarrow")
    except StonLogError:
        # Parse errors raised while consuming a lazy record stream
        raise
    except Exception as exc:
        raise ExportError(f"Failed to write {output_format} output: {exc}") from exc

    logger.info(
        "Exported %d records as %s -> %s",
        count, output_format, target if is_path else "<stream>",
    )
    return count

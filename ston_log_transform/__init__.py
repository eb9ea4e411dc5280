"""
ston-log-transform: turn STON web-server log streams into structured records.

Public API surface:

- ``parse_line(line, options)`` -- map one log line onto the schema fields
  selected by ``options`` (``format``/``version``, default ``ston``/``1.0``).

- ``parse(data, options)`` -- parse a block of text (or a list of lines),
  skipping comment and blank lines.

- ``StonLogTransform(options)`` -- stateful transformer fed with arbitrary
  text/byte chunks via ``process_chunk()``; ``finish()`` flushes the final
  unterminated line.

- ``transform_chunks(chunks, options)`` -- generator wrapper around
  ``StonLogTransform`` for an iterable of chunks.

Example::

    import ston_log_transform

    transformer = ston_log_transform.StonLogTransform()
    for chunk in ston_log_transform.iter_file_chunks("access.log"):
        for record in transformer.process_chunk(chunk):
            print(record["csUriStem"], record["scStatus"])
    transformer.finish()
"""

from __future__ import annotations

from ston_log_transform.config import ConvertConfig, ParseOptions, load_config, save_config
from ston_log_transform.exceptions import (
    FormatNotRecognizedError,
    StonLogError,
    StreamStateError,
)
from ston_log_transform.export import export_records, records_to_frame
from ston_log_transform.parser import PLACEHOLDER, Record, parse, parse_line
from ston_log_transform.schema_registry import (
    Schema,
    SchemaRegistry,
    default_registry,
    load_registry,
)
from ston_log_transform.transform import (
    StonLogTransform,
    StreamState,
    iter_file_chunks,
    transform_chunks,
)

__all__ = [
    "ConvertConfig",
    "FormatNotRecognizedError",
    "PLACEHOLDER",
    "ParseOptions",
    "Record",
    "Schema",
    "SchemaRegistry",
    "StonLogError",
    "StonLogTransform",
    "StreamState",
    "StreamStateError",
    "default_registry",
    "export_records",
    "iter_file_chunks",
    "load_config",
    "load_registry",
    "parse",
    "parse_line",
    "records_to_frame",
    "save_config",
    "transform_chunks",
]

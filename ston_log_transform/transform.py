"""
Chunked stream transformer for STON logs.

Wraps the line parser with a carry-over buffer so it can be fed chunks
that do not line up with line boundaries:

  chunk 1: "a b c\\nd e"   -> emits "a b c", keeps "d e"
  chunk 2: " f\\n"         -> emits "d e f", keeps ""
  finish()                -> nothing left to emit

Byte chunks go through an incremental decoder, so a multi-byte character
split between two chunks is reassembled before lines are cut.

Lifecycle: IDLE -> (process_chunk)* -> finish -> CLOSED. A parse error
moves the transformer to FAILED. No call is accepted after CLOSED or
FAILED.

The transformer is synchronous and single-threaded: records are handed
to the consumer (and returned) before ``process_chunk`` returns.
"""

from __future__ import annotations

import codecs
import enum
import logging
from pathlib import Path
from typing import BinaryIO, Callable, Iterable, Iterator

from ston_log_transform.config import resolve_options
from ston_log_transform.exceptions import StreamStateError
from ston_log_transform.parser import OptionsLike, Record, parse
from ston_log_transform.schema_registry import SchemaRegistry, default_registry

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 65536


class StreamState(enum.Enum):
    IDLE = "idle"
    CLOSED = "closed"
    FAILED = "failed"


class StonLogTransform:
    """Turns ordered text/byte chunks into ordered records.

    Args:
        options: Format/version selecting the schema. Resolved once and
            reused for every line. An unknown pair fails on the first
            parsed line, not here.
        registry: Schema registry. Defaults to the built-in registry.
        encoding: Encoding used to decode byte chunks. Undecodable bytes
            are replaced rather than raised.
        consumer: Optional callable that receives each record as it is
            emitted.
    """

    def __init__(
        self,
        options: OptionsLike = None,
        registry: SchemaRegistry | None = None,
        encoding: str = "utf-8",
        consumer: Callable[[Record], None] | None = None,
    ) -> None:
        self.options = resolve_options(options)
        self.registry = registry if registry is not None else default_registry()
        self.encoding = encoding
        self.consumer = consumer
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending: str | None = None
        self._state = StreamState.IDLE
        self._emitted = 0

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def pending(self) -> str | None:
        """The unterminated line fragment carried to the next chunk."""
        return self._pending

    @property
    def emitted(self) -> int:
        """Number of records emitted so far."""
        return self._emitted

    def _check_open(self, operation: str) -> None:
        if self._state is not StreamState.IDLE:
            raise StreamStateError(
                f"Cannot call {operation}() on a {self._state.value} transformer"
            )

    def _emit(self, lines: str | list[str]) -> list[Record]:
        try:
            records = parse(lines, self.options, self.registry)
        except Exception:
            self._state = StreamState.FAILED
            self._pending = None
            raise
        if self.consumer is not None:
            for record in records:
                self.consumer(record)
        self._emitted += len(records)
        return records

    def process_chunk(self, chunk: str | bytes) -> list[Record]:
        """Consume one chunk and emit a record for every completed line.

        Returns:
            The records emitted for this chunk, in input order.

        Raises:
            FormatNotRecognizedError: If the schema cannot be resolved.
                The transformer is unusable afterwards.
            StreamStateError: If the transformer is closed or failed.
        """
        self._check_open("process_chunk")

        if isinstance(chunk, (bytes, bytearray)):
            text = self._decoder.decode(bytes(chunk))
        else:
            # Bytes held back from an earlier chunk precede this text
            text = self._decoder.decode(b"", final=True) + chunk

        if self._pending:
            text = self._pending + text
        self._pending = None

        lines = text.split("\n")
        self._pending = lines.pop()

        logger.debug(
            "Chunk of %d chars: %d complete lines, %d chars pending",
            len(text), len(lines), len(self._pending),
        )
        return self._emit(lines)

    def finish(self) -> list[Record]:
        """Flush the pending fragment as the final line and close.

        Returns:
            Zero or one record (the fragment may be empty, a comment,
            or blank).

        Raises:
            FormatNotRecognizedError: If the schema cannot be resolved.
            StreamStateError: If the transformer is closed or failed.
        """
        self._check_open("finish")

        tail = self._decoder.decode(b"", final=True)
        if tail:
            self._pending = (self._pending or "") + tail

        records: list[Record] = []
        if self._pending:
            records = self._emit(self._pending)
        self._pending = None
        self._state = StreamState.CLOSED

        logger.info("Stream finished: %d records emitted", self._emitted)
        return records


def transform_chunks(
    chunks: Iterable[str | bytes],
    options: OptionsLike = None,
    registry: SchemaRegistry | None = None,
    encoding: str = "utf-8",
) -> Iterator[Record]:
    """Drive one transformer over *chunks*, yielding records in order.

    ``finish()`` is called once the chunks are exhausted, so a final line
    without a trailing newline is still emitted.
    """
    transformer = StonLogTransform(options, registry=registry, encoding=encoding)
    for chunk in chunks:
        yield from transformer.process_chunk(chunk)
    yield from transformer.finish()


def iter_file_chunks(
    source: str | Path | BinaryIO,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Iterator[bytes]:
    """Read a file path or binary stream in fixed-size byte chunks."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    if isinstance(source, (str, Path)):
        with open(source, "rb") as f:
            yield from iter(lambda: f.read(chunk_size), b"")
    else:
        yield from iter(lambda: source.read(chunk_size), b"")

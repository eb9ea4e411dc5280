"""
Schema registry for ston-log-transform.

Loads schema YAML files from ston_log_transform/schemas/ and exposes them
through an immutable ``SchemaRegistry``. Each schema defines:
- format_name: log format identifier (e.g., "ston")
- version: format version string (e.g., "1.0")
- fields: the ordered list of field names, one per position on a log line

Schemas are looked up by the exact key ``"{format}_v{version}"``
(e.g., ``"ston_v1.0"``). The registry is built once and passed by
reference to the parser and the stream transformer; nothing mutates it
afterwards.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from ston_log_transform.exceptions import FormatNotRecognizedError, SchemaRegistryError

logger = logging.getLogger(__name__)

# Directory containing schema YAML files (sibling package)
_SCHEMAS_DIR = Path(__file__).parent / "schemas"


def schema_key(format_name: str, version: str) -> str:
    """Build the registry key for a format/version pair."""
    return f"{format_name}_v{version}"


class Schema(BaseModel):
    """An ordered positional field schema for one log format version."""

    model_config = ConfigDict(frozen=True)

    format_name: str
    version: str
    description: str = ""
    field_names: tuple[str, ...]

    @field_validator("field_names")
    @classmethod
    def _check_field_names(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("A schema must define at least one field")
        if any(not name for name in value):
            raise ValueError("Field names must be non-empty strings")
        duplicates = sorted({name for name in value if value.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate field names: {duplicates}")
        return value

    @property
    def key(self) -> str:
        return schema_key(self.format_name, self.version)

    @property
    def field_count(self) -> int:
        return len(self.field_names)


class SchemaRegistry:
    """Immutable mapping of schema key -> Schema.

    Args:
        schemas: Schemas to register. Two schemas with the same
            format/version pair are rejected.

    Raises:
        SchemaRegistryError: If a key is registered twice.
    """

    def __init__(self, schemas: Iterable[Schema] = ()) -> None:
        table: dict[str, Schema] = {}
        for schema in schemas:
            if schema.key in table:
                raise SchemaRegistryError(
                    f"Schema '{schema.key}' is registered more than once"
                )
            table[schema.key] = schema
        self._schemas = MappingProxyType(table)

    def __contains__(self, key: object) -> bool:
        return key in self._schemas

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    def __repr__(self) -> str:
        return f"SchemaRegistry({sorted(self._schemas)})"

    def keys(self) -> list[str]:
        return list(self._schemas)

    def get(self, key: str) -> Schema | None:
        """Return the schema registered under *key*, or ``None``."""
        return self._schemas.get(key)

    def lookup(self, format_name: str, version: str) -> Schema:
        """Resolve a format/version pair to its schema.

        Raises:
            FormatNotRecognizedError: If no schema matches the computed key.
        """
        key = schema_key(format_name, version)
        schema = self._schemas.get(key)
        if schema is None:
            raise FormatNotRecognizedError(
                f"Format not recognized: {format_name} "
                f"(no schema registered for '{key}'; "
                f"known: {sorted(self._schemas)})"
            )
        return schema


def load_schema(path: Path) -> Schema:
    """Load a single schema YAML file.

    Raises:
        SchemaRegistryError: If the file is empty or fails validation.
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if not isinstance(raw, dict):
        raise SchemaRegistryError(f"Schema file is empty or malformed: {path}")

    try:
        return Schema(
            format_name=raw["format_name"],
            # Unquoted YAML versions (1.0) arrive as floats
            version=str(raw["version"]),
            description=raw.get("description", ""),
            field_names=tuple(raw.get("fields") or ()),
        )
    except (KeyError, ValueError) as exc:
        raise SchemaRegistryError(f"Invalid schema file {path}: {exc}") from exc


def load_registry(schemas_dir: Path | None = None) -> SchemaRegistry:
    """Load every schema YAML file in a directory into a registry.

    Args:
        schemas_dir: Directory to scan for .yaml files. Defaults to
            the built-in schemas/ directory.

    Returns:
        A SchemaRegistry holding one entry per file.
    """
    schemas_dir = schemas_dir or _SCHEMAS_DIR
    schemas: list[Schema] = []
    for yaml_path in sorted(schemas_dir.glob("*.yaml")):
        schema = load_schema(yaml_path)
        logger.debug(
            "Loaded schema: %s (%d fields) from %s",
            schema.key, schema.field_count, yaml_path,
        )
        schemas.append(schema)
    registry = SchemaRegistry(schemas)
    logger.info("Loaded %d schemas from %s", len(registry), schemas_dir)
    return registry


@lru_cache(maxsize=None)
def default_registry() -> SchemaRegistry:
    """Return the registry of built-in schemas, loaded on first use."""
    return load_registry()

"""
Configuration models and YAML I/O for ston-log-transform.

Key models:
- ParseOptions: Which log format/version to parse (selects the schema).
- OutputConfig: Output format, input text encoding and read chunk size.
- ConvertConfig: Top-level config used by the CLI (options + output).

Key functions:
- resolve_options(options) -> ParseOptions: Accept None, a mapping or a model.
- load_config(path) -> ConvertConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ston_log_transform.exceptions import ConfigValidationError
from ston_log_transform.schema_registry import schema_key

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "ston"
DEFAULT_VERSION = "1.0"


class ParseOptions(BaseModel):
    """Selects the schema used to parse each line.

    Only used to compute the schema key; an unknown combination is not
    rejected here but when the first line is parsed.
    """

    model_config = ConfigDict(frozen=True)

    format: str = Field(DEFAULT_FORMAT, description="Log format name")
    version: str = Field(DEFAULT_VERSION, description="Log format version")

    @field_validator("format", "version", mode="before")
    @classmethod
    def _coerce_to_str(cls, value: Any) -> Any:
        # YAML reads an unquoted 1.0 as a float
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @property
    def schema_key(self) -> str:
        return schema_key(self.format, self.version)


class OutputConfig(BaseModel):
    """Output and input-reading settings for file conversion."""

    output_format: Literal["jsonl", "csv", "parquet"] = Field(
        "jsonl", description="Format of the written records"
    )
    encoding: str = Field("utf-8", description="Text encoding of the input log")
    chunk_size: int = Field(
        65536, gt=0, description="Number of bytes read from the input per chunk"
    )


class ConvertConfig(BaseModel):
    """Top-level configuration for converting a log file."""

    options: ParseOptions = Field(default_factory=ParseOptions)
    output: OutputConfig = Field(default_factory=OutputConfig)


def resolve_options(
    options: ParseOptions | Mapping[str, Any] | None = None,
) -> ParseOptions:
    """Normalize the accepted option shapes into a ParseOptions.

    ``None`` and missing keys fall back to the defaults
    (``format="ston"``, ``version="1.0"``). Keys other than
    ``format``/``version`` are ignored.
    """
    if options is None:
        return ParseOptions()
    if isinstance(options, ParseOptions):
        return options
    known = {
        key: str(options[key])
        for key in ("format", "version")
        if options.get(key) is not None
    }
    return ParseOptions(**known)


def load_config(path: str | Path) -> ConvertConfig:
    """Load and validate a YAML convert config into a ConvertConfig model.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    logger.info("Loaded config from %s", path)
    return ConvertConfig.model_validate(raw)


def save_config(config: ConvertConfig, path: str | Path) -> None:
    """Serialize a ConvertConfig to YAML with a header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# ston-log-transform configuration\n\n")
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    logger.info("Saved config to %s", path)

"""
Custom exception hierarchy for ston-log-transform.

Callers can catch ``StonLogError`` to handle every failure raised by this
package, or a specific subclass (e.g., FormatNotRecognizedError vs
StreamStateError) when they need to react differently.
"""


class StonLogError(Exception):
    """Base exception for all ston-log-transform errors."""


class FormatNotRecognizedError(StonLogError):
    """Raised when no schema is registered for the requested format/version.

    This is the only error the parsing core raises. It is fatal for the
    call that triggered it and, in streaming mode, for the whole stream.
    """


class SchemaRegistryError(StonLogError):
    """Raised when a schema definition is invalid or registered twice."""


class StreamStateError(StonLogError):
    """Raised when a transformer is fed after it was finished or failed."""


class ConfigValidationError(StonLogError):
    """Raised when a convert config file is empty or cannot be used."""


class ExportError(StonLogError):
    """Raised when the exporter fails to write records.

    For example, an unsupported output format, or a permission error
    while writing the output file.
    """

"""Exception hierarchy for XML to Avro conversion.

Only the fatal conditions are raised. Dropped fields and unsupported
coercions are reported as diagnostics instead (see ``shared.result``).
"""

from typing import Any, Optional


class ConversionError(Exception):
    """Base exception for all conversion failures."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class StructuralAmbiguityError(ConversionError):
    """Raised when a singular schema slot receives more than one tree value.

    The schema under-models the document cardinality: an array was needed.
    """

    def __init__(
        self, field_name: str, count: int, path: Optional[str] = None
    ) -> None:
        message = (
            f"Xml structure issue: {count} values for field name {field_name}. "
            "Possibly array is needed in schema."
        )
        super().__init__(message, path)
        self.field_name = field_name
        self.count = count


class MalformedScalarError(ConversionError, ValueError):
    """Raised when scalar text cannot be parsed as the target primitive."""

    def __init__(
        self,
        text: Any,
        kind: str,
        path: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        message = f"Cannot convert {text!r} to {kind}"
        if path:
            message += f" at '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message, path)
        self.text = text
        self.kind = kind
        self.reason = reason


class SchemaParseError(ConversionError, ValueError):
    """Raised when a schema document cannot be turned into a Schema."""


class MarkupReadError(ConversionError):
    """Raised when the upstream markup reader rejects the document."""


class ContainerWriteError(ConversionError):
    """Raised when a record cannot be written to an Avro container file."""

"""Shared utilities for XML to Avro conversion.

This module provides configuration objects, diagnostic and metrics types,
the exception hierarchy and logging helpers used across all components.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ConverterConfig,
    EncoderConfig,
    GlobalConfig,
    TreeConfig,
)
from .errors import (
    ContainerWriteError,
    ConversionError,
    MalformedScalarError,
    MarkupReadError,
    SchemaParseError,
    StructuralAmbiguityError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    ConversionMetrics,
    DiagnosticCode,
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ConverterConfig",
    "EncoderConfig",
    "GlobalConfig",
    "TreeConfig",
    "ContainerWriteError",
    "ConversionError",
    "MalformedScalarError",
    "MarkupReadError",
    "SchemaParseError",
    "StructuralAmbiguityError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "ConversionMetrics",
    "DiagnosticCode",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]

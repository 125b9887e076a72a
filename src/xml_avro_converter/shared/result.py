"""Diagnostic and metrics types for XML to Avro conversion.

Non-fatal conditions met while encoding (dropped fields, coercions without a
rule) are collected as diagnostic entries rather than raised, so callers can
surface possible data loss without aborting the conversion.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Possible data loss, conversion continued
    ERROR = auto()      # Error conditions that were absorbed


class DiagnosticCode(Enum):
    """Machine-readable classification of non-fatal conversion events."""

    UNSCHEMATIZED_FIELD = auto()    # Tree key with no schema field, dropped
    UNSUPPORTED_COERCION = auto()   # No coercion rule or no union candidate
    MISSING_SCALAR = auto()         # Primitive slot backed by a node without text


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    code: DiagnosticCode
    message: str
    component: str
    path: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert the entry to a JSON-friendly dictionary."""
        return {
            "severity": self.severity.name,
            "code": self.code.name,
            "message": self.message,
            "component": self.component,
            "path": self.path,
            "details": self.details or {},
        }


@dataclass
class ConversionMetrics:
    """Counters collected while building and encoding one document."""

    processing_time_ms: float = 0.0
    elements_processed: int = 0
    attributes_processed: int = 0
    fields_encoded: int = 0
    defaults_applied: int = 0
    fields_dropped: int = 0
    unions_resolved: int = 0
    union_fallbacks: int = 0
    unsupported_coercions: int = 0

    @property
    def elements_per_second(self) -> float:
        """Calculate elements processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.elements_processed * 1000.0) / self.processing_time_ms

    @property
    def has_data_loss(self) -> bool:
        """True when any source data could not be placed in the output."""
        return (
            self.fields_dropped > 0
            or self.union_fallbacks > 0
            or self.unsupported_coercions > 0
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processing_time_ms": self.processing_time_ms,
            "elements_processed": self.elements_processed,
            "attributes_processed": self.attributes_processed,
            "fields_encoded": self.fields_encoded,
            "defaults_applied": self.defaults_applied,
            "fields_dropped": self.fields_dropped,
            "unions_resolved": self.unions_resolved,
            "union_fallbacks": self.union_fallbacks,
            "unsupported_coercions": self.unsupported_coercions,
        }

"""Tests for diagnostics, metrics, errors and logging helpers."""

import logging

import pytest

from xml_avro_converter.shared import (
    ConversionError,
    ConversionMetrics,
    DiagnosticCode,
    DiagnosticEntry,
    DiagnosticSeverity,
    MalformedScalarError,
    configure_logging,
    get_logger,
)


class TestDiagnosticEntry:
    """Test diagnostic entry validation and serialization."""

    def test_to_dict(self) -> None:
        """Test entries serialize with enum names."""
        entry = DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            code=DiagnosticCode.UNSCHEMATIZED_FIELD,
            message="dropped",
            component="schema_encoder",
            path="Root.x",
        )

        assert entry.to_dict() == {
            "severity": "WARNING",
            "code": "UNSCHEMATIZED_FIELD",
            "message": "dropped",
            "component": "schema_encoder",
            "path": "Root.x",
            "details": {},
        }

    def test_empty_message_rejected(self) -> None:
        """Test entries need a message."""
        with pytest.raises(ValueError, match="message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, DiagnosticCode.MISSING_SCALAR, "", "x")

    def test_empty_component_rejected(self) -> None:
        """Test entries need a component."""
        with pytest.raises(ValueError, match="component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, DiagnosticCode.MISSING_SCALAR, "m", "")


class TestConversionMetrics:
    """Test metric helpers."""

    def test_no_loss_by_default(self) -> None:
        """Test fresh metrics report no data loss."""
        assert not ConversionMetrics().has_data_loss

    @pytest.mark.parametrize("counter", ["fields_dropped", "union_fallbacks", "unsupported_coercions"])
    def test_loss_counters(self, counter: str) -> None:
        """Test each loss counter flags data loss."""
        metrics = ConversionMetrics()
        setattr(metrics, counter, 1)
        assert metrics.has_data_loss

    def test_elements_per_second(self) -> None:
        """Test throughput is derived from elements and time."""
        assert ConversionMetrics(processing_time_ms=500, elements_processed=10).elements_per_second == 20.0
        assert ConversionMetrics().elements_per_second == 0.0


class TestErrors:
    """Test exception messages and hierarchy."""

    def test_malformed_scalar_is_value_error(self) -> None:
        """Test scalar errors can be caught as ValueError."""
        error = MalformedScalarError("x", "int", "Root.a", reason="not a base-10 integer")

        assert isinstance(error, ValueError)
        assert isinstance(error, ConversionError)
        assert str(error) == "Cannot convert 'x' to int at 'Root.a': not a base-10 integer"
        assert error.reason == "not a base-10 integer"


class TestLogging:
    """Test correlation-aware logging."""

    def test_records_carry_correlation_fields(self, caplog) -> None:
        """Test component and correlation id are attached to records."""
        logger = get_logger("xml_avro_converter.test", "cid-9", "encoder")

        with caplog.at_level(logging.INFO, logger="xml_avro_converter"):
            logger.info("hello", extra={"path": "Root"})

        record = caplog.records[-1]
        assert record.component == "encoder"
        assert record.correlation_id == "cid-9"
        assert record.path == "Root"

    def test_default_component(self) -> None:
        """Test the component defaults to the last name segment."""
        assert get_logger("xml_avro_converter.tree.builder").component == "builder"

    def test_configure_logging_installs_one_handler(self) -> None:
        """Test repeated configuration reuses the package handler."""
        package_logger = logging.getLogger("xml_avro_converter")

        configure_logging("DEBUG")
        configure_logging("WARNING")

        tagged = [h for h in package_logger.handlers if getattr(h, "_xml_avro_handler", False)]
        assert len(tagged) == 1
        assert package_logger.level == logging.WARNING

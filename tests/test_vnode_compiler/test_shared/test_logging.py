"""Tests for correlation-aware logging."""

import logging

import pytest

from vnode_compiler.shared.logging import CorrelationLogger, configure_logging, get_logger


class TestCorrelationLogger:
    """Test CorrelationLogger behaviour."""

    def test_records_carry_correlation_fields(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that every record includes component and correlation ID."""
        logger = get_logger("vnode_compiler.tests", "req-42", "tests")

        with caplog.at_level(logging.INFO, logger="vnode_compiler.tests"):
            logger.info("Compiled", extra={"node_count": 3})

        record = caplog.records[-1]
        assert record.getMessage() == "Compiled"
        assert record.correlation_id == "req-42"
        assert record.component == "tests"
        assert record.node_count == 3

    def test_component_defaults_to_module_name(self) -> None:
        """Test the default component name."""
        logger = CorrelationLogger("vnode_compiler.tree.builder")
        assert logger.component == "builder"

    def test_child_shares_correlation_id(self) -> None:
        """Test creating a sub-component logger."""
        logger = get_logger("vnode_compiler.tests", "req-1", "compiler")
        child = logger.child("evaluator")

        assert child.correlation_id == "req-1"
        assert child.component == "evaluator"
        assert child.logger is logger.logger

    def test_is_enabled_for(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test level checks."""
        logger = get_logger("vnode_compiler.tests.level")
        with caplog.at_level(logging.ERROR, logger="vnode_compiler.tests.level"):
            assert logger.is_enabled_for(logging.ERROR)
            assert not logger.is_enabled_for(logging.DEBUG)


class TestConfigureLogging:
    """Test handler setup for entry points."""

    def test_invalid_level_rejected(self) -> None:
        """Test that unknown level names are rejected."""
        with pytest.raises(ValueError, match="logging level must be one of"):
            configure_logging("LOUD")

    def test_sets_package_level(self) -> None:
        """Test that the package logger level is applied."""
        package_logger = logging.getLogger("vnode_compiler")
        previous_level = package_logger.level
        previous_handlers = list(package_logger.handlers)
        try:
            configure_logging("debug")
            assert package_logger.level == logging.DEBUG
            assert package_logger.handlers
        finally:
            package_logger.setLevel(previous_level)
            package_logger.handlers = previous_handlers

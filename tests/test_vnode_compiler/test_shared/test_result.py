"""Tests for diagnostics, metrics and the exception hierarchy."""

import pytest

from vnode_compiler.shared import (
    CodeGenerationError,
    CompileMetrics,
    CompilerError,
    DiagnosticEntry,
    DiagnosticSeverity,
    DirectiveConflictError,
    EvaluatorSyntaxError,
    MultipleRootsError,
    SandboxError,
    SandboxViolationError,
    TagMismatchError,
    TemplateSyntaxError,
    UndefinedNameError,
)


class TestDiagnosticEntry:
    """Test DiagnosticEntry validation and conversion."""

    def test_entry_creation(self) -> None:
        """Test creating a diagnostic entry."""
        entry = DiagnosticEntry(
            severity=DiagnosticSeverity.INFO,
            message="Chained directives on <li>: for, if",
            component="code_generator",
            details={"node_type": "li"},
        )

        assert entry.severity == DiagnosticSeverity.INFO
        assert entry.timestamp > 0
        assert entry.to_dict() == {
            "severity": "INFO",
            "message": "Chained directives on <li>: for, if",
            "component": "code_generator",
            "details": {"node_type": "li"},
        }

    def test_empty_message_raises_error(self) -> None:
        """Test that an empty message is rejected."""
        with pytest.raises(ValueError, match="Diagnostic message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.DEBUG, "", "compiler")

    def test_empty_component_raises_error(self) -> None:
        """Test that an empty component is rejected."""
        with pytest.raises(ValueError, match="Diagnostic component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.DEBUG, "message", "")

    def test_to_dict_omits_empty_details(self) -> None:
        """Test that entries without details serialize without them."""
        entry = DiagnosticEntry(DiagnosticSeverity.WARNING, "odd", "compiler")
        assert "details" not in entry.to_dict()


class TestCompileMetrics:
    """Test CompileMetrics derived values."""

    def test_static_ratio(self) -> None:
        """Test the static node ratio."""
        metrics = CompileMetrics(node_count=4, static_node_count=3)
        assert metrics.static_ratio == 0.75

    def test_static_ratio_without_nodes(self) -> None:
        """Test the ratio of an empty metrics object."""
        assert CompileMetrics().static_ratio == 0.0

    def test_characters_per_second(self) -> None:
        """Test throughput calculation."""
        metrics = CompileMetrics(processing_time_ms=500.0, template_length=1000)
        assert metrics.characters_per_second == 2000.0
        assert CompileMetrics(template_length=10).characters_per_second == 0.0

    def test_to_dict_includes_ratio(self) -> None:
        """Test dictionary conversion."""
        data = CompileMetrics(node_count=2, static_node_count=1, code_length=40).to_dict()
        assert data["static_ratio"] == 0.5
        assert data["code_length"] == 40


class TestExceptionHierarchy:
    """Test the compiler exception tree."""

    def test_template_errors(self) -> None:
        """Test the structural error classes."""
        assert issubclass(TagMismatchError, TemplateSyntaxError)
        assert issubclass(MultipleRootsError, TemplateSyntaxError)
        assert issubclass(TemplateSyntaxError, CompilerError)

    def test_sandbox_errors(self) -> None:
        """Test the restricted evaluation error classes."""
        assert issubclass(EvaluatorSyntaxError, SandboxError)
        assert issubclass(SandboxViolationError, SandboxError)
        assert issubclass(SandboxError, CompilerError)

    def test_tag_mismatch_message(self) -> None:
        """Test the tag mismatch message and attributes."""
        error = TagMismatchError("</span>", 5)
        assert str(error) == "No corresponding opening tag found for </span> at offset 5"
        assert error.tag == "</span>"
        assert error.offset == 5

    def test_multiple_roots_message(self) -> None:
        """Test the multiple roots message."""
        error = MultipleRootsError(["p", "p"])
        assert "found 2 (p, p)" in str(error)
        assert error.root_types == ["p", "p"]

    def test_directive_conflict_message(self) -> None:
        """Test the directive conflict message."""
        error = DirectiveConflictError("li", ["for", "if"])
        assert isinstance(error, CodeGenerationError)
        assert str(error) == "Element <li> uses multiple directives: for, if"

    def test_undefined_name_is_name_error(self) -> None:
        """Test that undefined names can be caught as NameError."""
        error = UndefinedNameError("user")
        assert isinstance(error, NameError)
        assert isinstance(error, CompilerError)
        assert error.name == "user"
        assert "'user'" in str(error)

    def test_evaluator_syntax_error_keeps_code(self) -> None:
        """Test that syntax errors carry the offending code."""
        error = EvaluatorSyntaxError("bad", "h(", 1, 3)
        assert error.code == "h("
        assert (error.lineno, error.offset) == (1, 3)

"""Diagnostic and metrics types attached to compiled templates."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Details useful only when inspecting generated code
    INFO = auto()       # Informational messages
    WARNING = auto()    # Template constructs that compiled but look suspicious


@dataclass
class DiagnosticEntry:
    """Single non-fatal observation made while compiling a template."""

    severity: DiagnosticSeverity
    message: str
    component: str
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
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class CompileMetrics:
    """Size and timing figures for one compilation."""

    processing_time_ms: float = 0.0
    template_length: int = 0
    node_count: int = 0
    static_node_count: int = 0
    code_length: int = 0
    comments_stripped: int = 0

    @property
    def static_ratio(self) -> float:
        """Fraction of nodes classified static."""
        if self.node_count == 0:
            return 0.0
        return self.static_node_count / self.node_count

    @property
    def characters_per_second(self) -> float:
        """Template characters compiled per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.template_length * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to a dictionary including derived values."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "template_length": self.template_length,
            "node_count": self.node_count,
            "static_node_count": self.static_node_count,
            "static_ratio": self.static_ratio,
            "code_length": self.code_length,
            "comments_stripped": self.comments_stripped,
        }

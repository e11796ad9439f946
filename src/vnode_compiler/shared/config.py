"""Configuration classes for the template compiler.

``CompilerConfig`` holds the serializable knobs that shape code generation
and evaluation. It is immutable; use ``override`` to derive variants.
"""

import json
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Optional

DIRECTIVE_POLICIES = ("chain", "error")
LOGGING_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
MIN_KEY_LENGTH = 4
MAX_KEY_LENGTH = 64


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class CompilerConfig:
    """Settings for compiling templates into render functions.

    Attributes:
        key_prefix: Prefix of the synthetic ``key`` prop injected into elements
            that do not declare one
        key_length: Number of random hex characters following the prefix
        strict_undefined: Raise ``UndefinedNameError`` for names missing from
            the render scope instead of resolving them to ``None``
        multiple_directives: ``"chain"`` nests every directive found on a node
            in priority order, ``"error"`` rejects nodes with more than one
        strip_comments: Remove ``<!-- ... -->`` regions before parsing
        max_template_length: Upper bound on template size in characters
        logging_level: Level used by entry points that configure logging
    """

    key_prefix: str = "vn-key-"
    key_length: int = 16
    strict_undefined: bool = True
    multiple_directives: str = "chain"
    strip_comments: bool = True
    max_template_length: Optional[int] = None
    logging_level: str = "WARNING"

    # Metadata
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate compiler configuration."""
        for name in ("key_prefix", "multiple_directives", "logging_level"):
            if not isinstance(getattr(self, name), str):
                raise ConfigValidationError(f"{name} must be a string", field_name=name)
        for name in ("strict_undefined", "strip_comments"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigValidationError(f"{name} must be a boolean", field_name=name)
        # bool is an int subclass
        if not isinstance(self.key_length, int) or isinstance(self.key_length, bool):
            raise ConfigValidationError(
                "key_length must be an integer", field_name="key_length"
            )
        if self.max_template_length is not None and (
            not isinstance(self.max_template_length, int)
            or isinstance(self.max_template_length, bool)
        ):
            raise ConfigValidationError(
                "max_template_length must be an integer or None",
                field_name="max_template_length",
            )
        if not self.key_prefix:
            raise ConfigValidationError(
                "key_prefix cannot be empty", field_name="key_prefix"
            )
        if not (MIN_KEY_LENGTH <= self.key_length <= MAX_KEY_LENGTH):
            raise ConfigValidationError(
                f"key_length must be between {MIN_KEY_LENGTH} and {MAX_KEY_LENGTH}",
                field_name="key_length",
            )
        if self.multiple_directives not in DIRECTIVE_POLICIES:
            raise ConfigValidationError(
                f"multiple_directives must be one of {list(DIRECTIVE_POLICIES)}",
                field_name="multiple_directives",
                suggestions=list(DIRECTIVE_POLICIES),
            )
        if self.max_template_length is not None and self.max_template_length <= 0:
            raise ConfigValidationError(
                "max_template_length must be > 0 or None",
                field_name="max_template_length",
            )
        if self.logging_level not in LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {list(LOGGING_LEVELS)}",
                field_name="logging_level",
                suggestions=list(LOGGING_LEVELS),
            )

    def override(self, **kwargs: Any) -> "CompilerConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = CompilerConfig()
            >>> config.override(strict_undefined=False).strict_undefined
            False
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompilerConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files do not
        go unnoticed.
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
            )
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "CompilerConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "CompilerConfig":
        """Create the default configuration."""
        return cls(name="default")

    @classmethod
    def strict(cls) -> "CompilerConfig":
        """Create configuration rejecting ambiguous templates."""
        return cls(
            strict_undefined=True,
            multiple_directives="error",
            name="strict",
            description="Rejects nodes with several directives and undefined names",
        )

    @classmethod
    def lenient(cls) -> "CompilerConfig":
        """Create configuration resolving undefined names to None."""
        return cls(
            strict_undefined=False,
            multiple_directives="chain",
            name="lenient",
            description="Undefined scope names render as None",
        )

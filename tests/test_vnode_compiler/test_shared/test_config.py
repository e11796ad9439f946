"""Tests for compiler configuration."""

import json

import pytest

from vnode_compiler.shared.config import (
    CompilerConfig,
    ConfigError,
    ConfigValidationError,
)


class TestCompilerConfig:
    """Test suite for CompilerConfig."""

    def test_default_configuration(self) -> None:
        """Test default configuration values."""
        config = CompilerConfig()

        assert config.key_prefix == "vn-key-"
        assert config.key_length == 16
        assert config.strict_undefined is True
        assert config.multiple_directives == "chain"
        assert config.strip_comments is True
        assert config.max_template_length is None
        assert config.logging_level == "WARNING"

    def test_configuration_is_immutable(self) -> None:
        """Test that configuration fields cannot be reassigned."""
        config = CompilerConfig()

        with pytest.raises(AttributeError):
            config.key_prefix = "other-"  # type: ignore[misc]

    def test_empty_key_prefix_rejected(self) -> None:
        """Test validation of the key prefix."""
        with pytest.raises(ConfigValidationError, match="key_prefix cannot be empty") as info:
            CompilerConfig(key_prefix="")
        assert info.value.field_name == "key_prefix"

    @pytest.mark.parametrize("length", [0, 3, 65])
    def test_key_length_out_of_range_rejected(self, length: int) -> None:
        """Test validation of the key length bounds."""
        with pytest.raises(ConfigValidationError, match="key_length must be between 4 and 64"):
            CompilerConfig(key_length=length)

    def test_key_length_bounds_accepted(self) -> None:
        """Test that the inclusive bounds are valid."""
        assert CompilerConfig(key_length=4).key_length == 4
        assert CompilerConfig(key_length=64).key_length == 64

    def test_unknown_directive_policy_rejected(self) -> None:
        """Test validation of the multiple directive policy."""
        with pytest.raises(ConfigValidationError, match="multiple_directives") as info:
            CompilerConfig(multiple_directives="first")
        assert info.value.suggestions == ["chain", "error"]

    def test_invalid_max_template_length_rejected(self) -> None:
        """Test validation of the template length limit."""
        with pytest.raises(ConfigValidationError, match="max_template_length"):
            CompilerConfig(max_template_length=0)

    def test_invalid_logging_level_rejected(self) -> None:
        """Test validation of the logging level."""
        with pytest.raises(ConfigValidationError, match="logging_level"):
            CompilerConfig(logging_level="VERBOSE")

    @pytest.mark.parametrize("field_name, value", [
        ("key_length", "16"),
        ("key_length", True),
        ("key_length", 16.0),
        ("key_prefix", 7),
        ("strict_undefined", "yes"),
        ("strip_comments", 1),
        ("max_template_length", "100"),
        ("multiple_directives", None),
        ("logging_level", 10),
    ])
    def test_wrongly_typed_values_rejected(self, field_name: str, value: object) -> None:
        """Test that wrongly typed values fail validation instead of comparison."""
        with pytest.raises(ConfigValidationError, match=field_name) as info:
            CompilerConfig.from_dict({field_name: value})
        assert info.value.field_name == field_name

    def test_validation_error_is_config_error(self) -> None:
        """Test the configuration exception hierarchy."""
        assert issubclass(ConfigValidationError, ConfigError)


class TestConfigOverridesAndSerialization:
    """Test deriving and serializing configurations."""

    def test_override_creates_new_instance(self) -> None:
        """Test that override leaves the original untouched."""
        config = CompilerConfig()
        lenient = config.override(strict_undefined=False)

        assert lenient.strict_undefined is False
        assert config.strict_undefined is True

    def test_override_validates_values(self) -> None:
        """Test that overridden values are validated."""
        with pytest.raises(ConfigValidationError):
            CompilerConfig().override(key_length=2)

    def test_override_rejects_unknown_fields(self) -> None:
        """Test that misspelled fields are reported."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration fields: key_prefx"):
            CompilerConfig().override(key_prefx="x-")

    def test_to_dict_and_from_dict(self) -> None:
        """Test dictionary conversion in both directions."""
        config = CompilerConfig(key_prefix="k-", max_template_length=500)
        data = config.to_dict()

        assert data["key_prefix"] == "k-"
        assert data["max_template_length"] == 500
        assert CompilerConfig.from_dict(data) == config

    def test_from_dict_rejects_unknown_keys(self) -> None:
        """Test that unknown keys in dictionaries are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration fields"):
            CompilerConfig.from_dict({"strict": True})

    def test_from_dict_rejects_non_mapping(self) -> None:
        """Test that non-mapping input is rejected."""
        with pytest.raises(ConfigValidationError, match="must be a mapping"):
            CompilerConfig.from_dict(["chain"])  # type: ignore[arg-type]

    def test_json_round_trip(self) -> None:
        """Test JSON serialization."""
        config = CompilerConfig.strict()
        restored = CompilerConfig.from_json(config.to_json())

        assert restored == config
        assert json.loads(config.to_json())["multiple_directives"] == "error"

    def test_from_json_invalid_json(self) -> None:
        """Test that malformed JSON is reported as a validation error."""
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            CompilerConfig.from_json("{not json")


class TestConfigPresets:
    """Test preset factory methods."""

    def test_default_preset(self) -> None:
        """Test the default preset."""
        config = CompilerConfig.default()
        assert config.name == "default"
        assert config.multiple_directives == "chain"

    def test_strict_preset(self) -> None:
        """Test the strict preset."""
        config = CompilerConfig.strict()
        assert config.multiple_directives == "error"
        assert config.strict_undefined is True

    def test_lenient_preset(self) -> None:
        """Test the lenient preset."""
        config = CompilerConfig.lenient()
        assert config.strict_undefined is False
        assert config.name == "lenient"

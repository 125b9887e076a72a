"""Configuration classes for XML to Avro conversion.

This module provides configuration objects for the tree building and encoding
components, enabling control over collision naming, the date-time heuristic
for long fields, diagnostics and logging.
"""

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

_VALID_READERS = ["dom", "etree", "lxml"]
_VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
_COMPONENTS = ["tree", "encoder", "global_"]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class TreeConfig:
    """Configuration for building the document tree."""

    # Suffix for an attribute whose name is already taken by a child element
    attribute_suffix: str = "_attr"
    strip_namespace_prefixes: bool = True
    max_depth: int = 500
    reader: str = "dom"

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if not self.attribute_suffix:
            raise ValueError("attribute_suffix cannot be empty")
        if ":" in self.attribute_suffix:
            raise ValueError("attribute_suffix cannot contain ':'")
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")
        if self.reader not in _VALID_READERS:
            raise ValueError(f"reader must be one of {_VALID_READERS}")


@dataclass
class EncoderConfig:
    """Configuration for schema-driven encoding."""

    # Long fields whose text contains the marker are parsed as date-times
    enable_datetime_heuristic: bool = True
    datetime_marker: str = "T"
    report_unschematized_fields: bool = True
    record_diagnostics: bool = True

    def __post_init__(self) -> None:
        """Validate encoder configuration."""
        if self.enable_datetime_heuristic and not self.datetime_marker:
            raise ValueError(
                "datetime_marker cannot be empty when the heuristic is enabled"
            )


@dataclass
class GlobalConfig:
    """Settings shared by every component."""

    logging_level: str = "WARNING"
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in _VALID_LOG_LEVELS:
            raise ValueError(f"logging_level must be one of {_VALID_LOG_LEVELS}")


@dataclass(frozen=True)
class ConverterConfig:
    """Complete configuration for a conversion.

    Immutable, so a single instance can be shared between converters.
    """

    tree: TreeConfig = field(default_factory=TreeConfig)
    encoder: EncoderConfig = field(default_factory=EncoderConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    # Metadata
    version: str = "1.0.0"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete converter configuration."""
        try:
            self.tree.__post_init__()
            self.encoder.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "ConverterConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override

        Returns:
            New ConverterConfig instance with overrides applied

        Example:
            >>> config = ConverterConfig()
            >>> new_config = config.override(
            ...     tree__attribute_suffix="_at",
            ...     encoder__enable_datetime_heuristic=False
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.rsplit("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENTS:
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    f.name: _dataclass_to_dict(getattr(obj, f.name))
                    for f in fields(obj)
                }
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConverterConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files do not
        silently fall back to defaults.
        """
        component_types = {
            "tree": TreeConfig,
            "encoder": EncoderConfig,
            "global_": GlobalConfig,
        }
        top_level = {f.name for f in fields(cls)}

        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in top_level:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}",
                    field_name=key,
                    suggestions=sorted(top_level),
                )
            if key in component_types:
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"Configuration section '{key}' must be an object",
                        field_name=key,
                    )
                try:
                    values[key] = component_types[key](**value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                values[key] = value

        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ConverterConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Path) -> "ConverterConfig":
        """Load configuration from a JSON file."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
        return cls.from_json(text)

    # Preset factory methods
    @classmethod
    def default(cls) -> "ConverterConfig":
        """Create the default configuration."""
        return cls(name="default")

    @classmethod
    def strict_types(cls) -> "ConverterConfig":
        """Create a preset that never reinterprets long text as a date-time."""
        return cls(
            encoder=EncoderConfig(enable_datetime_heuristic=False),
            name="strict_types",
            description="Long fields are always parsed as base-10 integers",
        )

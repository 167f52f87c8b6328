"""Configuration classes for DOM navigation.

This module provides configuration objects for the tree builder, the command
interpreter and the global runtime settings.
"""

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .exceptions import ConfigValidationError

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_COMPONENT_FIELDS = ["builder", "interpreter", "global_"]


@dataclass
class BuilderConfig:
    """Configuration for markup parsing and tree construction."""

    closing_marker: str = "</n>"
    quote_char: str = "'"
    max_depth: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate builder configuration."""
        if not isinstance(self.closing_marker, str):
            raise ValueError("closing_marker must be a string")
        if not self.closing_marker.strip():
            raise ValueError("closing_marker cannot be empty")
        if self.closing_marker != self.closing_marker.strip():
            raise ValueError("closing_marker cannot have leading or trailing whitespace")
        if not isinstance(self.quote_char, str) or len(self.quote_char) != 1:
            raise ValueError("quote_char must be a single character")
        if self.quote_char in self.closing_marker:
            raise ValueError("quote_char cannot appear in closing_marker")
        if self.max_depth is not None and (
            isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int)
        ):
            raise ValueError("max_depth must be an integer or None")
        if self.max_depth is not None and self.max_depth <= 0:
            raise ValueError("max_depth must be > 0 or None")


@dataclass
class InterpreterConfig:
    """Configuration for instruction execution and output."""

    case_header: str = "Case {number}:"

    def __post_init__(self) -> None:
        """Validate interpreter configuration."""
        if not isinstance(self.case_header, str):
            raise ValueError("case_header must be a string")
        if "{number}" not in self.case_header:
            raise ValueError("case_header must contain the {number} placeholder")
        try:
            self.case_header.format(number=1)
        except (IndexError, KeyError, ValueError) as e:
            raise ValueError(f"case_header is not a valid format string: {e}") from e


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    logging_level: str = "WARNING"
    enable_profiling: bool = False
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if not isinstance(self.enable_profiling, bool):
            raise ValueError("enable_profiling must be a boolean")
        if self.correlation_id is not None and not isinstance(self.correlation_id, str):
            raise ValueError("correlation_id must be a string or None")
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {VALID_LOGGING_LEVELS}")


@dataclass(frozen=True)
class NavigatorConfig:
    """Complete configuration for a navigation run.

    Immutable once created; use ``override`` to derive a modified copy.
    """

    builder: BuilderConfig = field(default_factory=BuilderConfig)
    interpreter: InterpreterConfig = field(default_factory=InterpreterConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete navigator configuration."""
        try:
            self.builder.__post_init__()
            self.interpreter.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "NavigatorConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override, nested with ``__``

        Returns:
            New NavigatorConfig instance with overrides applied

        Example:
            >>> config = NavigatorConfig()
            >>> new_config = config.override(
            ...     builder__closing_marker="</node>",
            ...     global___logging_level="DEBUG",
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                # "global___x" splits as ("global", "_x")
                if component == "global" and field_name.startswith("_"):
                    component, field_name = "global_", field_name[1:]
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for field_name in _COMPONENT_FIELDS:
            current_config = getattr(self, field_name)
            if field_name in nested_overrides:
                try:
                    new_fields[field_name] = replace(
                        current_config, **nested_overrides[field_name]
                    )
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=field_name) from e
            else:
                new_fields[field_name] = current_config

        for key, value in nested_overrides.items():
            if key not in _COMPONENT_FIELDS:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NavigatorConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in config files surface early.
        """
        def _dict_to_dataclass(data_dict: Dict[str, Any], target_class: type) -> Any:
            if not isinstance(data_dict, dict):
                raise ConfigValidationError(
                    f"Expected a mapping for {target_class.__name__}"
                )
            unknown = set(data_dict) - set(target_class.__dataclass_fields__)
            if unknown:
                raise ConfigValidationError(
                    f"Unknown {target_class.__name__} fields: {sorted(unknown)}",
                    field_name=sorted(unknown)[0],
                    suggestions=sorted(target_class.__dataclass_fields__),
                )

            field_values: Dict[str, Any] = {}
            for field_name, field_info in target_class.__dataclass_fields__.items():
                if field_name not in data_dict:
                    continue
                value = data_dict[field_name]
                if hasattr(field_info.type, "__dataclass_fields__"):
                    field_values[field_name] = _dict_to_dataclass(value, field_info.type)
                else:
                    field_values[field_name] = value
            return target_class(**field_values)

        try:
            return _dict_to_dataclass(data, cls)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "NavigatorConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "NavigatorConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigValidationError(f"Could not read config file {path}: {e}") from e
        return cls.from_json(content)

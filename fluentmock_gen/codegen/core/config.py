"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Any, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


# Strictness used when nothing else is configured: unconfigured calls fail.
DEFAULT_MOCK_BEHAVIOR = "Strict"

VALID_MOCK_BEHAVIORS = ("Strict", "Loose")


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    output_dir: Optional[str] = None

    # Namespacing
    namespace_prefix: Optional[str] = None   # usually the host assembly name
    generated_namespace: str = "FluentMock"

    # Builder naming
    builder_suffix: str = "Builder"
    interface_prefix: str = "I"

    # Mock settings
    default_mock_behavior: str = DEFAULT_MOCK_BEHAVIOR

    # Code style settings
    indent_size: int = 2
    use_tabs: bool = False
    line_ending: str = "\n"

    # Additional metadata
    add_comments: bool = True
    nullable_context: bool = True

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)

    @property
    def indent(self) -> str:
        """One level of indentation."""
        return "\t" if self.use_tabs else " " * self.indent_size

    @property
    def namespace_prefix_with_dot(self) -> str:
        """The namespace prefix ready to be prepended (``""`` or ``"Prefix."``)."""
        prefix = (self.namespace_prefix or "").strip(". ")
        return f"{prefix}." if prefix else ""

    @property
    def support_namespace(self) -> str:
        """Namespace holding the shared support definitions."""
        return f"{self.namespace_prefix_with_dot}{self.generated_namespace}"

    @property
    def mock_behavior(self) -> str:
        """Default mock behavior normalised to its emitted spelling."""
        return normalize_mock_behavior(self.default_mock_behavior)


def normalize_mock_behavior(value: str) -> str:
    """Map ``strict``/``LOOSE``/... onto ``Strict``/``Loose``."""
    for behavior in VALID_MOCK_BEHAVIORS:
        if str(value).strip().lower() == behavior.lower():
            return behavior
    raise ConfigError(
        f"Invalid mock behavior: {value!r}. Expected one of: {', '.join(VALID_MOCK_BEHAVIORS)}"
    )


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["moq"] = {
            "generated_namespace": "FluentMock",
            "builder_suffix": "Builder",
            "interface_prefix": "I",
            "default_mock_behavior": DEFAULT_MOCK_BEHAVIOR,
            "indent_size": 2,
            "add_comments": True,
            "nullable_context": True,
        }

    def get_config(self, language: str = "moq", custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        base_config = dict(self._configs.get(language, {}))

        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)

        if custom_config:
            base_config.update(custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration file %s", path)
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get('custom', {}))
            existing_custom.update(custom_args)
            config_args['custom'] = existing_custom

        return GeneratorConfig(**config_args)

    def validate_config(self, config: GeneratorConfig) -> list[str]:
        """
        Validate a configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        try:
            normalize_mock_behavior(config.default_mock_behavior)
        except ConfigError as e:
            warnings.append(str(e))

        if not _is_dotted_identifier(config.generated_namespace):
            warnings.append(f"Invalid generated_namespace: {config.generated_namespace!r}")

        if config.namespace_prefix and not _is_dotted_identifier(config.namespace_prefix.strip(".")):
            warnings.append(f"Invalid namespace_prefix: {config.namespace_prefix!r}")

        if not config.builder_suffix.isidentifier():
            warnings.append(f"Invalid builder_suffix: {config.builder_suffix!r}")

        if config.indent_size < 0:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        if config.line_ending not in {"\n", "\r\n"}:
            warnings.append(f"Unusual line_ending: {config.line_ending!r}")

        return warnings


def _is_dotted_identifier(value: str) -> bool:
    return bool(value) and all(part.isidentifier() for part in value.split("."))


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(language: str = "moq", custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)


"""
fluentmock_gen code generation module.

Generates fluent mock builders from resolved interface descriptors.
"""

from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .core.config import ConfigManager, GeneratorConfig, load_config
from .core.generator import CodeGenerator, GenerationResult, GeneratorError, generate_code
from .core.loader import DescriptorError, DescriptorSet, load_descriptors
from .core.model import GenerationBatch, TargetDescriptor, TypeRef
from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    get_registry,
    list_supported_languages,
    register_generator,
)


def resolve_config(
    descriptors: DescriptorSet,
    language: str = "moq",
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
) -> GeneratorConfig:
    """
    Merge a generator configuration with what the descriptor document says.

    The document's assembly name becomes the namespace prefix unless the
    configuration sets one explicitly.
    """
    if isinstance(config, GeneratorConfig):
        final_config = config
    elif isinstance(config, (str, Path)):
        final_config = load_config(language, config_file=config)
    else:
        final_config = load_config(language, custom_config=config)

    if final_config.namespace_prefix is None and descriptors.assembly_name:
        final_config = replace(final_config, namespace_prefix=descriptors.assembly_name)
    return final_config


def generate_from_descriptors(
    document: Any,
    language: str = "moq",
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
) -> GenerationResult:
    """
    Generate builders from a parsed descriptor document.

    Args:
        document: Parsed JSON descriptor document
        language: Generator name or alias
        config: Generator configuration dict, path or instance

    Returns:
        GenerationResult with one source per blob
    """
    descriptors = load_descriptors(document)
    registry = get_registry()
    primary = registry.resolve_name(language)
    generator = registry.create_generator(primary, resolve_config(descriptors, primary, config))
    return generate_code(generator, descriptors.batch)


__version__ = "0.1.0"

__all__ = [
    "CodeGenerator",
    "ConfigManager",
    "DescriptorError",
    "DescriptorSet",
    "GenerationBatch",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorError",
    "GeneratorRegistry",
    "RegistryError",
    "TargetDescriptor",
    "TypeRef",
    "generate_code",
    "generate_from_descriptors",
    "get_generator",
    "get_language_info",
    "get_registry",
    "list_supported_languages",
    "load_descriptors",
    "register_generator",
    "resolve_config",
]

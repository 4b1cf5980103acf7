"""
Core code generation components.

Shared model, configuration, templating and text assembly used by every
builder generator.
"""

from .config import ConfigError, ConfigManager, GeneratorConfig, load_config
from .generator import CodeGenerator, GenerationResult, GeneratorError, generate_code
from .loader import DescriptorError, DescriptorLoader, DescriptorSet, load_descriptors
from .model import (
    GenerationBatch,
    MemberKind,
    MethodDescriptor,
    OtherMemberDescriptor,
    ParameterDescriptor,
    PassingMode,
    PropertyDescriptor,
    TargetDescriptor,
    TypeKind,
    TypeRef,
)
from .naming import NameSanitizer
from .source_builder import SourceBuilder
from .templates import TemplateEngine, TemplateError

__all__ = [
    "CodeGenerator",
    "ConfigError",
    "ConfigManager",
    "DescriptorError",
    "DescriptorLoader",
    "DescriptorSet",
    "GenerationBatch",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorError",
    "MemberKind",
    "MethodDescriptor",
    "NameSanitizer",
    "OtherMemberDescriptor",
    "ParameterDescriptor",
    "PassingMode",
    "PropertyDescriptor",
    "SourceBuilder",
    "TargetDescriptor",
    "TemplateEngine",
    "TemplateError",
    "TypeKind",
    "TypeRef",
    "generate_code",
    "load_config",
    "load_descriptors",
]

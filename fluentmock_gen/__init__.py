"""fluentmock_gen: fluent Moq builder generation for C# interfaces."""

from .codegen import (
    GenerationResult,
    GeneratorConfig,
    __version__,
    generate_from_descriptors,
    load_descriptors,
)

__all__ = [
    "GenerationResult",
    "GeneratorConfig",
    "__version__",
    "generate_from_descriptors",
    "load_descriptors",
]

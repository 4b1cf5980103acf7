"""
Language-specific builder generators.

This module contains the generators for the supported mocking stacks.
"""

from .csharp import CSharpMoqGenerator, create_generator as create_moq_generator

__all__ = ["CSharpMoqGenerator", "create_moq_generator"]

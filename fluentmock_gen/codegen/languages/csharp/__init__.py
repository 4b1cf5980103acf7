"""
C# builder generator module.

Generates Moq-backed fluent builder classes from resolved interface descriptors.
"""

from .builder_info import BuilderInfo, BuilderInfoCache
from .classifier import (
    Classification,
    ClassifiedMember,
    MemberClassifier,
    NestedCandidate,
    TargetPlan,
    enumerate_members,
)
from .facade import BufferAdapterSynthesizer
from .generator import CSharpMoqGenerator
from .naming import builder_name_for, create_csharp_sanitizer
from .overloads import OverloadSynthesizer
from .types import CSharpTypeFormatter

__all__ = [
    "BufferAdapterSynthesizer",
    "BuilderInfo",
    "BuilderInfoCache",
    "CSharpMoqGenerator",
    "CSharpTypeFormatter",
    "Classification",
    "ClassifiedMember",
    "MemberClassifier",
    "NestedCandidate",
    "OverloadSynthesizer",
    "TargetPlan",
    "builder_name_for",
    "create_csharp_sanitizer",
    "enumerate_members",
    "create_generator",
]


def create_generator(namespace_prefix: str = None, **kwargs):
    """
    Create a C# builder generator.

    Args:
        namespace_prefix: Optional prefix for the shared support namespace
        **kwargs: Additional generator options (default_mock_behavior, indent_size, ...)

    Returns:
        Configured CSharpMoqGenerator instance
    """
    return CSharpMoqGenerator({"namespace_prefix": namespace_prefix, **kwargs})

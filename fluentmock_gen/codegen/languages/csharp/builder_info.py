"""
Builder identity for generated targets.

Every reference to a target's builder, whether from the target's own
blob, a nested-target setter or a list-builder element, goes through one
cache so that all of them agree on the builder's name.
"""

from dataclasses import dataclass
from typing import Dict

from ....logging_config import get_logger
from ...core.model import TypeRef
from .naming import builder_name_for
from .types import CSharpTypeFormatter

logger = get_logger(__name__)


@dataclass(frozen=True)
class BuilderInfo:
    """Naming tuple for one target's builder."""

    target_namespace: str
    target_full_name: str
    builder_name: str
    builder_full_name: str

    @property
    def builder_namespace(self) -> str:
        return self.builder_full_name.rpartition(".")[0]

    @property
    def builder_global_name(self) -> str:
        """Builder name qualified with ``global::``."""
        return f"global::{self.builder_full_name}"


class BuilderInfoCache:
    """
    Identity cache from type to :class:`BuilderInfo`.

    Keyed by structural type identity, so same-named types in different
    namespaces get distinct entries and every reference to one type maps
    to a single computed value. Lives for one generation pass.
    """

    def __init__(self, formatter: CSharpTypeFormatter = None, generated_namespace: str = "FluentMock",
                 interface_prefix: str = "I", builder_suffix: str = "Builder"):
        self.formatter = formatter or CSharpTypeFormatter()
        self.generated_namespace = generated_namespace
        self.interface_prefix = interface_prefix
        self.builder_suffix = builder_suffix
        self._cache: Dict[TypeRef, BuilderInfo] = {}

    def get_info(self, type_ref: TypeRef) -> BuilderInfo:
        """Return the builder identity for ``type_ref``, computing it on first use."""
        info = self._cache.get(type_ref)
        if info is None:
            info = self._compute(type_ref)
            self._cache[type_ref] = info
            logger.debug("Builder for %s is %s", type_ref.qualified_name, info.builder_full_name)
        return info

    def _compute(self, type_ref: TypeRef) -> BuilderInfo:
        namespace = type_ref.namespace
        builder_name = builder_name_for(type_ref.name, self.interface_prefix, self.builder_suffix)
        builder_namespace = f"{namespace}.{self.generated_namespace}" if namespace else self.generated_namespace

        return BuilderInfo(
            target_namespace=namespace,
            target_full_name=self.formatter.format(type_ref.annotated(False)),
            builder_name=builder_name,
            builder_full_name=f"{builder_namespace}.{builder_name}",
        )

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, type_ref: object) -> bool:
        return type_ref in self._cache

    def clear(self):
        self._cache.clear()

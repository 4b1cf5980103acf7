"""
Core type descriptor model for builder generation.

Represents the already-resolved type metadata a generation pass works on:
types, their members, the targets marked for generation, and the batch
that groups all targets of one pass.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union


class TypeKind(Enum):
    """Kinds of types the model distinguishes."""

    INTERFACE = "interface"
    CLASS = "class"
    STRUCT = "struct"
    ARRAY = "array"


class PassingMode(Enum):
    """How a method parameter is passed."""

    BY_VALUE = "value"
    BY_REF = "ref"
    BY_OUT = "out"
    BY_IN = "in"


class MemberKind(Enum):
    """Member shapes a type can declare."""

    PROPERTY = "property"
    METHOD = "method"
    INDEXER = "indexer"
    EVENT = "event"
    OPERATOR = "operator"


# Identity of a type: (namespace, name, type argument keys, array element key)
TypeKey = Tuple[str, str, tuple, Optional[tuple]]


@dataclass(eq=False)
class TypeRef:
    """
    Handle to a type in the host type system.

    Equality and hashing are structural (namespace, name, type arguments and
    array element type), so two references to the same type compare equal
    even when they were produced at different call sites. Nullable
    annotations do not take part in identity.
    """

    name: str
    namespace: str = ""
    kind: TypeKind = TypeKind.CLASS
    type_arguments: Tuple["TypeRef", ...] = ()
    element_type: Optional["TypeRef"] = None
    nullable: bool = False
    is_ref_like: bool = False

    # Declared shape; shared between annotated copies of the same type
    interfaces: List["TypeRef"] = field(default_factory=list)
    members: List["Member"] = field(default_factory=list)

    @property
    def key(self) -> TypeKey:
        """Structural identity of this type."""
        return (
            self.namespace,
            self.name,
            tuple(arg.key for arg in self.type_arguments),
            self.element_type.key if self.element_type is not None else None,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeRef):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"TypeRef({self.qualified_name!r})"

    @property
    def is_array(self) -> bool:
        return self.kind == TypeKind.ARRAY

    @property
    def is_generic(self) -> bool:
        return bool(self.type_arguments)

    @property
    def is_named_type(self) -> bool:
        """True for interfaces, classes and structs (not arrays)."""
        return not self.is_array

    @property
    def qualified_name(self) -> str:
        """Dotted name with generic arguments, e.g. ``System.Collections.Generic.IEnumerable<System.String>``."""
        if self.is_array:
            return f"{self.element_type.qualified_name}[]"

        name = f"{self.namespace}.{self.name}" if self.namespace else self.name
        if self.type_arguments:
            args = ", ".join(arg.qualified_name for arg in self.type_arguments)
            name = f"{name}<{args}>"
        return name

    def is_type(self, namespace: str, name: str, arity: int = 0) -> bool:
        """Check whether this type is ``namespace.name`` with the given generic arity."""
        return (
            self.namespace == namespace
            and self.name == name
            and len(self.type_arguments) == arity
        )

    def annotated(self, nullable: bool) -> "TypeRef":
        """Return this type with a different nullable annotation (same identity)."""
        if nullable == self.nullable:
            return self
        return replace(self, nullable=nullable)

    def all_interfaces(self) -> List["TypeRef"]:
        """
        Every interface this type implements, directly or transitively.

        Order is stable: each directly declared interface is followed by
        its own bases, depth first; duplicates keep their first position.
        """
        seen: Dict[TypeKey, None] = {}
        ordered: List[TypeRef] = []

        def visit(type_ref: "TypeRef"):
            for base in type_ref.interfaces:
                if base.key in seen:
                    continue
                seen[base.key] = None
                ordered.append(base)
                visit(base)

        visit(self)
        return ordered

    def implements(self, other: "TypeRef") -> bool:
        """True if ``other`` is among this type's transitively implemented interfaces."""
        return any(base == other for base in self.all_interfaces())


@dataclass(frozen=True)
class ParameterDescriptor:
    """A single method parameter."""

    name: str
    type: TypeRef
    passing_mode: PassingMode = PassingMode.BY_VALUE


@dataclass(eq=False)
class PropertyDescriptor:
    """A property declared on a type."""

    name: str
    type: TypeRef
    writable: bool = False

    @property
    def kind(self) -> MemberKind:
        return MemberKind.PROPERTY


@dataclass(eq=False)
class MethodDescriptor:
    """An ordinary method declared on a type."""

    name: str
    return_type: TypeRef
    parameters: Tuple[ParameterDescriptor, ...] = ()
    type_parameters: Tuple[str, ...] = ()

    @property
    def kind(self) -> MemberKind:
        return MemberKind.METHOD

    @property
    def is_generic(self) -> bool:
        return bool(self.type_parameters)


@dataclass(eq=False)
class OtherMemberDescriptor:
    """Indexers, events and operators; carried through but never generated for."""

    name: str
    member_kind: MemberKind

    @property
    def kind(self) -> MemberKind:
        return self.member_kind


Member = Union[PropertyDescriptor, MethodDescriptor, OtherMemberDescriptor]


@dataclass(frozen=True)
class TargetDescriptor:
    """A type marked for builder generation."""

    type: TypeRef
    ignored_member_names: frozenset = frozenset()

    @property
    def display_name(self) -> str:
        """Qualified name used to label this target's output."""
        return self.type.qualified_name


class GenerationBatch:
    """
    Ordered, read-only set of targets for one generation pass.

    Answers the two cross-reference questions every classification needs:
    whether a type is itself being generated, and which generated types
    implement a given interface.
    """

    def __init__(self, targets=()):
        ordered: Dict[TypeRef, TargetDescriptor] = {}
        for target in targets:
            ordered.setdefault(target.type, target)
        self._targets: Tuple[TargetDescriptor, ...] = tuple(ordered.values())

    def __iter__(self) -> Iterator[TargetDescriptor]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, type_ref: object) -> bool:
        return self.find(type_ref) is not None

    def __repr__(self) -> str:
        names = ", ".join(t.display_name for t in self._targets)
        return f"GenerationBatch([{names}])"

    @property
    def targets(self) -> Tuple[TargetDescriptor, ...]:
        return self._targets

    def find(self, type_ref) -> Optional[TargetDescriptor]:
        """Return the target whose type is identical to ``type_ref``, if any."""
        if not isinstance(type_ref, TypeRef) or not type_ref.is_named_type:
            return None
        for target in self._targets:
            if target.type == type_ref:
                return target
        return None

    def find_implementations(self, type_ref: TypeRef) -> List[TargetDescriptor]:
        """Return targets that transitively implement ``type_ref``, in batch order."""
        if not type_ref.is_named_type:
            return []
        return [
            target
            for target in self._targets
            if target.type != type_ref and target.type.implements(type_ref)
        ]

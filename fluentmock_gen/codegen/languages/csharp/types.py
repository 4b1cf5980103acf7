"""
C#-specific type printing and shape detection.

Maps resolved type references onto fully qualified C# type syntax and
recognises the collection and buffer shapes the member classifier needs.
"""

from typing import Dict, Iterable, Optional, Tuple

from ...core.model import TypeKind, TypeRef

# (namespace, name) -> keyword alias
CSHARP_KEYWORD_ALIASES: Dict[Tuple[str, str], str] = {
    ("System", "Boolean"): "bool",
    ("System", "Byte"): "byte",
    ("System", "SByte"): "sbyte",
    ("System", "Char"): "char",
    ("System", "Decimal"): "decimal",
    ("System", "Double"): "double",
    ("System", "Single"): "float",
    ("System", "Int32"): "int",
    ("System", "UInt32"): "uint",
    ("System", "Int64"): "long",
    ("System", "UInt64"): "ulong",
    ("System", "Int16"): "short",
    ("System", "UInt16"): "ushort",
    ("System", "Object"): "object",
    ("System", "String"): "string",
    ("System", "Void"): "void",
}

# Read-only collection shapes that get sequence setters
SEQUENCE_SHAPES = {
    ("System.Collections.Generic", "IEnumerable"),
    ("System.Collections.Generic", "IReadOnlyCollection"),
    ("System.Collections.Generic", "IReadOnlyList"),
}

# Stack-only contiguous buffers
BUFFER_SHAPES = {
    ("System", "Span"),
    ("System", "ReadOnlySpan"),
}

READ_ONLY_LIST = "global::System.Collections.Generic.IReadOnlyList"
ACTION = "global::System.Action"
MOCK = "global::Moq.Mock"
MOCK_BEHAVIOR = "global::Moq.MockBehavior"
IT = "global::Moq.It"


def sequence_element_type(type_ref: TypeRef) -> Optional[TypeRef]:
    """Element type of a read-only sequence shape, or None for anything else."""
    if (
        type_ref.is_named_type
        and len(type_ref.type_arguments) == 1
        and (type_ref.namespace, type_ref.name) in SEQUENCE_SHAPES
    ):
        return type_ref.type_arguments[0]
    return None


def buffer_element_type(type_ref: TypeRef) -> Optional[TypeRef]:
    """Element type of a stack-only buffer shape, or None for anything else."""
    if (
        type_ref.is_ref_like
        and len(type_ref.type_arguments) == 1
        and (type_ref.namespace, type_ref.name) in BUFFER_SHAPES
    ):
        return type_ref.type_arguments[0]
    return None


def is_buffer_shape(type_ref: TypeRef) -> bool:
    return buffer_element_type(type_ref) is not None


def is_char(type_ref: TypeRef) -> bool:
    return type_ref.is_type("System", "Char")


def is_void(type_ref: TypeRef) -> bool:
    return type_ref.is_type("System", "Void")


class CSharpTypeFormatter:
    """
    Prints type references as fully qualified C# type syntax.

    Named types are qualified with ``global::`` (keyword aliases excepted),
    ``System.Nullable<T>`` prints as ``T?`` and nullable reference
    annotations keep their ``?``.
    """

    def __init__(self, use_keywords: bool = True):
        self.use_keywords = use_keywords

    def format(self, type_ref: TypeRef, type_parameters: Iterable[str] = ()) -> str:
        """
        Format a type reference.

        Args:
            type_ref: Type to print
            type_parameters: Names of method type parameters in scope; these
                print bare instead of being namespace-qualified

        Returns:
            C# type syntax
        """
        return self._format(type_ref, frozenset(type_parameters))

    def _format(self, type_ref: TypeRef, type_parameters: frozenset) -> str:
        if type_ref.kind == TypeKind.ARRAY:
            text = f"{self._format(type_ref.element_type, type_parameters)}[]"
            return f"{text}?" if type_ref.nullable else text

        if type_ref.is_type("System", "Nullable", 1):
            return f"{self._format(type_ref.type_arguments[0], type_parameters)}?"

        key = (type_ref.namespace, type_ref.name)
        if self.use_keywords and not type_ref.type_arguments and key in CSHARP_KEYWORD_ALIASES:
            text = CSHARP_KEYWORD_ALIASES[key]
        elif not type_ref.namespace and type_ref.name in type_parameters:
            text = type_ref.name
        else:
            text = self.qualified_name(type_ref.namespace, type_ref.name)
            if type_ref.type_arguments:
                arguments = ", ".join(self._format(arg, type_parameters) for arg in type_ref.type_arguments)
                text = f"{text}<{arguments}>"

        if type_ref.nullable and type_ref.kind != TypeKind.STRUCT:
            text += "?"
        return text

    @staticmethod
    def qualified_name(namespace: str, name: str) -> str:
        """``global::Namespace.Name`` for a namespace and simple name."""
        return f"global::{namespace}.{name}" if namespace else f"global::{name}"

    def sequence_view(self, element: TypeRef) -> str:
        """The read-only list type a variadic array is viewed as."""
        return f"{READ_ONLY_LIST}<{self.format(element)}>"

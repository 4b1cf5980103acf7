"""
C#-specific naming utilities and sanitization.

Handles C# reserved words and the naming conventions of generated builders.
"""

from ...core.naming import NameSanitizer


# C# reserved keywords (contextual keywords are legal identifiers)
CSHARP_RESERVED_WORDS = {
    "abstract",
    "as",
    "base",
    "bool",
    "break",
    "byte",
    "case",
    "catch",
    "char",
    "checked",
    "class",
    "const",
    "continue",
    "decimal",
    "default",
    "delegate",
    "do",
    "double",
    "else",
    "enum",
    "event",
    "explicit",
    "extern",
    "false",
    "finally",
    "fixed",
    "float",
    "for",
    "foreach",
    "goto",
    "if",
    "implicit",
    "in",
    "int",
    "interface",
    "internal",
    "is",
    "lock",
    "long",
    "namespace",
    "new",
    "null",
    "object",
    "operator",
    "out",
    "override",
    "params",
    "private",
    "protected",
    "public",
    "readonly",
    "ref",
    "return",
    "sbyte",
    "sealed",
    "short",
    "sizeof",
    "stackalloc",
    "static",
    "string",
    "struct",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "uint",
    "ulong",
    "unchecked",
    "unsafe",
    "ushort",
    "using",
    "virtual",
    "void",
    "volatile",
    "while",
}


def create_csharp_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for C# (reserved words escaped with ``@``)."""
    return NameSanitizer(CSHARP_RESERVED_WORDS, escape_prefix="@")


def escape_identifier(name: str) -> str:
    """Escape a single identifier if it collides with a C# keyword."""
    return f"@{name}" if name in CSHARP_RESERVED_WORDS else name


def builder_name_for(type_name: str, interface_prefix: str = "I", suffix: str = "Builder") -> str:
    """
    Derive a builder's simple name from its target's simple name.

    The interface marker is stripped only when it is a real prefix
    (``IUser`` -> ``UserBuilder``; ``Item`` -> ``ItemBuilder``).
    """
    name = type_name
    if interface_prefix and name.startswith(interface_prefix):
        rest = name[len(interface_prefix):]
        # A bare leading "I" is part of the name ("Item", "Index"), not a marker.
        if rest[:1].isupper():
            name = rest
    return f"{name}{suffix}"


def delegate_name_for(method_name: str) -> str:
    """Name of the delegate type a behavioral setter accepts."""
    return f"_{method_name}Delegate"


def setter_name_for(member_name: str) -> str:
    return f"Set{member_name}"


__all__ = [
    "CSHARP_RESERVED_WORDS",
    "builder_name_for",
    "create_csharp_sanitizer",
    "delegate_name_for",
    "escape_identifier",
    "setter_name_for",
]

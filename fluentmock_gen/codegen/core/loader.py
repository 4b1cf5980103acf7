"""
Descriptor document loader.

Turns a JSON descriptor document into the resolved type model a generation
pass consumes. The document declares types with their members and lists the
types marked for builder generation; type expressions inside it use C#
surface syntax (``string``, ``System.Collections.Generic.IReadOnlyList<Foo>``,
``int?``, ``byte[]``).
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ...logging_config import get_logger
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

logger = get_logger(__name__)


class DescriptorError(Exception):
    """Raised for malformed or invalid descriptor documents."""

    pass


# C# keyword aliases -> (namespace, name, is value type)
KEYWORD_TYPES: Dict[str, Tuple[str, str, bool]] = {
    "bool": ("System", "Boolean", True),
    "byte": ("System", "Byte", True),
    "sbyte": ("System", "SByte", True),
    "char": ("System", "Char", True),
    "decimal": ("System", "Decimal", True),
    "double": ("System", "Double", True),
    "float": ("System", "Single", True),
    "int": ("System", "Int32", True),
    "uint": ("System", "UInt32", True),
    "nint": ("System", "IntPtr", True),
    "nuint": ("System", "UIntPtr", True),
    "long": ("System", "Int64", True),
    "ulong": ("System", "UInt64", True),
    "short": ("System", "Int16", True),
    "ushort": ("System", "UInt16", True),
    "object": ("System", "Object", False),
    "string": ("System", "String", False),
    "void": ("System", "Void", True),
}

_VALUE_TYPE_NAMES = {(ns, name) for ns, name, is_value in KEYWORD_TYPES.values() if is_value}

# Well-known stack-only buffer shapes
REF_LIKE_TYPES = {("System", "Span", 1), ("System", "ReadOnlySpan", 1)}

_TOKEN_RE = re.compile(r"\s*(?:([A-Za-z_@][A-Za-z0-9_]*)|(\S))")

_PASSING_MODES = {mode.value: mode for mode in PassingMode}

_MEMBER_KINDS = {kind.value: kind for kind in MemberKind}

_DECLARED_KINDS = {
    "interface": TypeKind.INTERFACE,
    "class": TypeKind.CLASS,
    "struct": TypeKind.STRUCT,
}


@dataclass
class DescriptorSet:
    """Result of loading a descriptor document."""

    batch: GenerationBatch
    assembly_name: Optional[str] = None
    declared_types: List[TypeRef] = field(default_factory=list)


class TypeResolver:
    """
    Resolves type expressions against the declared types of one document.

    Declared types are looked up by full name first, then relative to the
    namespace the expression appears in (walking up enclosing namespaces).
    Anything else is an external type, interned so that every reference to
    it yields the same object.
    """

    def __init__(self):
        self._declared: Dict[Tuple[str, str], TypeRef] = {}
        self._external: Dict[tuple, TypeRef] = {}

    def declare(self, type_ref: TypeRef):
        key = (type_ref.namespace, type_ref.name)
        if key in self._declared:
            raise DescriptorError(f"Duplicate type declaration: {type_ref.qualified_name}")
        self._declared[key] = type_ref

    def lookup_declared(self, full_name: str) -> Optional[TypeRef]:
        namespace, _, name = full_name.rpartition(".")
        return self._declared.get((namespace, name))

    def parse(self, expression: str, context_namespace: str = "") -> TypeRef:
        """Parse a type expression into a :class:`TypeRef`."""
        if not isinstance(expression, str) or not expression.strip():
            raise DescriptorError(f"Invalid type expression: {expression!r}")

        tokens = self._tokenize(expression.replace("global::", ""))
        position, type_ref = self._parse_type(tokens, 0, expression, context_namespace)
        if position != len(tokens):
            raise DescriptorError(
                f"Unexpected '{tokens[position]}' in type expression {expression!r}"
            )
        return type_ref

    def _tokenize(self, text: str) -> List[str]:
        tokens = []
        for match in _TOKEN_RE.finditer(text):
            identifier, symbol = match.groups()
            if identifier:
                tokens.append(identifier.lstrip("@"))
            elif symbol:
                if symbol not in ".<>,[]?":
                    raise DescriptorError(f"Unexpected character {symbol!r} in type expression {text!r}")
                tokens.append(symbol)
        return tokens

    def _parse_type(self, tokens: List[str], pos: int, expression: str,
                    context_namespace: str) -> Tuple[int, TypeRef]:
        def expect_identifier(at: int) -> str:
            if at >= len(tokens) or not (tokens[at][0].isalpha() or tokens[at][0] == "_"):
                raise DescriptorError(f"Expected a type name in {expression!r}")
            return tokens[at]

        parts = [expect_identifier(pos)]
        pos += 1
        while pos < len(tokens) and tokens[pos] == ".":
            parts.append(expect_identifier(pos + 1))
            pos += 2

        arguments: List[TypeRef] = []
        if pos < len(tokens) and tokens[pos] == "<":
            pos += 1
            while True:
                pos, argument = self._parse_type(tokens, pos, expression, context_namespace)
                arguments.append(argument)
                if pos < len(tokens) and tokens[pos] == ",":
                    pos += 1
                    continue
                if pos < len(tokens) and tokens[pos] == ">":
                    pos += 1
                    break
                raise DescriptorError(f"Unterminated generic argument list in {expression!r}")

        type_ref = self._resolve(".".join(parts), tuple(arguments), context_namespace)

        while pos < len(tokens) and tokens[pos] in ("?", "["):
            if tokens[pos] == "?":
                type_ref = self._make_nullable(type_ref)
                pos += 1
            else:
                if pos + 1 >= len(tokens) or tokens[pos + 1] != "]":
                    raise DescriptorError(f"Only single-dimension arrays are supported: {expression!r}")
                type_ref = TypeRef(name="", kind=TypeKind.ARRAY, element_type=type_ref)
                pos += 2

        return pos, type_ref

    def _resolve(self, dotted: str, arguments: Tuple[TypeRef, ...],
                 context_namespace: str) -> TypeRef:
        if dotted in KEYWORD_TYPES and not arguments:
            namespace, name, is_value = KEYWORD_TYPES[dotted]
            return self._intern_external(namespace, name, (), TypeKind.STRUCT if is_value else TypeKind.CLASS)

        if not arguments:
            declared = self.lookup_declared(dotted)
            if declared is not None:
                return declared
            scope = context_namespace
            while scope:
                declared = self.lookup_declared(f"{scope}.{dotted}")
                if declared is not None:
                    return declared
                scope = scope.rpartition(".")[0]

        namespace, _, name = dotted.rpartition(".")
        return self._intern_external(namespace, name, arguments, None)

    def _intern_external(self, namespace: str, name: str, arguments: Tuple[TypeRef, ...],
                         kind: Optional[TypeKind]) -> TypeRef:
        key = (namespace, name, tuple(arg.key for arg in arguments))
        existing = self._external.get(key)
        if existing is not None:
            return existing

        is_ref_like = (namespace, name, len(arguments)) in REF_LIKE_TYPES
        if kind is None:
            if is_ref_like or (namespace, name) in _VALUE_TYPE_NAMES or (namespace == "System" and name == "Nullable"):
                kind = TypeKind.STRUCT
            elif len(name) > 1 and name[0] == "I" and name[1].isupper():
                kind = TypeKind.INTERFACE
            else:
                kind = TypeKind.CLASS

        type_ref = TypeRef(
            name=name,
            namespace=namespace,
            kind=kind,
            type_arguments=arguments,
            is_ref_like=is_ref_like,
        )
        self._external[key] = type_ref
        return type_ref

    def _make_nullable(self, type_ref: TypeRef) -> TypeRef:
        # `int?` is Nullable<int>; `string?` is only an annotation
        if type_ref.kind == TypeKind.STRUCT and not type_ref.is_ref_like \
                and not type_ref.is_type("System", "Nullable", 1):
            return self._intern_external("System", "Nullable", (type_ref,), TypeKind.STRUCT)
        return type_ref.annotated(True)


class DescriptorLoader:
    """Builds a :class:`DescriptorSet` from a parsed descriptor document."""

    def __init__(self):
        self.resolver = TypeResolver()

    def load(self, document: Any) -> DescriptorSet:
        """
        Load a descriptor document.

        Args:
            document: Parsed JSON document (a dict)

        Returns:
            DescriptorSet holding the generation batch and declared types

        Raises:
            DescriptorError: If the document is malformed or a target is invalid
        """
        if not isinstance(document, dict):
            raise DescriptorError("Descriptor document must be a JSON object")

        assembly_name = document.get("assembly_name")
        if assembly_name is not None and not isinstance(assembly_name, str):
            raise DescriptorError("'assembly_name' must be a string")

        raw_types = document.get("types", [])
        raw_targets = document.get("targets", [])
        if not isinstance(raw_types, list):
            raise DescriptorError("'types' must be a list")
        if not isinstance(raw_targets, list):
            raise DescriptorError("'targets' must be a list")

        # Declare every type before resolving any member, so references may point forward
        declared = [self._declare_type(raw, index) for index, raw in enumerate(raw_types)]
        for type_ref, raw in zip(declared, raw_types):
            self._populate_type(type_ref, raw)

        targets = [self._load_target(raw, index) for index, raw in enumerate(raw_targets)]

        seen = set()
        for target in targets:
            if target.type in seen:
                logger.warning("Duplicate target %s ignored", target.display_name)
            seen.add(target.type)

        batch = GenerationBatch(targets)
        logger.info(
            "Loaded %d declared types and %d targets", len(declared), len(batch)
        )
        return DescriptorSet(batch=batch, assembly_name=assembly_name or None, declared_types=declared)

    def _declare_type(self, raw: Any, index: int) -> TypeRef:
        if not isinstance(raw, dict):
            raise DescriptorError(f"types[{index}] must be an object")

        name = raw.get("name")
        if not isinstance(name, str) or not name.isidentifier():
            raise DescriptorError(f"types[{index}] has an invalid name: {name!r}")

        namespace = raw.get("namespace", "") or ""
        if namespace and not all(part.isidentifier() for part in namespace.split(".")):
            raise DescriptorError(f"types[{index}] has an invalid namespace: {namespace!r}")

        kind_name = raw.get("kind", "interface")
        if kind_name not in _DECLARED_KINDS:
            raise DescriptorError(
                f"types[{index}] has unknown kind {kind_name!r}; expected one of {sorted(_DECLARED_KINDS)}"
            )

        type_ref = TypeRef(
            name=name,
            namespace=namespace,
            kind=_DECLARED_KINDS[kind_name],
            is_ref_like=bool(raw.get("ref_struct", False)),
        )
        self.resolver.declare(type_ref)
        return type_ref

    def _populate_type(self, type_ref: TypeRef, raw: Dict[str, Any]):
        context = type_ref.namespace
        where = type_ref.qualified_name

        for expression in raw.get("interfaces", []) or []:
            base = self.resolver.parse(expression, context)
            if base == type_ref:
                raise DescriptorError(f"{where} cannot implement itself")
            type_ref.interfaces.append(base)

        for index, member in enumerate(raw.get("members", []) or []):
            type_ref.members.append(self._load_member(member, context, f"{where}.members[{index}]"))

    def _load_member(self, raw: Any, context: str, where: str):
        if not isinstance(raw, dict):
            raise DescriptorError(f"{where} must be an object")

        name = raw.get("name")
        if not isinstance(name, str) or not name:
            raise DescriptorError(f"{where} is missing a name")

        kind = _MEMBER_KINDS.get(raw.get("kind", "property"))
        if kind is None:
            raise DescriptorError(f"{where} has unknown member kind {raw.get('kind')!r}")

        if kind == MemberKind.PROPERTY:
            if "type" not in raw:
                raise DescriptorError(f"{where} ({name}) is missing a type")
            return PropertyDescriptor(
                name=name,
                type=self.resolver.parse(raw["type"], context),
                writable=bool(raw.get("writable", False)),
            )

        if kind == MemberKind.METHOD:
            parameters = []
            for p_index, param in enumerate(raw.get("parameters", []) or []):
                parameters.append(self._load_parameter(param, context, f"{where}.parameters[{p_index}]"))
            type_parameters = tuple(raw.get("type_parameters", []) or [])
            return MethodDescriptor(
                name=name,
                return_type=self.resolver.parse(raw.get("returns", "void"), context),
                parameters=tuple(parameters),
                type_parameters=type_parameters,
            )

        return OtherMemberDescriptor(name=name, member_kind=kind)

    def _load_parameter(self, raw: Any, context: str, where: str) -> ParameterDescriptor:
        if not isinstance(raw, dict) or not isinstance(raw.get("name"), str) or "type" not in raw:
            raise DescriptorError(f"{where} must be an object with 'name' and 'type'")

        mode = _PASSING_MODES.get(raw.get("mode", "value"))
        if mode is None:
            raise DescriptorError(
                f"{where} has unknown passing mode {raw.get('mode')!r}; expected one of {sorted(_PASSING_MODES)}"
            )
        return ParameterDescriptor(
            name=raw["name"],
            type=self.resolver.parse(raw["type"], context),
            passing_mode=mode,
        )

    def _load_target(self, raw: Any, index: int) -> TargetDescriptor:
        if isinstance(raw, str):
            type_name, ignored = raw, []
        elif isinstance(raw, dict) and isinstance(raw.get("type"), str):
            type_name, ignored = raw["type"], raw.get("ignore", []) or []
        else:
            raise DescriptorError(f"targets[{index}] must be a type name or an object with 'type'")

        if "<" in type_name:
            raise DescriptorError(f"Target {type_name} is generic; generic targets are not supported")

        type_ref = self.resolver.lookup_declared(type_name.replace("global::", "").strip())
        if type_ref is None:
            raise DescriptorError(f"Target {type_name} is not a declared type")
        if type_ref.kind != TypeKind.INTERFACE:
            raise DescriptorError(f"Target {type_name} must be an interface, not a {type_ref.kind.value}")

        if not all(isinstance(name, str) for name in ignored):
            raise DescriptorError(f"targets[{index}].ignore must be a list of member names")

        return TargetDescriptor(type=type_ref, ignored_member_names=frozenset(ignored))


def load_descriptors(document: Any) -> DescriptorSet:
    """Convenience wrapper around :class:`DescriptorLoader`."""
    return DescriptorLoader().load(document)

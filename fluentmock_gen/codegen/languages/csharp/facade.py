"""
Facade synthesis for targets with buffer-valued properties.

Stack-only buffers cannot be returned from a mock's stored setup, so such
targets get two mocks: the primary one serving every ordinary member and a
secondary one serving each buffer property as a plain array. A private
facade implements the target on top of both, converting arrays back into
buffers on every read.
"""

from typing import List

from ....logging_config import get_logger
from ...core.model import MemberKind, MethodDescriptor, PropertyDescriptor
from ...core.source_builder import SourceBuilder
from .classifier import ClassifiedMember, TargetPlan
from .naming import escape_identifier
from .overloads import parameter_modifier
from .types import MOCK, CSharpTypeFormatter

logger = get_logger(__name__)

SURFACE_NAME = "__ISubstitute"
FACADE_NAME = "__Substitute"


class BufferAdapterSynthesizer:
    """Emits the companion surface and the private facade of one builder."""

    def __init__(self, formatter: CSharpTypeFormatter, support_namespace: str):
        self.formatter = formatter
        self.support_namespace = support_namespace

    def emit(self, sb: SourceBuilder, plan: TargetPlan):
        """Emit both types into the builder body. Does nothing without buffer properties."""
        if not plan.has_buffers:
            return
        logger.debug("%s: emitting facade for %d buffer properties",
                     plan.info.builder_name, len(plan.buffer_members))
        self.emit_surface(sb, plan)
        sb.append_line()
        self.emit_facade(sb, plan)

    def emit_surface(self, sb: SourceBuilder, plan: TargetPlan):
        with sb.block(f"public interface {SURFACE_NAME}"):
            for member in plan.buffer_members:
                element = self.formatter.format(member.element_type)
                sb.append_line(f"{element}[] {escape_identifier(member.name)} {{ get; }}")

    def emit_facade(self, sb: SourceBuilder, plan: TargetPlan):
        target = plan.info.target_full_name
        primary = f"{MOCK}<{target}>"
        secondary = f"{MOCK}<{SURFACE_NAME}>"
        buffer_names = {m.name for m in plan.buffer_members}

        with sb.block(f"private class {FACADE_NAME} : {target}, global::{self.support_namespace}.ISubstitute"):
            sb.append_line(f"private readonly {secondary} _substituteMock;")
            sb.append_line(f"private readonly {primary} _objectMock;")
            sb.append_line()
            with sb.block(f"public {FACADE_NAME}({secondary} substituteMock, {primary} objectMock)"):
                sb.append_line("_substituteMock = substituteMock;")
                sb.append_line("_objectMock = objectMock;")
            sb.append_line()
            sb.append_line(f"public {MOCK} SubstituteMock => _substituteMock;")
            sb.append_line(f"public {MOCK} ObjectMock => _objectMock;")

            for member in plan.facade_members:
                if isinstance(member.member, PropertyDescriptor):
                    sb.append_line()
                    self._emit_property(sb, member, member.name in buffer_names)
                elif isinstance(member.member, MethodDescriptor):
                    sb.append_line()
                    self._emit_method(sb, member.member)
                else:
                    logger.debug(
                        "%s.%s: %s members are not forwarded by the facade",
                        plan.target.display_name, member.name, member.member.kind.value,
                    )

    def _emit_property(self, sb: SourceBuilder, member: ClassifiedMember, from_substitute: bool):
        prop: PropertyDescriptor = member.member
        name = escape_identifier(prop.name)
        prop_type = self.formatter.format(prop.type)

        if from_substitute:
            getter = f"new {self.formatter.format(prop.type.annotated(False))}(_substituteMock.Object.{name})"
            setter = "throw new global::System.NotSupportedException()"
        else:
            getter = f"_objectMock.Object.{name}"
            setter = f"_objectMock.Object.{name} = value"

        if not prop.writable:
            sb.append_line(f"public {prop_type} {name} => {getter};")
            return
        with sb.block(f"public {prop_type} {name}"):
            sb.append_line(f"get => {getter};")
            sb.append_line(f"set => {setter};")

    def _emit_method(self, sb: SourceBuilder, method: MethodDescriptor):
        type_parameters = method.type_parameters
        generic = f"<{', '.join(type_parameters)}>" if type_parameters else ""
        return_type = self.formatter.format(method.return_type, type_parameters)
        parameters = ", ".join(
            f"{parameter_modifier(p)}{self.formatter.format(p.type, type_parameters)} {escape_identifier(p.name)}"
            for p in method.parameters
        )
        arguments = ", ".join(f"{parameter_modifier(p)}{escape_identifier(p.name)}" for p in method.parameters)
        name = escape_identifier(method.name)
        sb.append_line(
            f"public {return_type} {name}{generic}({parameters}) => _objectMock.Object.{name}{generic}({arguments});"
        )


def unforwardable_members(plan: TargetPlan) -> List[ClassifiedMember]:
    """Members a facade for ``plan`` could not implement (indexers, events, operators)."""
    if not plan.has_buffers:
        return []
    return [
        m for m in plan.facade_members
        if m.member.kind not in (MemberKind.PROPERTY, MemberKind.METHOD)
    ]


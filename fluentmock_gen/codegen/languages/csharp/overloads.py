"""
Setter overload synthesis.

Emits, for every classified member of a target, the contiguous family of
fluent setters its classification calls for. Every family starts with the
setter that configures the mock directly; the other overloads build a value
some other way and delegate to it.
"""

from typing import Callable, Dict, Optional

from ....logging_config import get_logger
from ...core.generator import GeneratorError
from ...core.model import MethodDescriptor, ParameterDescriptor, PassingMode
from ...core.naming import NameSanitizer
from ...core.source_builder import SourceBuilder
from .classifier import Classification, ClassifiedMember, NestedCandidate, TargetPlan
from .naming import create_csharp_sanitizer, delegate_name_for, escape_identifier, setter_name_for
from .types import ACTION, IT, MOCK_BEHAVIOR, CSharpTypeFormatter, is_char, is_void

logger = get_logger(__name__)

_MODIFIERS = {
    PassingMode.BY_VALUE: "",
    PassingMode.BY_REF: "ref ",
    PassingMode.BY_OUT: "out ",
    PassingMode.BY_IN: "in ",
}


def parameter_modifier(parameter: ParameterDescriptor) -> str:
    return _MODIFIERS[parameter.passing_mode]


class OverloadSynthesizer:
    """Emits the setter families of one builder."""

    def __init__(self, formatter: CSharpTypeFormatter, support_namespace: str):
        """
        Args:
            formatter: Type printer shared by the whole pass
            support_namespace: Namespace of the shared support definitions
        """
        self.formatter = formatter
        self.support_namespace = support_namespace
        self._emitters: Dict[Classification, Callable[..., int]] = {
            Classification.PLAIN_VALUE: self._emit_plain,
            Classification.NESTED_TARGET: self._emit_nested,
            Classification.POLYMORPHIC_NESTED: self._emit_nested,
            Classification.SEQUENCE: self._emit_sequence,
            Classification.BUFFER: self._emit_buffer,
            Classification.BEHAVIORAL: self._emit_behavioral,
            Classification.UNREPRESENTABLE: self._emit_nothing,
        }
        self._delegate_names: Optional[NameSanitizer] = None

    def emit(self, sb: SourceBuilder, plan: TargetPlan) -> int:
        """
        Emit every setter family of ``plan`` in member order.

        Returns:
            Number of setters emitted
        """
        self._delegate_names = create_csharp_sanitizer()
        total = 0
        for member in plan.setter_members:
            total += self.emit_member(sb, plan, member)
            sb.append_line()
        return total

    def emit_member(self, sb: SourceBuilder, plan: TargetPlan, member: ClassifiedMember) -> int:
        emitter = self._emitters.get(member.classification)
        if emitter is None:
            raise GeneratorError(f"No setter synthesis for {member.classification}")
        count = emitter(sb, plan, member)
        logger.debug("%s.%s: %d setters", plan.info.builder_name, member.name, count)
        return count

    @property
    def list_builder(self) -> str:
        return f"global::{self.support_namespace}.ListBuilder"

    # Families

    def _emit_nothing(self, sb: SourceBuilder, plan: TargetPlan, member: ClassifiedMember) -> int:
        return 0

    def _emit_plain(self, sb: SourceBuilder, plan: TargetPlan, member: ClassifiedMember) -> int:
        prop_type = self.formatter.format(member.member.type)
        with self._setter(sb, plan, member, f"{prop_type} value"):
            sb.append_line(f"_mock.Setup(x => x.{escape_identifier(member.name)}).Returns(value);")
            sb.append_line("return this;")
        return 1

    def _emit_nested(self, sb: SourceBuilder, plan: TargetPlan, member: ClassifiedMember) -> int:
        count = self._emit_plain(sb, plan, member)
        setter = setter_name_for(member.name)

        for candidate in member.candidates:
            generic, constraint = self._generic_parts(candidate)
            builder = candidate.info.builder_global_name
            callback = f"{ACTION}<{builder}> buildAction"

            sb.append_line()
            with self._setter(sb, plan, member, callback, generic, constraint):
                sb.append_line(f"return {setter}({builder}.Build(buildAction));")

            sb.append_line()
            with self._setter(sb, plan, member, f"{MOCK_BEHAVIOR} behavior, {callback}", generic, constraint):
                sb.append_line(f"return {setter}({builder}.Build(behavior, buildAction));")
            count += 2
        return count

    def _emit_sequence(self, sb: SourceBuilder, plan: TargetPlan, member: ClassifiedMember) -> int:
        count = self._emit_plain(sb, plan, member)
        setter = setter_name_for(member.name)
        element = self.formatter.format(member.element_type)

        sb.append_line()
        with self._setter(sb, plan, member, f"params {element}[] values"):
            sb.append_line(f"return {setter}(values as {self.formatter.sequence_view(member.element_type)});")
        count += 1

        if member.candidates:
            list_builder = f"{self.list_builder}<{element}, {member.candidates[0].info.builder_global_name}>"
        else:
            list_builder = f"{self.list_builder}<{element}>"

        sb.append_line()
        with self._setter(sb, plan, member, f"{ACTION}<{list_builder}> buildAction"):
            sb.append_line(f"return {setter}({list_builder}.Build(buildAction));")
        return count + 1

    def _emit_buffer(self, sb: SourceBuilder, plan: TargetPlan, member: ClassifiedMember) -> int:
        setter = setter_name_for(member.name)
        element = self.formatter.format(member.element_type)

        with self._setter(sb, plan, member, f"{element}[] value"):
            sb.append_line(f"_substituteMock.Setup(x => x.{escape_identifier(member.name)}).Returns(value);")
            sb.append_line("return this;")
        if not is_char(member.element_type):
            return 1

        sb.append_line()
        with self._setter(sb, plan, member, "string value"):
            sb.append_line(f"return {setter}(value.ToCharArray());")
        return 2

    def _emit_behavioral(self, sb: SourceBuilder, plan: TargetPlan, member: ClassifiedMember) -> int:
        method: MethodDescriptor = member.member
        delegate = self._delegate_names.unique_name(delegate_name_for(method.name))
        return_type = self.formatter.format(method.return_type)
        parameters = ", ".join(
            f"{parameter_modifier(p)}{self.formatter.format(p.type)} {escape_identifier(p.name)}"
            for p in method.parameters
        )
        matchers = ", ".join(self._matcher(p) for p in method.parameters)
        configure = "Callback" if is_void(method.return_type) else "Returns"

        sb.append_line(f"public delegate {return_type} {delegate}({parameters});")
        sb.append_line()
        with self._setter(sb, plan, member, f"{delegate} method"):
            sb.append_line(f"_mock.Setup(x => x.{escape_identifier(method.name)}({matchers})).{configure}(method);")
            sb.append_line("return this;")
        return 1

    # Helpers

    def _setter(self, sb: SourceBuilder, plan: TargetPlan, member: ClassifiedMember, parameters: str,
                generic: str = "", constraint: str = ""):
        header = f"public {plan.info.builder_name} {setter_name_for(member.name)}{generic}({parameters}){constraint}"
        return sb.block(header)

    def _generic_parts(self, candidate: NestedCandidate):
        if candidate.exact:
            return "", ""
        return "<T>", f" where T : class, {candidate.info.target_full_name}"

    def _matcher(self, parameter: ParameterDescriptor) -> str:
        type_name = self.formatter.format(parameter.type)
        if parameter.passing_mode == PassingMode.BY_VALUE:
            return f"{IT}.IsAny<{type_name}>()"
        return f"{parameter_modifier(parameter)}{IT}.Ref<{type_name}>.IsAny"

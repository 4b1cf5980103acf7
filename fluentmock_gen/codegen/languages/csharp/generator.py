"""
C# builder generator for Moq.

Emits the shared support definitions from templates and one fluent builder
per target, assembled with the indentation-aware source builder.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ....logging_config import get_logger
from ...core.generator import CodeGenerator
from ...core.model import GenerationBatch, TargetDescriptor
from ...core.source_builder import SourceBuilder
from .builder_info import BuilderInfoCache
from .classifier import MemberClassifier, TargetPlan
from .facade import FACADE_NAME, SURFACE_NAME, BufferAdapterSynthesizer, unforwardable_members
from .overloads import OverloadSynthesizer
from .types import ACTION, MOCK, MOCK_BEHAVIOR, CSharpTypeFormatter

logger = get_logger(__name__)

# Shared support blobs, in emission order
SUPPORT_TEMPLATES = {
    "IBuilder": "IBuilder.cs.j2",
    "ListBuilder": "ListBuilder.cs.j2",
    "MoqSettings": "MoqSettings.cs.j2",
}
SUBSTITUTE_TEMPLATE = ("ISubstitute", "ISubstitute.cs.j2")

TEMPLATE_INDENT = "  "


class CSharpMoqGenerator(CodeGenerator):
    """Generates Moq-backed fluent builders in C#."""

    def __init__(self, config=None):
        super().__init__(config)
        self.formatter = CSharpTypeFormatter()
        self.overloads = OverloadSynthesizer(self.formatter, self.support_namespace)
        self.facade = BufferAdapterSynthesizer(self.formatter, self.support_namespace)
        self._infos: Optional[BuilderInfoCache] = None
        self._plans: Dict[TargetDescriptor, TargetPlan] = {}
        self._plans_batch: Optional[GenerationBatch] = None

    @property
    def language_name(self) -> str:
        return "moq"

    @property
    def file_extension(self) -> str:
        return ".g.cs"

    def get_template_directory(self) -> Optional[Path]:
        return Path(__file__).parent / "templates"

    @property
    def support_namespace(self) -> str:
        return self.config.support_namespace

    def generate(self, batch: GenerationBatch) -> Dict[str, str]:
        """
        Generate every blob of one pass.

        Support definitions come first, followed by one builder per target
        in batch order.
        """
        plans = self.plan_batch(batch)
        sources: Dict[str, str] = {}

        for name, template in SUPPORT_TEMPLATES.items():
            sources[name] = self._render_support(template)
        if any(plan.has_buffers for plan in plans):
            name, template = SUBSTITUTE_TEMPLATE
            sources[name] = self._render_support(template)

        for plan in plans:
            sources[plan.target.display_name] = self._emit_builder(plan)
            logger.debug("Emitted %s", plan.info.builder_full_name)

        return sources

    def generate_single_target(self, target: TargetDescriptor, batch: GenerationBatch) -> str:
        self.plan_batch(batch)
        return self._emit_builder(self._plans[target])

    def plan_batch(self, batch: GenerationBatch) -> List[TargetPlan]:
        """
        Classify every target of ``batch``.

        The builder identity cache and plans are rebuilt whenever a different
        batch comes in, so nothing leaks from one pass into the next.
        """
        if self._plans_batch is not batch:
            self._infos = BuilderInfoCache(
                self.formatter,
                generated_namespace=self.config.generated_namespace,
                interface_prefix=self.config.interface_prefix,
                builder_suffix=self.config.builder_suffix,
            )
            classifier = MemberClassifier(batch, self._infos)
            self._plans = {target: classifier.plan(target) for target in batch}
            self._plans_batch = batch
        return list(self._plans.values())

    def validate_batch(self, batch: GenerationBatch) -> List[str]:
        warnings = super().validate_batch(batch)

        builder_names: Dict[str, str] = {}
        for plan in self.plan_batch(batch):
            previous = builder_names.setdefault(plan.info.builder_full_name, plan.target.display_name)
            if previous != plan.target.display_name:
                warnings.append(
                    f"{plan.target.display_name} and {previous} both map to builder {plan.info.builder_full_name}"
                )
            for member in unforwardable_members(plan):
                warnings.append(
                    f"{plan.target.display_name}.{member.name}: {member.member.kind.value} members "
                    f"cannot be forwarded by the buffer facade"
                )
        return warnings

    def collect_metadata(self, batch: GenerationBatch) -> Dict[str, Any]:
        plans = self.plan_batch(batch)
        return {
            "support_namespace": self.support_namespace,
            "default_mock_behavior": self.config.mock_behavior,
            "facade_count": sum(1 for plan in plans if plan.has_buffers),
            "builders": [plan.info.builder_full_name for plan in plans],
        }

    # Support definitions

    def _template_context(self) -> Dict[str, Any]:
        return {
            "namespace": self.support_namespace,
            "mock_behavior": self.config.mock_behavior,
            "add_comments": self.config.add_comments,
            "nullable_context": self.config.nullable_context,
        }

    def _render_support(self, template: str) -> str:
        text = self.render_template(template, self._template_context())
        return self._reindent(text)

    def _reindent(self, text: str) -> str:
        """Swap the templates' two-space indentation for the configured unit."""
        indent = self.config.indent
        if indent == TEMPLATE_INDENT:
            return text
        lines = []
        for line in text.split("\n"):
            stripped = line.lstrip(" ")
            depth = (len(line) - len(stripped)) // len(TEMPLATE_INDENT)
            lines.append(indent * depth + stripped)
        return "\n".join(lines)

    # Builders

    def _emit_builder(self, plan: TargetPlan) -> str:
        info = plan.info
        target = info.target_full_name
        has_buffers = plan.has_buffers
        settings = f"global::{self.support_namespace}.MoqSettings.DefaultMockBehavior"

        sb = SourceBuilder(self.config.indent, self.config.line_ending)
        header = self.render_template("_header.cs.j2", self._template_context())
        sb.append_lines(header)

        with sb.block(f"namespace {info.builder_namespace}"):
            with sb.block(f"public class {info.builder_name} : global::{self.support_namespace}.IBuilder<{target}>"):
                sb.append_line(f"private readonly {MOCK_BEHAVIOR} _behavior;")
                if has_buffers:
                    sb.append_line(f"private readonly {MOCK}<{SURFACE_NAME}> _substituteMock;")
                sb.append_line(f"private readonly {MOCK}<{target}> _mock;")
                sb.append_line()

                with sb.block(f"public {info.builder_name}({MOCK_BEHAVIOR} behavior)"):
                    sb.append_line("_behavior = behavior;")
                    if has_buffers:
                        sb.append_line(f"_substituteMock = new {MOCK}<{SURFACE_NAME}>(behavior);")
                    sb.append_line(f"_mock = new {MOCK}<{target}>(behavior);")
                sb.append_line()
                with sb.block(f"public {info.builder_name}() : this({settings})"):
                    pass
                sb.append_line()

                sb.append_line(f"public {MOCK}<{target}> Mock => _mock;")
                sb.append_line()
                if has_buffers:
                    sb.append_line(f"public {target} Build() => new {FACADE_NAME}(_substituteMock, _mock);")
                else:
                    sb.append_line(f"public {target} Build() => _mock.Object;")
                sb.append_line()

                with sb.block(f"public {info.builder_global_name} Setup({ACTION}<{MOCK}<{target}>> setup)"):
                    sb.append_line("setup(_mock);")
                    sb.append_line("return this;")
                sb.append_line()

                self.overloads.emit(sb, plan)

                with sb.block(
                    f"public static {target} Build({MOCK_BEHAVIOR} behavior, {ACTION}<{info.builder_name}> buildAction)"
                ):
                    sb.append_line(f"var builder = new {info.builder_name}(behavior);")
                    sb.append_line("buildAction(builder);")
                    sb.append_line("return builder.Build();")
                sb.append_line()
                with sb.block(f"public static {target} Build({ACTION}<{info.builder_name}> buildAction)"):
                    sb.append_line(f"return Build({settings}, buildAction);")

                if has_buffers:
                    sb.append_line()
                    self.facade.emit(sb, plan)

        return sb.source


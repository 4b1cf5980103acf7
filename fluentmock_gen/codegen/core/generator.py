"""
Base generator interface for all code generation targets.

Defines the contract that all builder generators must implement.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger
from .config import GeneratorConfig, get_config_manager, load_config
from .model import GenerationBatch, TargetDescriptor
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None):
        """Initialize generator with optional configuration."""
        if isinstance(config, GeneratorConfig):
            self.config = config
        else:
            self.config = load_config(self.language_name, custom_config=config or None)
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        if template_dir:
            self._template_engine = create_template_engine(template_dir)
        else:
            # Fallback to in-memory templates
            self._template_engine = create_template_engine()

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the generator (e.g., 'moq')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.g.cs')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.

        Returns:
            Path to template directory or None
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(self, batch: GenerationBatch) -> Dict[str, str]:
        """
        Generate sources for a whole batch.

        Args:
            batch: Every target of this generation pass

        Returns:
            Ordered mapping of blob name to source text
        """
        pass

    @abstractmethod
    def generate_single_target(self, target: TargetDescriptor, batch: GenerationBatch) -> str:
        """
        Generate the source for one target.

        Args:
            target: Target to generate a builder for
            batch: Whole batch, used to resolve references to sibling targets

        Returns:
            Builder source for this target only
        """
        pass

    def validate_batch(self, batch: GenerationBatch) -> List[str]:
        """
        Validate a batch for issues worth reporting.

        Language generators should override this to add their own checks.

        Args:
            batch: Batch to validate

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = get_config_manager().validate_config(self.config)
        if not len(batch):
            warnings.append("No targets to generate")
        return warnings

    def collect_metadata(self, batch: GenerationBatch) -> Dict[str, Any]:
        """Extra metadata a generator reports alongside its output."""
        return {}

    def format_code(self, code: str) -> str:
        """
        Apply basic formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        line_ending = self.config.line_ending
        lines = code.replace("\r\n", "\n").split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:  # Collapse runs of blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        while formatted_lines and not formatted_lines[-1]:
            formatted_lines.pop()

        return line_ending.join(formatted_lines) + line_ending

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Template file name
            context: Template variables

        Returns:
            Rendered content
        """
        return self.template_engine.render_template(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        sources: Optional[Dict[str, str]] = None,
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            sources: Ordered mapping of blob name to generated source
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.sources = dict(sources or {})
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @property
    def code(self) -> str:
        """All blobs concatenated, each preceded by a file marker comment."""
        parts = []
        for name, source in self.sources.items():
            parts.append(f"// ---- {name} ----\n{source}")
        return "\n".join(parts)

    def write_to(self, output_dir: Union[str, Path], extension: str = ".g.cs") -> List[Path]:
        """
        Write every blob to ``output_dir`` as ``<blob name><extension>``.

        Returns:
            Paths of the written files, in blob order
        """
        directory = Path(output_dir)
        directory.mkdir(parents=True, exist_ok=True)

        written = []
        for name, source in self.sources.items():
            path = directory / f"{name}{extension}"
            path.write_text(source, encoding="utf-8", newline="")
            written.append(path)
            logger.debug("Wrote %s", path)
        return written

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls()
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, batch: GenerationBatch) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Args:
        generator: Code generator instance
        batch: Targets to generate builders for

    Returns:
        GenerationResult with sources, warnings, and metadata
    """
    try:
        warnings = generator.validate_batch(batch)

        logger.info("Generating %s builders for %d targets", generator.language_name, len(batch))
        sources = generator.generate(batch)

        formatted = {name: generator.format_code(source) for name, source in sources.items()}

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "target_count": len(batch),
            "file_count": len(formatted),
            **generator.collect_metadata(batch),
        }

        logger.info("Generated %d files", len(formatted))
        return GenerationResult(formatted, warnings, metadata)

    except Exception as e:
        logger.debug("Code generation failed", exc_info=True)
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)

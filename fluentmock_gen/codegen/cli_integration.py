"""
CLI integration for builder generation.

Provides the ``generate`` and ``inspect`` subcommands.
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from . import (
    GeneratorConfig,
    GeneratorError,
    RegistryError,
    generate_from_descriptors,
    get_generator,
    get_language_info,
    list_supported_languages,
    load_descriptors,
    resolve_config,
)
from .core.config import ConfigError, load_config
from .core.loader import DescriptorError
from .languages.csharp.classifier import describe_plan
from .registry import get_registry, is_language_supported, list_all_language_info
from ..logging_config import get_logger
from ..utils import DocumentLoaderError, load_document, load_document_from_stream

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()

_CLASSIFICATION_STYLES = {
    "plain-value": "green",
    "nested-target": "cyan",
    "polymorphic-nested": "cyan",
    "sequence": "blue",
    "buffer": "magenta",
    "behavioral": "yellow",
    "unrepresentable": "dim",
    "ignored": "dim",
}


def _add_input_arguments(parser: argparse.ArgumentParser):
    input_group = parser.add_mutually_exclusive_group(required=False)
    input_group.add_argument("file", nargs="?", help="JSON descriptor document")
    input_group.add_argument("--url", help="URL to fetch the descriptor document from")
    input_group.add_argument(
        "--stdin", action="store_true", help="Read the descriptor document from standard input"
    )


def create_generate_subparser(subparsers) -> argparse.ArgumentParser:
    """
    Create the ``generate`` subcommand parser.

    Args:
        subparsers: Subparser group from main parser

    Returns:
        Configured subparser for the generate command
    """
    parser = subparsers.add_parser(
        "generate",
        help="Generate fluent mock builders from a descriptor document",
        description="Generate Moq-backed fluent builders for the targets of a descriptor document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fluentmock-gen generate types.json
  fluentmock-gen generate types.json -o Generated --namespace-prefix MyApp
  fluentmock-gen generate --stdin --default-behavior loose < types.json
  fluentmock-gen generate --list-languages
        """.strip(),
    )

    _add_input_arguments(parser)

    parser.add_argument(
        "--language", "-l", default="moq", help="Generator to use (default: moq)"
    )
    parser.add_argument(
        "--output", "-o", metavar="DIR", help="Directory to write .g.cs files to (default: stdout)"
    )
    parser.add_argument("--config", metavar="FILE", help="Configuration file path (JSON)")

    parser.add_argument(
        "--namespace-prefix",
        metavar="PREFIX",
        help="Prefix of the support namespace (default: the document's assembly name)",
    )
    parser.add_argument(
        "--default-behavior",
        choices=["strict", "loose"],
        help="Initial value of MoqSettings.DefaultMockBehavior",
    )
    parser.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't emit generated-code header comments",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show generation result metadata",
    )

    # Informational commands
    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List available generators and exit",
    )
    info_group.add_argument(
        "--language-info",
        metavar="LANGUAGE",
        help="Show detailed info about a generator and exit",
    )

    parser.set_defaults(func=_handle_generate_subcommand)
    return parser


def create_inspect_subparser(subparsers) -> argparse.ArgumentParser:
    """Create the ``inspect`` subcommand parser."""
    parser = subparsers.add_parser(
        "inspect",
        help="Show how each target member would be classified",
        description="Print every target of a descriptor document with its builder and member classifications",
    )
    _add_input_arguments(parser)
    parser.add_argument(
        "--language",
        "-l",
        default="moq",
        help="Generator whose classification to show (default: moq)",
    )
    parser.add_argument("--config", metavar="FILE", help="Configuration file path (JSON)")
    parser.set_defaults(func=_handle_inspect_subcommand)
    return parser


def _handle_generate_subcommand(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    try:
        if args.list_languages:
            return _list_languages()

        if args.language_info:
            return _show_language_info(args.language_info)

        if not _validate_language(args.language):
            return 1

        source, document = _get_input_document(args)
        config = _build_config(args)

        return _generate_and_output(source, document, args.language, config, args)

    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def _handle_inspect_subcommand(args: argparse.Namespace) -> int:
    """Handle the inspect subcommand."""
    if not _validate_language(args.language):
        return 1

    try:
        source, document = _get_input_document(args)
        config = _build_config(args)
        descriptors = load_descriptors(document)
        language = get_registry().resolve_name(args.language)
        generator = get_generator(language, resolve_config(descriptors, language, config))
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except DescriptorError as e:
        console.print(f"[red]✗ Invalid descriptors:[/red] {e}")
        return 1
    except RegistryError as e:
        console.print(f"[red]✗ Generator error:[/red] {e}")
        return 1

    if not hasattr(generator, "plan_batch"):
        console.print(f"[red]✗ Generator '{language}' does not support inspect[/red]")
        return 1

    logger.debug("Inspecting %d targets from %s", len(descriptors.batch), source)
    plans = generator.plan_batch(descriptors.batch)


    tree = Tree(f"📄 [bold]{source}[/bold] [dim]({len(plans)} targets)[/dim]")
    for plan in plans:
        label = f"[bold green]{plan.target.display_name}[/bold green] → [cyan]{plan.info.builder_full_name}[/cyan]"
        if plan.has_buffers:
            label += " [magenta](buffer facade)[/magenta]"
        branch = tree.add(label)
        for name, kind, classification in describe_plan(plan):
            style = _CLASSIFICATION_STYLES.get(classification.split(" ")[0], "white")
            branch.add(f"{escape(name)} [dim]{kind}[/dim] [{style}]{escape(classification)}[/{style}]")

    console.print(tree)
    return 0


def _list_languages() -> int:
    """List available generators with details."""
    language_info = list_all_language_info()

    if not language_info:
        console.print("[yellow]⚠️ No generators available[/yellow]")
        return 0

    table = Table(title="📋 Available Generators", box=box.ROUNDED, title_style="bold cyan")

    table.add_column("Generator", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for name, info in sorted(language_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(f"🔧 {name}", info["file_extension"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()
    console.print(
        Panel(
            "[bold]Usage:[/bold] fluentmock-gen generate [dim]types.json[/dim] -l [cyan]GENERATOR[/cyan]\n"
            "[bold]Info:[/bold] fluentmock-gen generate --language-info [cyan]GENERATOR[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0


def _show_language_info(language: str) -> int:
    """Show detailed information about a generator."""
    if not _validate_language(language, silent=True):
        console.print(f"[red]✗ Generator '{language}' is not available[/red]")
        console.print("[dim]Use --list-languages to see available options[/dim]")
        return 1

    info = get_language_info(language)

    info_text = f"""[bold]Generator:[/bold] {info['name']}
[bold]File Extension:[/bold] {info['file_extension']}
[bold]Generator Class:[/bold] {info['class']}
[bold]Module:[/bold] {info['module']}"""

    if info["aliases"]:
        info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"

    console.print()
    console.print(Panel(info_text, title=f"🔧 {info['name'].title()} Generator", border_style="green"))

    config = get_generator(language).config
    config_table = Table(
        title="⚙️  Default Configuration",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    config_table.add_column("Setting", style="bold")
    config_table.add_column("Value", style="green")

    config_table.add_row("Generated Namespace", config.generated_namespace)
    config_table.add_row("Builder Suffix", config.builder_suffix)
    config_table.add_row("Default Mock Behavior", config.mock_behavior)
    config_table.add_row("Indent Size", str(config.indent_size))
    config_table.add_row("Add Comments", str(config.add_comments))
    config_table.add_row("Nullable Context", str(config.nullable_context))

    console.print()
    console.print(config_table)
    return 0


def _validate_language(language: str, silent: bool = False) -> bool:
    """Validate that a generator name or alias is registered."""
    if is_language_supported(language):
        return True
    if not silent:
        console.print(f"[red]✗ Unsupported generator '{language}'[/red]")
        console.print(f"[dim]Available generators: {', '.join(list_supported_languages())}[/dim]")
    return False


def _get_input_document(args: argparse.Namespace) -> tuple[str, Any]:
    """Load the descriptor document from the selected source."""
    try:
        if args.stdin:
            return load_document_from_stream(sys.stdin)
        if args.file or args.url:
            return load_document(file_path=args.file, url=args.url)
    except FileNotFoundError as e:
        raise CLIError(str(e)) from e
    except DocumentLoaderError as e:
        raise CLIError(f"Failed to load input: {e}") from e
    raise CLIError("Input source required (file, --url, or --stdin)")


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from the config file and CLI overrides."""
    overrides = {}

    if getattr(args, "namespace_prefix", None):
        overrides["namespace_prefix"] = args.namespace_prefix

    if getattr(args, "default_behavior", None):
        overrides["default_mock_behavior"] = args.default_behavior

    if getattr(args, "no_comments", False):
        overrides["add_comments"] = False

    output = getattr(args, "output", None)
    if output:
        overrides["output_dir"] = output

    language = get_registry().resolve_name(getattr(args, "language", "moq"))
    try:
        return load_config(language, custom_config=overrides, config_file=args.config)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e


def _generate_and_output(
    source: str,
    document: Any,
    language: str,
    config: GeneratorConfig,
    args: argparse.Namespace,
) -> int:
    """Generate builders and write or display them."""
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"Generating builders for {source}...", total=None)
            logger.debug("Generating %s builders from %s", language, source)
            result = generate_from_descriptors(document, language, config)

        if not result.success:
            console.print(f"[red]✗ Generation failed:[/red] {result.error_message}")
            if getattr(args, "verbose", False) and result.exception:
                console.print(f"[dim]Details: {result.exception!r}[/dim]")
            return 1

        output_dir: Optional[str] = config.output_dir
        if output_dir:
            try:
                written = result.write_to(Path(output_dir), result.metadata.get("file_extension", ".g.cs"))
                logger.info("Wrote %d files to %s", len(written), output_dir)
            except OSError as e:
                console.print(f"[red]✗ Failed to write to {output_dir}:[/red] {e}")
                return 1
            console.print(
                f"[green]✓[/green] Generated {len(written)} files in [cyan]{output_dir}[/cyan]"
            )
        else:
            border = "═" * 30
            console.print(f"[green]{border} 📄 Generated Builders {border}[/green]\n")
            console.print(Syntax(result.code, "csharp", theme="monokai"))
            console.print(f"\n[green]{border * 3}[/green]")

        if getattr(args, "verbose", False) and result.metadata:
            metadata_table = Table(
                title="📊 Generation Metadata",
                box=box.SIMPLE,
                show_header=True,
                header_style="bold cyan",
            )
            metadata_table.add_column("Property", style="bold")
            metadata_table.add_column("Value", style="green")

            for key, value in result.metadata.items():
                if isinstance(value, (list, tuple)):
                    value = ", ".join(str(v) for v in value)
                metadata_table.add_row(key.replace("_", " ").title(), str(value))

            console.print()
            console.print(metadata_table)

        if result.warnings:
            console.print("\n[yellow]⚠️  Warnings:[/yellow]")
            for warning in result.warnings:
                console.print(f"  [yellow]•[/yellow] {warning}")
            console.print()

        return 0

    except (GeneratorError, RegistryError, DescriptorError) as e:
        console.print(f"[red]✗[/red] {e}")
        return 1

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax

from docpatch.errors import PatchError

console = Console()
err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def print_start_panel(kind: str, input_path: str, patch_path: str) -> None:
    """Print the panel announcing a patch run."""
    console.print()
    console.print(
        Panel(
            f"[bold]Document:[/bold] {input_path}\n"
            f"[bold]Patch:[/bold] {patch_path}",
            title=f"[bold cyan]{kind.upper()} Patch[/bold cyan]",
            border_style="cyan",
        )
    )


def print_result_panel(kind: str, applied: int, output_path: str) -> None:
    """Print the success panel at the end of a run."""
    console.print(
        Panel(
            f"[bold green]{kind.upper()} patch successfully applied![/bold green]\n\n"
            f"[bold]Operations applied:[/bold] {applied}\n"
            f"[bold]Output:[/bold] {output_path}",
            title="[bold green]Result[/bold green]",
            border_style="green",
        )
    )
    console.print()


def print_error_panel(message: str, error: PatchError | None = None) -> None:
    """Print the error panel."""
    lines = [f"[red]{message}[/red]"]
    if error is not None:
        lines.append("")
        lines.append(f"[bold]Kind:[/bold] {error.kind.value}")
        if error.op_index is not None:
            lines.append(f"[bold]Operation:[/bold] {error.op_index}")
        if error.path:
            lines.append(f"[bold]Path:[/bold] {error.path}")
        lines.append("[dim]No output written; the document may be partially patched.[/dim]")
    console.print(
        Panel(
            "\n".join(lines),
            title="[bold red]Error[/bold red]",
            border_style="red",
        )
    )
    console.print()


def print_document_panel(content: bytes, lexer: str) -> None:
    """Print the patched document with syntax highlighting."""
    syntax = Syntax(
        content.decode("utf-8", errors="replace"),
        lexer,
        theme="monokai",
        line_numbers=True,
    )
    console.print(
        Panel(syntax, title="[bold]Patched document[/bold]", border_style="blue")
    )

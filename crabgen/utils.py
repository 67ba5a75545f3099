"""Shared utility functions for crabgen.

Provides external command execution, file-system helpers and Rich-based
console reporting.  All output goes through the module-level ``console`` so
tests and callers can redirect or silence it in one place.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Command execution
# ---------------------------------------------------------------------------


def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int = 300,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command and wait for it to finish.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A missing executable
        yields return code 127 and a timeout return code -1.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    try:
        completed = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        return (127, "", f"Command not found: {cmd[0]}")
    except subprocess.TimeoutExpired:
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    return (completed.returncode, completed.stdout.strip(), completed.stderr.strip())


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


def is_empty_dir(path: str | Path) -> bool:
    """Return ``True`` if *path* is a directory with no entries."""
    dir_path = Path(path)
    return dir_path.is_dir() and not any(dir_path.iterdir())


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def message(text: str) -> None:
    """Print a neutral progress message."""
    console.print(f"[bold blue]crabgen:[/bold blue] {escape(text)}")


def file_msg(path: str) -> None:
    """Report a file that was written."""
    console.print(f"  [green]ADD[/green]      {escape(path)}")


def patch_msg(description: str) -> None:
    """Report an existing file that was patched."""
    console.print(f"  [yellow]PATCH[/yellow]    {escape(description)}")


def register_msg(entry: str, registry: str) -> None:
    """Report a module declared in a registry file."""
    console.print(f"  [cyan]REGISTER[/cyan] {escape(entry)} -> {escape(registry)}")


def dependency_msg(name: str) -> None:
    """Report a dependency added to the Cargo manifest."""
    console.print(f"  [magenta]DEP[/magenta]      {escape(name)}")


def command_msg(command: str) -> None:
    """Report an external command about to run."""
    console.print(f"  [bold]RUN[/bold]      {escape(command)}")


def print_success(text: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(text)}[/bold green]")


def print_error(text: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(text)}[/bold red]")


def print_warning(text: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(text)}[/bold yellow]")


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()

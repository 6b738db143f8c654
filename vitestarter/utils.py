"""Console and subprocess helpers shared by the pipeline, wizard and CLI.

Everything the user sees goes through the module-level ``console``. Core
components (engine, resolver, plugins, assembler) never print.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

console = Console()

# Exit status reported when the executable itself is missing, as a shell would.
COMMAND_NOT_FOUND = 127
TIMED_OUT = -1

# ---------------------------------------------------------------------------
# Subprocesses
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int | None = None,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Execute *cmd* (no shell) and wait for it.

    Used for ``git``, ``node --version`` and the package manager install.

    Args:
        cmd: Executable followed by its arguments.
        cwd: Directory to run in, usually the generated project.
        timeout: Seconds after which the child is killed and ``TIMED_OUT``
            is returned. ``None`` never kills it.
        capture: When ``False`` the child's output goes to ``/dev/null``.
        env: Variables layered over the current environment.

    Returns:
        ``(returncode, stdout, stderr)`` with both streams decoded and
        stripped. A missing executable gives ``COMMAND_NOT_FOUND`` and the OS
        error text as stderr instead of raising.
    """
    child_env = {**os.environ, **env} if env else None
    output = asyncio.subprocess.PIPE if capture else asyncio.subprocess.DEVNULL

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=output,
            stderr=output,
            cwd=str(cwd) if cwd else None,
            env=child_env,
        )
    except FileNotFoundError as exc:
        return (COMMAND_NOT_FOUND, "", str(exc))

    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (TIMED_OUT, "", f"{' '.join(cmd)} did not finish within {timeout}s")

    return (
        process.returncode or 0,
        _decode(out),
        _decode(err),
    )


def _decode(stream: bytes | None) -> str:
    return (stream or b"").decode("utf-8", errors="replace").strip()


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Elapsed time for step and summary lines: ``3.7s`` or ``1m 5s``."""
    if seconds < 0:
        return "0.0s"
    minutes, remainder = divmod(seconds, 60)
    if minutes >= 1:
        return f"{int(minutes)}m {int(remainder)}s"
    return f"{remainder:.1f}s"


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Render *data* as a label/value table, e.g. the wizard's project summary."""
    table = Table(title=title, header_style="bold cyan")
    table.add_column("Setting", style="dim", no_wrap=True)
    table.add_column("Value")
    for label, value in data.items():
        table.add_row(label, str(value))
    console.print(table)
    console.print()


def print_step(message: str) -> None:
    console.print(f"[dim]{message}[/dim]")


def print_success(message: str) -> None:
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    console.print(f"[bold yellow]{message}[/bold yellow]")


def create_progress() -> Progress:
    """Transient spinner display used while the creation steps run."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )

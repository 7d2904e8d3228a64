"""Utility functions for the schedule CLI."""
import functools
import sys
import typing as t
from pathlib import Path

from rich.console import Console

from schedule_core.errors import CUSTOM_ERRORS

console = Console()
err_console = Console(stderr=True)


def fail(message: str) -> t.NoReturn:
    """Print an error and exit with status 1.

    Raises:
        SystemExit: Always.
    """
    err_console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(1)


def handle_errors(func: t.Callable) -> t.Callable:
    """Turn planner exceptions raised by a command into a one-line error and exit code 1."""
    @functools.wraps(func)
    def wrapper(*args: t.Any, **kwargs: t.Any) -> t.Any:
        try:
            return func(*args, **kwargs)
        except tuple(CUSTOM_ERRORS) + (ValueError,) as e:
            fail(str(e))
    return wrapper


def read_csv_path(path_str: str) -> str:
    """Read a CSV file as text.

    Args:
        path_str: Path to a ``.csv`` file

    Returns:
        The file content

    Raises:
        SystemExit: If the path is not a file or cannot be decoded as UTF-8
    """
    path = Path(path_str)
    if not path.is_file():
        fail(f"Path '{path_str}' does not exist.")
    if path.suffix.lower() != ".csv":
        err_console.print(f"[yellow]Warning:[/yellow] '{path.name}' does not have a .csv extension.")
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        fail(f"'{path_str}' is not UTF-8 text.")


def write_or_print(text: str, output: t.Optional[str]) -> None:
    """Write text to a file, or to stdout when no output path is given."""
    if output is None:
        sys.stdout.write(text if text.endswith("\n") else text + "\n")
        return
    try:
        Path(output).write_text(text, encoding="utf-8")
    except OSError as e:
        fail(f"Could not write {output}: {e}")
    console.print(f"[green]✓[/green] Wrote {output}")

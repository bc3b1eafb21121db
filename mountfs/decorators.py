"""Decorators for mountfs CLI commands."""

import functools
import logging
import zipfile
from typing import Callable, Any

import typer
from rich.console import Console

from mountfs.errors import (
    BackendError,
    BadActionError,
    BadPathError,
    NotFoundError,
    ReadOnlyError,
    VFSError,
)

logger = logging.getLogger(__name__)
console = Console(stderr=True)


def handle_vfs_errors(func: Callable) -> Callable:
    """
    Decorator to handle common file system operation errors.

    Centralizes error reporting for CLI commands:
    - NotFoundError: Nothing at the path
    - ReadOnlyError: Path is only mounted for reading
    - BadActionError / BadPathError: Wrong kind of item or invalid path
    - BackendError: Failure inside a data source
    - ValueError / BadZipFile: Bad input, configuration or archive
    - General exceptions: Unexpected errors
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except NotFoundError as e:
            console.print(f"[bold red]Error:[/bold red] No such file or directory: {e.path}")
            raise typer.Exit(code=1)
        except ReadOnlyError as e:
            console.print(f"[bold red]Error:[/bold red] Read-only: {e.path}")
            console.print("[yellow]Tip: Mount the source with writable: true to modify it[/yellow]")
            raise typer.Exit(code=1)
        except (BadActionError, BadPathError) as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=1)
        except BackendError as e:
            logger.debug(f"Backend failure in {func.__name__}", exc_info=e.cause)
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=1)
        except VFSError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=1)
        except (ValueError, zipfile.BadZipFile) as e:
            console.print(f"[bold red]Error:[/bold red] Invalid input: {e}")
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(code=130)
        except typer.Exit:
            raise
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            console.print(f"[bold red]Unexpected error:[/bold red] {e}")
            raise typer.Exit(code=1)

    return wrapper

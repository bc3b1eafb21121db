import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from .config import (
    MountConfig,
    build_filesystem,
    ensure_config_exists,
    get_config_path,
    load_config,
    load_mount_file,
    save_config,
)
from .decorators import handle_vfs_errors
from .filesystem import FileSystem
from .path import validate_path

# Initialize Rich Console
console = Console()

# Configure logging to use Rich's RichHandler
logging.basicConfig(
    level=logging.INFO,  # DEBUG with --verbose
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger("mountfs")

# Main app
app = typer.Typer(help="Browse and edit a virtual file system of mounted sources")

# Command groups
config_app = typer.Typer(help="Manage the mount configuration")
app.add_typer(config_app, name="config")


class State:
    """Per-invocation CLI state stored on the typer context."""

    def __init__(self, config_path: Path, mounts: List[MountConfig]):
        self.config_path = config_path
        self.mounts = mounts
        self._fs: Optional[FileSystem] = None

    @property
    def fs(self) -> FileSystem:
        if self._fs is None:
            self._fs = build_filesystem(self.mounts)
        return self._fs


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
    config: Optional[Path] = typer.Option(None, "--config", help="Configuration file"),
    manifest: Optional[Path] = typer.Option(
        None, "--manifest", "-m", help="YAML/JSON mount manifest (replaces configured mounts)"
    ),
):
    """
    mountfs - a single path namespace over OS directories, zip archives
    and in-memory trees.

    Sources mounted at the same path are tried in mount order; listings
    merge all of them.
    """
    if verbose:
        logger.setLevel(logging.DEBUG)
        console.print("[bold green]Verbose mode enabled.[/bold green]")

    config_path = config or get_config_path()
    cfg = load_config(config_path)
    if cfg.cli.verbose:
        logger.setLevel(logging.DEBUG)

    mounts = cfg.mounts
    if manifest is not None:
        try:
            mounts = load_mount_file(manifest)
        except (OSError, ValueError) as e:
            console.print(f"[bold red]Error:[/bold red] Cannot load manifest {manifest}: {e}")
            raise typer.Exit(code=1)

    ctx.obj = State(config_path, mounts)


# ============================================================================
# File System Commands
# ============================================================================

def _join(path: str, name: str) -> str:
    path = path.rstrip("/")
    return f"{path}/{name}" if path else name


@app.command("ls")
@handle_vfs_errors
def ls(
    ctx: typer.Context,
    path: str = typer.Argument("", help="Path to list (default: root)"),
    dirs: bool = typer.Option(False, "--dirs", "-d", help="Only directories and mount points"),
    files: bool = typer.Option(False, "--files", "-f", help="Only files"),
):
    """List the items at a path."""
    fs = ctx.obj.fs
    if dirs and files:
        raise ValueError("--dirs and --files are mutually exclusive")

    if dirs:
        names = fs.list_dirs(path)
    elif files:
        names = fs.list_files(path)
    else:
        names = fs.list(path)

    if not names and not fs.is_dir(path):
        if not fs.exists(path):
            console.print(f"[red]ls: {path}: No such file or directory[/red]")
            raise typer.Exit(code=1)
        console.print(path)
        return

    for name in sorted(names):
        if fs.is_dir(_join(path, name)):
            console.print(f"[bold blue]{escape(name)}/[/bold blue]")
        else:
            console.print(escape(name))


@app.command()
@handle_vfs_errors
def tree(
    ctx: typer.Context,
    path: str = typer.Argument("", help="Path to start from (default: root)"),
):
    """Show the tree below a path, directories first."""
    fs = ctx.obj.fs
    root = Tree(f"[bold blue]{path or '/'}[/bold blue]")
    _fill_tree(fs, root, path)
    console.print(root)


def _fill_tree(fs: FileSystem, node: Tree, path: str) -> None:
    # Source listing order is not stable, sort for display
    for name in sorted(fs.list_dirs(path)):
        branch = node.add(f"[bold blue]{escape(name)}/[/bold blue]")
        _fill_tree(fs, branch, _join(path, name))
    for name in sorted(fs.list_files(path)):
        node.add(escape(name))


@app.command()
@handle_vfs_errors
def cat(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File to print"),
):
    """Print the content of a file."""
    content = ctx.obj.fs.read_all(path)
    typer.echo(content, nl=False)


@app.command()
@handle_vfs_errors
def stat(
    ctx: typer.Context,
    path: str = typer.Argument("", help="Path to inspect"),
):
    """Show what a path points to."""
    fs = ctx.obj.fs

    table = Table(title=f"stat {path or '/'}")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("exists", str(fs.exists(path)))
    table.add_row("directory", str(fs.is_dir(path)))
    table.add_row("mount point subset", str(fs.is_mount_point(path)))
    size = fs.size(path)
    table.add_row("size", "-" if size is None else str(size))

    console.print(table)


def _content(text: Optional[str]) -> bytes:
    if text is not None:
        return text.encode("utf-8")
    return typer.get_binary_stream("stdin").read()


@app.command()
@handle_vfs_errors
def write(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File to write"),
    text: Optional[str] = typer.Argument(None, help="Content (default: read stdin)"),
):
    """Replace the content of a file, creating it if needed."""
    content = _content(text)
    ctx.obj.fs.write_all(path, content)
    logger.debug(f"Wrote {len(content)} bytes to {path}")


@app.command()
@handle_vfs_errors
def append(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File to append to"),
    text: Optional[str] = typer.Argument(None, help="Content (default: read stdin)"),
):
    """Add content to the end of a file, creating it if needed."""
    content = _content(text)
    ctx.obj.fs.append_all(path, content)
    logger.debug(f"Appended {len(content)} bytes to {path}")


@app.command()
@handle_vfs_errors
def rm(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Item to delete"),
):
    """Delete a file or an empty directory."""
    ctx.obj.fs.delete(path)
    console.print(f"[green]Deleted {path}[/green]")


@app.command()
@handle_vfs_errors
def mounts(ctx: typer.Context):
    """List mounted sources in precedence order."""
    fs = ctx.obj.fs
    writable = {id(b) for b in fs.mounts(writable=True)}

    table = Table(title="Mounts")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Path", style="cyan")
    table.add_column("Source")
    table.add_column("Writable", justify="center")

    for i, binding in enumerate(fs.mounts(), 1):
        table.add_row(
            str(i),
            "/" + "/".join(binding.segments),
            repr(binding.source),
            "yes" if id(binding) in writable else "no",
        )

    console.print(table)


# ============================================================================
# Configuration Commands
# ============================================================================

@config_app.command("init")
def config_init(ctx: typer.Context):
    """Create the configuration file with defaults if it does not exist."""
    path = ensure_config_exists(ctx.obj.config_path)
    console.print(f"Configuration file: [cyan]{path}[/cyan]")


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Print the current configuration."""
    cfg = load_config(ctx.obj.config_path)
    console.print_json(json.dumps(cfg.to_dict()))


@config_app.command("add-mount")
@handle_vfs_errors
def config_add_mount(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Mount point"),
    kind: str = typer.Argument(..., help="Source kind: os, zip or memory"),
    target: Optional[str] = typer.Argument(None, help="Directory or archive to mount"),
    writable: bool = typer.Option(False, "--writable", "-w", help="Also mount for writing"),
):
    """Append a mount to the configuration."""
    validate_path(path)
    cfg = load_config(ctx.obj.config_path)
    cfg.mounts.append(MountConfig(path=path, kind=kind, target=target, writable=writable))
    save_config(cfg, ctx.obj.config_path)
    console.print(f"[green]Added {kind} mount at /{path.strip('/')}[/green]")


if __name__ == "__main__":
    app()

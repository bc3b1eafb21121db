"""
Configuration management for mountfs.

Handles loading and saving the user configuration from:
- $MOUNTFS_CONFIG, if set
- XDG config directory: ~/.config/mountfs/config.json
- Fallback: ~/.mountfs/config.json

Mount manifests (a list of mounts to apply in order) can also be kept
in standalone YAML or JSON files and loaded with load_mount_file().
"""

import json
import logging
import os
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

import yaml

from mountfs.filesystem import FileSystem
from mountfs.sources import SOURCE_KINDS, open_source

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MOUNTFS_CONFIG"


@dataclass
class MountConfig:
    """A single mount: a source of some kind attached at a path."""
    path: str
    kind: str = "os"
    target: Optional[str] = None
    writable: bool = False

    def __post_init__(self):
        if self.kind not in SOURCE_KINDS:
            raise ValueError(f"Unknown source kind: {self.kind}")


@dataclass
class CLIConfig:
    """CLI default options."""
    verbose: bool = False
    color: bool = True


@dataclass
class MountFSConfig:
    """Main mountfs configuration."""
    mounts: List[MountConfig] = field(default_factory=list)
    cli: CLIConfig = field(default_factory=CLIConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "mounts": [asdict(m) for m in self.mounts],
            "cli": asdict(self.cli),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MountFSConfig':
        """Create from dictionary."""
        mounts_data = data.get("mounts", [])
        cli_data = data.get("cli", {})
        return cls(
            mounts=[MountConfig(**m) for m in mounts_data],
            cli=CLIConfig(**cli_data),
        )


def get_config_path() -> Path:
    """
    Get configuration file path.

    Order:
    1. $MOUNTFS_CONFIG
    2. ~/.config/mountfs/config.json (if ~/.config exists)
    3. Fallback: ~/.mountfs/config.json

    Returns:
        Path to config file
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()

    xdg_config_home = Path.home() / ".config"
    if xdg_config_home.exists():
        config_dir = xdg_config_home / "mountfs"
    else:
        config_dir = Path.home() / ".mountfs"

    return config_dir / "config.json"


def load_config(path: Optional[Path] = None) -> MountFSConfig:
    """
    Load configuration from file.

    Args:
        path: Config file (default: get_config_path())

    Returns:
        MountFSConfig instance with loaded values or defaults
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return MountFSConfig()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
        return MountFSConfig.from_dict(data)
    except (json.JSONDecodeError, OSError, TypeError, ValueError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        logger.warning("Using default configuration")
        return MountFSConfig()


def save_config(config: MountFSConfig, path: Optional[Path] = None) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration to save
        path: Config file (default: get_config_path())

    Returns:
        Path the configuration was written to
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def ensure_config_exists(path: Optional[Path] = None) -> Path:
    """
    Ensure configuration file exists, creating with defaults if not.

    Returns:
        Path to config file
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        save_config(MountFSConfig(), config_path)
        logger.info(f"Created default configuration at {config_path}")

    return config_path


def load_mount_file(path: Union[str, Path]) -> List[MountConfig]:
    """
    Load a mount manifest.

    The file may be YAML (.yaml/.yml) or JSON, holding either a list of
    mounts or a mapping with a "mounts" key:

        mounts:
          - path: data
            kind: os
            target: ~/app/data
            writable: true
          - path: data
            kind: zip
            target: ~/app/defaults.zip

    Raises:
        ValueError: If the manifest is malformed
    """
    path = Path(path)
    with open(path, 'r') as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if isinstance(data, dict):
        data = data.get("mounts", [])
    if not isinstance(data, list):
        raise ValueError(f"Mount manifest must contain a list of mounts: {path}")

    try:
        return [MountConfig(**entry) for entry in data]
    except TypeError as e:
        raise ValueError(f"Invalid mount entry in {path}: {e}") from e


def build_filesystem(mounts: List[MountConfig]) -> FileSystem:
    """
    Create a FileSystem with the given mounts applied in order.

    Args:
        mounts: Mounts, in precedence order

    Returns:
        Ready to use FileSystem
    """
    fs = FileSystem()
    for mount in mounts:
        source = open_source(mount.kind, mount.target)
        fs.mount(mount.path, source, writable=mount.writable)
    return fs

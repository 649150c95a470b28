"""Configuration management for the skimalens CLI.

Reads/writes a TOML config file and provides a typed Config dataclass.
Default location: ``~/.config/skimalens/config.toml``.
Override with the ``SKIMALENS_CONFIG`` environment variable.

Example::

    [export]
    dir = "./export"
    format = "markdown"          # markdown | json | yaml
    filename_format = "title"    # title | id

    [view]
    hide_deleted = true
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from skimalens.export.exporter import ExportFormat, FilenameFormat

_DEFAULT_CONFIG_DIR = Path("~/.config/skimalens").expanduser()
_DEFAULT_EXPORT_DIR = Path("./export")


def _config_path() -> Path:
    env = os.environ.get("SKIMALENS_CONFIG")
    if env:
        return Path(env).expanduser()
    return _DEFAULT_CONFIG_DIR / "config.toml"


@dataclass
class Config:
    export_dir: str = str(_DEFAULT_EXPORT_DIR)
    export_format: ExportFormat = ExportFormat.MARKDOWN
    filename_format: FilenameFormat = FilenameFormat.TITLE

    # Conversations with an empty name/title are hidden from listings
    hide_deleted: bool = True

    @property
    def export_path(self) -> Path:
        return Path(self.export_dir)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config() -> Config:
    """Load config from disk, falling back to defaults + env overrides.

    Raises ``ValueError`` when a configured format is not one of the
    supported values.
    """
    path = _config_path()
    cfg = Config()

    if path.exists():
        with open(path, "rb") as f:
            data = tomllib.load(f)
        export_section = data.get("export", {})
        view_section = data.get("view", {})

        cfg.export_dir = export_section.get("dir", cfg.export_dir)
        cfg.export_format = ExportFormat(
            export_section.get("format", cfg.export_format)
        )
        cfg.filename_format = FilenameFormat(
            export_section.get("filename_format", cfg.filename_format)
        )
        cfg.hide_deleted = bool(view_section.get("hide_deleted", cfg.hide_deleted))

    # Environment variables always take precedence
    cfg.export_dir = os.environ.get("SKIMALENS_EXPORT_DIR", cfg.export_dir)
    cfg.export_format = ExportFormat(
        os.environ.get("SKIMALENS_EXPORT_FORMAT", cfg.export_format)
    )
    cfg.filename_format = FilenameFormat(
        os.environ.get("SKIMALENS_FILENAME_FORMAT", cfg.filename_format)
    )
    hide_env = os.environ.get("SKIMALENS_HIDE_DELETED")
    if hide_env is not None:
        cfg.hide_deleted = _parse_bool(hide_env)

    return cfg


def save_config(cfg: Config) -> Path:
    """Write config to the TOML file. Returns the path written."""
    path = _config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    lines = [
        "[export]",
        f'dir = "{cfg.export_dir}"',
        f'format = "{cfg.export_format.value}"',
        f'filename_format = "{cfg.filename_format.value}"',
        "",
        "[view]",
        f"hide_deleted = {'true' if cfg.hide_deleted else 'false'}",
        "",
    ]

    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def config_exists() -> bool:
    return _config_path().exists()


def config_path_display() -> str:
    return str(_config_path())

"""TOML config loading shared by league settings files."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TypeVar
import tomllib


@dataclass(frozen=True)
class BaseSystemConfig:
    """Name, description and origin of one TOML-backed config."""

    name: str
    description: str | None
    file_path: Path

    def as_config_json(self) -> dict[str, Any]:
        raise NotImplementedError


ConfigT = TypeVar("ConfigT", bound=BaseSystemConfig)


def load_system_configs(
    config_path: Path,
    parser: Callable[[dict[str, Any], Path], ConfigT],
    *,
    duplicate_name_label: str = "rating",
) -> list[ConfigT]:
    """Parse one .toml file, or every .toml file in a directory (sorted by filename).

    Config names must be unique across the loaded files.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config path not found: {config_path}")

    if config_path.is_file():
        config_files = [config_path]
    else:
        config_files = sorted(config_path.glob("*.toml"))
        if not config_files:
            raise ValueError(f"No .toml config files found in: {config_path}")

    configs = [parser(_read_toml(file_path), file_path) for file_path in config_files]

    name_counts = Counter(config.name for config in configs)
    duplicates = sorted(name for name, count in name_counts.items() if count > 1)
    if duplicates:
        raise ValueError(
            f"Duplicate {duplicate_name_label} system names found in {config_path}: {duplicates}"
        )
    return configs


def select_config(configs: list[ConfigT], config_name: str | None) -> ConfigT:
    """Pick one config by file name or config name; the first one when no name is given."""
    if config_name is None:
        return configs[0]
    for config in configs:
        if config_name in (config.file_path.name, config.name):
            return config
    available = ", ".join(config.file_path.name for config in configs)
    raise ValueError(f"No config named '{config_name}' (available: {available})")


def _read_toml(file_path: Path) -> dict[str, Any]:
    try:
        with file_path.open("rb") as file:
            return tomllib.load(file)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"{file_path}: invalid TOML ({exc})") from exc


__all__ = ["BaseSystemConfig", "load_system_configs", "select_config"]

"""Loading and saving JSON configuration and data files."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Type, TypeVar, Union

T = TypeVar("T")
PathLike = Union[str, Path]


class ConfigError(Exception):
    """Raised when a configuration or data file cannot be loaded."""


def _encode(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    return to_dict() if callable(to_dict) else value


def _decode(default: Any, raw: Any) -> Any:
    from_dict = getattr(type(default), "from_dict", None)
    return from_dict(raw) if callable(from_dict) else raw


def save_json_data(data: Any, path: PathLike) -> None:
    """Write data as JSON, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(_encode(data), ensure_ascii=False, indent=2), encoding="utf-8"
    )


def load_json_data(default: T, path: PathLike) -> T:
    """Read JSON from path; if the file is missing, write default and return it."""
    path = Path(path)
    if not path.exists():
        save_json_data(default, path)
        return default
    raw = json.loads(path.read_text(encoding="utf-8"))
    return _decode(default, raw)


def _load(data_dir: PathLike, name: str, cls: Type[T]) -> tuple[Path, T]:
    path = Path(data_dir) / name
    try:
        return path, load_json_data(cls(), path)
    except (OSError, ValueError, KeyError, TypeError) as exc:
        raise ConfigError(f"Error loading JSON data: {exc}") from exc


def init_config(data_dir: PathLike, config_name: str, cls: Type[T]) -> T:
    """Load a read-only configuration of type cls from the data directory."""
    return _load(data_dir, config_name, cls)[1]


class PersistentData:
    """A value loaded from a JSON file and written back on save or on exit."""

    def __init__(self, path: PathLike, value: Any) -> None:
        self.path = Path(path)
        self.value = value
        self.lock = asyncio.Lock()

    def save(self) -> None:
        save_json_data(self.value, self.path)

    def __enter__(self) -> "PersistentData":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        try:
            self.save()
        except OSError:
            pass


def init_data(data_dir: PathLike, data_save_name: str, cls: Type[T]) -> PersistentData:
    """Load mutable data of type cls, ready to be saved back to the same file."""
    path, value = _load(data_dir, data_save_name, cls)
    return PersistentData(path, value)
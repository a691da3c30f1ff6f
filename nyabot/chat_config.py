"""Settings of the chat plugin and its on/off switch."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

_U16_MAX = 2**16 - 1
_U64_MAX = 2**64 - 1


def _require(data: dict, name: str) -> Any:
    try:
        return data[name]
    except KeyError as exc:
        raise ValueError(f"chat config misses field {name}") from exc


def _string(data: dict, name: str) -> str:
    value = _require(data, name)
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    return value


def _check_uint(value: Any, name: str, limit: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= limit:
        raise ValueError(f"{name} must be an integer between 0 and {limit}")
    return value


def _uint(data: dict, name: str, limit: int = _U64_MAX) -> int:
    return _check_uint(_require(data, name), name, limit)


def _optional_uint(data: dict, name: str, limit: int = _U64_MAX) -> Optional[int]:
    value = data.get(name)
    return None if value is None else _check_uint(value, name, limit)


@dataclass
class ChatModelCallConfig:
    """How to reach the model and how the bot should talk."""

    key: str = ""
    endpoint: str = ""
    max_tokens: int = 0
    role_model: str = ""
    role_prompt: str = ""
    role_context_expiration_time_second: int = 0
    role_max_message: int = 0
    dot_wait_tag: str = ""
    dot_wait_time_ms: int = 0
    dot_wait_pre_char_ms: Optional[int] = None
    smart_model: str = ""
    smart_prompt: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "ChatModelCallConfig":
        if not isinstance(data, dict):
            raise ValueError("model config must be an object")
        return cls(
            key=_string(data, "key"),
            endpoint=_string(data, "endpoint"),
            max_tokens=_uint(data, "max_tokens", _U16_MAX),
            role_model=_string(data, "role_model"),
            role_prompt=_string(data, "role_prompt"),
            role_context_expiration_time_second=_uint(
                data, "role_context_expiration_time_second"
            ),
            role_max_message=_uint(data, "role_max_message"),
            dot_wait_tag=_string(data, "dot_wait_tag"),
            dot_wait_time_ms=_uint(data, "dot_wait_time_ms"),
            dot_wait_pre_char_ms=_optional_uint(data, "dot_wait_pre_char_ms"),
            smart_model=_string(data, "smart_model"),
            smart_prompt=_string(data, "smart_prompt"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ChatConfig:
    """The groups the bot chats in and the model settings."""

    allow_groups: set[int] = field(default_factory=set)
    model: ChatModelCallConfig = field(default_factory=ChatModelCallConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "ChatConfig":
        if not isinstance(data, dict):
            raise ValueError("chat config must be an object")
        groups = _require(data, "allow_groups")
        if not isinstance(groups, list) or not all(
            isinstance(g, int) and not isinstance(g, bool) for g in groups
        ):
            raise ValueError("allow_groups must be a list of integers")
        return cls(
            allow_groups=set(groups),
            model=ChatModelCallConfig.from_dict(_require(data, "model")),
        )

    def to_dict(self) -> dict:
        return {"allow_groups": sorted(self.allow_groups), "model": self.model.to_dict()}


class RunState:
    """Whether the bot currently answers chat."""

    def __init__(self, running: bool = True) -> None:
        self._running = running

    def set_running(self, run: bool) -> None:
        self._running = bool(run)

    def running(self) -> bool:
        return self._running
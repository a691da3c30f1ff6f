"""Settings and stored targets of the emoji reaction plugin."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

DEFAULT_WAIT_MS = 300
_U64_MAX = 2**64 - 1
_I64_MIN, _I64_MAX = -(2**63), 2**63 - 1


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require(data: dict, name: str, what: str) -> Any:
    try:
        return data[name]
    except KeyError as exc:
        raise ValueError(f"{what} misses field {name}") from exc


def _id_list(value: Any, name: str) -> list[int]:
    if not isinstance(value, list) or not all(
        _is_int(x) and _I64_MIN <= x <= _I64_MAX for x in value
    ):
        raise ValueError(f"{name} must be a list of integers")
    return value


def _parse_key(key: Any) -> int:
    text = str(key).strip()
    try:
        value = int(text)
    except ValueError as exc:
        raise ValueError(f"group id {key!r} is not an integer") from exc
    if not _I64_MIN <= value <= _I64_MAX:
        raise ValueError(f"group id {key!r} is out of range")
    return value


@dataclass
class EmojiAttackConfig:
    """Groups where marked users get reactions, the reactions, and the pause between them."""

    allow_monkey_groups: set[int] = field(default_factory=set)
    emoji: list[str] = field(default_factory=list)
    wait_ms: Optional[int] = None

    def wait_seconds(self) -> float:
        """The pause between two reactions, 300 ms unless configured."""
        millis = DEFAULT_WAIT_MS if self.wait_ms is None else self.wait_ms
        return millis / 1000

    @classmethod
    def from_dict(cls, data: dict) -> "EmojiAttackConfig":
        what = "emoji attack config"
        if not isinstance(data, dict):
            raise ValueError(f"{what} must be an object")
        groups = _id_list(_require(data, "allow_monkey_groups", what), "allow_monkey_groups")
        emoji = _require(data, "emoji", what)
        if not isinstance(emoji, list) or not all(isinstance(e, str) for e in emoji):
            raise ValueError("emoji must be a list of strings")
        wait_ms = data.get("wait_ms")
        if wait_ms is not None and not (_is_int(wait_ms) and 0 <= wait_ms <= _U64_MAX):
            raise ValueError("wait_ms must be a non-negative integer")
        return cls(allow_monkey_groups=set(groups), emoji=list(emoji), wait_ms=wait_ms)

    def to_dict(self) -> dict:
        return {
            "allow_monkey_groups": sorted(self.allow_monkey_groups),
            "emoji": list(self.emoji),
            "wait_ms": self.wait_ms,
        }


@dataclass
class EmojiAttackData:
    """The marked users of each group."""

    group_users: dict[int, set[int]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "EmojiAttackData":
        what = "emoji attack data"
        if not isinstance(data, dict):
            raise ValueError(f"{what} must be an object")
        raw = _require(data, "group_users", what)
        if not isinstance(raw, dict):
            raise ValueError("group_users must be an object")
        return cls(
            group_users={
                _parse_key(key): set(_id_list(users, "group_users entry"))
                for key, users in raw.items()
            }
        )

    def to_dict(self) -> dict:
        return {
            "group_users": {
                str(group): sorted(users) for group, users in self.group_users.items()
            }
        }
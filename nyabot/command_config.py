"""Who may run commands, and where."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from nyabot.infoev import MsgEvent


def event_user(event: MsgEvent) -> int:
    return event.user_id


def event_context(event: MsgEvent) -> int:
    """The group of the event, or the sender for a private message."""
    return event.group_id if event.group_id is not None else event_user(event)


def _id_set(value: Any, name: str) -> set[int]:
    if not isinstance(value, list) or not all(
        isinstance(x, int) and not isinstance(x, bool) for x in value
    ):
        raise ValueError(f"{name} must be a list of integers")
    return set(value)


def _flag(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a boolean")
    return value


@dataclass
class CommandExecConfig:
    allow_exec_context: set[int] = field(default_factory=set)
    allow_super_user: set[int] = field(default_factory=set)
    is_admin_super_user: bool = False
    is_all_user_admin: bool = False

    def in_super_user(self, event: MsgEvent) -> bool:
        return (
            self.is_all_user_admin
            or event_user(event) in self.allow_super_user
            or self.is_admin_super_user
        )

    def in_context(self, event: MsgEvent) -> bool:
        return event_context(event) in self.allow_exec_context

    @classmethod
    def from_dict(cls, data: dict) -> "CommandExecConfig":
        try:
            return cls(
                allow_exec_context=_id_set(data["allow_exec_context"], "allow_exec_context"),
                allow_super_user=_id_set(data["allow_super_user"], "allow_super_user"),
                is_admin_super_user=_flag(data["is_admin_super_user"], "is_admin_super_user"),
                is_all_user_admin=_flag(data["is_all_user_admin"], "is_all_user_admin"),
            )
        except KeyError as exc:
            raise ValueError(f"command exec config misses field {exc.args[0]}") from exc

    def to_dict(self) -> dict:
        return {
            "allow_exec_context": sorted(self.allow_exec_context),
            "allow_super_user": sorted(self.allow_super_user),
            "is_admin_super_user": self.is_admin_super_user,
            "is_all_user_admin": self.is_all_user_admin,
        }
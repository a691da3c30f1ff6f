"""Message events, segments, the bot API and group member information."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Awaitable, Callable, Optional

ApiCall = Callable[[str, dict], Awaitable[dict]]
ReplyTransport = Callable[[str, bool], Any]


class ApiError(Exception):
    """Raised when the bot API reports a failed call."""


@dataclass(frozen=True)
class Segment:
    """One segment of a chat message, such as text, an @mention or a reply."""

    type: str
    data: dict = field(default_factory=dict)


@dataclass
class MsgEvent:
    """An incoming message, private or from a group."""

    self_id: int
    user_id: int
    message_id: int = 0
    group_id: Optional[int] = None
    message: list[Segment] = field(default_factory=list)
    text: Optional[str] = None
    transport: Optional[ReplyTransport] = None
    outbox: list[tuple[str, bool]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.text is None:
            parts = [
                seg.data["text"]
                for seg in self.segments("text")
                if isinstance(seg.data.get("text"), str)
            ]
            if parts:
                self.text = "".join(parts)

    def segments(self, kind: str) -> list[Segment]:
        """Return the segments of the given type, in message order."""
        return [seg for seg in self.message if seg.type == kind]

    def is_group(self) -> bool:
        return self.group_id is not None

    def _send(self, message: str, quote: bool) -> None:
        self.outbox.append((message, quote))
        if self.transport is not None:
            self.transport(message, quote)

    def reply(self, message: str) -> None:
        """Answer the message without quoting it."""
        self._send(message, False)

    def reply_and_quote(self, message: str) -> None:
        """Answer the message, quoting it."""
        self._send(message, True)


class BotApi:
    """The actions the bot can perform, sent through an async call function."""

    def __init__(self, call: ApiCall) -> None:
        self._call = call

    async def _action(self, action: str, params: dict) -> Any:
        response = await self._call(action, params)
        status = response.get("status", "ok")
        retcode = response.get("retcode", 0)
        if status == "failed" or retcode != 0:
            raise ApiError(str(response.get("data", response)))
        return response.get("data")

    async def get_group_member_info(
        self, group_id: int, user_id: int, no_cache: bool
    ) -> dict:
        return await self._action(
            "get_group_member_info",
            {"group_id": group_id, "user_id": user_id, "no_cache": no_cache},
        )

    async def set_msg_emoji_like(self, message_id: int, emoji_id: str) -> Any:
        return await self._action(
            "set_msg_emoji_like", {"message_id": message_id, "emoji_id": emoji_id}
        )


@dataclass
class MemberInfo:
    """Information about one member of a group."""

    group_id: int
    user_id: int
    nickname: str
    card: str
    sex: str
    age: int
    area: str
    join_time: int
    last_sent_time: int
    level: str
    role: str
    unfriendly: bool
    title: str
    title_expire_time: int
    card_changeable: bool

    @classmethod
    def from_dict(cls, data: dict) -> "MemberInfo":
        if not isinstance(data, dict):
            raise ValueError(f"member info must be an object, got {data!r}")
        try:
            return cls(**{f.name: data[f.name] for f in fields(cls)})
        except KeyError as exc:
            raise ValueError(f"member info misses field {exc.args[0]}") from exc


async def self_bot_info(bot: BotApi, event: MsgEvent) -> MemberInfo:
    """Look up the bot's own membership in the event's group."""
    if event.group_id is None:
        raise ValueError("bot_info not found")
    data = await bot.get_group_member_info(event.group_id, event.self_id, False)
    return MemberInfo.from_dict(data)
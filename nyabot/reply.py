"""Sending a long answer as several chat messages with pauses."""

from __future__ import annotations

import asyncio

from nyabot.chat_config import ChatModelCallConfig
from nyabot.infoev import MsgEvent


def split_reply(reply: str, tag: str) -> list[str]:
    """Split an answer at the tag, dropping empty parts; an empty tag splits characters."""
    parts = list(reply) if tag == "" else reply.split(tag)
    return [part for part in parts if part]


def pause_for(part: str, config: ChatModelCallConfig) -> float:
    """Seconds to wait before sending a part, scaled by its UTF-8 length if configured."""
    if config.dot_wait_pre_char_ms is not None:
        millis = config.dot_wait_pre_char_ms * len(part.encode("utf-8"))
    else:
        millis = config.dot_wait_time_ms
    return millis / 1000


def reply_as_im(event: MsgEvent, reply: str, config: ChatModelCallConfig) -> asyncio.Task:
    """Start sending the answer part by part; return the sending task."""
    parts = split_reply(reply, config.dot_wait_tag)

    async def send() -> None:
        for part in parts:
            await asyncio.sleep(pause_for(part, config))
            event.reply(part)

    return asyncio.ensure_future(send())
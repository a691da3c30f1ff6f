"""Command parsing, registration and dispatch."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from nyabot.command_config import CommandExecConfig
from nyabot.infoev import BotApi, MsgEvent

log = logging.getLogger(__name__)

Handler = Callable[["BotCommand"], Awaitable[Any]]

UNKNOWN_CONTEXT = "不认识的环境喵，害怕喵"
NOT_SUPER_USER = "你是谁喵！我不认识你喵！哒咩！"
UNKNOWN_COMMAND = "不认识的命令喵！每日疑惑1/1"


@dataclass(frozen=True)
class BotCommand:
    """A command word with its arguments, and the message it came from."""

    cmd: str
    args: tuple[str, ...]
    event: MsgEvent
    bot: Any

    @classmethod
    def parse(cls, text: str, event: MsgEvent, bot: BotApi) -> "BotCommand":
        words = text.split()
        if not words:
            raise ValueError("empty command")
        return cls(cmd=words[0], args=tuple(words[1:]), event=event, bot=bot)


class CommandRegistry:
    """Holds the common and super commands and runs their handlers."""

    def __init__(self, config: CommandExecConfig) -> None:
        self.config = config
        self.common_commands: set[str] = set()
        self.super_commands: set[str] = set()
        self._handlers: dict[str, list[Handler]] = defaultdict(list)
        self._tasks: set[asyncio.Task] = set()

    def on_common_command(self, cmd: str, handler: Handler) -> None:
        self._handlers[cmd].append(handler)
        self.common_commands.add(cmd)
        log.info("Common 命令 %s 注册成功", cmd)

    def on_super_command(self, cmd: str, handler: Handler) -> None:
        self._handlers[cmd].append(handler)
        self.super_commands.add(cmd)
        log.info("Super 命令 %s 注册成功", cmd)

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            log.error("命令执行失败: %s", task.exception())

    def _dispatch(self, command: BotCommand) -> list[asyncio.Task]:
        tasks = []
        for handler in self._handlers.get(command.cmd, []):
            log.info("命令执行器 %s 执行命令使用参数%s", command.cmd, list(command.args))
            task = asyncio.ensure_future(handler(command))
            self._tasks.add(task)
            task.add_done_callback(self._finished)
            tasks.append(task)
        return tasks

    async def invoke(self, command: BotCommand) -> list[asyncio.Task]:
        """Check permissions and start the handlers; return their tasks."""
        event = command.event
        if not self.config.in_context(event):
            event.reply_and_quote(UNKNOWN_CONTEXT)
            return []
        if command.cmd in self.super_commands:
            if self.config.in_super_user(event):
                return self._dispatch(command)
            event.reply_and_quote(NOT_SUPER_USER)
            return []
        if command.cmd in self.common_commands:
            return self._dispatch(command)
        event.reply_and_quote(UNKNOWN_COMMAND)
        return []

    async def handle_message(self, event: MsgEvent, bot: BotApi) -> list[asyncio.Task]:
        """Run every text segment of the message that starts with '$' as a command."""
        tasks: list[asyncio.Task] = []
        for seg in event.segments("text"):
            text = seg.data.get("text")
            if isinstance(text, str) and text.startswith("$"):
                tasks.extend(await self.invoke(BotCommand.parse(text, event, bot)))
        return tasks
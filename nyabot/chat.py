"""The role-play chat plugin: answering in groups and its commands."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Optional

from nyabot.chat_config import ChatConfig, RunState
from nyabot.commands import BotCommand, CommandRegistry
from nyabot.infoev import BotApi, MsgEvent, self_bot_info
from nyabot.memory import NyaCatMemory
from nyabot.ml import ChatClient
from nyabot.reply import reply_as_im

log = logging.getLogger(__name__)

HI_REPLY = "你好喵！我是一只猫娘喵！前面忘了中间忘了，反正我是一只猫娘喵"
KILL_REPLY = "猫娘似了喵"
LIVE_REPLY = "猫娘复活了喵"
SMART_IDLE_REPLY = "聪明猫娘在这里喵！"
MEM_KILL_REPLY = "猫娘的记忆被抹除成功了喵！"
CALLED_REPLY = "是不是有人叫我喵"
REFUSE_REPLY = "不想理你喵"
EMPTY_CALL_REPLY = "叫我什么事喵？"
CAT_WORD = "猫娘"

_INT_RE = re.compile(r"[+-]?[0-9]+")
_I64_MIN, _I64_MAX = -(2**63), 2**63 - 1


def _parse_i64(text: str) -> Optional[int]:
    if not _INT_RE.fullmatch(text):
        return None
    value = int(text)
    return value if _I64_MIN <= value <= _I64_MAX else None


class ChatPlugin:
    """Answers group chat in a role-play persona and handles the chat commands."""

    def __init__(self, config: ChatConfig, client: ChatClient) -> None:
        self.config = config
        self.client = client
        self.state = RunState()
        self.memory = NyaCatMemory(config.model)

    def register(self, registry: CommandRegistry) -> None:
        registry.on_common_command("$smart", self.exec_smart)
        registry.on_common_command("$hi", self.exec_hi)
        registry.on_super_command("$restart", self.exec_live)
        registry.on_super_command("$kill", self.exec_kill)
        registry.on_super_command("$mem_kill", self.exec_mem_kill)

    async def on_msg(self, bot: BotApi, event: MsgEvent) -> Optional[asyncio.Task]:
        """Handle a message; errors are logged, not raised."""
        if not event.is_group():
            return None
        try:
            return await self.handle_group_chat(bot, event)
        except Exception as exc:
            log.error("%s", exc)
            return None

    async def handle_group_chat(self, bot: BotApi, event: MsgEvent) -> Optional[asyncio.Task]:
        if event.group_id is None:
            raise ValueError("找不到群id")
        if event.group_id not in self.config.allow_groups:
            return None

        mentioned = (
            _parse_i64(seg.data["qq"])
            for seg in event.segments("at")
            if isinstance(seg.data.get("qq"), str)
        )
        if any(qq == event.self_id for qq in mentioned):
            return await self.at_me(event)

        try:
            bot_info = await self_bot_info(bot, event)
        except Exception:
            bot_info = None
        if bot_info is not None and event.text is not None and bot_info.nickname in event.text:
            return await self.at_me(event)

        if event.text is not None and CAT_WORD in event.text:
            if self.state.running():
                event.reply(CALLED_REPLY)
        return None

    async def at_me(self, event: MsgEvent) -> Optional[asyncio.Task]:
        """Treat the message as a question to the bot; return the answering task."""
        if event.text is None or event.text.startswith("$"):
            return None
        if not self.state.running():
            return None
        question = event.text
        if not question:
            event.reply_and_quote(EMPTY_CALL_REPLY)
            return None
        ctx_id = event.group_id if event.group_id is not None else event.user_id
        chat = self.memory.load_mem(ctx_id, question)
        log.info("模型思考上下文：%s", chat)
        try:
            out = await self.client.reply_as_nya_cat(chat)
        except Exception as exc:
            event.reply_and_quote(REFUSE_REPLY)
            log.error("模型在回复时发生错误：%s", exc)
            return None
        self.memory.save_mem(ctx_id, out)
        return reply_as_im(event, out, self.config.model)

    def _ok_exec(self, command: BotCommand) -> bool:
        group_id = command.event.group_id
        return group_id is not None and group_id in self.config.allow_groups

    async def exec_hi(self, command: BotCommand) -> None:
        if not self._ok_exec(command) or not self.state.running():
            return
        command.event.reply_and_quote(HI_REPLY)

    async def exec_kill(self, command: BotCommand) -> None:
        if not self._ok_exec(command) or not self.state.running():
            return
        command.event.reply_and_quote(KILL_REPLY)
        self.state.set_running(False)

    async def exec_live(self, command: BotCommand) -> None:
        if not self._ok_exec(command) or self.state.running():
            return
        command.event.reply_and_quote(LIVE_REPLY)
        self.state.set_running(True)

    async def exec_smart(self, command: BotCommand) -> Optional[asyncio.Task]:
        if not self._ok_exec(command) or not self.state.running():
            return None
        question = " ".join(command.args)
        if not question:
            command.event.reply_and_quote(SMART_IDLE_REPLY)
            return None
        try:
            answer = await self.client.reply_as_smart_nya_cat(question)
        except Exception as exc:
            answer = f"发生错误了喵：{exc}"
        return reply_as_im(command.event, answer, self.config.model)

    async def exec_mem_kill(self, command: BotCommand) -> None:
        if not self._ok_exec(command):
            return
        self.memory.clean()
        command.event.reply_and_quote(MEM_KILL_REPLY)
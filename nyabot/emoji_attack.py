"""Reacting to messages with emoji, for marked users or on command."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Optional

from nyabot.commands import BotCommand, CommandRegistry
from nyabot.configinit import PersistentData
from nyabot.emoji_config import EmojiAttackConfig, EmojiAttackData
from nyabot.infoev import MsgEvent

log = logging.getLogger(__name__)

COMMAND = "$monkey"
AUTO_COMMANDS = frozenset({"add", "del", "clean"})
ATTACK_COMMANDS = frozenset({"atk", "once"})
_EMOJI_BLACKLIST = frozenset({17})
ATTACK_EMOJI = tuple(str(i) for i in range(1, 22) if i not in _EMOJI_BLACKLIST)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_I64_MIN, _I64_MAX = -(2**63), 2**63 - 1


def _parse_i64(text: Any) -> Optional[int]:
    if not isinstance(text, str) or not _INT_RE.fullmatch(text):
        return None
    value = int(text)
    return value if _I64_MIN <= value <= _I64_MAX else None


def _segment_ids(event: MsgEvent, kind: str, key: str) -> list[int]:
    parsed = (_parse_i64(seg.data.get(key)) for seg in event.segments(kind))
    return [value for value in parsed if value is not None]


def get_targets(command: BotCommand) -> list[int]:
    """Users @mentioned in the command (except the bot), then ids given after the sub-command."""
    event = command.event
    targets = [qq for qq in _segment_ids(event, "at", "qq") if qq != event.self_id]
    extra = (_parse_i64(arg) for arg in command.args[1:])
    targets.extend(value for value in extra if value is not None)
    return targets


class EmojiAttackPlugin:
    """Puts emoji reactions on the messages of marked users and on replied-to messages."""

    def __init__(self, config: EmojiAttackConfig, data: PersistentData) -> None:
        self.config = config
        self.data = data

    @property
    def _store(self) -> EmojiAttackData:
        return self.data.value

    def register(self, registry: CommandRegistry) -> None:
        registry.on_super_command(COMMAND, self.handle_cmd)

    async def _react(self, bot: Any, message_id: int, emoji: Any) -> None:
        for emoji_id in emoji:
            try:
                await bot.set_msg_emoji_like(message_id, emoji_id)
            except Exception as exc:
                log.error("Failed to set message emoji literally: %s", exc)
            await asyncio.sleep(self.config.wait_seconds())

    async def handle_group_msg(self, event: MsgEvent, bot: Any) -> None:
        """React to a group message if its sender is marked in that group."""
        if event.group_id not in self.config.allow_monkey_groups:
            return
        async with self.data.lock:
            marked = event.user_id in self._store.group_users.get(event.group_id, set())
        if not marked:
            return
        await self._react(bot, event.message_id, self.config.emoji)

    async def handle_cmd(self, command: BotCommand) -> None:
        group_id = command.event.group_id
        if group_id is None:
            return
        sub = command.args[0] if command.args else ""
        if sub in AUTO_COMMANDS:
            await self._handle_auto_cmd(command, sub, group_id)
        elif sub in ATTACK_COMMANDS:
            await self._handle_attack_cmd(command, sub)

    async def _handle_auto_cmd(self, command: BotCommand, sub: str, group_id: int) -> None:
        targets = get_targets(command)
        async with self.data.lock:
            users = self._store.group_users.setdefault(group_id, set())
            result = False
            if sub == "add":
                for target in targets:
                    if target not in users:
                        users.add(target)
                        result = True
                        break
            elif sub == "del":
                for target in targets:
                    if target in users:
                        users.discard(target)
                        result = True
                        break
            elif sub == "clean":
                users.clear()
                result = True
            else:
                log.error("存在处理器处理不了的命令")
        command.event.reply(f"操作{'成功' if result else '失败'}喵！")

    async def _handle_attack_cmd(self, command: BotCommand, sub: str) -> None:
        target_msgs = _segment_ids(command.event, "reply", "id")
        if sub == "atk":
            emoji = ATTACK_EMOJI
        elif sub == "once":
            emoji = tuple(self.config.emoji)
        else:
            log.error("存在处理器处理不了的命令")
            return
        for target in target_msgs:
            await self._react(command.bot, target, emoji)
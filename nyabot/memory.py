"""Per-conversation memory of the role-play chat."""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import Optional

from nyabot.chat_config import ChatModelCallConfig

log = logging.getLogger(__name__)


def _now(now: Optional[int]) -> int:
    return int(time.time()) if now is None else now


class NyaCatMemory:
    """Remembers recent messages for each group or user, within a window and age limit."""

    def __init__(self, config: ChatModelCallConfig) -> None:
        self.config = config
        self.user_memory: dict[int, deque[tuple[int, dict]]] = {}

    def _system_msg(self) -> dict:
        return {"role": "system", "content": self.config.role_prompt}

    def clean(self) -> None:
        self.user_memory.clear()

    def load_mem(self, user_id: int, new_msg: str, now: Optional[int] = None) -> list[dict]:
        """Record a question and return the conversation to send to the model."""
        log.info("群聊或用户%s发出提问:%s", user_id, new_msg)
        now = _now(now)
        history = self.user_memory.setdefault(user_id, deque())
        history.append((now, {"role": "user", "content": new_msg}))
        while history:
            chat_time, msg = history.popleft()
            if (
                len(history) < self.config.role_max_message
                and now - chat_time < self.config.role_context_expiration_time_second
            ):
                history.appendleft((chat_time, msg))
                break
            log.info("模型忘记了%s", msg)
        return [self._system_msg(), *(msg for _, msg in history)]

    def save_mem(self, user_id: int, new_chat_msg: str, now: Optional[int] = None) -> None:
        """Record the model's answer."""
        log.info("模型对群聊或用户%s回答:%s", user_id, new_chat_msg)
        history = self.user_memory.setdefault(user_id, deque())
        history.append((_now(now), {"role": "assistant", "content": new_chat_msg}))
        log.info("模型最终记忆：%s", list(history))
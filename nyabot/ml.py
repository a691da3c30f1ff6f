"""Calls to an OpenAI-compatible chat completion endpoint."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import httpx

from nyabot.chat_config import ChatModelCallConfig

log = logging.getLogger(__name__)


class ModelError(Exception):
    """Raised when the model cannot be reached or gives no answer."""


class ChatClient:
    """Sends chat messages to the configured model and returns its answer."""

    def __init__(
        self,
        config: ChatModelCallConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self._transport = transport

    async def completion_chat(self, messages: Iterable[dict], model: str) -> str:
        payload = {
            "model": model,
            "max_tokens": self.config.max_tokens,
            "messages": list(messages),
        }
        headers = {"Authorization": f"Bearer {self.config.key}"}
        url = f"{self.config.endpoint}/chat/completions"
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=120.0) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise ModelError(f"request to model failed: {exc}") from exc
        if response.is_error:
            raise ModelError(
                f"model endpoint answered {response.status_code}: {response.text}"
            )
        try:
            body: Any = response.json()
        except ValueError as exc:
            raise ModelError(f"model answered invalid JSON: {response.text}") from exc

        choices = body.get("choices") if isinstance(body, dict) else None
        if not isinstance(choices, list) or not choices:
            log.error("Model Null Output")
            raise ModelError(f"Models No Response.Origin Output:{body!r}")
        first = choices[0] if isinstance(choices[0], dict) else {}
        reason = first.get("finish_reason")
        if reason is not None:
            log.warning("model finished with %s", reason)
        message = first.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise ModelError(f"Models No Response.Origin Output:{body!r}")
        return content

    async def single_chat(self, text: str, model: str) -> str:
        return await self.completion_chat([{"role": "user", "content": text}], model)

    async def reply_as_nya_cat(self, messages: Iterable[dict]) -> str:
        """Answer a conversation in the role-play persona."""
        return await self.completion_chat(messages, self.config.role_model)

    async def reply_as_smart_nya_cat(self, question: str) -> str:
        """Answer a single question with the smart model and prompt."""
        return await self.single_chat(
            f"{self.config.smart_prompt}\n{question}", self.config.smart_model
        )
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Literal

from openai import OpenAI

from winnow.config import Settings
from winnow.types import ModelResponse

logger = logging.getLogger(__name__)

ApiStyle = Literal["chat", "responses"]

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


@dataclass(slots=True)
class ProviderConfig:
    name: str
    base_url: str
    api_key: str
    timeout_sec: int
    max_retries: int = 0
    api_style: ApiStyle = "chat"


class LLMProvider:
    """One OpenAI-compatible endpoint.

    Gemini and local servers only implement chat completions, so ``chat`` is
    the default style. A provider configured for the Responses API drops back
    to chat completions when the endpoint reports it as missing.
    """

    def __init__(self, config: ProviderConfig):
        self.config = config
        self.client = OpenAI(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=float(config.timeout_sec),
            max_retries=config.max_retries,
        )

    @property
    def name(self) -> str:
        return self.config.name

    def complete_text(self, *, model: str, prompt: str) -> ModelResponse:
        if self.config.api_style == "chat":
            return self._complete_via_chat_completions(model=model, prompt=prompt)

        try:
            return self._complete_via_responses(model=model, prompt=prompt)
        except Exception as exc:
            if not self._is_unsupported_responses_endpoint(exc):
                raise
            logger.warning(
                "Responses API unavailable for provider=%s; using chat.completions (%s)",
                self.config.name,
                exc,
            )
            return self._complete_via_chat_completions(model=model, prompt=prompt)

    def _complete_via_responses(self, *, model: str, prompt: str) -> ModelResponse:
        response = self.client.responses.create(
            model=model,
            input=[{"role": "user", "content": [{"type": "input_text", "text": prompt}]}],
        )
        text = getattr(response, "output_text", "") or ""
        return ModelResponse(content=text, raw=self._raw(response, "responses"))

    def _complete_via_chat_completions(self, *, model: str, prompt: str) -> ModelResponse:
        response = self.client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
        )
        return ModelResponse(
            content=self._extract_chat_text(response),
            raw=self._raw(response, "chat_completions"),
        )

    @staticmethod
    def _raw(response: Any, api_path: str) -> dict[str, Any]:
        raw = response.model_dump() if hasattr(response, "model_dump") else {}
        if not isinstance(raw, dict):
            raw = {"raw": raw}
        raw["api_path"] = api_path
        return raw

    @staticmethod
    def _extract_chat_text(response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None) if message is not None else None
        if content is None:
            return ""
        return content if isinstance(content, str) else str(content)

    @staticmethod
    def _is_unsupported_responses_endpoint(exc: Exception) -> bool:
        if getattr(exc, "status_code", None) == 404:
            return True
        message = str(exc).strip().lower()
        return bool(message) and ("not found" in message or "404" in message)


def parse_json(content: str) -> dict[str, Any]:
    candidate = content.strip()
    if not candidate:
        return {}

    match = _FENCE_RE.search(candidate)
    if match:
        candidate = match.group(1).strip()

    try:
        value = json.loads(candidate)
    except json.JSONDecodeError:
        logger.warning("Failed to parse JSON model output")
        return {}
    return value if isinstance(value, dict) else {}


class ProviderPool:
    def __init__(self, settings: Settings):
        self.settings = settings
        self._providers: dict[str, LLMProvider] = {}

    def get(self, name: str) -> LLMProvider | None:
        """Provider by name, or None when it is not configured."""
        if name == "gemini" and not self.settings.gemini_api_key:
            return None
        if name == "local" and not self.settings.local_llm_enabled:
            return None
        if name not in {"gemini", "local"}:
            raise ValueError(f"unknown LLM provider '{name}'")

        if name not in self._providers:
            self._providers[name] = LLMProvider(self._config_for(name))
        return self._providers[name]

    def _config_for(self, name: str) -> ProviderConfig:
        if name == "gemini":
            return ProviderConfig(
                name="gemini",
                base_url=self.settings.gemini_base_url,
                api_key=self.settings.gemini_api_key,
                timeout_sec=self.settings.gemini_timeout_sec,
                max_retries=self.settings.gemini_max_retries,
            )
        return ProviderConfig(
            name="local",
            base_url=self.settings.local_llm_base_url,
            api_key=self.settings.local_llm_api_key,
            timeout_sec=self.settings.local_llm_timeout_sec,
            max_retries=self.settings.local_llm_max_retries,
        )

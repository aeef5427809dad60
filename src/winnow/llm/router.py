from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from winnow.config import Settings, get_settings
from winnow.core.errors import GenerationError
from winnow.core.normalize import normalize_checklist
from winnow.llm.prompts import CHECKLIST_DRAFT_PROMPT
from winnow.llm.providers import LLMProvider, ProviderPool, parse_json
from winnow.types import ChecklistDraft, ConversationMessage

logger = logging.getLogger(__name__)

DRAFT_PENDING_RESPONSE = "Still working on the checklist."


class LLMRouter:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.pool = ProviderPool(self.settings)

    def summarize(self, prompt: str) -> str:
        """Free-text completion for an application summary."""
        return self._call_text(task="summary", prompt=prompt, model=self.settings.gemini_model_summary)

    def draft_checklist(
        self,
        *,
        messages: Iterable[ConversationMessage],
        user_message: str,
    ) -> ChecklistDraft:
        history = "\n\n".join(
            f"{'USER' if message.role == 'user' else 'MODEL'}: {message.content}" for message in messages
        )
        prompt = CHECKLIST_DRAFT_PROMPT.format(history=history, user_message=user_message)
        text = self._call_text(task="draft", prompt=prompt, model=self.settings.gemini_model_drafter)

        data = parse_json(text)
        if not data:
            # Unstructured replies are still shown to the user.
            return ChecklistDraft(ai_response=text.strip())
        return draft_from_payload(data)

    def _providers_for(self, task: str) -> list[LLMProvider]:
        primary = {
            "summary": self.settings.llm_router_summary_provider,
            "draft": self.settings.llm_router_draft_provider,
        }.get(task, self.settings.llm_router_default)
        secondary = "local" if primary == "gemini" else "gemini"

        providers = [self.pool.get(primary), self.pool.get(secondary)]
        return [provider for provider in providers if provider is not None]

    def _call_text(self, *, task: str, prompt: str, model: str) -> str:
        providers = self._providers_for(task)
        if not providers:
            raise GenerationError("no LLM provider is configured")

        last_error = ""
        for provider in providers:
            provider_model = self.settings.local_llm_model if provider.name == "local" else model
            try:
                text = provider.complete_text(model=provider_model, prompt=prompt).content.strip()
            except Exception as exc:
                logger.warning("LLM call failed task=%s provider=%s error=%s", task, provider.name, exc)
                last_error = f"{provider.name}: {exc}"
                continue
            if text:
                return text
            logger.warning("LLM returned empty completion task=%s provider=%s", task, provider.name)
            last_error = f"{provider.name}: empty completion"

        raise GenerationError(f"text generation failed ({last_error})")


def draft_from_payload(data: Mapping[str, Any]) -> ChecklistDraft:
    raw_items = data.get("checklist")
    if not isinstance(raw_items, list):
        raw_items = []
    # model-supplied ids are not trusted; items are numbered on arrival
    checklist = normalize_checklist(
        [
            {key: value for key, value in item.items() if key != "id"}
            for item in raw_items
            if isinstance(item, Mapping)
        ],
        assign_missing_ids=True,
    )

    return ChecklistDraft(
        title=str(data.get("title") or ""),
        progress=str(data.get("progress") or ""),
        checklist=checklist,
        ai_response=str(data.get("aiResponse") or DRAFT_PENDING_RESPONSE),
    )

from __future__ import annotations

from typing import Protocol

from mixmatch.services.llm.types import MatchItemsInput, MatchItemsOutput


class LLMProvider(Protocol):
    async def match_items(self, payload: MatchItemsInput, *, timeout_ms: int) -> MatchItemsOutput:
        ...


class NullProvider:
    """Safety net provider used when LLM is disabled."""

    name = "disabled"

    async def match_items(self, payload: MatchItemsInput, *, timeout_ms: int) -> MatchItemsOutput:
        from mixmatch.services.llm.types import LLMUsage, MatchItemsOutput

        return MatchItemsOutput(scores=[], usage=LLMUsage(model=self.name, prompt_version=payload.prompt_version))

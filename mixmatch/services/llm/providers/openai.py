from __future__ import annotations

import asyncio
import json
import re
import time
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

import logging

from mixmatch.services.llm.types import LLMUsage, MatchItemScoreOut, MatchItemsInput, MatchItemsOutput
from mixmatch.services.llm.prompts import build_match_prompt

logger = logging.getLogger("uvicorn.error")

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


class OpenAIProvider:
    def __init__(self, model_match: str, client: Optional[Any] = None):
        self.client = client or AsyncOpenAI()
        self.model_match = model_match

    async def _chat(self, messages: List[Dict[str, Any]], model: str, timeout_ms: int) -> Dict[str, Any]:
        start = time.perf_counter()
        logger.info("llm:openai request model=%s timeout_ms=%s", model, timeout_ms)
        try:
            resp = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=model,
                    messages=messages,
                    temperature=0.5,
                    response_format={"type": "json_object"},
                ),
                timeout=timeout_ms / 1000.0,
            )
        except asyncio.TimeoutError:
            logger.warning("llm:openai timeout model=%s timeout_ms=%s", model, timeout_ms)
            raise
        latency_ms = int((time.perf_counter() - start) * 1000)
        choice = resp.choices[0].message.content if resp.choices else "{}"
        return {
            "content": choice,
            "latency_ms": latency_ms,
            "tokens_in": getattr(resp.usage, "prompt_tokens", 0) if resp.usage else 0,
            "tokens_out": getattr(resp.usage, "completion_tokens", 0) if resp.usage else 0,
        }

    async def match_items(self, payload: MatchItemsInput, *, timeout_ms: int) -> MatchItemsOutput:
        messages = build_match_prompt(payload)
        res = await self._chat(messages, self.model_match, timeout_ms)
        return MatchItemsOutput(
            scores=_safe_parse_scores(res["content"] or ""),
            usage=LLMUsage(
                model=self.model_match,
                tokens_in=res["tokens_in"],
                tokens_out=res["tokens_out"],
                latency_ms=res["latency_ms"],
                prompt_version=payload.prompt_version,
            ),
        )


def _load_scores(raw: str) -> List[Any]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        # models sometimes wrap the array in prose
        m = _JSON_ARRAY.search(raw)
        if not m:
            return []
        data = json.loads(m.group(0))
    if isinstance(data, dict):
        data = data.get("scores", [])
    return data if isinstance(data, list) else []


def _safe_parse_scores(raw: str) -> List[MatchItemScoreOut]:
    try:
        entries = _load_scores(raw)
    except json.JSONDecodeError:
        return []
    out: List[MatchItemScoreOut] = []
    for e in entries:
        if not isinstance(e, dict):
            continue
        item_id = e.get("item_id", e.get("itemId"))
        score = e.get("score")
        if item_id is None or not isinstance(score, (int, float)):
            continue
        reason = e.get("reason")
        out.append(MatchItemScoreOut(item_id=str(item_id), score=float(score), reason=str(reason) if reason else None))
    return out

from __future__ import annotations

import json
from typing import Dict, List

from mixmatch.services.llm.types import MatchItemsInput


PROMPT_VERSION = "p1"

MATCH_SYS = (
    "You are a fashion stylist scoring how well each candidate item pairs with the base item. "
    "Score 0-100 using title, category, color, style and tags. "
    "Return ONLY JSON: {\"scores\": [{\"item_id\": \"...\", \"score\": 0-100, \"reason\": \"...\"}]}. "
    "Include every candidate exactly once; keep reasons under eight words."
)


def build_match_prompt(payload: MatchItemsInput) -> List[Dict[str, str]]:
    user_payload = {
        "base_item": payload.base_item,
        "candidates": payload.candidates,
        "prompt_version": payload.prompt_version or PROMPT_VERSION,
    }
    return [
        {"role": "system", "content": MATCH_SYS},
        {"role": "user", "content": json.dumps(user_payload, ensure_ascii=False)},
    ]

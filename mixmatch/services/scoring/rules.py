"""Rule-based compatibility scoring.

Used whenever the remote model cannot answer. Everything here is pure and
derives colour and style from free text, so it is cheap to recompute per
request.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

BASE_SCORE = 50.0
COMPLEMENTARY_BONUS = 30.0
SAME_COLOR_BONUS = 15.0
STYLE_BONUS = 20.0
NEUTRAL_BONUS = 10.0
TAG_BONUS = 5.0

UNKNOWN_COLOR = "unknown"
DEFAULT_STYLE = "casual"

COLOR_VOCABULARY: Tuple[str, ...] = (
    "black",
    "white",
    "blue",
    "red",
    "green",
    "yellow",
    "pink",
    "purple",
    "orange",
    "brown",
    "gray",
    "grey",
    "beige",
    "navy",
)

STYLE_FAMILIES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("casual", "relaxed"), "casual"),
    (("formal", "business"), "formal"),
    (("sporty", "athletic"), "sporty"),
    (("vintage", "retro"), "vintage"),
    (("streetwear", "urban"), "streetwear"),
)

NEUTRALS = frozenset({"black", "white", "grey", "gray", "beige", "brown", "navy"})

# Directional: only the base colour's row is consulted.
COMPLEMENTARY: Dict[str, Tuple[str, ...]] = {
    "black": ("white", "grey", "gray", "beige", "blue", "red"),
    "white": ("black", "blue", "navy", "red", "green"),
    "blue": ("white", "beige", "brown", "orange"),
    "red": ("black", "white", "navy", "beige"),
    "green": ("white", "brown", "beige"),
    "navy": ("white", "beige", "brown", "red"),
    "brown": ("beige", "white", "blue", "green"),
    "beige": ("black", "brown", "blue", "navy"),
}


def extract_color(text: Optional[str]) -> str:
    lower = (text or "").lower()
    for color in COLOR_VOCABULARY:
        if color in lower:
            return color
    return UNKNOWN_COLOR


def extract_style(text: Optional[str]) -> str:
    lower = (text or "").lower()
    for keywords, style in STYLE_FAMILIES:
        if any(k in lower for k in keywords):
            return style
    return DEFAULT_STYLE


def is_complementary(base_color: Optional[str], other_color: Optional[str]) -> bool:
    if not base_color or not other_color:
        return False
    return other_color.lower() in COMPLEMENTARY.get(base_color.lower(), ())


def is_neutral(color: Optional[str]) -> bool:
    return (color or "").lower() in NEUTRALS


def matching_tags(base_tags: Iterable[str], other_tags: Iterable[str]) -> List[str]:
    other = {t.lower() for t in other_tags or []}
    seen: set[str] = set()
    out: List[str] = []
    for tag in base_tags or []:
        t = tag.lower()
        if t in other and t not in seen:
            seen.add(t)
            out.append(t)
    return out


@dataclass(frozen=True)
class Signals:
    """Derived descriptors for one item."""

    color: Optional[str]
    style: Optional[str]
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RuleScore:
    score: float
    reason: str


def clamp(score: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, score))


def rule_score(base: Signals, candidate: Signals) -> RuleScore:
    score = BASE_SCORE
    reasons: List[str] = []

    if base.color and candidate.color:
        if is_complementary(base.color, candidate.color):
            score += COMPLEMENTARY_BONUS
            reasons.append("complementary colors")
        elif base.color.lower() == candidate.color.lower():
            score += SAME_COLOR_BONUS
            reasons.append("matching color")

    if base.style is not None and base.style == candidate.style:
        score += STYLE_BONUS
        reasons.append("matching style")

    if is_neutral(candidate.color):
        score += NEUTRAL_BONUS
        reasons.append("neutral tone")

    shared = matching_tags(base.tags, candidate.tags)
    if shared:
        score += TAG_BONUS * len(shared)
        reasons.append(f"{len(shared)} matching tags")

    return RuleScore(score=clamp(score), reason=", ".join(reasons) or "general compatibility")


def signals_from_title(title: Optional[str], tags: Iterable[str] = ()) -> Signals:
    return Signals(color=extract_color(title), style=extract_style(title), tags=tuple(tags or ()))

"""
Attendee matching: scores one persona against a candidate pool.

Scoring:
  - shared interests: +10 each, capped at 40
  - shared "looking for" goals: +30 each, capped at 60
  - percentage is the score clamped to 100

Pure functions only. Missing or empty tag lists just score zero.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from app.core.match_config import (
    INTEREST_POINTS,
    INTEREST_POINTS_CAP,
    LOOKING_FOR_POINTS,
    LOOKING_FOR_POINTS_CAP,
    MAX_REASONS,
    REASON_TAG_PREVIEW,
    DEFAULT_SUGGESTION_LIMIT,
)


@dataclass
class Persona:
    id: str
    wallet_address: str
    display_name: str
    bio: Optional[str] = None
    interests: List[str] = field(default_factory=list)
    looking_for: List[str] = field(default_factory=list)
    avatar_ipfs_hash: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class MatchResult:
    attendee: Persona
    score: int
    percentage: int
    reasons: List[str]
    shared_interests: List[str]
    shared_looking_for: List[str]


@dataclass(frozen=True)
class MatchQuality:
    label: str
    tier: str
    color: str
    emoji: str


# lower bound (inclusive) -> quality, highest first
_QUALITY_BANDS = (
    (80, MatchQuality("Excellent Match", "excellent", "text-green-400", "🔥")),
    (60, MatchQuality("Great Match", "great", "text-blue-400", "⭐")),
    (40, MatchQuality("Good Match", "good", "text-purple-400", "✨")),
    (20, MatchQuality("Potential Match", "potential", "text-yellow-400", "💡")),
)
_LOW_MATCH = MatchQuality("Low Match", "low", "text-gray-400", "👋")


def _shared(mine: Optional[Iterable[str]], theirs: Optional[Iterable[str]]) -> List[str]:
    """Set intersection by exact string equality, in the order of `mine`."""
    other = set(theirs or ())
    seen = set()
    out = []
    for tag in mine or ():
        if tag in other and tag not in seen:
            seen.add(tag)
            out.append(tag)
    return out


def _interests_reason(shared: Sequence[str]) -> str:
    preview = ", ".join(f"#{tag}" for tag in shared[:REASON_TAG_PREVIEW])
    extra = len(shared) - REASON_TAG_PREVIEW
    if extra > 0:
        return f"You both are interested in {preview} and {extra} more"
    return f"You both are interested in {preview}"


def score_match(user: Persona, candidate: Persona) -> MatchResult:
    score = 0
    reasons: List[str] = []

    shared_interests = _shared(user.interests, candidate.interests)
    if shared_interests:
        score += min(len(shared_interests) * INTEREST_POINTS, INTEREST_POINTS_CAP)
        reasons.append(_interests_reason(shared_interests))

    shared_looking_for = _shared(user.looking_for, candidate.looking_for)
    if shared_looking_for:
        score += min(len(shared_looking_for) * LOOKING_FOR_POINTS, LOOKING_FOR_POINTS_CAP)
        reasons.append(f"You both are looking for {', '.join(shared_looking_for)}")

    return MatchResult(
        attendee=candidate,
        score=score,
        percentage=min(score, 100),
        reasons=reasons[:MAX_REASONS],
        shared_interests=shared_interests,
        shared_looking_for=shared_looking_for,
    )


def rank_candidates(
    user: Persona,
    candidates: Iterable[Persona],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> List[MatchResult]:
    matches = [
        score_match(user, c)
        for c in candidates
        if c.wallet_address != user.wallet_address
    ]

    # sorted() is stable, so equal scores keep pool order
    ranked = sorted(
        (m for m in matches if m.score > 0),
        key=lambda m: m.score,
        reverse=True,
    )
    return ranked[:max(limit, 0)]


def quality_label(percentage: float) -> MatchQuality:
    for lower_bound, quality in _QUALITY_BANDS:
        if percentage >= lower_bound:
            return quality
    return _LOW_MATCH

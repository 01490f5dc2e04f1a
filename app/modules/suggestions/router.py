from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from loguru import logger
from sqlalchemy.orm import Session

from app.core.auth import is_valid_wallet_address, normalize_wallet
from app.core.db import get_db
from app.core import kv
from app.core.match_config import (
    DEFAULT_SUGGESTION_LIMIT,
    MAX_SUGGESTION_LIMIT,
    SUGGESTION_CACHE_TTL_SECONDS,
    SUGGESTION_POOL_SIZE,
)
from app.modules.personas.service import (
    get_persona_for_event,
    list_suggestion_candidates,
    to_match_persona,
)
from app.modules.personas.validation import parse_event_id
from app.services.matching import MatchResult, quality_label, rank_candidates

router = APIRouter(prefix="/v1/events", tags=["suggestions"])


def _cache_key(event_id: int, wallet: str) -> str:
    return f"suggestions:{event_id}:{wallet.lower()}"


def _serialize(match: MatchResult) -> dict:
    out = asdict(match)
    out["quality"] = asdict(quality_label(match.percentage))
    return jsonable_encoder(out)


@router.get("/{event_id}/suggested-connections")
def suggested_connections(
    event_id: str,
    wallet: Optional[str] = None,
    limit: int = DEFAULT_SUGGESTION_LIMIT,
    db: Session = Depends(get_db),
):
    if not wallet:
        raise HTTPException(status_code=400, detail="Wallet address is required")
    if not is_valid_wallet_address(wallet.strip()):
        raise HTTPException(status_code=400, detail="Invalid wallet address format")
    if limit < 1 or limit > MAX_SUGGESTION_LIMIT:
        raise HTTPException(status_code=400, detail=f"Limit must be between 1 and {MAX_SUGGESTION_LIMIT}")

    parsed_event_id = parse_event_id(event_id)
    if parsed_event_id is None:
        raise HTTPException(status_code=400, detail="Invalid event ID")
    event_id = parsed_event_id

    wallet = normalize_wallet(wallet)
    key = _cache_key(event_id, wallet)

    cached: Optional[List[dict]] = kv.get_json(key)
    if cached is not None:
        logger.debug(f"[suggestions] cache hit | key={key}")
        return {"success": True, "data": cached[:limit], "cached": True}

    me = get_persona_for_event(db, event_id, wallet)
    if not me:
        raise HTTPException(
            status_code=404,
            detail="You must create a persona for this event to see suggestions",
        )

    candidates = [to_match_persona(row) for row in list_suggestion_candidates(db, event_id, wallet)]
    if not candidates:
        return {
            "success": True,
            "data": [],
            "cached": False,
            "message": "No other attendees found for suggestions",
        }

    ranked = rank_candidates(to_match_persona(me), candidates, SUGGESTION_POOL_SIZE)
    data = [_serialize(m) for m in ranked]
    kv.set_json(key, data, SUGGESTION_CACHE_TTL_SECONDS)

    logger.info(f"[suggestions] computed | event={event_id} wallet={wallet} candidates={len(candidates)} ranked={len(data)}")
    return {"success": True, "data": data[:limit], "cached": False}

from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from loguru import logger
from sqlalchemy.orm import Session

from app.core.auth import get_current_wallet, normalize_wallet
from app.core.db import get_db
from app.core.match_config import PERSONA_DELETE_LIMIT_PER_WINDOW, PERSONA_WRITE_LIMIT_PER_WINDOW
from app.core.rate_limit import enforce_rate_limit, rate_limit_headers
from app.schemas.base import Envelope, ErrorDetail
from .schemas import PersonaCreateIn, PersonaOut, PersonaUpdateIn
from .service import (
    PersonaError,
    create_persona,
    delete_persona,
    list_event_personas,
    list_wallet_personas,
    update_persona,
)
from .validation import (
    PersonaInput,
    parse_event_id,
    sanitize_persona,
    sanitize_persona_update,
    validate_persona,
    validate_persona_update,
)

router = APIRouter(prefix="/v1/personas", tags=["personas"])


def _raise_http(e: PersonaError) -> NoReturn:
    raise HTTPException(status_code=e.status_code, detail=str(e)) from e


def _raise_validation(errors: List[str]) -> NoReturn:
    raise HTTPException(
        status_code=400,
        detail=ErrorDetail(error="Validation failed", errors=errors).model_dump(),
    )


def _dump(personas) -> List[dict]:
    return [PersonaOut.model_validate(p).model_dump(mode="json") for p in personas]


# ----------------------------
# CREATE
# ----------------------------
@router.post("", status_code=201)
def persona_create(
    payload: PersonaCreateIn,
    response: Response,
    wallet: str = Depends(get_current_wallet),
    db: Session = Depends(get_db),
):
    limit = enforce_rate_limit(f"persona:create:{wallet}", PERSONA_WRITE_LIMIT_PER_WINDOW)
    response.headers.update(rate_limit_headers(limit))

    data = PersonaInput(wallet_address=wallet, **payload.model_dump())
    result = validate_persona(data)
    if not result.is_valid:
        logger.info(f"[personas] create rejected | wallet={wallet} errors={result.errors}")
        _raise_validation(result.errors)

    try:
        persona = create_persona(db, sanitize_persona(data))
    except PersonaError as e:
        _raise_http(e)

    return Envelope(data=_dump([persona])[0])


# ----------------------------
# READ
# ----------------------------
@router.get("")
def persona_list(
    event_id: Optional[str] = None,
    wallet: Optional[str] = None,
    db: Session = Depends(get_db),
):
    if event_id is None:
        raise HTTPException(status_code=400, detail="event_id query parameter is required")

    parsed = parse_event_id(event_id)
    if parsed is None:
        raise HTTPException(status_code=400, detail="Invalid event ID")

    rows = list_event_personas(db, parsed, normalize_wallet(wallet) if wallet else None)
    return Envelope(data=_dump(rows))


@router.get("/me")
def persona_mine(
    wallet: str = Depends(get_current_wallet),
    db: Session = Depends(get_db),
):
    return Envelope(data=_dump(list_wallet_personas(db, wallet)))


# ----------------------------
# UPDATE / DELETE
# ----------------------------
@router.patch("/{persona_id}")
def persona_update(
    persona_id: str,
    payload: PersonaUpdateIn,
    response: Response,
    wallet: str = Depends(get_current_wallet),
    db: Session = Depends(get_db),
):
    limit = enforce_rate_limit(f"persona:update:{wallet}", PERSONA_WRITE_LIMIT_PER_WINDOW)
    response.headers.update(rate_limit_headers(limit))

    fields = payload.model_dump(exclude_unset=True)
    result = validate_persona_update(fields)
    if not result.is_valid:
        _raise_validation(result.errors)

    try:
        persona = update_persona(db, persona_id, wallet, sanitize_persona_update(fields))
    except PersonaError as e:
        _raise_http(e)

    return Envelope(data=_dump([persona])[0])


@router.delete("/{persona_id}")
def persona_delete(
    persona_id: str,
    response: Response,
    wallet: str = Depends(get_current_wallet),
    db: Session = Depends(get_db),
):
    limit = enforce_rate_limit(f"persona:delete:{wallet}", PERSONA_DELETE_LIMIT_PER_WINDOW)
    response.headers.update(rate_limit_headers(limit))

    try:
        delete_persona(db, persona_id, wallet)
    except PersonaError as e:
        _raise_http(e)

    return {"success": True, "message": "Persona deleted successfully"}

from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.auth import get_current_wallet, is_valid_wallet_address, normalize_wallet
from app.core.db import get_db
from app.schemas.enums import ConnectionStatus
from .errors import ConnectionRequestError, RateLimited
from .schemas import ConnectionRequestIn, ConnectionRequestOut
from .service import (
    request_connection,
    accept_connection,
    reject_connection,
    block_connection,
    list_connections,
)

router = APIRouter(prefix="/v1/connections", tags=["connections"])


def _raise_http(e: ConnectionRequestError) -> NoReturn:
    headers = None
    if isinstance(e, RateLimited):
        headers = {"Retry-After": str(e.days_remaining * 24 * 60 * 60)}
    raise HTTPException(status_code=e.status_code, detail=e.message, headers=headers) from e


@router.post("/request", response_model=ConnectionRequestOut, status_code=201)
def connect_request(
    payload: ConnectionRequestIn,
    wallet: str = Depends(get_current_wallet),
    db: Session = Depends(get_db),
):
    if not payload.to_wallet:
        raise HTTPException(status_code=400, detail="Recipient wallet address is required")
    if not is_valid_wallet_address(payload.to_wallet.strip()):
        raise HTTPException(status_code=400, detail="Invalid recipient wallet address format")

    try:
        return request_connection(
            db,
            wallet,
            normalize_wallet(payload.to_wallet),
            event_id=payload.event_id,
            message=payload.message,
        )
    except ConnectionRequestError as e:
        _raise_http(e)


@router.patch("/{request_id}/accept", response_model=ConnectionRequestOut)
def connect_accept(
    request_id: str,
    wallet: str = Depends(get_current_wallet),
    db: Session = Depends(get_db),
):
    try:
        return accept_connection(db, request_id, wallet)
    except ConnectionRequestError as e:
        _raise_http(e)


@router.patch("/{request_id}/reject", response_model=ConnectionRequestOut)
def connect_reject(
    request_id: str,
    wallet: str = Depends(get_current_wallet),
    db: Session = Depends(get_db),
):
    try:
        return reject_connection(db, request_id, wallet)
    except ConnectionRequestError as e:
        _raise_http(e)


@router.patch("/{request_id}/block", response_model=ConnectionRequestOut)
def connect_block(
    request_id: str,
    wallet: str = Depends(get_current_wallet),
    db: Session = Depends(get_db),
):
    try:
        return block_connection(db, request_id, wallet)
    except ConnectionRequestError as e:
        _raise_http(e)


@router.get("", response_model=List[ConnectionRequestOut])
def connect_list(
    status: Optional[ConnectionStatus] = None,
    event_id: Optional[str] = None,
    global_only: bool = False,
    wallet: str = Depends(get_current_wallet),
    db: Session = Depends(get_db),
):
    return list_connections(
        db,
        wallet,
        status=status.value if status else None,
        event_id=event_id,
        global_only=global_only,
    )

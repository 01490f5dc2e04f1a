import math
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy import or_

from app.core.db import utcnow
from app.core.match_config import REJECTION_COOLDOWN_DAYS
from app.modules.notifications.service import notify
from app.schemas.enums import ConnectionStatus, NotificationType
from .errors import ConnectionRequestError, Conflict, Forbidden, InvalidRequest, NotFound, RateLimited
from .models import ConnectionRequest

REJECTION_COOLDOWN = timedelta(days=REJECTION_COOLDOWN_DAYS)
_DAY_SECONDS = 24 * 60 * 60


# ---------- HELPERS ----------

def _pair_low_high(a: str, b: str) -> Tuple[str, str]:
    return (a, b) if a < b else (b, a)


def _scope_key(event_id: Optional[str]) -> str:
    return event_id or ""


def find_connection(
    db: Session,
    wallet_a: str,
    wallet_b: str,
    event_id: Optional[str] = None,
) -> Optional[ConnectionRequest]:
    """
    Deciding record for the unordered pair in exactly this scope: a blocked
    record if there is one, else the latest by updated_at.
    A global lookup never matches an event-scoped record and vice versa.
    """
    low, high = _pair_low_high(wallet_a, wallet_b)
    return (
        db.query(ConnectionRequest)
        .filter(
            ConnectionRequest.wallet_low == low,
            ConnectionRequest.wallet_high == high,
            ConnectionRequest.scope_key == _scope_key(event_id),
        )
        .order_by(
            (ConnectionRequest.status == ConnectionStatus.blocked.value).desc(),
            ConnectionRequest.updated_at.desc(),
        )
        .first()
    )


def _has_blocked_requester(db: Session, from_wallet: str, to_wallet: str) -> bool:
    # the recipient blocked a request they sent to the requester, in any scope
    row = (
        db.query(ConnectionRequest.id)
        .filter(
            ConnectionRequest.from_wallet == to_wallet,
            ConnectionRequest.to_wallet == from_wallet,
            ConnectionRequest.status == ConnectionStatus.blocked.value,
        )
        .first()
    )
    return row is not None


def cooldown_days_remaining(rejected_at: datetime, now: datetime) -> int:
    """Whole days left before a rejected pair may be re-requested; 0 once expired."""
    remaining = (rejected_at + REJECTION_COOLDOWN) - now
    if remaining.total_seconds() <= 0:
        return 0
    return math.ceil(remaining.total_seconds() / _DAY_SECONDS)


def validate_connection_request(
    db: Session,
    from_wallet: str,
    to_wallet: str,
    event_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> None:
    now = now or utcnow()

    if from_wallet == to_wallet:
        raise InvalidRequest()

    existing = find_connection(db, from_wallet, to_wallet, event_id)
    if existing:
        if existing.status == ConnectionStatus.blocked.value:
            raise Forbidden()

        if existing.status in (ConnectionStatus.pending.value, ConnectionStatus.accepted.value):
            raise Conflict()

        if existing.status == ConnectionStatus.rejected.value:
            days_left = cooldown_days_remaining(existing.updated_at, now)
            if days_left > 0:
                raise RateLimited(days_left)

    if _has_blocked_requester(db, from_wallet, to_wallet):
        raise Forbidden()


def _get_connection(db: Session, request_id: str, statuses: Tuple[str, ...]) -> ConnectionRequest:
    conn = (
        db.query(ConnectionRequest)
        .filter(
            ConnectionRequest.id == request_id,
            ConnectionRequest.status.in_(statuses),
        )
        .first()
    )
    if not conn:
        raise NotFound()
    return conn


def _commit_transition(db: Session, conn: ConnectionRequest) -> ConnectionRequest:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"[connections] transition collided with open record | id={conn.id}")
        raise Conflict()
    db.refresh(conn)
    return conn


# ---------- STATE MACHINE ----------

def request_connection(
    db: Session,
    from_wallet: str,
    to_wallet: str,
    event_id: Optional[str] = None,
    message: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ConnectionRequest:
    now = now or utcnow()
    event_id = event_id or None

    try:
        validate_connection_request(db, from_wallet, to_wallet, event_id, now)
    except ConnectionRequestError as e:
        logger.info(f"[connections] request refused | from={from_wallet} to={to_wallet} event={event_id} kind={e.kind}")
        raise

    low, high = _pair_low_high(from_wallet, to_wallet)
    conn = ConnectionRequest(
        from_wallet=from_wallet,
        to_wallet=to_wallet,
        wallet_low=low,
        wallet_high=high,
        event_id=event_id,
        scope_key=_scope_key(event_id),
        is_global=event_id is None,
        status=ConnectionStatus.pending.value,
        message=message or None,
        created_at=now,
        updated_at=now,
    )
    db.add(conn)

    # check-then-insert is not atomic; the partial unique index settles races
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"[connections] duplicate insert lost race | from={from_wallet} to={to_wallet} event={event_id}")
        raise Conflict()
    db.refresh(conn)

    logger.info(f"[connections] request created | id={conn.id} from={from_wallet} to={to_wallet} event={event_id}")

    notify(
        db,
        to_wallet,
        NotificationType.connection_request.value,
        {
            "title": "New Connection Request",
            "message": f"{from_wallet} wants to connect with you",
            "link": "/connections",
            "data": {
                "connectionId": conn.id,
                "fromWallet": from_wallet,
                "eventId": event_id,
            },
        },
    )
    return conn


def accept_connection(
    db: Session,
    request_id: str,
    acting_wallet: str,
    now: Optional[datetime] = None,
) -> ConnectionRequest:
    conn = _get_connection(db, request_id, (ConnectionStatus.pending.value,))

    if conn.to_wallet != acting_wallet:
        logger.info(f"[connections] accept by non-recipient | id={request_id} wallet={acting_wallet}")
        raise Forbidden("Only the recipient can accept this request")

    conn.status = ConnectionStatus.accepted.value
    conn.updated_at = now or utcnow()
    conn = _commit_transition(db, conn)

    logger.info(f"[connections] accepted | id={conn.id} from={conn.from_wallet} to={conn.to_wallet}")

    notify(
        db,
        conn.from_wallet,
        NotificationType.connection_accepted.value,
        {
            "title": "Connection Accepted",
            "message": f"{acting_wallet} accepted your connection request",
            "link": "/connections",
            "data": {
                "connectionId": conn.id,
                "fromWallet": acting_wallet,
            },
        },
    )
    return conn


def reject_connection(
    db: Session,
    request_id: str,
    acting_wallet: str,
    now: Optional[datetime] = None,
) -> ConnectionRequest:
    conn = _get_connection(db, request_id, (ConnectionStatus.pending.value,))

    if conn.to_wallet != acting_wallet:
        logger.info(f"[connections] reject by non-recipient | id={request_id} wallet={acting_wallet}")
        raise Forbidden("Only the recipient can reject this request")

    # updated_at starts the re-request cooldown
    conn.status = ConnectionStatus.rejected.value
    conn.updated_at = now or utcnow()
    conn = _commit_transition(db, conn)

    logger.info(f"[connections] rejected | id={conn.id} from={conn.from_wallet} to={conn.to_wallet}")
    return conn


def block_connection(
    db: Session,
    request_id: str,
    acting_wallet: str,
    now: Optional[datetime] = None,
) -> ConnectionRequest:
    conn = _get_connection(
        db,
        request_id,
        (ConnectionStatus.pending.value, ConnectionStatus.rejected.value),
    )

    if acting_wallet not in (conn.from_wallet, conn.to_wallet):
        logger.info(f"[connections] block by outsider | id={request_id} wallet={acting_wallet}")
        raise Forbidden("Only a participant can block this connection")

    conn.status = ConnectionStatus.blocked.value
    conn.updated_at = now or utcnow()
    conn = _commit_transition(db, conn)

    logger.info(f"[connections] blocked | id={conn.id} by={acting_wallet}")
    return conn


def list_connections(
    db: Session,
    wallet: str,
    status: Optional[str] = None,
    event_id: Optional[str] = None,
    global_only: bool = False,
) -> List[ConnectionRequest]:
    """
    Records where the wallet is either party, newest first. `event_id`
    narrows to one event; `global_only` to requests with no event.
    """
    q = db.query(ConnectionRequest).filter(
        or_(
            ConnectionRequest.from_wallet == wallet,
            ConnectionRequest.to_wallet == wallet,
        )
    )
    if status:
        q = q.filter(ConnectionRequest.status == status)
    if global_only:
        q = q.filter(ConnectionRequest.scope_key == "")
    elif event_id:
        q = q.filter(ConnectionRequest.scope_key == event_id)

    return q.order_by(ConnectionRequest.updated_at.desc()).all()

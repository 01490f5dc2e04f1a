from typing import Any, Dict, List, Optional

from loguru import logger
from sqlalchemy.orm import Session

from .models import Notification


def notify(db: Session, wallet: str, type_: str, payload: Dict[str, Any]) -> Optional[Notification]:
    """
    Fire-and-forget notification sink.

    Runs in its own transaction after the caller has committed. A failure is
    logged and rolled back, never raised: the caller's state change stands.
    """
    try:
        note = Notification(
            user_wallet=wallet,
            type=type_,
            title=payload.get("title", ""),
            message=payload.get("message", ""),
            link=payload.get("link"),
            data=payload.get("data"),
        )
        db.add(note)
        db.commit()
        db.refresh(note)
    except Exception:
        db.rollback()
        logger.opt(exception=True).warning(f"[notify] failed | wallet={wallet} type={type_}")
        return None

    logger.debug(f"[notify] sent | wallet={wallet} type={type_} id={note.id}")
    return note


def list_notifications(db: Session, wallet: str, unread_only: bool = False) -> List[Notification]:
    q = db.query(Notification).filter(Notification.user_wallet == wallet)
    if unread_only:
        q = q.filter(Notification.read.is_(False))
    return q.order_by(Notification.created_at.desc()).all()


def mark_read(db: Session, notification_id: str, wallet: str) -> Optional[Notification]:
    note = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_wallet == wallet)
        .first()
    )
    if not note:
        return None

    note.read = True
    db.commit()
    db.refresh(note)
    return note

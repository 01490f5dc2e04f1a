from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from sqlalchemy.orm import Session

from app.core.auth import get_current_wallet
from app.core.db import get_db
from app.schemas.base import BaseSchema
from .service import list_notifications, mark_read

router = APIRouter(prefix="/v1/notifications", tags=["notifications"])


class NotificationOut(BaseSchema):
    id: str
    user_wallet: str
    type: str
    title: str
    message: str
    link: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    read: bool
    created_at: datetime


@router.get("", response_model=List[NotificationOut])
def notifications_list(
    unread_only: bool = False,
    wallet: str = Depends(get_current_wallet),
    db: Session = Depends(get_db),
):
    return list_notifications(db, wallet, unread_only=unread_only)


@router.post("/{notification_id}/read", response_model=NotificationOut)
def notifications_mark_read(
    notification_id: str,
    wallet: str = Depends(get_current_wallet),
    db: Session = Depends(get_db),
):
    note = mark_read(db, notification_id, wallet)
    if not note:
        logger.info(f"[notifications] mark_read miss | id={notification_id} wallet={wallet}")
        raise HTTPException(status_code=404, detail="Notification not found")
    return note

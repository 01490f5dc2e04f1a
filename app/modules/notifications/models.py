import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime, JSON, Index
from app.core.db import Base, utcnow


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_wallet = Column(String(42), nullable=False, index=True)
    type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String, nullable=True)

    # free-form payload, e.g. {"connectionId": ..., "fromWallet": ...}
    data = Column(JSON, nullable=True)

    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_notifications_wallet_created", "user_wallet", "created_at"),
    )

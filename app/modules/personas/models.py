import uuid

from sqlalchemy import Column, String, Integer, Text, DateTime, JSON, CheckConstraint, UniqueConstraint
from app.core.db import Base, utcnow


class EventPersona(Base):
    __tablename__ = "event_personas"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    wallet_address = Column(String(42), nullable=False, index=True)
    event_id = Column(Integer, nullable=False, index=True)

    display_name = Column(String, nullable=False)
    bio = Column(Text, nullable=True)

    # tag lists stored as JSON: ["defi", "nft"]
    interests = Column(JSON, nullable=False, default=list)
    looking_for = Column(JSON, nullable=False, default=list)

    visibility = Column(
        String,
        CheckConstraint(
            "visibility IN ('public','attendees','connections','private')",
            name="event_personas_visibility_check",
        ),
        nullable=False,
        default="attendees",
    )

    avatar_ipfs_hash = Column(String, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("wallet_address", "event_id", name="uq_event_personas_wallet_event"),
    )

import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime, CheckConstraint, Index, text
from app.core.db import Base, utcnow

# statuses that hold a pair/scope; at most one such record may exist
OPEN_STATUSES_SQL = "status IN ('pending','accepted','blocked')"


class ConnectionRequest(Base):
    __tablename__ = "connection_requests"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    from_wallet = Column(String(42), nullable=False, index=True)
    to_wallet = Column(String(42), nullable=False, index=True)

    # unordered pair, sorted, for pair lookups and the uniqueness index
    wallet_low = Column(String(42), nullable=False)
    wallet_high = Column(String(42), nullable=False)

    event_id = Column(String, nullable=True, index=True)
    # event_id, or "" for global requests (NULLs are distinct in unique indexes)
    scope_key = Column(String, nullable=False, default="")
    is_global = Column(Boolean, nullable=False, default=True)

    status = Column(
        String,
        CheckConstraint(
            "status IN ('pending','accepted','rejected','blocked')",
            name="connection_requests_status_check",
        ),
        nullable=False,
        default="pending",
    )
    message = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index(
            "uq_connection_requests_open_pair",
            "wallet_low",
            "wallet_high",
            "scope_key",
            unique=True,
            postgresql_where=text(OPEN_STATUSES_SQL),
            sqlite_where=text(OPEN_STATUSES_SQL),
        ),
        Index("idx_connection_requests_pair_scope", "wallet_low", "wallet_high", "scope_key"),
    )

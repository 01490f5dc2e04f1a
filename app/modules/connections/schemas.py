from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.schemas.base import TimestampedSchema
from app.schemas.enums import ConnectionStatus


class ConnectionRequestIn(BaseModel):
    to_wallet: str
    event_id: Optional[str] = None
    message: Optional[str] = None


class ConnectionRequestOut(TimestampedSchema):
    id: str
    from_wallet: str
    to_wallet: str
    event_id: Optional[str] = None
    is_global: bool
    status: ConnectionStatus
    message: Optional[str] = None
    created_at: datetime
    updated_at: datetime

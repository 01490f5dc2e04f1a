from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel

from app.schemas.base import TimestampedSchema


class PersonaCreateIn(BaseModel):
    event_id: Union[int, str, None] = None
    display_name: str = ""
    bio: Optional[str] = None
    interests: Optional[List[str]] = None
    looking_for: Optional[List[str]] = None
    visibility: Optional[str] = None
    avatar_ipfs_hash: Optional[str] = None


class PersonaUpdateIn(BaseModel):
    display_name: Optional[str] = None
    bio: Optional[str] = None
    interests: Optional[List[str]] = None
    looking_for: Optional[List[str]] = None
    visibility: Optional[str] = None
    avatar_ipfs_hash: Optional[str] = None


class PersonaOut(TimestampedSchema):
    id: str
    wallet_address: str
    event_id: int
    display_name: str
    bio: Optional[str] = None
    interests: List[str] = []
    looking_for: List[str] = []
    visibility: str
    avatar_ipfs_hash: Optional[str] = None
    created_at: datetime
    updated_at: datetime

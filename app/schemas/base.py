from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, ConfigDict

class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

class TimestampedSchema(BaseSchema):
    created_at: datetime | None = None
    updated_at: datetime | None = None

class Envelope(BaseModel):
    success: bool = True
    data: Any = None

class ErrorDetail(BaseModel):
    error: str
    errors: List[str] = []

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    status: int
    message: str
    errors: List[str] = Field(default_factory=list)
    timestamp: datetime
    path: str

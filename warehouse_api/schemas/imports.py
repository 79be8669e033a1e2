from typing import List, Optional

from pydantic import BaseModel, Field


class ImportRequest(BaseModel):
    source_url: str = Field(description="SQLAlchemy URL of the external database")
    username: Optional[str] = None
    password: Optional[str] = None


class ImportResult(BaseModel):
    success: bool
    message: str
    imported_records: int = 0
    errors: List[str] = Field(default_factory=list)

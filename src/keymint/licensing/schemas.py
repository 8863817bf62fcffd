"""Pydantic schemas for licensing endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BatchCreate(BaseModel):
    count: Optional[int] = Field(default=None, ge=1)  # None -> configured default


class BatchResponse(BaseModel):
    count: int
    keys: list[str]


class LicenseResponse(BaseModel):
    id: str
    key: str
    is_used: bool
    created_at: datetime

    model_config = {"from_attributes": True}

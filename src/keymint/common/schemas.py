"""Shared Pydantic schemas for Keymint."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    service: str = "keymint"


class ErrorResponse(BaseModel):
    error: str
    code: str
    detail: str = ""


class PaginatedResponse(BaseModel):
    items: list
    total: int
    page: int
    page_size: int
    pages: int

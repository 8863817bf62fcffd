"""Pydantic schemas for operator authentication endpoints."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class PrincipalResponse(BaseModel):
    user_id: str
    email: str
    is_admin: bool = False


class LoginResponse(BaseModel):
    user_id: str
    email: str
    access_token: str

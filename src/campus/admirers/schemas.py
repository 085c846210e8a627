"""Pydantic schemas for secret admirer endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class SendAdmirationRequest(BaseModel):
    target_code: str = Field(..., min_length=1, max_length=64)
    message: str | None = Field(None, max_length=500)

    @field_validator("message")
    @classmethod
    def blank_message_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None


class ActionResultResponse(BaseModel):
    success: bool
    error: str | None = None


class AdmirerCountResponse(BaseModel):
    count: int


class HasAdmiredResponse(BaseModel):
    sent: bool


class AdmirerItem(BaseModel):
    id: int
    message: str | None = None
    revealed: bool
    created_at: datetime | None = None


class AdmirerListResponse(BaseModel):
    admirers: list[AdmirerItem]


class RevealResponse(BaseModel):
    success: bool = True
    session_id: str

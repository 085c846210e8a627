"""Pydantic schemas for persona endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from campus.personas.service import AVATARS, COLORS


class PersonaResponse(BaseModel):
    avatar: str
    alias: str
    color: str


class UpdatePersonaRequest(BaseModel):
    avatar: str | None = None
    alias: str | None = Field(None, min_length=1, max_length=32)
    color: str | None = None

    @field_validator("avatar")
    @classmethod
    def avatar_in_palette(cls, v: str | None) -> str | None:
        if v is not None and v not in AVATARS:
            raise ValueError("avatar must be one of the palette glyphs")
        return v

    @field_validator("color")
    @classmethod
    def color_in_palette(cls, v: str | None) -> str | None:
        if v is not None and v not in COLORS:
            raise ValueError("color must be one of the palette colors")
        return v

    @field_validator("alias")
    @classmethod
    def alias_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("alias must not be blank")
        return v


class PaletteResponse(BaseModel):
    avatars: list[str]
    colors: list[str]

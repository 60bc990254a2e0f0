from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=256)


class LoginResponse(BaseModel):
    user_id: str
    username: str
    is_admin: bool
    access_token: str
    token_type: str = "bearer"


class SeedingStatusResponse(BaseModel):
    is_seeded: bool
    users: int
    roles: int
    tags: int
    recommendations: int
    faqs: int
    muac_ready: bool
    has_admin: bool


class CategoryOutcomeItem(BaseModel):
    category: str
    inserted: int
    patched: int
    error: Optional[str] = None


class SeedRunResponse(BaseModel):
    mode: str
    categories: list[CategoryOutcomeItem]
    password_generated: bool


class ValidationResponse(BaseModel):
    valid: bool
    missing: Optional[str] = None


class CleanupResponse(BaseModel):
    cleared: list[str]
    failed: list[str]


class ClassificationResponse(BaseModel):
    muac_cm: float
    muac_code: str
    tag: Optional[str] = None
    color: Optional[str] = None
    recommendation: Optional[str] = None
    recommendation_umbral: Optional[str] = None
    priority: Optional[int] = None

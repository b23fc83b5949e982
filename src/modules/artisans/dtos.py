"""Artisan DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``CreateArtisanDTO``: input for artisan creation.
- ``UpdateArtisanDTO``: partial update; ``None`` leaves a field untouched.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from modules.manufacturing.constants import STAGE_SEQUENCE


def _validate_specialties(value: Optional[List[str]]) -> Optional[List[str]]:
    if value is None:
        return value
    unknown = [stage for stage in value if stage not in STAGE_SEQUENCE]
    if unknown:
        raise ValueError(f"Unknown stages: {', '.join(unknown)}.")
    # keep first occurrence order
    return list(dict.fromkeys(value))


class CreateArtisanDTO(BaseModel):
    """Immutable DTO for artisan creation requests.

    ``specialties`` must be stage catalog values; duplicates are dropped.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str = ""
    role: str = ""
    specialties: List[str] = Field(default_factory=list)
    active: bool = True
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("specialties")
    @classmethod
    def specialties_must_be_stages(cls, v: List[str]) -> List[str]:
        return _validate_specialties(v)


class UpdateArtisanDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    specialties: Optional[List[str]] = None
    active: Optional[bool] = None
    average_rating: Optional[Decimal] = Field(default=None, ge=0, le=5, decimal_places=2)

    @field_validator("specialties")
    @classmethod
    def specialties_must_be_stages(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _validate_specialties(v)

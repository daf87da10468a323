"""Pydantic schemas for publishing and reading provider profiles."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SlugAvailability(str, Enum):
    AVAILABLE = "available"
    OWNED_BY_SELF = "owned_by_self"
    TAKEN_BY_OTHER = "taken_by_other"


class SlugCheckOut(BaseModel):
    slug: str
    availability: SlugAvailability | None = None  # None when slug normalizes to ""


class PublishRequest(BaseModel):
    # Omitted → derived from the draft's full name
    slug: str | None = Field(None, max_length=120)
    is_public: bool = True


class PublishOut(BaseModel):
    id: str
    slug: str
    url: str
    is_public: bool
    created: bool


class VisibilityUpdate(BaseModel):
    is_public: bool


class ProviderProfileOut(BaseModel):
    """Owner's view of a published profile (all columns but owner id)."""
    id: str
    slug: str
    full_name: str
    email: str
    phone: str
    specialty: str
    license_number: str
    license_state: str | None
    preferred_locations: str
    availability: str
    years_experience: str
    session_types: list[str] | None
    accepts_insurance: str | None
    languages: list[str] | None
    therapeutic_approaches: list[str] | None
    notes: str | None
    is_public: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PublicProfileOut(BaseModel):
    """Read-only projection for anonymous viewers.

    Mirrors the `provider_profiles_public` view: no contact details,
    license identifiers or owner id.
    """
    slug: str
    full_name: str
    specialty: str
    preferred_locations: str
    availability: str
    years_experience: str
    session_types: list[str] | None
    accepts_insurance: str | None
    languages: list[str] | None
    therapeutic_approaches: list[str] | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

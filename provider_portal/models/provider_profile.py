"""ProviderProfile — a published provider profile addressable by slug.

One row per slug. The owner (`user_id`) may republish to update the row
in place; anyone may read it through the public view while `is_public`.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from provider_portal.database import Base

# Columns that are never exposed by the public view / public route.
PRIVATE_COLUMNS = frozenset(
    {"email", "phone", "license_number", "license_state", "user_id"}
)


class ProviderProfile(Base):
    __tablename__ = "provider_profiles"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    slug: Mapped[str] = mapped_column(
        String(120), unique=True, nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    # Basic info
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    specialty: Mapped[str] = mapped_column(String(255), nullable=False)
    license_number: Mapped[str] = mapped_column(String(100), nullable=False)
    license_state: Mapped[str | None] = mapped_column(String(50))

    # Preferences
    preferred_locations: Mapped[str] = mapped_column(String(255), nullable=False)
    availability: Mapped[str] = mapped_column(String(20), nullable=False)  # full-time, part-time, flexible
    years_experience: Mapped[str] = mapped_column(String(50), nullable=False)
    session_types: Mapped[list | None] = mapped_column(JSON, default=None)
    accepts_insurance: Mapped[str | None] = mapped_column(String(50))
    languages: Mapped[list | None] = mapped_column(JSON, default=None)
    therapeutic_approaches: Mapped[list | None] = mapped_column(JSON, default=None)
    notes: Mapped[str | None] = mapped_column(Text)

    is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

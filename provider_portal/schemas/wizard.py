"""Pydantic schemas for the 3-step provider profile wizard.

Step schemas (`BasicInfoStep`, `PreferencesStep`) carry the required-field
rules for one step each. `DraftProfile` is the cumulative record with every
field optional, so a partially completed wizard can be stored and reloaded.
`DraftProfileComplete` combines both step schemas and is what the Confirm
step (and publishing) validates against.
"""

from pydantic import BaseModel, field_validator

from provider_portal.schemas.validators import (
    clean_string_list,
    validate_availability,
    validate_email,
    validate_optional_text,
    validate_phone,
    validate_text_length,
)


# ── Step 1: Basic info ──────────────────────────────────────

class BasicInfoStep(BaseModel):
    full_name: str
    email: str
    phone: str
    specialty: str
    license_number: str
    license_state: str | None = None

    model_config = {"coerce_numbers_to_str": True}

    @field_validator("full_name")
    @classmethod
    def _full_name(cls, v: str) -> str:
        return validate_text_length(v, "Name", min_length=2, max_length=100)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: str) -> str:
        return validate_phone(v)

    @field_validator("specialty")
    @classmethod
    def _specialty(cls, v: str) -> str:
        return validate_text_length(v, "Specialty", min_length=2, max_length=255)

    @field_validator("license_number")
    @classmethod
    def _license_number(cls, v: str) -> str:
        return validate_text_length(v, "License number", min_length=5, max_length=100)

    @field_validator("license_state")
    @classmethod
    def _license_state(cls, v: str | None) -> str | None:
        return validate_optional_text(v, "License state", max_length=50)


# ── Step 2: Preferences ─────────────────────────────────────

class PreferencesStep(BaseModel):
    preferred_locations: str
    availability: str
    years_experience: str
    notes: str | None = None
    session_types: list[str] | None = None
    accepts_insurance: str | None = None
    languages: list[str] | None = None
    therapeutic_approaches: list[str] | None = None

    model_config = {"coerce_numbers_to_str": True}

    @field_validator("preferred_locations")
    @classmethod
    def _preferred_locations(cls, v: str) -> str:
        return validate_text_length(v, "Preferred locations", max_length=255)

    @field_validator("availability")
    @classmethod
    def _availability(cls, v: str) -> str:
        return validate_availability(v)

    @field_validator("years_experience")
    @classmethod
    def _years_experience(cls, v: str) -> str:
        return validate_text_length(v, "Years of experience", max_length=50)

    @field_validator("accepts_insurance")
    @classmethod
    def _accepts_insurance(cls, v: str | None) -> str | None:
        return validate_optional_text(v, "Accepts insurance", max_length=50)

    @field_validator("session_types", "languages", "therapeutic_approaches")
    @classmethod
    def _string_lists(cls, v: list[str] | None) -> list[str] | None:
        return clean_string_list(v)


# ── Cumulative draft ────────────────────────────────────────

class DraftProfile(BaseModel):
    """Everything collected so far. Every field is optional."""
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    specialty: str | None = None
    license_number: str | None = None
    license_state: str | None = None
    preferred_locations: str | None = None
    availability: str | None = None
    years_experience: str | None = None
    notes: str | None = None
    session_types: list[str] | None = None
    accepts_insurance: str | None = None
    languages: list[str] | None = None
    therapeutic_approaches: list[str] | None = None

    model_config = {"from_attributes": True}


class DraftProfileComplete(BasicInfoStep, PreferencesStep):
    """All required fields of every data-bearing step."""


# ── Wizard state / progress ─────────────────────────────────

class StepInfo(BaseModel):
    number: int
    key: str
    title: str
    completed: bool
    reachable: bool


class WizardSnapshot(BaseModel):
    """What the draft cache stores between requests.

    `pending_inputs` holds unvalidated input per step number, so leaving a
    step keeps what was typed there. `published_slug` is the slug this
    draft was last published under (or loaded from for editing).
    """
    current_step: int = 1
    completed_steps: list[int] = []
    is_complete: bool = False
    draft: dict = {}
    pending_inputs: dict[int, dict] = {}
    published_slug: str | None = None


class WizardProgress(BaseModel):
    current_step: int
    total_steps: int
    completed_steps: list[int]
    reachable_steps: list[int]
    is_complete: bool
    draft: DraftProfile
    pending_input: dict | None = None
    published_slug: str | None = None
    steps: list[StepInfo]

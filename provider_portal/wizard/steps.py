"""Wizard step definitions and per-step validation.

STEPS is a fixed ordered tuple indexed by step number (1-based). Each
data-bearing step owns the fields of its schema; the terminal Confirm step
owns nothing and validates the whole draft instead.

`validate_step` never raises: it always returns a StepVerdict with either
the normalized data or a field → message map.
"""

from dataclasses import dataclass, field

from pydantic import BaseModel, ValidationError

from provider_portal.schemas.wizard import (
    BasicInfoStep,
    DraftProfileComplete,
    PreferencesStep,
)


@dataclass(frozen=True)
class StepDefinition:
    number: int
    key: str
    title: str
    # None → terminal step, validated against DraftProfileComplete
    schema: type[BaseModel] | None
    required: bool = True

    @property
    def fields(self) -> frozenset[str]:
        if self.schema is None:
            return frozenset()
        return frozenset(self.schema.model_fields)

    @property
    def is_terminal(self) -> bool:
        return self.number == TOTAL_STEPS


STEPS: tuple[StepDefinition, ...] = (
    StepDefinition(1, "basic_info", "Basic Information", BasicInfoStep),
    StepDefinition(2, "preferences", "Preferences", PreferencesStep),
    StepDefinition(3, "confirm", "Confirmation", None),
)

TOTAL_STEPS = len(STEPS)
FIRST_STEP = 1

# Steps that must be completed before the terminal step can finish
REQUIRED_STEPS = frozenset(s.number for s in STEPS if s.schema is not None and s.required)

FIELD_LABELS: dict[str, str] = {
    "full_name": "Name",
    "email": "Email",
    "phone": "Phone number",
    "specialty": "Specialty",
    "license_number": "License number",
    "license_state": "License state",
    "preferred_locations": "Preferred locations",
    "availability": "Availability",
    "years_experience": "Years of experience",
    "notes": "Notes",
    "session_types": "Session types",
    "accepts_insurance": "Insurance acceptance",
    "languages": "Languages",
    "therapeutic_approaches": "Therapeutic approaches",
}


def get_step(number: int) -> StepDefinition:
    if not FIRST_STEP <= number <= TOTAL_STEPS:
        raise ValueError(f"Step must be between {FIRST_STEP} and {TOTAL_STEPS}, got {number}")
    return STEPS[number - 1]


@dataclass
class StepVerdict:
    data: dict | None = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def _format_errors(exc: ValidationError) -> dict[str, str]:
    """Collapse pydantic errors to the first message per top-level field."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("__root__",)
        name = str(loc[0])
        if name in errors:
            continue
        label = FIELD_LABELS.get(name, name.replace("_", " ").capitalize())
        if error["type"] == "missing":
            message = f"{label} is required"
        elif error["type"] == "value_error":
            message = error["msg"].removeprefix("Value error, ")
        else:
            message = f"{label}: {error['msg']}"
        errors[name] = message
    return errors


def _run_schema(schema: type[BaseModel], raw) -> StepVerdict:
    if not isinstance(raw, dict):
        return StepVerdict(errors={"__root__": "Expected an object of field values"})
    try:
        model = schema.model_validate(raw)
    except ValidationError as exc:
        return StepVerdict(errors=_format_errors(exc))
    return StepVerdict(data=model.model_dump())


def validate_step(number: int, raw, draft: dict | None = None) -> StepVerdict:
    """Validate one step's raw input.

    For data-bearing steps `raw` is checked against the step schema. The
    terminal step ignores `raw` and checks the cumulative `draft`.
    """
    step = get_step(number)
    if step.schema is None:
        return validate_draft(draft or {})
    return _run_schema(step.schema, raw)


def validate_draft(draft: dict) -> StepVerdict:
    """Check that a cumulative draft has every required field."""
    return _run_schema(DraftProfileComplete, draft)

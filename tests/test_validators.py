"""Tests for per-step field validation."""

import pytest

from provider_portal.wizard.steps import STEPS, TOTAL_STEPS, get_step, validate_draft, validate_step


@pytest.mark.unit
class TestBasicInfoStep:
    """Step 1: name, email, phone, specialty, license number."""

    def test_valid_input_is_normalized(self, basic_info):
        verdict = validate_step(1, {**basic_info, "full_name": "  Jane Doe  "})

        assert verdict.ok
        assert verdict.data["full_name"] == "Jane Doe"
        assert verdict.data["email"] == "jane@x.com"
        assert verdict.data["license_state"] is None

    def test_errors_name_exactly_the_invalid_fields(self, basic_info):
        verdict = validate_step(
            1, {**basic_info, "email": "not-an-email", "phone": "555"}
        )

        assert not verdict.ok
        assert verdict.data is None
        assert set(verdict.errors) == {"email", "phone"}
        assert verdict.errors["email"] == "Please enter a valid email address"
        assert verdict.errors["phone"] == "Phone number must be at least 10 characters"

    def test_missing_fields_are_required(self):
        verdict = validate_step(1, {})

        assert set(verdict.errors) == {
            "full_name", "email", "phone", "specialty", "license_number",
        }
        assert verdict.errors["full_name"] == "Name is required"

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("full_name", "J", "Name must be at least 2 characters"),
            ("full_name", "x" * 101, "Name must be at most 100 characters"),
            ("full_name", "   ", "Name is required"),
            ("phone", "1" * 16, "Phone number must be at most 15 characters"),
            ("specialty", "N", "Specialty must be at least 2 characters"),
            ("license_number", "NE-1", "License number must be at least 5 characters"),
            ("specialty", "x" * 256, "Specialty must be at most 255 characters"),
            ("license_number", "N" * 101, "License number must be at most 100 characters"),
            ("license_state", "x" * 51, "License state must be at most 50 characters"),
        ],
    )
    def test_length_rules(self, basic_info, field, value, message):
        verdict = validate_step(1, {**basic_info, field: value})

        assert verdict.errors == {field: message}

    def test_unknown_keys_are_ignored(self, basic_info):
        verdict = validate_step(1, {**basic_info, "favourite_colour": "teal"})

        assert verdict.ok
        assert "favourite_colour" not in verdict.data

    def test_non_mapping_input_never_raises(self):
        verdict = validate_step(1, ["Jane Doe"])

        assert not verdict.ok
        assert "__root__" in verdict.errors


@pytest.mark.unit
class TestPreferencesStep:
    """Step 2: locations, availability, experience, notes."""

    def test_valid_input(self, preferences):
        verdict = validate_step(2, {**preferences, "notes": "Evenings only"})

        assert verdict.ok
        assert verdict.data["availability"] == "full-time"
        assert verdict.data["notes"] == "Evenings only"

    def test_notes_are_optional(self, preferences):
        assert validate_step(2, preferences).data["notes"] is None

    def test_availability_must_be_known(self, preferences):
        verdict = validate_step(2, {**preferences, "availability": "weekends"})

        assert verdict.errors == {
            "availability": "Availability must be one of: full-time, part-time, flexible"
        }

    def test_numeric_experience_is_accepted(self, preferences):
        verdict = validate_step(2, {**preferences, "years_experience": 10})

        assert verdict.data["years_experience"] == "10"

    def test_blank_required_fields(self, preferences):
        verdict = validate_step(
            2, {**preferences, "preferred_locations": "", "years_experience": " "}
        )

        assert set(verdict.errors) == {"preferred_locations", "years_experience"}

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("years_experience", "x" * 60, "Years of experience must be at most 50 characters"),
            ("preferred_locations", "x" * 256, "Preferred locations must be at most 255 characters"),
            ("accepts_insurance", "y" * 51, "Accepts insurance must be at most 50 characters"),
        ],
    )
    def test_values_must_fit_their_columns(self, preferences, field, value, message):
        verdict = validate_step(2, {**preferences, field: value})

        assert verdict.errors == {field: message}

    def test_blank_optional_text_becomes_none(self, basic_info, preferences):
        assert validate_step(1, {**basic_info, "license_state": "  "}).data["license_state"] is None
        assert validate_step(2, {**preferences, "accepts_insurance": ""}).data["accepts_insurance"] is None

    def test_optional_lists_drop_blank_entries(self, preferences):
        verdict = validate_step(
            2, {**preferences, "languages": ["English", " ", "Spanish "]}
        )

        assert verdict.data["languages"] == ["English", "Spanish"]


@pytest.mark.unit
class TestConfirmStep:
    def test_steps_are_fixed_and_ordered(self):
        assert TOTAL_STEPS == 3
        assert [s.key for s in STEPS] == ["basic_info", "preferences", "confirm"]
        assert get_step(3).is_terminal
        assert get_step(3).fields == frozenset()

    def test_get_step_rejects_out_of_range(self):
        with pytest.raises(ValueError):
            get_step(0)
        with pytest.raises(ValueError):
            get_step(4)

    def test_confirm_checks_the_whole_draft(self, complete_draft):
        assert validate_step(3, None, draft=complete_draft).ok

    def test_confirm_reports_missing_draft_fields(self, basic_info):
        verdict = validate_draft({**basic_info})

        assert set(verdict.errors) == {
            "preferred_locations", "availability", "years_experience",
        }

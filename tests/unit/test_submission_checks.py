"""
Unit tests for strict submission checking against form fields.
"""

import uuid

import pytest

from app.models.form_field import FormField
from app.services.submission_service import check_against_fields


def make_field(type_, label="Field", required=False, options=None, validation=None):
    return FormField(
        id=uuid.uuid4(),
        label=label,
        type=type_,
        is_required=required,
        options=options or [],
        validation=validation,
    )


class TestCheckAgainstFields:
    """Tests for check_against_fields."""

    def test_conforming_data_has_no_errors(self):
        name = make_field("TEXT", "Name", required=True)
        email = make_field("EMAIL", "Email")
        errors = check_against_fields(
            [name, email], {str(name.id): "Ada", str(email.id): "ada@example.com"}
        )
        assert errors == {}

    def test_missing_required_field(self):
        name = make_field("TEXT", "Name", required=True)
        errors = check_against_fields([name], {})
        assert errors == {str(name.id): "Name is required"}

    def test_optional_blank_field_is_fine(self):
        note = make_field("TEXTAREA", "Note")
        assert check_against_fields([note], {str(note.id): ""}) == {}

    def test_unknown_key_is_reported(self):
        errors = check_against_fields([], {"not-a-field": "x"})
        assert errors == {"not-a-field": "Unknown field"}

    @pytest.mark.parametrize(
        "type_,value,ok",
        [
            ("NUMBER", "42", True),
            ("NUMBER", 3.5, True),
            ("NUMBER", "forty", False),
            ("NUMBER", True, False),
            ("EMAIL", "someone@college.edu", True),
            ("EMAIL", "someone.college.edu", False),
            ("DATE", "2026-09-01", True),
            ("DATE", "next tuesday", False),
        ],
    )
    def test_typed_values(self, type_, value, ok):
        field = make_field(type_)
        errors = check_against_fields([field], {str(field.id): value})
        assert (errors == {}) is ok

    def test_select_must_be_an_option(self):
        field = make_field("SELECT", "Year", options=["First", "Second"])
        assert check_against_fields([field], {str(field.id): "First"}) == {}
        assert str(field.id) in check_against_fields([field], {str(field.id): "Fifth"})

    def test_checkbox_values_must_be_options(self):
        field = make_field("CHECKBOX", "Clubs", options=["Chess", "Robotics"])
        assert check_against_fields([field], {str(field.id): ["Chess"]}) == {}
        assert str(field.id) in check_against_fields([field], {str(field.id): ["Chess", "Poker"]})

    def test_length_rules(self):
        field = make_field("TEXTAREA", "Question", validation={"minLength": 10, "maxLength": 20})
        key = str(field.id)
        assert check_against_fields([field], {key: "short"})[key].endswith("at least 10 characters")
        assert check_against_fields([field], {key: "x" * 21})[key].endswith("at most 20 characters")
        assert check_against_fields([field], {key: "just right!"}) == {}

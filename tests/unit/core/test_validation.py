"""Unit tests for request validation rules."""

import pytest

from src.accounts.core.errors import ValidationFailed
from src.accounts.core.validation import (
    collect_errors,
    is_phone_number,
    normalize_email,
    UserCreateRequest,
    CREATE_MESSAGES,
    validate_create,
    validate_update,
)


class TestPhoneNumbers:
    @pytest.mark.parametrize(
        "value", ["+1 (555) 010-2030", "0612345678", "+44 20 7946 0958", "555.010.2030"]
    )
    def test_accepts_common_formats(self, value):
        assert is_phone_number(value)

    @pytest.mark.parametrize("value", ["12-34", "call me", "", "+", "1234567890123456"])
    def test_rejects_garbage(self, value):
        assert not is_phone_number(value)


class TestNormalizeEmail:
    def test_matches_stored_form(self):
        stored = validate_create({"name": "Ana", "email": "Ana@Example.COM"}).email

        assert normalize_email("Ana@Example.COM") == stored == "Ana@example.com"

    @pytest.mark.parametrize("value", [None, 42, "", "not-an-email"])
    def test_non_emails(self, value):
        assert normalize_email(value) is None


class TestCreateRules:
    def test_accepts_minimal_payload(self):
        request = validate_create({"name": "Ana", "email": "ana@x.com"})

        assert request.name == "Ana"
        assert request.email == "ana@x.com"
        assert request.phone is None
        assert request.address is None

    def test_drops_role_and_unknown_fields(self):
        request = validate_create(
            {"name": "Ana", "email": "ana@x.com", "role": "admin", "id": "forged"}
        )

        assert not hasattr(request, "role")
        assert "id" not in request.model_dump()

    def test_reports_every_violation_in_field_order(self):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_create({"email": "not-an-email", "phone": "abc", "address": "x"})

        exc = exc_info.value
        assert exc.status_code == 400
        assert exc.error == "validation_error"
        assert [e.field for e in exc.errors] == ["name", "email", "phone", "address"]
        assert [e.message for e in exc.errors] == [
            "Name is required",
            "Valid email is required",
            "Invalid phone number",
            "Address must be at least 5 characters",
        ]
        assert exc.errors[1].value == "not-an-email"

    def test_blank_name_is_rejected(self):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_create({"name": "   ", "email": "ana@x.com"})

        assert [e.field for e in exc_info.value.errors] == ["name"]

    def test_non_object_body_is_rejected(self):
        parsed, errors = collect_errors(UserCreateRequest, ["ana"], CREATE_MESSAGES)

        assert parsed is None
        assert errors[0].field == "body"

    def test_error_content_lists_items(self):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_create({"name": "Ana"})

        content = exc_info.value.to_content()
        assert content["error"] == "validation_error"
        assert content["errors"] == [
            {"field": "email", "message": "Valid email is required", "value": None}
        ]


class TestUpdateRules:
    def test_everything_is_optional(self):
        request = validate_update({})

        assert request.model_dump() == {
            "name": None,
            "email": None,
            "phone": None,
            "address": None,
        }

    def test_name_and_address_are_trimmed(self):
        request = validate_update({"name": "  Ana  ", "address": " 123 Main Street "})

        assert request.name == "Ana"
        assert request.address == "123 Main Street"

    def test_length_is_checked_after_trimming(self):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_update({"name": " A ", "address": "  abc   "})

        assert [(e.field, e.message) for e in exc_info.value.errors] == [
            ("name", "Name must be at least 2 characters"),
            ("address", "Address must be at least 5 characters"),
        ]

    def test_invalid_email_and_phone(self):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_update({"email": "nope", "phone": "12"})

        assert [(e.field, e.message) for e in exc_info.value.errors] == [
            ("email", "Invalid email format"),
            ("phone", "Invalid phone number"),
        ]

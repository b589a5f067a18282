"""Tests for proposal form validation."""

from proposalkit.validation import (
    FormSchema,
    ProposalForm,
    proposal_schema,
    required,
    validate_form,
)


class TestValidateForm:
    def test_title_required(self):
        result = validate_form(ProposalForm(title=""))
        assert not result.is_valid
        assert result.validation_errors == {"title": "Title is required"}

    def test_whitespace_title_rejected(self):
        assert not validate_form(ProposalForm(title="   ")).is_valid

    def test_valid_form(self):
        result = validate_form(ProposalForm(title="Fund grants"))
        assert result.is_valid
        assert result.validation_errors == {}

    def test_description_optional(self):
        assert validate_form({"title": "x", "description": ""}).is_valid

    def test_accepts_mapping(self):
        assert not validate_form({}).is_valid

    def test_title_not_required_when_disabled(self):
        assert validate_form(ProposalForm(), proposal_schema(require_title=False)).is_valid


class TestFormSchema:
    def test_first_error_per_field(self):
        calls = []

        def never(value):
            calls.append(value)
            return "unreachable"

        schema = FormSchema(fields={"title": [required("missing"), never]})
        result = schema.validate({"title": None})
        assert result.validation_errors == {"title": "missing"}
        assert calls == []

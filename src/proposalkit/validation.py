"""Proposal-level form fields and their validation schema."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

__all__ = [
    "FormSchema",
    "FormValidation",
    "ProposalForm",
    "Rule",
    "proposal_schema",
    "required",
    "validate_form",
]

# A rule returns an error message, or None when the value passes.
Rule = Callable[[Any], "str | None"]


@dataclass
class ProposalForm:
    title: str = ""
    description: str = ""
    vote_by_council: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "vote_by_council": self.vote_by_council,
        }


@dataclass
class FormValidation:
    """Outcome of validating a form.

    ``validation_errors`` maps field names to the first failing rule's
    message.
    """

    is_valid: bool
    validation_errors: dict[str, str] = field(default_factory=dict)


def required(message: str) -> Rule:
    def check(value: Any) -> str | None:
        if value is None:
            return message
        if isinstance(value, str) and not value.strip():
            return message
        return None

    return check


@dataclass
class FormSchema:
    """Field name → ordered rules.  Validation stops at a field's first error."""

    fields: dict[str, list[Rule]] = field(default_factory=dict)

    def validate(self, form: Mapping[str, Any] | ProposalForm) -> FormValidation:
        values = form.as_dict() if isinstance(form, ProposalForm) else form
        errors: dict[str, str] = {}
        for name, rules in self.fields.items():
            value = values.get(name)
            for rule in rules:
                message = rule(value)
                if message:
                    errors[name] = message
                    break
        return FormValidation(is_valid=not errors, validation_errors=errors)


def proposal_schema(*, require_title: bool = True) -> FormSchema:
    fields: dict[str, list[Rule]] = {}
    if require_title:
        fields["title"] = [required("Title is required")]
    return FormSchema(fields=fields)


def validate_form(
    form: Mapping[str, Any] | ProposalForm,
    schema: FormSchema | None = None,
) -> FormValidation:
    return (schema or proposal_schema()).validate(form)

"""
Declarative form schemas.

A form is a list of fields; each field names its constraints. `validate`
walks the schema against submitted data and collects every violation per
field, so the HTTP layer can report all problems at once. Rendering is not
handled here: `describe` only lists field names, labels and input types.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from .errors import ValidationError

EMAIL_RE = re.compile(r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)+$")


class Constraint:
    def check(self, value: str, data: Mapping[str, str]) -> str | None:
        raise NotImplementedError


@dataclass(frozen=True)
class NotBlank(Constraint):
    message: str = "This value should not be blank."

    def check(self, value, data):
        if not value.strip():
            return self.message
        return None


@dataclass(frozen=True)
class Length(Constraint):
    min: int

    def check(self, value, data):
        # blank values are NotBlank's job
        if value and len(value) < self.min:
            return f"This value is too short. It should have {self.min} characters or more."
        return None


@dataclass(frozen=True)
class Email(Constraint):
    message: str = "This value is not a valid email address."

    def check(self, value, data):
        if value and not EMAIL_RE.match(value):
            return self.message
        return None


@dataclass(frozen=True)
class Matches(Constraint):
    """The value must equal another field's value (password confirmation)."""

    other: str
    message: str = "Values must match"

    def check(self, value, data):
        if value != _text(data.get(self.other)):
            return self.message
        return None


@dataclass(frozen=True)
class Field:
    name: str
    label: str
    input_type: str = "text"
    constraints: tuple[Constraint, ...] = ()
    strip: bool = True


@dataclass(frozen=True)
class FormSpec:
    name: str
    fields: tuple[Field, ...] = field(default_factory=tuple)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def validate(form: FormSpec, data: Mapping[str, Any]) -> dict[str, str]:
    """Return the cleaned field values or raise ValidationError."""
    cleaned: dict[str, str] = {}
    errors: dict[str, list[str]] = {}
    for f in form.fields:
        value = _text(data.get(f.name))
        if f.strip:
            value = value.strip()
        cleaned[f.name] = value
    for f in form.fields:
        problems = [
            msg
            for msg in (c.check(cleaned[f.name], cleaned) for c in f.constraints)
            if msg
        ]
        if problems:
            errors[f.name] = problems
    if errors:
        raise ValidationError(errors)
    return cleaned


def describe(form: FormSpec) -> list[dict[str, str]]:
    return [
        {"name": f.name, "label": f.label, "type": f.input_type}
        for f in form.fields
    ]


LOGIN_FORM = FormSpec(
    "login",
    (
        Field("uname", "User Name", constraints=(NotBlank(),)),
        Field("password", "Password", "password", (NotBlank(),), strip=False),
    ),
)

REGISTER_FORM = FormSpec(
    "register",
    (
        Field("uname", "User Name (Must be at least 5 characters)",
              constraints=(NotBlank(), Length(5))),
        Field("password", "Password (Must be at least 5 characters)", "password",
              (NotBlank(), Length(5)), strip=False),
        Field("password_confirm", "Verify Password (Must be the same as above)", "password",
              (Matches("password", "Password and Verify Password must match"),), strip=False),
        Field("fname", "First Name", constraints=(NotBlank(), Length(2))),
        Field("lname", "Last Name", constraints=(NotBlank(), Length(2))),
        Field("email", "Email", constraints=(NotBlank(), Email())),
        Field("cc", "Credit Card", constraints=(NotBlank(),)),
    ),
)

SEARCH_FORM = FormSpec(
    "search",
    (Field("search", "Search", constraints=(NotBlank(),)),),
)

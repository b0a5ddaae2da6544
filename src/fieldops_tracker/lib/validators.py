# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Tuple, Union


# values of a form are untyped scalars as the widgets deliver them
FieldValues = Mapping[str, Any]
CustomCheck = Callable[[Any, FieldValues], Union[str, None]]

_EMAIL_REGEX = re.compile(
    r"(([^<>()\[\]\\.,;:\s@\"]+(\.[^<>()\[\]\\.,;:\s@\"]+)*)|(\".+\"))"
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])"
    r"|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))"
)

_NON_DIGIT = re.compile(r"\D")

_SPECIAL_CHARS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")

_TRUE_TEXT = ("true", "1", "yes", "on")
_FALSE_TEXT = ("false", "0", "no", "off")


def is_not_empty(value: Any) -> bool:
    """Return False for None, blank strings and empty collections."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) > 0
    return True


def is_valid_email(value: Any) -> bool:
    if not value or not isinstance(value, str):
        return False
    return _EMAIL_REGEX.fullmatch(value) is not None


def is_valid_malaysian_phone(value: Any) -> bool:
    """
    Check a Malaysian phone number by counting its digits.

    With the country code (60) the number has 11 or 12 digits, without it
    9 or 10 digits. Separators such as spaces and dashes are ignored.
    """
    if not value:
        return False
    cleaned = _NON_DIGIT.sub("", str(value))
    if cleaned.startswith("60"):
        return 11 <= len(cleaned) <= 12
    return 9 <= len(cleaned) <= 10


def is_number_in_range(
    value: Any, min_value: float | None = None, max_value: float | None = None
) -> bool:
    """
    Check that value is a number (or numeric text) within the inclusive bounds.

    :param value: number or string representation of a number
    :param min_value: lower bound, None means no lower bound
    :param max_value: upper bound, None means no upper bound
    :return: True if value is a number within range
    """
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return False
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    if math.isnan(number):
        return False
    if min_value is not None and number < min_value:
        return False
    if max_value is not None and number > max_value:
        return False
    return True


_STRENGTH_LABELS = ("Very Weak", "Weak", "Fair", "Good", "Strong", "Very Strong")


def password_strength_label(strength: int) -> str:
    if isinstance(strength, int) and 0 <= strength < len(_STRENGTH_LABELS):
        return _STRENGTH_LABELS[strength]
    return "Unknown"


@dataclass(frozen=True)
class PasswordCheck:
    is_valid: bool
    strength: int
    strength_label: str
    message: str


def validate_password(
    password: str | None,
    *,
    min_length: int = 8,
    require_uppercase: bool = True,
    require_lowercase: bool = True,
    require_numbers: bool = True,
    require_special_chars: bool = True,
    min_strength: int = 3,
) -> PasswordCheck:
    """
    Score a password against the enabled checks.

    Each passing check adds one point to the strength (0 to 5); the password
    is valid when the strength reaches min_strength.
    """
    if not password:
        return PasswordCheck(False, 0, password_strength_label(0), "Password is required")

    messages = []
    strength = 0

    if len(password) < min_length:
        messages.append(f"Password should be at least {min_length} characters")
    else:
        strength += 1

    for enabled, pattern, label in (
        (require_uppercase, r"[A-Z]", "one uppercase letter"),
        (require_lowercase, r"[a-z]", "one lowercase letter"),
        (require_numbers, r"[0-9]", "one number"),
    ):
        if not enabled:
            continue
        if re.search(pattern, password):
            strength += 1
        else:
            messages.append(f"Password should include at least {label}")

    if require_special_chars:
        if _SPECIAL_CHARS.search(password):
            strength += 1
        else:
            messages.append("Password should include at least one special character")

    return PasswordCheck(
        is_valid=strength >= min_strength,
        strength=strength,
        strength_label=password_strength_label(strength),
        message=". ".join(messages),
    )


def _length(value: Any) -> int:
    if isinstance(value, (str, list, tuple, set, frozenset, dict)):
        return len(value)
    return len(str(value))


# rule variants; each check() returns an error message or None


@dataclass(frozen=True)
class Required:
    message: str | None = None

    def check(self, value: Any, values: FieldValues) -> str | None:
        if is_not_empty(value):
            return None
        return self.message or "This field is required"


@dataclass(frozen=True)
class MinLength:
    length: int
    message: str | None = None

    def check(self, value: Any, values: FieldValues) -> str | None:
        if _length(value) < self.length:
            return self.message or f"Minimum length is {self.length} characters"
        return None


@dataclass(frozen=True)
class MaxLength:
    length: int
    message: str | None = None

    def check(self, value: Any, values: FieldValues) -> str | None:
        if _length(value) > self.length:
            return self.message or f"Maximum length is {self.length} characters"
        return None


@dataclass(frozen=True)
class Email:
    message: str | None = None

    def check(self, value: Any, values: FieldValues) -> str | None:
        if is_valid_email(value):
            return None
        return self.message or "Invalid email address"


@dataclass(frozen=True)
class Phone:
    region: str = "MY"
    message: str | None = None

    _region_checks = {"MY": is_valid_malaysian_phone}

    def __post_init__(self) -> None:
        if self.region not in self._region_checks:
            raise ValueError(f"Phone validation is not available for region {self.region!r}")

    def check(self, value: Any, values: FieldValues) -> str | None:
        if self._region_checks[self.region](value):
            return None
        return self.message or "Invalid Malaysian phone number"


@dataclass(frozen=True)
class Custom:
    fn: CustomCheck

    def check(self, value: Any, values: FieldValues) -> str | None:
        error = self.fn(value, values)
        return error or None


Rule = Union[Required, MinLength, MaxLength, Email, Phone, Custom]


def run_checks(checks: Sequence[Rule], value: Any, values: FieldValues) -> str | None:
    """
    Evaluate the checks of one present field, returning the first error.

    A required-and-empty value reports the required message; an optional
    empty value is valid whatever the other checks say.
    """
    for check in checks:
        if isinstance(check, Required):
            error = check.check(value, values)
            if error:
                return error

    if not is_not_empty(value):
        return None

    for check in checks:
        if isinstance(check, Required):
            continue
        error = check.check(value, values)
        if error:
            return error

    return None


@dataclass
class FieldRule:
    """Declarative rule set for a single form field."""

    type: type = str
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    email: bool = False
    malaysian_phone: bool = False
    custom: CustomCheck | None = None
    strip: bool = True
    required_message: str | None = None
    min_length_message: str | None = None
    max_length_message: str | None = None
    email_message: str | None = None
    phone_message: str | None = None
    extra: tuple[Rule, ...] = field(default_factory=tuple)

    @property
    def checks(self) -> list[Rule]:
        """the rule variants of this field, in evaluation order"""
        checks: list[Rule] = []
        if self.required:
            checks.append(Required(self.required_message))
        if self.min_length is not None:
            checks.append(MinLength(self.min_length, self.min_length_message))
        if self.max_length is not None:
            checks.append(MaxLength(self.max_length, self.max_length_message))
        if self.email:
            checks.append(Email(self.email_message))
        if self.malaysian_phone:
            checks.append(Phone("MY", self.phone_message))
        checks.extend(self.extra)
        if self.custom is not None:
            checks.append(Custom(self.custom))
        return checks

    def validate(self, value: Any, values: FieldValues | None = None) -> Tuple[bool, str]:
        """
        Validate the given value based on the rule.

        :param value: value to validate
        :param values: all values of the form, passed to custom checks
        :return: valid or not, error message if any
        """
        error = run_checks(self.checks, value, values or {})
        if error:
            return (False, error)
        return (True, "")

    def transform(self, value: Any) -> Any:
        if self.strip and isinstance(value, str):
            value = value.strip()
        if self.type == bool:
            if isinstance(value, bool):
                return value
            if value is None or value == "":
                return False
            if isinstance(value, str):
                if value.lower() in _TRUE_TEXT:
                    return True
                elif value.lower() in _FALSE_TEXT:
                    return False
            raise ValueError("This field must be a boolean value.")
        if value is None or value == "":
            return None
        return self.type(value)


RuleSet = Mapping[str, Union[FieldRule, Sequence[Rule]]]


def _checks_of(rule: FieldRule | Sequence[Rule]) -> Sequence[Rule]:
    if isinstance(rule, FieldRule):
        return rule.checks
    return rule


def validate_field(name: str, rule: FieldRule | Sequence[Rule], values: FieldValues) -> str | None:
    """Return the error message for one field, or None when it is valid."""
    checks = _checks_of(rule)
    if name not in values and not any(isinstance(c, Required) for c in checks):
        return None
    return run_checks(checks, values.get(name), values)


def validate_form(values: FieldValues, rules: RuleSet) -> dict[str, str]:
    """
    Validate every field named in rules.

    :param values: current form values
    :param rules: mapping of field name to FieldRule or a list of rule variants
    :return: mapping of field name to error message for the invalid fields
    """
    errors: dict[str, str] = {}
    for name, rule in rules.items():
        error = validate_field(name, rule, values)
        if error:
            errors[name] = error
    return errors


def String(
    required: bool = False,
    min_length: int | None = None,
    max_length: int | None = None,
    **kwargs: Any,
) -> FieldRule:
    """Helper function to create a String FieldRule."""
    return FieldRule(
        type=str,
        required=required,
        min_length=min_length,
        max_length=max_length,
        **kwargs,
    )


def Text(required: bool = False, max_length: int | None = 500, **kwargs: Any) -> FieldRule:
    """Helper function to create a free text (notes) FieldRule."""
    return FieldRule(type=str, required=required, max_length=max_length, **kwargs)


def EmailAddress(required: bool = False, max_length: int | None = None, **kwargs: Any) -> FieldRule:
    """Helper function to create an Email FieldRule."""
    return FieldRule(
        type=str,
        required=required,
        email=True,
        max_length=max_length,
        **kwargs,
    )


def MalaysianPhone(required: bool = False, **kwargs: Any) -> FieldRule:
    """Helper function to create a Malaysian phone FieldRule."""
    return FieldRule(type=str, required=required, malaysian_phone=True, **kwargs)


def _range_check(
    min_value: float | None, max_value: float | None, message: str | None
) -> CustomCheck:
    def check(value: Any, values: FieldValues) -> str | None:
        if is_number_in_range(value, min_value, max_value):
            return None
        if message:
            return message
        if min_value is not None and max_value is not None:
            return f"Value must be between {min_value:g} and {max_value:g}"
        if min_value is not None:
            return f"Value must be at least {min_value:g}"
        if max_value is not None:
            return f"Value must be at most {max_value:g}"
        return "Please enter a valid number"

    return check


def Number(
    required: bool = False,
    min_value: float | None = None,
    max_value: float | None = None,
    message: str | None = None,
) -> FieldRule:
    """Helper function to create a Float FieldRule."""
    return FieldRule(
        type=float,
        required=required,
        custom=_range_check(min_value, max_value, message),
    )


def Integer(
    required: bool = False,
    min_value: int | None = None,
    max_value: int | None = None,
    message: str | None = None,
) -> FieldRule:
    """Helper function to create an Integer FieldRule."""
    in_range = _range_check(min_value, max_value, message)

    def check(value: Any, values: FieldValues) -> str | None:
        error = in_range(value, values)
        if error:
            return error
        if not _is_whole_number(value):
            return "Please enter a whole number"
        return None

    return FieldRule(type=int, required=required, custom=check)


def _is_whole_number(value: Any) -> bool:
    # must agree with int(), which transform() uses
    if isinstance(value, str):
        try:
            int(value.strip())
        except ValueError:
            return False
        return True
    if isinstance(value, float):
        return value.is_integer()
    return isinstance(value, int)


def _boolean_check(value: Any, values: FieldValues) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip().lower() in _TRUE_TEXT + _FALSE_TEXT:
        return None
    return "This field must be a boolean value."


def Boolean(required: bool = False) -> FieldRule:
    """Helper function to create a Boolean FieldRule."""
    return FieldRule(type=bool, required=required, custom=_boolean_check)


def Choice(
    options: Sequence[Any], required: bool = False, message: str | None = None
) -> FieldRule:
    """Helper function to create a FieldRule accepting one of options."""
    allowed = tuple(options)

    def check(value: Any, values: FieldValues) -> str | None:
        if value in allowed:
            return None
        return message or "Please select a valid option"

    return FieldRule(type=str, required=required, custom=check)


def Password(required: bool = True, **options: Any) -> FieldRule:
    """Helper function to create a password FieldRule scored by validate_password."""

    def check(value: Any, values: FieldValues) -> str | None:
        result = validate_password(value, **options)
        if result.is_valid:
            return None
        return result.message or "Password is too weak"

    return FieldRule(type=str, required=required, strip=False, custom=check)


# EOF

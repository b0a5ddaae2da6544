# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

import datetime
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from fieldops_tracker.config.app import logger

from . import validators as v
from .formstate import FormEngine, SubmitHandler


class FormValidationError(ValueError):

    def __init__(self, errors: Mapping[str, str]):
        """
        Docstring for __init__

        :param errors: mapping of field name to error message
        """
        super().__init__(f"Value error(s) in {len(errors)} field(s): {dict(errors)}")
        self.errors = dict(errors)

    @property
    def error_list(self) -> list[tuple[str, str]]:
        """list of tuples of (message, field name)"""
        return [(message, name) for name, message in self.errors.items()]


class UnknownFormError(LookupError):

    def __init__(self, form_name: str):
        super().__init__(f"Form {form_name!r} is not registered")
        self.form_name = form_name


@dataclass
class InputField:

    rule: v.FieldRule
    label: str | None = None

    # value used when the caller does not provide initial data
    default: Any = ""

    field_list = "__fields__"

    def __set_name__(self, owner: Any, name: str) -> None:
        self._name = name
        self._owner = owner

        if self.field_list not in owner.__dict__:
            # start from the fields inherited from the parent form
            setattr(owner, self.field_list, list(getattr(owner, self.field_list, [])))
        getattr(owner, self.field_list).append(name)
        logger.debug("Registered field: %s in %s", name, owner.__name__)

    @property
    def name(self) -> str:
        return self._name

    def describe(self) -> dict[str, Any]:
        rule = self.rule
        return dict(
            name=self.name,
            label=self.label or self.name.replace("_", " ").capitalize(),
            type=rule.type.__name__,
            default=self.default,
            required=rule.required,
            min_length=rule.min_length,
            max_length=rule.max_length,
            email=rule.email,
            malaysian_phone=rule.malaysian_phone,
        )


def StringField(
    label: str,
    required: bool = False,
    min_length: int | None = None,
    max_length: int | None = None,
    default: Any = "",
    **kwargs: Any,
) -> InputField:
    _rule = v.String(
        required=required, min_length=min_length, max_length=max_length, **kwargs
    )
    return InputField(rule=_rule, label=label, default=default)


def TextField(
    label: str, required: bool = False, max_length: int | None = 500, default: Any = ""
) -> InputField:
    return InputField(
        rule=v.Text(required=required, max_length=max_length), label=label, default=default
    )


def EmailField(
    label: str,
    required: bool = False,
    max_length: int | None = None,
    default: Any = "",
    **kwargs: Any,
) -> InputField:
    _rule = v.EmailAddress(required=required, max_length=max_length, **kwargs)
    return InputField(rule=_rule, label=label, default=default)


def PhoneField(
    label: str, required: bool = False, default: Any = "", **kwargs: Any
) -> InputField:
    _rule = v.MalaysianPhone(required=required, **kwargs)
    return InputField(rule=_rule, label=label, default=default)


def NumberField(
    label: str,
    required: bool = False,
    min_value: float | None = None,
    max_value: float | None = None,
    message: str | None = None,
    default: Any = 0,
) -> InputField:
    _rule = v.Number(
        required=required, min_value=min_value, max_value=max_value, message=message
    )
    return InputField(rule=_rule, label=label, default=default)


def IntField(
    label: str,
    required: bool = False,
    min_value: int | None = None,
    max_value: int | None = None,
    message: str | None = None,
    default: Any = "",
) -> InputField:
    _rule = v.Integer(
        required=required, min_value=min_value, max_value=max_value, message=message
    )
    return InputField(rule=_rule, label=label, default=default)


def CheckboxField(label: str, default: bool = False) -> InputField:
    return InputField(rule=v.Boolean(), label=label, default=default)


def SelectField(
    label: str,
    options: Sequence[Any],
    required: bool = False,
    default: Any = "",
    message: str | None = None,
) -> InputField:
    _rule = v.Choice(options, required=required, message=message)
    return InputField(rule=_rule, label=label, default=default)


def PasswordField(label: str, required: bool = True, **options: Any) -> InputField:
    return InputField(rule=v.Password(required=required, **options), label=label)


def _iso_date(value: Any, values: v.FieldValues) -> str | None:
    if isinstance(value, datetime.date):
        return None
    try:
        datetime.date.fromisoformat(str(value))
    except ValueError:
        return "Please enter a valid date (YYYY-MM-DD)"
    return None


def _hhmm_time(value: Any, values: v.FieldValues) -> str | None:
    if isinstance(value, datetime.time):
        return None
    try:
        datetime.datetime.strptime(str(value), "%H:%M")
    except ValueError:
        return "Please enter a valid time (HH:MM)"
    return None


def DateField(label: str, required: bool = False, default: Any = "") -> InputField:
    return InputField(
        rule=v.FieldRule(required=required, custom=_iso_date), label=label, default=default
    )


def TimeField(label: str, required: bool = False, default: Any = "") -> InputField:
    return InputField(
        rule=v.FieldRule(required=required, custom=_hhmm_time), label=label, default=default
    )


_registry: dict[str, type["FormDefinition"]] = {}


class FormDefinition:
    """
    Declarative description of an entity form: its fields, their rules and
    default values. Subclasses with a form_name are registered by name.
    """

    form_name: str | None = None
    title: str | None = None

    __fields__: list[str] = []

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        # Automatically register forms that declare their own name
        form_name = cls.__dict__.get("form_name")
        if form_name:
            if form_name in _registry and _registry[form_name] is not cls:
                logger.warning("Form %s is registered again by %s", form_name, cls)
            _registry[form_name] = cls
            if "title" not in cls.__dict__:
                cls.title = cls.__name__.removesuffix("Form")

    @classmethod
    def input_fields(cls) -> dict[str, InputField]:
        return {name: getattr(cls, name) for name in cls.__fields__}

    @classmethod
    def rules(cls) -> dict[str, v.FieldRule]:
        return {field.name: field.rule for field in cls.input_fields().values()}

    @classmethod
    def initial_values(cls, initial_data: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """
        Default values of every field, overlaid with the non-null entries of
        initial_data (e.g. an entity loaded for editing). Keys that are not
        fields are kept as auxiliary values.
        """
        values = {name: field.default for name, field in cls.input_fields().items()}
        for key, value in (initial_data or {}).items():
            if value is not None:
                values[key] = value
        return values

    @classmethod
    def engine(
        cls,
        initial_data: Mapping[str, Any] | None = None,
        on_submit: SubmitHandler | None = None,
    ) -> FormEngine:
        return FormEngine(cls.initial_values(initial_data), cls.rules(), on_submit)

    @classmethod
    def validate(cls, values: Mapping[str, Any]) -> None:
        """
        Validate the values and raise FormValidationError listing all invalid fields
        """
        errors = v.validate_form(values, cls.rules())
        if errors:
            raise FormValidationError(errors)

    @classmethod
    def clean(cls, values: Mapping[str, Any]) -> dict[str, Any]:
        """
        Validate the values and convert the fields to their declared types
        """
        cls.validate(values)

        cleaned = dict(values)
        errors = {}
        for name, field in cls.input_fields().items():
            if name not in values:
                continue
            try:
                cleaned[name] = field.rule.transform(values[name])
            except ValueError as exc:
                errors[name] = str(exc)

        if errors:
            raise FormValidationError(errors)
        return cleaned

    @classmethod
    def describe(cls) -> dict[str, Any]:
        return dict(
            name=cls.form_name,
            title=cls.title,
            fields=[field.describe() for field in cls.input_fields().values()],
        )


def _load_forms() -> None:
    # importing the package registers every entity form
    import fieldops_tracker.forms  # noqa: F401


def get_form(form_name: str) -> type[FormDefinition]:
    _load_forms()
    try:
        return _registry[form_name]
    except KeyError:
        raise UnknownFormError(form_name) from None


def list_forms() -> list[type[FormDefinition]]:
    _load_forms()
    return [_registry[name] for name in sorted(_registry)]


# EOF

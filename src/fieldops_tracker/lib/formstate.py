# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

import copy
import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from fieldops_tracker.config.app import DEFAULT_SUBMIT_ERROR, FORM_ERROR_KEY, logger
from fieldops_tracker.lib.validators import RuleSet, validate_form


SubmitHandler = Callable[[dict[str, Any]], Union[Awaitable[Any], Any]]
Listener = Callable[["FormEngine"], None]


@dataclass(frozen=True)
class ChangeEvent:
    """
    An input change as delivered by a widget.

    Checkbox inputs carry their state in ``checked``; every other input
    type carries its raw textual or numeric ``value``.
    """

    value: Any = None
    type: str = "text"
    checked: bool = False


def extract_value(event: Any) -> Any:
    if isinstance(event, ChangeEvent):
        if event.type == "checkbox":
            return event.checked
        return event.value
    return event


@dataclass(frozen=True)
class FormSnapshot:
    values: dict[str, Any]
    errors: dict[str, str]
    touched: frozenset[str]
    is_submitting: bool
    is_form_valid: bool

    def as_dict(self) -> dict[str, Any]:
        return dict(
            values=self.values,
            errors=self.errors,
            touched=sorted(self.touched),
            is_submitting=self.is_submitting,
            is_valid=self.is_form_valid,
        )


async def _no_submit(values: dict[str, Any]) -> None:
    return None


class FormEngine:
    """
    State of one form instance: values, errors, touched fields and the
    submission lifecycle.

    Errors are recomputed from the values after every mutation. Consumers
    should display the error of a field only when the field is touched,
    see visible_error().
    """

    def __init__(
        self,
        initial_values: Mapping[str, Any] | None = None,
        rules: RuleSet | None = None,
        on_submit: SubmitHandler | None = None,
    ) -> None:
        if initial_values is None:
            initial_values = {}
        if not isinstance(initial_values, Mapping):
            raise TypeError("initial_values must be a mapping of field name to value")
        if rules is not None and not isinstance(rules, Mapping):
            raise TypeError("rules must be a mapping of field name to rule")

        self._initial_values: dict[str, Any] = copy.deepcopy(dict(initial_values))
        self._rules: RuleSet = dict(rules or {})
        self._on_submit: SubmitHandler = on_submit or _no_submit

        self._values: dict[str, Any] = copy.deepcopy(self._initial_values)
        self._errors: dict[str, str] = {}
        self._touched: set[str] = set()
        self._is_submitting: bool = False
        self._is_form_valid: bool = False

        # bumped by reset_form() and dispose(); a submission started under an
        # older generation must not write its outcome back
        self._generation: int = 0
        self._disposed: bool = False
        self._listeners: list[Listener] = []

        self._revalidate(notify=False)

    # -- state accessors

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._values)

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def touched(self) -> frozenset[str]:
        return frozenset(self._touched)

    @property
    def is_submitting(self) -> bool:
        return self._is_submitting

    @property
    def is_form_valid(self) -> bool:
        return self._is_form_valid

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def rules(self) -> RuleSet:
        return self._rules

    def is_touched(self, field_name: str) -> bool:
        return field_name in self._touched

    def visible_error(self, field_name: str) -> str | None:
        """the error to display for a field: only once the field is touched"""
        if field_name in self._touched:
            return self._errors.get(field_name)
        return None

    def snapshot(self) -> FormSnapshot:
        return FormSnapshot(
            values=copy.deepcopy(self._values),
            errors=dict(self._errors),
            touched=frozenset(self._touched),
            is_submitting=self._is_submitting,
            is_form_valid=self._is_form_valid,
        )

    # -- observers

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called after every state change.

        :return: a callable removing the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _revalidate(self, notify: bool = True) -> None:
        self._errors = validate_form(self._values, self._rules)
        self._is_form_valid = not self._errors
        if notify:
            self._notify()

    # -- handlers

    def handle_change(self, field_name: str, event: Any) -> None:
        """Store the new value of a field and mark it as touched."""
        self._values[field_name] = extract_value(event)
        self._touched.add(field_name)
        self._revalidate()

    def handle_blur(self, field_name: str) -> None:
        self._touched.add(field_name)
        self._notify()

    def set_field_value(self, field_name: str, value: Any) -> None:
        self._values[field_name] = value
        self._revalidate()

    def set_form_values(self, values: Mapping[str, Any]) -> None:
        self._values.update(values)
        self._revalidate()

    def reset_form(self) -> None:
        """Restore the initial values, and clear errors, touched and submitting."""
        self._generation += 1
        self._values = copy.deepcopy(self._initial_values)
        self._errors = {}
        self._touched = set()
        self._is_submitting = False
        self._is_form_valid = not validate_form(self._values, self._rules)
        self._notify()

    def dispose(self) -> None:
        """Detach the engine from its owner; pending submissions are ignored."""
        self._generation += 1
        self._disposed = True
        self._listeners.clear()

    def _is_current(self, generation: int) -> bool:
        return not self._disposed and generation == self._generation

    async def handle_submit(self, event: Any = None) -> None:
        """
        Validate every field and, when the form is valid, call the submit handler.

        An invalid form only updates errors and touched. A failing submit
        handler is reported under the "form" key of errors and never raised.
        Calls made while a submission is in flight are ignored.
        """
        prevent_default = getattr(event, "prevent_default", None)
        if callable(prevent_default):
            prevent_default()

        if self._disposed:
            logger.debug("ignoring submit on a disposed form")
            return

        if self._is_submitting:
            logger.debug("ignoring submit while a submission is in progress")
            return

        self._touched.update(self._rules.keys())
        self._revalidate(notify=False)

        if not self._is_form_valid:
            self._notify()
            return

        generation = self._generation
        self._is_submitting = True
        self._notify()

        try:
            result = self._on_submit(copy.deepcopy(self._values))
            if inspect.isawaitable(result):
                await result

        except Exception as exc:
            logger.warning("Form submission error: %s", exc, exc_info=exc)
            if self._is_current(generation):
                message = getattr(exc, "message", None) or str(exc) or DEFAULT_SUBMIT_ERROR
                self._errors = {**self._errors, FORM_ERROR_KEY: str(message)}

        finally:
            if self._is_current(generation):
                self._is_submitting = False
                self._notify()


# EOF

# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

from typing import Any

from litestar import Controller, Request, get, post
from litestar.status_codes import HTTP_200_OK

from fieldops_tracker.config.app import API_PATH
from fieldops_tracker.lib.formbuilder import FormValidationError, get_form, list_forms
from fieldops_tracker.lib.validators import validate_form


class API_v1(Controller):
    """
    API_v1 is the controller for API version 1
    """

    path = API_PATH

    @get("/forms")
    async def form_list(self) -> list[dict[str, Any]]:
        """
        API endpoint to get the list of form definitions
        """
        return [
            dict(name=form.form_name, title=form.title, fields=list(form.__fields__))
            for form in list_forms()
        ]

    @get("/forms/{form_name:str}")
    async def form_view(self, form_name: str) -> dict[str, Any]:
        """
        API endpoint to get the fields of a form definition
        """
        return get_form(form_name).describe()

    @post("/forms/{form_name:str}/validate", status_code=HTTP_200_OK)
    async def form_validate(
        self, form_name: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        """
        API endpoint to validate form values without submitting them
        """
        form = get_form(form_name)
        errors = validate_form(data, form.rules())
        return dict(is_valid=not errors, errors=errors)

    @post("/forms/{form_name:str}/submit", status_code=HTTP_200_OK)
    async def form_submit(
        self, form_name: str, data: dict[str, Any], request: Request
    ) -> dict[str, Any]:
        """
        API endpoint to submit form values, returning them converted to their
        declared types
        """
        form = get_form(form_name)
        cleaned: dict[str, Any] = {}
        field_errors: dict[str, str] = {}

        async def on_submit(values: dict[str, Any]) -> None:
            try:
                cleaned.update(form.clean(values))
            except FormValidationError as exc:
                field_errors.update(exc.errors)

        engine = form.engine(data, on_submit)
        try:
            await engine.handle_submit()
            state = engine.snapshot()
        finally:
            engine.dispose()

        errors = {**state.errors, **field_errors}
        if errors:
            raise FormValidationError(errors)

        request.logger.info("Accepted %s form", form_name)
        return dict(form=form_name, values=cleaned, state=state.as_dict())


# EOF

# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

from litestar import Request, Response, MediaType
from litestar.status_codes import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from fieldops_tracker.lib.formbuilder import FormValidationError, UnknownFormError


def handle_form_validation_error(
    request: Request, exc: FormValidationError
) -> Response:
    """Return the field errors of a rejected form as a 400 JSON response."""

    request.logger.info("Rejected form data at %s: %s", request.url.path, exc.errors)
    return Response(
        content={"detail": "Validation error", "errors": exc.errors},
        status_code=HTTP_400_BAD_REQUEST,
        media_type=MediaType.JSON,
    )


def handle_unknown_form(request: Request, exc: UnknownFormError) -> Response:

    return Response(
        content={"detail": str(exc)},
        status_code=HTTP_404_NOT_FOUND,
        media_type=MediaType.JSON,
    )


# EOF

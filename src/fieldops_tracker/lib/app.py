# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

from litestar import Litestar

from fieldops_tracker.config.app import env_flag, logging_config, logger
from fieldops_tracker.lib.exceptions import (
    handle_form_validation_error,
    handle_unknown_form,
)
from fieldops_tracker.lib.formbuilder import (
    FormValidationError,
    UnknownFormError,
    list_forms,
)


async def preload_forms() -> None:
    forms = list_forms()
    logger.info("Loaded %d form definition(s)", len(forms))


def init_app() -> Litestar:

    from fieldops_tracker.views.api_v1 import API_v1

    # when run in debug mode, exceptions are rendered with their traceback
    debug = env_flag("FIELDOPS_DEBUG")
    if debug:
        logger.info(
            "WARNING: DEBUG MODE IS ENABLED. This should NOT be used in production!"
        )

    return Litestar(
        route_handlers=[API_v1],
        on_startup=[preload_forms],
        logging_config=logging_config,
        exception_handlers={
            FormValidationError: handle_form_validation_error,
            UnknownFormError: handle_unknown_form,
        },
        debug=debug,
    )


# EOF

# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

import os

from litestar.logging import LoggingConfig


# Define your config
logging_config = LoggingConfig(
    root={"level": "INFO", "handlers": ["queue_listener"]},
    disable_stack_trace={404},
)

# Use the .configure() method to get a logger factory
logger = logging_config.configure()("fieldops-tracker")

# reserved key in the error map for failures not attributable to one field
FORM_ERROR_KEY = "form"

DEFAULT_SUBMIT_ERROR = "Form submission failed"

API_PATH = "/api-ft/v1"


def env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# EOF

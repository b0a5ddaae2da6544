# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

from collections.abc import Mapping
from typing import Any

from fieldops_tracker.lib import formbuilder as fb
from fieldops_tracker.lib import validators as v


BANKS = (
    "MAYBANK",
    "CIMB",
    "PUBLIC_BANK",
    "RHB",
    "HONG_LEONG",
    "BANK_ISLAM",
    "AMBANK",
    "OTHER",
)


class ServiceInstallerForm(fb.FormDefinition):

    form_name = "service-installer"
    title = "Service Installer"

    name = fb.StringField(label="Full Name", required=True, min_length=3)
    contact_no = fb.PhoneField(
        label="Contact Number",
        required=True,
        phone_message="Please enter a valid Malaysian phone number",
    )
    email = fb.EmailField(label="Email", email_message="Please enter a valid email address")
    address = fb.StringField(label="Address")
    bank_name = fb.SelectField(label="Bank", options=BANKS)
    bank_account_no = fb.StringField(label="Bank Account No")
    notes = fb.TextField(label="Notes")
    is_active = fb.CheckboxField(label="Active", default=True)


def _matches_password(value: Any, values: Mapping[str, Any]) -> str | None:
    if value != values.get("password"):
        return "Passwords do not match"
    return None


class PasswordResetForm(fb.FormDefinition):

    form_name = "password-reset"
    title = "Reset Password"

    reset_token = fb.StringField(
        label="Reset Token", required=True, required_message="Reset token is required"
    )
    password = fb.PasswordField(label="Password")
    confirm_password = fb.InputField(
        rule=v.FieldRule(
            required=True,
            strip=False,
            required_message="Please confirm your password",
            custom=_matches_password,
        ),
        label="Confirm Password",
    )


# EOF

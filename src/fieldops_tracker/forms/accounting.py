# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

import datetime
from collections.abc import Mapping
from typing import Any

from fieldops_tracker.lib import formbuilder as fb
from fieldops_tracker.lib import validators as v


INVOICE_STATUSES = ("PENDING", "SUBMITTED", "PAID", "OVERDUE", "CANCELLED")

# days between the invoice date and its due date for new invoices
PAYMENT_TERM_DAYS = 30


def _due_after_invoice_date(value: Any, values: Mapping[str, Any]) -> str | None:
    try:
        due_date = datetime.date.fromisoformat(str(value))
    except ValueError:
        return "Please enter a valid date (YYYY-MM-DD)"
    try:
        invoice_date = datetime.date.fromisoformat(str(values.get("date", "")))
    except ValueError:
        # the invoice date reports its own error
        return None
    if due_date < invoice_date:
        return "Due date must be on or after the invoice date"
    return None


class InvoiceForm(fb.FormDefinition):

    form_name = "invoice"

    invoice_number = fb.StringField(label="Invoice Number", required=True)
    submission_number = fb.StringField(label="Submission Number")
    customer = fb.StringField(label="Customer", required=True)
    date = fb.DateField(label="Invoice Date", required=True)
    description = fb.StringField(label="Description", required=True)
    total_amount = fb.NumberField(
        label="Total Amount",
        required=True,
        min_value=0,
        message="Total amount cannot be negative",
    )
    notes = fb.TextField(label="Notes", max_length=None)
    paid = fb.CheckboxField(label="Paid")

    @classmethod
    def initial_values(cls, initial_data: Mapping[str, Any] | None = None) -> dict[str, Any]:
        values = super().initial_values(initial_data)
        if not values.get("date"):
            values["date"] = datetime.date.today().isoformat()
        return values


class InvoiceCreateForm(fb.FormDefinition):
    """new invoice, due PAYMENT_TERM_DAYS after its date unless stated"""

    form_name = "invoice-create"
    title = "New Invoice"

    invoice_number = fb.StringField(
        label="Invoice Number", required=True, min_length=3, max_length=50
    )
    submission_number = fb.StringField(label="Submission Number")
    customer = fb.StringField(label="Customer", required=True, min_length=3, max_length=100)
    date = fb.DateField(label="Invoice Date", required=True)
    due_date = fb.InputField(
        rule=v.FieldRule(required=True, custom=_due_after_invoice_date),
        label="Due Date",
    )
    status = fb.SelectField(label="Status", options=INVOICE_STATUSES, default="PENDING")
    notes = fb.TextField(label="Notes")

    @classmethod
    def initial_values(cls, initial_data: Mapping[str, Any] | None = None) -> dict[str, Any]:
        values = super().initial_values(initial_data)
        today = datetime.date.today()
        if not values.get("date"):
            values["date"] = today.isoformat()
        if not values.get("due_date"):
            values["due_date"] = (today + datetime.timedelta(days=PAYMENT_TERM_DAYS)).isoformat()
        return values


# EOF

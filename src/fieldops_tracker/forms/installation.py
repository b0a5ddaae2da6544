# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

from fieldops_tracker.lib import formbuilder as fb


PHONE_MESSAGE = "Please enter a valid Malaysian phone number"

ACTIVATION_ORDER_TYPES = ("ACTIVATION", "MODIFICATION", "RESCHEDULE")
ORDER_TYPES = ("ACTIVATION", "MODIFICATION", "ASSURANCE")
ASSURANCE_STATUSES = (
    "NOT_COMPLETED",
    "IN_PROGRESS",
    "COMPLETED",
    "CANCELLED",
    "RESCHEDULED",
)
ASSURANCE_ISSUES = (
    "NO_INTERNET",
    "INTERMITTENT",
    "SLOW_SPEED",
    "EQUIPMENT_ISSUE",
    "ROUTER_ISSUE",
    "WIFI_ISSUE",
    "OTHER",
)
BUILDING_TYPES = ("Prelaid", "Non Prelaid", "Both")


class ActivationForm(fb.FormDefinition):
    """building installation job"""

    form_name = "activation"

    trbn_no = fb.StringField(label="TRBN No", required=True, min_length=5)
    name = fb.StringField(label="Customer Name", required=True, min_length=3)
    contact_no = fb.PhoneField(
        label="Contact Number", required=True, phone_message=PHONE_MESSAGE
    )
    building = fb.StringField(label="Building", required=True)
    appointment_date = fb.DateField(label="Appointment Date", required=True)
    appointment_time = fb.TimeField(label="Appointment Time", required=True)
    order_type = fb.SelectField(
        label="Order Type",
        options=ACTIVATION_ORDER_TYPES,
        required=True,
        default="ACTIVATION",
    )
    order_sub_type = fb.StringField(label="Order Sub Type")
    notes = fb.TextField(label="Notes")


class AssuranceForm(fb.FormDefinition):
    """service ticket"""

    form_name = "assurance"

    trbn_no = fb.StringField(label="TRBN No", required=True, min_length=3, max_length=50)
    ticket_number = fb.StringField(
        label="Ticket Number", required=True, min_length=5, max_length=50
    )
    awo_no = fb.StringField(label="AWO No", min_length=3, max_length=25)
    name = fb.StringField(label="Customer Name", required=True, min_length=3, max_length=100)
    email = fb.EmailField(label="Email")
    contact_no = fb.PhoneField(label="Contact Number", required=True)
    address = fb.StringField(label="Address", required=True, min_length=5, max_length=200)
    building_id = fb.StringField(label="Building", required=True)
    appointment_date = fb.DateField(label="Appointment Date", required=True)
    appointment_time = fb.TimeField(label="Appointment Time", required=True)
    rec_date = fb.DateField(label="Received Date", required=True)
    issue = fb.SelectField(label="Issue", options=ASSURANCE_ISSUES)
    status = fb.SelectField(
        label="Status", options=ASSURANCE_STATUSES, default="NOT_COMPLETED"
    )
    notes = fb.TextField(label="Notes")


class OrderForm(fb.FormDefinition):

    form_name = "order"

    tbbno_id = fb.StringField(label="TBBNO ID", required=True, min_length=3, max_length=50)
    name = fb.StringField(label="Customer Name", required=True, min_length=3, max_length=100)
    email = fb.EmailField(label="Email")
    contact_no = fb.PhoneField(label="Contact Number", required=True)
    address = fb.StringField(label="Address", required=True, min_length=5, max_length=200)
    building_id = fb.StringField(label="Building", required=True)
    appointment_date = fb.DateField(label="Appointment Date", required=True)
    appointment_time = fb.TimeField(label="Appointment Time", required=True)
    order_type = fb.SelectField(
        label="Order Type", options=ORDER_TYPES, required=True, default="ACTIVATION"
    )
    notes = fb.TextField(label="Notes")


class BuildingForm(fb.FormDefinition):

    form_name = "building"

    name = fb.StringField(label="Building Name", required=True, min_length=3)
    type = fb.SelectField(label="Building Type", options=BUILDING_TYPES, required=True)
    location = fb.StringField(label="Location", required=True)
    address = fb.StringField(label="Address", required=True, min_length=10)
    contact_person = fb.StringField(label="Contact Person", required=True)
    contact_number = fb.PhoneField(
        label="Contact Number", required=True, phone_message=PHONE_MESSAGE
    )
    contact_email = fb.EmailField(
        label="Contact Email", email_message="Please enter a valid email address"
    )
    notes = fb.TextField(label="Notes")


class SplitterForm(fb.FormDefinition):
    """splitter port allocation of a building"""

    form_name = "splitter"

    service_id = fb.StringField(
        label="Service ID", required=True, required_message="Service ID is required"
    )
    building_id = fb.StringField(
        label="Building", required=True, required_message="Building is required"
    )
    building_name = fb.StringField(label="Building Name")
    alias = fb.StringField(label="Alias")
    splitter_level = fb.StringField(label="Splitter Level", required=True)
    splitter_number = fb.StringField(label="Splitter Number", required=True)
    splitter_port = fb.IntField(
        label="Splitter Port",
        required=True,
        min_value=1,
        max_value=32,
        message="Port number must be between 1 and 32",
    )
    notes = fb.TextField(label="Notes")


# EOF

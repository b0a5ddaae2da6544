# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

from fieldops_tracker.lib import formbuilder as fb


MATERIAL_TYPES = ("EQUIPMENT", "CONSUMABLE", "ACCESSORY", "TOOL", "OTHER")


class MaterialForm(fb.FormDefinition):

    form_name = "material"

    sap_code = fb.StringField(label="SAP Code", required=True, min_length=3, max_length=50)
    description = fb.StringField(
        label="Description", required=True, min_length=3, max_length=200
    )
    stock_keeping_unit = fb.NumberField(
        label="Stock Keeping Unit",
        required=True,
        message="Please enter a valid number",
    )
    minimum_stock = fb.NumberField(
        label="Minimum Stock",
        min_value=0,
        message="Minimum stock cannot be negative",
        default=10,
    )
    unit_price = fb.NumberField(
        label="Unit Price", min_value=0, message="Unit price cannot be negative"
    )
    material_type = fb.SelectField(
        label="Material Type", options=MATERIAL_TYPES, default="EQUIPMENT"
    )
    notes = fb.TextField(label="Notes")
    is_active = fb.CheckboxField(label="Active", default=True)


# EOF

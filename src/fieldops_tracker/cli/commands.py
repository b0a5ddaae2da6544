# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

import json
from typing import Any, NoReturn

import anyio
import click

from fieldops_tracker.config.app import env_flag
from fieldops_tracker.lib.formbuilder import (
    FormValidationError,
    UnknownFormError,
    get_form,
    list_forms,
)


class FormManagerGroup(click.Group):
    """Command group that opens an ipdb post-mortem session on a crashing command."""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except Exception as exc:
            if isinstance(exc, (click.exceptions.Exit, click.ClickException)):
                raise
            if ctx.meta.get("ftmgr.ipdb") or env_flag("FIELDOPS_CLI_IPDB"):
                try:
                    import ipdb
                except ModuleNotFoundError:
                    click.echo("ipdb is not installed; reraising exception.", err=True)
                else:
                    ipdb.post_mortem(exc.__traceback__)
            raise


@click.group(
    name="ftmgr",
    invoke_without_command=False,
    help="CLI manager for fieldops-tracker forms",
    cls=FormManagerGroup,
)
@click.option(
    "--ipdb/--no-ipdb",
    "use_ipdb",
    default=False,
    show_default=True,
    help="Drop into ipdb if a command raises an unhandled exception.",
)
def ftmgr(use_ipdb: bool) -> None:
    """Manage fieldops-tracker."""

    ctx = click.get_current_context()
    ctx.meta["ftmgr.ipdb"] = use_ipdb


def _lookup_form(form_name: str) -> Any:
    try:
        return get_form(form_name)
    except UnknownFormError as exc:
        raise click.BadParameter(str(exc), param_hint="FORM_NAME") from exc


def _echo_table(columns: tuple[tuple[str, str], ...], rows: list[dict[str, Any]]) -> None:
    widths: dict[str, int] = {}
    for key, header in columns:
        widths[key] = max([len(header), *(len(str(row[key])) for row in rows)])

    header_line = "  ".join(f"{label:<{widths[key]}}" for key, label in columns)
    click.echo(header_line)
    click.echo("-" * len(header_line))

    for row in rows:
        click.echo("  ".join(f"{str(row[key]):<{widths[key]}}" for key, _ in columns))


@ftmgr.command(name="form-list", help="list form definitions")
def ftmgr_form_list() -> None:
    """List all registered forms."""

    forms = list_forms()
    if not forms:
        click.echo("No forms found.")
        return

    _echo_table(
        (("name", "Form"), ("title", "Title"), ("fields", "Fields")),
        [
            dict(name=form.form_name, title=form.title, fields=len(form.__fields__))
            for form in forms
        ],
    )


@ftmgr.command(name="form-show", help="show the fields of a form")
@click.argument("form_name")
def ftmgr_form_show(form_name: str) -> None:
    """Show the fields and rules of a form."""

    form = _lookup_form(form_name)
    click.echo(f"{form.title} ({form.form_name})")

    _echo_table(
        (
            ("name", "Field"),
            ("label", "Label"),
            ("type", "Type"),
            ("required", "Required"),
            ("default", "Default"),
        ),
        form.describe()["fields"],
    )


def _parse_assignments(assignments: tuple[str, ...]) -> dict[str, str]:
    values = {}
    for assignment in assignments:
        field_name, sep, value = assignment.partition("=")
        if not sep or not field_name:
            raise click.BadParameter(
                f"expected FIELD=VALUE, got {assignment!r}", param_hint="--set"
            )
        values[field_name.strip()] = value
    return values


@ftmgr.command(name="form-validate", help="validate and submit values of a form")
@click.argument("form_name")
@click.option(
    "-s",
    "--set",
    "assignments",
    multiple=True,
    metavar="FIELD=VALUE",
    help="Set a field value, can be repeated.",
)
@click.option(
    "--json",
    "json_data",
    default=None,
    metavar="JSON",
    help="Field values as a JSON object, applied before --set.",
)
def ftmgr_form_validate(
    form_name: str, assignments: tuple[str, ...], json_data: str | None
) -> None:
    """Run the values through the form and print the cleaned values or the errors."""

    form = _lookup_form(form_name)

    data: dict[str, Any] = {}
    if json_data:
        try:
            data = json.loads(json_data)
        except json.JSONDecodeError as exc:
            raise click.BadParameter(str(exc), param_hint="--json") from exc
        if not isinstance(data, dict):
            raise click.BadParameter("expected a JSON object", param_hint="--json")
    data.update(_parse_assignments(assignments))

    cleaned: dict[str, Any] = {}
    field_errors: dict[str, str] = {}

    async def on_submit(values: dict[str, Any]) -> None:
        try:
            cleaned.update(form.clean(values))
        except FormValidationError as exc:
            field_errors.update(exc.errors)

    engine = form.engine(data, on_submit)
    try:
        anyio.run(engine.handle_submit)
        errors = {**engine.errors, **field_errors}
    finally:
        engine.dispose()

    if errors:
        for field_name, message in errors.items():
            click.echo(f"{field_name}: {message}", err=True)
        raise click.exceptions.Exit(1)

    click.echo(json.dumps(cleaned, indent=2, sort_keys=True, default=str))


def main() -> NoReturn:
    """
    CLI entry point for ftmgr standalone command
    """

    ftmgr()


# EOF

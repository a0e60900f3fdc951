"""Dependent CLI commands for Bene Calc.

Dependents are always addressed under their employee.
"""

from typing import Optional

import click

from benecalc.sdk import EmployeeStore, api

from .common import echo_json, format_option, pass_store, unwrap


@click.group()
def dependents():
    """Manage an employee's dependents.

    \b
    Examples:
      bene-calc dependents add <employee-id> Adam Smith
      bene-calc dependents update <employee-id> <dependent-id> --first-name Ada
      bene-calc dependents remove <employee-id> <dependent-id>
    """
    pass


@dependents.command("add")
@click.argument("employee_id")
@click.argument("first_name")
@click.argument("last_name")
@format_option
@pass_store
def dependents_add(store: EmployeeStore, employee_id: str, first_name: str, last_name: str,
                   output_format: str):
    """Add a dependent to an employee."""
    data = unwrap(api.create_dependent(
        store, employee_id, {"firstName": first_name, "lastName": last_name}
    ))

    if output_format == "json":
        echo_json(data)
        return

    click.echo(f"Added dependent {data['firstName']} {data['lastName']}: {data['id']}")


@dependents.command("update")
@click.argument("employee_id")
@click.argument("dependent_id")
@click.option("--first-name", help="New first name.")
@click.option("--last-name", help="New last name.")
@format_option
@pass_store
def dependents_update(store: EmployeeStore, employee_id: str, dependent_id: str,
                      first_name: Optional[str], last_name: Optional[str], output_format: str):
    """Rename a dependent."""
    if first_name is None and last_name is None:
        raise click.UsageError("Nothing to update. Pass --first-name and/or --last-name.")

    employee = unwrap(api.get_employee(store, employee_id))
    current = next((d for d in employee["dependents"] if d["id"] == dependent_id), None)
    if current is None:
        raise click.ClickException(f"Dependent not found: {dependent_id}")

    record = dict(current)
    if first_name is not None:
        record["firstName"] = first_name
    if last_name is not None:
        record["lastName"] = last_name

    data = unwrap(api.update_dependent(store, employee_id, record))

    if output_format == "json":
        echo_json(data)
        return

    click.echo(f"Updated dependent {data['id']}: {data['firstName']} {data['lastName']}")


@dependents.command("remove")
@click.argument("employee_id")
@click.argument("dependent_id")
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
@pass_store
def dependents_remove(store: EmployeeStore, employee_id: str, dependent_id: str, force: bool):
    """Remove a dependent from an employee."""
    if not force:
        click.confirm(f"Remove dependent {dependent_id}?", abort=True)

    unwrap(api.delete_dependent(store, employee_id, dependent_id))
    click.echo(f"Removed dependent {dependent_id}")

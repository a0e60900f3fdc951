"""Employee CLI commands for Bene Calc."""

from typing import Optional

import click
from rich.console import Console

from benecalc.sdk import EmployeeStore, api

from .common import echo_json, format_option, pass_store, unwrap
from .renderers.benefits_renderer import render_benefits, render_employee


def format_employee_row(employee: dict) -> str:
    """Format an employee as a table row."""
    first = employee.get("firstName", "")[:15]
    last = employee.get("lastName", "")[:15]
    deps = len(employee.get("dependents", []))
    return f"{employee.get('id', ''):<38} {first:<16} {last:<16} {deps:>4}"


@click.group()
def employees():
    """Manage employees.

    \b
    Examples:
      bene-calc employees list
      bene-calc employees add Alice Smith
      bene-calc employees show <id>
      bene-calc employees update <id> --last-name Jones
      bene-calc employees remove <id>
    """
    pass


@employees.command("list")
@click.option("--count", is_flag=True, help="Print only the number of employees.")
@format_option
@pass_store
def employees_list(store: EmployeeStore, count: bool, output_format: str):
    """List employees with their dependent counts."""
    data = unwrap(api.list_employees(store))

    if count:
        click.echo(len(data))
        return

    if output_format == "json":
        echo_json(data)
        return

    if not data:
        click.echo("No employees found.")
        click.echo("\nRun 'bene-calc employees add FIRST LAST' to add one.")
        return

    click.echo("-" * 77)
    click.echo(f"{'ID':<38} {'FIRST':<16} {'LAST':<16} {'DEPS':>4}")
    for emp in data:
        click.echo(format_employee_row(emp))
    click.echo("-" * 77)
    click.echo(f"Total: {len(data)} employee(s)")


@employees.command("add")
@click.argument("first_name")
@click.argument("last_name")
@format_option
@pass_store
def employees_add(store: EmployeeStore, first_name: str, last_name: str, output_format: str):
    """Add an employee."""
    data = unwrap(api.create_employee(store, {"firstName": first_name, "lastName": last_name}))

    if output_format == "json":
        echo_json(data)
        return

    click.echo(f"Added employee {data['firstName']} {data['lastName']}: {data['id']}")


@employees.command("show")
@click.argument("employee_id")
@format_option
@pass_store
def employees_show(store: EmployeeStore, employee_id: str, output_format: str):
    """Show an employee, its dependents and its benefits cost."""
    employee = unwrap(api.get_employee(store, employee_id))
    benefits = unwrap(api.get_employee_benefits(store, employee_id))

    if output_format == "json":
        echo_json({"employee": employee, "benefits": benefits})
        return

    console = Console()
    render_employee(console, employee)
    render_benefits(console, benefits)


@employees.command("update")
@click.argument("employee_id")
@click.option("--first-name", help="New first name.")
@click.option("--last-name", help="New last name.")
@format_option
@pass_store
def employees_update(store: EmployeeStore, employee_id: str, first_name: Optional[str],
                     last_name: Optional[str], output_format: str):
    """Rename an employee. Dependents are kept."""
    if first_name is None and last_name is None:
        raise click.UsageError("Nothing to update. Pass --first-name and/or --last-name.")

    record = unwrap(api.get_employee(store, employee_id))
    if first_name is not None:
        record["firstName"] = first_name
    if last_name is not None:
        record["lastName"] = last_name

    data = unwrap(api.update_employee(store, employee_id, record))

    if output_format == "json":
        echo_json(data)
        return

    click.echo(f"Updated employee {data['id']}: {data['firstName']} {data['lastName']}")


@employees.command("remove")
@click.argument("employee_id")
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
@pass_store
def employees_remove(store: EmployeeStore, employee_id: str, force: bool):
    """Remove an employee and all of its dependents."""
    record = unwrap(api.get_employee(store, employee_id))
    deps = len(record.get("dependents", []))

    if not force:
        click.confirm(
            f"Remove {record['firstName']} {record['lastName']} and {deps} dependent(s)?",
            abort=True,
        )

    unwrap(api.delete_employee(store, employee_id))
    click.echo(f"Removed employee {employee_id} ({deps} dependent(s))")

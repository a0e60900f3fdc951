"""Bene Calc CLI - Command-line interface for employee benefits costs."""

import click

from benecalc import __version__
from benecalc.sdk import ConfigNotFoundError, EmployeeStore, StoreIOError, api

from .benefits_commands import benefits as benefits_group
from .common import pass_store, unwrap
from .dependents_commands import dependents as dependents_group
from .employees_commands import employees as employees_group
from .profile_commands import profile as profile_group
from .settings_commands import settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="bene-calc")
@click.option("--store", "store_path", type=click.Path(dir_okay=False),
              help="Employee store file (default: <data_dir>/employees.json).")
@click.pass_context
def cli(ctx, store_path):
    """Bene Calc - Employee benefits cost calculator.

    Tracks employees and their dependents and computes yearly and
    per-paycheck benefits deductions.

    Configuration is loaded from (in order):

    \b
    1. BENE_CALC_CONFIG_PATH environment variable
    2. settings.json 'profile' key (if set)
    3. ~/.config/bene-calc/profile.yaml (XDG default)

    Run 'bene-calc profile show' to see the active benefits rules.
    """
    try:
        ctx.obj = EmployeeStore(store_path)
    except ConfigNotFoundError as e:
        raise click.ClickException(str(e))


cli.add_command(employees_group)
cli.add_command(dependents_group)
cli.add_command(benefits_group)
cli.add_command(profile_group)
cli.add_command(settings_group)


@cli.command("reset")
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
@pass_store
def reset(store: EmployeeStore, force: bool):
    """Remove every employee and dependent from the store.

    Configuration (settings.json, profile.yaml) is preserved.
    """
    employees = unwrap(api.list_employees(store))
    dependent_count = sum(len(emp.get("dependents", [])) for emp in employees)

    click.echo(f"Store: {store.path}")
    click.echo(f"\nWill delete:")
    click.echo(f"  - {len(employees)} employee(s)")
    click.echo(f"  - {dependent_count} dependent(s)")

    if not force:
        click.confirm("\nProceed with reset?", abort=True)

    try:
        count = store.clear()
    except StoreIOError as e:
        raise click.ClickException(str(e))
    click.echo(click.style(f"\nReset complete ({count} employee(s) removed).", fg='green'))


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()

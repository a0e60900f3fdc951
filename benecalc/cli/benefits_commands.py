"""Benefits CLI commands for Bene Calc."""

import click
from rich.console import Console
from rich.markup import escape

from benecalc.sdk import EmployeeStore, api

from .common import echo_json, format_option, pass_store, unwrap
from .renderers.benefits_renderer import render_benefits


@click.group()
def benefits():
    """Calculate benefits costs.

    Costs and the discount rule come from the 'benefits' section of
    profile.yaml (see 'bene-calc profile show').
    """
    pass


@benefits.command("show")
@click.argument("employee_id")
@format_option
@pass_store
def benefits_show(store: EmployeeStore, employee_id: str, output_format: str):
    """Show the benefits cost for one employee."""
    data = unwrap(api.get_employee_benefits(store, employee_id))

    if output_format == "json":
        echo_json(data)
        return

    render_benefits(Console(), data, title=f"Benefits Cost: {escape(employee_id)}")


@benefits.command("total")
@format_option
@pass_store
def benefits_total(store: EmployeeStore, output_format: str):
    """Show the benefits cost summed across all employees."""
    data = unwrap(api.get_total_benefits(store))

    if output_format == "json":
        echo_json(data)
        return

    render_benefits(Console(), data, title="Total Benefits Cost (all employees)")

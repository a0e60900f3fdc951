"""Helpers shared by the CLI command groups."""

import json

import click

from benecalc.sdk import ApiResponse, EmployeeStore

# Injects the EmployeeStore created by the root group, or a default-path
# store when a group is invoked on its own.
pass_store = click.make_pass_decorator(EmployeeStore, ensure=True)

format_option = click.option(
    "--format", "output_format", type=click.Choice(["text", "json"]),
    default="text", help="Output format.",
)


def unwrap(response: ApiResponse):
    """Return response data or raise a ClickException with the error."""
    if not response.ok:
        raise click.ClickException(response.error)
    return response.data


def echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2))

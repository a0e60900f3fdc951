"""Rich renderer for benefits calculations.

Transforms SDK JSON output (camelCase ApiResponse data) into formatted Rich tables.
"""

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table


def render_benefits(console: Console, data: dict, title: str = "Benefits Cost") -> None:
    """Render a benefits calculation as a Rich table.

    Args:
        console: Rich Console instance
        data: BenefitsCalculation dict (camelCase keys)
        title: Table title
    """
    if "error" in data:
        console.print(Panel(
            f"[red]{escape(data['error'])}[/red]",
            title="Error",
            border_style="red"
        ))
        return

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("", style="bold", min_width=28)
    table.add_column("Amount", justify="right", min_width=12)

    table.add_row("[bold]YEARLY COST[/bold]", "")
    table.add_row("  Employee", _fmt(data.get("employeeCost")))
    table.add_row("  Dependents", _fmt(data.get("dependentCost")))
    table.add_row("  Discount", f"[green]-{_fmt(data.get('discount'))}[/green]")
    table.add_row("  [dim]Total per Year[/dim]", f"[dim]{_fmt(data.get('perYear'))}[/dim]")
    table.add_row("", "")

    table.add_row("[bold]PER PAYCHECK[/bold]", "")
    table.add_row("  Gross Paycheck", _fmt(data.get("paycheckBeforeDeductions")))
    table.add_row("  Benefits Deduction", _fmt(data.get("perPaycheck")))
    table.add_row(
        "[bold green]PAYCHECK AFTER DEDUCTIONS[/bold green]",
        f"[bold green]{_fmt(data.get('paycheckAfterDeductions'))}[/bold green]",
    )

    console.print(table)


def render_employee(console: Console, employee: dict) -> None:
    """Render an employee and its dependents."""
    name = escape(f"{employee.get('firstName', '?')} {employee.get('lastName', '?')}")
    dependents = employee.get("dependents", [])

    table = Table(title=f"{name} ({employee.get('id')})", box=box.SIMPLE)
    table.add_column("Dependent ID", style="dim")
    table.add_column("First Name")
    table.add_column("Last Name")

    for dep in dependents:
        table.add_row(
            escape(dep.get("id", "")), escape(dep.get("firstName", "")), escape(dep.get("lastName", ""))
        )

    if not dependents:
        table.add_row("[dim]no dependents[/dim]", "", "")

    console.print(table)


def _fmt(amount: float | None) -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    return f"${amount:,.2f}"

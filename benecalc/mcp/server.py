"""Bene Calc MCP Server - FastMCP implementation for employee benefits tools."""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from benecalc.sdk import EmployeeStore, ProfileValidationError, api, load_benefits_rules

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("bene-calc")

# One store for the server's lifetime; every tool call re-reads the document.
_store: EmployeeStore | None = None


def get_store() -> EmployeeStore:
    """Return the server's store, creating it on first use."""
    global _store
    if _store is None:
        _store = EmployeeStore()
    return _store


def set_store(store: EmployeeStore | None) -> None:
    """Replace the server's store (tests, alternate store files)."""
    global _store
    _store = store


def _respond(tool: str, response) -> dict[str, Any]:
    result = response.to_dict()
    if not response.ok:
        logger.error(f"{tool} failed: {response.error}")
    return result


# --- Employee tools ---

@mcp.tool()
async def list_employees() -> dict[str, Any]:
    """List all employees with their nested dependents."""
    return _respond("list_employees", api.list_employees(get_store()))


@mcp.tool()
async def create_employee(
    first_name: str = Field(description="Employee first name"),
    last_name: str = Field(description="Employee last name"),
) -> dict[str, Any]:
    """Create an employee. Returns the new employee with its generated id and no dependents."""
    payload = {"firstName": first_name, "lastName": last_name}
    return _respond("create_employee", api.create_employee(get_store(), payload))


@mcp.tool()
async def get_employee_benefits(
    employee_id: str = Field(description="Employee id (from list_employees)"),
) -> dict[str, Any]:
    """Get the benefits cost breakdown for one employee.

    Returns employeeCost, dependentCost, discount, totalCost, perPaycheck,
    perYear and paycheck before/after deductions. Amounts are unrounded.
    """
    return _respond("get_employee_benefits", api.get_employee_benefits(get_store(), employee_id))


@mcp.tool()
async def update_employee(
    employee_id: str = Field(description="Employee id to replace"),
    employee: dict[str, Any] = Field(
        description="Full employee record: firstName, lastName and dependents list"
    ),
) -> dict[str, Any]:
    """Replace an employee record, including its dependents list."""
    return _respond("update_employee", api.update_employee(get_store(), employee_id, employee))


@mcp.tool()
async def delete_employee(
    employee_id: str = Field(description="Employee id to delete"),
) -> dict[str, Any]:
    """Delete an employee and all of its dependents."""
    return _respond("delete_employee", api.delete_employee(get_store(), employee_id))


# --- Dependent tools ---

@mcp.tool()
async def create_dependent(
    employee_id: str = Field(description="Owning employee id"),
    first_name: str = Field(description="Dependent first name"),
    last_name: str = Field(description="Dependent last name"),
) -> dict[str, Any]:
    """Add a dependent under an employee."""
    payload = {"firstName": first_name, "lastName": last_name}
    return _respond("create_dependent", api.create_dependent(get_store(), employee_id, payload))


@mcp.tool()
async def update_dependent(
    employee_id: str = Field(description="Owning employee id"),
    dependent: dict[str, Any] = Field(
        description="Full dependent record: id, firstName, lastName"
    ),
) -> dict[str, Any]:
    """Replace a dependent record under an employee."""
    return _respond("update_dependent", api.update_dependent(get_store(), employee_id, dependent))


@mcp.tool()
async def delete_dependent(
    employee_id: str = Field(description="Owning employee id"),
    dependent_id: str = Field(description="Dependent id to delete"),
) -> dict[str, Any]:
    """Remove a dependent from an employee."""
    return _respond(
        "delete_dependent", api.delete_dependent(get_store(), employee_id, dependent_id)
    )


# --- Benefits tools ---

@mcp.tool()
async def get_total_benefits() -> dict[str, Any]:
    """Get the benefits cost summed across all employees."""
    return _respond("get_total_benefits", api.get_total_benefits(get_store()))


# --- Resources ---

@mcp.resource("benecalc://benefits/rules")
async def benefits_rules_resource() -> str:
    """Active benefits rules (costs, discount rule, paycheck figures)."""
    try:
        return json.dumps(load_benefits_rules().model_dump(), indent=2)
    except ProfileValidationError as e:
        return json.dumps({"error": str(e)})


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()

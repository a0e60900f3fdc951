"""Endpoint functions for employees, dependents and benefits.

Each function takes an EmployeeStore, performs one store operation (plus a
benefits recompute where relevant) and returns an ApiResponse. Failures are
returned, never raised:

    not_found   employee or dependent id absent
    validation  missing/blank names, malformed payload, missing dependent id
    io          store document could not be written

A malformed profile.yaml or settings.json is a validation failure.

CLI and MCP surfaces call these and render the result.
"""

import logging
from functools import wraps
from typing import Any, Callable, Dict, Optional

from .benefits import (
    ProfileValidationError,
    calculate_benefits,
    calculate_total_benefits,
    load_benefits_rules,
)
from .config import ConfigNotFoundError
from .schemas import ApiResponse, BenefitsRules
from .store import EmployeeStore, NotFoundError, StoreIOError, ValidationError

logger = logging.getLogger(__name__)


def _dump(value: Any) -> Any:
    """Convert models (or lists of models) to camelCase JSON-ready data."""
    if isinstance(value, list):
        return [_dump(v) for v in value]
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", by_alias=True)
    return value


def success(data: Any = None) -> ApiResponse:
    return ApiResponse(status="success", data=_dump(data))


def failure(message: str, error_type: str) -> ApiResponse:
    return ApiResponse(status="error", error=message, error_type=error_type)


def endpoint(func: Callable[..., Any]) -> Callable[..., ApiResponse]:
    """Wrap a store call so domain errors become structured failures."""
    @wraps(func)
    def wrapper(*args, **kwargs) -> ApiResponse:
        try:
            return success(func(*args, **kwargs))
        except NotFoundError as e:
            return failure(str(e), "not_found")
        except (ValidationError, ProfileValidationError, ConfigNotFoundError) as e:
            return failure(str(e), "validation")
        except StoreIOError as e:
            logger.error(f"{func.__name__} failed: {e}")
            return failure(str(e), "io")
    return wrapper


def _rules(rules: Optional[BenefitsRules]) -> BenefitsRules:
    return rules if rules is not None else load_benefits_rules()


# --- Employees ---

@endpoint
def list_employees(store: EmployeeStore):
    """All employees with nested dependents."""
    return store.list_employees()


@endpoint
def create_employee(store: EmployeeStore, payload: Dict[str, Any]):
    """Create an employee from {firstName, lastName}."""
    return store.create_employee(payload)


@endpoint
def get_employee(store: EmployeeStore, employee_id: str):
    return store.get_employee(employee_id)


@endpoint
def get_employee_benefits(
    store: EmployeeStore,
    employee_id: str,
    rules: Optional[BenefitsRules] = None,
):
    """Benefits calculation for one employee."""
    employee = store.get_employee(employee_id)
    return calculate_benefits(employee, _rules(rules))


@endpoint
def update_employee(store: EmployeeStore, employee_id: str, payload: Dict[str, Any]):
    """Replace an employee record. The path id wins over any id in the payload."""
    if not isinstance(payload, dict):
        raise ValidationError([f"expected an object, got {type(payload).__name__}"])
    return store.update_employee({**payload, "id": employee_id})


@endpoint
def delete_employee(store: EmployeeStore, employee_id: str):
    store.delete_employee(employee_id)


# --- Dependents ---

@endpoint
def create_dependent(store: EmployeeStore, employee_id: str, payload: Dict[str, Any]):
    """Add a dependent {firstName, lastName} under an employee."""
    return store.create_dependent(employee_id, payload)


@endpoint
def update_dependent(store: EmployeeStore, employee_id: str, payload: Dict[str, Any]):
    """Replace a dependent record (payload carries the dependent id)."""
    return store.update_dependent(employee_id, payload)


@endpoint
def delete_dependent(store: EmployeeStore, employee_id: str, dependent_id: Optional[str]):
    if not dependent_id:
        raise ValidationError(["Dependent ID is required"])
    store.delete_dependent(employee_id, dependent_id)


# --- Benefits ---

@endpoint
def get_total_benefits(store: EmployeeStore, rules: Optional[BenefitsRules] = None):
    """Aggregate benefits across all employees."""
    return calculate_total_benefits(store.list_employees(), _rules(rules))

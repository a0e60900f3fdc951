"""
Employee store backed by a single JSON document.

This module contains all storage logic for employees and their dependents.
CLI and MCP tools should be thin wrappers that go through the api module.

Document layout
---------------

One JSON array of employee records, each embedding its dependents:

    [
      {
        "id": "3f0c...",
        "firstName": "Alice",
        "lastName": "Smith",
        "type": "employee",
        "dependents": [
          {"id": "9a1b...", "firstName": "Adam", "lastName": "Smith",
           "type": "dependent", "employeeId": "3f0c..."}
        ]
      }
    ]

Every operation is a whole-document read-modify-write: load the collection,
apply the change, persist the collection. An operation that fails never
writes, so the document is left exactly as it was.

Concurrency:
    Each read+write runs under the store's lock, which serializes callers
    sharing one EmployeeStore instance. Separate processes (or separate
    instances) pointing at the same file are NOT coordinated: the last
    writer wins and an overlapping update can be lost.

Malformed documents:
    A document that is not valid JSON, or whose records fail schema
    validation, is read as an empty store and a warning is logged. The next
    successful write replaces it.
"""

import json
import logging
import os
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .config import get_store_path
from .schemas import CreateDependentRequest, CreateEmployeeRequest, Dependent, Employee

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


# =============================================================================
# ERRORS
# =============================================================================

class NotFoundError(Exception):
    """Raised when an employee or dependent id is absent."""
    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind.capitalize()} not found: {record_id}")


class ValidationError(Exception):
    """Raised when a payload fails validation."""
    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Validation failed: {'; '.join(errors)}")


class StoreIOError(Exception):
    """Raised when the store document cannot be written."""
    pass


def _format_errors(error: PydanticValidationError) -> List[str]:
    """Flatten pydantic errors into 'field: message' strings."""
    messages = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "root"
        messages.append(f"{loc}: {err['msg']}")
    return messages


def _coerce(model: Type[ModelT], payload: Union[ModelT, Dict[str, Any]]) -> ModelT:
    """Validate a dict payload into model, passing model instances through."""
    if isinstance(payload, model):
        return payload
    if not isinstance(payload, dict):
        raise ValidationError([f"expected an object, got {type(payload).__name__}"])
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(_format_errors(e))


def _new_id() -> str:
    return str(uuid.uuid4())


# =============================================================================
# STORE
# =============================================================================

class EmployeeStore:
    """Repository of employees (with nested dependents) in one JSON file.

    Construct one per caller context (CLI invocation, MCP server, test) and
    pass it to the functions that need it.

    Args:
        path: Store document path (default: <data dir>/employees.json)
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else get_store_path()
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"EmployeeStore({str(self.path)!r})"

    # -------------------------------------------------------------------------
    # Document I/O
    # -------------------------------------------------------------------------

    def _read(self) -> List[Employee]:
        """Load the whole collection. Missing or malformed documents read as empty."""
        if not self.path.exists():
            return []

        try:
            with open(self.path) as f:
                raw = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Unreadable store {self.path}, treating as empty: {e}")
            return []

        if not isinstance(raw, list):
            logger.warning(
                f"Store {self.path} is not a list (got {type(raw).__name__}), treating as empty"
            )
            return []

        try:
            employees = [Employee.model_validate(item) for item in raw]
        except PydanticValidationError as e:
            logger.warning(
                f"Store {self.path} has invalid records, treating as empty: "
                f"{'; '.join(_format_errors(e))}"
            )
            return []

        logger.debug(f"Loaded {len(employees)} employee(s) from {self.path}")
        return employees

    def _write(self, employees: List[Employee]) -> None:
        """Persist the whole collection, replacing the document atomically."""
        document = [emp.model_dump(mode="json", by_alias=True) for emp in employees]
        tmp_path = self.path.with_name(self.path.name + ".tmp")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StoreIOError(f"Failed to write store {self.path}: {e}")

        logger.debug(f"Wrote {len(employees)} employee(s) to {self.path}")

    @contextmanager
    def _transaction(self) -> Iterator[List[Employee]]:
        """Read-modify-write scope. The collection is written only if the body succeeds."""
        with self._lock:
            employees = self._read()
            yield employees
            self._write(employees)

    @staticmethod
    def _index_of(employees: List[Employee], employee_id: str) -> int:
        for i, emp in enumerate(employees):
            if emp.id == employee_id:
                return i
        raise NotFoundError("employee", employee_id)

    @staticmethod
    def _dependent_index(employee: Employee, dependent_id: str) -> int:
        for i, dep in enumerate(employee.dependents):
            if dep.id == dependent_id:
                return i
        raise NotFoundError("dependent", dependent_id)

    # -------------------------------------------------------------------------
    # Employees
    # -------------------------------------------------------------------------

    def list_employees(self) -> List[Employee]:
        """All employees in insertion order, with nested dependents."""
        with self._lock:
            return self._read()

    def get_employee(self, employee_id: str) -> Employee:
        """Get an employee by id.

        Raises:
            NotFoundError: If no employee has this id
        """
        employees = self.list_employees()
        return employees[self._index_of(employees, employee_id)]

    def create_employee(
        self,
        request: Union[CreateEmployeeRequest, Dict[str, Any]],
    ) -> Employee:
        """Create an employee with a new id and no dependents.

        Raises:
            ValidationError: If a name field is missing or blank
        """
        request = _coerce(CreateEmployeeRequest, request)
        employee = Employee(
            id=_new_id(),
            first_name=request.first_name,
            last_name=request.last_name,
        )

        with self._transaction() as employees:
            employees.append(employee)

        logger.info(f"Created employee {employee.id} ({employee.first_name} {employee.last_name})")
        return employee

    def update_employee(self, employee: Union[Employee, Dict[str, Any]]) -> Employee:
        """Replace an employee record (including its dependents list).

        Dependents are re-pointed at this employee regardless of the
        employeeId they arrive with.

        Raises:
            NotFoundError: If no employee has this id
            ValidationError: If the record is invalid
        """
        if isinstance(employee, dict):
            employee = dict(employee)
            deps = employee.get("dependents")
            if isinstance(deps, list) and employee.get("id"):
                employee["dependents"] = [
                    {**dep, "employeeId": employee["id"]} if isinstance(dep, dict) else dep
                    for dep in deps
                ]
        employee = _coerce(Employee, employee)
        employee = employee.model_copy(update={
            "dependents": [
                dep.model_copy(update={"employee_id": employee.id})
                for dep in employee.dependents
            ],
        })

        with self._transaction() as employees:
            idx = self._index_of(employees, employee.id)
            employees[idx] = employee

        logger.info(f"Updated employee {employee.id}")
        return employee

    def delete_employee(self, employee_id: str) -> None:
        """Delete an employee and, with it, all of its dependents.

        Raises:
            NotFoundError: If no employee has this id
        """
        with self._transaction() as employees:
            idx = self._index_of(employees, employee_id)
            removed = employees.pop(idx)

        logger.info(
            f"Deleted employee {employee_id} ({len(removed.dependents)} dependent(s) removed)"
        )

    # -------------------------------------------------------------------------
    # Dependents
    # -------------------------------------------------------------------------

    def get_dependent(self, employee_id: str, dependent_id: str) -> Dependent:
        """Get a dependent under an employee.

        Raises:
            NotFoundError: If the employee or dependent is absent
        """
        employee = self.get_employee(employee_id)
        return employee.dependents[self._dependent_index(employee, dependent_id)]

    def find_dependent(self, dependent_id: str) -> Tuple[Employee, Dependent]:
        """Find a dependent by id across all employees.

        Returns:
            (owning employee, dependent)

        Raises:
            NotFoundError: If no employee has a dependent with this id
        """
        for employee in self.list_employees():
            for dep in employee.dependents:
                if dep.id == dependent_id:
                    return employee, dep
        raise NotFoundError("dependent", dependent_id)

    def create_dependent(
        self,
        employee_id: str,
        request: Union[CreateDependentRequest, Dict[str, Any]],
    ) -> Dependent:
        """Add a dependent to an employee.

        Raises:
            NotFoundError: If the employee is absent
            ValidationError: If a name field is missing or blank
        """
        request = _coerce(CreateDependentRequest, request)
        dependent = Dependent(
            id=_new_id(),
            first_name=request.first_name,
            last_name=request.last_name,
            employee_id=employee_id,
        )

        with self._transaction() as employees:
            idx = self._index_of(employees, employee_id)
            owner = employees[idx]
            employees[idx] = owner.model_copy(
                update={"dependents": [*owner.dependents, dependent]}
            )

        logger.info(f"Created dependent {dependent.id} under employee {employee_id}")
        return dependent

    def update_dependent(
        self,
        employee_id: str,
        dependent: Union[Dependent, Dict[str, Any]],
    ) -> Dependent:
        """Replace a dependent record under an employee.

        Raises:
            NotFoundError: If the employee or dependent is absent
            ValidationError: If the record is invalid
        """
        if isinstance(dependent, dict):
            dependent = {**dependent, "employeeId": employee_id}
        dependent = _coerce(Dependent, dependent)
        dependent = dependent.model_copy(update={"employee_id": employee_id})

        with self._transaction() as employees:
            idx = self._index_of(employees, employee_id)
            owner = employees[idx]
            dep_idx = self._dependent_index(owner, dependent.id)
            dependents = list(owner.dependents)
            dependents[dep_idx] = dependent
            employees[idx] = owner.model_copy(update={"dependents": dependents})

        logger.info(f"Updated dependent {dependent.id} under employee {employee_id}")
        return dependent

    def delete_dependent(self, employee_id: str, dependent_id: str) -> None:
        """Remove a dependent from an employee.

        Raises:
            NotFoundError: If the employee or dependent is absent
        """
        with self._transaction() as employees:
            idx = self._index_of(employees, employee_id)
            owner = employees[idx]
            self._dependent_index(owner, dependent_id)
            employees[idx] = owner.model_copy(update={
                "dependents": [d for d in owner.dependents if d.id != dependent_id],
            })

        logger.info(f"Deleted dependent {dependent_id} from employee {employee_id}")

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def clear(self) -> int:
        """Remove every employee (for reset functionality).

        Returns:
            Number of employees removed
        """
        with self._transaction() as employees:
            count = len(employees)
            employees.clear()

        logger.info(f"Cleared store {self.path} ({count} employee(s))")
        return count

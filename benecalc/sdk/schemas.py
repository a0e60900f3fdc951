"""Pydantic schemas for bene-calc data validation.

Persisted and wire field names are camelCase (firstName, employeeId, ...);
Python attributes are snake_case. Models accept either spelling on input
and serialize by alias.
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# People
# =============================================================================


def _clean_name(value: str) -> str:
    """Strip whitespace and reject blank names."""
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class Person(BaseModel):
    """Fields shared by employees and dependents."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str = Field(..., min_length=1, description="Unique identifier (UUID4)")
    first_name: str = Field(..., alias="firstName", description="Given name")
    last_name: str = Field(..., alias="lastName", description="Family name")

    @field_validator("first_name", "last_name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _clean_name(value)


class Dependent(Person):
    """A person covered under an employee's benefits."""

    type: Literal["dependent"] = "dependent"
    employee_id: str = Field(
        ..., alias="employeeId",
        description="Owning employee id (lookup only, the employee owns the list)",
    )


class Employee(Person):
    """A person enrolled in benefits."""

    type: Literal["employee"] = "employee"
    dependents: List[Dependent] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_dependent_ids(self) -> "Employee":
        """Reject duplicate dependent ids within one employee."""
        seen = set()
        duplicates = []
        for dep in self.dependents:
            if dep.id in seen:
                duplicates.append(dep.id)
            seen.add(dep.id)
        if duplicates:
            raise ValueError(f"duplicate dependent ids: {', '.join(duplicates)}")
        return self


# =============================================================================
# Requests
# =============================================================================


class CreateEmployeeRequest(BaseModel):
    """Payload for creating an employee."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")

    @field_validator("first_name", "last_name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _clean_name(value)


class CreateDependentRequest(CreateEmployeeRequest):
    """Payload for creating a dependent (employee id comes from the caller)."""


# =============================================================================
# Benefits
# =============================================================================


class BenefitsRules(BaseModel):
    """Cost constants and the name-based discount rule.

    Loaded from the 'benefits' section of profile.yaml; every field has a
    default so an empty section yields the standard plan.
    """

    model_config = ConfigDict(extra="forbid")

    employee_yearly_cost: float = Field(default=1000, ge=0, description="Yearly cost per employee")
    dependent_yearly_cost: float = Field(default=500, ge=0, description="Yearly cost per dependent")
    discount_percentage: float = Field(
        default=0.10, ge=0, le=1,
        description="Fraction taken off a qualifying person's own cost",
    )
    discount_name_starts_with: str = Field(
        default="A",
        description="First-name prefix (case-insensitive) that earns the discount. Empty disables it.",
    )
    paychecks_per_year: int = Field(default=26, gt=0, description="Pay periods per year")
    paycheck_amount: float = Field(default=2000, ge=0, description="Gross pay per paycheck")


class BenefitsCalculation(BaseModel):
    """Derived cost breakdown for one employee or all employees. Never persisted."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    employee_cost: float = Field(..., ge=0, alias="employeeCost")
    dependent_cost: float = Field(..., ge=0, alias="dependentCost")
    discount: float = Field(..., ge=0)
    total_cost: float = Field(..., ge=0, alias="totalCost")
    per_paycheck: float = Field(..., ge=0, alias="perPaycheck")
    per_year: float = Field(..., ge=0, alias="perYear")
    paycheck_before_deductions: float = Field(..., alias="paycheckBeforeDeductions")
    paycheck_after_deductions: float = Field(..., alias="paycheckAfterDeductions")


# =============================================================================
# API responses
# =============================================================================


class ApiResponse(BaseModel):
    """Structured result returned by every endpoint function."""

    model_config = ConfigDict(extra="forbid")

    status: Literal["success", "error"]
    data: Any = None
    error: Optional[str] = None
    error_type: Optional[Literal["not_found", "validation", "io"]] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict:
        """JSON-ready dict, omitting unset fields."""
        return self.model_dump(mode="json", exclude_none=True)

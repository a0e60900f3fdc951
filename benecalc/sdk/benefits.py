"""Benefits cost calculation.

Cost model:
- Every employee costs a fixed yearly amount; every dependent a smaller one.
- A person whose first name starts with the configured letter (case-insensitive)
  gets a percentage off their OWN cost share. The discount is per person,
  never applied to the whole calculation.
- Yearly cost is spread evenly across paychecks.

Rules come from the 'benefits' section of profile.yaml:

    benefits:
      employee_yearly_cost: 1000
      dependent_yearly_cost: 500
      discount_percentage: 0.10
      discount_name_starts_with: A
      paychecks_per_year: 26
      paycheck_amount: 2000

No rounding is applied; currency formatting is left to renderers.
"""

from typing import Iterable, Optional

import yaml
from pydantic import ValidationError as PydanticValidationError

from .config import load_profile
from .schemas import BenefitsCalculation, BenefitsRules, Employee


class ProfileValidationError(ValueError):
    """Raised when the profile's benefits section is invalid."""
    pass


def load_benefits_rules(profile: Optional[dict] = None) -> BenefitsRules:
    """Resolve benefits rules from profile.yaml, falling back to defaults.

    Args:
        profile: Optional profile dict (loads from file if not provided)

    Returns:
        BenefitsRules with any profile overrides applied

    Raises:
        ProfileValidationError: If the benefits section has bad keys or values
    """
    if profile is None:
        try:
            profile = load_profile(require_exists=False)
        except yaml.YAMLError as e:
            raise ProfileValidationError(f"profile.yaml is not valid YAML: {e}")

    if not isinstance(profile, dict):
        raise ProfileValidationError(
            f"profile must be a mapping, got {type(profile).__name__}"
        )

    section = profile.get("benefits") or {}
    if not isinstance(section, dict):
        raise ProfileValidationError(
            f"benefits must be a mapping, got {type(section).__name__}"
        )

    try:
        return BenefitsRules(**section)
    except PydanticValidationError as e:
        errors = [
            f"benefits.{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise ProfileValidationError("; ".join(errors))


def qualifies_for_discount(first_name: str, prefix: str) -> bool:
    """True if first_name starts with prefix, ignoring case. Empty prefix never matches."""
    if not prefix:
        return False
    return first_name.lower().startswith(prefix.lower())


def calculate_benefits(
    employee: Employee,
    rules: Optional[BenefitsRules] = None,
) -> BenefitsCalculation:
    """Calculate the yearly and per-paycheck benefits cost for one employee.

    Args:
        employee: Employee with its dependents
        rules: Cost rules (defaults to the standard plan)

    Returns:
        BenefitsCalculation for this employee
    """
    if rules is None:
        rules = BenefitsRules()

    prefix = rules.discount_name_starts_with
    employee_cost = rules.employee_yearly_cost
    dependent_cost = rules.dependent_yearly_cost * len(employee.dependents)

    employee_discount = 0.0
    if qualifies_for_discount(employee.first_name, prefix):
        employee_discount = employee_cost * rules.discount_percentage

    qualifying = sum(
        1 for dep in employee.dependents if qualifies_for_discount(dep.first_name, prefix)
    )
    # Same product order as dependent_cost so a full discount cancels exactly.
    dependent_discount = rules.dependent_yearly_cost * qualifying * rules.discount_percentage

    discount = employee_discount + dependent_discount
    total_cost = employee_cost + dependent_cost - discount
    per_paycheck = total_cost / rules.paychecks_per_year

    return BenefitsCalculation(
        employee_cost=employee_cost,
        dependent_cost=dependent_cost,
        discount=discount,
        total_cost=total_cost,
        per_paycheck=per_paycheck,
        per_year=total_cost,
        paycheck_before_deductions=rules.paycheck_amount,
        paycheck_after_deductions=rules.paycheck_amount - per_paycheck,
    )


def calculate_total_benefits(
    employees: Iterable[Employee],
    rules: Optional[BenefitsRules] = None,
) -> BenefitsCalculation:
    """Sum the per-employee calculation across all employees.

    Paycheck figures are reported against a single paycheck: before is the
    configured paycheck amount, after subtracts the summed per-paycheck cost.
    """
    if rules is None:
        rules = BenefitsRules()

    totals = {
        "employee_cost": 0.0,
        "dependent_cost": 0.0,
        "discount": 0.0,
        "total_cost": 0.0,
        "per_paycheck": 0.0,
        "per_year": 0.0,
    }

    for employee in employees:
        calc = calculate_benefits(employee, rules)
        for key in totals:
            totals[key] += getattr(calc, key)

    return BenefitsCalculation(
        **totals,
        paycheck_before_deductions=rules.paycheck_amount,
        paycheck_after_deductions=rules.paycheck_amount - totals["per_paycheck"],
    )

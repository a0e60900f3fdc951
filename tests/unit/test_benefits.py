"""Tests for benefits cost calculation.

Pure calculation tests build Employee models directly; rules-loading tests
use isolated config directories via BENE_CALC_CONFIG_PATH.
"""

import json

import pytest
import yaml

from benecalc.sdk.benefits import (
    ProfileValidationError,
    calculate_benefits,
    calculate_total_benefits,
    load_benefits_rules,
    qualifies_for_discount,
)
from benecalc.sdk.schemas import BenefitsRules, Dependent, Employee


# === HELPERS ===


def make_employee(first_name: str, dependent_names: list = None, employee_id: str = "emp-1") -> Employee:
    """Create an employee with dependents named by first name."""
    dependents = [
        Dependent(id=f"{employee_id}-dep-{i}", first_name=name, last_name="Doe", employee_id=employee_id)
        for i, name in enumerate(dependent_names or [])
    ]
    return Employee(id=employee_id, first_name=first_name, last_name="Doe", dependents=dependents)


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point the SDK at empty config and data directories."""
    config_dir = tmp_path / "config"
    data_dir = tmp_path / "data"
    config_dir.mkdir()
    data_dir.mkdir()

    monkeypatch.setenv("BENE_CALC_CONFIG_PATH", str(config_dir))
    (config_dir / "settings.json").write_text(json.dumps({"data_dir": str(data_dir)}))

    return {"config_dir": config_dir, "data_dir": data_dir}


# === CALCULATION ===


class TestCalculateBenefits:
    """Per-employee calculation."""

    def test_no_dependents_no_discount(self):
        """Zero dependents: total is just the employee cost."""
        calc = calculate_benefits(make_employee("John"))

        assert calc.employee_cost == 1000
        assert calc.dependent_cost == 0
        assert calc.discount == 0
        assert calc.total_cost == 1000
        assert calc.per_year == 1000
        assert calc.per_paycheck == pytest.approx(1000 / 26)

    def test_no_dependents_with_discount(self):
        """Zero dependents, qualifying name: employee cost minus 10%."""
        calc = calculate_benefits(make_employee("Anna"))

        assert calc.discount == pytest.approx(100)
        assert calc.total_cost == pytest.approx(900)

    def test_dependents_without_discount(self):
        """N undiscounted dependents cost N x the dependent constant."""
        calc = calculate_benefits(make_employee("John", ["Jane", "Jim", "Zoe"]))

        assert calc.dependent_cost == 1500
        assert calc.discount == 0
        assert calc.total_cost == 2500

    def test_alice_and_adam_example(self):
        """Alice with dependent Adam: 100 + 50 discount, 1350 total."""
        calc = calculate_benefits(make_employee("Alice", ["Adam"]))

        assert calc.employee_cost == 1000
        assert calc.dependent_cost == 500
        assert calc.discount == pytest.approx(150)
        assert calc.total_cost == pytest.approx(1350)
        assert calc.per_paycheck == pytest.approx(51.923, abs=1e-3)

    def test_discount_is_per_person(self):
        """Only the qualifying dependent's share is discounted."""
        calc = calculate_benefits(make_employee("John", ["Amy", "Bob"]))

        assert calc.discount == pytest.approx(50)
        assert calc.total_cost == pytest.approx(1950)

    def test_discount_is_case_insensitive(self):
        """Lowercase names still match the uppercase prefix."""
        calc = calculate_benefits(make_employee("alice", ["adam"]))

        assert calc.discount == pytest.approx(150)

    def test_per_paycheck_times_paychecks_is_per_year(self):
        calc = calculate_benefits(make_employee("Alice", ["Adam", "Bea", "Al"]))

        assert calc.per_paycheck * 26 == pytest.approx(calc.per_year)

    def test_total_identity(self):
        """totalCost = employeeCost + dependentCost - discount."""
        calc = calculate_benefits(make_employee("Aaron", ["Ann", "Ben"]))

        assert calc.total_cost == pytest.approx(
            calc.employee_cost + calc.dependent_cost - calc.discount
        )

    def test_paycheck_figures(self):
        calc = calculate_benefits(make_employee("John"))

        assert calc.paycheck_before_deductions == 2000
        assert calc.paycheck_after_deductions == pytest.approx(2000 - 1000 / 26)

    def test_custom_rules(self):
        """Rules override every constant, including the prefix letter."""
        rules = BenefitsRules(
            employee_yearly_cost=1200,
            dependent_yearly_cost=600,
            discount_percentage=0.5,
            discount_name_starts_with="b",
            paychecks_per_year=12,
            paycheck_amount=5000,
        )
        calc = calculate_benefits(make_employee("Bob", ["Alice"]), rules)

        assert calc.discount == pytest.approx(600)
        assert calc.total_cost == pytest.approx(1200)
        assert calc.per_paycheck == pytest.approx(100)
        assert calc.paycheck_after_deductions == pytest.approx(4900)

    def test_empty_prefix_disables_discount(self):
        rules = BenefitsRules(discount_name_starts_with="")
        calc = calculate_benefits(make_employee("Alice", ["Adam"]), rules)

        assert calc.discount == 0

    @pytest.mark.parametrize("dependent_cost,count", [
        (0.01, 6), (0.02, 6), (0.03, 10), (0.04, 6), (0.1, 3), (500, 7),
    ])
    def test_full_discount_is_exactly_zero(self, dependent_cost, count):
        """A 100% discount on everyone cancels the cost without going negative."""
        rules = BenefitsRules(
            employee_yearly_cost=0,
            dependent_yearly_cost=dependent_cost,
            discount_percentage=1.0,
        )
        calc = calculate_benefits(make_employee("Ann", ["Ann"] * count), rules)

        assert calc.total_cost == 0
        assert calc.per_paycheck == 0
        assert calc.paycheck_after_deductions == 2000

    def test_full_discount_mixed_household(self):
        """Non-qualifying dependents still pay under a 100% discount."""
        rules = BenefitsRules(dependent_yearly_cost=0.03, discount_percentage=1.0)
        calc = calculate_benefits(make_employee("Alice", ["Ann"] * 9 + ["Bob"]), rules)

        assert calc.total_cost >= 0
        assert calc.total_cost == pytest.approx(0.03)

    def test_full_discount_aggregate(self):
        rules = BenefitsRules(dependent_yearly_cost=0.01, discount_percentage=1.0)
        employees = [
            make_employee("Ann", ["Ann"] * 6, employee_id="e1"),
            make_employee("Al", ["Amy"] * 10, employee_id="e2"),
        ]

        total = calculate_total_benefits(employees, rules)

        assert total.total_cost == 0
        assert total.per_paycheck == 0

    def test_calculation_is_immutable(self):
        calc = calculate_benefits(make_employee("John"))

        with pytest.raises(Exception):
            calc.total_cost = 0

    def test_serializes_camel_case(self):
        data = calculate_benefits(make_employee("John")).model_dump(by_alias=True)

        assert set(data) == {
            "employeeCost", "dependentCost", "discount", "totalCost",
            "perPaycheck", "perYear", "paycheckBeforeDeductions", "paycheckAfterDeductions",
        }


class TestQualifiesForDiscount:

    def test_matches(self):
        assert qualifies_for_discount("Alice", "A") is True
        assert qualifies_for_discount("alice", "A") is True
        assert qualifies_for_discount("Alice", "al") is True

    def test_no_match(self):
        assert qualifies_for_discount("Bob", "A") is False
        assert qualifies_for_discount("Alice", "") is False


class TestCalculateTotalBenefits:
    """Aggregate across employees."""

    def test_empty_is_zero(self):
        total = calculate_total_benefits([])

        assert total.total_cost == 0
        assert total.per_paycheck == 0
        assert total.paycheck_before_deductions == 2000
        assert total.paycheck_after_deductions == 2000

    def test_fieldwise_sum(self):
        employees = [
            make_employee("Alice", ["Adam"], employee_id="e1"),
            make_employee("John", ["Jane", "Jim"], employee_id="e2"),
            make_employee("anne", employee_id="e3"),
        ]
        singles = [calculate_benefits(e) for e in employees]
        total = calculate_total_benefits(employees)

        for field in ("employee_cost", "dependent_cost", "discount",
                      "total_cost", "per_paycheck", "per_year"):
            assert getattr(total, field) == pytest.approx(
                sum(getattr(c, field) for c in singles)
            ), field

    def test_paycheck_after_uses_summed_per_paycheck(self):
        employees = [make_employee("John", employee_id="e1"), make_employee("Jim", employee_id="e2")]
        total = calculate_total_benefits(employees)

        assert total.paycheck_after_deductions == pytest.approx(2000 - 2000 / 26)


# === RULES LOADING ===


class TestLoadBenefitsRules:

    def test_defaults_without_profile(self, isolated_env):
        assert load_benefits_rules() == BenefitsRules()

    def test_profile_overrides(self, isolated_env):
        profile = {"benefits": {"discount_name_starts_with": "Z", "paychecks_per_year": 24}}
        (isolated_env["config_dir"] / "profile.yaml").write_text(yaml.dump(profile))

        rules = load_benefits_rules()

        assert rules.discount_name_starts_with == "Z"
        assert rules.paychecks_per_year == 24
        assert rules.employee_yearly_cost == 1000

    def test_invalid_value(self):
        with pytest.raises(ProfileValidationError, match="discount_percentage"):
            load_benefits_rules({"benefits": {"discount_percentage": 1.5}})

    def test_unknown_key(self):
        with pytest.raises(ProfileValidationError, match="employee_cost"):
            load_benefits_rules({"benefits": {"employee_cost": 10}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ProfileValidationError):
            load_benefits_rules({"benefits": [1, 2]})

    def test_profile_must_be_mapping(self, isolated_env):
        (isolated_env["config_dir"] / "profile.yaml").write_text("- benefits\n- other\n")

        with pytest.raises(ProfileValidationError, match="profile must be a mapping"):
            load_benefits_rules()

    def test_unparseable_profile(self, isolated_env):
        (isolated_env["config_dir"] / "profile.yaml").write_text("benefits: [1, 2\n")

        with pytest.raises(ProfileValidationError, match="not valid YAML"):
            load_benefits_rules()

"""Tests for the endpoint functions in benecalc.sdk.api.

Endpoints never raise for domain errors; they return an ApiResponse with
error_type set.
"""

import pytest

from benecalc.sdk import api
from benecalc.sdk.schemas import BenefitsRules
from benecalc.sdk.store import EmployeeStore


@pytest.fixture
def store(tmp_path):
    return EmployeeStore(tmp_path / "employees.json")


@pytest.fixture
def alice_id(store):
    employee = api.create_employee(store, {"firstName": "Alice", "lastName": "Smith"}).data
    api.create_dependent(store, employee["id"], {"firstName": "Adam", "lastName": "Smith"})
    return employee["id"]


class TestEmployeeEndpoints:

    def test_create_returns_camel_case(self, store):
        response = api.create_employee(store, {"firstName": "Alice", "lastName": "Smith"})

        assert response.ok
        assert response.data["firstName"] == "Alice"
        assert response.data["dependents"] == []
        assert "first_name" not in response.data

    def test_create_validation_error(self, store):
        response = api.create_employee(store, {"firstName": "Alice"})

        assert not response.ok
        assert response.error_type == "validation"
        assert "lastName" in response.error

    def test_list(self, store, alice_id):
        response = api.list_employees(store)

        assert response.ok
        assert len(response.data) == 1
        assert response.data[0]["dependents"][0]["firstName"] == "Adam"

    def test_get_not_found(self, store):
        response = api.get_employee(store, "nope")

        assert response.error_type == "not_found"
        assert response.error == "Employee not found: nope"

    def test_update_path_id_wins(self, store, alice_id):
        record = api.get_employee(store, alice_id).data
        record["id"] = "something-else"
        record["lastName"] = "Jones"

        response = api.update_employee(store, alice_id, record)

        assert response.ok
        assert response.data["id"] == alice_id
        assert response.data["lastName"] == "Jones"

    def test_update_not_found(self, store):
        response = api.update_employee(store, "nope", {"firstName": "A", "lastName": "B"})

        assert response.error_type == "not_found"

    def test_update_rejects_non_object(self, store, alice_id):
        response = api.update_employee(store, alice_id, ["not", "a", "dict"])

        assert response.error_type == "validation"

    def test_delete(self, store, alice_id):
        assert api.delete_employee(store, alice_id).ok
        assert api.get_employee(store, alice_id).error_type == "not_found"

    def test_delete_not_found(self, store):
        assert api.delete_employee(store, "nope").error_type == "not_found"


class TestDependentEndpoints:

    def test_create(self, store, alice_id):
        response = api.create_dependent(store, alice_id, {"firstName": "Bea", "lastName": "Smith"})

        assert response.ok
        assert response.data["employeeId"] == alice_id

    def test_create_missing_employee(self, store):
        response = api.create_dependent(store, "nope", {"firstName": "Bea", "lastName": "Smith"})

        assert response.error_type == "not_found"

    def test_update(self, store, alice_id):
        dep = api.get_employee(store, alice_id).data["dependents"][0]
        dep["firstName"] = "Ada"

        response = api.update_dependent(store, alice_id, dep)

        assert response.ok
        assert response.data["firstName"] == "Ada"

    def test_update_missing_dependent(self, store, alice_id):
        response = api.update_dependent(
            store, alice_id, {"id": "nope", "firstName": "A", "lastName": "B"}
        )

        assert response.error_type == "not_found"

    @pytest.mark.parametrize("dependent_id", [None, ""])
    def test_delete_requires_id(self, store, alice_id, dependent_id):
        response = api.delete_dependent(store, alice_id, dependent_id)

        assert response.error_type == "validation"
        assert "Dependent ID is required" in response.error

    def test_delete(self, store, alice_id):
        dep_id = api.get_employee(store, alice_id).data["dependents"][0]["id"]

        assert api.delete_dependent(store, alice_id, dep_id).ok
        assert api.get_employee(store, alice_id).data["dependents"] == []


class TestBenefitsEndpoints:

    def test_employee_benefits(self, store, alice_id):
        response = api.get_employee_benefits(store, alice_id, BenefitsRules())

        assert response.ok
        assert response.data["discount"] == pytest.approx(150)
        assert response.data["totalCost"] == pytest.approx(1350)
        assert response.data["perPaycheck"] == pytest.approx(1350 / 26)

    def test_employee_benefits_not_found(self, store):
        response = api.get_employee_benefits(store, "nope", BenefitsRules())

        assert response.error_type == "not_found"

    def test_total(self, store, alice_id):
        api.create_employee(store, {"firstName": "John", "lastName": "Doe"})

        response = api.get_total_benefits(store, BenefitsRules())

        assert response.ok
        assert response.data["totalCost"] == pytest.approx(2350)
        assert response.data["paycheckAfterDeductions"] == pytest.approx(2000 - 2350 / 26)

    def test_invalid_profile_is_validation_error(self, store, alice_id, tmp_path, monkeypatch):
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "profile.yaml").write_text("benefits:\n  paychecks_per_year: 0\n")
        monkeypatch.setenv("BENE_CALC_CONFIG_PATH", str(config_dir))

        response = api.get_employee_benefits(store, alice_id)

        assert response.error_type == "validation"
        assert "paychecks_per_year" in response.error


class TestBrokenConfig:
    """Bad config files come back as validation failures, never exceptions."""

    @pytest.fixture
    def config_dir(self, tmp_path, monkeypatch):
        path = tmp_path / "config"
        path.mkdir()
        monkeypatch.setenv("BENE_CALC_CONFIG_PATH", str(path))
        return path

    @pytest.mark.parametrize("filename,content", [
        ("profile.yaml", "benefits: [1, 2\n"),
        ("profile.yaml", "- benefits\n- other\n"),
        ("settings.json", "{broken"),
        ("settings.json", "[1, 2]"),
    ])
    def test_employee_benefits(self, store, alice_id, config_dir, filename, content):
        (config_dir / filename).write_text(content)

        response = api.get_employee_benefits(store, alice_id)

        assert not response.ok
        assert response.error_type == "validation"

    def test_total_benefits(self, store, alice_id, config_dir):
        (config_dir / "profile.yaml").write_text("benefits: [1, 2\n")

        response = api.get_total_benefits(store)

        assert response.error_type == "validation"
        assert "not valid YAML" in response.error

    def test_store_operations_unaffected(self, store, alice_id, config_dir):
        """Explicit rules and plain CRUD do not read the profile."""
        (config_dir / "profile.yaml").write_text("- not a mapping\n")

        assert api.list_employees(store).ok
        assert api.get_employee_benefits(store, alice_id, BenefitsRules()).ok


class TestFullDiscount:

    def test_employee_and_total_are_zero(self, store):
        rules = BenefitsRules(
            employee_yearly_cost=0, dependent_yearly_cost=0.01, discount_percentage=1.0,
        )
        emp_id = api.create_employee(store, {"firstName": "Ann", "lastName": "Lee"}).data["id"]
        for _ in range(6):
            api.create_dependent(store, emp_id, {"firstName": "Ann", "lastName": "Lee"})

        single = api.get_employee_benefits(store, emp_id, rules)
        total = api.get_total_benefits(store, rules)

        assert single.ok, single.error
        assert single.data["totalCost"] == 0
        assert total.ok, total.error
        assert total.data["totalCost"] == 0


class TestApiResponse:

    def test_to_dict_omits_unset(self, store):
        assert api.delete_employee(store, "nope").to_dict() == {
            "status": "error",
            "error": "Employee not found: nope",
            "error_type": "not_found",
        }

"""Bene Calc SDK - Core functionality for employee benefits costs."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_profile_path,
    load_profile,
    save_profile,
    get_profile_value,
    set_profile_value,
    ProfileNotFoundError,
    ConfigNotFoundError,
    # XDG paths
    get_data_path,
    get_store_path,
)

from .schemas import (
    Person,
    Employee,
    Dependent,
    CreateEmployeeRequest,
    CreateDependentRequest,
    BenefitsRules,
    BenefitsCalculation,
    ApiResponse,
)

from .benefits import (
    calculate_benefits,
    calculate_total_benefits,
    load_benefits_rules,
    qualifies_for_discount,
    ProfileValidationError,
)

from .store import (
    EmployeeStore,
    NotFoundError,
    ValidationError,
    StoreIOError,
)

from . import api

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_profile_path",
    "load_profile",
    "save_profile",
    "get_profile_value",
    "set_profile_value",
    "ProfileNotFoundError",
    "ConfigNotFoundError",
    "get_data_path",
    "get_store_path",
    # Schemas
    "Person",
    "Employee",
    "Dependent",
    "CreateEmployeeRequest",
    "CreateDependentRequest",
    "BenefitsRules",
    "BenefitsCalculation",
    "ApiResponse",
    # Benefits
    "calculate_benefits",
    "calculate_total_benefits",
    "load_benefits_rules",
    "qualifies_for_discount",
    "ProfileValidationError",
    # Store
    "EmployeeStore",
    "NotFoundError",
    "ValidationError",
    "StoreIOError",
    # Endpoints
    "api",
]

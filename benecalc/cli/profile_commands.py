"""Profile CLI commands for Bene Calc.

Manages profile.yaml - benefits costs and the discount rule.
"""

import click
import yaml

from benecalc.sdk import (
    BenefitsRules,
    ProfileValidationError,
    get_profile_path,
    get_profile_value,
    load_benefits_rules,
    load_profile,
    load_settings,
    save_profile,
    set_profile_value,
)


def _parse_value(value: str):
    """Parse a CLI value as int, then float, else keep the string."""
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


@click.group()
def profile():
    """Manage the benefits profile (profile.yaml).

    \b
    benefits:
      employee_yearly_cost: 1000
      dependent_yearly_cost: 500
      discount_percentage: 0.10
      discount_name_starts_with: A
      paychecks_per_year: 26
      paycheck_amount: 2000
    """
    pass


@profile.command("show")
def profile_show():
    """Show the active profile location and the effective benefits rules."""
    profile_path = get_profile_path(require_exists=False)

    if load_settings().get("profile"):
        location_label = "custom"
    elif profile_path.exists():
        location_label = "central (default)"
    else:
        location_label = "not created (using defaults)"

    click.echo(f"Profile: {profile_path}")
    click.echo(f"Location: {location_label}")

    try:
        rules = load_benefits_rules()
    except ProfileValidationError as e:
        click.echo()
        click.echo("Validation Errors (profile is invalid):")
        for error in str(e).split("; "):
            click.echo(f"  ! {error}")
        raise click.ClickException("Profile has validation errors. Fix them before continuing.")

    click.echo()
    click.echo("Effective benefits rules:")
    for key, value in rules.model_dump().items():
        click.echo(f"  {key}: {value}")


@profile.command("init")
@click.option("--force", is_flag=True, help="Overwrite the benefits section of an existing profile.")
def profile_init(force: bool):
    """Write the default benefits rules to profile.yaml."""
    profile_path = get_profile_path(require_exists=False)
    current = load_profile(require_exists=False)

    if current.get("benefits") and not force:
        raise click.ClickException(
            f"Profile already has a benefits section: {profile_path}\n"
            f"Use --force to overwrite it."
        )

    current["benefits"] = BenefitsRules().model_dump()
    path = save_profile(current)
    click.echo(f"Wrote default benefits rules to {path}")


@profile.command("get")
@click.argument("key")
def profile_get(key):
    """Get a profile value.

    KEY is a dot-notation path like 'benefits.paycheck_amount'.
    """
    value = get_profile_value(key)
    if value is None:
        raise click.ClickException(f"Key '{key}' not found in profile")

    if isinstance(value, (dict, list)):
        click.echo(yaml.dump(value, default_flow_style=False, sort_keys=False).rstrip())
        return

    click.echo(value)


@profile.command("set")
@click.argument("key")
@click.argument("value")
def profile_set(key, value):
    """Set a benefits rule.

    \b
    Examples:
        bene-calc profile set benefits.discount_name_starts_with B
        bene-calc profile set benefits.paychecks_per_year 24
    """
    parts = key.split(".")
    if len(parts) != 2 or parts[0] != "benefits":
        raise click.ClickException(f"Invalid key '{key}'. Expected benefits.<rule>.")

    rule = parts[1]
    if rule not in BenefitsRules.model_fields:
        valid_keys = ", ".join(BenefitsRules.model_fields)
        raise click.ClickException(f"Unknown rule '{rule}'. Valid rules: {valid_keys}")

    parsed_value = value if rule == "discount_name_starts_with" else _parse_value(value)

    # Validate before writing
    try:
        current = load_profile(require_exists=False)
    except yaml.YAMLError as e:
        raise click.ClickException(f"profile.yaml is not valid YAML: {e}")

    candidate = dict(current) if isinstance(current, dict) else {}
    section = candidate.get("benefits") or {}
    if not isinstance(section, dict):
        raise click.ClickException("Profile 'benefits' section must be a mapping.")
    candidate["benefits"] = {**section, rule: parsed_value}
    try:
        load_benefits_rules(candidate)
    except ProfileValidationError as e:
        raise click.ClickException(str(e))

    path = set_profile_value(key, parsed_value)
    click.echo(f"Set {key} = {parsed_value}")
    click.echo(f"Saved to: {path}")

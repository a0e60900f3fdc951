"""Settings CLI commands for Bene Calc.

Manages settings.json - data directory, store file, preferences.
"""

import click
from pathlib import Path

from benecalc.sdk import (
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_settings_path,
    get_data_path,
    get_store_path,
)


def _ensure_writable_dir(path: Path) -> None:
    """Create path if needed and check it is a writable directory."""
    if path.exists():
        if not path.is_dir():
            raise click.ClickException(f"Path exists but is not a directory: {path}")
    else:
        try:
            path.mkdir(parents=True, exist_ok=True)
            click.echo(f"Created directory: {path}")
        except OSError as e:
            raise click.ClickException(f"Cannot create directory: {path}\n{e}")

    test_file = path / ".write_test"
    try:
        test_file.touch()
        test_file.unlink()
    except OSError as e:
        raise click.ClickException(f"Directory is not writable: {path}\n{e}")


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - data_dir: custom data directory path
    - store_path: custom employee store file
    - profile: path to profile.yaml
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective paths:")
    click.echo(f"  data_dir: {get_data_path()}")
    click.echo(f"  store: {get_store_path()}")


@settings.command("data-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom data_dir, revert to default")
def settings_data_dir(path, clear):
    """Set or clear the custom data directory.

    PATH is the directory where bene-calc keeps employees.json.

    Examples:
        bene-calc settings data-dir ~/hr/bene-calc
        bene-calc settings data-dir --clear
    """
    if clear:
        current = load_settings()
        if "data_dir" in current:
            del current["data_dir"]
            save_settings(current)
            click.echo("Cleared data_dir setting.")
            click.echo(f"Data directory is now: {get_data_path()} (default)")
        else:
            click.echo("data_dir was not set.")
        return

    if not path:
        current_data_dir = get_setting("data_dir")
        if current_data_dir:
            click.echo(f"Current data_dir: {current_data_dir}")
        else:
            click.echo(f"No custom data_dir set. Using default: {get_data_path()}")
        return

    data_path = Path(path).expanduser().resolve()
    _ensure_writable_dir(data_path)

    set_setting("data_dir", str(data_path))
    click.echo(f"Set data_dir: {data_path}")
    click.echo(f"Saved to: {get_settings_path()}")


@settings.command("store-path")
@click.argument("path", required=False, type=click.Path(dir_okay=False))
@click.option("--clear", is_flag=True, help="Clear custom store_path, revert to <data_dir>/employees.json")
def settings_store_path(path, clear):
    """Set or clear the employee store file.

    Example:
        bene-calc settings store-path /shared/hr/employees.json
    """
    if clear:
        current = load_settings()
        if "store_path" in current:
            del current["store_path"]
            save_settings(current)
            click.echo("Cleared store_path setting.")
        else:
            click.echo("store_path was not set.")
        click.echo(f"Store is now: {get_store_path()}")
        return

    if not path:
        click.echo(f"Store: {get_store_path()}")
        return

    store_path = Path(path).expanduser().resolve()
    _ensure_writable_dir(store_path.parent)

    set_setting("store_path", str(store_path))
    click.echo(f"Set store_path: {store_path}")
    click.echo(f"Saved to: {get_settings_path()}")

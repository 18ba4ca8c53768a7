"""CLI entry point for aumos-access-guard.

Invoked as::

    access-guard [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m aumos_access_guard.cli.main

Commands
--------
- check     Evaluate a guard (JSON) against a credential document
- validate  Validate a credential document and list its rules
- version   Show version information
"""
from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from aumos_access_guard.credentials.loader import StaticCredentialProvider

console = Console()
err_console = Console(stderr=True)

_DEFAULT_CREDENTIALS = Path("credentials.yaml")
_DEFAULT_SETTINGS = Path("access-guard.yaml")


def _parse_json(label: str, raw: str | None) -> object:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        err_console.print(f"[red]Invalid JSON for {label}:[/red] {exc}")
        sys.exit(2)


def _load_provider(credentials_path: str) -> StaticCredentialProvider:
    from aumos_access_guard.credentials.loader import (
        CredentialConfigError,
        StaticCredentialProvider,
    )

    try:
        return StaticCredentialProvider.from_file(credentials_path)
    except (CredentialConfigError, FileNotFoundError) as exc:
        err_console.print(f"[red]Invalid credentials:[/red] {exc}")
        sys.exit(2)


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="aumos-access-guard")
def cli() -> None:
    """Access Guard CLI: evaluate guards against granted rules."""


@cli.command(name="version")
def version_command() -> None:
    """Show version information."""
    from aumos_access_guard import __version__

    console.print(f"[bold]aumos-access-guard[/bold] v{__version__}")


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.option(
    "--credentials",
    "-c",
    "credentials_path",
    default=str(_DEFAULT_CREDENTIALS),
    show_default=True,
    help="Path to the YAML credential document.",
)
@click.option("--guard", "-g", "guard_json", required=True, help="Guard tree as JSON.")
@click.option("--data", "data_json", default=None, help="Context data as JSON.")
@click.option("--extra-data", "extra_data_json", default=None, help="Extra context data as JSON.")
@click.option(
    "--settings",
    "settings_path",
    default=str(_DEFAULT_SETTINGS),
    show_default=True,
    help="Optional YAML file with pipeline settings.",
)
def check_command(
    credentials_path: str,
    guard_json: str,
    data_json: str | None,
    extra_data_json: str | None,
    settings_path: str,
) -> None:
    """Evaluate a guard against the rules of a credential document."""
    from aumos_access_guard.credentials.settings import GuardSettings, GuardSettingsError
    from aumos_access_guard.secure.pipeline import make_secure

    guard = _parse_json("guard", guard_json)
    data = _parse_json("data", data_json)
    extra_data = _parse_json("extra-data", extra_data_json)

    provider = _load_provider(credentials_path)
    try:
        settings = GuardSettings.load(Path(settings_path))
    except GuardSettingsError as exc:
        err_console.print(f"[red]Invalid settings:[/red] {exc}")
        sys.exit(2)
    # The CLI reports the raw decision; configured outcomes are not delivered.
    secure = make_secure(settings.to_config(provider, data=data))
    allowed = asyncio.run(secure.decide(guard, extra_data))

    status_str = "[green]ALLOWED[/green]" if allowed else "[red]DENIED[/red]"
    console.print(Panel(status_str, title="Access Check Result", border_style="blue"))

    credential = provider.credential
    if credential.has_role(settings.admin_role):
        console.print(f"  Admin bypass: role [bold]{settings.admin_role}[/bold]")
    else:
        console.print(f"  Rules evaluated: {len(credential.rules)}")

    sys.exit(0 if allowed else 1)


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.option(
    "--credentials",
    "-c",
    "credentials_path",
    default=str(_DEFAULT_CREDENTIALS),
    show_default=True,
    help="Path to the YAML credential document.",
)
def validate_command(credentials_path: str) -> None:
    """Validate a credential document and list its rules."""
    provider = _load_provider(credentials_path)
    credential = provider.credential

    console.print(f"[green]VALID[/green]: {credentials_path}")
    roles = ", ".join(sorted(str(role) for role in credential.roles)) or "-"
    console.print(f"  Roles: {roles}")

    table = Table(title="Granted Rules", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Action", style="cyan")
    table.add_column("Resource", style="magenta")
    table.add_column("Role")
    for index, rule in enumerate(credential.rules):
        table.add_row(
            str(index),
            json.dumps(rule.get("action", "-")),
            json.dumps(rule.get("resource", "-")),
            json.dumps(rule.get("role", "-")),
        )
    console.print(table)


if __name__ == "__main__":
    cli()

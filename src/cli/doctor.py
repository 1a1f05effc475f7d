"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_client
from core.config import AppSettings, load_settings, write_user_env_vars
from core.errors import SugarClientError
from core.services.sugar_client import SugarClient

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_http(settings: AppSettings) -> tuple[bool, str]:
    url = f"{settings.base_url}{settings.api_path}"
    try:
        with build_client(settings) as client:
            response = client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_login(settings: AppSettings) -> tuple[bool, str]:
    try:
        with SugarClient.from_settings(settings) as client:
            return True, f"session {client.session[:8]}…"
    except SugarClientError as exc:
        return False, f"{exc.code}: {exc}"


@app.command()
def run(ctx: typer.Context) -> None:
    """Show the effective configuration and check connectivity and login."""

    # Hereda los overrides de la CLI principal (--url, --user, ...) si existen.
    settings = getattr(ctx.obj, "settings", None) or load_settings()

    table = Table(title="sugar-rest Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    missing = [name for name in ("base_url", "login", "password") if not (getattr(settings, name) or "").strip()]
    for name in ("base_url", "login"):
        value = getattr(settings, name)
        table.add_row(name, "OK" if value else "MISSING", value or "-")
    table.add_row("password", "OK" if settings.password else "MISSING", "***" if settings.password else "-")
    table.add_row("verify_ssl", "OK" if settings.verify_ssl else "WARN", str(settings.verify_ssl))
    table.add_row("api_path", "OK", settings.api_path)

    if missing:
        _console.print(table)
        _console.print(
            "\n[yellow]Note:[/yellow] run `doctor setup` or set SUGAR_REST_BASE_URL / _LOGIN / _PASSWORD."
        )
        raise typer.Exit(code=1)

    ok_http, detail_http = _check_http(settings)
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    ok_login, detail_login = _check_login(settings)
    table.add_row("Login", "OK" if ok_login else "FAIL", detail_login)

    _console.print(table)
    if not (ok_http and ok_login):
        raise typer.Exit(code=1)


@app.command()
def setup() -> None:
    """Interactive connection setup (stores config in the user config .env)."""

    base_url = typer.prompt("SugarCRM base URL (no trailing slash)").strip().rstrip("/")
    login = typer.prompt("Webservice login").strip()
    password = typer.prompt("Webservice password", hide_input=True, confirmation_prompt=False).strip()
    verify = typer.confirm("Verify TLS certificates?", default=True)

    if not base_url or not login or not password:
        raise typer.BadParameter("base URL, login and password are required")

    env_path = write_user_env_vars(
        {
            "SUGAR_REST_BASE_URL": base_url,
            "SUGAR_REST_LOGIN": login,
            "SUGAR_REST_PASSWORD": password,
            "SUGAR_REST_VERIFY_SSL": "true" if verify else "false",
        }
    )

    _console.print(f"[green]Saved connection config to:[/green] {env_path}")

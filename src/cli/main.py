"""CLI principal (Typer).

Por qué Typer + Rich:
- Subcomandos tipados sin parsear argv a mano.
- Salida legible (tablas) o JSON para pipelines (`--json`).

La CLI no contiene lógica del protocolo: delega todo en `SugarClient`.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

import typer
from rich.console import Console

from cli.doctor import app as doctor_app
from cli.ui_components import build_bean_table, build_beans_table, print_banner
from core.config import AppSettings, load_settings
from core.domain.response import NO_RESULT
from core.errors import SugarClientError
from core.log import configure_logging
from core.services.sugar_client import SugarClient

app = typer.Typer(no_args_is_help=True, help="Client for the SugarCRM REST v4 API.")
app.add_typer(doctor_app, name="doctor")

_console = Console()


@dataclass
class CliState:
    settings: AppSettings
    as_json: bool = False


def _parse_pairs(items: List[str] | None, *, json_values: bool) -> dict[str, Any]:
    """Convierte `KEY=VALUE` repetidos en un dict ordenado.

    Con `json_values`, el valor se interpreta como JSON si es posible
    (`max_results=10` → 10); si no, queda como string.
    """

    out: dict[str, Any] = {}
    for raw in items or []:
        if "=" not in raw:
            raise typer.BadParameter(f"expected KEY=VALUE, got {raw!r}")
        key, value = raw.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"empty key in {raw!r}")
        parsed: Any = value
        if json_values:
            try:
                parsed = json.loads(value)
            except ValueError:
                parsed = value
        out[key] = parsed
    return out


def _print_json(value: Any) -> None:
    # Sin markup de Rich: la salida JSON tiene que ser parseable tal cual.
    typer.echo(json.dumps(value, ensure_ascii=False, indent=2))


@contextmanager
def _connected(state: CliState) -> Iterator[SugarClient]:
    """Abre sesión, la cierra al salir y traduce errores del cliente a exit code 2."""

    try:
        with SugarClient.from_settings(state.settings) as client:
            yield client
    except SugarClientError as exc:
        _console.print(f"[red]{exc.code}:[/red] {exc}")
        raise typer.Exit(code=2) from exc


@app.callback()
def main(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(None, "--url", help="Base URL of the SugarCRM instance (no trailing slash)."),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Webservice login."),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Webservice password."),
    insecure: bool = typer.Option(False, "--insecure", help="Skip TLS certificate verification."),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON instead of tables."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging to stderr."),
    banner: bool = typer.Option(False, "--banner", help="Show the welcome banner."),
) -> None:
    overrides: dict[str, Any] = {
        key: value
        for key, value in {"base_url": url, "login": user, "password": password}.items()
        if value is not None
    }
    if insecure:
        overrides["verify_ssl"] = False

    try:
        settings = load_settings(**overrides)
    except SugarClientError as exc:
        _console.print(f"[red]{exc.code}:[/red] {exc}")
        raise typer.Exit(code=2) from exc
    configure_logging(settings.log_level, verbose=verbose)
    if banner and not as_json:
        print_banner(_console)
    ctx.obj = CliState(settings=settings, as_json=as_json)


@app.command()
def login(ctx: typer.Context) -> None:
    """Log in, print the session id and log out."""

    state: CliState = ctx.obj
    with _connected(state) as client:
        if state.as_json:
            _print_json({"session": client.session, "url": client.url})
        else:
            _console.print(f"[green]Session:[/green] {client.session}")


@app.command()
def get(
    ctx: typer.Context,
    module: str = typer.Argument(..., help="Module name (Contacts, Meetings, ...)."),
    bean_id: str = typer.Argument(..., help="Bean id."),
) -> None:
    """Load one bean; exit code 1 if it does not exist or is deleted."""

    state: CliState = ctx.obj
    with _connected(state) as client:
        bean = client.load_one(module, bean_id)
    if bean is None:
        _console.print(f"[yellow]{module} {bean_id} not found[/yellow]")
        raise typer.Exit(code=1)
    if state.as_json:
        _print_json(bean)
    else:
        _console.print(build_bean_table(bean, title=f"{module} {bean_id}"))


@app.command(name="list")
def list_beans(
    ctx: typer.Context,
    module: str = typer.Argument(..., help="Module name."),
    option: Optional[List[str]] = typer.Option(
        None,
        "--option",
        "-o",
        help="Extra get_entry_list argument as KEY=VALUE (VALUE parsed as JSON when possible).",
    ),
) -> None:
    """List beans of a module (one page, as returned by the server)."""

    state: CliState = ctx.obj
    options = _parse_pairs(option, json_values=True)
    with _connected(state) as client:
        beans = client.load_many(module, options)
    if state.as_json:
        _print_json(beans)
    else:
        _console.print(build_beans_table(beans, title=module))


@app.command(name="get-many")
def get_many(
    ctx: typer.Context,
    module: str = typer.Argument(..., help="Module name."),
    ids: List[str] = typer.Argument(..., help="Bean ids."),
) -> None:
    """Load several beans by id (deleted beans included)."""

    state: CliState = ctx.obj
    with _connected(state) as client:
        beans = client.load_by_ids(module, ids)
    if state.as_json:
        _print_json(beans)
    else:
        _console.print(build_beans_table(beans, title=module))


@app.command()
def save(
    ctx: typer.Context,
    module: str = typer.Argument(..., help="Module name."),
    fields: List[str] = typer.Argument(..., help="Bean fields as FIELD=VALUE."),
) -> None:
    """Save a bean; exit code 1 if the server did not return an id."""

    state: CliState = ctx.obj
    values = _parse_pairs(fields, json_values=False)
    with _connected(state) as client:
        ok = client.save(module, values)
    if state.as_json:
        _print_json({"saved": ok})
    elif ok:
        _console.print(f"[green]{module} saved[/green]")
    else:
        _console.print(f"[red]{module} not saved[/red]")
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def call(
    ctx: typer.Context,
    method: str = typer.Argument(..., help="Remote REST method (e.g. get_server_info)."),
    args: str = typer.Option("{}", "--args", "-a", help="Arguments as a JSON object."),
) -> None:
    """Call any REST method and print the decoded response."""

    state: CliState = ctx.obj
    try:
        arguments = json.loads(args)
    except ValueError as exc:
        raise typer.BadParameter(f"--args is not valid JSON: {exc}") from exc
    if not isinstance(arguments, dict):
        raise typer.BadParameter("--args must be a JSON object")

    with _connected(state) as client:
        result = client.call(method, arguments)
    if result is NO_RESULT:
        _console.print("[yellow](no result)[/yellow]")
        raise typer.Exit(code=1)
    _print_json(result)


def run() -> None:
    app()


if __name__ == "__main__":
    run()

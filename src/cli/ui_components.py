"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Any, Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

_LIST_COLUMNS = ("id", "name", "last_name", "date_modified", "deleted")


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (solo en modo interactivo)."""

    title = Text("sugar-rest", style="bold cyan")
    subtitle = Text("SugarCRM REST v4 • sesión • beans", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def name_value_pairs(bean: Any) -> dict[str, Any]:
    """Aplana `name_value_list` ({campo: {name, value}}) a {campo: valor}."""

    if not isinstance(bean, dict):
        return {}
    nvl = bean.get("name_value_list")
    if isinstance(nvl, dict):
        items = nvl.values()
    elif isinstance(nvl, list):
        items = nvl
    else:
        return {}

    out: dict[str, Any] = {}
    for item in items:
        if isinstance(item, dict) and "name" in item:
            out[str(item["name"])] = item.get("value")
    return out


def build_bean_table(bean: Any, *, title: str = "Bean") -> Table:
    table = Table(title=title)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for name, value in sorted(name_value_pairs(bean).items()):
        table.add_row(name, "" if value is None else str(value))
    return table


def build_beans_table(beans: Iterable[Any], *, title: str = "Beans") -> Table:
    """Tabla compacta para listas de beans (columnas comunes de SugarCRM)."""

    beans = list(beans)
    rows = []
    for bean in beans:
        row = name_value_pairs(bean)
        if "id" not in row and isinstance(bean, dict) and bean.get("id"):
            row["id"] = bean["id"]
        rows.append(row)
    columns = [c for c in _LIST_COLUMNS if any(c in r for r in rows)] or ["id"]

    table = Table(title=title)
    for col in columns:
        table.add_column(col, style="cyan" if col == "id" else "white", no_wrap=col == "id")
    for row in rows:
        table.add_row(*["" if row.get(c) is None else str(row.get(c)) for c in columns])
    return table

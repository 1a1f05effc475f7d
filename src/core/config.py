"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que el cliente y el gateway HTTP lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigurationError


DEFAULT_API_PATH = "/service/v4/rest.php"
DEFAULT_APPLICATION_NAME = "SugarCRM-Client Python Library"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "sugar-rest"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "sugar-rest"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "sugar-rest"
    return Path.home() / ".config" / "sugar-rest"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# sugar-rest user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central del cliente.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI, cliente y transporte.

    Nota:
    - `base_url`, `login` y `password` son opcionales aquí; se validan al
      construir el cliente (ver `core.domain.models.Credentials`).
    """

    model_config = SettingsConfigDict(
        env_prefix="SUGAR_REST_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str | None = Field(
        default=None,
        description="URL base de la instancia SugarCRM, sin barra final.",
    )
    login: str | None = Field(
        default=None,
        description="Usuario del webservice.",
    )
    password: str | None = Field(
        default=None,
        description="Password del usuario del webservice (texto plano).",
    )

    verify_ssl: bool = Field(
        default=True,
        description="Verificar el certificado TLS del servidor (False para certificados autofirmados).",
    )
    api_path: str = Field(
        default=DEFAULT_API_PATH,
        min_length=1,
        description="Ruta del entry point REST relativa a `base_url`.",
    )
    application_name: str = Field(
        default=DEFAULT_APPLICATION_NAME,
        min_length=1,
        description="Identificador de cliente enviado en el login.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="sugar-rest/0.1",
        min_length=1,
        description="User-Agent para las peticiones REST.",
    )
    log_level: str = Field(
        default="WARNING",
        min_length=1,
        description="Nivel mínimo de logging (loguru).",
    )


def load_settings(**overrides: object) -> AppSettings:
    """Crea `AppSettings`; un valor inválido (env, .env u override) es `ConfigurationError`."""

    try:
        return AppSettings(**overrides)
    except ValidationError as exc:
        err = exc.errors()[0]
        field = str(err["loc"][0]) if err.get("loc") else None
        raise ConfigurationError(f"Invalid setting {field}: {err.get('msg')}", field=field) from exc

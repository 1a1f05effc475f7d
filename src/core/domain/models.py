"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta en el borde (credenciales, requests) sin acoplar el
  Core a httpx ni a la CLI.

Nota:
- Los beans NO se modelan aquí: el cliente devuelve el dict decodificado tal
  cual, solo inspecciona su forma (ver `core.domain.response`).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from core.errors import ConfigurationError


_CREDENTIAL_LABELS = {
    "url": "SugarCRM url not set!",
    "login": "Login not set!",
    "password": "Password not set!",
}


class Credentials(BaseModel):
    """Triple (url, login, password) validado al construir el cliente.

    Reglas:
    - Los tres valores se recortan (strip) y deben quedar no vacíos.
    - El password solo vive hasta construir el digest del login.
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    url: str = Field(..., min_length=1, description="URL base sin barra final.")
    login: str = Field(..., min_length=1, description="Usuario del webservice.")
    password: str = Field(..., min_length=1, description="Password en texto plano.")

    @classmethod
    def parse(cls, url: str | None, login: str | None, password: str | None) -> "Credentials":
        """Valida el triple y traduce el fallo a `ConfigurationError`.

        Se reporta el primer campo inválido en orden url → login → password.
        """

        values = {"url": url or "", "login": login or "", "password": password or ""}
        try:
            return cls(**{k: str(v) for k, v in values.items()})
        except ValidationError as exc:
            bad = [str(err["loc"][0]) for err in exc.errors() if err.get("loc")]
            field = next((name for name in _CREDENTIAL_LABELS if name in bad), "url")
            raise ConfigurationError(_CREDENTIAL_LABELS[field], field=field) from exc


class CallRequest(BaseModel):
    """Método remoto + argumentos, antes de serializarse al envelope REST."""

    model_config = ConfigDict(str_strip_whitespace=True)

    method: str = Field(..., min_length=1, description="Nombre del método REST (p.ej. 'get_entry').")
    arguments: dict[str, Any] = Field(
        default_factory=dict,
        description="Argumentos del método; el orden se preserva en `rest_data`.",
    )

    @classmethod
    def build(cls, method: str, arguments: dict[str, Any]) -> "CallRequest":
        """Como el constructor, pero un método vacío es `ConfigurationError`."""

        try:
            return cls(method=method, arguments=arguments)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid REST call {method!r}: method not set!", field="method") from exc

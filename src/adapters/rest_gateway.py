"""Gateway HTTP hacia el entry point REST de SugarCRM.

Responsabilidad:
- Serializar `CallRequest` al envelope fijo del protocolo
  (`method`, `input_type`, `response_type`, `rest_data`).
- Hacer un único POST form-encoded, sin redirects ni reintentos.
- Decodificar el cuerpo de forma permisiva: JSON vacío o inválido es
  `NO_RESULT`, no un error.
"""

from __future__ import annotations

import json

import httpx
from loguru import logger

from adapters.http_client import build_client
from core.config import AppSettings, load_settings
from core.domain.models import CallRequest
from core.domain.response import NO_RESULT, Response, is_empty
from core.errors import TransportError

WIRE_FORMAT = "JSON"


def encode_rest_data(arguments: dict) -> str:
    # JSON compacto (sin espacios), igual que el que produce el propio servidor.
    return json.dumps(arguments, separators=(",", ":"))


def build_envelope(request: CallRequest) -> dict[str, str]:
    """Campos del formulario enviado al servidor (el orden importa poco, pero se mantiene)."""

    return {
        "method": request.method,
        "input_type": WIRE_FORMAT,
        "response_type": WIRE_FORMAT,
        "rest_data": encode_rest_data(request.arguments),
    }


def decode_body(text: str) -> Response:
    if not text or not text.strip():
        return NO_RESULT
    try:
        value = json.loads(text)
    except ValueError:
        logger.warning("Undecodable REST response body ({} bytes)", len(text))
        return NO_RESULT
    if is_empty(value):
        return NO_RESULT
    return value


class RestGateway:
    """Implementación HTTP de `core.interfaces.transport.RpcTransport`.

    Si no se inyecta `http_client`, el gateway crea (y cierra) el suyo con
    `build_client`; un cliente inyectado se usa tal cual y el llamante es
    responsable de su configuración TLS y de cerrarlo.
    """

    def __init__(
        self,
        base_url: str,
        *,
        settings: AppSettings | None = None,
        http_client: httpx.Client | None = None,
        verify_ssl: bool | None = None,
    ) -> None:
        self._settings = settings or load_settings()
        self._url = f"{base_url}{self._settings.api_path}"
        self._owns_client = http_client is None
        self._client = http_client or build_client(self._settings, verify_ssl=verify_ssl)

    @property
    def url(self) -> str:
        return self._url

    def submit(self, request: CallRequest) -> Response:
        fields = build_envelope(request)
        logger.debug("REST call {} args={}", request.method, sorted(request.arguments))
        try:
            resp = self._client.post(self._url, data=fields)
        except httpx.TimeoutException as exc:
            logger.warning("REST call {} timed out: {}", request.method, exc)
            raise TransportError(
                f"timeout calling {request.method} at {self._url}",
                retryable=True,
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("REST call {} failed: {}", request.method, exc)
            raise TransportError(
                f"network error calling {request.method} at {self._url}: {exc}",
                retryable=True,
            ) from exc

        status_code = int(resp.status_code or 0)
        if status_code >= 300:
            logger.warning("REST call {} returned HTTP {}", request.method, status_code)
        return decode_body(resp.text)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeout, headers y política TLS/redirects en un solo sitio.
- Facilita testeo: se puede inyectar un `httpx.Client` con `MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings, load_settings


def build_client(
    settings: AppSettings | None = None,
    *,
    verify_ssl: bool | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` con los defaults del servidor legacy.

    Reglas:
    - Nunca sigue redirects.
    - Solo HTTP/1.x y sin conexiones persistentes (`Connection: close`):
      el servidor REST antiguo habla HTTP/1.0 y httpx no permite fijar 1.0.
    - `verify_ssl` explícito gana sobre `settings.verify_ssl`.
    """

    settings = settings or load_settings()
    verify = settings.verify_ssl if verify_ssl is None else verify_ssl
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json, */*;q=0.5",
        "Connection": "close",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=False,
        verify=verify,
        http1=True,
        http2=False,
        headers=headers,
        transport=transport,
    )

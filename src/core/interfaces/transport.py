"""Contrato del transporte RPC.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite sustituir el gateway HTTP por un fake en tests sin acoplar el
  cliente a httpx.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import CallRequest
from core.domain.response import Response


@runtime_checkable
class RpcTransport(Protocol):
    """Contrato mínimo del gateway.

    Reglas de diseño:
    - `submit` es síncrono y bloqueante (un POST por llamada, sin reintentos).
    - Devuelve el JSON decodificado o `NO_RESULT`; los fallos de red se
      elevan como `TransportError`.
    """

    def submit(self, request: CallRequest) -> Response:
        """Envía la llamada ya preparada (sesión incluida) y decodifica la respuesta."""

        ...

    def close(self) -> None:
        ...

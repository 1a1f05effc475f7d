"""Errores del cliente.

Por qué una jerarquía propia:
- La CLI (y cualquier consumidor) captura `SugarClientError` en un solo punto.
- Cada error lleva un `code` estable, independiente del mensaje.
"""

from __future__ import annotations


class SugarClientError(RuntimeError):
    def __init__(self, message: str, *, code: str = "SUGAR_CLIENT_ERROR") -> None:
        super().__init__(message)
        self.code = code


class ConfigurationError(SugarClientError):
    """URL, login o password vacíos al construir el cliente."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR")
        self.field = field


class AuthenticationError(SugarClientError):
    """El login no produjo un session id utilizable."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="AUTHENTICATION_ERROR")


class TransportError(SugarClientError):
    """Fallo de red/HTTP al contactar el servicio remoto."""

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message, code="TRANSPORT_ERROR")
        self.retryable = retryable


class StructuralError(SugarClientError):
    """La respuesta decodificada no tiene la forma que la operación espera."""

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message, code="STRUCTURAL_ERROR")
        self.path = path

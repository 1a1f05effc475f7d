"""Forma de las respuestas decodificadas.

El servicio devuelve JSON arbitrario. En vez de acceder a campos sin
comprobar, cada operación extrae solo lo que necesita con estos helpers,
que fallan con `StructuralError` indicando la ruta esperada.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from core.errors import StructuralError


class NoResult(Enum):
    """Centinela "sin resultado" del gateway (falsy, singleton)."""

    NO_RESULT = "no_result"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_RESULT"


NO_RESULT = NoResult.NO_RESULT

JSONValue = Union[dict[str, Any], list[Any], str, int, float, bool, None]
Response = Union[JSONValue, NoResult]


class ResponseKind(str, Enum):
    OBJECT = "object"
    ARRAY = "array"
    SCALAR = "scalar"
    NONE = "none"


def classify(value: Response) -> ResponseKind:
    if value is NO_RESULT or value is None:
        return ResponseKind.NONE
    if isinstance(value, dict):
        return ResponseKind.OBJECT
    if isinstance(value, list):
        return ResponseKind.ARRAY
    return ResponseKind.SCALAR


def is_empty(value: Any) -> bool:
    """Vacío al estilo del protocolo: null, false, 0, "", "0" y [].

    Un objeto JSON nunca cuenta como vacío, aunque no tenga claves.
    """

    if isinstance(value, dict):
        return False
    if isinstance(value, str):
        return value in ("", "0")
    return not value


def expect_object(value: Response, *, context: str, path: str = "") -> dict[str, Any]:
    if classify(value) is not ResponseKind.OBJECT:
        where = path or "<response>"
        raise StructuralError(
            f"{context}: expected an object at {where}, got {classify(value).value}",
            path=path,
        )
    return value  # type: ignore[return-value]


def expect_list(value: Response, *, context: str, path: str = "") -> list[Any]:
    if classify(value) is not ResponseKind.ARRAY:
        where = path or "<response>"
        raise StructuralError(
            f"{context}: expected a list at {where}, got {classify(value).value}",
            path=path,
        )
    return value  # type: ignore[return-value]


def expect_field(value: Response, name: str, *, context: str, path: str = "") -> Any:
    """Devuelve `value[name]` exigiendo que `value` sea objeto y tenga la clave."""

    obj = expect_object(value, context=context, path=path)
    field_path = f"{path}.{name}" if path else name
    if name not in obj:
        raise StructuralError(f"{context}: missing field {field_path}", path=field_path)
    return obj[name]

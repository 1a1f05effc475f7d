"""Reglas de sesión del protocolo REST.

Funciones puras: no tocan red ni estado. El cliente las aplica en un único
punto (`SugarClient.call`) para que ninguna operación repita la lógica.
"""

from __future__ import annotations

import hashlib
from typing import Any, Mapping

LOGIN_METHOD = "login"
LOGOUT_METHOD = "logout"
SESSION_KEY = "session"
PROTOCOL_VERSION = "1.0"


def inject_session(session: str, method: str, arguments: Mapping[str, Any]) -> dict[str, Any]:
    """Devuelve una copia de `arguments` con `session` añadida si corresponde.

    Se añade solo si el método no es `login`, hay sesión y el llamante no
    trajo ya su propia clave `session` (que se respeta tal cual).
    """

    out = dict(arguments)
    if method != LOGIN_METHOD and session and SESSION_KEY not in out:
        out[SESSION_KEY] = session
    return out


def password_digest(password: str) -> str:
    # El protocolo exige MD5 del password en claro (requisito legacy del servidor).
    return hashlib.md5(password.encode("utf-8")).hexdigest()  # nosec


def build_login_arguments(login: str, password: str, *, application_name: str) -> dict[str, Any]:
    return {
        "user_auth": {
            "user_name": login,
            "password": password_digest(password),
            "version": PROTOCOL_VERSION,
        },
        "application_name": application_name,
    }

"""Cliente de sesión para la API REST v4 de SugarCRM.

Este módulo concentra el ciclo de vida de la sesión (login, inyección
implícita del session id, logout) y las cuatro operaciones de dominio,
todas construidas sobre una única primitiva `call`.

Concurrencia:
- Una instancia = una sesión. El session id es estado mutable de la
  instancia, así que compartirla entre hilos requiere sincronización
  externa (o una instancia por hilo).
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import httpx
from loguru import logger

from adapters.rest_gateway import RestGateway
from core.config import AppSettings, load_settings
from core.domain.models import CallRequest, Credentials
from core.domain.response import (
    NO_RESULT,
    Response,
    expect_field,
    expect_list,
    is_empty,
)
from core.errors import AuthenticationError, StructuralError, TransportError
from core.interfaces.transport import RpcTransport
from core.session import (
    LOGIN_METHOD,
    LOGOUT_METHOD,
    SESSION_KEY,
    build_login_arguments,
    inject_session,
)


def _session_id(result: Response) -> str:
    """Extrae el `id` del login; "" si no es un string o número utilizable."""

    if not isinstance(result, dict):
        return ""
    raw = result.get("id")
    if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
        return ""
    session_id = str(raw).strip()
    if is_empty(session_id):
        return ""
    return session_id


class SugarClient:
    """Cliente autenticado: nunca existe una instancia sin sesión.

    El constructor valida el triple (url, login, password), hace login y
    falla con `AuthenticationError` si no obtuvo session id.
    """

    def __init__(
        self,
        url: str | None,
        login: str | None,
        password: str | None,
        *,
        verify_ssl: bool | None = None,
        settings: AppSettings | None = None,
        http_client: httpx.Client | None = None,
        transport: RpcTransport | None = None,
    ) -> None:
        credentials = Credentials.parse(url, login, password)
        self._settings = settings or load_settings()
        self._base_url = credentials.url
        self._session = ""
        self._transport: RpcTransport = transport or RestGateway(
            credentials.url,
            settings=self._settings,
            http_client=http_client,
            verify_ssl=verify_ssl,
        )

        self.login(credentials.login, credentials.password)
        if not self._session:
            self._transport.close()
            raise AuthenticationError(f"Could not login to {self._base_url} as {credentials.login!r}")

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        *,
        http_client: httpx.Client | None = None,
    ) -> "SugarClient":
        settings = settings or load_settings()
        return cls(
            settings.base_url,
            settings.login,
            settings.password,
            settings=settings,
            http_client=http_client,
        )

    @property
    def session(self) -> str:
        return self._session

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def url(self) -> str:
        """URL completa del entry point REST."""

        return f"{self._base_url}{self._settings.api_path}"

    # -- primitiva RPC ---------------------------------------------------

    def call(self, method: str, arguments: Mapping[str, Any] | None = None) -> Response:
        """Ejecuta un método REST arbitrario y devuelve la respuesta decodificada.

        - Inyecta el session id salvo para `login` o si ya viene `session`.
        - Devuelve `NO_RESULT` si el cuerpo está vacío o no es JSON válido.
        - Eleva `TransportError` ante fallos de red y `ConfigurationError` si
          `method` queda vacío.
        """

        method = str(method).strip()
        request = CallRequest.build(method, inject_session(self._session, method, arguments or {}))
        return self._transport.submit(request)

    # -- sesión ----------------------------------------------------------

    def login(self, login: str, password: str) -> str:
        """Inicia sesión y guarda el session id.

        Cualquier fallo deja la sesión vacía, también si ya había una.
        """

        login = str(login).strip()
        password = str(password).strip()
        data = build_login_arguments(login, password, application_name=self._settings.application_name)
        try:
            result = self.call(LOGIN_METHOD, data)
        except TransportError as exc:
            logger.warning("Login as {!r} failed: {}", login, exc)
            self._session = ""
            return self._session

        session_id = _session_id(result)
        if not session_id:
            logger.warning("Login as {!r} returned no session id", login)
            self._session = ""
            return self._session

        self._session = session_id
        logger.info("Logged in to {} as {!r}", self._base_url, login)
        return self._session

    def logout(self) -> None:
        """Cierra la sesión remota; no modifica el session id local."""

        try:
            self.call(LOGOUT_METHOD, {SESSION_KEY: self._session})
        except TransportError as exc:
            logger.warning("Logout failed: {}", exc)

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "SugarClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        try:
            self.logout()
        finally:
            self.close()

    # -- operaciones de dominio ------------------------------------------

    def load_one(self, module: str, bean_id: str) -> dict[str, Any] | None:
        """Carga un bean por id; `None` si no existe, está borrado o no hubo respuesta.

        Una respuesta con forma inesperada (lista vacía, campos ausentes)
        eleva `StructuralError`.
        """

        context = "get_entry"
        data = {"modulename": str(module).strip(), "id": str(bean_id).strip()}
        try:
            response = self.call("get_entry", data)
        except TransportError:
            return None
        if response is NO_RESULT:
            return None

        entries = expect_list(
            expect_field(response, "entry_list", context=context),
            context=context,
            path="entry_list",
        )
        if not entries:
            raise StructuralError(f"{context}: entry_list is empty", path="entry_list")

        bean = entries[0]
        nvl = expect_field(bean, "name_value_list", context=context, path="entry_list[0]")
        deleted = expect_field(nvl, "deleted", context=context, path="entry_list[0].name_value_list")
        raw = expect_field(deleted, "value", context=context, path="entry_list[0].name_value_list.deleted")
        try:
            flag = int(raw)
        except (TypeError, ValueError) as exc:
            raise StructuralError(
                f"{context}: deleted flag {raw!r} is not an integer",
                path="entry_list[0].name_value_list.deleted.value",
            ) from exc

        if flag == 0:
            return bean
        return None

    def load_many(self, module: str, options: Mapping[str, Any] | None = None) -> list[Any]:
        """Lista beans de un módulo.

        Las `options` del llamante solo se aplican a claves que la base
        (`session`, `modulename`) no define.
        """

        data: dict[str, Any] = {
            SESSION_KEY: self._session,
            "modulename": str(module).strip(),
        }
        for key, value in (options or {}).items():
            if key not in data:
                data[key] = value

        response = self.call("get_entry_list", data)
        return self._entry_list(response, context="get_entry_list")

    def load_by_ids(self, module: str, ids: Sequence[str]) -> list[Any]:
        """Carga beans por ids. No filtra los marcados como borrados."""

        data = {"modulename": str(module).strip(), "ids": list(ids)}
        response = self.call("get_entries", data)
        return self._entry_list(response, context="get_entries")

    def save(self, module: str, name_value_list: Any) -> bool:
        """Guarda un bean. `True` solo si la respuesta trae un `id` no vacío."""

        data = {"modulename": str(module).strip(), "name_value_list": name_value_list}
        try:
            response = self.call("set_entry", data)
        except TransportError:
            return False
        if not isinstance(response, dict):
            return False
        return not is_empty(response.get("id"))

    @staticmethod
    def _entry_list(response: Response, *, context: str) -> list[Any]:
        entries = expect_field(response, "entry_list", context=context)
        return expect_list(entries, context=context, path="entry_list")

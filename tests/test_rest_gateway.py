import httpx
import pytest

from adapters.http_client import build_client
from adapters.rest_gateway import RestGateway, build_envelope, decode_body, encode_rest_data
from core.domain.models import CallRequest
from core.domain.response import NO_RESULT
from core.errors import TransportError

from conftest import BASE_URL


def test_build_envelope_has_fixed_fields() -> None:
    request = CallRequest(method="get_entry", arguments={"modulename": "Contacts", "id": "1"})
    assert build_envelope(request) == {
        "method": "get_entry",
        "input_type": "JSON",
        "response_type": "JSON",
        "rest_data": '{"modulename":"Contacts","id":"1"}',
    }


def test_encode_rest_data_keeps_argument_order() -> None:
    assert encode_rest_data({"b": 1, "a": [1, 2]}) == '{"b":1,"a":[1,2]}'


def test_call_request_trims_method() -> None:
    assert CallRequest(method="  logout ").method == "logout"


@pytest.mark.parametrize("body", ["", "   ", "null", "false", "0", '""', '"0"', "[]", "<html>oops</html>", "{bad"])
def test_decode_body_lenient_no_result(body: str) -> None:
    assert decode_body(body) is NO_RESULT


def test_decode_body_returns_values() -> None:
    assert decode_body('{"id":"x"}') == {"id": "x"}
    assert decode_body("{}") == {}
    assert decode_body("[1]") == [1]
    assert decode_body('"abc"') == "abc"


def test_submit_posts_form_to_api_path(server, settings) -> None:
    server.responses["get_server_info"] = {"flavor": "CE"}
    gateway = RestGateway(BASE_URL, settings=settings, http_client=server.http_client())
    assert gateway.url == "https://crm.example.com/service/v4/rest.php"

    result = gateway.submit(CallRequest(method="get_server_info", arguments={}))

    assert result == {"flavor": "CE"}
    request = server.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://crm.example.com/service/v4/rest.php"
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    assert server.forms[0] == {
        "method": "get_server_info",
        "input_type": "JSON",
        "response_type": "JSON",
        "rest_data": "{}",
    }


def test_submit_honours_custom_api_path(server) -> None:
    from core.config import AppSettings

    settings = AppSettings(_env_file=None, api_path="/custom/rest.php")
    gateway = RestGateway(BASE_URL, settings=settings, http_client=server.http_client())
    gateway.submit(CallRequest(method="logout", arguments={}))
    assert str(server.requests[0].url) == "https://crm.example.com/custom/rest.php"


def test_submit_network_failure_raises_transport_error(server, settings) -> None:
    server.fail.add("get_entry")
    gateway = RestGateway(BASE_URL, settings=settings, http_client=server.http_client())
    with pytest.raises(TransportError) as exc_info:
        gateway.submit(CallRequest(method="get_entry", arguments={}))
    assert exc_info.value.code == "TRANSPORT_ERROR"
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_submit_decodes_error_status_body(server, settings) -> None:
    server.statuses["get_entry"] = 500
    server.responses["get_entry"] = {"name": "Invalid Session ID", "number": 11}
    gateway = RestGateway(BASE_URL, settings=settings, http_client=server.http_client())
    assert gateway.submit(CallRequest(method="get_entry", arguments={})) == {
        "name": "Invalid Session ID",
        "number": 11,
    }


def test_submit_does_not_follow_redirects(settings) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(302, headers={"Location": "https://elsewhere.example.com/"}, text="")

    client = build_client(settings, transport=httpx.MockTransport(handler))
    gateway = RestGateway(BASE_URL, settings=settings, http_client=client)

    assert gateway.submit(CallRequest(method="get_entry", arguments={})) is NO_RESULT
    assert seen == ["https://crm.example.com/service/v4/rest.php"]


def test_build_client_defaults(settings) -> None:
    with build_client(settings) as client:
        assert client.follow_redirects is False
        assert client.headers["Connection"] == "close"
        assert client.headers["User-Agent"] == settings.user_agent
        assert client.timeout.read == settings.http_timeout_seconds


def test_gateway_closes_only_owned_client(server, settings) -> None:
    injected = server.http_client()
    RestGateway(BASE_URL, settings=settings, http_client=injected).close()
    assert not injected.is_closed

    owned = RestGateway(BASE_URL, settings=settings)
    owned.close()
    assert owned._client.is_closed

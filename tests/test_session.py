import hashlib

from core.session import build_login_arguments, inject_session, password_digest


def test_inject_session_adds_session_for_regular_methods() -> None:
    args = {"modulename": "Contacts"}
    out = inject_session("sess-1", "get_entry", args)
    assert out == {"modulename": "Contacts", "session": "sess-1"}
    assert list(out) == ["modulename", "session"]
    # el mapping del llamante no se modifica
    assert args == {"modulename": "Contacts"}


def test_inject_session_skips_login() -> None:
    assert inject_session("sess-1", "login", {"user_auth": {}}) == {"user_auth": {}}


def test_inject_session_skips_when_no_session() -> None:
    assert inject_session("", "get_entry", {"id": "1"}) == {"id": "1"}


def test_inject_session_preserves_caller_session() -> None:
    assert inject_session("sess-1", "get_entry", {"session": "other"}) == {"session": "other"}
    # una clave presente (aunque vacía) también se respeta
    assert inject_session("sess-1", "logout", {"session": ""}) == {"session": ""}


def test_password_digest_is_md5_hex() -> None:
    assert password_digest("secret") == hashlib.md5(b"secret").hexdigest()
    assert password_digest("secret") == "5ebe2294ecd0e0f08eab7690d2a6ee69"


def test_build_login_arguments_shape() -> None:
    args = build_login_arguments("admin", "secret", application_name="my-app")
    assert args == {
        "user_auth": {
            "user_name": "admin",
            "password": "5ebe2294ecd0e0f08eab7690d2a6ee69",
            "version": "1.0",
        },
        "application_name": "my-app",
    }

import pytest
import typing
from starlette.datastructures import MutableHeaders
from starlette.requests import Request

from starlette_cookies.jar import CookieJar
from starlette_cookies.writers import CookieWriter

SECRET = "test" * 16


class ConnectionFactory(typing.Protocol):  # pragma: nocover
    def __call__(self, *cookies: str, scheme: str = "http") -> Request:
        ...


def make_connection(*cookies: str, scheme: str = "http") -> Request:
    headers = [(b"cookie", "; ".join(cookies).encode())] if cookies else []
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": scheme,
            "server": ("testserver", 443 if scheme == "https" else 80),
            "path": "/",
            "root_path": "",
            "query_string": b"",
            "headers": headers,
        }
    )


@pytest.fixture
def connection_factory() -> ConnectionFactory:
    return make_connection


@pytest.fixture
def writer() -> CookieWriter:
    return CookieWriter(MutableHeaders())


@pytest.fixture
def cookies(writer: CookieWriter) -> CookieJar:
    return CookieJar(make_connection("foo=bar", "bar=foo"), writer, secret=SECRET)


def set_cookie_headers(writer: CookieWriter) -> list[str]:
    assert writer.headers is not None
    return writer.headers.getlist("set-cookie")

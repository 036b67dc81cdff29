from __future__ import annotations

import typing
from starlette.datastructures import MutableHeaders
from starlette.responses import Response

from starlette_cookies.options import CookieOptions, format_delete_cookie, format_set_cookie


class ResponseCookies(typing.Protocol):  # pragma: nocover
    """Anything that can emit Set-Cookie headers for the jar."""

    def set_cookie(self, name: str, options: CookieOptions) -> None:
        ...

    def delete_cookie(self, name: str, path: str | None = None, domain: str | None = None) -> None:
        ...


class CookieWriter:
    """
    Emits one Set-Cookie header per call.

    When constructed with headers, values are appended immediately. Otherwise
    they are kept until `flush` is called, which is what the middleware does
    once the response starts.
    """

    def __init__(self, headers: MutableHeaders | None = None) -> None:
        self.headers = headers
        self.pending: list[str] = []

    @classmethod
    def for_response(cls, response: Response) -> CookieWriter:
        return cls(response.headers)

    def set_cookie(self, name: str, options: CookieOptions) -> None:
        self._emit(format_set_cookie(name, options))

    def delete_cookie(self, name: str, path: str | None = None, domain: str | None = None) -> None:
        self._emit(format_delete_cookie(name, path=path, domain=domain))

    def flush(self, headers: MutableHeaders) -> None:
        for header in self.pending:
            headers.append("set-cookie", header)
        self.pending.clear()

    def _emit(self, header: str) -> None:
        if self.headers is None:
            self.pending.append(header)
        else:
            self.headers.append("set-cookie", header)

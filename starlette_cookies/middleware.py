import logging
from starlette.config import Config
from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from starlette_cookies.config import resolve_secret
from starlette_cookies.jar import CookieJar
from starlette_cookies.writers import CookieWriter

logger = logging.getLogger(__name__)

SCOPE_KEY = "cookies"


class CookieMiddleware:
    """Creates a cookie jar for each connection and writes its headers to the response."""

    def __init__(self, app: ASGIApp, secret: str | None = None, config: Config | None = None) -> None:
        self.app = app
        self.secret = secret
        if self.secret is None and config is not None:
            self.secret = resolve_secret(config)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ["http", "websocket"]:  # pragma: no cover
            return await self.app(scope, receive, send)

        writer = CookieWriter()
        connection = HTTPConnection(scope, receive)
        scope.setdefault("state", {})
        scope["state"][SCOPE_KEY] = CookieJar(connection, writer, secret=self.secret)

        async def sender(message: Message) -> None:
            if message["type"] in ["http.response.start", "websocket.accept"] and writer.pending:
                message.setdefault("headers", [])
                logger.debug("Writing %d Set-Cookie header(s).", len(writer.pending))
                writer.flush(MutableHeaders(scope=message))
            await send(message)

        await self.app(scope, receive, sender)

        if writer.pending:
            logger.warning(
                "%d Set-Cookie header(s) were written after the response had started and were discarded.",
                len(writer.pending),
            )


def get_cookies(connection: HTTPConnection) -> CookieJar:
    """Return the cookie jar of the current connection."""
    state = connection.scope.get("state", {})
    assert SCOPE_KEY in state, "CookieMiddleware must be installed to access cookies."
    return state[SCOPE_KEY]

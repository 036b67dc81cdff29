from __future__ import annotations


class CookieError(Exception):
    """Base class for all cookie errors.

    Message precedence:
    1. message argument
    2. self.message
    """

    message: str = "Cookie error."

    def __init__(self, message: str | None = None) -> None:
        self.message = str(message or self.message)
        super().__init__(self.message)


class CookieOverflow(CookieError, OverflowError):
    """Raised when the value of the cookie exceeds the maximum size."""

    message = "Cookie value exceeds the maximum size."

    def __init__(self, name: str, size: int, limit: int) -> None:
        self.name = name
        self.size = size
        self.limit = limit
        super().__init__(f'Cookie "{name}" is {size} bytes long, the limit is {limit} bytes.')


class ImproperlyConfigured(CookieError, ValueError):
    """Signed cookies need a secret of sufficient length."""

    message = "secret must be at least 64 characters long"


class BadSignature(CookieError):
    """Signed value is tampered, malformed, or was signed with another secret."""

    message = "Signature does not match."

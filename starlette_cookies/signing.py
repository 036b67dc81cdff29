from __future__ import annotations

import itsdangerous
import typing

from starlette_cookies.exceptions import BadSignature, ImproperlyConfigured

__all__ = ["CookieSigner", "encode", "decode", "validate_secret", "MIN_SECRET_LENGTH"]

MIN_SECRET_LENGTH = 64


def validate_secret(secret: str | None) -> str:
    """Return the secret or raise ImproperlyConfigured if it is too short."""
    if not secret or len(secret) < MIN_SECRET_LENGTH:
        raise ImproperlyConfigured()
    return secret


class CookieSigner:
    """
    Signs cookie values so they cannot be tampered with.

    Tokens are URL-safe: the payload is JSON encoded with URL-safe base64 and
    followed by the signature, so they survive a Set-Cookie header as is.
    """

    def __init__(self, secret: str, salt: str = "cookie") -> None:
        self._serializer = itsdangerous.URLSafeSerializer(secret, salt=salt)

    def encode(self, plaintext: str) -> str:
        return typing.cast(str, self._serializer.dumps(plaintext))

    def decode(self, token: str) -> str:
        """
        Verify token and return the plain text.

        Raises BadSignature when the token cannot be verified.
        """
        try:
            value = self._serializer.loads(token)
        except itsdangerous.BadData as exc:
            raise BadSignature(str(exc)) from exc

        if not isinstance(value, str):
            raise BadSignature("Signed payload is not a string.")
        return value

    def safe_decode(self, token: str) -> tuple[bool, str | None]:
        """
        Safely decode token.

        Will not raise BadSignature. Returns two-tuple: operation status and
        plain text.
        """
        try:
            return True, self.decode(token)
        except BadSignature:
            return False, None


def encode(plaintext: str, secret: str) -> str:
    """Sign plain text."""
    return CookieSigner(secret).encode(plaintext)


def decode(token: str, secret: str) -> str:
    """
    Verify token and return plain text.

    Raises BadSignature exception.
    """
    return CookieSigner(secret).decode(token)

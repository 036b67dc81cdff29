from __future__ import annotations

import abc
import datetime
import enum
import logging
import types
import typing
from starlette.config import Config
from starlette.requests import HTTPConnection

from starlette_cookies.config import resolve_secret
from starlette_cookies.exceptions import CookieOverflow
from starlette_cookies.options import CookieOptions, ValueOrOptions, normalize_options, unescape
from starlette_cookies.signing import CookieSigner, validate_secret
from starlette_cookies.writers import ResponseCookies

__all__ = ["BaseJar", "CookieJar", "JarView", "PermanentJar", "SignedJar", "MAX_COOKIE_SIZE"]

logger = logging.getLogger(__name__)

MAX_COOKIE_SIZE = 4096
PERMANENT_LIFETIME = datetime.timedelta(days=365)

CookieName = typing.Union[str, enum.Enum]


def normalize_name(name: CookieName) -> str:
    if isinstance(name, enum.Enum):
        return str(name.value)
    return str(name)


class BaseJar(abc.ABC):
    """Operations shared by the cookie jar and the views wrapping it."""

    is_permanent: bool = False
    is_signed: bool = False

    def __init__(self, secret: str | None) -> None:
        self.secret = secret
        self._permanent: PermanentJar | None = None
        self._signed: SignedJar | None = None

    @abc.abstractmethod
    def get(self, name: CookieName) -> str | None:  # pragma: nocover
        ...

    @abc.abstractmethod
    def set(self, name: CookieName, value: ValueOrOptions) -> None:  # pragma: nocover
        ...

    @abc.abstractmethod
    def delete(
        self, name: CookieName, *, path: str | None = None, domain: str | None = None
    ) -> str | None:  # pragma: nocover
        ...

    @abc.abstractmethod
    def clear(self) -> None:  # pragma: nocover
        ...

    @abc.abstractmethod
    def keys(self) -> list[str]:  # pragma: nocover
        ...

    @abc.abstractmethod
    def length(self) -> int:  # pragma: nocover
        ...

    @abc.abstractmethod
    def is_empty(self) -> bool:  # pragma: nocover
        ...

    @abc.abstractmethod
    def has(self, name: CookieName) -> bool:  # pragma: nocover
        ...

    @abc.abstractmethod
    def items(self) -> typing.Iterator[tuple[str, str]]:  # pragma: nocover
        ...

    @abc.abstractmethod
    def as_dict(self) -> dict[str, str]:  # pragma: nocover
        ...

    @property
    def permanent(self) -> BaseJar:
        """
        Cookies written through this view expire in one year.

        Example:
            cookies.permanent["remember_token"] = token
        """
        if self.is_permanent:
            return self
        if self._permanent is None:
            self._permanent = PermanentJar(self, self.secret)
        return self._permanent

    @property
    def signed(self) -> BaseJar:
        """
        Cookies written through this view are signed, reads are verified.

        Raises ImproperlyConfigured when the secret is missing or too short.
        """
        if self.is_signed:
            return self
        if self._signed is None:
            self._signed = SignedJar(self, self.secret)
        return self._signed

    def __getitem__(self, name: CookieName) -> str | None:
        return self.get(name)

    def __setitem__(self, name: CookieName, value: ValueOrOptions) -> None:
        self.set(name, value)

    def __delitem__(self, name: CookieName) -> None:
        self.delete(name)

    def __contains__(self, name: object) -> bool:
        return self.has(typing.cast(CookieName, name))

    def __len__(self) -> int:
        return self.length()

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self.keys())

    def __str__(self) -> str:
        return str(self.as_dict())


class CookieJar(BaseJar):
    """
    Per-request cookie storage.

    Reads come from the request cookies, writes go to the response and are
    visible to subsequent reads within the same request.
    """

    def __init__(
        self,
        connection: HTTPConnection,
        writer: ResponseCookies,
        *,
        secret: str | None = None,
        secure: bool | None = None,
    ) -> None:
        super().__init__(secret)
        self._writer = writer
        self._cookies: dict[str, str] = {name: unescape(value) for name, value in connection.cookies.items()}
        if secure is None:
            secure = connection.url.scheme in ["https", "wss"]
        self._defaults: typing.Mapping[str, typing.Any] = types.MappingProxyType(
            CookieOptions(path="/", httponly=True, secure=secure)
        )

    @classmethod
    def from_config(
        cls,
        connection: HTTPConnection,
        writer: ResponseCookies,
        config: Config,
        *,
        secure: bool | None = None,
    ) -> CookieJar:
        return cls(connection, writer, secret=resolve_secret(config), secure=secure)

    @property
    def defaults(self) -> typing.Mapping[str, typing.Any]:
        return self._defaults

    def get(self, name: CookieName) -> str | None:
        return self._cookies.get(normalize_name(name))

    def set(self, name: CookieName, value: ValueOrOptions) -> None:
        name = normalize_name(name)
        options = normalize_options(value)
        size = len(options["value"].encode())
        if size > MAX_COOKIE_SIZE:
            logger.warning('Refusing to write cookie "%s": %d bytes exceeds %d.', name, size, MAX_COOKIE_SIZE)
            raise CookieOverflow(name, size, MAX_COOKIE_SIZE)

        merged = typing.cast(CookieOptions, {**self._defaults, **options})
        self._writer.set_cookie(name, merged)
        self._cookies[name] = options["value"]

    def delete(self, name: CookieName, *, path: str | None = None, domain: str | None = None) -> str | None:
        name = normalize_name(name)
        self._writer.delete_cookie(name, path=path, domain=domain)
        return self._cookies.pop(name, None)

    def clear(self) -> None:
        for name in list(self._cookies):
            self.delete(name)

    def keys(self) -> list[str]:
        return list(self._cookies)

    def length(self) -> int:
        return len(self._cookies)

    def is_empty(self) -> bool:
        return not self._cookies

    def has(self, name: CookieName) -> bool:
        return normalize_name(name) in self._cookies

    def items(self) -> typing.Iterator[tuple[str, str]]:
        return iter(list(self._cookies.items()))

    def as_dict(self) -> dict[str, str]:
        return dict(self._cookies)

    def __repr__(self) -> str:
        return f"<CookieJar: {self._cookies!r}>"


class JarView(BaseJar):
    """Base class for views. Every operation is forwarded to the parent jar."""

    def __init__(self, parent: BaseJar, secret: str | None) -> None:
        super().__init__(secret)
        self.parent = parent
        self.is_permanent = self.is_permanent or parent.is_permanent
        self.is_signed = self.is_signed or parent.is_signed

    def get(self, name: CookieName) -> str | None:
        return self.parent.get(name)

    def set(self, name: CookieName, value: ValueOrOptions) -> None:
        self.parent.set(name, value)

    def delete(self, name: CookieName, *, path: str | None = None, domain: str | None = None) -> str | None:
        return self.parent.delete(name, path=path, domain=domain)

    def clear(self) -> None:
        self.parent.clear()

    def keys(self) -> list[str]:
        return self.parent.keys()

    def length(self) -> int:
        return self.parent.length()

    def is_empty(self) -> bool:
        return self.parent.is_empty()

    def has(self, name: CookieName) -> bool:
        return self.parent.has(name)

    def items(self) -> typing.Iterator[tuple[str, str]]:
        return self.parent.items()

    def as_dict(self) -> dict[str, str]:
        return self.parent.as_dict()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.parent!r}>"


class PermanentJar(JarView):
    is_permanent = True

    def set(self, name: CookieName, value: ValueOrOptions) -> None:
        options = normalize_options(value)
        options["expires"] = datetime.datetime.now(datetime.timezone.utc) + PERMANENT_LIFETIME
        self.parent.set(name, options)


class SignedJar(JarView):
    is_signed = True

    def __init__(self, parent: BaseJar, secret: str | None) -> None:
        super().__init__(parent, validate_secret(secret))
        self._signer = CookieSigner(typing.cast(str, self.secret))

    def get(self, name: CookieName) -> str | None:
        value = self.parent.get(name)
        if value is None:
            return None

        ok, plaintext = self._signer.safe_decode(value)
        if not ok:
            logger.debug('Cookie "%s" has invalid signature.', normalize_name(name))
        return plaintext

    def set(self, name: CookieName, value: ValueOrOptions) -> None:
        options = normalize_options(value)
        options["value"] = self._signer.encode(options["value"])
        self.parent.set(name, options)

from starlette_cookies.config import Config, resolve_secret
from starlette_cookies.exceptions import BadSignature, CookieError, CookieOverflow, ImproperlyConfigured
from starlette_cookies.jar import MAX_COOKIE_SIZE, BaseJar, CookieJar, JarView, PermanentJar, SignedJar
from starlette_cookies.middleware import CookieMiddleware, get_cookies
from starlette_cookies.options import CookieOptions
from starlette_cookies.signing import CookieSigner, decode, encode
from starlette_cookies.writers import CookieWriter, ResponseCookies

__all__ = [
    "BadSignature",
    "BaseJar",
    "Config",
    "CookieError",
    "CookieJar",
    "CookieMiddleware",
    "CookieOptions",
    "CookieOverflow",
    "CookieSigner",
    "CookieWriter",
    "ImproperlyConfigured",
    "JarView",
    "MAX_COOKIE_SIZE",
    "PermanentJar",
    "ResponseCookies",
    "SignedJar",
    "decode",
    "encode",
    "get_cookies",
    "resolve_secret",
]

from __future__ import annotations

import datetime
import email.utils
import typing
from urllib.parse import quote, unquote

__all__ = [
    "CookieOptions",
    "ValueOrOptions",
    "DELETED_EXPIRES",
    "normalize_options",
    "format_http_date",
    "format_set_cookie",
    "format_delete_cookie",
    "escape",
    "unescape",
]

DELETED_EXPIRES = "Thu, 01-Jan-1970 00:00:00 GMT"

SameSite = typing.Literal["lax", "strict", "none", "Lax", "Strict", "None"]
Expires = typing.Union[datetime.datetime, int, float, str]


class CookieOptions(typing.TypedDict, total=False):
    value: str
    path: str
    domain: str | None
    expires: Expires | None
    max_age: int | None
    httponly: bool
    secure: bool
    samesite: SameSite | None


ValueOrOptions = typing.Union[str, CookieOptions, typing.Mapping[str, typing.Any]]


def normalize_options(value: ValueOrOptions) -> CookieOptions:
    """
    Convert a bare value into an options record.

    Mappings are copied so the caller's dict is never modified.
    """
    if isinstance(value, str):
        return CookieOptions(value=value)

    if not isinstance(value, typing.Mapping):
        raise TypeError(f"Cookie value must be a string or a mapping of options, got {type(value).__name__}.")

    if "value" not in value:
        raise ValueError('Cookie options must contain "value" key.')

    if not isinstance(value["value"], str):
        raise TypeError(f"Cookie value must be a string, got {type(value['value']).__name__}.")

    return typing.cast(CookieOptions, dict(value))


def escape(value: str) -> str:
    return quote(value, safe="")


def unescape(value: str) -> str:
    return unquote(value)


def format_http_date(expires: Expires) -> str:
    """Format expiration time as HTTP-date. Naive datetimes are treated as UTC."""
    if isinstance(expires, str):
        return expires

    if isinstance(expires, datetime.datetime):
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=datetime.timezone.utc)
        return email.utils.format_datetime(expires.astimezone(datetime.timezone.utc), usegmt=True)

    return email.utils.formatdate(expires, usegmt=True)


def format_set_cookie(name: str, options: CookieOptions) -> str:
    """
    Build Set-Cookie header value.

    Attribute order: name=value; path; domain; expires; max-age; HttpOnly; Secure; SameSite.
    """
    parts = [f"{escape(name)}={escape(options.get('value', ''))}"]
    if options.get("path"):
        parts.append(f"path={options['path']}")
    if options.get("domain"):
        parts.append(f"domain={options['domain']}")
    if options.get("expires") is not None:
        parts.append(f"expires={format_http_date(typing.cast(Expires, options['expires']))}")
    if options.get("max_age") is not None:
        parts.append(f"max-age={int(typing.cast(int, options['max_age']))}")
    if options.get("httponly"):
        parts.append("HttpOnly")
    if options.get("secure"):
        parts.append("Secure")
    samesite = options.get("samesite")
    if samesite:
        assert samesite.lower() in ["strict", "lax", "none"], "samesite must be either 'strict', 'lax' or 'none'"
        parts.append(f"SameSite={samesite.capitalize()}")
    return "; ".join(parts)


def format_delete_cookie(name: str, path: str | None = None, domain: str | None = None) -> str:
    """Build Set-Cookie header value that removes the cookie on the client."""
    parts = [f"{escape(name)}="]
    if path:
        parts.append(f"path={path}")
    if domain:
        parts.append(f"domain={domain}")
    parts.append(f"expires={DELETED_EXPIRES}")
    return "; ".join(parts)

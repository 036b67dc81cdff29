import datetime
import email.utils
import pytest
import re
import secrets

from starlette_cookies.exceptions import CookieOverflow, ImproperlyConfigured
from starlette_cookies.jar import CookieJar, PermanentJar, SignedJar
from starlette_cookies.signing import encode
from starlette_cookies.writers import CookieWriter
from tests.conftest import SECRET, ConnectionFactory, set_cookie_headers


def header_expires(header: str) -> datetime.datetime:
    match = re.search(r"expires=([^;]+)", header)
    assert match
    return email.utils.parsedate_to_datetime(match.group(1))


def assert_expires_in_one_year(header: str) -> None:
    expected = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(days=365)
    assert abs(header_expires(header) - expected) < datetime.timedelta(minutes=1)


class TestPermanent:
    def test_adds_cookies_to_parent_jar(self, cookies: CookieJar) -> None:
        cookies.permanent["baz"] = "foo"
        assert cookies["baz"] == "foo"

    def test_accepts_options(self, cookies: CookieJar) -> None:
        cookies.permanent["foo"] = {"value": "baz", "path": "/"}
        assert cookies["foo"] == "baz"

    def test_expires_in_one_year(self, cookies: CookieJar, writer: CookieWriter) -> None:
        cookies.permanent["baz"] = "foo"
        [header] = set_cookie_headers(writer)
        assert header.startswith("baz=foo; path=/; expires=")
        assert header.endswith("; HttpOnly")
        assert_expires_in_one_year(header)

    def test_overrides_expires(self, cookies: CookieJar, writer: CookieWriter) -> None:
        cookies.permanent["baz"] = {"value": "foo", "expires": datetime.datetime(2000, 1, 1)}
        assert_expires_in_one_year(set_cookie_headers(writer)[0])

    def test_delegates_reads(self, cookies: CookieJar) -> None:
        permanent = cookies.permanent
        assert isinstance(permanent, PermanentJar)
        assert permanent["foo"] == "bar"
        assert permanent.keys() == ["foo", "bar"]
        assert len(permanent) == 2
        assert "foo" in permanent
        assert permanent.as_dict() == cookies.as_dict()
        assert list(permanent.items()) == list(cookies.items())

    def test_delegates_deletes(self, cookies: CookieJar) -> None:
        assert cookies.permanent.delete("foo") == "bar"
        cookies.permanent.clear()
        assert cookies.is_empty()
        assert cookies.permanent.is_empty()

    def test_chains_signed(self, cookies: CookieJar, writer: CookieWriter) -> None:
        cookies.permanent.signed["foo"] = "baz"
        [header] = set_cookie_headers(writer)
        assert_expires_in_one_year(header)
        assert header.startswith(f"foo={encode('baz', SECRET)}; ")
        assert cookies.permanent.signed["foo"] == "baz"
        assert cookies["foo"] == encode("baz", SECRET)

    def test_permanent_of_permanent_is_same_view(self, cookies: CookieJar) -> None:
        assert cookies.permanent.permanent is cookies.permanent


class TestSigned:
    def test_reads_signed_values(self, cookies: CookieJar) -> None:
        cookies["foo"] = encode("baz", SECRET)
        assert cookies.signed["foo"] == "baz"

    def test_writes_signed_values(self, cookies: CookieJar) -> None:
        cookies.signed["foo"] = "baz"
        assert cookies["foo"] == encode("baz", SECRET)

    def test_accepts_options(self, cookies: CookieJar, writer: CookieWriter) -> None:
        cookies.signed["foo"] = {"value": "baz", "path": "/admin"}
        assert cookies.signed["foo"] == "baz"
        assert set_cookie_headers(writer) == [f"foo={encode('baz', SECRET)}; path=/admin; HttpOnly"]

    def test_unsigned_value_is_missing(self, cookies: CookieJar) -> None:
        assert cookies["foo"] == "bar"
        assert cookies.signed["foo"] is None

    def test_missing_value(self, cookies: CookieJar) -> None:
        assert cookies.signed["nom_nom"] is None

    def test_tampered_value(self, cookies: CookieJar) -> None:
        signature = encode("baz", SECRET).split(".")[1]
        payload = encode("qux", SECRET).split(".")[0]
        cookies["foo"] = f"{payload}.{signature}"
        assert cookies.signed["foo"] is None

    def test_other_secret(self, cookies: CookieJar) -> None:
        cookies["foo"] = encode("baz", "other" * 16)
        assert cookies.signed["foo"] is None

    def test_requires_64_character_secret(self, connection_factory: ConnectionFactory) -> None:
        jar = CookieJar(connection_factory(), CookieWriter(), secret="C" * 63)
        with pytest.raises(ImproperlyConfigured, match="at least 64 characters"):
            jar.signed

        with pytest.raises(ValueError):
            jar.permanent.signed

    def test_requires_secret(self, connection_factory: ConnectionFactory) -> None:
        jar = CookieJar(connection_factory(), CookieWriter())
        with pytest.raises(ImproperlyConfigured):
            jar.signed

    def test_accepts_64_character_secret(self, connection_factory: ConnectionFactory) -> None:
        jar = CookieJar(connection_factory(), CookieWriter(), secret="C" * 64)
        assert isinstance(jar.signed, SignedJar)

    def test_delegates_deletes(self, cookies: CookieJar) -> None:
        cookies.signed["foo"] = "baz"
        assert cookies.signed.delete("foo") == encode("baz", SECRET)
        assert cookies.signed["foo"] is None

    def test_chains_permanent(self, cookies: CookieJar, writer: CookieWriter) -> None:
        cookies.signed.permanent["foo"] = "baz"
        [header] = set_cookie_headers(writer)
        assert_expires_in_one_year(header)
        assert header.startswith(f"foo={encode('baz', SECRET)}; ")
        assert cookies.signed.permanent["foo"] == "baz"

    def test_chains_do_not_sign_twice(self, cookies: CookieJar) -> None:
        assert cookies.signed.signed is cookies.signed
        assert cookies.signed.permanent.signed is cookies.signed.permanent
        assert cookies.permanent.signed.permanent is cookies.permanent.signed

    def test_overflow_applies_to_signed_value(self, cookies: CookieJar, writer: CookieWriter) -> None:
        value = secrets.token_urlsafe(3060)
        assert len(value) < 4096
        with pytest.raises(CookieOverflow):
            cookies.signed["foo"] = value
        assert cookies["foo"] == "bar"
        assert set_cookie_headers(writer) == []

    def test_rejects_non_string_value(self, cookies: CookieJar, writer: CookieWriter) -> None:
        with pytest.raises(TypeError):
            cookies.signed["foo"] = {"value": 5}
        assert cookies["foo"] == "bar"
        assert set_cookie_headers(writer) == []

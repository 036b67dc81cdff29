import logging
import click

from starlette_cookies.config import Config, resolve_secret
from starlette_cookies.exceptions import BadSignature, ImproperlyConfigured
from starlette_cookies.signing import CookieSigner, validate_secret


def _make_signer(secret: str | None, env_files: tuple[str, ...]) -> CookieSigner:
    if secret is None:
        secret = resolve_secret(Config(env_files=list(env_files)))
    try:
        return CookieSigner(validate_secret(secret))
    except ImproperlyConfigured as exc:
        raise click.UsageError(f"Secret is invalid: {exc}")


@click.group(help="Signed cookie values.")
@click.option("--verbose", is_flag=True)
def app(verbose: bool) -> None:
    if verbose:
        logging.getLogger(__name__.split(".")[0]).setLevel(logging.DEBUG)


@app.command("sign")
@click.option("--secret", help="Signing secret, COOKIE_SECRET or SESSION_SECRET by default.")
@click.option("--env-file", "env_files", multiple=True, type=click.Path(dir_okay=False), help="Read settings from file.")
@click.argument("value")
def sign_command(secret: str | None, env_files: tuple[str, ...], value: str) -> None:
    """Sign plain text."""
    click.echo(_make_signer(secret, env_files).encode(value))


@app.command("unsign")
@click.option("--secret", help="Signing secret, COOKIE_SECRET or SESSION_SECRET by default.")
@click.option("--env-file", "env_files", multiple=True, type=click.Path(dir_okay=False), help="Read settings from file.")
@click.argument("token")
def unsign_command(secret: str | None, env_files: tuple[str, ...], token: str) -> None:
    """Verify signature and print plain text."""
    signer = _make_signer(secret, env_files)
    try:
        click.echo(signer.decode(token))
    except BadSignature as exc:
        raise click.ClickException(str(exc))


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    app()


if __name__ == "__main__":
    main()

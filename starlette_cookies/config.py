import pathlib
import typing

from starlette.config import Config as BaseConfig
from starlette.config import Environ

__all__ = ["Config", "resolve_secret"]


def read_env_files(env_files: typing.Iterable[str | pathlib.Path]) -> dict[str, str]:
    """Merge values of existing env files. Later files override earlier ones."""
    values: dict[str, str] = {}
    for env_file in map(pathlib.Path, env_files):
        if env_file.is_file():
            values.update(BaseConfig(env_file=env_file).file_values)
    return values


class Config(BaseConfig):
    """Starlette config that reads several env files, the environment wins over all of them."""

    def __init__(
        self,
        env_files: typing.Iterable[str | pathlib.Path] = (),
        env_prefix: str = "",
        environ: typing.Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(environ=environ if environ is not None else Environ(), env_prefix=env_prefix)
        self.file_values.update(read_env_files(env_files))


def resolve_secret(config: BaseConfig) -> str | None:
    """Read the signing secret. COOKIE_SECRET takes precedence over SESSION_SECRET."""
    secret = config.get("COOKIE_SECRET", default=None)
    if secret is None:
        secret = config.get("SESSION_SECRET", default=None)
    return secret

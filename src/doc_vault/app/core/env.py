from __future__ import annotations

import os
import warnings
from enum import StrEnum
from functools import cache
from typing import NamedTuple


class Env(StrEnum):
    LOCAL = "local"
    DEV = "dev"
    TEST = "test"
    PROD = "prod"


ALIASES: dict[str, Env] = {
    "development": Env.DEV,
    "testing": Env.TEST,
    "ci": Env.TEST,
    "production": Env.PROD,
}


def normalize_env(raw: str | None) -> Env | None:
    if not raw:
        return None
    val = raw.strip().lower()
    try:
        return Env(val)
    except ValueError:
        return ALIASES.get(val)


@cache
def get_env() -> Env:
    """
    Resolve the running environment from APP_ENV once per process.

    Unknown values fall back to LOCAL with a warning.
    """
    raw = os.getenv("APP_ENV")
    env = normalize_env(raw)
    if env is None:
        if raw:
            warnings.warn(
                f"Unrecognized APP_ENV '{raw}', defaulting to 'local'.",
                RuntimeWarning,
                stacklevel=2,
            )
        env = Env.LOCAL
    return env


class EnvFlags(NamedTuple):
    env: Env
    is_local: bool
    is_dev: bool
    is_test: bool
    is_prod: bool


def get_env_flags(env: Env | None = None) -> EnvFlags:
    e = env or get_env()
    return EnvFlags(
        env=e,
        is_local=e is Env.LOCAL,
        is_dev=e is Env.DEV,
        is_test=e is Env.TEST,
        is_prod=e is Env.PROD,
    )


def pick(*, prod, nonprod, dev=None, test=None, local=None, env: Env | None = None):
    """
    Choose a value for the active environment.

    Example:
        timeout = pick(prod=30, nonprod=15)
    """
    e = env or get_env()
    if e is Env.PROD:
        return prod
    specific = {Env.DEV: dev, Env.TEST: test, Env.LOCAL: local}.get(e)
    return nonprod if specific is None else specific

"""Which deployment the process runs as, named by APP_ENV."""
import os

from enum import Enum
from typing import Self


OS_ENV_KEY = "APP_ENV"


class Environment(Enum):
    PRODUCTION  = "production"
    STAGING     = "staging"
    DEVELOPMENT = "development"
    TESTING     = "testing"

    @classmethod
    def current(cls) -> Self:
        """The environment named by APP_ENV, development when unset."""
        return cls(os.environ.get(OS_ENV_KEY, cls.DEVELOPMENT.value).lower())

    def is_testing(self) -> bool: return self is Environment.TESTING

    def dotenv_filename(self) -> str:
        """`.env` for development, `.env.<name>` for every other environment."""
        return ".env" if self is Environment.DEVELOPMENT else f".env.{self.value}"


def set_current_env(env: str | Environment) -> Environment:
    """Make `env` the current environment and return it. Unknown names raise ValueError."""
    try:
        current = env if isinstance(env, Environment) else Environment(env.lower())
    except ValueError as e:
        raise ValueError(f"Invalid environment: {env}. Must be one of {[e.value for e in Environment]}.") from e
    os.environ[OS_ENV_KEY] = current.value
    return current

"""
Pydantic v2 settings for blockdocs.
Supports .env files, environment variables, and runtime validation of the database DSNs.
"""

from pathlib import Path
from typing import Any, Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from blockdocs.database_connection_settings import DatabaseConnectionSettings
from blockdocs.environment import Environment


ROOT_PATH = Path(__file__).parent.parent.parent

DEFAULT_DSN = "sqlite+aiosqlite:///blockdocs.db"
TESTING_DSN = "sqlite+aiosqlite:///:memory:"


class AppSettings(BaseSettings):
    """Main application configuration."""

    log_level: str = Field(default="INFO", description="Logging level", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    root_path: Path = Field(default=ROOT_PATH, description="Root path of the application")

    @property
    def src_path(self) -> Path: return self.root_path / "src"

    @property
    def package_path(self) -> Path: return self.src_path / "blockdocs"

    @property
    def alembic_path(self) -> Path: return self.root_path / "alembic"


class DbSettings(BaseSettings):

    model_config = SettingsConfigDict(env_nested_delimiter='__')

    connections: Dict[str, DatabaseConnectionSettings] = Field(
        default_factory=lambda: {"primary": {"dsn": DEFAULT_DSN}},
        validate_default=True,
    )

    def get_primary(self) -> DatabaseConnectionSettings:
        if primary := self.connections.get("primary", None):
            return primary
        raise ValueError("Primary database connection is not defined or is invalid.")

    @field_validator('connections', mode='before')
    @classmethod
    def validate_connections(cls, v: Dict[str, Any]) -> Dict[str, DatabaseConnectionSettings]:
        """
        Coerce

            DB__CONNECTIONS='{"primary": {"dsn": "sqlite+aiosqlite:///blockdocs.db", "echo": true}}'

        into `{"primary": DatabaseConnectionSettings(...)}`.
        """
        connections = {}
        for name, conn_data in v.items():
            if isinstance(conn_data, DatabaseConnectionSettings):
                connections[name] = conn_data
            elif isinstance(conn_data, str):
                connections[name] = DatabaseConnectionSettings.from_name_and_dsn(name, conn_data)
            elif isinstance(conn_data, dict) and isinstance(conn_data.get('dsn'), str):
                connections[name] = DatabaseConnectionSettings.from_name_and_connection_object(name, conn_data)

        if "primary" not in connections:
            raise ValueError("Primary database connection must be defined with the name 'primary'.")

        return connections


class EditorSettings(BaseSettings):
    """Timer intervals used by the editing view-models, in seconds."""
    history_debounce      : float = Field(default=0.3,  description="Window in which debounced history pushes coalesce")
    autosave_delay        : float = Field(default=1.5,  description="Delay between the last edit and the content autosave")
    navbar_width_debounce : float = Field(default=0.22, description="Delay before a resized navbar width is persisted")
    preferences_debounce  : float = Field(default=0.3,  description="Delay before color preference edits are written")


class Settings(BaseSettings):
    """Complete application settings."""

    model_config = SettingsConfigDict(
        env_file=(ROOT_PATH / Environment.DEVELOPMENT.dotenv_filename()),
        env_file_encoding='utf-8',
        env_nested_delimiter='__',
        extra='ignore',
    )

    app    : AppSettings    = Field(default_factory=AppSettings)
    db     : DbSettings     = Field(default_factory=DbSettings)
    editor : EditorSettings = Field(default_factory=EditorSettings)
    env    : Environment    = Field(default_factory=Environment.current, description="Current application environment")

    def primary_database(self) -> DatabaseConnectionSettings:
        """Retrieve the primary database connection settings."""
        return self.db.get_primary()


class _SettingsTesting(Settings):
    """Settings for testing environment."""

    model_config = SettingsConfigDict(
        env_file=(ROOT_PATH / Environment.TESTING.dotenv_filename()),
        env_file_encoding='utf-8',
        env_nested_delimiter='__',
        extra='ignore',
    )
    db  : DbSettings  = Field(default_factory=lambda: DbSettings(connections={"primary": {"dsn": TESTING_DSN}}))
    env : Environment = Field(default_factory=lambda: Environment.TESTING, description="Current application environment")


# Global settings singleton
SETTINGS: Dict[Environment, Settings] = {}

def get_settings() -> Settings:
    """Retrieve the settings singleton for the current environment.

    The environment (APP_ENV) must be set before the first call for that environment;
    subsequent calls return the cached instance. Every environment but testing reads
    its own dotenv file (`.env`, `.env.staging`, `.env.production`).

    Example:
        >>> from blockdocs.environment import set_current_env
        >>> set_current_env('testing')
        >>> get_settings().primary_database().dsn
        'sqlite+aiosqlite:///:memory:'
    """
    current_env = Environment.current()
    if (settings := SETTINGS.get(current_env)) is None:
        if current_env.is_testing():
            settings = _SettingsTesting()
        else:
            settings = Settings(_env_file=ROOT_PATH / current_env.dotenv_filename(), env=current_env)
        SETTINGS[current_env] = settings
    return settings

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Self

from pydantic import BaseModel, Field, PrivateAttr, field_validator
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from typing_extensions import Literal


# async driver -> sync driver used by alembic
SYNC_DRIVERS: Dict[str, str] = {
    "sqlite+aiosqlite"    : "sqlite",
    "postgresql+asyncpg"  : "postgresql+psycopg",
}


class DatabaseConnectionSettings(BaseModel):
    """A single database connection configuration with a mandatory _name_ and _dsn_."""

    # Required
    name                     : str                  = Field(...,  description="Unique name for this database connection")
    dsn                      : str                  = Field(...,  description="SQLAlchemy URL, must use an async driver")

    # Optional
    echo                     : bool                 = Field(default=False,     description="Enable SQL statement logging")
    connection_timeout       : int | None           = Field(default=10,        description="Pool checkout timeout in seconds")

    # Connection pool settings, ignored for sqlite
    pool_min_connections     : int | None           = Field(default=5,         description="Minimum number of connections in the pool")
    pool_max_overflow        : int | None           = Field(default=10,        description="Number of connections that can be created beyond the pool size limit")
    pool_recycle_time        : int | None           = Field(default=1800,      description="Time after which connections are recycled (seconds)")
    pool_pre_ping            : bool                 = Field(default=True,      description="Enable pre-ping to check connection health")

    _sqlalchemy_async_engine: AsyncEngine | None = PrivateAttr(default=None)

    @field_validator('dsn', mode='before')
    @classmethod
    def validate_dsn(cls, v: str | URL) -> str:
        """Ensure the DSN parses as a SQLAlchemy URL."""
        if isinstance(v, URL):
            return v.render_as_string(hide_password=False)
        try:
            make_url(v)
        except ArgumentError as e:
            raise ValueError(f"dsn is not a valid SQLAlchemy URL: {v!r}") from e
        return v

    @property
    def url(self) -> URL: return make_url(self.dsn)

    @property
    def driver(self) -> str: return self.url.drivername

    @property
    def is_sqlite(self) -> bool: return self.url.get_backend_name() == "sqlite"

    @property
    def is_memory(self) -> bool: return self.is_sqlite and self.url.database in (None, "", ":memory:")

    @property
    def sync_dsn(self) -> str:
        """The same database addressed through a synchronous driver (for alembic)."""
        url = self.url
        if sync_driver := SYNC_DRIVERS.get(url.drivername):
            url = url.set(drivername=sync_driver)
        return url.render_as_string(hide_password=False)

    @classmethod
    def from_name_and_dsn(cls, name: str, dsn: str) -> Self:
        """Create a DatabaseConnectionSettings instance from a name and DSN string."""
        return cls.model_validate({"name": name, "dsn": dsn})

    @classmethod
    def from_name_and_connection_object(cls, name: str, connection_obj: Dict[str, Any]) -> Self:
        """Create a DatabaseConnectionSettings instance from a name and a connection object from the .env file."""
        return cls.model_validate({"name": name, **connection_obj})

    # ==================================================================================================
    # Async SQLAlchemy
    # ==================================================================================================

    def engine_kwargs(self) -> Dict[str, Any]:
        """Map settings to create_async_engine keyword arguments."""
        if self.is_sqlite:
            kwargs: Dict[str, Any] = {"echo": self.echo}
            if self.is_memory:
                # one shared connection, otherwise every checkout sees an empty database
                kwargs["poolclass"] = StaticPool
                kwargs["connect_args"] = {"check_same_thread": False}
            return kwargs

        engine_kwargs = {
            "echo"          : self.echo,
            "pool_size"     : self.pool_min_connections,
            "max_overflow"  : self.pool_max_overflow,
            "pool_timeout"  : self.connection_timeout,
            "pool_recycle"  : self.pool_recycle_time,
            "pool_pre_ping" : self.pool_pre_ping,
        }
        # Remove None values so SQLAlchemy defaults are used
        return {k: v for k, v in engine_kwargs.items() if v is not None}

    async def sqlalchemy_dispose_async_engine(self) -> None:
        """Dispose the SQLAlchemy async engine if it exists."""
        if self._sqlalchemy_async_engine and isinstance(self._sqlalchemy_async_engine, AsyncEngine):
            await self._sqlalchemy_async_engine.dispose()
            self._sqlalchemy_async_engine = None

    async def sqlalchemy_async_engine(self) -> AsyncEngine:
        """Get or create the SQLAlchemy async engine for this connection."""
        if not self._sqlalchemy_async_engine:
            self._sqlalchemy_async_engine = create_async_engine(self.dsn, **self.engine_kwargs())
        return self._sqlalchemy_async_engine

    async def sqlalchemy_async_sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        """Create a sessionmaker CLASS that is to be instantiated for each session."""
        async_engine = await self.sqlalchemy_async_engine()
        return async_sessionmaker(
            bind=async_engine,
            expire_on_commit=False,
            class_=AsyncSession,
            autoflush=False,
        )

    @asynccontextmanager
    async def sqlalchemy_transaction(
        self,
        isolation_level: Literal["READ UNCOMMITTED", "READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE"] | None = None
    ) -> AsyncGenerator[AsyncConnection, None]:
        """
        Async context manager for a SQLAlchemy async transaction.

        Yields:
            AsyncConnection with an active transaction (committed or rolled back on exit).
        """
        engine = await self.sqlalchemy_async_engine()
        async with engine.connect() as conn:
            if isolation_level is not None:
                await conn.execution_options(isolation_level=isolation_level)
            async with conn.begin():
                yield conn

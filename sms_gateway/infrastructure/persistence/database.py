from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ..logging import correlation_id
from .models import Base


class Database:
    """Database connection manager."""

    def __init__(self, url: str, echo: bool = False) -> None:
        engine_options: dict = {"echo": echo}
        if url.startswith("sqlite") and ":memory:" in url:
            # One shared connection, otherwise every session sees an empty database
            engine_options.update(poolclass=StaticPool, connect_args={"check_same_thread": False})
        else:
            engine_options["pool_pre_ping"] = True

        self._engine = create_async_engine(url, **engine_options)
        self._session_factory = async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )
        self._attach_correlation_id_hook()

    def _attach_correlation_id_hook(self) -> None:
        """Prefix every statement with /* correlation_id=<id> */ so database
        logs can be matched to the request that issued them."""

        @event.listens_for(self._engine.sync_engine, "before_cursor_execute", retval=True)
        def _inject_correlation_comment(conn, cursor, statement, parameters, context, executemany):
            cid = correlation_id.get("")
            if cid:
                statement = f"/* correlation_id={cid} */ {statement}"
            return statement, parameters

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory

    async def create_tables(self) -> None:
        """Create all tables (for development and tests)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def session(self) -> AsyncSession:
        """Create a new session."""
        return self._session_factory()

    async def close(self) -> None:
        """Close the database connection."""
        await self._engine.dispose()

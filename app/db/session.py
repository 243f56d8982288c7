from typing import Any, AsyncGenerator
from fastapi import Request
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy import text
from app.core.config import settings


class Database:
    """Handle do banco: um engine assíncrono e sua fábrica de sessões.

    Criado uma vez no startup da aplicação e liberado no shutdown.
    """

    def __init__(self, url: str, **engine_kwargs: Any):
        if not url.startswith("sqlite"):
            engine_kwargs.setdefault("pool_size", settings.db_pool_size)
            engine_kwargs.setdefault("pool_timeout", settings.db_pool_timeout_seconds)
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, pool_pre_ping=True, **engine_kwargs)
        self.session_factory = sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def check(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception:
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    db: Database = request.app.state.db
    async with db.session() as session:
        yield session

# app/core/database.py
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
    AsyncEngine,
)
from sqlalchemy.orm import declarative_base
from app.core.config import settings

Base = declarative_base()


class Database:
    def __init__(self):
        self._engine: AsyncEngine = create_async_engine(
            f"postgresql+asyncpg://{settings.POSTGRES_USER}:{settings.POSTGRES_PASSWORD}"
            f"@{settings.POSTGRES_HOST}:{settings.POSTGRES_PORT}/{settings.POSTGRES_DB}",
            echo=False,
            future=True,
            # analysis + embedding stages each hold their own session
            pool_size=settings.EMBEDDING_CONCURRENCY + settings.ANALYSIS_CONCURRENCY,
            max_overflow=10,
        )
        self._SessionLocal = async_sessionmaker(
            bind=self._engine, class_=AsyncSession, expire_on_commit=False
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def sync_engine(self):
        # The SQLAlchemy OTel instrumentor expects a sync Engine
        return self._engine.sync_engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._SessionLocal


database = Database()
async_session = database.session_factory

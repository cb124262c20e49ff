from __future__ import annotations

from sqlalchemy import URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.config import DatabaseSettings, get_database_settings


class Base(DeclarativeBase):
  pass


engine: AsyncEngine | None = None
SessionLocal: async_sessionmaker[AsyncSession] | None = None


def database_url(settings: DatabaseSettings) -> URL:
  """Build the asyncpg URL from discrete connection settings."""
  return URL.create("postgresql+asyncpg", username=settings.user, password=settings.password, host=settings.host, port=settings.port, database=settings.name)


def get_db_engine() -> AsyncEngine:
  global engine
  if engine is None:
    settings = get_database_settings()
    # Fixed-size pool: min and max connections are equal.
    engine = create_async_engine(
      database_url(settings),
      echo=settings.debug,
      pool_size=settings.pool_size,
      max_overflow=0,
      pool_timeout=settings.acquire_timeout_seconds,
      pool_recycle=settings.idle_timeout_seconds,
      pool_pre_ping=True,
      connect_args={"timeout": settings.connect_timeout_seconds},
    )
  return engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
  global SessionLocal
  if SessionLocal is None:
    SessionLocal = async_sessionmaker(bind=get_db_engine(), expire_on_commit=False, class_=AsyncSession)
  return SessionLocal


async def dispose_engine() -> None:
  """Close pooled connections at shutdown."""
  global engine, SessionLocal
  if engine is not None:
    await engine.dispose()
  engine = None
  SessionLocal = None

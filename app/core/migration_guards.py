"""Guarded Alembic operations so migrations can adopt tables that already exist."""

from __future__ import annotations

from typing import Any

from alembic import op
from sqlalchemy import text

_TABLE_EXISTS = text(
  """
  SELECT 1
  FROM information_schema.tables
  WHERE table_schema = :schema
    AND table_name = :table_name
    AND table_type = 'BASE TABLE'
  LIMIT 1
  """
)

_INDEX_EXISTS = text(
  """
  SELECT 1
  FROM pg_indexes
  WHERE schemaname = :schema
    AND indexname = :index_name
  LIMIT 1
  """
)


def table_exists(*, table_name: str, schema: str | None = None) -> bool:
  """Return True when a table exists in the target schema."""
  result = op.get_bind().execute(_TABLE_EXISTS, {"schema": schema or "public", "table_name": table_name})
  return result.first() is not None


def index_exists(*, index_name: str, schema: str | None = None) -> bool:
  """Return True when an index exists in the target schema."""
  result = op.get_bind().execute(_INDEX_EXISTS, {"schema": schema or "public", "index_name": index_name})
  return result.first() is not None


def guarded_create_table(table_name: str, *args: Any, **kwargs: Any) -> None:
  """Create a table only when it does not already exist."""
  if table_exists(table_name=table_name, schema=kwargs.get("schema")):
    return

  op.create_table(table_name, *args, **kwargs)


def guarded_drop_table(table_name: str, *args: Any, **kwargs: Any) -> None:
  """Drop a table only when it exists."""
  if not table_exists(table_name=table_name, schema=kwargs.get("schema")):
    return

  op.drop_table(table_name, *args, **kwargs)


def guarded_create_index(index_name: str, table_name: str, *args: Any, **kwargs: Any) -> None:
  """Create an index only when its table exists and the index does not."""
  schema = kwargs.get("schema")
  if not table_exists(table_name=table_name, schema=schema):
    return

  if index_exists(index_name=index_name, schema=schema):
    return

  op.create_index(index_name, table_name, *args, **kwargs)


def guarded_drop_index(index_name: str, *args: Any, **kwargs: Any) -> None:
  """Drop an index only when it exists."""
  if not index_exists(index_name=index_name, schema=kwargs.get("schema")):
    return

  op.drop_index(index_name, *args, **kwargs)

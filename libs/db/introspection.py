"""Async helpers for inspecting the live schema from a session."""

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession


async def table_names(session: AsyncSession) -> set[str]:
    conn = await session.connection()
    return set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))


async def table_exists(session: AsyncSession, name: str) -> bool:
    conn = await session.connection()
    return await conn.run_sync(lambda sync_conn: inspect(sync_conn).has_table(name))


async def dialect_name(session: AsyncSession) -> str:
    conn = await session.connection()
    return conn.dialect.name

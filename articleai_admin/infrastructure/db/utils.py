# caminho: articleai_admin/infrastructure/db/utils.py
# Funções:
# - try_flush(), try_commit(), try_execute(): operações com rollback e tradução para StoreUnavailableError

from __future__ import annotations

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from articleai_admin.domain.admins.errors import StoreUnavailableError


async def try_flush(session: AsyncSession) -> None:
    try:
        await session.flush()
    except (DBAPIError, SQLAlchemyError) as exc:
        await session.rollback()
        raise StoreUnavailableError(str(exc)) from exc


async def try_commit(session: AsyncSession) -> None:
    try:
        await session.commit()
    except (DBAPIError, SQLAlchemyError) as exc:
        await session.rollback()
        raise StoreUnavailableError(str(exc)) from exc


async def try_execute(session: AsyncSession, stmt):
    try:
        return await session.execute(stmt)
    except (DBAPIError, SQLAlchemyError) as exc:
        await session.rollback()
        raise StoreUnavailableError(str(exc)) from exc

# caminho: articleai_admin/infrastructure/repositories/admin_repository.py
# Funções:
# - AdminCredentialRepositoryImpl: implementação SQLAlchemy do protocolo AdminCredentialRepository
# - AdminSessionRepositoryImpl: implementação para sessões
# - AdminAuditRepositoryImpl: implementação para a trilha de auditoria

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from articleai_admin.domain.admins.entities import AdminAuditLog, AdminIdentity, AdminSession
from articleai_admin.domain.admins.repositories import (
    AdminAuditRepository,
    AdminCredentialRepository,
    AdminSessionRepository,
)
from articleai_admin.infrastructure.db.models import AdminAuditLogModel, AdminCredentialModel, AdminSessionModel
from articleai_admin.infrastructure.db.utils import try_commit, try_execute, try_flush


def _to_domain_identity(model: AdminCredentialModel) -> AdminIdentity:
    return AdminIdentity(
        id=model.id,
        admin_id=model.admin_id,
        password_hash=model.password_hash,
        full_name=model.full_name,
        email=model.email,
        last_login_at=model.last_login_at,
    )


def _to_domain_session(model: AdminSessionModel) -> AdminSession:
    return AdminSession(
        id=model.id,
        session_id=model.session_id,
        admin_id=model.admin_id,
        token_hash=model.token_hash,
        expires_at=model.expires_at,
        created_at=model.created_at,
        last_ip=model.last_ip,
        user_agent=model.user_agent,
    )


def _to_domain_audit(model: AdminAuditLogModel) -> AdminAuditLog:
    return AdminAuditLog(
        id=model.id,
        admin_id=model.admin_id,
        action=model.action,
        resource_type=model.resource_type,
        resource_id=model.resource_id,
        ip_address=model.ip_address,
        user_agent=model.user_agent,
        new_values=dict(model.new_values or {}),
        created_at=model.created_at,
    )


class AdminCredentialRepositoryImpl(AdminCredentialRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_admin_id(self, admin_id: str) -> Optional[AdminIdentity]:
        stmt = select(AdminCredentialModel).where(func.lower(AdminCredentialModel.admin_id) == admin_id.lower())
        result = await try_execute(self._session, stmt)
        model = result.scalar_one_or_none()
        return _to_domain_identity(model) if model else None

    async def add(self, identity: AdminIdentity) -> AdminIdentity:
        model = AdminCredentialModel(
            admin_id=identity.admin_id,
            password_hash=identity.password_hash,
            full_name=identity.full_name,
            email=identity.email,
            last_login_at=identity.last_login_at,
        )
        self._session.add(model)
        await try_flush(self._session)
        await try_commit(self._session)
        await self._session.refresh(model)
        return _to_domain_identity(model)

    async def touch_last_login(self, admin_id: str, at: datetime) -> None:
        stmt = update(AdminCredentialModel).where(AdminCredentialModel.admin_id == admin_id).values(last_login_at=at)
        await try_execute(self._session, stmt)
        await try_commit(self._session)

    async def update_password(self, admin_id: str, password_hash: str) -> bool:
        stmt = (
            update(AdminCredentialModel)
            .where(func.lower(AdminCredentialModel.admin_id) == admin_id.lower())
            .values(password_hash=password_hash)
        )
        result = await try_execute(self._session, stmt)
        await try_commit(self._session)
        return bool(result.rowcount)


class AdminSessionRepositoryImpl(AdminSessionRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, session_obj: AdminSession) -> AdminSession:
        model = AdminSessionModel(
            session_id=session_obj.session_id,
            admin_id=session_obj.admin_id,
            token_hash=session_obj.token_hash,
            expires_at=session_obj.expires_at,
            last_ip=session_obj.last_ip,
            user_agent=session_obj.user_agent,
        )
        if session_obj.created_at is not None:
            model.created_at = session_obj.created_at
        self._session.add(model)
        await try_flush(self._session)
        await try_commit(self._session)
        await self._session.refresh(model)
        return _to_domain_session(model)

    async def get_by_token_hash(self, token_hash: str) -> Optional[AdminSession]:
        stmt = select(AdminSessionModel).where(AdminSessionModel.token_hash == token_hash)
        result = await try_execute(self._session, stmt)
        model = result.scalar_one_or_none()
        return _to_domain_session(model) if model else None

    async def delete_by_token_hash(self, token_hash: str) -> Optional[AdminSession]:
        stmt = delete(AdminSessionModel).where(AdminSessionModel.token_hash == token_hash).returning(AdminSessionModel)
        result = await try_execute(self._session, stmt)
        model = result.scalar_one_or_none()
        deleted = _to_domain_session(model) if model else None
        await try_commit(self._session)
        return deleted

    async def delete_by_admin(self, admin_id: str) -> int:
        stmt = delete(AdminSessionModel).where(func.lower(AdminSessionModel.admin_id) == admin_id.lower())
        result = await try_execute(self._session, stmt)
        await try_commit(self._session)
        return int(result.rowcount or 0)

    async def delete_expired(self, now: datetime) -> int:
        stmt = delete(AdminSessionModel).where(AdminSessionModel.expires_at <= now)
        result = await try_execute(self._session, stmt)
        await try_commit(self._session)
        return int(result.rowcount or 0)


class AdminAuditRepositoryImpl(AdminAuditRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, entry: AdminAuditLog) -> AdminAuditLog:
        model = AdminAuditLogModel(
            admin_id=entry.admin_id,
            action=entry.action,
            resource_type=entry.resource_type,
            resource_id=entry.resource_id,
            ip_address=entry.ip_address,
            user_agent=entry.user_agent,
            new_values=entry.new_values or None,
        )
        self._session.add(model)
        await try_flush(self._session)
        await try_commit(self._session)
        await self._session.refresh(model)
        return _to_domain_audit(model)

    async def list_by_admin(self, admin_id: str, offset: int, limit: int) -> Sequence[AdminAuditLog]:
        stmt = (
            select(AdminAuditLogModel)
            .where(AdminAuditLogModel.admin_id == admin_id)
            .order_by(AdminAuditLogModel.created_at.desc(), AdminAuditLogModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await try_execute(self._session, stmt)
        return [_to_domain_audit(model) for model in result.scalars().all()]

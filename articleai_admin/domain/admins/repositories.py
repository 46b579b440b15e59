# caminho: articleai_admin/domain/admins/repositories.py
# Funções:
# - AdminCredentialRepository: leitura das credenciais e registro do último login
# - AdminSessionRepository: persistência das sessões (hash do token)
# - AdminAuditRepository: gravação e listagem da trilha de auditoria

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from articleai_admin.domain.admins.entities import AdminAuditLog, AdminIdentity, AdminSession


class AdminCredentialRepository(Protocol):
    async def get_by_admin_id(self, admin_id: str) -> Optional[AdminIdentity]: ...
    async def add(self, identity: AdminIdentity) -> AdminIdentity: ...
    async def touch_last_login(self, admin_id: str, at: datetime) -> None: ...
    async def update_password(self, admin_id: str, password_hash: str) -> bool: ...


class AdminSessionRepository(Protocol):
    async def add(self, session_obj: AdminSession) -> AdminSession: ...
    async def get_by_token_hash(self, token_hash: str) -> Optional[AdminSession]: ...
    async def delete_by_token_hash(self, token_hash: str) -> Optional[AdminSession]: ...
    async def delete_by_admin(self, admin_id: str) -> int: ...
    async def delete_expired(self, now: datetime) -> int: ...


class AdminAuditRepository(Protocol):
    async def add(self, entry: AdminAuditLog) -> AdminAuditLog: ...
    async def list_by_admin(self, admin_id: str, offset: int, limit: int) -> Sequence[AdminAuditLog]: ...

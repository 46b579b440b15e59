# caminho: articleai_admin/domain/admins/entities.py
# Funções:
# - AdminIdentity: registro do administrador (credencial + dados de exibição)
# - AdminSession: sessão emitida após autenticação (busca pelo hash do token)
# - AdminAuditLog: trilha de ações administrativas (login, logout, revogação)

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


@dataclass(slots=True)
class AdminIdentity:
    admin_id: str
    password_hash: str
    full_name: str
    email: str
    last_login_at: Optional[datetime] = None
    id: Optional[int] = None


@dataclass(slots=True)
class AdminSession:
    session_id: str
    admin_id: str
    token_hash: str
    expires_at: datetime
    created_at: Optional[datetime] = None
    last_ip: Optional[str] = None
    user_agent: Optional[str] = None
    id: Optional[int] = None

    def is_expired(self, now: datetime | None = None) -> bool:
        reference = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at <= reference


@dataclass(slots=True)
class AdminAuditLog:
    admin_id: str
    action: str
    resource_type: str
    resource_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    new_values: dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    id: Optional[int] = None

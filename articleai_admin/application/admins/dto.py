# caminho: articleai_admin/application/admins/dto.py
# Funções:
# - DTOs Pydantic para entrada/saída dos casos de uso de autenticação de admin
# - AdminIdentityOutput é a fronteira validada do registro de admin (campos obrigatórios)

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from articleai_admin.config.constants import ADMIN_ID_LENGTH_MAX, ADMIN_ID_LENGTH_MIN


class AdminIdentityOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='ignore')

    admin_id: str = Field(min_length=ADMIN_ID_LENGTH_MIN, max_length=ADMIN_ID_LENGTH_MAX)
    full_name: str = Field(min_length=1)
    email: EmailStr
    last_login_at: Optional[datetime] = None


class AdminSessionIssued(BaseModel):
    session_token: str
    token_type: Literal['bearer'] = 'bearer'
    expires_in: int
    expires_at: datetime
    admin: AdminIdentityOutput


class AdminSessionStatus(BaseModel):
    admin_id: str
    admin: AdminIdentityOutput
    expires_at: datetime


class AdminSessionsRevoked(BaseModel):
    admin_id: str
    revoked: int


class AdminAuditLogOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    admin_id: str
    action: str
    resource_type: str
    resource_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    new_values: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class AdminAuditLogListResponse(BaseModel):
    offset: int
    limit: int
    items: list[AdminAuditLogOutput]

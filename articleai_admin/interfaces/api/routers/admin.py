# caminho: articleai_admin/interfaces/api/routers/admin.py
# Funções:
# - Área protegida do admin: perfil, revogação de sessões e trilha de auditoria

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from articleai_admin.application.admins.dto import (
    AdminAuditLogListResponse,
    AdminIdentityOutput,
    AdminSessionsRevoked,
)
from articleai_admin.application.admins.use_cases import AdminAuthService
from articleai_admin.config import get_settings
from articleai_admin.interfaces.api.dependencies import ClientIp, UserAgent, get_admin_service
from articleai_admin.shared.auth_dependencies import require_admin_session

router = APIRouter(prefix='/admin', tags=['admin'])


@router.get(
    '/me',
    response_model=AdminIdentityOutput,
    summary='Admin autenticado',
    description='Retorna o registro do administrador dono do Bearer token.',
)
async def get_current_admin(
    current_admin: AdminIdentityOutput = Depends(require_admin_session),
) -> AdminIdentityOutput:
    return current_admin


@router.post(
    '/sessions/revoke-all',
    response_model=AdminSessionsRevoked,
    status_code=status.HTTP_200_OK,
    summary='Encerrar todas as sessões',
    description="""Apaga todas as sessões do administrador autenticado, inclusive a atual.

Use quando houver suspeita de vazamento de token ou após troca de senha.
""",
)
async def revoke_all_sessions(
    client_ip: ClientIp,
    user_agent: UserAgent,
    current_admin: AdminIdentityOutput = Depends(require_admin_session),
    service: AdminAuthService = Depends(get_admin_service),
) -> AdminSessionsRevoked:
    revoked = await service.revoke_all_sessions(current_admin.admin_id, client_ip=client_ip, user_agent=user_agent)
    return AdminSessionsRevoked(admin_id=current_admin.admin_id, revoked=revoked)


@router.get(
    '/audit-logs',
    response_model=AdminAuditLogListResponse,
    summary='Listar auditoria',
    description="""Retorna as ações registradas para o administrador autenticado, mais recentes primeiro.

Use os parâmetros `offset` e `limit` para navegar entre páginas.
""",
)
async def list_audit_logs(
    offset: int = Query(0, ge=0),
    limit: int = Query(get_settings().PAGINATION_LIMIT, ge=1, le=get_settings().PAGINATION_MAX_LIMIT),
    current_admin: AdminIdentityOutput = Depends(require_admin_session),
    service: AdminAuthService = Depends(get_admin_service),
) -> AdminAuditLogListResponse:
    items = await service.list_audit_logs(current_admin.admin_id, offset, limit)
    return AdminAuditLogListResponse(offset=offset, limit=limit, items=list(items))

# caminho: articleai_admin/interfaces/api/routers/auth.py
# Funções:
# - Endpoints do handshake de sessão do admin (sign-in, session, sign-out)

from __future__ import annotations

from fastapi import APIRouter, Depends, Form, HTTPException, Response, status

from articleai_admin.application.admins.dto import AdminSessionIssued, AdminSessionStatus
from articleai_admin.application.admins.use_cases import AdminAuthService
from articleai_admin.config.constants import MESSAGE_SIGN_IN_AGAIN
from articleai_admin.domain.admins.errors import SessionValidationError
from articleai_admin.interfaces.api.dependencies import ClientIp, UserAgent, get_admin_service
from articleai_admin.shared.auth_dependencies import optional_bearer_token

router = APIRouter(prefix='/admin/auth', tags=['auth'])


@router.post(
    '/sign-in',
    response_model=AdminSessionIssued,
    status_code=status.HTTP_200_OK,
    summary='Entrar como administrador',
    description="""Autentica via formulário (`admin_id`/`password`) e emite um token de sessão opaco.

O token deve ser enviado como `Authorization: Bearer <token>` e expira em `ADMIN_SESSION_EXPIRE_SECONDS` (janela fixa).

**Proteções**:
- `admin_id` desconhecido e senha errada retornam o mesmo erro (`ADMIN_INVALID_CREDENTIALS`).
- Rate limit por `admin_id` (`SIGN_IN_INTERVAL_SECONDS`).
- Bloqueio temporário após `SECURITY_MAX_SIGN_IN_FAILURES` falhas (Redis).
""",
)
async def sign_in(
    client_ip: ClientIp,
    user_agent: UserAgent,
    admin_id: str = Form(''),
    password: str = Form(''),
    service: AdminAuthService = Depends(get_admin_service),
) -> AdminSessionIssued:
    return await service.sign_in(admin_id, password, client_ip=client_ip, user_agent=user_agent)


@router.get(
    '/session',
    response_model=AdminSessionStatus,
    status_code=status.HTTP_200_OK,
    summary='Validar sessão',
    description="""Valida o Bearer token e devolve o `admin_id`, o registro do admin e a expiração.

Somente leitura: a validação não renova a sessão. Token inexistente ou expirado retorna 401 `ADMIN_SESSION_INVALID`.
""",
)
async def get_session_status(
    token: str | None = Depends(optional_bearer_token),
    service: AdminAuthService = Depends(get_admin_service),
) -> AdminSessionStatus:
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={'code': SessionValidationError.code, 'message': MESSAGE_SIGN_IN_AGAIN},
            headers={'WWW-Authenticate': 'Bearer'},
        )
    return await service.describe_session(token)


@router.post(
    '/sign-out',
    status_code=status.HTTP_204_NO_CONTENT,
    summary='Sair',
    description="""Apaga a sessão do Bearer token para que não possa ser reutilizada.

Idempotente: sem token ou com token já removido a resposta também é 204.
""",
)
async def sign_out(
    client_ip: ClientIp,
    user_agent: UserAgent,
    token: str | None = Depends(optional_bearer_token),
    service: AdminAuthService = Depends(get_admin_service),
) -> Response:
    if token:
        await service.sign_out(token, client_ip=client_ip, user_agent=user_agent)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

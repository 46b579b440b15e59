# caminho: articleai_admin/shared/auth_dependencies.py
# Funções:
# - require_admin_session(): valida o Bearer token de sessão e retorna o admin (fail closed)
# - optional_bearer_token(): token opcional (logout idempotente)

from __future__ import annotations

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from articleai_admin.application.admins.dto import AdminIdentityOutput
from articleai_admin.application.admins.use_cases import AdminAuthService
from articleai_admin.config.constants import MESSAGE_SIGN_IN_AGAIN, OAUTH2_SCHEME_TOKEN_URL
from articleai_admin.domain.admins.errors import AdminAuthError, SessionValidationError
from articleai_admin.interfaces.api.dependencies import get_admin_service
from articleai_admin.shared.logging import log_warning

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=OAUTH2_SCHEME_TOKEN_URL,
    auto_error=False,  # o 401 sai com o formato de erro da API
)

_SESSION_INVALID_DETAIL = {'code': SessionValidationError.code, 'message': MESSAGE_SIGN_IN_AGAIN}


async def optional_bearer_token(token: str | None = Depends(oauth2_scheme)) -> str | None:
    return token


async def require_admin_session(
    token: str | None = Depends(oauth2_scheme),
    service: AdminAuthService = Depends(get_admin_service),
) -> AdminIdentityOutput:
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_SESSION_INVALID_DETAIL,
            headers={'WWW-Authenticate': 'Bearer'},
        )

    # NotFound, Expired e falha de transporte: todos viram 401
    try:
        admin_id = await service.validate_session(token)
        return await service.get_admin(admin_id)
    except AdminAuthError as exc:
        log_warning('ADMIN_PROTECTED_ACCESS_DENIED', {'code': exc.code})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_SESSION_INVALID_DETAIL,
            headers={'WWW-Authenticate': 'Bearer'},
        ) from exc

# caminho: articleai_admin/interfaces/api/dependencies.py
# Funções:
# - get_client_ip()/get_user_agent(): contexto da requisição para auditoria e bloqueio
# - resolve_client_ip(): aplica X-Forwarded-For apenas atrás de proxy confiável
# - get_admin_service(): instancia AdminAuthService com adapters concretos
# - get_checkout_flow_service(): instancia CheckoutFlowService

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from pwdlib import PasswordHash

from articleai_admin.application.admins.use_cases import AdminAdapters, AdminAuthService
from articleai_admin.application.flows.use_cases import CheckoutFlowService
from articleai_admin.config import get_settings
from articleai_admin.infrastructure.cache.redis import get_redis_client
from articleai_admin.infrastructure.db.base import get_session
from articleai_admin.infrastructure.repositories.admin_repository import (
    AdminAuditRepositoryImpl,
    AdminCredentialRepositoryImpl,
    AdminSessionRepositoryImpl,
)
from articleai_admin.infrastructure.security.jwt import FlowEnvelopeCodec
from articleai_admin.infrastructure.security.tokens import SessionTokenService
from articleai_admin.shared.rate_limit import NullSignInRateLimiter, RedisSignInRateLimiter
from articleai_admin.shared.security_lock import NullSecurityLockManager, RedisSecurityLockManager

# Instâncias únicas: o hash fictício do autenticador é calculado uma vez por hasher
password_hasher = PasswordHash.recommended()
token_service = SessionTokenService()


def resolve_client_ip(peer: str, forwarded: str, trusted_proxies: frozenset[str]) -> str:
    # X-Forwarded-For só vale quando a conexão vem de um proxy configurado
    if forwarded and peer in trusted_proxies:
        return forwarded.split(',')[0].strip() or peer
    return peer


def get_client_ip(request: Request) -> str:
    settings = getattr(request.app.state, 'settings', None) or get_settings()
    peer = request.client.host if request.client else ''
    return resolve_client_ip(peer, request.headers.get('x-forwarded-for', ''), settings.trusted_proxies)


def get_user_agent(request: Request) -> str:
    return request.headers.get('user-agent', '')


ClientIp = Annotated[str, Depends(get_client_ip)]
UserAgent = Annotated[str, Depends(get_user_agent)]


async def get_admin_service(
    session=Depends(get_session),
    redis_client=Depends(get_redis_client),
) -> AdminAuthService:
    settings = get_settings()
    adapters = AdminAdapters(
        credentials=AdminCredentialRepositoryImpl(session),
        sessions=AdminSessionRepositoryImpl(session),
        audit=AdminAuditRepositoryImpl(session),
    )
    if redis_client is None:
        security_lock = NullSecurityLockManager()
        sign_in_rate_limiter = NullSignInRateLimiter()
    else:
        security_lock = RedisSecurityLockManager(
            redis_client,
            block_duration_seconds=settings.SECURITY_BLOCK_DURATION_SECONDS,
            max_failures=settings.SECURITY_MAX_SIGN_IN_FAILURES,
        )
        sign_in_rate_limiter = RedisSignInRateLimiter(
            redis_client,
            interval_seconds=settings.SIGN_IN_INTERVAL_SECONDS,
            prefix='admin:sign-in',
        )
    return AdminAuthService(
        adapters=adapters,
        settings=settings,
        password_hasher=password_hasher,
        token_service=token_service,
        security_lock=security_lock,
        sign_in_rate_limiter=sign_in_rate_limiter,
    )


def get_checkout_flow_service() -> CheckoutFlowService:
    settings = get_settings()
    codec = FlowEnvelopeCodec(settings.SECRET_KEY, settings.SECRET_ALGORITHM)
    return CheckoutFlowService(codec, settings)

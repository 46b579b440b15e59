# caminho: articleai_admin/client/session_holder.py
# Funções:
# - AdminSessionHolder: máquina de estados da sessão do admin no cliente
#   (UNKNOWN -> CHECKING -> AUTHENTICATED | UNAUTHENTICATED)
# - AdminAuthContext: contrato exposto às telas {is_authenticated, admin_user, loading}
# - gate(): decide entre conteúdo protegido, tela de login ou carregando

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from articleai_admin.application.admins.dto import AdminIdentityOutput
from articleai_admin.client.gateway import AdminAuthGateway
from articleai_admin.client.storage import TokenStorage
from articleai_admin.config.constants import (
    ADMIN_TOKEN_STORAGE_KEY,
    MESSAGE_INVALID_CREDENTIALS,
    MESSAGE_SIGN_IN_AGAIN,
    MESSAGE_STORAGE_UNAVAILABLE,
)
from articleai_admin.domain.admins.errors import AdminAuthError, InvalidCredentials
from articleai_admin.shared.logging import log_error, log_info, log_warning


class AdminSessionState(str, Enum):
    UNKNOWN = 'unknown'
    CHECKING = 'checking'
    AUTHENTICATED = 'authenticated'
    UNAUTHENTICATED = 'unauthenticated'


class ViewGate(str, Enum):
    CONTENT = 'content'
    LOGIN_PROMPT = 'login_prompt'
    LOADING = 'loading'


@dataclass(frozen=True, slots=True)
class AdminAuthContext:
    is_authenticated: bool
    admin_user: Optional[AdminIdentityOutput]
    loading: bool


@dataclass(frozen=True, slots=True)
class SignInResult:
    ok: bool
    error: Optional[str] = None


class AdminSessionHolder:
    """Único dono do token em cache e do admin carregado em memória.

    Erros de autenticação nunca escapam daqui: viram SignInResult ou
    estado UNAUTHENTICATED. Qualquer falha na validação fecha a sessão.
    """

    def __init__(
        self,
        gateway: AdminAuthGateway,
        storage: TokenStorage,
        *,
        storage_key: str = ADMIN_TOKEN_STORAGE_KEY,
    ) -> None:
        self._gateway = gateway
        self._storage = storage
        self._storage_key = storage_key
        self._state = AdminSessionState.UNKNOWN
        self._admin: Optional[AdminIdentityOutput] = None
        self._last_error: Optional[str] = None

    @property
    def state(self) -> AdminSessionState:
        return self._state

    @property
    def admin_user(self) -> Optional[AdminIdentityOutput]:
        return self._admin

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def context(self) -> AdminAuthContext:
        return AdminAuthContext(
            is_authenticated=self._state is AdminSessionState.AUTHENTICATED,
            admin_user=self._admin,
            loading=self._state in (AdminSessionState.UNKNOWN, AdminSessionState.CHECKING),
        )

    def gate(self) -> ViewGate:
        if self._state is AdminSessionState.AUTHENTICATED:
            return ViewGate.CONTENT
        if self._state is AdminSessionState.UNAUTHENTICATED:
            return ViewGate.LOGIN_PROMPT
        return ViewGate.LOADING

    async def start(self) -> AdminAuthContext:
        token = self._storage.get(self._storage_key)
        if not token:
            self._set_unauthenticated()
            return self.context

        self._state = AdminSessionState.CHECKING
        try:
            admin_id = await self._gateway.validate_session(token)
            admin = await self._gateway.get_admin(token, admin_id)
        except AdminAuthError as exc:
            log_warning('CLIENT_SESSION_REJECTED', {'code': exc.code})
            return self._reject_cached_token()
        except Exception as exc:
            # Falha inesperada do gateway equivale a falha de transporte: fecha a sessão
            log_error('CLIENT_SESSION_CHECK_FAILED', {'error': repr(exc)})
            return self._reject_cached_token()

        self._admin = admin
        self._state = AdminSessionState.AUTHENTICATED
        self._last_error = None
        log_info('CLIENT_SESSION_RESTORED', {'admin_id': admin.admin_id})
        return self.context

    async def sign_in(self, admin_id: str, password: str) -> SignInResult:
        try:
            issued = await self._gateway.sign_in(admin_id, password)
        except InvalidCredentials:
            self._last_error = MESSAGE_INVALID_CREDENTIALS
            return SignInResult(ok=False, error=MESSAGE_INVALID_CREDENTIALS)
        except AdminAuthError as exc:
            log_warning('CLIENT_SIGN_IN_FAILED', {'code': exc.code})
            self._last_error = exc.message
            return SignInResult(ok=False, error=exc.message)

        try:
            self._storage.set(self._storage_key, issued.session_token)
        except OSError as exc:
            # Sem cache o token se perderia: revoga a sessão recém-emitida
            log_error('CLIENT_STORAGE_WRITE_FAILED', {'error': str(exc)})
            await self._revoke_remote(issued.session_token)
            self._set_unauthenticated(MESSAGE_STORAGE_UNAVAILABLE)
            return SignInResult(ok=False, error=MESSAGE_STORAGE_UNAVAILABLE)

        self._admin = issued.admin
        self._state = AdminSessionState.AUTHENTICATED
        self._last_error = None
        log_info('CLIENT_SIGNED_IN', {'admin_id': issued.admin.admin_id})
        return SignInResult(ok=True)

    async def sign_out(self) -> None:
        """Apaga a sessão no servidor e, depois, o cache local. Nunca levanta."""
        token = self._storage.get(self._storage_key)
        if token:
            await self._revoke_remote(token)
            self._remove_cached_token()
        self._set_unauthenticated()

    async def _revoke_remote(self, token: str) -> None:
        try:
            await self._gateway.delete_session(token)
        except AdminAuthError as exc:
            log_warning('CLIENT_SIGN_OUT_REMOTE_FAILED', {'code': exc.code})
        except Exception as exc:
            log_error('CLIENT_SIGN_OUT_REMOTE_FAILED', {'error': repr(exc)})

    def _reject_cached_token(self) -> AdminAuthContext:
        # Token rejeitado não é tentado de novo sem novo login
        self._remove_cached_token()
        self._set_unauthenticated(MESSAGE_SIGN_IN_AGAIN)
        return self.context

    def _remove_cached_token(self) -> None:
        try:
            self._storage.remove(self._storage_key)
        except OSError as exc:
            log_error('CLIENT_STORAGE_WRITE_FAILED', {'error': str(exc)})

    def _set_unauthenticated(self, error: Optional[str] = None) -> None:
        self._admin = None
        self._state = AdminSessionState.UNAUTHENTICATED
        self._last_error = error

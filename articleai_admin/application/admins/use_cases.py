# caminho: articleai_admin/application/admins/use_cases.py
# Funções:
# - Casos de uso da autenticação de admin: autenticar, emitir sessão, validar sessão,
#   login composto (rate limit + bloqueio + auditoria), logout, revogação e limpeza
# - Cadastro/redefinição de senha usados pelo seed e pelo console

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Sequence
from uuid import uuid4

from pwdlib import PasswordHash
from pydantic import ValidationError

from articleai_admin.application.admins.dto import (
    AdminAuditLogOutput,
    AdminIdentityOutput,
    AdminSessionIssued,
    AdminSessionStatus,
)
from articleai_admin.config.settings import Settings
from articleai_admin.domain.admins.entities import AdminAuditLog, AdminIdentity, AdminSession
from articleai_admin.domain.admins.errors import (
    AdminAlreadyExists,
    AdminNotFound,
    AdminRecordShapeError,
    InvalidCredentials,
    SessionExpired,
    SessionIssueError,
    SessionNotFound,
    SignInLocked,
    SignInRateLimited,
    StoreUnavailableError,
    TransportError,
)
from articleai_admin.domain.admins.repositories import (
    AdminAuditRepository,
    AdminCredentialRepository,
    AdminSessionRepository,
)
from articleai_admin.infrastructure.security.tokens import SessionTokenService
from articleai_admin.shared.logging import log_error, log_info, log_warning
from articleai_admin.shared.rate_limit import NullSignInRateLimiter, SignInRateLimiter
from articleai_admin.shared.security_lock import NullSecurityLockManager, SecurityLockManager

_DUMMY_PASSWORD = 'articleai-admin-dummy-password'


@lru_cache(maxsize=8)
def _dummy_hash(hasher: PasswordHash) -> str:
    return hasher.hash(_DUMMY_PASSWORD)


@dataclass(slots=True)
class AdminAdapters:
    credentials: AdminCredentialRepository
    sessions: AdminSessionRepository
    audit: AdminAuditRepository


@dataclass(slots=True)
class IssuedSession:
    token: str
    session: AdminSession


class AdminAuthService:
    def __init__(
        self,
        adapters: AdminAdapters,
        settings: Settings,
        password_hasher: PasswordHash,
        token_service: SessionTokenService | None = None,
        security_lock: SecurityLockManager | None = None,
        sign_in_rate_limiter: SignInRateLimiter | None = None,
    ) -> None:
        self._credentials = adapters.credentials
        self._sessions = adapters.sessions
        self._audit = adapters.audit
        self._settings = settings
        self._hasher = password_hasher
        self._tokens = token_service or SessionTokenService()
        self._locks = security_lock or NullSecurityLockManager()
        self._sign_in_rate_limiter = sign_in_rate_limiter or NullSignInRateLimiter()

    # -- Autenticador -----------------------------------------------------------

    async def authenticate(self, admin_id: str, password: str) -> AdminIdentity:
        """Confere admin_id + senha contra o hash armazenado.

        Admin desconhecido e senha incorreta levantam o mesmo InvalidCredentials;
        no caso desconhecido um hash fictício é verificado para igualar o custo.
        Não altera nada (nem last_login_at).
        """
        admin_id_clean = (admin_id or '').strip()
        password_clean = (password or '').strip()
        if not admin_id_clean or not password_clean:
            log_warning('ADMIN_INVALID_CREDENTIALS', {'admin_id': admin_id_clean})
            raise InvalidCredentials()

        try:
            identity = await self._credentials.get_by_admin_id(admin_id_clean)
        except StoreUnavailableError as exc:
            log_error('ADMIN_CREDENTIAL_STORE_UNAVAILABLE', {'admin_id': admin_id_clean, 'error': str(exc)})
            raise TransportError() from exc

        if identity is None:
            self._hasher.verify(password_clean, _dummy_hash(self._hasher))
            log_warning('ADMIN_INVALID_CREDENTIALS', {'admin_id': admin_id_clean})
            raise InvalidCredentials()

        if not self._hasher.verify(password_clean, identity.password_hash):
            log_warning('ADMIN_INVALID_CREDENTIALS', {'admin_id': admin_id_clean})
            raise InvalidCredentials()

        return identity

    # -- Emissor ----------------------------------------------------------------

    async def issue_session(self, admin_id: str, *, client_ip: str = '', user_agent: str = '') -> IssuedSession:
        """Emite um token para um admin já autenticado nesta mesma operação."""
        token = self._tokens.generate()
        now = datetime.now(timezone.utc)
        session = AdminSession(
            session_id=str(uuid4()),
            admin_id=admin_id,
            token_hash=self._tokens.digest(token),
            expires_at=now + timedelta(seconds=self._settings.ADMIN_SESSION_EXPIRE_SECONDS),
            created_at=now,
            last_ip=(client_ip or '')[:64] or None,
            user_agent=(user_agent or '')[:128] or None,
        )

        try:
            session = await self._sessions.add(session)
        except StoreUnavailableError as exc:
            log_error('ADMIN_SESSION_ISSUE_FAILED', {'admin_id': admin_id, 'error': str(exc)})
            raise SessionIssueError() from exc

        try:
            await self._credentials.touch_last_login(admin_id, now)
        except StoreUnavailableError as exc:
            log_warning('ADMIN_LAST_LOGIN_UPDATE_FAILED', {'admin_id': admin_id, 'error': str(exc)})

        log_info('ADMIN_SESSION_ISSUED', {'admin_id': admin_id, 'session_id': session.session_id})
        return IssuedSession(token=token, session=session)

    # -- Validador --------------------------------------------------------------

    async def validate_session(self, token: str) -> str:
        """Resolve o token para o admin_id dono da sessão. Somente leitura."""
        stored = await self._lookup_session(token)
        return stored.admin_id

    async def describe_session(self, token: str) -> AdminSessionStatus:
        stored = await self._lookup_session(token)
        admin = await self.get_admin(stored.admin_id)
        return AdminSessionStatus(admin_id=stored.admin_id, admin=admin, expires_at=stored.expires_at)

    async def get_admin(self, admin_id: str) -> AdminIdentityOutput:
        try:
            identity = await self._credentials.get_by_admin_id(admin_id)
        except StoreUnavailableError as exc:
            log_error('ADMIN_CREDENTIAL_STORE_UNAVAILABLE', {'admin_id': admin_id, 'error': str(exc)})
            raise TransportError() from exc
        if identity is None:
            log_warning('ADMIN_SESSION_OWNER_MISSING', {'admin_id': admin_id})
            raise SessionNotFound()
        return self._to_output(identity)

    # -- Login / Logout ---------------------------------------------------------

    async def sign_in(
        self,
        admin_id: str,
        password: str,
        client_ip: str = '',
        user_agent: str = '',
    ) -> AdminSessionIssued:
        login = (admin_id or '').strip().lower()
        allowed, retry_in = await self._sign_in_rate_limiter.acquire(login or 'unknown')
        if not allowed:
            raise SignInRateLimited(retry_in_seconds=retry_in)

        lock_state = await self._locks.get_block(login) if login else None
        if lock_state is not None:
            log_warning(
                'ADMIN_SIGN_IN_BLOCKED_ATTEMPT',
                {'admin_id': login, 'ip': client_ip, 'user_agent': user_agent},
            )
            raise SignInLocked(retry_in_seconds=lock_state.ttl_seconds)

        try:
            identity = await self.authenticate(admin_id, password)
        except InvalidCredentials:
            if login:
                locked = await self._locks.register_failure(
                    login,
                    last_ip=(client_ip or '')[:64],
                    user_agent=(user_agent or '')[:128],
                )
                if locked:
                    log_warning('ADMIN_SIGN_IN_LOCKED', {'admin_id': login, 'ip': client_ip, 'user_agent': user_agent})
            raise

        await self._locks.reset_failures(login)
        admin = self._to_output(identity)
        issued = await self.issue_session(identity.admin_id, client_ip=client_ip, user_agent=user_agent)
        await self._record_audit(
            identity.admin_id,
            'sign_in',
            resource_id=issued.session.session_id,
            client_ip=client_ip,
            user_agent=user_agent,
            new_values={'expires_at': issued.session.expires_at.isoformat()},
        )
        return AdminSessionIssued(
            session_token=issued.token,
            expires_in=self._settings.ADMIN_SESSION_EXPIRE_SECONDS,
            expires_at=issued.session.expires_at,
            admin=admin,
        )

    async def sign_out(self, token: str, client_ip: str = '', user_agent: str = '') -> bool:
        """Apaga a sessão do token. Token ausente/desconhecido é no-op."""
        token_clean = (token or '').strip()
        if not token_clean:
            return False

        try:
            deleted = await self._sessions.delete_by_token_hash(self._tokens.digest(token_clean))
        except StoreUnavailableError as exc:
            log_error('ADMIN_SESSION_STORE_UNAVAILABLE', {'operation': 'sign_out', 'error': str(exc)})
            raise TransportError() from exc

        if deleted is None:
            log_info('ADMIN_SIGN_OUT_NOOP', {})
            return False

        log_info('ADMIN_SIGNED_OUT', {'admin_id': deleted.admin_id, 'session_id': deleted.session_id})
        await self._record_audit(
            deleted.admin_id,
            'sign_out',
            resource_id=deleted.session_id,
            client_ip=client_ip,
            user_agent=user_agent,
        )
        return True

    async def revoke_all_sessions(self, admin_id: str, client_ip: str = '', user_agent: str = '') -> int:
        try:
            revoked = await self._sessions.delete_by_admin(admin_id)
        except StoreUnavailableError as exc:
            log_error('ADMIN_SESSION_STORE_UNAVAILABLE', {'operation': 'revoke_all', 'error': str(exc)})
            raise TransportError() from exc

        log_info('ADMIN_SESSIONS_REVOKED', {'admin_id': admin_id, 'revoked': revoked})
        await self._record_audit(
            admin_id,
            'revoke_sessions',
            client_ip=client_ip,
            user_agent=user_agent,
            new_values={'revoked': revoked},
        )
        return revoked

    async def purge_expired_sessions(self) -> int:
        try:
            purged = await self._sessions.delete_expired(datetime.now(timezone.utc))
        except StoreUnavailableError as exc:
            log_error('ADMIN_SESSION_STORE_UNAVAILABLE', {'operation': 'purge', 'error': str(exc)})
            raise TransportError() from exc
        log_info('ADMIN_SESSIONS_PURGED', {'purged': purged})
        return purged

    async def list_audit_logs(self, admin_id: str, offset: int, limit: int) -> Sequence[AdminAuditLogOutput]:
        try:
            entries = await self._audit.list_by_admin(admin_id, offset, limit)
        except StoreUnavailableError as exc:
            log_error('ADMIN_AUDIT_STORE_UNAVAILABLE', {'admin_id': admin_id, 'error': str(exc)})
            raise TransportError() from exc
        return [AdminAuditLogOutput.model_validate(entry) for entry in entries]

    # -- Cadastro (seed / console) ----------------------------------------------

    async def register_admin(self, admin_id: str, password: str, full_name: str, email: str) -> AdminIdentityOutput:
        admin_id_clean = admin_id.strip()
        existing = await self._credentials.get_by_admin_id(admin_id_clean)
        if existing is not None:
            log_warning('ADMIN_ALREADY_EXISTS', {'admin_id': admin_id_clean})
            raise AdminAlreadyExists()

        identity = AdminIdentity(
            admin_id=admin_id_clean,
            password_hash=self._hasher.hash(password.strip()),
            full_name=full_name.strip(),
            email=email.strip().lower(),
        )
        identity = await self._credentials.add(identity)
        log_info('ADMIN_REGISTERED', {'admin_id': identity.admin_id})
        return self._to_output(identity)

    async def reset_password(self, admin_id: str, new_password: str) -> int:
        """Troca a senha e revoga todas as sessões do admin; retorna quantas foram revogadas."""
        updated = await self._credentials.update_password(admin_id.strip(), self._hasher.hash(new_password.strip()))
        if not updated:
            raise AdminNotFound()
        log_info('ADMIN_PASSWORD_RESET', {'admin_id': admin_id})
        return await self.revoke_all_sessions(admin_id.strip())

    # -- Helpers ----------------------------------------------------------------

    async def _lookup_session(self, token: str) -> AdminSession:
        token_clean = (token or '').strip()
        if not token_clean:
            raise SessionNotFound()

        try:
            stored = await self._sessions.get_by_token_hash(self._tokens.digest(token_clean))
        except StoreUnavailableError as exc:
            log_error('ADMIN_SESSION_STORE_UNAVAILABLE', {'operation': 'validate', 'error': str(exc)})
            raise TransportError() from exc

        if stored is None:
            log_info('ADMIN_SESSION_NOT_FOUND', {})
            raise SessionNotFound()
        if stored.is_expired():
            log_info('ADMIN_SESSION_EXPIRED', {'admin_id': stored.admin_id, 'session_id': stored.session_id})
            raise SessionExpired()
        return stored

    async def _record_audit(
        self,
        admin_id: str,
        action: str,
        *,
        resource_id: str | None = None,
        client_ip: str = '',
        user_agent: str = '',
        new_values: dict[str, Any] | None = None,
    ) -> None:
        entry = AdminAuditLog(
            admin_id=admin_id,
            action=action,
            resource_type='admin_session',
            resource_id=resource_id,
            ip_address=(client_ip or '')[:64] or None,
            user_agent=(user_agent or '')[:128] or None,
            new_values=new_values or {},
        )
        try:
            await self._audit.add(entry)
        except StoreUnavailableError as exc:
            log_warning('ADMIN_AUDIT_WRITE_FAILED', {'admin_id': admin_id, 'action': action, 'error': str(exc)})

    @staticmethod
    def _to_output(identity: AdminIdentity) -> AdminIdentityOutput:
        try:
            return AdminIdentityOutput.model_validate(identity)
        except ValidationError as exc:
            log_error('ADMIN_RECORD_INVALID', {'admin_id': getattr(identity, 'admin_id', None), 'error': str(exc)})
            raise AdminRecordShapeError() from exc

from datetime import datetime, timezone
from typing import Optional, Sequence

import pytest
from fastapi.testclient import TestClient
from pwdlib import PasswordHash

from articleai_admin.application.admins.use_cases import AdminAdapters, AdminAuthService
from articleai_admin.config.settings import Settings
from articleai_admin.domain.admins.entities import AdminAuditLog, AdminIdentity, AdminSession
from articleai_admin.domain.admins.errors import StoreUnavailableError
from articleai_admin.infrastructure.security.tokens import SessionTokenService
from articleai_admin.interfaces.api.app import create_application
from articleai_admin.interfaces.api.dependencies import get_admin_service
from articleai_admin.shared.security_lock import LockState

ROOT_ADMIN_ID = 'master_admin'
ROOT_ADMIN_PASSWORD = 'AdminPass123!'

# Hasher compartilhado por todos os testes
password_hasher = PasswordHash.recommended()


# 1. Settings de teste: sem arquivo de log, sem Redis e sem seed no banco
class TestSettings(Settings):
    __test__ = False

    DEPLOYMENT_ENVIRONMENT: str = 'test'
    LOG_LEVEL: str = 'DEBUG'
    LOG_FILE_ENABLED: bool = False
    REDIS_URL: str = ''
    BOOTSTRAP_ROOT_ADMIN: bool = False


# 2. Repositórios em memória que seguem os protocolos do domínio
class InMemoryCredentialRepository:
    def __init__(self):
        self.items: dict[str, AdminIdentity] = {}
        self.unavailable = False
        self.fail_touch = False

    def seed(self, admin_id, password, full_name='Master Admin', email='admin@articleai.example.com'):
        identity = AdminIdentity(
            admin_id=admin_id,
            password_hash=password_hasher.hash(password),
            full_name=full_name,
            email=email,
            id=len(self.items) + 1,
        )
        self.items[admin_id.lower()] = identity
        return identity

    async def get_by_admin_id(self, admin_id: str) -> Optional[AdminIdentity]:
        if self.unavailable:
            raise StoreUnavailableError('credential store down')
        return self.items.get(admin_id.lower())

    async def add(self, identity: AdminIdentity) -> AdminIdentity:
        identity.id = len(self.items) + 1
        self.items[identity.admin_id.lower()] = identity
        return identity

    async def touch_last_login(self, admin_id: str, at: datetime) -> None:
        if self.fail_touch:
            raise StoreUnavailableError('last_login update failed')
        identity = self.items.get(admin_id.lower())
        if identity is not None:
            identity.last_login_at = at

    async def update_password(self, admin_id: str, password_hash: str) -> bool:
        identity = self.items.get(admin_id.lower())
        if identity is None:
            return False
        identity.password_hash = password_hash
        return True


class InMemorySessionRepository:
    def __init__(self):
        self.items: dict[str, AdminSession] = {}
        self.fail_writes = False
        self.unavailable = False

    async def add(self, session_obj: AdminSession) -> AdminSession:
        if self.fail_writes:
            raise StoreUnavailableError('session store rejected the write')
        session_obj.id = len(self.items) + 1
        self.items[session_obj.token_hash] = session_obj
        return session_obj

    async def get_by_token_hash(self, token_hash: str) -> Optional[AdminSession]:
        if self.unavailable:
            raise StoreUnavailableError('session store down')
        return self.items.get(token_hash)

    async def delete_by_token_hash(self, token_hash: str) -> Optional[AdminSession]:
        if self.unavailable:
            raise StoreUnavailableError('session store down')
        return self.items.pop(token_hash, None)

    async def delete_by_admin(self, admin_id: str) -> int:
        doomed = [key for key, item in self.items.items() if item.admin_id.lower() == admin_id.lower()]
        for key in doomed:
            del self.items[key]
        return len(doomed)

    async def delete_expired(self, now: datetime) -> int:
        doomed = [key for key, item in self.items.items() if item.is_expired(now)]
        for key in doomed:
            del self.items[key]
        return len(doomed)


class InMemoryAuditRepository:
    def __init__(self):
        self.items: list[AdminAuditLog] = []

    async def add(self, entry: AdminAuditLog) -> AdminAuditLog:
        entry.id = len(self.items) + 1
        entry.created_at = datetime.now(timezone.utc)
        self.items.append(entry)
        return entry

    async def list_by_admin(self, admin_id: str, offset: int, limit: int) -> Sequence[AdminAuditLog]:
        entries = [entry for entry in reversed(self.items) if entry.admin_id == admin_id]
        return entries[offset : offset + limit]


# 3. Travas simples em memória (mesmo contrato das versões Redis)
class InMemorySecurityLockManager:
    def __init__(self, max_failures=3):
        self.max_failures = max_failures
        self.failures: dict[str, int] = {}
        self.blocked: set[str] = set()

    async def get_block(self, login):
        if login.lower() not in self.blocked:
            return None
        return LockState(login=login, ttl_seconds=900, last_ip='', user_agent='', blocked_at='')

    async def register_failure(self, login, *, last_ip='', user_agent=''):
        key = login.lower()
        self.failures[key] = self.failures.get(key, 0) + 1
        if self.failures[key] >= self.max_failures:
            self.blocked.add(key)
            return True
        return False

    async def reset_failures(self, login):
        self.failures.pop(login.lower(), None)


class OneShotRateLimiter:
    """Permite uma tentativa por login; as seguintes são recusadas."""

    def __init__(self):
        self.seen: set[str] = set()

    async def acquire(self, login):
        if login in self.seen:
            return False, 2
        self.seen.add(login)
        return True, 2


@pytest.fixture
def settings():
    return TestSettings()


@pytest.fixture
def credentials():
    repo = InMemoryCredentialRepository()
    repo.seed(ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD)
    return repo


@pytest.fixture
def sessions():
    return InMemorySessionRepository()


@pytest.fixture
def audit():
    return InMemoryAuditRepository()


@pytest.fixture
def adapters(credentials, sessions, audit):
    return AdminAdapters(credentials=credentials, sessions=sessions, audit=audit)


@pytest.fixture
def service(adapters, settings):
    return AdminAuthService(
        adapters=adapters,
        settings=settings,
        password_hasher=password_hasher,
        token_service=SessionTokenService(),
    )


@pytest.fixture
def app(settings, service):
    application = create_application(settings)
    # Sobrescreva a dependência ANTES de inicializar o TestClient
    application.dependency_overrides[get_admin_service] = lambda: service
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signed_in(client):
    response = client.post(
        '/admin/auth/sign-in',
        data={'admin_id': ROOT_ADMIN_ID, 'password': ROOT_ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return response.json()

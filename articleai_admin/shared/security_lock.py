# caminho: articleai_admin/shared/security_lock.py
# Funções:
# - SecurityLockManager: abstrai bloqueio temporário após falhas de login
# - RedisSecurityLockManager: implementa bloqueio via Redis
# - NullSecurityLockManager: no-op para cenários sem Redis (ex.: testes)
#
# As chaves usam o admin_id informado (normalizado), exista ele ou não:
# o bloqueio não revela quais identificadores estão cadastrados.

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

import redis.asyncio as redis


@dataclass(slots=True)
class LockState:
    login: str
    ttl_seconds: int
    last_ip: str | None = None
    user_agent: str | None = None
    blocked_at: str | None = None


class SecurityLockManager(Protocol):
    async def get_block(self, login: str) -> LockState | None: ...
    async def register_failure(self, login: str, *, last_ip: str = '', user_agent: str = '') -> bool: ...
    async def reset_failures(self, login: str) -> None: ...


class NullSecurityLockManager(SecurityLockManager):
    async def get_block(self, login: str) -> LockState | None:
        return None

    async def register_failure(self, login: str, *, last_ip: str = '', user_agent: str = '') -> bool:
        return False

    async def reset_failures(self, login: str) -> None:
        return None


class RedisSecurityLockManager(SecurityLockManager):
    def __init__(
        self,
        client: redis.Redis,
        *,
        block_duration_seconds: int,
        max_failures: int,
    ) -> None:
        self._client = client
        self._block_duration = max(1, block_duration_seconds)
        self._limit = max(1, max_failures)

    async def get_block(self, login: str) -> LockState | None:
        lock_key = self._lock_key(login)
        data = await self._client.hgetall(lock_key)
        if not data:
            return None
        ttl = await self._client.ttl(lock_key)
        ttl = ttl if ttl and ttl > 0 else self._block_duration
        return LockState(
            login=login.lower(),
            ttl_seconds=ttl,
            last_ip=data.get('last_ip') or None,
            user_agent=data.get('user_agent') or None,
            blocked_at=data.get('blocked_at') or None,
        )

    async def register_failure(self, login: str, *, last_ip: str = '', user_agent: str = '') -> bool:
        failure_key = self._failure_key(login)
        attempts = await self._client.incr(failure_key)
        if attempts == 1:
            await self._client.expire(failure_key, self._block_duration)

        if attempts >= self._limit:
            lock_key = self._lock_key(login)
            await self._client.hset(
                lock_key,
                mapping={
                    'attempts': str(attempts),
                    'last_ip': last_ip or '',
                    'user_agent': user_agent or '',
                    'blocked_at': datetime.now(timezone.utc).isoformat(),
                },
            )
            await self._client.expire(lock_key, self._block_duration)
            return True
        return False

    async def reset_failures(self, login: str) -> None:
        await self._client.delete(self._failure_key(login))

    @staticmethod
    def _failure_key(login: str) -> str:
        return f'security:sign-in:fail:{login.lower()}'

    @staticmethod
    def _lock_key(login: str) -> str:
        return f'security:sign-in:lock:{login.lower()}'

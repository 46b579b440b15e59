# caminho: articleai_admin/infrastructure/cache/redis.py
# Funções:
# - get_redis_client(): fornece instância Redis assíncrona via FastAPI Depends (None se REDIS_URL vazio)

from __future__ import annotations

from collections.abc import AsyncGenerator

import redis.asyncio as redis

from articleai_admin.config import get_settings


async def get_redis_client() -> AsyncGenerator[redis.Redis | None, None]:
    settings = get_settings()
    if not settings.REDIS_URL.strip():
        yield None
        return

    client = redis.from_url(settings.REDIS_URL, encoding='utf-8', decode_responses=True)
    try:
        yield client
    finally:
        await client.aclose()

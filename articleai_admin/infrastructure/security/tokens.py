# caminho: articleai_admin/infrastructure/security/tokens.py
# Funções:
# - SessionTokenService: gera tokens opacos de sessão e calcula o hash usado na busca

from __future__ import annotations

from hashlib import sha256
from secrets import token_urlsafe

from articleai_admin.config.constants import SESSION_TOKEN_BYTES


class SessionTokenService:
    """O token é um bearer opaco: o banco guarda apenas o SHA-256 em hexadecimal."""

    def __init__(self, token_bytes: int = SESSION_TOKEN_BYTES) -> None:
        self._token_bytes = max(SESSION_TOKEN_BYTES, int(token_bytes))

    def generate(self) -> str:
        return token_urlsafe(self._token_bytes)

    @staticmethod
    def digest(token: str) -> str:
        return sha256(token.encode('utf-8')).hexdigest()

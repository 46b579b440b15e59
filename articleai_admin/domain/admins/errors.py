# caminho: articleai_admin/domain/admins/errors.py
# Funções:
# - AdminAuthError: base das falhas de autenticação/sessão (code, message, status)
# - Taxonomia: credenciais inválidas, emissão, validação, transporte, throttling
# - Erros dos envelopes de fluxo (expirado / inválido)

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from articleai_admin.config.constants import MESSAGE_INVALID_CREDENTIALS, MESSAGE_SIGN_IN_AGAIN


class AdminAuthError(Exception):
    """Falha esperada do fluxo de autenticação; nunca é fatal para a interface."""

    code: str = 'ADMIN_AUTH_ERROR'
    message: str = 'Authentication error'
    status_code: int = HTTPStatus.UNAUTHORIZED

    def __init__(self, message: str | None = None, **extra: Any) -> None:
        self.message = message or type(self).message
        self.extra = extra
        super().__init__(self.message)

    def to_detail(self) -> dict[str, Any]:
        return {'code': self.code, 'message': self.message, **self.extra}


class InvalidCredentials(AdminAuthError):
    # Mesma mensagem para admin_id desconhecido e senha incorreta
    code = 'ADMIN_INVALID_CREDENTIALS'
    message = MESSAGE_INVALID_CREDENTIALS
    status_code = HTTPStatus.UNAUTHORIZED


class SessionIssueError(AdminAuthError):
    code = 'ADMIN_SESSION_ISSUE_FAILED'
    message = 'Failed to create session'
    status_code = HTTPStatus.SERVICE_UNAVAILABLE


class SessionValidationError(AdminAuthError):
    code = 'ADMIN_SESSION_INVALID'
    message = MESSAGE_SIGN_IN_AGAIN
    status_code = HTTPStatus.UNAUTHORIZED


class SessionNotFound(SessionValidationError):
    reason = 'not_found'


class SessionExpired(SessionValidationError):
    reason = 'expired'


class TransportError(AdminAuthError):
    code = 'ADMIN_STORE_UNAVAILABLE'
    message = 'Service unavailable'
    status_code = HTTPStatus.SERVICE_UNAVAILABLE


class AdminRecordShapeError(TransportError):
    code = 'ADMIN_RECORD_INVALID'
    message = 'Unexpected admin record'


class SignInRateLimited(AdminAuthError):
    code = 'ADMIN_SIGN_IN_RATE_LIMITED'
    message = 'Too many attempts'
    status_code = HTTPStatus.TOO_MANY_REQUESTS


class SignInLocked(AdminAuthError):
    code = 'ADMIN_SIGN_IN_LOCKED'
    message = 'Too many attempts'
    status_code = HTTPStatus.LOCKED


class AdminNotFound(AdminAuthError):
    code = 'ADMIN_NOT_FOUND'
    message = 'Admin not found'
    status_code = HTTPStatus.NOT_FOUND


class AdminAlreadyExists(AdminAuthError):
    code = 'ADMIN_ALREADY_EXISTS'
    message = 'Admin already exists'
    status_code = HTTPStatus.CONFLICT


class StoreUnavailableError(Exception):
    """Levantado pelos repositórios quando o banco não responde ou rejeita a escrita."""


class FlowEnvelopeError(AdminAuthError):
    code = 'FLOW_ENVELOPE_INVALID'
    message = 'Invalid flow state'
    status_code = HTTPStatus.BAD_REQUEST


class FlowEnvelopeInvalid(FlowEnvelopeError):
    pass


class FlowEnvelopeExpired(FlowEnvelopeError):
    code = 'FLOW_ENVELOPE_EXPIRED'
    message = 'Flow expired'
    status_code = HTTPStatus.GONE

# caminho: articleai_admin/client/gateway.py
# Funções:
# - AdminAuthGateway: protocolo das chamadas remotas usadas pelo cliente
# - HttpAdminAuthGateway: implementação via httpx contra a API HTTP
# - LocalAdminAuthGateway: implementação em processo sobre AdminAuthService

from __future__ import annotations

from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from articleai_admin.application.admins.dto import AdminIdentityOutput, AdminSessionIssued, AdminSessionStatus
from articleai_admin.application.admins.use_cases import AdminAuthService
from articleai_admin.domain.admins.errors import (
    AdminAuthError,
    AdminRecordShapeError,
    InvalidCredentials,
    SessionIssueError,
    SessionNotFound,
    SignInLocked,
    SignInRateLimited,
    TransportError,
)
from articleai_admin.shared.logging import log_error, log_warning


class AdminAuthGateway(Protocol):
    async def sign_in(self, admin_id: str, password: str) -> AdminSessionIssued:
        ...

    async def validate_session(self, token: str) -> str:
        ...

    async def get_admin(self, token: str, admin_id: str) -> AdminIdentityOutput:
        ...

    async def delete_session(self, token: str) -> None:
        ...


# Códigos de erro da API que o cliente reconstrói como exceções de domínio
_ERRORS_BY_CODE: dict[str, type[AdminAuthError]] = {
    InvalidCredentials.code: InvalidCredentials,
    SessionIssueError.code: SessionIssueError,
    SessionNotFound.code: SessionNotFound,
    SignInRateLimited.code: SignInRateLimited,
    SignInLocked.code: SignInLocked,
    TransportError.code: TransportError,
    AdminRecordShapeError.code: AdminRecordShapeError,
}


class HttpAdminAuthGateway:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip('/')
        self._timeout = httpx.Timeout(timeout)
        self._transport = transport

    async def sign_in(self, admin_id: str, password: str) -> AdminSessionIssued:
        response = await self._request(
            'POST',
            '/admin/auth/sign-in',
            data={'admin_id': admin_id, 'password': password},
        )
        if response.status_code == 401:
            raise InvalidCredentials()
        return self._parse(AdminSessionIssued, self._ensure_ok(response))

    async def validate_session(self, token: str) -> str:
        response = await self._request('GET', '/admin/auth/session', token=token)
        if response.status_code == 401:
            raise SessionNotFound()
        status = self._parse(AdminSessionStatus, self._ensure_ok(response))
        return status.admin_id

    async def get_admin(self, token: str, admin_id: str) -> AdminIdentityOutput:
        response = await self._request('GET', '/admin/me', token=token)
        if response.status_code == 401:
            raise SessionNotFound()
        admin = self._parse(AdminIdentityOutput, self._ensure_ok(response))
        if admin.admin_id.lower() != admin_id.lower():
            log_error('CLIENT_ADMIN_MISMATCH', {'expected': admin_id, 'received': admin.admin_id})
            raise AdminRecordShapeError()
        return admin

    async def delete_session(self, token: str) -> None:
        response = await self._request('POST', '/admin/auth/sign-out', token=token)
        if response.status_code not in (200, 204):
            self._ensure_ok(response)

    async def _request(self, method: str, path: str, *, token: str | None = None, **kwargs: Any) -> httpx.Response:
        headers = {'Authorization': f'Bearer {token}'} if token else {}
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                return await client.request(method, path, headers=headers, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
            # URL inválida e token não-ASCII no header também contam como falha de transporte
            log_error('CLIENT_TRANSPORT_ERROR', {'method': method, 'path': path, 'error': str(exc)})
            raise TransportError() from exc

    @staticmethod
    def _ensure_ok(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_success:
            return body if isinstance(body, dict) else {}

        detail = body.get('detail') if isinstance(body, dict) else None
        code = detail.get('code') if isinstance(detail, dict) else None
        error_cls = _ERRORS_BY_CODE.get(code or '', TransportError)
        log_warning('CLIENT_REQUEST_FAILED', {'status': response.status_code, 'code': code})
        raise error_cls()

    @staticmethod
    def _parse(model, body: dict[str, Any]):
        try:
            return model.model_validate(body)
        except ValidationError as exc:
            log_error('CLIENT_RESPONSE_INVALID', {'model': model.__name__, 'error': str(exc)})
            raise AdminRecordShapeError() from exc


class LocalAdminAuthGateway:
    """Gateway em processo: usado pelo console com acesso direto ao banco e nos testes."""

    def __init__(self, service: AdminAuthService) -> None:
        self._service = service

    async def sign_in(self, admin_id: str, password: str) -> AdminSessionIssued:
        return await self._service.sign_in(admin_id, password)

    async def validate_session(self, token: str) -> str:
        return await self._service.validate_session(token)

    async def get_admin(self, token: str, admin_id: str) -> AdminIdentityOutput:
        return await self._service.get_admin(admin_id)

    async def delete_session(self, token: str) -> None:
        await self._service.sign_out(token)

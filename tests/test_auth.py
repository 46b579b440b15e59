from http import HTTPStatus

from articleai_admin.application.admins.dto import AdminSessionIssued, AdminSessionStatus
from articleai_admin.infrastructure.security.tokens import SessionTokenService
from articleai_admin.interfaces.api.dependencies import resolve_client_ip

from conftest import ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD

SESSION_INVALID = {'code': 'ADMIN_SESSION_INVALID', 'message': 'Please sign in again'}


def _bearer(token):
    return {'Authorization': f'Bearer {token}'}


def test_sign_in_returns_session_token(client):
    response = client.post(
        '/admin/auth/sign-in',
        data={'admin_id': ROOT_ADMIN_ID, 'password': ROOT_ADMIN_PASSWORD},
    )

    assert response.status_code == HTTPStatus.OK

    # valida a resposta contra o schema correto
    data = AdminSessionIssued.model_validate(response.json())
    assert data.token_type == 'bearer'
    assert len(data.session_token) >= 32
    assert data.admin.admin_id == ROOT_ADMIN_ID
    assert data.admin.full_name == 'Master Admin'


def test_sign_in_wrong_password(client, sessions):
    response = client.post('/admin/auth/sign-in', data={'admin_id': ROOT_ADMIN_ID, 'password': 'wrong'})

    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.json() == {'detail': {'code': 'ADMIN_INVALID_CREDENTIALS', 'message': 'Invalid credentials'}}
    assert sessions.items == {}


def test_sign_in_unknown_admin_matches_wrong_password(client):
    unknown = client.post('/admin/auth/sign-in', data={'admin_id': 'ghost_admin', 'password': ROOT_ADMIN_PASSWORD})
    wrong = client.post('/admin/auth/sign-in', data={'admin_id': ROOT_ADMIN_ID, 'password': 'wrong'})

    assert unknown.status_code == wrong.status_code == HTTPStatus.UNAUTHORIZED
    assert unknown.json() == wrong.json()


def test_sign_in_missing_fields_is_invalid_credentials(client):
    response = client.post('/admin/auth/sign-in', data={})

    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.json()['detail']['code'] == 'ADMIN_INVALID_CREDENTIALS'


def test_sign_in_store_failure_is_service_unavailable(client, sessions):
    sessions.fail_writes = True

    response = client.post('/admin/auth/sign-in', data={'admin_id': ROOT_ADMIN_ID, 'password': ROOT_ADMIN_PASSWORD})

    assert response.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    assert response.json()['detail']['code'] == 'ADMIN_SESSION_ISSUE_FAILED'


def test_session_status(client, signed_in):
    response = client.get('/admin/auth/session', headers=_bearer(signed_in['session_token']))

    assert response.status_code == HTTPStatus.OK
    data = AdminSessionStatus.model_validate(response.json())
    assert data.admin_id == ROOT_ADMIN_ID
    assert data.admin.email == 'admin@articleai.example.com'


def test_session_status_without_token(client):
    response = client.get('/admin/auth/session')

    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.json() == {'detail': SESSION_INVALID}
    assert response.headers['www-authenticate'] == 'Bearer'


def test_session_status_unknown_token(client):
    response = client.get('/admin/auth/session', headers=_bearer('x' * 43))

    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.json() == {'detail': SESSION_INVALID}


def test_expired_and_missing_sessions_look_the_same(client, signed_in, sessions):
    stored = sessions.items[SessionTokenService.digest(signed_in['session_token'])]
    stored.expires_at = stored.created_at

    expired = client.get('/admin/me', headers=_bearer(signed_in['session_token']))
    missing = client.get('/admin/me', headers=_bearer('y' * 43))

    assert expired.status_code == missing.status_code == HTTPStatus.UNAUTHORIZED
    assert expired.json() == missing.json() == {'detail': SESSION_INVALID}


def test_protected_route_fails_closed_when_store_is_down(client, signed_in, sessions):
    sessions.unavailable = True

    response = client.get('/admin/me', headers=_bearer(signed_in['session_token']))

    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.json() == {'detail': SESSION_INVALID}


def test_me_returns_current_admin(client, signed_in):
    response = client.get('/admin/me', headers=_bearer(signed_in['session_token']))

    assert response.status_code == HTTPStatus.OK
    assert response.json()['admin_id'] == ROOT_ADMIN_ID
    assert response.json()['last_login_at'] is not None


def test_sign_out_prevents_replay(client, signed_in):
    headers = _bearer(signed_in['session_token'])

    response = client.post('/admin/auth/sign-out', headers=headers)
    assert response.status_code == HTTPStatus.NO_CONTENT

    response = client.get('/admin/me', headers=headers)
    assert response.status_code == HTTPStatus.UNAUTHORIZED


def test_sign_out_is_idempotent(client, signed_in):
    headers = _bearer(signed_in['session_token'])

    assert client.post('/admin/auth/sign-out', headers=headers).status_code == HTTPStatus.NO_CONTENT
    assert client.post('/admin/auth/sign-out', headers=headers).status_code == HTTPStatus.NO_CONTENT
    assert client.post('/admin/auth/sign-out').status_code == HTTPStatus.NO_CONTENT


def test_revoke_all_sessions(client, signed_in):
    other = client.post(
        '/admin/auth/sign-in',
        data={'admin_id': ROOT_ADMIN_ID, 'password': ROOT_ADMIN_PASSWORD},
    ).json()

    response = client.post('/admin/sessions/revoke-all', headers=_bearer(signed_in['session_token']))

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {'admin_id': ROOT_ADMIN_ID, 'revoked': 2}
    assert client.get('/admin/me', headers=_bearer(other['session_token'])).status_code == HTTPStatus.UNAUTHORIZED


def test_audit_logs_are_paginated(client, signed_in):
    headers = _bearer(signed_in['session_token'])
    client.post('/admin/auth/sign-in', data={'admin_id': ROOT_ADMIN_ID, 'password': ROOT_ADMIN_PASSWORD})

    response = client.get('/admin/audit-logs', params={'offset': 0, 'limit': 1}, headers=headers)

    assert response.status_code == HTTPStatus.OK
    data = response.json()
    assert data['offset'] == 0
    assert data['limit'] == 1
    assert len(data['items']) == 1
    assert data['items'][0]['action'] == 'sign_in'


def test_audit_logs_require_session(client):
    response = client.get('/admin/audit-logs')

    assert response.status_code == HTTPStatus.UNAUTHORIZED


def test_forwarded_for_is_ignored_without_trusted_proxy(client, sessions):
    response = client.post(
        '/admin/auth/sign-in',
        data={'admin_id': ROOT_ADMIN_ID, 'password': ROOT_ADMIN_PASSWORD},
        headers={'X-Forwarded-For': '203.0.113.9'},
    )

    assert response.status_code == HTTPStatus.OK
    [stored] = sessions.items.values()
    assert stored.last_ip == 'testclient'


def test_forwarded_for_is_used_behind_trusted_proxy():
    proxies = frozenset({'10.0.0.2'})

    assert resolve_client_ip('10.0.0.2', '203.0.113.9, 10.0.0.2', proxies) == '203.0.113.9'
    assert resolve_client_ip('198.51.100.7', '203.0.113.9', proxies) == '198.51.100.7'
    assert resolve_client_ip('10.0.0.2', '', proxies) == '10.0.0.2'

import asyncio

import pytest

from articleai_admin.client.gateway import LocalAdminAuthGateway
from articleai_admin.client.session_holder import AdminSessionHolder, AdminSessionState, ViewGate
from articleai_admin.client.storage import FileTokenStorage, MemoryTokenStorage
from articleai_admin.config.constants import ADMIN_TOKEN_STORAGE_KEY
from articleai_admin.domain.admins.errors import TransportError

from conftest import ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD


class CountingGateway(LocalAdminAuthGateway):
    def __init__(self, service):
        super().__init__(service)
        self.validations = 0
        self.deletions = 0

    async def validate_session(self, token):
        self.validations += 1
        return await super().validate_session(token)

    async def delete_session(self, token):
        self.deletions += 1
        await super().delete_session(token)


class BrokenDeleteGateway(LocalAdminAuthGateway):
    async def delete_session(self, token):
        raise TransportError()


@pytest.fixture
def storage():
    return MemoryTokenStorage()


@pytest.fixture
def gateway(service):
    return CountingGateway(service)


@pytest.fixture
def holder(gateway, storage):
    return AdminSessionHolder(gateway, storage)


def test_initial_state_is_loading(holder):
    assert holder.state is AdminSessionState.UNKNOWN
    assert holder.gate() is ViewGate.LOADING
    assert holder.context.loading is True
    assert holder.context.is_authenticated is False


@pytest.mark.asyncio
async def test_start_without_token_is_unauthenticated(holder, gateway):
    context = await holder.start()

    assert holder.state is AdminSessionState.UNAUTHENTICATED
    assert holder.gate() is ViewGate.LOGIN_PROMPT
    assert context.loading is False
    assert context.admin_user is None
    assert gateway.validations == 0


@pytest.mark.asyncio
async def test_sign_in_caches_token_and_authenticates(holder, storage, service):
    result = await holder.sign_in(ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD)

    assert result.ok is True
    assert holder.gate() is ViewGate.CONTENT
    assert holder.context.admin_user.admin_id == ROOT_ADMIN_ID

    token = storage.get(ADMIN_TOKEN_STORAGE_KEY)
    assert await service.validate_session(token) == ROOT_ADMIN_ID


@pytest.mark.asyncio
async def test_wrong_password_leaves_storage_untouched(holder, storage):
    storage.set(ADMIN_TOKEN_STORAGE_KEY, 'previous-token')

    result = await holder.sign_in(ROOT_ADMIN_ID, 'wrong')

    assert result.ok is False
    assert result.error == 'Invalid credentials'
    assert storage.get(ADMIN_TOKEN_STORAGE_KEY) == 'previous-token'
    assert holder.context.is_authenticated is False


@pytest.mark.asyncio
async def test_start_restores_valid_session(gateway, storage, service):
    issued = await service.sign_in(ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD)
    storage.set(ADMIN_TOKEN_STORAGE_KEY, issued.session_token)
    holder = AdminSessionHolder(gateway, storage)

    context = await holder.start()

    assert context.is_authenticated is True
    assert context.admin_user.admin_id == ROOT_ADMIN_ID
    assert holder.state is AdminSessionState.AUTHENTICATED


@pytest.mark.asyncio
async def test_stale_token_is_purged_and_not_retried(holder, gateway, storage):
    storage.set(ADMIN_TOKEN_STORAGE_KEY, 'stale-token')

    await holder.start()

    assert holder.state is AdminSessionState.UNAUTHENTICATED
    assert holder.last_error == 'Please sign in again'
    assert storage.get(ADMIN_TOKEN_STORAGE_KEY) is None
    assert gateway.validations == 1

    await holder.start()
    assert gateway.validations == 1


@pytest.mark.asyncio
async def test_transport_error_during_validation_fails_closed(holder, storage, sessions, service):
    issued = await service.sign_in(ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD)
    storage.set(ADMIN_TOKEN_STORAGE_KEY, issued.session_token)
    sessions.unavailable = True

    context = await holder.start()

    assert context.is_authenticated is False
    assert holder.gate() is ViewGate.LOGIN_PROMPT
    assert storage.get(ADMIN_TOKEN_STORAGE_KEY) is None


@pytest.mark.asyncio
async def test_sign_out_deletes_server_session_then_cache(holder, gateway, storage, service):
    await holder.sign_in(ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD)
    token = storage.get(ADMIN_TOKEN_STORAGE_KEY)

    await holder.sign_out()

    assert gateway.deletions == 1
    assert storage.get(ADMIN_TOKEN_STORAGE_KEY) is None
    assert holder.gate() is ViewGate.LOGIN_PROMPT
    assert await service.sign_out(token) is False


@pytest.mark.asyncio
async def test_sign_out_twice_does_not_raise(holder, gateway):
    await holder.sign_in(ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD)

    await holder.sign_out()
    await holder.sign_out()

    assert gateway.deletions == 1
    assert holder.state is AdminSessionState.UNAUTHENTICATED


@pytest.mark.asyncio
async def test_sign_out_clears_cache_even_if_server_fails(service, storage):
    holder = AdminSessionHolder(BrokenDeleteGateway(service), storage)
    await holder.sign_in(ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD)

    await holder.sign_out()

    assert storage.get(ADMIN_TOKEN_STORAGE_KEY) is None
    assert holder.context.is_authenticated is False


@pytest.mark.asyncio
async def test_last_sign_in_wins(holder, storage):
    await holder.sign_in(ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD)
    first = storage.get(ADMIN_TOKEN_STORAGE_KEY)
    await holder.sign_in(ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD)

    assert storage.get(ADMIN_TOKEN_STORAGE_KEY) != first


@pytest.mark.asyncio
async def test_file_storage_survives_restart(gateway, tmp_path):
    path = tmp_path / 'admin_storage.json'
    first = AdminSessionHolder(gateway, FileTokenStorage(path))
    await first.sign_in(ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD)

    restarted = AdminSessionHolder(gateway, FileTokenStorage(path))
    context = await restarted.start()

    assert context.is_authenticated is True
    assert context.admin_user.admin_id == ROOT_ADMIN_ID


def test_file_storage_treats_corrupt_file_as_empty(tmp_path):
    path = tmp_path / 'admin_storage.json'
    path.write_text('{not json', encoding='utf-8')
    storage = FileTokenStorage(path)

    assert storage.get(ADMIN_TOKEN_STORAGE_KEY) is None

    storage.set(ADMIN_TOKEN_STORAGE_KEY, 'abc')
    storage.set('other_key', 'kept')
    storage.remove(ADMIN_TOKEN_STORAGE_KEY)

    assert storage.get(ADMIN_TOKEN_STORAGE_KEY) is None
    assert storage.get('other_key') == 'kept'


class ExplodingGateway(LocalAdminAuthGateway):
    async def validate_session(self, token):
        raise RuntimeError('unexpected failure')


class SlowGateway(LocalAdminAuthGateway):
    def __init__(self, service):
        super().__init__(service)
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def validate_session(self, token):
        self.entered.set()
        await self.release.wait()
        return await super().validate_session(token)


@pytest.mark.asyncio
async def test_unexpected_gateway_error_fails_closed(service, storage):
    storage.set(ADMIN_TOKEN_STORAGE_KEY, 'cached-token')
    holder = AdminSessionHolder(ExplodingGateway(service), storage)

    context = await holder.start()

    assert holder.state is AdminSessionState.UNAUTHENTICATED
    assert context.loading is False
    assert holder.last_error == 'Please sign in again'
    assert storage.get(ADMIN_TOKEN_STORAGE_KEY) is None


@pytest.mark.asyncio
async def test_checking_shows_loading_until_validation_returns(service, storage):
    issued = await service.sign_in(ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD)
    storage.set(ADMIN_TOKEN_STORAGE_KEY, issued.session_token)
    gateway = SlowGateway(service)
    holder = AdminSessionHolder(gateway, storage)

    task = asyncio.create_task(holder.start())
    await gateway.entered.wait()

    assert holder.state is AdminSessionState.CHECKING
    assert holder.gate() is ViewGate.LOADING
    assert holder.context.loading is True
    assert holder.context.is_authenticated is False

    gateway.release.set()
    context = await task

    assert context.is_authenticated is True
    assert holder.gate() is ViewGate.CONTENT


@pytest.mark.asyncio
async def test_storage_write_failure_revokes_new_session(gateway, sessions, tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('not a directory', encoding='utf-8')
    holder = AdminSessionHolder(gateway, FileTokenStorage(blocker / 'store.json'))

    result = await holder.sign_in(ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD)

    assert result.ok is False
    assert result.error == 'Could not save the session on this device'
    assert holder.state is AdminSessionState.UNAUTHENTICATED
    assert holder.gate() is ViewGate.LOGIN_PROMPT
    assert gateway.deletions == 1
    assert sessions.items == {}


@pytest.mark.asyncio
async def test_sign_out_survives_storage_remove_failure(gateway, service, sessions):
    class ReadOnlyStorage(MemoryTokenStorage):
        def remove(self, key):
            raise PermissionError('read-only')

    issued = await service.sign_in(ROOT_ADMIN_ID, ROOT_ADMIN_PASSWORD)
    holder = AdminSessionHolder(gateway, ReadOnlyStorage({ADMIN_TOKEN_STORAGE_KEY: issued.session_token}))

    await holder.sign_out()

    assert holder.state is AdminSessionState.UNAUTHENTICATED
    assert gateway.deletions == 1
    assert sessions.items == {}

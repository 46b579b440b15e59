# caminho: articleai_admin/shared/system_bootstrap.py
# Funções:
# - bootstrap_root_admin(): garante o administrador inicial (master_admin) na inicialização

from __future__ import annotations

from articleai_admin.application.admins.use_cases import AdminAdapters, AdminAuthService
from articleai_admin.config import get_settings
from articleai_admin.config.settings import Settings
from articleai_admin.domain.admins.errors import AdminAlreadyExists, StoreUnavailableError
from articleai_admin.infrastructure.db.base import SessionLocal
from articleai_admin.infrastructure.repositories.admin_repository import (
    AdminAuditRepositoryImpl,
    AdminCredentialRepositoryImpl,
    AdminSessionRepositoryImpl,
)
from articleai_admin.interfaces.api.dependencies import password_hasher
from articleai_admin.shared.logging import log_error, log_info, log_warning


async def bootstrap_root_admin(settings: Settings | None = None) -> None:
    """Cria o administrador inicial caso ainda não exista.

    Falha de banco não derruba a aplicação: o erro é registrado e o login
    do seed simplesmente não funcionará até o banco voltar.
    """
    settings = settings or get_settings()
    admin_id = (settings.ROOT_ADMIN_ID or '').strip()
    password = (settings.ROOT_ADMIN_PASSWORD.get_secret_value() or '').strip()

    if not admin_id or not password:
        log_warning('ROOT_ADMIN_BOOTSTRAP_SKIPPED', {'reason': 'missing_credentials'})
        return

    async with SessionLocal() as session:
        service = AdminAuthService(
            adapters=AdminAdapters(
                credentials=AdminCredentialRepositoryImpl(session),
                sessions=AdminSessionRepositoryImpl(session),
                audit=AdminAuditRepositoryImpl(session),
            ),
            settings=settings,
            password_hasher=password_hasher,
        )
        try:
            admin = await service.register_admin(
                admin_id,
                password,
                full_name=settings.ROOT_ADMIN_FULL_NAME,
                email=str(settings.ROOT_ADMIN_EMAIL),
            )
        except AdminAlreadyExists:
            log_info('ROOT_ADMIN_BOOTSTRAP_EXISTS', {'admin_id': admin_id})
            return
        except StoreUnavailableError as exc:
            log_error('ROOT_ADMIN_BOOTSTRAP_FAILED', {'admin_id': admin_id, 'error': str(exc)})
            return

    log_info('ROOT_ADMIN_BOOTSTRAP_CREATED', {'admin_id': admin.admin_id})

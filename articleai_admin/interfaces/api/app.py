# caminho: articleai_admin/interfaces/api/app.py
# Funções:
# - create_application(): configura FastAPI com handlers de erro e rotas
# - admin_auth_error_handler(): converte AdminAuthError em {"detail": {code, message}}

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from articleai_admin.config import get_settings
from articleai_admin.config.settings import Settings
from articleai_admin.domain.admins.errors import AdminAuthError
from articleai_admin.interfaces.api.routers import admin, auth, flows
from articleai_admin.shared.logging import log_info, log_warning, setup_logging
from articleai_admin.shared.system_bootstrap import bootstrap_root_admin


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if settings.BOOTSTRAP_ROOT_ADMIN:
        await bootstrap_root_admin(settings)
    else:
        log_info('ROOT_ADMIN_BOOTSTRAP_SKIPPED', {'reason': 'disabled'})

    yield

    log_warning('APP_SHUTDOWN', {'reason': 'lifespan'})


async def admin_auth_error_handler(request: Request, exc: AdminAuthError) -> JSONResponse:
    headers = {}
    if int(exc.status_code) == 401:
        headers['WWW-Authenticate'] = 'Bearer'
    retry_in = exc.extra.get('retry_in_seconds')
    if retry_in:
        headers['Retry-After'] = str(retry_in)
    return JSONResponse(
        status_code=int(exc.status_code),
        content={'detail': exc.to_detail()},
        headers=headers or None,
    )


def create_application(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(level=settings.LOG_LEVEL, file_enabled=settings.LOG_FILE_ENABLED)

    app = FastAPI(
        title='articleai-admin',
        version='0.1.0',
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_exception_handler(AdminAuthError, admin_auth_error_handler)

    app.include_router(auth.router)
    app.include_router(admin.router)
    app.include_router(flows.router)

    return app

# caminho: tools/admin_console.py
# Funções:
# - Console do admin: sign-in / whoami / sign-out contra a API HTTP (token em arquivo local)
# - Manutenção direta no banco: reset-password e purge-sessions
#
# Uso:
#   python tools/admin_console.py sign-in --admin-id master_admin
#   python tools/admin_console.py whoami
#   python tools/admin_console.py sign-out
#   python tools/admin_console.py reset-password master_admin
#   python tools/admin_console.py purge-sessions

from __future__ import annotations

import argparse
import asyncio
import sys

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from articleai_admin.application.admins.use_cases import AdminAdapters, AdminAuthService
from articleai_admin.client.gateway import HttpAdminAuthGateway
from articleai_admin.client.session_holder import AdminSessionHolder, ViewGate
from articleai_admin.client.storage import FileTokenStorage
from articleai_admin.config import get_settings
from articleai_admin.domain.admins.errors import AdminAuthError, StoreUnavailableError
from articleai_admin.shared.logging import setup_logging

console = Console()


def _build_holder(base_url: str | None) -> AdminSessionHolder:
    settings = get_settings()
    gateway = HttpAdminAuthGateway(base_url or settings.ADMIN_API_BASE_URL)
    storage = FileTokenStorage(settings.ADMIN_TOKEN_STORAGE_PATH)
    return AdminSessionHolder(gateway, storage)


async def _local_service_call(operation):
    # Postgres só é necessário nos comandos de manutenção
    from articleai_admin.infrastructure.db.base import SessionLocal
    from articleai_admin.infrastructure.repositories.admin_repository import (
        AdminAuditRepositoryImpl,
        AdminCredentialRepositoryImpl,
        AdminSessionRepositoryImpl,
    )
    from articleai_admin.interfaces.api.dependencies import password_hasher

    async with SessionLocal() as session:
        service = AdminAuthService(
            adapters=AdminAdapters(
                credentials=AdminCredentialRepositoryImpl(session),
                sessions=AdminSessionRepositoryImpl(session),
                audit=AdminAuditRepositoryImpl(session),
            ),
            settings=get_settings(),
            password_hasher=password_hasher,
        )
        return await operation(service)


def _print_admin(holder: AdminSessionHolder) -> None:
    admin = holder.admin_user
    table = Table(title='Admin autenticado', show_header=False, title_style='bold bright_blue')
    table.add_row('admin_id', admin.admin_id)
    table.add_row('full_name', admin.full_name)
    table.add_row('email', str(admin.email))
    table.add_row('last_login_at', admin.last_login_at.isoformat() if admin.last_login_at else '-')
    console.print(table)


async def cmd_sign_in(args: argparse.Namespace) -> int:
    admin_id = args.admin_id or Prompt.ask('admin_id')
    password = args.password or Prompt.ask('password', password=True)

    holder = _build_holder(args.base_url)
    result = await holder.sign_in(admin_id, password)
    if not result.ok:
        console.print(f'[bold red]{result.error}[/bold red]')
        return 1
    _print_admin(holder)
    return 0


async def cmd_whoami(args: argparse.Namespace) -> int:
    holder = _build_holder(args.base_url)
    await holder.start()
    if holder.gate() is not ViewGate.CONTENT:
        console.print(f'[yellow]{holder.last_error or "Not signed in"}[/yellow]')
        return 1
    _print_admin(holder)
    return 0


async def cmd_sign_out(args: argparse.Namespace) -> int:
    holder = _build_holder(args.base_url)
    await holder.sign_out()
    console.print('[green]Signed out[/green]')
    return 0


async def cmd_reset_password(args: argparse.Namespace) -> int:
    password = args.password or Prompt.ask('new password', password=True)
    revoked = await _local_service_call(lambda service: service.reset_password(args.admin_id, password))
    console.print(f'[green]Password updated for {args.admin_id}; {revoked} session(s) revoked[/green]')
    return 0


async def cmd_purge_sessions(args: argparse.Namespace) -> int:
    purged = await _local_service_call(lambda service: service.purge_expired_sessions())
    console.print(f'[green]{purged} expired session(s) removed[/green]')
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='admin_console', description='ArticleAI admin console')
    parser.add_argument('--base-url', default=None, help='API base URL (default: ADMIN_API_BASE_URL)')
    sub = parser.add_subparsers(dest='command', required=True)

    sign_in = sub.add_parser('sign-in', help='Sign in and cache the session token')
    sign_in.add_argument('--admin-id')
    sign_in.add_argument('--password')
    sign_in.set_defaults(handler=cmd_sign_in)

    sub.add_parser('whoami', help='Validate the cached token').set_defaults(handler=cmd_whoami)
    sub.add_parser('sign-out', help='Delete the session and clear the cache').set_defaults(handler=cmd_sign_out)

    reset = sub.add_parser('reset-password', help='Set a new password and revoke all sessions')
    reset.add_argument('admin_id')
    reset.add_argument('--password')
    reset.set_defaults(handler=cmd_reset_password)

    sub.add_parser('purge-sessions', help='Delete expired sessions').set_defaults(handler=cmd_purge_sessions)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(level=settings.LOG_LEVEL, file_enabled=False)
    try:
        return asyncio.run(args.handler(args))
    except AdminAuthError as exc:
        console.print(f'[bold red]{exc.code}: {exc.message}[/bold red]')
        return 1
    except StoreUnavailableError as exc:
        console.print(f'[bold red]Database unavailable: {exc}[/bold red]')
        return 1


if __name__ == '__main__':
    sys.exit(main())

# caminho: articleai_admin/infrastructure/db/models.py
# Funções:
# - Declarar modelos SQLAlchemy (AdminCredentialModel, AdminSessionModel, AdminAuditLogModel)

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from articleai_admin.infrastructure.db.base import Base


class AdminCredentialModel(Base):
    __tablename__ = 'admin_credentials'

    id: Mapped[int] = mapped_column(primary_key=True)
    admin_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    sessions: Mapped[list['AdminSessionModel']] = relationship('AdminSessionModel', back_populates='admin', cascade='all,delete-orphan')

    __table_args__ = (
        Index('ix_admin_credentials_admin_id_ci', func.lower(admin_id), unique=True),
        CheckConstraint('char_length(admin_id) BETWEEN 1 AND 64', name='ck_admin_credentials_admin_id_len'),
    )


class AdminSessionModel(Base):
    __tablename__ = 'admin_sessions'

    id: Mapped[int] = mapped_column(primary_key=True)
    session_id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)
    admin_id: Mapped[str] = mapped_column(
        ForeignKey('admin_credentials.admin_id', ondelete='CASCADE', onupdate='CASCADE'),
        nullable=False,
        index=True,
    )
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_ip: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    admin: Mapped['AdminCredentialModel'] = relationship('AdminCredentialModel', back_populates='sessions')

    __table_args__ = (Index('ix_admin_sessions_admin_expires', 'admin_id', 'expires_at'),)


class AdminAuditLogModel(Base):
    __tablename__ = 'admin_audit_logs'

    id: Mapped[int] = mapped_column(primary_key=True)
    admin_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    resource_type: Mapped[str] = mapped_column(String(64), nullable=False)
    resource_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    new_values: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

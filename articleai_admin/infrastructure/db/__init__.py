# caminho: articleai_admin/infrastructure/db/__init__.py
# Funções:
# - expõe Base e os modelos (metadata completa para create_all/migrations)

from __future__ import annotations

from articleai_admin.infrastructure.db.base import Base
from articleai_admin.infrastructure.db import models  # noqa: F401

__all__ = ['Base']

# caminho: articleai_admin/main.py
# Funções:
# - app: instancia FastAPI criada via create_application()

from __future__ import annotations

from articleai_admin.interfaces.api.app import create_application

app = create_application()

# caminho: articleai_admin/client/storage.py
# Funções:
# - TokenStorage: protocolo chave/valor persistente do cliente (análogo ao localStorage)
# - FileTokenStorage: arquivo JSON com as chaves do cliente
# - MemoryTokenStorage: armazenamento volátil (testes / processos curtos)

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Protocol

from articleai_admin.shared.logging import log_warning


class TokenStorage(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryTokenStorage:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileTokenStorage:
    """Guarda as chaves do cliente em um único arquivo JSON.

    Arquivo ausente ou corrompido equivale a armazenamento vazio. A escrita
    substitui o arquivo inteiro, então a última gravação vence.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) and value else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)

    def _load(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding='utf-8') or '{}')
        except (OSError, ValueError) as exc:
            log_warning('CLIENT_STORAGE_UNREADABLE', {'path': str(self._path), 'error': str(exc)})
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + '.tmp')
        tmp_path.write_text(json.dumps(data, indent=2), encoding='utf-8')
        tmp_path.chmod(0o600)
        tmp_path.replace(self._path)

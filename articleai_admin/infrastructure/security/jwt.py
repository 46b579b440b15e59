# caminho: articleai_admin/infrastructure/security/jwt.py
# Funções:
# - FlowEnvelopeCodec: assina e abre envelopes JWT com o estado de fluxos multi-etapa

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jwt import DecodeError, ExpiredSignatureError, InvalidTokenError, decode, encode
from pydantic import SecretStr

from articleai_admin.domain.admins.errors import FlowEnvelopeExpired, FlowEnvelopeInvalid


@dataclass(slots=True)
class FlowPayload:
    flow: str
    state: dict[str, Any]
    expires_at: datetime


class FlowEnvelopeCodec:
    def __init__(self, secret_key: SecretStr, algorithm: str) -> None:
        self._secret = secret_key
        self._algorithm = algorithm

    def seal(self, flow: str, state: dict[str, Any], expires_seconds: int) -> tuple[str, datetime]:
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_seconds)
        payload = {
            'flow': flow,
            'state': state,
            'exp': expires_at,
        }
        token = encode(payload, self._secret.get_secret_value(), algorithm=self._algorithm)
        return token, expires_at

    def open(self, envelope: str, flow: str) -> FlowPayload:
        try:
            payload = decode(
                envelope,
                self._secret.get_secret_value(),
                algorithms=[self._algorithm],
                options={'require': ['exp', 'flow', 'state']},
            )
        except ExpiredSignatureError as exc:
            raise FlowEnvelopeExpired() from exc
        except (InvalidTokenError, DecodeError) as exc:
            raise FlowEnvelopeInvalid() from exc

        if payload.get('flow') != flow or not isinstance(payload.get('state'), dict):
            raise FlowEnvelopeInvalid()

        return FlowPayload(
            flow=payload['flow'],
            state=payload['state'],
            expires_at=datetime.fromtimestamp(int(payload['exp']), tz=timezone.utc),
        )

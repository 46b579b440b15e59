# caminho: articleai_admin/application/flows/use_cases.py
# Funções:
# - CheckoutFlowService: sela e abre o envelope do fluxo de seleção de publishers

from __future__ import annotations

from pydantic import ValidationError

from articleai_admin.application.flows.dto import (
    FlowEnvelopeResponse,
    PublisherSelectionOpened,
    PublisherSelectionState,
)
from articleai_admin.config.constants import FLOW_PUBLISHER_SELECTION
from articleai_admin.config.settings import Settings
from articleai_admin.domain.admins.errors import FlowEnvelopeInvalid
from articleai_admin.infrastructure.security.jwt import FlowEnvelopeCodec
from articleai_admin.shared.logging import log_info, log_warning


class CheckoutFlowService:
    def __init__(self, codec: FlowEnvelopeCodec, settings: Settings) -> None:
        self._codec = codec
        self._settings = settings

    def seal_publisher_selection(self, state: PublisherSelectionState) -> FlowEnvelopeResponse:
        envelope, expires_at = self._codec.seal(
            FLOW_PUBLISHER_SELECTION,
            state.model_dump(mode='json', exclude={'total_amount'}),
            self._settings.FLOW_ENVELOPE_EXPIRE_SECONDS,
        )
        log_info(
            'FLOW_ENVELOPE_SEALED',
            {'flow': FLOW_PUBLISHER_SELECTION, 'publishers': len(state.selected_publishers)},
        )
        return FlowEnvelopeResponse(envelope=envelope, flow=FLOW_PUBLISHER_SELECTION, expires_at=expires_at)

    def open_publisher_selection(self, envelope: str) -> PublisherSelectionOpened:
        try:
            payload = self._codec.open(envelope, FLOW_PUBLISHER_SELECTION)
        except FlowEnvelopeInvalid:
            log_warning('FLOW_ENVELOPE_INVALID', {'flow': FLOW_PUBLISHER_SELECTION})
            raise

        try:
            state = PublisherSelectionState.model_validate(payload.state)
        except ValidationError as exc:
            log_warning('FLOW_ENVELOPE_STATE_INVALID', {'flow': FLOW_PUBLISHER_SELECTION, 'error': str(exc)})
            raise FlowEnvelopeInvalid() from exc

        return PublisherSelectionOpened(flow=payload.flow, expires_at=payload.expires_at, state=state)

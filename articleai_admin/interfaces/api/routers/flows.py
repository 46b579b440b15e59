# caminho: articleai_admin/interfaces/api/routers/flows.py
# Funções:
# - Envelope assinado do fluxo seleção de publishers -> artigo -> pagamento

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from articleai_admin.application.flows.dto import (
    FlowEnvelopeOpenRequest,
    FlowEnvelopeResponse,
    PublisherSelectionOpened,
    PublisherSelectionState,
)
from articleai_admin.application.flows.use_cases import CheckoutFlowService
from articleai_admin.interfaces.api.dependencies import get_checkout_flow_service

router = APIRouter(prefix='/flows', tags=['flows'])


@router.post(
    '/publisher-selection',
    response_model=FlowEnvelopeResponse,
    status_code=status.HTTP_201_CREATED,
    summary='Selar seleção de publishers',
    description="""Serializa os publishers escolhidos, a rota atual e o rascunho do artigo em um envelope JWT assinado.

O envelope expira em `FLOW_ENVELOPE_EXPIRE_SECONDS` e sobrevive ao redirecionamento de login.
""",
)
def seal_publisher_selection(
    payload: PublisherSelectionState,
    service: CheckoutFlowService = Depends(get_checkout_flow_service),
) -> FlowEnvelopeResponse:
    return service.seal_publisher_selection(payload)


@router.post(
    '/publisher-selection/open',
    response_model=PublisherSelectionOpened,
    status_code=status.HTTP_200_OK,
    summary='Abrir seleção de publishers',
    description="""Valida assinatura e expiração do envelope e devolve o estado com o `total_amount` em centavos.

Envelope expirado retorna 410 `FLOW_ENVELOPE_EXPIRED`; adulterado ou de outro fluxo retorna 400 `FLOW_ENVELOPE_INVALID`.
""",
)
def open_publisher_selection(
    payload: FlowEnvelopeOpenRequest,
    service: CheckoutFlowService = Depends(get_checkout_flow_service),
) -> PublisherSelectionOpened:
    return service.open_publisher_selection(payload.envelope)

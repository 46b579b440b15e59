# caminho: articleai_admin/application/flows/dto.py
# Funções:
# - Estado do fluxo seleção de publishers -> escrita do artigo -> pagamento
# - Requests/responses do envelope assinado que carrega esse estado entre redirecionamentos

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class SelectedPublisher(BaseModel):
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)

    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=200)
    price_per_article: int = Field(ge=0, description='Preço em centavos')


class ArticleDraft(BaseModel):
    model_config = ConfigDict(extra='forbid')

    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    meta_description: Optional[str] = None
    tags: Optional[str] = None


class PublisherSelectionState(BaseModel):
    model_config = ConfigDict(extra='ignore')

    selected_publishers: list[SelectedPublisher] = Field(default_factory=list)
    current_route: Optional[str] = Field(default=None, max_length=256)
    form_data: Optional[ArticleDraft] = None

    @computed_field
    @property
    def total_amount(self) -> int:
        return sum(publisher.price_per_article for publisher in self.selected_publishers)


class FlowEnvelopeResponse(BaseModel):
    envelope: str
    flow: str
    expires_at: datetime


class FlowEnvelopeOpenRequest(BaseModel):
    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True)

    envelope: str = Field(min_length=1)


class PublisherSelectionOpened(BaseModel):
    flow: str
    expires_at: datetime
    state: PublisherSelectionState

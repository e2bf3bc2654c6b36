# orca_buffet/agent_gemini/gemini_service.py
from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Sequence

from google import genai
from google.genai import types
from pydantic import BaseModel, Field, ValidationError

from . import prompt_gemini
from ..quote.config import AppConfig
from ..quote.dto import CostHint, MenuSection, Quote
from ..quote.exceptions import AIGenerationError, MalformedAIResponse, MissingCredential, QuoteError

logger = logging.getLogger(__name__)


# ───────────────────────────────────────────────────────────────
# Schemas de resposta (formato JSON pedido ao modelo)
# ───────────────────────────────────────────────────────────────
class AIIngredient(BaseModel):
    name: str = Field(description="Nome do ingrediente.")
    qty: float = Field(description="Quantidade total necessária.")
    unit: str = Field(description="Unidade de medida (kg, g, L, ml, unidade, caixa, pacote).")
    unitCost: float = Field(description="Custo estimado por unidade, preços médios de mercado no Brasil.")
    totalCost: float = Field(description="Custo total do item (quantidade * custo unitário).")


class AIMenuItem(BaseModel):
    name: str = Field(description="Nome do prato/item principal do menu.")
    ingredients: List[AIIngredient] = Field(description="Lista de ingredientes e seus custos.")


class AILaborDetail(BaseModel):
    role: str = Field(description="Função do profissional (ex.: Cozinheiro, Garçom).")
    count: int = Field(description="Quantidade de profissionais para essa função.")
    costPerUnit: float = Field(description="Custo por profissional (diária, hora, etc.).")
    totalCost: float = Field(description="Custo total para essa função (count * costPerUnit).")


class AIOtherCost(BaseModel):
    name: str = Field(description="Nome do custo (ex.: Frete).")
    cost: float = Field(description="Valor do custo.")


class AITotals(BaseModel):
    ingredients: float
    labor: float
    laborDetails: List[AILaborDetail] = Field(default_factory=list)
    productionCost: float = 0.0
    otherCosts: List[AIOtherCost] = Field(default_factory=list)
    tax: float
    totalCost: float
    suggestedPrice: float


class AIEstimate(BaseModel):
    eventType: str = Field(description="Tipo de evento (ex.: Casamento, Aniversário, Corporativo).")
    guests: int = Field(description="Número de convidados.")
    consumptionAverages: List[str] = Field(description="Premissas de consumo por pessoa usadas no cálculo.")
    menuItems: List[AIMenuItem] = Field(description="Pratos do menu, cada um com seus ingredientes.")
    totals: AITotals


def format_cost_hints(cost_hints: Sequence[CostHint]) -> str:
    lines = [f'- Custo de "{h.name}": {h.cost:g} BRL' for h in cost_hints if h.name.strip()]
    return "\n".join(lines) or prompt_gemini.SEM_CUSTOS


class GeminiQuoteGenerator:
    """Colaborador de IA sobre google-genai (modo JSON + schema pydantic)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        client: Any = None,
        app_cfg: Optional[AppConfig] = None,
    ) -> None:
        self._cfg = app_cfg or AppConfig()
        self._api_key = api_key or self._cfg.gemini_api_key
        self._model = model or self._cfg.gemini_model
        self._temperature = self._cfg.gemini_temperature if temperature is None else temperature
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise MissingCredential("A chave da API Gemini está ausente. Por favor, configure-a.")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def _generate(self, contents: str, schema: type) -> Any:
        client = self._get_client()
        response = await client.aio.models.generate_content(
            model=self._model,
            contents=contents,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
                temperature=self._temperature,
            ),
        )
        return schema.model_validate(json.loads(response.text or ""))

    async def generate_quote_from_text(self, description: str, cost_hints: Sequence[CostHint]) -> Quote:
        contents = prompt_gemini.instrucoes_orcamento.format(
            description=description,
            cost_hints=format_cost_hints(cost_hints),
            freight_per_guest=self._cfg.freight_per_guest,
            tax_rate=self._cfg.tax_rate,
            margin=self._cfg.default_margin,
        )
        try:
            estimate = await self._generate(contents, AIEstimate)
        except QuoteError:
            raise
        except (json.JSONDecodeError, ValidationError) as ex:
            logger.exception("Resposta da IA fora do schema (orçamento).")
            raise MalformedAIResponse(
                "A IA retornou um formato inválido. Tente novamente ou simplifique o pedido."
            ) from ex
        except Exception as ex:
            logger.exception("Erro ao chamar a API Gemini (orçamento).")
            raise AIGenerationError(
                "Não foi possível gerar o orçamento. Verifique a chave da API e tente novamente."
            ) from ex

        logger.info("IA gerou orçamento: %s, %s convidados", estimate.eventType, estimate.guests)
        return Quote.model_validate(estimate.model_dump())

    async def generate_menu_section(self, name: str, guest_count: int) -> MenuSection:
        contents = prompt_gemini.instrucoes_receita.format(name=name, guest_count=guest_count)
        try:
            item = await self._generate(contents, AIMenuItem)
        except QuoteError:
            raise
        except (json.JSONDecodeError, ValidationError) as ex:
            logger.exception("Resposta da IA fora do schema (receita '%s').", name)
            raise MalformedAIResponse(
                "A IA retornou um formato inválido ao calcular a receita. Tente novamente."
            ) from ex
        except Exception as ex:
            logger.exception("Erro ao chamar a API Gemini (receita '%s').", name)
            raise AIGenerationError(
                "Não foi possível calcular a receita. Verifique a chave da API e tente novamente."
            ) from ex

        return MenuSection.model_validate(item.model_dump())

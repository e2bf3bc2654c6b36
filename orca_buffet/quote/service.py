# orca_buffet/quote/service.py
from __future__ import annotations

from typing import List, Optional, Protocol, Sequence
import logging

from .config import AppConfig
from .dto import CostHint, MenuSection, PlanGate, Quote, new_temp_id, now_iso
from .engine import apply_margin, kitchen_predicate, refresh_totals
from .exceptions import AIGenerationError, CollaboratorError, InvalidEdit, PersistenceError, QuoteError
from .storage import QuoteStore
from .validators import check_plan_gate, coerce_number

logger = logging.getLogger(__name__)


class QuoteGenerator(Protocol):
    """Contrato do colaborador de IA."""
    async def generate_quote_from_text(self, description: str, cost_hints: Sequence[CostHint]) -> Quote: ...
    async def generate_menu_section(self, name: str, guest_count: int) -> MenuSection: ...


def normalize_draft(draft: Quote, app_cfg: Optional[AppConfig] = None) -> Quote:
    """
    Prepara o rascunho vindo da IA:
    id temporário -> status/entrega iniciais -> alíquota e margem da config -> totais recalculados.
    Os números de totais devolvidos pela IA são descartados.
    """
    cfg = app_cfg or AppConfig()
    draft = draft.model_copy(update={
        "id": new_temp_id(),
        "status": "draft",
        "delivery_status": "pending",
        "created_at": now_iso(),
        "tax_rate": cfg.tax_rate,
        "margin_percent": cfg.default_margin,
    })
    return refresh_totals(draft, kitchen_predicate(cfg.kitchen_keywords))


async def generate_quote(
    description: str,
    generator: QuoteGenerator,
    cost_hints: Optional[Sequence[CostHint]] = None,
    gate: Optional[PlanGate] = None,
    app_cfg: Optional[AppConfig] = None,
) -> Quote:
    """
    Ponto de entrada da geração. Orquesta:
    validação -> plano -> IA -> rascunho normalizado (Quote).
    """
    text = (description or "").strip()
    if not text:
        raise InvalidEdit("Por favor, descreva o evento para gerar o orçamento.")
    if gate is not None:
        check_plan_gate(gate)

    try:
        draft = await generator.generate_quote_from_text(text, list(cost_hints or []))
    except QuoteError:
        logger.exception("Erro de domínio ao gerar o orçamento pela IA.")
        raise
    except Exception as ex:
        logger.exception("Falha não controlada ao gerar o orçamento.")
        raise AIGenerationError(f"Não foi possível gerar o orçamento: {ex}") from ex

    quote = normalize_draft(draft, app_cfg)
    logger.info(
        "Rascunho gerado: %s (%s convidados, %s seções)",
        quote.id, quote.guest_count, len(quote.menu_sections),
    )
    return quote


async def list_quotes(store: QuoteStore) -> List[Quote]:
    try:
        return await store.list_quotes()
    except CollaboratorError:
        logger.exception("Erro ao listar orçamentos.")
        raise
    except Exception as ex:
        logger.exception("Falha não controlada ao listar orçamentos.")
        raise PersistenceError(f"Falha ao carregar os orçamentos: {ex}") from ex


async def save_quote(quote: Quote, store: QuoteStore, margin_percent: Optional[float] = None) -> Quote:
    """Cria quando o id é temporário, atualiza caso contrário. Totais salvos já com a margem."""
    margin = quote.margin_percent if margin_percent is None else coerce_number(margin_percent)
    to_save = quote.model_copy(update={
        "totals": apply_margin(quote.totals, margin),
        "margin_percent": margin,
    })
    try:
        if to_save.is_temporary:
            saved = await store.create_quote(to_save)
        else:
            saved = await store.update_quote(to_save)
    except CollaboratorError:
        logger.exception("Erro ao salvar o orçamento %s.", to_save.id)
        raise
    except Exception as ex:
        logger.exception("Falha não controlada ao salvar o orçamento %s.", to_save.id)
        raise PersistenceError(f"Falha ao salvar o orçamento: {ex}") from ex
    logger.info("Orçamento salvo pelo serviço: %s", saved.id)
    return saved

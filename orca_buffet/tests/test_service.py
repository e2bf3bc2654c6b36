# orca_buffet/tests/test_service.py
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Sequence

import pytest

from orca_buffet.quote.config import AppConfig
from orca_buffet.quote.dto import CostHint, MenuSection, PlanGate, Quote, Totals
from orca_buffet.quote.engine import refresh_totals
from orca_buffet.quote.exceptions import AIGenerationError, InvalidEdit, PersistenceError, PlanLimitReached
from orca_buffet.quote.service import generate_quote, list_quotes, normalize_draft, save_quote
from orca_buffet.quote.storage import InMemoryQuoteStore


# ------------------------------ Helpers --------------------------------------


class _FakeGenerator:
    def __init__(self, draft: Quote = None, error: Exception = None) -> None:
        self.draft = draft
        self.error = error
        self.calls: List[tuple] = []

    async def generate_quote_from_text(self, description: str, cost_hints: Sequence[CostHint]) -> Quote:
        self.calls.append((description, list(cost_hints)))
        if self.error is not None:
            raise self.error
        return self.draft

    async def generate_menu_section(self, name: str, guest_count: int) -> MenuSection:
        raise NotImplementedError


def _ai_draft(sample_quote: Quote) -> Quote:
    """Rascunho como viria da IA: números de totais inconsistentes, sem id/status próprios."""
    stale = sample_quote.totals.model_copy(update={"total_cost": 1.0, "suggested_price": 1.4, "tax_amount": 99.0})
    return sample_quote.model_copy(update={"id": "", "status": "approved", "tax_rate": 0.0, "totals": stale})


def _record(quote_id: str, created_at: str) -> Dict[str, Any]:
    return Quote(id=quote_id, event_label=quote_id, created_at=created_at).to_record()


# ------------------------------ generate_quote -------------------------------


def test_generate_quote_normalizes_draft(sample_quote: Quote, app_cfg: AppConfig) -> None:
    gen = _FakeGenerator(draft=_ai_draft(sample_quote))
    hints = [CostHint(name="Garçom", cost=120)]
    quote = asyncio.run(generate_quote("Casamento para 100 pessoas", gen, hints, app_cfg=app_cfg))

    assert gen.calls == [("Casamento para 100 pessoas", hints)]
    assert quote.is_temporary
    assert quote.status == "draft"
    assert quote.delivery_status == "pending"
    assert quote.tax_rate == 8
    assert quote.margin_percent == 40
    assert quote.totals.total_cost == pytest.approx(2214)
    assert quote.totals.suggested_price == 0


def test_generate_quote_requires_description(app_cfg: AppConfig) -> None:
    gen = _FakeGenerator()
    with pytest.raises(InvalidEdit):
        asyncio.run(generate_quote("   ", gen, app_cfg=app_cfg))
    assert gen.calls == []


def test_generate_quote_refuses_when_plan_closed(sample_quote: Quote, app_cfg: AppConfig) -> None:
    gen = _FakeGenerator(draft=sample_quote)
    gate = PlanGate(plan_type="pro", query_count=100, query_limit=100, is_active=True)
    with pytest.raises(PlanLimitReached, match="limite de consultas"):
        asyncio.run(generate_quote("Festa", gen, gate=gate, app_cfg=app_cfg))
    assert gen.calls == []


def test_generate_quote_wraps_unexpected_errors(app_cfg: AppConfig) -> None:
    gen = _FakeGenerator(error=ValueError("boom"))
    with pytest.raises(AIGenerationError, match="Não foi possível gerar o orçamento"):
        asyncio.run(generate_quote("Festa", gen, app_cfg=app_cfg))


def test_normalize_draft_uses_config_tax(sample_quote: Quote) -> None:
    cfg = AppConfig(tax_rate=10, default_margin=30, kitchen_keywords=("cozinheir",))
    quote = normalize_draft(_ai_draft(sample_quote), cfg)
    assert quote.tax_rate == 10
    assert quote.margin_percent == 30
    assert quote.totals.tax_amount == pytest.approx(205)


# ------------------------------ PlanGate -------------------------------------


@pytest.mark.parametrize(
    "gate, reason",
    [
        (PlanGate(plan_type="trial", query_count=3, query_limit=3, is_active=False), "período de teste"),
        (PlanGate(plan_type="trial", query_count=3, query_limit=3, is_active=True), "limite de consultas"),
        (PlanGate(plan_type="basic", query_count=50, query_limit=50, is_active=True), "limite de consultas"),
    ],
)
def test_plan_gate_closed(gate: PlanGate, reason: str) -> None:
    assert not gate.is_open
    assert reason in gate.closed_reason


def test_plan_gate_open() -> None:
    assert PlanGate(plan_type="pro", query_count=10_000, query_limit=None, is_active=True).is_open
    gate = PlanGate(plan_type="trial", query_count=2, query_limit=5)
    assert gate.is_open
    assert gate.remaining == 3


# ------------------------------ persistência ---------------------------------


def test_list_quotes_newest_first() -> None:
    store = InMemoryQuoteStore([
        _record("a", "2025-01-01T10:00:00+00:00"),
        _record("b", "2025-03-01T10:00:00+00:00"),
        _record("c", "2025-02-01T10:00:00+00:00"),
    ])
    quotes = asyncio.run(list_quotes(store))
    assert [q.id for q in quotes] == ["b", "c", "a"]


def test_list_quotes_wraps_store_failure() -> None:
    class _Broken(InMemoryQuoteStore):
        async def list_quotes(self) -> List[Quote]:
            raise OSError("disk")

    with pytest.raises(PersistenceError, match="carregar"):
        asyncio.run(list_quotes(_Broken()))


def test_save_quote_create_then_update(sample_quote: Quote) -> None:
    store = InMemoryQuoteStore()
    created = asyncio.run(save_quote(refresh_totals(sample_quote), store, margin_percent=50))
    assert created.totals.total_cost == pytest.approx(2214)
    assert not created.is_temporary
    assert created.margin_percent == 50
    assert created.totals.suggested_price == pytest.approx(created.totals.total_cost * 1.5)

    renamed = created.model_copy(update={"event_label": "Bodas de prata"})
    updated = asyncio.run(save_quote(renamed, store))
    assert updated.id == created.id
    assert updated.created_at == created.created_at
    assert len(store) == 1


def test_update_unknown_id_fails(sample_quote: Quote) -> None:
    ghost = sample_quote.model_copy(update={"id": "nao-existe", "totals": Totals()})
    with pytest.raises(PersistenceError, match="não encontrado"):
        asyncio.run(save_quote(ghost, InMemoryQuoteStore()))

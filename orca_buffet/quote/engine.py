# orca_buffet/quote/engine.py
"""
Motor de recálculo de custos.

Funções puras: recebem as entradas brutas (seções do menu, outros custos,
mão de obra, alíquota) e devolvem um `Totals` consistente. Não lançam exceções,
não têm efeitos colaterais e podem ser chamadas repetidamente.

Regras:
  - ingredientes  = Σ custo de linha de todos os ingredientes de todas as seções
  - mão de obra   = Σ custo de linha das funções
  - produção      = ingredientes + equipe de cozinha (cozinheiros, auxiliares)
  - base imposto  = ingredientes + mão de obra + outros custos
  - imposto       = base * alíquota / 100
  - custo total   = base + imposto
O preço sugerido (margem) é aplicado à parte por `apply_margin`.
"""
from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence

from .config import KITCHEN_KEYWORDS
from .dto import LaborLine, MenuSection, OtherCost, Quote, Totals

KitchenPredicate = Callable[[str], bool]


def is_kitchen_staff(role: str, keywords: Optional[Sequence[str]] = None) -> bool:
    """Classifica a função como equipe de cozinha por substring (sem diferenciar maiúsculas)."""
    name = (role or "").lower()
    return any(k in name for k in (keywords if keywords is not None else KITCHEN_KEYWORDS))


def kitchen_predicate(keywords: Sequence[str]) -> KitchenPredicate:
    vocab = tuple(k.lower() for k in keywords)
    return lambda role: is_kitchen_staff(role, vocab)


def _section_cost(section: MenuSection) -> float:
    return sum(item.line_cost for item in section.ingredients)


def kitchen_staff_cost(labor_lines: Iterable[LaborLine], is_kitchen: KitchenPredicate = is_kitchen_staff) -> float:
    return sum(line.line_cost for line in labor_lines if is_kitchen(line.role))


def recompute(
    menu_sections: Optional[Sequence[MenuSection]] = None,
    other_cost_lines: Optional[Sequence[OtherCost]] = None,
    labor_lines: Optional[Sequence[LaborLine]] = None,
    tax_rate_percent: float = 0.0,
    is_kitchen: KitchenPredicate = is_kitchen_staff,
) -> Totals:
    sections = tuple(menu_sections or ())
    others = tuple(other_cost_lines or ())
    labor = tuple(labor_lines or ())

    ingredients_cost = sum(_section_cost(s) for s in sections)
    labor_cost = sum(line.line_cost for line in labor)
    production_cost = ingredients_cost + kitchen_staff_cost(labor, is_kitchen)
    other_costs_total = sum(c.amount for c in others)

    tax_base = ingredients_cost + labor_cost + other_costs_total
    tax_amount = tax_base * tax_rate_percent / 100
    return Totals(
        ingredients_cost=ingredients_cost,
        labor_cost=labor_cost,
        labor_lines=labor,
        production_cost=production_cost,
        other_cost_lines=others,
        tax_rate=tax_rate_percent,
        tax_amount=tax_amount,
        total_cost=tax_base + tax_amount,
    )


def apply_margin(totals: Totals, margin_percent: float) -> Totals:
    """Preço sugerido = custo total * (1 + margem/100). Apenas apresentação."""
    return totals.model_copy(update={"suggested_price": totals.total_cost * (1 + margin_percent / 100)})


def refresh_totals(quote: Quote, is_kitchen: KitchenPredicate = is_kitchen_staff) -> Quote:
    """Devolve o orçamento com totais recalculados a partir das próprias linhas."""
    totals = recompute(
        quote.menu_sections,
        quote.other_cost_lines,
        quote.labor_lines,
        quote.tax_rate,
        is_kitchen=is_kitchen,
    )
    return quote.model_copy(update={"totals": totals})

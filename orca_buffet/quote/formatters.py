# orca_buffet/quote/formatters.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .dto import Quote, QuoteSnapshot, Totals
from .i18n import DEFAULT_LOCALE, LocaleConfig, add_formatted_fields
from .schema import STATUS_LABELS

SUMMARY_CURRENCY_FIELDS = (
    "ingredients_cost",
    "labor_cost",
    "kitchen_staff_cost",
    "production_cost",
    "other_costs_total",
    "tax_amount",
    "total_cost",
    "suggested_price",
)


def summary_row(totals: Totals, cfg: LocaleConfig = DEFAULT_LOCALE, kitchen_cost: Optional[float] = None) -> Dict[str, Any]:
    """Resumo financeiro plano (números + campos *_fmt para a UI).
    Sem `kitchen_cost`, a equipe de cozinha é produção - ingredientes."""
    if kitchen_cost is None:
        kitchen_cost = totals.production_cost - totals.ingredients_cost
    row: Dict[str, Any] = {
        "ingredients_cost": totals.ingredients_cost,
        "labor_cost": totals.labor_cost,
        "kitchen_staff_cost": kitchen_cost,
        "production_cost": totals.production_cost,
        "other_costs_total": totals.other_costs_total,
        "tax_rate": totals.tax_rate,
        "tax_amount": totals.tax_amount,
        "total_cost": totals.total_cost,
        "suggested_price": totals.suggested_price,
    }
    return add_formatted_fields(row, SUMMARY_CURRENCY_FIELDS, percent_fields=("tax_rate",), cfg=cfg)


def build_meta(quote: Quote, cfg: LocaleConfig = DEFAULT_LOCALE) -> Dict[str, Any]:
    ts = datetime.now(tz=timezone.utc).isoformat(timespec="seconds")
    return {
        "quote_id": quote.id,
        "status_label": STATUS_LABELS.get(quote.status, quote.status),
        "generated_at": ts,
        "currency": cfg.currency,
        "locale": cfg.locale,
    }


def to_payload(snapshot: QuoteSnapshot, warnings: Optional[List[str]] = None, cfg: LocaleConfig = DEFAULT_LOCALE) -> Dict[str, Any]:
    """Contrato de saída estável e serializável para a UI / API."""
    return {
        "ok": True,
        "quote": snapshot.quote.to_record(),
        "summary": summary_row(snapshot.totals, cfg, snapshot.kitchen_cost),
        "meta": build_meta(snapshot.quote, cfg),
        "warnings": warnings or [],
    }

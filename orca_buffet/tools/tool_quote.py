# orca_buffet/tools/tool_quote.py
from __future__ import annotations

from typing import Optional, List, Dict, Any
import dataclasses
from datetime import date, datetime
from decimal import Decimal
import math

# === Capa de domínio =========================================================
from ..quote.config import AppConfig
from ..quote.dto import Quote, QuoteSnapshot
from ..quote.engine import apply_margin, kitchen_predicate, kitchen_staff_cost, refresh_totals
from ..quote.formatters import to_payload
from ..quote.premises import apply_premises, parse_premises, serialize_premises

# Config por padrão
DEFAULT_CFG = AppConfig()
IS_KITCHEN = kitchen_predicate(DEFAULT_CFG.kitchen_keywords)


# ------------------------------- Helpers -------------------------------------
def _json_safe(obj: Any) -> Any:
    """Converte recursivamente para tipos serializáveis em JSON."""
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, float) and (math.isnan(obj) or math.isinf(obj)):
        return None

    if isinstance(obj, dict):
        return {str(k): _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [_json_safe(v) for v in obj]

    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return _json_safe(dataclasses.asdict(obj))

    # pydantic v2
    model_dump = getattr(obj, "model_dump", None)
    if callable(model_dump):
        return _json_safe(model_dump(mode="json", by_alias=True))

    return obj


def _error(exc: Exception) -> Dict[str, Any]:
    return {"ok": False, "error": f"{type(exc).__name__}: {exc}"}


def _payload(quote: Quote, margin_percent: Optional[float], warnings: Optional[List[str]] = None) -> Dict[str, Any]:
    margin = quote.margin_percent if margin_percent is None else margin_percent
    snapshot = QuoteSnapshot(
        quote=quote,
        totals=apply_margin(quote.totals, margin),
        margin_percent=margin,
        kitchen_staff_cost=kitchen_staff_cost(quote.labor_lines, IS_KITCHEN),
    )
    return _json_safe(to_payload(snapshot, warnings))


# --------------------------- Tools públicas ----------------------------------
def recalculate_quote(record: Dict[str, Any], margin_percent: Optional[float] = None) -> Dict[str, Any]:
    """
    Recalcula os totais de um orçamento no formato persistido (camelCase).

    Retorna:
      dict JSON-serializável com chaves: ok, quote, summary, meta, warnings (ou ok/error).
    """
    try:
        quote = refresh_totals(Quote.from_record(record), IS_KITCHEN)
        return _payload(quote, margin_percent)
    except Exception as exc:
        return _error(exc)


def apply_consumption_premises(
    record: Dict[str, Any],
    premises: Optional[List[str]] = None,
    margin_percent: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Aplica as premissas de consumo ("Carne: 0.5kg por pessoa") aos ingredientes.
    Sem `premises`, usa as do próprio orçamento. As premissas não reconhecidas
    voltam em `warnings`.
    """
    try:
        quote = Quote.from_record(record)
        texts = quote.consumption_premises if premises is None else tuple(premises)
        parsed = parse_premises(texts)
        sections = apply_premises(quote.menu_sections, parsed, quote.guest_count)
        quote = quote.model_copy(update={
            "menu_sections": sections,
            "consumption_premises": serialize_premises(parsed),
        })
        quote = refresh_totals(quote, IS_KITCHEN)
        warnings = [f"Premissa sem quantidade por pessoa: '{p.subject}'" for p in parsed if not p.is_structured]
        return _payload(quote, margin_percent, warnings)
    except Exception as exc:
        return _error(exc)


def quote_summary(record: Dict[str, Any], margin_percent: Optional[float] = None) -> Dict[str, Any]:
    """Resumo financeiro (com campos *_fmt em pt-BR) sem devolver o orçamento completo."""
    out = recalculate_quote(record, margin_percent)
    if not out.get("ok"):
        return out
    return {"ok": True, "summary": out["summary"], "meta": out["meta"], "warnings": out["warnings"]}

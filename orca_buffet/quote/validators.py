# orca_buffet/quote/validators.py
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Sequence

from .exceptions import InvalidEdit, PlanLimitReached

if TYPE_CHECKING:
    from .dto import PlanGate


def coerce_number(value: Any) -> float:
    """Converte a entrada do usuário em float finito.
    - números passam direto (bool não conta como número)
    - strings aceitam '.' ou ',' como separador decimal
    - qualquer outra coisa, NaN ou infinito => 0.0
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        out = float(value)
    else:
        try:
            out = float(str(value).strip().replace(",", "."))
        except (TypeError, ValueError):
            return 0.0
    return out if math.isfinite(out) else 0.0


def coerce_text(value: Any) -> str:
    return "" if value is None else str(value)


def validate_index(seq: Sequence[Any], index: int, what: str) -> None:
    if not isinstance(index, int) or index < 0 or index >= len(seq):
        raise InvalidEdit(f"Índice {index!r} fora do intervalo para {what} (total={len(seq)}).")


def validate_field(field: str, allowed: Sequence[str], what: str) -> None:
    if field not in allowed:
        raise InvalidEdit(f"Campo '{field}' não editável em {what}. Campos: {', '.join(allowed)}.")


def validate_recipe_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidEdit("Por favor, insira o nome da receita.")
    return cleaned


def check_plan_gate(gate: "PlanGate") -> None:
    """Recusa a chamada à IA quando o plano está fechado. Não incrementa contadores."""
    reason = gate.closed_reason
    if reason:
        raise PlanLimitReached(reason)

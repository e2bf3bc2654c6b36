# orca_buffet/quote/i18n.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional


@dataclass(frozen=True)
class LocaleConfig:
    """Configuração mínima de formato (pt-BR).
    Sem Babel; símbolos e separadores ficam aqui.
    """
    locale: str = "pt-BR"
    currency: str = "BRL"
    currency_symbol: str = "R$"
    decimal_sep: str = ","
    thousand_sep: str = "."


DEFAULT_LOCALE = LocaleConfig()


def _swap_separators(s: str, cfg: LocaleConfig) -> str:
    # f"{:,.2f}" usa separadores US; troca pelo par configurado
    if cfg.thousand_sep == "," and cfg.decimal_sep == ".":
        return s
    return s.replace(",", "\0").replace(".", cfg.decimal_sep).replace("\0", cfg.thousand_sep)


def format_number(value: Optional[float], cfg: LocaleConfig = DEFAULT_LOCALE, ndigits: int = 2) -> str:
    if value is None:
        return "-"
    q = round(float(value), ndigits)
    return _swap_separators(f"{q:,.{ndigits}f}", cfg)


def format_currency(value: Optional[float], cfg: LocaleConfig = DEFAULT_LOCALE, ndigits: int = 2) -> str:
    """1234.5 -> 'R$ 1.234,50'. None -> '-'."""
    if value is None:
        return "-"
    s = format_number(value, cfg, ndigits)
    if s.startswith("-"):
        return f"-{cfg.currency_symbol} {s[1:]}"
    return f"{cfg.currency_symbol} {s}"


def format_percent(value: Optional[float], cfg: LocaleConfig = DEFAULT_LOCALE, ndigits: int = 2) -> str:
    """Formata um valor já em pontos percentuais: 8 -> '8,00%'."""
    if value is None:
        return "-"
    return f"{format_number(value, cfg, ndigits)}%"


def add_formatted_fields(
    row: Mapping[str, object],
    currency_fields: Iterable[str],
    percent_fields: Iterable[str] = (),
    cfg: LocaleConfig = DEFAULT_LOCALE,
    suffix: str = "_fmt",
) -> Dict[str, object]:
    """Devolve um novo dict com campos formatados para a UI.
    Ex.: 'total_cost' -> 'total_cost_fmt'
    """
    out: Dict[str, object] = dict(row)
    for c in currency_fields:
        v = row.get(c)
        out[f"{c}{suffix}"] = format_currency(v if isinstance(v, (int, float)) else None, cfg=cfg)
    for p in percent_fields:
        v = row.get(p)
        out[f"{p}{suffix}"] = format_percent(v if isinstance(v, (int, float)) else None, cfg=cfg)
    return out

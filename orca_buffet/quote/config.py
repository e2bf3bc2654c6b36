# orca_buffet/quote/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


def _keywords(raw: str) -> Tuple[str, ...]:
    return tuple(k.strip().lower() for k in raw.split(",") if k.strip())


# —— Cálculo ——
DEFAULT_TAX_RATE: Final[float] = float(os.getenv("ORCABUFFET_TAX_RATE", "8"))
DEFAULT_MARGIN: Final[float] = float(os.getenv("ORCABUFFET_DEFAULT_MARGIN", "40"))
KITCHEN_KEYWORDS: Final[Tuple[str, ...]] = _keywords(
    os.getenv("ORCABUFFET_KITCHEN_KEYWORDS", "cozinheir,auxiliar")
)

# —— Histórico ——
HISTORY_LIMIT: Final[int] = int(os.getenv("ORCABUFFET_HISTORY_LIMIT", "50"))

# —— Localização / exportação ——
DEFAULT_LOCALE: Final[str] = os.getenv("ORCABUFFET_LOCALE", "pt-BR")
DEFAULT_CURRENCY: Final[str] = os.getenv("ORCABUFFET_CURRENCY", "BRL")
CSV_SEP: Final[str] = os.getenv("ORCABUFFET_CSV_SEP", ";")

# —— IA (Gemini) ——
GEMINI_API_KEY: Final[Optional[str]] = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL: Final[str] = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_TEMPERATURE: Final[float] = float(os.getenv("GEMINI_TEMPERATURE", "0.4"))
# Frete variável sugerido ao modelo quando não há custo fixo de frete
FREIGHT_PER_GUEST: Final[float] = float(os.getenv("ORCABUFFET_FREIGHT_PER_GUEST", "2.50"))


@dataclass(frozen=True)
class AppConfig:
    """Snapshot imutável da configuração consumida pelo núcleo e pelos colaboradores."""
    tax_rate: float = DEFAULT_TAX_RATE
    default_margin: float = DEFAULT_MARGIN
    kitchen_keywords: Tuple[str, ...] = KITCHEN_KEYWORDS
    history_limit: int = HISTORY_LIMIT
    locale: str = DEFAULT_LOCALE
    currency: str = DEFAULT_CURRENCY
    csv_sep: str = CSV_SEP
    gemini_api_key: Optional[str] = GEMINI_API_KEY
    gemini_model: str = GEMINI_MODEL
    gemini_temperature: float = GEMINI_TEMPERATURE
    freight_per_guest: float = FREIGHT_PER_GUEST

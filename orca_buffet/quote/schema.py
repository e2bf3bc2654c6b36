# orca_buffet/quote/schema.py
from __future__ import annotations

import re
from typing import Final, Literal, Pattern, Tuple

# Estados (evita strings soltas no resto do código)
StatusLiteral = Literal["draft", "sent", "approved", "rejected"]
DeliveryStatusLiteral = Literal["pending", "sent", "delivered", "cancelled"]

STATUS_LABELS: Final[dict] = {
    "draft": "Rascunho",
    "sent": "Enviado",
    "approved": "Aprovado",
    "rejected": "Rejeitado",
}

# Orçamentos gerados pela IA e ainda não salvos
TEMP_ID_PREFIX: Final[str] = "temp-"

# Premissas de consumo: "Carne: 550g por pessoa" ou "Água: 1.5L/pessoa"
PREMISE_PATTERN: Final[Pattern[str]] = re.compile(
    r"(.+):\s*(\d+[.,]?\d*)\s*([a-zA-Z]+)\s*(?:por pessoa|/pessoa)",
    re.IGNORECASE,
)
PREMISE_SUFFIX: Final[str] = "por pessoa"

# Valores padrão das linhas novas
NEW_INGREDIENT: Final[dict] = {"name": "Novo Item", "qty": 1, "unit": "unidade", "unitCost": 0}
NEW_LABOR: Final[dict] = {"role": "Novo Profissional", "count": 1, "costPerUnit": 0}
NEW_OTHER_COST: Final[dict] = {"name": "Novo Custo", "cost": 0}
NEW_PREMISE: Final[Tuple[str, float, str]] = ("Novo Item", 100.0, "g")

COMMON_UNITS: Final[Tuple[str, ...]] = (
    "kg", "g", "L", "ml", "unidade", "caixa", "pacote", "lata", "litro", "fardo",
)

# Categorias de premissa: o assunto "Carne" também cobre cortes que não contêm
# a palavra no nome. A correspondência por substring continua valendo.
PREMISE_CATEGORIES: Final[dict] = {
    "carne": (
        "picanha", "fraldinha", "alcatra", "maminha", "contra-filé", "contrafilé",
        "contra filé", "cupim", "costela", "acém", "patinho", "filé mignon", "músculo",
    ),
    "frango": ("coxa", "sobrecoxa", "coração", "tulipa"),
    "bebida": ("refrigerante", "suco", "água", "cerveja", "vinho"),
}

# orca_buffet/tests/conftest.py
from __future__ import annotations

from typing import Any, Dict

import pytest

from orca_buffet.quote.config import AppConfig
from orca_buffet.quote.dto import Ingredient, LaborLine, MenuSection, OtherCost, Quote, Totals


@pytest.fixture()
def app_cfg() -> AppConfig:
    """Config fixa, independente do .env da máquina."""
    return AppConfig(
        tax_rate=8.0,
        default_margin=40.0,
        kitchen_keywords=("cozinheir", "auxiliar"),
        history_limit=50,
        gemini_api_key="fake-key",
        gemini_model="gemini-2.5-flash",
        gemini_temperature=0.4,
        freight_per_guest=2.5,
    )


@pytest.fixture()
def sample_quote() -> Quote:
    """
    Churrasco para 100 convidados.
    ingredientes 1200 | mão de obra 600 (cozinha 300) | outros 250 | imposto 8% = 164 | total 2214
    """
    churrasco = MenuSection(
        name="Churrasco",
        ingredients=(
            Ingredient(name="Picanha", quantity=10, unit="kg", unit_cost=80),
            Ingredient(name="Fraldinha", quantity=8, unit="kg", unit_cost=50),
            Ingredient(name="Pão de alho", quantity=100, unit="unidade", unit_cost=0),
        ),
    )
    totals = Totals(
        labor_lines=(
            LaborLine(role="Cozinheiro", count=2, cost_per_unit=150),
            LaborLine(role="Garçom", count=3, cost_per_unit=100),
        ),
        other_cost_lines=(OtherCost(name="Frete", amount=250),),
    )
    return Quote(
        id="temp-1700000000000",
        event_label="Casamento de Ana",
        guest_count=100,
        menu_sections=(churrasco,),
        totals=totals,
        consumption_premises=("Carne: 0.5kg por pessoa",),
        tax_rate=8,
        margin_percent=40,
    )


@pytest.fixture()
def sample_record(sample_quote: Quote) -> Dict[str, Any]:
    return sample_quote.to_record()

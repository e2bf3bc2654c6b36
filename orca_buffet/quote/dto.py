# orca_buffet/quote/dto.py
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .config import DEFAULT_MARGIN, DEFAULT_TAX_RATE
from .schema import TEMP_ID_PREFIX, DeliveryStatusLiteral, StatusLiteral
from .validators import coerce_number, coerce_text


def new_temp_id() -> str:
    return f"{TEMP_ID_PREFIX}{int(time.time() * 1000)}"


def now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="seconds")


def _as_tuple(v: Any) -> Any:
    if v is None:
        return ()
    if isinstance(v, list):
        return tuple(v)
    return v


class _Frozen(BaseModel):
    """Base imutável: atualizações via model_copy(update=...) compartilham sub-árvores."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


# —— Linhas ——

class Ingredient(_Frozen):
    name: str = ""
    quantity: float = Field(default=0.0, alias="qty")
    unit: str = ""
    unit_cost: float = Field(default=0.0, alias="unitCost")

    @field_validator("name", "unit", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("quantity", "unit_cost", mode="before")
    @classmethod
    def _number(cls, v: Any) -> float:
        return coerce_number(v)

    @computed_field(alias="totalCost")  # type: ignore[prop-decorator]
    @property
    def line_cost(self) -> float:
        return self.quantity * self.unit_cost


class MenuSection(_Frozen):
    name: str = ""
    ingredients: Tuple[Ingredient, ...] = ()

    @field_validator("name", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("ingredients", mode="before")
    @classmethod
    def _items(cls, v: Any) -> Any:
        return _as_tuple(v)


class LaborLine(_Frozen):
    role: str = ""
    count: float = 0.0
    cost_per_unit: float = Field(default=0.0, alias="costPerUnit")

    @field_validator("role", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("count", "cost_per_unit", mode="before")
    @classmethod
    def _number(cls, v: Any) -> float:
        return coerce_number(v)

    @computed_field(alias="totalCost")  # type: ignore[prop-decorator]
    @property
    def line_cost(self) -> float:
        return self.count * self.cost_per_unit


class OtherCost(_Frozen):
    name: str = ""
    amount: float = Field(default=0.0, alias="cost")

    @field_validator("name", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _number(cls, v: Any) -> float:
        return coerce_number(v)


# —— Totais (derivados) ——

class Totals(_Frozen):
    """Totais derivados. As linhas de mão de obra e outros custos moram aqui
    (mesmo formato dos registros persistidos); os números são sempre recalculados."""
    ingredients_cost: float = Field(default=0.0, alias="ingredients")
    labor_cost: float = Field(default=0.0, alias="labor")
    labor_lines: Tuple[LaborLine, ...] = Field(default=(), alias="laborDetails")
    production_cost: float = Field(default=0.0, alias="productionCost")
    other_cost_lines: Tuple[OtherCost, ...] = Field(default=(), alias="otherCosts")
    tax_rate: float = Field(default=DEFAULT_TAX_RATE, alias="taxRate")
    tax_amount: float = Field(default=0.0, alias="tax")
    total_cost: float = Field(default=0.0, alias="totalCost")
    suggested_price: float = Field(default=0.0, alias="suggestedPrice")

    @field_validator("labor_lines", "other_cost_lines", mode="before")
    @classmethod
    def _lines(cls, v: Any) -> Any:
        return _as_tuple(v)

    @field_validator(
        "ingredients_cost", "labor_cost", "production_cost", "tax_amount",
        "total_cost", "suggested_price", mode="before",
    )
    @classmethod
    def _number(cls, v: Any) -> float:
        return coerce_number(v)

    @property
    def other_costs_total(self) -> float:
        return sum(c.amount for c in self.other_cost_lines)


# —— Agregado ——

class Quote(_Frozen):
    """Raiz do agregado. Os totais são derivados de menu_sections + linhas em totals."""
    id: str = Field(default_factory=new_temp_id, alias="estimateId")
    event_label: str = Field(default="", alias="eventType")
    guest_count: int = Field(default=0, alias="guests")
    menu_sections: Tuple[MenuSection, ...] = Field(default=(), alias="menuItems")
    totals: Totals = Field(default_factory=Totals)
    consumption_premises: Tuple[str, ...] = Field(default=(), alias="consumptionAverages")
    tax_rate: float = Field(default=DEFAULT_TAX_RATE, alias="taxRate")
    margin_percent: float = Field(default=DEFAULT_MARGIN, alias="marginPercent")
    status: StatusLiteral = "draft"
    created_at: str = Field(default_factory=now_iso, alias="createdAt")
    event_date: Optional[str] = Field(default=None, alias="eventDate")
    delivery_status: DeliveryStatusLiteral = Field(default="pending", alias="deliveryStatus")

    @field_validator("id", "event_label", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("guest_count", mode="before")
    @classmethod
    def _guests(cls, v: Any) -> int:
        return int(coerce_number(v))

    @field_validator("tax_rate", "margin_percent", mode="before")
    @classmethod
    def _rates(cls, v: Any) -> float:
        return coerce_number(v)

    @field_validator("menu_sections", mode="before")
    @classmethod
    def _sections(cls, v: Any) -> Any:
        return _as_tuple(v)

    @field_validator("consumption_premises", mode="before")
    @classmethod
    def _premises(cls, v: Any) -> Any:
        if v is None:
            return ()
        return tuple(s for s in v if isinstance(s, str))

    @field_validator("totals", mode="before")
    @classmethod
    def _totals(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def labor_lines(self) -> Tuple[LaborLine, ...]:
        return self.totals.labor_lines

    @property
    def other_cost_lines(self) -> Tuple[OtherCost, ...]:
        return self.totals.other_cost_lines

    @property
    def is_temporary(self) -> bool:
        return self.id.startswith(TEMP_ID_PREFIX)

    def to_record(self) -> Dict[str, Any]:
        """Formato JSON persistido (aliases camelCase)."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Quote":
        return cls.model_validate(record)


# —— Colaboradores ——

class CostHint(_Frozen):
    """Custo personalizado informado pelo dono do buffet (ex.: Garçom, Frete)."""
    name: str
    cost: float = 0.0

    @field_validator("cost", mode="before")
    @classmethod
    def _number(cls, v: Any) -> float:
        return coerce_number(v)


class PlanGate(_Frozen):
    """Estado do plano, somente leitura. None em query_limit => ilimitado."""
    plan_type: str = "trial"
    query_count: int = 0
    query_limit: Optional[int] = None
    is_active: bool = False

    @property
    def remaining(self) -> Optional[int]:
        if self.query_limit is None:
            return None
        return self.query_limit - self.query_count

    @property
    def closed_reason(self) -> Optional[str]:
        limit_reached = self.query_limit is not None and self.query_count >= self.query_limit
        if self.plan_type == "trial" and limit_reached and not self.is_active:
            return "Seu período de teste terminou. Ative um plano para continuar."
        if limit_reached:
            return "Você atingiu o limite de consultas do seu plano. Faça upgrade para continuar."
        return None

    @property
    def is_open(self) -> bool:
        return self.closed_reason is None


class QuoteSnapshot(_Frozen):
    """Cópia somente leitura consumida pelos exportadores (totais com margem aplicada)."""
    quote: Quote
    totals: Totals
    margin_percent: float = 0.0
    kitchen_staff_cost: Optional[float] = None

    @property
    def kitchen_cost(self) -> float:
        """Custo da equipe de cozinha classificado por quem montou o snapshot;
        sem ele, deriva de produção - ingredientes (mesma classificação dos totais)."""
        if self.kitchen_staff_cost is not None:
            return self.kitchen_staff_cost
        return self.totals.production_cost - self.totals.ingredients_cost

# orca_buffet/quote/editor.py
"""
Controlador de edição do orçamento.

Fonte única da verdade durante a sessão de edição. Toda edição:
  1. monta um novo `Quote` (atualização imutável, sub-árvores compartilhadas),
  2. passa pelo motor de recálculo,
  3. é confirmada no histórico.

Política de histórico:
  - campos de digitação contínua usam `staged=True` a cada tecla e chamam
    `commit_edit()` ao perder o foco => uma entrada de desfazer por sessão de edição;
  - edições estruturais (adicionar/remover linhas, nova receita via IA) sempre
    criam um checkpoint imediatamente.

Cada entrada do histórico (`EditSession`) guarda também as premissas
estruturadas; elas só são reconstruídas das strings ao abrir e ao salvar.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterator, Optional, Sequence, Tuple, get_args

from .config import AppConfig
from .dto import Ingredient, LaborLine, MenuSection, OtherCost, PlanGate, Quote, QuoteSnapshot, Totals
from .engine import apply_margin, kitchen_predicate, kitchen_staff_cost, recompute
from .exceptions import AIGenerationError, InvalidEdit, OperationInProgress, QuoteError
from .history import HistoryFrame, QuoteHistory
from .premises import Premise, apply_premises, parse_premises, serialize_premises
from .schema import NEW_INGREDIENT, NEW_LABOR, NEW_OTHER_COST, NEW_PREMISE, DeliveryStatusLiteral, StatusLiteral
from .service import QuoteGenerator, save_quote
from .storage import QuoteStore
from .validators import (
    check_plan_gate,
    coerce_number,
    coerce_text,
    validate_field,
    validate_index,
    validate_recipe_name,
)

logger = logging.getLogger(__name__)

# Campo -> conversor. Aliases do formato persistido também são aceitos.
INGREDIENT_FIELDS: Dict[str, Any] = {"name": coerce_text, "unit": coerce_text, "quantity": coerce_number, "unit_cost": coerce_number}
LABOR_FIELDS: Dict[str, Any] = {"role": coerce_text, "count": coerce_number, "cost_per_unit": coerce_number}
OTHER_COST_FIELDS: Dict[str, Any] = {"name": coerce_text, "amount": coerce_number}
PREMISE_FIELDS: Dict[str, Any] = {"subject": coerce_text, "quantity_per_guest": coerce_number, "unit": coerce_text}

FIELD_ALIASES: Dict[str, str] = {
    "qty": "quantity",
    "unitCost": "unit_cost",
    "costPerUnit": "cost_per_unit",
    "cost": "amount",
    "item": "subject",
    "quantityPerGuest": "quantity_per_guest",
}


def _replace_at(seq: Sequence[Any], index: int, item: Any) -> Tuple[Any, ...]:
    return tuple(seq[:index]) + (item,) + tuple(seq[index + 1:])


def _remove_at(seq: Sequence[Any], index: int) -> Tuple[Any, ...]:
    return tuple(seq[:index]) + tuple(seq[index + 1:])


def _resolve_field(field: str, allowed: Dict[str, Any], what: str) -> str:
    name = FIELD_ALIASES.get(field, field)
    validate_field(name, tuple(allowed), what)
    return name


@dataclass(frozen=True)
class EditSession:
    """Entrada do histórico: o orçamento e a visão estruturada das premissas.

    As premissas estruturadas são o estado de edição; as strings em
    `quote.consumption_premises` são só a serialização para persistência.
    """
    quote: Quote
    premises: Tuple[Premise, ...] = ()


class QuoteEditor:
    """Sessão de edição de um orçamento (criada por tela, descartada ao sair)."""

    def __init__(self, quote: Quote, cfg: Optional[AppConfig] = None, margin_percent: Optional[float] = None) -> None:
        self._cfg = cfg or AppConfig()
        self._is_kitchen = kitchen_predicate(self._cfg.kitchen_keywords)
        initial = EditSession(self._rebuild(quote), parse_premises(quote.consumption_premises))
        self._history: QuoteHistory[EditSession] = QuoteHistory(initial, limit=self._cfg.history_limit)
        self._margin = quote.margin_percent if margin_percent is None else coerce_number(margin_percent)
        self._pending: Optional[str] = None

    # ------------------------------ Leitura -----------------------------------

    @property
    def quote(self) -> Quote:
        return self._history.present.quote

    @property
    def frame(self) -> HistoryFrame[EditSession]:
        return self._history.frame

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def margin(self) -> float:
        return self._margin

    @property
    def is_busy(self) -> bool:
        return self._pending is not None

    @property
    def premises(self) -> Tuple[Premise, ...]:
        return self._history.present.premises

    @property
    def summary(self) -> Totals:
        """Totais com a margem atual aplicada (o que o painel de resumo exibe)."""
        return apply_margin(self.quote.totals, self._margin)

    def snapshot(self) -> QuoteSnapshot:
        return QuoteSnapshot(
            quote=self.quote,
            totals=self.summary,
            margin_percent=self._margin,
            kitchen_staff_cost=kitchen_staff_cost(self.quote.labor_lines, self._is_kitchen),
        )

    # ------------------------------ Histórico ---------------------------------

    def undo(self) -> None:
        self._history.undo()

    def redo(self) -> None:
        self._history.redo()

    def commit_edit(self) -> None:
        """Fecha a rajada de edições contínuas (ex.: campo perdeu o foco)."""
        self._history.commit_edit()

    # ------------------------------ Ingredientes ------------------------------

    def change_ingredient(self, section: int, index: int, field: str, value: Any, staged: bool = False) -> Quote:
        quote = self.quote
        validate_index(quote.menu_sections, section, "seções do menu")
        menu = quote.menu_sections[section]
        validate_index(menu.ingredients, index, f"ingredientes de '{menu.name}'")
        name = _resolve_field(field, INGREDIENT_FIELDS, "ingrediente")

        item = menu.ingredients[index].model_copy(update={name: INGREDIENT_FIELDS[name](value)})
        menu = menu.model_copy(update={"ingredients": _replace_at(menu.ingredients, index, item)})
        return self._apply(self._rebuild(quote, menu_sections=_replace_at(quote.menu_sections, section, menu)), staged)

    def add_ingredient(self, section: int) -> Quote:
        quote = self.quote
        validate_index(quote.menu_sections, section, "seções do menu")
        menu = quote.menu_sections[section]
        menu = menu.model_copy(update={"ingredients": menu.ingredients + (Ingredient.model_validate(NEW_INGREDIENT),)})
        return self._apply(self._rebuild(quote, menu_sections=_replace_at(quote.menu_sections, section, menu)))

    def remove_ingredient(self, section: int, index: int) -> Quote:
        quote = self.quote
        validate_index(quote.menu_sections, section, "seções do menu")
        menu = quote.menu_sections[section]
        validate_index(menu.ingredients, index, f"ingredientes de '{menu.name}'")
        menu = menu.model_copy(update={"ingredients": _remove_at(menu.ingredients, index)})
        return self._apply(self._rebuild(quote, menu_sections=_replace_at(quote.menu_sections, section, menu)))

    # ------------------------------ Mão de obra -------------------------------

    def change_labor(self, index: int, field: str, value: Any, staged: bool = False) -> Quote:
        quote = self.quote
        validate_index(quote.labor_lines, index, "mão de obra")
        name = _resolve_field(field, LABOR_FIELDS, "mão de obra")
        line = quote.labor_lines[index].model_copy(update={name: LABOR_FIELDS[name](value)})
        return self._apply(self._rebuild(quote, labor_lines=_replace_at(quote.labor_lines, index, line)), staged)

    def add_labor(self) -> Quote:
        quote = self.quote
        return self._apply(self._rebuild(quote, labor_lines=quote.labor_lines + (LaborLine.model_validate(NEW_LABOR),)))

    def remove_labor(self, index: int) -> Quote:
        quote = self.quote
        validate_index(quote.labor_lines, index, "mão de obra")
        return self._apply(self._rebuild(quote, labor_lines=_remove_at(quote.labor_lines, index)))

    # ------------------------------ Outros custos -----------------------------

    def change_other_cost(self, index: int, field: str, value: Any, staged: bool = False) -> Quote:
        quote = self.quote
        validate_index(quote.other_cost_lines, index, "outros custos")
        name = _resolve_field(field, OTHER_COST_FIELDS, "outros custos")
        line = quote.other_cost_lines[index].model_copy(update={name: OTHER_COST_FIELDS[name](value)})
        return self._apply(self._rebuild(quote, other_cost_lines=_replace_at(quote.other_cost_lines, index, line)), staged)

    def add_other_cost(self) -> Quote:
        quote = self.quote
        new_line = OtherCost.model_validate(NEW_OTHER_COST)
        return self._apply(self._rebuild(quote, other_cost_lines=quote.other_cost_lines + (new_line,)))

    def remove_other_cost(self, index: int) -> Quote:
        quote = self.quote
        validate_index(quote.other_cost_lines, index, "outros custos")
        return self._apply(self._rebuild(quote, other_cost_lines=_remove_at(quote.other_cost_lines, index)))

    # ------------------------------ Imposto e margem --------------------------

    def set_tax_rate(self, value: Any, staged: bool = False) -> Quote:
        return self._apply(self._rebuild(self.quote, tax_rate=coerce_number(value)), staged)

    def set_margin(self, value: Any) -> float:
        """Simulação de preço: não entra no histórico nem altera os totais."""
        self._margin = coerce_number(value)
        return self._margin

    # ------------------------------ Premissas ---------------------------------

    def change_premise(self, index: int, field: str, value: Any, staged: bool = False) -> Quote:
        quote = self.quote
        premises = self.premises
        validate_index(premises, index, "premissas de consumo")
        name = _resolve_field(field, PREMISE_FIELDS, "premissa")
        updated = _replace_at(premises, index, replace(premises[index], **{name: PREMISE_FIELDS[name](value)}))

        sections = apply_premises(quote.menu_sections, updated, quote.guest_count)
        next_quote = self._rebuild(quote, menu_sections=sections, consumption_premises=serialize_premises(updated))
        return self._apply(next_quote, staged, premises=updated)

    def add_premise(self) -> Quote:
        premises = self.premises + (Premise(*NEW_PREMISE),)
        next_quote = self._rebuild(self.quote, consumption_premises=serialize_premises(premises))
        return self._apply(next_quote, premises=premises)

    def remove_premise(self, index: int) -> Quote:
        premises = self.premises
        validate_index(premises, index, "premissas de consumo")
        remaining = _remove_at(premises, index)
        next_quote = self._rebuild(self.quote, consumption_premises=serialize_premises(remaining))
        return self._apply(next_quote, premises=remaining)

    # ------------------------------ Dados do evento ---------------------------

    def update_details(
        self,
        event_label: Optional[str] = None,
        event_date: Optional[str] = None,
        status: Optional[str] = None,
        delivery_status: Optional[str] = None,
    ) -> Quote:
        changes: Dict[str, Any] = {}
        if event_label is not None:
            changes["event_label"] = event_label
        if event_date is not None:
            changes["event_date"] = event_date or None
        if status is not None:
            if status not in get_args(StatusLiteral):
                raise InvalidEdit(f"Status inválido: {status}")
            changes["status"] = status
        if delivery_status is not None:
            if delivery_status not in get_args(DeliveryStatusLiteral):
                raise InvalidEdit(f"Status de entrega inválido: {delivery_status}")
            changes["delivery_status"] = delivery_status
        if not changes:
            return self.quote
        return self._apply(self.quote.model_copy(update=changes))

    # ------------------------------ Colaboradores (async) ---------------------

    async def add_menu_section(self, name: str, generator: QuoteGenerator, gate: Optional[PlanGate] = None) -> MenuSection:
        """Pede à IA uma nova receita e a anexa ao menu quando a chamada termina.

        Em caso de falha o orçamento fica exatamente como estava; o erro sobe sem retry.
        """
        recipe = validate_recipe_name(name)
        with self._in_flight("add_menu_section"):
            if gate is not None:
                check_plan_gate(gate)
            try:
                section = await generator.generate_menu_section(recipe, self.quote.guest_count)
            except QuoteError:
                logger.exception("Falha ao calcular a receita '%s' pela IA.", recipe)
                raise
            except Exception as exc:
                logger.exception("Falha inesperada ao calcular a receita '%s'.", recipe)
                raise AIGenerationError(f"Não foi possível calcular a receita: {exc}") from exc
            quote = self.quote
            self._apply(self._rebuild(quote, menu_sections=quote.menu_sections + (section,)))
            logger.info("Receita '%s' adicionada (%s ingredientes).", section.name, len(section.ingredients))
            return section

    async def save(self, store: QuoteStore) -> Quote:
        """Cria (id temporário) ou atualiza o orçamento; o retorno vira o presente."""
        with self._in_flight("save"):
            saved = await save_quote(self.quote, store, self._margin)
            self._margin = saved.margin_percent
            self._history.replace(EditSession(self._rebuild(saved), self._resync_premises(saved)))
            logger.info("Orçamento salvo: %s", saved.id)
            return self.quote

    # ------------------------------ Helpers -----------------------------------

    def _rebuild(
        self,
        quote: Quote,
        menu_sections: Optional[Sequence[MenuSection]] = None,
        labor_lines: Optional[Sequence[LaborLine]] = None,
        other_cost_lines: Optional[Sequence[OtherCost]] = None,
        **fields: Any,
    ) -> Quote:
        sections = quote.menu_sections if menu_sections is None else tuple(menu_sections)
        labor = quote.labor_lines if labor_lines is None else tuple(labor_lines)
        others = quote.other_cost_lines if other_cost_lines is None else tuple(other_cost_lines)
        tax_rate = fields.get("tax_rate", quote.tax_rate)
        totals = recompute(sections, others, labor, tax_rate, is_kitchen=self._is_kitchen)
        return quote.model_copy(update={**fields, "menu_sections": sections, "totals": totals})

    def _apply(self, next_quote: Quote, staged: bool = False, premises: Optional[Tuple[Premise, ...]] = None) -> Quote:
        session = EditSession(next_quote, self.premises if premises is None else premises)
        self._history.set(session, add_to_history=not staged)
        return self.quote

    def _resync_premises(self, saved: Quote) -> Tuple[Premise, ...]:
        # Mantém a visão estruturada se a persistência devolveu a mesma serialização
        current = self.premises
        if serialize_premises(current) == tuple(saved.consumption_premises):
            return current
        return parse_premises(saved.consumption_premises)

    @contextmanager
    def _in_flight(self, operation: str) -> Iterator[None]:
        if self._pending is not None:
            raise OperationInProgress(f"Operação '{self._pending}' ainda em andamento.")
        self._pending = operation
        try:
            yield
        finally:
            self._pending = None

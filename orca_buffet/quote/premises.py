# orca_buffet/quote/premises.py
"""
Premissas de consumo por pessoa ("Carne: 0.5kg por pessoa").

A lista de strings do orçamento é a fonte da verdade persistida; `Premise` é
uma visão estruturada reconstruída a partir dela e serializada de volta a cada
alteração. Strings não reconhecidas viram um rótulo opaco com quantidade 0.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from .dto import Ingredient, MenuSection
from .schema import PREMISE_CATEGORIES, PREMISE_PATTERN, PREMISE_SUFFIX

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Premise:
    subject: str
    quantity_per_guest: float = 0.0
    unit: str = ""

    @property
    def is_structured(self) -> bool:
        return self.quantity_per_guest > 0 and bool(self.unit.strip())

    def matches(self, ingredient_name: str, categories: Optional[Mapping[str, Sequence[str]]] = None) -> bool:
        name = (ingredient_name or "").lower()
        subject = self.subject.strip().lower()
        if not subject:
            return False
        if subject in name:
            return True
        vocab = PREMISE_CATEGORIES if categories is None else categories
        members = vocab.get(subject) or vocab.get(subject.rstrip("s")) or ()
        return any(m in name for m in members)


def parse_premise(text: str) -> Premise:
    match = PREMISE_PATTERN.search(text)
    if not match:
        return Premise(subject=text)
    return Premise(
        subject=match.group(1).strip(),
        quantity_per_guest=float(match.group(2).replace(",", ".")),
        unit=match.group(3).strip(),
    )


def parse_premises(texts: Iterable[str]) -> Tuple[Premise, ...]:
    return tuple(parse_premise(t) for t in texts)


def format_quantity(value: float) -> str:
    """Duas casas decimais, sem zeros finais: 0.50 -> '0.5', 100.00 -> '100'."""
    return re.sub(r"\.?0+$", "", f"{value:.2f}")


def serialize_premise(premise: Premise) -> str:
    if premise.is_structured:
        return f"{premise.subject}: {format_quantity(premise.quantity_per_guest)}{premise.unit} {PREMISE_SUFFIX}"
    return premise.subject


def serialize_premises(premises: Iterable[Premise]) -> Tuple[str, ...]:
    return tuple(s for s in (serialize_premise(p) for p in premises) if s.strip())


def _cascade_ingredient(
    item: Ingredient,
    premises: Sequence[Premise],
    guest_count: int,
    categories: Optional[Mapping[str, Sequence[str]]],
) -> Ingredient:
    winner = None
    # Só premissas completas (quantidade > 0 e unidade). Sobreposição: vale a última
    for premise in premises:
        if premise.is_structured and premise.matches(item.name, categories):
            winner = premise
    if winner is None:
        return item
    return item.model_copy(update={
        "quantity": winner.quantity_per_guest * guest_count,
        "unit": winner.unit,
    })


def apply_premises(
    menu_sections: Sequence[MenuSection],
    premises: Sequence[Premise],
    guest_count: int,
    categories: Optional[Mapping[str, Sequence[str]]] = None,
) -> Tuple[MenuSection, ...]:
    """Recalcula a quantidade total dos ingredientes cobertos por alguma premissa.

    Uma premissa afeta todos os ingredientes cujo nome contém o assunto ou um
    membro da sua categoria ('Carne' afeta 'Picanha' e 'Fraldinha'). O custo
    unitário não muda; o custo de linha acompanha. Seções e ingredientes não
    afetados são devolvidos como os mesmos objetos.
    """
    out: List[MenuSection] = []
    touched = 0
    for section in menu_sections:
        items = tuple(_cascade_ingredient(i, premises, guest_count, categories) for i in section.ingredients)
        changed = sum(1 for new, old in zip(items, section.ingredients) if new is not old)
        if changed:
            touched += changed
            out.append(section.model_copy(update={"ingredients": items}))
        else:
            out.append(section)
    logger.debug("Premissas aplicadas: %s ingrediente(s) recalculado(s) para %s convidados", touched, guest_count)
    return tuple(out)

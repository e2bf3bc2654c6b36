# orca_buffet/quote/export.py
"""
Exportadores (CSV e PDF).

Consomem apenas um `QuoteSnapshot` somente leitura; nunca alteram o estado do
editor. O CSV sai de um DataFrame do pandas; o PDF é desenhado com reportlab.
"""
from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from .config import CSV_SEP
from .dto import Quote, QuoteSnapshot
from .i18n import DEFAULT_LOCALE, LocaleConfig, format_currency, format_number, format_percent
from .schema import STATUS_LABELS

logger = logging.getLogger(__name__)

# Colunas canônicas do CSV
SECTION = "Seção"
ITEM = "Item"
QTY = "Quantidade"
UNIT = "Unidade"
UNIT_COST = "Custo Unitário"
LINE_COST = "Custo Total"
EXPORT_COLUMNS = [SECTION, ITEM, QTY, UNIT, UNIT_COST, LINE_COST]

LABOR_SECTION = "Mão de obra"
OTHER_SECTION = "Outros custos"
SUMMARY_SECTION = "Resumo"


def export_filename(quote: Quote, ext: str = "pdf", today: Optional[date] = None) -> str:
    """Orcamento_<evento com espaços trocados por _>_<convidados>_<dd-mm-aaaa>.<ext>"""
    day = today or date.today()
    label = re.sub(r"\s", "_", quote.event_label)
    return f"Orcamento_{label}_{quote.guest_count}_{day:%d-%m-%Y}.{ext}"


def _summary_lines(snapshot: QuoteSnapshot) -> List[tuple]:
    t = snapshot.totals
    return [
        ("Ingredientes", t.ingredients_cost),
        ("Mão de obra", t.labor_cost),
        ("Equipe de cozinha", snapshot.kitchen_cost),
        ("Custo de produção", t.production_cost),
        ("Outros custos", t.other_costs_total),
        (f"Impostos ({format_number(t.tax_rate)}%)", t.tax_amount),
        ("Custo total", t.total_cost),
        ("Preço sugerido", t.suggested_price),
    ]


def snapshot_frame(snapshot: QuoteSnapshot) -> pd.DataFrame:
    """Todas as linhas do orçamento + resumo, em uma tabela plana."""
    rows: List[Dict[str, Any]] = []
    for section in snapshot.quote.menu_sections:
        for item in section.ingredients:
            rows.append({
                SECTION: section.name, ITEM: item.name, QTY: item.quantity,
                UNIT: item.unit, UNIT_COST: item.unit_cost, LINE_COST: item.line_cost,
            })
    for line in snapshot.totals.labor_lines:
        rows.append({
            SECTION: LABOR_SECTION, ITEM: line.role, QTY: line.count,
            UNIT: "profissional", UNIT_COST: line.cost_per_unit, LINE_COST: line.line_cost,
        })
    for cost in snapshot.totals.other_cost_lines:
        rows.append({
            SECTION: OTHER_SECTION, ITEM: cost.name, QTY: None,
            UNIT: None, UNIT_COST: None, LINE_COST: cost.amount,
        })
    for label, value in _summary_lines(snapshot):
        rows.append({SECTION: SUMMARY_SECTION, ITEM: label, QTY: None, UNIT: None, UNIT_COST: None, LINE_COST: value})
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_csv(
    snapshot: QuoteSnapshot,
    path: Optional[Union[str, Path]] = None,
    sep: str = CSV_SEP,
    decimal: str = ",",
) -> str:
    """Gera o CSV. Sem `path` devolve o conteúdo; com `path` grava e devolve o caminho."""
    df = snapshot_frame(snapshot)
    if path is None:
        return df.to_csv(index=False, sep=sep, decimal=decimal)
    out = Path(path)
    df.to_csv(out, index=False, sep=sep, decimal=decimal, encoding="utf-8")
    logger.info("CSV exportado em %s (%s linhas)", out, len(df))
    return str(out)


# ── PDF ──────────────────────────────────────────────────────────────────────

def _draw_header(c, page_w, page_h, title: str) -> None:
    from reportlab.lib.units import cm
    c.setFillColorRGB(0.31, 0.27, 0.9)
    c.rect(0, page_h - 2.5 * cm, page_w, 2.5 * cm, fill=1, stroke=0)
    c.setFillColorRGB(1, 1, 1)
    c.setFont("Helvetica-Bold", 16)
    c.drawString(1.5 * cm, page_h - 1.5 * cm, "OrçaBuffet")
    c.setFont("Helvetica", 9)
    c.drawString(1.5 * cm, page_h - 2.0 * cm, title)
    c.setFillColorRGB(0, 0, 0)


def _draw_footer(c, page_w, page_num: int) -> None:
    from reportlab.lib.units import cm
    c.setFillColorRGB(0.5, 0.5, 0.5)
    c.setFont("Helvetica", 7)
    c.drawRightString(page_w - 1.5 * cm, 0.8 * cm, f"Página {page_num}")
    c.setStrokeColorRGB(0.7, 0.7, 0.7)
    c.line(1.5 * cm, 1.2 * cm, page_w - 1.5 * cm, 1.2 * cm)
    c.setFillColorRGB(0, 0, 0)


def export_pdf(snapshot: QuoteSnapshot, path: Union[str, Path], locale: LocaleConfig = DEFAULT_LOCALE) -> Path:
    """Desenha o orçamento em A4 (cabeçalho, menu, mão de obra, outros custos, resumo)."""
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.units import cm
    from reportlab.pdfgen import canvas as rl_canvas

    quote = snapshot.quote
    out = Path(path)
    page_w, page_h = A4
    c = rl_canvas.Canvas(str(out), pagesize=A4)
    page = 1
    title = f"{quote.event_label} · {quote.guest_count} convidados · {STATUS_LABELS.get(quote.status, quote.status)}"

    _draw_header(c, page_w, page_h, title)
    _draw_footer(c, page_w, page)
    y = page_h - 3.5 * cm

    def ensure_room(height: float) -> None:
        nonlocal y, page
        if y - height < 2 * cm:
            c.showPage()
            page += 1
            _draw_header(c, page_w, page_h, title)
            _draw_footer(c, page_w, page)
            y = page_h - 3.5 * cm

    def heading(text: str) -> None:
        nonlocal y
        ensure_room(1.2 * cm)
        y -= 0.3 * cm
        c.setFont("Helvetica-Bold", 11)
        c.drawString(1.5 * cm, y, text)
        y -= 0.2 * cm
        c.setStrokeColorRGB(0.58, 0.64, 0.72)
        c.line(1.5 * cm, y, page_w - 1.5 * cm, y)
        y -= 0.5 * cm

    def row(label: str, detail: str, value: str, bold: bool = False) -> None:
        nonlocal y
        ensure_room(0.5 * cm)
        c.setFont("Helvetica-Bold" if bold else "Helvetica", 9)
        c.drawString(1.8 * cm, y, label[:60])
        c.drawString(10 * cm, y, detail)
        c.drawRightString(page_w - 1.5 * cm, y, value)
        y -= 0.45 * cm

    if quote.event_date:
        row("Data do evento", "", quote.event_date)
    for premise in quote.consumption_premises:
        row(premise, "", "")

    for section in quote.menu_sections:
        heading(section.name)
        for item in section.ingredients:
            detail = f"{format_number(item.quantity, locale)} {item.unit} x {format_currency(item.unit_cost, locale)}"
            row(item.name, detail, format_currency(item.line_cost, locale))

    if snapshot.totals.labor_lines:
        heading(LABOR_SECTION)
        for line in snapshot.totals.labor_lines:
            detail = f"{format_number(line.count, locale, 0)} x {format_currency(line.cost_per_unit, locale)}"
            row(line.role, detail, format_currency(line.line_cost, locale))

    if snapshot.totals.other_cost_lines:
        heading(OTHER_SECTION)
        for cost in snapshot.totals.other_cost_lines:
            row(cost.name, "", format_currency(cost.amount, locale))

    heading(SUMMARY_SECTION)
    for label, value in _summary_lines(snapshot):
        row(label, "", format_currency(value, locale), bold=label in ("Custo total", "Preço sugerido"))
    row("Margem", "", format_percent(snapshot.margin_percent, locale))

    c.save()
    logger.info("PDF exportado em %s (%s página(s))", out, page)
    return out

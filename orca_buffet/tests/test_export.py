# orca_buffet/tests/test_export.py
from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from orca_buffet.quote.config import AppConfig
from orca_buffet.quote.dto import Quote, QuoteSnapshot
from orca_buffet.quote.editor import QuoteEditor
from orca_buffet.quote.export import (
    EXPORT_COLUMNS,
    SUMMARY_SECTION,
    export_csv,
    export_filename,
    export_pdf,
    snapshot_frame,
)
from orca_buffet.quote.i18n import format_currency, format_percent


@pytest.fixture()
def snapshot(sample_quote: Quote, app_cfg: AppConfig) -> QuoteSnapshot:
    return QuoteEditor(sample_quote, cfg=app_cfg).snapshot()


def test_filename_replaces_whitespace(sample_quote: Quote) -> None:
    name = export_filename(sample_quote, "csv", today=date(2025, 3, 9))
    assert name == "Orcamento_Casamento_de_Ana_100_09-03-2025.csv"


def test_frame_has_every_line_and_summary(snapshot: QuoteSnapshot) -> None:
    df = snapshot_frame(snapshot)
    assert list(df.columns) == EXPORT_COLUMNS
    # 3 ingredientes + 2 funções + 1 outro custo + 8 linhas de resumo
    assert len(df) == 14
    summary = df[df["Seção"] == SUMMARY_SECTION].set_index("Item")["Custo Total"]
    assert summary["Custo total"] == pytest.approx(2214)
    assert summary["Preço sugerido"] == pytest.approx(2214 * 1.4)
    assert summary["Equipe de cozinha"] == pytest.approx(300)


def test_csv_uses_semicolon_and_decimal_comma(snapshot: QuoteSnapshot) -> None:
    text = export_csv(snapshot)
    lines = text.splitlines()
    assert lines[0] == "Seção;Item;Quantidade;Unidade;Custo Unitário;Custo Total"
    assert "Churrasco;Picanha;10,0;kg;80,0;800,0" in lines


def test_csv_to_file(snapshot: QuoteSnapshot, tmp_path: Path) -> None:
    out = export_csv(snapshot, tmp_path / "orcamento.csv")
    content = Path(out).read_text(encoding="utf-8")
    assert "Frete" in content
    assert "Resumo" in content


def test_pdf_is_written(snapshot: QuoteSnapshot, tmp_path: Path) -> None:
    out = export_pdf(snapshot, tmp_path / export_filename(snapshot.quote))
    assert out.exists()
    assert out.read_bytes().startswith(b"%PDF")


def test_export_does_not_change_snapshot(snapshot: QuoteSnapshot, tmp_path: Path) -> None:
    before = snapshot.model_dump()
    export_csv(snapshot)
    export_pdf(snapshot, tmp_path / "x.pdf")
    assert snapshot.model_dump() == before


def test_currency_formatting() -> None:
    assert format_currency(1234.5) == "R$ 1.234,50"
    assert format_currency(-3) == "-R$ 3,00"
    assert format_currency(None) == "-"
    assert format_percent(8) == "8,00%"


def test_kitchen_summary_uses_configured_vocabulary(sample_quote: Quote) -> None:
    editor = QuoteEditor(sample_quote, cfg=AppConfig(kitchen_keywords=("chef",)))
    editor.change_labor(1, "role", "Chef de cozinha")
    df = snapshot_frame(editor.snapshot())
    summary = df[df["Seção"] == SUMMARY_SECTION].set_index("Item")["Custo Total"]
    assert summary["Equipe de cozinha"] == pytest.approx(300)
    assert summary["Custo de produção"] == pytest.approx(1200 + 300)

# orca_buffet/quote/storage.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional, Protocol

from .dto import Quote, now_iso
from .exceptions import PersistenceError

logger = logging.getLogger(__name__)


class QuoteStore(Protocol):
    """Contrato do colaborador de persistência."""
    async def list_quotes(self) -> List[Quote]: ...
    async def create_quote(self, quote: Quote) -> Quote: ...
    async def update_quote(self, quote: Quote) -> Quote: ...


class InMemoryQuoteStore:
    """Persistência em memória com registros no formato JSON (modo local/dev e testes)."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None) -> None:
        self._records: Dict[str, Dict[str, Any]] = {}
        for rec in records or []:
            quote = Quote.from_record(rec)
            self._records[quote.id] = quote.to_record()

    async def list_quotes(self) -> List[Quote]:
        quotes = [Quote.from_record(r) for r in self._records.values()]
        return sorted(quotes, key=lambda q: q.created_at, reverse=True)

    async def create_quote(self, quote: Quote) -> Quote:
        saved = quote.model_copy(update={"id": str(uuid.uuid4()), "created_at": now_iso()})
        self._records[saved.id] = saved.to_record()
        logger.info("Orçamento criado: %s (%s convidados)", saved.id, saved.guest_count)
        return Quote.from_record(self._records[saved.id])

    async def update_quote(self, quote: Quote) -> Quote:
        if quote.id not in self._records:
            raise PersistenceError(f"Falha ao atualizar o orçamento: id '{quote.id}' não encontrado.")
        record = quote.to_record()
        # created_at é atribuído pela persistência e não muda na atualização
        record["createdAt"] = self._records[quote.id]["createdAt"]
        self._records[quote.id] = record
        logger.info("Orçamento atualizado: %s", quote.id)
        return Quote.from_record(record)

    def __len__(self) -> int:
        return len(self._records)

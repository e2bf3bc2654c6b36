# orca_buffet/quote/history.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, Optional, Tuple, TypeVar

from .config import HISTORY_LIMIT

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class HistoryFrame(Generic[T]):
    """Pilha de desfazer/refazer. Guarda referências a snapshots imutáveis."""
    past: Tuple[T, ...]
    present: T
    future: Tuple[T, ...]


class QuoteHistory(Generic[T]):
    """Desfazer/refazer com agrupamento de edições contínuas.

    - set(x, add_to_history=False) / stage_edit(x): troca o presente sem checkpoint
      (digitação tecla a tecla). Lembra o estado anterior à primeira edição da rajada.
    - set(x, add_to_history=True) / commit_edit(x): fecha a rajada com exatamente
      uma entrada em `past` (o estado anterior à rajada) e limpa `future`.
    """

    def __init__(self, initial: T, limit: int = HISTORY_LIMIT) -> None:
        self._frame: HistoryFrame[T] = HistoryFrame(past=(), present=initial, future=())
        self._limit = limit
        self._burst_origin: Optional[T] = None
        self._bursting = False

    # ------------------------------ Leitura -----------------------------------

    @property
    def frame(self) -> HistoryFrame[T]:
        return self._frame

    @property
    def present(self) -> T:
        return self._frame.present

    @property
    def can_undo(self) -> bool:
        return len(self._frame.past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._frame.future) > 0

    @property
    def is_staging(self) -> bool:
        return self._bursting

    # ------------------------------ Escrita -----------------------------------

    def set(self, next_state: T, add_to_history: bool = True) -> None:
        frame = self._frame
        if add_to_history:
            self._checkpoint(next_state)
            return
        if next_state is frame.present:
            return
        if not self._bursting:
            self._bursting = True
            self._burst_origin = frame.present
        self._frame = HistoryFrame(past=frame.past, present=next_state, future=frame.future)

    def stage_edit(self, next_state: T) -> None:
        self.set(next_state, add_to_history=False)

    def commit_edit(self, next_state: Optional[T] = None) -> None:
        self.set(self._frame.present if next_state is None else next_state, add_to_history=True)

    def replace(self, next_state: T) -> None:
        """Troca o presente sem checkpoint e sem abrir rajada (ex.: retorno do salvamento)."""
        frame = self._frame
        if self._burst_origin is frame.present:
            self._burst_origin = next_state
        self._frame = HistoryFrame(past=frame.past, present=next_state, future=frame.future)

    def undo(self) -> None:
        frame = self._frame
        if not frame.past:
            return
        self._end_burst()
        self._frame = HistoryFrame(
            past=frame.past[:-1],
            present=frame.past[-1],
            future=(frame.present,) + frame.future,
        )
        logger.debug("undo: past=%s future=%s", len(self._frame.past), len(self._frame.future))

    def redo(self) -> None:
        frame = self._frame
        if not frame.future:
            return
        self._end_burst()
        self._frame = HistoryFrame(
            past=self._trim(frame.past + (frame.present,)),
            present=frame.future[0],
            future=frame.future[1:],
        )
        logger.debug("redo: past=%s future=%s", len(self._frame.past), len(self._frame.future))

    # ------------------------------ Helpers -----------------------------------

    def _checkpoint(self, next_state: T) -> None:
        frame = self._frame
        origin = self._burst_origin if self._bursting else frame.present
        self._end_burst()
        if next_state is origin:
            # Rajada que voltou ao estado original: nada a registrar
            self._frame = HistoryFrame(past=frame.past, present=next_state, future=frame.future)
            return
        self._frame = HistoryFrame(
            past=self._trim(frame.past + (origin,)),
            present=next_state,
            future=(),
        )
        logger.debug("checkpoint: past=%s", len(self._frame.past))

    def _trim(self, past: Tuple[T, ...]) -> Tuple[T, ...]:
        if len(past) > self._limit:
            return past[len(past) - self._limit:]
        return past

    def _end_burst(self) -> None:
        self._bursting = False
        self._burst_origin = None

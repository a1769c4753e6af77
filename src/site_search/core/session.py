from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from site_search.core.config import AppConfig
from site_search.core.index import IndexStore
from site_search.core.models import ScoredResult
from site_search.core.presentation import results_count_text

logger = logging.getLogger(__name__)


DEFAULT_DEBOUNCE_SECONDS = 0.3


class ViewState(str, Enum):
    DEFAULT = "default"
    NO_RESULTS = "no_results"
    RESULTS = "results"


@dataclass(frozen=True)
class SearchOutcome:
    state: ViewState
    query: str = ""
    results: tuple[ScoredResult, ...] = field(default_factory=tuple)
    summary: str = ""


def outcome_for(query: str, results: list[ScoredResult] | tuple[ScoredResult, ...]) -> SearchOutcome:
    if not query:
        return SearchOutcome(state=ViewState.DEFAULT)
    if not results:
        return SearchOutcome(state=ViewState.NO_RESULTS, query=query)
    return SearchOutcome(
        state=ViewState.RESULTS,
        query=query,
        results=tuple(results),
        summary=results_count_text(results),
    )


class Debouncer:
    """Runs the latest scheduled call after `delay` seconds of quiet.

    Scheduling again cancels the pending call first. Timers go on `loop` when
    given, otherwise on the event loop running at the first `schedule` call;
    scheduling with neither raises RuntimeError.
    """

    def __init__(self, *, delay: float = DEFAULT_DEBOUNCE_SECONDS, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._delay = float(delay)
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def schedule(self, callback: Callable[..., Any], *args: Any) -> None:
        self.cancel()
        self._handle = self._get_loop().call_later(self._delay, self._fire, callback, args)

    def _fire(self, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self._handle = None
        callback(*args)


class SearchSession:
    def __init__(
        self,
        *,
        store: IndexStore,
        on_outcome: Callable[[SearchOutcome], None],
        debouncer: Debouncer | None = None,
    ) -> None:
        self._store = store
        self._on_outcome = on_outcome
        self._debouncer = debouncer or Debouncer()
        self._last: SearchOutcome | None = None

    @classmethod
    def from_config(
        cls,
        *,
        store: IndexStore,
        config: AppConfig,
        on_outcome: Callable[[SearchOutcome], None],
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> SearchSession:
        return cls(
            store=store,
            on_outcome=on_outcome,
            debouncer=Debouncer(delay=config.search.debounce_seconds, loop=loop),
        )

    @property
    def last_outcome(self) -> SearchOutcome | None:
        return self._last

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    def _emit(self, outcome: SearchOutcome) -> None:
        self._last = outcome
        self._on_outcome(outcome)

    def on_input(self, text: str) -> None:
        """Must be called from the event loop the debouncer schedules on."""
        query = (text or "").strip()
        if not query:
            self._debouncer.cancel()
            self._emit(outcome_for("", []))
            return
        self._debouncer.schedule(self.run, query)

    def select_tag(self, query: str) -> SearchOutcome | None:
        self._debouncer.cancel()
        query = (query or "").strip()
        if not query:
            self._emit(outcome_for("", []))
            return self._last
        return self.run(query)

    def run(self, query: str) -> SearchOutcome | None:
        if self._store.index.is_empty:
            logger.debug("Search suppressed, index has no records: %r", query)
            return None
        outcome = outcome_for(query, self._store.search(query))
        self._emit(outcome)
        return outcome

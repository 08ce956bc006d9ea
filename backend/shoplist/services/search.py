"""
Debounced suggestion search.

Each `submit` restarts a timer; the query is issued only after the input has
been idle for the debounce delay. Results are published only for the most
recently *issued* query, so a slow stale query can never overwrite a newer
one even if it finishes last.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, List, Optional, Set, Union

from shoplist.config import settings

logger = logging.getLogger(__name__)

SearchFn = Callable[[str], Union[List[Any], Awaitable[List[Any]]]]
ResultsCallback = Callable[[str, List[Any]], None]


class DebouncedSearch:
    def __init__(
        self,
        search: SearchFn,
        on_results: Optional[ResultsCallback] = None,
        delay_ms: Optional[int] = None,
    ):
        self.search = search
        self.on_results = on_results
        self.delay = (settings.SEARCH_DEBOUNCE_MS if delay_ms is None else delay_ms) / 1000.0
        self.latest_query: Optional[str] = None
        self.latest_results: List[Any] = []
        self._issued = 0  # id of the most recently issued query
        self._timer: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        timer_running = self._timer is not None and not self._timer.done()
        return timer_running or any(not task.done() for task in self._in_flight)

    def submit(self, text: str) -> None:
        """Restart the debounce timer for `text`. Needs a running event loop."""
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().create_task(self._wait_then_issue(text))

    def cancel(self) -> None:
        """Abandon the pending timer and every in-flight query without publishing."""
        self._cancel_timer()
        self._issued += 1
        for task in list(self._in_flight):
            task.cancel()

    async def flush(self) -> List[Any]:
        """Wait until nothing is pending and return the latest published results."""
        if self._timer is not None:
            try:
                await self._timer
            except asyncio.CancelledError:
                pass
        while True:
            running = [task for task in self._in_flight if not task.done()]
            if not running:
                break
            await asyncio.gather(*running, return_exceptions=True)
        return self.latest_results

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _wait_then_issue(self, text: str) -> None:
        await asyncio.sleep(self.delay)
        self._issued += 1
        task = asyncio.get_running_loop().create_task(self._query(text, self._issued))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _query(self, text: str, query_id: int) -> None:
        try:
            results = self.search(text)
            if inspect.isawaitable(results):
                results = await results
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Suggestion query for '{text}' failed: {e}")
            results = []

        if query_id != self._issued:
            logger.debug(f"Dropping stale results for '{text}'")
            return
        self.latest_query = text
        self.latest_results = list(results)
        if self.on_results is not None:
            self.on_results(text, self.latest_results)

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import CancelledError, Future, as_completed
from typing import Callable, Dict, List, Optional, Tuple, Union

from .api import HackerNewsClient
from .config import MAX_IN_FLIGHT, PAGE_SIZE
from .datamodels import Category, Story
from .errors import NetworkError, NotFound
from .events import FetchFailed, FetchPage, FetchSucceeded

logger = logging.getLogger("hn")

FetchResult = Union[FetchSucceeded, FetchFailed]


class FetchScheduler:
    """Resolves a page of a listing into stories.

    ``fetch_page`` blocks and never raises: the outcome is always one
    FetchSucceeded or FetchFailed tagged with the request's generation.
    ``submit`` runs it on a daemon thread and hands the result to a
    callback. Pages and item requests both run on daemon threads, so an
    unfinished fetch never keeps the process alive.
    """

    def __init__(
        self,
        client: HackerNewsClient,
        page_size: int = PAGE_SIZE,
        max_in_flight: int = MAX_IN_FLIGHT,
    ):
        self.client = client
        self.page_size = page_size
        self.max_in_flight = max_in_flight
        # category -> (generation that stored the ids, ids)
        self._ids: Dict[Category, Tuple[int, List[int]]] = {}
        self._lock = threading.Lock()
        # Item requests go to max_in_flight daemon workers through this queue;
        # None tells a worker to exit.
        self._jobs: "queue.Queue[Optional[Tuple[Future, int]]]" = queue.Queue()
        self._workers: List[threading.Thread] = []
        self._closed = False

    def cached_ids(self, category: Category) -> Optional[List[int]]:
        with self._lock:
            entry = self._ids.get(category)
        return entry[1] if entry else None

    def _story_ids(self, request: FetchPage) -> List[int]:
        category = request.category
        if not (request.refresh and request.page == 0):
            ids = self.cached_ids(category)
            if ids is not None:
                return ids
        ids = self.client.list_ids(category)
        with self._lock:
            entry = self._ids.get(category)
            # A slower, older request must not replace ids stored by a newer one.
            if entry is None or entry[0] <= request.generation:
                self._ids[category] = (request.generation, ids)
            else:
                logger.debug(
                    "Not caching %s ids from generation %d (cache holds %d)",
                    category.label,
                    request.generation,
                    entry[0],
                )
        return ids

    def submit(self, request: FetchPage, deliver: Callable[[FetchResult], None]) -> None:
        """Fetch ``request`` in the background and pass the result to ``deliver``."""
        thread = threading.Thread(
            target=self._run,
            args=(request, deliver),
            name=f"hn-page-{request.generation}-{request.page}",
            daemon=True,
        )
        thread.start()

    def _run(self, request: FetchPage, deliver: Callable[[FetchResult], None]) -> None:
        try:
            result = self.fetch_page(request)
        except Exception as e:
            if self._closed:
                return
            logger.exception("Fetch of %s page %d crashed", request.category.label, request.page)
            result = FetchFailed(request.generation, str(e))
        if self._closed:
            logger.debug("Dropping result of generation %d after shutdown", request.generation)
            return
        deliver(result)

    def shutdown(self) -> None:
        """Stop fetching items; queued requests are cancelled, running ones are not awaited."""
        self._closed = True
        while True:
            try:
                job = self._jobs.get_nowait()
            except queue.Empty:
                break
            if job is not None:
                job[0].cancel()
        for _ in self._workers:
            self._jobs.put(None)
        logger.debug("Fetch scheduler shut down")

    def fetch_page(self, request: FetchPage) -> FetchResult:
        category, page, generation = request.category, request.page, request.generation
        try:
            ids = self._story_ids(request)
        except NetworkError as e:
            logger.error("Failed to list %s stories: %s", category.label, e)
            return FetchFailed(generation, str(e))

        start = page * self.page_size
        page_ids = ids[start : start + self.page_size]
        has_more = start + self.page_size < len(ids)
        if not page_ids:
            logger.debug("%s page %d is past the end of the listing", category.label, page)
            return FetchSucceeded(generation, (), has_more=False)

        stories, errors = self._fetch_stories(page_ids)
        if not stories and errors:
            logger.error(
                "All %d stories of %s page %d failed", len(page_ids), category.label, page
            )
            return FetchFailed(generation, str(errors[0]))

        logger.info(
            "Fetched %s page %d: %d/%d stories (generation %d)",
            category.label,
            page,
            len(stories),
            len(page_ids),
            generation,
        )
        return FetchSucceeded(generation, tuple(stories), has_more=has_more)

    def _start_workers(self) -> None:
        with self._lock:
            if self._workers or self._closed:
                return
            for n in range(self.max_in_flight):
                worker = threading.Thread(target=self._work, name=f"hn-item-{n}", daemon=True)
                worker.start()
                self._workers.append(worker)

    def _work(self) -> None:
        while True:
            job = self._jobs.get()
            if job is None:
                return
            future, item_id = job
            if not future.set_running_or_notify_cancel():
                continue
            try:
                future.set_result(self.client.get_story(item_id))
            except Exception as e:
                future.set_exception(e)

    def _request_story(self, item_id: int) -> Future:
        future: Future = Future()
        if self._closed:
            future.cancel()
        else:
            self._jobs.put((future, item_id))
        return future

    def _fetch_stories(self, ids: List[int]) -> tuple[List[Story], List[NetworkError]]:
        """Fetch items concurrently and return them in the order of ``ids``.

        Missing items are dropped silently. Network errors are dropped too,
        but returned so a page where nothing loaded can be reported.
        """
        self._start_workers()
        results: Dict[int, Story] = {}
        errors: List[NetworkError] = []
        future_to_id = {self._request_story(item_id): item_id for item_id in ids}
        for future in as_completed(future_to_id):
            item_id = future_to_id[future]
            try:
                results[item_id] = future.result()
            except NotFound:
                logger.debug("Skipping missing item %s", item_id)
            except NetworkError as e:
                logger.warning("Failed to fetch item %s: %s", item_id, e)
                errors.append(e)
            except CancelledError:
                logger.debug("Request for item %s cancelled", item_id)
        return [results[i] for i in ids if i in results], errors

"""Background loading of the member list.

The fetch runs on a worker thread so the Tk event loop stays responsive.
The Tk thread calls poll() from after() until it returns True; the result
is applied to the store only from that thread.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor

from ..models.user_record import UserRecord
from ..utils.debug_trace import logger
from .data_source import DataSource, DataSourceError
from .user_store import UserStore


class MemberLoader:
    """Fetch members once on a worker thread and load them into a store.

    A failed fetch is logged and leaves the store empty. There is no retry.

    Usage:
        loader = MemberLoader(data_source, store)
        loader.start()
        # later, from the Tk thread:
        if not loader.poll():
            root.after(100, check_again)
    """

    def __init__(
        self,
        data_source: DataSource,
        store: UserStore,
        executor: ThreadPoolExecutor | None = None,
    ):
        """Initialize the loader.

        Args:
            data_source: Where the members come from.
            store: Store to fill once the fetch succeeds.
            executor: Worker pool for the fetch (a single-thread pool if omitted).
        """
        self._source = data_source
        self._store = store
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="adminui-fetch"
        )
        self._fetch: Future[list[UserRecord]] | None = None
        self._finished = False

        # Set when the fetch failed
        self.error: Exception | None = None

    @property
    def is_loading(self) -> bool:
        return self._fetch is not None

    @property
    def is_finished(self) -> bool:
        return self._finished

    def start(self) -> None:
        """Submit the fetch. Later calls do nothing."""
        if self._fetch is not None or self._finished:
            logger.debug("Member fetch already started; ignoring")
            return
        self._fetch = self._executor.submit(self._source.load_all_users)

    def poll(self) -> bool:
        """Apply the fetch result if it is ready.

        Returns:
            True once the fetch has finished, successfully or not.
        """
        if self._finished:
            return True
        if self._fetch is None or not self._fetch.done():
            return False

        fetch, self._fetch = self._fetch, None
        self._finished = True
        try:
            records = fetch.result()
        except DataSourceError as e:
            self.error = e
            logger.error(f"Could not load members from {self._source.location}: {e}")
            return True
        except Exception as e:
            self.error = e
            logger.exception(f"Unexpected error loading members from {self._source.location}")
            return True

        self._store.load(records)
        return True

    def shutdown(self) -> None:
        """Stop the worker pool without waiting for a pending fetch."""
        self._executor.shutdown(wait=False, cancel_futures=True)

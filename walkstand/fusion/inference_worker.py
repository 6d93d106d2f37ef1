################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Single-worker background queue for classifier calls."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import wait
from typing import Any
from typing import Callable
from typing import Optional


_LOG: logging.Logger = logging.getLogger(__name__)


class InferenceWorker:
    """
    Runs jobs one at a time, in submission order, off the sensor thread.

    A bounded number of jobs may be pending. Submissions beyond that bound
    are refused so a slow classifier cannot build an unbounded backlog.
    """

    def __init__(self, max_pending: int = 2, name: str = "InferenceThread") -> None:
        if max_pending <= 0:
            raise ValueError("max_pending must be > 0")

        self._max_pending: int = int(max_pending)
        self._executor: ThreadPoolExecutor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=name
        )
        self._lock: threading.Lock = threading.Lock()
        self._pending: set[Future[Any]] = set()
        self._closed: bool = False

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def submit(self, job: Callable[[], Any]) -> Optional[Future[Any]]:
        """Queue a job.

        Returns:
            The job future, or None if the queue is full or the worker is shut
            down
        """

        with self._lock:
            if self._closed:
                _LOG.warning("Inference worker is shut down, dropping job")
                return None
            if len(self._pending) >= self._max_pending:
                _LOG.warning(
                    "Inference queue full, dropping job pending=%d",
                    len(self._pending),
                )
                return None
            future: Future[Any] = self._executor.submit(job)
            self._pending.add(future)

        future.add_done_callback(self._on_done)

        return future

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for the queued jobs.

        Returns:
            True if all jobs finished before the timeout
        """

        with self._lock:
            pending: list[Future[Any]] = list(self._pending)
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait_for_jobs: bool = True) -> None:
        """Stop accepting jobs and release the worker thread."""

        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait_for_jobs, cancel_futures=not wait_for_jobs)

    def _on_done(self, future: Future[Any]) -> None:
        with self._lock:
            self._pending.discard(future)

        if future.cancelled():
            return
        exc: Optional[BaseException] = future.exception()
        if exc is not None:
            _LOG.error("Inference job failed: %s", exc)

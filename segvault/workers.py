"""Bounded fan-out/fan-in of independent per-segment tasks."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from segvault import config

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_segment_tasks(
    tasks: Sequence[Callable[[], T]],
    max_workers: Optional[int] = None,
) -> List[T]:
    """
    Run tasks on a thread pool and wait for all of them.

    Tasks share no state. Results are returned in submission order regardless
    of completion order. When a task fails, tasks that have not started yet
    are cancelled, tasks already running are left to finish, and the first
    failure observed is re-raised.

    Args:
        tasks: Zero-argument callables, one per segment
        max_workers: Pool size (defaults to SEGVAULT_MAX_WORKERS)

    Returns:
        Task results in submission order
    """
    if not tasks:
        return []

    workers = max(1, min(max_workers or config.MAX_WORKERS, len(tasks)))
    results: List[Optional[T]] = [None] * len(tasks)
    first_error: Optional[BaseException] = None

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="segment") as executor:
        futures: dict[Future, int] = {executor.submit(task): i for i, task in enumerate(tasks)}
        for future in as_completed(futures):
            if future.cancelled():
                continue
            error = future.exception()
            if error is not None:
                if first_error is None:
                    first_error = error
                    logger.debug(f"Segment task {futures[future]} failed, cancelling pending tasks")
                    for pending in futures:
                        pending.cancel()
                continue
            results[futures[future]] = future.result()

    if first_error is not None:
        raise first_error
    return results


def run_streaming_tasks(
    tasks: Iterable[Callable[[], T]],
    max_workers: Optional[int] = None,
    max_pending: Optional[int] = None,
) -> List[T]:
    """
    Run tasks on a thread pool as they are produced.

    ``tasks`` is consumed lazily, so producing the next task (reading the next
    window of input) overlaps with running earlier ones. At most
    ``max_pending`` tasks are submitted but unfinished at any time; the
    producer blocks until a slot frees up. After a failure no further tasks
    are consumed, queued tasks are cancelled, and the earliest submitted
    failure is re-raised once running tasks have finished.

    Args:
        tasks: Iterable of zero-argument callables, one per segment
        max_workers: Pool size (defaults to SEGVAULT_MAX_WORKERS)
        max_pending: In-flight limit (defaults to twice the pool size)

    Returns:
        Task results in submission order
    """
    workers = max(1, max_workers or config.MAX_WORKERS)
    slots = threading.BoundedSemaphore(max(1, max_pending or 2 * workers))
    failed = threading.Event()
    futures: List[Future] = []

    def _on_done(future: Future) -> None:
        if future.cancelled() or future.exception() is not None:
            failed.set()
        slots.release()

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="segment") as executor:
        try:
            for task in tasks:
                slots.acquire()
                if failed.is_set():
                    slots.release()
                    break
                future = executor.submit(task)
                future.add_done_callback(_on_done)
                futures.append(future)
        except BaseException:
            _cancel_all(futures)
            raise
        if failed.is_set():
            logger.debug("Segment task failed, cancelling pending tasks")
            _cancel_all(futures)

    for i, future in enumerate(futures):
        if not future.cancelled() and future.exception() is not None:
            logger.debug(f"Segment task {i} failed")
            raise future.exception()
    return [future.result() for future in futures]


def _cancel_all(futures: Iterable[Future]) -> None:
    for future in futures:
        future.cancel()

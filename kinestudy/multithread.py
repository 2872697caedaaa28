"""Running a reader over many input files in a pool of worker threads."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, wait
from typing import TypeVar

from kinestudy.progressbar import ProgressBarDisplay

F = TypeVar("F")
R = TypeVar("R")


def _worker_count(cores: int) -> int:
    """Requested number of workers, or the machine's thread count when not positive."""
    if cores > 0:
        return cores
    return os.cpu_count() or 1


def multithread_reader(
    reader: Callable[[F], R], files: Iterable[F], cores: int = 6
) -> list[R]:
    """Call ``reader`` on every file using ``cores`` threads while a progress bar runs.

    Returns the reader's results in the order of ``files``; the first exception
    raised by the reader, in that order, is raised again once all work is done.
    """
    inputs = list(files)
    with ThreadPoolExecutor(max_workers=_worker_count(cores)) as pool:
        futures = [pool.submit(reader, item) for item in inputs]
        progress = ProgressBarDisplay(
            lambda: sum(future.done() for future in futures),
            total=len(futures),
            show=False,
        )
        with progress:
            wait(futures)
    return [future.result() for future in futures]
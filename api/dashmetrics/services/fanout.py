from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Any

from ..config import METRICS_MAX_WORKERS

logger = logging.getLogger(__name__)


class MetricsComputationError(RuntimeError):
    def __init__(self, loader: str, cause: BaseException):
        super().__init__(f"loader '{loader}' failed: {cause}")
        self.loader = loader
        self.cause = cause


def run_concurrently(tasks: dict[str, Callable[[], Any]], max_workers: int | None = None) -> dict[str, Any]:
    """Run independent loaders in parallel and join the results by name.

    The first failing loader aborts the whole batch: pending loaders are
    cancelled and MetricsComputationError is raised, so callers never see a
    partially populated result.
    """
    if not tasks:
        return {}
    workers = max(1, min(max_workers or METRICS_MAX_WORKERS, len(tasks)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="metrics") as pool:
        futures = {pool.submit(fn): name for name, fn in tasks.items()}
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for fut in done:
            exc = fut.exception()
            if exc is None:
                continue
            for p in pending:
                p.cancel()
            name = futures[fut]
            logger.error("[FANOUT] loader failed name=%s error=%s", name, exc)
            raise MetricsComputationError(name, exc) from exc
    return {name: fut.result() for fut, name in futures.items()}

"""Ops Reporter: periodic process statistics in the application log.

Invariants:
    - One INFO record per interval on the "intake.ops" logger
    - interval <= 0 disables reporting: no task is started
    - The task only ends by cancellation (lifespan shutdown)

Design Decisions:
    - psutil over /proc parsing: same figures on every platform
    - Stats attached as one `process_stats` extra: JSON logs stay queryable
"""

import asyncio
import logging
from typing import Callable

import psutil

logger = logging.getLogger("intake.ops")


def process_stats(process: psutil.Process) -> dict:
    """Snapshot of memory, CPU and thread usage for one process."""
    with process.oneshot():
        return {
            "pid": process.pid,
            "rss_mb": round(process.memory_info().rss / 1024 / 1024, 1),
            "cpu_percent": process.cpu_percent(),
            "threads": process.num_threads(),
        }


async def report_process_stats(interval: float, submission_count: Callable[[], int]) -> None:
    process = psutil.Process()
    process.cpu_percent()  # first reading is always 0.0
    while True:
        await asyncio.sleep(interval)
        stats = process_stats(process)
        stats["submissions"] = submission_count()
        logger.info(
            f"[ops] rss={stats['rss_mb']}MB cpu={stats['cpu_percent']}% "
            f"threads={stats['threads']} submissions={stats['submissions']}",
            extra={"process_stats": stats},
        )


def start_ops_reporter(
    interval: float, submission_count: Callable[[], int],
) -> asyncio.Task | None:
    if interval <= 0:
        return None
    return asyncio.create_task(report_process_stats(interval, submission_count))

"""Wait-for-all fan-out that keeps successes and records failures."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Hashable, Mapping, Optional, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_settled(
    tasks: Mapping[K, Callable[[], Any]],
    max_workers: int = 4,
    label: str = "task",
) -> Dict[K, Outcome[Any]]:
    """Run every task concurrently and join all of them.

    A failing task never cancels its siblings; its exception is logged and
    stored on its Outcome.
    """
    if not tasks:
        return {}
    outcomes: Dict[K, Outcome[Any]] = {}
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(tasks)))) as pool:
        futures = {key: pool.submit(fn) for key, fn in tasks.items()}
        for key, future in futures.items():
            try:
                outcomes[key] = Outcome(value=future.result())
            except Exception as exc:
                logger.warning("%s %s failed: %s", label, key, exc)
                outcomes[key] = Outcome(error=exc)
    return outcomes

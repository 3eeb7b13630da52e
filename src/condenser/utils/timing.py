"""Wall time per pipeline step, kept on every condense result."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List

from condenser.utils.logging import get_logger

log = get_logger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class StepTiming:
    name: str
    elapsed_s: float
    ok: bool = True


class StepTimer:
    """Times named steps of one run. A step that raises is still recorded, with ok=False."""

    def __init__(self, label: str = "", *, clock: Clock = time.perf_counter) -> None:
        self.label = label
        self._clock = clock
        self.steps: List[StepTiming] = []

    @contextmanager
    def step(self, name: str) -> Iterator[None]:
        started = self._clock()
        ok = False
        try:
            yield
            ok = True
        finally:
            elapsed = self._clock() - started
            self.steps.append(StepTiming(name=name, elapsed_s=elapsed, ok=ok))
            log.debug("%s: %s %s in %.3fs", self.label, name, "done" if ok else "failed", elapsed)

    @property
    def total_s(self) -> float:
        return sum(s.elapsed_s for s in self.steps)

    def summary(self) -> dict[str, float]:
        return {s.name: round(s.elapsed_s, 3) for s in self.steps}

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple


@dataclass
class ModeTimer:
    id: str
    name: str
    active: bool = False
    elapsed_seconds: int = 0


@dataclass(frozen=True)
class ModeTotal:
    name: str
    total_seconds: int


class ModeTimerSet:
    """
    Ordered collection of teaching-mode stopwatches.
    Any number of timers may be active at once; tick() advances all of them.
    """

    def __init__(self, catalog: Iterable[Tuple[str, str]]):
        self._timers: List[ModeTimer] = [ModeTimer(id=i, name=n) for i, n in catalog]
        self._by_id = {t.id: t for t in self._timers}
        if len(self._by_id) != len(self._timers):
            raise ValueError("Mode ids must be unique")

    def __iter__(self) -> Iterator[ModeTimer]:
        return iter(self._timers)

    def __len__(self) -> int:
        return len(self._timers)

    def get(self, mode_id: str) -> ModeTimer:
        return self._by_id[mode_id]

    def toggle(self, mode_id: str) -> bool:
        t = self._by_id[mode_id]
        t.active = not t.active
        return t.active

    def tick(self):
        for t in self._timers:
            if t.active:
                t.elapsed_seconds += 1

    def reset(self):
        for t in self._timers:
            t.active = False
            t.elapsed_seconds = 0

    def totals(self) -> Tuple[ModeTotal, ...]:
        return tuple(ModeTotal(name=t.name, total_seconds=t.elapsed_seconds) for t in self._timers)

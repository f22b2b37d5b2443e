from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple


@dataclass
class ActionCounter:
    id: str
    name: str
    count: int = 0


@dataclass(frozen=True)
class ActionTotal:
    name: str
    count: int


class ActionCounterSet:
    def __init__(self, catalog: Iterable[Tuple[str, str]]):
        self._counters: List[ActionCounter] = [ActionCounter(id=i, name=n) for i, n in catalog]
        self._by_id = {c.id: c for c in self._counters}
        if len(self._by_id) != len(self._counters):
            raise ValueError("Action ids must be unique")

    def __iter__(self) -> Iterator[ActionCounter]:
        return iter(self._counters)

    def __len__(self) -> int:
        return len(self._counters)

    def get(self, action_id: str) -> ActionCounter:
        return self._by_id[action_id]

    def increment(self, action_id: str) -> int:
        c = self._by_id[action_id]
        c.count += 1
        return c.count

    def reset(self):
        for c in self._counters:
            c.count = 0

    def totals(self) -> Tuple[ActionTotal, ...]:
        return tuple(ActionTotal(name=c.name, count=c.count) for c in self._counters)

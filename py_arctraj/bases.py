"""Shared arc-length basis set and basis list utilities."""
from __future__ import annotations

import bisect

from typing_extensions import Callable, Iterable, Iterator, List, Protocol, Sequence

from py_arctraj.logger import logger

__all__ = (
    'BasisChannel',
    'BasisSet',
    'crop_bases',
    'fill_bases',
)


class BasisChannel(Protocol):
    """A channel that can be attached to a `BasisSet`."""

    def connect_base_addition_callback(self, callback: Callable[[float], None]) -> None:
        ...

    def on_base_inserted(self, s: float) -> None:
        ...


class BasisSet:
    """Sorted, deduplicated arc-length bases shared by every channel of a trajectory.

    Bases are only ever added through `insert()`. Registered channels report the bases
    their interpolators introduce through it, and are notified of every basis that
    actually enters the set, so they can add a sample for it.
    """

    def __init__(self, bases: Iterable[float] = ()) -> None:
        self._bases: List[float] = sorted(set(float(b) for b in bases))
        self._observers: List[Callable[[float], None]] = []

    def reset(self, bases: Iterable[float]) -> None:
        """Replace the bases without notifying observers (initial build)."""
        self._bases = sorted(set(float(b) for b in bases))

    def register_channel(self, channel: BasisChannel) -> None:
        channel.connect_base_addition_callback(self.insert)
        self._observers.append(channel.on_base_inserted)

    def detach_channels(self) -> None:
        """Forget every registered channel."""
        self._observers = []

    def insert(self, s: float) -> bool:
        """Insert a basis, keeping order. Returns False if it was already present."""
        s = float(s)
        i = bisect.bisect_left(self._bases, s)
        if i < len(self._bases) and self._bases[i] == s:
            return False
        self._bases.insert(i, s)
        logger.debug(f"Basis {s} added to the shared basis set ({len(self._bases)} bases)")
        for observer in self._observers:
            observer(s)
        return True

    def clone(self) -> BasisSet:
        """Copy of the bases with no registered channels."""
        return BasisSet(self._bases)

    def to_list(self) -> List[float]:
        return list(self._bases)

    def __contains__(self, s: object) -> bool:
        if not isinstance(s, (int, float)):
            return False
        i = bisect.bisect_left(self._bases, s)
        return i < len(self._bases) and self._bases[i] == s

    def __len__(self) -> int:
        return len(self._bases)

    def __iter__(self) -> Iterator[float]:
        return iter(self._bases)

    def __getitem__(self, i: int) -> float:
        return self._bases[i]

    def __repr__(self) -> str:
        return f"BasisSet({self._bases!r})"


def crop_bases(bases: Sequence[float], start: float, end: float) -> List[float]:
    """Bases strictly inside (start, end), framed by start and end themselves."""
    if end <= start:
        return [start]
    return [start] + [b for b in bases if start < b < end] + [end]


def fill_bases(bases: Sequence[float], min_points: int) -> List[float]:
    """Insert evenly spaced bases into the gaps until there are `min_points` bases.

    The extra points are split evenly across gaps; the first gaps take one more
    when the count does not divide.
    """
    x = list(bases)
    if len(x) >= min_points or len(x) < 2:
        return x
    n_gaps = len(x) - 1
    to_add = min_points - len(x)
    per_gap, remainder = divmod(to_add, n_gaps)

    filled = []
    for i in range(n_gaps):
        a, b = x[i], x[i + 1]
        filled.append(a)
        n = per_gap + (1 if i < remainder else 0)
        step = (b - a) / (n + 1)
        filled.extend(a + step * k for k in range(1, n + 1))
    filled.append(x[-1])
    return filled

"""Spatial query descriptions: range, nearest and k-nearest searches."""

from __future__ import annotations

import heapq
import itertools
import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Neighbor:
    """A point index together with its squared distance to the query."""

    index: int
    squared_distance: float


class RangeQuery:
    """Query for every point closer than a radius to its input."""

    def __init__(self, input: Any, radius: float = 0.0) -> None:
        self.input = input
        self._squared_radius = float(radius) ** 2

    def radius(self) -> float:
        return math.sqrt(self._squared_radius)

    def squared_radius(self) -> float:
        return self._squared_radius

    def set_radius(self, radius: float) -> None:
        self._squared_radius = float(radius) ** 2

    def set_squared_radius(self, squared_radius: float) -> None:
        self._squared_radius = float(squared_radius)


class NearestQuery:
    """Query for the single point nearest to its input."""

    def __init__(self, input: Any) -> None:
        self.input = input
        self.reset()

    def reset(self) -> None:
        """Forget any result from a previous search."""
        self._nearest = -1
        self.squared_distance = math.inf

    def get(self) -> int:
        """Index of the nearest point found, or -1 when none was found."""
        return self._nearest

    def offer(self, index: int, squared_distance: float) -> bool:
        """Record a candidate; keep it only if it is closer than the current best."""
        if squared_distance < self.squared_distance:
            self._nearest = index
            self.squared_distance = squared_distance
            return True
        return False


class KNearestQuery:
    """Query for the k points nearest to its input."""

    def __init__(self, input: Any, k: int = 0) -> None:
        if k < 0:
            raise ValueError("k must be non-negative")
        self.input = input
        self.k = k
        self._heap: list[tuple[float, int, int]] = []
        self._counter = itertools.count()

    def reset(self) -> None:
        """Forget any result from a previous search."""
        self._heap.clear()
        self._counter = itertools.count()

    def push(self, index: int, squared_distance: float) -> bool:
        """Offer a candidate; it is kept only while it is among the k closest."""
        if self.k == 0:
            return False
        entry = (-squared_distance, -next(self._counter), index)
        if len(self._heap) < self.k:
            heapq.heappush(self._heap, entry)
            return True
        if squared_distance < -self._heap[0][0]:
            heapq.heapreplace(self._heap, entry)
            return True
        return False

    def worst_squared_distance(self) -> float:
        """Distance a candidate must beat to enter; infinite until k are held."""
        if len(self._heap) < self.k or not self._heap:
            return math.inf
        return -self._heap[0][0]

    def neighbors(self) -> list[Neighbor]:
        """The neighbours held, closest first."""
        ordered = sorted(self._heap, key=lambda e: (-e[0], -e[1]))
        return [Neighbor(index, -neg_d) for neg_d, _, index in ordered]
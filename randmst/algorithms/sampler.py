import numpy as np
from typing import Iterator, List, Optional, Tuple

from randmst.algorithms.union_find import SizedUnionFind
from randmst.algorithms.fat_component import (
    FatComponent, find_fat_component, update_fat_component)
from randmst.algorithms.order_statistics import (
    APPROXIMATION_THRESHOLD, WeightAccumulator)

SPARSE = 'sparse'
FAT = 'fat'


class SamplerInvariantError(RuntimeError):
    """Raised when the sampler's edge bookkeeping has gone out of sync."""


class Edge:
    __slots__ = ("u", "v", "w")

    def __init__(self, u, v, w):
        self.u = u
        self.v = v
        self.w = w

    def __iter__(self):
        return iter((self.u, self.v, self.w))

    def __repr__(self):
        return f"Edge(u={self.u}, v={self.v}, w={self.w:.6g})"


class _RandomStream:
    """
    Hands out scalar draws from a numpy Generator in batches; a numpy call
    per scalar costs more than the rest of a sampling step.
    """
    __slots__ = ['rng', 'batch_size', '_uniforms', '_u_pos', '_exponentials', '_e_pos']

    def __init__(self, rng, batch_size: int = 4096):
        self.rng = rng
        self.batch_size = batch_size
        self._uniforms = []
        self._u_pos = 0
        self._exponentials = []
        self._e_pos = 0

    def uniform(self) -> float:
        if self._u_pos >= len(self._uniforms):
            self._uniforms = self.rng.random(self.batch_size).tolist()
            self._u_pos = 0
        value = self._uniforms[self._u_pos]
        self._u_pos += 1
        return value

    def exponential(self) -> float:
        if self._e_pos >= len(self._exponentials):
            self._exponentials = self.rng.standard_exponential(
                self.batch_size).tolist()
            self._e_pos = 0
        value = self._exponentials[self._e_pos]
        self._e_pos += 1
        return value

    def index(self, k: int) -> int:
        # uniform() < 1, but rounding in u * k can still land on k
        i = int(self.uniform() * k)
        return i if i < k else k - 1

    def bernoulli(self, p: float) -> bool:
        return self.uniform() < p


class FatComponentSampler:
    """
    Lazily yields the edges of the minimum spanning tree of a random complete
    graph, cheapest first, each carrying its Uniform[0, 1] weight.

    Candidates are drawn uniformly among free vertex pairs. Once a component
    holds half the points, pairs are split into fat-to-remainder and
    remainder-to-remainder draws so rejection stays O(1) in expectation.
    """

    def __init__(self, num_points: int, rng=None,
                 threshold: float = APPROXIMATION_THRESHOLD,
                 batch_size: int = 4096):
        self.set = SizedUnionFind(num_points)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.stream = _RandomStream(self.rng, batch_size)
        self.accumulator = WeightAccumulator(threshold)
        self.fat_component: Optional[FatComponent] = None
        self.remaining = num_points - 1
        self.detections = 0
        self.compactions = 0

    @property
    def state(self) -> str:
        return SPARSE if self.fat_component is None else FAT

    def __iter__(self) -> Iterator[Edge]:
        return self

    def __next__(self) -> Edge:
        edge = self.step()
        if edge is None:
            raise StopIteration
        return edge

    def step(self) -> Optional[Edge]:
        if self.remaining == 0:
            return None

        free_edges = self.set.free_edges
        if free_edges == 0:
            raise SamplerInvariantError(
                f"no free edges left with {self.remaining} tree edges still to place")

        # the gap depends only on how many free edges remain, not on which
        # one turns out to be the cheapest
        weight = self.accumulator.advance(self.stream.exponential(), free_edges)

        if self.fat_component is not None:
            if update_fat_component(self.set, self.fat_component):
                self.compactions += 1
        elif free_edges * 2 < self.set.total_edges:
            self.fat_component = find_fat_component(self.set)
            if self.fat_component is not None:
                self.detections += 1

        if self.fat_component is None:
            u, v = self._sample_sparse_edge()
        else:
            u, v = self._sample_component_edge(self.fat_component)

        self.remaining -= 1
        return Edge(u, v, weight)

    def _sample_sparse_edge(self) -> Tuple[int, int]:
        n = len(self.set)
        while True:
            u = self.stream.index(n)
            v = self.stream.index(n)
            if self.set.unite(u, v):
                return u, v

    def _sample_component_edge(self, component: FatComponent) -> Tuple[int, int]:
        n = len(self.set)
        outside = n - component.size
        crossing = component.size * outside

        # the chance that the cheapest free edge leaves the fat component
        if self.stream.bernoulli(crossing / self.set.free_edges):
            u = self._sample_inside(component)
            v = self._sample_remainder(component)
            if not self.set.unite(u, v):
                raise SamplerInvariantError(
                    f"points {u} and {v} drawn across the fat component "
                    f"are already connected")
            return u, v

        while True:
            u = self._sample_remainder(component)
            v = self._sample_remainder(component)
            if self.set.unite(u, v):
                return u, v

    def _sample_inside(self, component: FatComponent) -> int:
        n = len(self.set)
        while True:
            u = self.stream.index(n)
            if self.set.root(u) == component.root:
                return u

    def _sample_remainder(self, component: FatComponent) -> int:
        remainders = component.remainders
        if not remainders:
            raise SamplerInvariantError("remainder list is empty")

        while True:
            u = remainders[self.stream.index(len(remainders))]
            if self.set.root(u) != component.root:
                return u


def mst_edges(num_points: int, rng=None) -> List[Edge]:
    return list(FatComponentSampler(num_points, np.random.default_rng(rng)))


def mst_total_length(num_points: int, rng=None) -> float:
    """Total weight of one random complete graph's minimum spanning tree."""
    return sum(edge.w for edge in FatComponentSampler(num_points, np.random.default_rng(rng)))

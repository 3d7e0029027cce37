import numpy as np
from typing import Iterator, Optional, Tuple

# high bit of a slot marks a root; the low bits then hold the component size
ROOT_FLAG = 1 << 31
SIZE_MASK = ROOT_FLAG - 1

MIN_POINTS = 2


class SizedUnionFind:
    """
    Disjoint-set forest over the points 0..n-1 that tracks component sizes
    and the number of vertex pairs already inside a common component.

    Every slot of `data` is either ROOT_FLAG | size (a root) or the index of
    the parent. Parent indices only ever increase along a path, so the root
    of a component is its largest point.
    """
    __slots__ = ['data', 'num_points', 'total_edges', 'internal_edges']

    def __init__(self, n: int):
        if n < MIN_POINTS:
            raise ValueError(
                f"need at least {MIN_POINTS} points to build a spanning tree, got {n}")
        if n > SIZE_MASK:
            raise ValueError(
                f"{n} points do not fit in a slot with a reserved root bit "
                f"(max {SIZE_MASK})")

        self.data = np.full(n, ROOT_FLAG | 1, dtype=np.uint32)
        self.num_points = n
        self.total_edges = n * (n - 1) // 2
        self.internal_edges = 0

    def __len__(self) -> int:
        return self.num_points

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.num_points))

    @property
    def free_edges(self) -> int:
        return self.total_edges - self.internal_edges

    def is_root(self, u: int) -> bool:
        return bool(int(self.data[u]) & ROOT_FLAG)

    def parent(self, u: int) -> int:
        slot = int(self.data[u])
        if slot & ROOT_FLAG:
            return u
        return slot

    def root_size(self, u: int) -> Tuple[int, int]:
        data = self.data
        slot = int(data[u])

        while not slot & ROOT_FLAG:
            parent_slot = int(data[slot])
            if parent_slot & ROOT_FLAG:
                return slot, parent_slot & SIZE_MASK

            # path splitting: point u at its grandparent and step up
            data[u] = parent_slot
            u = slot
            slot = parent_slot

        return u, slot & SIZE_MASK

    def root(self, u: int) -> int:
        return self.root_size(u)[0]

    def size(self, u: int) -> int:
        return self.root_size(u)[1]

    def same_component(self, u: int, v: int) -> bool:
        return self.root(u) == self.root(v)

    def merge(self, u: int, v: int) -> Optional[Tuple[int, int]]:
        """
        Rem's algorithm: climb both paths at once, always advancing the side
        with the smaller parent and splicing it onto the other side's parent.

        Returns (smaller_size, larger_size) of the two merged components, or
        None when u and v were already connected.
        """
        data = self.data
        pu = self.parent(u)
        pv = self.parent(v)

        while pu != pv:
            if pu > pv:
                u, v = v, u
                pu, pv = pv, pu

            if pu == u:
                join_size = int(data[u]) & SIZE_MASK
                data[u] = pv

                root, size = self.root_size(pv)
                data[root] = ROOT_FLAG | (size + join_size)

                if join_size < size:
                    return join_size, size
                return size, join_size

            # splice u onto v's parent and continue from u's old parent
            data[u] = pv
            u = pu
            pu = self.parent(u)

        return None

    def unite(self, u: int, v: int) -> bool:
        sizes = self.merge(u, v)
        if sizes is None:
            return False

        self.internal_edges += sizes[0] * sizes[1]
        return True

    def components(self) -> int:
        return sum(1 for u in range(self.num_points) if self.is_root(u))

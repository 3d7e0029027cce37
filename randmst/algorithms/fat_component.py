from typing import List, Optional

from randmst.algorithms.union_find import SizedUnionFind


class FatComponent:
    """
    The component holding at least half of all points, once one exists.

    `remainders` lists every point outside the component, plus possibly some
    stale points that have joined it since the last compaction.
    """
    __slots__ = ('root', 'size', 'remainders')

    def __init__(self, root: int, size: int, remainders: Optional[List[int]] = None):
        self.root = root
        self.size = size
        self.remainders = remainders if remainders is not None else []

    def __repr__(self):
        return (f"FatComponent(root={self.root}, size={self.size}, "
                f"remainders={len(self.remainders)})")


def find_fat_component(uf: SizedUnionFind) -> Optional[FatComponent]:
    n = len(uf)

    for v in uf:
        root, size = uf.root_size(v)
        if size * 2 >= n:
            remainders = [w for w in uf if uf.root(w) != root]
            return FatComponent(root, size, remainders)

    return None


def update_fat_component(uf: SizedUnionFind, component: FatComponent) -> bool:
    """
    Re-resolves the root and size of the component after later unions.

    The remainder list is only filtered once more than half of it is stale,
    so the cost of a compaction is paid for by the shrinkage before it.
    Returns True when a compaction happened.
    """
    component.root, component.size = uf.root_size(component.root)

    outside = len(uf) - component.size
    if outside * 2 >= len(component.remainders):
        return False

    root = component.root
    component.remainders = [
        point for point in component.remainders if uf.root(point) != root]
    return True

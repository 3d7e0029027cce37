import math

# above this many free edges a gap is tiny enough that 1 - e^-gap ~ gap
APPROXIMATION_THRESHOLD = 1 << 16


class WeightAccumulator:
    """
    Tracks the weight of the next accepted edge in a complete graph with
    i.i.d. Uniform[0, 1] edge weights.

    Only free edges can be accepted, and the next smallest among them sits an
    Exponential(free_edges) gap above the previous one on the exponential
    scale. `inv_min` is e^-X for the running exponential order statistic X,
    so 1 - inv_min is the matching uniform order statistic.
    """
    __slots__ = ['inv_min', 'threshold', 'steps']

    def __init__(self, threshold: float = APPROXIMATION_THRESHOLD):
        self.inv_min = 1.0
        self.threshold = threshold
        self.steps = 0

    @property
    def weight(self) -> float:
        return 1.0 - self.inv_min

    def is_additive(self, free_edges: int) -> bool:
        return free_edges > self.threshold

    def advance(self, sample: float, free_edges: int) -> float:
        """
        Moves to the next order statistic given an Exponential(1) `sample`
        and the number of edges still eligible. Returns the new weight.
        """
        if free_edges <= 0:
            raise ValueError(
                f"free_edges must be positive to draw a gap, got {free_edges}")

        gap = sample / free_edges
        if self.is_additive(free_edges):
            # first-order step; never past weight 1
            self.inv_min = max(self.inv_min - gap, 0.0)
        else:
            self.inv_min *= math.exp(-gap)

        self.steps += 1
        return self.weight


def accumulate(samples, free_edges, threshold: float = APPROXIMATION_THRESHOLD) -> list:
    """
    Runs a fresh accumulator over paired exponential samples and free-edge
    counts and returns the weight after every step.
    """
    acc = WeightAccumulator(threshold)
    return [acc.advance(float(s), int(f)) for s, f in zip(samples, free_edges)]

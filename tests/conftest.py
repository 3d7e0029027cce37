import itertools

import numpy as np
import pytest


class ScriptedRng:
    """
    Stands in for numpy.random.Generator with fixed draws: `uniforms` are
    replayed in order (cycling), every exponential draw is `exponential`.
    """

    def __init__(self, uniforms, exponential=1.0):
        self._uniforms = itertools.cycle(uniforms)
        self.exponential = exponential
        self.calls = 0

    def random(self, size):
        self.calls += 1
        return np.array([next(self._uniforms) for _ in range(size)])

    def standard_exponential(self, size):
        return np.full(size, self.exponential)


def vertex_uniforms(pairs, n):
    """Uniform draws that the sampler maps back onto the given vertex pairs."""
    return [(x + 0.5) / n for pair in pairs for x in pair]


@pytest.fixture
def rng():
    return np.random.default_rng(12345)

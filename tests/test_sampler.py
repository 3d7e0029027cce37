"""Tests for the lazy fat-component MST sampler."""

import itertools
import math

import numpy as np
import pytest
from scipy.special import zeta

from conftest import ScriptedRng, vertex_uniforms
from randmst.algorithms.kruskal import mst_total_length_explicit
from randmst.algorithms.sampler import (
    FAT, SPARSE, Edge, FatComponentSampler, SamplerInvariantError,
    mst_edges, mst_total_length)


class TestScriptedScenario:
    def make_sampler(self):
        uniforms = vertex_uniforms([(0, 1), (2, 3), (1, 2)], 4)
        rng = ScriptedRng(uniforms, exponential=1.0)
        return FatComponentSampler(4, rng), rng

    def test_edges_in_draw_order(self):
        sampler, _ = self.make_sampler()
        edges = list(sampler)
        assert [(e.u, e.v) for e in edges] == [(0, 1), (2, 3), (1, 2)]

    def test_union_bookkeeping(self):
        sampler, _ = self.make_sampler()
        contributions = []
        while True:
            before = sampler.set.internal_edges
            if sampler.step() is None:
                break
            contributions.append(sampler.set.internal_edges - before)

        assert contributions == [1, 1, 4]
        assert sampler.set.internal_edges == 6
        for u, v in itertools.combinations(range(4), 2):
            assert sampler.set.same_component(u, v)

    def test_weights_follow_free_edge_counts(self):
        sampler, _ = self.make_sampler()
        weights = [e.w for e in sampler]
        exponents = np.cumsum([1 / 6, 1 / 5, 1 / 4])
        assert weights == pytest.approx(list(1 - np.exp(-exponents)))

    def test_stops_after_spanning_tree(self):
        sampler, rng = self.make_sampler()
        list(sampler)
        calls = rng.calls

        assert sampler.remaining == 0
        assert sampler.step() is None
        assert sampler.step() is None
        assert rng.calls == calls
        with pytest.raises(StopIteration):
            next(sampler)


class TestSpanningTree:
    @pytest.mark.parametrize("n", [2, 3, 5, 17, 64, 257, 1000])
    def test_exactly_n_minus_one_unions(self, n, rng):
        sampler = FatComponentSampler(n, rng)
        edges = list(sampler)

        assert len(edges) == n - 1
        assert sampler.set.components() == 1
        assert sampler.set.free_edges == 0
        root = sampler.set.root(0)
        assert all(sampler.set.root(u) == root for u in sampler.set)

    def test_edges_form_a_tree(self, rng):
        n = 300
        edges = mst_edges(n, rng)
        seen = {}

        def find(x):
            while seen.get(x, x) != x:
                x = seen[x]
            return x

        for e in edges:
            assert e.u != e.v
            ru, rv = find(e.u), find(e.v)
            assert ru != rv
            seen[ru] = rv

    def test_counters_after_every_step(self, rng):
        sampler = FatComponentSampler(400, rng)
        while sampler.step() is not None:
            s = sampler.set
            assert s.free_edges + s.internal_edges == s.total_edges
            assert s.free_edges >= 0

    def test_weights_non_decreasing(self, rng):
        weights = [e.w for e in FatComponentSampler(2000, rng)]
        assert all(a <= b for a, b in zip(weights, weights[1:]))
        assert 0.0 < weights[0] and weights[-1] < 1.0


class TestFatComponentState:
    def test_detected_exactly_once(self, rng):
        sampler = FatComponentSampler(3000, rng)
        states = []
        while sampler.step() is not None:
            states.append(sampler.state)
            assert sampler.detections <= 1

        assert sampler.detections == 1
        assert states[0] == SPARSE
        assert states[-1] == FAT
        # no way back to the sparse strategy
        first_fat = states.index(FAT)
        assert all(s == FAT for s in states[first_fat:])

    def test_remainders_cover_outside_points(self, rng):
        n = 2000
        sampler = FatComponentSampler(n, rng)
        while sampler.step() is not None:
            component = sampler.fat_component
            if component is None or sampler.remaining % 25:
                continue
            listed = set(component.remainders)
            root = sampler.set.root(component.root)
            for u in sampler.set:
                if sampler.set.root(u) != root:
                    assert u in listed
            if sampler.remaining < n // 4:
                break

    def test_compaction_happens(self, rng):
        sampler = FatComponentSampler(5000, rng)
        list(sampler)
        assert sampler.compactions > 0


class TestErrors:
    def test_too_few_points(self):
        with pytest.raises(ValueError):
            FatComponentSampler(1)

    def test_free_edges_exhausted_early(self, rng):
        sampler = FatComponentSampler(5, rng)
        sampler.set.internal_edges = sampler.set.total_edges
        with pytest.raises(SamplerInvariantError, match="no free edges"):
            sampler.step()


class TestEstimate:
    def test_matches_explicit_kruskal(self):
        n, trials = 50, 400
        lazy = [mst_total_length(n, np.random.default_rng(s)) for s in range(trials)]
        explicit = [mst_total_length_explicit(n, np.random.default_rng(10_000 + s))
                    for s in range(trials)]

        diff = np.mean(lazy) - np.mean(explicit)
        se = math.sqrt(np.var(lazy) / trials + np.var(explicit) / trials)
        assert abs(diff) < 5 * se

    def test_converges_to_zeta_3(self):
        values = [mst_total_length(4096, np.random.default_rng(s)) for s in range(10)]
        assert np.mean(values) == pytest.approx(float(zeta(3)), abs=0.05)

    def test_threshold_does_not_change_estimate(self):
        n, trials = 400, 60
        default = [sum(e.w for e in FatComponentSampler(n, np.random.default_rng(s)))
                   for s in range(trials)]
        exact = [sum(e.w for e in FatComponentSampler(n, np.random.default_rng(s),
                                                      threshold=math.inf))
                 for s in range(trials)]
        # same stream, only the accumulation mode differs
        assert np.mean(default) == pytest.approx(np.mean(exact), rel=1e-2)


def test_convenience_functions_accept_seeds():
    assert mst_total_length(60, 7) == mst_total_length(60, 7)
    edges = mst_edges(60, np.random.SeedSequence(3))
    assert len(edges) == 59
    assert [(e.u, e.v) for e in edges] == [(e.u, e.v) for e in mst_edges(60, np.random.SeedSequence(3))]


def test_edge_unpacks():
    u, v, w = Edge(1, 2, 0.25)
    assert (u, v, w) == (1, 2, 0.25)

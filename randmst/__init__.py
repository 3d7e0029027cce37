from randmst.algorithms.sampler import (
    Edge, FatComponentSampler, SamplerInvariantError, mst_edges, mst_total_length)
from randmst.algorithms.union_find import SizedUnionFind
from randmst.benchmarking import RunningStats, TrialRunner, run_trial

__version__ = "1.0.0"

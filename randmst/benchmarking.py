import concurrent.futures
import math
import multiprocessing
import time
from typing import Callable, Dict, List, Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from randmst.algorithms.kruskal import mst_total_length_explicit
from randmst.algorithms.sampler import SamplerInvariantError, mst_total_length

# 0 is the random complete graph; geometric dimensions are not handled here
SUPPORTED_DIMENSIONS = (0,)


def check_dimension(dimension: int):
    if dimension not in SUPPORTED_DIMENSIONS:
        raise ValueError(
            f"dimension {dimension} is not supported, only the random complete "
            f"graph (dimension 0) is")


def run_trial(num_points: int, dimension: int, rng=None) -> float:
    """
    One independent estimate of the MST weight. `rng` may be None, a seed,
    a SeedSequence or a numpy Generator.
    """
    check_dimension(dimension)
    return mst_total_length(num_points, np.random.default_rng(rng))


def run_trial_explicit(num_points: int, dimension: int, rng=None) -> float:
    check_dimension(dimension)
    return mst_total_length_explicit(num_points, np.random.default_rng(rng))


class RunningStats:
    """Streaming mean and variance (Welford's update)."""
    __slots__ = ['count', 'mean', '_m2']

    def __init__(self):
        self.count = 0
        self.mean = 0.0
        self._m2 = 0.0

    def update(self, value: float):
        self.count += 1
        delta = value - self.mean
        self.mean += delta / self.count
        self._m2 += delta * (value - self.mean)

    @property
    def variance(self) -> float:
        if self.count < 2:
            return 0.0
        return self._m2 / (self.count - 1)

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    @property
    def std_error(self) -> float:
        if self.count == 0:
            return float('nan')
        return self.std / math.sqrt(self.count)


def _timed_trial(task_args):
    algo_func, num_points, dimension, seed = task_args

    start_time = time.perf_counter()
    value = algo_func(num_points, dimension, seed)
    end_time = time.perf_counter()

    return value, end_time - start_time


class TrialRunner:
    """
    Runs independent MST-weight trials for several algorithms and graph sizes.
    """

    def __init__(self,
                 algorithms: Optional[Dict[str, Callable]] = None,
                 seed: Optional[int] = None,
                 parallel: bool = True,
                 max_workers: Optional[int] = None,
                 show_progress: bool = True):
        """
        Args:
            algorithms (Dict[str, Callable]):
                Dict of {'algo_name': trial_function}
                Each function must accept (num_points, dimension, rng) and
                return the weight of one spanning tree.
                Defaults to the lazy fat-component sampler.

            seed (Optional[int]):
                Root seed; every trial gets its own spawned child stream.
                If None, randomness is uncontrolled.

            parallel (bool): Dispatch trials to a process pool.

            max_workers (Optional[int]):
                Pool size, by default one less than the logical core count.
        """
        self.algorithms = algorithms if algorithms is not None else {
            'fat_component': run_trial}
        self.base_seed = seed
        self.parallel = parallel
        self.max_workers = max_workers or max(1, multiprocessing.cpu_count() - 1)
        self.show_progress = show_progress

    def _collect(self, tasks, desc: str):
        """Yields (weight, seconds) per trial; failed trials yield None."""
        if not self.parallel or len(tasks) == 1:
            for task in tqdm(tasks, desc=desc, disable=not self.show_progress):
                try:
                    yield _timed_trial(task)
                except SamplerInvariantError as exc:
                    print(f"Warning: trial dropped: {exc}")
                    yield None
            return

        with concurrent.futures.ProcessPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(_timed_trial, t) for t in tasks]

            with tqdm(total=len(tasks), desc=desc, disable=not self.show_progress) as pbar:
                for future in concurrent.futures.as_completed(futures):
                    try:
                        yield future.result()
                    except SamplerInvariantError as exc:
                        print(f"Warning: trial dropped: {exc}")
                        yield None
                    finally:
                        pbar.update(1)

    def run_one(self, algo_func: Callable, n: int, trials: int,
                dimension: int = 0, desc: str = "Trials") -> Dict:
        """
        Runs `trials` trials of one algorithm at one size and returns the
        aggregate record.
        """
        check_dimension(dimension)
        if trials < 1:
            raise ValueError(f"trials must be positive, got {trials}")

        seeds = np.random.SeedSequence(self.base_seed).spawn(trials)
        tasks = [(algo_func, n, dimension, s) for s in seeds]

        weights = RunningStats()
        times = []
        failed = 0

        for result in self._collect(tasks, desc):
            if result is None:
                failed += 1
                continue
            value, elapsed = result
            weights.update(value)
            times.append(elapsed)

        return {
            'n': n,
            'dimension': dimension,
            'trials': trials,
            'failed': failed,
            'mean_weight': weights.mean if weights.count else float('nan'),
            'std_weight': weights.std,
            'std_error': weights.std_error,
            'mean_time_s': np.mean(times) if times else float('nan'),
            'std_time_s': np.std(times) if times else float('nan'),
            'total_time_s': float(np.sum(times)),
        }

    def run(self,
            n_values: List[int],
            trials: int,
            dimension: int = 0) -> pd.DataFrame:
        """
        Runs the full benchmark.

        Args:
            n_values (List[int]): List of graph sizes (n).
            trials (int): Number of trials for each (algorithm, n) pair.
            dimension (int): Graph model, 0 for the random complete graph.

        Returns:
            pd.DataFrame: One row per (algorithm, n).
        """
        check_dimension(dimension)
        all_results = []

        for n in n_values:
            print(f"--- Running: n={n}, Trials={trials}, Dimension={dimension} ---")

            for algo_name, algo_func in self.algorithms.items():
                record = self.run_one(algo_func, n, trials, dimension,
                                      desc=f"{algo_name} n={n}")
                record['algorithm'] = algo_name
                all_results.append(record)

        print("--- Benchmark Complete ---")

        columns = ['algorithm', 'n', 'dimension', 'trials', 'failed',
                   'mean_weight', 'std_weight', 'std_error',
                   'mean_time_s', 'std_time_s', 'total_time_s']
        return pd.DataFrame(all_results, columns=columns)

import argparse
import sys
import time

import pandas as pd

from randmst.benchmarking import (
    SUPPORTED_DIMENSIONS, TrialRunner, run_trial, run_trial_explicit)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="randmst",
        description="Estimate the expected MST weight of random complete graphs")

    parser.add_argument("flag", type=int,
                        help="Reserved; ignored.")

    parser.add_argument("num_points", type=int,
                        help="Number of points per graph.")

    parser.add_argument("num_trials", type=int,
                        help="Number of trials to run.")

    parser.add_argument("dimension", type=int, choices=range(0, 5),
                        help="0 is the random complete graph, the only "
                             "supported model.")

    parser.add_argument("-t", "--time", action="store_true",
                        help="Display total time and time per trial")

    parser.add_argument("-n", "--no-parallel", action="store_true",
                        help="Run each trial in series (for debugging)")

    parser.add_argument("--seed", type=int, default=None,
                        help="Root seed for the trial streams")

    parser.add_argument("--workers", type=int, default=None,
                        help="Worker processes when running in parallel")

    parser.add_argument("--explicit", action="store_true",
                        help="Also run plain Kruskal on the full edge list "
                             "(small n only)")

    parser.add_argument("--output", type=str, default=None,
                        help="Write the per-algorithm results to this CSV file")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.dimension not in SUPPORTED_DIMENSIONS:
        print(f"dimension {args.dimension} is not supported!", file=sys.stderr)
        return 2
    if args.num_points < 2:
        print(f"num_points must be at least 2, got {args.num_points}", file=sys.stderr)
        return 2
    if args.num_trials < 1:
        print(f"num_trials must be positive, got {args.num_trials}", file=sys.stderr)
        return 2

    algorithms = {'fat_component': run_trial}
    if args.explicit:
        algorithms['kruskal'] = run_trial_explicit

    runner = TrialRunner(algorithms, seed=args.seed,
                         parallel=not args.no_parallel,
                         max_workers=args.workers,
                         show_progress=args.time)

    start = time.perf_counter()
    results_df = runner.run([args.num_points], args.num_trials, args.dimension)
    elapsed = time.perf_counter() - start

    if args.time:
        print(f"elapsed {elapsed:.6f}s ({elapsed / args.num_trials:.6f}s per trial)")
        pd.set_option('display.width', 1000)
        print(results_df)

    average = results_df.loc[results_df['algorithm'] == 'fat_component', 'mean_weight'].iloc[0]
    print(f"{average:.6f} {args.num_points} {args.num_trials} {args.dimension}")

    if args.output:
        results_df.to_csv(args.output, index=False)
        print(f"Results saved to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())

import math
import os
import shutil
from pathlib import Path

import numpy as np
import pandas as pd
import matplotlib
import matplotlib.pyplot as plt
from scipy.special import zeta
from sklearn.linear_model import LinearRegression

from randmst.benchmarking import TrialRunner, run_trial

RNG_SEED = 42
INPUT_CSV = "sweep_results.csv"
OUT_DIR = "analysis_figures"

# sizes for the sweep when no results exist yet
N_VALUES = [2 ** k for k in range(4, 15)]
TRIALS_PER_SIZE = 20

# limit of E[MST weight] for K_n with Uniform[0, 1] weights (Frieze, 1985)
ZETA_3 = float(zeta(3))


def reset_output_dir(path) -> Path:
    """Empties `path` of earlier figures, creating it if needed."""
    out = Path(path)
    if out.exists():
        shutil.rmtree(out)
    out.mkdir(parents=True)
    return out


def fit_power_law(x, y) -> dict:
    """
    Fits y ~ C * x^k by least squares on log-log axes, ignoring points that
    are not strictly positive. With fewer than two usable points every fitted
    value is NaN.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    used = (x > 0) & (y > 0)

    fit = {"exponent": np.nan, "log_coefficient": np.nan, "r2": np.nan, "used": used}
    if np.count_nonzero(used) < 2:
        return fit

    log_x = np.log(x[used])[:, np.newaxis]
    log_y = np.log(y[used])
    model = LinearRegression().fit(log_x, log_y)

    fit["exponent"] = float(model.coef_[0])
    fit["log_coefficient"] = float(model.intercept_)
    fit["r2"] = float(model.score(log_x, log_y))
    return fit



def convergence_table(df: pd.DataFrame) -> pd.DataFrame:
    """
    Adds the deviation of each mean weight from zeta(3), in absolute terms
    and in standard errors.
    """
    out = df.copy()
    out["deviation"] = out["mean_weight"] - ZETA_3
    with np.errstate(divide="ignore", invalid="ignore"):
        out["z_score"] = out["deviation"] / out["std_error"]
    return out


def save_fig(fig, out_path, dpi=150):
    base, ext = os.path.splitext(out_path)
    if ext.lower() not in [".png", ".pdf"]:
        out_path = base + ".png"
    fig.savefig(out_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)


def style_axes(ax):
    ax.grid(False)
    for spine in ax.spines.values():
        spine.set_color("black")
        spine.set_linewidth(1.0)
    ax.set_facecolor("white")


def plot_weight_convergence(df, out_path):
    fig, ax = plt.subplots(figsize=(10, 6), constrained_layout=True)
    for algo, sub in df.groupby("algorithm"):
        sub = sub.sort_values("n")
        ax.errorbar(sub["n"], sub["mean_weight"], yerr=sub["std_error"],
                    marker="o", capsize=3, linewidth=1.5, label=algo)
    ax.axhline(ZETA_3, color="k", linestyle="--", alpha=0.6,
               label=f"zeta(3) = {ZETA_3:.6f}")
    ax.set_xscale("log", base=2)
    ax.set_xlabel("Points (n)")
    ax.set_ylabel("Mean MST weight")
    ax.set_title("MST weight vs n")
    style_axes(ax)
    ax.legend(frameon=True)
    save_fig(fig, out_path)


def plot_runtime_loglog(df, out_path):
    fig, ax = plt.subplots(figsize=(10, 6), constrained_layout=True)
    ax.set_xscale("log")
    ax.set_yscale("log")
    for algo, sub in df.groupby("algorithm"):
        fit = fit_power_law(sub["n"].values, sub["mean_time_s"].values)
        x = sub["n"].values.astype(float)
        y = sub["mean_time_s"].values.astype(float)
        used = fit["used"]
        ax.scatter(x[used], y[used], marker="x", s=40, label=algo, zorder=3)
        if not math.isnan(fit["exponent"]):
            xs = np.sort(x[used])
            ax.plot(xs, np.exp(fit["log_coefficient"] + fit["exponent"] * np.log(xs)),
                    linestyle="--", linewidth=2.0,
                    label=f"{algo} fit n^{fit['exponent']:.3f} R2={fit['r2']:.3f}")
    ax.set_xlabel("Points (n, log scale)")
    ax.set_ylabel("Mean time per trial (s, log scale)")
    ax.set_title("Runtime scaling")
    style_axes(ax)
    ax.legend(frameon=True)
    save_fig(fig, out_path)


def run_sweep(csv_path, n_values=None, trials=TRIALS_PER_SIZE, seed=RNG_SEED):
    runner = TrialRunner({'fat_component': run_trial}, seed=seed)
    df = runner.run(n_values or N_VALUES, trials)
    df.to_csv(csv_path, index=False)
    print(f"\nRaw data saved to {csv_path}")
    return df


def main(input_csv=INPUT_CSV, out_dir=OUT_DIR, rerun=False):
    if rerun or not os.path.exists(input_csv):
        run_sweep(input_csv)

    if not os.path.exists(input_csv):
        raise FileNotFoundError(f"Input CSV not found at '{input_csv}'.")
    df = pd.read_csv(input_csv)

    # render to files only, whatever backend the caller has configured
    matplotlib.use("Agg")
    reset_output_dir(out_dir)

    table = convergence_table(df)
    table.to_csv(os.path.join(out_dir, "convergence.csv"), index=False)

    slope_rows = []
    for algo, sub in df.groupby("algorithm"):
        fit = fit_power_law(sub["n"].values, sub["mean_time_s"].values)
        slope_rows.append({
            "algorithm": algo,
            "Slope(log-log)": fit["exponent"],
            "Intercept(log-log)": fit["log_coefficient"],
            "R2": fit["r2"],
        })
    pd.DataFrame(slope_rows).to_csv(
        os.path.join(out_dir, "loglog_slopes.csv"), index=False)

    plot_weight_convergence(df, os.path.join(out_dir, "weight_vs_n.png"))
    plot_runtime_loglog(df, os.path.join(out_dir, "runtime_loglog.png"))

    print("DONE")
    print(f"Outputs written to folder: {out_dir}")
    for f in sorted(os.listdir(out_dir)):
        print(" -", f)


if __name__ == "__main__":
    main()

"""
Reflected Ornstein-Uhlenbeck Simulator - Main Analysis
=======================================================
OU and reflected OU paths in 1D and 2D, local time at the boundary,
convergence to the stationary law, autocorrelation decay.

Usage:
    python main.py                          # full run, figures in outputs/figures
    python main.py --n-paths 2000           # faster ensemble
    python main.py --no-figures             # numbers only
    ROU_SEED=7 python main.py               # different seed
"""

import argparse
import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).parent
sys.path.insert(0, str(ROOT / "src"))

from rou_simulator.config import (RunConfig, SimulationGrid, PAPER_1D, PAPER_1D_X0,
                                  PAPER_2D, PAPER_2D_X0)
from rou_simulator.utils import get_logger
from rou_simulator.models.increments import RandomIncrementSource
from rou_simulator.models.euler_maruyama import simulate_ou, simulate_ou_2d
from rou_simulator.models.reflection import (SkorokhodReflection, reflect,
                                             simulate_reflected_ou)
from rou_simulator.models.local_time import accumulate_local_time
from rou_simulator.models.ensemble import run_ensemble
from rou_simulator.analysis.diagnostics import (autocorrelation, compare_stationary,
                                                theoretical_autocorrelation)
from rou_simulator.visualization.rou_plots import (
    plot_reflected_path, plot_2d_paths, plot_stationary_histogram,
    plot_autocorrelation, plot_reflected_stationary, plot_local_time_comparison)


def header(t):
    print(f"\n{'='*70}\n  {t}\n{'='*70}")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------
def _args(cfg: RunConfig) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Reflected Ornstein-Uhlenbeck Monte Carlo")
    p.add_argument("--seed",       type=int, default=cfg.seed)
    p.add_argument("--n-paths",    type=int, default=cfg.n_paths)
    p.add_argument("--output-dir", default=cfg.output_dir)
    p.add_argument("--log-level",  default=cfg.log_level,
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--no-figures", action="store_true", help="Skip figure generation")
    return p.parse_args()


def main():
    cfg = RunConfig()
    args = _args(cfg)
    cfg.seed, cfg.n_paths = args.seed, args.n_paths
    cfg.output_dir, cfg.log_level = args.output_dir, args.log_level
    log = get_logger("rou_simulator", level=cfg.log_level)
    figures = []

    p1, x0 = PAPER_1D, PAPER_1D_X0
    theta, sigma = p1.theta_matrix[0, 0], p1.sigma_matrix[0, 0]

    header("REFLECTED ORNSTEIN-UHLENBECK SIMULATOR")
    print(f"  1D: theta={theta}, mu={p1.mu_vector[0]}, sigma={sigma}, X0={x0}")
    print(f"  Stationary variance sigma^2/(2 theta) = {p1.stationary_variance():.6f}")

    # 1D path, reflection and local time
    header("1D OU PATH, |X| REFLECTION, LOCAL TIME")
    grid = SimulationGrid(T=cfg.path_T, n_steps=cfg.path_steps)
    X = simulate_ou(p1, grid, x0, seed=cfg.seed)
    Y = reflect(X)
    L = accumulate_local_time(X, grid.dt)
    L_sk = SkorokhodReflection().regulator(X)
    _, L_proj = simulate_reflected_ou(p1, grid, x0, seed=cfg.seed)
    print(f"  Steps: {grid.n_steps}, dt: {grid.dt:.4f}")
    print(f"  Time below zero:          {np.mean(X < 0):.2%}")
    print(f"  min |X|:                  {Y.min():.6f}")
    print(f"  L(T) negative excursions: {L[-1]:.6f}")
    print(f"  L(T) Skorokhod regulator: {L_sk[-1]:.6f}")
    print(f"  L(T) projected Euler:     {L_proj[-1, 0]:.6f}")

    # 2D
    header("2D OU AND ORTHANT REFLECTION")
    X2 = simulate_ou_2d(PAPER_2D, grid, PAPER_2D_X0, seed=cfg.seed)
    Y2 = reflect(X2, policy="orthant")
    print(f"  Theta = {PAPER_2D.theta_matrix.tolist()}, mu = {PAPER_2D.mu_vector.tolist()}")
    print(f"  min reflected coordinate: {Y2.min(axis=0)}")
    print(f"  time-average (2nd half):  {Y2[grid.n_steps // 2:].mean(axis=0)}")
    print(f"  stationary cov (OU):      {PAPER_2D.stationary_covariance().round(4).tolist()}")

    # Ensemble
    header("STATIONARY DISTRIBUTION (TERMINAL VALUES)")
    egrid = SimulationGrid(T=cfg.ensemble_T, n_steps=cfg.ensemble_steps)
    euler_src, proj_src = RandomIncrementSource(cfg.seed).spawn(2)
    ens = run_ensemble(p1, egrid, cfg.n_paths, terminal_only=True, x0=x0, source=euler_src)
    cmp = compare_stationary(ens.terminal_values(), p1)
    print(f"  Paths: {cmp.n}, T: {egrid.T}, dt: {egrid.dt}")
    print(f"  E[X(T)] sample:       {cmp.sample_mean:.6f}")
    print(f"  E[X(T)] theoretical:  {cmp.theoretical_mean:.6f}")
    print(f"  Var[X(T)] sample:     {cmp.sample_var:.6f}")
    print(f"  Var[X(T)] theoretical:{cmp.theoretical_var:.6f}  (rel err {cmp.var_rel_error:.2%})")
    print(f"  E[X(T) | X0] exact:   {float(p1.mean_at(egrid.T, x0)):.6f}")
    print(f"  Var[X(T) | X0] exact: {float(p1.variance_at(egrid.T)):.6f}")
    print(f"  KS statistic:         {cmp.ks_statistic:.4f}  (p={cmp.ks_pvalue:.3f})")

    abs_terminal = np.abs(ens.terminal_values())
    proj = run_ensemble(p1, egrid, cfg.n_paths, terminal_only=True, x0=x0,
                        source=proj_src, scheme="projected")
    print(f"  E[|X(T)|]:            {abs_terminal.mean():.6f}")
    print(f"  E[Y(T)] projected:    {proj.terminal_values().mean():.6f}")

    # Autocorrelation
    header("AUTOCORRELATION")
    agrid = SimulationGrid(T=cfg.acf_T, n_steps=cfg.acf_steps)
    Xa = simulate_ou(p1, agrid, p1.stationary_mean(), seed=cfg.seed)
    max_lag = int(round(cfg.acf_max_lag_time / agrid.dt))
    acf_pairs = autocorrelation(Xa, max_lag)
    for tau in (0.5, 1.0, 2.0, 5.0):
        lag = int(round(tau / agrid.dt))
        if lag <= max_lag:
            print(f"  rho({tau:>3}) empirical {acf_pairs[lag][1]: .4f}   "
                  f"theoretical {float(theoretical_autocorrelation(theta, lag, agrid.dt)):.4f}")

    if not args.no_figures:
        header("GENERATING VISUALIZATIONS")
        out = cfg.output_dir
        figures = [
            plot_reflected_path(grid.times, X, Y, L, out),
            plot_2d_paths(grid.times, X2, Y2, PAPER_2D.mu_vector, out),
            plot_stationary_histogram(ens.terminal_values(), p1, cfg.bins, out),
            plot_autocorrelation(acf_pairs, theta, agrid.dt, out),
            plot_reflected_stationary(abs_terminal, proj.terminal_values(), p1, cfg.bins, out),
            plot_local_time_comparison(grid.times, L, L_sk, L_proj[:, 0], out),
        ]
        log.info("%d figures saved to %s", len(figures), out)

    header("ANALYSIS COMPLETE")
    return figures


if __name__ == "__main__":
    main()

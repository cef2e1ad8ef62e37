"""
Smoke Tests -- Figures
=======================
Each figure function renders from small simulated inputs and writes a PNG.

Author: Jose Orlando Bobadilla Fuentes, CQF
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from rou_simulator import (
    SimulationGrid, SkorokhodReflection, simulate_ou, simulate_ou_2d, reflect,
    simulate_reflected_ou, accumulate_local_time, autocorrelation, run_ensemble)
from rou_simulator.config import PAPER_1D, PAPER_2D, PAPER_2D_X0
from rou_simulator.visualization.rou_plots import (
    plot_reflected_path, plot_2d_paths, plot_stationary_histogram,
    plot_autocorrelation, plot_reflected_stationary, plot_local_time_comparison)


@pytest.fixture(scope="module")
def grid():
    return SimulationGrid(T=5.0, n_steps=250)


@pytest.fixture(scope="module")
def path_1d(grid):
    return simulate_ou(PAPER_1D, grid, x0=1.0, seed=1)


def _saved(path):
    return os.path.isfile(path) and os.path.getsize(path) > 0


class TestFigures:

    def test_reflected_path(self, tmp_path, grid, path_1d):
        L = accumulate_local_time(path_1d, grid.dt)
        out = plot_reflected_path(grid.times, path_1d, reflect(path_1d), L, str(tmp_path))
        assert _saved(out) and out.endswith("01_ou_vs_rou_1d.png")

    def test_2d_paths(self, tmp_path, grid):
        X = simulate_ou_2d(PAPER_2D, grid, PAPER_2D_X0, seed=2)
        out = plot_2d_paths(grid.times, X, reflect(X, "orthant"), PAPER_2D.mu_vector,
                            str(tmp_path))
        assert _saved(out)

    def test_histograms(self, tmp_path):
        g = SimulationGrid(T=5.0, n_steps=100)
        ens = run_ensemble(PAPER_1D, g, 500, x0=0.0, seed=3)
        proj = run_ensemble(PAPER_1D, g, 500, x0=0.0, seed=4, scheme="projected")
        assert _saved(plot_stationary_histogram(ens.terminal_values(), PAPER_1D, 20,
                                                str(tmp_path)))
        assert _saved(plot_reflected_stationary(np.abs(ens.terminal_values()),
                                                proj.terminal_values(), PAPER_1D, 20,
                                                str(tmp_path)))

    def test_autocorrelation(self, tmp_path, grid, path_1d):
        out = plot_autocorrelation(autocorrelation(path_1d, 50), 0.7, grid.dt,
                                   str(tmp_path / "nested"))
        assert _saved(out)

    def test_local_time_comparison(self, tmp_path, grid, path_1d):
        _, L_proj = simulate_reflected_ou(PAPER_1D, grid, 1.0, seed=1)
        out = plot_local_time_comparison(
            grid.times, accumulate_local_time(path_1d, grid.dt),
            SkorokhodReflection().regulator(path_1d), L_proj[:, 0], str(tmp_path))
        assert _saved(out)

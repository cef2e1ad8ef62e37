"""
Publication-quality visualizations for the ROU simulator.

Figures generated:
    01_ou_vs_rou_1d.png        - OU path, |X| reflection and local-time proxy
    02_rou_2d.png              - 2D OU vs orthant-reflected path
    03_ou_stationary.png       - Terminal histogram vs stationary normal
    04_autocorrelation.png     - Empirical vs exp(-theta tau) autocorrelation
    05_rou_stationary.png      - Reflected terminal histograms vs truncated normal
    06_local_time.png          - Local-time proxy vs Skorokhod regulator vs push

Every function takes already simulated data and returns the saved path.

Author: Jose Orlando Bobadilla Fuentes, CQF
"""
import os
import numpy as np
import matplotlib.pyplot as plt

from ..analysis.diagnostics import (
    empirical_density, reflected_stationary_density, stationary_density,
    theoretical_autocorrelation)

NAVY = "#1a1a2e"; TEAL = "#16697a"; CORAL = "#db6400"
GOLD = "#c5a880"; SLATE = "#4a4e69"
COLORS = [NAVY, TEAL, CORAL, GOLD, SLATE, "#2d6a4f", "#e07a5f"]

plt.rcParams.update({
    "figure.facecolor": "white", "axes.facecolor": "white",
    "axes.grid": True, "grid.alpha": 0.3, "grid.linestyle": "--",
    "savefig.facecolor": "white",
})

def _wm(fig):
    fig.text(0.99, 0.01, "Reflected OU | Monte Carlo", fontsize=7,
             color="gray", alpha=0.5, ha="right", va="bottom")

def _sv(fig, out_dir, name):
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, name)
    fig.savefig(path, bbox_inches="tight"); plt.close(fig); return path


def plot_reflected_path(t, path, reflected, local_time, out_dir):
    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8), sharex=True,
                                   gridspec_kw={"height_ratios": [2, 1]})
    ax1.plot(t, path, color=SLATE, lw=0.8, alpha=0.7, label="OU $X_t$")
    ax1.plot(t, reflected, color=TEAL, lw=1.2, label="Reflected $|X_t|$")
    ax1.axhline(0, color=CORAL, ls="--", lw=1.5, label="Boundary")
    ax1.set_ylabel("$X_t$"); ax1.set_title("OU vs Reflected OU (1D)")
    ax1.legend(loc="upper right")

    ax2.plot(t, local_time, color=NAVY, lw=2)
    ax2.set_xlabel("Time"); ax2.set_ylabel("$L_t$")
    ax2.set_title(r"Local-time proxy $L_t = \int_0^t \max(0, -X_s)\,ds$")
    fig.tight_layout()
    _wm(fig)
    return _sv(fig, out_dir, "01_ou_vs_rou_1d.png")


def plot_2d_paths(t, path, reflected, mu, out_dir):
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))
    ax1.plot(path[:, 0], path[:, 1], color=SLATE, lw=0.6, alpha=0.6, label="OU")
    ax1.plot(reflected[:, 0], reflected[:, 1], color=TEAL, lw=0.8, label="Reflected")
    ax1.scatter(*path[0], color=CORAL, zorder=5, label="$X_0$")
    ax1.scatter(*mu, color=NAVY, marker="*", s=150, zorder=5, label=r"$\mu$")
    ax1.axhline(0, color="gray", ls=":"); ax1.axvline(0, color="gray", ls=":")
    ax1.set_xlabel("$X^{(1)}$"); ax1.set_ylabel("$X^{(2)}$")
    ax1.set_title("Trajectories in the plane"); ax1.legend()

    for k in range(path.shape[1]):
        ax2.plot(t, reflected[:, k], color=COLORS[k + 1], lw=1.2,
                 label=f"Reflected $X^{{({k+1})}}$")
        ax2.axhline(mu[k], color=COLORS[k + 1], ls="--", alpha=0.6)
    ax2.set_xlabel("Time"); ax2.set_title(r"Orthant reflection into $\mathbb{R}_+^2$")
    ax2.legend()
    fig.suptitle("Two-dimensional Reflected OU", fontsize=15, fontweight="bold", y=1.02)
    fig.tight_layout()
    _wm(fig)
    return _sv(fig, out_dir, "02_rou_2d.png")


def plot_stationary_histogram(values, params, bins, out_dir):
    fig, ax = plt.subplots(figsize=(11, 6))
    h = empirical_density(values, bins)
    ax.bar(h.centers, h.density, width=h.widths, alpha=0.6, color=TEAL,
           edgecolor="white", label=f"Empirical (n={h.n:,})")
    x = np.linspace(h.edges[0], h.edges[-1], 400)
    ax.plot(x, stationary_density(params, x), color=CORAL, lw=2.5,
            label=r"$N(\mu, \sigma^2 / 2\theta)$")
    ax.set_xlabel("$X_T$"); ax.set_ylabel("Density")
    ax.set_title("OU terminal values vs stationary distribution")
    ax.legend()
    _wm(fig)
    return _sv(fig, out_dir, "03_ou_stationary.png")


def plot_autocorrelation(acf_pairs, theta, dt, out_dir):
    fig, ax = plt.subplots(figsize=(11, 6))
    lags = np.array([lag for lag, _ in acf_pairs])
    rho = np.array([r for _, r in acf_pairs])
    tau = lags * dt
    ax.plot(tau, rho, color=TEAL, lw=2, label="Empirical")
    ax.plot(tau, theoretical_autocorrelation(theta, lags, dt), color=CORAL,
            lw=2, ls="--", label=r"$e^{-\theta\tau}$")
    ax.axhline(0, color="gray", ls=":")
    ax.set_xlabel(r"Lag $\tau$"); ax.set_ylabel(r"$\rho(\tau)$")
    ax.set_title("Autocorrelation of a long OU path")
    ax.legend()
    _wm(fig)
    return _sv(fig, out_dir, "04_autocorrelation.png")


def plot_reflected_stationary(abs_values, projected_values, params, bins, out_dir):
    fig, ax = plt.subplots(figsize=(11, 6))
    for values, label, color in [(abs_values, "|X| reflection", TEAL),
                                 (projected_values, "Projected Euler", GOLD)]:
        h = empirical_density(values, bins)
        ax.bar(h.centers, h.density, width=h.widths, alpha=0.45, color=color,
               edgecolor="white", label=label)
    hi = max(np.max(abs_values), np.max(projected_values))
    x = np.linspace(0, hi, 400)
    ax.plot(x, reflected_stationary_density(params, x), color=CORAL, lw=2.5,
            label="Truncated normal")
    ax.set_xlabel("$Y_T$"); ax.set_ylabel("Density")
    ax.set_title("Reflected OU terminal values")
    ax.legend()
    _wm(fig)
    return _sv(fig, out_dir, "05_rou_stationary.png")


def plot_local_time_comparison(t, proxy, skorokhod, projected, out_dir):
    fig, ax = plt.subplots(figsize=(11, 6))
    ax.plot(t, proxy, color=NAVY, lw=2, label=r"$\int \max(0,-X_s)\,ds$")
    ax.plot(t, skorokhod, color=TEAL, lw=2, label="Skorokhod regulator")
    ax.plot(t, projected, color=CORAL, lw=2, ls="--", label="Projected Euler push")
    ax.set_xlabel("Time"); ax.set_ylabel("$L_t$")
    ax.set_title("Local time at the boundary: three approximations")
    ax.legend()
    _wm(fig)
    return _sv(fig, out_dir, "06_local_time.png")

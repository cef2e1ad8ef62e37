"""
Setup configuration for the Reflected Ornstein-Uhlenbeck Simulator.

References:
    Ward, A. R., & Glynn, P. W. (2003). Properties of the Reflected
    Ornstein-Uhlenbeck Process. Queueing Systems, 44(2), 109-123.
"""
from setuptools import setup, find_packages

setup(
    name="rou-simulator",
    version="1.0.0",
    author="Jose Orlando Bobadilla Fuentes",
    description="Monte Carlo simulation of the reflected Ornstein-Uhlenbeck process in 1D and 2D",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=["numpy>=1.24.0", "scipy>=1.10.0", "matplotlib>=3.7.0",
                      "statsmodels>=0.14.0"],
    extras_require={
        "dev": ["pytest>=7.4.0"],
    },
    keywords=["ornstein-uhlenbeck", "reflected-diffusion", "local-time",
              "euler-maruyama", "monte-carlo"],
)

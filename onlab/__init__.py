"""
ONLab: Monte Carlo simulation of classical O(N) spin models.

Combines single-spin Metropolis updates with single-cluster Wolff
updates on periodic hyperrectangular lattices, and provides binned
measurement output and analysis.
"""

__version__ = "0.1.0"

from . import core
from . import analysis
from . import utils

from .core import SpinVector, SpinLattice, Hyperrectangle, ClusterTracker, ONModel
from .analysis import BinAnalyzer
from .simulation import run_simulation
from .utils import RandomGenerator, Measure, ConfigurationError, SimulationConfig, read_config

__all__ = [
    "SpinVector",
    "SpinLattice",
    "Hyperrectangle",
    "ClusterTracker",
    "ONModel",
    "BinAnalyzer",
    "run_simulation",
    "RandomGenerator",
    "Measure",
    "ConfigurationError",
    "SimulationConfig",
    "read_config",
    "core",
    "analysis",
    "utils"
]

"""Core O(N) model functionality."""

from .spin_vector import SpinVector
from .spin_lattice import SpinLattice
from .lattice import Hyperrectangle
from .cluster import ClusterTracker
from .engine import ONModel

__all__ = ["SpinVector", "SpinLattice", "Hyperrectangle", "ClusterTracker", "ONModel"]

"""
Storage for the spins of every lattice site.
"""

import numpy as np
from typing import Sequence

from .spin_vector import SpinVector
from ..utils.random import RandomGenerator, generate_random_unit_vectors


class SpinLattice:
    """
    Spin configuration of an N-site lattice.

    Spins are rows of an (n_sites, spin_dim) float array. get() hands out
    SpinVector views of a row, so the owning engine can read and mutate a
    site in place.
    """

    def __init__(self, n_sites: int, spin_dim: int):
        """
        Initialize lattice storage with every spin along component 0.

        Args:
            n_sites: Number of lattice sites
            spin_dim: Number of spin components
        """
        if n_sites < 1:
            raise ValueError(f"n_sites must be positive, got {n_sites}")
        if spin_dim < 1:
            raise ValueError(f"spin_dim must be positive, got {spin_dim}")

        self.n_sites = n_sites
        self.spin_dim = spin_dim
        self._spins = np.zeros((n_sites, spin_dim))
        self._spins[:, 0] = 1.0

    @property
    def configuration(self) -> np.ndarray:
        """Raw (n_sites, spin_dim) array (not a copy)."""
        return self._spins

    def set_configuration(self, config: np.ndarray):
        """Set every spin at once; rows are normalized to unit length."""
        config = np.asarray(config, dtype=float)
        if config.shape != self._spins.shape:
            raise ValueError(f"Spin config must have shape {self._spins.shape}, "
                             f"got {config.shape}")

        norms = np.linalg.norm(config, axis=1)
        if np.any(norms == 0.0):
            raise ValueError("Spin config contains zero vectors")

        self._spins[:] = config / norms[:, None]

    def get(self, site: int) -> SpinVector:
        return SpinVector(self._spins[site])

    def replace(self, site: int, new_spin: SpinVector):
        self._spins[site] = new_spin.v

    def randomize_all(self, rng: RandomGenerator):
        """Independent uniformly random direction on every site."""
        self._spins[:] = generate_random_unit_vectors(self.n_sites, self.spin_dim, rng)

    def reflect_sites(self, sites: Sequence[int], axis: SpinVector):
        """Reflect the listed sites about axis and renormalize them."""
        idx = np.asarray(sites, dtype=np.int64)
        block = self._spins[idx]
        block -= 2.0 * (block @ axis.v)[:, None] * axis.v
        block /= np.linalg.norm(block, axis=1)[:, None]
        self._spins[idx] = block

    def norms(self) -> np.ndarray:
        return np.linalg.norm(self._spins, axis=1)

    def __len__(self) -> int:
        return self.n_sites

    def __repr__(self) -> str:
        return f"SpinLattice(n_sites={self.n_sites}, spin_dim={self.spin_dim})"

"""Random number utilities."""

import numpy as np
from typing import Optional, Union


class RandomGenerator:
    """
    Seeded Mersenne-Twister stream shared by all updates of one chain.

    Every chain owns its own instance; nothing here is shared between
    chains.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize random generator.

        Args:
            seed: Random seed (None draws fresh entropy from the OS)
        """
        self.seed = seed
        self._generator = np.random.Generator(np.random.MT19937(seed))

    def rand_int(self, max_value: int) -> int:
        """Uniform integer in [0, max_value] (inclusive)."""
        return int(self._generator.integers(0, max_value, endpoint=True))

    def rand_dbl_exc(self) -> float:
        """Uniform real strictly inside (0, 1)."""
        u = self._generator.random()
        while u == 0.0:
            u = self._generator.random()
        return float(u)

    def normal(self, size: Union[int, tuple] = 1) -> np.ndarray:
        """Standard normal draws."""
        return self._generator.standard_normal(size)

    def __repr__(self) -> str:
        return f"RandomGenerator(seed={self.seed})"


def generate_random_unit_vectors(
    n: int,
    spin_dim: int,
    rng: RandomGenerator
) -> np.ndarray:
    """
    Generate random unit vectors uniformly distributed on the hypersphere.

    Args:
        n: Number of vectors to generate
        spin_dim: Number of components per vector
        rng: Random generator

    Returns:
        Array of shape (n, spin_dim) with unit vectors
    """
    # Isotropic Gaussian, projected onto the sphere
    vectors = rng.normal((n, spin_dim))
    norms = np.linalg.norm(vectors, axis=1)

    # Redraw the (measure-zero) degenerate rows
    bad = norms == 0.0
    while np.any(bad):
        vectors[bad] = rng.normal((int(np.sum(bad)), spin_dim))
        norms = np.linalg.norm(vectors, axis=1)
        bad = norms == 0.0

    return vectors / norms[:, None]

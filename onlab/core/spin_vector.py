"""
Unit spin vectors and the reflection math used by cluster updates.
"""

import numpy as np
from typing import Optional, Union

from ..utils.random import RandomGenerator


class SpinVector:
    """
    Unit vector with spin_dim real components.

    The components live in a 1-D numpy array. When a SpinVector is handed
    out by a SpinLattice that array is a view into the lattice storage, so
    in-place operations (add_in_place, reflect) write straight through to
    the owning site.
    """

    __slots__ = ("v",)

    def __init__(self, components: Union[np.ndarray, list]):
        """
        Wrap a component array.

        Args:
            components: 1-D array of components (not copied if already a
                float ndarray)
        """
        self.v = np.asarray(components, dtype=float)
        if self.v.ndim != 1:
            raise ValueError(f"Spin components must be 1-D, got shape {self.v.shape}")

    @classmethod
    def zeros(cls, spin_dim: int) -> 'SpinVector':
        return cls(np.zeros(spin_dim))

    @classmethod
    def random_unit(
        cls,
        spin_dim: int,
        rng: RandomGenerator,
        start: int = 0,
        end: Optional[int] = None
    ) -> 'SpinVector':
        """
        Draw a uniformly distributed direction in the component range [start, end].

        Components outside the range are exactly zero, which restricts the
        vector to an embedded subspace. The default range is the full
        vector.

        Args:
            spin_dim: Number of components
            rng: Random generator
            start: First component of the subspace
            end: Last component of the subspace (inclusive, default spin_dim-1)

        Returns:
            New unit SpinVector
        """
        if end is None:
            end = spin_dim - 1
        if not 0 <= start <= end < spin_dim:
            raise ValueError(f"Invalid component range [{start}, {end}] for spin_dim={spin_dim}")

        v = np.zeros(spin_dim)
        n_sub = end - start + 1

        sub = rng.normal(n_sub)
        norm = np.linalg.norm(sub)
        while norm == 0.0:
            sub = rng.normal(n_sub)
            norm = np.linalg.norm(sub)

        v[start:end + 1] = sub / norm
        return cls(v)

    @property
    def spin_dim(self) -> int:
        return self.v.shape[0]

    def __getitem__(self, k: int) -> float:
        return self.v[k]

    def __len__(self) -> int:
        return self.v.shape[0]

    def dot(self, other: 'SpinVector') -> float:
        return float(np.dot(self.v, other.v))

    def norm(self) -> float:
        return float(np.linalg.norm(self.v))

    def add_in_place(self, other: 'SpinVector'):
        self.v += other.v

    def normalize(self):
        self.v /= np.linalg.norm(self.v)

    def reflect(self, axis: 'SpinVector'):
        """
        Reflect in place through the hyperplane orthogonal to axis.

        s <- s - 2 (s.axis) axis, followed by renormalization so that
        repeated flips do not drift off the unit sphere.
        """
        self.v -= 2.0 * np.dot(self.v, axis.v) * axis.v
        self.normalize()

    def reflected_copy(self, axis: 'SpinVector') -> 'SpinVector':
        """Non-mutating reflect."""
        reflected = self.copy()
        reflected.reflect(axis)
        return reflected

    def copy(self) -> 'SpinVector':
        return SpinVector(self.v.copy())

    def __repr__(self) -> str:
        return f"SpinVector({np.array2string(self.v, precision=6)})"

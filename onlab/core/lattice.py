"""
Periodic hyperrectangular lattice geometry.
"""

import numpy as np
from typing import Sequence, Union

from ..utils.config import ConfigurationError


class Hyperrectangle:
    """
    D-dimensional hyperrectangular lattice with periodic boundaries.

    Sites are numbered i = x_0 + L_0 x_1 + L_0 L_1 x_2 + ... . Direction
    k in 0..D-1 steps +1 along axis k; direction D+k steps -1 along the
    same axis.
    """

    def __init__(self, D: int, L: Union[int, Sequence[int]]):
        """
        Build the lattice and its neighbour table.

        Args:
            D: Number of dimensions
            L: Linear size, or one linear size per dimension
        """
        if D < 1:
            raise ConfigurationError(f"Lattice dimension must be >= 1, got {D}")

        if np.isscalar(L):
            L = [int(L)] * D
        L = tuple(int(l) for l in L)

        if len(L) != D:
            raise ConfigurationError(f"Expected {D} linear sizes, got {len(L)}")
        if min(L) < 1:
            raise ConfigurationError(f"Linear sizes must be >= 1, got {L}")

        self.D = D
        self.L = L
        self.N = int(np.prod(L))

        self._neighbours = self._build_neighbour_table()

    def _build_neighbour_table(self) -> np.ndarray:
        """(N, 2D) table of neighbour indices."""
        sites = np.arange(self.N, dtype=np.int64)
        coords = self.coordinates(sites)
        strides = self.strides

        table = np.empty((self.N, 2 * self.D), dtype=np.int64)
        for k in range(self.D):
            forward = (coords[:, k] + 1) % self.L[k]
            backward = (coords[:, k] - 1) % self.L[k]
            table[:, k] = sites + (forward - coords[:, k]) * strides[k]
            table[:, k + self.D] = sites + (backward - coords[:, k]) * strides[k]

        return table

    @property
    def strides(self) -> np.ndarray:
        return np.concatenate(([1], np.cumprod(self.L[:-1]))).astype(np.int64)

    @property
    def neighbour_table(self) -> np.ndarray:
        return self._neighbours

    @property
    def num_directions(self) -> int:
        return 2 * self.D

    def coordinates(self, site: Union[int, np.ndarray]) -> np.ndarray:
        """Cartesian coordinates of one site (shape (D,)) or many (shape (n, D))."""
        site = np.asarray(site, dtype=np.int64)
        coords = np.empty(site.shape + (self.D,), dtype=np.int64)

        remainder = site.copy()
        for k in range(self.D):
            coords[..., k] = remainder % self.L[k]
            remainder //= self.L[k]

        return coords

    def site_index(self, coords: Sequence[int]) -> int:
        coords = np.asarray(coords, dtype=np.int64) % np.asarray(self.L)
        return int(np.dot(coords, self.strides))

    def neighbour(self, site: int, direction: int) -> int:
        return int(self._neighbours[site, direction])

    def __repr__(self) -> str:
        return f"Hyperrectangle(D={self.D}, L={self.L}, N={self.N})"

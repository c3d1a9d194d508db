"""
Numba-compiled kernels for O(N) spin energies and sums.
"""

import numpy as np
from numba import njit


@njit(fastmath=True)
def exchange_energy(spins, neighbor_table, J):
    """
    Exchange energy -J * sum_i sum_{k<D} S_i . S_{i+k}.

    Only the D forward directions are summed so every bond counts once.

    Args:
        spins: (n_sites, spin_dim) array of unit spins
        neighbor_table: (n_sites, 2D) neighbour indices, forward directions first
        J: Exchange coupling

    Returns:
        Exchange energy (float)
    """
    n_sites = spins.shape[0]
    spin_dim = spins.shape[1]
    D = neighbor_table.shape[1] // 2

    total = 0.0
    for i in range(n_sites):
        for k in range(D):
            j = neighbor_table[i, k]
            for a in range(spin_dim):
                total += spins[i, a] * spins[j, a]

    return -J * total


@njit
def field_energy(spins, h):
    """Field energy -h * sum_i S_i[0]."""
    total = 0.0
    for i in range(spins.shape[0]):
        total += spins[i, 0]
    return -h * total


@njit
def local_energy_change(spins, neighbor_table, site, new_spin, J, h):
    """
    Energy change for replacing the spin at site with new_spin.

    dE = -J (nnSum . new - nnSum . old) - h (new[0] - old[0]), where
    nnSum is the sum of all 2D neighbours, accumulated forward then
    backward per axis.
    """
    spin_dim = spins.shape[1]
    D = neighbor_table.shape[1] // 2

    nn_sum = np.zeros(spin_dim)
    for k in range(D):
        forward = neighbor_table[site, k]
        backward = neighbor_table[site, k + D]
        for a in range(spin_dim):
            nn_sum[a] += spins[forward, a]
        for a in range(spin_dim):
            nn_sum[a] += spins[backward, a]

    dot_new = 0.0
    dot_old = 0.0
    for a in range(spin_dim):
        dot_new += nn_sum[a] * new_spin[a]
        dot_old += nn_sum[a] * spins[site, a]

    return -J * (dot_new - dot_old) - h * (new_spin[0] - spins[site, 0])


@njit
def cluster_field_sum(spins, cluster):
    """Sum of component 0 over the listed sites."""
    total = 0.0
    for idx in range(cluster.shape[0]):
        total += spins[cluster[idx], 0]
    return total


@njit(fastmath=True)
def total_magnetization(spins):
    """Vector sum of all spins."""
    n_sites = spins.shape[0]
    spin_dim = spins.shape[1]

    mag = np.zeros(spin_dim)
    for i in range(n_sites):
        for a in range(spin_dim):
            mag[a] += spins[i, a]

    return mag

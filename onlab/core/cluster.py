"""Cluster membership markers for Wolff updates."""

import numpy as np
from typing import Sequence


class ClusterTracker:
    """
    Per-site visited flags used while a cluster grows.

    All flags are False between cluster updates; the update that marks
    sites is responsible for clearing exactly the sites it marked.
    """

    def __init__(self, n_sites: int):
        self.n_sites = n_sites
        self.in_cluster = np.zeros(n_sites, dtype=bool)

    def mark(self, site: int):
        self.in_cluster[site] = True

    def contains(self, site: int) -> bool:
        return bool(self.in_cluster[site])

    __contains__ = contains

    def clear(self, cluster: Sequence[int]):
        """Unmark every site of cluster."""
        self.in_cluster[np.asarray(cluster, dtype=np.int64)] = False

    def is_clear(self) -> bool:
        return not self.in_cluster.any()

    def __repr__(self) -> str:
        return f"ClusterTracker(n_sites={self.n_sites}, marked={int(self.in_cluster.sum())})"

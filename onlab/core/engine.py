"""
Update engine for the classical O(N) model: Metropolis and Wolff moves.
"""

import numpy as np
from typing import List, Optional, TextIO, Tuple

from .cluster import ClusterTracker
from .fast_ops import (
    exchange_energy, field_energy, local_energy_change,
    cluster_field_sum, total_magnetization
)
from .lattice import Hyperrectangle
from .spin_lattice import SpinLattice
from .spin_vector import SpinVector
from ..utils.config import ConfigurationError, SimulationConfig
from ..utils.measure import Measure
from ..utils.random import RandomGenerator


class ONModel:
    """
    O(N) spin model with spin_dim >= 2 components on a periodic lattice.

    H = -J sum_<ij> S_i . S_j - h sum_i S_i[0]

    One sweep mixes single-spin Metropolis updates with one Wolff
    cluster update built from a random reflection axis. All state is
    owned by this instance; independent chains need independent engines
    and random generators.
    """

    MEASUREMENT_NAMES = ("E", "ESq", "AccRate_local", "AccRate_clust")

    def __init__(
        self,
        spin_dim: int,
        lattice: Hyperrectangle,
        J: float = 1.0,
        h: float = 0.0,
        rng: Optional[RandomGenerator] = None,
        temperature: float = 1.0,
        write_clusters: bool = False,
        randomize: bool = True
    ):
        """
        Initialize the model.

        Args:
            spin_dim: Number of spin components (>= 2)
            lattice: Periodic lattice geometry
            J: Exchange coupling (J > 0 is ferromagnetic)
            h: Field along spin component 0
            rng: Random generator (a fresh unseeded one if None)
            temperature: Initial temperature
            write_clusters: Whether to keep cluster-size histograms
            randomize: Start from a random configuration instead of all
                spins along component 0
        """
        if lattice is None or lattice.N < 1:
            raise ConfigurationError("A lattice with at least one site is required")
        if spin_dim < 2:
            raise ConfigurationError(f"spin_dim must be >= 2, got {spin_dim}")
        if temperature <= 0:
            raise ConfigurationError(f"Temperature must be positive, got {temperature}")

        self.spin_dim = spin_dim
        self.lattice = lattice
        self.J = J
        self.h = h
        self.rng = rng if rng is not None else RandomGenerator()
        self.temperature = temperature
        self.warmup_done = False

        self.N = lattice.N
        self._neighbours = lattice.neighbour_table

        self.spins = SpinLattice(self.N, spin_dim)
        self.tracker = ClusterTracker(self.N)

        self.measures = Measure(list(self.MEASUREMENT_NAMES))
        self.num_accept_local = 0
        self.num_accept_cluster = 0
        self._header_written = False

        self.write_clusters = write_clusters
        if write_clusters:
            self.cluster_sizes = np.zeros(self.N, dtype=np.int64)
            self.cluster_sizes_accepted = np.zeros(self.N, dtype=np.int64)
            self.cluster_sizes_rejected = np.zeros(self.N, dtype=np.int64)

        if randomize:
            self.randomize_lattice()

    @classmethod
    def from_config(
        cls,
        config: SimulationConfig,
        rng: Optional[RandomGenerator] = None
    ) -> 'ONModel':
        """Build lattice, random generator and model from a validated config."""
        lattice = Hyperrectangle(config.D, config.L)
        if rng is None:
            rng = RandomGenerator(config.seed)

        return cls(
            spin_dim=config.spin_dim,
            lattice=lattice,
            J=config.J,
            h=config.h,
            rng=rng,
            temperature=config.temperature,
            write_clusters=config.write_clusters
        )

    @property
    def D(self) -> int:
        return self.lattice.D

    @property
    def L(self) -> Tuple[int, ...]:
        return self.lattice.L

    def randomize_lattice(self):
        self.spins.randomize_all(self.rng)

    def change_temperature(self, temperature: float):
        """Set a new temperature; the chain has to be warmed up again."""
        if temperature <= 0:
            raise ValueError(f"Temperature must be positive, got {temperature}")
        self.temperature = temperature
        self.warmup_done = False

    def mark_warmup_done(self):
        """Flag the end of warm-up and restart the cluster-size histograms."""
        self.warmup_done = True
        if self.write_clusters:
            self.cluster_sizes[:] = 0
            self.cluster_sizes_accepted[:] = 0
            self.cluster_sizes_rejected[:] = 0

    def zero_measurements(self):
        """Start a new bin."""
        self.measures.zero()
        self.num_accept_local = 0
        self.num_accept_cluster = 0

    # ------------------------------------------------------------------
    # Observables
    # ------------------------------------------------------------------

    def total_energy(self) -> float:
        """Total energy, recomputed from scratch over all forward bonds."""
        spins = self.spins.configuration
        return (exchange_energy(spins, self._neighbours, self.J)
                + field_energy(spins, self.h))

    def magnetization(self) -> SpinVector:
        """Vector sum of all spins."""
        return SpinVector(total_magnetization(self.spins.configuration))

    def cluster_onsite_energy(self, cluster: np.ndarray) -> float:
        """Field energy -h * sum S[0] of the listed sites."""
        cluster = np.asarray(cluster, dtype=np.int64)
        return -self.h * cluster_field_sum(self.spins.configuration, cluster)

    def make_measurement(self):
        energy_per_site = self.total_energy() / self.N
        self.measures.accumulate("E", energy_per_site)
        self.measures.accumulate("ESq", energy_per_site ** 2)

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def local_update(self) -> Tuple[bool, float]:
        """
        One Metropolis trial with a uniformly random new spin.

        The candidate is drawn before the site. A random number is drawn
        for the acceptance test only when the move raises the energy.

        Returns:
            (accepted, delta_energy) of the proposed move
        """
        candidate = SpinVector.random_unit(self.spin_dim, self.rng)
        site = self.rng.rand_int(self.N - 1)

        delta_energy = local_energy_change(
            self.spins.configuration, self._neighbours, site,
            candidate.v, self.J, self.h
        )

        if delta_energy <= 0 or self.rng.rand_dbl_exc() < np.exp(-delta_energy / self.temperature):
            self.spins.replace(site, candidate)
            self.num_accept_local += 1
            return True, delta_energy

        return False, delta_energy

    def wolff_update(
        self,
        start: int = 0,
        end: Optional[int] = None,
        verbose: bool = False
    ) -> Tuple[bool, float, List[int]]:
        """
        One Wolff cluster move with a random reflection axis.

        The axis is drawn from the component range [start, end]. Bonds to
        unvisited neighbours are activated with probability
        1 - exp(2J/T (r . S_i') (r . S_j)), S_i' being the reflected spin
        at the growing site, so the exchange energy across the cluster
        boundary cancels in the acceptance ratio. The whole cluster is
        then flipped and kept with probability min(1, exp(-dE_onsite/T))
        where dE_onsite is the field energy change of the cluster.

        Args:
            start: First component of the reflection axis subspace
            end: Last component (inclusive, default spin_dim-1)
            verbose: Print the axis, acceptance probability and cluster size

        Returns:
            (accepted, onsite_energy_change, cluster_sites)
        """
        if end is None:
            end = self.spin_dim - 1

        r = SpinVector.random_unit(self.spin_dim, self.rng, start, end)
        spins = self.spins.configuration
        coupling = 2.0 * self.J / self.temperature

        seed = self.rng.rand_int(self.N - 1)
        self.tracker.mark(seed)
        cluster = [seed]
        buffer = [seed]

        while buffer:
            site = buffer.pop()

            # Site is not flipped yet; use its reflected value for the bond test
            reflected = self.spins.get(site).reflected_copy(r)
            r_dot_ref = r.dot(reflected)

            for neigh in self._neighbours[site].tolist():
                if self.tracker.contains(neigh):
                    continue

                exponent = coupling * r_dot_ref * float(np.dot(r.v, spins[neigh]))
                if exponent < 0:
                    p_add = 1.0 - np.exp(exponent)
                    if self.rng.rand_dbl_exc() < p_add:
                        self.tracker.mark(neigh)
                        cluster.append(neigh)
                        buffer.append(neigh)

        sites = np.asarray(cluster, dtype=np.int64)
        size = len(cluster)

        onsite_initial = self.cluster_onsite_energy(sites)
        self.spins.reflect_sites(sites, r)
        onsite_final = self.cluster_onsite_energy(sites)
        onsite_diff = onsite_final - onsite_initial

        if self.write_clusters:
            self.cluster_sizes[size - 1] += 1

        if verbose:
            print(r)

        accepted = True
        if onsite_diff > 0:
            p_accept = np.exp(-onsite_diff / self.temperature)
            if verbose:
                print(f"  PAccept = {p_accept}")
                print(f"  size = {size}\n")

            # Cluster is already flipped: undo it on rejection
            if self.rng.rand_dbl_exc() >= p_accept:
                self.spins.reflect_sites(sites, r)
                accepted = False
        elif verbose:
            print("  onsite <= 0")
            print(f"  size = {size}\n")

        if accepted:
            self.num_accept_cluster += 1
            if self.write_clusters:
                self.cluster_sizes_accepted[size - 1] += 1
        elif self.write_clusters:
            self.cluster_sizes_rejected[size - 1] += 1

        self.tracker.clear(sites)

        return accepted, onsite_diff, cluster

    def sweep(self, verbose: bool = False):
        """N/2 local updates, one full-range Wolff update, then the remaining N - N/2."""
        n_before = self.N // 2
        n_after = self.N - n_before

        for _ in range(n_before):
            self.local_update()

        self.wolff_update(0, self.spin_dim - 1, verbose)

        for _ in range(n_after):
            self.local_update()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def start_bin_file(self):
        """Write the column header again before the next row, for a fresh bin file."""
        self._header_written = False

    def write_bin(self, sink: TextIO, bin_num: int, num_meas: int, sweeps_per_meas: int):
        """
        Write one row of bin averages.

        The acceptance counters are added as rates per site per sweep;
        like every other column they are divided by num_meas on output.
        The column header is written before the first row of each bin file.
        """
        norm = float(self.N * sweeps_per_meas)
        self.measures.accumulate("AccRate_local", self.num_accept_local / norm)
        self.measures.accumulate("AccRate_clust", self.num_accept_cluster / norm)

        if not self._header_written:
            sink.write("# L\tT\tbinNum")
            self.measures.write_measurement_names(sink)
            sink.write("\n")
            self._header_written = True

        sink.write(f"{self.L[0]}\t{self.temperature:.15g}\t{bin_num}")
        self.measures.write_averages(sink, num_meas)
        sink.write("\n")

    def write_cluster_histogram(self, sink: TextIO):
        """Write generated/accepted/rejected counts for every cluster size."""
        if not self.write_clusters:
            return

        sink.write("#T\tclustSize\tnum_generated\tnum_accepted\tnum_rejected\n")
        for i in range(self.N):
            sink.write(f"{self.temperature:.15g}\t{i + 1}\t{self.cluster_sizes[i]}\t"
                       f"{self.cluster_sizes_accepted[i]}\t{self.cluster_sizes_rejected[i]}\n")

    def print_params(self):
        print(f"  J = {self.J}")
        print(f"  h = {self.h}")

    def print_spins(self):
        for site in range(self.N):
            print(f"{site}: {self.spins.get(site)}")

    def __repr__(self) -> str:
        return (f"ONModel(spin_dim={self.spin_dim}, D={self.D}, L={self.L}, "
                f"J={self.J}, h={self.h}, T={self.temperature})")

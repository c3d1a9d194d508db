"""
Thermodynamic analysis of binned O(N) model output.
"""

import numpy as np
from typing import Dict, List, Optional, Tuple
import matplotlib.pyplot as plt
from scipy.stats import sem


class BinAnalyzer:
    """
    Per-temperature statistics from a bin file.

    A bin file holds one row per bin with columns L, T, binNum followed
    by the bin averages of each measurement (E, ESq, AccRate_local,
    AccRate_clust, ...). Bins are treated as independent samples.
    """

    def __init__(self, n_sites: Optional[int] = None):
        """
        Initialize analyzer.

        Args:
            n_sites: Number of lattice sites, needed for the specific heat
        """
        self.n_sites = n_sites

        self.columns: List[str] = []
        self.data: Optional[np.ndarray] = None

        self.temperatures = np.array([])
        self.means: Dict[str, np.ndarray] = {}
        self.errors: Dict[str, np.ndarray] = {}
        self.specific_heats = np.array([])
        self.specific_heat_errors = np.array([])

    def load(self, filename: str) -> 'BinAnalyzer':
        """Read a bin file and compute all statistics."""
        with open(filename, 'r') as f:
            header = f.readline()

        if not header.startswith('#'):
            raise ValueError(f"{filename} has no column header")

        self.columns = header.lstrip('#').split()
        data = np.loadtxt(filename, comments='#', ndmin=2)

        if data.shape[1] != len(self.columns):
            raise ValueError(f"Header lists {len(self.columns)} columns, "
                             f"rows have {data.shape[1]}")

        self.data = data
        self.calculate()
        return self

    def column(self, name: str) -> np.ndarray:
        return self.data[:, self.columns.index(name)]

    def calculate(self):
        """Group bins by temperature and compute means and standard errors."""
        if self.data is None or len(self.data) == 0:
            raise ValueError("No bin data available")

        temps = self.column('T')
        self.temperatures = np.unique(temps)

        measurement_names = self.columns[3:]
        self.means = {name: [] for name in measurement_names}
        self.errors = {name: [] for name in measurement_names}
        specific_heats = []
        specific_heat_errors = []

        for temp in self.temperatures:
            rows = self.data[temps == temp]

            for name in measurement_names:
                values = rows[:, self.columns.index(name)]
                self.means[name].append(np.mean(values))
                self.errors[name].append(sem(values) if len(values) > 1 else np.nan)

            if self.n_sites is not None and 'E' in self.columns and 'ESq' in self.columns:
                # C = N (<e^2> - <e>^2) / T^2 per bin, e = energy per site
                energy = rows[:, self.columns.index('E')]
                energy_sq = rows[:, self.columns.index('ESq')]
                per_bin = self.n_sites * (energy_sq - energy ** 2) / temp ** 2
                specific_heats.append(np.mean(per_bin))
                specific_heat_errors.append(sem(per_bin) if len(per_bin) > 1 else np.nan)

        self.means = {name: np.array(v) for name, v in self.means.items()}
        self.errors = {name: np.array(v) for name, v in self.errors.items()}
        self.specific_heats = np.array(specific_heats)
        self.specific_heat_errors = np.array(specific_heat_errors)

    def summary(self) -> Dict[str, np.ndarray]:
        """Flat dictionary of temperatures, means, errors and specific heat."""
        result = {'temperatures': self.temperatures}
        for name in self.means:
            result[f'{name}_mean'] = self.means[name]
            result[f'{name}_err'] = self.errors[name]
        if len(self.specific_heats):
            result['specific_heat'] = self.specific_heats
            result['specific_heat_err'] = self.specific_heat_errors
        return result

    def plot(
        self,
        save_path: Optional[str] = None,
        figsize: Tuple[int, int] = (12, 4)
    ):
        """
        Plot energy, specific heat and acceptance rates against temperature.

        Args:
            save_path: Path to save figure (optional)
            figsize: Figure size
        """
        if len(self.temperatures) == 0:
            raise ValueError("No thermodynamic data to plot")

        fig, axes = plt.subplots(1, 3, figsize=figsize)
        temps = self.temperatures

        axes[0].errorbar(temps, self.means['E'], yerr=self.errors['E'], fmt='o-', color='blue')
        axes[0].set_xlabel('Temperature')
        axes[0].set_ylabel('Energy per site')
        axes[0].set_title('Internal Energy')
        axes[0].grid(True)

        if len(self.specific_heats):
            axes[1].errorbar(temps, self.specific_heats, yerr=self.specific_heat_errors,
                             fmt='o-', color='green')
        axes[1].set_xlabel('Temperature')
        axes[1].set_ylabel('Specific heat per site')
        axes[1].set_title('Specific Heat')
        axes[1].grid(True)

        for name, color in [('AccRate_local', 'red'), ('AccRate_clust', 'purple')]:
            if name in self.means:
                axes[2].plot(temps, self.means[name], 'o-', color=color, label=name)
        axes[2].set_xlabel('Temperature')
        axes[2].set_ylabel('Accepted moves per site per sweep')
        axes[2].set_title('Acceptance')
        axes[2].legend()
        axes[2].grid(True)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=300, bbox_inches='tight')
            plt.close(fig)
        else:
            plt.show()

    def export_data(self, filename: str):
        """Export per-temperature statistics to an npz file."""
        np.savez(filename, **self.summary())

    def __repr__(self) -> str:
        return (f"BinAnalyzer(n_temperatures={len(self.temperatures)}, "
                f"columns={self.columns})")

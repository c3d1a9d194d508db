"""
Reading simulation parameters from key=value text files.
"""

import math
import re
from pathlib import Path
from typing import Dict, Optional, Union

# First numeric token: optional sign, digits with optional fraction, optional exponent
_NUMBER = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


class ConfigurationError(ValueError):
    """Raised when simulation parameters are missing or invalid."""


def read_value(line: str, separator: str = "=") -> Optional[float]:
    """
    Extract the first numeric token following the first separator.

    Args:
        line: One line of a parameter file
        separator: Character separating key from value

    Returns:
        Parsed value, or None if the line has no separator or no number
    """
    if separator not in line:
        return None

    match = _NUMBER.search(line.split(separator, 1)[1])
    if match is None:
        return None

    return float(match.group(0))


def parse_parameters(text: str) -> Dict[str, float]:
    """
    Parse every key=value line of a parameter file.

    Blank lines and lines starting with '#' are skipped. A repeated key
    keeps its last value.
    """
    params = {}

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key = line.split("=", 1)[0].strip()
        value = read_value(line)
        if value is None:
            raise ConfigurationError(f"Line {lineno}: no numeric value for '{key}'")

        params[key] = value

    return params


class SimulationConfig:
    """
    Validated simulation parameters.

    Keys follow the parameter file names (D, L, spinDim, J, h, T,
    numWarmUpSweeps, sweepsPerMeas, measPerBin, numBins, seed,
    writeClusts).
    """

    DEFAULTS = {
        "spinDim": 3,
        "J": 1.0,
        "h": 0.0,
        "T": 1.0,
        "numWarmUpSweeps": 1000,
        "sweepsPerMeas": 1,
        "measPerBin": 100,
        "numBins": 10,
        "seed": 0,
        "writeClusts": 0,
    }
    REQUIRED = ("D", "L")

    def __init__(self, **params):
        missing = [key for key in self.REQUIRED if key not in params]
        if missing:
            raise ConfigurationError(f"Missing required parameters: {missing}")

        values = dict(self.DEFAULTS)
        values.update(params)

        self.D = self._as_int(values, "D", minimum=1)
        self.L = self._as_int(values, "L", minimum=1)
        self.spin_dim = self._as_int(values, "spinDim", minimum=2)
        self.J = self._as_float(values, "J")
        self.h = self._as_float(values, "h")
        self.temperature = self._as_float(values, "T")
        self.num_warmup_sweeps = self._as_int(values, "numWarmUpSweeps", minimum=0)
        self.sweeps_per_meas = self._as_int(values, "sweepsPerMeas", minimum=1)
        self.meas_per_bin = self._as_int(values, "measPerBin", minimum=1)
        self.num_bins = self._as_int(values, "numBins", minimum=1)
        self.seed = self._as_int(values, "seed", minimum=0)
        self.write_clusters = bool(self._as_int(values, "writeClusts", minimum=0))

        if self.temperature <= 0:
            raise ConfigurationError(f"Temperature must be positive, got {self.temperature}")

    @staticmethod
    def _as_float(values: Dict[str, float], key: str) -> float:
        value = float(values[key])
        if not math.isfinite(value):
            raise ConfigurationError(f"{key} must be finite, got {value}")
        return value

    @staticmethod
    def _as_int(values: Dict[str, float], key: str, minimum: int) -> int:
        value = values[key]
        if not math.isfinite(float(value)):
            raise ConfigurationError(f"{key} must be finite, got {value}")
        if float(value) != int(value):
            raise ConfigurationError(f"{key} must be an integer, got {value}")
        value = int(value)
        if value < minimum:
            raise ConfigurationError(f"{key} must be >= {minimum}, got {value}")
        return value

    @property
    def n_sites(self) -> int:
        return self.L ** self.D

    def to_dict(self) -> Dict[str, float]:
        return {
            "D": self.D,
            "L": self.L,
            "spinDim": self.spin_dim,
            "J": self.J,
            "h": self.h,
            "T": self.temperature,
            "numWarmUpSweeps": self.num_warmup_sweeps,
            "sweepsPerMeas": self.sweeps_per_meas,
            "measPerBin": self.meas_per_bin,
            "numBins": self.num_bins,
            "seed": self.seed,
            "writeClusts": int(self.write_clusters),
        }

    def __repr__(self) -> str:
        return (f"SimulationConfig(D={self.D}, L={self.L}, spinDim={self.spin_dim}, "
                f"J={self.J}, h={self.h}, T={self.temperature})")


def read_config(filename: Union[str, Path]) -> SimulationConfig:
    """
    Read and validate a parameter file.

    Args:
        filename: Path to a key=value parameter file

    Returns:
        SimulationConfig
    """
    path = Path(filename)
    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigurationError(f"Could not read parameter file {path}: {e}") from e

    return SimulationConfig(**parse_parameters(text))

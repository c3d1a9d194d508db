"""Utility functions and helpers."""

from .random import RandomGenerator, generate_random_unit_vectors
from .measure import Measure
from .config import ConfigurationError, SimulationConfig, read_config, parse_parameters
from .io import save_configuration, load_configuration, bin_file_name, cluster_file_name

__all__ = [
    "RandomGenerator",
    "generate_random_unit_vectors",
    "Measure",
    "ConfigurationError",
    "SimulationConfig",
    "read_config",
    "parse_parameters",
    "save_configuration",
    "load_configuration",
    "bin_file_name",
    "cluster_file_name"
]

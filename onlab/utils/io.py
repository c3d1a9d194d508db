"""Input/output utilities for spin configurations and output files."""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import h5py
import numpy as np


def bin_file_name(prefix: str) -> str:
    """Name of the per-bin averages file for an output prefix."""
    return f"{prefix}_bins.txt"


def cluster_file_name(prefix: str, temperature: float) -> str:
    """Name of the cluster-size histogram file for one temperature."""
    return f"{prefix}_clusters_T{temperature:g}.txt"


def save_configuration(
    filename: str,
    spin_config: np.ndarray,
    metadata: Optional[Dict[str, Any]] = None,
    format: str = "auto"
):
    """
    Save spin configuration to file.

    Args:
        filename: Output filename
        spin_config: (n_sites, spin_dim) spin array
        metadata: Optional metadata dictionary (temperature, J, h, ...)
        format: File format ("auto", "npy", "hdf5")
    """
    filepath = Path(filename)
    if format == "auto":
        format = "hdf5" if filepath.suffix in [".h5", ".hdf5"] else "npy"

    if format == "npy":
        np.save(filepath, spin_config)
        if metadata is not None:
            with open(_metadata_path(filepath), 'w') as f:
                json.dump(metadata, f, indent=2)

    elif format == "hdf5":
        with h5py.File(filepath, 'w') as f:
            f.create_dataset('spin_config', data=spin_config)
            if metadata is not None:
                for key, value in metadata.items():
                    f.attrs[key] = value

    else:
        raise ValueError(f"Unknown format: {format}")


def load_configuration(
    filename: str,
    format: str = "auto"
) -> Tuple[np.ndarray, Dict[str, Any]]:
    """
    Load spin configuration from file.

    Args:
        filename: Input filename
        format: File format ("auto", "npy", "hdf5")

    Returns:
        Tuple of (spin_config, metadata)
    """
    filepath = Path(filename)

    if format == "auto":
        if filepath.suffix == ".npy":
            format = "npy"
        elif filepath.suffix in [".h5", ".hdf5"]:
            format = "hdf5"
        else:
            raise ValueError(f"Cannot determine format from filename: {filename}")

    metadata = {}

    if format == "npy":
        spin_config = np.load(filepath)
        metadata_file = _metadata_path(filepath)
        if metadata_file.exists():
            with open(metadata_file, 'r') as f:
                metadata = json.load(f)

    elif format == "hdf5":
        with h5py.File(filepath, 'r') as f:
            spin_config = f['spin_config'][:]
            metadata = {key: _to_python(value) for key, value in f.attrs.items()}

    else:
        raise ValueError(f"Unknown format: {format}")

    return spin_config, metadata


def _metadata_path(filepath: Path) -> Path:
    return filepath.with_name(filepath.stem + "_metadata.json")


def _to_python(value):
    # h5py hands attributes back as numpy scalars
    if isinstance(value, np.generic):
        return value.item()
    return value

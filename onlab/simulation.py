"""
Driver loop: warm-up, binned measurements and output for each temperature.
"""

import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from tqdm import tqdm

from .core.engine import ONModel
from .utils.config import SimulationConfig
from .utils.io import bin_file_name, cluster_file_name, save_configuration


def run_simulation(
    config: SimulationConfig,
    temperatures: Optional[Sequence[float]] = None,
    output_prefix: str = "on_model",
    checkpoint: Optional[str] = None,
    model: Optional[ONModel] = None,
    verbose: bool = True
) -> Dict[str, Any]:
    """
    Run the full simulation described by config.

    For every temperature the chain is warmed up, then numBins bins of
    measPerBin measurements are taken, with sweepsPerMeas sweeps before
    each measurement. Every bin is appended to <prefix>_bins.txt.

    Args:
        config: Validated simulation parameters
        temperatures: Temperatures to visit in order (default: config T)
        output_prefix: Prefix for output files
        checkpoint: Optional file for the final spin configuration
            (.npy or .h5)
        model: Existing model to continue (built from config if None)
        verbose: Print parameters and show progress bars

    Returns:
        Dictionary with output files, final observables and timing
    """
    start_time = time.time()

    if temperatures is None:
        temperatures = [config.temperature]
    if model is None:
        model = ONModel.from_config(config)

    Path(output_prefix).parent.mkdir(parents=True, exist_ok=True)
    bin_file = bin_file_name(output_prefix)
    cluster_files: List[str] = []

    if verbose:
        print(f"O({config.spin_dim}) model, D={config.D}, L={config.L}, N={model.N}")
        model.print_params()

    with open(bin_file, 'w') as fout:
        model.start_bin_file()
        for temp in temperatures:
            model.change_temperature(temp)
            if verbose:
                print(f"T = {temp}")

            for _ in tqdm(range(config.num_warmup_sweeps), desc="Warm-up",
                          disable=not verbose, leave=False):
                model.sweep()
            model.mark_warmup_done()

            pbar = tqdm(total=config.num_bins, desc="Bins", disable=not verbose)
            for bin_num in range(1, config.num_bins + 1):
                model.zero_measurements()

                for _ in range(config.meas_per_bin):
                    for _ in range(config.sweeps_per_meas):
                        model.sweep()
                    model.make_measurement()

                model.write_bin(fout, bin_num, config.meas_per_bin, config.sweeps_per_meas)
                fout.flush()
                pbar.update(1)
            pbar.close()

            if config.write_clusters:
                cluster_file = cluster_file_name(output_prefix, temp)
                with open(cluster_file, 'w') as fclust:
                    model.write_cluster_histogram(fclust)
                cluster_files.append(cluster_file)

    if checkpoint is not None:
        metadata = config.to_dict()
        metadata["T"] = model.temperature
        save_configuration(checkpoint, model.spins.configuration, metadata)

    total_time = time.time() - start_time
    n_sweeps = len(temperatures) * (
        config.num_warmup_sweeps
        + config.num_bins * config.meas_per_bin * config.sweeps_per_meas
    )

    return {
        'temperatures': np.array(temperatures, dtype=float),
        'bin_file': bin_file,
        'cluster_files': cluster_files,
        'final_energy': model.total_energy(),
        'final_magnetization': model.magnetization().v.copy(),
        'n_sweeps': n_sweeps,
        'timing': {
            'total_time': total_time,
            'sweeps_per_second': n_sweeps / total_time if total_time > 0 else np.inf
        }
    }

"""
Command-line interface for ONLab.
"""

import argparse
import sys

import numpy as np

from .analysis import BinAnalyzer
from .simulation import run_simulation
from .utils.config import read_config


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="ONLab: Monte Carlo simulation of classical O(N) spin models",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Simulation
    run_parser = subparsers.add_parser('run', help='Run a Metropolis + Wolff simulation')
    run_parser.add_argument('config', help='Parameter file (key = value lines)')
    run_parser.add_argument('-T', '--temperatures', nargs='+', type=float, default=None,
                            help='Temperatures to visit in order (default: T from config)')
    run_parser.add_argument('-o', '--output', default='on_model',
                            help='Output prefix (default: on_model)')
    run_parser.add_argument('--checkpoint', default=None,
                            help='Save final spin configuration (.npy or .h5)')
    run_parser.add_argument('-q', '--quiet', action='store_true',
                            help='No parameter dump or progress bars')

    # Analysis
    analyze_parser = subparsers.add_parser('analyze', help='Summarize a bin file')
    analyze_parser.add_argument('bins', help='Bin file written by "run"')
    analyze_parser.add_argument('-n', '--sites', type=int, default=None,
                                help='Number of lattice sites (enables specific heat)')
    analyze_parser.add_argument('--plot', default=None,
                                help='Save plots to this file')
    analyze_parser.add_argument('-o', '--output', default=None,
                                help='Export statistics to this npz file')

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    try:
        if args.command == 'run':
            run_command(args)
        elif args.command == 'analyze':
            analyze_command(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)


def run_command(args):
    """Run simulation."""
    config = read_config(args.config)
    verbose = not args.quiet

    results = run_simulation(
        config,
        temperatures=args.temperatures,
        output_prefix=args.output,
        checkpoint=args.checkpoint,
        verbose=verbose
    )

    print(f"Bins written to {results['bin_file']}")
    for cluster_file in results['cluster_files']:
        print(f"Cluster histogram written to {cluster_file}")
    if args.checkpoint:
        print(f"Configuration saved to {args.checkpoint}")

    if verbose:
        print(f"\nFinal energy per site: {results['final_energy'] / config.n_sites:.6f}")
        print(f"Final |m|: {np.linalg.norm(results['final_magnetization']) / config.n_sites:.4f}")
        print(f"Sweeps per second: {results['timing']['sweeps_per_second']:.1f}")


def analyze_command(args):
    """Summarize bin file."""
    analyzer = BinAnalyzer(n_sites=args.sites).load(args.bins)

    names = list(analyzer.means)
    print("T\t" + "\t".join(names) + ("\tC" if len(analyzer.specific_heats) else ""))
    for i, temp in enumerate(analyzer.temperatures):
        row = [f"{analyzer.means[n][i]:.6g}+-{analyzer.errors[n][i]:.2g}" for n in names]
        if len(analyzer.specific_heats):
            row.append(f"{analyzer.specific_heats[i]:.6g}+-{analyzer.specific_heat_errors[i]:.2g}")
        print(f"{temp:g}\t" + "\t".join(row))

    if args.output:
        analyzer.export_data(args.output)
        print(f"Statistics saved to {args.output}")

    if args.plot:
        analyzer.plot(save_path=args.plot)
        print(f"Plots saved to {args.plot}")


if __name__ == "__main__":
    main()

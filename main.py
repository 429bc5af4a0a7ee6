#!/usr/bin/env python3
"""
Housekeeping Probe Selection Pipeline

Main entry point for selecting invariant methylation probes to serve as
reference anchors for normalization. Datasets, annotation and gene list
are named in a YAML configuration file.

Usage:
    python main.py --config configs/default.yaml
    python main.py --config configs/default.yaml --threshold 0.04
    python main.py --config configs/default.yaml --threshold-method density
    python main.py --config configs/default.yaml --n-jobs 2 -v

Exit status:
    0  every region category has at least one housekeeping probe
    1  invalid configuration or missing input file
    2  at least one region category ended with an empty probe set
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from hkprobes.pipeline import HousekeepingPipeline, PipelineResult
from hkprobes.utils.config import Config, load_config
from hkprobes.utils.logging_utils import setup_logger

# Setup logger
logger = setup_logger()


def write_outputs(result: PipelineResult, config: Config) -> List[Path]:
    """
    Write final probe lists, variability tables and exclusion summary.

    Args:
        result: Pipeline output
        config: Configuration with output location

    Returns:
        Paths of the files written
    """
    config.ensure_output_dirs()
    written = []

    for region, consensus in result.final.items():
        path = config.get_output_path(f"housekeeping_probes_{region.value}.txt")
        path.write_text("".join(f"{probe}\n" for probe in consensus.probes))
        written.append(path)
        logger.info(f"Saved {len(consensus)} {region.value} probes to {path}")

    for name, by_region in result.variability.items():
        for region, variability in by_region.items():
            path = config.get_output_path(f"variability_{name}_{region.value}.csv")
            variability.to_frame().to_csv(path, index=False)
            written.append(path)

    summary_path = config.get_output_path("exclusion_summary.csv")
    result.exclusion_summary().to_csv(summary_path, index=False)
    written.append(summary_path)
    logger.info(f"Saved exclusion summary to {summary_path}")

    return written


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Housekeeping methylation probe selection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        "--config",
        required=True,
        help="Path to YAML configuration file"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        help="Maximum cross-sample standard deviation (default: 0.05)"
    )
    parser.add_argument(
        "--threshold-method",
        choices=["fixed", "density"],
        help="Fixed threshold or density-valley threshold per dataset"
    )
    parser.add_argument(
        "--regions",
        nargs="+",
        help="Region categories to select (default: TSS Body)"
    )
    parser.add_argument(
        "--n-jobs",
        type=int,
        help="Worker threads for per-dataset processing"
    )
    parser.add_argument(
        "--output-dir",
        help="Directory for result tables"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args(argv)

    setup_logger(verbose=args.verbose)

    logger.info("=" * 60)
    logger.info("Housekeeping Probe Selection")
    logger.info("=" * 60)

    try:
        config = load_config(
            args.config,
            threshold=args.threshold,
            threshold_method=args.threshold_method,
            region_categories=args.regions,
            n_jobs=args.n_jobs,
            output_dir=args.output_dir
        )
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if config.log_file:
        setup_logger(verbose=args.verbose, log_file=config.resolve_path(config.log_file))

    logger.info(f"Configuration: {config}")

    pipeline = HousekeepingPipeline(config)

    logger.info("")
    logger.info("[Step 1] Loading inputs")
    logger.info("-" * 40)
    try:
        datasets, annotation, genes = pipeline.load_inputs()
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Failed to load inputs: {e}")
        return 1

    logger.info("")
    logger.info("[Step 2] Selecting housekeeping probes")
    logger.info("-" * 40)
    try:
        result = pipeline.run(datasets, annotation, genes)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    logger.info("")
    logger.info("[Step 3] Writing results")
    logger.info("-" * 40)
    write_outputs(result, config)

    logger.info("")
    logger.info("=" * 60)
    empty = result.empty_regions
    if empty:
        logger.warning(
            f"No housekeeping probes for: {[r.value for r in empty]}. "
            "Normalization cannot use these region categories."
        )
    else:
        logger.info("Pipeline completed successfully!")
    logger.info("=" * 60)

    logger.info(f"Results saved to: {config.tables_dir}")

    return 2 if empty else 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Main entry point for calorimeter tower analysis.

Supports:
  - Dumping the towers of one entry that pass a set of filters
  - Counting accepted towers in every entry
  - Deriving HB thresholds and hot cells (calibrate-hb)
"""

import sys
import logging
import argparse
import yaml

from domain.config import CaloConfig, SourceConfig
from domain.errors import CaloError
from domain.regions import Region
from services.calibration import HBCalibrator, load_hot_counts, write_good_hb_config
from services.filters import FILTER_NAMES, build_filters
from services.towers import TowerSet


def setup_logging(level: str = "INFO"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file."""
    if config_path is None:
        return {}
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Calorimeter tower analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print the good EB towers of the first entry
  python main.py dump --input data.root --filter goodeb

  # Count HB towers in every entry
  python main.py count --input data.root --filter hb

  # Derive HB thresholds
  python main.py calibrate-hb --input data.root --hot-counts hotcells.txt \\
      --output goodhb.yaml
        """
    )

    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to YAML configuration file"
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )
    parser.add_argument(
        "--tree", type=str, default=None,
        help="Name of the tower tree (overrides source.tree_name)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    dump = subparsers.add_parser("dump", help="Print the towers of one entry")
    dump.add_argument("--input", required=True, help="ROOT file with the tower tree")
    dump.add_argument("--entry", type=int, default=0, help="Entry to print (default: 0)")
    dump.add_argument(
        "--filter", action="append", default=[], choices=FILTER_NAMES,
        help="Filter to apply; may be repeated, filters are AND-ed"
    )

    count = subparsers.add_parser("count", help="Count accepted towers per entry")
    count.add_argument("--input", required=True, help="ROOT file with the tower tree")
    count.add_argument(
        "--filter", action="append", default=[], choices=FILTER_NAMES,
        help="Filter to apply; may be repeated, filters are AND-ed"
    )

    calibrate = subparsers.add_parser("calibrate-hb", help="Derive HB thresholds and hot cells")
    calibrate.add_argument("--input", required=True, help="ROOT file with the tower tree")
    calibrate.add_argument("--hot-counts", required=True, help="Number of hot cells per eta bin")
    calibrate.add_argument("--output", default="goodhb.yaml", help="Output YAML (default: goodhb.yaml)")
    calibrate.add_argument("--no-progress", action="store_true", help="Hide the progress bar")

    return parser.parse_args(argv)


def build_config(args) -> CaloConfig:
    config = CaloConfig.from_dict(load_config(args.config))
    if args.tree:
        config = CaloConfig(
            source=SourceConfig(tree_name=args.tree, capacity=config.source.capacity),
            good_eb=config.good_eb,
            good_hb=config.good_hb,
        )
    return config


def format_hits(tower) -> str:
    return " ".join(f"{region.value}={tower.hit_count(region)}" for region in Region)


def run_dump(args, config: CaloConfig):
    tower_filter = build_filters(args.filter, config)
    with TowerSet.from_file(args.input, config.source) as tower_set:
        tower_set.load(args.entry)
        for tower in tower_set.select(tower_filter):
            print(f"{tower} hits: {format_hits(tower)}")


def run_count(args, config: CaloConfig):
    tower_filter = build_filters(args.filter, config)
    total = 0
    with TowerSet.from_file(args.input, config.source) as tower_set:
        for entry in tower_set.events():
            accepted = sum(1 for _ in tower_set.select(tower_filter))
            total += accepted
            print(f"{entry}\t{tower_set.count}\t{accepted}")
        logging.getLogger(__name__).info(f"Accepted {total} towers in {tower_set.size()} entries")


def run_calibrate_hb(args, config: CaloConfig):
    logger = logging.getLogger(__name__)
    calibration_config = load_hot_counts(args.hot_counts)
    logger.info(f"Target p-value: {calibration_config.pvalue}")

    calibrator = HBCalibrator(calibration_config, show_progress=not args.no_progress)
    with TowerSet.from_file(args.input, config.source) as tower_set:
        calibrator.collect(tower_set)
    good_hb, results = calibrator.calibrate()

    print("ieta\teta\tnumhot\tenergy")
    for result in results:
        print(f"{result.ieta}\t{result.eta:.4f}\t{len(result.hot_cells)}\t{result.energy:.3f}")
    write_good_hb_config(good_hb, args.output)


COMMANDS = {
    "dump": run_dump,
    "count": run_count,
    "calibrate-hb": run_calibrate_hb,
}


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        config = build_config(args)
        COMMANDS[args.command](args, config)
    except (CaloError, ValueError, OSError) as e:
        logger.error(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

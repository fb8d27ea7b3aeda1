"""Command-line interface for mendelsift."""

import argparse
import datetime
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import load_config
from .errors import PedigreeCycleError
from .inheritance.analyzer import (
    analyze_inheritance,
    analyze_inheritance_for_samples,
    determine_index_sample,
    export_inheritance_report,
    get_inheritance_summary,
)
from .ped_reader import read_pedigree
from .pedigree import PedigreeGraph
from .variant_reader import get_sample_columns, read_variant_table, records_from_dataframe
from .version import __version__

logger = logging.getLogger("mendelsift")

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}


def create_parser() -> argparse.ArgumentParser:
    """Create and return the argument parser for the mendelsift CLI."""
    parser = argparse.ArgumentParser(
        description="mendelsift: Deduce Mendelian inheritance patterns of variants."
    )

    # General Options
    general_group = parser.add_argument_group("General Options")
    general_group.add_argument(
        "--version",
        action="version",
        version=f"mendelsift {__version__}",
        help="Show the current version and exit",
    )
    general_group.add_argument(
        "--log-level",
        choices=list(LOG_LEVEL_MAP),
        default=None,
        help="Set the logging level (default: from configuration)",
    )
    general_group.add_argument(
        "--log-file", help="Path to a file to write logs to (in addition to stderr)."
    )
    general_group.add_argument(
        "-c",
        "--config",
        help="Path to configuration file",
        default=None,
    )

    # Core Input/Output
    io_group = parser.add_argument_group("Core Input/Output")
    io_group.add_argument("--ped", required=True, help="Pedigree file in 6-column PED format")
    io_group.add_argument(
        "--variants",
        required=True,
        help="Tab-separated variant table with CHROM, POS, REF, ALT, gene and genotype columns",
    )
    io_group.add_argument(
        "-o", "--output", help="Write the JSON report to this file instead of stdout"
    )

    # Analysis Options
    analysis_group = parser.add_argument_group("Analysis Options")
    analysis_group.add_argument(
        "--samples",
        help="Comma-separated genotype columns to use (default: all sample columns)",
    )
    analysis_group.add_argument(
        "--index-sample", help="Individual of interest (default: first affected individual)"
    )
    analysis_group.add_argument(
        "--all-affected",
        action="store_true",
        default=None,
        help="Analyze every affected individual instead of a single index sample",
    )
    analysis_group.add_argument(
        "--threads", type=int, help="Number of threads for per-variant deduction"
    )
    return parser


def _configure_logging(log_level: str, log_file: Optional[str]) -> None:
    level = LOG_LEVEL_MAP[log_level]
    logger.setLevel(level)
    if log_file:
        log_file_path = Path(log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        fh = logging.FileHandler(log_file)
        fh.setLevel(level)
        fh.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logger.addHandler(fh)
        logger.debug(f"Logging to file enabled: {log_file}")


def _merge_cli_options(cfg: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Command-line values override configuration values."""
    merged = dict(cfg)
    for key in ("log_level", "threads", "index_sample", "all_affected"):
        value = getattr(args, key)
        if value is not None:
            merged[key] = value
    return merged


def _select_samples(
    args: argparse.Namespace, columns: List[str], pedigree: PedigreeGraph
) -> List[str]:
    if args.samples:
        return [s.strip() for s in args.samples.split(",") if s.strip()]
    in_pedigree = [col for col in columns if col in pedigree]
    if in_pedigree:
        return in_pedigree
    logger.warning("No genotype column matches a pedigree sample; using all sample columns")
    return columns


def run(args: argparse.Namespace, cfg: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Read the inputs, run the analysis and write the report."""
    pedigree = PedigreeGraph.from_pedigree_data(read_pedigree(args.ped))
    df = read_variant_table(args.variants)

    gene_column = cfg["gene_column"]
    sample_list = _select_samples(args, get_sample_columns(df, gene_column), pedigree)
    logger.info(f"Using {len(sample_list)} genotype columns: {', '.join(sample_list)}")
    records = records_from_dataframe(df, sample_list, gene_column=gene_column)

    options = {
        "n_workers": cfg["threads"],
        "min_variants_for_parallel": cfg["min_variants_for_parallel"],
    }
    if cfg.get("all_affected"):
        affected = pedigree.affected_samples()
        if not affected:
            raise ValueError("--all-affected requested but the pedigree has no affected individual")
        logger.info(f"Analyzing {len(affected)} affected individuals: {', '.join(affected)}")
        results: Dict[str, Any] = analyze_inheritance_for_samples(
            records, pedigree, affected, **options
        )
    else:
        index_sample = cfg.get("index_sample") or determine_index_sample(records, pedigree)
        logger.info(f"Index sample: {index_sample}")
        results = analyze_inheritance(records, pedigree, index_sample=index_sample, **options)
        summary = get_inheritance_summary(results)
        logger.info(f"Pattern counts: {summary['pattern_counts']}")

    report = export_inheritance_report(records, results, args.output)
    if not args.output:
        json.dump(report, sys.stdout, indent=2)
        sys.stdout.write("\n")
    return report


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run main entry point for the mendelsift CLI.

    Steps:
        1. Parse arguments.
        2. Load config and merge command-line overrides.
        3. Configure logging.
        4. Run the analysis and write the report.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    args = create_parser().parse_args(argv)

    try:
        cfg = _merge_cli_options(load_config(args.config), args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Could not load configuration: {e}")
        return 1

    _configure_logging(str(cfg["log_level"]).upper(), args.log_file)
    start_time = datetime.datetime.now()
    logger.info(f"Run started at {start_time.isoformat()}")
    logger.debug(f"CLI arguments: {args}")
    logger.debug(f"Configuration: {cfg}")

    if cfg["threads"] < 1:
        logger.error(f"--threads must be at least 1, got {cfg['threads']}")
        return 1

    try:
        run(args, cfg)
    except PedigreeCycleError as e:
        logger.error(f"Invalid pedigree: {e}")
        return 1
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Analysis failed: {e}")
        return 1

    elapsed = datetime.datetime.now() - start_time
    logger.info(f"Run finished in {elapsed.total_seconds():.1f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())

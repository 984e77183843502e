#!/usr/bin/env python3
"""
Harvest the structural model of a directory of Go sources to JSON.

Usage:
    python run_harvest.py --source-dir ./internal/person
    python run_harvest.py --source-dir ./api --filename-regex '^[a-z].*\\.go$' --output-file out/api.json
    python run_harvest.py --config harvest.yml --max-workers 4
    python run_harvest.py --source-dir ./api --dump
"""

import argparse
import logging
import sys
import time

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Go source harvester",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_harvest.py --source-dir ./internal/person\n"
            "  python run_harvest.py --config harvest.yml --max-workers 4\n"
        )
    )

    parser.add_argument(
        "--source-dir",
        default=None,
        help="Directory holding the Go files to harvest."
    )
    parser.add_argument(
        "--filename-regex",
        default=None,
        help="Regular expression selecting file names within the directory. Default: .*"
    )
    parser.add_argument(
        "--output-file",
        default=None,
        help="Path of the harvest JSON file. Default: output/harvest.json"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML file with a 'harvest' section providing defaults for the options above."
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Number of files parsed concurrently. Default: 1"
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        default=False,
        help="Print the syntax tree of every selected file instead of harvesting."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging."
    )

    return parser.parse_args()


def main() -> None:
    """Main entry point for the harvester."""
    load_dotenv()

    from core.run_artifacts import write_harvest, write_run_report
    from core.startup_config import (
        ConfigValidationError,
        load_harvest_config,
        resolve_harvest_settings,
        resolve_strict_config_validation,
    )
    from core.structured_logging import configure_structured_logging, set_scan_id
    from extraction.extractor import dump_directory, harvest_directory_with_stats
    from extraction.parser import ParseError

    args = parse_args()
    configure_structured_logging(logging.DEBUG if args.verbose else logging.INFO)
    scan_id = set_scan_id()

    try:
        strict = resolve_strict_config_validation(default=False)
        config = load_harvest_config(args.config, strict=strict) if args.config else {}
        settings = resolve_harvest_settings(config, strict=strict)

        source_dir = args.source_dir or settings.source_dir
        if not source_dir:
            logger.error("No source directory given (use --source-dir or a config file)")
            sys.exit(2)
        filename_regex = args.filename_regex or settings.filename_regex
        output_file = args.output_file or settings.output_file
        max_workers = args.max_workers or settings.max_workers

        if args.dump:
            for path, outline in dump_directory(source_dir, filename_regex).items():
                print(f"# {path}")
                print(outline)
            return

        t0 = time.time()
        harvest, stats = harvest_directory_with_stats(source_dir, filename_regex, max_workers)
        elapsed = time.time() - t0

        write_harvest(harvest, output_file)
        logger.info("Wrote harvest to %s in %.2fs", output_file, elapsed)

        report_path = write_run_report(
            {
                "source_dir": source_dir,
                "filename_regex": filename_regex,
                "output_file": output_file,
                "elapsed_seconds": round(elapsed, 3),
                "stats": stats.to_dict(),
            },
            scan_id,
            settings.report_dir,
        )
        logger.info("Run report: %s", report_path)

    except ParseError as e:
        logger.error(f"Parse error: {e}")
        sys.exit(1)
    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        sys.exit(1)
    except ConfigValidationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Harvest failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

"""
connexec CLI entry point.

Usage:
    connexec -c <input_file>                 Run with the default 4 threads
    connexec -c <input_file> -t <threads>    Run with a custom thread count
    connexec --version                       Show version
"""

import argparse
import sys
from pathlib import Path
from typing import NoReturn, Optional, Sequence

from connexec import __version__
from connexec.config.loader import load_config
from connexec.orchestrator.connection import NetmikoConnection
from connexec.orchestrator.devices import InventoryError, load_devices
from connexec.orchestrator.executor import Orchestrator
from connexec.orchestrator.sink import ResultSink, ResultSinkError, RunContext
from connexec.telemetry.logger import get_logger, setup_logging

USAGE = "Usage: connexec -c <input_file> -t <num_threads default:4>"


class UsageArgumentParser(argparse.ArgumentParser):
    """Argument parser that prints usage to stdout and exits with status 1."""

    def error(self, message: str) -> NoReturn:
        print(f"Error: {message}")
        print(USAGE)
        sys.exit(1)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = UsageArgumentParser(
        prog="connexec",
        description="Run command batches on network devices in parallel",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input file columns (first line is a header):
  host,username,device_type,password,secret,readtime,mult_command
Commands in mult_command are separated with ';'.

Examples:
  connexec -c devices.csv          Run with 4 threads
  connexec -c devices.csv -t 16    Run with 16 threads
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-c",
        dest="input_file",
        type=Path,
        metavar="INPUT_FILE",
        help="Device inventory file",
    )

    parser.add_argument(
        "-t",
        dest="threads",
        type=int,
        metavar="NUM_THREADS",
        default=None,
        help="Number of devices to work on concurrently (default: 4)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        metavar="PATH",
        help="Path to custom configuration file",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override log level",
    )

    return parser


def cmd_run(args: argparse.Namespace) -> int:
    """Load the inventory and run every device."""
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    if args.log_level:
        config.log_level = args.log_level
    threads = args.threads if args.threads is not None else config.execution.threads
    if threads < 1:
        print(f"Error: number of threads must be at least 1, got {threads}")
        print(USAGE)
        return 1

    setup_logging(config.log_level, config.telemetry.log_file, config.telemetry.json_logs)
    logger = get_logger(__name__)
    logger.info("Starting connexec", version=__version__, input_file=str(args.input_file))

    try:
        devices = load_devices(args.input_file)
    except InventoryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    context = RunContext.create(
        base_dir=config.execution.base_dir,
        output_prefix=config.execution.output_prefix,
        failed_log_name=config.execution.failed_log,
    )
    orchestrator = Orchestrator(
        NetmikoConnection(conn_timeout=config.connection.conn_timeout),
        ResultSink(context),
    )

    try:
        summary = orchestrator.run(devices, threads)
    except ResultSinkError as e:
        print(f"Error: cannot save results: {e}", file=sys.stderr)
        return 1

    print(
        f"Done: {summary.successful} succeeded, {summary.failed} failed "
        f"({summary.total_devices} devices, {summary.duration_ms / 1000:.1f}s)"
    )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.input_file is None:
        print("Error: input file not specified")
        print(USAGE)
        return 1

    try:
        return cmd_run(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())

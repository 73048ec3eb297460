"""Command line entry point for crashreport.

Reads a Python traceback or stack dump, turns it into a crash report and
prints the JSON payload. With ``--submit`` the report is also sent to the
configured endpoint.
"""

import argparse
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from crashreport._version import __version__

log = structlog.get_logger()


def setup_logging(
    debug: bool = False,
    log_format: str | None = None,
    level: str = "INFO",
) -> None:
    """Configure structured logging with secret sanitization.

    Args:
        debug: Force debug logging, whatever the level
        log_format: Output format ("json" or "console", default console)
        level: Log level when not in debug mode
    """
    from crashreport.utils.logging import configure_logging

    configure_logging(level="DEBUG" if debug else level, log_format=log_format or "console")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="crashreport",
        description="Turn a Python traceback into a crash report",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="File containing the traceback (default: stdin)",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: environment variables only)",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default=None,
        help="Log output format (default: from configuration)",
    )

    parser.add_argument(
        "--submit",
        action="store_true",
        help="Send the report to the configured endpoint",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate configuration and exit",
    )

    return parser.parse_args(argv)


def read_input(source: str) -> str:
    """Read the traceback text from a file or stdin.

    Undecodable bytes in a file are replaced rather than rejected.
    """
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_bytes().decode("utf-8", errors="replace")


def run(args: argparse.Namespace) -> int:
    """Build, print and optionally submit a report.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from crashreport.adapters.transport import RaygunTransport
    from crashreport.config import CrashReportConfig, load_config, validate_config
    from crashreport.core.reporter import Reporter
    from crashreport.core.stack_dump import StackDumpParser
    from crashreport.exceptions import CrashReportError

    try:
        if args.config is not None:
            log.info("loading_configuration", path=str(args.config))
            config = load_config(args.config)
        else:
            config = CrashReportConfig()
        validate_config(config, require_api_key=args.submit)
    except FileNotFoundError as e:
        log.error("configuration_file_not_found", error=str(e))
        return 1
    except (ValueError, ValidationError) as e:
        log.error("configuration_invalid", error=str(e))
        return 1

    setup_logging(args.debug, args.format or config.logging.format, config.logging.level)

    if args.dry_run:
        log.info("dry_run_mode_config_valid")
        return 0

    try:
        text = read_input(args.input)
        error = StackDumpParser().parse(text)
    except (OSError, UnicodeDecodeError) as e:
        log.error("input_not_readable", source=args.input, error=str(e))
        return 1
    except CrashReportError as e:
        log.error("traceback_parse_error", error=str(e))
        return 1

    reporter = Reporter(config, RaygunTransport(config.raygun))
    post = reporter.build_post(error)
    sys.stdout.write(post.to_json(indent=2) + "\n")

    if args.submit:
        try:
            reporter.transport.submit(post)
        except CrashReportError as e:
            log.error("submission_failed", error=str(e))
            return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(debug=args.debug, log_format=args.format)

    try:
        return run(args)
    except KeyboardInterrupt:
        log.info("interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())

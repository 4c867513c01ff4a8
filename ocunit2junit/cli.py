"""Pipe xcodebuild output through this to get JUnit reports per test suite.

    xcodebuild test ... | ocunit2junit

Every line is passed through to stdout unchanged. The exit code is the one
reported by the build ("failed with exit code N", -1 for "BUILD FAILED").
"""

import argparse
import fileinput
import io
import logging
import sys
from pathlib import Path

from ocunit2junit.junit import TEST_REPORTS_FOLDER, JUnitReportWriter, prepare_reports_dir
from ocunit2junit.parser import ReportParser

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(levelname)s: %(message)s'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ocunit2junit",
        description="Convert OCUnit/XCTest console output into JUnit XML reports.",
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="log files to read (default: stdin)",
    )
    parser.add_argument(
        "--reports-dir",
        default=TEST_REPORTS_FOLDER,
        help="directory for TEST-<suite>.xml files, wiped on start (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def keep_undecodable_bytes(stream) -> None:
    if isinstance(stream, io.TextIOWrapper):
        stream.reconfigure(errors="surrogateescape")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    reports_dir = Path(args.reports_dir)
    prepare_reports_dir(reports_dir)

    files = args.files or ("-",)
    # Undecodable bytes survive the round trip from input to echo.
    if "-" in files:
        keep_undecodable_bytes(sys.stdin)
    keep_undecodable_bytes(sys.stdout)

    report = ReportParser(writer=JUnitReportWriter(reports_dir))
    with fileinput.input(
        files=files, openhook=fileinput.hook_encoded("utf-8", "surrogateescape")
    ) as lines:
        exit_code = report.parse(lines, out=sys.stdout)

    logger.info(
        "Reports written: %d, failing tests: %d",
        len(report.report_stats),
        sum(stat["failures"] for stat in report.report_stats),
    )
    return exit_code


def main_entry() -> None:
    sys.exit(main())

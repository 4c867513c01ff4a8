"""Classification of single xcodebuild / OCUnit log lines into events."""

import logging
import re
from datetime import datetime
from typing import Callable, List, Tuple

from ocunit2junit.events import (
    BuildFailed,
    ErrorReported,
    Event,
    ExitCodeReported,
    SuiteFinished,
    SuiteStarted,
    TestFailed,
    TestPassed,
    TestStarted,
    Unclassified,
)

logger = logging.getLogger(__name__)

TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S.%f %z",
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
)


def parse_timestamp(value: str) -> datetime:
    """Parse a suite start/finish timestamp as printed by the test runner.

    Raises ValueError when none of the known layouts match.
    """
    value = value.strip()
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return datetime.fromisoformat(value)


def _suite_started(match: re.Match) -> Event:
    return SuiteStarted(
        suite_name=match.group(1),
        timestamp=parse_timestamp(match.group(2)),
        raw_timestamp=match.group(2).strip(),
    )


def _suite_finished(match: re.Match) -> Event:
    return SuiteFinished(
        suite_name=match.group(1),
        timestamp=parse_timestamp(match.group(2)),
        raw_timestamp=match.group(2).strip(),
    )


def _test_started(match: re.Match) -> Event:
    return TestStarted(method=match.group(1))


def _test_passed(match: re.Match) -> Event:
    return TestPassed(method=match.group(1), duration=float(match.group(2)))


def _test_failed(match: re.Match) -> Event:
    return TestFailed(method=match.group(1), duration=float(match.group(2)))


def _error_reported(match: re.Match) -> Event:
    return ErrorReported(
        location=match.group(1),
        class_name=match.group(2),
        method=match.group(3),
        message=match.group(4),
    )


def _exit_code_reported(match: re.Match) -> Event:
    return ExitCodeReported(exit_code=int(match.group(1)))


def _build_failed(match: re.Match) -> Event:
    return BuildFailed()


# Evaluated in order, first match wins.
MATCHERS: List[Tuple["re.Pattern[str]", Callable[[re.Match], Event]]] = [
    (re.compile(r"Test Suite '(\S+)'.*started at\s+(.*)"), _suite_started),
    (re.compile(r"Test Suite '(\S+)'.*finished at\s+(.*)."), _suite_finished),
    (re.compile(r"Test Case '-\[\S+\s+(\S+)\]' started."), _test_started),
    (
        re.compile(r"Test Case '-\[\S+\s+(\S+)\]' passed \((.*) seconds\)"),
        _test_passed,
    ),
    (
        re.compile(r"Test Case '-\[\S+ (\S+)\]' failed \((\S+) seconds\)"),
        _test_failed,
    ),
    (re.compile(r"(.*): error: -\[(\S+) (\S+)\] : (.*)"), _error_reported),
    (re.compile(r"failed with exit code (\d+)"), _exit_code_reported),
    (re.compile(r"BUILD FAILED"), _build_failed),
]


def classify(line: str) -> Event:
    """Return the event represented by ``line``.

    Lines that match a pattern but carry an unparsable timestamp or duration
    fall through to :class:`Unclassified` rather than aborting the run.
    """
    for pattern, make_event in MATCHERS:
        match = pattern.search(line)
        if not match:
            continue
        try:
            return make_event(match)
        except ValueError as exc:
            logger.warning("Could not parse %r: %s", line.rstrip("\n"), exc)
            break
    return Unclassified(text=line)

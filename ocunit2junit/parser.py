import logging
import socket
from datetime import datetime
from typing import Iterable, List, Optional, TextIO

from ocunit2junit.classifier import classify
from ocunit2junit.events import (
    BuildFailed,
    ErrorReported,
    Event,
    ExitCodeReported,
    SuiteFinished,
    SuiteStarted,
    SuiteState,
    TestError,
    TestFailed,
    TestPassed,
    TestStarted,
    Unclassified,
)
from ocunit2junit.junit import render_suite
from ocunit2junit.types import ReportStats, ReportWriter

logger = logging.getLogger(__name__)


def display_name(test_method_name: str, count: int) -> str:
    if count == 1:
        return test_method_name
    return f"{test_method_name}[{count}]"


def suite_duration(start: datetime, end: datetime) -> float:
    # Logs that mix offset-aware and naive stamps are compared as wall time.
    if (start.tzinfo is None) != (end.tzinfo is None):
        start = start.replace(tzinfo=None)
        end = end.replace(tzinfo=None)
    return (end - start).total_seconds()


class ReportParser:
    """Applies classified log events to the live suite and emits reports.

    Handlers are defined in the order the events normally show up in a run.
    """

    def __init__(self, writer: ReportWriter, host_name: Optional[str] = None) -> None:
        self.writer = writer
        self.host_name = host_name if host_name is not None else socket.gethostname()
        self.exit_code = 0
        self.suite: Optional[SuiteState] = None
        self.report_stats: List[ReportStats] = []

    @property
    def in_suite(self) -> bool:
        return self.suite is not None and not self.suite.ended

    def parse(self, lines: Iterable[str], out: Optional[TextIO] = None) -> int:
        """Echo and consume ``lines``, returning the exit code of the run."""
        for line in lines:
            if out is not None:
                out.write(line if line.endswith("\n") else line + "\n")
                out.flush()
            self.handle_line(line)
        return self.exit_code

    def handle_line(self, line: str) -> None:
        # Bytes that were not valid UTF-8 are echoed as-is but recorded as U+FFFD.
        line = line.encode("utf-8", "surrogateescape").decode("utf-8", "replace")
        self.handle_event(classify(line))

    def handle_event(self, event: Event) -> None:
        if isinstance(event, SuiteStarted):
            self.handle_start_test_suite(event)
        elif isinstance(event, SuiteFinished):
            self.handle_end_test_suite(event)
        elif isinstance(event, ExitCodeReported):
            self.exit_code = event.exit_code
        elif isinstance(event, BuildFailed):
            self.exit_code = -1
        elif not self.in_suite:
            logger.debug("Ignoring %s outside of a test suite", event.kind)
        elif isinstance(event, TestStarted):
            self.generate_test_method_name(event.method)
        elif isinstance(event, TestPassed):
            self.handle_test_passed(event)
        elif isinstance(event, TestFailed):
            self.handle_test_failed(event)
        elif isinstance(event, ErrorReported):
            self.handle_test_error(event)
        elif isinstance(event, Unclassified):
            self.append_test_error(event.text)

    def generate_test_method_name(self, test_method_name: str) -> str:
        counts = self.suite.test_method_count
        counts[test_method_name] = counts.get(test_method_name, 0) + 1
        return display_name(test_method_name, counts[test_method_name])

    def get_test_method_name(self, test_method_name: str) -> str:
        count = self.suite.test_method_count.get(test_method_name, 0)
        return display_name(test_method_name, count)

    def handle_start_test_suite(self, event: SuiteStarted) -> None:
        if self.in_suite:
            logger.debug(
                "Suite %s started before the previous suite finished, "
                "discarding its results",
                event.suite_name,
            )
        self.suite = SuiteState(start_time=event.timestamp)

    def handle_test_passed(self, event: TestPassed) -> None:
        name = self.get_test_method_name(event.method)
        self.suite.total_passed += 1
        self.suite.test_results[name] = event.duration
        self.suite.current_test_that_failed = None

    def handle_test_failed(self, event: TestFailed) -> None:
        name = self.get_test_method_name(event.method)
        self.suite.total_failed += 1
        self.suite.test_results[name] = event.duration
        self.suite.current_test_that_failed = None

    def handle_test_error(self, event: ErrorReported) -> None:
        name = self.get_test_method_name(event.method)
        self.suite.errors[name] = TestError(message=event.message, location=event.location)
        self.suite.current_test_that_failed = name

    def append_test_error(self, text: str) -> None:
        name = self.suite.current_test_that_failed
        if name is None:
            return
        self.suite.errors[name].message += text

    def handle_end_test_suite(self, event: SuiteFinished) -> None:
        if self.suite is None:
            logger.warning("Suite %s finished but was never started", event.suite_name)
            return
        if self.suite.ended:
            return
        document = render_suite(
            self.suite,
            suite_name=event.suite_name,
            end_timestamp=event.raw_timestamp,
            duration=suite_duration(self.suite.start_time, event.timestamp),
            host_name=self.host_name,
        )
        path = self.writer.write_report(event.suite_name, document)
        self.suite.ended = True
        self.report_stats.append(
            {
                "timestamp": datetime.now().isoformat(),
                "suite_name": event.suite_name,
                "path": path,
                "tests": self.suite.total_tests,
                "failures": self.suite.total_failed,
            }
        )

from typing import Literal, Protocol, TypedDict


class ReportWriter(Protocol):
    """Sink for rendered suite reports."""

    def write_report(self, suite_name: str, document: str) -> str:
        pass  # pragma: no cover


EventKind = Literal[
    "suite_started",
    "suite_finished",
    "test_started",
    "test_passed",
    "test_failed",
    "error_reported",
    "exit_code_reported",
    "build_failed",
    "unclassified",
]


class ReportStats(TypedDict):
    timestamp: str
    suite_name: str
    path: str
    tests: int
    failures: int

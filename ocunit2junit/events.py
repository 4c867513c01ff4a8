from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field

from ocunit2junit.types import EventKind


class Dto(BaseModel):
    pass


class Event(Dto):
    kind: EventKind


class SuiteStarted(Event):
    kind: EventKind = "suite_started"
    suite_name: str
    timestamp: datetime
    raw_timestamp: str


class SuiteFinished(Event):
    kind: EventKind = "suite_finished"
    suite_name: str
    timestamp: datetime
    raw_timestamp: str


class TestStarted(Event):
    kind: EventKind = "test_started"
    method: str


class TestPassed(Event):
    kind: EventKind = "test_passed"
    method: str
    duration: float


class TestFailed(Event):
    kind: EventKind = "test_failed"
    method: str
    duration: float


class ErrorReported(Event):
    kind: EventKind = "error_reported"
    location: str
    class_name: str
    method: str
    message: str


class ExitCodeReported(Event):
    kind: EventKind = "exit_code_reported"
    exit_code: int


class BuildFailed(Event):
    kind: EventKind = "build_failed"


class Unclassified(Event):
    kind: EventKind = "unclassified"
    text: str


class TestError(Dto):
    message: str
    location: str


class SuiteState(Dto):
    """Working set of the suite between its start and finish lines."""

    start_time: datetime
    test_method_count: Dict[str, int] = Field(default_factory=dict)
    test_results: Dict[str, float] = Field(default_factory=dict)
    errors: Dict[str, TestError] = Field(default_factory=dict)
    total_passed: int = 0
    total_failed: int = 0
    ended: bool = False
    current_test_that_failed: Optional[str] = None

    @property
    def total_tests(self) -> int:
        return self.total_passed + self.total_failed

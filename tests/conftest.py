from pathlib import Path
from typing import Dict, List

import pytest

from ocunit2junit.parser import ReportParser

pytest_plugins = ["pytester"]


class InMemoryReportWriter:
    def __init__(self) -> None:
        self.reports: Dict[str, str] = {}
        self.writes: List[str] = []

    def write_report(self, suite_name: str, document: str) -> str:
        self.writes.append(suite_name)
        self.reports[suite_name] = document
        return f"memory://TEST-{suite_name}.xml"


@pytest.fixture
def host_name() -> str:
    return "build-host"


@pytest.fixture
def writer() -> InMemoryReportWriter:
    return InMemoryReportWriter()


@pytest.fixture
def report_parser(writer, host_name) -> ReportParser:
    return ReportParser(writer=writer, host_name=host_name)


@pytest.fixture
def passing_log() -> str:
    return """\
Test Suite 'MyTests' started at 2024-01-01 10:00:00.000
Test Case '-[MyTests testA]' started.
Test Case '-[MyTests testA]' passed (0.2 seconds).
Test Suite 'MyTests' finished at 2024-01-01 10:00:00.200.
"""


@pytest.fixture
def failing_log() -> str:
    return """\
Test Suite 'MathTests' started at 2010-01-30 12:00:00 +0100
Test Case '-[MathTests testX]' started.
Test Case '-[MathTests testX]' passed (0.001 seconds).
Test Case '-[MathTests testY]' started.
/src/MathTests.m:42: error: -[MathTests testY] : 'a' should be equal to 'b'
trace line 1
trace line 2
Test Case '-[MathTests testY]' failed (0.05 seconds).
Test Suite 'MathTests' finished at 2010-01-30 12:00:01 +0100.
Executed 2 tests, with 1 failure (0 unexpected) in 0.051 (0.052) seconds
Command /bin/sh failed with exit code 65
"""


@pytest.fixture
def expected_passing_report() -> str:
    return (
        "<?xml version='1.0' encoding='UTF-8' ?>\n"
        '<testsuite errors="0" failures="0" hostname="build-host" name="MyTests"'
        ' tests="1" time="0.2" timestamp="2024-01-01 10:00:00.200">'
        "<testcase classname='MyTests' name='testA' time='0.2' />\n"
        "</testsuite>\n"
    )


@pytest.fixture
def log_file(tmp_path, failing_log) -> Path:
    path = tmp_path / "xcodebuild.log"
    path.write_text(failing_log)
    return path

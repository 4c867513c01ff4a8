import logging
import shutil
from pathlib import Path

from ocunit2junit.events import SuiteState

logger = logging.getLogger(__name__)

TEST_REPORTS_FOLDER = "test-reports"

XML_DECLARATION = "<?xml version='1.0' encoding='UTF-8' ?>\n"

# Applied in this order; the narrow table keeps output byte-compatible with
# reports produced by the ocunit2junit.rb script.
XML_REPLACEMENTS = (
    ("&", "&amp;"),
    ("'", "&quot;"),
    ("<", "&lt;"),
    ("\n", "&#xa;"),
)


def string_to_xml(value: str) -> str:
    for old, new in XML_REPLACEMENTS:
        value = value.replace(old, new)
    return value


def render_suite(
    suite: SuiteState,
    suite_name: str,
    end_timestamp: str,
    duration: float,
    host_name: str,
) -> str:
    """Render the JUnit document for a finished suite."""
    host_name = string_to_xml(host_name)
    suite_name = string_to_xml(suite_name)
    parts = [
        XML_DECLARATION,
        f'<testsuite errors="0" failures="{suite.total_failed}"'
        f' hostname="{host_name}" name="{suite_name}"'
        f' tests="{suite.total_tests}" time="{duration}"'
        f' timestamp="{end_timestamp}">',
    ]
    for display_name, test_duration in suite.test_results.items():
        test_name = string_to_xml(display_name)
        parts.append(
            f"<testcase classname='{suite_name}' name='{test_name}'"
            f" time='{test_duration}'"
        )
        error = suite.errors.get(display_name)
        if error is None:
            parts.append(" />\n")
            continue
        logger.debug("Failure in %s: %s", display_name, error.message)
        logger.debug("Failure location: %s", error.location)
        message = string_to_xml(error.message)
        location = string_to_xml(error.location)
        parts.append(">\n")
        parts.append(
            f"<failure message='{message}' type='Failure'>{location}</failure>\n"
        )
        parts.append("</testcase>\n")
    parts.append("</testsuite>\n")
    return "".join(parts)


def prepare_reports_dir(reports_dir: Path) -> None:
    """Wipe ``reports_dir`` and recreate it empty, parents included."""
    if reports_dir.exists():
        shutil.rmtree(reports_dir)
    reports_dir.mkdir(parents=True, exist_ok=True)


class JUnitReportWriter:
    def __init__(self, reports_dir: Path) -> None:
        self.reports_dir = reports_dir

    def report_path(self, suite_name: str) -> Path:
        return self.reports_dir / f"TEST-{suite_name}.xml"

    def write_report(self, suite_name: str, document: str) -> str:
        path = self.report_path(suite_name)
        with open(path, "w", encoding="utf-8", errors="replace") as report_file:
            report_file.write(document)
        logger.debug("Wrote %s", path)
        return str(path)

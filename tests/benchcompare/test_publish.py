"""Tests for the Markdown summary publisher."""

import pytest

from benchcompare.exceptions import PublishError
from benchcompare.publish import ReportPublisher, StepSummaryPublisher


def test_publisher_satisfies_protocol(tmp_path):
    assert isinstance(StepSummaryPublisher(tmp_path / "summary.md"), ReportPublisher)


def test_reports_are_appended(tmp_path):
    summary = tmp_path / "summary.md"
    publisher = StepSummaryPublisher(summary)

    location = publisher.publish("abc", "# First")
    publisher.publish("abc", "# Second")

    assert location == str(summary)
    assert summary.read_text(encoding="utf-8") == "# First\n\n# Second\n"


def test_existing_content_is_kept(tmp_path):
    summary = tmp_path / "summary.md"
    summary.write_text("previous step\n", encoding="utf-8")

    StepSummaryPublisher(summary).publish("abc", "report")

    assert summary.read_text(encoding="utf-8") == "previous step\n\nreport\n"


def test_unwritable_location_raises_publish_error(tmp_path):
    publisher = StepSummaryPublisher(tmp_path / "missing" / "summary.md")

    with pytest.raises(PublishError) as exc_info:
        publisher.publish("abc", "report")

    assert exc_info.value.error_code == "PUBLISH_001"
    assert "Cannot write report for commit abc" in str(exc_info.value)

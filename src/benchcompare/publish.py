"""
Report sinks.

benchcompare never talks to a hosting platform's API itself; it hands the
rendered report to a ``ReportPublisher``. ``StepSummaryPublisher`` appends the
report to a Markdown file such as the one named by ``$GITHUB_STEP_SUMMARY``.
"""

from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable

from benchcompare import logger
from benchcompare.exceptions import PublishError


@runtime_checkable
class ReportPublisher(Protocol):
    """Protocol for objects that deliver a rendered report for a commit."""

    def publish(self, commit_id: str, body: str) -> Optional[str]:
        """
        Deliver ``body`` for ``commit_id``.

        Returns:
            Location of the published report, if the sink has one

        Raises:
            PublishError: If the report could not be delivered
        """
        ...


class StepSummaryPublisher:
    """Append reports to a Markdown summary file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def publish(self, commit_id: str, body: str) -> Optional[str]:
        try:
            with self.path.open("a", encoding="utf-8") as f:
                if self.path.stat().st_size > 0:
                    f.write("\n")
                f.write(body)
                f.write("\n")
        except OSError as e:
            raise PublishError(
                f"Cannot write report for commit {commit_id} to '{self.path}': {e}",
                context={'summary_path': str(self.path)},
            ) from e

        logger.info(f"Report for commit {commit_id} was written to {self.path}")
        return str(self.path)

"""
Reporter - Generates human-readable reports from aggregated periods.
"""

import logging
import sys
from typing import List, Optional, TextIO

from .models import Period, Phase
from .slots import slot_count

PHASE_LABELS = {
    Phase.SUBMITTING: 'submitting',
    Phase.VOTING_OPEN: 'voting open',
    Phase.CLOSED: 'closed',
}


class Reporter:
    """
    Generates human-readable reports from aggregated periods.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reporter.

        Args:
            output: Output stream (default: stdout)
            logger: Optional logger instance
        """
        self.output = output or sys.stdout
        self.logger = logger or logging.getLogger(__name__)

    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)

    def report_summary(self, periods: List[Period]) -> None:
        """Print one line per period with phase and entry count."""
        self._print("=" * 60)
        self._print("GALLERY SUMMARY")
        self._print("=" * 60)

        if not periods:
            self._print("  No periods found.")
            return

        total = sum(len(p.entries) for p in periods)
        self._print(f"  Periods:     {len(periods)}")
        self._print(f"  Entries:     {total}")
        self._print()
        self._print(f"  {'Period':<10} {'Phase':<13} {'Entries':>8} {'Slots':>6}")
        self._print(f"  {'-' * 10} {'-' * 13} {'-' * 8} {'-' * 6}")
        for period in periods:
            self._print(
                f"  {period.folder_name:<10} {PHASE_LABELS[period.phase]:<13} "
                f"{len(period.entries):>8} {slot_count(len(period.entries)):>6}"
            )

    def report_period(self, period: Period) -> None:
        """Print the entries and, if present, the ranked results of one period."""
        self._print("=" * 60)
        self._print(f"{period.folder_name} ({PHASE_LABELS[period.phase]})")
        self._print("=" * 60)
        if period.template:
            self._print(f"  Template: {period.template}")

        if not period.entries:
            self._print("  No entries.")
        for entry in period.entries:
            flag = "  [no preview]" if entry.thumbnail.is_placeholder else ""
            self._print(
                f"  {entry.modified:%Y-%m-%d %H:%M}  {entry.file_name:<32} "
                f"{entry.thumbnail.width}x{entry.thumbnail.height}{flag}"
            )

        if period.ballot_error:
            self._print()
            self._print(f"  Ballots could not be tallied: {period.ballot_error}")
        elif period.results is not None:
            self._print()
            self._print("  Results:")
            if not period.results:
                self._print("    No votes.")
            for result in period.results:
                self._print(f"    {result.rank:>3}. {result.file_name:<32} {result.votes:>4} votes")

    def report_detailed(self, periods: List[Period]) -> None:
        """Print a summary followed by every period in full."""
        self.report_summary(periods)
        for period in periods:
            self._print()
            self.report_period(period)

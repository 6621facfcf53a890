r"""
Report rendering.

    from microbench.reporting.formats import ReportFormatter

    formatter = ReportFormatter(multi=False)
    print(formatter.format_line(measurement))
    # 1000 calls (50000/s), 0.0200s (0.0000s/call)
"""

import json
from collections.abc import Iterable

from microbench.config import SECONDS_FORMAT
from microbench.types import Measurement, Report

__all__ = ["JsonExporter", "ReportFormatter"]


class ReportFormatter:
    """Renders measurements as human-readable lines.

    Lines carry a ``"<name>: "`` prefix only when more than one unit of
    work is measured in the invocation.
    """

    def __init__(self, *, multi: bool) -> None:
        self._multi = multi

    def format_line(self, m: Measurement) -> str:
        """Render one measurement."""
        prefix = f"{m.unit_name}: " if self._multi else ""
        return (
            f"{prefix}{m.call_count} calls ({m.rate:.0f}/s), "
            f"{SECONDS_FORMAT % m.elapsed_seconds} ({SECONDS_FORMAT % m.per_call}/call)"
        )

    def build(self, measurements: Iterable[Measurement]) -> Report:
        """Render measurements, in order, into a Report."""
        ms = tuple(measurements)
        return Report(lines=tuple(self.format_line(m) for m in ms), measurements=ms)

    @staticmethod
    def passthrough(text: str, *, backend: str) -> Report:
        """Wrap an external backend's own report text without reformatting."""
        return Report(lines=(text,) if text else (), backend=backend)


class JsonExporter:
    """Export a report to JSON."""

    def __init__(self, *, indent: int = 2) -> None:
        self._indent = indent

    def to_string(self, report: Report) -> str:
        """Export report to JSON string."""
        return json.dumps(report.to_dict(), indent=self._indent)

r"""
Report rendering and export.

    from microbench.reporting import ReportFormatter

    report = ReportFormatter(multi=True).build(measurements)
    print(report)
"""

from microbench.reporting.formats import JsonExporter, ReportFormatter

__all__ = [
    "JsonExporter",
    "ReportFormatter",
]

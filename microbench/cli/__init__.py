r"""
Command-line interface for microbench.

    microbench run "sorted(data)" --setup "data = list(range(1000))"
    microbench exec script.py
"""

from microbench.cli.main import app, main

__all__ = [
    "app",
    "main",
]

"""Transcript GPA tracker and grade improvement simulator."""

__version__ = "0.1.0"

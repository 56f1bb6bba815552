"""Exclusion lists for running imported test suites under a compatibility harness."""

__version__ = "0.3.0"

"""Audit disguise project directories and convert cue tables to cue lists."""

__version__ = "0.1.0"

"""Sumit: a terminal agent that reasons in START, THINK, TOOL and OUTPUT steps."""

__version__ = "0.1.0"

"""Iterative text humanizer: stylometric profiling plus an agentic refinement loop."""

__version__ = "0.1.0"

"""Helpers for accelerator configuration tools: option parsing, command dispatch, sysfs access, sizes, bitmaps, names, JSON output and logging."""

__version__ = "0.1.0"
"""Scan orchestration."""

from .engine import Scanner, scan

__all__ = ["Scanner", "scan"]

"""Shared utilities for Muhasebi."""

from muhasebi.utils.exceptions import MuhasebiError

__all__ = ["MuhasebiError"]

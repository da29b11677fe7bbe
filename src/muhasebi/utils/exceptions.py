"""Custom exceptions for Muhasebi."""


class MuhasebiError(Exception):
    """Base exception for all Muhasebi errors."""

    pass

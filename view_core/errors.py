from __future__ import annotations


class ViewError(Exception):
    pass


class InvalidArgument(ViewError, ValueError):
    """Raised for non-finite or out-of-domain numeric input."""


class DegenerateTransform(ViewError, ArithmeticError):
    """Raised when an operation would leave a non-invertible transform."""

"""Curve fitting."""
from . import fits  # noqa: F401

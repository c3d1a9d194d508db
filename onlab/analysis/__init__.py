"""Analysis tools for simulation output."""

from .thermodynamics import BinAnalyzer

__all__ = ["BinAnalyzer"]

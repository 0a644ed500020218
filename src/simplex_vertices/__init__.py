"""
simplex_vertices: vertex enumeration for small linear programs.

Builds a simplex dictionary for every Basic/NonBasic partition of
A x <= b, x >= 0 and classifies each one (valid, basic, feasible,
optimal, unbounded), using a dense matrix toolkit with Gaussian
elimination, LU decomposition and Gauss-Jordan solves.
"""

from . import config

__version__ = "0.1.0"
__all__ = ["config"]

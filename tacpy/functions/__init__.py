"""Special functions and recurrence kernels.

This subpackage holds the scalar special functions (Bessel, Hankel, Legendre,
spherical harmonics) used by the translation engines, partly Numba-accelerated.
"""

"""Scalar special functions used by the translation engines.

Legendre functions are normalized to unit norm on ``[-1, 1]`` and carry no
Condon-Shortley phase; the phase is applied when assembling the spherical
harmonics :func:`ynm`. The angular functions ``pi`` and ``tau`` follow the
usual Mie-theory definitions

.. math::

    \\pi_l^m(\\theta) = \\frac{m \\tilde P_l^m(\\cos\\theta)}{\\sin\\theta}, \\qquad
    \\tau_l^m(\\theta) = \\frac{d \\tilde P_l^m(\\cos\\theta)}{d\\theta}

and are evaluated without dividing by ``sin(theta)``, so they stay finite at
the poles.
"""

import numpy as np
from numba import jit
from scipy.special import spherical_jn, spherical_yn


@jit(nopython=True, cache=True)
def legendre_normalized(lmax: int, cos_theta: float, sin_theta: float) -> np.ndarray:
    """Normalized associated Legendre functions ``P~_l^m`` for ``0 <= m <= l <= lmax``.

    Args:
        lmax (int): Maximal degree.
        cos_theta (float): Cosine of the polar angle.
        sin_theta (float): Sine of the polar angle.

    Returns:
        (np.ndarray): Array of shape ``(lmax + 1, lmax + 1)`` indexed ``[l, m]``.
            Entries with ``m > l`` are zero.
    """
    plm = np.zeros((lmax + 1, lmax + 1))
    plm[0, 0] = np.sqrt(0.5)
    for m in range(1, lmax + 1):
        plm[m, m] = np.sqrt((2 * m + 1) / (2 * m)) * sin_theta * plm[m - 1, m - 1]
    _upward(plm, lmax, cos_theta)
    return plm


@jit(nopython=True, cache=True)
def _upward(table, lmax, cos_theta):
    # the diagonal table[m, m] has to be seeded by the caller
    for m in range(lmax):
        table[m + 1, m] = np.sqrt(2 * m + 3) * cos_theta * table[m, m]
        for l in range(m + 1, lmax):
            denominator = (l + 1 - m) * (l + 1 + m)
            table[l + 1, m] = (
                np.sqrt((2 * l + 1) * (2 * l + 3) / denominator) * cos_theta * table[l, m]
                - np.sqrt((2 * l + 3) * (l - m) * (l + m) / ((2 * l - 1) * denominator))
                * table[l - 1, m]
            )


@jit(nopython=True, cache=True)
def _pi_table(lmax, cos_theta, sin_theta):
    # P~_l^m / sin(theta), seeded without the division
    table = np.zeros((lmax + 1, lmax + 1))
    if lmax < 1:
        return table
    table[1, 1] = np.sqrt(3.0) / 2
    for m in range(2, lmax + 1):
        table[m, m] = np.sqrt((2 * m + 1) / (2 * m)) * sin_theta * table[m - 1, m - 1]
    _upward(table, lmax, cos_theta)
    table[:, 0] = 0.0
    for m in range(1, lmax + 1):
        table[:, m] *= m
    return table


def spherical_functions_trigon(lmax: int, theta: float) -> tuple[np.ndarray, np.ndarray]:
    """Angular functions ``pi_l^m`` and ``tau_l^m`` for ``0 <= m <= l <= lmax``.

    Args:
        lmax (int): Maximal degree.
        theta (float): Polar angle.

    Returns:
        pilm (np.ndarray): ``pi_l^m`` indexed ``[l, m]``.
        taulm (np.ndarray): ``tau_l^m`` indexed ``[l, m]``.
    """
    ct, st = np.cos(theta), np.sin(theta)
    plm = legendre_normalized(lmax + 1, ct, st)
    pilm = _pi_table(lmax, ct, st)
    taulm = np.zeros((lmax + 1, lmax + 1))
    for l in range(1, lmax + 1):
        taulm[l, 0] = -np.sqrt(l * (l + 1)) * plm[l, 1]
        for m in range(1, l + 1):
            taulm[l, m] = 0.5 * (
                np.sqrt((l + m) * (l - m + 1)) * plm[l, m - 1]
                - np.sqrt((l - m) * (l + m + 1)) * plm[l, m + 1]
            )
    return pilm, taulm


def ynm(n: int, m: int, theta: float, phi: float) -> complex:
    """Orthonormal spherical harmonic ``Y_n^m`` with the Condon-Shortley phase.

    Returns ``0`` for ``|m| > n`` or ``n < 0``.
    """
    if n < 0 or abs(m) > n:
        return 0j
    plm = legendre_normalized(n, np.cos(theta), np.sin(theta))
    value = plm[n, abs(m)] * np.exp(1j * m * phi) / np.sqrt(2 * np.pi)
    if m > 0 and m % 2:
        value = -value
    return complex(value)


def ynm_table(nmax: int, theta: float, phi: float) -> np.ndarray:
    """All ``Y_n^m`` up to ``nmax``, flat-indexed from degree 0."""
    plm = legendre_normalized(nmax, np.cos(theta), np.sin(theta))
    table = np.zeros((nmax + 1) ** 2, dtype=complex)
    for n in range(nmax + 1):
        for m in range(-n, n + 1):
            sign = -1.0 if (m > 0 and m % 2) else 1.0
            table[n * (n + 1) + m] = (
                sign * plm[n, abs(m)] * np.exp(1j * m * phi) / np.sqrt(2 * np.pi)
            )
    return table


def spherical_bessel(nmax: int, z: complex, derivative: bool = False) -> np.ndarray:
    """Spherical Bessel functions ``j_0 .. j_nmax`` (or their derivatives)."""
    return spherical_jn(np.arange(nmax + 1), z, derivative=derivative)


def spherical_hankel(nmax: int, z: complex, derivative: bool = False) -> np.ndarray:
    """Spherical Hankel functions of the first kind ``h_0 .. h_nmax``."""
    orders = np.arange(nmax + 1)
    return spherical_jn(orders, z, derivative=derivative) + 1j * spherical_yn(
        orders, z, derivative=derivative
    )


def radial_functions(nmax: int, z: complex, regular: bool) -> tuple[np.ndarray, np.ndarray]:
    """Radial functions and their derivatives.

    Args:
        nmax (int): Maximal degree.
        z (complex): Argument ``k r``.
        regular (bool): ``j_n`` if ``True``, ``h_n^{(1)}`` otherwise.

    Returns:
        values (np.ndarray): ``z_0 .. z_nmax``.
        derivatives (np.ndarray): ``z'_0 .. z'_nmax``.
    """
    function = spherical_bessel if regular else spherical_hankel
    values = np.asarray(function(nmax, z), dtype=complex)
    derivatives = np.asarray(function(nmax, z, derivative=True), dtype=complex)
    return values, derivatives

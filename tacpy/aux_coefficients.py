"""Vector spherical wave functions at a single point.

For every mode ``p -> (n, m)`` (degrees from 1) the class precomputes the
vector spherical harmonics ``B``, ``C`` and ``P`` and the wave functions ``M``
and ``N`` as components in the local ``(e_r, e_theta, e_phi)`` basis

.. math::

    \\mathbf B_{nm} = d_n\\,r\\nabla Y_n^m, \\quad
    \\mathbf C_{nm} = \\mathbf B_{nm} \\times \\hat{\\mathbf r}, \\quad
    \\mathbf P_{nm} = \\hat{\\mathbf r} Y_n^m,

    \\mathbf M_{nm} = z_n(kr)\\,\\mathbf C_{nm}, \\quad
    \\mathbf N_{nm} = \\sqrt{n(n+1)}\\frac{z_n(kr)}{kr}\\mathbf P_{nm}
        + \\frac{(kr\\,z_n(kr))'}{kr}\\mathbf B_{nm}

with ``d_n = 1 / sqrt(n(n+1))`` and ``z_n`` either ``j_n`` or ``h_n^{(1)}``.
"""

import logging

import numpy as np

from tacpy.functions.special import (
    legendre_normalized,
    radial_functions,
    spherical_functions_trigon,
)
from tacpy.geometry import Spherical
from tacpy.indexing import count_up_to, iter_modes


def dn(n: int) -> float:
    """Normalization ``1 / sqrt(n(n+1))`` of the vector spherical harmonics."""
    return 1 / np.sqrt(n * (n + 1))


class AuxCoefficients:
    """Vector spherical harmonics and wave functions at a point.

    Args:
        point (Spherical): Evaluation point relative to the expansion origin.
        wave_k (complex): Wavenumber.
        regular (bool): Regular (``j_n``) or irregular (``h_n^{(1)}``) wave functions.
        nmax (int): Maximal degree.

    Raises:
        ValueError: For a negative ``nmax`` or irregular functions at the origin.
    """

    def __init__(self, point: Spherical, wave_k: complex, regular: bool, nmax: int):
        if nmax < 0:
            raise ValueError(f"nmax needs to be non-negative, got {nmax}")
        if not regular and (point.r == 0 or wave_k == 0):
            raise ValueError("Irregular wave functions are singular at the origin")
        self.point = point
        self.wave_k = complex(wave_k)
        self.regular = regular
        self.nmax = nmax
        self.log = logging.getLogger(self.__class__.__module__)

        self.__compute()

    def __compute(self):
        size = count_up_to(self.nmax)
        self._b = np.zeros((size, 3), dtype=complex)
        self._c = np.zeros((size, 3), dtype=complex)
        self._p = np.zeros((size, 3), dtype=complex)
        self._m = np.zeros((size, 3), dtype=complex)
        self._n = np.zeros((size, 3), dtype=complex)
        if size == 0:
            return

        theta = self.point.theta
        plm = legendre_normalized(self.nmax, np.cos(theta), np.sin(theta))
        pilm, taulm = spherical_functions_trigon(self.nmax, theta)
        x = self.wave_k * self.point.r
        if x == 0:
            z = np.zeros(self.nmax + 1, dtype=complex)
            z_over_x = np.zeros(self.nmax + 1, dtype=complex)
            riccati_over_x = np.zeros(self.nmax + 1, dtype=complex)
            z[0] = 1
            z_over_x[1] = 1 / 3
            riccati_over_x[1] = 2 / 3
        else:
            z, dz = radial_functions(self.nmax, x, self.regular)
            z_over_x = z / x
            riccati_over_x = (z + x * dz) / x

        norm = 1 / np.sqrt(2 * np.pi)
        for p, n, m in iter_modes(self.nmax):
            phase = np.exp(1j * m * self.point.phi) * norm
            sign = (-1) ** m if m >= 0 else 1
            y = sign * plm[n, abs(m)] * phase
            d_theta = sign * taulm[n, abs(m)] * phase
            m_over_sin = np.sign(m) * sign * pilm[n, abs(m)] * phase
            d = dn(n)

            self._b[p] = (0, d * d_theta, 1j * d * m_over_sin)
            self._c[p] = (0, 1j * d * m_over_sin, -d * d_theta)
            self._p[p] = (y, 0, 0)
            self._m[p] = z[n] * self._c[p]
            self._n[p] = (
                np.sqrt(n * (n + 1)) * z_over_x[n] * self._p[p]
                + riccati_over_x[n] * self._b[p]
            )

    def B(self, p: int) -> np.ndarray:
        return self._b[p]

    def C(self, p: int) -> np.ndarray:
        return self._c[p]

    def P(self, p: int) -> np.ndarray:
        return self._p[p]

    def M(self, p: int) -> np.ndarray:
        return self._m[p]

    def N(self, p: int) -> np.ndarray:
        return self._n[p]

    @staticmethod
    def dn(n: int) -> float:
        return dn(n)

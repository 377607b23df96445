"""Translation of vector spherical wave function expansions.

The wave functions ``M_p`` and ``N_p`` about one origin are re-expanded in the
regular wave functions about an origin displaced by ``R``:

.. math::

    \\mathbf M_p = \\sum_q D_{qp} \\mathbf M'_q + O_{qp} \\mathbf N'_q, \\qquad
    \\mathbf N_p = \\sum_q O_{qp} \\mathbf M'_q + D_{qp} \\mathbf N'_q .

``D`` (diagonal) and ``O`` (off-diagonal) are linear combinations of the
scalar coefficients of :class:`tacpy.translation.TranslationAdditionCoefficients`
with neighbouring degree and order, weighted by the cartesian components of
the displacement in the spherical basis.
"""

import numpy as np

import tacpy.log as log
from tacpy.geometry import Spherical
from tacpy.indexing import count_up_to, to_pair
from tacpy.translation import (
    TranslationAdditionCoefficients,
    a_minus,
    a_plus,
    b_minus,
    b_plus,
)


class Coupling:
    """Translation blocks between two VSWF expansions.

    Args:
        displacement (Spherical): Position of the new origin relative to the old one.
        wave_k (complex): Wavenumber of the medium.
        nmax (int): Maximal degree of both expansions.
        regular (bool, optional): Whether the translated wave functions are
            regular. Defaults to True.

    Raises:
        ValueError: If ``nmax < 1``.
    """

    def __init__(
        self, displacement: Spherical, wave_k: complex, nmax: int, regular: bool = True
    ):
        if nmax < 1:
            raise ValueError(f"nmax needs to be at least 1, got {nmax}")
        self.displacement = displacement
        self.wave_k = complex(wave_k)
        self.nmax = nmax
        self.regular = regular
        self.coefficients = TranslationAdditionCoefficients(displacement, wave_k, regular)
        self.log = log.scattering_logger(__name__)

        r, theta, phi = displacement.r, displacement.theta, displacement.phi
        self._r_z = r * np.cos(theta)
        self._r_plus = 0.5 * r * np.sin(theta) * np.exp(1j * phi)
        self._r_minus = 0.5 * r * np.sin(theta) * np.exp(-1j * phi)

    def diagonal(self, q: int, p: int) -> complex:
        """Coupling of ``M_p`` to ``M'_q`` (and ``N_p`` to ``N'_q``)."""
        n, m = to_pair(p)
        l, k = to_pair(q)
        A = self.coefficients
        up = np.sqrt((l + 1) / l)
        down = np.sqrt(l / (l + 1))

        axial = (
            a_minus(l + 1, k) * down * A(n, m, l + 1, k)
            - a_plus(l - 1, k) * up * A(n, m, l - 1, k)
        )
        minus = (
            b_minus(l + 1, k - 1) * down * A(n, m, l + 1, k - 1)
            - b_plus(l - 1, k - 1) * up * A(n, m, l - 1, k - 1)
        )
        plus = (
            b_plus(l - 1, -k - 1) * up * A(n, m, l - 1, k + 1)
            - b_minus(l + 1, -k - 1) * down * A(n, m, l + 1, k + 1)
        )

        shift = self._r_z * axial + self._r_minus * minus + self._r_plus * plus
        ln = np.sqrt(n * (n + 1))
        ll = np.sqrt(l * (l + 1))
        return ll / ln * A(n, m, l, k) + self.wave_k / ln * shift

    def offdiagonal(self, q: int, p: int) -> complex:
        """Coupling of ``M_p`` to ``N'_q`` (and ``N_p`` to ``M'_q``)."""
        n, m = to_pair(p)
        l, k = to_pair(q)
        A = self.coefficients
        value = (
            k * self._r_z * A(n, m, l, k)
            + self._r_minus * np.sqrt((l + k) * (l - k + 1)) * A(n, m, l, k - 1)
            + self._r_plus * np.sqrt((l - k) * (l + k + 1)) * A(n, m, l, k + 1)
        )
        return 1j * self.wave_k / np.sqrt(n * (n + 1) * l * (l + 1)) * value

    def translation_matrix(self) -> np.ndarray:
        """Dense ``(2P, 2P)`` matrix ``[[D, O], [O, D]]`` with ``P`` modes per expansion.

        Rows index the modes about the new origin, columns those about the old one.
        """
        size = count_up_to(self.nmax)
        diagonal = np.zeros((size, size), dtype=complex)
        offdiagonal = np.zeros((size, size), dtype=complex)
        for q in range(size):
            for p in range(size):
                diagonal[q, p] = self.diagonal(q, p)
                offdiagonal[q, p] = self.offdiagonal(q, p)
        self.log.numerics(
            f"Translation matrix for nmax={self.nmax}: "
            f"{len(self.coefficients)} scalar coefficients cached"
        )
        return np.block([[diagonal, offdiagonal], [offdiagonal, diagonal]])

    def translate(self, x: np.ndarray) -> np.ndarray:
        """Coefficients ``[a, b]`` about the new origin for ``x = [a, b]`` about the old one."""
        x = np.asarray(x, dtype=complex)
        size = 2 * count_up_to(self.nmax)
        if x.shape[0] != size:
            raise ValueError(f"Expected {size} coefficients, got {x.shape[0]}")
        return self.translation_matrix() @ x

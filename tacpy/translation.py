"""Scalar translation-addition coefficients.

A scalar multipole of degree ``n`` and order ``m`` about one origin is
re-expanded about a second origin displaced by ``R``:

.. math::

    z_n(k|\\mathbf r|) Y_n^m(\\hat{\\mathbf r})
        = \\sum_{l,k} A_{nm}^{lk}(\\mathbf R)\\, j_l(k|\\mathbf r'|) Y_l^k(\\hat{\\mathbf r}'),
    \\qquad \\mathbf r = \\mathbf r' + \\mathbf R .

``z_n`` is the regular ``j_n`` or the irregular ``h_n^{(1)}`` radial function.
The coefficients are never tabulated up front. They are derived on demand from
the closed-form values for ``n = 0`` through three-term recurrences in the
source degree and order, and memoized per engine instance.

References
----------
The recurrences are those of Chew (1992) as summarised in Stout, Auger and
Lafait, J. Mod. Opt. 49, 2129 (2002) and Stout et al. (2004), Appendix C.
"""

import logging

import numpy as np

from tacpy.functions.special import legendre_normalized, radial_functions
from tacpy.geometry import Spherical

DEGENERACY_THRESHOLD = 1e-12


class DegenerateRecurrenceError(AssertionError):
    """Neither the degree nor the order recurrence can reach a coefficient."""


def _is_valid(n: int, m: int) -> bool:
    return n >= 0 and abs(m) <= n


def a_plus(n: int, m: int) -> float:
    if not _is_valid(n, m):
        return 0.0
    return -np.sqrt((n + m + 1) * (n - m + 1) / ((2 * n + 1) * (2 * n + 3)))


def a_minus(n: int, m: int) -> float:
    if not _is_valid(n, m):
        return 0.0
    return np.sqrt((n + m) * (n - m) / ((2 * n + 1) * (2 * n - 1)))


def b_plus(n: int, m: int) -> float:
    if not _is_valid(n, m):
        return 0.0
    return np.sqrt((n + m + 2) * (n + m + 1) / ((2 * n + 1) * (2 * n + 3)))


def b_minus(n: int, m: int) -> float:
    if not _is_valid(n, m):
        return 0.0
    return np.sqrt((n - m) * (n - m - 1) / ((2 * n + 1) * (2 * n - 1)))


class _RadialTable:
    """Radial functions ``z_l(kR)`` extended on demand."""

    def __init__(self, argument: complex, regular: bool):
        self.argument = argument
        self.regular = regular
        self.values = np.zeros(0, dtype=complex)

    def __getitem__(self, l: int) -> complex:
        if l >= self.values.size:
            self.values, _ = radial_functions(max(2 * l, 16), self.argument, self.regular)
        return self.values[l]


class TranslationAdditionCoefficients:
    """Translation-addition coefficients ``A(n, m, l, k)`` for an arbitrary displacement.

    Args:
        displacement (Spherical): Position of the new origin relative to the old one.
        wave_k (complex): Wavenumber of the medium.
        regular (bool, optional): Translate regular (``True``) or irregular
            (``False``) multipoles. Defaults to True.

    Raises:
        ValueError: For a non-finite wavenumber or an irregular translation
            by a zero displacement.
    """

    def __init__(self, displacement: Spherical, wave_k: complex, regular: bool = True):
        wave_k = complex(wave_k)
        if not np.isfinite(wave_k):
            raise ValueError(f"The wavenumber needs to be finite, got {wave_k}")
        if not regular and displacement.r * wave_k == 0:
            raise ValueError(
                "Irregular translation coefficients are singular for a zero displacement"
            )
        self.displacement = displacement
        self.wave_k = wave_k
        self.regular = regular
        self.log = logging.getLogger(self.__class__.__module__)

        self._cache: dict[tuple[int, int, int, int], complex] = {}
        self._radial = _RadialTable(wave_k * displacement.r, regular)
        self._legendre = np.zeros((0, 0))

    def __call__(self, n: int, m: int, l: int, k: int) -> complex:
        return self.evaluate(n, m, l, k)

    def __len__(self) -> int:
        return len(self._cache)

    def evaluate(self, n: int, m: int, l: int, k: int) -> complex:
        """Coefficient ``A(n, m, l, k)``, zero outside the mode domain.

        Raises:
            DegenerateRecurrenceError: If neither recurrence has a usable divisor.
        """
        if not (_is_valid(n, m) and _is_valid(l, k)):
            return 0j
        key = (n, m, l, k)
        value = self._cache.get(key)
        if value is None:
            value = self._initial(l, k) if n == 0 else self._recur(n, m, l, k)
            self._cache[key] = value
        return value

    def _initial(self, l: int, k: int) -> complex:
        # sqrt(4 pi) (-1)^(l+k) Y_l^{-k}(R^) z_l(kR)
        if l >= self._legendre.shape[0]:
            theta = self.displacement.theta
            self._legendre = legendre_normalized(max(2 * l, 16), np.cos(theta), np.sin(theta))
        harmonic = self._legendre[l, abs(k)] * np.exp(-1j * k * self.displacement.phi)
        if k < 0 and k % 2:
            harmonic = -harmonic
        sign = -1 if (l + k) % 2 else 1
        return sign * np.sqrt(2.0) * harmonic * self._radial[l]

    def _recur(self, n: int, m: int, l: int, k: int) -> complex:
        divisor = a_plus(n - 1, m)
        if abs(divisor) > DEGENERACY_THRESHOLD:
            return (
                a_plus(l - 1, k) * self.evaluate(n - 1, m, l - 1, k)
                + a_minus(l + 1, k) * self.evaluate(n - 1, m, l + 1, k)
                - a_minus(n - 1, m) * self.evaluate(n - 2, m, l, k)
            ) / divisor
        if m > 0:
            divisor = b_plus(n - 1, m - 1)
            if abs(divisor) <= DEGENERACY_THRESHOLD:
                raise DegenerateRecurrenceError(
                    f"No recurrence reaches A({n}, {m}, {l}, {k})"
                )
            return (
                b_minus(l + 1, k - 1) * self.evaluate(n - 1, m - 1, l + 1, k - 1)
                + b_plus(l - 1, k - 1) * self.evaluate(n - 1, m - 1, l - 1, k - 1)
                - b_minus(n - 1, m - 1) * self.evaluate(n - 2, m, l, k)
            ) / divisor
        divisor = b_plus(n - 1, -m - 1)
        if abs(divisor) <= DEGENERACY_THRESHOLD:
            raise DegenerateRecurrenceError(f"No recurrence reaches A({n}, {m}, {l}, {k})")
        return (
            b_minus(l + 1, -k - 1) * self.evaluate(n - 1, m + 1, l + 1, k + 1)
            + b_plus(l - 1, -k - 1) * self.evaluate(n - 1, m + 1, l - 1, k + 1)
            - b_minus(n - 1, -m - 1) * self.evaluate(n - 2, m, l, k)
        ) / divisor


class CoAxialTranslationAdditionCoefficients:
    """Translation-addition coefficients ``A(n, m, l)`` along the polar axis.

    For a displacement along ``z`` the order is conserved (``k = m``) and the
    coefficients only depend on ``|m|``. A displacement off the axis is
    projected onto the closer pole, keeping its length.

    Args:
        displacement (Spherical): Position of the new origin relative to the old one.
        wave_k (complex): Wavenumber of the medium.
        regular (bool, optional): Translate regular or irregular multipoles.
            Defaults to True.
    """

    def __init__(self, displacement: Spherical, wave_k: complex, regular: bool = True):
        wave_k = complex(wave_k)
        if not np.isfinite(wave_k):
            raise ValueError(f"The wavenumber needs to be finite, got {wave_k}")
        if not regular and displacement.r * wave_k == 0:
            raise ValueError(
                "Irregular translation coefficients are singular for a zero displacement"
            )
        self.displacement = displacement
        self.wave_k = wave_k
        self.regular = regular
        self.direction = 1 if np.cos(displacement.theta) >= 0 else -1
        self.log = logging.getLogger(self.__class__.__module__)

        self._cache: dict[tuple[int, int, int], complex] = {}
        self._radial = _RadialTable(wave_k * displacement.r, regular)

    def __call__(self, n: int, m: int, l: int) -> complex:
        return self.evaluate(n, m, l)

    def __len__(self) -> int:
        return len(self._cache)

    def evaluate(self, n: int, m: int, l: int) -> complex:
        """Coefficient ``A(n, m, l)``, zero outside the mode domain."""
        if not (_is_valid(n, m) and _is_valid(l, m)):
            return 0j
        m = abs(m)
        key = (n, m, l)
        value = self._cache.get(key)
        if value is None:
            value = self._initial(l) if n == 0 else self._recur(n, m, l)
            self._cache[key] = value
        return value

    def _initial(self, l: int) -> complex:
        sign = -self.direction if l % 2 else 1
        return sign * np.sqrt(2 * l + 1) * self._radial[l]

    def _recur(self, n: int, m: int, l: int) -> complex:
        divisor = a_plus(n - 1, m)
        if abs(divisor) > DEGENERACY_THRESHOLD:
            return (
                a_plus(l - 1, m) * self.evaluate(n - 1, m, l - 1)
                + a_minus(l + 1, m) * self.evaluate(n - 1, m, l + 1)
                - a_minus(n - 1, m) * self.evaluate(n - 2, m, l)
            ) / divisor
        divisor = b_plus(n - 1, m - 1)
        if abs(divisor) <= DEGENERACY_THRESHOLD:
            raise DegenerateRecurrenceError(f"No recurrence reaches A({n}, {m}, {l})")
        return (
            b_minus(l + 1, m - 1) * self.evaluate(n - 1, m - 1, l + 1)
            + b_plus(l - 1, m - 1) * self.evaluate(n - 1, m - 1, l - 1)
            - b_minus(n - 1, m - 1) * self.evaluate(n - 2, m, l)
        ) / divisor

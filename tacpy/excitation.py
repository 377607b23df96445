"""Incident field expansion coefficients.

A plane wave ``E_inc exp(i k.r)`` is expanded in regular vector spherical wave
functions about the origin,

.. math::

    \\mathbf E(\\mathbf r) = \\sum_p a_p \\mathbf M_p(\\mathbf r) + b_p \\mathbf N_p(\\mathbf r),

    a_p = 4\\pi\\, i^n\\, \\overline{\\mathbf C_p(\\hat{\\mathbf k})} \\cdot \\mathbf E_{inc},
    \\qquad
    b_p = 4\\pi\\, i^{n-1}\\, \\overline{\\mathbf B_p(\\hat{\\mathbf k})} \\cdot \\mathbf E_{inc},

and re-expanded about other origins with :class:`tacpy.coupling.Coupling`.

References
----------
Plane-wave VSWF expansions are standard, e.g. :cite:`Mishchenko-2002-ID6`.
"""

import numpy as np

import tacpy.log as log
from tacpy.aux_coefficients import AuxCoefficients
from tacpy.coupling import Coupling
from tacpy.geometry import Spherical
from tacpy.indexing import count_up_to, iter_modes

FIELD_TYPES = ("planewave",)


class Excitation:
    """Incident field and its expansion coefficients.

    Args:
        field_type (str): Type of the incident field. Only ``"planewave"`` is supported.
        e_inc (array_like): Complex amplitude ``(E_r, E_theta, E_phi)`` in the local
            basis of the propagation direction.
        wave_k_inc (Spherical): Wave vector; its radius is the wavenumber.
        nmax (int): Maximal degree of the expansion.

    Attributes:
        a (np.ndarray): Coefficients of the ``M`` wave functions.
        b (np.ndarray): Coefficients of the ``N`` wave functions.
    """

    def __init__(self, field_type: str, e_inc, wave_k_inc: Spherical, nmax: int):
        self.log = log.scattering_logger(__name__)
        self.update(field_type, e_inc, wave_k_inc, nmax)

    @property
    def wave_k(self) -> float:
        return self.wave_k_inc.r

    def update(self, field_type: str, e_inc, wave_k_inc: Spherical, nmax: int) -> None:
        """Replace the incident field and recompute the coefficients."""
        if field_type not in FIELD_TYPES:
            raise ValueError(
                f"Field type {field_type} is not supported, choose one of {FIELD_TYPES}"
            )
        if nmax < 1:
            raise ValueError(f"nmax needs to be at least 1, got {nmax}")
        e_inc = np.asarray(e_inc, dtype=complex)
        if e_inc.shape != (3,):
            raise ValueError(f"The incident amplitude needs three components, got {e_inc.shape}")
        self.field_type = field_type
        self.e_inc = e_inc
        self.wave_k_inc = wave_k_inc
        self.nmax = nmax
        self.populate()

    def update_wavelength(self, wavelength: float) -> None:
        """Recompute the coefficients for a new wavelength, keeping the direction."""
        wave_k_inc = Spherical(
            2 * np.pi / wavelength, self.wave_k_inc.theta, self.wave_k_inc.phi
        )
        self.update(self.field_type, self.e_inc, wave_k_inc, self.nmax)

    def populate(self) -> None:
        direction = Spherical(0.0, self.wave_k_inc.theta, self.wave_k_inc.phi)
        aux = AuxCoefficients(direction, self.wave_k, True, self.nmax)

        self.a = np.zeros(count_up_to(self.nmax), dtype=complex)
        self.b = np.zeros(count_up_to(self.nmax), dtype=complex)
        for p, n, _ in iter_modes(self.nmax):
            self.a[p] = 4 * np.pi * 1j**n * np.dot(np.conj(aux.C(p)), self.e_inc)
            self.b[p] = 4 * np.pi * 1j ** (n - 1) * np.dot(np.conj(aux.B(p)), self.e_inc)
        self.log.debug(f"Populated {self.a.size} plane wave modes for k={self.wave_k}")

    def coefficients(self) -> np.ndarray:
        """Concatenated coefficients ``[a, b]``."""
        return np.concatenate([self.a, self.b])

    def local_coefficients(self, point: Spherical, nmax: int | None = None) -> np.ndarray:
        """Coefficients ``[a, b]`` of the incident field about ``point``.

        Args:
            point (Spherical): The new expansion origin.
            nmax (int, optional): Truncation about the new origin, at most the
                truncation of the incident expansion. Defaults to the latter.
        """
        nmax = self.nmax if nmax is None else nmax
        if nmax < 1 or nmax > self.nmax:
            raise ValueError(f"nmax needs to be between 1 and {self.nmax}, got {nmax}")
        local = Coupling(point, self.wave_k, self.nmax, regular=True).translate(
            self.coefficients()
        )
        size = count_up_to(self.nmax)
        keep = count_up_to(nmax)
        return np.concatenate([local[:keep], local[size : size + keep]])

    def field(self, point: Spherical) -> np.ndarray:
        """Truncated expansion at ``point`` as ``(E_r, E_theta, E_phi)`` in the local basis."""
        aux = AuxCoefficients(point, self.wave_k, True, self.nmax)
        value = np.zeros(3, dtype=complex)
        for p in range(self.a.size):
            value += self.a[p] * aux.M(p) + self.b[p] * aux.N(p)
        return value

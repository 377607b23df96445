from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Spherical:
    """A point (or displacement) in spherical coordinates.

    Attributes:
        r (float): Radius, non-negative.
        theta (float): Polar angle in ``[0, pi]``.
        phi (float): Azimuthal angle.
    """

    r: float
    theta: float = 0.0
    phi: float = 0.0

    def __post_init__(self):
        if not np.isfinite(self.r) or self.r < 0:
            raise ValueError(f"The radius needs to be finite and non-negative, got {self.r}")

    @classmethod
    def from_cartesian(cls, x: float, y: float, z: float) -> Spherical:
        r = float(np.sqrt(x * x + y * y + z * z))
        if r == 0:
            return cls(0.0, 0.0, 0.0)
        cos_theta = min(max(z / r, -1.0), 1.0)
        return cls(r, float(np.arccos(cos_theta)), float(np.arctan2(y, x)))

    def to_cartesian(self) -> np.ndarray:
        st = np.sin(self.theta)
        return self.r * np.array(
            [st * np.cos(self.phi), st * np.sin(self.phi), np.cos(self.theta)]
        )

    def __sub__(self, other: Spherical) -> Spherical:
        return Spherical.from_cartesian(*(self.to_cartesian() - other.to_cartesian()))

    def __add__(self, other: Spherical) -> Spherical:
        return Spherical.from_cartesian(*(self.to_cartesian() + other.to_cartesian()))


def unit_vectors(theta: float, phi: float) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Cartesian components of the local basis ``(e_r, e_theta, e_phi)``."""
    ct, st = np.cos(theta), np.sin(theta)
    cp, sp = np.cos(phi), np.sin(phi)
    e_r = np.array([st * cp, st * sp, ct])
    e_theta = np.array([ct * cp, ct * sp, -st])
    e_phi = np.array([-sp, cp, 0.0])
    return e_r, e_theta, e_phi


def to_cartesian_vector(vector, theta: float, phi: float) -> np.ndarray:
    """Convert ``(v_r, v_theta, v_phi)`` at the direction ``(theta, phi)`` to cartesian."""
    e_r, e_theta, e_phi = unit_vectors(theta, phi)
    return vector[0] * e_r + vector[1] * e_theta + vector[2] * e_phi


def to_spherical_vector(vector, theta: float, phi: float) -> np.ndarray:
    """Inverse of :func:`to_cartesian_vector`."""
    e_r, e_theta, e_phi = unit_vectors(theta, phi)
    vector = np.asarray(vector)
    return np.array([vector @ e_r, vector @ e_theta, vector @ e_phi])

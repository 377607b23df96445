import numpy as np
import pytest
from scipy.special import gammaln, lpmv

from tacpy import session


@pytest.fixture(autouse=True)
def fresh_session(monkeypatch):
    monkeypatch.setattr(
        session, "_state", {"initialized": False, "finalized": False, "references": 0}
    )
    monkeypatch.setattr(session, "_teardown", [])


def reference_ynm(n: int, m: int, theta: float, phi: float) -> complex:
    """Orthonormal spherical harmonic built from scipy's Legendre functions."""
    if abs(m) > n:
        return 0j
    if m < 0:
        return (-1) ** m * np.conj(reference_ynm(n, -m, theta, phi))
    norm = np.sqrt((2 * n + 1) / (4 * np.pi) * np.exp(gammaln(n - m + 1) - gammaln(n + m + 1)))
    return norm * lpmv(m, n, np.cos(theta)) * np.exp(1j * m * phi)

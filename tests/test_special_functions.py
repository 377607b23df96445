import numpy as np
import numpy.testing as npt
import pytest
from conftest import reference_ynm
from scipy.special import gammaln, hankel1, lpmv

from tacpy.functions.special import (
    legendre_normalized,
    radial_functions,
    spherical_functions_trigon,
    spherical_hankel,
    ynm,
    ynm_table,
)


@pytest.mark.parametrize("theta", [0.0, 0.42, 1.3, 2.9, np.pi])
def test_legendre_against_scipy(theta):
    lmax = 50
    plm = legendre_normalized(lmax, np.cos(theta), np.sin(theta))
    for l in range(lmax + 1):
        for m in range(l + 1):
            norm = np.sqrt((2 * l + 1) / 2 * np.exp(gammaln(l - m + 1) - gammaln(l + m + 1)))
            expected = norm * (-1) ** m * lpmv(m, l, np.cos(theta))
            assert plm[l, m] == pytest.approx(expected, rel=1e-7, abs=1e-8)
    assert np.all(np.triu(plm, 1) == 0)


def test_spherical_harmonics_known_values():
    theta, phi = 0.42, 0.36
    ct, st = np.cos(theta), np.sin(theta)
    assert ynm(0, 0, theta, phi) == pytest.approx(1 / np.sqrt(4 * np.pi))
    assert ynm(1, 0, theta, phi) == pytest.approx(np.sqrt(3 / (4 * np.pi)) * ct)
    assert ynm(1, 1, theta, phi) == pytest.approx(
        -np.sqrt(3 / (8 * np.pi)) * st * np.exp(1j * phi)
    )
    assert ynm(1, -1, theta, phi) == pytest.approx(
        np.sqrt(3 / (8 * np.pi)) * st * np.exp(-1j * phi)
    )
    assert ynm(2, 3, theta, phi) == 0
    assert ynm(-1, 0, theta, phi) == 0


def test_spherical_harmonics_high_degree():
    rng = np.random.default_rng(42)
    for _ in range(10):
        theta = rng.uniform(0, np.pi)
        phi = rng.uniform(0, 2 * np.pi)
        n = int(rng.integers(1, 51))
        m = int(round(n * rng.uniform(-1, 1)))
        assert ynm(n, m, theta, phi) == pytest.approx(
            reference_ynm(n, m, theta, phi), rel=1e-7, abs=1e-9
        )


def test_spherical_harmonics_table():
    theta, phi = 1.1, -0.7
    table = ynm_table(6, theta, phi)
    assert table.size == 49
    for n in range(7):
        for m in range(-n, n + 1):
            assert table[n * (n + 1) + m] == pytest.approx(ynm(n, m, theta, phi))


@pytest.mark.parametrize("theta", [0.3, 1.2, 2.5])
def test_pi_tau_against_legendre(theta):
    lmax = 12
    h = 1e-6
    pilm, taulm = spherical_functions_trigon(lmax, theta)
    plm = legendre_normalized(lmax, np.cos(theta), np.sin(theta))
    forward = legendre_normalized(lmax, np.cos(theta + h), np.sin(theta + h))
    backward = legendre_normalized(lmax, np.cos(theta - h), np.sin(theta - h))
    m = np.arange(lmax + 1)[np.newaxis, :]
    npt.assert_allclose(pilm, m * plm / np.sin(theta), atol=1e-10)
    npt.assert_allclose(taulm, (forward - backward) / (2 * h), atol=1e-6)


def test_pi_tau_finite_at_poles():
    pilm, taulm = spherical_functions_trigon(3, 0.0)
    assert np.all(np.isfinite(pilm)) and np.all(np.isfinite(taulm))
    assert pilm[1, 1] == pytest.approx(np.sqrt(3) / 2)
    assert taulm[1, 1] == pytest.approx(np.sqrt(3) / 2)
    assert pilm[2, 2] == pytest.approx(0)
    pilm, taulm = spherical_functions_trigon(3, np.pi)
    assert pilm[1, 1] == pytest.approx(np.sqrt(3) / 2)
    assert taulm[1, 1] == pytest.approx(-np.sqrt(3) / 2)


def test_spherical_hankel_against_cylindrical():
    z = 1.0 + 1.5j
    nmax = 10
    orders = np.arange(nmax + 1)
    expected = np.sqrt(np.pi / (2 * z)) * hankel1(orders + 0.5, z)
    npt.assert_allclose(spherical_hankel(nmax, z), expected, rtol=1e-10)


def test_radial_functions_derivative():
    z = 0.8 + 0.3j
    h = 1e-6
    for regular in (True, False):
        values, derivatives = radial_functions(5, z, regular)
        forward, _ = radial_functions(5, z + h, regular)
        backward, _ = radial_functions(5, z - h, regular)
        npt.assert_allclose(derivatives, (forward - backward) / (2 * h), rtol=1e-6)
        assert values.dtype == complex

import numpy as np
import numpy.testing as npt
import pytest

from tacpy.aux_coefficients import AuxCoefficients
from tacpy.coupling import Coupling
from tacpy.geometry import Spherical, to_cartesian_vector
from tacpy.indexing import count_up_to, to_flat
from tacpy.pairwise import pairwise_couplings

DISPLACEMENT = Spherical(1.2, 0.9, 0.4)


def _cartesian(aux, point, function, p):
    return to_cartesian_vector(getattr(aux, function)(p), point.theta, point.phi)


@pytest.mark.parametrize("wave_k", [1.1, 1.0 + 0.2j], ids=["real", "complex"])
@pytest.mark.parametrize(
    "regular, point",
    [
        (True, Spherical(0.5, 2.1, -1.0)),
        (False, Spherical(0.35, 2.1, -1.0)),
    ],
    ids=["regular", "irregular"],
)
def test_vector_addition_theorem(wave_k, regular, point):
    # M_p(r) = sum_q D_qp M'_q(r') + O_qp N'_q(r'), N_p(r) = sum_q O_qp M'_q(r') + D_qp N'_q(r')
    nmax = 18
    coupling = Coupling(DISPLACEMENT, wave_k, nmax, regular)
    source = point + DISPLACEMENT
    original = AuxCoefficients(source, wave_k, regular, 3)
    local = AuxCoefficients(point, wave_k, True, nmax)
    for n, m in [(1, 0), (1, -1), (2, 1), (3, -2)]:
        p = to_flat(n, m)
        m_sum = np.zeros(3, dtype=complex)
        n_sum = np.zeros(3, dtype=complex)
        for q in range(count_up_to(nmax)):
            diagonal = coupling.diagonal(q, p)
            offdiagonal = coupling.offdiagonal(q, p)
            m_local = _cartesian(local, point, "M", q)
            n_local = _cartesian(local, point, "N", q)
            m_sum += diagonal * m_local + offdiagonal * n_local
            n_sum += offdiagonal * m_local + diagonal * n_local
        npt.assert_allclose(m_sum, _cartesian(original, source, "M", p), rtol=1e-6, atol=1e-9)
        npt.assert_allclose(n_sum, _cartesian(original, source, "N", p), rtol=1e-6, atol=1e-9)


def test_zero_displacement_is_identity():
    coupling = Coupling(Spherical(0.0), 1.3, 3)
    npt.assert_allclose(coupling.translation_matrix(), np.eye(2 * count_up_to(3)), atol=1e-12)


def test_translation_matrix_layout():
    coupling = Coupling(DISPLACEMENT, 0.8 + 0.1j, 2, False)
    matrix = coupling.translation_matrix()
    size = count_up_to(2)
    assert matrix.shape == (2 * size, 2 * size)
    assert matrix[1, 4] == coupling.diagonal(1, 4)
    assert matrix[size + 1, size + 4] == coupling.diagonal(1, 4)
    assert matrix[2, size + 3] == coupling.offdiagonal(2, 3)
    assert matrix[size + 2, 3] == coupling.offdiagonal(2, 3)

    x = np.arange(2 * size) + 1j
    npt.assert_allclose(coupling.translate(x), matrix @ x)
    with pytest.raises(ValueError):
        coupling.translate(np.ones(size))


def test_degree_one_couplings_by_hand():
    wave_k = 0.9 + 0.3j
    coupling = Coupling(DISPLACEMENT, wave_k, 1, regular=False)
    A = coupling.coefficients
    r, theta, phi = DISPLACEMENT.r, DISPLACEMENT.theta, DISPLACEMENT.phi
    r_z = r * np.cos(theta)
    r_plus = 0.5 * r * np.sin(theta) * np.exp(1j * phi)
    r_minus = 0.5 * r * np.sin(theta) * np.exp(-1j * phi)
    p = to_flat(1, 0)
    # degree zero coefficients enter every l = 1 row
    assert abs(A(1, 0, 0, 0)) > 1e-3

    shift = (
        r_z * (np.sqrt(2 / 15) * A(1, 0, 2, 0) + np.sqrt(2 / 3) * A(1, 0, 0, 0))
        + r_minus * np.sqrt(1 / 5) * A(1, 0, 2, -1)
        - r_plus * np.sqrt(1 / 5) * A(1, 0, 2, 1)
    )
    expected = A(1, 0, 1, 0) + wave_k / np.sqrt(2) * shift
    npt.assert_allclose(coupling.diagonal(to_flat(1, 0), p), expected, rtol=1e-12)

    shift = (
        r_z * np.sqrt(1 / 10) * A(1, 0, 2, 1)
        + r_minus * (np.sqrt(1 / 15) * A(1, 0, 2, 0) - 2 / np.sqrt(3) * A(1, 0, 0, 0))
        - r_plus * np.sqrt(2 / 5) * A(1, 0, 2, 2)
    )
    expected = A(1, 0, 1, 1) + wave_k / np.sqrt(2) * shift
    npt.assert_allclose(coupling.diagonal(to_flat(1, 1), p), expected, rtol=1e-12)

    expected = 0.5j * wave_k * (r_z * A(1, 0, 1, 1) + np.sqrt(2) * r_minus * A(1, 0, 1, 0))
    npt.assert_allclose(coupling.offdiagonal(to_flat(1, 1), p), expected, rtol=1e-12)


def test_axial_translation_of_degree_one_field():
    # M_{1,0} about an origin shifted along z, checked pointwise
    displacement = Spherical(1.2, 0.0, 0.0)
    point = Spherical(0.4, 0.7, 0.3)
    source = point + displacement
    nmax = 16
    coupling = Coupling(displacement, 1.0, nmax, regular=False)
    local = AuxCoefficients(point, 1.0, True, nmax)
    p = to_flat(1, 0)
    field = np.zeros(3, dtype=complex)
    for q in range(count_up_to(nmax)):
        field += coupling.diagonal(q, p) * _cartesian(local, point, "M", q)
        field += coupling.offdiagonal(q, p) * _cartesian(local, point, "N", q)
    expected = _cartesian(AuxCoefficients(source, 1.0, False, 1), source, "M", p)
    npt.assert_allclose(field, expected, rtol=1e-6, atol=1e-9)



def test_invalid_construction():
    with pytest.raises(ValueError):
        Coupling(DISPLACEMENT, 1.0, 0)
    with pytest.raises(ValueError):
        Coupling(Spherical(0.0), 1.0, 2, regular=False)


def test_pairwise_blocks():
    positions = np.array([[0.0, 0.0, 0.0], [0.4, -0.3, 1.1], [-1.0, 0.2, 0.5]])
    blocks = pairwise_couplings(positions, 1.2, 2, regular=False)
    size = 2 * count_up_to(2)
    assert blocks.shape == (3, 3, size, size)
    assert np.all(blocks[1, 1] == 0)
    displacement = Spherical.from_cartesian(*(positions[2] - positions[0]))
    npt.assert_allclose(
        blocks[0, 2], Coupling(displacement, 1.2, 2, regular=False).translation_matrix()
    )


def test_pairwise_blocks_in_parallel():
    positions = np.array([[0.0, 0.0, 0.0], [0.4, -0.3, 1.1]])
    serial = pairwise_couplings(positions, 1.2, 1, regular=False)
    parallel = pairwise_couplings(positions, 1.2, 1, regular=False, n_core=2)
    npt.assert_allclose(parallel, serial)
    with pytest.raises(ValueError):
        pairwise_couplings(positions[:, :2], 1.2, 1)

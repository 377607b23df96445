from multiprocessing import Pool

import numpy as np

import tacpy.log as log
from tacpy.coupling import Coupling
from tacpy.geometry import Spherical
from tacpy.indexing import count_up_to

_log = log.scattering_logger(__name__)


def _pair_matrix(displacement, wave_k, nmax, regular):
    return Coupling(
        Spherical.from_cartesian(*displacement), wave_k, nmax, regular
    ).translation_matrix()


def pairwise_couplings(
    positions: np.ndarray,
    wave_k: complex,
    nmax: int,
    regular: bool = False,
    n_core: int = 1,
) -> np.ndarray:
    """Translation matrices between every ordered pair of expansion origins.

    Block ``[i, j]`` translates an expansion about ``positions[i]`` into one
    about ``positions[j]``. Every pair owns an independent coefficient cache,
    so the blocks can be computed in separate processes.

    Args:
        positions (np.ndarray): Cartesian origins of shape ``(N, 3)``.
        wave_k (complex): Wavenumber of the medium.
        nmax (int): Maximal degree of the expansions.
        regular (bool, optional): Translate regular wave functions. Defaults to
            False, the scattered field of one sphere seen by another.
        n_core (int, optional): Worker processes; ``1`` runs serially. Defaults to 1.

    Returns:
        (np.ndarray): Array of shape ``(N, N, 2P, 2P)``; diagonal blocks are zero.
    """
    positions = np.asarray(positions, dtype=float)
    if positions.ndim != 2 or positions.shape[1] != 3:
        raise ValueError(f"Positions need the shape (N, 3), got {positions.shape}")
    number = positions.shape[0]
    size = 2 * count_up_to(nmax)

    pairs = [(i, j) for i in range(number) for j in range(number) if i != j]
    arglist = [
        (tuple(positions[j] - positions[i]), wave_k, nmax, regular) for i, j in pairs
    ]
    _log.info(f"Computing {len(pairs)} coupling blocks on {n_core} core(s)")
    if n_core > 1:
        with Pool(n_core) as f:
            blocks = f.starmap(_pair_matrix, arglist)
    else:
        blocks = [_pair_matrix(*args) for args in arglist]

    result = np.zeros((number, number, size, size), dtype=complex)
    for (i, j), block in zip(pairs, blocks):
        result[i, j] = block
    return result

"""Bijection between (degree, order) mode pairs and flat indices.

Modes are enumerated with the degree ``n`` ascending and, for every degree,
the order ``m`` ascending from ``-n`` to ``n``. Physical VSWF expansions start
at degree 1, the scalar translation engine starts at degree 0.
"""


def _check_start(start: int) -> None:
    if start not in (0, 1):
        raise ValueError(f"The first degree must be 0 or 1, got {start}")


def to_flat(n: int, m: int, start: int = 1) -> int:
    """Flat index of the mode ``(n, m)``.

    Args:
        n (int): Degree, ``n >= start``.
        m (int): Order, ``|m| <= n``.
        start (int, optional): First degree of the enumeration. Defaults to 1.

    Returns:
        (int): ``n(n+1) + m - start``.
    """
    _check_start(start)
    if n < start or abs(m) > n:
        raise ValueError(f"({n}, {m}) is not a valid mode for first degree {start}")
    return n * (n + 1) + m - start


def to_pair(p: int, start: int = 1) -> tuple[int, int]:
    """Inverse of :func:`to_flat`."""
    _check_start(start)
    if p < 0:
        raise ValueError(f"Flat index must be non-negative, got {p}")
    q = p + start
    n = int(q**0.5)
    # guard against floating point truncation for large indices
    while n * n > q:
        n -= 1
    while (n + 1) * (n + 1) <= q:
        n += 1
    return n, q - n * (n + 1)


def count_up_to(nmax: int, start: int = 1) -> int:
    """Number of modes with degree ``start <= n <= nmax``."""
    _check_start(start)
    if nmax < start - 1:
        raise ValueError(f"nmax must be at least {start - 1}, got {nmax}")
    return (nmax + 1) ** 2 - start


def iter_modes(nmax: int, start: int = 1):
    """Yield ``(p, n, m)`` in flat order up to degree ``nmax``."""
    p = 0
    for n in range(start, nmax + 1):
        for m in range(-n, n + 1):
            yield p, n, m
            p += 1

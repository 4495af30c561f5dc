"""Reference BLAS routines on strided, column-major sequences.

Vectors are mutable sequences read at ``0, inc, 2*inc, ...``. Matrices are
stored column by column with a leading dimension, so element ``(i, j)`` of
``a`` lives at ``a[j * lda + i]``.
"""

from __future__ import annotations

from typing import Any, Iterator, MutableSequence, Sequence

Number = Any


def _strided(n: int, inc: int) -> Iterator[int]:
    return (i * inc for i in range(n))


def _is_transposed(flag: str) -> bool:
    return flag in ("T", "t")


def swap(n: int, x: MutableSequence, incx: int, y: MutableSequence, incy: int) -> None:
    """Exchange ``n`` elements of ``x`` and ``y``."""
    if n == 1:
        incx = incy = 1
    for ix, iy in zip(_strided(n, incx), _strided(n, incy)):
        x[ix], y[iy] = y[iy], x[ix]


def scal(n: int, a: Number, x: MutableSequence, incx: int) -> None:
    """Multiply ``n`` elements of ``x`` by ``a`` in place."""
    if n == 1:
        incx = 1
    for ix in _strided(n, incx):
        x[ix] *= a


def copy(n: int, x: Sequence, incx: int, y: MutableSequence, incy: int) -> None:
    """Copy ``n`` elements of ``x`` into ``y``."""
    if n == 1:
        incx = incy = 1
    for ix, iy in zip(_strided(n, incx), _strided(n, incy)):
        y[iy] = x[ix]


def axpy(n: int, a: Number, x: Sequence, incx: int, y: MutableSequence, incy: int) -> None:
    """Compute ``y += a * x`` over ``n`` elements."""
    if n == 1:
        incx = incy = 1
    for ix, iy in zip(_strided(n, incx), _strided(n, incy)):
        y[iy] += a * x[ix]


def dot(n: int, x: Sequence, incx: int, y: Sequence, incy: int) -> Number:
    """Return the inner product of ``n`` elements of ``x`` and ``y``."""
    if n == 1:
        incx = incy = 1
    return sum(
        (x[ix] * y[iy] for ix, iy in zip(_strided(n, incx), _strided(n, incy))),
        0,
    )


def gemv(
    trans: str,
    m: int,
    n: int,
    alpha: Number,
    a: Sequence,
    lda: int,
    x: Sequence,
    incx: int,
    beta: Number,
    y: MutableSequence,
    incy: int,
) -> None:
    """Compute ``y = alpha * op(A) * x + beta * y`` for an ``m`` x ``n`` matrix A.

    ``op(A)`` is A, or its transpose when ``trans`` is ``'T'`` or ``'t'``.
    """
    if n == 1:
        lda = m

    if _is_transposed(trans):
        for i, iy in enumerate(_strided(n, incy)):
            row = lda * i
            total = sum(
                (x[jx] * a[row + j] for j, jx in enumerate(_strided(m, incx))),
                0,
            )
            y[iy] = beta * y[iy] + alpha * total
        return

    if beta != 1:
        scal(m, beta, y, incy)
    for j, jx in enumerate(_strided(n, incx)):
        column = lda * j
        z = alpha * x[jx]
        for i, iy in enumerate(_strided(m, incy)):
            y[iy] += z * a[column + i]


def ger(
    m: int,
    n: int,
    alpha: Number,
    x: Sequence,
    incx: int,
    y: Sequence,
    incy: int,
    a: MutableSequence,
    lda: int,
) -> None:
    """Rank-one update ``A += alpha * x * y^T`` of an ``m`` x ``n`` matrix."""
    if n == 1:
        lda = m
    x_positions = list(_strided(m, incx))
    for j, jy in enumerate(_strided(n, incy)):
        column = j * lda
        z = alpha * y[jy]
        for i, ix in enumerate(x_positions):
            a[column + i] += z * x[ix]


def gemm(
    transa: str,
    transb: str,
    m: int,
    n: int,
    k: int,
    alpha: Number,
    a: Sequence,
    lda: int,
    b: Sequence,
    ldb: int,
    beta: Number,
    c: MutableSequence,
    ldc: int,
) -> None:
    """Compute ``C = alpha * op(A) * op(B) + beta * C``.

    ``op(A)`` is ``m`` x ``k``, ``op(B)`` is ``k`` x ``n`` and C is ``m`` x ``n``.
    """
    transa_ = _is_transposed(transa)
    transb_ = _is_transposed(transb)

    if n == 1:
        ldc = m

    if transa_:
        if m == 1:
            lda = k
    elif k == 1:
        lda = m

    if transb_:
        if k == 1:
            ldb = n
    elif n == 1:
        ldb = k

    if transa_:
        def a_at(i: int, l: int) -> Number:
            return a[i * lda + l]
    else:
        def a_at(i: int, l: int) -> Number:
            return a[l * lda + i]

    if transb_:
        def b_at(l: int, j: int) -> Number:
            return b[l * ldb + j]
    else:
        def b_at(l: int, j: int) -> Number:
            return b[j * ldb + l]

    for i in range(m):
        for j in range(n):
            total = sum((a_at(i, l) * b_at(l, j) for l in range(k)), 0)
            index = j * ldc + i
            c[index] = beta * c[index] + alpha * total
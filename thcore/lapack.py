"""Dense linear algebra routines with LAPACK semantics.

Matrices are two-dimensional arrays in the usual row/column sense. Single
precision input is computed in single precision; anything else in double.
A routine that reports a non-zero status raises :class:`LapackError`.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np
from scipy.linalg import get_lapack_funcs

from thcore.general import TorchError


class LapackError(TorchError):
    """A routine reported a failure; ``info`` holds its status code.

    A negative ``info`` names the illegal argument, a positive one a
    numerical failure such as a singular or non-definite matrix.
    """

    def __init__(self, routine: str, info: int) -> None:
        self.routine = routine
        self.info = int(info)
        if self.info < 0:
            text = f"{routine}: argument {-self.info} had an illegal value"
        else:
            text = f"{routine}: computation failed (info = {self.info})"
        super().__init__(text)


def _real(value: Any) -> np.ndarray:
    arr = np.asarray(value)
    if arr.dtype == np.float32:
        return np.array(arr, dtype=np.float32)
    return np.array(arr, dtype=np.float64)


def _routine(name: str, *arrays: np.ndarray) -> Any:
    return get_lapack_funcs((name,), arrays)[0]


def _check(routine: str, info: Any) -> None:
    if int(info) != 0:
        raise LapackError(routine, int(info))


def _option(routine: str, position: int, value: str, allowed: str) -> str:
    option = str(value).upper()
    if len(option) != 1 or option not in allowed:
        raise LapackError(routine, -position)
    return option


def _matrix(routine: str, position: int, value: Any, square: bool = False) -> np.ndarray:
    arr = _real(value)
    if arr.ndim != 2 or (square and arr.shape[0] != arr.shape[1]):
        raise LapackError(routine, -position)
    return arr


def _rhs(routine: str, position: int, value: Any) -> Tuple[np.ndarray, bool]:
    arr = _real(value)
    if arr.ndim == 1:
        return arr.reshape(-1, 1), True
    if arr.ndim != 2:
        raise LapackError(routine, -position)
    return arr, False


def _lower(uplo: str) -> int:
    return 1 if uplo == "L" else 0


def gesv(a: Any, b: Any) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Solve ``A X = B`` for square A; return ``(x, lu, ipiv)``."""
    a_arr = _matrix("gesv", 1, a, square=True)
    b_arr, vector = _rhs("gesv", 2, b)
    if b_arr.shape[0] != a_arr.shape[0]:
        raise LapackError("gesv", -2)
    lu, piv, x, info = _routine("gesv", a_arr, b_arr)(a_arr, b_arr)
    _check("gesv", info)
    return (x.ravel() if vector else x), lu, piv


def gels(a: Any, b: Any, trans: str = "N") -> np.ndarray:
    """Least-squares or minimum-norm solution of ``op(A) X = B`` for full-rank A."""
    option = _option("gels", 1, trans, "NT")
    a_arr = _matrix("gels", 2, a)
    b_arr, vector = _rhs("gels", 3, b)
    m, n = a_arr.shape
    rows_in, rows_out = (m, n) if option == "N" else (n, m)
    if b_arr.shape[0] != rows_in:
        raise LapackError("gels", -3)
    padded = np.zeros((max(m, n), b_arr.shape[1]), dtype=b_arr.dtype)
    padded[:rows_in] = b_arr
    _, x, info = _routine("gels", a_arr, padded)(a_arr, padded, trans=option)
    _check("gels", info)
    solution = x[:rows_out]
    return solution.ravel() if vector else solution


def syev(a: Any, jobz: str = "V", uplo: str = "U") -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """Eigenvalues (ascending) and, for ``jobz='V'``, eigenvectors of a symmetric matrix.

    Only the triangle named by ``uplo`` is read.
    """
    job = _option("syev", 1, jobz, "NV")
    tri = _option("syev", 2, uplo, "UL")
    a_arr = _matrix("syev", 4, a, square=True)
    w, v, info = _routine("syev", a_arr)(a_arr, compute_v=int(job == "V"), lower=_lower(tri))
    _check("syev", info)
    return w, (v if job == "V" else None)


def geev(
    a: Any, jobvl: str = "N", jobvr: str = "V"
) -> Tuple[np.ndarray, np.ndarray, Optional[np.ndarray], Optional[np.ndarray]]:
    """Eigen-decomposition of a general square matrix.

    Returns ``(wr, wi, vl, vr)``: real and imaginary parts of the
    eigenvalues, and the left and right eigenvectors when requested.
    """
    left = _option("geev", 1, jobvl, "NV") == "V"
    right = _option("geev", 2, jobvr, "NV") == "V"
    a_arr = _matrix("geev", 4, a, square=True)
    wr, wi, vl, vr, info = _routine("geev", a_arr)(
        a_arr, compute_vl=int(left), compute_vr=int(right)
    )
    _check("geev", info)
    return wr, wi, (vl if left else None), (vr if right else None)


def gesvd(
    a: Any, jobu: str = "S", jobvt: str = "S"
) -> Tuple[Optional[np.ndarray], np.ndarray, Optional[np.ndarray]]:
    """Singular value decomposition ``A = U diag(s) VT``; returns ``(u, s, vt)``.

    ``'A'`` asks for the full factor, ``'S'`` for the leading ``min(m, n)``
    vectors and ``'N'`` for none.
    """
    ju = _option("gesvd", 1, jobu, "ASN")
    jv = _option("gesvd", 2, jobvt, "ASN")
    a_arr = _matrix("gesvd", 6, a)
    k = min(a_arr.shape)
    compute = ju != "N" or jv != "N"
    full = "A" in (ju, jv)
    u, s, vt, info = _routine("gesvd", a_arr)(
        a_arr, compute_uv=int(compute), full_matrices=int(full)
    )
    _check("gesvd", info)
    u_out = None if ju == "N" else (u if ju == "A" else u[:, :k])
    vt_out = None if jv == "N" else (vt if jv == "A" else vt[:k])
    return u_out, s, vt_out


def getrf(a: Any) -> Tuple[np.ndarray, np.ndarray]:
    """LU factorisation with partial pivoting; returns ``(lu, ipiv)``.

    A singular factor raises :class:`LapackError` with a positive ``info``.
    """
    a_arr = _matrix("getrf", 4, a)
    lu, piv, info = _routine("getrf", a_arr)(a_arr)
    _check("getrf", info)
    return lu, piv


def getri(lu: Any, ipiv: Any) -> np.ndarray:
    """Inverse of a matrix from its LU factorisation as returned by :func:`getrf`."""
    lu_arr = _matrix("getri", 2, lu, square=True)
    piv = np.asarray(ipiv, dtype=np.int32)
    if piv.shape != (lu_arr.shape[0],):
        raise LapackError("getri", -4)
    inv, info = _routine("getri", lu_arr)(lu_arr, piv)
    _check("getri", info)
    return inv


def potrf(a: Any, uplo: str = "U") -> np.ndarray:
    """Cholesky factor of a symmetric positive definite matrix.

    With ``uplo='U'`` returns upper U with ``A = U^T U``; with ``'L'`` lower L
    with ``A = L L^T``. The other triangle of the result is zero.
    """
    tri = _option("potrf", 1, uplo, "UL")
    a_arr = _matrix("potrf", 3, a, square=True)
    c, info = _routine("potrf", a_arr)(a_arr, lower=_lower(tri), clean=1)
    _check("potrf", info)
    return c


def potri(a: Any, uplo: str = "U") -> np.ndarray:
    """Inverse of a matrix from its Cholesky factor ``a``.

    Only the triangle named by ``uplo`` of the result holds the inverse.
    """
    tri = _option("potri", 1, uplo, "UL")
    c_arr = _matrix("potri", 3, a, square=True)
    inv, info = _routine("potri", c_arr)(c_arr, lower=_lower(tri))
    _check("potri", info)
    return inv


def potrs(a: Any, b: Any, uplo: str = "U") -> np.ndarray:
    """Solve ``A X = B`` given the Cholesky factor ``a`` of A."""
    tri = _option("potrs", 1, uplo, "UL")
    c_arr = _matrix("potrs", 4, a, square=True)
    b_arr, vector = _rhs("potrs", 6, b)
    if b_arr.shape[0] != c_arr.shape[0]:
        raise LapackError("potrs", -6)
    x, info = _routine("potrs", c_arr, b_arr)(c_arr, b_arr, lower=_lower(tri))
    _check("potrs", info)
    return x.ravel() if vector else x
"""Grid location and linear / bilinear interpolation primitives.

Every table lookup in the package goes through these helpers.  ``locate``
classifies a query against a sorted axis as either an exact node hit or a
bracketing interval, and the callers pick direct lookup, linear or
bilinear interpolation from that classification.  The ``*_many`` variants
do the same with ``numpy.searchsorted`` over whole arrays of queries and
are used by the batch integrator.
"""

from __future__ import annotations

from typing import NamedTuple, Union

import numpy as np

from .errors import InsufficientGridError


class Exact(NamedTuple):
    """``axis[index] == value``."""

    index: int


class Bracket(NamedTuple):
    """``axis[index] <= value < axis[index + 1]`` (index clamped to the axis)."""

    index: int


Location = Union[Exact, Bracket]


def locate(axis, value: float) -> Location:
    """Binary-search *value* on the strictly increasing *axis*.

    Values outside ``[axis[0], axis[-1]]`` give the nearest bracket
    (``0`` or ``len(axis) - 2``); callers decide whether to extrapolate.
    """
    axis = np.asarray(axis, dtype=float)
    n = axis.size
    if n < 2:
        raise InsufficientGridError(f"axis must contain at least 2 points (got {n})")
    i = int(np.searchsorted(axis, value, side="right")) - 1
    if 0 <= i < n and axis[i] == value:
        return Exact(i)
    return Bracket(min(max(i, 0), n - 2))


def linear(x0: float, y0: float, x1: float, y1: float, x: float) -> float:
    den = x1 - x0
    if den == 0.0:
        return float(y0)
    return float(y0 + (y1 - y0) * ((x - x0) / den))


def bilinear(
    r0: float,
    r1: float,
    c0: float,
    c1: float,
    v00: float,
    v01: float,
    v10: float,
    v11: float,
    r: float,
    c: float,
    *,
    order: str = "cols",
) -> float:
    """Interpolate ``f(r, c)`` from the corners ``v[row][col]`` of one cell.

    ``order="cols"`` interpolates along the column axis at both bracketing
    rows and then along the rows; ``order="rows"`` does the reverse.  The
    two orders agree up to rounding.
    """
    if order == "cols":
        q0 = linear(c0, v00, c1, v01, c)
        q1 = linear(c0, v10, c1, v11, c)
        return linear(r0, q0, r1, q1, r)
    if order == "rows":
        p0 = linear(r0, v00, r1, v10, r)
        p1 = linear(r0, v01, r1, v11, r)
        return linear(c0, p0, c1, p1, c)
    raise ValueError("order must be one of: cols, rows")


def bilinear_weighted(
    corner00: float,
    corner10: float,
    corner01: float,
    corner11: float,
    fx: float,
    fy: float,
) -> float:
    """Closed-form bilinear weight of four corners at fractions ``(fx, fy)``."""
    return float(
        corner00 * (1.0 - fx) * (1.0 - fy)
        + corner10 * fx * (1.0 - fy)
        + corner01 * (1.0 - fx) * fy
        + corner11 * fx * fy
    )


def interp1d(axis, values, x: float) -> float:
    axis = np.asarray(axis, dtype=float)
    loc = locate(axis, x)
    i = loc.index
    if isinstance(loc, Exact):
        return float(values[i])
    return linear(float(axis[i]), float(values[i]), float(axis[i + 1]), float(values[i + 1]), x)


def interp2d(rows, cols, values, r: float, c: float) -> float:
    """Evaluate a tabulated ``f(r, c)`` with exact / linear / bilinear dispatch."""
    rows = np.asarray(rows, dtype=float)
    cols = np.asarray(cols, dtype=float)
    lr = locate(rows, r)
    lc = locate(cols, c)
    i = lr.index
    j = lc.index
    if isinstance(lr, Exact) and isinstance(lc, Exact):
        return float(values[i, j])
    if isinstance(lr, Exact):
        return linear(float(cols[j]), float(values[i, j]), float(cols[j + 1]), float(values[i, j + 1]), c)
    if isinstance(lc, Exact):
        return linear(float(rows[i]), float(values[i, j]), float(rows[i + 1]), float(values[i + 1, j]), r)
    return bilinear(
        float(rows[i]),
        float(rows[i + 1]),
        float(cols[j]),
        float(cols[j + 1]),
        float(values[i, j]),
        float(values[i, j + 1]),
        float(values[i + 1, j]),
        float(values[i + 1, j + 1]),
        r,
        c,
    )


def locate_many(axis, values) -> tuple[np.ndarray, np.ndarray]:
    """Vectorised ``locate``: bracket indices and fractional positions.

    Exact node hits come back with fraction ``0.0`` (or ``1.0`` on the last
    node).  Out-of-range values give fractions outside ``[0, 1]``.
    """
    axis = np.asarray(axis, dtype=float)
    n = axis.size
    if n < 2:
        raise InsufficientGridError(f"axis must contain at least 2 points (got {n})")
    values = np.asarray(values, dtype=float)
    idx = np.clip(np.searchsorted(axis, values, side="right") - 1, 0, n - 2)
    x0 = axis[idx]
    x1 = axis[idx + 1]
    frac = (values - x0) / (x1 - x0)
    return idx, frac


def _lerp(q0: np.ndarray, q1: np.ndarray, f: np.ndarray) -> np.ndarray:
    # Node hits return the stored sample untouched.
    return np.where(f == 0.0, q0, np.where(f == 1.0, q1, q0 + (q1 - q0) * f))


def interp2d_many(rows, cols, values, r, c) -> np.ndarray:
    """Outer-product evaluation: result ``[a, b] = f(r[a], c[b])``."""
    values = np.asarray(values, dtype=float)
    ir, fr = locate_many(rows, np.atleast_1d(r))
    ic, fc = locate_many(cols, np.atleast_1d(c))
    fc = fc[None, :]
    q0 = _lerp(values[ir[:, None], ic[None, :]], values[ir[:, None], ic[None, :] + 1], fc)
    q1 = _lerp(values[ir[:, None] + 1, ic[None, :]], values[ir[:, None] + 1, ic[None, :] + 1], fc)
    return _lerp(q0, q1, fr[:, None])

from __future__ import annotations

from typing import Any, Iterable, Tuple, Union

import numpy as np


Scalar = Union[float, np.floating]


def _is_python_number(x: Any) -> bool:
    # np.float64 subclasses float, so numpy scalars are ruled out first
    return isinstance(x, (int, float)) and not isinstance(x, np.generic)


def float_dtype(*xs: Any) -> np.dtype:
    """Common floating dtype of `xs`; float64 when they have none."""
    dt = np.result_type(*xs)
    if not np.issubdtype(dt, np.floating):
        return np.dtype(np.float64)
    return dt


def _materialize(values: Iterable[Scalar]) -> Tuple[np.ndarray, bool]:
    """Buffer `values` once so the max pass and the sum pass can both see it.

    Returns the array in its working dtype and whether every item was a plain
    Python number (in which case callers hand back a Python float).
    """
    if isinstance(values, np.ndarray):
        arr = values
        plain = False
    else:
        items = list(values)
        arr = np.asarray(items)
        plain = all(_is_python_number(v) for v in items)
    return arr.astype(float_dtype(arr), copy=False), plain


def ln_add_exp(a: Scalar, b: Scalar) -> Scalar:
    """Stable ln(exp(a) + exp(b)).

    Neither operand is exponentiated directly, only -|a - b|, so the result
    is finite whenever the true value is. NaN in either operand propagates
    and +inf absorbs every other value.

    Works in the common floating dtype of the operands: two float32 values
    give a float32, two Python floats give a Python float.
    """
    dt = float_dtype(a, b)
    x = dt.type(a)
    y = dt.type(b)

    with np.errstate(over="ignore", under="ignore"):
        if x == y:
            # also the only safe route for +inf, +inf (inf - inf is NaN)
            out = x + np.log(dt.type(2))
        else:
            diff = x - y
            if np.isnan(diff):
                out = diff
            elif diff > 0:
                out = x + np.log1p(np.exp(-diff))
            else:
                out = y + np.log1p(np.exp(diff))

    if _is_python_number(a) and _is_python_number(b):
        return float(out)
    return out


def ln_sum_exp(values: Iterable[Scalar]) -> Scalar:
    """Stable ln(sum(exp(x) for x in values)).

    Shifts by the maximum once for the whole sequence instead of folding
    ln_add_exp pairwise, which rounds less. `values` may be an ndarray (every
    element counts, whatever the shape), a sequence or a one-shot iterator.

    Empty input gives -inf, any NaN gives NaN, and an infinite maximum is
    returned as is (all -inf stays -inf, any +inf wins).
    """
    arr, plain = _materialize(values)

    if arr.size == 0:
        out = arr.dtype.type(-np.inf)
    else:
        m = np.max(arr)
        if np.isnan(m) or np.isinf(m):
            out = m
        else:
            with np.errstate(over="ignore", under="ignore"):
                out = np.log(np.sum(np.exp(arr - m))) + m

    if plain:
        return float(out)
    return out


def ln_normalize(values: Iterable[Scalar]) -> np.ndarray:
    """Log-space normalisation: x - ln_sum_exp(x); exp of the result sums to 1.

    All -inf entries give the uniform distribution. ndarray inputs keep their
    shape. With a +inf entry the +inf positions come out NaN.
    """
    arr, _ = _materialize(values)
    if arr.size == 0:
        return arr.copy()

    lse = ln_sum_exp(arr)
    if np.isneginf(lse):
        return np.full_like(arr, -np.log(arr.dtype.type(arr.size)))
    with np.errstate(over="ignore", invalid="ignore"):
        return arr - lse

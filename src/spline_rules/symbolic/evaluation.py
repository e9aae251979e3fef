"""Assemble and numerically evaluate compiled piecewise bundles.

Evaluation walks the tree directly instead of going through a code printer,
so float literals are used exactly as stored. Piecewise constructs are
evaluated first-match in order; where no condition holds the result is nan.
"""

from __future__ import annotations

from typing import Any, Iterable

import numpy as np
import sympy
from sympy.core.relational import (
    GreaterThan,
    LessThan,
    StrictGreaterThan,
    StrictLessThan,
)

from .builder import TIME
from .compiler import PiecewiseBundle


def to_piecewise(bundle: PiecewiseBundle) -> sympy.Piecewise:
    """Interleave a bundle into one sympy ``Piecewise``.

    Piece ``i`` is ``(functions[i], conditions[i])``. There is no default
    branch, so the result is undefined outside the fitted domain.
    """
    return sympy.Piecewise(*bundle, evaluate=False)


def evaluate_expression(
    expr: sympy.Basic,
    t: np.ndarray | float,
    time_symbol: sympy.Symbol = TIME,
) -> np.ndarray | float:
    """Evaluate an expression tree (``Piecewise`` included) at time(s) ``t``."""
    t = np.asarray(t, dtype=float)
    scalar_input = t.ndim == 0
    t = np.atleast_1d(t)

    result = np.broadcast_to(_evaluate(expr, t, time_symbol), t.shape).astype(float)

    if scalar_input:
        return float(result[0])
    return result


def evaluate_condition(
    cond: sympy.Basic,
    t: np.ndarray | float,
    time_symbol: sympy.Symbol = TIME,
) -> np.ndarray | bool:
    """Evaluate a boolean condition tree at time(s) ``t``."""
    t = np.asarray(t, dtype=float)
    scalar_input = t.ndim == 0
    t = np.atleast_1d(t)

    result = np.broadcast_to(_truth(cond, t, time_symbol), t.shape).astype(bool)

    if scalar_input:
        return bool(result[0])
    return result


def select_piece(
    bundle: PiecewiseBundle,
    t: np.ndarray | float,
    time_symbol: sympy.Symbol = TIME,
) -> np.ndarray | int:
    """Index of the first piece whose condition holds at ``t``, or -1."""
    t = np.asarray(t, dtype=float)
    scalar_input = t.ndim == 0
    t = np.atleast_1d(t)

    chosen = np.full(t.shape, -1, dtype=int)
    for i, cond in enumerate(bundle.conditions):
        hit = (chosen < 0) & np.broadcast_to(_truth(cond, t, time_symbol), t.shape)
        chosen[hit] = i

    if scalar_input:
        return int(chosen[0])
    return chosen


def evaluate_bundle(
    bundle: PiecewiseBundle,
    t: np.ndarray | float,
    time_symbol: sympy.Symbol = TIME,
) -> np.ndarray | float:
    """Evaluate a bundle first-match in index order; nan outside every piece."""
    t = np.asarray(t, dtype=float)
    scalar_input = t.ndim == 0
    t = np.atleast_1d(t)

    result = _first_match(bundle, t, time_symbol)

    if scalar_input:
        return float(result[0])
    return result


def _first_match(
    pieces: Iterable[tuple[Any, Any]],
    t: np.ndarray,
    time_symbol: sympy.Symbol,
) -> np.ndarray:
    result = np.full(t.shape, np.nan)
    pending = np.ones(t.shape, dtype=bool)
    for expr, cond in pieces:
        hit = pending & np.broadcast_to(_truth(cond, t, time_symbol), t.shape)
        if hit.any():
            values = np.broadcast_to(_evaluate(expr, t, time_symbol), t.shape)
            result[hit] = values[hit]
        pending &= ~hit
    return result


def _evaluate(node: sympy.Basic, t: np.ndarray, time_symbol: sympy.Symbol):
    if node.is_Number:
        return float(node)
    if node.is_Symbol:
        if node != time_symbol:
            raise ValueError(f"Unbound symbol in expression: {node}")
        return t
    if isinstance(node, sympy.Add):
        total = 0.0
        for arg in node.args:
            total = total + _evaluate(arg, t, time_symbol)
        return total
    if isinstance(node, sympy.Mul):
        product = 1.0
        for arg in node.args:
            product = product * _evaluate(arg, t, time_symbol)
        return product
    if isinstance(node, sympy.Pow):
        base = _evaluate(node.base, t, time_symbol)
        if node.exp.is_Integer:
            return base ** int(node.exp)
        return base ** _evaluate(node.exp, t, time_symbol)
    if isinstance(node, sympy.Piecewise):
        return _first_match(node.args, t, time_symbol)
    raise TypeError(f"Cannot evaluate expression node of type {type(node).__name__}")


def _truth(node: sympy.Basic, t: np.ndarray, time_symbol: sympy.Symbol):
    if node is sympy.true:
        return True
    if node is sympy.false:
        return False
    if isinstance(node, sympy.And):
        result = True
        for arg in node.args:
            result = np.logical_and(result, _truth(arg, t, time_symbol))
        return result
    if isinstance(node, sympy.Or):
        result = False
        for arg in node.args:
            result = np.logical_or(result, _truth(arg, t, time_symbol))
        return result
    if isinstance(node, (GreaterThan, LessThan, StrictGreaterThan, StrictLessThan)):
        lhs = _evaluate(node.lhs, t, time_symbol)
        rhs = _evaluate(node.rhs, t, time_symbol)
        if isinstance(node, GreaterThan):
            return lhs >= rhs
        if isinstance(node, LessThan):
            return lhs <= rhs
        if isinstance(node, StrictGreaterThan):
            return lhs > rhs
        return lhs < rhs
    raise TypeError(f"Cannot evaluate condition node of type {type(node).__name__}")

"""Node construction for symbolic expression trees.

The compiler never touches an expression library directly; it asks an
``ExpressionBuilder`` for nodes. ``SympyBuilder`` is the default and builds
unevaluated sympy trees, so the structure the compiler asks for is the
structure that gets stored.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

import sympy

# Model time, the single free variable of every compiled expression
TIME = sympy.Symbol('t', real=True)


@runtime_checkable
class ExpressionBuilder(Protocol):
    """Factory for the node types a piecewise polynomial needs."""

    def time(self) -> Any:
        """Leaf node for the current model time."""
        ...

    def constant(self, value: float) -> Any:
        ...

    def add(self, terms: Sequence[Any]) -> Any:
        """Sum node with ``terms`` as children, in order."""
        ...

    def multiply(self, left: Any, right: Any) -> Any:
        ...

    def power(self, base: Any, exponent: int) -> Any:
        ...

    def subtract(self, left: Any, right: Any) -> Any:
        ...

    def greater_equal(self, left: Any, right: Any) -> Any:
        ...

    def less_equal(self, left: Any, right: Any) -> Any:
        ...

    def logical_and(self, left: Any, right: Any) -> Any:
        ...


class SympyBuilder:
    """Builds unevaluated sympy expressions.

    Float literals keep the full double precision of their input, and no
    node is simplified on construction. sympy has no subtraction node, so
    ``a - b`` is stored as ``a + (-b)``; negating a float is exact. A sum
    with a single term is that term.
    """

    def __init__(self, time_symbol: sympy.Symbol = TIME):
        self.time_symbol = time_symbol

    def time(self) -> sympy.Symbol:
        return self.time_symbol

    def constant(self, value: float) -> sympy.Float:
        return sympy.Float(float(value))

    def add(self, terms: Sequence[sympy.Expr]) -> sympy.Expr:
        if len(terms) == 1:
            return terms[0]
        return sympy.Add(*terms, evaluate=False)

    def multiply(self, left: sympy.Expr, right: sympy.Expr) -> sympy.Expr:
        return sympy.Mul(left, right, evaluate=False)

    def power(self, base: sympy.Expr, exponent: int) -> sympy.Expr:
        return sympy.Pow(base, sympy.Integer(exponent), evaluate=False)

    def subtract(self, left: sympy.Expr, right: sympy.Expr) -> sympy.Expr:
        return sympy.Add(left, -right, evaluate=False)

    def greater_equal(self, left: sympy.Expr, right: sympy.Expr) -> sympy.Basic:
        return sympy.Ge(left, right, evaluate=False)

    def less_equal(self, left: sympy.Expr, right: sympy.Expr) -> sympy.Basic:
        return sympy.Le(left, right, evaluate=False)

    def logical_and(self, left: sympy.Basic, right: sympy.Basic) -> sympy.Basic:
        return sympy.And(left, right)

    def __repr__(self) -> str:
        return f"SympyBuilder(time_symbol={self.time_symbol!r})"

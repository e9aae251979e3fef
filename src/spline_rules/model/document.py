"""A minimal model document holding time-dependent parameters.

Each parameter may carry an assignment rule: a sympy expression of model
time. Time course data is added as a non-constant parameter whose rule is
the piecewise form of an interpolant. Documents are stored as JSON, each
rule as a tree of ``{"op": ...}`` nodes with floats written by ``float.hex``.
Loading accepts only the node types a compiled rule is made of.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

import numpy as np
import sympy

from ..data.validation import validate
from ..interpolation.base import Interpolator
from ..interpolation.sampler import sample
from ..symbolic.builder import TIME

logger = logging.getLogger(__name__)


@dataclass
class Parameter:
    """A named model parameter.

    Attributes:
        name: Identifier, unique within a document.
        constant: Whether the value is fixed over time.
        value: Initial value, if any.
        rule: Assignment rule giving the value as a function of time.
    """
    name: str
    constant: bool = True
    value: float | None = None
    rule: sympy.Basic | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'name': self.name,
            'constant': self.constant,
            'value': self.value,
            'rule': _rule_to_json(self.rule),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Parameter:
        return cls(
            name=data['name'],
            constant=data.get('constant', True),
            value=data.get('value'),
            rule=_rule_from_json(data.get('rule')),
        )


# Node types a stored rule may contain, keyed by the name written to JSON
_NARY = {'Add': sympy.Add, 'Mul': sympy.Mul, 'And': sympy.And}
_BINARY = {
    'Pow': sympy.Pow,
    'GreaterThan': sympy.GreaterThan,
    'LessThan': sympy.LessThan,
}


def _rule_to_json(rule: sympy.Basic | None) -> dict[str, Any] | None:
    if rule is None:
        return None
    return _encode(rule)


def _rule_from_json(data: dict[str, Any] | None) -> sympy.Basic | None:
    if data is None:
        return None
    return _decode(data)


def _encode(node: sympy.Basic) -> dict[str, Any]:
    """Encode a rule tree as nested ``{'op': ..., ...}`` dicts.

    Children are written in ``args`` order and floats as ``float.hex``, so
    decoding rebuilds an identical tree.

    Raises:
        ValueError: If the tree holds a node type that cannot be stored.
    """
    if isinstance(node, sympy.Piecewise):
        return {
            'op': 'Piecewise',
            'pieces': [[_encode(e), _encode(c)] for e, c in node.args],
        }
    if isinstance(node, sympy.Float):
        return {'op': 'Float', 'value': float(node).hex()}
    if isinstance(node, sympy.Integer):
        return {'op': 'Integer', 'value': int(node)}
    if isinstance(node, sympy.Symbol):
        if node != TIME:
            raise ValueError(f"Rules may only depend on {TIME}, got symbol {node}")
        return {'op': 'Symbol', 'name': node.name}

    op = type(node).__name__
    if op in _NARY or op in _BINARY:
        return {'op': op, 'args': [_encode(arg) for arg in node.args]}
    raise ValueError(f"Cannot store rule node of type {op}")


def _decode(data: Any) -> sympy.Basic:
    """Inverse of ``_encode``. Only the node types it writes are accepted.

    Raises:
        ValueError: If ``data`` is not a well-formed encoded rule.
    """
    if not isinstance(data, dict) or not isinstance(data.get('op'), str):
        raise ValueError(f"Malformed rule node: {data!r}")
    op = data['op']

    if op == 'Piecewise':
        pieces = data.get('pieces')
        if not isinstance(pieces, list) or not pieces:
            raise ValueError("Piecewise rule needs a non-empty list of pieces")
        pairs = []
        for piece in pieces:
            if not isinstance(piece, list) or len(piece) != 2:
                raise ValueError(f"Malformed piecewise piece: {piece!r}")
            pairs.append((_decode(piece[0]), _decode(piece[1])))
        return sympy.Piecewise(*pairs, evaluate=False)

    if op == 'Float':
        value = data.get('value')
        if not isinstance(value, str):
            raise ValueError(f"Float node needs a hex string value, got {value!r}")
        return sympy.Float(float.fromhex(value))

    if op == 'Integer':
        value = data.get('value')
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Integer node needs an integer value, got {value!r}")
        return sympy.Integer(value)

    if op == 'Symbol':
        if data.get('name') != TIME.name:
            raise ValueError(f"Rules may only depend on {TIME}, got {data.get('name')!r}")
        return TIME

    args = data.get('args')
    if not isinstance(args, list):
        raise ValueError(f"{op} node needs a list of args")

    if op in _NARY:
        if len(args) < 2:
            raise ValueError(f"{op} node needs at least 2 args, got {len(args)}")
        children = [_decode(arg) for arg in args]
        if op == 'And':
            return sympy.And(*children)
        return _NARY[op](*children, evaluate=False)

    if op in _BINARY:
        if len(args) != 2:
            raise ValueError(f"{op} node needs 2 args, got {len(args)}")
        return _BINARY[op](*(_decode(arg) for arg in args), evaluate=False)

    raise ValueError(f"Unknown rule node type {op!r}")


@dataclass
class ModelDocument:
    """An ordered collection of parameters.

    Attributes:
        name: Model identifier.
        parameters: Parameters keyed by name, in insertion order.
    """
    name: str = 'model'
    parameters: dict[str, Parameter] = field(default_factory=dict)

    def contains_parameter(self, name: str) -> bool:
        return name in self.parameters

    def get_parameter(self, name: str) -> Parameter:
        if name not in self.parameters:
            raise KeyError(f"Model has no parameter named {name!r}")
        return self.parameters[name]

    def add_parameter(self, parameter: Parameter) -> Parameter:
        if parameter.name in self.parameters:
            raise ValueError(f"Model already has a parameter named {parameter.name!r}")
        self.parameters[parameter.name] = parameter
        return parameter

    def remove_parameter(self, name: str) -> Parameter:
        return self.parameters.pop(name)

    def rules(self) -> dict[str, sympy.Basic]:
        """Assignment rules keyed by the parameter they assign."""
        return {
            name: p.rule for name, p in self.parameters.items() if p.rule is not None
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            'name': self.name,
            'parameters': [p.to_dict() for p in self.parameters.values()],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModelDocument:
        document = cls(name=data.get('name', 'model'))
        for item in data.get('parameters', []):
            document.add_parameter(Parameter.from_dict(item))
        return document

    def save(self, path: str | Path) -> None:
        data = self.to_dict()
        with open(path, 'w') as f:
            json.dump(data, f, indent=2)

    @classmethod
    def load(cls, path: str | Path) -> ModelDocument:
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def __len__(self) -> int:
        return len(self.parameters)

    def __repr__(self) -> str:
        return f"ModelDocument(name={self.name!r}, parameters={list(self.parameters)})"


def add_time_course_parameter(
    document: ModelDocument,
    name: str,
    times: Sequence[float] | np.ndarray,
    values: Sequence[float] | np.ndarray,
    interpolator: Interpolator,
    fitted_times: Sequence[float] | np.ndarray | None = None,
) -> np.ndarray | None:
    """Add time course data to a document as an interpolated parameter.

    Any existing parameter called ``name`` is replaced, with a warning.

    Args:
        document: Document to modify.
        name: Parameter name.
        times: Strictly ascending sample times, at least 3.
        values: Sample values.
        interpolator: Interpolation strategy; fitted in place.
        fitted_times: Times at which to sample the fit, or None.

    Returns:
        The fitted values at ``fitted_times``, or None if none were given.
    """
    if not isinstance(name, str):
        raise TypeError("Parameter name must be a string")
    if not name:
        raise ValueError("Parameter name cannot be an empty string")
    if times is None:
        raise ValueError("times cannot be None")
    if values is None:
        raise ValueError("values cannot be None")

    times, values = validate(times, values)
    interpolator.set_data(times, values)

    pieces = zip(interpolator.get_functions(), interpolator.get_function_conditions())
    rule = sympy.Piecewise(*pieces, evaluate=False)

    if document.contains_parameter(name):
        logger.warning("Model already contains parameter %s. Replacing it.", name)
        document.remove_parameter(name)

    document.add_parameter(Parameter(name=name, constant=False, rule=rule))

    if fitted_times is None:
        return None
    return sample(fitted_times, interpolator)

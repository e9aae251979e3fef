"""Tests for model documents and adding time course parameters."""

import json
import logging

import numpy as np
import pytest
import sympy

from spline_rules.errors import InsufficientDataError, NonMonotonicError
from spline_rules.interpolation import PolynomialInterpolator
from spline_rules.model.document import (
    ModelDocument,
    Parameter,
    add_time_course_parameter,
)
from spline_rules.symbolic.builder import TIME
from spline_rules.symbolic.evaluation import evaluate_expression


def _sine_data():
    times = np.array([-3.0, -2.0, -1.0, 0.0, 1.0, 2.0, 3.0])
    return times, np.sin(times)


class TestAddTimeCourseParameter:
    """Tests for add_time_course_parameter()."""

    def test_adds_parameter_with_rule(self):
        """The model gains one non-constant parameter with a piecewise rule."""
        document = ModelDocument(name='test_model')
        times, values = _sine_data()

        result = add_time_course_parameter(
            document, 'myParam', times, values, PolynomialInterpolator()
        )

        assert result is None
        assert len(document) == 1
        param = document.get_parameter('myParam')
        assert param.name == 'myParam'
        assert param.constant is False
        assert isinstance(param.rule, sympy.Piecewise)
        assert len(param.rule.args) == 6
        assert list(document.rules()) == ['myParam']

    def test_rule_fits_sine(self):
        """The stored rule is within 0.01 of sin(t) on the closed sample range."""
        document = ModelDocument()
        times, values = _sine_data()
        add_time_course_parameter(document, 'myParam', times, values, PolynomialInterpolator())

        t = np.linspace(times[0], times[-1], 1201)
        fitted = evaluate_expression(document.rules()['myParam'], t)

        assert np.all(np.abs(fitted - np.sin(t)) < 0.01)

    def test_fitted_values(self):
        document = ModelDocument()
        times, values = _sine_data()
        interp = PolynomialInterpolator()

        fitted = add_time_course_parameter(
            document, 'p', times, values, interp, fitted_times=[-3.0, 0.5, 3.0]
        )

        np.testing.assert_allclose(fitted, [interp.value(t) for t in [-3.0, 0.5, 3.0]])
        assert fitted[0] == pytest.approx(np.sin(-3.0))

    def test_replaces_existing(self, caplog):
        """An existing parameter of the same name is replaced with a warning."""
        document = ModelDocument()
        document.add_parameter(Parameter(name='p', value=1.0))
        times, values = _sine_data()

        with caplog.at_level(logging.WARNING, logger='spline_rules.model.document'):
            add_time_course_parameter(document, 'p', times, values, PolynomialInterpolator())

        assert len(document) == 1
        assert document.get_parameter('p').rule is not None
        assert document.get_parameter('p').value is None
        assert "already contains parameter p" in caplog.text

    def test_other_parameters_kept(self):
        document = ModelDocument()
        document.add_parameter(Parameter(name='k', value=2.0))
        times, values = _sine_data()

        add_time_course_parameter(document, 'p', times, values, PolynomialInterpolator())

        assert list(document.parameters) == ['k', 'p']

    def test_empty_name(self):
        times, values = _sine_data()
        with pytest.raises(ValueError, match="empty"):
            add_time_course_parameter(ModelDocument(), '', times, values, PolynomialInterpolator())

    def test_missing_times(self):
        with pytest.raises(ValueError, match="times"):
            add_time_course_parameter(ModelDocument(), 'p', None, [1, 2, 3], PolynomialInterpolator())

    def test_invalid_data_leaves_document_unchanged(self):
        document = ModelDocument()
        document.add_parameter(Parameter(name='p', value=1.0))

        with pytest.raises(InsufficientDataError):
            add_time_course_parameter(document, 'p', [1, 2], [1, 2], PolynomialInterpolator())
        with pytest.raises(NonMonotonicError):
            add_time_course_parameter(
                document, 'p', [-3.0, -2.0, -1.0, 0.0, -1.0], np.zeros(5),
                PolynomialInterpolator(),
            )

        assert document.get_parameter('p').value == 1.0


class TestModelDocument:
    """Tests for ModelDocument bookkeeping and persistence."""

    def test_duplicate_parameter(self):
        document = ModelDocument()
        document.add_parameter(Parameter(name='a'))
        with pytest.raises(ValueError):
            document.add_parameter(Parameter(name='a'))

    def test_missing_parameter(self):
        with pytest.raises(KeyError):
            ModelDocument().get_parameter('nope')

    def test_save_load_round_trip(self, tmp_path):
        """Rules survive a save/load cycle as identical trees."""
        document = ModelDocument(name='m')
        document.add_parameter(Parameter(name='k', value=2.5))
        times, values = _sine_data()
        add_time_course_parameter(document, 'p', times, values, PolynomialInterpolator())

        path = tmp_path / 'model.json'
        document.save(path)
        loaded = ModelDocument.load(path)

        assert loaded.name == 'm'
        assert list(loaded.parameters) == ['k', 'p']
        assert loaded.get_parameter('k').value == 2.5
        assert loaded.get_parameter('k').rule is None

        original = document.get_parameter('p').rule
        restored = loaded.get_parameter('p').rule
        assert isinstance(restored, sympy.Piecewise)
        assert restored == original
        for (e_orig, c_orig), (e_back, c_back) in zip(original.args, restored.args):
            assert e_back.args == e_orig.args
            assert c_back == c_orig
        assert restored.free_symbols == {TIME}

        t = np.linspace(-3.0, 3.0, 301)
        np.testing.assert_array_equal(
            evaluate_expression(restored, t), evaluate_expression(original, t)
        )

    def test_round_trip_keeps_term_order(self, tmp_path):
        """Constant term first and negative coefficients survive unchanged."""
        document = ModelDocument()
        add_time_course_parameter(
            document, 'p', [-1.0, 0.0, 0.5, 2.0], [0.0, 1.0, -2.0, 3.0],
            PolynomialInterpolator(),
        )
        path = tmp_path / 'model.json'
        document.save(path)

        original = document.get_parameter('p').rule
        restored = ModelDocument.load(path).get_parameter('p').rule

        for (e_orig, _), (e_back, _) in zip(original.args, restored.args):
            assert [type(a).__name__ for a in e_back.args] == [
                type(a).__name__ for a in e_orig.args
            ]
            assert isinstance(e_back.args[0], sympy.Float)
            assert float(e_back.args[0]) == float(e_orig.args[0])
        assert restored == original

    def test_plain_expression_rule(self, tmp_path):
        document = ModelDocument()
        document.add_parameter(Parameter(name='q', constant=False, rule=2 * TIME + 1))

        path = tmp_path / 'model.json'
        document.save(path)
        loaded = ModelDocument.load(path)

        rule = loaded.get_parameter('q').rule
        assert rule.free_symbols == {TIME}
        np.testing.assert_allclose(evaluate_expression(rule, np.array([0.0, 1.5])), [1.0, 4.0])

    def test_unsupported_rule_not_saved(self, tmp_path):
        document = ModelDocument()
        document.add_parameter(Parameter(name='q', constant=False, rule=sympy.sin(TIME)))

        with pytest.raises(ValueError, match="sin"):
            document.save(tmp_path / 'model.json')
        assert not (tmp_path / 'model.json').exists()


class TestRuleLoading:
    """Loading only rebuilds the node types a compiled rule is made of."""

    @staticmethod
    def _write(tmp_path, rule):
        path = tmp_path / 'model.json'
        payload = {'name': 'm', 'parameters': [{'name': 'p', 'constant': False, 'rule': rule}]}
        path.write_text(json.dumps(payload))
        return path

    def test_code_string_not_executed(self, tmp_path):
        """A rule given as source text is rejected without being run."""
        marker = tmp_path / 'marker'
        text = f"__import__('pathlib').Path({str(marker)!r}).write_text('x') or Symbol('t')"
        path = self._write(tmp_path, {'expression': text})

        with pytest.raises(ValueError, match="Malformed rule node"):
            ModelDocument.load(path)
        assert not marker.exists()

    def test_plain_string_rejected(self, tmp_path):
        path = self._write(tmp_path, "Symbol('t')")
        with pytest.raises(ValueError):
            ModelDocument.load(path)

    def test_unknown_node_type(self, tmp_path):
        rule = {'op': 'Function', 'args': [{'op': 'Symbol', 'name': 't'}]}
        with pytest.raises(ValueError, match="Unknown rule node type"):
            ModelDocument.load(self._write(tmp_path, rule))

    def test_foreign_symbol(self, tmp_path):
        rule = {'op': 'Symbol', 'name': '__builtins__'}
        with pytest.raises(ValueError, match="only depend on"):
            ModelDocument.load(self._write(tmp_path, rule))

    def test_float_must_be_hex_string(self, tmp_path):
        rule = {'op': 'Float', 'value': 1.5}
        with pytest.raises(ValueError, match="hex string"):
            ModelDocument.load(self._write(tmp_path, rule))

    def test_wrong_arity(self, tmp_path):
        t = {'op': 'Symbol', 'name': 't'}
        with pytest.raises(ValueError, match="needs 2 args"):
            ModelDocument.load(self._write(tmp_path, {'op': 'Pow', 'args': [t]}))

    def test_exact_floats(self, tmp_path):
        """Hex-encoded floats come back bit for bit."""
        value = 0.1 + 0.2
        rule = {'op': 'Add', 'args': [
            {'op': 'Float', 'value': value.hex()},
            {'op': 'Symbol', 'name': 't'},
        ]}

        loaded = ModelDocument.load(self._write(tmp_path, rule)).get_parameter('p').rule

        assert float(loaded.args[0]) == value
        assert loaded.args[1] == TIME

import numpy as np
import pytest

from flameclosures.core import ConfigurationError
from flameclosures.solvers.laminar_burning_velocity import (Constant, Malet, Tabulated, malet_reference_velocity,
                                                            new_laminar_burning_velocity)
from flameclosures.solution import equivalence_ratio


def malet(**kwargs):
    coeffs = {'model': 'Malet', 'X_H2_0': 0.15, 'X_H2O': 0.0, 'pRef': 1e5, 'TRef': 300.0}
    coeffs.update(kwargs)
    return new_laminar_burning_velocity(None, coeffs)


def test_reference_conditions_reproduce_reference_velocity():
    model = malet(sLaminar0=0.5)
    assert model.evaluate(np.array([1e5]), np.array([300.0]))[0] == 0.5


def test_reference_velocity_from_equivalence_ratio():
    model = malet()
    assert model.ER == pytest.approx(equivalence_ratio(0.15))
    assert model.evaluate(1e5, 300.0)[0] == pytest.approx(malet_reference_velocity(model.ER))


def test_equivalence_ratio_keyword_overrides_composition():
    assert malet(ER=0.8).sL0 == pytest.approx(malet_reference_velocity(0.8))


def test_monotonic_in_hydrogen_content():
    p, TU = np.array([2.5e5]), np.array([350.0])
    sL = [malet(X_H2_0=x).evaluate(p, TU)[0] for x in np.linspace(0.06, 0.4, 30)]
    assert np.all(np.diff(sL) >= 0.0)


def test_monotonic_in_steam_dilution():
    p, TU = np.array([2.5e5]), np.array([350.0])
    sL = [malet(X_H2O=x).evaluate(p, TU)[0] for x in np.linspace(0.0, 0.6, 30)]
    assert np.all(np.diff(sL) <= 0.0)
    assert sL[-1] > 0.0


def test_inputs_are_clamped_to_fitted_range():
    model = malet()
    p = np.array([-1.0, 0.0, 1e12, 1e6])
    TU = np.array([10.0, 250.0, 1e5, 900.0])
    sL = model.evaluate(p, TU)
    assert np.all(np.isfinite(sL)) and np.all(sL >= 0.0)
    assert sL[0] == sL[1]
    assert sL[2] == sL[3]


def test_reference_state_outside_fitted_range():
    with pytest.raises(ConfigurationError):
        malet(pRef=1e7)
    with pytest.raises(ConfigurationError):
        malet(TRef=200.0)


def test_read_keeps_coefficients_on_failure():
    model = malet()
    params = model.params
    with pytest.warns(UserWarning):
        assert not model.read({'model': 'Malet', 'X_H2_0': 'lean', 'X_H2O': 0.0, 'pRef': 1e5, 'TRef': 300.0})
    assert model.params is params


def test_read_twice_is_reproducible():
    model = malet()
    coeffs = {'model': 'Malet', 'X_H2_0': 0.2, 'X_H2O': 0.1, 'pRef': 1e5, 'TRef': 300.0}
    p, TU = np.linspace(1e5, 5e5, 5), np.linspace(300.0, 500.0, 5)
    assert model.read(coeffs)
    first_params, first = model.params, model.evaluate(p, TU)
    assert model.read(coeffs)
    assert model.params == first_params
    np.testing.assert_array_equal(model.evaluate(p, TU), first)


def test_constant_model():
    model = new_laminar_burning_velocity(None, {'model': 'constant', 'sLaminar0': 0.3})
    assert isinstance(model, Constant)
    np.testing.assert_array_equal(model.evaluate(np.ones(4), np.ones(4)), 0.3)


def test_tabulated_model_interpolates_and_clamps():
    table = {'model': 'tabulated', 'p': [1e5, 2e5], 'TU': [300.0, 400.0], 'sL': [[0.2, 0.4], [0.1, 0.3]]}
    model = new_laminar_burning_velocity(None, table)
    assert isinstance(model, Tabulated)
    sL = model.evaluate(np.array([1.5e5, 1e4, 1e7]), np.array([350.0, 200.0, 900.0]))
    np.testing.assert_allclose(sL, [0.25, 0.2, 0.3])


def test_tabulated_model_rejects_malformed_table():
    with pytest.raises(ConfigurationError):
        new_laminar_burning_velocity(None, {'model': 'tabulated', 'p': [1e5, 2e5], 'TU': [300.0, 400.0],
                                            'sL': [[0.2, 0.4]]})
    with pytest.raises(ConfigurationError):
        new_laminar_burning_velocity(None, {'model': 'tabulated', 'p': [2e5, 1e5], 'TU': [300.0, 400.0],
                                            'sL': [[0.2, 0.4], [0.1, 0.3]]})


def test_factory_rejects_unknown_model():
    with pytest.raises(ConfigurationError):
        new_laminar_burning_velocity(None, {'model': 'neuralNetwork'})
    with pytest.raises(ConfigurationError):
        new_laminar_burning_velocity(None, {'sLaminar0': 0.3})
    assert isinstance(malet(), Malet)

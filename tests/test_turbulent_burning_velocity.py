import numpy as np
import pytest

from flameclosures.core import ConfigurationError
from flameclosures.solvers.turbulent_burning_velocity import (Bradley, Bray, Zimont,
                                                              new_turbulent_burning_velocity)

MODELS = ['Zimont', 'Bradley', 'Bray']


@pytest.mark.parametrize("model", MODELS)
def test_never_slower_than_laminar(model):
    correlation = new_turbulent_burning_velocity({'model': model})
    u_prime = np.array([0.0, 1e-6, 0.1, 1.0, 10.0, 100.0])
    sL = np.full_like(u_prime, 0.3)
    epsilon = np.array([0.0, 1e-12, 0.5, 50.0, 1e4, 1e7])
    St = correlation.St(sL, u_prime, epsilon, np.full_like(u_prime, 1.5e-5))
    assert np.all(np.isfinite(St))
    assert np.all(St >= sL)


@pytest.mark.parametrize("model", MODELS)
def test_laminar_limit(model):
    correlation = new_turbulent_burning_velocity({'model': model})
    sL = np.array([0.2, 0.5])
    St = correlation.St(sL, np.zeros(2), np.zeros(2), np.full(2, 1.5e-5))
    np.testing.assert_array_equal(St, sL)


def test_zimont_correlation():
    correlation = new_turbulent_burning_velocity({'model': 'Zimont'})
    assert isinstance(correlation, Zimont)
    sL, u_prime, epsilon, nu = 0.5, 2.0, 10.0, 1.5e-5
    lt = 0.37 * u_prime**3 / epsilon
    expected = 0.52 * u_prime**0.75 * sL**0.5 * (nu / 0.7)**-0.25 * lt**0.25
    St = correlation.St(np.array([sL]), np.array([u_prime]), np.array([epsilon]), np.array([nu]))
    assert St[0] == pytest.approx(expected)


def test_bradley_decreases_with_lewis_number():
    args = (np.array([0.4]), np.array([3.0]), np.array([100.0]), np.array([1.5e-5]))
    unity = new_turbulent_burning_velocity({'model': 'Bradley'})
    assert isinstance(unity, Bradley)
    heavy = new_turbulent_burning_velocity({'model': 'Bradley', 'Le': 2.0})
    assert heavy.St(*args)[0] < unity.St(*args)[0]


def test_bray_correlation():
    correlation = new_turbulent_burning_velocity({'model': 'Bray'})
    assert isinstance(correlation, Bray)
    sL, u_prime, epsilon, nu = 0.4, 3.0, 100.0, 1.5e-5
    lt = 0.37 * u_prime**3 / epsilon
    K = 0.157 * (u_prime / sL)**2 / np.sqrt(u_prime * lt / nu)
    St = correlation.St(np.array([sL]), np.array([u_prime]), np.array([epsilon]), np.array([nu]))
    assert St[0] == pytest.approx(max(0.875 * u_prime * K**-0.392, sL))


def test_read_keeps_coefficients_on_failure():
    correlation = new_turbulent_burning_velocity({'model': 'Zimont'})
    with pytest.warns(UserWarning):
        assert not correlation.read({'A': -1.0})
    assert correlation.params.A == 0.52
    assert correlation.read({'A': 0.6})
    assert correlation.params.A == 0.6


def test_factory_rejects_unknown_model():
    with pytest.raises(ConfigurationError):
        new_turbulent_burning_velocity({'model': 'Peters'})
    with pytest.raises(ConfigurationError):
        new_turbulent_burning_velocity(None)

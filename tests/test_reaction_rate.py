import copy

import cantera as ct
import numpy as np
import pytest

from flameclosures.core import ConfigurationError, SMALL
from flameclosures.solution import TurbulenceFields, unburnt_mole_fractions
from flameclosures.solvers import ETFC, FSD, TFC, TurbulentPremixedCombustion
from flameclosures.solvers.math_utils import grad_mag
from flameclosures.solvers.reaction_rate import MOLAR_H2, etfc_development_factor

from conftest import MECHANISM, P0, T0, X_H2_0


def build(thermo, turbulence, coeffs, model=None):
    coeffs = copy.deepcopy(coeffs)
    if model is not None:
        coeffs['reactionRate']['model'] = model
    return TurbulentPremixedCombustion(thermo, turbulence, coeffs)


@pytest.fixture
def reaction_rate(thermo, turbulence, combustion_coeffs):
    return build(thermo, turbulence, combustion_coeffs).reaction_rate


def test_unburnt_constants(reaction_rate):
    gas = ct.Solution(MECHANISM)
    gas.TPX = T0, P0, unburnt_mole_fractions(X_H2_0)
    assert isinstance(reaction_rate, TFC)
    assert reaction_rate.Y_H2_0 == pytest.approx(gas.Y[gas.species_index('H2')])
    assert reaction_rate.Y_H2_99 == pytest.approx(0.01 * reaction_rate.Y_H2_0)
    assert reaction_rate.HEff == pytest.approx(2.418e5 / MOLAR_H2)
    assert reaction_rate.unburnt.rho0 == pytest.approx(gas.density_mass)
    assert reaction_rate.unburnt.WU == pytest.approx(gas.mean_molecular_weight)


def test_unburnt_state_at_initial_pressure(reaction_rate):
    np.testing.assert_array_equal(reaction_rate.TU().values, T0)
    np.testing.assert_allclose(reaction_rate.rhoU().values, reaction_rate.unburnt.rho0)
    gas = ct.Solution(MECHANISM)
    gas.TPX = T0, P0, unburnt_mole_fractions(X_H2_0)
    np.testing.assert_allclose(reaction_rate.muU().values, gas.viscosity, rtol=1e-10)


def test_unburnt_gas_is_compressed_isentropically(reaction_rate):
    reaction_rate.p.assign(np.full(reaction_rate.mesh.cell_count, 4 * P0))
    gamma = reaction_rate.unburnt.gammaU
    np.testing.assert_allclose(reaction_rate.TU().values, T0 * 4**((gamma - 1) / gamma))
    np.testing.assert_allclose(reaction_rate.rhoU().values, reaction_rate.unburnt.rho0 * 4**(1 / gamma))


def test_consumption_rate_follows_the_flame_brush(reaction_rate):
    reaction_rate.correct()
    cSource = reaction_rate.cSource.values
    assert np.all(np.isfinite(cSource)) and np.all(cSource >= 0.0)
    gradient = grad_mag(reaction_rate.progress_variable).values
    assert np.all(cSource[gradient == 0.0] == 0.0)
    assert np.all(cSource[gradient > 0.0] > 0.0)


def test_tfc_consumption_rate(reaction_rate):
    reaction_rate.correct()
    St = reaction_rate.turbulent_burning_velocity_field()
    expected = (reaction_rate.Y_H2_0 * reaction_rate.rhoU().values * St
                * grad_mag(reaction_rate.progress_variable).values)
    np.testing.assert_allclose(reaction_rate.cSource.values, expected)
    assert np.all(St >= reaction_rate.sL.values)


def test_sources_scale_linearly_and_vanish_with_cSource(reaction_rate):
    thermo = reaction_rate.thermo
    n = reaction_rate.mesh.cell_count
    cSource = np.linspace(0.0, 5.0, n)
    reaction_rate.cSource.assign(cSource)
    rates = {i: reaction_rate.R(i).values.copy() for i in range(len(thermo.species_names))}
    Qdot = reaction_rate.Qdot().values.copy()
    assert np.all(Qdot[cSource == 0.0] == 0.0)
    for rate in rates.values():
        assert np.all(rate[cSource == 0.0] == 0.0)

    reaction_rate.cSource.assign(2.0 * cSource)
    for i, rate in rates.items():
        np.testing.assert_allclose(reaction_rate.R(i).values, 2.0 * rate)
    np.testing.assert_allclose(reaction_rate.Qdot().values, 2.0 * Qdot)
    np.testing.assert_allclose(reaction_rate.Qdot().values, 2.0 * cSource * reaction_rate.HEff)


def test_species_sources_follow_the_global_reaction(reaction_rate):
    thermo = reaction_rate.thermo
    cSource = np.linspace(0.0, 5.0, reaction_rate.mesh.cell_count)
    reaction_rate.cSource.assign(cSource)
    np.testing.assert_allclose(reaction_rate.R(thermo.species_index('H2')).values, -cSource)
    np.testing.assert_allclose(reaction_rate.R(thermo.species_index('c')).values, cSource / reaction_rate.Y_H2_0)
    for name in ('OH', 'HO2', 'AR', 'N2'):
        np.testing.assert_array_equal(reaction_rate.R(thermo.species_index(name)).values, 0.0)
    net = sum(reaction_rate.R(i).values for i in range(thermo.n_gas))
    np.testing.assert_allclose(net, 0.0, atol=1e-12 * cSource.max())


@pytest.mark.parametrize("name", ['H2', 'O2', 'H2O', 'c', 'OH'])
def test_implicit_source_matches_explicit_rate(reaction_rate, name):
    thermo = reaction_rate.thermo
    reaction_rate.correct()
    Y = thermo.Y[thermo.species_index(name)]
    matrix = reaction_rate.R(Y)
    np.testing.assert_allclose(matrix.evaluate(Y), reaction_rate.R(thermo.species_index(name)).values,
                               rtol=1e-10, atol=1e-14)
    if name in ('H2', 'O2'):
        assert np.all(matrix.diag <= 0.0)
        np.testing.assert_array_equal(matrix.source, 0.0)
    else:
        np.testing.assert_array_equal(matrix.diag, 0.0)


def test_missing_heat_of_combustion(thermo, turbulence, combustion_coeffs):
    del combustion_coeffs['reactionRate']['H0']
    with pytest.raises(ConfigurationError, match="H0"):
        build(thermo, turbulence, combustion_coeffs)


@pytest.mark.parametrize("y_index", [99, 'H2', 'fuel'])
def test_invalid_progress_variable_index(thermo, turbulence, combustion_coeffs, y_index):
    combustion_coeffs['reactionRate']['yIndex'] = y_index
    with pytest.raises(ConfigurationError):
        build(thermo, turbulence, combustion_coeffs)


def test_missing_burning_velocity_dictionary(thermo, turbulence, combustion_coeffs):
    del combustion_coeffs['reactionRate']['turbulentBurningVelocity']
    with pytest.raises(ConfigurationError):
        build(thermo, turbulence, combustion_coeffs)


def test_etfc_develops_towards_tfc(thermo, turbulence, combustion_coeffs, runtime):
    tfc = build(thermo, turbulence, combustion_coeffs).reaction_rate
    etfc = build(thermo, turbulence, combustion_coeffs, model='ETFC').reaction_rate
    assert isinstance(etfc, ETFC)
    tfc.correct()

    etfc.correct()
    laminar = (etfc.Y_H2_0 * etfc.rhoU().values * etfc.sL.values * grad_mag(etfc.progress_variable).values)
    np.testing.assert_allclose(etfc.cSource.values, laminar)

    runtime.current_time = 1e-3
    etfc.correct()
    assert np.all(etfc.cSource.values <= tfc.cSource.values * (1 + 1e-12))
    assert np.all(etfc.cSource.values >= laminar)

    runtime.current_time = 1e6
    etfc.correct()
    np.testing.assert_allclose(etfc.cSource.values, tfc.cSource.values, rtol=1e-6)


def test_etfc_development_factor_is_bounded():
    nut = np.array([0.0, 1e-5, 1e-4, 1e-2])
    u_prime = np.array([0.0, 0.1, 1.0, 10.0])
    np.testing.assert_array_equal(etfc_development_factor(nut, u_prime, 0.7, 0.0, SMALL), 0.0)
    for time in (1e-9, 1e-3, 1.0, 1e9):
        factor = etfc_development_factor(nut, u_prime, 0.7, time, SMALL)
        assert np.all(np.isfinite(factor))
        assert np.all((factor >= 0.0) & (factor <= 1.0))


def test_fsd_wrinkling_enhances_laminar_rate(thermo, mesh, combustion_coeffs):
    turbulence = TurbulenceFields.uniform(mesh, nut=1e-4, k=0.5, les=True)
    fsd = build(thermo, turbulence, combustion_coeffs, model='FSD').reaction_rate
    assert isinstance(fsd, FSD)
    assert fsd.turbulent_burning_velocity is None
    fsd.correct()
    wrinkling = fsd.wrinkling()
    assert np.all(wrinkling >= 1.0)
    laminar = fsd.Y_H2_0 * fsd.rhoU().values * fsd.sL.values * grad_mag(fsd.progress_variable).values
    np.testing.assert_allclose(fsd.cSource.values, laminar * wrinkling)


def test_fsd_expects_les_fields(thermo, turbulence, combustion_coeffs):
    with pytest.warns(UserWarning, match="LES"):
        build(thermo, turbulence, combustion_coeffs, model='FSD')


def test_correct_never_raises_without_turbulence(thermo, mesh, combustion_coeffs):
    combustion = build(thermo, TurbulenceFields.uniform(mesh, nut=0.0, k=0.0), combustion_coeffs)
    combustion.correct()
    cSource = combustion.reaction_rate.cSource.values
    assert np.all(np.isfinite(cSource)) and np.all(cSource >= 0.0)

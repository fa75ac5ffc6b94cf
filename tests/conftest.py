import numpy as np
import pytest
import cantera as ct

from flameclosures.core import GridParameters, Mesh, Runtime, VolScalarField
from flameclosures.solution import MixtureThermo, TurbulenceFields, unburnt_mole_fractions

MECHANISM = 'h2o2.yaml'
X_H2_0 = 0.15
T0 = 300.0
P0 = 1.0e5


@pytest.fixture
def runtime():
    return Runtime(time_step=1e-3, end_time=1.0)


@pytest.fixture
def mesh(runtime):
    return Mesh(GridParameters(cell_count=20, length=0.02), runtime)


def progress_profile(mesh):
    """burnt on the left, a linear flame brush in the middle, unburnt on the right"""
    x = mesh.positions_volume_centers / mesh.params.length
    return np.clip((0.7 - x) / 0.4, 0.0, 1.0)


@pytest.fixture
def thermo(mesh):
    """uniform unburnt mixture with a progress variable profile"""
    return MixtureThermo.from_mixture(mesh, MECHANISM, T0, P0, unburnt_mole_fractions(X_H2_0),
                                      progress=progress_profile(mesh))


@pytest.fixture
def flame_thermo(mesh):
    """temperature and composition blended between the unburnt state and its adiabatic equilibrium"""
    gas = ct.Solution(MECHANISM)
    gas.TPX = T0, P0, unburnt_mole_fractions(X_H2_0)
    Y_u, T_u = gas.Y.copy(), gas.T
    gas.equilibrate('HP')
    Y_b, T_b = gas.Y.copy(), gas.T
    c = progress_profile(mesh)
    T = VolScalarField("T", mesh, T_u + c * (T_b - T_u))
    p = VolScalarField.uniform("p", mesh, P0)
    Y = [VolScalarField(name, mesh, Y_u[i] + c * (Y_b[i] - Y_u[i])) for i, name in enumerate(gas.species_names)]
    Y.append(VolScalarField("c", mesh, c))
    return MixtureThermo(mesh, MECHANISM, T, p, Y)


@pytest.fixture
def turbulence(mesh):
    return TurbulenceFields.uniform(mesh, nut=1e-4, k=0.1)


@pytest.fixture
def reaction_rate_coeffs():
    return {
        'model': 'TFC',
        'H0': 2.418e5,
        'yIndex': 'c',
        'X_H2_0': X_H2_0,
        'T0': T0,
        'p0': P0,
        'laminarBurningVelocity': {'model': 'Malet', 'X_H2_0': X_H2_0, 'X_H2O': 0.0, 'pRef': P0, 'TRef': T0},
        'turbulentBurningVelocity': {'model': 'Zimont'}
    }


@pytest.fixture
def combustion_coeffs(reaction_rate_coeffs):
    return {'progressVariable': 'c', 'reactionRate': reaction_rate_coeffs}

"""
reaction rate module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

main classes:
- ReactionRate: abstract reaction rate of the global hydrogen oxidation H2 + 1/2 O2 -> H2O, converts the transported
  progress variable into species source terms and heat release
- TFC: turbulent flame speed closure, cSource = Y_H2_0*rhoU*St*|grad(c)|
- ETFC: extended TFC, the turbulent flame speed develops with the flame development time
- FSD: flame surface density closure for LES with the Charlette wrinkling factor

cSource is the hydrogen mass consumed per unit volume and time [kg/m3/s]. The source terms of the other species follow
from the stoichiometry of the global reaction, the progress variable is produced at cSource/Y_H2_0.
"""

import abc
import warnings
from dataclasses import dataclass
from typing import Dict, Mapping, Union
import numpy as np
import numba
import cantera as ct
from flameclosures.core import ConfigurationError, Coefficients, SMALL, VolScalarField, coefficient
from flameclosures.core.dimensions import DIMLESS, DIM_ENERGY, DIM_MOLES, DIM_PRESSURE, DIM_TEMPERATURE
from flameclosures.solution.mapping_utils import init_species_mapping, unburnt_mole_fractions
from .laminar_burning_velocity import new_laminar_burning_velocity
from .turbulent_burning_velocity import new_turbulent_burning_velocity
from .math_utils import ScalarMatrix, bound_non_negative, fvm_sp, fvm_su, grad_mag

MOLAR_H2 = 2.016e-3     # molar mass of hydrogen [kg/mol]
UNBURNT_H2_FRACTION_99 = 0.01   # hydrogen left at c = 0.99, relative to the unburnt mass fraction


@dataclass
class ReactionRateParameters(Coefficients):
    """reaction rate coefficients

    Attributes:
        H0: heat of combustion [J/mol H2]
        yIndex: index or name of the progress variable in the species set
        X_H2_0: hydrogen mole fraction of the dry unburnt hydrogen/air mixture [-]
        T0: initial unburnt temperature [K]
        p0: initial pressure [Pa]
        X_H2O: steam mole fraction of the unburnt mixture [-]
    """
    H0: float = coefficient(DIM_ENERGY / DIM_MOLES, positive=True)
    yIndex: Union[int, str] = coefficient(DIMLESS, kind='label')
    X_H2_0: float = coefficient(DIMLESS, positive=True)
    T0: float = coefficient(DIM_TEMPERATURE, positive=True)
    p0: float = coefficient(DIM_PRESSURE, positive=True)
    X_H2O: float = coefficient(DIMLESS, default=0.0, non_negative=True)

    def validate(self):
        if self.X_H2_0 >= 1.0:
            raise ConfigurationError(f"X_H2_0 must be less than 1, got {self.X_H2_0}")
        if self.X_H2O >= 1.0:
            raise ConfigurationError(f"X_H2O must be less than 1, got {self.X_H2O}")


@dataclass
class UnburntMixture:
    """constants derived once from the reaction rate coefficients

    Attributes:
        X: mole fractions of the unburnt mixture in mechanism order [-]
        Y_H2_0: unburnt hydrogen mass fraction [-]
        Y_H2_99: hydrogen mass fraction at c = 0.99 [-]
        HEff: heat of combustion per unit mass of hydrogen [J/kg]
        rho0: unburnt density at (T0, p0) [kg/m3]
        WU: molar mass of the unburnt mixture [kg/kmol]
        gammaU: heat capacity ratio of the unburnt mixture [-]
        y_index: index of the progress variable in the species set
        species_mapping: index of H2, O2, H2O and N2 in the species set
        factors: source term of each affected species per unit cSource
    """
    X: np.ndarray
    Y_H2_0: float
    Y_H2_99: float
    HEff: float
    rho0: float
    WU: float
    gammaU: float
    y_index: int
    species_mapping: Dict[str, int]
    factors: Dict[int, float]


class ReactionRate(abc.ABC):
    """abstract reaction rate model"""

    Parameters = ReactionRateParameters

    def __init__(self, model_type: str, combustion, coeffs: Mapping):
        """
        initialize the reaction rate model

        Args:
            model_type: model name
            combustion: owning combustion model, supplies mesh, thermo and turbulence
            coeffs: reaction rate coefficient dictionary

        Raises:
            ConfigurationError: missing or malformed coefficients
        """
        self.model_type = model_type
        self.combustion = combustion
        self.mesh = combustion.mesh
        self.thermo = combustion.thermo
        self.turbulence = combustion.turbulence
        self.p = self.thermo.p
        self.cSource = VolScalarField.uniform("cSource", self.mesh, 0.0)
        self.apply(self.parse(coeffs))

    # ---------------------------------------------------------------- configuration

    def parse(self, coeffs: Mapping) -> tuple:
        """parse the whole coefficient set without modifying the model

        Raises:
            ConfigurationError: missing or malformed coefficients, or a different reaction rate model
        """
        if isinstance(coeffs, Mapping) and coeffs.get('model', self.model_type) != self.model_type:
            raise ConfigurationError(f"reaction rate model cannot change from {self.model_type} to {coeffs['model']}")
        params = self.Parameters.from_dict(coeffs)
        unburnt = self._unburnt_mixture(params)
        laminar = new_laminar_burning_velocity(self, coeffs.get('laminarBurningVelocity'))
        turbulent = self._new_turbulent_burning_velocity(coeffs)
        return params, unburnt, laminar, turbulent

    def apply(self, parsed: tuple):
        """activate a coefficient set returned by parse"""
        self.params, self.unburnt, self.laminar_burning_velocity, self.turbulent_burning_velocity = parsed
        self.gas_unburnt = self.thermo.new_solution()
        self.gas_unburnt.TPX = self.params.T0, self.params.p0, self.unburnt.X

    def _new_turbulent_burning_velocity(self, coeffs: Mapping):
        return new_turbulent_burning_velocity(coeffs.get('turbulentBurningVelocity'))

    def _resolve_y_index(self, y_index: Union[int, str]) -> int:
        names = self.thermo.species_names
        if isinstance(y_index, str):
            if y_index not in names:
                raise ConfigurationError(f"yIndex: species '{y_index}' is not part of the species set {names}")
            return names.index(y_index)
        if not 0 <= y_index < len(names):
            raise ConfigurationError(f"yIndex {y_index} is out of range [0, {len(names) - 1}]")
        return y_index

    def _unburnt_mixture(self, params: ReactionRateParameters) -> UnburntMixture:
        y_index = self._resolve_y_index(params.yIndex)
        try:
            mapping = init_species_mapping(self.thermo.species_names[:self.thermo.n_gas])
        except KeyError as e:
            raise ConfigurationError(str(e)) from None
        if y_index in mapping.values():
            raise ConfigurationError(f"yIndex {y_index} must be the progress variable, "
                                     f"not a species of the global reaction")

        gas = self.thermo.new_solution()
        gas.TPX = params.T0, params.p0, unburnt_mole_fractions(params.X_H2_0, params.X_H2O)
        Y_H2_0 = float(gas.Y[mapping['fuel']])

        W = self.thermo.molecular_weights
        W_H2, W_O2, W_H2O = W[mapping['fuel']], W[mapping['oxidizer']], W[mapping['product']]
        factors = {
            mapping['fuel']: -1.0,
            mapping['oxidizer']: -0.5 * W_O2 / W_H2,
            mapping['product']: W_H2O / W_H2,
            y_index: 1.0 / Y_H2_0
        }
        return UnburntMixture(
            X=gas.X.copy(),
            Y_H2_0=Y_H2_0,
            Y_H2_99=UNBURNT_H2_FRACTION_99 * Y_H2_0,
            HEff=params.H0 / MOLAR_H2,
            rho0=float(gas.density_mass),
            WU=float(gas.mean_molecular_weight),
            gammaU=float(gas.cp_mass / gas.cv_mass),
            y_index=y_index,
            species_mapping=mapping,
            factors=factors
        )

    def read(self, coeffs: Mapping) -> bool:
        """
        reload the coefficients of the reaction rate and its burning velocity models

        Returns:
            bool: True if the coefficients were reloaded, on failure the previous set stays active
        """
        try:
            parsed = self.parse(coeffs)
        except ConfigurationError as e:
            warnings.warn(f"reaction rate model {self.model_type}: coefficients not updated: {e}")
            return False
        self.apply(parsed)
        return True

    # ---------------------------------------------------------------- unburnt gas state

    @property
    def Y_H2_0(self) -> float:
        return self.unburnt.Y_H2_0

    @property
    def Y_H2_99(self) -> float:
        return self.unburnt.Y_H2_99

    @property
    def HEff(self) -> float:
        return self.unburnt.HEff

    @property
    def y_index(self) -> int:
        return self.unburnt.y_index

    @property
    def progress_variable(self) -> VolScalarField:
        return self.thermo.Y[self.unburnt.y_index]

    @property
    def sL(self) -> VolScalarField:
        return self.laminar_burning_velocity.sL

    def _isentropic(self, name: str, reference: float, exponent: float) -> VolScalarField:
        p0 = self.params.p0
        values = reference * (np.maximum(self.p.values, SMALL) / p0) ** exponent
        boundary = reference * (np.maximum(self.p.boundary, SMALL) / p0) ** exponent
        return VolScalarField(name, self.mesh, values, ('calculated', 'calculated'), boundary)

    def TU(self) -> VolScalarField:
        """unburnt gas temperature after isentropic compression from (T0, p0) [K]"""
        gamma = self.unburnt.gammaU
        return self._isentropic("TU", self.params.T0, (gamma - 1.0) / gamma)

    def rhoU(self) -> VolScalarField:
        """unburnt gas density after isentropic compression from (T0, p0) [kg/m3]"""
        return self._isentropic("rhoU", self.unburnt.rho0, 1.0 / self.unburnt.gammaU)

    def muU(self) -> VolScalarField:
        """dynamic viscosity of the unburnt gas at (TU, p) [kg/m/s]"""
        n = self.mesh.cell_count
        states = ct.SolutionArray(self.gas_unburnt, shape=(n,))
        states.TPX = self.TU().values, np.maximum(self.p.values, SMALL), np.tile(self.unburnt.X, (n, 1))
        return VolScalarField("muU", self.mesh, np.asarray(states.viscosity, dtype=float))

    def nuU(self) -> np.ndarray:
        """kinematic viscosity of the unburnt gas [m2/s]"""
        return self.muU().values / np.maximum(self.rhoU().values, SMALL)

    # ---------------------------------------------------------------- source terms

    def correct(self):
        """update sL and the hydrogen consumption rate cSource, the result is finite and non-negative"""
        self.laminar_burning_velocity.correct()
        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            values = self._consumption_rate()
        self.cSource.assign(bound_non_negative(values, "cSource"))

    @abc.abstractmethod
    def _consumption_rate(self) -> np.ndarray:
        """hydrogen consumption rate of the closure [kg/m3/s]"""

    def R(self, species: Union[int, VolScalarField]):
        """
        source term of a species

        Args:
            species: species index, or the mass fraction field of the species

        Returns:
            VolScalarField: explicit rate [kg/m3/s] for a species index
            ScalarMatrix: source of the transport equation for a mass fraction field, produced species get an
                explicit source, consumed species an implicit one
        """
        if isinstance(species, VolScalarField):
            return self._R_matrix(species)
        speciei = int(species)
        name = self.thermo.species_names[speciei]
        factor = self.unburnt.factors.get(speciei, 0.0)
        return VolScalarField(f"R_{name}", self.mesh, factor * self.cSource.values)

    def _R_matrix(self, Y: VolScalarField) -> ScalarMatrix:
        speciei = self.thermo.species_index(Y.name)
        rate = self.R(speciei).values
        if self.unburnt.factors.get(speciei, 0.0) >= 0.0:
            return fvm_su(rate, Y)
        return fvm_sp(rate / np.maximum(Y.values, SMALL), Y)

    def Qdot(self) -> VolScalarField:
        """heat release rate [W/m3]"""
        return VolScalarField("Qdot", self.mesh, self.cSource.values * self.unburnt.HEff)

    def print_coeffs(self):
        self.params.print_coeffs(f"reaction rate {self.model_type}")
        print(f"    Y_H2_0: {self.Y_H2_0:.6g}, Y_H2_99: {self.Y_H2_99:.6g}, HEff: {self.HEff:.6g} J/kg")
        print(f"    rho0: {self.unburnt.rho0:.6g} kg/m3, WU: {self.unburnt.WU:.6g} kg/kmol, "
              f"gammaU: {self.unburnt.gammaU:.6g}")
        self.laminar_burning_velocity.print_coeffs()
        if self.turbulent_burning_velocity is not None:
            self.turbulent_burning_velocity.print_coeffs()


class TFC(ReactionRate):
    """turbulent flame speed closure"""

    def turbulent_burning_velocity_field(self) -> np.ndarray:
        """St [m/s]"""
        return self.turbulent_burning_velocity.St(self.sL.values, self.turbulence.u_prime(),
                                                  self.turbulence.dissipation().values, self.nuU())

    def _consumption_rate(self) -> np.ndarray:
        St = self.turbulent_burning_velocity_field()
        return self.Y_H2_0 * self.rhoU().values * St * grad_mag(self.progress_variable).values


@dataclass
class ETFCParameters(ReactionRateParameters):
    Sct: float = coefficient(DIMLESS, default=0.7, positive=True)


@numba.njit(cache=True)
def etfc_development_factor(nut, u_prime, Sct, time, small):
    """sqrt(1 + tau/t*(exp(-t/tau) - 1)), tau = nut/Sct/u'^2 the turbulent diffusion time scale"""
    n = nut.shape[0]
    result = np.zeros(n)
    if time <= 0.0:
        return result
    for i in range(n):
        tau = max(nut[i] / Sct / max(u_prime[i] * u_prime[i], small), small)
        x = time / tau
        if x < 1e-8:
            value = 0.5 * x
        else:
            value = 1.0 + (np.exp(-x) - 1.0) / x
        result[i] = np.sqrt(max(value, 0.0))
    return result


class ETFC(TFC):
    """extended turbulent flame speed closure, St grows from sL to its fully developed value with the flame time"""

    Parameters = ETFCParameters

    def development_factor(self) -> np.ndarray:
        nut = np.ascontiguousarray(self.turbulence.nut.values, dtype=np.float64)
        u_prime = np.ascontiguousarray(self.turbulence.u_prime(), dtype=np.float64)
        return etfc_development_factor(nut, u_prime, self.params.Sct, float(self.mesh.time()), SMALL)

    def turbulent_burning_velocity_field(self) -> np.ndarray:
        sL = self.sL.values
        St = super().turbulent_burning_velocity_field()
        return sL + (St - sL) * self.development_factor()


@dataclass
class FSDParameters(ReactionRateParameters):
    beta: float = coefficient(DIMLESS, default=0.5, positive=True)


class FSD(ReactionRate):
    """flame surface density closure with the Charlette wrinkling factor, the filter width is the cell size"""

    Parameters = FSDParameters

    def __init__(self, model_type: str, combustion, coeffs: Mapping):
        super().__init__(model_type, combustion, coeffs)
        if not self.turbulence.les:
            warnings.warn("the FSD closure expects sub-grid scale turbulence fields of a LES")

    def _new_turbulent_burning_velocity(self, coeffs: Mapping):
        return None

    def wrinkling(self) -> np.ndarray:
        """Charlette wrinkling factor (1 + min(Delta/deltaL, Gamma*u'/sL))^beta"""
        sL = np.maximum(self.sL.values, SMALL)
        ratio = self.turbulence.u_prime() / sL
        delta_ratio = self.mesh.delta / np.maximum(self.nuU() / sL, SMALL)
        gamma = 0.75 * np.exp(-1.2 / np.maximum(ratio, SMALL) ** 0.3) * delta_ratio ** (2.0 / 3.0)
        return (1.0 + np.minimum(delta_ratio, gamma * ratio)) ** self.params.beta

    def _consumption_rate(self) -> np.ndarray:
        return (self.Y_H2_0 * self.rhoU().values * self.wrinkling() * self.sL.values
                * grad_mag(self.progress_variable).values)


def new_reaction_rate(combustion, coeffs: Mapping) -> ReactionRate:
    """select the reaction rate model named by coeffs['model']"""
    models = {
        'TFC': TFC,
        'ETFC': ETFC,
        'FSD': FSD
    }
    if not isinstance(coeffs, Mapping) or 'model' not in coeffs:
        raise ConfigurationError("missing keyword 'model' in reactionRate coefficients")
    model_type = coeffs['model']
    if model_type not in models:
        raise ConfigurationError(f"unknown reaction rate model '{model_type}', valid: {list(models)}")
    return models[model_type](model_type, combustion, coeffs)

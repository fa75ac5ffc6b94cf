"""
premixed flame simulation module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.
"""

"""
Main classes:
- SimulationParameters: simulation setting parameters class
- Simulation: one-dimensional turbulent premixed hydrogen/air/steam flame driven by the closure models

the progress variable equation ddt(rho, c) - laplacian(DEff, c) = R(c) is advanced implicitly, the composition and the
temperature are blended linearly between the unburnt state and the adiabatic equilibrium of the unburnt mixture.
"""

import numpy as np
import cantera as ct
import warnings
from dataclasses import dataclass
from typing import Optional
from flameclosures.core import GridParameters, Mesh, Runtime, VolScalarField
from flameclosures.solution import MixtureThermo, TurbulenceFields, unburnt_mole_fractions
from flameclosures.solvers import TurbulentPremixedCombustion, new_thermophysical_transport
from flameclosures.solvers.math_utils import fvm_ddt, fvm_laplacian
# ignore thermodynamic warning of components
warnings.filterwarnings("ignore", category=UserWarning, message=".*NasaPoly2.*")


@dataclass
class SimulationParameters:
    """simulation setting parameters class

    Attributes:
        case_name: case name
        X_H2_0: hydrogen mole fraction of the dry hydrogen/air mixture [-]
        X_H2O: steam mole fraction [-]
        initial_pressure: initial pressure [Pa]
        initial_temperature: initial unburnt temperature [K]
        cell_count: grid count
        domain_length: calculation domain length [m]
        time_step: time step [s]
        end_time: end time [s]
        mechanism_file: reaction mechanism file
        nut: eddy viscosity [m2/s]
        k: turbulent kinetic energy [m2/s2]
        ignition_fraction: fraction of the domain burnt at the start, on the left side [-]
        heat_of_combustion: heat of combustion [J/mol H2]
        reaction_rate_model: 'TFC', 'ETFC' or 'FSD'
        turbulent_burning_velocity_model: 'Zimont', 'Bradley' or 'Bray'
        laminar_burning_velocity_model: 'Malet' or 'constant'
        transport_model: 'unityLewisEddyDiffusivity' or 'nonUnityLewisDiffusivity'
        Sct: turbulent Schmidt number [-]
        alpha_u: molecular diffusivity of the unburnt mixture [m2/s]
        Le: laminar Lewis number [-]
        print_interval: number of time steps between two console reports
        run_info_file: csv file of the combustion run information, None disables the file
    """
    case_name: str
    X_H2_0: float = 0.15
    X_H2O: float = 0.0
    initial_pressure: float = 1.0e5
    initial_temperature: float = 300.0
    cell_count: int = 100
    domain_length: float = 0.1
    time_step: float = 1.0e-4
    end_time: float = 1.0e-2
    mechanism_file: str = 'h2o2.yaml'
    nut: float = 1.0e-4
    k: float = 0.1
    ignition_fraction: float = 0.1
    heat_of_combustion: float = 2.418e5
    reaction_rate_model: str = 'ETFC'
    turbulent_burning_velocity_model: str = 'Zimont'
    laminar_burning_velocity_model: str = 'Malet'
    transport_model: str = 'nonUnityLewisDiffusivity'
    Sct: float = 0.7
    alpha_u: float = 2.0e-5
    Le: float = 0.5
    print_interval: int = 10
    run_info_file: Optional[str] = None


class Simulation:
    """premixed flame simulation main class

    Features:
    - initialize the mesh, the thermo state and the closure models
    - advance the progress variable equation
    - reconstruct the composition and the temperature from the progress variable
    """
    def __init__(self, params: SimulationParameters):
        """initialize simulation"""
        self.params = params
        self.runtime: Optional[Runtime] = None
        self.mesh: Optional[Mesh] = None
        self.thermo: Optional[MixtureThermo] = None
        self.turbulence: Optional[TurbulenceFields] = None
        self.combustion: Optional[TurbulentPremixedCombustion] = None
        self.transport = None

        # unburnt and burnt states of the gas phase species
        self.T_unburnt: float = params.initial_temperature
        self.T_burnt: Optional[float] = None
        self.Y_unburnt: Optional[np.ndarray] = None
        self.Y_burnt: Optional[np.ndarray] = None

    def combustion_coeffs(self) -> dict:
        """coefficient dictionary of the combustion model"""
        params = self.params
        laminar = {'model': params.laminar_burning_velocity_model}
        if params.laminar_burning_velocity_model == 'Malet':
            laminar.update(X_H2_0=params.X_H2_0, X_H2O=params.X_H2O,
                           pRef=params.initial_pressure, TRef=params.initial_temperature)
        else:
            laminar.update(sLaminar0=0.5)
        return {
            'progressVariable': 'c',
            'runInfo': params.run_info_file is not None,
            'runInfoFile': params.run_info_file or 'runInfo.csv',
            'reactionRate': {
                'model': params.reaction_rate_model,
                'H0': params.heat_of_combustion,
                'yIndex': 'c',
                'X_H2_0': params.X_H2_0,
                'X_H2O': params.X_H2O,
                'T0': params.initial_temperature,
                'p0': params.initial_pressure,
                'Sct': params.Sct,
                'laminarBurningVelocity': laminar,
                'turbulentBurningVelocity': {'model': params.turbulent_burning_velocity_model}
            }
        }

    def transport_coeffs(self) -> dict:
        return {'model': self.params.transport_model, 'Sct': self.params.Sct,
                'alpha_u': self.params.alpha_u, 'Le': self.params.Le}

    def initialize(self):
        """initialize simulation components with the following order:
        1. runtime and mesh
        2. unburnt and burnt states
        3. thermo and turbulence fields
        4. closure models
        """
        params = self.params
        self.runtime = Runtime(time_step=params.time_step, end_time=params.end_time)
        self.mesh = Mesh(GridParameters(cell_count=params.cell_count, length=params.domain_length), self.runtime)

        # unburnt state and its adiabatic equilibrium
        gas = ct.Solution(params.mechanism_file)
        gas.TPX = params.initial_temperature, params.initial_pressure, \
            unburnt_mole_fractions(params.X_H2_0, params.X_H2O)
        self.Y_unburnt = gas.Y.copy()
        gas.equilibrate('HP')
        self.T_burnt = gas.T
        self.Y_burnt = gas.Y.copy()

        # initial flame kernel on the left side
        positions = self.mesh.positions_volume_centers
        c0 = np.where(positions < params.ignition_fraction * params.domain_length, 1.0, 0.0)
        T = VolScalarField("T", self.mesh, self._blend(self.T_unburnt, self.T_burnt, c0))
        p = VolScalarField.uniform("p", self.mesh, params.initial_pressure)
        Y = [VolScalarField(name, self.mesh, self._blend(self.Y_unburnt[i], self.Y_burnt[i], c0))
             for i, name in enumerate(gas.species_names)]
        Y.append(VolScalarField("c", self.mesh, c0))
        self.thermo = MixtureThermo(self.mesh, params.mechanism_file, T, p, Y, progress_variable='c')
        self.turbulence = TurbulenceFields.uniform(self.mesh, params.nut, params.k,
                                                   les=params.reaction_rate_model == 'FSD')

        self.combustion = TurbulentPremixedCombustion(self.thermo, self.turbulence, self.combustion_coeffs())
        self.transport = new_thermophysical_transport(self.transport_coeffs(), self.thermo, self.turbulence)

        print("=== premixed flame initialization ===")
        print(f"case: {params.case_name}, cells: {params.cell_count}, domain length: {params.domain_length} m")
        print(f"unburnt temperature: {self.T_unburnt:.2f} K, adiabatic flame temperature: {self.T_burnt:.2f} K")
        print("="*50)
        self.combustion.print_coeffs()
        self.transport.print_coeffs()

    @staticmethod
    def _blend(unburnt, burnt, c):
        return unburnt + np.clip(c, 0.0, 1.0) * (burnt - unburnt)

    def _update_state(self):
        """reconstruct the temperature and the gas phase composition from the progress variable"""
        c = self.thermo.Y[self.combustion.c_index].values
        self.thermo.T.assign(self._blend(self.T_unburnt, self.T_burnt, c))
        for i in range(self.thermo.n_gas):
            self.thermo.Y[i].assign(self._blend(self.Y_unburnt[i], self.Y_burnt[i], c))
        self.thermo.update()

    def flame_position(self) -> float:
        """position of the c = 0.5 iso-surface [m]"""
        c = self.thermo.Y[self.combustion.c_index].values
        unburnt = np.where(c < 0.5)[0]
        if unburnt.size == 0:
            return float(self.mesh.face_positions[-1])
        return float(self.mesh.positions_volume_centers[unburnt[0]])

    def advance(self):
        """advance the progress variable by one time step"""
        c = self.thermo.Y[self.combustion.c_index]
        c_old = c.values.copy()

        self.combustion.correct()
        cEqn = (fvm_ddt(self.thermo.rho(), c, c_old, self.runtime.time_step)
                - fvm_laplacian(self.transport.DEff(c), c)
                - self.combustion.R(c))
        c.assign(np.clip(cEqn.solve(), 0.0, 1.0))

        self._update_state()
        self.runtime.advance()

    def report(self):
        summary = self.combustion.summary()
        q = self.transport.q()
        print("=== premixed flame performance ===")
        print(f"* time: {self.runtime.current_time * 1e3:.3f} ms, flame position: {self.flame_position() * 1e3:.3f} mm")
        print(f"* heat release rate: {summary['HeatReleaseRate']:.6g} W/m2, "
              f"max heat flux: {np.max(np.abs(q.values)):.6g} W/m2")
        print(f"* laminar burning velocity: {summary['sLMax']:.4g} m/s, burnt volume: {summary['BurntVolume']:.6g} m")
        print("="*50+"\n")

    def run(self):
        """execute the main loop of the simulation"""
        try:
            while self.runtime.is_running():
                self.advance()
                if self.runtime.iteration % self.params.print_interval == 0:
                    self.report()
                if self.flame_position() >= self.mesh.face_positions[-1]:
                    print("=== the flame has crossed the domain, simulation ends ===")
                    self.runtime.stop()
        finally:
            self.combustion.close()
        print(f"\nsimulation ends at {self.runtime.current_time:.6g} s, "
              f"flame position: {self.flame_position() * 1e3:.3f} mm")
        print("="*50)

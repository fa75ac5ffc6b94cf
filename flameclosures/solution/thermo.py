"""
mixture thermo module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

This module provides MixtureThermo, the thermophysical state of the gas on the mesh:
1. state fields: temperature T, pressure p and the species mass fractions Y
2. mixture properties evaluated by cantera: density, heat capacity, thermal conductivity, viscosity
3. species and mixture sensible enthalpy

the species set is the species of the gas phase mechanism followed by the passive progress variable, the
progress variable is transported like a species but carries no enthalpy and is not seen by cantera.
"""

from typing import Dict, List, Optional, Sequence, Union
import numpy as np
import cantera as ct
from flameclosures.core import Mesh, VolScalarField

T_STANDARD = 298.15  # reference temperature of the sensible enthalpy [K]


class MixtureThermo:
    """thermophysical state of the gas on the mesh"""

    def __init__(self, mesh: Mesh, mechanism_file: str, T: VolScalarField, p: VolScalarField,
                 Y: Sequence[VolScalarField], progress_variable: str = 'c'):
        """
        initialize the mixture thermo

        Args:
            mesh: mesh object
            mechanism_file: gas phase mechanism file (cantera yaml)
            T: temperature field [K]
            p: pressure field [Pa]
            Y: mass fraction fields, the mechanism species in mechanism order followed by the progress variable
            progress_variable: name of the passive progress variable
        """
        self.mesh = mesh
        self.mechanism_file = mechanism_file
        self.gas = ct.Solution(mechanism_file)
        if progress_variable in self.gas.species_names:
            raise ValueError(f"progress variable name '{progress_variable}' is a species of {mechanism_file}")
        self.progress_variable = progress_variable
        self.species_names: List[str] = list(self.gas.species_names) + [progress_variable]
        if len(Y) != len(self.species_names):
            raise ValueError(f"expected {len(self.species_names)} mass fraction fields, got {len(Y)}")
        self.T = T
        self.p = p
        self.Y = list(Y)
        self.n_gas = self.gas.n_species
        self.molecular_weights = np.concatenate([self.gas.molecular_weights, [0.0]])  # [kg/kmol]

        # formation enthalpy of the species at the standard temperature [J/kmol]
        self.gas.TP = T_STANDARD, ct.one_atm
        self._h_formation = self.gas.partial_molar_enthalpies.copy()

        self.gas_array = ct.SolutionArray(self.gas, shape=(mesh.cell_count,))
        self.boundary_array = ct.SolutionArray(self.gas, shape=(2,))
        self.update()

    @classmethod
    def from_mixture(cls, mesh: Mesh, mechanism_file: str, temperature: Union[float, np.ndarray],
                     pressure: Union[float, np.ndarray], composition: Union[str, Dict[str, float]],
                     progress_variable: str = 'c', progress: Union[float, np.ndarray] = 0.0,
                     boundary_types: Sequence[str] = ('zeroGradient', 'zeroGradient')) -> 'MixtureThermo':
        """uniform mixture (mole fractions) with the given temperature, pressure and progress variable"""
        gas = ct.Solution(mechanism_file)
        gas.TPX = T_STANDARD, ct.one_atm, composition
        T = VolScalarField("T", mesh, temperature, boundary_types)
        p = VolScalarField("p", mesh, pressure, boundary_types)
        Y = [VolScalarField(name, mesh, gas.Y[i], boundary_types) for i, name in enumerate(gas.species_names)]
        Y.append(VolScalarField(progress_variable, mesh, progress, boundary_types))
        return cls(mesh, mechanism_file, T, p, Y, progress_variable)

    def species_index(self, name: str) -> int:
        try:
            return self.species_names.index(name)
        except ValueError:
            raise KeyError(f"species '{name}' is not part of the species set {self.species_names}") from None

    def new_solution(self) -> ct.Solution:
        """independent cantera solution of the mechanism"""
        return ct.Solution(self.mechanism_file)

    def _gas_mass_fractions(self, boundary: bool = False) -> np.ndarray:
        if boundary:
            return np.column_stack([Yi.boundary for Yi in self.Y[:self.n_gas]])
        return np.column_stack([Yi.values for Yi in self.Y[:self.n_gas]])

    def update(self):
        """synchronize the cantera state arrays with T, p and Y"""
        self.gas_array.TPY = self.T.values, self.p.values, self._gas_mass_fractions()
        self.boundary_array.TPY = self.T.boundary, self.p.boundary, self._gas_mass_fractions(boundary=True)

    def _field(self, name: str, attribute: str) -> VolScalarField:
        values = np.asarray(getattr(self.gas_array, attribute), dtype=float)
        boundary = np.asarray(getattr(self.boundary_array, attribute), dtype=float)
        return VolScalarField(name, self.mesh, values, ('calculated', 'calculated'), boundary)

    def _patch(self, attribute: str, patch: str) -> np.ndarray:
        index = 0 if patch == 'left' else 1
        values = np.asarray(getattr(self.boundary_array, attribute), dtype=float)
        return values[index:index + 1]

    def rho(self, patch: Optional[str] = None):
        """density [kg/m3]"""
        if patch is not None:
            return self._patch('density_mass', patch)
        return self._field("rho", 'density_mass')

    def cp(self) -> VolScalarField:
        """heat capacity at constant pressure [J/kg/K]"""
        return self._field("cp", 'cp_mass')

    def kappa(self) -> VolScalarField:
        """thermal conductivity [W/m/K]"""
        return self._field("kappa", 'thermal_conductivity')

    def mu(self) -> VolScalarField:
        """dynamic viscosity [kg/m/s]"""
        return self._field("mu", 'viscosity')

    def alpha_he(self) -> VolScalarField:
        """laminar thermal diffusivity of enthalpy kappa/cp [kg/m/s]"""
        result = self.kappa() / self.cp()
        result.name = "alphahe"
        return result

    def hsi(self, speciei: int) -> VolScalarField:
        """sensible enthalpy of species i [J/kg], zero for the progress variable"""
        name = f"hs_{self.species_names[speciei]}"
        if speciei >= self.n_gas:
            return VolScalarField(name, self.mesh, 0.0, ('calculated', 'calculated'), (0.0, 0.0))
        mw = self.molecular_weights[speciei]
        h_f = self._h_formation[speciei]
        values = (self.gas_array.partial_molar_enthalpies[:, speciei] - h_f) / mw
        boundary = (self.boundary_array.partial_molar_enthalpies[:, speciei] - h_f) / mw
        return VolScalarField(name, self.mesh, values, ('calculated', 'calculated'), boundary)

    def he(self) -> VolScalarField:
        """mixture sensible enthalpy sum(Y_i*hs_i) [J/kg]"""
        values = np.zeros(self.mesh.cell_count)
        boundary = np.zeros(2)
        for i in range(self.n_gas):
            hs = self.hsi(i)
            values += self.Y[i].values * hs.values
            boundary += self.Y[i].boundary * hs.boundary
        return VolScalarField("he", self.mesh, values, self.T.boundary_types, boundary)

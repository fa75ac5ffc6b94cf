"""
combustion model module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

This module provides TurbulentPremixedCombustion, the combustion model seen by the host solver:
1. owns exactly one reaction rate model and corrects it once per outer iteration
2. republishes the species sources R and the heat release rate Qdot
3. notifies the run information observers after each correct()

model states:
UNINITIALIZED -> CONFIGURED (constructed) -> ACTIVE (corrected) -> RECONFIGURED (read) -> ACTIVE
"""

import enum
import warnings
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Union
import numpy as np
from flameclosures.core import (ConfigurationError, Coefficients, RunInfoObserver, RunInfoPrinter, RunInfoWriter,
                                VolScalarField, coefficient)
from .math_utils import ScalarMatrix
from .reaction_rate import ReactionRate, new_reaction_rate


class ModelState(enum.Enum):
    UNINITIALIZED = 0
    CONFIGURED = 1
    ACTIVE = 2
    RECONFIGURED = 3


@dataclass
class CombustionParameters(Coefficients):
    """
    Attributes:
        progressVariable: name of the progress variable in the species set
        runInfo: append the run information to runInfoFile
        runInfoFile: csv file of the run information
        debug: print the run information after each correct()
    """
    progressVariable: str = coefficient(kind='word', default='c')
    runInfo: bool = coefficient(kind='bool', default=False)
    runInfoFile: str = coefficient(kind='word', default='runInfo.csv')
    debug: bool = coefficient(kind='bool', default=False)


class TurbulentPremixedCombustion:
    """turbulent premixed combustion model of a progress variable"""

    def __init__(self, thermo, turbulence, coeffs: Mapping, observers: Optional[Sequence[RunInfoObserver]] = None):
        """
        initialize the combustion model

        Args:
            thermo: mixture thermo of the host solver
            turbulence: turbulence fields of the host solver
            coeffs: combustion coefficient dictionary, with the 'reactionRate' sub-dictionary
            observers: additional run information observers

        Raises:
            ConfigurationError: missing or malformed coefficients
        """
        self.state = ModelState.UNINITIALIZED
        self.thermo = thermo
        self.turbulence = turbulence
        self.mesh = thermo.mesh
        self.params = CombustionParameters.from_dict(coeffs)
        self.c_index = self._progress_variable_index(self.params)
        self.reaction_rate: ReactionRate = new_reaction_rate(self, coeffs.get('reactionRate'))
        self._check_progress_variable(self.c_index, self.reaction_rate.y_index)
        self.observers: List[RunInfoObserver] = list(observers or [])
        self._run_info_observers: List[RunInfoObserver] = []
        self._update_run_info_observers()
        self.state = ModelState.CONFIGURED

    def _progress_variable_index(self, params: CombustionParameters) -> int:
        try:
            return self.thermo.species_index(params.progressVariable)
        except KeyError as e:
            raise ConfigurationError(str(e)) from None

    @staticmethod
    def _check_progress_variable(c_index: int, y_index: int):
        if c_index != y_index:
            raise ConfigurationError(f"the reaction rate tracks species {y_index}, "
                                     f"but the progress variable is species {c_index}")

    def _update_run_info_observers(self):
        for observer in self._run_info_observers:
            if isinstance(observer, RunInfoWriter):
                observer.close()
        self._run_info_observers = []
        if self.params.runInfo:
            self._run_info_observers.append(RunInfoWriter(self.params.runInfoFile))
        if self.params.debug:
            self._run_info_observers.append(RunInfoPrinter())

    def add_observer(self, observer: RunInfoObserver):
        self.observers.append(observer)

    def remove_observer(self, observer: RunInfoObserver):
        self.observers.remove(observer)

    def correct(self):
        """correct the reaction rate and notify the observers"""
        self.reaction_rate.correct()
        self.state = ModelState.ACTIVE
        for observer in self._run_info_observers + self.observers:
            observer.notify(self)

    def R(self, species: Union[int, VolScalarField]) -> Union[VolScalarField, ScalarMatrix]:
        """species source, see ReactionRate.R"""
        return self.reaction_rate.R(species)

    def Qdot(self) -> VolScalarField:
        """heat release rate [W/m3]"""
        return self.reaction_rate.Qdot()

    def read(self, coeffs: Mapping) -> bool:
        """
        reload the coefficients of the combustion model and of its reaction rate

        Returns:
            bool: True if the coefficients were reloaded, on failure the previous set stays active
        """
        try:
            params = CombustionParameters.from_dict(coeffs)
            c_index = self._progress_variable_index(params)
            parsed = self.reaction_rate.parse(coeffs.get('reactionRate'))
            self._check_progress_variable(c_index, parsed[1].y_index)
        except ConfigurationError as e:
            warnings.warn(f"combustion model: coefficients not updated: {e}")
            return False
        self.params = params
        self.c_index = c_index
        self.reaction_rate.apply(parsed)
        self._update_run_info_observers()
        self.state = ModelState.RECONFIGURED
        if self.params.debug:
            self.print_coeffs()
        return True

    def summary(self) -> Dict[str, float]:
        """run information of the last correct()"""
        volumes = self.mesh.volumes
        reaction_rate = self.reaction_rate
        sL = reaction_rate.sL
        fuel = self.thermo.Y[reaction_rate.unburnt.species_mapping['fuel']]
        return {
            'Iteration': self.mesh.runtime.iteration,
            'Time': self.mesh.time(),
            'HeatReleaseRate': float(np.sum(reaction_rate.Qdot().values * volumes)),
            'sLMin': sL.min(),
            'sLMax': sL.max(),
            'cSourceMax': reaction_rate.cSource.max(),
            'BurntVolume': float(np.sum(volumes[fuel.values < reaction_rate.Y_H2_99]))
        }

    def close(self):
        """close the run information files"""
        for observer in self._run_info_observers + self.observers:
            if isinstance(observer, RunInfoWriter):
                observer.close()

    def print_coeffs(self):
        self.params.print_coeffs("combustion model")
        self.reaction_rate.print_coeffs()

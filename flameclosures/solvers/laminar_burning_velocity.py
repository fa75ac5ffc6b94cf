"""
laminar burning velocity module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

main classes:
- LaminarBurningVelocity: abstract laminar burning velocity model, owns the sL field
- Constant: user defined value
- Malet: Malet correlation for lean hydrogen/air/steam mixtures
- Tabulated: interpolation of measured or precomputed data on a (p, TU) table

every model produces a finite, non-negative sL field from the pressure and the unburnt gas temperature, inputs
outside of the fitted range are clamped to the range boundaries.
"""

import abc
import warnings
from dataclasses import dataclass
from typing import Mapping, Optional
import numpy as np
import numba
from scipy.interpolate import RegularGridInterpolator
from flameclosures.core import (ConfigurationError, Coefficients, VolScalarField, coefficient)
from flameclosures.core.dimensions import DIMLESS, DIM_PRESSURE, DIM_TEMPERATURE, DIM_VELOCITY
from flameclosures.solution.mapping_utils import equivalence_ratio
from .math_utils import bound_non_negative


class LaminarBurningVelocity(abc.ABC):
    """abstract laminar burning velocity model"""

    Parameters = Coefficients

    def __init__(self, model_type: str, reaction_rate, coeffs: Mapping):
        """
        initialize the laminar burning velocity model

        Args:
            model_type: model name
            reaction_rate: owning reaction rate model, supplies p and TU (may be None when only evaluate() is used)
            coeffs: coefficient dictionary

        Raises:
            ConfigurationError: missing or malformed coefficients
        """
        self.model_type = model_type
        self.reaction_rate = reaction_rate
        self.params = self.Parameters.from_dict(coeffs)
        self._update_derived()
        self.sL = None
        if reaction_rate is not None:
            self.sL = VolScalarField.uniform("sL", reaction_rate.mesh, 0.0)

    def _update_derived(self):
        """derived constants of the coefficient set"""

    def read(self, coeffs: Mapping) -> bool:
        """reload the coefficients, the previous set stays active on failure"""
        try:
            params = self.Parameters.from_dict(coeffs)
        except ConfigurationError as e:
            warnings.warn(f"laminar burning velocity model {self.model_type}: coefficients not updated: {e}")
            return False
        self.params = params
        self._update_derived()
        return True

    @abc.abstractmethod
    def evaluate(self, p: np.ndarray, TU: np.ndarray) -> np.ndarray:
        """laminar burning velocity [m/s] for the pressure p [Pa] and the unburnt temperature TU [K]"""

    def correct(self):
        """update the sL field from the current pressure and unburnt gas temperature"""
        p = self.reaction_rate.p.values
        TU = self.reaction_rate.TU().values
        self.sL.assign(bound_non_negative(self.evaluate(p, TU), "sL"))

    def print_coeffs(self):
        self.params.print_coeffs(f"laminar burning velocity {self.model_type}")


@dataclass
class ConstantParameters(Coefficients):
    sLaminar0: float = coefficient(DIM_VELOCITY, positive=True)


class Constant(LaminarBurningVelocity):
    """user defined, uniform laminar burning velocity"""

    Parameters = ConstantParameters

    def evaluate(self, p: np.ndarray, TU: np.ndarray) -> np.ndarray:
        return np.full(np.shape(p), self.params.sLaminar0)


@dataclass
class MaletParameters(Coefficients):
    """Malet correlation coefficients

    Attributes:
        X_H2_0: hydrogen mole fraction of the dry hydrogen/air mixture [-]
        X_H2O: steam mole fraction [-]
        pRef: reference pressure [Pa]
        TRef: reference temperature [K]
        ER: equivalence ratio, derived from X_H2_0 when not given [-]
        sLaminar0: undiluted burning velocity at (pRef, TRef), derived from ER when not given [m/s]
        alpha: temperature exponent [-]
        beta: pressure exponent [-]
        pMin, pMax: fitted pressure range [Pa]
        TMin, TMax: fitted unburnt temperature range [K]
    """
    X_H2_0: float = coefficient(DIMLESS, positive=True)
    X_H2O: float = coefficient(DIMLESS, non_negative=True)
    pRef: float = coefficient(DIM_PRESSURE, positive=True)
    TRef: float = coefficient(DIM_TEMPERATURE, positive=True)
    ER: Optional[float] = coefficient(DIMLESS, default=None, positive=True)
    sLaminar0: Optional[float] = coefficient(DIM_VELOCITY, default=None, positive=True)
    alpha: float = coefficient(DIMLESS, default=1.75)
    beta: float = coefficient(DIMLESS, default=-0.2)
    pMin: float = coefficient(DIM_PRESSURE, default=0.5e5, positive=True)
    pMax: float = coefficient(DIM_PRESSURE, default=1.0e6, positive=True)
    TMin: float = coefficient(DIM_TEMPERATURE, default=250.0, positive=True)
    TMax: float = coefficient(DIM_TEMPERATURE, default=900.0, positive=True)

    def validate(self):
        if self.X_H2_0 >= 1.0:
            raise ConfigurationError(f"X_H2_0 must be less than 1, got {self.X_H2_0}")
        if self.X_H2O >= 1.0:
            raise ConfigurationError(f"X_H2O must be less than 1, got {self.X_H2O}")
        if not self.pMin <= self.pRef <= self.pMax:
            raise ConfigurationError(f"pRef {self.pRef} is outside of the fitted range [{self.pMin}, {self.pMax}]")
        if not self.TMin <= self.TRef <= self.TMax:
            raise ConfigurationError(f"TRef {self.TRef} is outside of the fitted range [{self.TMin}, {self.TMax}]")


# fitted range of the Malet correlation
MALET_ER_RANGE = (0.3, 1.0)
MALET_MAX_STEAM = 0.4


def malet_reference_velocity(ER: float) -> float:
    """undiluted laminar burning velocity of a lean hydrogen/air mixture at the reference state [m/s]"""
    phi = min(max(ER, MALET_ER_RANGE[0]), MALET_ER_RANGE[1])
    return max(1.44 * phi * phi + 1.07 * phi - 0.29, 0.0)


@numba.njit(cache=True)
def _malet_kernel(p, TU, sL0, alpha, beta, dilution, pRef, TRef, pMin, pMax, TMin, TMax):
    n = p.shape[0]
    result = np.empty(n)
    for i in range(n):
        p_i = min(max(p[i], pMin), pMax)
        T_i = min(max(TU[i], TMin), TMax)
        result[i] = sL0 * (T_i / TRef) ** alpha * (p_i / pRef) ** beta * dilution
    return result


class Malet(LaminarBurningVelocity):
    """Malet correlation of laminar burning velocity

    sL = sL0*(TU/TRef)^alpha*(p/pRef)^beta*(1 - X_H2O)^4, the steam fraction is limited to 0.4
    """

    Parameters = MaletParameters

    def _update_derived(self):
        params = self.params
        ER = params.ER if params.ER is not None else equivalence_ratio(params.X_H2_0)
        self.ER = ER
        self.sL0 = params.sLaminar0 if params.sLaminar0 is not None else malet_reference_velocity(ER)
        self.dilution = (1.0 - min(params.X_H2O, MALET_MAX_STEAM)) ** 4

    def evaluate(self, p: np.ndarray, TU: np.ndarray) -> np.ndarray:
        params = self.params
        p = np.ascontiguousarray(np.atleast_1d(p), dtype=np.float64)
        TU = np.array(np.broadcast_to(TU, p.shape), dtype=np.float64)
        return _malet_kernel(p, TU, float(self.sL0), params.alpha, params.beta, float(self.dilution),
                             params.pRef, params.TRef, params.pMin, params.pMax, params.TMin, params.TMax)


@dataclass
class TabulatedParameters(Coefficients):
    """table of laminar burning velocity: sL[i, j] at pressure p[i] and unburnt temperature TU[j]"""
    p: list = coefficient(DIM_PRESSURE, kind='table')
    TU: list = coefficient(DIM_TEMPERATURE, kind='table')
    sL: list = coefficient(DIM_VELOCITY, kind='table')

    def validate(self):
        try:
            p = np.asarray(self.p, dtype=float)
            TU = np.asarray(self.TU, dtype=float)
            sL = np.asarray(self.sL, dtype=float)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"malformed burning velocity table: {e}") from None
        if p.ndim != 1 or TU.ndim != 1 or p.size < 2 or TU.size < 2:
            raise ConfigurationError("the table axes p and TU need at least two values each")
        if np.any(np.diff(p) <= 0) or np.any(np.diff(TU) <= 0):
            raise ConfigurationError("the table axes p and TU must be strictly increasing")
        if sL.shape != (p.size, TU.size):
            raise ConfigurationError(f"table sL must have shape {(p.size, TU.size)}, got {sL.shape}")
        if not np.all(np.isfinite(sL)) or np.any(sL < 0):
            raise ConfigurationError("table sL must be finite and non-negative")


class Tabulated(LaminarBurningVelocity):
    """data driven laminar burning velocity, bilinear interpolation without extrapolation"""

    Parameters = TabulatedParameters

    def _update_derived(self):
        self.p_axis = np.asarray(self.params.p, dtype=float)
        self.T_axis = np.asarray(self.params.TU, dtype=float)
        self.interpolator = RegularGridInterpolator((self.p_axis, self.T_axis),
                                                    np.asarray(self.params.sL, dtype=float))

    def evaluate(self, p: np.ndarray, TU: np.ndarray) -> np.ndarray:
        p = np.clip(np.atleast_1d(np.asarray(p, dtype=float)), self.p_axis[0], self.p_axis[-1])
        TU = np.clip(np.broadcast_to(np.asarray(TU, dtype=float), p.shape), self.T_axis[0], self.T_axis[-1])
        return np.maximum(self.interpolator(np.column_stack([p.ravel(), TU.ravel()])).reshape(p.shape), 0.0)


def new_laminar_burning_velocity(reaction_rate, coeffs: Mapping) -> LaminarBurningVelocity:
    """select the laminar burning velocity model named by coeffs['model']"""
    models = {
        'constant': Constant,
        'Malet': Malet,
        'tabulated': Tabulated
    }
    if not isinstance(coeffs, Mapping) or 'model' not in coeffs:
        raise ConfigurationError("missing keyword 'model' in laminarBurningVelocity coefficients")
    model_type = coeffs['model']
    if model_type not in models:
        raise ConfigurationError(f"unknown laminar burning velocity model '{model_type}', valid: {list(models)}")
    return models[model_type](model_type, reaction_rate, coeffs)

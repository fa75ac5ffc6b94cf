"""
turbulent burning velocity module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

main classes:
- TurbulentBurningVelocity: abstract turbulent burning velocity correlation of the flame speed closures
- Zimont: St = A*u'^(3/4)*sL^(1/2)*alpha_u^(-1/4)*lt^(1/4)
- Bradley: St = 0.88*u'*(K*Le)^(-0.3)
- Bray: St = 0.875*u'*K^(-0.392)

K = 0.157*(u'/sL)^2*Re_t^(-1/2) is the Karlovitz number, lt = CD*u'^3/epsilon the integral length scale and
Re_t = u'*lt/nu_u the turbulent Reynolds number. The correlations never return less than the laminar burning velocity.
"""

import abc
import warnings
from dataclasses import dataclass
from typing import Mapping
import numpy as np
from flameclosures.core import ConfigurationError, Coefficients, SMALL, coefficient
from flameclosures.core.dimensions import DIMLESS


@dataclass
class TurbulentBurningVelocityParameters(Coefficients):
    CD: float = coefficient(DIMLESS, default=0.37, positive=True)


class TurbulentBurningVelocity(abc.ABC):
    """abstract turbulent burning velocity correlation"""

    Parameters = TurbulentBurningVelocityParameters

    def __init__(self, model_type: str, coeffs: Mapping):
        self.model_type = model_type
        self.params = self.Parameters.from_dict(coeffs)

    def read(self, coeffs: Mapping) -> bool:
        try:
            params = self.Parameters.from_dict(coeffs)
        except ConfigurationError as e:
            warnings.warn(f"turbulent burning velocity model {self.model_type}: coefficients not updated: {e}")
            return False
        self.params = params
        return True

    def integral_length_scale(self, u_prime: np.ndarray, epsilon: np.ndarray) -> np.ndarray:
        """lt = CD*u'^3/epsilon [m]"""
        return self.params.CD * u_prime**3 / np.maximum(epsilon, SMALL)

    def karlovitz(self, sL: np.ndarray, u_prime: np.ndarray, epsilon: np.ndarray, nu_u: np.ndarray) -> np.ndarray:
        """Karlovitz stretch factor K = 0.157*(u'/sL)^2*Re_t^(-1/2)"""
        lt = self.integral_length_scale(u_prime, epsilon)
        Re_t = u_prime * lt / np.maximum(nu_u, SMALL)
        return 0.157 * (u_prime / np.maximum(sL, SMALL))**2 / np.sqrt(np.maximum(Re_t, SMALL))

    def St(self, sL: np.ndarray, u_prime: np.ndarray, epsilon: np.ndarray, nu_u: np.ndarray) -> np.ndarray:
        """turbulent burning velocity [m/s], bounded below by sL"""
        return np.maximum(self._correlation(sL, u_prime, epsilon, nu_u), sL)

    @abc.abstractmethod
    def _correlation(self, sL, u_prime, epsilon, nu_u) -> np.ndarray:
        pass

    def print_coeffs(self):
        self.params.print_coeffs(f"turbulent burning velocity {self.model_type}")


@dataclass
class ZimontParameters(TurbulentBurningVelocityParameters):
    A: float = coefficient(DIMLESS, default=0.52, positive=True)
    Pr: float = coefficient(DIMLESS, default=0.7, positive=True)


class Zimont(TurbulentBurningVelocity):
    """Zimont correlation, the molecular heat diffusivity of the unburnt gas is nu_u/Pr"""

    Parameters = ZimontParameters

    def _correlation(self, sL, u_prime, epsilon, nu_u):
        lt = self.integral_length_scale(u_prime, epsilon)
        alpha_u = np.maximum(nu_u / self.params.Pr, SMALL)
        return self.params.A * u_prime**0.75 * np.sqrt(np.maximum(sL, 0.0)) * alpha_u**-0.25 * lt**0.25


@dataclass
class BradleyParameters(TurbulentBurningVelocityParameters):
    Le: float = coefficient(DIMLESS, default=1.0, positive=True)


class Bradley(TurbulentBurningVelocity):
    Parameters = BradleyParameters

    def _correlation(self, sL, u_prime, epsilon, nu_u):
        K = self.karlovitz(sL, u_prime, epsilon, nu_u)
        return 0.88 * u_prime * np.maximum(K * self.params.Le, SMALL)**-0.3


class Bray(TurbulentBurningVelocity):
    def _correlation(self, sL, u_prime, epsilon, nu_u):
        K = self.karlovitz(sL, u_prime, epsilon, nu_u)
        return 0.875 * u_prime * np.maximum(K, SMALL)**-0.392


def new_turbulent_burning_velocity(coeffs: Mapping) -> TurbulentBurningVelocity:
    """select the turbulent burning velocity correlation named by coeffs['model']"""
    models = {
        'Zimont': Zimont,
        'Bradley': Bradley,
        'Bray': Bray
    }
    if not isinstance(coeffs, Mapping) or 'model' not in coeffs:
        raise ConfigurationError("missing keyword 'model' in turbulentBurningVelocity coefficients")
    model_type = coeffs['model']
    if model_type not in models:
        raise ConfigurationError(f"unknown turbulent burning velocity model '{model_type}', valid: {list(models)}")
    return models[model_type](model_type, coeffs)

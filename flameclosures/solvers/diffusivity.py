"""
thermophysical transport module - effective diffusivity closures of the energy and species equations

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

main classes:
- UnityLewisEddyDiffusivity: heat and species diffuse alike, alphaEff = alpha_he + rho*nut/Prt
- NonUnityLewisDiffusivity: effective species diffusivity with a laminar Lewis number and an eddy contribution
  that develops with the flame time (ETFC diffusivity)

    DEff = rho*(alpha_u/Le + nut/Sct*(1 - exp(-1/max(1.5*nut/(Sct*k*t), SMALL))))

  the heat flux carries the enthalpy transported by the species diffusion flux.

q() is the heat flux density on the faces [W/m2]. divq(he) is the volume integrated matrix of div(q) acting on the
sensible enthalpy he, it evaluates to the divergence of q() for the current he.
"""

import warnings
from dataclasses import dataclass
from typing import Mapping, Optional, Union
import numpy as np
import numba
from flameclosures.core import (ConfigurationError, Coefficients, SMALL, SurfaceScalarField, VolScalarField,
                                coefficient)
from flameclosures.core.dimensions import DIMLESS, DIM_KINEMATIC_VISCOSITY
from .math_utils import (ScalarMatrix, div, fvm_laplacian, fvm_laplacian_correction, fvm_su, interpolate,
                         laplacian, mag_sf, sn_grad)


@dataclass
class UnityLewisEddyDiffusivityParameters(Coefficients):
    Prt: float = coefficient(DIMLESS, default=0.85, positive=True)


class UnityLewisEddyDiffusivity:
    """eddy diffusivity model for unity Lewis number"""

    Parameters = UnityLewisEddyDiffusivityParameters

    def __init__(self, model_type: str, thermo, turbulence, coeffs: Mapping):
        """
        initialize the thermophysical transport model

        Args:
            model_type: model name
            thermo: mixture thermo, supplies T, Y, rho, cp, kappa and the species enthalpies
            turbulence: turbulence fields, supplies nut and k
            coeffs: coefficient dictionary

        Raises:
            ConfigurationError: missing or malformed coefficients
        """
        self.model_type = model_type
        self.thermo = thermo
        self.turbulence = turbulence
        self.mesh = thermo.mesh
        self.params = self.Parameters.from_dict(coeffs)

    def read(self, coeffs: Mapping) -> bool:
        """reload the coefficients, the previous set stays active on failure"""
        try:
            params = self.Parameters.from_dict(coeffs)
        except ConfigurationError as e:
            warnings.warn(f"thermophysical transport model {self.model_type}: coefficients not updated: {e}")
            return False
        self.params = params
        return True

    def alphat(self) -> VolScalarField:
        """turbulent thermal diffusivity rho*nut/Prt [kg/m/s]"""
        result = self.thermo.rho() * self.turbulence.nut / self.params.Prt
        result.name = "alphat"
        return result

    def alphaEff(self) -> VolScalarField:
        """effective thermal diffusivity of enthalpy [kg/m/s]"""
        result = self.thermo.alpha_he() + self.alphat()
        result.name = "alphaEff"
        return result

    def kappaEff(self) -> VolScalarField:
        """effective thermal conductivity [W/m/K]"""
        result = self.thermo.kappa() + self.thermo.cp() * self.alphat()
        result.name = "kappaEff"
        return result

    def DEff(self, Yi: Optional[Union[int, VolScalarField]] = None, patch: Optional[str] = None):
        """effective mass diffusivity [kg/m/s], equal to alphaEff"""
        alpha_eff = self.alphaEff()
        if patch is not None:
            return alpha_eff.patch_value(patch)
        alpha_eff.name = "DEff"
        return alpha_eff

    def q(self) -> SurfaceScalarField:
        """heat flux density [W/m2]"""
        he = self.thermo.he()
        result = -(interpolate(self.alphaEff()) * sn_grad(he))
        result.name = "q"
        return result

    def divq(self, he: VolScalarField) -> ScalarMatrix:
        """divergence of the heat flux, implicit in he"""
        return -fvm_laplacian(self.alphaEff(), he)

    def print_coeffs(self):
        self.params.print_coeffs(f"thermophysical transport {self.model_type}")


@dataclass
class NonUnityLewisDiffusivityParameters(Coefficients):
    """
    Attributes:
        Sct: turbulent Schmidt number [-]
        alpha_u: molecular diffusivity of the unburnt mixture [m2/s]
        Le: laminar Lewis number [-]
        Prt: turbulent Prandtl number of the heat flux [-]
    """
    Sct: float = coefficient(DIMLESS, positive=True)
    alpha_u: float = coefficient(DIM_KINEMATIC_VISCOSITY, positive=True)
    Le: float = coefficient(DIMLESS, positive=True)
    Prt: float = coefficient(DIMLESS, default=0.85, positive=True)


@numba.njit(cache=True)
def non_unity_lewis_diffusivity(rho, nut, k, Sct, alpha_u, Le, time, small):
    """effective mass diffusivity, the eddy part vanishes smoothly with the turbulence"""
    n = rho.shape[0]
    result = np.empty(n)
    molecular = alpha_u / Le
    for i in range(n):
        nut_i = max(nut[i], 0.0)
        ratio = 1.5 * nut_i / max(Sct * max(k[i], 0.0) * time, small)
        development = 1.0 - np.exp(-1.0 / max(ratio, small))
        result[i] = rho[i] * (molecular + nut_i / Sct * development)
    return result


class NonUnityLewisDiffusivity(UnityLewisEddyDiffusivity):
    """non-unity Lewis number eddy diffusivity model with the ETFC development of the eddy diffusivity"""

    Parameters = NonUnityLewisDiffusivityParameters

    def _DEff_values(self, rho, nut, k) -> np.ndarray:
        params = self.params
        return non_unity_lewis_diffusivity(np.ascontiguousarray(rho, dtype=np.float64),
                                           np.ascontiguousarray(nut, dtype=np.float64),
                                           np.ascontiguousarray(k, dtype=np.float64),
                                           params.Sct, params.alpha_u, params.Le, float(self.mesh.time()), SMALL)

    def DEff(self, Yi: Optional[Union[int, VolScalarField]] = None, patch: Optional[str] = None):
        """effective mass diffusivity [kg/m/s], the same for every species"""
        turbulence = self.turbulence
        if patch is not None:
            return self._DEff_values(self.thermo.rho(patch), turbulence.nut_patch(patch), turbulence.k_patch(patch))
        rho = self.thermo.rho()
        values = self._DEff_values(rho.values, turbulence.nut.values, turbulence.k.values)
        boundary = self._DEff_values(rho.boundary, turbulence.nut.boundary, turbulence.k.boundary)
        return VolScalarField("DEff", self.mesh, values, ('calculated', 'calculated'), boundary)

    def _species_enthalpy_gradient(self) -> np.ndarray:
        """sum over the species of interpolate(hs_i)*snGrad(Y_i) on the faces [J/kg/m]"""
        thermo = self.thermo
        result = np.zeros(self.mesh.face_count)
        for i, Yi in enumerate(thermo.Y):
            result += interpolate(thermo.hsi(i)).values * sn_grad(Yi).values
        return result

    def q(self) -> SurfaceScalarField:
        """heat flux density, conduction and enthalpy transport by species diffusion [W/m2]"""
        conduction = interpolate(self.kappaEff()) * sn_grad(self.thermo.T)
        species = interpolate(self.DEff()) * self._species_enthalpy_gradient()
        result = -(conduction + species)
        result.name = "q"
        return result

    def divq(self, he: VolScalarField) -> ScalarMatrix:
        """divergence of the heat flux, the enthalpy diffusion is corrected implicitly"""
        species_flux = SurfaceScalarField(
            "DEffhGradY", self.mesh,
            interpolate(self.DEff()).values * self._species_enthalpy_gradient() * mag_sf(self.mesh).values
        )
        return (fvm_su(-laplacian(self.kappaEff(), self.thermo.T), he)
                - fvm_laplacian_correction(self.alphaEff(), he)
                - fvm_su(div(species_flux), he))


def new_thermophysical_transport(coeffs: Mapping, thermo, turbulence) -> UnityLewisEddyDiffusivity:
    """select the thermophysical transport model named by coeffs['model']"""
    models = {
        'unityLewisEddyDiffusivity': UnityLewisEddyDiffusivity,
        'nonUnityLewisDiffusivity': NonUnityLewisDiffusivity
    }
    if not isinstance(coeffs, Mapping) or 'model' not in coeffs:
        raise ConfigurationError("missing keyword 'model' in thermophysicalTransport coefficients")
    model_type = coeffs['model']
    if model_type not in models:
        raise ConfigurationError(f"unknown thermophysical transport model '{model_type}', valid: {list(models)}")
    return models[model_type](model_type, thermo, turbulence, coeffs)

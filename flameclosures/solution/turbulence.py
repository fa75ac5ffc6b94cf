"""
turbulence fields module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

This module provides TurbulenceFields, the read-only turbulence quantities supplied by the host turbulence model:
eddy viscosity nut [m2/s], turbulent kinetic energy k [m2/s2] and, optionally, its dissipation rate epsilon [m2/s3].
For LES, k is the sub-grid scale kinetic energy.
"""

from dataclasses import dataclass
from typing import Optional
import numpy as np
from flameclosures.core import Mesh, VolScalarField, SMALL

C_MU = 0.09


@dataclass
class TurbulenceFields:
    """turbulence quantities on the mesh

    Attributes:
        nut: eddy viscosity [m2/s]
        k: turbulent kinetic energy [m2/s2]
        epsilon: dissipation rate [m2/s3], estimated from nut and k when not supplied
        les: the fields are sub-grid scale quantities of a LES
    """
    nut: VolScalarField
    k: VolScalarField
    epsilon: Optional[VolScalarField] = None
    les: bool = False

    @classmethod
    def uniform(cls, mesh: Mesh, nut: float, k: float, les: bool = False) -> 'TurbulenceFields':
        return cls(nut=VolScalarField.uniform("nut", mesh, nut), k=VolScalarField.uniform("k", mesh, k), les=les)

    @property
    def mesh(self) -> Mesh:
        return self.nut.mesh

    def nut_patch(self, patch: str) -> np.ndarray:
        return self.nut.patch_value(patch)

    def k_patch(self, patch: str) -> np.ndarray:
        return self.k.patch_value(patch)

    def dissipation(self) -> VolScalarField:
        """epsilon, or C_mu*k^2/nut when the turbulence model does not supply it"""
        if self.epsilon is not None:
            return self.epsilon
        values = C_MU * self.k.values**2 / np.maximum(self.nut.values, SMALL)
        return VolScalarField("epsilon", self.mesh, values)

    def u_prime(self) -> np.ndarray:
        """turbulent velocity fluctuation sqrt(2k/3) [m/s]"""
        return np.sqrt(2.0 / 3.0 * np.maximum(self.k.values, 0.0))

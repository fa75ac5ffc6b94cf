"""
solution module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

This module provides the state supplied by the host solver, including:
1. mapping_utils: species of the global hydrogen reaction and the unburnt mixture composition
2. thermo: thermophysical state of the gas evaluated by cantera
3. turbulence: turbulence quantities
"""
from .mapping_utils import init_species_mapping, unburnt_mole_fractions, equivalence_ratio
from .thermo import MixtureThermo
from .turbulence import TurbulenceFields

__all__ = ['init_species_mapping', 'unburnt_mole_fractions', 'equivalence_ratio',
           'MixtureThermo', 'TurbulenceFields']

"""
core module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

This module provides the core functions of the combustion closure framework, including:
1. time management (runtime)
2. one-dimensional finite volume mesh (grid)
3. cell and face fields (fields)
4. coefficient dictionaries and dimensions (dimensions)
5. run information output (data_manager, logger)
"""

from .runtime import Runtime
from .grid import GridParameters, Mesh, PATCH_NAMES
from .fields import VolScalarField, SurfaceScalarField
from .dimensions import (ConfigurationError, Coefficients, DimensionSet, coefficient, dimensions_of,
                         SMALL)
from .data_manager import RunInfoObserver, RunInfoWriter, RunInfoPrinter
from .logger import TeeLogger

__all__ = [
    'Runtime',
    'GridParameters', 'Mesh', 'PATCH_NAMES',
    'VolScalarField', 'SurfaceScalarField',
    'ConfigurationError', 'Coefficients', 'DimensionSet', 'coefficient', 'dimensions_of', 'SMALL',
    'RunInfoObserver', 'RunInfoWriter', 'RunInfoPrinter',
    'TeeLogger'
]

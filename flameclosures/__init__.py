"""
flameclosures - turbulent premixed hydrogen combustion closure framework

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

This module provides the combustion closure models and a one-dimensional host to run them, including:
1. core function module (core)
2. host solver state: thermo and turbulence (solution)
3. closure models and finite volume operators (solvers)
"""

from . import core
from . import solution
from . import solvers
from .simulation import Simulation, SimulationParameters

__version__ = "0.1.0"

__all__ = ['core', 'solution', 'solvers', 'Simulation', 'SimulationParameters']

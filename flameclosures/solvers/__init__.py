"""
solver module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

This module provides the combustion closures and the finite volume operators they are assembled with, including:
1. laminar burning velocity models (constant, Malet, tabulated)
2. turbulent burning velocity correlations (Zimont, Bradley, Bray)
3. reaction rate models (TFC, ETFC, FSD)
4. combustion model (TurbulentPremixedCombustion)
5. thermophysical transport models (unity and non-unity Lewis number diffusivity)
"""
from .math_utils import ScalarMatrix
from .laminar_burning_velocity import (LaminarBurningVelocity, Constant, Malet, Tabulated,
                                       new_laminar_burning_velocity)
from .turbulent_burning_velocity import TurbulentBurningVelocity, Zimont, Bradley, Bray, new_turbulent_burning_velocity
from .reaction_rate import ReactionRate, TFC, ETFC, FSD, new_reaction_rate
from .combustion import ModelState, TurbulentPremixedCombustion
from .diffusivity import UnityLewisEddyDiffusivity, NonUnityLewisDiffusivity, new_thermophysical_transport

__all__ = [
    'ScalarMatrix',
    'LaminarBurningVelocity', 'Constant', 'Malet', 'Tabulated', 'new_laminar_burning_velocity',
    'TurbulentBurningVelocity', 'Zimont', 'Bradley', 'Bray', 'new_turbulent_burning_velocity',
    'ReactionRate', 'TFC', 'ETFC', 'FSD', 'new_reaction_rate',
    'ModelState', 'TurbulentPremixedCombustion',
    'UnityLewisEddyDiffusivity', 'NonUnityLewisDiffusivity', 'new_thermophysical_transport'
]

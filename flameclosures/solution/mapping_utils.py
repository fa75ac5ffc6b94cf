"""
mapping utils module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.


This module provides the mapping between the species of the global hydrogen oxidation reaction
H2 + 1/2 O2 -> H2O and the species of the gas phase mechanism, and the unburnt hydrogen/air/steam composition.
"""
from typing import Dict, Sequence

# species of the global reaction, the values are the names used in the gas phase mechanism
REACTION_SPECIES_NAMES = {
    "fuel": "H2",
    "oxidizer": "O2",
    "product": "H2O",
    "inert": "N2"
}

# composition of dry air (mole fraction)
AIR_COMPOSITION = {"O2": 0.21, "N2": 0.79}

# stoichiometric hydrogen/air mole ratio
STOICHIOMETRIC_H2_AIR_RATIO = 2.0 * AIR_COMPOSITION["O2"]


def init_species_mapping(gas_species_names: Sequence[str]) -> Dict[str, int]:
    """
    initialize the mapping between the global reaction species and the gas phase species

    Args:
        gas_species_names: gas phase species name list

    Returns:
        dict: key is the role in the global reaction, value is the index of the gas phase species

    Raises:
        KeyError: a species of the global reaction is not part of the mechanism
    """
    gas_species_names = list(gas_species_names)
    species_mapping = {}
    for role, name in REACTION_SPECIES_NAMES.items():
        if name not in gas_species_names:
            raise KeyError(f"species {name} ({role}) is not found in the gas phase mechanism")
        species_mapping[role] = gas_species_names.index(name)
    return species_mapping


def unburnt_mole_fractions(X_H2_0: float, X_H2O: float = 0.0) -> Dict[str, float]:
    """
    composition of the unburnt hydrogen/air/steam mixture

    Args:
        X_H2_0: hydrogen mole fraction of the dry hydrogen/air mixture
        X_H2O: steam mole fraction of the mixture

    Returns:
        dict: mole fraction of H2, O2, N2 and H2O
    """
    if not 0.0 < X_H2_0 < 1.0:
        raise ValueError(f"hydrogen mole fraction must be in (0, 1), got {X_H2_0}")
    if not 0.0 <= X_H2O < 1.0:
        raise ValueError(f"steam mole fraction must be in [0, 1), got {X_H2O}")
    dry = 1.0 - X_H2O
    composition = {"H2": X_H2_0 * dry, "H2O": X_H2O}
    for name, fraction in AIR_COMPOSITION.items():
        composition[name] = fraction * (1.0 - X_H2_0) * dry
    return composition


def equivalence_ratio(X_H2_0: float) -> float:
    """equivalence ratio of a dry hydrogen/air mixture"""
    return X_H2_0 / (STOICHIOMETRIC_H2_AIR_RATIO * (1.0 - X_H2_0))

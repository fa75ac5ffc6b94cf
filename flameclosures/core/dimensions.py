"""
coefficient and dimension module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

This module provides the coefficient dictionary handling shared by all closure models, including:
1. DimensionSet: physical dimension of a coefficient [mass, length, time, temperature, moles]
2. coefficient: dataclass field declaring a dictionary keyword together with its dimension
3. Coefficients: dataclass mixin building a validated parameter set from a coefficient dictionary
4. ConfigurationError: raised for missing or malformed dictionary entries

The dimensions are a static contract of each parameter class (queried with dimensions_of), they are not
checked during the calculation.
"""

import math
from dataclasses import MISSING, dataclass, field, fields
from typing import Any, Dict, Mapping, NamedTuple


SMALL = 1e-15   # floor used for denominators and tie-break conditioning


class ConfigurationError(ValueError):
    """missing or malformed coefficient dictionary entry"""


class DimensionSet(NamedTuple):
    """physical dimension exponents [kg, m, s, K, mol]"""
    mass: int = 0
    length: int = 0
    time: int = 0
    temperature: int = 0
    moles: int = 0

    def __mul__(self, other: 'DimensionSet') -> 'DimensionSet':
        return DimensionSet(*(a + b for a, b in zip(self, other)))

    def __truediv__(self, other: 'DimensionSet') -> 'DimensionSet':
        return DimensionSet(*(a - b for a, b in zip(self, other)))

    def __repr__(self):
        return f"[{' '.join(str(e) for e in self)}]"


DIMLESS = DimensionSet()
DIM_MASS = DimensionSet(mass=1)
DIM_LENGTH = DimensionSet(length=1)
DIM_TIME = DimensionSet(time=1)
DIM_TEMPERATURE = DimensionSet(temperature=1)
DIM_MOLES = DimensionSet(moles=1)
DIM_VELOCITY = DIM_LENGTH / DIM_TIME
DIM_AREA = DIM_LENGTH * DIM_LENGTH
DIM_VOLUME = DIM_AREA * DIM_LENGTH
DIM_DENSITY = DIM_MASS / DIM_VOLUME
DIM_PRESSURE = DIM_MASS / DIM_LENGTH / DIM_TIME / DIM_TIME
DIM_ENERGY = DIM_MASS * DIM_AREA / DIM_TIME / DIM_TIME
DIM_KINEMATIC_VISCOSITY = DIM_AREA / DIM_TIME


def coefficient(dimension: DimensionSet = DIMLESS, default: Any = MISSING, key: str = None,
                kind: str = 'scalar', positive: bool = False, non_negative: bool = False):
    """declare a coefficient dictionary entry as a dataclass field

    Args:
        dimension: physical dimension of the coefficient
        default: default value, entries without a default are required
        key: dictionary keyword, defaults to the field name
        kind: 'scalar' (float), 'label' (int or species name), 'word' (str), 'bool' or 'table' (passed through)
        positive: the value must be strictly positive
        non_negative: the value must not be negative
    """
    metadata = {'dimension': dimension, 'key': key, 'kind': kind,
                'positive': positive, 'non_negative': non_negative}
    return field(default=default, metadata=metadata)


def dimensions_of(params_class) -> Dict[str, DimensionSet]:
    """return the declared dimension of every coefficient of a parameter class"""
    return {f.metadata.get('key') or f.name: f.metadata['dimension']
            for f in fields(params_class) if 'dimension' in f.metadata}


def _convert(name: str, value: Any, meta: Mapping) -> Any:
    kind = meta['kind']
    if kind == 'scalar':
        if isinstance(value, bool):
            raise ConfigurationError(f"keyword '{name}' expects a scalar, got {value!r}")
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"keyword '{name}' expects a scalar, got {value!r}") from None
        if not math.isfinite(value):
            raise ConfigurationError(f"keyword '{name}' is not finite: {value}")
        if meta['positive'] and value <= 0.0:
            raise ConfigurationError(f"keyword '{name}' must be positive, got {value}")
        if meta['non_negative'] and value < 0.0:
            raise ConfigurationError(f"keyword '{name}' must not be negative, got {value}")
        return value
    if kind == 'label':
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ConfigurationError(f"keyword '{name}' expects an index or a species name, got {value!r}")
        return value
    if kind == 'word':
        if not isinstance(value, str):
            raise ConfigurationError(f"keyword '{name}' expects a word, got {value!r}")
        return value
    if kind == 'bool':
        if not isinstance(value, bool):
            raise ConfigurationError(f"keyword '{name}' expects true/false, got {value!r}")
        return value
    return value


@dataclass
class Coefficients:
    """dataclass mixin: build a validated parameter set from a coefficient dictionary"""

    @classmethod
    def from_dict(cls, coeffs: Mapping):
        """parse the recognized keywords of coeffs

        Raises:
            ConfigurationError: a required keyword is missing or a value is malformed
        """
        if not isinstance(coeffs, Mapping):
            raise ConfigurationError(f"{cls.__name__} expects a dictionary, got {type(coeffs).__name__}")
        kwargs = {}
        for f in fields(cls):
            if not f.init or 'kind' not in f.metadata:
                continue
            key = f.metadata['key'] or f.name
            if key in coeffs:
                kwargs[f.name] = _convert(key, coeffs[key], f.metadata)
            elif f.default is MISSING and f.default_factory is MISSING:
                raise ConfigurationError(f"missing keyword '{key}' in {cls.__name__} coefficients")
        params = cls(**kwargs)
        params.validate()
        return params

    def validate(self):
        """consistency checks between coefficients, overridden by the parameter classes"""

    def print_coeffs(self, title: str):
        """print the coefficient set in the console banner format"""
        print(f"\n=== {title} coefficients ===")
        for f in fields(self):
            if 'kind' not in f.metadata:
                continue
            value = getattr(self, f.name)
            if f.metadata['kind'] == 'table':
                continue
            key = f.metadata['key'] or f.name
            print(f"    {key}: {value} {f.metadata['dimension']!r}")
        print("="*50+"\n")

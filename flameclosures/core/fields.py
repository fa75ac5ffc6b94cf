"""
field module - cell and face centred scalar fields on the one-dimensional mesh

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

main classes:
- VolScalarField: cell centred values with boundary conditions on the 'left' and 'right' patches
- SurfaceScalarField: face centred values (boundary faces included)

boundary condition types:
- zeroGradient: the boundary value equals the value of the adjacent cell
- fixedValue: the boundary value is prescribed
- calculated: the boundary value is the result of an operation on other fields
"""

import operator
import numpy as np
from typing import Optional, Sequence, Union
from .grid import Mesh, PATCH_NAMES

BOUNDARY_TYPES = ('zeroGradient', 'fixedValue', 'calculated')


class VolScalarField:
    """cell centred scalar field"""
    __slots__ = ('name', 'mesh', 'values', 'boundary_types', '_boundary_values')
    __array_ufunc__ = None

    def __init__(self, name: str, mesh: Mesh, values: Union[float, np.ndarray],
                 boundary_types: Sequence[str] = ('zeroGradient', 'zeroGradient'),
                 boundary_values: Optional[Sequence[float]] = None):
        """initialize the field

        Args:
            name: field name
            mesh: mesh object
            values: cell values, a scalar is broadcast to all cells
            boundary_types: boundary condition type of the left and right patch
            boundary_values: boundary values used by the fixedValue and calculated patches
        """
        values = np.asarray(values, dtype=float)
        if values.ndim == 0:
            values = np.full(mesh.cell_count, float(values))
        if values.shape != (mesh.cell_count,):
            raise ValueError(f"field '{name}' expects {mesh.cell_count} cell values, got shape {values.shape}")
        boundary_types = tuple(boundary_types)
        if len(boundary_types) != 2 or any(t not in BOUNDARY_TYPES for t in boundary_types):
            raise ValueError(f"invalid boundary types {boundary_types}, valid: {BOUNDARY_TYPES}")
        self.name = name
        self.mesh = mesh
        self.values = values.copy()
        self.boundary_types = boundary_types
        if boundary_values is None:
            boundary_values = (values[0], values[-1])
        self._boundary_values = np.array(boundary_values, dtype=float)

    @classmethod
    def uniform(cls, name: str, mesh: Mesh, value: float, **kwargs) -> 'VolScalarField':
        return cls(name, mesh, np.full(mesh.cell_count, float(value)), **kwargs)

    @property
    def boundary(self) -> np.ndarray:
        """boundary face values [left, right]"""
        result = self._boundary_values.copy()
        if self.boundary_types[0] == 'zeroGradient':
            result[0] = self.values[0]
        if self.boundary_types[1] == 'zeroGradient':
            result[1] = self.values[-1]
        return result

    def patch_value(self, patch: str) -> np.ndarray:
        """boundary value of a patch as a one-face array"""
        return self.boundary[PATCH_NAMES.index(patch):PATCH_NAMES.index(patch) + 1]

    def set_boundary_value(self, patch: str, value: float):
        self._boundary_values[PATCH_NAMES.index(patch)] = float(value)

    def with_values(self, values: np.ndarray, name: Optional[str] = None) -> 'VolScalarField':
        """copy of the field with new cell values and the same boundary conditions"""
        return VolScalarField(name or self.name, self.mesh, values, self.boundary_types, self._boundary_values)

    def copy(self, name: Optional[str] = None) -> 'VolScalarField':
        return self.with_values(self.values, name)

    def assign(self, values: np.ndarray):
        """overwrite the cell values in place"""
        self.values[:] = values

    def min(self) -> float:
        return float(np.min(self.values))

    def max(self) -> float:
        return float(np.max(self.values))

    def _binary(self, other, op, name) -> 'VolScalarField':
        if isinstance(other, VolScalarField):
            values = op(self.values, other.values)
            boundary = op(self.boundary, other.boundary)
        else:
            values = op(self.values, other)
            boundary = op(self.boundary, other)
        return VolScalarField(name, self.mesh, values, ('calculated', 'calculated'), boundary)

    def __add__(self, other):
        return self._binary(other, operator.add, self.name)

    def __radd__(self, other):
        return self._binary(other, lambda a, b: b + a, self.name)

    def __sub__(self, other):
        return self._binary(other, operator.sub, self.name)

    def __rsub__(self, other):
        return self._binary(other, lambda a, b: b - a, self.name)

    def __mul__(self, other):
        return self._binary(other, operator.mul, self.name)

    def __rmul__(self, other):
        return self._binary(other, lambda a, b: b * a, self.name)

    def __truediv__(self, other):
        return self._binary(other, operator.truediv, self.name)

    def __rtruediv__(self, other):
        return self._binary(other, lambda a, b: b / a, self.name)

    def __pow__(self, exponent):
        return self._binary(exponent, operator.pow, self.name)

    def __neg__(self):
        return VolScalarField(self.name, self.mesh, -self.values, ('calculated', 'calculated'), -self.boundary)

    def __repr__(self):
        return f"VolScalarField('{self.name}', min={self.min():.4g}, max={self.max():.4g}, bc={self.boundary_types})"


class SurfaceScalarField:
    """face centred scalar field, face 0 and face n are the boundary faces"""
    __slots__ = ('name', 'mesh', 'values')
    __array_ufunc__ = None

    def __init__(self, name: str, mesh: Mesh, values: Union[float, np.ndarray]):
        values = np.asarray(values, dtype=float)
        if values.ndim == 0:
            values = np.full(mesh.face_count, float(values))
        if values.shape != (mesh.face_count,):
            raise ValueError(f"surface field '{name}' expects {mesh.face_count} face values, got shape {values.shape}")
        self.name = name
        self.mesh = mesh
        self.values = values.copy()

    @property
    def internal(self) -> np.ndarray:
        return self.values[1:-1]

    @property
    def boundary(self) -> np.ndarray:
        return self.values[[0, -1]]

    def _binary(self, other, op) -> 'SurfaceScalarField':
        other_values = other.values if isinstance(other, SurfaceScalarField) else other
        return SurfaceScalarField(self.name, self.mesh, op(self.values, other_values))

    def __add__(self, other):
        return self._binary(other, operator.add)

    __radd__ = __add__

    def __sub__(self, other):
        return self._binary(other, operator.sub)

    def __mul__(self, other):
        return self._binary(other, operator.mul)

    __rmul__ = __mul__

    def __neg__(self):
        return SurfaceScalarField(self.name, self.mesh, -self.values)

    def __repr__(self):
        return f"SurfaceScalarField('{self.name}', min={np.min(self.values):.4g}, max={np.max(self.values):.4g})"

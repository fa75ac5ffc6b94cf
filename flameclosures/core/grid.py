"""
grid system module - manage the one-dimensional finite volume mesh of the closure models

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

main classes:
- GridParameters: grid parameter configuration
- Mesh: mesh geometry (faces, cells, interpolation weights) and the runtime it is advanced with

face convention: face 0 is the 'left' boundary patch, face n the 'right' boundary patch, faces 1..n-1 are internal.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Optional
from .runtime import Runtime

PATCH_NAMES = ('left', 'right')
GEOMETRIES = ('planar', 'spherical')


@dataclass
class GridParameters:
    """grid parameter configuration class

    Attributes:
        cell_count: grid count [-]
        start: position of the left boundary [m]
        length: calculation domain length [m]
        bias: grid bias factor, ratio of neighbouring cell sizes [-]
        geometry: 'planar' (unit cross section) or 'spherical' (radial coordinate)
        total_ratio: equal ratio sum of the cell sizes [-]
    """
    cell_count: int = 100                # grid count [-]
    start: float = 0.0                   # left boundary position [m]
    length: float = 0.1                  # calculation domain length [m]
    bias: float = 1.0                    # grid bias factor [-]
    geometry: str = 'planar'             # 'planar' or 'spherical'
    total_ratio: float = field(init=False)  # equal ratio sum of the cell sizes [-]

    def __post_init__(self):
        """initialize the calculation parameters"""
        if self.cell_count < 2:
            raise ValueError(f"the mesh needs at least 2 cells, got {self.cell_count}")
        if self.length <= 0.0:
            raise ValueError(f"invalid domain length: {self.length}")
        if self.geometry not in GEOMETRIES:
            raise ValueError(f"unsupported geometry '{self.geometry}', valid: {GEOMETRIES}")
        if self.geometry == 'spherical' and self.start < 0.0:
            raise ValueError("the spherical mesh must start at a non-negative radius")
        if self.bias == 1.0:
            self.total_ratio = float(self.cell_count)
        else:
            self.total_ratio = (1 - self.bias ** self.cell_count) / (1 - self.bias)


class Mesh:
    """one-dimensional finite volume mesh

    functions:
    - face and cell geometry calculation
    - linear interpolation weights of the internal faces
    - access to the runtime (mesh.time())
    """
    __slots__ = ('params', 'runtime', 'cell_count', 'face_positions', 'face_areas',
                 'positions_volume_centers', 'volumes', 'lambda_center', 'delta')

    def __init__(self, params: GridParameters, runtime: Optional[Runtime] = None):
        """initialize the mesh"""
        self.params = params
        self.runtime = runtime if runtime is not None else Runtime()
        self.cell_count = params.cell_count
        self.initialize_grid()

    def initialize_grid(self):
        """calculate the face positions and the derived geometry"""
        unit_distance = self.params.length / self.params.total_ratio
        drs = unit_distance * np.power(self.params.bias, np.arange(self.cell_count))
        self.face_positions = np.concatenate([[self.params.start], self.params.start + np.cumsum(drs)])
        self._calculate_grid_geometry()
        self._update_numerical_discretization()

    def _calculate_grid_geometry(self):
        """calculate the face areas, cell volumes and volume centers"""
        right = self.face_positions[1:]
        left = self.face_positions[:-1]
        if self.params.geometry == 'spherical':
            # per unit solid angle
            self.face_areas = self.face_positions ** 2
            self.volumes = (right**3 - left**3) / 3
            self.positions_volume_centers = 3 * (right**4 - left**4) / (4 * (right**3 - left**3))
        else:
            self.face_areas = np.ones(self.cell_count + 1)
            self.volumes = right - left
            self.positions_volume_centers = 0.5 * (right + left)
        self.delta = right - left

    def _update_numerical_discretization(self):
        """linear interpolation weight of the right neighbour for each internal face"""
        centers = self.positions_volume_centers
        self.lambda_center = (self.face_positions[1:-1] - centers[:-1]) / (centers[1:] - centers[:-1])

    @property
    def face_count(self) -> int:
        return self.cell_count + 1

    def time(self) -> float:
        """current time of the runtime [s]"""
        return self.runtime.value()

    def patch_face(self, patch: str) -> int:
        """face index of a boundary patch"""
        if patch == 'left':
            return 0
        if patch == 'right':
            return self.cell_count
        raise KeyError(f"unknown patch '{patch}', valid: {PATCH_NAMES}")

    def patch_cell(self, patch: str) -> int:
        """index of the cell adjacent to a boundary patch"""
        return 0 if self.patch_face(patch) == 0 else self.cell_count - 1

    def boundary_distances(self) -> np.ndarray:
        """distance between the boundary faces and the adjacent cell centers [left, right]"""
        return np.array([
            self.positions_volume_centers[0] - self.face_positions[0],
            self.face_positions[-1] - self.positions_volume_centers[-1]
        ])

    def total_volume(self) -> float:
        return float(np.sum(self.volumes))

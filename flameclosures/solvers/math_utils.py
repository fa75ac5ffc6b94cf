"""
math utils module - finite volume operators of the one-dimensional mesh

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.
"""

# explicit operators (fvc) return fields evaluated from the current values, implicit operators (fvm) return a
# ScalarMatrix, the volume integrated linear expression of the transported field psi:
#     E_i(psi) = lower_i*psi_{i-1} + diag_i*psi_i + upper_i*psi_{i+1} + source_i
# the closure models add and subtract matrices, the host solver drives E(psi) = 0.

import warnings
from dataclasses import dataclass
from typing import Union
import numpy as np
from numba import jit
from scipy.sparse import diags
from scipy.sparse.linalg import spsolve
from flameclosures.core import Mesh, VolScalarField, SurfaceScalarField

FieldLike = Union[VolScalarField, SurfaceScalarField, float]


@dataclass(eq=False, order=False, unsafe_hash=False)
class ScalarMatrix:
    """tri-diagonal volume integrated operator acting on the field psi

    Attributes:
        psi_name (str): name of the transported field
        mesh (Mesh): mesh object
        lower (np.ndarray): coefficient of the left neighbour [cell_count], lower[0] is unused
        diag (np.ndarray): diagonal coefficient [cell_count]
        upper (np.ndarray): coefficient of the right neighbour [cell_count], upper[-1] is unused
        source (np.ndarray): explicit part [cell_count]
    """
    __slots__ = ('psi_name', 'mesh', 'lower', 'diag', 'upper', 'source')

    psi_name: str
    mesh: Mesh
    lower: np.ndarray
    diag: np.ndarray
    upper: np.ndarray
    source: np.ndarray

    @classmethod
    def create(cls, psi: VolScalarField) -> 'ScalarMatrix':
        """create an empty matrix for psi"""
        n = psi.mesh.cell_count
        return cls(psi_name=psi.name, mesh=psi.mesh, lower=np.zeros(n), diag=np.zeros(n),
                   upper=np.zeros(n), source=np.zeros(n))

    def residual(self, psi: Union[VolScalarField, np.ndarray]) -> np.ndarray:
        """volume integrated value of the expression for the given field values"""
        values = psi.values if isinstance(psi, VolScalarField) else np.asarray(psi, dtype=float)
        result = self.diag * values + self.source
        result[1:] += self.lower[1:] * values[:-1]
        result[:-1] += self.upper[:-1] * values[1:]
        return result

    def evaluate(self, psi: Union[VolScalarField, np.ndarray]) -> np.ndarray:
        """value of the expression per unit volume"""
        return self.residual(psi) / self.mesh.volumes

    def to_sparse(self):
        """CSR representation of the implicit part"""
        return diags([self.lower[1:], self.diag, self.upper[:-1]], [-1, 0, 1], format='csr')

    def solve(self) -> np.ndarray:
        """solve E(psi) = 0 and return the field values"""
        return spsolve(self.to_sparse(), -self.source)

    def _combine(self, other: 'ScalarMatrix', sign: float) -> 'ScalarMatrix':
        if not isinstance(other, ScalarMatrix):
            return NotImplemented
        if other.mesh is not self.mesh:
            raise ValueError("incompatible meshes in matrix operation")
        if other.psi_name != self.psi_name:
            raise ValueError(f"incompatible fields {self.psi_name} and {other.psi_name} in matrix operation")
        return ScalarMatrix(self.psi_name, self.mesh,
                            self.lower + sign * other.lower, self.diag + sign * other.diag,
                            self.upper + sign * other.upper, self.source + sign * other.source)

    def __add__(self, other):
        return self._combine(other, 1.0)

    def __sub__(self, other):
        return self._combine(other, -1.0)

    def __neg__(self):
        return ScalarMatrix(self.psi_name, self.mesh, -self.lower, -self.diag, -self.upper, -self.source)


@jit(nopython=True, cache=True)
def calculate_face_gradients(values: np.ndarray, volume_centers: np.ndarray,
                             left_value: float, right_value: float,
                             left_position: float, right_position: float) -> np.ndarray:
    """calculate the surface normal gradient on all faces

    Args:
        values: the cell values
        volume_centers: the volume center coordinates array
        left_value: the value on the left boundary face
        right_value: the value on the right boundary face
        left_position: the left boundary face position
        right_position: the right boundary face position

    Returns:
        np.ndarray: gradient on the faces, shape is (n_cells + 1,)
    """
    n = len(values)
    gradient = np.zeros(n + 1)

    # calculate the gradient of the internal faces
    gradient[1:n] = (values[1:] - values[:-1]) / (volume_centers[1:] - volume_centers[:-1])

    # handle the gradient of the boundary faces
    gradient[0] = (values[0] - left_value) / (volume_centers[0] - left_position)
    gradient[n] = (right_value - values[-1]) / (right_position - volume_centers[-1])

    return gradient


@jit(nopython=True, cache=True)
def calculate_face_values(values: np.ndarray, lambda_center: np.ndarray,
                          left_value: float, right_value: float) -> np.ndarray:
    """linear interpolation of the cell values on all faces"""
    n = len(values)
    result = np.empty(n + 1)
    result[0] = left_value
    result[1:n] = (1 - lambda_center) * values[:-1] + lambda_center * values[1:]
    result[n] = right_value
    return result


def _face_values(field: FieldLike, mesh: Mesh) -> np.ndarray:
    if isinstance(field, SurfaceScalarField):
        return field.values
    if isinstance(field, VolScalarField):
        return interpolate(field).values
    return np.full(mesh.face_count, float(field))


def interpolate(vf: VolScalarField) -> SurfaceScalarField:
    """linear interpolation on the faces"""
    boundary = vf.boundary
    values = calculate_face_values(vf.values, vf.mesh.lambda_center, boundary[0], boundary[1])
    return SurfaceScalarField(f"interpolate({vf.name})", vf.mesh, values)


def sn_grad(vf: VolScalarField) -> SurfaceScalarField:
    """surface normal gradient in the direction of increasing coordinate"""
    mesh = vf.mesh
    boundary = vf.boundary
    values = calculate_face_gradients(vf.values, mesh.positions_volume_centers, boundary[0], boundary[1],
                                      mesh.face_positions[0], mesh.face_positions[-1])
    return SurfaceScalarField(f"snGrad({vf.name})", mesh, values)


def grad_mag(vf: VolScalarField) -> VolScalarField:
    """magnitude of the cell centred gradient, evaluated from the interpolated face values"""
    faces = interpolate(vf).values
    values = np.abs(faces[1:] - faces[:-1]) / vf.mesh.delta
    return VolScalarField(f"mag(grad({vf.name}))", vf.mesh, values)


def mag_sf(mesh: Mesh) -> SurfaceScalarField:
    """face areas"""
    return SurfaceScalarField("magSf", mesh, mesh.face_areas)


def div(flux: SurfaceScalarField) -> VolScalarField:
    """divergence of an area integrated face flux, per unit volume"""
    mesh = flux.mesh
    values = (flux.values[1:] - flux.values[:-1]) / mesh.volumes
    return VolScalarField(f"div({flux.name})", mesh, values)


def laplacian(gamma: FieldLike, vf: VolScalarField) -> VolScalarField:
    """explicit laplacian div(gamma*grad(vf)), per unit volume"""
    mesh = vf.mesh
    flux = SurfaceScalarField("gammaSnGrad", mesh, _face_values(gamma, mesh) * sn_grad(vf).values * mesh.face_areas)
    result = div(flux)
    result.name = f"laplacian({vf.name})"
    return result


def fvm_laplacian(gamma: FieldLike, psi: VolScalarField) -> ScalarMatrix:
    """implicit laplacian div(gamma*grad(psi))"""
    mesh = psi.mesh
    matrix = ScalarMatrix.create(psi)
    centers = mesh.positions_volume_centers

    # face coefficients: gamma*area/distance between the points of the face gradient
    distances = np.empty(mesh.face_count)
    distances[1:-1] = centers[1:] - centers[:-1]
    distances[[0, -1]] = mesh.boundary_distances()
    coeffs = _face_values(gamma, mesh) * mesh.face_areas / distances

    # internal faces
    matrix.upper[:-1] = coeffs[1:-1]
    matrix.lower[1:] = coeffs[1:-1]
    matrix.diag[:-1] -= coeffs[1:-1]
    matrix.diag[1:] -= coeffs[1:-1]

    # boundary faces, the zeroGradient patches carry no flux
    boundary = psi.boundary
    for side, (face, cell) in enumerate(((0, 0), (mesh.face_count - 1, mesh.cell_count - 1))):
        if psi.boundary_types[side] == 'zeroGradient':
            continue
        matrix.diag[cell] -= coeffs[face]
        matrix.source[cell] += coeffs[face] * boundary[side]
    return matrix


def fvm_laplacian_correction(gamma: FieldLike, psi: VolScalarField) -> ScalarMatrix:
    """implicit laplacian minus its explicit evaluation, vanishes for the current values of psi"""
    correction = fvm_laplacian(gamma, psi)
    correction.source -= laplacian(gamma, psi).values * psi.mesh.volumes
    return correction


def fvm_su(su: Union[VolScalarField, np.ndarray, float], psi: VolScalarField) -> ScalarMatrix:
    """explicit source per unit volume"""
    matrix = ScalarMatrix.create(psi)
    values = su.values if isinstance(su, VolScalarField) else su
    matrix.source[:] = values * psi.mesh.volumes
    return matrix


def fvm_sp(sp: Union[VolScalarField, np.ndarray, float], psi: VolScalarField) -> ScalarMatrix:
    """implicit source sp*psi per unit volume"""
    matrix = ScalarMatrix.create(psi)
    values = sp.values if isinstance(sp, VolScalarField) else sp
    matrix.diag[:] = values * psi.mesh.volumes
    return matrix


def fvm_ddt(rho: Union[VolScalarField, np.ndarray, float], psi: VolScalarField,
            psi_old: np.ndarray, time_step: float) -> ScalarMatrix:
    """implicit Euler time derivative rho*(psi - psi_old)/dt"""
    matrix = ScalarMatrix.create(psi)
    values = rho.values if isinstance(rho, VolScalarField) else rho
    coeff = values * psi.mesh.volumes / time_step
    matrix.diag[:] = coeff
    matrix.source[:] = -coeff * psi_old
    return matrix


def bound_non_negative(values: np.ndarray, name: str) -> np.ndarray:
    """replace non-finite values by zero and clip negative values, warn when anything is changed"""
    values = np.asarray(values, dtype=float)
    invalid = ~np.isfinite(values)
    if np.any(invalid):
        warnings.warn(f"non-finite values detected in {name}, location: {np.where(invalid)[0]}, replaced by 0")
        values = np.where(invalid, 0.0, values)
    if np.any(values < 0):
        warnings.warn(f"negative values detected in {name}, minimum value: {np.min(values)}, clipped to 0")
        values = np.maximum(values, 0.0)
    return values

import numpy as np
import pytest

from flameclosures.core import GridParameters, Mesh, SurfaceScalarField, VolScalarField
from flameclosures.solvers.math_utils import (ScalarMatrix, bound_non_negative, div, fvm_ddt, fvm_laplacian,
                                              fvm_laplacian_correction, fvm_sp, fvm_su, grad_mag, interpolate,
                                              laplacian, sn_grad)


def test_planar_mesh_geometry(mesh):
    assert mesh.total_volume() == pytest.approx(0.02)
    assert mesh.face_positions[0] == 0.0
    assert mesh.face_positions[-1] == pytest.approx(0.02)
    np.testing.assert_allclose(mesh.lambda_center, 0.5)


def test_biased_mesh_keeps_length():
    mesh = Mesh(GridParameters(cell_count=30, length=0.05, bias=1.05))
    assert mesh.face_positions[-1] == pytest.approx(0.05)
    assert np.all(np.diff(mesh.delta) > 0)


def test_spherical_mesh_volume():
    mesh = Mesh(GridParameters(cell_count=25, start=0.01, length=0.04, geometry='spherical'))
    assert mesh.total_volume() == pytest.approx((0.05**3 - 0.01**3) / 3)
    np.testing.assert_allclose(mesh.face_areas, mesh.face_positions**2)


def test_invalid_grid_parameters():
    with pytest.raises(ValueError):
        GridParameters(cell_count=1)
    with pytest.raises(ValueError):
        GridParameters(geometry='cylindrical')


def test_zero_gradient_boundary_follows_cells(mesh):
    field = VolScalarField("f", mesh, np.linspace(1.0, 2.0, mesh.cell_count))
    np.testing.assert_allclose(field.boundary, [1.0, 2.0])
    field.assign(np.full(mesh.cell_count, 3.0))
    np.testing.assert_allclose(field.patch_value('right'), [3.0])


def test_field_arithmetic_is_calculated(mesh):
    a = VolScalarField.uniform("a", mesh, 2.0)
    b = VolScalarField("b", mesh, 3.0, ('fixedValue', 'zeroGradient'), (5.0, 0.0))
    result = a * b + 1.0
    assert result.boundary_types == ('calculated', 'calculated')
    np.testing.assert_allclose(result.values, 7.0)
    np.testing.assert_allclose(result.boundary, [11.0, 7.0])


def test_field_shape_is_checked(mesh):
    with pytest.raises(ValueError):
        VolScalarField("f", mesh, np.zeros(mesh.cell_count + 1))


def test_interpolate_and_grad_of_uniform_field(mesh):
    field = VolScalarField.uniform("f", mesh, 4.0)
    np.testing.assert_allclose(interpolate(field).values, 4.0)
    np.testing.assert_allclose(sn_grad(field).values, 0.0)
    np.testing.assert_allclose(grad_mag(field).values, 0.0)


def test_sn_grad_of_linear_profile(mesh):
    x = mesh.positions_volume_centers
    field = VolScalarField("f", mesh, 3.0 * x, ('fixedValue', 'fixedValue'), (0.0, 3.0 * mesh.face_positions[-1]))
    np.testing.assert_allclose(sn_grad(field).values, 3.0)
    np.testing.assert_allclose(laplacian(1.0 + 0.0 * field, field).values, 0.0, atol=1e-9)


def test_divergence_telescopes(mesh):
    flux = SurfaceScalarField("phi", mesh, np.sin(np.linspace(0.0, 3.0, mesh.face_count)))
    total = np.sum(div(flux).values * mesh.volumes)
    assert total == pytest.approx(flux.values[-1] - flux.values[0])


def test_implicit_laplacian_matches_explicit(mesh):
    x = mesh.positions_volume_centers
    psi = VolScalarField("psi", mesh, x**2, ('fixedValue', 'zeroGradient'), (0.0, 0.0))
    gamma = VolScalarField("gamma", mesh, 1.0 + x)
    expected = laplacian(gamma, psi).values * mesh.volumes
    np.testing.assert_allclose(fvm_laplacian(gamma, psi).residual(psi), expected, rtol=1e-10, atol=1e-14)
    np.testing.assert_allclose(fvm_laplacian_correction(gamma, psi).residual(psi), 0.0, atol=1e-12)


def test_zero_gradient_laplacian_is_conservative(mesh):
    psi = VolScalarField("psi", mesh, np.cos(mesh.positions_volume_centers * 200.0))
    matrix = fvm_laplacian(VolScalarField.uniform("gamma", mesh, 2.0), psi)
    assert np.sum(matrix.residual(psi)) == pytest.approx(0.0, abs=1e-10)


def test_sources_and_solve(mesh):
    psi = VolScalarField.uniform("psi", mesh, 0.0)
    matrix = fvm_sp(1.0, psi) + fvm_su(-2.0, psi)
    np.testing.assert_allclose(matrix.solve(), 2.0)
    np.testing.assert_allclose(matrix.evaluate(np.full(mesh.cell_count, 2.0)), 0.0)


def test_implicit_diffusion_keeps_bounds(mesh):
    psi = VolScalarField("psi", mesh, 0.0, ('fixedValue', 'fixedValue'), (1.0, 0.0))
    old = psi.values.copy()
    matrix = fvm_ddt(1.0, psi, old, 1e-2) - fvm_laplacian(1e-4, psi)
    solution = matrix.solve()
    assert np.all(solution >= 0.0) and np.all(solution <= 1.0)
    assert np.all(np.diff(solution) <= 0.0)


def test_matrix_of_different_fields_cannot_be_combined(mesh):
    a = ScalarMatrix.create(VolScalarField.uniform("a", mesh, 0.0))
    b = ScalarMatrix.create(VolScalarField.uniform("b", mesh, 0.0))
    with pytest.raises(ValueError):
        a + b


def test_bound_non_negative():
    with pytest.warns(UserWarning):
        result = bound_non_negative(np.array([1.0, np.nan, -2.0, np.inf]), "x")
    np.testing.assert_array_equal(result, [1.0, 0.0, 0.0, 0.0])

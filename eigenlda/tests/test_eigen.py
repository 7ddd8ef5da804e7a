import numpy as np
import pytest
from numpy.testing import assert_allclose

from eigenlda.utils import (
    BaseEigensolver,
    NumpyEigensolver,
    ScipyEigensolver,
    check_eigensolver,
)

A = np.array([[2.0, 1.0, 0.0], [1.0, 2.0, 0.0], [0.0, 0.0, 5.0]])


@pytest.mark.parametrize(
    "solver",
    [
        ScipyEigensolver(),
        ScipyEigensolver(driver="evd"),
        ScipyEigensolver(driver="ev"),
        NumpyEigensolver(),
    ],
)
def test_decompose_symmetric(solver):
    evals, evecs = solver.decompose(A)
    assert_allclose(np.sort(evals), [1.0, 3.0, 5.0])
    assert_allclose(evecs.T @ evecs, np.eye(3), atol=1e-12)
    assert_allclose((evecs * evals) @ evecs.T, A, atol=1e-12)


@pytest.mark.parametrize("solver", [ScipyEigensolver(), NumpyEigensolver()])
def test_decompose_reads_lower_triangle(solver):
    # only the lower triangle is referenced
    upper_garbage = np.tril(A) + np.triu(np.full((3, 3), 100.0), k=1)
    evals, _ = solver.decompose(upper_garbage)
    assert_allclose(np.sort(evals), [1.0, 3.0, 5.0])


def test_scipy_rejects_non_finite():
    with pytest.raises(ValueError):
        ScipyEigensolver().decompose(np.array([[1.0, np.nan], [np.nan, 1.0]]))


@pytest.mark.parametrize(
    "eigensolver, expected",
    [
        (None, ScipyEigensolver),
        ("auto", ScipyEigensolver),
        ("scipy", ScipyEigensolver),
        ("numpy", NumpyEigensolver),
    ],
)
def test_check_eigensolver_names(eigensolver, expected):
    assert isinstance(check_eigensolver(eigensolver), expected)


def test_check_eigensolver_duck_typing():
    class Solver:
        def decompose(self, matrix):
            return np.linalg.eigh(matrix)

    solver = Solver()
    assert check_eigensolver(solver) is solver

    with pytest.raises(TypeError, match="decompose method"):
        check_eigensolver(object())


def test_base_eigensolver_is_abstract():
    with pytest.raises(TypeError):
        BaseEigensolver()


def test_repr():
    assert repr(ScipyEigensolver(driver="evr")) == "ScipyEigensolver(driver='evr')"
    assert repr(NumpyEigensolver()) == "NumpyEigensolver()"

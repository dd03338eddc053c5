import numpy as np
import pytest
from cubspline.tridiag import TridiagonalMatrix


def fill(mat, rng):
    n = mat.n
    for i in range(n):
        mat[i, i] = 4 + rng.uniform()
        if i > 0:
            mat[i, i - 1] = rng.uniform(-1, 1)
        if i < n - 1:
            mat[i, i + 1] = rng.uniform(-1, 1)


def test_banded():
    rng = np.random.default_rng(1)
    mat = TridiagonalMatrix(8)
    fill(mat, rng)
    d = rng.normal(size=8)
    xsol = mat.solve(d)
    assert np.allclose(np.linalg.solve(mat.todense(), d), xsol)


def test_cyclic():
    rng = np.random.default_rng(2)
    n = 6
    mat = TridiagonalMatrix(n, cyclic=True)
    fill(mat, rng)
    mat[0, n - 1] = 0.7
    mat[n - 1, 0] = -0.3
    dense = mat.todense()
    assert dense[0, n - 1] == 0.7
    assert dense[n - 1, 0] == -0.3
    d = rng.normal(size=n)
    assert np.allclose(dense @ mat.solve(d), d)


def test_cyclic_two():
    # for n=2 the corners coincide with the off-diagonal elements
    mat = TridiagonalMatrix(2, cyclic=True)
    mat[0, 0] = 2
    mat[1, 1] = 2
    mat.add(0, 1, 0.5)
    mat.add(0, 1, 0.5)
    mat.add(1, 0, 1)
    assert mat[0, 1] == 1
    assert np.allclose(mat.solve([3, 3]), [1, 1])


def test_single():
    mat = TridiagonalMatrix(1)
    mat[0, 0] = 4
    assert np.allclose(mat.solve([2]), [0.5])


def test_indexing():
    mat = TridiagonalMatrix(5)
    mat[1, 2] = 3
    mat.add(1, 2, 1)
    assert mat[1, 2] == 4
    assert mat[0, 3] == 0
    with pytest.raises(IndexError):
        mat[0, 3] = 1
    with pytest.raises(IndexError):
        mat[5, 0]
    with pytest.raises(IndexError):
        mat.add(0, 4, 1)
    cmat = TridiagonalMatrix(5, cyclic=True)
    cmat.add(0, 4, 1)
    assert cmat[0, 4] == 1
    assert cmat.todense()[0, 4] == 1
    with pytest.raises(IndexError):
        cmat[0, 3] = 1

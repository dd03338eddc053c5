import numpy as np
import pytest
from cubspline import polyroots


def test_linear():
    assert polyroots.invert_linear(2, -4) == (2., )
    assert polyroots.invert_linear(0, 1) == ()


def test_quadratic():
    assert polyroots.invert_quadratic(1, -3, 2) == (1., 2.)
    assert polyroots.invert_quadratic(1, 0, 1) == ()
    assert polyroots.invert_quadratic(1, -2, 1) == (1., )
    assert polyroots.invert_quadratic(0, 2, -4) == (2., )


def test_cubic_three_roots():
    roots = [-2.5, 0.3, 4.0]
    ret = polyroots.invert_cubic(*np.poly(roots))
    assert len(ret) == 3
    assert ret == pytest.approx(tuple(roots), abs=1e-10)
    ret = polyroots.invert_cubic(*(2 * np.poly([1, 2, 3])))
    assert ret == pytest.approx((1, 2, 3), abs=1e-10)


def test_cubic_one_root():
    # (x-2)(x^2+1)
    ret = polyroots.invert_cubic(1, -2, 1, -2)
    assert len(ret) == 1
    assert ret[0] == pytest.approx(2, abs=1e-12)


def test_cubic_multiple_roots():
    assert polyroots.invert_cubic(1, -3, 3, -1) == (1., )
    # (x-1)^2 (x+2)
    ret = polyroots.invert_cubic(1, 0, -3, 2)
    assert ret == pytest.approx((-2, 1))


def test_cubic_degenerate():
    assert polyroots.invert_cubic(0, 1, -3, 2) == (1., 2.)
    assert polyroots.invert_cubic(0, 0, 0, 0) == ()

from cubspline import monotonic as mono
from cubspline.monotonic import Monotonicity as M


def test_combine():
    for r in M:
        assert mono.combine(M.CONSTANT, r) == r
        assert mono.combine(r, M.CONSTANT) == r
        assert mono.combine(M.NOT_MONOTONIC, r) == M.NOT_MONOTONIC
    assert mono.combine(M.INCREASING, M.INCREASING) == M.INCREASING
    assert mono.combine(M.DECREASING, M.DECREASING) == M.DECREASING
    assert mono.combine(M.INCREASING, M.DECREASING) == M.NOT_MONOTONIC
    assert mono.combine(1, -1) == M.NOT_MONOTONIC


def test_reduce():
    assert mono.reduce([]) == M.CONSTANT
    assert mono.reduce([M.CONSTANT, M.INCREASING, M.CONSTANT]) == M.INCREASING

    def gen():
        yield M.INCREASING
        yield M.DECREASING
        raise RuntimeError('the sequence should not be consumed further')

    assert mono.reduce(gen()) == M.NOT_MONOTONIC


def test_from_sign():
    assert mono.from_sign(2.) == M.INCREASING
    assert mono.from_sign(-1e-3) == M.DECREASING
    assert mono.from_sign(0.) == M.CONSTANT
    assert mono.from_sign(1e-30, 1e-20) == M.CONSTANT
    assert int(mono.from_sign(-5)) == -1

import enum


class Monotonicity(enum.IntEnum):
    """ Monotonicity of a function over an interval """
    DECREASING = -1
    NOT_MONOTONIC = 0
    INCREASING = 1
    CONSTANT = 3


def combine(r, s):
    """
    Combine the monotonicity of two adjacent intervals

    CONSTANT is the identity element, NOT_MONOTONIC is absorbing and
    two different directions give NOT_MONOTONIC

    Parameters
    ----------
    r, s: Monotonicity
        The monotonicities of the two intervals

    Returns
    -------
    ret: Monotonicity
        The monotonicity of the union of the intervals

    """
    r, s = Monotonicity(r), Monotonicity(s)
    if r == Monotonicity.CONSTANT:
        return s
    if s == Monotonicity.CONSTANT:
        return r
    if r == s:
        return r
    return Monotonicity.NOT_MONOTONIC


def reduce(values, start=Monotonicity.CONSTANT):
    """ Combine a sequence of monotonicities left to right, stopping
    as soon as the result is NOT_MONOTONIC """
    ret = Monotonicity(start)
    for v in values:
        ret = combine(ret, v)
        if ret == Monotonicity.NOT_MONOTONIC:
            break
    return ret


def from_sign(value, tol=0):
    """ Monotonicity of a straight line with slope value """
    if abs(value) <= tol:
        return Monotonicity.CONSTANT
    if value > 0:
        return Monotonicity.INCREASING
    return Monotonicity.DECREASING

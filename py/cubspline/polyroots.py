"""
Real roots of polynomials of degree up to three using closed-form
expressions.

All the functions return a sorted tuple with the distinct real roots.
If the leading coefficient vanishes the polynomial of lower degree is
solved instead. The identically zero polynomial has no isolated roots
and an empty tuple is returned for it.
"""
import math
import numpy as np

# number of Newton iterations used to polish the cubic roots
NEWTON_ITER = 2


def invert_linear(a, b):
    """ Solve a*x + b = 0 """
    if a == 0:
        return ()
    return (-b / a, )


def invert_quadratic(a, b, c):
    """ Solve a*x^2 + b*x + c = 0 """
    if a == 0:
        return invert_linear(b, c)
    disc = b * b - 4 * a * c
    if disc < 0:
        return ()
    if disc == 0:
        return (-b / (2 * a), )
    # avoid the cancellation in -b + sqrt(disc)
    q = -0.5 * (b + math.copysign(math.sqrt(disc), b))
    return tuple(sorted((q / a, c / q)))


def invert_cubic(a, b, c, d):
    """
    Solve a*x^3 + b*x^2 + c*x + d = 0

    Parameters
    ----------
    a, b, c, d: float
        Coefficients of the polynomial

    Returns
    -------
    roots: tuple
        Sorted tuple of up to three real roots

    """
    if a == 0:
        return invert_quadratic(b, c, d)

    # normalize, x^3 + b x^2 + c x + d
    b, c, d = b / a, c / a, d / a

    # substitute x = t - b/3 to get the depressed cubic t^3 + p t + q
    shift = b / 3.
    p = c - b * b / 3.
    q = 2 * b**3 / 27. - b * c / 3. + d

    wdisc = q * q / 4. + p**3 / 27.
    if p == 0:
        ts = [float(np.cbrt(-q))]
    elif wdisc > 0:
        # one real root, Cardano
        sq = math.sqrt(wdisc)
        ts = [float(np.cbrt(-q / 2 + sq) + np.cbrt(-q / 2 - sq))]
    elif wdisc == 0:
        # one simple and one double root
        ts = [3 * q / p, -3 * q / (2 * p)]
    else:
        # three real roots, trigonometric form
        r = 2 * math.sqrt(-p / 3.)
        arg = 3 * q / (2 * p) * math.sqrt(-3. / p)
        phi = math.acos(min(max(arg, -1.), 1.)) / 3.
        ts = [r * math.cos(phi - 2 * math.pi * k / 3.) for k in range(3)]

    roots = []
    for t in ts:
        x = t - shift
        for _ in range(NEWTON_ITER):
            fx = ((x + b) * x + c) * x + d
            dfx = (3 * x + 2 * b) * x + c
            if dfx == 0:
                break
            x = x - fx / dfx
        roots.append(x)
    roots = sorted(roots)
    ret = []
    for x in roots:
        if len(ret) == 0 or x != ret[-1]:
            ret.append(x)
    return tuple(ret)

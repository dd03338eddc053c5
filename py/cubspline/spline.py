"""
Cubic splines with full (clamped), natural, periodic and monotonic
boundary conditions.

Full splines s(x) pass through the sampling points x_1...x_n and fulfill
s'(x_1) = m_1, s'(x_n) = m_n for given boundary slopes.
Natural splines have s''(x_1) = s''(x_n) = 0.
Periodic splines have s'(x_1) = s'(x_n) and s''(x_1) = s''(x_n).
Monotonic splines (Fritsch-Carlson) are confined by the sampling points,
i.e. y_i <= s(x) <= y_{i+1} for x_i <= x <= x_{i+1}.

Full, natural and periodic splines are C2, monotonic splines are only C1.

The curve is stored as the values and the slopes at the sampling points
and every segment is evaluated as a cubic Hermite polynomial.
"""
import enum
import logging
import sys
import numpy as np

from cubspline import monotonic as mono
from cubspline.monotonic import Monotonicity
from cubspline import polyroots
from cubspline.tridiag import TridiagonalMatrix

# Coefficients below this are considered zero when checking monotonicity
CONSTANT_TOL = 1e-20
# Secants below this make a monotonic spline segment flat
FLAT_TOL = 1e-50
# Extrema closer than this fraction of the interval to its ends are ignored
ROOT_TOL = 1e-10


class SplineType(enum.Enum):
    FULL = 'full'
    NATURAL = 'natural'
    PERIODIC = 'periodic'
    MONOTONIC = 'monotonic'


class SplineError(Exception):
    pass


class UnsupportedSplineTypeError(SplineError, ValueError):

    def __init__(self, spline_type, reason=None):
        self.spline_type = spline_type
        msg = f'Spline type {spline_type!r} not supported'
        if reason is not None:
            msg = msg + ': ' + reason
        super().__init__(msg)


class IntersectionError(SplineError, RuntimeError):

    def __init__(self, nfound, x0, x1, nexpected=1):
        self.nfound = nfound
        self.nexpected = nexpected
        self.x0, self.x1 = x0, x1
        if nfound == 0:
            msg = 'Spline has no intersection'
        else:
            msg = 'Spline has more than one intersection'
        super().__init__(msg + f' in [{x0}, {x1}] (expected {nexpected}, '
                         f'found {nfound})')


def get_spline_type(spline_type):
    """ Convert the argument (SplineType or its name) to SplineType """
    if isinstance(spline_type, SplineType):
        return spline_type
    if isinstance(spline_type, str):
        try:
            return SplineType(spline_type.lower())
        except ValueError:
            pass
    raise UnsupportedSplineTypeError(spline_type)


def _hermite_basis(t, nu=0):
    # Hermite basis functions h00, h10, h01, h11 and their derivatives
    # See http://en.wikipedia.org/wiki/Cubic_Hermite_spline
    if nu == 0:
        return ((2 * t - 3) * t * t + 1, ((t - 2) * t + 1) * t,
                (-2 * t + 3) * t * t, (t - 1) * t * t)
    if nu == 1:
        return ((6 * t - 6) * t, (3 * t - 4) * t + 1, (-6 * t + 6) * t,
                (3 * t - 2) * t)
    if nu == 2:
        return (12 * t - 6, 6 * t - 4, -12 * t + 6, 6 * t - 2)
    if nu == 3:
        zero = 0 * t
        return (zero + 12, zero + 6, zero - 12, zero + 6)
    raise ValueError(f'Derivative order {nu} is not supported')


def _natural_system(x, y):
    # See: J. Stoer: "Numerische Mathematik 1", 9th edition,
    # Springer, 2005, p. 111
    n = len(x)
    h = np.diff(x)
    secant = np.diff(y) / h
    M = TridiagonalMatrix(n)
    d = np.zeros(n)
    for i in range(1, n - 1):
        lam = h[i] / (h[i - 1] + h[i])
        M[i, i - 1] = 1 - lam
        M[i, i] = 2
        M[i, i + 1] = lam
        d[i] = 6 / (h[i - 1] + h[i]) * (secant[i] - secant[i - 1])
    # zero second derivative at both ends
    M[0, 0] = 2
    M[n - 1, n - 1] = 2
    return M, d


def _full_system(x, y, m0, m1):
    M, d = _natural_system(x, y)
    n = len(x)
    h0 = x[1] - x[0]
    h1 = x[-1] - x[-2]
    M[0, 1] = 1
    d[0] = 6 / h0 * ((y[1] - y[0]) / h0 - m0)
    M[n - 1, n - 2] = 1
    d[n - 1] = 6 / h1 * (m1 - (y[-1] - y[-2]) / h1)
    return M, d


def _periodic_system(x, y):
    # The unknowns are the moments at x_1 ... x_{n-1}, the moment
    # at x_0 is the same as at x_{n-1}.
    n = len(x) - 1
    h = np.diff(x)
    secant = np.diff(y) / h
    M = TridiagonalMatrix(n, cyclic=True)
    d = np.zeros(n)
    for k in range(n):
        # row of the sampling point k+1, the left neighbour of
        # the first row and the right neighbour of the last row wrap around
        hl, hr = h[k], h[(k + 1) % n]
        sl, sr = secant[k], secant[(k + 1) % n]
        lam = hr / (hl + hr)
        M.add(k, k, 2)
        M.add(k, (k - 1) % n, 1 - lam)
        M.add(k, (k + 1) % n, lam)
        d[k] = 6 / (hl + hr) * (sr - sl)
    return M, d


def _slopes_from_moments(x, y, moments):
    # See: J. Stoer: "Numerische Mathematik 1", 9th edition,
    # Springer, 2005, p. 109
    h = np.diff(x)
    secant = np.diff(y) / h
    # the linear coefficient of each segment
    A = secant - h / 6 * np.diff(moments)
    slopes = np.empty(len(x))
    slopes[:-1] = A - moments[:-1] * h / 2
    slopes[-1] = A[-1] + moments[-1] * h[-1] / 2
    return slopes


def _monotonic_slopes(x, y):
    # See http://en.wikipedia.org/wiki/Monotone_cubic_interpolation
    n = len(x)
    delta = np.diff(y) / np.diff(x)
    slopes = np.empty(n)
    slopes[1:-1] = (delta[:-1] + delta[1:]) / 2
    slopes[0] = delta[0]
    slopes[-1] = delta[-1]

    for k in range(n - 1):
        if abs(delta[k]) < FLAT_TOL:
            # make the spline flat if the inputs are equal
            slopes[k] = 0
            slopes[k + 1] = 0
            continue
        alpha = slopes[k] / delta[k]
        beta = slopes[k + 1] / delta[k]
        if alpha < 0 or (k > 0 and slopes[k] * delta[k - 1] < 0):
            slopes[k] = 0
        elif alpha**2 + beta**2 > 3**2:
            # limit (alpha, beta) to a circle of radius 3
            tau = 3. / np.sqrt(alpha**2 + beta**2)
            slopes[k] = tau * alpha * delta[k]
            slopes[k + 1] = tau * beta * delta[k]
    return slopes


class Spline:
    """
    Cubic spline through a set of sampling points

    Parameters
    ----------
    x: array_like, optional
        The x values of the sampling points
    y: array_like, optional
        The y values of the sampling points
    spline_type: SplineType or str, optional
        The type of the spline. Defaults to 'full' if the boundary
        slopes are given and to 'natural' otherwise
    m0, m1: float, optional
        The slopes at the first and last sampling points of a full spline
    sort_inputs: bool
        Sort the sampling points by x. If False, the points are expected
        to be sorted in ascending or descending order.

    """

    def __init__(self,
                 x=None,
                 y=None,
                 spline_type=None,
                 m0=None,
                 m1=None,
                 sort_inputs=False):
        self._x = None
        self._y = None
        self._slopes = None
        self.spline_type = None
        if x is not None or y is not None:
            self.set_xy_arrays(x,
                               y,
                               spline_type=spline_type,
                               m0=m0,
                               m1=m1,
                               sort_inputs=sort_inputs)

    @classmethod
    def from_points(cls,
                    points,
                    spline_type=None,
                    m0=None,
                    m1=None,
                    sort_inputs=False):
        """ Create the spline from a sequence of (x,y) pairs """
        ret = cls()
        ret.set_points(points,
                       spline_type=spline_type,
                       m0=m0,
                       m1=m1,
                       sort_inputs=sort_inputs)
        return ret

    # ------------------------------------------------------------------
    # construction

    def set(self, x0, x1, y0, y1, m0, m1):
        """
        Make a full spline with just two sampling points

        Parameters
        ----------
        x0, x1: float
            The x values of the sampling points
        y0, y1: float
            The y values of the sampling points
        m0, m1: float
            The slopes of the spline at x0 and x1

        """
        if x0 > x1:
            x0, x1, y0, y1 = x1, x0, y1, y0
        x = np.array([x0, x1], dtype=np.float64)
        y = np.array([y0, y1], dtype=np.float64)
        slopes = np.array([m0, m1], dtype=np.float64)
        self._publish(x, y, slopes, SplineType.FULL)

    def set_xy_arrays(self,
                      x,
                      y,
                      spline_type=None,
                      m0=None,
                      m1=None,
                      sort_inputs=False):
        """
        Set the sampling points from separate arrays of x and y values

        Parameters
        ----------
        x: array_like
            The x values of the sampling points
        y: array_like
            The y values of the sampling points
        spline_type: SplineType or str, optional
            The type of the spline
        m0, m1: float, optional
            The boundary slopes of a full spline
        sort_inputs: bool
            Sort the sampling points by their x values

        """
        x = np.array(x, dtype=np.float64).ravel()
        y = np.array(y, dtype=np.float64).ravel()
        assert (len(x) == len(y))
        self._make_spline(x, y, spline_type, m0, m1, sort_inputs)

    def set_points(self,
                   points,
                   spline_type=None,
                   m0=None,
                   m1=None,
                   sort_inputs=False):
        """
        Set the sampling points from a sequence of (x,y) pairs
        (lists, tuples or a 2d array of shape (n,2))

        """
        points = np.array([(p[0], p[1]) for p in points], dtype=np.float64)
        assert (len(points) > 1)
        self._make_spline(points[:, 0].copy(), points[:, 1].copy(),
                          spline_type, m0, m1, sort_inputs)

    def _make_spline(self, x, y, spline_type, m0, m1, sort_inputs):
        spline_type = self._resolve_type(spline_type, m0, m1)
        n = len(x)
        # a spline with no or just one sampling point is meaningless
        assert (n > 1)

        if sort_inputs:
            idx = np.argsort(x, kind='stable')
            x, y = x[idx], y[idx]
        elif x[0] > x[-1]:
            x, y = x[::-1].copy(), y[::-1].copy()

        if spline_type == SplineType.FULL:
            M, d = _full_system(x, y, m0, m1)
            slopes = _slopes_from_moments(x, y, M.solve(d))
        elif spline_type == SplineType.NATURAL:
            M, d = _natural_system(x, y)
            slopes = _slopes_from_moments(x, y, M.solve(d))
        elif spline_type == SplineType.PERIODIC:
            assert (n > 2)
            if y[0] != y[-1]:
                logging.warning('The first and the last sampling points of '
                                'a periodic spline have different values '
                                '%g and %g', y[0], y[-1])
            M, d = _periodic_system(x, y)
            moments = M.solve(d)
            moments = np.concatenate(([moments[-1]], moments))
            slopes = _slopes_from_moments(x, y, moments)
        else:
            slopes = _monotonic_slopes(x, y)
        logging.debug('Constructed %s spline with %d sampling points',
                      spline_type.value, n)
        self._publish(x, y, slopes, spline_type)

    @staticmethod
    def _resolve_type(spline_type, m0, m1):
        have_slopes = m0 is not None or m1 is not None
        if spline_type is None:
            spline_type = SplineType.FULL if have_slopes else SplineType.NATURAL
        spline_type = get_spline_type(spline_type)
        if spline_type == SplineType.FULL:
            if m0 is None or m1 is None:
                raise UnsupportedSplineTypeError(
                    spline_type, 'full splines need both boundary slopes')
        elif have_slopes:
            raise UnsupportedSplineTypeError(
                spline_type, 'boundary slopes can only be given '
                'for full splines')
        return spline_type

    def _publish(self, x, y, slopes, spline_type):
        for arr in (x, y, slopes):
            arr.flags.writeable = False
        self._x, self._y, self._slopes = x, y, slopes
        self.spline_type = spline_type

    # ------------------------------------------------------------------
    # accessors

    @property
    def x(self):
        return self._x

    @property
    def y(self):
        return self._y

    @property
    def slopes(self):
        return self._slopes

    @property
    def num_samples(self):
        return len(self._x)

    @property
    def x_min(self):
        return float(self._x[0])

    @property
    def x_max(self):
        return float(self._x[-1])

    def applies(self, x):
        """ Return True if x is inside the range of sampling points """
        return self.x_min <= x <= self.x_max

    def segment_index(self, x):
        """ Return the index of the segment containing x (bisection) """
        xs = self._x
        low, high = 0, len(xs) - 1
        while low + 1 < high:
            i = (low + high) // 2
            if xs[i] > x:
                high = i
            else:
                low = i
        return low

    def _eval_segment(self, x, i, nu=0):
        x0 = self._x[i]
        h = self._x[i + 1] - x0
        t = (x - x0) / h
        h00, h10, h01, h11 = _hermite_basis(t, nu)
        ret = (h00 * self._y[i] + h10 * self._slopes[i] * h +
               h01 * self._y[i + 1] + h11 * self._slopes[i + 1] * h)
        if nu > 0:
            ret = ret / h**nu
        return ret

    def _local_coefficients(self, i):
        # monomial coefficients in s = x - x_i, starting from s^3
        h = self._x[i + 1] - self._x[i]
        m0, m1 = self._slopes[i], self._slopes[i + 1]
        secant = (self._y[i + 1] - self._y[i]) / h
        c3 = (m0 + m1 - 2 * secant) / h**2
        c2 = (3 * secant - 2 * m0 - m1) / h
        return c3, c2, m0, self._y[i]

    def segment_coefficients(self, i):
        """
        Return the coefficients (a,b,c,d) of the segment i
        such that it is a*x^3 + b*x^2 + c*x + d

        Parameters
        ----------
        i: int
            The segment index (from 0 to num_samples-2)

        Returns
        -------
        coeffs: tuple
            The tuple of (a,b,c,d)

        """
        assert (0 <= i < self.num_samples - 1)
        c3, c2, c1, c0 = self._local_coefficients(i)
        x0 = self._x[i]
        a = c3
        b = c2 - 3 * c3 * x0
        c = c1 - 2 * c2 * x0 + 3 * c3 * x0**2
        d = c0 - c1 * x0 + c2 * x0**2 - c3 * x0**3
        return float(a), float(b), float(c), float(d)

    # ------------------------------------------------------------------
    # evaluation

    def _boundary_derivative(self, right):
        if right:
            n = self.num_samples
            return float(self._eval_segment(self._x[-1], n - 2, 1))
        return float(self._eval_segment(self._x[0], 0, 1))

    def eval(self, x, extrapolate=False):
        """
        Evaluate the spline at x

        Parameters
        ----------
        x: float
            The position
        extrapolate: bool
            If True, the spline is continued linearly outside of the
            range of sampling points

        Returns
        -------
        y: float
            The value of the spline

        """
        assert (extrapolate or self.applies(x))
        if x < self.x_min:
            m = self._boundary_derivative(False)
            return float(self._y[0] + m * (x - self.x_min))
        if x > self.x_max:
            m = self._boundary_derivative(True)
            return float(self._y[-1] + m * (x - self.x_max))
        return float(self._eval_segment(x, self.segment_index(x)))

    def eval_derivative(self, x, extrapolate=False):
        """ Evaluate the first derivative of the spline at x """
        assert (extrapolate or self.applies(x))
        if x < self.x_min:
            return self._boundary_derivative(False)
        if x > self.x_max:
            return self._boundary_derivative(True)
        return float(self._eval_segment(x, self.segment_index(x), 1))

    def eval_second_derivative(self, x, extrapolate=False):
        """ Evaluate the second derivative of the spline at x """
        assert (extrapolate or self.applies(x))
        if not self.applies(x):
            return 0.
        return float(self._eval_segment(x, self.segment_index(x), 2))

    def eval_third_derivative(self, x, extrapolate=False):
        """ Evaluate the third derivative of the spline at x """
        assert (extrapolate or self.applies(x))
        if not self.applies(x):
            return 0.
        return float(self._eval_segment(x, self.segment_index(x), 3))

    def __call__(self, evalx, nu=0, extrapolate=False):
        """
        Evaluate the spline or its derivative on an array of positions

        Parameters
        ----------
        evalx: array_like
            Positions
        nu: int
            The derivative order (0 to 3)
        extrapolate: bool
            Continue the spline linearly outside of the range of
            sampling points

        Returns
        -------
        ret: ndarray
            Array of the same shape as evalx

        """
        evalx = np.asarray(evalx, dtype=np.float64)
        left = evalx < self.x_min
        right = evalx > self.x_max
        assert (extrapolate or not (left.any() or right.any()))
        idx = np.clip(
            np.searchsorted(self._x, evalx, 'right') - 1, 0,
            self.num_samples - 2)
        inside = np.clip(evalx, self.x_min, self.x_max)
        ret = np.array(self._eval_segment(inside, idx, nu), dtype=np.float64)
        if left.any() or right.any():
            if nu == 0:
                ret[left] = self._y[0] + self._boundary_derivative(False) * (
                    evalx[left] - self.x_min)
                ret[right] = self._y[-1] + self._boundary_derivative(True) * (
                    evalx[right] - self.x_max)
            elif nu == 1:
                ret[left] = self._boundary_derivative(False)
                ret[right] = self._boundary_derivative(True)
            else:
                ret[left | right] = 0
        return ret

    # ------------------------------------------------------------------
    # monotonicity

    def _segment_monotonic(self, i, x0, x1):
        """
        Return the monotonicity of the segment i inside [x0, x1]
        """
        c3, c2, c1, _ = self._local_coefficients(i)
        # the derivative in the local coordinate s = x - x_i
        a, b, c = 3 * c3, 2 * c2, c1
        s0, s1 = x0 - self._x[i], x1 - self._x[i]

        def sign_at(s):
            if (a * s + b) * s + c > 0:
                return Monotonicity.INCREASING
            return Monotonicity.DECREASING

        if abs(a) < CONSTANT_TOL and abs(b) < CONSTANT_TOL and abs(
                c) < CONSTANT_TOL:
            return Monotonicity.CONSTANT

        mid = (s0 + s1) / 2
        if a == 0:
            roots = polyroots.invert_linear(b, c)
        else:
            disc = b * b - 4 * a * c
            if disc < 0:
                # the derivative has no real roots
                return sign_at(mid)
            if disc == 0:
                # saddle point, make sure it is not used to determine
                # the direction
                if -b / (2 * a) == s0:
                    return sign_at(s1)
                return sign_at(s0)
            roots = polyroots.invert_quadratic(a, b, c)
        eps = ROOT_TOL * (s1 - s0)
        if any(s0 + eps < r < s1 - eps for r in roots):
            # extremum inside the interval
            return Monotonicity.NOT_MONOTONIC
        return sign_at(mid)

    def _iter_monotonic(self, x0, x1, extrapolate):
        if x0 < self.x_min:
            yield mono.from_sign(self._boundary_derivative(False),
                                 CONSTANT_TOL)
        lo, hi = max(x0, self.x_min), min(x1, self.x_max)
        if lo < hi:
            for i in range(self.segment_index(lo), self.segment_index(hi) + 1):
                left = max(lo, self._x[i])
                right = min(hi, self._x[i + 1])
                if left < right:
                    yield self._segment_monotonic(i, left, right)
        if x1 > self.x_max:
            yield mono.from_sign(self._boundary_derivative(True),
                                 CONSTANT_TOL)

    def monotonic(self, x0=None, x1=None, extrapolate=False):
        """
        Return the monotonicity of the spline in the interval [x0, x1]

        Parameters
        ----------
        x0, x1: float, optional
            The interval. If not given, the full range of the spline
        extrapolate: bool
            Needs to be True if the interval extends beyond the sampling
            points

        Returns
        -------
        ret: Monotonicity
            INCREASING(1), DECREASING(-1), NOT_MONOTONIC(0) or CONSTANT(3)

        """
        if x0 is None:
            x0 = self.x_min
        if x1 is None:
            x1 = self.x_max
        assert (x0 != x1)
        if x0 > x1:
            x0, x1 = x1, x0
        assert (extrapolate or (x0 >= self.x_min and x1 <= self.x_max))
        return mono.reduce(self._iter_monotonic(x0, x1, extrapolate))

    # ------------------------------------------------------------------
    # intersection

    def _intersect_segment(self, i, a, b, c, d, x0, x1):
        # the difference polynomial in the local coordinate s = x - x_i
        xi = self._x[i]
        c3, c2, c1, c0 = self._local_coefficients(i)
        qa = a
        qb = 3 * a * xi + b
        qc = (3 * a * xi + 2 * b) * xi + c
        qd = ((a * xi + b) * xi + c) * xi + d
        roots = polyroots.invert_cubic(c3 - qa, c2 - qb, c1 - qc, c0 - qd)
        lo = max(xi, x0)
        hi = min(self._x[i + 1], x1)
        ret = []
        for s in roots:
            if lo - xi <= s <= hi - xi:
                ret.append(min(max(xi + s, lo), hi))
        return ret

    def intersect_interval(self, x0, x1, a, b, c, d):
        """
        Find the position where the spline intersects the polynomial
        a*x^3 + b*x^2 + c*x + d inside [x0, x1]. Exactly one
        intersection is expected.

        Parameters
        ----------
        x0, x1: float
            The interval (must be within the range of the spline)
        a, b, c, d: float
            The polynomial coefficients

        Returns
        -------
        x: float
            The intersection

        """
        assert (self.applies(x0) and self.applies(x1))
        if x0 > x1:
            x0, x1 = x1, x0
        sols = []
        for i in range(self.segment_index(x0), self.segment_index(x1) + 1):
            for r in self._intersect_segment(i, a, b, c, d, x0, x1):
                # the same root can be found at the knot shared by
                # two segments
                if len(sols) > 0 and np.isclose(r, sols[-1], rtol=1e-12,
                                                atol=1e-14):
                    continue
                sols.append(r)
            if len(sols) > 1:
                raise IntersectionError(len(sols), x0, x1)
        if len(sols) != 1:
            raise IntersectionError(len(sols), x0, x1)
        return float(sols[0])

    def intersect(self, a, b, c, d):
        """ Find the intersection with a*x^3 + b*x^2 + c*x + d
        over the full range of the spline """
        return self.intersect_interval(self.x_min, self.x_max, a, b, c, d)

    # ------------------------------------------------------------------
    # diagnostics

    def dump(self, x0, x1, k, fp=None):
        """
        Write the spline to a text stream

        For k+1 evenly spaced positions between x0 and x1 writes the
        lines "x value derivative monotonic", the spline is continued
        linearly outside of its range. The output can be plotted with
        gnuplot, i.e.
        plot "spline.txt" using 1:2 w l ti "Curve", \\
        "spline.txt" using 1:3 w l ti "Derivative", \\
        "spline.txt" using 1:4 w p ti "Monotonic"

        Parameters
        ----------
        x0, x1: float
            The range of positions
        k: int
            The number of intervals
        fp: file, optional
            The output stream (sys.stdout by default)

        """
        if fp is None:
            fp = sys.stdout
        x0, x1 = min(x0, x1), max(x0, x1)
        step = (x1 - x0) / k
        for i in range(k + 1):
            x = x0 + i * step
            if not self.applies(x):
                dy_dx = self.eval_derivative(x, extrapolate=True)
                y = self.eval(x, extrapolate=True)
                flag = 1 if dy_dx > 0 else -1
            else:
                y = self.eval(x)
                dy_dx = self.eval_derivative(x)
                flag = int(self.monotonic(x, x + step, extrapolate=True))
            print(f'{x:.10g} {y:.10g} {dy_dx:.10g} {flag}', file=fp)

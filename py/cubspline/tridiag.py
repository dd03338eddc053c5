import numpy as np
from scipy.linalg import solve_banded


class TridiagonalMatrix:
    """ Tridiagonal matrix, optionally with the two corner elements
    of a cyclic (periodic) system

    The three diagonals are kept in the banded representation used by
    scipy.linalg.solve_banded, i.e. element (i,j) is stored
    in ab[1 + i - j, j]

    Parameters
    ----------
    n: int
        The size of the matrix
    cyclic: bool
        If True the elements (0, n-1) and (n-1, 0) can be set as well

    """

    def __init__(self, n, cyclic=False):
        assert (n > 0)
        self.n = n
        self.cyclic = cyclic
        self.ab = np.zeros((3, n), dtype=np.float64)
        # top right and bottom left elements of the cyclic matrix
        self.corners = np.zeros(2, dtype=np.float64)

    def _locate(self, i, j):
        n = self.n
        if not (0 <= i < n and 0 <= j < n):
            raise IndexError(f'Element ({i},{j}) is outside of the '
                             f'{n}x{n} matrix')
        if abs(i - j) <= 1:
            return self.ab, (1 + i - j, j)
        if self.cyclic:
            if (i, j) == (0, n - 1):
                return self.corners, (0, )
            if (i, j) == (n - 1, 0):
                return self.corners, (1, )
        raise IndexError(f'Element ({i},{j}) is not part of a '
                         'tridiagonal matrix')

    def __getitem__(self, idx):
        i, j = idx
        n = self.n
        if not (0 <= i < n and 0 <= j < n):
            raise IndexError(f'Element ({i},{j}) is outside of the '
                             f'{n}x{n} matrix')
        try:
            arr, pos = self._locate(i, j)
        except IndexError:
            return 0.
        return float(arr[pos])

    def __setitem__(self, idx, value):
        arr, pos = self._locate(*idx)
        arr[pos] = value

    def add(self, i, j, value):
        """ Add value to the element (i,j) """
        arr, pos = self._locate(i, j)
        arr[pos] += value

    def todense(self):
        """ Return the full 2d array representation of the matrix """
        n = self.n
        ret = np.zeros((n, n))
        for i in range(n):
            for j in range(max(i - 1, 0), min(i + 2, n)):
                ret[i, j] = self.ab[1 + i - j, j]
        if self.cyclic and n > 2:
            ret[0, n - 1] += self.corners[0]
            ret[n - 1, 0] += self.corners[1]
        return ret

    def solve(self, d):
        """
        Solve the linear system M x = d

        Parameters
        ----------
        d: ndarray
            The right hand side vector of length n

        Returns
        -------
        x: ndarray
            The solution vector

        """
        d = np.asarray(d, dtype=np.float64)
        assert (d.shape == (self.n, ))
        if self.n == 1:
            return d / self.ab[1, 0]
        if not self.cyclic or self.n == 2 or not self.corners.any():
            return solve_banded((1, 1), self.ab, d, check_finite=False)
        return self._solve_cyclic(d)

    def _solve_cyclic(self, d):
        # Sherman-Morrison: M = T + u v^T, where T is the tridiagonal part
        # with two modified diagonal elements
        n = self.n
        beta, alpha = self.corners
        gamma = -self.ab[1, 0]
        ab = self.ab.copy()
        ab[1, 0] -= gamma
        ab[1, n - 1] -= alpha * beta / gamma
        u = np.zeros(n)
        u[0] = gamma
        u[-1] = alpha
        rhs = np.array([d, u]).T
        sol = solve_banded((1, 1), ab, rhs, check_finite=False)
        y, z = sol[:, 0], sol[:, 1]
        # v = (1, 0, ..., 0, beta/gamma)
        vy = y[0] + beta / gamma * y[-1]
        vz = z[0] + beta / gamma * z[-1]
        return y - vy / (1 + vz) * z

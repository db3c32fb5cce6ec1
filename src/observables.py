"""
Moments of the Distribution

Density and momentum, for a single site and for whole fields.

    - Density (0th moment): rho = sum_i(f_i)
    - Momentum (1st moment): rho*u = sum_i(f_i * e_i)

The single-site forms are the smallest testable pieces of the solver; the
field forms are used by the vectorised reference step.
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, VELOCITIES


def site_momentum(populations, velocities=None):
    """
    Combine populations with the velocity matrix.

    rho * u = E @ f, where row k of E holds the k-th velocity component of
    every direction.

    Parameters
    ----------
    populations : array_like
        Populations at one site, shape (Q,)
    velocities : array_like, optional
        Velocity matrix, shape (D, Q). Defaults to the D2Q9 matrix [EX, EY].

    Returns
    -------
    momentum : ndarray
        Momentum vector, shape (D,)
    """
    if velocities is None:
        velocities = VELOCITIES
    return np.asarray(velocities) @ np.asarray(populations)


def site_density(populations):
    """Density at one site: the sum of its populations."""
    return np.sum(populations)


def compute_density(f):
    """
    Density field.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)

    Returns
    -------
    rho : ndarray
        Density field, shape (ny, nx)
    """
    return np.sum(f, axis=0)


def compute_velocity(f, rho=None):
    """
    Velocity field.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)
    rho : ndarray, optional
        Density field, shape (ny, nx). If None, computed from f.

    Returns
    -------
    ux, uy : ndarray
        Velocity components, shape (ny, nx)
    """
    if rho is None:
        rho = compute_density(f)

    # Contract the direction axis against the velocity matrix
    rho_u = np.tensordot(VELOCITIES, f, axes=(1, 0))

    # Empty sites (e.g. inside solids) get zero velocity
    rho_safe = np.where(rho > 1e-10, rho, 1.0)
    return rho_u[0] / rho_safe, rho_u[1] / rho_safe


def compute_macroscopic(f):
    """Return (rho, ux, uy) for a distribution field of shape (Q, ny, nx)."""
    rho = compute_density(f)
    ux, uy = compute_velocity(f, rho)
    return rho, ux, uy


@njit(parallel=True, cache=True)
def _macroscopic_numba(f, rho, ux, uy, ex, ey):
    q, ny, nx = f.shape

    for j in prange(ny):
        for i in range(nx):
            rho_local = 0.0
            mom_x = 0.0
            mom_y = 0.0

            for k in range(q):
                rho_local += f[k, j, i]
                mom_x += f[k, j, i] * ex[k]
                mom_y += f[k, j, i] * ey[k]

            rho[j, i] = rho_local
            if rho_local > 1e-10:
                ux[j, i] = mom_x / rho_local
                uy[j, i] = mom_y / rho_local
            else:
                ux[j, i] = 0.0
                uy[j, i] = 0.0


def compute_macroscopic_fast(f):
    """
    Numba version of :func:`compute_macroscopic`.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)

    Returns
    -------
    rho, ux, uy : ndarray
        Density and velocity fields, shape (ny, nx)
    """
    _, ny, nx = f.shape
    rho = np.zeros((ny, nx), dtype=np.float64)
    ux = np.zeros((ny, nx), dtype=np.float64)
    uy = np.zeros((ny, nx), dtype=np.float64)

    _macroscopic_numba(f, rho, ux, uy, EX.astype(np.float64), EY.astype(np.float64))

    return rho, ux, uy

"""
Equilibrium Distribution

Second-order truncation of the Maxwell-Boltzmann distribution on D2Q9:

    f_i^eq = w_i * rho * [1 + (e_i . u)/c_s^2 + (e_i . u)^2/(2*c_s^4) - u^2/(2*c_s^2)]

The collision step relaxes populations toward this target.
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, W, CS2, CS4, Q


def _polynomial(eu, u_sq):
    return 1.0 + eu / CS2 + (eu * eu) / (2.0 * CS4) - u_sq / (2.0 * CS2)


def equilibrium_single_site(rho, ux, uy):
    """
    Equilibrium distribution at one site.

    Parameters
    ----------
    rho : float
        Density
    ux, uy : float
        Velocity components

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q,)
    """
    eu = EX * ux + EY * uy
    return W * rho * _polynomial(eu, ux * ux + uy * uy)


def compute_equilibrium(rho, ux, uy):
    """
    Equilibrium distribution for a whole field (NumPy).

    Parameters
    ----------
    rho : ndarray
        Density field, shape (ny, nx)
    ux, uy : ndarray
        Velocity fields, shape (ny, nx)

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q, ny, nx)
    """
    eu = EX[:, None, None] * ux + EY[:, None, None] * uy
    u_sq = ux * ux + uy * uy
    return W[:, None, None] * rho * _polynomial(eu, u_sq)


@njit(parallel=True, cache=True)
def _equilibrium_numba(rho, ux, uy, f_eq, ex, ey, w, cs2, cs4):
    q, ny, nx = f_eq.shape

    for j in prange(ny):
        for i in range(nx):
            u_sq = ux[j, i] * ux[j, i] + uy[j, i] * uy[j, i]
            for k in range(q):
                eu = ex[k] * ux[j, i] + ey[k] * uy[j, i]
                f_eq[k, j, i] = w[k] * rho[j, i] * (
                    1.0 + eu / cs2 + (eu * eu) / (2.0 * cs4) - u_sq / (2.0 * cs2)
                )


def compute_equilibrium_fast(rho, ux, uy):
    """Numba version of :func:`compute_equilibrium`."""
    ny, nx = rho.shape
    f_eq = np.zeros((Q, ny, nx), dtype=np.float64)

    _equilibrium_numba(rho, ux, uy, f_eq,
                       EX.astype(np.float64), EY.astype(np.float64), W, CS2, CS4)

    return f_eq

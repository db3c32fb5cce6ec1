"""
Collision

BGK relaxation toward equilibrium.

    f_out = f + omega * (f_eq - f),   omega = 1 / tau

The relaxation time controls the viscosity, nu = c_s^2 * (tau - 0.5), and
stability requires tau > 0.5.
"""

import warnings

import numpy as np
from numba import njit, prange


def tau_from_viscosity(nu, cs2=1.0/3.0):
    """Relaxation time for kinematic viscosity ``nu`` (lattice units)."""
    return nu / cs2 + 0.5


def viscosity_from_tau(tau, cs2=1.0/3.0):
    """Kinematic viscosity for relaxation time ``tau`` (lattice units)."""
    validate_tau(tau)
    return cs2 * (tau - 0.5)


def validate_tau(tau, name="tau"):
    """
    Check that a relaxation time is in the stable range.

    Raises
    ------
    ValueError
        If tau <= 0.5

    Returns
    -------
    tau : float
        The validated value
    """
    if tau <= 0.5:
        raise ValueError(
            f"{name} must be > 0.5 for stability (got {tau}). "
            f"This corresponds to nu > 0."
        )
    if tau > 2.0:
        warnings.warn(
            f"{name} = {tau} is large, which may cause slow convergence. "
            f"Consider tau in range (0.5, 2.0) for efficiency."
        )
    return tau


def relaxation_update(omega, f, f_eq):
    """
    Change applied to populations by one BGK relaxation.

        delta = omega * (f_eq - f)

    Linear in ``omega``, linear in either distribution while the other is
    zero, and antisymmetric under swapping ``f`` and ``f_eq``.

    Parameters
    ----------
    omega : float
        Relaxation rate (1/tau)
    f : array_like
        Current populations
    f_eq : array_like
        Equilibrium populations, same shape as ``f``

    Returns
    -------
    delta : ndarray
        Update to add to ``f``
    """
    return omega * (np.asarray(f_eq) - np.asarray(f))


class BGKCollision:
    """
    Single-relaxation-time collision policy for the local kernel.

    Calling the policy with a site's populations and their equilibrium
    returns the update; the kernel adds it in place.

    Parameters
    ----------
    tau : float
        Relaxation time (must be > 0.5)
    """

    def __init__(self, tau):
        self.tau = validate_tau(tau)
        self.omega = 1.0 / tau

    def __call__(self, populations, f_eq):
        return relaxation_update(self.omega, populations, f_eq)

    def __repr__(self):
        return f"BGKCollision(tau={self.tau})"


def bgk_collision(f, f_eq, tau):
    """
    BGK collision over a whole field (NumPy).

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)
    f_eq : ndarray
        Equilibrium distribution, shape (Q, ny, nx)
    tau : float
        Relaxation time

    Returns
    -------
    f_out : ndarray
        Post-collision distribution
    """
    validate_tau(tau)
    return f + relaxation_update(1.0 / tau, f, f_eq)


@njit(parallel=True, cache=True)
def _bgk_numba(f, f_eq, omega, f_out):
    q, ny, nx = f.shape

    for j in prange(ny):
        for i in range(nx):
            for k in range(q):
                f_out[k, j, i] = f[k, j, i] + omega * (f_eq[k, j, i] - f[k, j, i])


def bgk_collision_fast(f, f_eq, tau):
    """Numba version of :func:`bgk_collision`."""
    validate_tau(tau)
    f_out = np.empty_like(f)
    _bgk_numba(f, f_eq, 1.0 / tau, f_out)
    return f_out

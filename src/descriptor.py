"""
Lattice Descriptor

Site-level geometry and equilibrium handed to the local kernel as the
simulation's lattice handle.
"""
import numpy as np
from .lattice import EX, EY, Q
from .equilibrium import equilibrium_single_site
from .observables import site_density, site_momentum


class D2Q9Lattice:
    """
    Lattice descriptor for a periodic ny x nx D2Q9 grid.

    Sites are addressed as ``(j, i)`` tuples (row, column), matching the
    ``(Q, ny, nx)`` layout of the population arrays.

    ``len(lattice)`` is the number of moving directions. They are numbered
    ``1..len(lattice)``; direction 0 is the rest population and never streams.

    Parameters
    ----------
    nx : int
        Number of lattice points in x-direction
    ny : int
        Number of lattice points in y-direction
    """

    def __init__(self, nx, ny):
        if nx < 1 or ny < 1:
            raise ValueError(f"lattice dimensions must be positive, got {nx} x {ny}")
        self.nx = nx
        self.ny = ny

    @property
    def shape(self):
        return (self.ny, self.nx)

    def __len__(self):
        return Q - 1

    def __repr__(self):
        return f"D2Q9Lattice(nx={self.nx}, ny={self.ny})"

    def neighbor(self, site, direction):
        """
        Site reached from ``site`` by one hop along ``direction``.

        Parameters
        ----------
        site : tuple of int
            Source site ``(j, i)``
        direction : int
            Direction index in ``0..Q-1``

        Returns
        -------
        neighbor : tuple of int
            Destination site ``(j, i)``, wrapped periodically
        """
        j, i = site
        return (
            (j + int(EY[direction])) % self.ny,
            (i + int(EX[direction])) % self.nx,
        )

    def equilibrium(self, populations):
        """
        Equilibrium distribution for the density and velocity of one site.

        Parameters
        ----------
        populations : array_like
            Populations at the site, shape (Q,)

        Returns
        -------
        f_eq : ndarray
            Equilibrium distribution, shape (Q,)
        """
        populations = np.asarray(populations, dtype=np.float64)
        rho = site_density(populations)
        if rho > 1e-10:
            ux, uy = site_momentum(populations) / rho
        else:
            ux, uy = 0.0, 0.0
        return equilibrium_single_site(rho, ux, uy)

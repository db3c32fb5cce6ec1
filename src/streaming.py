"""
Streaming

Propagation of populations along lattice links:
    f_i(x + e_i, t + 1) = f_i^out(x, t)

The local kernel streams one link at a time through a policy chosen by the
classification of the destination site. The vectorised functions below do
the same for a fully periodic, all-fluid lattice and serve as a reference.
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, Q, OPPOSITE


# Site classification codes
FLAG_FLUID = 0
FLAG_SOLID = 1


class PushStreaming:
    """
    Move a population to the neighbouring site (fluid destination).

    Parameters
    ----------
    sim : Simulation
        Owner of the ``f`` and ``f_next`` buffers
    """

    def __init__(self, sim):
        self.sim = sim

    def __call__(self, source, destination, direction):
        self.sim.f_next[(direction,) + tuple(destination)] = \
            self.sim.f[(direction,) + tuple(source)]


class BounceBackStreaming:
    """
    Reflect a population back into its source site (solid destination).

    Full-way bounce-back: the population leaving along ``direction`` returns
    to the same site along ``OPPOSITE[direction]`` on the next step.
    """

    def __init__(self, sim):
        self.sim = sim

    def __call__(self, source, destination, direction):
        self.sim.f_next[(int(OPPOSITE[direction]),) + tuple(source)] = \
            self.sim.f[(direction,) + tuple(source)]


def stream_periodic(f):
    """
    Push-scheme streaming with periodic boundaries.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)

    Returns
    -------
    f_streamed : ndarray
        Post-streaming distribution
    """
    f_out = np.empty_like(f)

    for i in range(Q):
        f_out[i] = np.roll(f[i], (EY[i], EX[i]), axis=(0, 1))

    return f_out


@njit(parallel=True, cache=True)
def _stream_pull_numba(f, f_out, ex, ey):
    q, ny, nx = f.shape

    for j in prange(ny):
        for i in range(nx):
            for k in range(q):
                # Pull from x - e_k
                i_src = (i - ex[k] + nx) % nx
                j_src = (j - ey[k] + ny) % ny
                f_out[k, j, i] = f[k, j_src, i_src]


def stream_periodic_fast(f):
    """Numba pull-scheme version of :func:`stream_periodic`."""
    f_out = np.empty_like(f)
    _stream_pull_numba(f, f_out, EX.astype(np.int64), EY.astype(np.int64))
    return f_out

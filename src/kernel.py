"""
Local Kernel

Site-by-site LBM update. For one site the kernel

    1. asks the lattice for the site's equilibrium,
    2. asks the collision policy for an update and adds it in place,
    3. walks the moving directions 1..N, resolves each neighbour and hands
       the link to the streaming policy registered for the neighbour's
       classification.

Every collaborator is injected, so the routine can be driven with stubs
that record their calls (see ``src.mocking``) as well as with the real
BGK / streaming policies.
"""

import time

import numpy as np
from .lattice import EX, EY
from .descriptor import D2Q9Lattice
from .equilibrium import compute_equilibrium
from .collision import BGKCollision, viscosity_from_tau
from .streaming import FLAG_FLUID, FLAG_SOLID, PushStreaming, BounceBackStreaming


class Simulation:
    """
    Populations, site classification and lattice for one run.

    Parameters
    ----------
    f : ndarray
        Populations, shape (Q, ny, nx)
    flags : ndarray
        Site classification codes, shape (ny, nx)
    lattice : object
        Lattice descriptor (``D2Q9Lattice`` or a stand-in with the same
        ``equilibrium`` / ``__len__`` / ``neighbor`` interface)

    Attributes
    ----------
    f_next : ndarray
        Post-streaming buffer written by the streaming policies
    """

    def __init__(self, f, flags, lattice):
        f = np.asarray(f, dtype=np.float64)
        flags = np.asarray(flags)
        if f.ndim != 3 or f.shape[1:] != flags.shape:
            raise ValueError(
                f"populations of shape {f.shape} do not match "
                f"classification grid of shape {flags.shape}"
            )
        self.f = f
        self.flags = flags
        self.lattice = lattice
        self.f_next = f.copy()

    @property
    def shape(self):
        return self.flags.shape

    def fluid_sites(self):
        """Fluid sites in row-major order."""
        return [tuple(int(x) for x in site) for site in np.argwhere(self.flags == FLAG_FLUID)]

    def swap(self):
        self.f, self.f_next = self.f_next, self.f


class LocalKernel:
    """
    Collision policy plus one streaming policy per site classification.

    Parameters
    ----------
    collision : callable
        ``collision(populations, f_eq)`` returning the update for a site
    streaming : dict
        Classification code -> ``policy(source, destination, direction)``
    """

    def __init__(self, collision, streaming):
        self.collision = collision
        self.streaming = dict(streaming)


def local_kernel_step(kernel, sim, site):
    """
    Collide one site and stream its moving populations.

    Only the populations at ``site`` are modified in ``sim.f``; they become
    their previous value plus the collision update.

    Parameters
    ----------
    kernel : LocalKernel
        Collision and streaming policies
    sim : Simulation
        Populations, classification grid and lattice
    site : tuple of int
        Site ``(j, i)`` to update

    Raises
    ------
    ValueError
        If a neighbour's classification has no streaming policy
    """
    index = (slice(None),) + tuple(site)
    populations = sim.f[index]

    f_eq = sim.lattice.equilibrium(populations)
    sim.f[index] += kernel.collision(populations, f_eq)

    n = len(sim.lattice)
    for direction in range(1, n + 1):
        neighbor = sim.lattice.neighbor(site, direction)
        flag = sim.flags[tuple(neighbor)].item()
        policy = kernel.streaming.get(flag)
        if policy is None:
            raise ValueError(
                f"no streaming policy for site classification {flag!r} "
                f"at {tuple(neighbor)} (reached from {tuple(site)} along direction {direction})"
            )
        policy(site, neighbor, direction)


def kernel_sweep(kernel, sim):
    """
    One full time step: the local kernel on every fluid site, then swap.

    Non-fluid sites keep their populations. Rest populations (direction 0)
    are carried over from the post-collision state.

    Raises
    ------
    ValueError
        If any classification on the grid has no streaming policy. Raised
        before any site is collided, so ``sim`` is left unchanged.
    """
    for flag in np.unique(sim.flags).tolist():
        if flag not in kernel.streaming:
            raise ValueError(
                f"no streaming policy for site classification {flag!r} "
                f"(policies exist for {sorted(kernel.streaming)})"
            )

    sim.f_next[...] = sim.f

    for site in sim.fluid_sites():
        local_kernel_step(kernel, sim, site)

    fluid = sim.flags == FLAG_FLUID
    sim.f_next[0][fluid] = sim.f[0][fluid]
    sim.swap()


def channel_flags(nx, ny):
    """Classification grid for a channel with solid top and bottom rows."""
    flags = np.full((ny, nx), FLAG_FLUID, dtype=np.int32)
    flags[0, :] = FLAG_SOLID
    flags[-1, :] = FLAG_SOLID
    return flags


class LocalKernelSolver:
    """
    Site-by-site D2Q9 solver built on :func:`local_kernel_step`.

    Slow by construction; it exists to be compared against the vectorised
    step and to exercise the kernel's collaborators end to end.

    Parameters
    ----------
    nx : int
        Number of lattice points in x-direction
    ny : int
        Number of lattice points in y-direction
    tau : float
        Relaxation time (must be > 0.5)
    flags : ndarray, optional
        Site classification, shape (ny, nx). Defaults to all fluid
        (fully periodic).
    """

    def __init__(self, nx, ny, tau, flags=None):
        self.nx = nx
        self.ny = ny
        self.tau = tau
        self.viscosity = viscosity_from_tau(tau)

        if flags is None:
            flags = np.full((ny, nx), FLAG_FLUID, dtype=np.int32)

        self.lattice = D2Q9Lattice(nx, ny)
        rho = np.ones((ny, nx), dtype=np.float64)
        zeros = np.zeros((ny, nx), dtype=np.float64)
        self.sim = Simulation(compute_equilibrium(rho, zeros, zeros), flags, self.lattice)
        self.kernel = LocalKernel(
            BGKCollision(tau),
            {
                FLAG_FLUID: PushStreaming(self.sim),
                FLAG_SOLID: BounceBackStreaming(self.sim),
            },
        )

        self.step_count = 0
        self.total_time = 0.0

    @property
    def f(self):
        return self.sim.f

    def initialize_from_fields(self, rho, ux, uy):
        """
        Set populations to the equilibrium of the given fields.

        Parameters
        ----------
        rho : ndarray
            Density field, shape (ny, nx)
        ux, uy : ndarray
            Velocity fields, shape (ny, nx)
        """
        self.sim.f[...] = compute_equilibrium(rho, ux, uy)
        self.sim.f_next[...] = self.sim.f
        self.step_count = 0
        self.total_time = 0.0

    def step(self):
        """
        Perform one timestep.

        Returns
        -------
        dt : float
            Wall time of the step (seconds)
        """
        start = time.perf_counter()
        kernel_sweep(self.kernel, self.sim)
        dt = time.perf_counter() - start

        self.step_count += 1
        self.total_time += dt
        return dt

    def run(self, num_steps, verbose=True, report_interval=10):
        """
        Run ``num_steps`` timesteps.

        Returns
        -------
        mlups : float
            Million lattice updates per second
        """
        if report_interval < 1:
            raise ValueError(f"report_interval must be >= 1, got {report_interval}")

        start = time.perf_counter()

        for step in range(num_steps):
            self.step()

            if verbose and (step + 1) % report_interval == 0:
                elapsed = time.perf_counter() - start
                mlups = (step + 1) * self.nx * self.ny / elapsed / 1e6
                print(f"Step {step + 1}/{num_steps}, MLUPS: {mlups:.4f}")

        total = time.perf_counter() - start
        mlups = num_steps * self.nx * self.ny / total / 1e6 if total > 0 else 0.0

        if verbose:
            print(f"Completed {num_steps} steps in {total:.2f}s")

        return mlups

    def get_total_mass(self):
        """Total mass over fluid sites."""
        fluid = self.sim.flags == FLAG_FLUID
        return np.sum(self.sim.f[:, fluid])

    def get_total_momentum(self):
        """Total momentum over fluid sites."""
        fluid = self.sim.flags == FLAG_FLUID
        f = self.sim.f[:, fluid]
        return np.sum(f * EX[:, None]), np.sum(f * EY[:, None])

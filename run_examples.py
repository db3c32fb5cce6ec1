# run_examples.py - Walk through the testing examples cell by cell
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from src.lattice import Q
from src.descriptor import D2Q9Lattice
from src.equilibrium import equilibrium_single_site, compute_equilibrium
from src.observables import site_momentum, site_density, compute_macroscopic
from src.collision import relaxation_update, bgk_collision
from src.streaming import FLAG_FLUID, FLAG_SOLID, stream_periodic
from src.kernel import (
    Simulation, LocalKernel, local_kernel_step, kernel_sweep,
    LocalKernelSolver, channel_flags
)
from src.mocking import CallRecorder, RecordingLattice, recording_stub
from src.facts import FactSheet
from visualization.field_plots import plot_density

rng = np.random.default_rng(2024)


# Cell 1: a known-answer test for the momentum combination
facts = FactSheet("Momentum")
matrix = [[1, 2], [3, 4]]
facts.check(site_momentum([1, 1], matrix), [3, 7], "E @ [1, 1]")
facts.check(site_momentum([-1, 1], matrix), [1, 1], "E @ [-1, 1]")
facts.check(site_momentum(equilibrium_single_site(1.0, 0.0, 0.0)), [0, 0],
            "fluid at rest has no momentum", atol=1e-15)
facts.report()


# Cell 2: compare the density sum against a closed form
facts = FactSheet("Density")
facts.check(site_density(np.arange(1, 11)), 10 * 11 // 2, "sum of 1..10")
facts.check(site_density(np.arange(10, 16)), 15 * 16 // 2 - 9 * 10 // 2, "sum of 10..15")
facts.check(site_density(equilibrium_single_site(1.3, 0.05, -0.02)), 1.3,
            "equilibrium carries the requested density", rtol=1e-14)
facts.report()


# Cell 3: behavioural properties instead of hard-coded outputs
facts = FactSheet("Relaxation update")
for _ in range(5):
    a, b = rng.random(Q), rng.random(Q)
    omega = rng.uniform(0.5, 1.9)
    facts.check(relaxation_update(omega, a, b), omega * relaxation_update(1, a, b),
                "linear in omega", rtol=1e-12)
    facts.check(relaxation_update(1, 3 * a, 0), 3 * relaxation_update(1, a, 0),
                "linear in f", rtol=1e-12)
    facts.check(relaxation_update(1, a, b), -relaxation_update(1, b, a),
                "antisymmetric")
facts.report()


# Cell 4: mock every collaborator and watch the data flow
facts = FactSheet("Mocked local kernel")
recorder = CallRecorder()
nx, ny = 4, 3
site = (1, 2)
f = rng.random((Q, ny, nx))
flags = np.full((ny, nx), FLAG_FLUID)
update = np.full(Q, 0.25)

lattice = RecordingLattice(recorder, D2Q9Lattice(nx, ny), equilibrium=np.zeros(Q))
sim = Simulation(f.copy(), flags, lattice)
kernel = LocalKernel(
    recording_stub(recorder, "collision", update),
    {FLAG_FLUID: recording_stub(recorder, "stream_fluid")},
)

recorder.reset()
local_kernel_step(kernel, sim, site)

expected = ["equilibrium", "collision", "len"] + ["neighbor", "stream_fluid"] * len(lattice.lattice)
facts.check_true(recorder.names() == expected, "collaborators called in order")
facts.check(recorder.args_of("equilibrium")[0][0], f[:, 1, 2], "equilibrium saw pre-collision populations")
facts.check(sim.f[:, 1, 2], f[:, 1, 2] + update, "target site updated by collision result")
others = np.ones((ny, nx), dtype=bool)
others[site] = False
facts.check(sim.f[:, others], f[:, others], "other sites untouched")
facts.report()


# Cell 5: two algorithms, one answer
facts = FactSheet("Site-by-site sweep vs vectorised step")
nx, ny, tau = 12, 8, 0.8
rho = 1.0 + 0.05 * rng.standard_normal((ny, nx))
ux = 0.03 * rng.standard_normal((ny, nx))
uy = 0.03 * rng.standard_normal((ny, nx))

solver = LocalKernelSolver(nx, ny, tau)
solver.initialize_from_fields(rho, ux, uy)
f_ref = compute_equilibrium(rho, ux, uy)
for _ in range(3):
    solver.step()
    f_ref = stream_periodic(bgk_collision(f_ref, compute_equilibrium(*compute_macroscopic(f_ref)), tau))
    facts.check(solver.f, f_ref, "sweep matches collide-and-stream", rtol=1e-12, atol=1e-15)
facts.report()


# Cell 6: conservation in a bounce-back channel
facts = FactSheet("Channel with bounce-back walls")
nx, ny = 24, 10
solver = LocalKernelSolver(nx, ny, tau=0.9, flags=channel_flags(nx, ny))
fluid = slice(1, ny - 1)
rho = np.ones((ny, nx))
ux = np.zeros((ny, nx))
ux[fluid] = 0.05
solver.initialize_from_fields(rho, ux, np.zeros((ny, nx)))

mass_initial = solver.get_total_mass()
solver.run(20, verbose=True, report_interval=10)
facts.check(solver.get_total_mass(), mass_initial, "mass conserved", rtol=1e-12)
mom_x, _ = solver.get_total_momentum()
facts.check_true(mom_x > 0, "flow still moves downstream")
facts.report()

rho_final, _, _ = compute_macroscopic(solver.f)
rho_final[solver.sim.flags == FLAG_SOLID] = np.nan
fig = plot_density(rho_final, title="Channel density after 20 steps")
fig.savefig("channel_density.png", dpi=120)
plt.close(fig)
print("Saved channel_density.png")

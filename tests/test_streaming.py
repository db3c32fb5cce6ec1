"""
Tests for the streaming policies and the vectorised streaming reference.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.lattice import EX, EY, Q, OPPOSITE
from src.descriptor import D2Q9Lattice
from src.streaming import (
    FLAG_FLUID,
    PushStreaming,
    BounceBackStreaming,
    stream_periodic,
    stream_periodic_fast,
)
from src.kernel import Simulation


@pytest.fixture
def sim():
    ny, nx = 4, 5
    f = np.arange(Q * ny * nx, dtype=np.float64).reshape(Q, ny, nx)
    sim = Simulation(f, np.full((ny, nx), FLAG_FLUID), D2Q9Lattice(nx, ny))
    sim.f_next[...] = -1.0
    return sim


class TestStreamingPolicies:
    """One link at a time."""

    def test_push_copies_population_to_destination(self, sim):
        """Verify push writes exactly one population at the destination."""
        PushStreaming(sim)((1, 1), (1, 2), 1)

        assert sim.f_next[1, 1, 2] == sim.f[1, 1, 1]
        assert np.count_nonzero(sim.f_next != -1.0) == 1

    def test_bounce_back_reflects_into_source(self, sim):
        """Verify bounce-back writes the reversed population at the source."""
        BounceBackStreaming(sim)((1, 1), (2, 2), 5)

        assert sim.f_next[OPPOSITE[5], 1, 1] == sim.f[5, 1, 1]
        assert np.count_nonzero(sim.f_next != -1.0) == 1

    def test_policies_do_not_touch_current_populations(self, sim):
        """Streaming policies should only write the next buffer."""
        before = sim.f.copy()
        PushStreaming(sim)((0, 0), (0, 1), 1)
        BounceBackStreaming(sim)((0, 0), (1, 0), 2)

        np.testing.assert_array_equal(sim.f, before)


class TestPeriodicStreaming:
    """Vectorised streaming on a periodic lattice."""

    @pytest.fixture
    def field(self):
        rng = np.random.default_rng(5)
        return rng.random((Q, 6, 7))

    def test_moves_along_velocity(self, field):
        """Verify each population moves one step along its velocity."""
        f_out = stream_periodic(field)
        ny, nx = field.shape[1:]

        for k in range(Q):
            j_dst = (2 + EY[k]) % ny
            i_dst = (3 + EX[k]) % nx
            assert f_out[k, j_dst, i_dst] == field[k, 2, 3]

    def test_conserves_mass(self, field):
        """Mass should be exactly conserved by streaming."""
        assert np.isclose(stream_periodic(field).sum(), field.sum(), rtol=1e-14)

    def test_fast_pull_equals_push(self, field):
        """Verify fast streaming matches standard implementation."""
        np.testing.assert_array_equal(stream_periodic_fast(field), stream_periodic(field))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

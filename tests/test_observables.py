"""
Tests for density and momentum.

Known-answer checks on tiny inputs, then consistency of the field forms.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.lattice import EX, EY, Q
from src.equilibrium import equilibrium_single_site, compute_equilibrium
from src.observables import (
    site_momentum,
    site_density,
    compute_density,
    compute_velocity,
    compute_macroscopic,
    compute_macroscopic_fast,
)


class TestSiteMomentum:
    """Matrix-vector combination of populations with velocities."""

    def test_unit_populations(self):
        """Verify [[1, 2], [3, 4]] @ [1, 1] = [3, 7]."""
        np.testing.assert_array_equal(site_momentum([1, 1], [[1, 2], [3, 4]]), [3, 7])

    def test_mixed_sign_populations(self):
        """Verify [[1, 2], [3, 4]] @ [-1, 1] = [1, 1]."""
        np.testing.assert_array_equal(site_momentum([-1, 1], [[1, 2], [3, 4]]), [1, 1])

    def test_default_velocities_are_d2q9(self):
        """Single population in direction 5 moves diagonally up-right."""
        f = np.zeros(Q)
        f[5] = 2.0

        np.testing.assert_array_equal(site_momentum(f), [2.0, 2.0])

    def test_equilibrium_momentum(self):
        """Momentum of f_eq should be rho times u."""
        rho, ux, uy = 1.2, 0.04, -0.03
        f_eq = equilibrium_single_site(rho, ux, uy)

        np.testing.assert_allclose(site_momentum(f_eq), [rho * ux, rho * uy], rtol=1e-12)


class TestSiteDensity:
    """Sum of populations against closed forms."""

    @pytest.mark.parametrize("low, high", [(1, 10), (10, 15), (0, 0), (3, 100)])
    def test_matches_triangular_numbers(self, low, high):
        """Verify density of a run of integers against the closed form."""
        expected = high * (high + 1) // 2 - (low - 1) * low // 2

        assert site_density(np.arange(low, high + 1)) == expected

    def test_known_values(self):
        """Verify sums over 1..10 and 10..15."""
        assert site_density(range(1, 11)) == 55
        assert site_density(range(10, 16)) == 75

    def test_equilibrium_density(self):
        """Verify density of f_eq equals rho."""
        f_eq = equilibrium_single_site(0.9, 0.1, 0.02)

        assert np.isclose(site_density(f_eq), 0.9, rtol=1e-14)


class TestFieldMoments:
    """Field moments agree with per-site moments."""

    @pytest.fixture
    def field(self):
        rng = np.random.default_rng(7)
        ny, nx = 6, 5
        rho = 1.0 + 0.1 * rng.standard_normal((ny, nx))
        ux = 0.05 * rng.standard_normal((ny, nx))
        uy = 0.05 * rng.standard_normal((ny, nx))
        return compute_equilibrium(rho, ux, uy), rho, ux, uy

    def test_density_recovered(self, field):
        """Verify density field is recovered from f_eq."""
        f, rho, _, _ = field

        np.testing.assert_allclose(compute_density(f), rho, rtol=1e-14)

    def test_velocity_recovered(self, field):
        """Verify velocity field is recovered from f_eq."""
        f, _, ux, uy = field
        ux_c, uy_c = compute_velocity(f)

        np.testing.assert_allclose(ux_c, ux, rtol=1e-12, atol=1e-15)
        np.testing.assert_allclose(uy_c, uy, rtol=1e-12, atol=1e-15)

    def test_field_matches_site_by_site(self, field):
        """Field moments should match the single-site functions."""
        f = field[0]
        rho, ux, uy = compute_macroscopic(f)

        for j, i in [(0, 0), (3, 2), (5, 4)]:
            mom = site_momentum(f[:, j, i])
            assert np.isclose(rho[j, i], site_density(f[:, j, i]), rtol=1e-14)
            assert np.isclose(ux[j, i] * rho[j, i], mom[0], rtol=1e-12)
            assert np.isclose(uy[j, i] * rho[j, i], mom[1], rtol=1e-12)

    def test_empty_sites_have_zero_velocity(self):
        """Verify sites with zero density get zero velocity."""
        f = np.zeros((Q, 2, 2))
        ux, uy = compute_velocity(f)

        assert np.all(ux == 0.0) and np.all(uy == 0.0)

    def test_fast_equals_standard(self, field):
        """Verify fast macroscopic matches standard implementation."""
        f = field[0]

        for fast, std in zip(compute_macroscopic_fast(f), compute_macroscopic(f)):
            np.testing.assert_allclose(fast, std, rtol=1e-12, atol=1e-15)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

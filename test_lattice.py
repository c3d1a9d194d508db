#!/usr/bin/env python3
"""
Tests for lattice geometry, spin storage and cluster markers.
"""

import numpy as np
import pytest

from onlab import Hyperrectangle, SpinLattice, ClusterTracker, SpinVector, RandomGenerator
from onlab.utils import ConfigurationError


def test_chain_neighbours():
    """1-D ring of 4 sites: forward then backward."""
    lattice = Hyperrectangle(1, 4)
    assert lattice.N == 4
    assert lattice.L == (4,)

    assert [lattice.neighbour(0, d) for d in range(2)] == [1, 3]
    assert [lattice.neighbour(3, d) for d in range(2)] == [0, 2]


def test_square_lattice_neighbours():
    lattice = Hyperrectangle(2, 3)
    assert lattice.N == 9

    # site 4 is the centre (1, 1)
    assert list(lattice.neighbour_table[4]) == [5, 7, 3, 1]
    # corner (0, 0) wraps in both directions
    assert list(lattice.neighbour_table[0]) == [1, 3, 2, 6]


def test_forward_and_backward_are_inverse():
    lattice = Hyperrectangle(3, (3, 4, 5))
    assert lattice.N == 60

    table = lattice.neighbour_table
    sites = np.arange(lattice.N)
    for k in range(lattice.D):
        np.testing.assert_array_equal(table[table[:, k], k + lattice.D], sites)


def test_coordinates_round_trip():
    lattice = Hyperrectangle(3, (2, 3, 4))
    for site in range(lattice.N):
        assert lattice.site_index(lattice.coordinates(site)) == site


def test_invalid_geometry():
    with pytest.raises(ConfigurationError):
        Hyperrectangle(0, 4)
    with pytest.raises(ConfigurationError):
        Hyperrectangle(2, 0)
    with pytest.raises(ConfigurationError):
        Hyperrectangle(2, (4, 4, 4))


def test_spin_lattice_get_and_replace():
    spins = SpinLattice(4, 2)
    np.testing.assert_allclose(spins.configuration, [[1.0, 0.0]] * 4)

    spins.replace(2, SpinVector([0.0, 1.0]))
    np.testing.assert_allclose(spins.get(2).v, [0.0, 1.0])

    # get() hands out a live view
    spins.get(2).reflect(SpinVector([0.0, 1.0]))
    np.testing.assert_allclose(spins.configuration[2], [0.0, -1.0])


def test_randomize_all_unit_norms():
    spins = SpinLattice(100, 3)
    spins.randomize_all(RandomGenerator(11))

    np.testing.assert_allclose(spins.norms(), 1.0, atol=1e-12)
    # not all identical
    assert np.std(spins.configuration[:, 0]) > 0.1


def test_reflect_sites_only_touches_listed_sites():
    spins = SpinLattice(5, 3)
    spins.randomize_all(RandomGenerator(12))
    before = spins.configuration.copy()
    axis = SpinVector.random_unit(3, RandomGenerator(13))

    spins.reflect_sites([1, 3], axis)

    np.testing.assert_array_equal(spins.configuration[[0, 2, 4]], before[[0, 2, 4]])
    for site in (1, 3):
        expected = before[site] - 2.0 * np.dot(before[site], axis.v) * axis.v
        np.testing.assert_allclose(spins.configuration[site], expected, atol=1e-12)


def test_set_configuration_validates():
    spins = SpinLattice(2, 2)
    spins.set_configuration([[2.0, 0.0], [0.0, -3.0]])
    np.testing.assert_allclose(spins.configuration, [[1.0, 0.0], [0.0, -1.0]])

    with pytest.raises(ValueError):
        spins.set_configuration(np.ones((3, 2)))
    with pytest.raises(ValueError):
        spins.set_configuration([[0.0, 0.0], [1.0, 0.0]])


def test_cluster_tracker_mark_and_clear():
    tracker = ClusterTracker(6)
    assert tracker.is_clear()

    for site in (0, 2, 5):
        tracker.mark(site)
    assert 2 in tracker
    assert not tracker.contains(1)
    assert not tracker.is_clear()

    tracker.clear([0, 2, 5])
    assert tracker.is_clear()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

#!/usr/bin/env python3
"""
Tests for spin vectors, reflections and the random generator.
"""

import numpy as np
import pytest

from onlab import SpinVector, RandomGenerator


def test_random_unit_is_normalized():
    """Random directions have unit length in every dimension."""
    rng = RandomGenerator(1)
    for spin_dim in (2, 3, 4, 7):
        for _ in range(20):
            s = SpinVector.random_unit(spin_dim, rng)
            assert s.spin_dim == spin_dim
            assert s.norm() == pytest.approx(1.0, abs=1e-12)


def test_random_unit_subrange_zeroes_other_components():
    """Restricting the component range leaves the rest exactly zero."""
    rng = RandomGenerator(2)
    for _ in range(20):
        s = SpinVector.random_unit(5, rng, start=1, end=3)
        assert s[0] == 0.0
        assert s[4] == 0.0
        assert s.norm() == pytest.approx(1.0, abs=1e-12)


def test_random_unit_rejects_bad_range():
    rng = RandomGenerator(3)
    with pytest.raises(ValueError):
        SpinVector.random_unit(3, rng, start=2, end=1)
    with pytest.raises(ValueError):
        SpinVector.random_unit(3, rng, start=0, end=3)


def test_reflect_twice_is_identity():
    """Reflecting twice about the same axis gives back the original spin."""
    rng = RandomGenerator(4)
    for spin_dim in (2, 3, 5):
        for _ in range(50):
            s = SpinVector.random_unit(spin_dim, rng)
            axis = SpinVector.random_unit(spin_dim, rng)
            original = s.copy()

            s.reflect(axis)
            s.reflect(axis)

            np.testing.assert_allclose(s.v, original.v, atol=1e-12)


def test_reflect_flips_component_along_axis():
    """s.r changes sign, the orthogonal part is unchanged."""
    rng = RandomGenerator(5)
    s = SpinVector.random_unit(3, rng)
    axis = SpinVector.random_unit(3, rng)

    before = s.dot(axis)
    perpendicular = s.v - before * axis.v

    s.reflect(axis)

    assert s.dot(axis) == pytest.approx(-before, abs=1e-12)
    np.testing.assert_allclose(s.v - s.dot(axis) * axis.v, perpendicular, atol=1e-12)
    assert s.norm() == pytest.approx(1.0, abs=1e-12)


def test_reflected_copy_does_not_mutate():
    s = SpinVector([0.6, 0.8])
    axis = SpinVector([1.0, 0.0])

    reflected = s.reflected_copy(axis)

    np.testing.assert_allclose(s.v, [0.6, 0.8])
    np.testing.assert_allclose(reflected.v, [-0.6, 0.8])


def test_dot_and_add_in_place():
    a = SpinVector([1.0, 0.0, 0.0])
    b = SpinVector([0.0, 1.0, 0.0])

    assert a.dot(b) == 0.0
    assert a.dot(a) == 1.0

    total = SpinVector.zeros(3)
    total.add_in_place(a)
    total.add_in_place(b)
    total.add_in_place(b)
    np.testing.assert_allclose(total.v, [1.0, 2.0, 0.0])


def test_view_writes_through():
    """A SpinVector built on a view mutates the underlying array."""
    storage = np.array([[1.0, 0.0], [0.0, 1.0]])
    s = SpinVector(storage[1])
    s.reflect(SpinVector([0.0, 1.0]))
    np.testing.assert_allclose(storage[1], [0.0, -1.0])


def test_rand_int_inclusive_range():
    rng = RandomGenerator(6)
    draws = [rng.rand_int(3) for _ in range(400)]
    assert min(draws) == 0
    assert max(draws) == 3


def test_rand_dbl_exc_open_interval():
    rng = RandomGenerator(7)
    draws = np.array([rng.rand_dbl_exc() for _ in range(1000)])
    assert np.all(draws > 0.0)
    assert np.all(draws < 1.0)


def test_same_seed_same_stream():
    a = RandomGenerator(42)
    b = RandomGenerator(42)
    assert [a.rand_int(100) for _ in range(10)] == [b.rand_int(100) for _ in range(10)]
    np.testing.assert_array_equal(a.normal(5), b.normal(5))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

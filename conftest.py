"""Shared test helpers."""

import numpy as np
import pytest


class ScriptedRNG:
    """
    Random generator replaying fixed values.

    Each kind of draw (integers, (0,1) reals, Gaussian vectors) is served
    from its own queue so tests can spell out the exact sequence an
    update is expected to consume.
    """

    def __init__(self, ints=(), doubles=(), normals=()):
        self.ints = list(ints)
        self.doubles = list(doubles)
        self.normals = [np.asarray(v, dtype=float) for v in normals]

    def rand_int(self, max_value):
        value = self.ints.pop(0)
        assert 0 <= value <= max_value
        return value

    def rand_dbl_exc(self):
        value = self.doubles.pop(0)
        assert 0.0 < value < 1.0
        return value

    def normal(self, size=1):
        value = self.normals.pop(0)
        assert value.shape == np.empty(size).shape
        return value.copy()

    def exhausted(self):
        return not (self.ints or self.doubles or self.normals)


@pytest.fixture
def scripted_rng():
    return ScriptedRNG

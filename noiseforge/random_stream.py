"""Seedable random source shared by white noise, permutation and nuclei."""

import numpy as np

SEED_MODULUS = 2**32


class RandomStream:
    """Deterministic uniform random stream backed by numpy RandomState.

    One stream is scoped to one generation call. Two streams seeded with
    the same value produce the same sequence of draws.
    """

    def __init__(self, seed=0):
        self._rng = np.random.RandomState()
        self.seed(seed)

    def seed(self, value):
        """Reset the stream. Any int is accepted (reduced mod 2**32)."""
        self._rng.seed(int(value) % SEED_MODULUS)

    def uniform(self, lo, hi, size=None):
        """Float(s) in [lo, hi). Array draws consume the stream in C order."""
        return self._rng.uniform(lo, hi, size)

    def uniform_int(self, n):
        """Integer in [0, n)."""
        return int(self._rng.randint(0, n))

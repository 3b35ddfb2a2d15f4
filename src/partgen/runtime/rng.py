"""
Randomness utilities with deterministic seed derivation.
"""

import hashlib

import numpy as np


# Seed namespace convention:
# - Use one base seed per sampler.
# - Derive per-call streams with RNG.derive_seed(seed, "<namespace>", index, ...).
class RNG:
    def __init__(self, seed=None):
        if seed is None:
            seed = np.random.SeedSequence().entropy % (2**32)
        self.seed = int(seed)
        self.rng = np.random.default_rng(self.seed)

    @staticmethod
    def derive_seed(base_seed, *parts):
        h = hashlib.sha256()
        h.update(str(base_seed).encode())
        for part in parts:
            h.update(b":")
            h.update(str(part).encode())
        return int(h.hexdigest(), 16) % (2**32)

    def spawn(self, *parts):
        return RNG(RNG.derive_seed(self.seed, *parts))

    def random(self, size=None):
        return self.rng.random(size)


def resolve_rng(rng=None):
    """Return an object with a numpy-style ``random(size)`` method.

    Accepts ``None`` (fresh entropy-seeded stream), an integer seed, a
    ``SeedSequence``, a numpy ``Generator`` or an ``RNG``.
    """

    if rng is None:
        return RNG()
    if isinstance(rng, (RNG, np.random.Generator)):
        return rng
    if isinstance(rng, np.random.SeedSequence):
        return np.random.default_rng(rng)
    if isinstance(rng, (int, np.integer)) and not isinstance(rng, bool):
        return RNG(int(rng))
    raise TypeError(f"Unsupported random source: {type(rng).__name__}")

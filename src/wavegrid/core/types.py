"""Type definitions shared across the package."""

from typing import Literal, TypeAlias

import numpy as np

# Geometry
Point: TypeAlias = tuple[float, float]
Direction: TypeAlias = Literal["horizontal", "vertical"]

# Injectable randomness for simulated readings
RandomSource: TypeAlias = np.random.Generator


def default_random_source() -> RandomSource:
    """Fresh, OS-seeded generator for production use."""
    return np.random.default_rng()

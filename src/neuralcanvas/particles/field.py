from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import numpy as np

PARTICLE_COUNT = 60
MAX_AXIS_SPEED = 0.25
LINK_DISTANCE = 100.0
LINK_MAX_ALPHA = 0.15


def _frozen(a: np.ndarray) -> np.ndarray:
    a.setflags(write=False)
    return a


@dataclass(frozen=True)
class ParticleField:
    """
    Particle state for one canvas, held column-wise.

    positions / velocities: (n, 2) arrays of x, y
    radii: (n,) in [1, 3)
    opacities: (n,) in [0.2, 0.7)

    Arrays are read-only; `step` returns a new field.
    """
    width: float
    height: float
    positions: np.ndarray
    velocities: np.ndarray
    radii: np.ndarray
    opacities: np.ndarray

    @classmethod
    def spawn(
        cls,
        width: float,
        height: float,
        count: int = PARTICLE_COUNT,
        rng: Optional[np.random.Generator] = None,
    ) -> "ParticleField":
        rng = rng or np.random.default_rng()
        positions = rng.random((count, 2)) * np.array([width, height], dtype=float)
        velocities = (rng.random((count, 2)) - 0.5) * (2 * MAX_AXIS_SPEED)
        radii = rng.random(count) * 2 + 1
        opacities = rng.random(count) * 0.5 + 0.2
        return cls(
            width=float(width),
            height=float(height),
            positions=_frozen(positions),
            velocities=_frozen(velocities),
            radii=_frozen(radii),
            opacities=_frozen(opacities),
        )

    @property
    def count(self) -> int:
        return int(self.positions.shape[0])


def step(field: ParticleField) -> ParticleField:
    """Advance every particle by its velocity and bounce off the walls.

    A velocity component flips sign when the new position on that axis is
    outside [0, bound]. Positions are not clamped, so a particle can sit
    slightly outside the canvas for a frame.
    """
    positions = field.positions + field.velocities
    bounds = np.array([field.width, field.height])
    outside = (positions < 0) | (positions > bounds)
    velocities = np.where(outside, -field.velocities, field.velocities)
    return replace(field, positions=_frozen(positions), velocities=_frozen(velocities))


def pair_distances(field: ParticleField) -> np.ndarray:
    diff = field.positions[:, None, :] - field.positions[None, :, :]
    return np.hypot(diff[..., 0], diff[..., 1])


def connections(field: ParticleField, threshold: float = LINK_DISTANCE) -> List[Tuple[int, int, float]]:
    """Unordered pairs (i < j) closer than threshold, with their line opacity.

    Opacity fades linearly from LINK_MAX_ALPHA at distance 0 to 0 at the
    threshold. Pairs come out i-major.
    """
    if field.count < 2:
        return []
    dist = pair_distances(field)
    i, j = np.triu_indices(field.count, k=1)
    d = dist[i, j]
    close = d < threshold
    alphas = LINK_MAX_ALPHA * (1 - d[close] / threshold)
    return [(int(a), int(b), float(alpha)) for a, b, alpha in zip(i[close], j[close], alphas)]

"""Engine systems: RNG and the tile index."""

from skirmish.systems.rng import DeterministicRNG
from skirmish.systems.spatial_hash import TileIndex

__all__ = ["DeterministicRNG", "TileIndex"]

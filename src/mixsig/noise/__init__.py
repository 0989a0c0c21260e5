"""Deterministic noise: key derivation, draw tiers and seeded noise sources."""

from .keys import (
    derive_seed,
    splitmix64,
    fast_random,
    hash_pair,
    hash_to_index,
    spatial_key,
    time_key,
    time_seed,
    context_seed,
    saturate_u64,
    wrap_u64,
)

from .tiers import (
    Tier,
    StandardStream,
    FastStream,
    open_stream,
)

from .base import NoiseSource

from .coherent import (
    WhiteNoise,
    PerlinNoise,
    PinkNoise,
    CorrelatedNoise,
)

from .distributions import (
    GaussianNoise,
    PoissonNoise,
    StudentTNoise,
    ImpulseNoise,
    SeededRandom,
)

from .keyed import (
    SpatialNoise,
    PerCharacterNoise,
)

from .rng import Rng

__all__ = [
    # Keys
    "derive_seed",
    "splitmix64",
    "fast_random",
    "hash_pair",
    "hash_to_index",
    "spatial_key",
    "time_key",
    "time_seed",
    "context_seed",
    "saturate_u64",
    "wrap_u64",

    # Tiers
    "Tier",
    "StandardStream",
    "FastStream",
    "open_stream",

    # Sources
    "NoiseSource",
    "WhiteNoise",
    "PerlinNoise",
    "PinkNoise",
    "CorrelatedNoise",
    "GaussianNoise",
    "PoissonNoise",
    "StudentTNoise",
    "ImpulseNoise",
    "SeededRandom",
    "SpatialNoise",
    "PerCharacterNoise",

    # Convenience
    "Rng",
]

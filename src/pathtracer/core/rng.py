"""Explicit-state random number generation for Taichi kernels.

Every random draw in the render path threads a 32-bit generator state through
the call chain: a function that needs randomness takes ``rng: ti.u32`` and
returns its result together with the advanced state. There is no hidden global
generator, so two samples never share state and each sample's stream is a pure
function of ``(base_seed, row, col, sample)``.

The generator is Marsaglia's xorshift32. Streams are seeded by chaining the
Wang integer hash over the sample coordinates, which decorrelates neighbouring
pixels and samples.

Right shifts are masked so the result does not depend on whether the backend
lowers ``>>`` on unsigned integers to a logical or an arithmetic shift.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.core.rng import seed_sample, next_float
    >>> # Within a Taichi kernel:
    >>> # rng = seed_sample(base_seed, row, col, sample)
    >>> # x, rng = next_float(rng)
"""

import numpy as np
import taichi as ti

# Replacement for an all-zero hash output; xorshift32 never leaves state 0
_NONZERO_STATE = 123456789

# 2^-24, maps a 24-bit integer onto [0, 1)
_INV_2_24 = 1.0 / 16777216.0


@ti.func
def wang_hash(x: ti.u32) -> ti.u32:
    """Thomas Wang's 32-bit integer hash.

    Args:
        x: The value to hash.

    Returns:
        A well-mixed 32-bit hash of x.
    """
    h = (x ^ ti.u32(61)) ^ ((x >> 16) & ti.u32(0xFFFF))
    h = h * ti.u32(9)
    h = h ^ ((h >> 4) & ti.u32(0x0FFFFFFF))
    h = h * ti.u32(0x27D4EB2D)
    h = h ^ ((h >> 15) & ti.u32(0x1FFFF))
    return h


@ti.func
def seed_sample(base_seed: ti.u32, row: ti.i32, col: ti.i32, sample: ti.i32) -> ti.u32:
    """Derive the generator state for one pixel sample.

    The state is a pure function of its arguments, so a render with a fixed
    base seed is reproducible regardless of how pixels are scheduled across
    threads.

    Args:
        base_seed: Render-wide seed.
        row: Image row (0 = top).
        col: Image column (0 = left).
        sample: Sample index within the pixel.

    Returns:
        A non-zero xorshift32 state.
    """
    h = wang_hash(ti.cast(sample, ti.u32))
    h = wang_hash(ti.cast(row, ti.u32) + h)
    h = wang_hash(ti.cast(col, ti.u32) + h)
    h = wang_hash(base_seed ^ h)
    if h == ti.u32(0):
        h = ti.u32(_NONZERO_STATE)
    return h


@ti.func
def next_u32(rng: ti.u32):
    """Advance the generator by one xorshift32 step.

    Args:
        rng: The current (non-zero) generator state.

    Returns:
        A tuple (value, new_state); the value is the new state itself.
    """
    x = rng
    x = x ^ (x << 13)
    x = x ^ ((x >> 17) & ti.u32(0x7FFF))
    x = x ^ (x << 5)
    return x, x


@ti.func
def next_float(rng: ti.u32):
    """Draw a uniform float in [0, 1).

    Uses the top 24 bits of the next state, which f32 represents exactly.

    Returns:
        A tuple (value, new_state).
    """
    bits, state = next_u32(rng)
    value = ti.cast((bits >> 8) & ti.u32(0xFFFFFF), ti.f32) * _INV_2_24
    return value, state


@ti.func
def next_range(rng: ti.u32, lo: ti.f32, hi: ti.f32):
    """Draw a uniform float in [lo, hi).

    Returns:
        A tuple (value, new_state).
    """
    r, state = next_float(rng)
    return lo + (hi - lo) * r, state


# =============================================================================
# Host-side seeding
# =============================================================================


def resolve_seed(seed: int | None = None) -> int:
    """Resolve the render-wide base seed.

    Args:
        seed: A fixed seed for reproducible renders, or None to draw one from
            OS entropy.

    Returns:
        The seed reduced to an unsigned 32-bit integer.
    """
    if seed is None:
        return int(np.random.SeedSequence().generate_state(1, dtype=np.uint32)[0])
    return int(seed) & 0xFFFFFFFF

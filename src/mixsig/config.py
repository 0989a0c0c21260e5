"""
Environment-driven defaults.

Values are read at call time so tests and host applications can change
them with ``monkeypatch.setenv`` / ``os.environ`` without reloading.
"""

from __future__ import annotations

import logging
import os

_LOGGER = logging.getLogger(__name__)

NOISE_TIER_ENV = "MIXSIG_NOISE_TIER"
PHASE_STEPS_ENV = "MIXSIG_PHASE_STEPS"

DEFAULT_NOISE_TIER = "standard"
DEFAULT_PHASE_STEPS = 1000.0

# Upper bound on trapezoid steps for one integral; keeps sampling bounded-cost.
MAX_INTEGRATION_STEPS = 200_000


def default_tier_name() -> str:
    """Name of the noise tier used when a generator is built without one."""
    configured = os.environ.get(NOISE_TIER_ENV, "").strip().lower()
    if not configured:
        return DEFAULT_NOISE_TIER
    if configured not in ("standard", "fast"):
        _LOGGER.warning("Ignoring %s=%r; expected 'standard' or 'fast'", NOISE_TIER_ENV, configured)
        return DEFAULT_NOISE_TIER
    return configured


def phase_steps_per_second() -> float:
    """Trapezoid steps per second used by phase and FM integration."""
    configured = os.environ.get(PHASE_STEPS_ENV)
    if not configured:
        return DEFAULT_PHASE_STEPS
    try:
        steps = float(configured)
    except ValueError:
        _LOGGER.warning("Ignoring %s=%r; not a number", PHASE_STEPS_ENV, configured)
        return DEFAULT_PHASE_STEPS
    if not steps > 0 or steps == float("inf"):
        _LOGGER.warning("Ignoring %s=%r; must be positive and finite", PHASE_STEPS_ENV, configured)
        return DEFAULT_PHASE_STEPS
    return steps

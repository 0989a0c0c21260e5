"""Turning specifications into live signals."""

from __future__ import annotations

from typing import Any, Mapping, Union

from ..core.signal import Signal
from .loading import parse_spec
from .models import SpecModel


def build(spec: Union[SpecModel, Mapping[str, Any]]) -> Signal:
    """
    Build a live signal from a specification model or a plain mapping.

    Every call returns a fresh signal tree, so stateful nodes (filters)
    never share history between builds.

    Raises:
        SpecError: If the specification is invalid; ``path`` names the
            failing sub-specification, e.g. ``"a.signal"``

    Example:
        >>> signal = build({"type": "normalized", "signal": {"type": "sine"}})
        >>> signal.sample(0.25)
        1.0
    """
    return parse_spec(spec).build()

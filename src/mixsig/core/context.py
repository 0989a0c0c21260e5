"""
Determinism inputs threaded through context-aware sampling.

A ``SignalContext`` is an immutable bundle; two contexts with equal
fields always produce equal output from any non-filter signal at the
same time. Contexts are cheap to build per call site.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, replace
from typing import Optional

U64_MASK = 0xFFFFFFFFFFFFFFFF


class PhaseKind(enum.Enum):
    START = "start"
    ACTIVE = "active"
    END = "end"
    DONE = "done"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Phase:
    """
    Lifecycle phase of an animated element.

    The closed set is Start, Active, End, Done and Custom(code). Use the
    class constants for the fixed members and ``Phase.custom(n)`` for the
    rest.

    Example:
        >>> Phase.custom(3) == Phase.custom(3)
        True
        >>> Phase.custom(3) == Phase.ACTIVE
        False
    """

    kind: PhaseKind = PhaseKind.ACTIVE
    code: int = 0

    def __post_init__(self):
        if self.kind is not PhaseKind.CUSTOM and self.code != 0:
            raise ValueError(f"Only custom phases carry a code, got {self.kind.value} with {self.code}")
        if self.code < 0:
            raise ValueError(f"Custom phase code must be non-negative, got {self.code}")

    @classmethod
    def custom(cls, code: int) -> "Phase":
        return cls(PhaseKind.CUSTOM, int(code))

    def __repr__(self) -> str:
        if self.kind is PhaseKind.CUSTOM:
            return f"Phase.custom({self.code})"
        return f"Phase.{self.kind.name}"


Phase.START = Phase(PhaseKind.START)
Phase.ACTIVE = Phase(PhaseKind.ACTIVE)
Phase.END = Phase(PhaseKind.END)
Phase.DONE = Phase(PhaseKind.DONE)


def _unit_clamp(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    value = float(value)
    if math.isnan(value):
        return 0.0
    return min(max(value, 0.0), 1.0)


@dataclass(frozen=True)
class SignalContext:
    """
    Immutable determinism context.

    Attributes:
        frame: Frame counter (unsigned 64-bit, wraps)
        seed: Seed mixed into every context-aware noise source
        phase: Lifecycle phase (defaults to Active)
        char_index: Optional per-glyph index for per-character noise
        width: Spatial x coordinate / region width used by spatial noise
        height: Spatial y coordinate / region height used by spatial noise
        phase_t: Progress within the current phase, clamped to [0, 1]
        loop_t: Progress within a loop, clamped to [0, 1]
        absolute_t: Wall time since start, never negative

    Example:
        >>> ctx = SignalContext(frame=10, seed=42).with_char_index(3)
        >>> ctx.char_index
        3
        >>> SignalContext.for_loop(1.7, frame=2).loop_t
        1.0
    """

    frame: int = 0
    seed: int = 0
    phase: Phase = Phase.ACTIVE
    char_index: Optional[int] = None
    width: int = 0
    height: int = 0
    phase_t: Optional[float] = None
    loop_t: Optional[float] = None
    absolute_t: Optional[float] = None

    def __post_init__(self):
        # Frozen: normalise through object.__setattr__.
        object.__setattr__(self, "frame", int(self.frame) & U64_MASK)
        object.__setattr__(self, "seed", int(self.seed) & U64_MASK)
        if self.char_index is not None:
            if self.char_index < 0:
                raise ValueError(f"char_index must be non-negative, got {self.char_index}")
            object.__setattr__(self, "char_index", int(self.char_index))
        object.__setattr__(self, "phase_t", _unit_clamp(self.phase_t))
        object.__setattr__(self, "loop_t", _unit_clamp(self.loop_t))
        if self.absolute_t is not None:
            absolute_t = float(self.absolute_t)
            object.__setattr__(self, "absolute_t", absolute_t if absolute_t > 0.0 else 0.0)

    def with_char_index(self, char_index: int) -> "SignalContext":
        return replace(self, char_index=char_index)

    def with_dimensions(self, width: int, height: int) -> "SignalContext":
        return replace(self, width=int(width), height=int(height))

    def with_seed(self, seed: int) -> "SignalContext":
        return replace(self, seed=seed)

    def with_frame(self, frame: int) -> "SignalContext":
        return replace(self, frame=frame)

    @classmethod
    def for_phase(cls, phase: Phase, phase_t: float, frame: int = 0) -> "SignalContext":
        return cls(frame=frame, phase=phase, phase_t=phase_t)

    @classmethod
    def for_loop(cls, loop_t: float, frame: int = 0) -> "SignalContext":
        return cls(frame=frame, loop_t=loop_t)

    @classmethod
    def full(
        cls,
        phase: Phase,
        phase_t: float,
        loop_t: Optional[float],
        absolute_t: float,
        frame: int = 0,
    ) -> "SignalContext":
        return cls(frame=frame, phase=phase, phase_t=phase_t, loop_t=loop_t, absolute_t=absolute_t)

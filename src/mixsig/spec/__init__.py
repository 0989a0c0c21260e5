"""Declarative, serializable signal specifications."""

from .models import (
    SpecModel,
    SignalSpec,
    SignalOrFloat,
    SPEC_MODELS,
)

from .loading import (
    parse_spec,
    loads_spec,
    load_spec,
    dumps_spec,
    spec_error,
)

from .build import build

from ..errors import SpecError

__all__ = [
    # Models
    "SpecModel",
    "SignalSpec",
    "SignalOrFloat",
    "SPEC_MODELS",

    # Loading
    "parse_spec",
    "loads_spec",
    "load_spec",
    "dumps_spec",
    "spec_error",

    # Building
    "build",
    "SpecError",
]

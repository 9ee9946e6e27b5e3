from cadence.strategies.base import BasePacer
from cadence.strategies.debounce import DebouncedValue
from cadence.strategies.registry import build_pacer
from cadence.strategies.throttle import ThrottledCallable

__all__ = [
    "BasePacer",
    "DebouncedValue",
    "ThrottledCallable",
    "build_pacer",
]

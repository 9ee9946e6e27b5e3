"""Tests for BasePacer ABC."""

import pytest

from cadence.errors import DetachedError
from cadence.strategies.base import BasePacer


class Dummy(BasePacer):
    def __init__(self, delay, **kwargs):
        super().__init__(delay, **kwargs)
        self.cancelled = 0

    @property
    def pending(self):
        return False

    def flush(self): ...

    def cancel(self):
        self.cancelled += 1


class TestBasePacer:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BasePacer(delay=1.0)  # type: ignore[abstract]

    def test_delay_validation(self):
        with pytest.raises(ValueError, match="delay must be non-negative"):
            Dummy(delay=-1)

    def test_delay_setter_validation(self):
        d = Dummy(delay=1.0)
        d.delay = 0
        assert d.delay == 0
        with pytest.raises(ValueError, match="delay must be non-negative"):
            d.delay = -0.5

    def test_detach_cancels_once(self):
        d = Dummy(delay=1.0)
        d.detach()
        d.detach()
        assert d.cancelled == 1
        assert d.detached is True

    def test_ensure_attached(self):
        d = Dummy(delay=1.0)
        d.detach()
        with pytest.raises(DetachedError, match="Dummy is detached"):
            d._ensure_attached()

    def test_detached_error_is_runtime_error(self):
        assert issubclass(DetachedError, RuntimeError)

    def test_repr(self):
        d = Dummy(delay=1.0)
        assert repr(d) == "Dummy(delay=1.0, pending=False, detached=False)"

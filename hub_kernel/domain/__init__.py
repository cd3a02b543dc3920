"""Pure domain helpers for the hub kernel."""

from hub_kernel.domain.clock import Clock, DeterministicClock, SystemClock

__all__ = ["Clock", "SystemClock", "DeterministicClock"]

"""Shared fixtures for proctop tests."""

import pytest

from proctop.models import ProcessSample, SystemSample
from proctop.provider import ProviderError

GIB = 1024**3


class FakeProvider:
    """Metrics provider replaying scripted cycles."""

    def __init__(self, cycles: list[list[ProcessSample]], system: SystemSample | None = None):
        self.cycles = list(cycles)
        self.system = system or SystemSample(
            total_memory_bytes=16 * GIB,
            free_bytes=4 * GIB,
            inactive_bytes=2 * GIB,
            speculative_bytes=0,
            compressed_bytes=1 * GIB,
            cpu_busy_percent=12.5,
        )
        self.system_calls = 0
        self.process_calls = 0
        self.fail_system = False
        self.fail_processes = False

    def sample_system(self) -> SystemSample:
        self.system_calls += 1
        if self.fail_system:
            raise ProviderError("host unreadable")
        return self.system

    def sample_processes(self) -> list[ProcessSample]:
        self.process_calls += 1
        if self.fail_processes:
            raise ProviderError("process table unreadable")
        if len(self.cycles) > 1:
            return self.cycles.pop(0)
        return self.cycles[0] if self.cycles else []


@pytest.fixture
def make_provider():
    """Factory for FakeProvider instances."""
    return FakeProvider

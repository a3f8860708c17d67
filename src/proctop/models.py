"""Data models for proctop."""

from dataclasses import dataclass

BYTES_PER_MB = 1024 * 1024
NS_PER_SECOND = 1_000_000_000


@dataclass(slots=True, frozen=True)
class SystemSample:
    """Host-wide memory and CPU state for one polling cycle."""

    total_memory_bytes: int
    free_bytes: int
    inactive_bytes: int
    speculative_bytes: int
    compressed_bytes: int
    cpu_busy_percent: float  # 0.0 - 100.0, aggregate over all cores

    @classmethod
    def zero(cls) -> "SystemSample":
        """Summary used when the host could never be read."""
        return cls(0, 0, 0, 0, 0, 0.0)

    @property
    def used_memory_bytes(self) -> int:
        """
        Memory in use, treating inactive and speculative pages as free.

        Compressed pages are counted back in. The result may exceed the
        physical total on some hosts and is only floored at zero.
        """
        reclaimable = self.free_bytes + self.inactive_bytes + self.speculative_bytes
        used = self.total_memory_bytes - reclaimable + self.compressed_bytes
        return max(used, 0)

    @property
    def ram_percent(self) -> float:
        if self.total_memory_bytes <= 0:
            return 0.0
        return self.used_memory_bytes / self.total_memory_bytes * 100.0


@dataclass(slots=True, frozen=True)
class ProcessSample:
    """Cumulative counters of a single process at one instant."""

    pid: int
    name: str  # Already truncated to display width
    user_time_ns: int
    system_time_ns: int
    resident_bytes: int


@dataclass(slots=True, frozen=True)
class CpuTimes:
    """Last observed cumulative CPU times of a pid."""

    user_time_ns: int
    system_time_ns: int


PrevStatsTable = dict[int, CpuTimes]


@dataclass(slots=True, frozen=True)
class Row:
    """One line of the process table. ``pid`` is None for a group row."""

    pid: int | None
    display_name: str
    cpu_percent: float
    resident_mb: float
    ram_percent: float

"""Metrics providers that read host and process counters."""

from typing import Protocol

import psutil
import structlog

from proctop.models import NS_PER_SECOND, ProcessSample, SystemSample

log = structlog.get_logger()

DEFAULT_NAME_WIDTH = 27
ELLIPSIS = "..."
UNKNOWN_NAME = "Unknown"


class ProviderError(Exception):
    """Raised when the host cannot be read at all."""


class MetricsProvider(Protocol):
    """Source of raw samples for one polling cycle."""

    def sample_system(self) -> SystemSample: ...

    def sample_processes(self) -> list[ProcessSample]: ...


def truncate_name(name: str, width: int = DEFAULT_NAME_WIDTH) -> str:
    """Shorten ``name`` to ``width`` characters, ending in an ellipsis if cut."""
    if len(name) <= width:
        return name
    return name[: width - len(ELLIPSIS)] + ELLIPSIS


class PsutilProvider:
    """
    Metrics provider backed by psutil.

    Processes that vanish mid-scan or deny access are left out of the sample
    instead of failing it.
    """

    def __init__(self, name_width: int = DEFAULT_NAME_WIDTH) -> None:
        """
        Initialize the PsutilProvider.

        Args:
            name_width: Maximum display width of process names.
        """
        self._name_width = name_width
        # First call returns a meaningless 0.0; later calls measure since the last
        psutil.cpu_percent(interval=None)

    @property
    def name_width(self) -> int:
        return self._name_width

    def sample_system(self) -> SystemSample:
        """Read physical memory breakdown and aggregate CPU busy percent."""
        try:
            cpu_busy = psutil.cpu_percent(interval=None)
            mem = psutil.virtual_memory()
        except (psutil.Error, OSError) as e:
            raise ProviderError(f"Failed to read system summary: {e}") from e

        return SystemSample(
            total_memory_bytes=mem.total,
            free_bytes=mem.free,
            # Not every platform reports these fields
            inactive_bytes=getattr(mem, "inactive", 0),
            speculative_bytes=getattr(mem, "speculative", 0),
            compressed_bytes=getattr(mem, "compressed", 0),
            cpu_busy_percent=cpu_busy,
        )

    def sample_processes(self) -> list[ProcessSample]:
        """
        Collect cumulative counters for every readable process.

        Uses psutil.process_iter() with oneshot() for efficiency. pid 0 is
        never included.
        """
        samples: list[ProcessSample] = []
        attrs = ["pid", "name", "memory_info", "cpu_times"]

        try:
            procs = psutil.process_iter(attrs=attrs)
            for proc in procs:
                try:
                    with proc.oneshot():
                        sample = self._to_sample(proc.info)
                except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                    log.debug("process_unreadable", pid=proc.pid)
                    continue
                if sample is not None:
                    samples.append(sample)
        except (psutil.Error, OSError) as e:
            raise ProviderError(f"Failed to enumerate processes: {e}") from e

        return samples

    def _to_sample(self, info: dict) -> ProcessSample | None:
        pid = info.get("pid") or 0
        if pid == 0:
            return None

        # psutil reports unreadable attributes as None
        mem_info = info.get("memory_info")
        cpu_times = info.get("cpu_times")
        if mem_info is None or cpu_times is None:
            log.debug("process_counters_unavailable", pid=pid)
            return None

        name = info.get("name") or UNKNOWN_NAME
        return ProcessSample(
            pid=pid,
            name=truncate_name(name, self._name_width),
            user_time_ns=round(cpu_times.user * NS_PER_SECOND),
            system_time_ns=round(cpu_times.system * NS_PER_SECOND),
            resident_bytes=mem_info.rss,
        )

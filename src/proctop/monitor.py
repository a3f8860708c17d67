"""Polling cycle for proctop: sample, compute deltas, group and sort."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from proctop.engine import compute_deltas, group_rows, sort_rows
from proctop.models import PrevStatsTable, ProcessSample, Row, SystemSample
from proctop.provider import MetricsProvider, ProviderError
from proctop.state import ViewMode, ViewState

log = structlog.get_logger()

HELP_LINES = (
    "h: Show this help page",
    "v: Display processes unsorted",
    "r: Sort processes by RAM percentage",
    "c: Sort processes by CPU percentage",
    "g: Turn On/Off Group Mode (by Name)",
    "q: Quit",
)
TABLE_FOOTER = "Press 'q' to quit and 'h' for help..."
HELP_FOOTER = "Press 'q' to quit..."


@dataclass(slots=True)
class Frame:
    """Everything the renderer draws for one cycle."""

    footer: str
    summary: SystemSample | None = None
    rows: list[Row] = field(default_factory=list)
    help_lines: tuple[str, ...] = ()

    @property
    def is_help(self) -> bool:
        return bool(self.help_lines)


class SystemMonitor:
    """
    Runs one polling cycle per call to :meth:`poll`.

    Holds the previous-stats table across cycles and the last system summary
    that could be read. Everything runs on the caller's thread.
    """

    def __init__(
        self,
        provider: MetricsProvider,
        poll_interval: float = 1.0,
        measure_elapsed: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the SystemMonitor.

        Args:
            provider: Source of system and process samples.
            poll_interval: Nominal seconds between cycles. Default 1.0s.
            measure_elapsed: Use measured time between cycles for CPU percent
                instead of the nominal interval.
            clock: Monotonic time source, used when measuring.
        """
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {poll_interval}")
        self._provider = provider
        self._poll_interval = poll_interval
        self._measure_elapsed = measure_elapsed
        self._clock = clock
        self._prev_stats: PrevStatsTable = {}
        self._last_summary: SystemSample | None = None
        self._last_sampled_at: float | None = None

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    @property
    def prev_stats(self) -> PrevStatsTable:
        """Counters recorded during the last sampled cycle."""
        return self._prev_stats

    def poll(self, view: ViewState) -> Frame:
        """Produce the frame for ``view``. Help frames never touch the provider."""
        if view.mode is ViewMode.HELP:
            return Frame(footer=HELP_FOOTER, help_lines=HELP_LINES)

        summary = self._sample_system()
        samples = self._sample_processes()
        interval = self._interval()

        rows, self._prev_stats = compute_deltas(
            samples,
            self._prev_stats,
            summary.total_memory_bytes,
            interval,
        )
        rows = group_rows(rows, view.group_enabled)
        rows = sort_rows(rows, view.sort_key)

        return Frame(footer=TABLE_FOOTER, summary=summary, rows=rows)

    def _sample_system(self) -> SystemSample:
        """Read the system summary, falling back to the last one that worked."""
        try:
            self._last_summary = self._provider.sample_system()
        except ProviderError as e:
            log.warning("system_sample_failed", error=str(e))
            if self._last_summary is None:
                return SystemSample.zero()
        return self._last_summary

    def _sample_processes(self) -> list[ProcessSample]:
        try:
            return self._provider.sample_processes()
        except ProviderError as e:
            log.warning("process_sample_failed", error=str(e))
            return []

    def _interval(self) -> float:
        """Seconds the CPU counters are assumed to span this cycle."""
        now = self._clock()
        last, self._last_sampled_at = self._last_sampled_at, now
        if not self._measure_elapsed or last is None:
            return self._poll_interval
        elapsed = now - last
        if elapsed <= 0:
            return self._poll_interval
        return elapsed

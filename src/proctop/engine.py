"""Delta computation, grouping and sorting of process rows."""

from collections.abc import Iterable

from proctop.models import (
    BYTES_PER_MB,
    NS_PER_SECOND,
    CpuTimes,
    PrevStatsTable,
    ProcessSample,
    Row,
)
from proctop.state import SortKey


def compute_deltas(
    samples: Iterable[ProcessSample],
    prev: PrevStatsTable,
    total_memory_bytes: int,
    interval_seconds: float = 1.0,
) -> tuple[list[Row], PrevStatsTable]:
    """
    Turn cumulative CPU counters into per-interval CPU percentages.

    A pid without an entry in ``prev`` is a cold start and reports 0.0.
    A pid whose counters went backwards (reused pid) also reports 0.0.
    Every observed pid gets its entry replaced with the current counters;
    entries of pids not seen this cycle are carried over untouched.

    Args:
        samples: Process samples from the current cycle.
        prev: Counters from the previous cycle. Not mutated.
        total_memory_bytes: Physical memory, for RAM percent. 0 if unknown.
        interval_seconds: Wall-clock time the counters span.

    Returns:
        The rows for this cycle and the updated previous-stats table.
    """
    if interval_seconds <= 0:
        raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")

    table: PrevStatsTable = dict(prev)
    rows: list[Row] = []

    for sample in samples:
        # pid 0 is the kernel task
        if sample.pid == 0:
            continue

        cpu_percent = 0.0
        last = prev.get(sample.pid)
        if last is not None:
            delta_user = sample.user_time_ns - last.user_time_ns
            delta_system = sample.system_time_ns - last.system_time_ns
            cpu_seconds = (delta_user + delta_system) / NS_PER_SECOND
            cpu_percent = max(cpu_seconds / interval_seconds * 100.0, 0.0)

        table[sample.pid] = CpuTimes(sample.user_time_ns, sample.system_time_ns)

        if total_memory_bytes > 0:
            ram_percent = sample.resident_bytes / total_memory_bytes * 100.0
        else:
            ram_percent = 0.0

        rows.append(
            Row(
                pid=sample.pid,
                display_name=sample.name,
                cpu_percent=cpu_percent,
                resident_mb=sample.resident_bytes / BYTES_PER_MB,
                ram_percent=ram_percent,
            )
        )

    return rows, table


def group_rows(rows: list[Row], enabled: bool) -> list[Row]:
    """Collapse rows sharing a display name into one summed row without a pid."""
    if not enabled:
        return rows

    groups: dict[str, list[float]] = {}
    for row in rows:
        totals = groups.setdefault(row.display_name, [0.0, 0.0, 0.0])
        totals[0] += row.cpu_percent
        totals[1] += row.resident_mb
        totals[2] += row.ram_percent

    return [
        Row(pid=None, display_name=name, cpu_percent=cpu, resident_mb=rss, ram_percent=ram)
        for name, (cpu, rss, ram) in groups.items()
    ]


def sort_rows(rows: list[Row], key: SortKey) -> list[Row]:
    """Sort rows for display. ``SortKey.NONE`` keeps the incoming order."""
    key_func = {
        SortKey.CPU: lambda r: r.cpu_percent,
        SortKey.RAM: lambda r: r.resident_mb,
    }
    if key not in key_func:
        return list(rows)
    return sorted(rows, key=key_func[key], reverse=True)

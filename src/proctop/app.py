"""proctop - Main Textual application."""

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.timer import Timer
from textual.widgets import DataTable, Static

from proctop.config import Config
from proctop.models import BYTES_PER_MB, Row, SystemSample
from proctop.monitor import Frame, SystemMonitor
from proctop.provider import MetricsProvider, PsutilProvider
from proctop.state import ViewState, transition


def format_summary(summary: SystemSample) -> str:
    """Format the system summary header line."""
    used_mb = summary.used_memory_bytes // BYTES_PER_MB
    total_mb = summary.total_memory_bytes // BYTES_PER_MB
    return (
        f"CPU Usage: {summary.cpu_busy_percent:6.2f}% | "
        f"RAM Usage: {summary.ram_percent:6.2f}% ({used_mb} / {total_mb} MB)"
    )


def format_row(row: Row) -> tuple[str, Text, str, str, str]:
    """
    Format a row as table cells. Group rows have a blank PID.

    Process names are user-controlled, so the name cell is literal Text and
    never parsed as markup.
    """
    return (
        "" if row.pid is None else str(row.pid),
        Text(row.display_name),
        f"{row.cpu_percent:6.2f}%",
        f"{row.resident_mb:10.4f}",
        f"{row.ram_percent:6.3f}%",
    )


class HeaderStats(Static):
    """Header widget showing the system summary and current view settings."""

    DEFAULT_CSS = """
    HeaderStats {
        height: auto;
        padding: 0 1;
        background: $surface;
    }
    """

    def update_frame(self, frame: Frame, view: ViewState) -> None:
        """Update the header from a table frame."""
        if frame.summary is None:
            self.update("")
            return
        group = "on" if view.group_enabled else "off"
        self.update(
            f"{format_summary(frame.summary)}\n"
            f"[dim]Sort: {view.sort_key.value.upper()} | Group: {group}[/dim]"
        )


class ProcessTable(Container):
    """Container for the process data table."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield DataTable(id="process-table")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "row"

        table.add_column("PID", key="pid", width=8)
        table.add_column("Name", key="name", width=29)
        table.add_column("CPU%", key="cpu", width=9)
        table.add_column("Memory(MB)", key="rss", width=12)
        table.add_column("RAM%", key="ram", width=9)

    def update_rows(self, rows: list[Row]) -> None:
        """Replace every row of the table with ``rows``, in order."""
        table = self.query_one("#process-table", DataTable)
        table.clear()
        for row in rows:
            table.add_row(*format_row(row))

    @property
    def row_count(self) -> int:
        return self.query_one("#process-table", DataTable).row_count


class HelpPage(Static):
    """Static list of key commands."""

    DEFAULT_CSS = """
    HelpPage {
        height: 1fr;
        display: none;
        padding: 1 2;
        border: solid $accent;
    }
    """

    def show_lines(self, lines: tuple[str, ...]) -> None:
        self.update("[b]HELP[/b]\n\n" + "\n".join(lines))


class ProctopApp(App):
    """Main proctop application."""

    TITLE = "proctop"
    SUB_TITLE = "Process Resource Monitor"

    CSS = """
    Screen {
        layout: vertical;
    }

    #footer-hint {
        dock: bottom;
        height: 1;
        padding: 0 1;
        background: $panel;
    }
    """

    BINDINGS = [
        ("h", "command('h')", "Help"),
        ("v", "command('v')", "Unsorted"),
        ("r", "command('r')", "Sort RAM"),
        ("c", "command('c')", "Sort CPU"),
        ("g", "command('g')", "Group"),
        ("q", "command('q')", "Quit"),
    ]

    def __init__(
        self,
        config: Config | None = None,
        provider: MetricsProvider | None = None,
    ) -> None:
        """Initialize the ProctopApp."""
        super().__init__()
        self._app_config = config or Config()
        if provider is None:
            provider = PsutilProvider(name_width=self._app_config.display.name_width)
        self._monitor = SystemMonitor(
            provider,
            poll_interval=self._app_config.display.poll_interval,
            measure_elapsed=self._app_config.sampling.measure_elapsed,
        )
        self._view = ViewState()
        self._poll_timer: Timer | None = None
        self._last_frame: Frame | None = None

    @property
    def view_state(self) -> ViewState:
        return self._view

    @property
    def last_frame(self) -> Frame | None:
        """The most recently drawn frame."""
        return self._last_frame

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield HeaderStats(id="header-stats")
        yield ProcessTable(id="process-view")
        yield HelpPage(id="help-page")
        yield Static(id="footer-hint")

    def on_mount(self) -> None:
        """Draw the first frame and start the polling timer."""
        self.call_after_refresh(self._run_cycle)
        self._poll_timer = self.set_interval(self._monitor.poll_interval, self._run_cycle)

    def _run_cycle(self) -> None:
        """Poll the monitor and redraw the whole screen."""
        if not self._view.is_running:
            return
        frame = self._monitor.poll(self._view)
        self._last_frame = frame

        header = self.query_one("#header-stats", HeaderStats)
        table = self.query_one(ProcessTable)
        help_page = self.query_one("#help-page", HelpPage)

        if frame.is_help:
            help_page.show_lines(frame.help_lines)
        else:
            header.update_frame(frame, self._view)
            table.update_rows(frame.rows)

        header.display = not frame.is_help
        table.display = not frame.is_help
        help_page.display = frame.is_help
        self.query_one("#footer-hint", Static).update(frame.footer)

    def action_command(self, key: str) -> None:
        """Apply a key command and redraw immediately."""
        self._view = transition(self._view, key)
        if not self._view.is_running:
            self.exit()
            return

        self._run_cycle()
        if self._poll_timer is not None:
            self._poll_timer.reset()


def run(config: Config | None = None) -> None:
    """Run the dashboard until the user quits."""
    app = ProctopApp(config)
    app.run()

"""View state machine driven by single keypresses."""

from dataclasses import dataclass, replace
from enum import Enum


class ViewMode(Enum):
    """Display modes of the dashboard."""

    NORMAL = "normal"
    HELP = "help"
    QUIT = "quit"


class SortKey(Enum):
    """Sort keys for the process table."""

    NONE = "none"
    CPU = "cpu"
    RAM = "ram"


@dataclass(slots=True, frozen=True)
class ViewState:
    """Current mode, sort order and grouping of the dashboard."""

    mode: ViewMode = ViewMode.NORMAL
    sort_key: SortKey = SortKey.NONE
    group_enabled: bool = False

    @property
    def is_running(self) -> bool:
        return self.mode is not ViewMode.QUIT


KEY_SORTS = {
    "v": SortKey.NONE,
    "r": SortKey.RAM,
    "c": SortKey.CPU,
}


def transition(state: ViewState, key: str | None) -> ViewState:
    """
    Apply a keypress to the view state.

    ``key`` is None when no key arrived within the wait window. Unknown keys
    and timeouts leave the state unchanged, as does anything after quitting.
    """
    if key is None or state.mode is ViewMode.QUIT:
        return state
    if key == "q":
        return replace(state, mode=ViewMode.QUIT)
    if key == "h":
        return replace(state, mode=ViewMode.HELP)
    if key == "g":
        return replace(state, group_enabled=not state.group_enabled)
    if key in KEY_SORTS:
        return replace(state, mode=ViewMode.NORMAL, sort_key=KEY_SORTS[key])
    return state
